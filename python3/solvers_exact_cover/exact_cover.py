from dataclasses import dataclass, field
from itertools import combinations
import logging
import time
import pycosat
from ortools.sat.python import cp_model
from typing import Any, Hashable, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# (label, sorted constraint indices)
ChoiceRow = Tuple[Hashable, Sequence[int]]

class ExactCoverError(ValueError):
    '''
    Raised for an exact cover instance that cannot be handed to the solver
    (negative constraint counts, out of range or unsorted constraint indices),
    or when the solver rejects the model it was given.
    '''

@dataclass
class SolveOptions:
    '''
    countAllSolutions = keep searching after the first solution
    maxSolutionsToStore = number of solutions (as lists of choice labels) kept
        in the returned stats, 0 to only count them
    '''
    countAllSolutions: bool = True
    maxSolutionsToStore: int = 0

@dataclass
class Stats:
    '''
    Aggregate result of one search. Only solutions and storedSolutions are
    meaningful to callers, the rest describes the size of the search. clauses
    is the number of CNF clauses (picosat) or model constraints (cp-sat) given
    to the engine, branches and conflicts are only reported by cp-sat.
    '''
    solutions: int = 0
    storedSolutions: List[List[Hashable]] = field(default_factory=list)
    engine: str = ''
    choices: int = 0
    primaryConstraints: int = 0
    secondaryConstraints: int = 0
    variables: int = 0
    clauses: int = 0
    branches: int = 0
    conflicts: int = 0
    elapsed: float = 0.0
    def __str__(self) -> str:
        return ('Stats(solutions=%d, stored=%d, engine=%s, choices=%d, primary=%d, '
                'secondary=%d, variables=%d, clauses=%d, branches=%d, conflicts=%d, '
                'elapsed=%.3fs)'
                % (self.solutions,len(self.storedSolutions),self.engine or '-',
                   self.choices,self.primaryConstraints,self.secondaryConstraints,
                   self.variables,self.clauses,self.branches,self.conflicts,
                   self.elapsed))

def _coverage(choices: Sequence[ChoiceRow], primary: int, secondary: int) -> List[List[int]]:
    '''
    Check the instance and list, for each constraint, the (0 based) choices
    covering it.
    '''
    if primary < 0 or secondary < 0:
        raise ExactCoverError('constraint counts must be non-negative, got %d primary and %d secondary'
                              % (primary,secondary))
    total = primary + secondary
    covering: List[List[int]] = [[] for _ in range(total)]
    for i,(label,indices) in enumerate(choices):
        for a,b in zip(indices,indices[1:]):
            if a >= b:
                raise ExactCoverError('constraints of choice %d (%s) are not strictly ascending: %s'
                                      % (i,label,list(indices)))
        for c in indices:
            if not 0 <= c < total:
                raise ExactCoverError('constraint %d of choice %d (%s) outside [0,%d)'
                                      % (c,i,label,total))
            covering[c].append(i)
    return covering

def _uncoverable(covering: List[List[int]], primary: int) -> bool:
    return any(not covering[c] for c in range(primary))

def _secondaryOnly(choices: Sequence[ChoiceRow], primary: int) -> List[int]:
    '''
    Choices covering no primary constraint. An exact cover never selects them.
    '''
    return [i for i,(_,indices) in enumerate(choices) if not indices or indices[0] >= primary]

def _labels(choices: Sequence[ChoiceRow], model: List[int]) -> List[Hashable]:
    return [choices[v-1][0] for v in model if v > 0]

def _cnf(choices: Sequence[ChoiceRow], covering: List[List[int]], primary: int) -> List[List[int]]:
    result: List[List[int]] = []
    for c,members in enumerate(covering):
        vs = [i+1 for i in members]
        if c < primary: # covered at least once
            result.append(vs)
        for a,b in combinations(vs,2): # covered at most once
            result.append([-a,-b])
    for i in _secondaryOnly(choices,primary): # never selected
        result.append([-(i+1)])
    return result

def toCnf(choices: Sequence[ChoiceRow], primary: int, secondary: int) -> List[List[int]]:
    '''
    Convert an exact cover instance to CNF. Choice i is variable i+1.
    - each primary constraint is covered by >= 1 selected choice
      - x(a) or x(b) or ... (for the choices a,b,.. covering it)
    - each constraint (primary or secondary) is covered by <= 1 selected choice
      - not x(a) or not x(b) (for each pair a,b covering it)
    - a choice covering only secondary constraints is not selected
      - not x(a)
    A primary constraint no choice covers becomes the empty clause, which makes
    the instance unsatisfiable. With the last group of clauses, satisfying
    assignments correspond one to one with exact covers.
    '''
    return _cnf(choices,_coverage(choices,primary,secondary),primary)

class _CoverCounter(cp_model.CpSolverSolutionCallback):
    '''
    Counts the solutions cp-sat enumerates, keeping the labels of the first few.
    '''
    def __init__(self, choices: Sequence[ChoiceRow], xs: List[Any], store: int):
        cp_model.CpSolverSolutionCallback.__init__(self)
        self.choices = choices
        self.xs = xs
        self.store = store
        self.solutions = 0
        self.stored: List[List[Hashable]] = []
    def on_solution_callback(self):
        self.solutions += 1
        if len(self.stored) < self.store:
            self.stored.append([self.choices[i][0] for i,x in enumerate(self.xs) if self.Value(x)])

def _countCpSat(choices: Sequence[ChoiceRow], covering: List[List[int]], primary: int,
                options: SolveOptions, stats: Stats) -> None:
    '''
    Enumerate every exact cover with cp-sat. Each primary constraint is an
    exactly one constraint, each secondary one covered by 2 or more choices is
    an at most one constraint.
    '''
    model = cp_model.CpModel()
    xs = [model.NewBoolVar('choice%d' % i) for i in range(len(choices))]
    added = 0
    for c,members in enumerate(covering):
        if c < primary:
            model.AddExactlyOne([xs[i] for i in members])
            added += 1
        elif len(members) > 1:
            model.AddAtMostOne([xs[i] for i in members])
            added += 1
    for i in _secondaryOnly(choices,primary):
        model.Add(xs[i] == 0)
        added += 1
    solver = cp_model.CpSolver()
    solver.parameters.enumerate_all_solutions = True
    counter = _CoverCounter(choices,xs,options.maxSolutionsToStore)
    status = solver.Solve(model,counter)
    if status not in (cp_model.OPTIMAL,cp_model.FEASIBLE,cp_model.INFEASIBLE):
        raise ExactCoverError('cp-sat stopped with status %s' % solver.StatusName(status))
    stats.engine = 'cp-sat'
    stats.clauses = added
    stats.solutions = counter.solutions
    stats.storedSolutions = counter.stored
    stats.branches = solver.NumBranches()
    stats.conflicts = solver.NumConflicts()

def _solveSat(choices: Sequence[ChoiceRow], covering: List[List[int]], primary: int,
              options: SolveOptions, stats: Stats) -> None:
    '''
    Find one exact cover with picosat.
    '''
    cnf = _cnf(choices,covering,primary)
    result = pycosat.solve(cnf,vars=len(choices))
    assert result != 'UNKNOWN'
    stats.engine = 'picosat'
    stats.clauses = len(cnf)
    if result != 'UNSAT':
        stats.solutions = 1
        if options.maxSolutionsToStore > 0:
            stats.storedSolutions.append(_labels(choices,result))

def solve(choices: Sequence[ChoiceRow], primaryConstraintCount: int,
          secondaryConstraintCount: int, options: Optional[SolveOptions] = None) -> Stats:
    '''
    Run the exact cover search over the given choices. Constraints
    0..primaryConstraintCount-1 are primary (covered exactly once), the next
    secondaryConstraintCount are secondary (covered at most once). Counting
    all solutions enumerates them with cp-sat (ortools), a single solution is
    found with picosat (pycosat). Errors from the instance or the solver are
    not caught here.
    '''
    options = options or SolveOptions()
    start = time.perf_counter()
    covering = _coverage(choices,primaryConstraintCount,secondaryConstraintCount)
    stats = Stats(choices=len(choices),primaryConstraints=primaryConstraintCount,
                  secondaryConstraints=secondaryConstraintCount,variables=len(choices))
    if _uncoverable(covering,primaryConstraintCount):
        logger.debug('a primary constraint is covered by no choice')
    elif options.countAllSolutions:
        _countCpSat(choices,covering,primaryConstraintCount,options,stats)
    else:
        _solveSat(choices,covering,primaryConstraintCount,options,stats)
    stats.elapsed = time.perf_counter() - start
    logger.debug('searched %d choices with %s in %.3fs',stats.choices,stats.engine or 'no engine',stats.elapsed)
    return stats

class ExactCoverPuzzleBase:
    '''
    Puzzle reduced to exact cover. A subclass describes the instance with:
    - toChoices: the labeled choices and the constraints each one covers
    - constraintCounts: how many constraints are primary and secondary
    - toSol: the puzzle solution made of the labels of a selected cover
    Counting, single solution search and enumeration are provided on top of
    these three.
    '''
    def toChoices(self) -> List[ChoiceRow]:
        '''
        Pairs of a label (any hashable value naming the choice) and the
        strictly ascending constraint indices that choice covers.
        '''
        raise NotImplementedError
    def constraintCounts(self) -> Tuple[int,int]:
        '''
        (primary, secondary) constraint counts. Primary constraints come first
        in the constraint index space.
        '''
        raise NotImplementedError
    def toSol(self, labels: List[Hashable]) -> Any:
        '''
        Puzzle solution for the labels of one exact cover, in a form chosen by
        the subclass.
        '''
        raise NotImplementedError
    def coverCount(self, options: Optional[SolveOptions] = None) -> Stats:
        '''
        Search the exact cover instance, counting solutions by default.
        '''
        primary,secondary = self.constraintCounts()
        return solve(self.toChoices(),primary,secondary,options)
    def coverSolve(self) -> List[Hashable]:
        '''
        Labels of the choices in one solution, or the empty list if there is
        no solution.
        '''
        stats = self.coverCount(SolveOptions(countAllSolutions=False,maxSolutionsToStore=1))
        return stats.storedSolutions[0] if stats.storedSolutions else []
    def coverSolveAll(self) -> Iterator[List[Hashable]]:
        '''
        Lazily enumerate the exact covers with picosat, each one as the list
        of labels of its selected choices.
        '''
        choices = self.toChoices()
        primary,secondary = self.constraintCounts()
        covering = _coverage(choices,primary,secondary)
        if _uncoverable(covering,primary):
            return iter([])
        cnf = _cnf(choices,covering,primary)
        return (_labels(choices,model) for model in pycosat.itersolve(cnf,vars=len(choices)))
    def solve(self) -> Any:
        '''
        One puzzle solution. ValueError is raised if there is none.
        '''
        labels = self.coverSolve()
        if not labels:
            raise ValueError('puzzle has no solution')
        return self.toSol(labels)
    def solveAll(self) -> Iterator[Any]:
        '''
        Puzzle solutions for every exact cover, produced as they are found.
        '''
        return map(self.toSol,self.coverSolveAll())
