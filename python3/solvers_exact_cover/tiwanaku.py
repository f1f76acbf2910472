import argparse
import logging
import sys
import time
from typing import Hashable, List, Optional, Sequence, Tuple
from exact_cover import ChoiceRow, ExactCoverPuzzleBase, SolveOptions, Stats
from tiwanaku_biomes import TiwanakuBiomes
from tiwanaku_cover import Choice, TiwanakuCover
from tiwanaku_grid import TiwanakuConfigError, TiwanakuGrid

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = [
    '443334441',
    '442344211',
    '422111214',
    '322411244',
    '333442244',
]

class TiwanakuPuzzle(ExactCoverPuzzleBase):
    '''
    Tiwanaku: the grid is split into biomes (connected areas of one symbol).
    A biome of size N must contain the numbers 1, 2, ..., N, each exactly once,
    and no number may appear twice in a 2x2 block, so touching cells in
    different biomes (diagonally or not) never share a number.
    '''
    def __init__(self, rows: Sequence[str]):
        '''
        rows = grid rows top to bottom, each character a biome symbol
        '''
        self.grid = TiwanakuGrid(rows)
        self.biomes = TiwanakuBiomes(self.grid)
        self.cover = TiwanakuCover(self.grid,self.biomes)
    def toChoices(self) -> List[ChoiceRow]:
        return self.cover.choices()
    def constraintCounts(self) -> Tuple[int,int]:
        return self.cover.primaryCount,self.cover.secondaryCount
    def toSol(self, labels: List[Hashable]) -> List[List[int]]:
        selected: List[Choice] = []
        for label in labels:
            assert isinstance(label,Choice)
            selected.append(label)
        return self.cover.decode(selected)

def readLevel(path: str) -> List[str]:
    '''
    Level rows from a text file. Blank lines and lines starting with # are
    skipped, surrounding whitespace is removed.
    '''
    rows = []
    with open(path,encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                rows.append(line)
    return rows

def formatSolution(numbers: List[List[int]]) -> str:
    return '\n'.join(''.join(str(n) if n < 10 else '(%d)' % n for n in row) for row in numbers)

def run(rows: Sequence[str], options: Optional[SolveOptions] = None) -> Tuple[TiwanakuPuzzle,Stats]:
    '''
    Reduce the level and search it, counting all solutions by default.
    '''
    puzzle = TiwanakuPuzzle(rows)
    logger.info('%dx%d grid with %d biomes (largest %d)',puzzle.grid.width,
                puzzle.grid.height,puzzle.biomes.count,puzzle.biomes.maxBiomeSize)
    stats = puzzle.coverCount(options)
    logger.info('%s',stats)
    return puzzle,stats

def parseArgs(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='tiwanaku',
        description='Count the solutions of a Tiwanaku puzzle by reduction to exact cover.')
    parser.add_argument('rows',nargs='*',help='level rows, top to bottom (default: built in level)')
    parser.add_argument('--level',metavar='FILE',help='read level rows from a file')
    parser.add_argument('--first',action='store_true',help='stop after the first solution')
    parser.add_argument('--show',type=int,default=0,metavar='N',help='print up to N solutions')
    parser.add_argument('-v','--verbose',action='store_true',help='debug logging')
    args = parser.parse_args(argv)
    if args.rows and args.level:
        parser.error('give level rows or --level, not both')
    if args.show < 0:
        parser.error('--show must be non-negative')
    return args

def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parseArgs(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    start = time.perf_counter()
    if args.level:
        rows = readLevel(args.level)
    else:
        rows = args.rows or DEFAULT_LEVEL
    options = SolveOptions(countAllSolutions=not args.first,maxSolutionsToStore=args.show)
    try:
        puzzle,stats = run(rows,options)
    except TiwanakuConfigError as e:
        logger.error('invalid level: %s',e)
        return 2
    for labels in stats.storedSolutions:
        print(formatSolution(puzzle.toSol(labels)))
        print()
    logger.info('Took %d ms.',(time.perf_counter()-start)*1000)
    return 0

if __name__ == '__main__':
    sys.exit(main())
