from dataclasses import dataclass
import logging
from typing import Iterable, List, Tuple
from tiwanaku_biomes import TiwanakuBiomes
from tiwanaku_grid import TiwanakuGrid

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Choice:
    '''
    Cell (x,y) is assigned number.
    '''
    x: int
    y: int
    number: int

def formatChoice(choice: Choice) -> str:
    return '(%d|%d) = %d' % (choice.x,choice.y,choice.number)

class TiwanakuCover:
    '''
    Exact cover constraints for a Tiwanaku grid. The constraint indices are
    split into 3 consecutive bands (W = width, H = height, M = largest biome):
    - [0, W*H): cell (x,y) has a number (primary)
    - [W*H, 2*W*H): biome number n is used, W*H + offset(biome) + n-1 (primary)
    - [2*W*H, 2*W*H + (W-1)*(H-1)*M): number n is used at most once around the
      grid vertex whose top left cell is (vx,vy) (secondary)
    All 4 cells of a 2x2 block meet at its vertex, so a number appears at most
    once per block. Diagonal neighbors never share a number, and neither do
    orthogonal neighbors in different biomes (in the same biome they differ
    anyway).
    '''
    def __init__(self, grid: TiwanakuGrid, biomes: TiwanakuBiomes):
        assert biomes.grid is grid
        self.grid = grid
        self.biomes = biomes
        self.cellCount = grid.width*grid.height
    @property
    def primaryCount(self) -> int:
        return 2*self.cellCount
    @property
    def secondaryCount(self) -> int:
        return (self.grid.width-1)*(self.grid.height-1)*self.biomes.maxBiomeSize
    def constraintsOf(self, x: int, y: int, number: int) -> List[int]:
        '''
        Sorted constraint indices covered by assigning number to cell (x,y).
        '''
        W = self.grid.width
        M = self.biomes.maxBiomeSize
        assert 1 <= number <= self.biomes.sizeAt(x,y)
        vertex = lambda vx,vy : 2*self.cellCount + vy*(W-1)*M + vx*M + (number-1)
        result = [y*W + x, self.cellCount + self.biomes.offsetAt(x,y) + number-1]
        for dx,dy in [(-1,-1),(-1,1),(1,-1),(1,1)]: # diagonal neighbors
            if self.grid.inBounds(x+dx,y+dy):
                result.append(vertex(min(x,x+dx),min(y,y+dy)))
        result.sort()
        return result
    def choices(self) -> List[Tuple[Choice,List[int]]]:
        '''
        Every (cell, number) choice with its constraints, cells in row major
        order and numbers ascending within a cell.
        '''
        result: List[Tuple[Choice,List[int]]] = []
        for x,y in self.grid.cells():
            for n in range(1,self.biomes.sizeAt(x,y)+1):
                result.append((Choice(x,y,n),self.constraintsOf(x,y,n)))
        logger.debug('%d choices, %d primary and %d secondary constraints',
                     len(result),self.primaryCount,self.secondaryCount)
        return result
    def decode(self, selected: Iterable[Choice]) -> List[List[int]]:
        '''
        Grid of numbers (indexed [y][x]) from one selected choice per cell.
        '''
        result = [[0]*self.grid.width for _ in range(self.grid.height)]
        for choice in selected:
            if result[choice.y][choice.x] != 0:
                raise ValueError('cell (%d|%d) assigned twice' % (choice.x,choice.y))
            result[choice.y][choice.x] = choice.number
        for x,y in self.grid.cells():
            if result[y][x] == 0:
                raise ValueError('cell (%d|%d) has no number' % (x,y))
        return result
    def isValidSolution(self, numbers: List[List[int]]) -> bool:
        '''
        Whether each biome holds 1..size exactly once and the 4 cells of every
        2x2 block have different numbers.
        '''
        W,H = self.grid.width,self.grid.height
        if len(numbers) != H or any(len(row) != W for row in numbers):
            return False
        for b in range(1,self.biomes.count+1):
            values = sorted(numbers[y][x] for x,y in self.biomes.cellsOf(b))
            if values != list(range(1,self.biomes.sizes[b]+1)):
                return False
        for x in range(W-1):
            for y in range(H-1):
                block = {numbers[y][x],numbers[y][x+1],numbers[y+1][x],numbers[y+1][x+1]}
                if len(block) != 4:
                    return False
        return True
