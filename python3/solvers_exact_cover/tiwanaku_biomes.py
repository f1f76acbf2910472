import logging
from typing import List, Tuple
from tiwanaku_grid import TiwanakuGrid

logger = logging.getLogger(__name__)

class TiwanakuBiomes:
    '''
    Partition of a grid into biomes, the maximal regions of equal symbols
    connected through up/down/left/right neighbors. Biomes are numbered from 1
    in the order a row major scan first reaches them. sizes and offsets are
    indexed by biome number (index 0 is unused). The offset of a biome is the
    total size of the biomes numbered before it.
    '''
    def __init__(self, grid: TiwanakuGrid):
        self.grid = grid
        W,H = grid.width,grid.height
        self.biomeIndices: List[List[int]] = [[0]*W for _ in range(H)]
        self.sizes: List[int] = [0]
        self.offsets: List[int] = [0]
        self.maxBiomeSize = 0
        offset = 0
        for x,y in grid.cells():
            if self.biomeIndices[y][x] == 0:
                size = self._mark(x,y,len(self.sizes))
                self.sizes.append(size)
                self.offsets.append(offset)
                offset += size
                self.maxBiomeSize = max(self.maxBiomeSize,size)
        # every cell is in exactly one nonempty biome
        assert all(all(b > 0 for b in row) for row in self.biomeIndices)
        assert all(s > 0 for s in self.sizes[1:])
        assert offset == W*H
        logger.debug('%d biomes in %dx%d grid, largest has %d cells',
                     self.count,W,H,self.maxBiomeSize)
    def _mark(self, x: int, y: int, biome: int) -> int:
        '''
        Flood fill from (x,y) over cells with the same symbol, setting them to
        the given biome number. Uses an explicit stack. Returns the size.
        '''
        grid = self.grid
        symbol = grid.symbolAt(x,y)
        self.biomeIndices[y][x] = biome
        stack = [(x,y)]
        size = 0
        while stack:
            cx,cy = stack.pop()
            size += 1
            for nx,ny in [(cx-1,cy),(cx+1,cy),(cx,cy-1),(cx,cy+1)]:
                if not grid.inBounds(nx,ny):
                    continue # off grid
                if self.biomeIndices[ny][nx] == 0 and grid.symbolAt(nx,ny) == symbol:
                    self.biomeIndices[ny][nx] = biome # mark when pushed so a cell is pushed once
                    stack.append((nx,ny))
        return size
    @property
    def count(self) -> int:
        return len(self.sizes) - 1
    def biomeOf(self, x: int, y: int) -> int:
        return self.biomeIndices[y][x]
    def sizeAt(self, x: int, y: int) -> int:
        return self.sizes[self.biomeIndices[y][x]]
    def offsetAt(self, x: int, y: int) -> int:
        return self.offsets[self.biomeIndices[y][x]]
    def cellsOf(self, biome: int) -> List[Tuple[int,int]]:
        '''
        Cells (x,y) of a biome in row major order.
        '''
        assert 1 <= biome <= self.count
        return [(x,y) for x,y in self.grid.cells() if self.biomeIndices[y][x] == biome]
