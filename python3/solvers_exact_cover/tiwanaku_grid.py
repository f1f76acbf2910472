from typing import Iterator, Sequence, Tuple

class TiwanakuConfigError(ValueError):
    '''
    Malformed puzzle definition (no rows, empty or unequal length rows).
    '''

class TiwanakuGrid:
    '''
    Immutable rectangular grid of symbols. Rows are given top to bottom, x is
    the column and y is the row. Symbols only matter for equality between
    neighboring cells.
    '''
    def __init__(self, rows: Sequence[str]):
        '''
        rows = equal length strings, one character per cell
        '''
        if isinstance(rows,str):
            raise TiwanakuConfigError('expected a sequence of rows, got a single string')
        rows = tuple(rows)
        if len(rows) == 0:
            raise TiwanakuConfigError('level has no rows')
        for y,row in enumerate(rows):
            if not isinstance(row,str):
                raise TiwanakuConfigError('row %d is %s, expected a string' % (y,type(row).__name__))
        width = len(rows[0])
        if width == 0:
            raise TiwanakuConfigError('row 0 is empty')
        for y,row in enumerate(rows):
            if len(row) != width:
                raise TiwanakuConfigError('row %d has length %d, expected %d (length of row 0)'
                                          % (y,len(row),width))
        self._rows = rows
        self._width = width
    @property
    def rows(self) -> Tuple[str,...]:
        return self._rows
    @property
    def width(self) -> int:
        return self._width
    @property
    def height(self) -> int:
        return len(self._rows)
    def symbolAt(self, x: int, y: int) -> str:
        return self._rows[y][x]
    def inBounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < len(self._rows)
    def cells(self) -> Iterator[Tuple[int,int]]:
        '''
        All (x,y) positions in row major order.
        '''
        for y in range(self.height):
            for x in range(self.width):
                yield x,y
    def __repr__(self) -> str:
        return 'TiwanakuGrid(%r)' % (list(self._rows),)
