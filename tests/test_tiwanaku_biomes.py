"""
Unit tests for biome detection: numbering order, sizes, offsets and the
equivalence between biome ids and 4-connectivity.
"""

from collections import deque

import pytest

from tiwanaku import DEFAULT_LEVEL
from tiwanaku_biomes import TiwanakuBiomes
from tiwanaku_grid import TiwanakuGrid


LEVELS = [
    ["a"],
    ["ab"],
    ["aa", "aa"],
    ["ab", "ba"],
    ["aab", "abb", "ccb"],
    ["aba", "bab", "aba"],
    ["1111", "1221", "1111"],
    DEFAULT_LEVEL,
]


def reachable(grid, start):
    """Cells reachable from start through 4-neighbors with the same symbol."""
    symbol = grid.symbolAt(*start)
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for nx, ny in [(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)]:
            if grid.inBounds(nx, ny) and (nx, ny) not in seen and grid.symbolAt(nx, ny) == symbol:
                seen.add((nx, ny))
                queue.append((nx, ny))
    return seen


@pytest.mark.parametrize("rows", LEVELS)
def test_sizes_cover_grid(rows):
    grid = TiwanakuGrid(rows)
    biomes = TiwanakuBiomes(grid)
    assert sum(biomes.sizes[1:]) == grid.width * grid.height
    assert all(biomes.biomeOf(x, y) >= 1 for x, y in grid.cells())
    assert biomes.maxBiomeSize == max(biomes.sizes[1:])


@pytest.mark.parametrize("rows", LEVELS)
def test_same_biome_iff_connected(rows):
    grid = TiwanakuGrid(rows)
    biomes = TiwanakuBiomes(grid)
    for cell in grid.cells():
        connected = reachable(grid, cell)
        same_id = {c for c in grid.cells() if biomes.biomeOf(*c) == biomes.biomeOf(*cell)}
        assert connected == same_id


@pytest.mark.parametrize("rows", LEVELS)
def test_offsets_are_running_sums(rows):
    biomes = TiwanakuBiomes(TiwanakuGrid(rows))
    running = 0
    for b in range(1, biomes.count + 1):
        assert biomes.offsets[b] == running
        assert len(biomes.cellsOf(b)) == biomes.sizes[b]
        running += biomes.sizes[b]


def test_ids_follow_row_major_discovery():
    biomes = TiwanakuBiomes(TiwanakuGrid(["aab", "cab", "ccc"]))
    assert biomes.biomeIndices == [[1, 1, 2], [3, 1, 2], [3, 3, 3]]
    assert biomes.sizes == [0, 3, 2, 4]
    assert biomes.offsets == [0, 0, 3, 5]
    assert biomes.maxBiomeSize == 4


def test_same_symbol_not_connected_gives_separate_biomes():
    biomes = TiwanakuBiomes(TiwanakuGrid(["ab", "ba"]))
    assert biomes.count == 4
    assert biomes.sizes == [0, 1, 1, 1, 1]


def test_diagonal_does_not_connect():
    biomes = TiwanakuBiomes(TiwanakuGrid(["ax", "xa"]))
    assert biomes.biomeOf(0, 0) != biomes.biomeOf(1, 1)


def test_lookup_helpers():
    biomes = TiwanakuBiomes(TiwanakuGrid(["aab", "abb"]))
    assert biomes.sizeAt(0, 1) == 3
    assert biomes.offsetAt(0, 1) == 0
    assert biomes.sizeAt(2, 1) == 3
    assert biomes.offsetAt(2, 1) == 3
    assert biomes.cellsOf(2) == [(2, 0), (1, 1), (2, 1)]


def test_large_biome_does_not_recurse():
    # one biome far larger than the default recursion limit
    rows = ["a" * 200] * 200
    biomes = TiwanakuBiomes(TiwanakuGrid(rows))
    assert biomes.count == 1
    assert biomes.maxBiomeSize == 40000
