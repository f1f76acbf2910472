"""
Unit tests for the grid model: dimensions, symbol lookup and the checks on
malformed levels.
"""

import pytest

from tiwanaku_grid import TiwanakuConfigError, TiwanakuGrid


def test_dimensions_and_symbols():
    grid = TiwanakuGrid(["abc", "def"])
    assert grid.width == 3
    assert grid.height == 2
    assert grid.symbolAt(0, 0) == "a"
    assert grid.symbolAt(2, 0) == "c"
    assert grid.symbolAt(1, 1) == "e"


def test_cells_are_row_major():
    grid = TiwanakuGrid(["ab", "cd"])
    assert list(grid.cells()) == [(0, 0), (1, 0), (0, 1), (1, 1)]


def test_in_bounds():
    grid = TiwanakuGrid(["ab", "cd", "ef"])
    assert grid.inBounds(1, 2)
    assert not grid.inBounds(2, 0)
    assert not grid.inBounds(0, 3)
    assert not grid.inBounds(-1, 0)


def test_rows_are_copied():
    rows = ["ab", "cd"]
    grid = TiwanakuGrid(rows)
    rows.append("ef")
    assert grid.height == 2
    assert grid.rows == ("ab", "cd")


def test_no_rows():
    with pytest.raises(TiwanakuConfigError, match="no rows"):
        TiwanakuGrid([])


def test_empty_row():
    with pytest.raises(TiwanakuConfigError, match="row 0 is empty"):
        TiwanakuGrid(["", ""])


def test_unequal_rows_names_row_and_length():
    with pytest.raises(TiwanakuConfigError) as excinfo:
        TiwanakuGrid(["abc", "abc", "ab"])
    message = str(excinfo.value)
    assert "row 2" in message
    assert "length 2" in message
    assert "expected 3" in message


def test_single_string_rejected():
    with pytest.raises(TiwanakuConfigError, match="single string"):
        TiwanakuGrid("abc")


def test_non_string_row_rejected():
    with pytest.raises(TiwanakuConfigError, match="row 1"):
        TiwanakuGrid(["ab", 12])


def test_config_error_is_value_error():
    assert issubclass(TiwanakuConfigError, ValueError)
