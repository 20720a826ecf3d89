"""Tests for grid functionality."""

import pytest

from blockfall_core.grid import Grid
from blockfall_core.shape import Shape, get_shape


def fill_row(grid, row, skip=()):
    for col in range(grid.cols):
        if col not in skip:
            grid.set(row, col, 1)


def test_grid_initialization():
    """Test grid starts empty with the requested size."""
    grid = Grid()
    assert grid.rows == 20
    assert grid.cols == 10
    assert len(grid.cells) == 20
    assert all(len(row) == 10 for row in grid.cells)
    assert all(cell == 0 for row in grid.cells for cell in row), "Grid should start empty"


def test_get_set_bounds():
    """Test cell access inside and outside the grid."""
    grid = Grid(4, 3)
    grid.set(3, 2, 5)
    assert grid.get(3, 2) == 5
    assert grid.in_bounds(0, 0)
    assert not grid.in_bounds(4, 0)
    assert not grid.in_bounds(0, -1)

    with pytest.raises(IndexError):
        grid.get(4, 0)
    with pytest.raises(IndexError):
        grid.set(0, 3, 1)


def test_is_row_full():
    """Test full row detection."""
    grid = Grid()
    fill_row(grid, 19, skip={3})
    assert not grid.is_row_full(19)

    grid.set(19, 3, 2)
    assert grid.is_row_full(19)
    assert not grid.is_row_full(18)


def test_clear_single_row():
    """Test clearing one full row keeps the row count and shifts rows down."""
    grid = Grid()
    fill_row(grid, 19)
    grid.set(18, 0, 4)

    cleared = grid.clear_full_rows()

    assert cleared == 1, "Should clear one row"
    assert len(grid.cells) == 20, "Row count must not change"
    assert grid.cells[0] == [0] * 10, "An empty row should be inserted at the top"
    assert grid.get(19, 0) == 4, "Row above should shift down"


def test_clear_multiple_rows():
    """Test clearing adjacent and separated full rows."""
    grid = Grid()
    fill_row(grid, 19)
    fill_row(grid, 18)
    fill_row(grid, 16)
    grid.set(17, 5, 3)
    grid.set(15, 1, 2)

    cleared = grid.clear_full_rows()

    assert cleared == 3, "Should clear three rows"
    assert len(grid.cells) == 20
    assert grid.get(19, 5) == 3
    assert grid.get(18, 1) == 2
    assert not any(grid.is_row_full(r) for r in range(grid.rows))


def test_clear_nothing():
    """Test that clearing without full rows leaves the grid untouched."""
    grid = Grid()
    fill_row(grid, 19, skip={9})
    before = grid.to_rows()

    assert grid.clear_full_rows() == 0
    assert grid.to_rows() == before


def test_lock_shape():
    """Test locking writes only the occupied cells."""
    grid = Grid()
    grid.set(0, 1, 9)
    skew = get_shape("skew")

    grid.lock_shape(skew, (0, 0))

    assert grid.get(0, 0) == 3
    assert grid.get(1, 0) == 3
    assert grid.get(1, 1) == 3
    assert grid.get(2, 1) == 3
    assert grid.get(0, 1) == 9, "Padding must not overwrite locked cells"
    assert grid.get(2, 0) == 0


def test_lock_shape_out_of_bounds():
    """Test that locking outside the grid is a programming error."""
    grid = Grid()
    with pytest.raises(AssertionError):
        grid.lock_shape(get_shape("bar"), (0, 8))


def test_lock_shape_padding_may_hang_over():
    """Test that zero cells outside the grid are ignored when locking."""
    grid = Grid(3, 3)
    hook = Shape("hook", [[5, 0], [5, 0]])

    grid.lock_shape(hook, (1, 2))

    assert grid.get(1, 2) == 5
    assert grid.get(2, 2) == 5


def test_copy_and_from_rows():
    """Test copying and building grids from matrices."""
    grid = Grid.from_rows([[0, 1], [2, 0], [0, 0]])
    assert grid.rows == 3
    assert grid.cols == 2

    clone = grid.copy()
    clone.set(0, 0, 7)
    assert grid.get(0, 0) == 0, "Copy should be independent"

    grid.clear()
    assert grid.to_rows() == ((0, 0), (0, 0), (0, 0))

    with pytest.raises(ValueError):
        Grid.from_rows([[0, 1], [0]])
    with pytest.raises(ValueError):
        Grid.from_rows([])
