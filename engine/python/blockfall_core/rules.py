"""Placement rules: collision checks and blocked-move resolution.

Both slides and falls go through ``next_available_position``. Horizontal and
vertical movement are resolved separately, so a piece that slides into a wall
keeps its vertical progress and a piece that lands keeps the sideways
progress it was already granted.
"""

from blockfall_core.grid import Grid, Position
from blockfall_core.shape import Shape


def can_place(grid: Grid, shape: Shape, position: Position) -> bool:
    """Check whether a shape fits the grid at a position.

    Only occupied shape cells are checked; zero padding in the bounding box
    may hang over the edge or overlap locked cells.

    Args:
        grid: Current grid
        shape: Shape to place
        position: (row, col) of the shape's top-left corner

    Returns:
        True if every occupied cell is in bounds and lands on an empty cell
    """
    top, left = position
    for r, c, _ in shape.cells():
        row = top + r
        col = left + c
        if not grid.in_bounds(row, col) or grid.cells[row][col] != 0:
            return False
    return True


def _step_toward(value: int, target: int) -> int:
    return value + 1 if value < target else value - 1


def next_available_position(
    grid: Grid, shape: Shape, from_position: Position, desired: Position
) -> Position:
    """Find the furthest legal position toward a desired one.

    The column is swept first, one step at a time from the desired column
    back toward the current one, testing at the current row. The row is then
    swept the same way using the column found.

    Args:
        grid: Current grid
        shape: Shape being moved
        from_position: Current (row, col), assumed legal
        desired: Requested (row, col), may be illegal

    Returns:
        Resolved (row, col)
    """
    from_row, from_col = from_position
    row, col = desired

    while col != from_col and not can_place(grid, shape, (from_row, col)):
        col = _step_toward(col, from_col)

    while row != from_row and not can_place(grid, shape, (row, col)):
        row = _step_toward(row, from_row)

    return row, col
