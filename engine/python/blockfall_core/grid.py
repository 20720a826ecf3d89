"""Cell grid with locking and line clearing."""

from typing import List, Sequence, Tuple

from blockfall_core.shape import Shape

Position = Tuple[int, int]


class Grid:
    """Fixed-size grid of locked cells, row 0 at the top."""

    def __init__(self, rows: int = 20, cols: int = 10):
        """Initialize an empty grid.

        Args:
            rows: Number of rows
            cols: Number of columns
        """
        self.rows = rows
        self.cols = cols
        # cells[row][col], 0 = empty, >0 = color id of the locked shape
        self.cells: List[List[int]] = self._empty_rows(rows)

    def _empty_rows(self, count: int) -> List[List[int]]:
        return [[0] * self.cols for _ in range(count)]

    def get(self, row: int, col: int) -> int:
        """Get cell value at (row, col).

        Raises:
            IndexError: If the cell is out of bounds
        """
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) is out of bounds")
        return self.cells[row][col]

    def set(self, row: int, col: int, value: int) -> None:
        """Set cell value at (row, col).

        Raises:
            IndexError: If the cell is out of bounds
        """
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) is out of bounds")
        self.cells[row][col] = value

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if coordinates are within grid bounds."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_row_full(self, row: int) -> bool:
        """Check if every cell in a row is occupied.

        Args:
            row: Row to check

        Returns:
            True if row is full
        """
        return all(self.cells[row])

    def clear_full_rows(self) -> int:
        """Remove all full rows and refill from the top.

        Rows are scanned top to bottom. After a removal the same index is
        checked again because the rows below have shifted up. Empty rows are
        then prepended so the row count never changes.

        Returns:
            Number of rows cleared
        """
        row = 0
        while row < len(self.cells):
            if all(self.cells[row]):
                del self.cells[row]
            else:
                row += 1

        removed = self.rows - len(self.cells)
        if removed:
            self.cells[0:0] = self._empty_rows(removed)
        return removed

    def lock_shape(self, shape: Shape, position: Position) -> None:
        """Write a shape's occupied cells into the grid.

        The caller must have validated the placement first; writing outside
        the grid is a programming error.

        Args:
            shape: Shape to lock
            position: (row, col) of the shape's top-left corner
        """
        top, left = position
        for r, c, value in shape.cells():
            assert self.in_bounds(top + r, left + c), (
                f"Locking {shape.name} at {position} writes outside the grid"
            )
            self.cells[top + r][left + c] = value

    def clear(self) -> None:
        """Reset every cell to empty."""
        self.cells = self._empty_rows(self.rows)

    def copy(self) -> "Grid":
        """Create a deep copy of the grid."""
        new_grid = Grid(self.rows, self.cols)
        new_grid.cells = [row.copy() for row in self.cells]
        return new_grid

    def to_rows(self) -> Tuple[Tuple[int, ...], ...]:
        """Export grid as an immutable matrix (for snapshots)."""
        return tuple(tuple(row) for row in self.cells)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        """Create a grid from a matrix of cell values.

        Args:
            rows: Rows of cell values, top to bottom

        Returns:
            New grid

        Raises:
            ValueError: If the matrix is empty or not rectangular
        """
        if not rows or not rows[0]:
            raise ValueError("Expected at least one row and one column")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError(f"Expected every row to have {width} cells")
        grid = cls(len(rows), width)
        grid.cells = [list(row) for row in rows]
        return grid

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols})"
