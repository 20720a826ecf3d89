"""Shape definitions and rotation logic.

A shape is a rectangular matrix of cell values. Nonzero entries are the
occupied cells and carry the shape's color id; zero entries are padding
inside the bounding box and never collide with anything.
"""

from typing import Iterator, List, Sequence, Tuple

# Type alias for a shape matrix
Matrix = Tuple[Tuple[int, ...], ...]


class Shape:
    """Immutable cell matrix for one piece orientation."""

    __slots__ = ("name", "matrix")

    def __init__(self, name: str, matrix: Sequence[Sequence[int]]):
        """Initialize a shape.

        Args:
            name: Catalog name ("bar", "square", ...)
            matrix: Rows of cell values, top to bottom

        Raises:
            ValueError: If the matrix is empty or not rectangular
        """
        rows = tuple(tuple(int(v) for v in row) for row in matrix)
        if not rows or not rows[0]:
            raise ValueError(f"Shape {name!r} has an empty matrix")
        if any(len(row) != len(rows[0]) for row in rows):
            raise ValueError(f"Shape {name!r} is not rectangular")
        if any(v < 0 for row in rows for v in row):
            raise ValueError(f"Shape {name!r} has negative cell values")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "matrix", rows)

    def __setattr__(self, key, value):
        raise AttributeError("Shape is immutable")

    @property
    def width(self) -> int:
        return len(self.matrix[0])

    @property
    def height(self) -> int:
        return len(self.matrix)

    def cells(self) -> Iterator[Tuple[int, int, int]]:
        """Iterate over occupied cells.

        Yields:
            (row, col, value) for every nonzero cell, relative to the
            top-left corner of the bounding box
        """
        for r, row in enumerate(self.matrix):
            for c, value in enumerate(row):
                if value:
                    yield r, c, value

    def rotate_left(self) -> "Shape":
        """Return this shape rotated 90 degrees counter-clockwise."""
        return rotate_left(self)

    def to_list(self) -> List[List[int]]:
        """Export the matrix as nested lists (for serialization)."""
        return [list(row) for row in self.matrix]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self.matrix == other.matrix

    def __hash__(self) -> int:
        return hash(self.matrix)

    def __repr__(self) -> str:
        return f"Shape({self.name}, {self.to_list()})"


def rotate_left(shape: Shape) -> Shape:
    """Rotate a shape 90 degrees counter-clockwise.

    The result has width and height swapped, with
    ``out[i][j] == shape[j][width - 1 - i]``. The input is left untouched.

    Args:
        shape: Shape to rotate

    Returns:
        New rotated shape
    """
    # Transpose, then reverse the row order
    rotated = [list(row) for row in zip(*shape.matrix)][::-1]
    return Shape(shape.name, rotated)


# Shape templates, one distinct color id per template
SHAPE_CATALOG: Tuple[Shape, ...] = (
    Shape("bar", [[1, 1, 1, 1]]),
    Shape("square", [
        [2, 2],
        [2, 2],
    ]),
    Shape("skew", [
        [3, 0],
        [3, 3],
        [0, 3],
    ]),
    Shape("tee", [
        [0, 4, 0],
        [4, 4, 4],
    ]),
)


def get_shape(name: str) -> Shape:
    """Look up a catalog shape by name.

    Raises:
        ValueError: If no catalog shape has that name
    """
    for shape in SHAPE_CATALOG:
        if shape.name == name:
            return shape
    raise ValueError(f"Invalid shape name: {name}")
