"""Shape providers for spawning pieces.

The game asks a provider for the next shape on every spawn. The default
provider picks uniformly at random; a fixed sequence can be injected for
tests and replays.
"""

import random
from typing import List, Optional, Protocol, Sequence

from blockfall_core.shape import SHAPE_CATALOG, Shape


class ShapeProvider(Protocol):
    """Anything that can hand out the next shape."""

    def next(self) -> Shape:
        ...


class RandomShapeProvider:
    """Uniform random shape picker."""

    def __init__(self, shapes: Sequence[Shape] = SHAPE_CATALOG, seed: Optional[int] = None):
        """Initialize the provider.

        Args:
            shapes: Catalog to pick from
            seed: Optional seed for reproducible games
        """
        if not shapes:
            raise ValueError("Shape catalog must not be empty")
        self.shapes: List[Shape] = list(shapes)
        self.seed = seed
        self.rng = random.Random(seed)

    def next(self) -> Shape:
        """Pick the next shape."""
        return self.rng.choice(self.shapes)

    def reset(self, seed: Optional[int] = None) -> None:
        """Reset the generator with a new seed."""
        self.seed = seed
        self.rng = random.Random(seed)


class SequenceShapeProvider:
    """Deterministic provider cycling through a fixed list of shapes."""

    def __init__(self, shapes: Sequence[Shape]):
        if not shapes:
            raise ValueError("Shape sequence must not be empty")
        self.shapes: List[Shape] = list(shapes)
        self.index = 0

    def next(self) -> Shape:
        shape = self.shapes[self.index % len(self.shapes)]
        self.index += 1
        return shape

    def peek(self) -> Shape:
        """Return the shape the next call will produce, without consuming it."""
        return self.shapes[self.index % len(self.shapes)]
