"""Game configuration constants."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from blockfall_core.shape import SHAPE_CATALOG, Shape


@dataclass(frozen=True)
class GameConfig:
    """Named parameters of a game.

    Defaults match the classic 20x10 board with a half-second tick.
    """

    ROWS = 20
    COLS = 10
    TICK_INTERVAL_MS = 500
    HARD_DROP_ROWS = 3

    rows: int = ROWS
    cols: int = COLS
    tick_interval_ms: int = TICK_INTERVAL_MS
    hard_drop_rows: int = HARD_DROP_ROWS
    shapes: Tuple[Shape, ...] = SHAPE_CATALOG

    def __post_init__(self):
        for name in ("rows", "cols", "tick_interval_ms", "hard_drop_rows"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if not self.shapes:
            raise ValueError("Shape catalog must not be empty")
        for shape in self.shapes:
            if shape.width > self.cols or shape.height > self.rows:
                raise ValueError(
                    f"Shape {shape.name!r} does not fit a {self.rows}x{self.cols} grid"
                )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GameConfig":
        """Build a config from BLOCKFALL_* environment variables.

        Recognized variables: BLOCKFALL_ROWS, BLOCKFALL_COLS, BLOCKFALL_TICK_MS.
        Missing variables fall back to the defaults.

        Raises:
            ValueError: If a variable is not a positive integer
        """
        if environ is None:
            environ = os.environ

        overrides = {}
        for var, field_name in (
            ("BLOCKFALL_ROWS", "rows"),
            ("BLOCKFALL_COLS", "cols"),
            ("BLOCKFALL_TICK_MS", "tick_interval_ms"),
        ):
            raw = environ.get(var)
            if raw is None or raw == "":
                continue
            try:
                overrides[field_name] = int(raw)
            except ValueError:
                raise ValueError(f"{var} must be an integer, got {raw!r}")

        return cls(**overrides)
