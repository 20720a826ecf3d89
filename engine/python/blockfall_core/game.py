"""Game state machine.

Owns the grid and the active piece, consumes movement commands and tick
callbacks, and reports the result of every step as a snapshot plus events.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from blockfall_core.config import GameConfig
from blockfall_core.grid import Grid, Position
from blockfall_core.rng import RandomShapeProvider, ShapeProvider
from blockfall_core.rules import can_place, next_available_position
from blockfall_core.scheduler import ManualScheduler, Scheduler
from blockfall_core.shape import Shape, rotate_left

logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    """Lifecycle phase of a game."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    OVER = "over"


@dataclass(frozen=True)
class PieceState:
    """Active piece: a shape and the grid position of its top-left corner."""
    shape: Shape
    row: int
    col: int

    @property
    def position(self) -> Position:
        return (self.row, self.col)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.shape.name,
            "cells": self.shape.to_list(),
            "row": self.row,
            "col": self.col,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PieceState":
        return cls(Shape(data["name"], data["cells"]), data["row"], data["col"])


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the game for renderers."""
    rows: int
    cols: int
    cells: Tuple[Tuple[int, ...], ...]
    piece: Optional[PieceState]
    phase: GamePhase

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to dictionary for serialization."""
        return {
            "grid": {
                "rows": self.rows,
                "cols": self.cols,
                "cells": [list(row) for row in self.cells],
            },
            "piece": self.piece.to_dict() if self.piece else None,
            "phase": self.phase.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        """Rebuild a snapshot received from a remote game."""
        grid = data["grid"]
        piece = data.get("piece")
        return cls(
            rows=grid["rows"],
            cols=grid["cols"],
            cells=tuple(tuple(row) for row in grid["cells"]),
            piece=PieceState.from_dict(piece) if piece else None,
            phase=GamePhase(data["phase"]),
        )


@dataclass
class StepResult:
    """Result of a command or tick."""
    snapshot: Snapshot
    events: List[str] = field(default_factory=list)
    lines_cleared: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.events)


Listener = Callable[[StepResult], None]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class Game:
    """Falling-block game."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        provider: Optional[ShapeProvider] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize the game in the not-started phase.

        Args:
            config: Board size, timing and shape catalog
            provider: Source of spawned shapes (random by default)
            scheduler: Tick source (manual by default)
            clock: Millisecond clock used to pace natural falls
        """
        self.config = config or GameConfig()
        self.provider = provider or RandomShapeProvider(self.config.shapes)
        self.scheduler = scheduler or ManualScheduler()
        self.clock = clock or _monotonic_ms

        self.grid = Grid(self.config.rows, self.config.cols)
        self.shape: Optional[Shape] = None
        self.position: Optional[Position] = None
        self.phase = GamePhase.NOT_STARTED

        self.pending_slide = 0
        self.pending_drop = False
        self.last_fall_ms = 0.0

        self._listeners: List[Listener] = []

    # Lifecycle

    def start(self) -> StepResult:
        """Start a fresh game on an empty grid and begin ticking."""
        self.grid.clear()
        self.shape = None
        self.position = None
        self.pending_slide = 0
        self.pending_drop = False
        self.last_fall_ms = self.clock()

        self._set_phase(GamePhase.RUNNING)
        self.scheduler.start(self.tick, self.config.tick_interval_ms)
        return self._finish(["reset"])

    reset = start

    def toggle_pause(self) -> StepResult:
        """Pause or resume; restarts the game when it is over."""
        if self.phase in (GamePhase.OVER, GamePhase.NOT_STARTED):
            return self.start()

        if self.phase is GamePhase.RUNNING:
            self.scheduler.stop()
            self._set_phase(GamePhase.PAUSED)
            return self._finish(["pause"])

        self._set_phase(GamePhase.RUNNING)
        self.scheduler.start(self.tick, self.config.tick_interval_ms)
        return self._finish(["resume"])

    # Commands

    def tick(self) -> StepResult:
        """Timer callback."""
        return self.advance()

    def advance(self) -> StepResult:
        """Spawn a piece or move the active one by one step."""
        if self.phase is not GamePhase.RUNNING:
            return self._noop()
        events: List[str] = []
        lines = self._advance(events)
        return self._finish(events, lines)

    def slide(self, dx: int) -> StepResult:
        """Request a horizontal move and apply it immediately."""
        if self.phase is not GamePhase.RUNNING:
            return self._noop()
        self.pending_slide += dx
        return self.advance()

    def hard_drop(self) -> StepResult:
        """Request an accelerated descent and apply it immediately."""
        if self.phase is not GamePhase.RUNNING:
            return self._noop()
        self.pending_drop = True
        return self.advance()

    def rotate(self) -> StepResult:
        """Rotate the active piece left in place.

        The rotation is dropped without any offset search when the rotated
        shape does not fit at the current position.
        """
        if self.phase is not GamePhase.RUNNING or self.shape is None:
            return self._noop()

        rotated = rotate_left(self.shape)
        if not can_place(self.grid, rotated, self.position):
            return self._noop()

        self.shape = rotated
        events = ["rotate"]
        lines = self._advance(events)
        return self._finish(events, lines)

    # State

    @property
    def piece(self) -> Optional[PieceState]:
        if self.shape is None:
            return None
        row, col = self.position
        return PieceState(self.shape, row, col)

    def snapshot(self) -> Snapshot:
        """Build the current snapshot."""
        return Snapshot(
            rows=self.grid.rows,
            cols=self.grid.cols,
            cells=self.grid.to_rows(),
            piece=self.piece,
            phase=self.phase,
        )

    def add_listener(self, listener: Listener) -> None:
        """Register a callback receiving every step that changed something."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # Internals

    def _advance(self, events: List[str]) -> int:
        if self.shape is None:
            self._spawn(events)
            return 0
        return self._move(events)

    def _spawn(self, events: List[str]) -> None:
        # Intents issued while no piece was active are dropped
        self.pending_slide = 0
        self.pending_drop = False

        shape = self.provider.next()
        self.shape = shape
        self.position = (0, int(self.config.cols / 2 - shape.width / 2))
        events.append("spawn")
        logger.debug(f"Spawned {shape.name} at {self.position}")

        if not can_place(self.grid, shape, self.position):
            self.scheduler.stop()
            self._set_phase(GamePhase.OVER)
            events.append("over")

    def _move(self, events: List[str]) -> int:
        row, col = self.position
        now = self.clock()

        target_row = row
        if self.pending_drop or now - self.last_fall_ms >= self.config.tick_interval_ms:
            self.last_fall_ms = now
            target_row += self.config.hard_drop_rows if self.pending_drop else 1

        max_col = self.config.cols - self.shape.width
        target_col = max(0, min(max_col, col + self.pending_slide))

        self.pending_slide = 0
        self.pending_drop = False

        resolved = next_available_position(
            self.grid, self.shape, self.position, (target_row, target_col)
        )
        if resolved != self.position:
            events.append("move")
        self.position = resolved

        # A piece still at the top row never locks
        if 0 < resolved[0] < target_row:
            return self._lock(events)
        return 0

    def _lock(self, events: List[str]) -> int:
        self.grid.lock_shape(self.shape, self.position)
        events.append("lock")
        logger.debug(f"Locked {self.shape.name} at {self.position}")
        self.shape = None
        self.position = None

        lines = self.grid.clear_full_rows()
        if lines:
            events.append("clear")
            logger.debug(f"Cleared {lines} row(s)")
        return lines

    def _set_phase(self, phase: GamePhase) -> None:
        if phase is not self.phase:
            logger.info(f"Game phase {self.phase.value} -> {phase.value}")
        self.phase = phase

    def _noop(self) -> StepResult:
        return StepResult(self.snapshot())

    def _finish(self, events: List[str], lines: int = 0) -> StepResult:
        result = StepResult(self.snapshot(), events, lines)
        if result.changed:
            for listener in list(self._listeners):
                listener(result)
        return result
