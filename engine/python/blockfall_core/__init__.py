"""Falling-block puzzle game core."""

from blockfall_core.config import GameConfig
from blockfall_core.game import Game, GamePhase, PieceState, Snapshot, StepResult
from blockfall_core.grid import Grid
from blockfall_core.rng import RandomShapeProvider, SequenceShapeProvider
from blockfall_core.rules import can_place, next_available_position
from blockfall_core.scheduler import AsyncioScheduler, ManualScheduler
from blockfall_core.shape import SHAPE_CATALOG, Shape, get_shape, rotate_left
