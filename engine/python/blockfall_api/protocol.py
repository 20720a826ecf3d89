"""Protocol data classes for WebSocket communication."""

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional, Literal
from enum import Enum

PROTOCOL_VERSION = "b1.0.0"


class MessageType(str, Enum):
    """WebSocket message types."""
    HELLO = "hello"
    START = "start"
    COMMAND = "command"
    SLIDE = "slide"
    SNAPSHOT = "snapshot"
    STATE = "state"
    ERROR = "error"


class Action(str, Enum):
    """Player commands accepted by the ``command`` message."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    ROTATE = "ROTATE"
    DROP = "DROP"
    PAUSE = "PAUSE"


@dataclass
class HelloRequest:
    """Client hello message."""
    type: Literal["hello"] = "hello"
    version: str = PROTOCOL_VERSION


@dataclass
class HelloResponse:
    """Server hello response."""
    type: Literal["hello"] = "hello"
    version: str = PROTOCOL_VERSION
    server: str = "blockfall-core-py"


@dataclass
class StartRequest:
    """Request to start (or restart) the game."""
    seed: Optional[int] = None
    type: Literal["start"] = "start"


@dataclass
class CommandRequest:
    """Request to apply a player command."""
    action: str  # LEFT, RIGHT, ROTATE, DROP, PAUSE
    type: Literal["command"] = "command"


@dataclass
class SlideRequest:
    """Request to slide the active piece by several columns at once."""
    dx: int
    type: Literal["slide"] = "slide"


@dataclass
class SnapshotRequest:
    """Request the current state without changing it."""
    type: Literal["snapshot"] = "snapshot"


@dataclass
class StateResponse:
    """Game state pushed after a command or a tick."""
    data: Dict[str, Any]  # Snapshot dict from Snapshot.to_dict()
    events: List[str] = field(default_factory=list)
    lines_cleared: int = 0
    source: str = "command"  # "command" for replies, "tick" for timer pushes
    type: Literal["state"] = "state"


@dataclass
class ErrorResponse:
    """Error response."""
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    type: Literal["error"] = "error"


class ErrorCode:
    """Standard error codes."""
    INVALID_MESSAGE = "INVALID_MESSAGE"
    INVALID_ACTION = "INVALID_ACTION"
    GAME_NOT_STARTED = "GAME_NOT_STARTED"


_REQUESTS = {
    MessageType.HELLO: HelloRequest,
    MessageType.START: StartRequest,
    MessageType.COMMAND: CommandRequest,
    MessageType.SLIDE: SlideRequest,
    MessageType.SNAPSHOT: SnapshotRequest,
}


def parse_message(data: Any) -> Any:
    """Parse incoming WebSocket message.

    Args:
        data: JSON message dict

    Returns:
        Parsed message object

    Raises:
        ValueError: If message type or fields are invalid
    """
    if not isinstance(data, dict):
        raise ValueError("Message must be a JSON object")

    msg_type = data.get("type")
    try:
        request_cls = _REQUESTS[MessageType(msg_type)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown message type: {msg_type}")

    try:
        message = request_cls(**data)
    except TypeError as e:
        raise ValueError(f"Invalid fields for {msg_type}: {e}")

    if isinstance(message, SlideRequest) and (
        isinstance(message.dx, bool) or not isinstance(message.dx, int)
    ):
        raise ValueError(f"Slide dx must be an integer, got {message.dx!r}")
    if isinstance(message, StartRequest) and message.seed is not None and (
        isinstance(message.seed, bool) or not isinstance(message.seed, int)
    ):
        raise ValueError(f"Seed must be an integer, got {message.seed!r}")
    return message


def to_dict(obj: Any) -> Dict[str, Any]:
    """Convert dataclass to dict for JSON serialization.

    Args:
        obj: Dataclass instance

    Returns:
        Dictionary representation
    """
    return asdict(obj)
