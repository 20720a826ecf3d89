"""FastAPI WebSocket server for Blockfall.

Each connection drives its own game. Commands are answered with a ``state``
message; ticks that change the game push an unsolicited ``state`` message.
"""

import json
import asyncio
import logging
from typing import Callable, Dict, Optional, Set

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from blockfall_core.config import GameConfig
from blockfall_core.game import Game, StepResult
from blockfall_core.rng import RandomShapeProvider
from blockfall_core.scheduler import AsyncioScheduler
from blockfall_api.protocol import (
    Action,
    HelloRequest,
    HelloResponse,
    StartRequest,
    CommandRequest,
    SlideRequest,
    SnapshotRequest,
    StateResponse,
    ErrorResponse,
    ErrorCode,
    parse_message,
    to_dict,
)

ACTIONS: Dict[Action, Callable[[Game], StepResult]] = {
    Action.LEFT: lambda game: game.slide(-1),
    Action.RIGHT: lambda game: game.slide(1),
    Action.ROTATE: lambda game: game.rotate(),
    Action.DROP: lambda game: game.hard_drop(),
    Action.PAUSE: lambda game: game.toggle_pause(),
}


class GameNotStartedError(RuntimeError):
    """A command arrived before the session's game was started."""


class InvalidActionError(ValueError):
    """A command named an action the game does not know."""


def state_response(result: StepResult, source: str = "command") -> StateResponse:
    return StateResponse(
        data=result.snapshot.to_dict(),
        events=list(result.events),
        lines_cleared=result.lines_cleared,
        source=source,
    )


class GameSession:
    """Manages the game of a single WebSocket connection."""

    def __init__(self, websocket: WebSocket, config: GameConfig):
        self.websocket = websocket
        self.config = config
        self.game: Optional[Game] = None
        self.handling_command = False
        self._send_tasks: Set[asyncio.Task] = set()

    def start(self, seed: Optional[int] = None) -> StateResponse:
        """Start or restart the game.

        Args:
            seed: Random seed for shape selection (unseeded if None)

        Returns:
            State response after the reset
        """
        if self.game is None:
            self.game = Game(
                self.config,
                provider=RandomShapeProvider(self.config.shapes, seed),
                scheduler=AsyncioScheduler(),
            )
            self.game.add_listener(self._on_step)
        else:
            self.game.provider.reset(seed)

        logger.info(f"[Session] Starting game: seed={seed}")
        return self._apply(lambda game: game.start())

    def command(self, action: str) -> StateResponse:
        """Apply a player command.

        Raises:
            InvalidActionError: If the action is unknown
            GameNotStartedError: If no game has been started
        """
        try:
            handler = ACTIONS[Action(action)]
        except ValueError:
            raise InvalidActionError(f"Invalid action: {action}")
        return self._apply(handler)

    def slide(self, dx: int) -> StateResponse:
        """Slide the active piece by ``dx`` columns in one step."""
        return self._apply(lambda game: game.slide(dx))

    def snapshot(self) -> StateResponse:
        if self.game is None:
            raise GameNotStartedError("Game not started. Send start first.")
        return StateResponse(data=self.game.snapshot().to_dict())

    def close(self) -> None:
        """Stop ticking; called when the client goes away."""
        if self.game is not None:
            self.game.scheduler.stop()
        for task in list(self._send_tasks):
            task.cancel()

    def _apply(self, handler: Callable[[Game], StepResult]) -> StateResponse:
        if self.game is None:
            raise GameNotStartedError("Game not started. Send start first.")
        # Command results are sent as the reply, not through the listener
        self.handling_command = True
        try:
            result = handler(self.game)
        finally:
            self.handling_command = False
        return state_response(result)

    def _on_step(self, result: StepResult) -> None:
        if self.handling_command:
            return
        task = asyncio.get_running_loop().create_task(self._push(state_response(result, source="tick")))
        self._send_tasks.add(task)
        task.add_done_callback(self._send_tasks.discard)

    async def _push(self, response: StateResponse) -> None:
        try:
            await self.websocket.send_text(json.dumps(to_dict(response)))
        except Exception as e:
            logger.warning(f"[Session] Failed to push tick state (client may have disconnected): {e}")
            self.close()


def create_app(config: Optional[GameConfig] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Game configuration shared by every session
            (read from BLOCKFALL_* environment variables if None)

    Returns:
        Configured application
    """
    if config is None:
        config = GameConfig.from_env()

    app = FastAPI(title="Blockfall API", version="0.1.0")

    # Enable CORS for web frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],  # Vite default ports
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "blockfall-api", "version": "0.1.0"}

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/config")
    async def get_config():
        """Board dimensions and timing used by new sessions."""
        return {
            "rows": config.rows,
            "cols": config.cols,
            "tick_interval_ms": config.tick_interval_ms,
            "hard_drop_rows": config.hard_drop_rows,
            "shapes": [{"name": s.name, "cells": s.to_list()} for s in config.shapes],
        }

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """WebSocket endpoint for game communication."""
        await websocket.accept()
        session = GameSession(websocket, config)
        logger.info("[WS] Client connected")

        async def send_error(code: str, message: str) -> None:
            error = ErrorResponse(code=code, message=message)
            await websocket.send_text(json.dumps(to_dict(error)))

        try:
            while True:
                data = await websocket.receive_text()

                try:
                    message = parse_message(json.loads(data))

                    if isinstance(message, HelloRequest):
                        response = HelloResponse()
                    elif isinstance(message, StartRequest):
                        response = session.start(message.seed)
                    elif isinstance(message, CommandRequest):
                        response = session.command(message.action)
                    elif isinstance(message, SlideRequest):
                        response = session.slide(message.dx)
                    elif isinstance(message, SnapshotRequest):
                        response = session.snapshot()
                    else:
                        await send_error(
                            ErrorCode.INVALID_MESSAGE,
                            f"Unknown message type: {type(message)}",
                        )
                        continue

                    await websocket.send_text(json.dumps(to_dict(response)))

                except json.JSONDecodeError as e:
                    await send_error(ErrorCode.INVALID_MESSAGE, f"Invalid JSON: {str(e)}")

                except GameNotStartedError as e:
                    await send_error(ErrorCode.GAME_NOT_STARTED, str(e))

                except InvalidActionError as e:
                    await send_error(ErrorCode.INVALID_ACTION, str(e))

                except ValueError as e:
                    await send_error(ErrorCode.INVALID_MESSAGE, str(e))

        except WebSocketDisconnect:
            logger.info("[WS] Client disconnected")
        except Exception as e:
            logger.error(f"[WS] Error: {e}", exc_info=True)
            try:
                await send_error(ErrorCode.INVALID_MESSAGE, f"Server error: {str(e)}")
            except Exception:
                logger.warning("[WS] Could not report error to client")
        finally:
            session.close()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
