"""Tick sources driving the game loop.

A scheduler invokes one callback at a fixed interval until stopped. Starting
a running scheduler restarts it; stopping a stopped one does nothing.
"""

import asyncio
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

TickCallback = Callable[[], object]


class Scheduler(Protocol):
    """Repeating timer interface."""

    @property
    def running(self) -> bool:
        ...

    def start(self, callback: TickCallback, interval_ms: int) -> None:
        ...

    def stop(self) -> None:
        ...


class ManualScheduler:
    """Scheduler that only ticks when told to.

    Used for tests and for headless stepping: nothing happens until
    ``fire()`` is called.
    """

    def __init__(self):
        self.callback: Optional[TickCallback] = None
        self.interval_ms: Optional[int] = None
        self.starts = 0
        self.stops = 0

    @property
    def running(self) -> bool:
        return self.callback is not None

    def start(self, callback: TickCallback, interval_ms: int) -> None:
        self.callback = callback
        self.interval_ms = interval_ms
        self.starts += 1

    def stop(self) -> None:
        if self.callback is None:
            return
        self.callback = None
        self.stops += 1

    def fire(self, times: int = 1) -> int:
        """Invoke the callback up to ``times`` times.

        Stops early if the callback stops the scheduler.

        Returns:
            Number of ticks delivered
        """
        fired = 0
        for _ in range(times):
            if self.callback is None:
                break
            self.callback()
            fired += 1
        return fired


class AsyncioScheduler:
    """Repeating timer on an asyncio event loop.

    The callback runs on the loop thread, so it never races with other
    coroutines touching the same game.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._callback: Optional[TickCallback] = None
        self._interval_s = 0.0
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback, interval_ms: int) -> None:
        self.stop()
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._callback = callback
        self._interval_s = interval_ms / 1000.0
        self._schedule(self._generation)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._callback = None
        self._generation += 1

    def _schedule(self, generation: int) -> None:
        self._handle = self._loop.call_later(self._interval_s, self._run, generation)

    def _run(self, generation: int) -> None:
        # A stop or restart since this timer was armed invalidates it
        if generation != self._generation or self._callback is None:
            return
        try:
            self._callback()
        except Exception:
            logger.error("[Scheduler] Tick callback failed, stopping", exc_info=True)
            self.stop()
            return
        # Consecutive ticks are at least one interval apart
        if generation == self._generation:
            self._schedule(generation)
