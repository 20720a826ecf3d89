"""Tests for tick schedulers."""

import asyncio

import pytest

from blockfall_core.scheduler import AsyncioScheduler, ManualScheduler


class TestManualScheduler:
    """Manual tick source."""

    def test_fire_invokes_callback(self):
        """Test that ticks are only delivered on demand."""
        calls = []
        scheduler = ManualScheduler()
        scheduler.start(lambda: calls.append(1), 500)

        assert scheduler.running
        assert scheduler.interval_ms == 500
        assert calls == []

        assert scheduler.fire(3) == 3
        assert len(calls) == 3

    def test_stop_is_idempotent(self):
        """Test stopping twice counts once and blocks further ticks."""
        calls = []
        scheduler = ManualScheduler()
        scheduler.start(lambda: calls.append(1), 500)

        scheduler.stop()
        scheduler.stop()

        assert not scheduler.running
        assert scheduler.stops == 1
        assert scheduler.fire() == 0
        assert calls == []

    def test_callback_can_stop_scheduler(self):
        """Test that firing halts when the callback stops the timer."""
        scheduler = ManualScheduler()
        calls = []

        def callback():
            calls.append(1)
            scheduler.stop()

        scheduler.start(callback, 100)
        assert scheduler.fire(5) == 1
        assert len(calls) == 1


class TestAsyncioScheduler:
    """Event loop tick source."""

    @pytest.mark.asyncio
    async def test_ticks_repeat_until_stopped(self):
        """Test the timer repeats and stops cleanly."""
        calls = []
        scheduler = AsyncioScheduler()
        scheduler.start(lambda: calls.append(1), 10)
        assert scheduler.running

        await asyncio.sleep(0.2)
        scheduler.stop()
        count = len(calls)

        assert count >= 2, "Timer should have fired more than once"
        assert not scheduler.running

        await asyncio.sleep(0.05)
        assert len(calls) == count, "No ticks after stop"

        scheduler.stop()  # already stopped

    @pytest.mark.asyncio
    async def test_restart_replaces_callback(self):
        """Test that starting again drops the previous callback."""
        first = []
        second = []
        scheduler = AsyncioScheduler()
        scheduler.start(lambda: first.append(1), 10)
        scheduler.start(lambda: second.append(1), 10)

        await asyncio.sleep(0.1)
        scheduler.stop()

        assert first == []
        assert second

    @pytest.mark.asyncio
    async def test_failing_callback_stops_timer(self):
        """Test that an exception in the callback stops ticking."""
        calls = []

        def callback():
            calls.append(1)
            raise RuntimeError("boom")

        scheduler = AsyncioScheduler()
        scheduler.start(callback, 10)

        await asyncio.sleep(0.1)

        assert len(calls) == 1
        assert not scheduler.running
