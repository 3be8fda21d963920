"""Unit tests for the frame clocks."""

import asyncio

from neurolayout.core.clock import AsyncioFrameClock, ManualClock


class TestManualClock:
    def test_fires_in_due_order(self):
        clock = ManualClock()
        fired = []
        clock.call_later(0.3, lambda: fired.append("late"))
        clock.call_later(0.1, lambda: fired.append("early"))

        assert clock.advance(0.5) == 2
        assert fired == ["early", "late"]
        assert clock.now() == 0.5

    def test_leaves_future_callbacks_pending(self):
        clock = ManualClock()
        fired = []
        clock.call_later(1.0, lambda: fired.append(1))

        clock.advance(0.5)
        assert fired == []
        assert clock.pending == 1

    def test_cancelled_callbacks_do_not_run(self):
        clock = ManualClock()
        fired = []
        handle = clock.call_later(0.1, lambda: fired.append(1))
        handle.cancel()
        handle.cancel()

        assert clock.advance(1.0) == 0
        assert fired == []
        assert handle.cancelled

    def test_callbacks_scheduled_during_advance(self):
        clock = ManualClock()
        fired = []

        def first():
            fired.append(clock.now())
            clock.call_later(0.1, lambda: fired.append(clock.now()))

        clock.call_later(0.1, first)
        clock.advance(0.25)
        assert fired == [0.1, 0.2]


class TestAsyncioFrameClock:
    def test_schedules_on_running_loop(self):
        async def scenario():
            clock = AsyncioFrameClock()
            done = asyncio.Event()
            clock.call_later(0.01, done.set)
            await asyncio.wait_for(done.wait(), timeout=1.0)
            return clock.now() > 0

        assert asyncio.run(scenario())

    def test_cancel_prevents_callback(self):
        async def scenario():
            clock = AsyncioFrameClock()
            fired = []
            handle = clock.call_later(0.01, lambda: fired.append(1))
            handle.cancel()
            await asyncio.sleep(0.03)
            return fired

        assert asyncio.run(scenario()) == []
