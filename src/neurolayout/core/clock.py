"""
Frame clocks.

The simulation never sleeps or spawns threads. A host clock hands it frames
and delayed callbacks; everything runs on that single cooperative loop.

- ManualClock: deterministic clock advanced explicitly (tests, CLI batch runs)
- AsyncioFrameClock: schedules on a running asyncio event loop
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple


class ScheduledCall:
    """Handle for a pending callback. Cancelling twice is harmless."""

    def __init__(self, callback: Callable[[], None], due: float):
        self.callback = callback
        self.due = due
        self._cancelled = False
        self._inner = None

    def cancel(self) -> None:
        self._cancelled = True
        if self._inner is not None:
            self._inner.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class FrameClock(ABC):
    """Time source and scheduler driving the simulation."""

    @abstractmethod
    def now(self) -> float:
        """Monotonic time in seconds."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run callback after delay seconds."""


class ManualClock(FrameClock):
    """
    Clock that only moves when advance() is called.

    Callbacks run in due order; callbacks scheduled while advancing run in
    the same advance() call if they fall inside the window.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int, ScheduledCall]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        handle = ScheduledCall(callback, self._now + max(0.0, delay))
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
        return handle

    def advance(self, seconds: float) -> int:
        """Move time forward, firing due callbacks. Returns how many ran."""
        deadline = self._now + max(0.0, seconds)
        fired = 0
        while self._queue and self._queue[0][0] <= deadline:
            due, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if handle.cancelled:
                continue
            handle.callback()
            fired += 1
        self._now = deadline
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)


class AsyncioFrameClock(FrameClock):
    """Clock backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        handle = ScheduledCall(callback, self.now() + max(0.0, delay))
        handle._inner = self._loop.call_later(max(0.0, delay), callback)
        return handle
