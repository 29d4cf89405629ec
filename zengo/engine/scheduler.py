"""
Cancellable scheduled callbacks for the hide-words delay.

ManualScheduler runs on a virtual clock and fires callbacks only when
advanced, which makes round timing deterministic. AsyncioScheduler defers to
the running event loop.
"""

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


class ManualTimer:
    """Handle for a callback queued on a ManualScheduler."""

    def __init__(self, due_ms: float, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler driven by an explicit virtual clock.

    Attributes:
        now_ms: Current virtual time in milliseconds
    """

    def __init__(self, start_ms: float = 0.0):
        self.now_ms = start_ms
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        """Current virtual time; usable as the engine clock."""
        return self.now_ms

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now_ms + max(0.0, delay_ms), callback)
        heapq.heappush(self._queue, (timer.due_ms, next(self._counter), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of timers that are neither fired nor cancelled."""
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def advance(self, delta_ms: float) -> int:
        """
        Move the clock forward, firing every due callback in order.

        Args:
            delta_ms: Milliseconds to advance

        Returns:
            Number of callbacks fired
        """
        target = self.now_ms + delta_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now_ms = due_ms
            timer.fired = True
            timer.callback()
            fired += 1
        self.now_ms = target
        return fired


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop's call_later."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay_ms) / 1000, callback)
