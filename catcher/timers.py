"""Interval timers used to drive the session countdown.

The session never talks to an event loop directly.  It asks a scheduler for
a repeating timer and keeps only the returned handle, which it cancels on
stop, restart and game over.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class AsyncioTimer:
    """Repeating timer backed by an asyncio task."""

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self._callback = callback
        self._task: asyncio.Task[None] = asyncio.get_running_loop().create_task(self._run())
        self._task.add_done_callback(self._report_failure)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self._callback()

    @staticmethod
    def _report_failure(task: "asyncio.Task[None]") -> None:
        # A raising callback ends the timer; hand the error to the loop.
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            task.get_loop().call_exception_handler({
                "message": "Interval timer callback failed; timer stopped",
                "exception": exc,
                "task": task,
            })

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled() or self._task.done()

    def cancel(self) -> None:
        self._task.cancel()


class AsyncioScheduler:
    """Creates timers on the running event loop."""

    def call_every(self, interval: float, callback: Callable[[], None]) -> AsyncioTimer:
        try:
            return AsyncioTimer(interval, callback)
        except RuntimeError as exc:
            raise RuntimeError("AsyncioScheduler requires a running event loop") from exc


@dataclass(order=True)
class _ManualEntry:
    due: float
    sequence: int
    timer: "ManualTimer" = field(compare=False)


class ManualTimer:
    def __init__(self, scheduler: "ManualScheduler", interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self.cancelled = False
        self._scheduler = scheduler

    def cancel(self) -> None:
        if not self.cancelled:
            self.cancelled = True
            self._scheduler._discard(self)


class ManualScheduler:
    """Simulated clock for headless runs and tests.

    Nothing fires until ``advance`` is called.  Timers fire in due-time
    order, and a timer cancelled while the clock is advancing (for example
    from inside another timer's callback) does not fire again.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[_ManualEntry] = []
        self._timers: List[ManualTimer] = []
        self._sequence = itertools.count()

    def call_every(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        if interval <= 0:
            raise ValueError("interval must be positive")
        timer = ManualTimer(self, interval, callback)
        self._timers.append(timer)
        self._push(timer, self.now + interval)
        return timer

    @property
    def active_timers(self) -> int:
        return len(self._timers)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and return how many callbacks fired."""
        if seconds < 0:
            raise ValueError("cannot advance the clock backwards")
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0].due <= target:
            entry = heapq.heappop(self._queue)
            if entry.timer.cancelled:
                continue
            self.now = entry.due
            self._push(entry.timer, entry.due + entry.timer.interval)
            entry.timer.callback()
            fired += 1
        self.now = target
        return fired

    def next_due(self) -> Optional[float]:
        for entry in sorted(self._queue):
            if not entry.timer.cancelled:
                return entry.due
        return None

    def _push(self, timer: ManualTimer, due: float) -> None:
        heapq.heappush(self._queue, _ManualEntry(due, next(self._sequence), timer))

    def _discard(self, timer: ManualTimer) -> None:
        if timer in self._timers:
            self._timers.remove(timer)
