"""Asyncio driver running the frame loop beside the session countdown."""

from __future__ import annotations

import asyncio
import contextlib
import time
from typing import Any, List, Mapping, Optional, Union

from . import config
from .config import SessionOptions
from .models import SessionSnapshot
from .session import GameSession
from .timers import AsyncioScheduler


class GameRunner:
    """Calls ``GameSession.tick`` at a fixed frame rate.

    The countdown lives on the same event loop through an
    :class:`AsyncioScheduler`, so both time sources interleave cooperatively.
    """

    def __init__(self, session: Optional[GameSession] = None, frame_rate: int = config.FRAME_RATE) -> None:
        if frame_rate <= 0:
            raise ValueError("frame_rate must be positive")
        self.session = session or GameSession(scheduler=AsyncioScheduler())
        self._frame_interval = 1.0 / frame_rate
        self._frame_task: Optional[asyncio.Task[None]] = None
        self._subscribers: List[asyncio.Queue[SessionSnapshot]] = []

    async def start(self, options: Optional[Union[SessionOptions, Mapping[str, Any]]] = None) -> None:
        await self._cancel_frame_task()
        self.session.start(options)
        self._frame_task = asyncio.create_task(self._run_loop())

    async def stop(self) -> None:
        self.session.stop()
        await self._cancel_frame_task()

    async def wait_until_finished(self) -> None:
        if self._frame_task is not None:
            await self._frame_task

    def submit_label(self, label: Optional[str]) -> None:
        """Forward a classifier label while a session is running."""
        if self.session.active and label:
            self.session.on_position_command(label)

    async def _cancel_frame_task(self) -> None:
        if self._frame_task:
            self._frame_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._frame_task
            self._frame_task = None

    async def _run_loop(self) -> None:
        last_frame = time.perf_counter()
        while self.session.active:
            now = time.perf_counter()
            elapsed = now - last_frame
            if elapsed < self._frame_interval:
                await asyncio.sleep(self._frame_interval - elapsed)
                continue
            last_frame = now
            self.session.tick()
            await self._notify_subscribers()
        # One last frame so subscribers see the terminal state.
        await self._notify_subscribers()

    async def _notify_subscribers(self) -> None:
        snapshot = self.session.snapshot()
        for queue in list(self._subscribers):
            if queue.full():
                with contextlib.suppress(asyncio.QueueEmpty):
                    queue.get_nowait()
            await queue.put(snapshot)

    def subscribe(self) -> asyncio.Queue[SessionSnapshot]:
        """Create a queue that always holds the most recent snapshot."""

        queue: asyncio.Queue[SessionSnapshot] = asyncio.Queue(maxsize=1)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[SessionSnapshot]) -> None:
        with contextlib.suppress(ValueError):
            self._subscribers.remove(queue)
