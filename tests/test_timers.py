from __future__ import annotations

import asyncio

import pytest

from catcher.timers import AsyncioScheduler, ManualScheduler


def test_manual_timer_fires_once_per_interval() -> None:
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_every(1.0, lambda: fired.append(scheduler.now))
    assert scheduler.advance(3.5) == 3
    assert fired == [1.0, 2.0, 3.0]
    assert scheduler.now == 3.5
    assert scheduler.next_due() == 4.0


def test_manual_timer_cancelled_from_another_callback() -> None:
    scheduler = ManualScheduler()
    fired = []
    second = None

    def first() -> None:
        fired.append("first")
        second.cancel()

    scheduler.call_every(1.0, first)
    second = scheduler.call_every(1.0, lambda: fired.append("second"))
    scheduler.advance(2.0)
    assert fired == ["first", "first"]
    assert scheduler.active_timers == 1


def test_manual_scheduler_rejects_bad_input() -> None:
    scheduler = ManualScheduler()
    with pytest.raises(ValueError):
        scheduler.advance(-1)
    with pytest.raises(ValueError):
        scheduler.call_every(0, lambda: None)


def test_asyncio_scheduler_needs_running_loop() -> None:
    with pytest.raises(RuntimeError):
        AsyncioScheduler().call_every(1.0, lambda: None)


def test_asyncio_timer_repeats_until_cancelled() -> None:
    async def scenario() -> int:
        fired = []
        timer = AsyncioScheduler().call_every(0.01, lambda: fired.append(1))
        await asyncio.sleep(0.055)
        timer.cancel()
        count = len(fired)
        await asyncio.sleep(0.03)
        assert len(fired) == count
        assert timer.cancelled
        return count

    assert asyncio.run(scenario()) >= 2


def test_asyncio_timer_reports_callback_failure() -> None:
    async def scenario():
        reported = []
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(lambda _loop, context: reported.append(context))

        def explode() -> None:
            raise ValueError("listener blew up")

        timer = AsyncioScheduler().call_every(0.01, explode)
        await asyncio.sleep(0.05)
        return timer, reported

    timer, reported = asyncio.run(scenario())
    assert timer.cancelled
    assert len(reported) == 1
    assert isinstance(reported[0]["exception"], ValueError)
