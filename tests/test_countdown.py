from __future__ import annotations

from catcher.config import SessionOptions
from catcher.models import EndReason
from catcher.session import GameSession
from catcher.timers import ManualScheduler


def test_session_ends_after_time_limit(session: GameSession, scheduler: ManualScheduler, listener) -> None:
    session.start(SessionOptions(time_limit=5))
    session.score = 300
    for expected in (4, 3, 2, 1):
        scheduler.advance(1.0)
        assert session.remaining_time == expected
        assert session.active is True
    scheduler.advance(1.0)
    assert session.remaining_time == 0
    assert session.active is False
    assert session.end_reason is EndReason.TIME_UP
    assert listener.calls == [(300, 1)]


def test_countdown_stops_after_game_over(session: GameSession, scheduler: ManualScheduler, listener) -> None:
    session.start(SessionOptions(time_limit=2))
    scheduler.advance(10.0)
    assert session.remaining_time == 0
    assert listener.calls == [(0, 1)]
    assert scheduler.active_timers == 0


def test_stop_then_start_leaves_a_single_countdown(session: GameSession, scheduler: ManualScheduler) -> None:
    session.start(SessionOptions(time_limit=10))
    scheduler.advance(0.5)
    session.stop()
    session.start(SessionOptions(time_limit=10))
    assert scheduler.active_timers == 1
    scheduler.advance(1.0)
    assert session.remaining_time == 9


def test_restart_while_active_cancels_previous_countdown(session: GameSession, scheduler: ManualScheduler) -> None:
    session.start(SessionOptions(time_limit=10))
    scheduler.advance(0.5)
    session.start(SessionOptions(time_limit=10))
    session.start(SessionOptions(time_limit=10))
    assert scheduler.active_timers == 1
    scheduler.advance(1.0)
    assert session.remaining_time == 9


def test_stop_halts_countdown(session: GameSession, scheduler: ManualScheduler) -> None:
    session.start(SessionOptions(time_limit=10))
    scheduler.advance(3.0)
    session.stop()
    scheduler.advance(5.0)
    assert session.remaining_time == 7
    assert session.active is False


def test_tick_and_countdown_interleave(session: GameSession, scheduler: ManualScheduler, listener) -> None:
    session.start(SessionOptions(time_limit=3))
    frames = 0
    while session.active:
        session.tick()
        scheduler.advance(0.25)
        frames += 1
    assert frames == 12
    assert listener.calls == [(session.score, session.level)]
