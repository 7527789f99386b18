from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import pytest

from catcher.models import Zone
from catcher.session import GameSession
from catcher.timers import ManualScheduler


class ScriptedRandom:
    """Random source replaying fixed zone picks and probability rolls."""

    def __init__(self, zones: Iterable[Zone] = (), rolls: Iterable[float] = ()) -> None:
        self.zones: List[Zone] = list(zones)
        self.rolls: List[float] = list(rolls)

    def random(self) -> float:
        return self.rolls.pop(0) if self.rolls else 0.0

    def choice(self, seq: Sequence):
        zone = self.zones.pop(0) if self.zones else Zone.CENTER
        assert zone in seq
        return zone


class Recorder:
    def __init__(self) -> None:
        self.calls: List[Tuple[int, int]] = []

    def __call__(self, score: int, level: int) -> None:
        self.calls.append((score, level))

    @property
    def last(self) -> Optional[Tuple[int, int]]:
        return self.calls[-1] if self.calls else None


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def rng() -> ScriptedRandom:
    return ScriptedRandom()


@pytest.fixture()
def listener() -> Recorder:
    return Recorder()


@pytest.fixture()
def session(scheduler: ManualScheduler, rng: ScriptedRandom, listener: Recorder) -> GameSession:
    return GameSession(scheduler=scheduler, rng=rng, on_game_end=listener)
