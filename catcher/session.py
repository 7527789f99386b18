"""Authoritative state machine for one play-through of the catcher game."""

from __future__ import annotations

import itertools
import random
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Protocol, Sequence, TypeVar, Union

from . import config
from .config import SessionOptions
from .models import EndReason, FallingItem, ItemKind, SessionSnapshot, Zone
from .timers import AsyncioScheduler, Scheduler, TimerHandle

T = TypeVar("T")

GameEndListener = Callable[[int, int], None]


class RandomSource(Protocol):
    def random(self) -> float:
        ...

    def choice(self, seq: Sequence[T]) -> T:
        ...


def print_game_over(score: int, level: int) -> None:
    print(f"Game Over! Score: {score} (level {level})")


class GameSession:
    """Owns score, level, countdown and every falling item.

    Two independent drivers feed the session: a frame scheduler calling
    :meth:`tick` and a once-per-second countdown created through
    ``scheduler``.  The session keeps only the countdown's handle.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[RandomSource] = None,
        on_game_end: Optional[GameEndListener] = None,
        notify: GameEndListener = print_game_over,
    ) -> None:
        self.scheduler: Scheduler = scheduler or AsyncioScheduler()
        self.random: RandomSource = rng or random.Random()
        self.on_game_end = on_game_end
        self.notify = notify
        self.score = 0
        self.level = 1
        self.remaining_time = config.DEFAULT_TIME_LIMIT
        self.active = False
        self.catcher_zone = Zone.CENTER
        self.items: List[FallingItem] = []
        self.spawn_timer = 0
        self.frame = 0
        self.end_reason: Optional[EndReason] = None
        self.events: Deque[Dict[str, object]] = deque(maxlen=config.EVENT_LOG_SIZE)
        self._countdown: Optional[TimerHandle] = None
        self._item_ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, options: Optional[Union[SessionOptions, Mapping[str, Any]]] = None) -> None:
        """Reset all state and begin a new countdown.

        Calling ``start`` on an active session restarts it; the previous
        countdown is cancelled before the new one is created.  If the
        scheduler cannot create a countdown the session is left inactive
        with its previous state untouched and the error propagates.
        """
        opts = SessionOptions.coerce(options)
        opts.validate()
        self._cancel_countdown()
        try:
            countdown = self.scheduler.call_every(config.COUNTDOWN_INTERVAL, self._on_countdown)
        except Exception:
            self.active = False
            raise
        self.score = 0
        self.level = 1
        self.remaining_time = opts.time_limit
        self.items.clear()
        self.spawn_timer = 0
        self.frame = 0
        self.catcher_zone = Zone.CENTER
        self.end_reason = None
        self.events.clear()
        self.active = True
        self._countdown = countdown
        self._add_event("start", time_limit=opts.time_limit)

    def stop(self) -> None:
        """Halt the session, keeping its last state readable."""
        if not self.active:
            return
        self.active = False
        self._cancel_countdown()
        if self.end_reason is None:
            self.end_reason = EndReason.STOPPED
            self._add_event("stop", score=self.score, level=self.level)

    def game_over(self, reason: EndReason = EndReason.HAZARD) -> None:
        if not self.active:
            return
        self.end_reason = reason
        self.stop()
        self._add_event("game_over", reason=reason.value, score=self.score, level=self.level)
        if self.on_game_end is not None:
            self.on_game_end(self.score, self.level)
        else:
            self.notify(self.score, self.level)

    def _on_countdown(self) -> None:
        if not self.active:
            return
        self.remaining_time -= 1
        if self.remaining_time <= 0:
            self.remaining_time = 0
            self.game_over(EndReason.TIME_UP)

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def on_position_command(self, label: Optional[str]) -> None:
        """Move the basket from a free-form classifier label.

        Matching is case-insensitive and substring based; LEFT is checked
        before RIGHT before CENTER.  Anything else is ignored.
        """
        text = (label or "").upper()
        for zone in (Zone.LEFT, Zone.RIGHT, Zone.CENTER):
            if zone.value in text:
                self.catcher_zone = zone
                return

    # ------------------------------------------------------------------
    # Update loop
    # ------------------------------------------------------------------
    @property
    def spawn_interval(self) -> int:
        return spawn_interval_for(self.level)

    def tick(self) -> None:
        if not self.active:
            return
        self.frame += 1
        self.spawn_timer += 1
        if self.spawn_timer >= self.spawn_interval:
            self.spawn_item()
            self.spawn_timer = 0
        self._update_items()

    def spawn_item(self) -> FallingItem:
        zone = self.random.choice(list(Zone))
        kind = ItemKind.GOOD if self.random.random() < config.GOOD_ITEM_CHANCE else ItemKind.HAZARD
        item = FallingItem(id=next(self._item_ids), zone=zone, kind=kind, value=kind.score)
        self.items.append(item)
        self._add_event("spawn", item=item.id, zone=zone.value, kind=kind.value)
        return item

    def _update_items(self) -> None:
        # Newest first so removals never shift an item we have yet to visit.
        for index in range(len(self.items) - 1, -1, -1):
            item = self.items[index]
            item.fall(self.level)
            if item.in_collision_band() and self._is_caught(item):
                del self.items[index]
                self.handle_collision(item)
                if not self.active:
                    return
                continue
            if item.is_off_screen():
                del self.items[index]
                self._add_event("despawn", item=item.id)

    def _is_caught(self, item: FallingItem) -> bool:
        return abs(item.x - self.catcher_zone.x) < config.CATCH_DISTANCE

    def handle_collision(self, item: FallingItem) -> None:
        self._add_event("catch", item=item.id, kind=item.kind.value)
        if item.kind is ItemKind.HAZARD:
            self.game_over(EndReason.HAZARD)
            return
        previous_level = self.level
        self.score += item.value
        self.level = level_for_score(self.score)
        if self.level > previous_level:
            self._add_event("level_up", level=self.level)

    # ------------------------------------------------------------------
    # Snapshotting
    # ------------------------------------------------------------------
    def snapshot(self) -> SessionSnapshot:
        """Capture the observable state and drain the event log."""
        snapshot = SessionSnapshot(
            score=self.score,
            level=self.level,
            remaining_time=self.remaining_time,
            active=self.active,
            catcher_zone=self.catcher_zone,
            frame=self.frame,
            items=[
                FallingItem(id=item.id, zone=item.zone, kind=item.kind, value=item.value, y=item.y, speed=item.speed)
                for item in self.items
            ],
            events=list(self.events),
            end_reason=self.end_reason,
        )
        self.events.clear()
        return snapshot

    def _add_event(self, event_type: str, **details: object) -> None:
        self.events.append({"type": event_type, "frame": self.frame, **details})


def spawn_interval_for(level: int) -> int:
    return max(config.MIN_SPAWN_INTERVAL, config.BASE_SPAWN_INTERVAL - level * config.SPAWN_INTERVAL_STEP)


def level_for_score(score: int) -> int:
    return 1 + score // config.POINTS_PER_LEVEL
