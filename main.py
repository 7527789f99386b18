"""Text based driver playing a catcher session on a simulated clock."""

from __future__ import annotations

import random
from typing import List, Tuple

from catcher import GameSession, ItemKind, ManualScheduler, SessionOptions, Zone
from catcher.config import FRAME_RATE
from catcher.models import describe_event

# Noisy labels the way a pose classifier tends to report them.
_LABELS = ["Left", "left hand up", "CENTER", "Centre", "right", "Right-ish", "", "unknown"]


def run_demo(time_limit: int = 20, seed: int = 7) -> None:
    scheduler = ManualScheduler()
    results: List[Tuple[int, int]] = []
    session = GameSession(
        scheduler=scheduler,
        rng=random.Random(seed),
        on_game_end=lambda score, level: results.append((score, level)),
    )
    driver = random.Random(seed + 1)
    print(f"[Session] Starting a {time_limit}s round...")
    session.start(SessionOptions(time_limit=time_limit))
    while session.active:
        # Steer towards the lowest item most of the time, otherwise send noise.
        target = max(session.items, key=lambda item: item.y, default=None)
        if target is not None and driver.random() < 0.8:
            label = target.zone.value.lower() if target.kind is ItemKind.GOOD else _dodge(target.zone)
        else:
            label = driver.choice(_LABELS)
        session.on_position_command(label)
        session.tick()
        scheduler.advance(1.0 / FRAME_RATE)
        for event in session.snapshot().events:
            print(f"[Frame {event['frame']:>5}] {describe_event(event)}")
    score, level = results[-1]
    print(f"[Result] Final score={score}, level={level}, time left={session.remaining_time}s")


def _dodge(zone: Zone) -> str:
    return "Right" if zone is Zone.LEFT else "Left"


if __name__ == "__main__":
    run_demo()
