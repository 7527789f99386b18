"""Core package for the pose-controlled fruit catcher game.

The package holds the game session state machine and the small pieces it
needs to run: timers for the countdown, an asyncio frame driver and the
models handed to renderers.  Nothing here depends on a display, so the
whole game loop can be unit tested headless.
"""

from .config import SessionOptions
from .models import EndReason, FallingItem, ItemKind, SessionSnapshot, Zone
from .runner import GameRunner
from .session import GameSession
from .timers import AsyncioScheduler, ManualScheduler

__all__ = [
    "AsyncioScheduler",
    "EndReason",
    "FallingItem",
    "GameRunner",
    "GameSession",
    "ItemKind",
    "ManualScheduler",
    "SessionOptions",
    "SessionSnapshot",
    "Zone",
]
