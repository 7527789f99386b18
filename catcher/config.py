"""Configuration constants and start options for the catcher game.

The playfield is a 600x600 square.  Items fall from above the top edge and
are resolved against the basket when they pass through the collision band
near the bottom of the screen.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

PLAYFIELD_WIDTH = 600
PLAYFIELD_HEIGHT = 600
FRAME_RATE = 60  # render frames per second
COUNTDOWN_INTERVAL = 1.0  # seconds between countdown firings

DEFAULT_TIME_LIMIT = 60

# Horizontal lanes, at 1/6, 3/6 and 5/6 of the playfield width.
ZONE_X = {
    "LEFT": 100,
    "CENTER": 300,
    "RIGHT": 500,
}

# Spawn pacing.  Level 1 spawns every 56 frames, level 10 and above every 20.
BASE_SPAWN_INTERVAL = 60
SPAWN_INTERVAL_STEP = 4
MIN_SPAWN_INTERVAL = 20

SPAWN_Y = -50.0  # just above the visible top edge
BASE_FALL_SPEED = 3.0
FALL_SPEED_PER_LEVEL = 0.5

# Vertical band where items can be caught (lower bound inclusive).
COLLISION_TOP = 500.0
COLLISION_BOTTOM = 550.0
CATCH_DISTANCE = 50.0
DESPAWN_Y = 650.0

BASKET_Y = 530
POINTS_PER_LEVEL = 1000

GOOD_ITEM_CHANCE = 0.7

# Item tuning keyed by item kind.
ITEM_STATS = {
    "GOOD": {"name": "APPLE", "score": 100, "icon": "\N{RED APPLE}"},
    "HAZARD": {"name": "BOMB", "score": 0, "icon": "\N{BOMB}"},
}

EVENT_LOG_SIZE = 50


@dataclass(frozen=True)
class SessionOptions:
    """Options accepted by ``GameSession.start``.

    Attributes
    ----------
    time_limit:
        Length of the session in whole seconds.  The countdown removes one
        second per firing and ends the game once it reaches zero.
    """

    time_limit: int = DEFAULT_TIME_LIMIT

    def validate(self) -> None:
        if isinstance(self.time_limit, bool) or not isinstance(self.time_limit, int):
            raise ValueError("time_limit must be an integer number of seconds")
        if self.time_limit <= 0:
            raise ValueError("time_limit must be positive")

    @classmethod
    def coerce(
        cls, options: Optional[Union["SessionOptions", Mapping[str, Any]]]
    ) -> "SessionOptions":
        """Build options from ``None``, an instance or a plain mapping.

        Mappings may use either ``time_limit`` or the client style
        ``timeLimit`` key.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        time_limit = options.get("time_limit", options.get("timeLimit", DEFAULT_TIME_LIMIT))
        return cls(time_limit=time_limit)
