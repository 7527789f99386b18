"""Data models shared by the session, the drivers and the renderers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from . import config


class Zone(str, Enum):
    """One of the three horizontal lanes the basket can occupy."""

    LEFT = "LEFT"
    CENTER = "CENTER"
    RIGHT = "RIGHT"

    @property
    def x(self) -> int:
        return config.ZONE_X[self.value]


class ItemKind(str, Enum):
    GOOD = "GOOD"
    HAZARD = "HAZARD"

    @property
    def label(self) -> str:
        return config.ITEM_STATS[self.value]["name"]

    @property
    def score(self) -> int:
        return config.ITEM_STATS[self.value]["score"]

    @property
    def icon(self) -> str:
        return config.ITEM_STATS[self.value]["icon"]


class EndReason(str, Enum):
    """Why the last session stopped."""

    HAZARD = "hazard"
    TIME_UP = "time_up"
    STOPPED = "stopped"


@dataclass(slots=True)
class FallingItem:
    """A single object falling towards the basket."""

    id: int
    zone: Zone
    kind: ItemKind
    value: int
    y: float = config.SPAWN_Y
    speed: float = config.BASE_FALL_SPEED

    @property
    def x(self) -> int:
        return self.zone.x

    def fall(self, level: int) -> None:
        """Advance one frame; higher levels fall faster."""

        self.y += self.speed + level * config.FALL_SPEED_PER_LEVEL

    def in_collision_band(self) -> bool:
        return config.COLLISION_TOP <= self.y < config.COLLISION_BOTTOM

    def is_off_screen(self) -> bool:
        return self.y > config.DESPAWN_Y

    def serialise(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "zone": self.zone.value,
            "x": self.x,
            "y": self.y,
            "kind": self.kind.value,
            "type": self.kind.label,
            "icon": self.kind.icon,
            "value": self.value,
        }


@dataclass(slots=True)
class SessionSnapshot:
    """Read-only view of a session handed to renderers."""

    score: int
    level: int
    remaining_time: int
    active: bool
    catcher_zone: Zone
    frame: int
    items: List[FallingItem] = field(default_factory=list)
    events: List[Dict[str, object]] = field(default_factory=list)
    end_reason: Optional[EndReason] = None

    def serialise(self) -> Dict[str, object]:
        data = asdict(self)
        data.update({
            "catcher_zone": self.catcher_zone.value,
            "catcher_x": self.catcher_zone.x,
            "items": [item.serialise() for item in self.items],
            "end_reason": self.end_reason.value if self.end_reason else None,
        })
        return data


def describe_event(event: Dict[str, object]) -> str:
    """One-line, human readable form of a session event."""

    kind = str(event["type"])
    if kind == "spawn":
        return f"item {event['item']} ({event['kind']}) dropped in {event['zone']}"
    if kind == "catch":
        return f"caught item {event['item']} ({event['kind']})"
    if kind == "level_up":
        return f"level up -> {event['level']}"
    if kind == "despawn":
        return f"item {event['item']} fell past the basket"
    if kind == "game_over":
        return f"game over ({event['reason']})"
    return kind.replace("_", " ")
