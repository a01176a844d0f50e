"""Notification models — registry transitions as delivered to subscribers."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from craftwatch.players.models import Player


class NotificationKind(str, Enum):
    """Registry transition kinds.  Values double as topic names in logs."""

    ADDED = "players.added"
    REMOVED = "players.removed"
    CHANGED = "players.changed"


@dataclass(frozen=True)
class Notification:
    """A committed registry transition.

    ``player_count`` is the registry size right after the transition was
    committed, so subscribers do not need to query the registry to learn it.
    """

    kind: NotificationKind
    player: Player | None = None
    player_count: int = 0
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "player": self.player.name if self.player is not None else None,
            "address": self.player.address if self.player is not None else None,
            "player_count": self.player_count,
            "timestamp": self.timestamp,
        }
