"""Triggers driven by player list transitions."""

from __future__ import annotations

from craftwatch.events.models import Notification, NotificationKind
from craftwatch.tasker.triggers.base import BaseTrigger


class PlayerJoinedTrigger(BaseTrigger):
    trigger_type = "player_joined"
    name = "Player join"
    description = "Execute a task when a player joins"
    parameter_description = "No parameters are required"
    kind = NotificationKind.ADDED


class PlayerLeftTrigger(BaseTrigger):
    trigger_type = "player_left"
    name = "Player leave"
    description = "Execute a task when a player leaves"
    parameter_description = "No parameters are required"
    kind = NotificationKind.REMOVED


class PlayerCountTrigger(BaseTrigger):
    """Fires whenever the player list changes to exactly N players.

    ``0`` fires when the server empties, which is the usual hook for
    "save and back up once everybody is gone".
    """

    trigger_type = "player_count"
    name = "Player count"
    description = "Execute a task when the number of online players reaches a value"
    parameter_description = "The player count to react to, e.g. 0 or 10"
    kind = NotificationKind.CHANGED

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._target: int | None = None

    @property
    def target(self) -> int | None:
        return self._target

    def validate_input(self, text: str) -> bool:
        if not isinstance(text, str):
            return False
        value = text.strip()
        return value.isdecimal() and int(value) <= 100_000

    def _apply_parameters(self, parameters: str) -> None:
        # Unvalidated input leaves the trigger inert rather than failing.
        self._target = int(parameters.strip()) if self.validate_input(parameters) else None

    def matches(self, notification: Notification) -> bool:
        return self._target is not None and notification.player_count == self._target
