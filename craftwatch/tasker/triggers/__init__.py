"""Trigger implementations and the type-id lookup used by configuration.

Usage::

    trigger = create_trigger("player_left", bus)
    trigger.load("")
    trigger.enable()
"""

from __future__ import annotations

from craftwatch.events.bus import NotificationBus
from craftwatch.exceptions import UnknownTriggerError
from craftwatch.tasker.triggers.base import BaseTrigger, FireCallback
from craftwatch.tasker.triggers.player import (
    PlayerCountTrigger,
    PlayerJoinedTrigger,
    PlayerLeftTrigger,
)

TRIGGER_TYPES: dict[str, type[BaseTrigger]] = {
    cls.trigger_type: cls
    for cls in (PlayerJoinedTrigger, PlayerLeftTrigger, PlayerCountTrigger)
}


def create_trigger(
    trigger_type: str,
    bus: NotificationBus,
    fire_callback: FireCallback | None = None,
) -> BaseTrigger:
    """Instantiate the trigger registered under *trigger_type* (disabled)."""
    cls = TRIGGER_TYPES.get(trigger_type)
    if cls is None:
        raise UnknownTriggerError(trigger_type, sorted(TRIGGER_TYPES))
    return cls(bus, fire_callback)


__all__ = [
    "BaseTrigger",
    "FireCallback",
    "PlayerCountTrigger",
    "PlayerJoinedTrigger",
    "PlayerLeftTrigger",
    "TRIGGER_TYPES",
    "create_trigger",
]
