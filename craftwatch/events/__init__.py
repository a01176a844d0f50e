"""Notification layer — registry transitions published to subscribers.

Quick start::

    from craftwatch.events import NotificationBus, NotificationKind

    bus = NotificationBus()
    bus.subscribe(NotificationKind.ADDED, on_player_added)
"""

from craftwatch.events.bus import NotificationBus, NotificationHandler
from craftwatch.events.channel import QueueChannel
from craftwatch.events.models import Notification, NotificationKind

__all__ = [
    "Notification",
    "NotificationBus",
    "NotificationHandler",
    "NotificationKind",
    "QueueChannel",
]
