"""Built-in task actions."""

from __future__ import annotations

from craftwatch.events.models import Notification
from craftwatch.logging import get_logger

log = get_logger("craftwatch.tasks")


class LogMessageAction:
    """Log a formatted message when the task runs.

    Placeholders: ``{task}``, ``{player}``, ``{address}``, ``{count}``.
    Unknown placeholders are left as written.
    """

    def __init__(self, task_name: str, message: str) -> None:
        self.task_name = task_name
        self.message = message

    def render(self, notification: Notification) -> str:
        player = notification.player
        values = _Defaults(
            task=self.task_name,
            player=player.display_name if player is not None else "",
            address=player.address if player is not None else "",
            count=notification.player_count,
        )
        try:
            return self.message.format_map(values)
        except (ValueError, IndexError, AttributeError):
            # Malformed braces or positional fields: show the template as-is.
            return self.message

    def __call__(self, notification: Notification) -> None:
        log.info("task_message", task=self.task_name, message=self.render(notification))


class _Defaults(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"
