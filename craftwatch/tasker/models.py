"""Tasker data models.

TriggerHealth   — operational metrics for one trigger (fires, failures)
Task            — a named binding of a trigger to an action
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from craftwatch.events.models import Notification

if TYPE_CHECKING:
    from craftwatch.tasker.triggers.base import BaseTrigger

TaskAction = Callable[[Notification], None]
"""
Signature: def action(notification: Notification) -> None
"""


@dataclass
class TriggerHealth:
    """Operational metrics, updated in-memory on every fire."""

    fire_count: int = 0
    fail_count: int = 0
    last_fired_at: float | None = None
    last_error: str | None = None
    created_at: float = field(default_factory=time.time)

    def record_fire(self) -> None:
        self.fire_count += 1
        self.last_fired_at = time.time()

    def record_fail(self, error: str) -> None:
        self.fail_count += 1
        self.last_error = error


@dataclass
class Task:
    """A trigger bound to an action.

    ``enabled`` is read from the trigger, which is the one place the
    subscription state lives.
    """

    name: str
    trigger: BaseTrigger
    action: TaskAction
    run_count: int = 0
    fail_count: int = 0
    last_error: str | None = None

    @property
    def enabled(self) -> bool:
        return self.trigger.enabled

    @property
    def trigger_type(self) -> str:
        return self.trigger.trigger_type
