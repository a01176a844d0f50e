"""craftwatch — Tasker subsystem.

Reactive automation on top of the player registry: a task binds one trigger
(what to react to) to one action (what to do).

Package structure
-----------------
tasker/
  models.py     — Task, TriggerHealth
  triggers/     — one trigger per notification-driven condition
    base.py     — BaseTrigger ABC (validate / load / enable / disable / fire)
    player.py   — PlayerJoinedTrigger, PlayerLeftTrigger, PlayerCountTrigger
  actions.py    — built-in actions (LogMessageAction)
  runner.py     — TaskRunner, fire-and-forget thread pool
  tasker.py     — Tasker, the configuration layer
"""

from craftwatch.tasker.actions import LogMessageAction
from craftwatch.tasker.models import Task, TaskAction, TriggerHealth
from craftwatch.tasker.runner import TaskRunner
from craftwatch.tasker.tasker import Tasker
from craftwatch.tasker.triggers import (
    TRIGGER_TYPES,
    BaseTrigger,
    PlayerCountTrigger,
    PlayerJoinedTrigger,
    PlayerLeftTrigger,
    create_trigger,
)

__all__ = [
    "BaseTrigger",
    "LogMessageAction",
    "PlayerCountTrigger",
    "PlayerJoinedTrigger",
    "PlayerLeftTrigger",
    "TRIGGER_TYPES",
    "Task",
    "TaskAction",
    "TaskRunner",
    "Tasker",
    "TriggerHealth",
    "create_trigger",
]
