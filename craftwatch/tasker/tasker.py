"""Tasker — named tasks, each a trigger bound to an action.

The Tasker is the configuration layer in front of the triggers: it checks a
parameter string with the trigger's ``validate_input`` before handing it to
``load``, so triggers themselves never see invalid input.

Fire flow::

    NotificationBus dispatch
        ↓
    BaseTrigger._on_notification()   (enabled? matches?)
        ↓
    Tasker._on_trigger_fired()
        ↓
    TaskRunner.submit()              (returns immediately)
        ↓
    task.action(notification)        (on the task pool)
"""

from __future__ import annotations

import threading

from craftwatch.config import TaskerConfig
from craftwatch.events.bus import NotificationBus
from craftwatch.events.models import Notification
from craftwatch.exceptions import (
    DuplicateTaskError,
    InvalidTriggerParametersError,
    TaskNotFoundError,
)
from craftwatch.logging import get_logger
from craftwatch.tasker.actions import LogMessageAction
from craftwatch.tasker.models import Task, TaskAction
from craftwatch.tasker.runner import TaskRunner
from craftwatch.tasker.triggers import BaseTrigger, create_trigger

log = get_logger(__name__)


class Tasker:
    """Owns the tasks and their triggers for one runtime."""

    def __init__(self, bus: NotificationBus, runner: TaskRunner | None = None) -> None:
        self._bus = bus
        self._runner = runner or TaskRunner()
        self._tasks: dict[str, Task] = {}
        self._lock = threading.Lock()

    # ---------------------------------------------------------------------------
    # Task management
    # ---------------------------------------------------------------------------

    def add_task(
        self,
        name: str,
        trigger_type: str,
        action: TaskAction,
        parameters: str = "",
        enabled: bool = True,
    ) -> Task:
        """Create a task with a new trigger of *trigger_type*.

        Raises:
            UnknownTriggerError: No trigger is registered under *trigger_type*.
            InvalidTriggerParametersError: The trigger rejected *parameters*.
            DuplicateTaskError: A task called *name* already exists.
        """
        trigger = create_trigger(trigger_type, self._bus)
        self._check_parameters(trigger, parameters)

        task = Task(name=name, trigger=trigger, action=action)
        with self._lock:
            if name in self._tasks:
                raise DuplicateTaskError(name)
            self._tasks[name] = task

        trigger.bind(lambda _trigger, notification: self._on_trigger_fired(task, notification))
        trigger.load(parameters)
        if enabled:
            trigger.enable()
        log.info("task_added", task=name, trigger=trigger_type, enabled=enabled)
        return task

    def remove_task(self, name: str) -> Task:
        with self._lock:
            task = self._tasks.pop(name, None)
        if task is None:
            raise TaskNotFoundError(name)
        task.trigger.disable()
        task.trigger.bind(None)
        log.info("task_removed", task=name)
        return task

    def get_task(self, name: str) -> Task:
        with self._lock:
            task = self._tasks.get(name)
        if task is None:
            raise TaskNotFoundError(name)
        return task

    @property
    def tasks(self) -> list[Task]:
        with self._lock:
            return list(self._tasks.values())

    def enable_task(self, name: str) -> None:
        self.get_task(name).trigger.enable()

    def disable_task(self, name: str) -> None:
        self.get_task(name).trigger.disable()

    def configure_task(self, name: str, parameters: str) -> None:
        """Validate and load new trigger parameters for task *name*."""
        task = self.get_task(name)
        self._check_parameters(task.trigger, parameters)
        task.trigger.load(parameters)
        log.info("task_configured", task=name, parameters=parameters)

    def load_config(self, config: TaskerConfig) -> list[Task]:
        """Add one log-message task per entry of *config.tasks*."""
        added: list[Task] = []
        for entry in config.tasks:
            added.append(
                self.add_task(
                    entry.name,
                    entry.trigger,
                    LogMessageAction(entry.name, entry.message),
                    parameters=entry.parameters,
                    enabled=entry.enabled,
                )
            )
        return added

    def shutdown(self, wait: bool = True) -> None:
        """Disable every trigger, then stop the task pool."""
        for task in self.tasks:
            task.trigger.disable()
        self._runner.shutdown(wait=wait)

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    @staticmethod
    def _check_parameters(trigger: BaseTrigger, parameters: str) -> None:
        if not trigger.validate_input(parameters):
            raise InvalidTriggerParametersError(
                trigger.trigger_type, parameters, trigger.parameter_description
            )

    def _on_trigger_fired(self, task: Task, notification: Notification) -> None:
        log.debug("task_fired", task=task.name, kind=notification.kind.value)
        self._runner.submit(task, notification)
