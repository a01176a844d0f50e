"""TaskRunner — fire-and-forget execution of triggered tasks.

Triggers fire on the bus dispatch thread.  Running task actions there would
let one slow action stall every later notification, and an action that
makes the server print more output would feed straight back into the
dispatch.  The runner moves each run onto a small thread pool; the trigger
never waits for it.

A failing action is logged, counted on its task, and otherwise ignored:
it cannot unsubscribe the trigger or touch the registry.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor

from craftwatch.events.models import Notification
from craftwatch.exceptions import TaskExecutionError
from craftwatch.logging import bind_context, clear_context, get_logger
from craftwatch.tasker.models import Task

log = get_logger(__name__)


class TaskRunner:
    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="craftwatch-task"
        )
        self._lock = threading.Lock()
        self._closed = False

    def submit(self, task: Task, notification: Notification) -> Future[None] | None:
        """Schedule *task* for *notification*.  Returns None once shut down."""
        with self._lock:
            if self._closed:
                log.warning("task_dropped", task=task.name, reason="runner_shut_down")
                return None
            future = self._executor.submit(self._run, task, notification)
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks; with *wait*, block until queued runs finish."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _run(task: Task, notification: Notification) -> None:
        bind_context(task=task.name)
        try:
            task.action(notification)
        except Exception as exc:
            error = TaskExecutionError(task.name, str(exc))
            task.fail_count += 1
            task.last_error = error.reason
            log.error(
                "task_failed",
                task=task.name,
                kind=notification.kind.value,
                error=error.message,
            )
        else:
            task.run_count += 1
            log.debug("task_completed", task=task.name, kind=notification.kind.value)
        finally:
            clear_context()
