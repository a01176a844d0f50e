"""Runtime — explicit construction of the classification → registry → tasker pipeline.

Nothing in craftwatch is process-global.  ``build_runtime`` creates one
bus, one output handler, one registry and one tasker, wires them together
and returns them in a :class:`Runtime` that the caller owns::

    runtime = build_runtime(Settings.load())
    runtime.start_reader(server.stdout)
    ...
    runtime.shutdown()
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, TextIO

from craftwatch.config import Settings
from craftwatch.events.bus import NotificationBus
from craftwatch.logging import get_logger
from craftwatch.output.actions import Action
from craftwatch.output.handler import OutputHandler
from craftwatch.players.registry import PlayerRegistry
from craftwatch.tasker.runner import TaskRunner
from craftwatch.tasker.tasker import Tasker

log = get_logger(__name__)


@dataclass
class Runtime:
    settings: Settings
    bus: NotificationBus
    output: OutputHandler
    registry: PlayerRegistry
    tasker: Tasker

    def feed(self, line: str) -> Action:
        """Push one line of server output through the pipeline."""
        return self.output.handle_line(line)

    def consume(self, lines: Iterable[str]) -> int:
        return self.output.consume(lines)

    def start_reader(self, stream: TextIO, name: str = "server-output") -> threading.Thread:
        return self.output.start(stream, name=name)

    def shutdown(self, wait: bool = True) -> None:
        """Stop reading, disable all tasks and drain the task pool."""
        self.output.stop(timeout=5.0 if wait else 0)
        self.tasker.shutdown(wait=wait)
        log.info("runtime_stopped", players=self.registry.count())


def build_runtime(settings: Settings | None = None, load_tasks: bool = True) -> Runtime:
    """Create and wire a :class:`Runtime`.

    With *load_tasks*, the tasks listed in ``settings.tasker.tasks`` are
    registered (and raise the usual configuration errors if invalid).
    """
    settings = settings or Settings()
    bus = NotificationBus()
    output = OutputHandler()
    registry = PlayerRegistry(bus)
    registry.initialize(output)
    tasker = Tasker(bus, TaskRunner(max_workers=settings.tasker.max_workers))
    if load_tasks:
        tasker.load_config(settings.tasker)
    log.debug("runtime_built", tasks=len(tasker.tasks))
    return Runtime(settings=settings, bus=bus, output=output, registry=registry, tasker=tasker)
