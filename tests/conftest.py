"""Shared pytest fixtures for the craftwatch test suite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Generator

import pytest
import structlog

from craftwatch.config import Settings, override_settings
from craftwatch.events.bus import NotificationBus
from craftwatch.events.models import Notification, NotificationKind
from craftwatch.output.handler import OutputHandler
from craftwatch.players.registry import PlayerRegistry
from craftwatch.tasker.runner import TaskRunner
from craftwatch.tasker.tasker import Tasker


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Undo configure_logging() calls made by CLI tests."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers = []


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    settings = Settings(logging={"level": "debug", "format": "console", "file": None})
    override_settings(settings)
    return settings


# ---------------------------------------------------------------------------
# Pipeline components
# ---------------------------------------------------------------------------


@pytest.fixture
def bus() -> NotificationBus:
    return NotificationBus()


@pytest.fixture
def output_handler() -> OutputHandler:
    return OutputHandler()


@pytest.fixture
def registry(bus: NotificationBus, output_handler: OutputHandler) -> PlayerRegistry:
    registry = PlayerRegistry(bus)
    registry.initialize(output_handler)
    return registry


@pytest.fixture
def recorded(bus: NotificationBus) -> list[Notification]:
    """Every notification published on ``bus``, in delivery order."""
    seen: list[Notification] = []
    for kind in NotificationKind:
        bus.subscribe(kind, seen.append)
    return seen


@pytest.fixture
def runner() -> Generator[TaskRunner, None, None]:
    runner = TaskRunner(max_workers=2)
    yield runner
    runner.shutdown(wait=True)


@pytest.fixture
def tasker(bus: NotificationBus, runner: TaskRunner) -> Tasker:
    return Tasker(bus, runner)
