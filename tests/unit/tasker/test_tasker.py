"""Unit tests — tasker/tasker.py (Tasker)."""

from __future__ import annotations

import threading

import pytest

from craftwatch.config import TaskConfig, TaskerConfig
from craftwatch.events.bus import NotificationBus
from craftwatch.events.models import Notification, NotificationKind
from craftwatch.exceptions import (
    DuplicateTaskError,
    InvalidTriggerParametersError,
    TaskNotFoundError,
    UnknownTriggerError,
)
from craftwatch.players.models import Player
from craftwatch.tasker.actions import LogMessageAction
from craftwatch.tasker.runner import TaskRunner
from craftwatch.tasker.tasker import Tasker
from craftwatch.tasker.triggers import PlayerCountTrigger


class _Collector:
    """Task action that records notifications and signals each call."""

    def __init__(self) -> None:
        self.seen: list[Notification] = []
        self.called = threading.Event()

    def __call__(self, notification: Notification) -> None:
        self.seen.append(notification)
        self.called.set()


@pytest.mark.unit
class TestAddTask:
    def test_add_enabled_task(self, tasker: Tasker, bus: NotificationBus) -> None:
        task = tasker.add_task("greet", "player_joined", _Collector())
        assert task.enabled
        assert task.trigger_type == "player_joined"
        assert bus.subscriber_count(NotificationKind.ADDED) == 1

    def test_add_disabled_task(self, tasker: Tasker, bus: NotificationBus) -> None:
        task = tasker.add_task("greet", "player_joined", _Collector(), enabled=False)
        assert not task.enabled
        assert bus.subscriber_count() == 0

    def test_invalid_parameters_rejected_before_load(self, tasker: Tasker, bus: NotificationBus) -> None:
        with pytest.raises(InvalidTriggerParametersError) as exc_info:
            tasker.add_task("empty", "player_count", _Collector(), parameters="lots")
        assert exc_info.value.parameters == "lots"
        assert tasker.tasks == []
        assert bus.subscriber_count() == 0

    def test_unknown_trigger(self, tasker: Tasker) -> None:
        with pytest.raises(UnknownTriggerError):
            tasker.add_task("x", "moon_phase", _Collector())

    def test_duplicate_name(self, tasker: Tasker, bus: NotificationBus) -> None:
        tasker.add_task("greet", "player_joined", _Collector())
        with pytest.raises(DuplicateTaskError):
            tasker.add_task("greet", "player_left", _Collector())
        assert bus.subscriber_count() == 1


@pytest.mark.unit
class TestFiring:
    def test_fired_task_runs_action(self, tasker: Tasker, bus: NotificationBus) -> None:
        collector = _Collector()
        task = tasker.add_task("bye", "player_left", collector)
        notification = bus.publish(NotificationKind.REMOVED, Player("Alice"), player_count=0)
        assert collector.called.wait(5)
        assert collector.seen == [notification]
        assert task.trigger.health.fire_count == 1

    def test_failing_action_keeps_trigger_enabled(self, bus: NotificationBus) -> None:
        runner = TaskRunner(max_workers=1)
        tasker = Tasker(bus, runner)

        def broken(notification: Notification) -> None:
            raise RuntimeError("boom")

        task = tasker.add_task("broken", "player_joined", broken)
        bus.publish(NotificationKind.ADDED, Player("Alice"))
        bus.publish(NotificationKind.ADDED, Player("Bob"))
        runner.shutdown(wait=True)

        assert task.enabled
        assert task.fail_count == 2
        assert task.last_error == "boom"

    def test_disabled_task_does_not_fire(self, tasker: Tasker, bus: NotificationBus) -> None:
        collector = _Collector()
        tasker.add_task("greet", "player_joined", collector)
        tasker.disable_task("greet")
        bus.publish(NotificationKind.ADDED, Player("Alice"))
        assert not collector.called.wait(0.1)
        tasker.enable_task("greet")
        assert tasker.get_task("greet").enabled


@pytest.mark.unit
class TestManagement:
    def test_configure_task(self, tasker: Tasker, bus: NotificationBus) -> None:
        task = tasker.add_task("empty", "player_count", _Collector(), parameters="0")
        tasker.configure_task("empty", "5")
        assert isinstance(task.trigger, PlayerCountTrigger)
        assert task.trigger.target == 5
        assert bus.subscriber_count(NotificationKind.CHANGED) == 1

    def test_configure_task_rejects_invalid(self, tasker: Tasker) -> None:
        task = tasker.add_task("empty", "player_count", _Collector(), parameters="0")
        with pytest.raises(InvalidTriggerParametersError):
            tasker.configure_task("empty", "-3")
        assert task.trigger.parameters == "0"

    def test_remove_task(self, tasker: Tasker, bus: NotificationBus) -> None:
        tasker.add_task("greet", "player_joined", _Collector())
        removed = tasker.remove_task("greet")
        assert not removed.enabled
        assert bus.subscriber_count() == 0
        with pytest.raises(TaskNotFoundError):
            tasker.get_task("greet")

    def test_remove_unknown(self, tasker: Tasker) -> None:
        with pytest.raises(TaskNotFoundError):
            tasker.remove_task("nope")

    def test_load_config(self, tasker: Tasker) -> None:
        config = TaskerConfig(
            tasks=[
                TaskConfig(name="greet", trigger="player_joined"),
                TaskConfig(name="empty", trigger="player_count", parameters="0", enabled=False),
            ]
        )
        added = tasker.load_config(config)
        assert [t.name for t in added] == ["greet", "empty"]
        assert isinstance(added[0].action, LogMessageAction)
        assert added[0].enabled and not added[1].enabled

    def test_shutdown_disables_all(self, bus: NotificationBus) -> None:
        tasker = Tasker(bus, TaskRunner(max_workers=1))
        tasker.add_task("a", "player_joined", _Collector())
        tasker.add_task("b", "player_left", _Collector())
        tasker.shutdown()
        assert bus.subscriber_count() == 0
        assert all(not t.enabled for t in tasker.tasks)
