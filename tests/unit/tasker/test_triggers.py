"""Unit tests — tasker/triggers (BaseTrigger contract, player triggers, lookup)."""

from __future__ import annotations

import threading

import pytest

from craftwatch.events.bus import NotificationBus
from craftwatch.events.models import Notification, NotificationKind
from craftwatch.exceptions import UnknownTriggerError
from craftwatch.players.models import Player
from craftwatch.tasker.triggers import (
    TRIGGER_TYPES,
    BaseTrigger,
    PlayerCountTrigger,
    PlayerJoinedTrigger,
    PlayerLeftTrigger,
    create_trigger,
)

ALICE = Player("Alice", "1.2.3.4")


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[BaseTrigger, Notification]] = []

    def __call__(self, trigger: BaseTrigger, notification: Notification) -> None:
        self.calls.append((trigger, notification))


@pytest.mark.unit
class TestEnableDisable:
    def test_new_trigger_is_disabled(self, bus: NotificationBus) -> None:
        trigger = PlayerJoinedTrigger(bus)
        assert not trigger.enabled
        assert bus.subscriber_count() == 0

    def test_fires_only_while_enabled(self, bus: NotificationBus) -> None:
        recorder = _Recorder()
        trigger = PlayerJoinedTrigger(bus, recorder)

        bus.publish(NotificationKind.ADDED, ALICE)
        assert recorder.calls == []

        trigger.enable()
        notification = bus.publish(NotificationKind.ADDED, ALICE)
        assert recorder.calls == [(trigger, notification)]

        trigger.disable()
        bus.publish(NotificationKind.ADDED, ALICE)
        assert len(recorder.calls) == 1

    def test_enable_and_disable_are_idempotent(self, bus: NotificationBus) -> None:
        trigger = PlayerLeftTrigger(bus)
        trigger.enable()
        trigger.enable()
        assert bus.subscriber_count(NotificationKind.REMOVED) == 1
        trigger.disable()
        trigger.disable()
        assert bus.subscriber_count() == 0

    def test_listens_to_its_kind_only(self, bus: NotificationBus) -> None:
        recorder = _Recorder()
        PlayerLeftTrigger(bus, recorder).enable()
        bus.publish(NotificationKind.ADDED, ALICE)
        bus.publish(NotificationKind.CHANGED, ALICE)
        assert recorder.calls == []
        bus.publish(NotificationKind.REMOVED, ALICE)
        assert len(recorder.calls) == 1


@pytest.mark.unit
class TestLoad:
    def test_load_on_disabled_trigger_stays_disabled(self, bus: NotificationBus) -> None:
        trigger = PlayerCountTrigger(bus)
        trigger.load("3")
        assert trigger.parameters == "3"
        assert trigger.target == 3
        assert not trigger.enabled
        assert bus.subscriber_count() == 0

    def test_load_on_enabled_trigger_resubscribes_once(self, bus: NotificationBus) -> None:
        trigger = PlayerCountTrigger(bus)
        trigger.load("1")
        trigger.enable()
        for value in ("2", "3", "0"):
            trigger.load(value)
        assert trigger.enabled
        assert trigger.target == 0
        assert bus.subscriber_count(NotificationKind.CHANGED) == 1

    def test_load_concurrent_with_publish_never_double_fires(self, bus: NotificationBus) -> None:
        recorder = _Recorder()
        trigger = PlayerCountTrigger(bus, recorder)
        trigger.load("1")
        trigger.enable()
        stop = threading.Event()

        def reload() -> None:
            while not stop.is_set():
                trigger.load("1")

        thread = threading.Thread(target=reload)
        thread.start()
        try:
            for _ in range(200):
                bus.publish(NotificationKind.CHANGED, ALICE, player_count=1)
        finally:
            stop.set()
            thread.join(timeout=5)

        assert len(recorder.calls) <= 200
        assert bus.subscriber_count(NotificationKind.CHANGED) == 1


@pytest.mark.unit
class TestFire:
    def test_health_records_fires(self, bus: NotificationBus) -> None:
        trigger = PlayerJoinedTrigger(bus, _Recorder())
        trigger.enable()
        bus.publish(NotificationKind.ADDED, ALICE)
        bus.publish(NotificationKind.ADDED, ALICE)
        assert trigger.health.fire_count == 2
        assert trigger.health.last_fired_at is not None

    def test_callback_error_is_counted_and_trigger_stays_enabled(self, bus: NotificationBus) -> None:
        def broken(trigger: BaseTrigger, notification: Notification) -> None:
            raise RuntimeError("boom")

        trigger = PlayerJoinedTrigger(bus, broken)
        trigger.enable()
        bus.publish(NotificationKind.ADDED, ALICE)

        assert trigger.enabled
        assert trigger.health.fail_count == 1
        assert trigger.health.last_error == "boom"

    def test_fire_without_callback(self, bus: NotificationBus) -> None:
        trigger = PlayerJoinedTrigger(bus)
        trigger.enable()
        bus.publish(NotificationKind.ADDED, ALICE)
        assert trigger.health.fire_count == 1

    def test_bind_replaces_callback(self, bus: NotificationBus) -> None:
        first, second = _Recorder(), _Recorder()
        trigger = PlayerJoinedTrigger(bus, first)
        trigger.enable()
        trigger.bind(second)
        bus.publish(NotificationKind.ADDED, ALICE)
        assert first.calls == []
        assert len(second.calls) == 1


@pytest.mark.unit
class TestPlayerCountTrigger:
    @pytest.mark.parametrize("text", ["0", "10", " 5 ", "100000"])
    def test_valid_input(self, bus: NotificationBus, text: str) -> None:
        assert PlayerCountTrigger(bus).validate_input(text)

    @pytest.mark.parametrize("text", ["", "-1", "1.5", "ten", "100001", "²"])
    def test_invalid_input(self, bus: NotificationBus, text: str) -> None:
        assert not PlayerCountTrigger(bus).validate_input(text)

    def test_non_string_input(self, bus: NotificationBus) -> None:
        assert not PlayerCountTrigger(bus).validate_input(None)  # type: ignore[arg-type]

    def test_fires_on_matching_count(self, bus: NotificationBus) -> None:
        recorder = _Recorder()
        trigger = PlayerCountTrigger(bus, recorder)
        trigger.load("0")
        trigger.enable()
        bus.publish(NotificationKind.CHANGED, ALICE, player_count=1)
        bus.publish(NotificationKind.CHANGED, ALICE, player_count=0)
        assert [n.player_count for _, n in recorder.calls] == [0]

    def test_unloaded_trigger_never_fires(self, bus: NotificationBus) -> None:
        recorder = _Recorder()
        trigger = PlayerCountTrigger(bus, recorder)
        trigger.enable()
        bus.publish(NotificationKind.CHANGED, ALICE, player_count=0)
        assert trigger.target is None
        assert recorder.calls == []


@pytest.mark.unit
class TestLookup:
    def test_trigger_types(self) -> None:
        assert set(TRIGGER_TYPES) == {"player_joined", "player_left", "player_count"}

    def test_create_trigger(self, bus: NotificationBus) -> None:
        trigger = create_trigger("player_left", bus)
        assert isinstance(trigger, PlayerLeftTrigger)
        assert not trigger.enabled

    def test_unknown_type(self, bus: NotificationBus) -> None:
        with pytest.raises(UnknownTriggerError) as exc_info:
            create_trigger("server_stopped", bus)
        assert exc_info.value.trigger_type == "server_stopped"
        assert "player_joined" in exc_info.value.context["available"]

    def test_player_left_metadata(self) -> None:
        assert PlayerLeftTrigger.name == "Player leave"
        assert PlayerLeftTrigger.description == "Execute a task when a player leaves"
        assert PlayerLeftTrigger.parameter_description == "No parameters are required"
