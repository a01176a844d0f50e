"""BaseTrigger — abstract base class for all tasker triggers.

A trigger listens to exactly one :class:`NotificationKind` on the bus while
it is enabled, and calls its ``fire_callback`` when a notification it is
interested in arrives.

Contract
--------
- ``validate_input(text)`` — pure syntax check of a parameter string
- ``load(parameters)``     — replace the parameters (see below)
- ``enable()`` / ``disable()`` — idempotent subscribe / unsubscribe
- ``enabled``              — True exactly while subscribed

``load`` on an enabled trigger runs disable → replace → enable while holding
the trigger lock.  Notification handling takes the same lock, so a
notification is either matched against the old parameters before the
reload, dropped because the trigger is momentarily disabled, or matched
against the new parameters after it.  The trigger is never subscribed twice.

The ``fire_callback`` signature::

    def on_fire(trigger: BaseTrigger, notification: Notification) -> None:
        ...

Implementations must:
1. Set the class attributes ``trigger_type``, ``name``, ``description``,
   ``parameter_description`` and ``kind``
2. Override ``validate_input`` and ``_apply_parameters`` if they take
   parameters, and ``matches`` if not every notification of ``kind`` fires
"""

from __future__ import annotations

import threading
from abc import ABC
from typing import Callable, ClassVar

from craftwatch.events.bus import NotificationBus
from craftwatch.events.models import Notification, NotificationKind
from craftwatch.logging import get_logger
from craftwatch.tasker.models import TriggerHealth

log = get_logger(__name__)

FireCallback = Callable[["BaseTrigger", Notification], None]


class BaseTrigger(ABC):
    """Abstract base for all triggers."""

    trigger_type: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    parameter_description: ClassVar[str]
    kind: ClassVar[NotificationKind]

    def __init__(self, bus: NotificationBus, fire_callback: FireCallback | None = None) -> None:
        self._bus = bus
        self._fire_callback = fire_callback
        self._parameters = ""
        self._enabled = False
        self._lock = threading.RLock()
        self.health = TriggerHealth()

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    @property
    def parameters(self) -> str:
        return self._parameters

    @property
    def enabled(self) -> bool:
        return self._enabled

    def bind(self, fire_callback: FireCallback | None) -> None:
        """Set the callback invoked when the trigger fires."""
        with self._lock:
            self._fire_callback = fire_callback

    def validate_input(self, text: str) -> bool:
        """Return True if *text* is an acceptable parameter string."""
        return True

    def load(self, parameters: str) -> None:
        """Replace the parameters, re-subscribing if the trigger is enabled.

        Does not validate: callers check ``validate_input`` first.
        """
        with self._lock:
            if self._enabled:
                self.disable()
                self._set_parameters(parameters)
                self.enable()
            else:
                self._set_parameters(parameters)

    def enable(self) -> None:
        with self._lock:
            if self._enabled:
                return
            self._bus.subscribe(self.kind, self._on_notification)
            self._enabled = True
        log.debug("trigger_enabled", trigger=self.trigger_type, kind=self.kind.value)

    def disable(self) -> None:
        with self._lock:
            if not self._enabled:
                return
            self._bus.unsubscribe(self.kind, self._on_notification)
            self._enabled = False
        log.debug("trigger_disabled", trigger=self.trigger_type)

    def matches(self, notification: Notification) -> bool:
        """Return True if *notification* should fire this trigger."""
        return True

    def fire(self, notification: Notification) -> None:
        """Invoke the fire callback once.  Errors are caught, logged and counted."""
        self.health.record_fire()
        callback = self._fire_callback
        if callback is None:
            return
        try:
            callback(self, notification)
        except Exception as exc:
            self.health.record_fail(str(exc))
            log.error("trigger_fire_callback_error", trigger=self.trigger_type, error=str(exc))

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    def _set_parameters(self, parameters: str) -> None:
        self._parameters = parameters
        self._apply_parameters(parameters)

    def _apply_parameters(self, parameters: str) -> None:
        """Parse *parameters* into trigger state.  Parameterless triggers ignore them."""

    def _on_notification(self, notification: Notification) -> None:
        with self._lock:
            if not self._enabled or not self.matches(notification):
                return
        self.fire(notification)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(parameters={self._parameters!r}, "
            f"enabled={self._enabled})"
        )
