"""NotificationBus — in-process publish/subscribe for registry transitions.

The bus replaces per-event delegates with one explicit register keyed by
:class:`NotificationKind`::

                                     ┌──────────────────┐
  PlayerRegistry ──publish(ADDED)──► │                  │──► PlayerJoinedTrigger
                 ──publish(REMOVED)► │ NotificationBus  │──► PlayerLeftTrigger
                 ──publish(CHANGED)► │                  │──► QueueChannel (display)
                                     └──────────────────┘

Delivery rules
--------------
- Delivery is synchronous: ``publish`` returns after every handler ran,
  unless another dispatch is already in progress (see below).
- The subscriber list is snapshotted when a notification is dispatched.
  Handlers subscribed during that dispatch see only later notifications.
- Publishing while a dispatch is running (a handler that calls back into the
  registry, or a second publishing thread) appends to the pending queue and
  returns.  The active dispatcher delivers it after the current
  notification, so each subscriber observes notifications in publish order
  and a re-entrant publish can never deadlock.
- ``publish_many`` queues several notifications atomically; nothing
  published meanwhile is delivered between them.
- Handler exceptions are logged and swallowed; ``publish`` never raises.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import TYPE_CHECKING, Callable, Iterable

from craftwatch.events.models import Notification, NotificationKind
from craftwatch.logging import get_logger

if TYPE_CHECKING:
    from craftwatch.players.models import Player

log = get_logger(__name__)

NotificationHandler = Callable[[Notification], None]


class NotificationBus:
    """Synchronous publish/subscribe register with FIFO delivery.

    Usage::

        bus = NotificationBus()
        bus.subscribe(NotificationKind.ADDED, lambda n: print(n.player))
        bus.publish(NotificationKind.ADDED, player, player_count=1)
    """

    def __init__(self) -> None:
        self._subscribers: dict[NotificationKind, list[NotificationHandler]] = {
            kind: [] for kind in NotificationKind
        }
        self._pending: deque[Notification] = deque()
        self._dispatching = False
        self._lock = threading.Lock()
        self.published = 0

    # ---------------------------------------------------------------------------
    # Subscription management
    # ---------------------------------------------------------------------------

    def subscribe(self, kind: NotificationKind, handler: NotificationHandler) -> None:
        """Register *handler* for *kind*.

        Registrations are not deduplicated: subscribing the same handler twice
        delivers each notification to it twice.
        """
        with self._lock:
            self._subscribers[kind].append(handler)
        log.debug("bus_subscribed", kind=kind.value, handler=_handler_name(handler))

    def unsubscribe(self, kind: NotificationKind, handler: NotificationHandler) -> bool:
        """Remove the first registration of *handler* for *kind*.

        Bound methods compare equal across attribute lookups, so
        ``unsubscribe(kind, obj.method)`` undoes ``subscribe(kind, obj.method)``.
        Returns False when the handler was not subscribed.
        """
        with self._lock:
            handlers = self._subscribers[kind]
            for i, registered in enumerate(handlers):
                if registered == handler:
                    handlers.pop(i)
                    break
            else:
                return False
        log.debug("bus_unsubscribed", kind=kind.value, handler=_handler_name(handler))
        return True

    def subscriber_count(self, kind: NotificationKind | None = None) -> int:
        with self._lock:
            if kind is not None:
                return len(self._subscribers[kind])
            return sum(len(h) for h in self._subscribers.values())

    # ---------------------------------------------------------------------------
    # Publishing
    # ---------------------------------------------------------------------------

    def publish(
        self,
        kind: NotificationKind,
        payload: Player | None = None,
        player_count: int = 0,
    ) -> Notification:
        """Build a notification for *kind* and hand it to the subscribers.

        When no dispatch is running, this call becomes the dispatcher and
        returns after every handler ran.  When one is already running, on
        this thread (a re-entrant publish) or on another, the notification
        is queued and returns at once.  The active dispatcher then delivers
        it on its own thread.
        """
        notification = Notification(kind=kind, player=payload, player_count=player_count)
        self._enqueue([notification])
        return notification

    def publish_many(
        self, items: Iterable[tuple[NotificationKind, Player | None, int]]
    ) -> list[Notification]:
        """Publish ``(kind, payload, player_count)`` items as one unit.

        All items are queued under a single lock acquisition, so nothing
        published from a handler can be delivered between them.  The registry
        uses this for the ADDED/REMOVED + CHANGED pair of one transition.
        """
        notifications = [
            Notification(kind=kind, player=payload, player_count=count)
            for kind, payload, count in items
        ]
        if notifications:
            self._enqueue(notifications)
        return notifications

    def _enqueue(self, notifications: list[Notification]) -> None:
        with self._lock:
            self.published += len(notifications)
            self._pending.extend(notifications)
            if self._dispatching:
                return
            self._dispatching = True
        self._drain()

    def _drain(self) -> None:
        try:
            while True:
                with self._lock:
                    if not self._pending:
                        self._dispatching = False
                        return
                    notification = self._pending.popleft()
                    handlers = list(self._subscribers[notification.kind])
                for handler in handlers:
                    self._deliver(handler, notification)
        except BaseException:
            with self._lock:
                self._dispatching = False
            raise

    @staticmethod
    def _deliver(handler: NotificationHandler, notification: Notification) -> None:
        try:
            handler(notification)
        except Exception as exc:
            log.error(
                "bus_handler_error",
                kind=notification.kind.value,
                handler=_handler_name(handler),
                error=str(exc),
            )


def _handler_name(handler: NotificationHandler) -> str:
    return getattr(handler, "__qualname__", repr(handler))
