"""QueueChannel — hand notifications to another execution context.

A display layer running on its own thread must not touch its widgets from
the producer thread.  Instead of checking-and-invoking on the owner thread,
it subscribes a channel and drains it from its own loop::

    channel = QueueChannel(bus, [NotificationKind.ADDED, NotificationKind.REMOVED])
    ...
    # on the UI thread, e.g. from a timer
    for notification in channel.drain():
        refresh_player_list(notification)

``put`` never blocks the publisher; order is preserved because the bus
delivers FIFO and the queue is FIFO.
"""

from __future__ import annotations

import queue
from typing import Iterable

from craftwatch.events.bus import NotificationBus
from craftwatch.events.models import Notification, NotificationKind
from craftwatch.logging import get_logger

log = get_logger(__name__)


class QueueChannel:
    def __init__(
        self,
        bus: NotificationBus,
        kinds: Iterable[NotificationKind] = tuple(NotificationKind),
        maxsize: int = 0,
    ) -> None:
        self._bus = bus
        self._kinds = tuple(kinds)
        self._queue: queue.Queue[Notification] = queue.Queue(maxsize=maxsize)
        self.dropped = 0
        self._closed = False
        for kind in self._kinds:
            bus.subscribe(kind, self._put)

    def _put(self, notification: Notification) -> None:
        try:
            self._queue.put_nowait(notification)
        except queue.Full:
            self.dropped += 1
            log.warning("channel_full", kind=notification.kind.value, dropped=self.dropped)

    def get(self, timeout: float | None = None) -> Notification | None:
        """Return the next notification, or None if none arrived within *timeout*."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[Notification]:
        """Return every queued notification without blocking."""
        items: list[Notification] = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                return items

    def __len__(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        """Unsubscribe from the bus.  Already-queued notifications stay readable."""
        if self._closed:
            return
        for kind in self._kinds:
            self._bus.unsubscribe(kind, self._put)
        self._closed = True
