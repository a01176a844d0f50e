"""PlayerRegistry — the authoritative list of online players.

The registry is the single owner of player state.  It applies join and
leave actions, and publishes a notification for every committed transition:

    join of a new player     → ADDED, then CHANGED
    leave of a listed player → REMOVED, then CHANGED
    duplicate join           → nothing (counted in ``stats.duplicate_joins``)
    leave of unknown player  → nothing (counted in ``stats.unknown_leaves``)
    chat / unrecognized      → nothing

Thread safety
-------------
One ``threading.Lock`` guards the mapping; every read and write holds it.
Notifications are published after the lock is released, so subscribers that
query the registry see the committed state and a slow subscriber never holds
up other producers.  A subscriber may call :meth:`apply` re-entrantly: the
lock is free at that point and the bus queues the nested notifications.
Both notifications of one transition are queued together with
``publish_many``, so a nested transition is delivered after the CHANGED of
the outer one and CHANGED counts arrive in commit order.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from craftwatch.events.bus import NotificationBus
from craftwatch.events.models import NotificationKind
from craftwatch.logging import get_logger
from craftwatch.output.actions import Action, ActionType, JoinAction, LeaveAction
from craftwatch.players.models import Player, RegistryStats, normalize_name

if TYPE_CHECKING:
    from craftwatch.output.handler import OutputHandler

log = get_logger(__name__)


class PlayerRegistry:
    """Online players keyed by lowercased name.

    Usage::

        registry = PlayerRegistry(bus)
        registry.initialize(output_handler)
        registry.count()
    """

    def __init__(self, bus: NotificationBus) -> None:
        self._bus = bus
        self._players: dict[str, Player] = {}
        self._lock = threading.Lock()
        self._initialized = False
        self.stats = RegistryStats()

    # ---------------------------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------------------------

    def initialize(self, source: OutputHandler | None = None) -> None:
        """Start with an empty player list and consume *source*'s join/leave actions.

        Calling this again after a successful call does nothing.
        """
        with self._lock:
            if self._initialized:
                return
            self._players = {}
            self._initialized = True
        if source is not None:
            source.add_listener(ActionType.JOIN, self.apply)
            source.add_listener(ActionType.LEAVE, self.apply)
        log.debug("registry_initialized", wired=source is not None)

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    # ---------------------------------------------------------------------------
    # Mutation
    # ---------------------------------------------------------------------------

    def apply(self, action: Action) -> None:
        """Apply one classified action to the player list."""
        if isinstance(action, JoinAction):
            self.add_player(Player(action.name, action.address, action.name))
        elif isinstance(action, LeaveAction):
            self.remove_player(action.name)

    def add_player(self, player: Player | None) -> bool:
        """Insert *player* and publish ADDED + CHANGED.

        Returns False, without raising, when the player is malformed or a
        player with the same key is already listed.
        """
        if player is None or not isinstance(player.name, str) or not player.name.strip():
            with self._lock:
                self.stats.rejected += 1
            log.warning("player_rejected", player=repr(player))
            return False

        key = player.key
        with self._lock:
            if key in self._players:
                self.stats.duplicate_joins += 1
                duplicate = True
            else:
                self._players[key] = player
                self.stats.added += 1
                duplicate = False
            count = len(self._players)

        if duplicate:
            log.debug("player_join_ignored", player=player.name, reason="already_listed")
            return False

        log.info("player_added", player=player.name, address=player.address, count=count)
        self._bus.publish_many(
            [
                (NotificationKind.ADDED, player, count),
                (NotificationKind.CHANGED, player, count),
            ]
        )
        return True

    def remove_player(self, name: str) -> Player | None:
        """Remove the player listed under *name* and publish REMOVED + CHANGED.

        Returns the removed player, or None when nobody was listed.
        """
        if not isinstance(name, str) or not name.strip():
            return None

        with self._lock:
            player = self._players.pop(normalize_name(name), None)
            if player is None:
                self.stats.unknown_leaves += 1
            else:
                self.stats.removed += 1
            count = len(self._players)

        if player is None:
            log.debug("player_leave_ignored", player=name, reason="not_listed")
            return None

        log.info("player_removed", player=player.name, count=count)
        self._bus.publish_many(
            [
                (NotificationKind.REMOVED, player, count),
                (NotificationKind.CHANGED, player, count),
            ]
        )
        return player

    # ---------------------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------------------

    def get_all(self) -> list[Player]:
        """Snapshot of the online players; later changes do not affect it."""
        with self._lock:
            return list(self._players.values())

    def get_by_name(self, name: str) -> Player | None:
        if not isinstance(name, str):
            return None
        with self._lock:
            return self._players.get(normalize_name(name))

    def names(self) -> list[str]:
        with self._lock:
            return [p.name for p in self._players.values()]

    def is_listed(self, name: str) -> bool:
        return self.get_by_name(name) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._players)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_listed(name)

    def __len__(self) -> int:
        return self.count()
