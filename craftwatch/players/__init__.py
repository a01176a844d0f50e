"""Online player tracking."""

from craftwatch.players.models import Player, RegistryStats, normalize_name
from craftwatch.players.registry import PlayerRegistry

__all__ = ["Player", "PlayerRegistry", "RegistryStats", "normalize_name"]
