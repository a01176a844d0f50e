"""Player records held by the registry."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Player:
    """A connected player.  Identity is the lowercased login name."""

    name: str
    address: str = ""
    display_name: str = ""

    def __post_init__(self) -> None:
        if not self.display_name:
            object.__setattr__(self, "display_name", self.name)

    @property
    def key(self) -> str:
        return normalize_name(self.name)


@dataclass
class RegistryStats:
    """Counters for transitions and for the joins/leaves the registry ignored.

    Duplicate joins and unknown leaves are legal no-ops, but a growing count
    usually means the upstream stream lost lines (a missed leave, for
    example), so they are tracked instead of silently dropped.
    """

    added: int = 0
    removed: int = 0
    duplicate_joins: int = 0
    unknown_leaves: int = 0
    rejected: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def normalize_name(name: str) -> str:
    return name.strip().lower()
