"""
Data models for the monster faction system.

These models represent:
- Attitudes one faction holds toward another (Attitude)
- Faction records interned by the registry (MonsterFaction)
- Generation-checked references to registry slots (FactionHandle)
- Resolution rules that tune finalization and lookup (FactionConfig)

Naming notes:
- A faction's *name* is its stable string id; its *id* is the dense int
  index assigned by the registry on first mention.
- UNSET_FACTION marks a parent that has not been assigned yet. It is only
  seen before finalization.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union


# Parent id of a faction whose base faction has not been assigned
UNSET_FACTION = -1


class Attitude(str, Enum):
    """How one faction treats another."""

    FRIENDLY = "friendly"
    NEUTRAL = "neutral"
    BY_MOOD = "by_mood"  # Depends on the individual monster's mood
    HOSTILE = "hostile"

    @classmethod
    def from_string(cls, value: Union[str, "Attitude"]) -> "Attitude":
        """Parse an attitude from its value or name, case-insensitively."""
        if isinstance(value, Attitude):
            return value
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        for attitude in cls:
            if key == attitude.value:
                return attitude
        raise ValueError(f"Unknown attitude: {value!r}")


# Attitude implied when neither a faction nor any ancestor names a relationship
DEFAULT_ATTITUDE = Attitude.HOSTILE

# Record fields holding relationship overrides, in application order
ATTITUDE_FIELDS: tuple[tuple[str, Attitude], ...] = (
    ("hostile", Attitude.HOSTILE),
    ("by_mood", Attitude.BY_MOOD),
    ("neutral", Attitude.NEUTRAL),
    ("friendly", Attitude.FRIENDLY),
)


@dataclass(frozen=True)
class FactionHandle:
    """
    Reference to a registry slot.

    The id is only meaningful for the registry generation it was issued
    under; a registry reset invalidates all outstanding handles.
    """
    id: int
    generation: int


@dataclass
class MonsterFaction:
    """
    A monster faction.

    Created as a stub on first mention and filled in by the loader.
    After finalization ``attitude_map`` is a read-only mapping.
    """
    name: str
    id: int
    base_faction: int = UNSET_FACTION
    attitude_map: Mapping[int, Attitude] = field(default_factory=dict)

    @property
    def is_root(self) -> bool:
        """True if this faction is its own parent."""
        return self.base_faction == self.id

    @property
    def has_parent(self) -> bool:
        """True if a base faction has been assigned."""
        return self.base_faction >= 0

    def explicit_attitude(self, other_id: int) -> Optional[Attitude]:
        """Attitude stored for ``other_id`` without any fallback."""
        return self.attitude_map.get(other_id)

    def set_attitude(self, other_id: int, attitude: Attitude) -> None:
        """
        Set (or overwrite) the attitude toward another faction.

        Raises:
            TypeError: If the faction has been finalized
        """
        self.attitude_map[other_id] = attitude  # type: ignore[index]

    def inherit_from(self, base: "MonsterFaction") -> int:
        """
        Copy the base faction's attitudes that this faction does not set.

        Returns:
            Number of entries copied
        """
        copied = 0
        for other_id, attitude in base.attitude_map.items():
            if other_id not in self.attitude_map:
                self.set_attitude(other_id, attitude)
                copied += 1
        return copied

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "name": self.name,
            "id": self.id,
            "base_faction": self.base_faction,
            "attitude_map": {
                str(other_id): attitude.value
                for other_id, attitude in sorted(self.attitude_map.items())
            },
        }


# =============================================================================
# RULES CONFIGURATION
# =============================================================================


@dataclass
class FactionConfig:
    """
    Rules for finalization and attitude lookup.

    Attributes:
        fallback_attitude: Returned when the resolver exhausts the target's
            parent chain without finding an entry
        empty_parent_is_unset: Treat ``base_faction: ""`` as "no parent
            declared" instead of registering a faction named ""
        regraft_cycles: After cycle recovery, copy the primary root's
            attitudes into the reparented factions
    """
    fallback_attitude: Attitude = Attitude.FRIENDLY
    empty_parent_is_unset: bool = True
    regraft_cycles: bool = True

    def __post_init__(self):
        """Accept attitude names from configuration files and the CLI."""
        if not isinstance(self.fallback_attitude, Attitude):
            self.fallback_attitude = Attitude.from_string(self.fallback_attitude)
