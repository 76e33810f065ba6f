"""
Monster Faction Registry.

Interns faction names and assigns each a small dense integer id. Backs both
id -> record and name -> id lookup, and is the only place factions are
created.

Usage:
    registry = MonsterFactionRegistry()
    loader = MonsterFactionLoader(registry)
    for record in records:
        loader.load(record)
    registry.finalize()

    zombie = registry.id_of("ZOMBIE")
    human = registry.id_of("human")
    registry.attitude(zombie, human)  # Attitude.HOSTILE

The module also keeps a process-wide default registry for engine code that
refers to factions programmatically (get_or_add_faction, attitude, ...).
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterator, Optional, Union

from monfactions.factions.faction_models import (
    Attitude,
    FactionConfig,
    FactionHandle,
    MonsterFaction,
    UNSET_FACTION,
)
from monfactions.factions.faction_resolver import resolve_attitude
from monfactions.observability.diagnostics import (
    DiagnosticKind,
    DiagnosticLog,
    get_diagnostic_log,
)

if TYPE_CHECKING:
    from monfactions.factions.faction_finalizer import FinalizeResult
    from monfactions.factions.faction_loader import FactionRecord

logger = logging.getLogger(__name__)

FactionRef = Union[int, FactionHandle]


class MonsterFactionRegistry:
    """
    Append-only table of monster factions.

    Ids are dense: the faction registered first gets id 0, the next id 1,
    and so on. ``get_or_add`` is the only way to grow the table.

    Lookups are fail-soft. An unknown id or name reports a diagnostic and
    resolves to faction 0 instead of raising, so bad content never stops
    the game from starting.
    """

    def __init__(
        self,
        config: Optional[FactionConfig] = None,
        diagnostics: Optional[DiagnosticLog] = None,
    ):
        """
        Initialize an empty registry.

        Args:
            config: Finalization and lookup rules (defaults if omitted)
            diagnostics: Sink for soft faults (process-wide log if omitted)
        """
        self.config = config or FactionConfig()
        self.diagnostics = diagnostics if diagnostics is not None else get_diagnostic_log()

        # Primary index: id -> faction
        self._factions: list[MonsterFaction] = []

        # Secondary index: name -> id
        self._name_index: dict[str, int] = {}

        self._generation: int = 0
        self._finalized: bool = False
        self._finalize_result: Optional["FinalizeResult"] = None

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def get_or_add(self, name: str) -> int:
        """
        Get the id for a faction name, registering a stub if it is new.

        Stubs have no parent and no attitudes until a record for them is
        loaded, which lets records refer to factions defined later.

        Args:
            name: The faction's unique name

        Returns:
            The faction's id
        """
        found = self._name_index.get(name)
        if found is not None:
            return found

        faction_id = len(self._factions)
        faction = MonsterFaction(name=name, id=faction_id)
        if self._finalized:
            logger.warning(f"Monster faction {name!r} registered after finalization")
            faction.attitude_map = MappingProxyType({})

        self._factions.append(faction)
        self._name_index[name] = faction_id
        return faction_id

    def handle(self, name: str) -> FactionHandle:
        """Get or add a faction and return a generation-checked handle."""
        return FactionHandle(id=self.get_or_add(name), generation=self._generation)

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def obj(self, faction: FactionRef) -> MonsterFaction:
        """
        Get a faction record by id or handle.

        Out-of-range ids and stale handles report a diagnostic and return
        faction 0.

        Raises:
            IndexError: If the registry is empty (nothing to fall back to)
        """
        faction_id = self._index_of(faction)
        if 0 <= faction_id < len(self._factions):
            return self._factions[faction_id]

        if not self._factions:
            raise IndexError("Monster faction registry is empty")
        return self._factions[0]

    def id_of(self, name: str) -> int:
        """
        Get the id registered for a name.

        Unknown names report a diagnostic and return 0.
        """
        found = self._name_index.get(name)
        if found is None:
            self.diagnostics.report(
                DiagnosticKind.INVALID_STRING_ID,
                "invalid monfaction id %s",
                name,
                name=name,
            )
            return 0
        return found

    def name_of(self, faction: FactionRef) -> str:
        """Get the name of a faction by id or handle."""
        return self.obj(faction).name

    def is_valid(self, name: str) -> bool:
        """Check if a name is registered."""
        return name in self._name_index

    def is_valid_id(self, faction: FactionRef) -> bool:
        """Check if an id (or handle) refers to a current registry slot."""
        if isinstance(faction, FactionHandle):
            if faction.generation != self._generation:
                return False
            faction = faction.id
        return 0 <= faction < len(self._factions)

    def _index_of(self, faction: FactionRef) -> int:
        """Validate an id or handle, reporting faults; -1 if invalid."""
        if isinstance(faction, FactionHandle):
            if faction.generation != self._generation:
                self.diagnostics.report(
                    DiagnosticKind.INVALID_INT_ID,
                    "stale monfaction handle %d (generation %d, registry at %d)",
                    faction.id,
                    faction.generation,
                    self._generation,
                    id=faction.id,
                )
                return UNSET_FACTION
            faction = faction.id

        if not 0 <= faction < len(self._factions):
            self.diagnostics.report(
                DiagnosticKind.INVALID_INT_ID,
                "invalid monfaction id %d",
                faction,
                id=faction,
            )
            return UNSET_FACTION
        return faction

    # =========================================================================
    # LOADING, FINALIZATION AND QUERIES
    # =========================================================================

    def load(self, record: "FactionRecord") -> int:
        """Load one faction record. See MonsterFactionLoader.load."""
        from monfactions.factions.faction_loader import MonsterFactionLoader

        return MonsterFactionLoader(self).load(record)

    def finalize(self) -> "FinalizeResult":
        """Link the faction tree and propagate inherited attitudes."""
        from monfactions.factions.faction_finalizer import finalize_factions

        return finalize_factions(self)

    def attitude(self, subject: FactionRef, other: FactionRef) -> Attitude:
        """
        Get the attitude of ``subject`` toward ``other``.

        Args:
            subject: The faction whose attitude is asked for
            other: The faction it is directed at

        Returns:
            The resolved Attitude
        """
        return resolve_attitude(self, subject, other)

    def attitude_by_name(self, subject: str, other: str) -> Attitude:
        """Get an attitude using faction names instead of ids."""
        return self.attitude(self.id_of(subject), self.id_of(other))

    def _mark_finalized(self, result: "FinalizeResult") -> None:
        """Freeze attitude maps and remember the finalization result."""
        for faction in self._factions:
            faction.attitude_map = MappingProxyType(dict(faction.attitude_map))
        self._finalized = True
        self._finalize_result = result

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    @property
    def finalize_result(self) -> Optional["FinalizeResult"]:
        """Result of the finalization pass (None before finalize)."""
        return self._finalize_result

    @property
    def generation(self) -> int:
        return self._generation

    def names(self) -> list[str]:
        """All registered names in id order."""
        return [f.name for f in self._factions]

    def roots(self) -> list[MonsterFaction]:
        """All self-parented factions in id order."""
        return [f for f in self._factions if f.is_root]

    def reset(self) -> None:
        """Drop all factions and invalidate outstanding handles."""
        self._factions = []
        self._name_index = {}
        self._generation += 1
        self._finalized = False
        self._finalize_result = None
        logger.debug(f"Monster faction registry reset (generation {self._generation})")

    def to_dict(self) -> dict[str, Any]:
        """Dump the registry for debugging."""
        return {
            "generation": self._generation,
            "finalized": self._finalized,
            "factions": [f.to_dict() for f in self._factions],
        }

    def __len__(self) -> int:
        """Return the number of registered factions."""
        return len(self._factions)

    def __contains__(self, name: object) -> bool:
        """Check if a faction name is registered."""
        return name in self._name_index

    def __iter__(self) -> Iterator[MonsterFaction]:
        """Iterate factions in id order."""
        return iter(list(self._factions))


# Module-level singleton for convenience
_default_registry: Optional[MonsterFactionRegistry] = None


def get_faction_registry() -> MonsterFactionRegistry:
    """
    Get the default MonsterFactionRegistry singleton.

    Returns:
        The shared MonsterFactionRegistry instance
    """
    global _default_registry
    if _default_registry is None:
        _default_registry = MonsterFactionRegistry()
    return _default_registry


def reset_faction_registry() -> None:
    """Reset the default registry singleton (useful for testing)."""
    global _default_registry
    _default_registry = None


def get_or_add_faction(name: str) -> int:
    """Get or register a faction in the default registry."""
    return get_faction_registry().get_or_add(name)


def load_monster_faction(record: "FactionRecord") -> int:
    """Load a faction record into the default registry."""
    return get_faction_registry().load(record)


def finalize_monster_factions() -> "FinalizeResult":
    """Finalize the default registry."""
    return get_faction_registry().finalize()


def attitude(subject: FactionRef, other: FactionRef) -> Attitude:
    """Attitude of ``subject`` toward ``other`` in the default registry."""
    return get_faction_registry().attitude(subject, other)
