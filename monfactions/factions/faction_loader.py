"""
Monster faction record loader.

Populates registry entries from parsed faction records, one record at a
time. A record names its faction, optionally a base faction, and sets of
relationship overrides (by_mood, neutral, friendly, and optionally hostile):

    {
        "name": "ZOMBIE",
        "base_faction": "zombie",
        "hostile": ["human"],
        "by_mood": ["blob"],
        "neutral": ["fungus"],
        "friendly": ["zombie_boss"]
    }

Names that have not been loaded yet are registered as stubs, so records may
refer to each other in any order. The loader does not validate the parent
graph; that happens during finalization.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional, Protocol

from monfactions.factions.faction_models import ATTITUDE_FIELDS, UNSET_FACTION
from monfactions.observability.diagnostics import DiagnosticKind

if TYPE_CHECKING:
    from monfactions.factions.faction_registry import MonsterFactionRegistry

logger = logging.getLogger(__name__)


class FactionRecord(Protocol):
    """
    Field accessors the loader needs from a parsed record.

    ``get_string(key)`` without a default treats the field as required and
    raises if it is missing; ``get_tags`` yields an empty set for a missing
    field.
    """

    def get_string(self, key: str, default: Optional[str] = None) -> str:
        ...

    def get_tags(self, key: str) -> set[str]:
        ...


class MonsterFactionLoader:
    """
    Loads faction records into a registry.

    Within one record, ``hostile`` is applied first, then ``by_mood``,
    ``neutral`` and ``friendly``; a name listed in several sets keeps the
    last one. Across records, later loads overwrite earlier entries for the
    same pair.
    """

    def __init__(self, registry: "MonsterFactionRegistry"):
        """
        Initialize the loader.

        Args:
            registry: The registry to populate
        """
        self.registry = registry

    def load(self, record: FactionRecord) -> int:
        """
        Load one faction record.

        Args:
            record: Parsed record exposing get_string/get_tags

        Returns:
            Id of the loaded faction, or UNSET_FACTION if the record was
            ignored because the registry is already finalized
        """
        registry = self.registry
        name = record.get_string("name")

        if registry.is_finalized:
            registry.diagnostics.report(
                DiagnosticKind.LATE_MUTATION,
                "monster faction %s loaded after finalization; ignored",
                name,
                name=name,
            )
            return UNSET_FACTION

        # Read every field before touching the registry so a bad record
        # leaves no partial faction behind
        base_name = record.get_string("base_faction", "")
        overrides = [
            # Sorted so that stub ids do not depend on set iteration order
            (attitude, sorted(record.get_tags(field_name)))
            for field_name, attitude in ATTITUDE_FIELDS
        ]

        faction = registry.obj(registry.get_or_add(name))

        if base_name or not registry.config.empty_parent_is_unset:
            faction.base_faction = registry.get_or_add(base_name)
        else:
            faction.base_faction = UNSET_FACTION

        for attitude, target_names in overrides:
            for target_name in target_names:
                faction.set_attitude(registry.get_or_add(target_name), attitude)

        logger.debug(
            f"Loaded monster faction {name} (id {faction.id}, "
            f"base {faction.base_faction}, {len(faction.attitude_map)} attitudes)"
        )
        return faction.id

    def load_many(self, records: Iterable[FactionRecord]) -> int:
        """
        Load several records in order.

        Returns:
            Number of records loaded
        """
        count = 0
        for record in records:
            if self.load(record) != UNSET_FACTION:
                count += 1
        return count
