"""
Attitude resolution between monster factions.

Finalization copies every inherited attitude down into each faction's own
map, so a subject's map is already complete for the factions its ancestors
name. What can still be missing is a more specific *target*: a faction
nobody mentions explicitly. The resolver handles that by substituting the
target's parent and asking again, climbing until a root is reached.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Union

from monfactions.factions.faction_models import Attitude, FactionHandle
from monfactions.observability.diagnostics import DiagnosticKind

if TYPE_CHECKING:
    from monfactions.factions.faction_registry import MonsterFactionRegistry

logger = logging.getLogger(__name__)


def resolve_attitude(
    registry: "MonsterFactionRegistry",
    subject: Union[int, FactionHandle],
    other: Union[int, FactionHandle],
) -> Attitude:
    """
    Resolve the attitude of ``subject`` toward ``other``.

    Resolution order:
    1. Explicit (or inherited) entry for ``other`` in the subject's map
    2. Entry for each ancestor of ``other``, nearest first
    3. The configured fallback, with a NO_RELATION_FOUND diagnostic

    The climb is bounded by the registry size so that queries made before
    finalization (unset or cyclic parents) still terminate.

    Args:
        registry: The registry both factions live in
        subject: Faction whose attitude is asked for
        other: Faction the attitude is directed at

    Returns:
        The resolved Attitude
    """
    source = registry.obj(subject)
    target = registry.obj(other)
    requested = target
    attitudes = source.attitude_map

    for _ in range(len(registry)):
        found = attitudes.get(target.id)
        if found is not None:
            return found

        if target.is_root or not target.has_parent:
            break
        target = registry.obj(target.base_faction)

    registry.diagnostics.report(
        DiagnosticKind.NO_RELATION_FOUND,
        "Invalid faction relations (no relation found): %s -> %s",
        source.name,
        requested.name,
        subject=source.id,
        other=requested.id,
        chain_end=target.id,
    )
    return registry.config.fallback_attitude
