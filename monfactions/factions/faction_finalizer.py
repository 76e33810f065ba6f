"""
Monster faction finalization.

Runs once after all faction records are loaded:
1. Classify factions into roots (self-parented) and children
2. Pick the primary root (first root in registration order)
3. Make every faction friendly to itself unless it says otherwise
4. Attach factions without a declared parent to the primary root
5. Walk the tree breadth-first, copying attitudes the child does not set
6. Report factions that the walk never reached (parent cycles) and graft
   them onto the primary root

Every fault is reported to the registry's diagnostic log; none raise.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from monfactions.factions.faction_models import Attitude, UNSET_FACTION
from monfactions.observability.diagnostics import DiagnosticKind

if TYPE_CHECKING:
    from monfactions.factions.faction_registry import MonsterFactionRegistry

logger = logging.getLogger(__name__)

# parent id -> child ids, in registration order
ChildMap = dict[int, list[int]]


@dataclass
class FinalizeResult:
    """Result of finalizing a faction registry."""
    success: bool
    primary_root: int = UNSET_FACTION
    roots: list[int] = field(default_factory=list)
    adopted: list[int] = field(default_factory=list)
    cycle_members: list[int] = field(default_factory=list)
    double_loads: list[int] = field(default_factory=list)
    inherited_entries: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success,
            "primary_root": self.primary_root,
            "roots": list(self.roots),
            "adopted": list(self.adopted),
            "cycle_members": list(self.cycle_members),
            "double_loads": list(self.double_loads),
            "inherited_entries": self.inherited_entries,
            "errors": list(self.errors),
        }


def _classify(registry: "MonsterFactionRegistry") -> tuple[list[int], ChildMap]:
    """Collect roots and parent -> child edges without mutating anything."""
    roots: list[int] = []
    children: ChildMap = {}
    size = len(registry)

    for faction in registry:
        if faction.is_root:
            roots.append(faction.id)
        elif 0 <= faction.base_faction < size:
            children.setdefault(faction.base_faction, []).append(faction.id)

    return roots, children


def _adopt_orphans(
    registry: "MonsterFactionRegistry",
    primary_root: int,
    children: ChildMap,
) -> list[int]:
    """Attach every faction without a parent to the primary root."""
    adopted: list[int] = []
    for faction in registry:
        if faction.has_parent:
            continue
        faction.base_faction = primary_root
        # The primary root cannot be its own child
        if faction.id != primary_root:
            children.setdefault(primary_root, []).append(faction.id)
            adopted.append(faction.id)
    return adopted


def propagate_inheritance(
    registry: "MonsterFactionRegistry",
    roots: Iterable[int],
    children: ChildMap,
    unvisited: set[int],
) -> tuple[list[int], int]:
    """
    Copy attitudes from parents to children, breadth-first from the roots.

    A child only receives entries it does not already have, so explicit
    overrides always win over inherited values. Visited ids are removed
    from ``unvisited``; anything left afterwards was unreachable.

    Args:
        registry: Registry owning the factions
        roots: Ids to start the walk from
        children: Parent id -> child ids
        unvisited: Ids not yet reached (updated in place)

    Returns:
        Tuple of (ids reached more than once, number of entries copied)
    """
    double_loads: list[int] = []
    inherited = 0
    queue: deque[int] = deque(roots)

    while queue:
        current = queue.popleft()
        if current not in unvisited:
            registry.diagnostics.report(
                DiagnosticKind.DOUBLE_LOAD,
                "Tried to load monster faction %s more than once",
                registry.name_of(current),
                id=current,
            )
            double_loads.append(current)
            continue
        unvisited.discard(current)

        base = registry.obj(current)
        for child_id in children.get(current, ()):
            inherited += registry.obj(child_id).inherit_from(base)
            queue.append(child_id)

    return double_loads, inherited


def _recover_cycles(
    registry: "MonsterFactionRegistry",
    members: list[int],
    primary_root: int,
) -> int:
    """Reparent unreachable factions to the primary root."""
    names = " ".join(registry.name_of(faction_id) for faction_id in members)
    registry.diagnostics.report(
        DiagnosticKind.CYCLE_DETECTED,
        "Cycle encountered when processing monster factions. Bad factions:\n %s",
        names,
        members=list(members),
    )

    root = registry.obj(primary_root)
    inherited = 0
    for faction_id in members:
        faction = registry.obj(faction_id)
        faction.base_faction = primary_root
        if registry.config.regraft_cycles:
            inherited += faction.inherit_from(root)
    return inherited


def finalize_factions(registry: "MonsterFactionRegistry") -> FinalizeResult:
    """
    Finalize a loaded registry.

    Builds the faction tree, propagates inherited attitudes and freezes
    every attitude map. Returns early without changing anything if the
    registry is empty or has no root.

    Args:
        registry: The registry to finalize

    Returns:
        FinalizeResult describing the tree that was built
    """
    if registry.is_finalized:
        registry.diagnostics.report(
            DiagnosticKind.ALREADY_FINALIZED,
            "Monster factions already finalized",
        )
        return registry.finalize_result

    if not len(registry):
        message = "No monster factions found."
        registry.diagnostics.report(DiagnosticKind.EMPTY_REGISTRY, message)
        return FinalizeResult(success=False, errors=[message])

    roots, children = _classify(registry)
    if not roots:
        message = "No valid root monster faction!"
        registry.diagnostics.report(DiagnosticKind.NO_ROOT, message)
        return FinalizeResult(success=False, errors=[message])

    # If more than one root exists, orphans go to the first one
    primary_root = roots[0]

    for faction in registry:
        if faction.id not in faction.attitude_map:
            faction.set_attitude(faction.id, Attitude.FRIENDLY)

    adopted = _adopt_orphans(registry, primary_root, children)

    unvisited = {faction.id for faction in registry}
    double_loads, inherited = propagate_inheritance(registry, roots, children, unvisited)

    cycle_members = sorted(unvisited)
    if cycle_members:
        inherited += _recover_cycles(registry, cycle_members, primary_root)

    result = FinalizeResult(
        success=True,
        primary_root=primary_root,
        roots=roots,
        adopted=adopted,
        cycle_members=cycle_members,
        double_loads=double_loads,
        inherited_entries=inherited,
    )
    if cycle_members:
        result.errors.append(
            f"{len(cycle_members)} monster faction(s) in parent cycles reparented to "
            f"{registry.name_of(primary_root)}"
        )

    registry._mark_finalized(result)
    logger.info(
        f"Finalized {len(registry)} monster factions: {len(roots)} root(s), "
        f"{len(adopted)} adopted, {len(cycle_members)} in cycles, "
        f"{inherited} inherited attitudes"
    )
    return result
