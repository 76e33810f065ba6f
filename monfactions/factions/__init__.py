"""
Monster faction system.

This module resolves how groups of monsters treat each other:
- A registry interning faction names to dense integer ids
- A loader applying declarative faction records (parent + attitude sets)
- A one-shot finalizer that links the inheritance tree and propagates
  inherited attitudes
- A resolver answering "what is A's attitude toward B?"

Lifecycle:
- All records are loaded before finalization
- Finalization happens once, before any attitude query
- After finalization attitude maps are read-only
"""

# Data models
from monfactions.factions.faction_models import (
    ATTITUDE_FIELDS,
    DEFAULT_ATTITUDE,
    UNSET_FACTION,
    Attitude,
    FactionConfig,
    FactionHandle,
    MonsterFaction,
)

# Registry
from monfactions.factions.faction_registry import (
    MonsterFactionRegistry,
    attitude,
    finalize_monster_factions,
    get_faction_registry,
    get_or_add_faction,
    load_monster_faction,
    reset_faction_registry,
)

# Loader
from monfactions.factions.faction_loader import (
    FactionRecord,
    MonsterFactionLoader,
)

# Finalizer and resolver
from monfactions.factions.faction_finalizer import (
    FinalizeResult,
    finalize_factions,
    propagate_inheritance,
)
from monfactions.factions.faction_resolver import resolve_attitude

__all__ = [
    # Models
    "ATTITUDE_FIELDS",
    "DEFAULT_ATTITUDE",
    "UNSET_FACTION",
    "Attitude",
    "FactionConfig",
    "FactionHandle",
    "MonsterFaction",
    # Registry
    "MonsterFactionRegistry",
    "attitude",
    "finalize_monster_factions",
    "get_faction_registry",
    "get_or_add_faction",
    "load_monster_faction",
    "reset_faction_registry",
    # Loader
    "FactionRecord",
    "MonsterFactionLoader",
    # Finalizer and resolver
    "FinalizeResult",
    "finalize_factions",
    "propagate_inheritance",
    "resolve_attitude",
]
