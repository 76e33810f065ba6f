"""Content loading for monster faction definitions."""

from monfactions.content_loader.json_record import (
    JsonFactionRecord,
    MonfactionsError,
    RecordFieldError,
    RecordTypeError,
)
from monfactions.content_loader.faction_content_loader import (
    DEFAULT_FACTION_DIR,
    FACTION_TYPE,
    FactionBootstrap,
    FactionContentLoader,
    FactionDirectoryLoadResult,
    FactionFileLoadResult,
    load_monster_factions,
)

__all__ = [
    # Record adapter
    "JsonFactionRecord",
    "MonfactionsError",
    "RecordFieldError",
    "RecordTypeError",
    # File loading
    "DEFAULT_FACTION_DIR",
    "FACTION_TYPE",
    "FactionBootstrap",
    "FactionContentLoader",
    "FactionDirectoryLoadResult",
    "FactionFileLoadResult",
    "load_monster_factions",
]
