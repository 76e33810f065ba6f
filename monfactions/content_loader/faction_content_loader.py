"""
Monster faction content loader.

Loads MONSTER_FACTION records from JSON files (by default the content
bundled in monfactions/data/monster_factions) and feeds them to the faction
loader.

Accepted file layouts:

    [                                   # list of typed objects
        {"type": "MONSTER_FACTION", "name": "zombie", "base_faction": ""},
        {"type": "MONSTER_FACTION", "name": "ZOMBIE", "base_faction": "zombie"}
    ]

    {                                   # items wrapper
        "_metadata": {"note": "..."},
        "items": [{"name": "animal", "base_faction": "animal"}]
    }

    {"name": "animal", "base_faction": "animal"}    # single object

Objects with a ``type`` other than MONSTER_FACTION are skipped, so the
loader can be pointed at mixed content directories.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from monfactions.content_loader.json_record import JsonFactionRecord, MonfactionsError
from monfactions.factions.faction_finalizer import FinalizeResult
from monfactions.factions.faction_loader import MonsterFactionLoader
from monfactions.factions.faction_models import UNSET_FACTION
from monfactions.factions.faction_registry import (
    MonsterFactionRegistry,
    get_faction_registry,
)

logger = logging.getLogger(__name__)

FACTION_TYPE = "MONSTER_FACTION"

# Bundled content shipped inside the package
DEFAULT_FACTION_DIR = Path(__file__).parent.parent / "data" / "monster_factions"


@dataclass
class FactionFileLoadResult:
    """Result of loading a single faction JSON file."""
    file_path: Path
    success: bool
    records_loaded: int = 0
    records_failed: int = 0
    records_skipped: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class FactionDirectoryLoadResult:
    """Result of loading all faction files from a directory."""
    directory: Path
    files_processed: int = 0
    files_successful: int = 0
    files_failed: int = 0
    total_records_loaded: int = 0
    total_records_failed: int = 0
    file_results: list[FactionFileLoadResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True if at least one record loaded and no file was unreadable."""
        return self.total_records_loaded > 0 and self.files_failed == 0


def _extract_objects(data: Any) -> list[Any]:
    """Get the list of candidate objects from a decoded JSON document."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if "items" in data:
            items = data["items"]
            return items if isinstance(items, list) else [items]
        return [data]
    return [data]


def _is_faction_object(obj: Any) -> bool:
    """True for objects that should be treated as faction records."""
    if not isinstance(obj, dict):
        return True  # Let the record adapter report the type error
    kind = obj.get("type")
    return kind is None or (isinstance(kind, str) and kind.upper() == FACTION_TYPE)


class FactionContentLoader:
    """
    Loads monster faction JSON content into a registry.

    Usage:
        registry = MonsterFactionRegistry()
        content = FactionContentLoader(registry)

        # Load all faction files from a directory
        result = content.load_directory(Path("mods/undead/monster_factions"))

        # Or load a single file
        result = content.load_file(Path("mods/undead/monster_factions/zombies.json"))

        registry.finalize()
    """

    def __init__(self, registry: Optional[MonsterFactionRegistry] = None):
        """
        Initialize the content loader.

        Args:
            registry: Registry to populate (process-wide default if omitted)
        """
        self.registry = registry if registry is not None else get_faction_registry()
        self.loader = MonsterFactionLoader(self.registry)

    def load_objects(
        self,
        objects: list[Any],
        source: str = "<memory>",
    ) -> FactionFileLoadResult:
        """
        Load already-decoded JSON objects.

        A bad record is counted and reported without stopping the rest.

        Args:
            objects: Decoded JSON values
            source: Label used in error messages

        Returns:
            FactionFileLoadResult with per-record counts
        """
        result = FactionFileLoadResult(file_path=Path(source), success=True)

        for obj in objects:
            if not _is_faction_object(obj):
                result.records_skipped += 1
                continue
            try:
                record = JsonFactionRecord(obj, source=source)
                if self.loader.load(record) == UNSET_FACTION:
                    result.records_skipped += 1
                else:
                    result.records_loaded += 1
            except MonfactionsError as e:
                result.records_failed += 1
                result.errors.append(str(e))
                logger.error(f"Error loading monster faction from {source}: {e}")

        return result

    def load_file(self, file_path: Path) -> FactionFileLoadResult:
        """
        Load faction records from a single JSON file.

        Args:
            file_path: Path to JSON file

        Returns:
            FactionFileLoadResult with load status
        """
        file_path = Path(file_path)

        if not file_path.exists():
            return FactionFileLoadResult(
                file_path=file_path,
                success=False,
                errors=[f"File not found: {file_path}"],
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse {file_path}: {e}")
            return FactionFileLoadResult(
                file_path=file_path,
                success=False,
                errors=[f"Invalid JSON in {file_path}: {e}"],
            )
        except OSError as e:
            logger.error(f"Error reading {file_path}: {e}")
            return FactionFileLoadResult(
                file_path=file_path,
                success=False,
                errors=[f"Error reading {file_path}: {e}"],
            )

        result = self.load_objects(_extract_objects(data), source=str(file_path))
        result.file_path = file_path
        logger.debug(
            f"Loaded {result.records_loaded} monster factions from {file_path} "
            f"({result.records_failed} failed, {result.records_skipped} skipped)"
        )
        return result

    def load_directory(
        self,
        directory: Path,
        recursive: bool = False,
        pattern: str = "*.json",
    ) -> FactionDirectoryLoadResult:
        """
        Load all faction JSON files from a directory, in sorted path order.

        Args:
            directory: Path to directory containing faction JSON files
            recursive: Search subdirectories recursively
            pattern: Glob pattern for matching files

        Returns:
            FactionDirectoryLoadResult with load statistics
        """
        directory = Path(directory)
        result = FactionDirectoryLoadResult(directory=directory)

        if not directory.exists():
            result.errors.append(f"Directory not found: {directory}")
            logger.error(f"Monster faction directory not found: {directory}")
            return result

        if not directory.is_dir():
            result.errors.append(f"Path is not a directory: {directory}")
            logger.error(f"Path is not a directory: {directory}")
            return result

        json_files = directory.rglob(pattern) if recursive else directory.glob(pattern)
        json_files = sorted(json_files)
        logger.info(f"Found {len(json_files)} JSON files in {directory}")

        for json_file in json_files:
            result.files_processed += 1

            file_result = self.load_file(json_file)
            result.file_results.append(file_result)
            result.total_records_loaded += file_result.records_loaded
            result.total_records_failed += file_result.records_failed
            result.errors.extend(file_result.errors)

            if file_result.success:
                result.files_successful += 1
            else:
                result.files_failed += 1

        if not result.total_records_loaded:
            result.warnings.append(f"No monster faction records loaded from {directory}")

        logger.info(
            f"Loaded {result.total_records_loaded} monster factions from "
            f"{result.files_successful}/{result.files_processed} files"
        )
        return result


@dataclass
class FactionBootstrap:
    """Registry plus the results of loading and finalizing it."""
    registry: MonsterFactionRegistry
    load_result: FactionDirectoryLoadResult
    finalize_result: Optional[FinalizeResult] = None

    @property
    def success(self) -> bool:
        if not self.load_result.total_records_loaded:
            return False
        return self.finalize_result is None or self.finalize_result.success


def load_monster_factions(
    content_dir: Optional[Path] = None,
    registry: Optional[MonsterFactionRegistry] = None,
    finalize: bool = True,
    recursive: bool = False,
) -> FactionBootstrap:
    """
    Convenience function to load and finalize all monster factions.

    Args:
        content_dir: Directory of faction JSON files (project data if omitted)
        registry: Registry to populate (process-wide default if omitted)
        finalize: Finalize the registry after loading
        recursive: Search subdirectories recursively

    Returns:
        FactionBootstrap with the registry and load statistics
    """
    if content_dir is None:
        content_dir = DEFAULT_FACTION_DIR

    content = FactionContentLoader(registry)
    load_result = content.load_directory(Path(content_dir), recursive=recursive)

    finalize_result = None
    if finalize and load_result.total_records_loaded:
        finalize_result = content.registry.finalize()

    return FactionBootstrap(
        registry=content.registry,
        load_result=load_result,
        finalize_result=finalize_result,
    )
