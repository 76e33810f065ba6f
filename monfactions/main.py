"""
Monster Factions - Command Line Entry Point

Loads monster faction definitions from a content directory, finalizes the
faction tree and answers attitude queries. Useful for checking faction
content before shipping it to the game.
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from monfactions.content_loader import DEFAULT_FACTION_DIR, load_monster_factions
from monfactions.factions import Attitude, FactionConfig, MonsterFactionRegistry
from monfactions.observability import DiagnosticLog


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class AppConfig:
    """Configuration for a command line run."""

    content_dir: Path = field(default_factory=lambda: DEFAULT_FACTION_DIR)
    recursive: bool = False

    # Resolution rules
    fallback_attitude: Attitude = Attitude.FRIENDLY
    empty_parent_is_unset: bool = True
    regraft_cycles: bool = True

    # Runtime options
    verbose: bool = False

    def __post_init__(self):
        """Ensure paths and attitudes are the right types."""
        if isinstance(self.content_dir, str):
            self.content_dir = Path(self.content_dir)
        if not isinstance(self.fallback_attitude, Attitude):
            self.fallback_attitude = Attitude.from_string(self.fallback_attitude)

    def faction_config(self) -> FactionConfig:
        """Resolution rules for the faction registry."""
        return FactionConfig(
            fallback_attitude=self.fallback_attitude,
            empty_parent_is_unset=self.empty_parent_is_unset,
            regraft_cycles=self.regraft_cycles,
        )


# =============================================================================
# OUTPUT
# =============================================================================

def format_faction_table(registry: MonsterFactionRegistry) -> str:
    """Format registered factions as an aligned text table."""
    rows = [("ID", "NAME", "BASE", "ATTITUDES")]
    for faction in registry:
        base = registry.name_of(faction.base_faction) if faction.has_parent else "-"
        rows.append((str(faction.id), repr(faction.name), repr(base), str(len(faction.attitude_map))))

    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    return "\n".join(
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    )


def format_query(registry: MonsterFactionRegistry, subject: str, other: str) -> str:
    """Resolve and format a single attitude query."""
    for name in (subject, other):
        if not registry.is_valid(name):
            return f"{subject} -> {other}: unknown faction {name!r}"
    return f"{subject} -> {other}: {registry.attitude_by_name(subject, other).value}"


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Monster Factions - load, finalize and query monster faction content",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  monfactions                                    # Load bundled factions
  monfactions --content-dir mods/my_mod --list   # Show a mod's faction tree
  monfactions --query ZOMBIE human               # Ask how zombies treat humans
  monfactions --dump                             # Dump the finalized registry
        """
    )

    parser.add_argument(
        "--content-dir",
        type=Path,
        default=DEFAULT_FACTION_DIR,
        help="Directory containing monster faction JSON files",
    )
    parser.add_argument(
        "--recursive",
        action="store_true",
        help="Search the content directory recursively",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    # Resolution options
    rules_group = parser.add_argument_group("Resolution Options")
    rules_group.add_argument(
        "--fallback",
        type=str,
        default=Attitude.FRIENDLY.value,
        choices=[a.value for a in Attitude],
        help="Attitude returned when no relation is found (default: friendly)",
    )
    rules_group.add_argument(
        "--keep-empty-parent",
        action="store_true",
        help='Register base_faction "" as a real faction instead of "no parent"',
    )
    rules_group.add_argument(
        "--no-regraft",
        action="store_true",
        help="Do not copy root attitudes into factions recovered from cycles",
    )

    # Output options
    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--query",
        nargs=2,
        action="append",
        default=[],
        metavar=("SUBJECT", "TARGET"),
        help="Print SUBJECT's attitude toward TARGET (repeatable)",
    )
    output_group.add_argument(
        "--list",
        action="store_true",
        help="List all factions with their base faction",
    )
    output_group.add_argument(
        "--dump",
        action="store_true",
        help="Dump the finalized registry as JSON",
    )

    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> AppConfig:
    """Create AppConfig from parsed arguments."""
    return AppConfig(
        content_dir=args.content_dir,
        recursive=args.recursive,
        fallback_attitude=args.fallback,
        empty_parent_is_unset=not args.keep_empty_parent,
        regraft_cycles=not args.no_regraft,
        verbose=args.verbose,
    )


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI usage."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    config = create_config_from_args(args)

    diagnostics = DiagnosticLog(name="cli")
    registry = MonsterFactionRegistry(config=config.faction_config(), diagnostics=diagnostics)
    bootstrap = load_monster_factions(
        config.content_dir,
        registry=registry,
        recursive=config.recursive,
    )
    load_result = bootstrap.load_result

    print(
        f"Loaded {load_result.total_records_loaded} faction records "
        f"({len(registry)} factions) from {load_result.files_successful}/"
        f"{load_result.files_processed} files in {config.content_dir}"
    )
    for error in load_result.errors:
        print(f"  error: {error}")
    for warning in load_result.warnings:
        print(f"  warning: {warning}")

    if not load_result.total_records_loaded:
        return 1

    if args.list:
        print()
        print(format_faction_table(registry))

    if args.dump:
        print()
        print(json.dumps(registry.to_dict(), indent=2))

    if args.query:
        print()
        for subject, other in args.query:
            print(format_query(registry, subject, other))

    if len(diagnostics):
        print()
        print(diagnostics.format_log())

    return 0


if __name__ == "__main__":
    sys.exit(main())
