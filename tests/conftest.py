"""
Pytest fixtures for the monster faction test suite.

Provides isolated registries and diagnostic logs, a record factory, and
resets the process-wide singletons around every test.
"""

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from monfactions.content_loader import JsonFactionRecord
from monfactions.factions import MonsterFactionRegistry, reset_faction_registry
from monfactions.observability import DiagnosticLog, reset_diagnostic_log


# =============================================================================
# SINGLETON ISOLATION
# =============================================================================


@pytest.fixture(autouse=True)
def reset_singletons():
    """Give every test a fresh default registry and diagnostic log."""
    reset_faction_registry()
    reset_diagnostic_log()
    yield
    reset_faction_registry()
    reset_diagnostic_log()


# =============================================================================
# REGISTRY FIXTURES
# =============================================================================


@pytest.fixture
def diagnostics() -> DiagnosticLog:
    """A diagnostic log private to one test."""
    return DiagnosticLog(name="test")


@pytest.fixture
def registry(diagnostics: DiagnosticLog) -> MonsterFactionRegistry:
    """An empty registry reporting to the test's diagnostic log."""
    return MonsterFactionRegistry(diagnostics=diagnostics)


@pytest.fixture
def make_record() -> Callable[..., JsonFactionRecord]:
    """Factory for faction records: make_record(name="zombie", base_faction="monster")."""
    def _make(**fields: Any) -> JsonFactionRecord:
        return JsonFactionRecord(fields, source="test")
    return _make


@pytest.fixture
def load(registry: MonsterFactionRegistry, make_record) -> Callable[..., int]:
    """Load a record built from keyword fields into the test registry."""
    def _load(**fields: Any) -> int:
        return registry.load(make_record(**fields))
    return _load


# =============================================================================
# CONTENT FIXTURES
# =============================================================================


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write a JSON document under tmp_path and return its path."""
    def _write(relative: str, data: Any) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write
