"""
Observability for the monster faction subsystem.

Provides the diagnostic log that records every soft fault (invalid ids,
missing roots, cycles, unresolved relations) detected while loading,
finalizing and querying factions.
"""

from monfactions.observability.diagnostics import (
    DiagnosticEvent,
    DiagnosticKind,
    DiagnosticLog,
    get_diagnostic_log,
    reset_diagnostic_log,
)

__all__ = [
    "DiagnosticEvent",
    "DiagnosticKind",
    "DiagnosticLog",
    "get_diagnostic_log",
    "reset_diagnostic_log",
]
