"""
Diagnostic log for soft faults in the monster faction subsystem.

Every fault the registry, loader, finalizer or resolver detects is reported
here instead of raised. Reports are forwarded to ``logging`` and kept as
typed events so callers (and tests) can inspect what went wrong after a
content load without parsing log output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Kinds of soft faults that can be reported."""

    INVALID_INT_ID = "invalid_int_id"  # Numeric id out of range or stale
    INVALID_STRING_ID = "invalid_string_id"  # Name not registered
    EMPTY_REGISTRY = "empty_registry"  # Finalize with no factions
    NO_ROOT = "no_root"  # No self-parented faction
    DOUBLE_LOAD = "double_load"  # BFS revisited a faction
    CYCLE_DETECTED = "cycle_detected"  # Factions unreachable from any root
    NO_RELATION_FOUND = "no_relation_found"  # Resolver exhausted the chain
    ALREADY_FINALIZED = "already_finalized"  # Second finalize call
    LATE_MUTATION = "late_mutation"  # Load after finalize


# Structural faults leave the faction tree unusable or partially repaired
_ERROR_KINDS = frozenset(
    {
        DiagnosticKind.EMPTY_REGISTRY,
        DiagnosticKind.NO_ROOT,
        DiagnosticKind.CYCLE_DETECTED,
    }
)


@dataclass
class DiagnosticEvent:
    """A single reported fault."""

    kind: DiagnosticKind
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    sequence_number: int = 0
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.sequence_number}] {self.kind.value.upper()}: {self.message}"


def _format_message(fmt: str, args: tuple[Any, ...]) -> str:
    """printf-style formatting that never raises."""
    if not args:
        return str(fmt)
    try:
        return str(fmt) % args
    except (TypeError, ValueError) as e:
        return f"{fmt!r} % {args!r} (format error: {e})"


class DiagnosticLog:
    """
    Collects diagnostics reported by the faction subsystem.

    Accepts a printf-style format string and arguments, the same calling
    convention as ``logging``. ``report`` never raises: formatting problems
    are folded into the message.
    """

    def __init__(self, name: str = "monfactions"):
        self._name = name
        self._events: list[DiagnosticEvent] = []
        self._sequence: int = 0

    def reset(self) -> None:
        """Clear all recorded events."""
        self._events = []
        self._sequence = 0
        logger.debug(f"DiagnosticLog {self._name} reset")

    def report(
        self,
        kind: DiagnosticKind,
        fmt: str,
        *args: Any,
        **context: Any,
    ) -> DiagnosticEvent:
        """
        Report a soft fault.

        Args:
            kind: The fault category
            fmt: printf-style message format
            *args: Format arguments
            **context: Structured details kept on the event

        Returns:
            The recorded event
        """
        message = _format_message(fmt, args)
        event = DiagnosticEvent(kind=kind, message=message, context=dict(context))

        level = logging.ERROR if kind in _ERROR_KINDS else logging.WARNING
        logger.log(level, f"{kind.value}: {message}")

        self._sequence += 1
        event.sequence_number = self._sequence
        self._events.append(event)

        return event

    def get_events(
        self,
        kind: Optional[DiagnosticKind] = None,
        since_sequence: int = 0,
    ) -> list[DiagnosticEvent]:
        """
        Get recorded events.

        Args:
            kind: Filter by fault kind (None = all)
            since_sequence: Only events after this sequence number

        Returns:
            List of events
        """
        events = [e for e in self._events if e.sequence_number > since_sequence]
        if kind:
            events = [e for e in events if e.kind == kind]
        return events

    def count(self, kind: Optional[DiagnosticKind] = None) -> int:
        """Number of recorded events, optionally of one kind."""
        return len(self.get_events(kind))

    def has_errors(self) -> bool:
        """True if any structural fault was recorded."""
        return any(e.kind in _ERROR_KINDS for e in self._events)

    def __len__(self) -> int:
        return len(self._events)

    def format_log(self, max_events: Optional[int] = None) -> str:
        """
        Format the log as a human-readable string.

        Args:
            max_events: Maximum number of (most recent) events to include

        Returns:
            Formatted log string
        """
        lines = [
            "=== Faction Diagnostics ===",
            f"Total Events: {len(self._events)}",
            "",
        ]

        events = self._events
        if max_events:
            events = events[-max_events:]

        for event in events:
            lines.append(str(event))

        return "\n".join(lines)


# Singleton access
_diagnostic_log: Optional[DiagnosticLog] = None


def get_diagnostic_log() -> DiagnosticLog:
    """Get the process-wide DiagnosticLog instance."""
    global _diagnostic_log
    if _diagnostic_log is None:
        _diagnostic_log = DiagnosticLog()
    return _diagnostic_log


def reset_diagnostic_log() -> DiagnosticLog:
    """Reset and return the process-wide DiagnosticLog instance."""
    log = get_diagnostic_log()
    log.reset()
    return log
