"""
Tests for the DiagnosticLog.

Tests cover:
- Event recording, sequence numbers and filtering
- Formatting that never raises
- Forwarding to logging at the right level
- Text dumps and reset
"""

import logging

from monfactions.observability import (
    DiagnosticKind,
    DiagnosticLog,
    get_diagnostic_log,
    reset_diagnostic_log,
)


LOGGER_NAME = "monfactions.observability.diagnostics"


class TestReporting:
    """Tests for recording events."""

    def test_report_records_event(self, diagnostics):
        event = diagnostics.report(DiagnosticKind.INVALID_INT_ID, "invalid monfaction id %d", 42, id=42)

        assert event.kind == DiagnosticKind.INVALID_INT_ID
        assert event.message == "invalid monfaction id 42"
        assert event.context == {"id": 42}
        assert event.sequence_number == 1
        assert len(diagnostics) == 1

    def test_sequence_numbers_increase(self, diagnostics):
        for i in range(3):
            diagnostics.report(DiagnosticKind.INVALID_STRING_ID, "invalid monfaction id %s", f"x{i}")

        assert [e.sequence_number for e in diagnostics.get_events()] == [1, 2, 3]

    def test_filter_by_kind_and_sequence(self, diagnostics):
        diagnostics.report(DiagnosticKind.INVALID_INT_ID, "a")
        diagnostics.report(DiagnosticKind.NO_RELATION_FOUND, "b")
        diagnostics.report(DiagnosticKind.INVALID_INT_ID, "c")

        assert [e.message for e in diagnostics.get_events(DiagnosticKind.INVALID_INT_ID)] == ["a", "c"]
        assert [e.message for e in diagnostics.get_events(since_sequence=1)] == ["b", "c"]

    def test_has_errors_only_for_structural_faults(self, diagnostics):
        diagnostics.report(DiagnosticKind.NO_RELATION_FOUND, "miss")
        assert not diagnostics.has_errors()

        diagnostics.report(DiagnosticKind.CYCLE_DETECTED, "cycle")
        assert diagnostics.has_errors()


class TestFormatting:
    """Reports never raise, whatever the arguments."""

    def test_missing_arguments(self, diagnostics):
        event = diagnostics.report(DiagnosticKind.INVALID_INT_ID, "invalid monfaction id %d")

        assert event.message == "invalid monfaction id %d"

    def test_wrong_argument_type(self, diagnostics):
        event = diagnostics.report(DiagnosticKind.INVALID_INT_ID, "invalid monfaction id %d", "zombie")

        assert "format error" in event.message
        assert "zombie" in event.message

    def test_too_many_arguments(self, diagnostics):
        event = diagnostics.report(DiagnosticKind.INVALID_INT_ID, "id %d", 1, 2)

        assert "format error" in event.message

    def test_str(self, diagnostics):
        event = diagnostics.report(DiagnosticKind.DOUBLE_LOAD, "twice")

        assert str(event) == "[1] DOUBLE_LOAD: twice"


class TestLoggingForwarding:
    """Reports are forwarded to the logging module."""

    def test_structural_faults_log_errors(self, diagnostics, caplog):
        with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
            diagnostics.report(DiagnosticKind.NO_ROOT, "No valid root monster faction!")

        assert caplog.records[-1].levelno == logging.ERROR
        assert "No valid root monster faction!" in caplog.text

    def test_lookup_faults_log_warnings(self, diagnostics, caplog):
        with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
            diagnostics.report(DiagnosticKind.INVALID_STRING_ID, "invalid monfaction id %s", "dragon")

        assert caplog.records[-1].levelno == logging.WARNING
        assert "dragon" in caplog.text


class TestFormatLog:
    """Tests for text dumps."""

    def test_format_log(self, diagnostics):
        for message in ["first", "second", "third"]:
            diagnostics.report(DiagnosticKind.INVALID_INT_ID, message)

        text = diagnostics.format_log(max_events=2)

        assert text.startswith("=== Faction Diagnostics ===")
        assert "Total Events: 3" in text
        assert "first" not in text
        assert "[3] INVALID_INT_ID: third" in text

    def test_reset(self, diagnostics):
        diagnostics.report(DiagnosticKind.INVALID_INT_ID, "a")

        diagnostics.reset()

        assert len(diagnostics) == 0
        assert diagnostics.report(DiagnosticKind.INVALID_INT_ID, "b").sequence_number == 1


class TestSingleton:
    """Tests for the process-wide log."""

    def test_get_returns_same_instance(self):
        assert get_diagnostic_log() is get_diagnostic_log()

    def test_reset_clears_shared_log(self):
        get_diagnostic_log().report(DiagnosticKind.INVALID_INT_ID, "a")

        log = reset_diagnostic_log()

        assert log is get_diagnostic_log()
        assert len(log) == 0

    def test_independent_logs(self):
        first = DiagnosticLog()
        second = DiagnosticLog()

        first.report(DiagnosticKind.INVALID_INT_ID, "a")

        assert len(first) == 1
        assert len(second) == 0
