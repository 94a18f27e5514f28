"""
Tests for logging configuration, formatters and log filters.
"""

import json
import logging

import pytest

from note_relay.logging import (
    HumanReadableFormatter,
    StructuredJSONFormatter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from note_relay.uvicorn_filters import ExcludeMetricsFilter


def _record(msg="Relayed note", level=logging.INFO, args=None):
    return logging.LogRecord(
        name="note_relay",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=args,
        exc_info=None,
    )


@pytest.fixture(autouse=True)
def empty_log_context():
    clear_log_context()
    yield
    clear_log_context()


class TestLogContext:
    """Tests for the contextual log fields."""

    def test_set_and_clear(self):
        """Test fields are added to the context and cleared again."""
        set_log_context(connection_id="abc")
        set_log_context(endpoint="/ws")

        assert get_log_context() == {"connection_id": "abc", "endpoint": "/ws"}

        clear_log_context()

        assert get_log_context() == {}

    def test_set_does_not_mutate_default(self):
        """Test setting a field does not leak into a fresh context."""
        set_log_context(connection_id="abc")
        clear_log_context()

        set_log_context(endpoint="/health")

        assert "connection_id" not in get_log_context()


class TestStructuredJSONFormatter:
    """Tests for StructuredJSONFormatter."""

    def test_format_includes_standard_fields(self):
        """Test the output is JSON with the standard fields."""
        data = json.loads(StructuredJSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["message"] == "Relayed note"
        assert data["logger"] == "note_relay"
        assert "timestamp" in data
        assert "environment" in data

    def test_format_includes_context_fields(self):
        """Test context fields and correlation ID are added."""
        set_log_context(connection_id="12345678-aaaa", correlation_id="12345678")

        data = json.loads(StructuredJSONFormatter().format(_record()))

        assert data["connection_id"] == "12345678-aaaa"
        assert data["request_id"] == "12345678"


    def test_format_includes_extra_fields_only(self):
        """Test extra= fields are added, LogRecord internals are not."""
        record = _record()
        record.recipients = 2

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["recipients"] == 2
        assert data["location"] == "test_logging.None:10"
        assert "pathname" not in data
        assert "args" not in data


class TestHumanReadableFormatter:
    """Tests for HumanReadableFormatter."""

    def test_format_without_correlation_id(self):
        """Test a dash is shown when no correlation ID is set."""
        output = HumanReadableFormatter().format(_record())

        assert "[-] INFO: Relayed note" in output

    def test_format_with_connection_correlation_id(self):
        """Test the connection correlation ID is shown."""
        set_log_context(correlation_id="9b2f0c1d")

        output = HumanReadableFormatter().format(_record())

        assert "[9b2f0c1d]" in output

    def test_warning_includes_location(self):
        """Test warnings include module, function and line."""
        output = HumanReadableFormatter().format(
            _record("Failed to relay", level=logging.WARNING)
        )

        assert "WARNING: test_logging" in output
        assert "Failed to relay" in output


class TestExcludeMetricsFilter:
    """Tests for the uvicorn access log filter."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/health", False),
            ("/metrics", False),
            ("/metrics?format=text", False),
            ("/", True),
            ("/piano.js", True),
            ("/healthy-notes.js", True),
        ],
    )
    def test_filter_access_log(self, path, expected):
        """Test monitoring paths are hidden from access logs."""
        record = _record(
            '%s - "%s %s HTTP/%s" %d',
            args=("127.0.0.1:5000", "GET", path, "1.1", 200),
        )

        assert ExcludeMetricsFilter().filter(record) is expected

    def test_filter_plain_message(self):
        """Test records without access log args are matched by message."""
        assert ExcludeMetricsFilter().filter(_record("GET /health")) is False
        assert ExcludeMetricsFilter().filter(_record("GET /")) is True
