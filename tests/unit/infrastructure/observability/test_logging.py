"""Tests for logging configuration and formatters."""

import json
import logging
import sys

import pytest

from smartlink.infrastructure.observability.logging import (
    CompactExceptionFormatter,
    CorrelationIdFilter,
    CustomJsonFormatter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back after each test reconfigures it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str = "hello", exc_info: object = None) -> logging.LogRecord:
    return logging.LogRecord(
        name="smartlink.test",
        level=logging.ERROR,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,  # type: ignore[arg-type]
    )


class TestCorrelationId:
    """Test correlation ID functionality."""

    def test_set_and_get_correlation_id(self):
        """Test setting and getting correlation ID."""
        assert set_correlation_id("test-123-abc") == "test-123-abc"
        assert get_correlation_id() == "test-123-abc"

    def test_set_correlation_id_generates_uuid_when_none(self):
        """Test that setting None generates a UUID."""
        result = set_correlation_id(None)
        assert len(result) == 36
        assert get_correlation_id() == result

    def test_filter_attaches_correlation_id(self):
        """The filter copies the context id onto every record."""
        set_correlation_id("req-1")
        record = _record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-1"


class TestFormatters:
    """Tests for the JSON and compact formatters."""

    def test_json_formatter_fields(self):
        """JSON output carries service, level, logger and correlation id."""
        record = _record()
        record.correlation_id = "req-2"
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s", service="smartlink-test"
        )

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "hello"
        assert payload["level"] == "ERROR"
        assert payload["logger"] == "smartlink.test"
        assert payload["service"] == "smartlink-test"
        assert payload["correlation_id"] == "req-2"

    def test_compact_exception_chain(self):
        """Chained exceptions print root cause first, one line each."""
        try:
            try:
                raise KeyError("inner")
            except KeyError as e:
                raise RuntimeError("outer") from e
        except RuntimeError:
            exc_info = sys.exc_info()

        text = CompactExceptionFormatter().formatException(exc_info)
        lines = [line for line in text.splitlines() if line.startswith("╰─►")]

        assert lines == ["╰─► KeyError: 'inner'", "╰─► RuntimeError: outer"]
        assert "The above exception" not in text


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_configure_logging_levels(self):
        """The root level follows log_level."""
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        assert logging.getLogger("test").getEffectiveLevel() <= logging.DEBUG

        configure_logging(log_level="warning", json_format=False, app_name="test-app")
        assert logging.getLogger().level == logging.WARNING

    def test_configure_logging_replaces_handlers(self):
        """Repeated calls keep exactly one handler with the correlation filter."""
        configure_logging(log_level="INFO", json_format=True, app_name="test-app")
        configure_logging(log_level="INFO", json_format=True, app_name="test-app")

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, CustomJsonFormatter)
        assert any(isinstance(f, CorrelationIdFilter) for f in handlers[0].filters)

    def test_noisy_loggers_are_quieted(self):
        """Third-party chatter is raised to WARNING."""
        configure_logging(log_level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
