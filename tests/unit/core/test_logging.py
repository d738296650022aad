# tests/unit/core/test_logging.py
"""Tests for structured logging configuration."""

import io
import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from insightwire.core.logging import configure_logging
from insightwire.envelope.sanitizer import validate_string_map


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


class TestLoggingConfig:
    """Tests for logging configuration."""

    def test_library_module_events_use_configured_handler(self) -> None:
        """Module-level loggers created at import pick up the configuration."""
        stream = io.StringIO()
        configure_logging(json_output=True, stream=stream)

        validate_string_map(["not", "a", "mapping"])

        data = json.loads(stream.getvalue().strip())
        assert data["event"] == "Invalid properties dropped from payload"
        assert data["logger"] == "insightwire.envelope.sanitizer"

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Structured events render as one JSON object per line on stderr."""
        configure_logging(json_output=True)
        structlog.get_logger("test").info("Envelope created", base_type="MessageData")

        line = capsys.readouterr().err.strip().split("\n")[-1]
        data = json.loads(line)
        assert data["event"] == "Envelope created"
        assert data["base_type"] == "MessageData"
        assert data["level"] == "info"

    def test_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=False)
        structlog.get_logger("test").info("Envelope created", base_type="MessageData")

        err = capsys.readouterr().err
        assert "Envelope created" in err
        assert not err.strip().startswith("{")

    def test_stdlib_records_render_as_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True)
        logging.getLogger("some.library").warning("from stdlib")

        data = json.loads(capsys.readouterr().err.strip().split("\n")[-1])
        assert data["event"] == "from stdlib"
        assert data["level"] == "warning"

    def test_level_filters_library_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="WARNING")
        structlog.get_logger("test").info("hidden")

        assert "hidden" not in capsys.readouterr().err

    def test_http_client_loggers_quieted(self) -> None:
        """httpx and httpcore stay at WARNING even in DEBUG mode."""
        configure_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG
        for name in ("httpx", "httpcore", "urllib3"):
            assert logging.getLogger(name).getEffectiveLevel() >= logging.WARNING

    def test_custom_stream_and_logger_name(self) -> None:
        stream = io.StringIO()
        configure_logging(json_output=True, stream=stream)
        structlog.get_logger("insightwire.envelope.factory").warning("Envelope dropped")

        data = json.loads(stream.getvalue().strip())
        assert data["logger"] == "insightwire.envelope.factory"
        assert data["timestamp"].endswith("Z")

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="CHATTY")
