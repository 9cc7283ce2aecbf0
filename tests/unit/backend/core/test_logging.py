"""
Unit Tests for Logging Configuration.
"""

import logging
from unittest.mock import MagicMock

import pytest

from ddev_manager.backend.core.logging import (
    MAX_OUTPUT_CHARS,
    VALID_SOURCES,
    _clip_output,
    _lift_extra,
    get_logger,
    log_with_source,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Keep root handlers and level as they were before the test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_overrides_level(self):
        """Should apply the level passed in over the YAML value."""
        setup_logging(level="DEBUG", format_type="console", enable_file_logging=False)

        assert logging.getLogger().level == logging.DEBUG

    def test_console_handler_only(self):
        """Should install exactly one console handler when file logging is off."""
        setup_logging(level="INFO", enable_console=True, enable_file_logging=False)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_quiets_noisy_libraries(self):
        """Should raise httpx and uvicorn.access to WARNING."""
        setup_logging(level="DEBUG", enable_file_logging=False)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING


class TestLogWithSource:
    """Tests for log_with_source."""

    def test_passes_source_and_context(self):
        """Should call the level method with source and extra fields."""
        logger = MagicMock()

        log_with_source(logger, "realtime", "warning", "Ignoring message", connection_id="c1")

        logger.warning.assert_called_once_with("Ignoring message", source="realtime", connection_id="c1")

    def test_invalid_level_raises(self):
        """Should raise AttributeError for a level the logger lacks."""
        logger = MagicMock(spec=["info"])

        with pytest.raises(AttributeError):
            log_with_source(logger, "cli", "loud", "message")


class TestGetLogger:
    """Tests for get_logger."""

    def test_returns_usable_logger(self):
        """Should return a logger that accepts structured calls."""
        logger = get_logger("tests")

        logger.info("hello", extra={"key": "value"})

    def test_realtime_is_a_known_source(self):
        """Should list every source the application logs with."""
        assert {"web", "cli", "realtime", "internal"} <= VALID_SOURCES


class TestProcessors:
    """Tests for the record processors."""

    def test_lift_extra(self):
        """Should move extra keys to the top level without overriding bound ones."""
        event = {"event": "Project started", "request_id": "r1", "extra": {"project": "blog", "request_id": "other"}}

        result = _lift_extra(None, "info", event)

        assert result == {"event": "Project started", "request_id": "r1", "project": "blog"}

    def test_lift_extra_ignores_missing(self):
        assert _lift_extra(None, "info", {"event": "x"}) == {"event": "x"}

    def test_clip_long_output(self):
        """Should truncate oversized ddev output fields."""
        event = {"event": "failed", "stderr": "e" * (MAX_OUTPUT_CHARS + 10), "command": "c" * (MAX_OUTPUT_CHARS + 10)}

        result = _clip_output(None, "error", event)

        assert result["stderr"].startswith("e" * MAX_OUTPUT_CHARS)
        assert result["stderr"].endswith("[10 chars truncated]")
        assert len(result["command"]) == MAX_OUTPUT_CHARS + 10

    def test_ddev_is_a_known_source(self):
        assert "ddev" in VALID_SOURCES
