"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never spawning the ddev binary.
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.websockets import WebSocketState


# =============================================================================
# ddev Runner Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_runner() -> MagicMock:
    """
    Mock command runner for unit tests.

    Usage:
        def test_service(mock_runner, make_result):
            mock_runner.run.return_value = make_result(stdout="ok")
            service = ProjectService(mock_runner, publisher)
    """
    runner = MagicMock()
    runner.binary = "ddev"
    runner.timeout = 60
    runner.run = AsyncMock()
    runner.run_json = AsyncMock(return_value=None)
    runner.version = AsyncMock(return_value={"DDEV version": "v1.23.1"})
    return runner


# =============================================================================
# Event Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_publisher() -> MagicMock:
    """Mock event publisher with every publish method awaited-able."""
    publisher = MagicMock()
    publisher.project_created = AsyncMock()
    publisher.project_deleted = AsyncMock()
    publisher.status_changed = AsyncMock()
    publisher.config_updated = AsyncMock()
    publisher.database_imported = AsyncMock()
    return publisher


@pytest.fixture
def mock_websocket() -> MagicMock:
    """
    Mock WebSocket in the connected state.

    Usage:
        def test_broadcast(mock_websocket):
            connection = registry.register(mock_websocket)
            mock_websocket.send_json.assert_awaited_once()
    """
    websocket = MagicMock()
    websocket.client_state = WebSocketState.CONNECTED
    websocket.application_state = WebSocketState.CONNECTED
    websocket.send_json = AsyncMock()
    return websocket


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.logger", mock_logger):
                # Test code that logs
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger


# =============================================================================
# HTTP Mock Fixtures
# =============================================================================


class MockResponse:
    """Mock HTTP response for testing."""

    def __init__(
        self,
        status_code: int,
        json_data: dict[str, Any] | None = None,
        text: str = "",
    ) -> None:
        self.status_code = status_code
        self._json_data = json_data or {}
        self.text = text or str(json_data)
        self.reason_phrase = "Error" if status_code >= 400 else "OK"

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400

    def json(self) -> dict[str, Any]:
        return self._json_data


@pytest.fixture
def mock_response() -> type[MockResponse]:
    """Provide MockResponse class for creating mock HTTP responses."""
    return MockResponse
