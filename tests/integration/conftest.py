"""
Integration Test Fixtures.

Fixtures for integration tests - the real FastAPI application with its
middleware, exception handlers and routing. The project service is
replaced through ``app.dependency_overrides`` so no ddev binary is needed.
"""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from ddev_manager.backend.core.dependencies import get_project_service, get_runner
from ddev_manager.backend.ddev import options


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def mock_service() -> MagicMock:
    """
    Project service double.

    Every operation is an AsyncMock; get_options returns the real option sets.
    """
    from ddev_manager.backend.schemas.project import ProjectOptions

    service = MagicMock()
    service.list_projects = AsyncMock(return_value=[])
    service.get_project = AsyncMock()
    service.get_project_config = AsyncMock()
    service.update_project_config = AsyncMock()
    service.create_project = AsyncMock()
    service.start_project = AsyncMock()
    service.stop_project = AsyncMock()
    service.restart_project = AsyncMock()
    service.delete_project = AsyncMock()
    service.get_logs = AsyncMock(return_value="")
    service.import_database = AsyncMock()
    service.export_database = AsyncMock()
    service.get_options = MagicMock(return_value=ProjectOptions(
        php_versions=list(options.PHP_VERSIONS),
        databases=list(options.DATABASES),
        project_types=list(options.PROJECT_TYPES),
        webserver_types=list(options.WEBSERVER_TYPES),
    ))
    return service


@pytest.fixture
def mock_app_runner() -> MagicMock:
    """Runner double for the health endpoints."""
    runner = MagicMock()
    runner.version = AsyncMock(return_value={"DDEV version": "v1.23.1"})
    return runner


@pytest.fixture
def app(mock_service: MagicMock, mock_app_runner: MagicMock) -> FastAPI:
    """Create the application with the service and runner overridden."""
    from ddev_manager.backend.main import create_app

    application = create_app()
    application.dependency_overrides[get_project_service] = lambda: mock_service
    application.dependency_overrides[get_runner] = lambda: mock_app_runner
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the application.

    Usage:
        async def test_list(client: AsyncClient, mock_service):
            mock_service.list_projects.return_value = [{"name": "mysite"}]
            response = await client.get("/api/projects")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code
            expected_code: Expected error code (optional)

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is a request validation error (400).

        Args:
            response: httpx Response object
            field: Expected field named in the error details (optional)

        Returns:
            Response JSON data
        """
        data = ApiAssertions.assert_error(response, 400, "VAL_REQUEST_INVALID")

        if field:
            details = data.get("details") or []
            assert any(d.startswith(f"{field}:") for d in details), (
                f"Expected validation error for field '{field}', got: {details}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
