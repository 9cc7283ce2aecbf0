"""
Unit Tests for Health Check Endpoints.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException

from ddev_manager.backend.api.health import (
    check_ddev,
    detailed_health_check,
    health_check,
    readiness_check,
)
from ddev_manager.backend.core.exceptions import ToolNotInstalledError
from ddev_manager.backend.events.registry import ConnectionRegistry


class TestCheckDdev:
    """Tests for check_ddev."""

    @pytest.mark.asyncio
    async def test_healthy(self, mock_runner):
        """Should report the ddev version and latency."""
        result = await check_ddev(mock_runner)

        assert result["status"] == "healthy"
        assert result["version"] == "v1.23.1"
        assert result["latency_ms"] >= 0

    @pytest.mark.asyncio
    async def test_unhealthy_when_missing(self, mock_runner):
        """Should report the failure message instead of raising."""
        mock_runner.version = AsyncMock(side_effect=ToolNotInstalledError())

        result = await check_ddev(mock_runner)

        assert result["status"] == "unhealthy"
        assert "not installed" in result["error"]


class TestHealthCheck:
    """Tests for the liveness endpoint."""

    @pytest.mark.asyncio
    async def test_returns_ok(self):
        result = await health_check()

        assert result["status"] == "ok"
        assert result["service"]
        assert "timestamp" in result


class TestReadinessCheck:
    """Tests for the readiness endpoint."""

    @pytest.mark.asyncio
    async def test_ready(self, mock_runner):
        result = await readiness_check(mock_runner)

        assert result["status"] == "healthy"
        assert result["checks"]["ddev"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_not_ready_without_ddev(self, mock_runner):
        """Should raise 503 when ddev is unavailable."""
        mock_runner.version = AsyncMock(side_effect=ToolNotInstalledError())

        with pytest.raises(HTTPException) as exc_info:
            await readiness_check(mock_runner)

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_not_ready_on_timeout(self, mock_runner):
        """Should treat a hung ddev as unavailable."""
        with patch("ddev_manager.backend.api.health.check_ddev", AsyncMock(side_effect=TimeoutError)):
            with pytest.raises(HTTPException) as exc_info:
                await readiness_check(mock_runner)

        assert exc_info.value.status_code == 503


class TestDetailedHealthCheck:
    """Tests for the detailed endpoint."""

    @pytest.mark.asyncio
    async def test_reports_components(self, mock_runner):
        registry = ConnectionRegistry()
        registry.register(MagicMock())

        result = await detailed_health_check(mock_runner, registry)

        assert result["status"] == "healthy"
        assert result["application"]["name"] == "DDEV Manager"
        assert result["realtime"] == {"connections": 1}
        assert "pools" in result
