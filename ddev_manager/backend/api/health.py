"""
Health Check Endpoints.

Provides liveness, readiness, and detailed health checks.

Endpoints:
- /api/health: Liveness check (process running)
- /api/health/ready: Readiness check (ddev binary answers)
- /api/health/detailed: Component-by-component status (for debugging)
"""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException

from ddev_manager.backend.core.config import get_app_config
from ddev_manager.backend.core.dependencies import Registry, Runner
from ddev_manager.backend.core.exceptions import ApplicationError
from ddev_manager.backend.core.logging import get_logger
from ddev_manager.backend.core.utils import utc_now
from ddev_manager.backend.ddev.runner import CommandRunner

router = APIRouter()
logger = get_logger(__name__)

READY_TIMEOUT_SECONDS = 10


async def check_ddev(runner: CommandRunner) -> dict[str, Any]:
    """
    Check that the ddev binary runs.

    Returns:
        Dict with status, latency, version and optional error message
    """
    try:
        start = utc_now()
        info = await runner.version()
        latency_ms = int((utc_now() - start).total_seconds() * 1000)
        return {
            "status": "healthy",
            "latency_ms": latency_ms,
            "version": info.get("DDEV version"),
        }
    except ApplicationError as e:
        logger.warning("ddev health check failed", extra={"error": e.message})
        return {
            "status": "unhealthy",
            "error": e.message,
        }


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running.
    No dependency checks - this endpoint should always respond quickly.
    """
    return {
        "status": "ok",
        "timestamp": utc_now().isoformat(),
        "service": get_app_config().application.service_id,
    }


@router.get("/health/ready")
async def readiness_check(runner: Runner) -> dict[str, Any]:
    """
    Readiness check.

    Returns 503 when ddev is missing or does not answer in time.
    """
    try:
        async with asyncio.timeout(READY_TIMEOUT_SECONDS):
            ddev_result = await check_ddev(runner)
    except TimeoutError:
        ddev_result = {"status": "unhealthy", "error": "check timed out"}

    checks = {"ddev": ddev_result}

    if ddev_result.get("status") == "unhealthy":
        logger.warning(
            "Readiness check failed",
            extra={"checks": checks},
        )
        raise HTTPException(
            status_code=503,
            detail="ddev is not available",
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health/detailed")
async def detailed_health_check(runner: Runner, registry: Registry) -> dict[str, Any]:
    """
    Detailed health check.

    Returns the ddev check plus application info, realtime connection
    count and pool metrics.
    """
    ddev_result = await check_ddev(runner)

    app_settings = get_app_config().application
    app_info = {
        "name": app_settings.name,
        "env": app_settings.environment,
        "debug": app_settings.debug,
        "version": app_settings.version,
    }

    return {
        "status": ddev_result["status"],
        "application": app_info,
        "checks": {"ddev": ddev_result},
        "realtime": {"connections": len(registry)},
        "pools": _get_pool_status(),
        "timestamp": utc_now().isoformat(),
    }


def _get_pool_status() -> dict[str, Any]:
    """Collect current pool and semaphore metrics for health reporting."""
    from ddev_manager.backend.core.concurrency import (
        _io_pool, _semaphores, _semaphore_capacities,
    )

    pools: dict[str, Any] = {}

    if _io_pool is not None:
        pools["thread_pool"] = {
            "max_workers": _io_pool._max_workers,
        }

    if _semaphores:
        sem_status = {}
        for name, sem in _semaphores.items():
            sem_status[name] = {
                "capacity": _semaphore_capacities.get(name, "unknown"),
                "available": sem._value,
            }
        pools["semaphores"] = sem_status

    return pools
