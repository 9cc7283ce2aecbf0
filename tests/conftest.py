"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Tests run from the project root so that configuration is loaded from the
real config/settings/*.yaml files. The ddev binary is never invoked: unit
tests mock the command runner or the subprocess call, integration tests
override the service dependency.
"""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import yaml

import ddev_manager.backend.core.concurrency as concurrency_module
from ddev_manager.backend.ddev.runner import CommandResult


# =============================================================================
# Concurrency State
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_semaphores() -> Generator[None, None, None]:
    """Semaphores bind to the loop they first block on; drop them per test."""
    concurrency_module._semaphores.clear()
    concurrency_module._semaphore_capacities.clear()
    yield
    concurrency_module._semaphores.clear()
    concurrency_module._semaphore_capacities.clear()


# =============================================================================
# ddev Fixtures
# =============================================================================


@pytest.fixture
def make_result() -> Callable[..., CommandResult]:
    """
    Factory for captured command output.

    Usage:
        def test_start(make_result):
            runner.run.return_value = make_result(stdout="Started mysite")
    """

    def _make(stdout: str = "", stderr: str = "", returncode: int = 0, args: list[str] | None = None) -> CommandResult:
        return CommandResult(
            args=args or ["ddev"],
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )

    return _make


@pytest.fixture
def project_dir(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory that creates a project root with a .ddev/config.yaml.

    Usage:
        def test_read(project_dir):
            root = project_dir("mysite", {"php_version": "8.2"})
    """

    def _make(name: str, config: dict[str, Any] | None = None) -> Path:
        root = tmp_path / name
        (root / ".ddev").mkdir(parents=True)
        document = {"name": name, **(config or {})}
        (root / ".ddev" / "config.yaml").write_text(
            yaml.safe_dump(document, sort_keys=False),
            encoding="utf-8",
        )
        return root

    return _make


# =============================================================================
# Utility Fixtures
# =============================================================================


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"
