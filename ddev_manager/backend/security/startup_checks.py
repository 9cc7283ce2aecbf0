"""
Startup Validation.

Checks invariants before the application accepts traffic. Hard failures
make the application refuse to start with a clear error message; a
missing ddev binary is only a warning because the dashboard can still
report it (every project call then answers 503).

Called during FastAPI lifespan initialization.
"""

import shutil

from ddev_manager.backend.core.config import get_app_config
from ddev_manager.backend.core.logging import get_logger

logger = get_logger(__name__)


class StartupSecurityError(RuntimeError):
    """Raised when a startup security check fails."""

    pass


def run_startup_checks() -> None:
    """
    Validate all startup invariants.

    Raises:
        StartupSecurityError: If any check fails
    """
    app_config = get_app_config()
    environment = app_config.application.environment
    is_production = environment == "production"

    errors: list[str] = []

    _check_production_safety(app_config, is_production, errors)
    _check_ddev_binary(app_config)

    if errors:
        for error in errors:
            logger.error("Startup security check failed", extra={"check": error})
        raise StartupSecurityError(
            f"Startup blocked: {len(errors)} security check(s) failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.info(
        "Startup security checks passed",
        extra={"environment": environment, "checks_run": 2},
    )


def _check_production_safety(app_config, is_production: bool, errors: list[str]) -> None:
    """Validate production environment safety constraints."""
    if not is_production:
        return

    app = app_config.application
    if app.debug:
        errors.append("debug is true in production environment")

    if "*" in app.cors.origins:
        errors.append("CORS origins contain '*' in production environment")


def _check_ddev_binary(app_config) -> None:
    """Warn when the configured ddev binary cannot be found."""
    binary = app_config.ddev.binary
    if shutil.which(binary) is None:
        logger.warning(
            "ddev binary not found on PATH; project operations will fail",
            extra={"binary": binary},
        )
