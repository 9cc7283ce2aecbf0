"""
Configuration Management.

All settings live in YAML under config/settings/, next to the
``.project_root`` marker; code carries no hardcoded values. Each file is
validated against its schema in config_schema.py when first loaded.

    application.yaml   identity, server, cors, frontend build
    logging.yaml       level, format, handlers
    features.yaml      feature flags
    ddev.yaml          ddev binary, command timeout, cache TTL, upload/export
    security.yaml      API rate limiting, response headers
    concurrency.yaml   thread pool, semaphores
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from ddev_manager.backend.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    DdevSchema,
    FeaturesSchema,
    LoggingSchema,
    SecuritySchema,
)

PROJECT_ROOT_MARKER = ".project_root"


def find_project_root() -> Path:
    """Walk up from the working directory to the ``.project_root`` marker."""
    current = Path.cwd()
    while current != current.parent:
        if (current / PROJECT_ROOT_MARKER).exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Like find_project_root, but exits with a readable message.

    For entry scripts, before anything loads configuration.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def resolve_project_path(configured: str) -> Path:
    """Absolute paths pass through; relative ones are taken from the project root."""
    path = Path(configured).expanduser()
    if path.is_absolute():
        return path
    return find_project_root() / path


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Raw contents of one settings file (empty file reads as ``{}``)."""
    config_path = find_project_root() / "config" / "settings" / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _load_validated(schema_cls: type[BaseModel], filename: str) -> Any:
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """
    Every settings file, validated.

    Loading fails fast with ValueError naming the file when a key is
    missing, has the wrong type, or is not part of the schema.
    """

    def __init__(self) -> None:
        self._application: ApplicationSchema = _load_validated(ApplicationSchema, "application.yaml")
        self._logging: LoggingSchema = _load_validated(LoggingSchema, "logging.yaml")
        self._features: FeaturesSchema = _load_validated(FeaturesSchema, "features.yaml")
        self._ddev: DdevSchema = _load_validated(DdevSchema, "ddev.yaml")
        self._security: SecuritySchema = _load_validated(SecuritySchema, "security.yaml")
        self._concurrency: ConcurrencySchema = _load_validated(ConcurrencySchema, "concurrency.yaml")

    @property
    def application(self) -> ApplicationSchema:
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        return self._logging

    @property
    def features(self) -> FeaturesSchema:
        return self._features

    @property
    def ddev(self) -> DdevSchema:
        """ddev CLI integration: binary, timeouts, cache TTL, upload and export."""
        return self._ddev

    @property
    def security(self) -> SecuritySchema:
        return self._security

    @property
    def concurrency(self) -> ConcurrencySchema:
        return self._concurrency


@lru_cache
def get_app_config() -> AppConfig:
    """Process-wide configuration, loaded once."""
    return AppConfig()


def get_server_base_url() -> tuple[str, float]:
    """
    Where the terminal client finds the backend.

    Returns:
        (base_url, timeout_seconds) from application.yaml
    """
    app = get_app_config().application
    return f"http://{app.server.host}:{app.server.port}", float(app.timeouts.external_api)
