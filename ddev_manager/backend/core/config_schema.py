"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    LoggingSchema      → logging.yaml
    FeaturesSchema     → features.yaml
    DdevSchema         → ddev.yaml
    SecuritySchema     → security.yaml
    ConcurrencySchema  → concurrency.yaml
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    external_api: int


class FrontendSchema(_StrictBase):
    build_dir: str


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    service_id: str
    environment: str
    debug: bool
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema
    frontend: FrontendSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    events_publish_enabled: bool
    api_rate_limit_enabled: bool
    security_headers_enabled: bool
    security_startup_checks_enabled: bool
    frontend_static_enabled: bool


# =============================================================================
# ddev.yaml
# =============================================================================


class DdevSchema(_StrictBase):
    binary: str
    command_timeout_seconds: float = Field(gt=0)
    config_cache_ttl_seconds: float = Field(ge=0)
    upload_dir: str
    export_dir: str
    max_upload_bytes: int = Field(gt=0)
    upload_chunk_bytes: int = Field(gt=0)


# =============================================================================
# security.yaml
# =============================================================================


class ApiRateLimitSchema(_StrictBase):
    max_requests: int
    window_seconds: int


class RateLimitingSchema(_StrictBase):
    api: ApiRateLimitSchema


class SecurityHeadersSchema(_StrictBase):
    x_content_type_options: str
    x_frame_options: str
    referrer_policy: str
    hsts_enabled: bool
    hsts_max_age: int


class SecuritySchema(_StrictBase):
    rate_limiting: RateLimitingSchema
    headers: SecurityHeadersSchema


# =============================================================================
# concurrency.yaml
# =============================================================================


class ThreadPoolSchema(_StrictBase):
    max_workers: int


class SemaphoresSchema(_StrictBase):
    ddev: int


class ConcurrencySchema(_StrictBase):
    thread_pool: ThreadPoolSchema
    semaphores: SemaphoresSchema
