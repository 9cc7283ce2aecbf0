"""
Project Schemas.

Pydantic schemas for project API request/response validation.
Enumerated values come from ddev/options.py; unknown request fields
are rejected rather than written through to config.yaml.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ddev_manager.backend.core.utils import PROJECT_NAME_PATTERN
from ddev_manager.backend.ddev import options


def _one_of(value: str | None, allowed: tuple[str, ...], label: str) -> str | None:
    if value is not None and value not in allowed:
        raise ValueError(f"{label} must be one of: {', '.join(allowed)}")
    return value


class ProjectCreate(BaseModel):
    """Schema for creating a new project with ``ddev config``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=50,
        pattern=PROJECT_NAME_PATTERN,
        description="Project name (letters, digits, '-' and '_')",
        examples=["my-site"],
    )
    type: str = Field(..., description="ddev project type", examples=["wordpress"])
    php_version: str | None = Field(default=None, alias="phpVersion")
    docroot: str | None = Field(default=None, description="Document root relative to the project")
    directory: str = Field(..., min_length=1, description="Existing directory to configure")
    database: str | None = Field(default=None, examples=["mariadb:10.11"])
    webserver_type: str | None = Field(default=None, alias="webserverType")

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str) -> str:
        return _one_of(value, options.PROJECT_TYPES, "type")

    @field_validator("php_version")
    @classmethod
    def _check_php(cls, value: str | None) -> str | None:
        return _one_of(value, options.PHP_VERSIONS, "phpVersion")

    @field_validator("database")
    @classmethod
    def _check_database(cls, value: str | None) -> str | None:
        return _one_of(value, options.DATABASES, "database")

    @field_validator("webserver_type")
    @classmethod
    def _check_webserver(cls, value: str | None) -> str | None:
        return _one_of(value, options.WEBSERVER_TYPES, "webserverType")


class ProjectConfigUpdate(BaseModel):
    """
    Schema for a partial config.yaml update.

    Only fields present in the request are merged into the document;
    everything else in config.yaml is preserved.
    """

    model_config = ConfigDict(extra="forbid")

    php_version: str | None = None
    database: str | None = None
    webserver_type: str | None = None
    type: str | None = None
    docroot: str | None = None
    router_http_port: int | None = Field(default=None, ge=1, le=65535)
    router_https_port: int | None = Field(default=None, ge=1, le=65535)
    additional_hostnames: list[str] | None = None
    additional_fqdns: list[str] | None = None
    web_environment: list[str] | None = None
    upload_dirs: list[str] | None = None
    nodejs_version: str | None = None
    composer_version: str | None = None
    xdebug_enabled: bool | None = None
    use_dns_when_possible: bool | None = None
    bind_all_interfaces: bool | None = None

    @field_validator("php_version")
    @classmethod
    def _check_php(cls, value: str | None) -> str | None:
        return _one_of(value, options.PHP_VERSIONS, "php_version")

    @field_validator("database")
    @classmethod
    def _check_database(cls, value: str | None) -> str | None:
        return _one_of(value, options.DATABASES, "database")

    @field_validator("webserver_type")
    @classmethod
    def _check_webserver(cls, value: str | None) -> str | None:
        return _one_of(value, options.WEBSERVER_TYPES, "webserver_type")

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str | None) -> str | None:
        return _one_of(value, options.PROJECT_TYPES, "type")

    def updates(self) -> dict[str, Any]:
        """Fields explicitly present in the request."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ProjectConfigSummary(BaseModel):
    """Config fields attached to each project in listings."""

    php_version: str
    database: str
    webserver_type: str
    type: str
    docroot: str
    router_http_port: int | str
    router_https_port: int | str


class ProjectOptions(BaseModel):
    """Enumerated values for client dropdowns."""

    model_config = ConfigDict(populate_by_name=True)

    php_versions: list[str] = Field(serialization_alias="phpVersions")
    databases: list[str]
    project_types: list[str] = Field(serialization_alias="projectTypes")
    webserver_types: list[str] = Field(serialization_alias="webserverTypes")


class ProjectLogs(BaseModel):
    """Tail of a project's service logs."""

    project: str
    service: str
    lines: int
    logs: str
