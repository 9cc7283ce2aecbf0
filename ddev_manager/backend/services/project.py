"""
Project Service.

Business logic for ddev projects. Every operation is a single ddev
invocation (or a config.yaml read/rewrite); the service assembles the
arguments, interprets the JSON output, keeps the per-project config cache
coherent, and publishes a realtime event after each mutation.
"""

import asyncio
import copy
from pathlib import Path
from typing import Any

from ddev_manager.backend.core.cache import TTLCache
from ddev_manager.backend.core.concurrency import KeyedLocks, run_blocking
from ddev_manager.backend.core.exceptions import (
    ApplicationError,
    CommandFailedError,
    ConfigReadError,
    NotFoundError,
    ToolNotInstalledError,
    ValidationError,
)
from ddev_manager.backend.ddev import options
from ddev_manager.backend.ddev.config_file import config_path_for, read_config, write_config
from ddev_manager.backend.ddev.runner import CommandRunner
from ddev_manager.backend.events.publishers import ProjectEventPublisher
from ddev_manager.backend.schemas.project import ProjectCreate, ProjectOptions
from ddev_manager.backend.services.base import BaseService

_NOT_FOUND_MARKERS = ("not found", "could not find", "no project")


def _extract_list(payload: Any) -> list[dict[str, Any]]:
    """Pull the project array out of ``ddev list --json-output``."""
    if isinstance(payload, dict):
        payload = payload.get("raw", payload)
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, dict)]


def _format_database(value: Any) -> str:
    """Render config.yaml's database entry as ``type:version``."""
    if isinstance(value, dict):
        db_type = value.get("type")
        version = value.get("version")
        if db_type and version:
            return f"{db_type}:{version}"
        return str(db_type or options.DEFAULT_DATABASE)
    return str(value) if value else options.DEFAULT_DATABASE


def summarize_config(config: dict[str, Any]) -> dict[str, Any]:
    """Listing summary of a config document, with ddev's defaults filled in."""
    return {
        "php_version": str(config.get("php_version") or options.DEFAULT_PHP_VERSION),
        "database": _format_database(config.get("database")),
        "webserver_type": config.get("webserver_type") or options.DEFAULT_WEBSERVER_TYPE,
        "type": config.get("type") or options.DEFAULT_PROJECT_TYPE,
        "docroot": config.get("docroot") or "",
        "router_http_port": config.get("router_http_port") or options.DEFAULT_HTTP_PORT,
        "router_https_port": config.get("router_https_port") or options.DEFAULT_HTTPS_PORT,
    }


def placeholder_config() -> dict[str, Any]:
    """Summary used when a project's config cannot be read."""
    return {
        "php_version": options.UNKNOWN,
        "database": options.UNKNOWN,
        "webserver_type": options.UNKNOWN,
        "type": options.UNKNOWN,
        "docroot": "",
        "router_http_port": options.DEFAULT_HTTP_PORT,
        "router_https_port": options.DEFAULT_HTTPS_PORT,
    }


class ProjectService(BaseService):
    """
    Service for ddev project operations.

    One instance is shared by all requests of an application so that the
    config cache and the per-project write locks are shared too.
    """

    def __init__(
        self,
        runner: CommandRunner,
        publisher: ProjectEventPublisher,
        cache: TTLCache | None = None,
    ) -> None:
        super().__init__(runner, publisher)
        if cache is None:
            from ddev_manager.backend.core.config import get_app_config
            cache = TTLCache(get_app_config().ddev.config_cache_ttl_seconds)
        self.cache = cache
        self._locks = KeyedLocks()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_projects(self) -> list[dict[str, Any]]:
        """
        List all projects, each enriched with a config summary.

        Per-project config failures degrade that item to placeholders.
        A failing or unparsable listing yields an empty list.

        Raises:
            ToolNotInstalledError: If ddev is not installed
        """
        try:
            payload = await self.runner.run_json("list", "--json-output")
        except ToolNotInstalledError:
            raise
        except CommandFailedError as e:
            self._logger.warning(
                "Returning empty project list due to error",
                extra={"error": e.message},
            )
            return []

        projects = _extract_list(payload)
        if not projects:
            self._log_debug("No ddev projects found")
            return []

        return list(await asyncio.gather(*(self._with_config_summary(p) for p in projects)))

    async def _with_config_summary(self, project: dict[str, Any]) -> dict[str, Any]:
        name = str(project.get("name", ""))
        try:
            approot = project.get("approot")
            if approot:
                config = await self._load_config(name, approot)
            else:
                config = await self.get_project_config(name)
            summary = summarize_config(config)
        except (ApplicationError, OSError) as e:
            self._logger.warning(
                "Could not load config for project",
                extra={"project": name, "error": str(e)},
            )
            summary = placeholder_config()
        return {**project, "config": summary}

    async def get_project(self, name: str) -> dict[str, Any]:
        """
        Describe a project and attach its config document.

        Raises:
            NotFoundError: If ddev does not know the project
        """
        self._validate_project_name(name)
        self._log_debug("Fetching project details", project=name)

        status, config = await asyncio.gather(
            self._describe(name),
            self.get_project_config(name),
        )
        return {**status, "config": config}

    async def _describe(self, name: str) -> dict[str, Any]:
        try:
            payload = await self.runner.run_json("describe", name, "--json-output")
        except CommandFailedError as e:
            diagnostic = (e.diagnostic or e.message).lower()
            if any(marker in diagnostic for marker in _NOT_FOUND_MARKERS):
                raise NotFoundError(f"Project {name} not found") from e
            raise

        if isinstance(payload, dict):
            raw = payload.get("raw", payload)
            if isinstance(raw, dict):
                return raw
        return {"name": name}

    async def get_project_config(self, name: str) -> dict[str, Any]:
        """
        Read a project's config.yaml, served from cache within the TTL window.

        Raises:
            NotFoundError: If the project is not in ``ddev list``
            FilesystemPermissionError: If config.yaml is not readable
            ConfigReadError: If config.yaml is missing or invalid
        """
        self._validate_project_name(name)

        cached = self.cache.get(name)
        if cached is not None:
            return copy.deepcopy(cached)

        approot = await self._locate(name)
        return await self._load_config(name, approot)

    async def _load_config(self, name: str, approot: str) -> dict[str, Any]:
        cached = self.cache.get(name)
        if cached is not None:
            return copy.deepcopy(cached)

        config = await run_blocking(read_config, config_path_for(approot))
        self.cache.set(name, config)
        return copy.deepcopy(config)

    async def _locate(self, name: str) -> str:
        """Find a project's approot through ``ddev list``."""
        payload = await self.runner.run_json("list", "--json-output")
        for project in _extract_list(payload):
            if project.get("name") == name:
                approot = project.get("approot")
                if not approot:
                    raise ConfigReadError(f"Project {name} has no approot")
                return str(approot)
        raise NotFoundError(f"Project {name} not found")

    async def get_logs(self, name: str, service: str = "web", lines: int = 100) -> str:
        """Tail a project's container logs."""
        self._validate_project_name(name)
        self._log_debug("Fetching logs", project=name, log_service=service, lines=lines)

        result = await self.runner.run("logs", name, f"--service={service}", f"--tail={lines}")
        return result.stdout

    def get_options(self) -> ProjectOptions:
        """Enumerated values accepted by create and update."""
        return ProjectOptions(
            php_versions=list(options.PHP_VERSIONS),
            databases=list(options.DATABASES),
            project_types=list(options.PROJECT_TYPES),
            webserver_types=list(options.WEBSERVER_TYPES),
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def update_project_config(self, name: str, updates: dict[str, Any]) -> dict[str, Any]:
        """
        Merge ``updates`` into config.yaml and rewrite the document.

        Fields not present in ``updates`` are preserved. Concurrent updates
        of the same project are serialized.

        Returns:
            The merged document as written
        """
        self._validate_project_name(name)
        self._log_operation("Updating project config", project=name, fields=sorted(updates))

        async with self._locks.get(name):
            approot = await self._locate(name)
            path = config_path_for(approot)
            current = await run_blocking(read_config, path)
            merged = {**current, **updates}
            await run_blocking(write_config, path, merged)
            self.cache.invalidate(name)

        await self.publisher.config_updated(name, merged)
        return merged

    async def create_project(self, data: ProjectCreate) -> dict[str, Any]:
        """
        Configure a new project in an existing directory with ``ddev config``.

        Raises:
            ValidationError: If the directory does not exist
        """
        directory = Path(data.directory).expanduser()
        if not directory.is_dir():
            raise ValidationError(
                "Validation error",
                details=[f"directory: {data.directory} does not exist or is not a directory"],
            )

        args = [
            "config",
            f"--project-name={data.name}",
            f"--project-type={data.type}",
            "--auto",
        ]
        if data.php_version:
            args.append(f"--php-version={data.php_version}")
        if data.docroot:
            args.append(f"--docroot={data.docroot}")
        if data.database:
            args.append(f"--database={data.database}")
        if data.webserver_type:
            args.append(f"--webserver-type={data.webserver_type}")

        self._log_operation("Creating project", project=data.name, directory=str(directory))
        result = await self.runner.run(*args, cwd=directory)

        self.cache.invalidate(data.name)
        await self.publisher.project_created(data.name)
        return result.to_dict()

    async def start_project(self, name: str) -> dict[str, Any]:
        return await self._lifecycle(name, "start", "starting")

    async def stop_project(self, name: str) -> dict[str, Any]:
        return await self._lifecycle(name, "stop", "stopped")

    async def restart_project(self, name: str) -> dict[str, Any]:
        return await self._lifecycle(name, "restart", "restarting")

    async def _lifecycle(self, name: str, action: str, status: str) -> dict[str, Any]:
        self._validate_project_name(name)
        self._log_operation(f"Running ddev {action}", project=name)

        result = await self.runner.run(action, name)

        self.cache.invalidate(name)
        await self.publisher.status_changed(name, status)
        return result.to_dict()

    async def delete_project(self, name: str) -> dict[str, Any]:
        """Remove a project's containers and registration (no snapshot)."""
        self._validate_project_name(name)
        self._log_operation("Deleting project", project=name)

        result = await self.runner.run("delete", name, "--omit-snapshot", "--yes")

        self.cache.invalidate(name)
        await self.publisher.project_deleted(name)
        return result.to_dict()

    async def import_database(self, name: str, file_path: Path) -> dict[str, Any]:
        """Import a database dump into the project's database container."""
        self._validate_project_name(name)
        self._log_operation("Importing database", project=name, file=file_path.name)

        result = await self.runner.run("import-db", name, f"--file={file_path}")

        await self.publisher.database_imported(name)
        return result.to_dict()

    async def export_database(self, name: str, output_path: Path) -> Path:
        """Write a gzipped dump of the project's database to ``output_path``."""
        self._validate_project_name(name)
        self._log_operation("Exporting database", project=name)

        await self.runner.run("export-db", name, f"--file={output_path}")
        return output_path
