"""
FastAPI Dependencies.

Shared dependencies for request handling. Long-lived collaborators (the
command runner, connection registry, event publisher and project service)
are created once by the app factory and stored on ``app.state``; these
functions hand them to endpoints so tests can swap them with
``app.dependency_overrides``.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header, Path, Request
from starlette.requests import HTTPConnection

from ddev_manager.backend.core.logging import get_logger
from ddev_manager.backend.core.utils import PROJECT_NAME_PATTERN
from ddev_manager.backend.ddev.runner import CommandRunner
from ddev_manager.backend.events.publishers import ProjectEventPublisher
from ddev_manager.backend.events.registry import ConnectionRegistry
from ddev_manager.backend.services.project import ProjectService

logger = get_logger(__name__)


async def get_request_id(request: Request, x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID.

    Prefers the ID bound by RequestContextMiddleware so the response
    metadata matches the X-Request-ID header and the logs.
    """
    return getattr(request.state, "request_id", None) or x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


def get_runner(request: Request) -> CommandRunner:
    """The application's ddev command runner."""
    return request.app.state.runner


def get_connection_registry(connection: HTTPConnection) -> ConnectionRegistry:
    """The application's realtime connection registry (HTTP or WebSocket scope)."""
    return connection.app.state.connections


def get_publisher(request: Request) -> ProjectEventPublisher:
    """The application's project event publisher."""
    return request.app.state.publisher


def get_project_service(request: Request) -> ProjectService:
    """The application's project service (shared cache and locks)."""
    return request.app.state.project_service


Runner = Annotated[CommandRunner, Depends(get_runner)]
Registry = Annotated[ConnectionRegistry, Depends(get_connection_registry)]
Publisher = Annotated[ProjectEventPublisher, Depends(get_publisher)]
Projects = Annotated[ProjectService, Depends(get_project_service)]

# Path parameter for a project name, checked against the name allowlist
ProjectName = Annotated[
    str,
    Path(
        min_length=1,
        max_length=50,
        pattern=PROJECT_NAME_PATTERN,
        description="ddev project name",
    ),
]
