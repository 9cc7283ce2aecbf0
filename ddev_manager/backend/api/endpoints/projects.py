"""
Projects API Endpoints.

REST API endpoints for ddev project management.
"""

from typing import Any

from fastapi import APIRouter, Query

from ddev_manager.backend.core.dependencies import ProjectName, Projects, RequestId
from ddev_manager.backend.core.exceptions import ValidationError
from ddev_manager.backend.core.utils import PROJECT_NAME_PATTERN
from ddev_manager.backend.schemas.base import ApiResponse, ResponseMetadata
from ddev_manager.backend.schemas.project import (
    ProjectConfigUpdate,
    ProjectCreate,
    ProjectLogs,
    ProjectOptions,
)

router = APIRouter()

EMPTY_LIST_MESSAGE = "No DDEV projects found. Create your first project to get started!"
DELETE_CONFIRMATION_MESSAGE = (
    "Project deletion requires confirmation. Add ?confirm=true to the request."
)


@router.get(
    "",
    response_model=ApiResponse[list[dict[str, Any]]],
    summary="List projects",
    description="List every ddev project with a summary of its config.yaml.",
)
async def list_projects(
    service: Projects,
    request_id: RequestId,
) -> ApiResponse[list[dict[str, Any]]]:
    """List all projects."""
    projects = await service.list_projects()
    return ApiResponse(
        data=projects,
        count=len(projects),
        message=None if projects else EMPTY_LIST_MESSAGE,
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/options",
    response_model=ApiResponse[ProjectOptions],
    summary="Available options",
    description="PHP versions, databases, project types and webserver types accepted by create and update.",
)
async def get_options(
    service: Projects,
    request_id: RequestId,
) -> ApiResponse[ProjectOptions]:
    """Get the enumerated option sets."""
    return ApiResponse(
        data=service.get_options(),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[dict[str, Any]],
    status_code=201,
    summary="Create a project",
    description="Run `ddev config` in an existing directory.",
)
async def create_project(
    data: ProjectCreate,
    service: Projects,
    request_id: RequestId,
) -> ApiResponse[dict[str, Any]]:
    """Create a new project."""
    result = await service.create_project(data)
    return ApiResponse(
        data=result,
        message=f"Project {data.name} created successfully",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{name}",
    response_model=ApiResponse[dict[str, Any]],
    summary="Get a project",
    description="`ddev describe` output plus the project's config.yaml.",
)
async def get_project(
    name: ProjectName,
    service: Projects,
    request_id: RequestId,
) -> ApiResponse[dict[str, Any]]:
    """Get a single project."""
    project = await service.get_project(name)
    return ApiResponse(data=project, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "/{name}/config",
    response_model=ApiResponse[dict[str, Any]],
    summary="Get project config",
    description="The project's config.yaml document.",
)
async def get_project_config(
    name: ProjectName,
    service: Projects,
    request_id: RequestId,
) -> ApiResponse[dict[str, Any]]:
    """Get a project's config document."""
    config = await service.get_project_config(name)
    return ApiResponse(data=config, metadata=ResponseMetadata(request_id=request_id))


@router.put(
    "/{name}/config",
    response_model=ApiResponse[dict[str, Any]],
    summary="Update project config",
    description="Merge the given fields into config.yaml; other fields are preserved.",
)
async def update_project_config(
    name: ProjectName,
    data: ProjectConfigUpdate,
    service: Projects,
    request_id: RequestId,
) -> ApiResponse[dict[str, Any]]:
    """Update a project's config document."""
    config = await service.update_project_config(name, data.updates())
    return ApiResponse(
        data=config,
        message=f"Configuration updated for project {name}",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/{name}/start",
    response_model=ApiResponse[dict[str, Any]],
    summary="Start a project",
)
async def start_project(
    name: ProjectName,
    service: Projects,
    request_id: RequestId,
) -> ApiResponse[dict[str, Any]]:
    """Start a project's containers."""
    result = await service.start_project(name)
    return ApiResponse(
        data=result,
        message=f"Project {name} started successfully",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/{name}/stop",
    response_model=ApiResponse[dict[str, Any]],
    summary="Stop a project",
)
async def stop_project(
    name: ProjectName,
    service: Projects,
    request_id: RequestId,
) -> ApiResponse[dict[str, Any]]:
    """Stop a project's containers."""
    result = await service.stop_project(name)
    return ApiResponse(
        data=result,
        message=f"Project {name} stopped successfully",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/{name}/restart",
    response_model=ApiResponse[dict[str, Any]],
    summary="Restart a project",
)
async def restart_project(
    name: ProjectName,
    service: Projects,
    request_id: RequestId,
) -> ApiResponse[dict[str, Any]]:
    """Restart a project's containers."""
    result = await service.restart_project(name)
    return ApiResponse(
        data=result,
        message=f"Project {name} restarted successfully",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{name}",
    response_model=ApiResponse[dict[str, Any]],
    summary="Delete a project",
    description="Requires `?confirm=true`. Removes containers without taking a snapshot.",
)
async def delete_project(
    name: ProjectName,
    service: Projects,
    request_id: RequestId,
    confirm: str | None = Query(
        default=None,
        description="Must be 'true' to delete",
    ),
) -> ApiResponse[dict[str, Any]]:
    """Delete a project."""
    if confirm != "true":
        raise ValidationError(DELETE_CONFIRMATION_MESSAGE)

    result = await service.delete_project(name)
    return ApiResponse(
        data=result,
        message=f"Project {name} deleted successfully",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{name}/logs",
    response_model=ApiResponse[ProjectLogs],
    summary="Project logs",
    description="Tail the logs of one of the project's services.",
)
async def get_project_logs(
    name: ProjectName,
    service: Projects,
    request_id: RequestId,
    log_service: str = Query(
        default="web",
        alias="service",
        max_length=50,
        pattern=PROJECT_NAME_PATTERN,
        description="Container service name",
    ),
    lines: int = Query(
        default=100,
        ge=1,
        le=10000,
        description="Number of lines to tail",
    ),
) -> ApiResponse[ProjectLogs]:
    """Get a project's logs."""
    logs = await service.get_logs(name, log_service, lines)
    return ApiResponse(
        data=ProjectLogs(project=name, service=log_service, lines=lines, logs=logs),
        metadata=ResponseMetadata(request_id=request_id),
    )
