"""
Database API Endpoints.

Import and export of a project's database through ddev.
"""

import time
from typing import Any

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from ddev_manager.backend.core.config import get_app_config, resolve_project_path
from ddev_manager.backend.core.dependencies import ProjectName, Projects, RequestId
from ddev_manager.backend.core.exceptions import ValidationError
from ddev_manager.backend.schemas.base import ApiResponse, ResponseMetadata
from ddev_manager.backend.services.uploads import discard, spool_upload

router = APIRouter()


@router.post(
    "/{name}/database/import",
    response_model=ApiResponse[dict[str, Any]],
    summary="Import a database",
    description="Upload a dump (multipart field `database`) and run `ddev import-db`.",
)
async def import_database(
    name: ProjectName,
    service: Projects,
    request_id: RequestId,
    database: UploadFile | None = File(default=None),
) -> ApiResponse[dict[str, Any]]:
    """Import a database dump into a project."""
    if database is None:
        raise ValidationError("No database file provided")

    ddev_config = get_app_config().ddev
    path = await spool_upload(
        database,
        resolve_project_path(ddev_config.upload_dir),
        max_bytes=ddev_config.max_upload_bytes,
        chunk_size=ddev_config.upload_chunk_bytes,
    )
    try:
        result = await service.import_database(name, path)
    finally:
        discard(path)

    return ApiResponse(
        data=result,
        message=f"Database imported successfully for project {name}",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{name}/database/export",
    response_class=FileResponse,
    summary="Export a database",
    description="Run `ddev export-db` and download the gzipped dump.",
)
async def export_database(
    name: ProjectName,
    service: Projects,
) -> FileResponse:
    """Export a project's database as a download."""
    export_dir = resolve_project_path(get_app_config().ddev.export_dir)
    output_path = export_dir / f"{name}_database_{int(time.time() * 1000)}.sql.gz"

    try:
        await service.export_database(name, output_path)
    except Exception:
        discard(output_path)
        raise

    return FileResponse(
        output_path,
        media_type="application/gzip",
        filename=f"{name}_database.sql.gz",
        background=BackgroundTask(discard, output_path),
    )
