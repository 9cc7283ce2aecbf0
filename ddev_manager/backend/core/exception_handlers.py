"""
Exception Handlers.

FastAPI exception handlers that convert application exceptions
to standardized API responses. All exceptions are logged and
returned in the standard ErrorResponse format:

    {"success": false, "message": ..., "details": [...], "error": {...}, "metadata": {...}}

Usage:
    from ddev_manager.backend.core.exception_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ddev_manager.backend.core.exceptions import (
    ApplicationError,
    CommandFailedError,
    ConfigReadError,
    FilesystemPermissionError,
    NotFoundError,
    RateLimitError,
    ToolNotInstalledError,
    UploadRejectedError,
    ValidationError,
)
from ddev_manager.backend.core.logging import get_logger
from ddev_manager.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

# Map exception types to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    ValidationError: 400,
    UploadRejectedError: 400,
    FilesystemPermissionError: 403,
    NotFoundError: 404,
    RateLimitError: 429,
    CommandFailedError: 500,
    ConfigReadError: 500,
    ToolNotInstalledError: 503,
}

# Client-facing summary per status, details carry the raw text
_STATUS_MESSAGES: dict[type[ApplicationError], str] = {
    CommandFailedError: "DDEV Operation Failed",
    NotFoundError: "Resource not found",
    FilesystemPermissionError: "Permission denied",
}


def _get_request_id(request: Request) -> str | None:
    """Extract request ID from request state or headers."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def build_error_response(
    status_code: int,
    code: str,
    message: str,
    details: list[Any] | None = None,
    request_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render the uniform error envelope."""
    response = ErrorResponse(
        message=message,
        details=details or None,
        error=ErrorDetail(code=code, message=message, details=details or None),
        metadata=ResponseMetadata(request_id=request_id),
    )
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json"),
        headers=headers,
    )


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """
    Handle all ApplicationError subclasses.

    Converts application exceptions to standardized JSON responses
    with appropriate HTTP status codes.
    """
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    request_id = _get_request_id(request)

    log_extra = {
        "code": exc.code,
        "message": exc.message,
        "status": status_code,
        "path": request.url.path,
        "method": request.method,
    }
    if request_id:
        log_extra["request_id"] = request_id

    if status_code >= 500:
        logger.error("Server error", extra=log_extra)
    else:
        logger.warning("Client error", extra=log_extra)

    message = _STATUS_MESSAGES.get(type(exc), exc.message)
    details = list(exc.details)
    if message != exc.message and exc.message not in details:
        details.insert(0, exc.message)

    return build_error_response(
        status_code,
        exc.code,
        message,
        details=details,
        request_id=request_id,
    )


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle FastAPI/Pydantic request validation errors.

    Every problem is flattened to a "field: message" string so clients
    get a plain list of field-level messages.
    """
    request_id = _get_request_id(request)

    errors = exc.errors()
    details = [
        f"{'.'.join(str(loc) for loc in err.get('loc', ()) if loc not in ('body', 'query', 'path'))}: "
        f"{err.get('msg', 'Validation error')}"
        for err in errors
    ]

    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": len(errors),
            "request_id": request_id,
        },
    )

    return build_error_response(
        400,
        "VAL_REQUEST_INVALID",
        "Validation error",
        details=details,
        request_id=request_id,
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Wrap framework HTTP errors (unknown route, wrong method) in the envelope."""
    return build_error_response(
        exc.status_code,
        f"HTTP_{exc.status_code}",
        str(exc.detail),
        request_id=_get_request_id(request),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Catches all unhandled exceptions and returns a generic error
    response. The exception itself only goes to the log, never to the client.
    """
    request_id = _get_request_id(request)

    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "request_id": request_id,
        },
    )

    return build_error_response(
        500,
        "SYS_INTERNAL_ERROR",
        "Internal Server Error",
        request_id=request_id,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
