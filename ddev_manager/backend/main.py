"""
FastAPI Application Entry Point.

This is the main entry point for the DDEV Manager backend application.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import Scope

from ddev_manager.backend.api import realtime
from ddev_manager.backend.api import router as api_router
from ddev_manager.backend.core.concurrency import shutdown_pools
from ddev_manager.backend.core.config import get_app_config, resolve_project_path
from ddev_manager.backend.core.exception_handlers import register_exception_handlers
from ddev_manager.backend.core.logging import get_logger, setup_logging
from ddev_manager.backend.core.middleware import (
    RateLimitMiddleware,
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
    UploadLimitMiddleware,
)
from ddev_manager.backend.ddev.runner import CommandRunner
from ddev_manager.backend.events.publishers import ProjectEventPublisher
from ddev_manager.backend.events.registry import ConnectionRegistry
from ddev_manager.backend.services.project import ProjectService

logger = get_logger(__name__)

_app: FastAPI | None = None


class SPAStaticFiles(StaticFiles):
    """Static files that fall back to index.html for client-side routes."""

    async def get_response(self, path: str, scope: Scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as e:
            if e.status_code != 404:
                raise
            return await super().get_response("index.html", scope)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    if app_config.features.security_startup_checks_enabled:
        from ddev_manager.backend.security.startup_checks import run_startup_checks
        run_startup_checks()

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
        },
    )
    yield
    await shutdown_pools()
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application
    features = app_config.features

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )

    # Long-lived collaborators shared by every request of this app
    runner = CommandRunner()
    registry = ConnectionRegistry()
    publisher = ProjectEventPublisher(registry)
    app.state.runner = runner
    app.state.connections = registry
    app.state.publisher = publisher
    app.state.project_service = ProjectService(runner, publisher)

    app.add_middleware(UploadLimitMiddleware)
    if features.api_rate_limit_enabled:
        app.add_middleware(RateLimitMiddleware)
    if features.security_headers_enabled:
        app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")
    app.include_router(realtime.router, tags=["realtime"])

    if features.frontend_static_enabled:
        _mount_frontend(app, app_settings.frontend.build_dir)

    return app


def _mount_frontend(app: FastAPI, build_dir: str) -> None:
    """Serve the built dashboard frontend at / when a build exists."""
    path = resolve_project_path(build_dir)

    if not (path / "index.html").is_file():
        logger.debug("No frontend build found, skipping static mount", extra={"build_dir": str(path)})
        return

    app.mount("/", SPAStaticFiles(directory=str(path), html=True), name="frontend")
    logger.info("Frontend build mounted", extra={"build_dir": str(path)})


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn ddev_manager.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
