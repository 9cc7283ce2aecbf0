"""
API Router.

Aggregates all /api endpoint routers.
"""

from fastapi import APIRouter

from ddev_manager.backend.api import health
from ddev_manager.backend.api.endpoints import database, projects

router = APIRouter()

# Health endpoints
router.include_router(health.router, tags=["health"])

# Project endpoints
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(database.router, prefix="/projects", tags=["database"])
