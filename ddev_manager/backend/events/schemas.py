"""
Event Schemas.

Standardized event envelope and project event types pushed to realtime
sessions. Every event carries its kind in ``type`` and the project name
it concerns in ``project``; ``data`` holds the optional payload.

On the wire, payload keys are also flattened onto the top level so that
clients written against ``{"type": ..., "project": ..., "status": ...}``
keep working.

Usage:
    from ddev_manager.backend.events.schemas import ProjectStatusChanged

    event = ProjectStatusChanged(project="mysite", data={"status": "starting"})
    await registry.broadcast(event)
"""

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from ddev_manager.backend.core.utils import utc_now


class EventEnvelope(BaseModel):
    """Base event envelope. All project events inherit from this.

    Fields:
        event_id: Unique event identifier (auto-generated UUID)
        type: Event kind (e.g. project_status_changed)
        project: Name of the project the event concerns
        timestamp: ISO 8601 UTC timestamp
        data: Event-specific payload
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    type: str
    project: str
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    data: dict[str, Any] | None = None

    def to_message(self) -> dict[str, Any]:
        """JSON-ready dict sent to sessions."""
        message = self.model_dump(mode="json")
        for key, value in (self.data or {}).items():
            message.setdefault(key, value)
        return message


class ProjectCreated(EventEnvelope):
    """Published when ``ddev config`` created a project."""

    type: str = "project_created"


class ProjectDeleted(EventEnvelope):
    """Published when a project was deleted."""

    type: str = "project_deleted"


class ProjectStatusChanged(EventEnvelope):
    """Published after start/stop/restart. ``data.status`` names the transition."""

    type: str = "project_status_changed"


class ProjectConfigUpdated(EventEnvelope):
    """Published after config.yaml was rewritten. ``data.config`` is the merged document."""

    type: str = "project_config_updated"


class DatabaseImported(EventEnvelope):
    """Published after a database dump was imported."""

    type: str = "database_imported"
