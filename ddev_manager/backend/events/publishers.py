"""
Event Publishers.

Domain-specific event publishers. Each method builds the matching event
schema and hands it to the connection registry for fan-out.

Publishers check the events_publish_enabled feature flag before publishing.
When disabled, events are silently skipped (no error, no log noise).

Usage:
    from ddev_manager.backend.events.publishers import ProjectEventPublisher

    publisher = ProjectEventPublisher(registry)
    await publisher.status_changed("mysite", "starting")
"""

from typing import Any

from ddev_manager.backend.core.logging import get_logger
from ddev_manager.backend.events.registry import ConnectionRegistry
from ddev_manager.backend.events.schemas import (
    DatabaseImported,
    EventEnvelope,
    ProjectConfigUpdated,
    ProjectCreated,
    ProjectDeleted,
    ProjectStatusChanged,
)

logger = get_logger(__name__)


class ProjectEventPublisher:
    """Publishes project events to connected realtime sessions."""

    def __init__(self, registry: ConnectionRegistry, enabled: bool | None = None) -> None:
        self.registry = registry
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        if self._enabled is None:
            from ddev_manager.backend.core.config import get_app_config
            return get_app_config().features.events_publish_enabled
        return self._enabled

    async def project_created(self, project: str) -> None:
        await self._publish(ProjectCreated(project=project))

    async def project_deleted(self, project: str) -> None:
        await self._publish(ProjectDeleted(project=project))

    async def status_changed(self, project: str, status: str) -> None:
        await self._publish(ProjectStatusChanged(project=project, data={"status": status}))

    async def config_updated(self, project: str, config: dict[str, Any]) -> None:
        await self._publish(ProjectConfigUpdated(project=project, data={"config": config}))

    async def database_imported(self, project: str) -> None:
        await self._publish(DatabaseImported(project=project))

    async def _publish(self, event: EventEnvelope) -> None:
        """Publish an event if the feature flag is enabled."""
        if not self.enabled:
            return

        delivered = await self.registry.broadcast(event)
        logger.debug(
            "Event published",
            extra={"event_type": event.type, "event_id": event.event_id, "delivered": delivered},
        )
