"""
Unit Tests for Event Publishers.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ddev_manager.backend.events.publishers import ProjectEventPublisher


@pytest.fixture
def mock_registry() -> MagicMock:
    registry = MagicMock()
    registry.broadcast = AsyncMock(return_value=1)
    return registry


def _published(registry: MagicMock):
    return registry.broadcast.call_args.args[0]


class TestProjectEventPublisher:
    """Tests for ProjectEventPublisher."""

    @pytest.mark.asyncio
    async def test_status_changed(self, mock_registry):
        """Should publish project_status_changed with the status payload."""
        publisher = ProjectEventPublisher(mock_registry, enabled=True)

        await publisher.status_changed("mysite", "stopped")

        event = _published(mock_registry)
        assert event.type == "project_status_changed"
        assert event.project == "mysite"
        assert event.data == {"status": "stopped"}

    @pytest.mark.asyncio
    async def test_config_updated_carries_document(self, mock_registry):
        """Should include the merged config in the payload."""
        publisher = ProjectEventPublisher(mock_registry, enabled=True)

        await publisher.config_updated("mysite", {"php_version": "8.3"})

        event = _published(mock_registry)
        assert event.type == "project_config_updated"
        assert event.data == {"config": {"php_version": "8.3"}}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("method", "event_type"),
        [
            ("project_created", "project_created"),
            ("project_deleted", "project_deleted"),
            ("database_imported", "database_imported"),
        ],
    )
    async def test_simple_events(self, mock_registry, method, event_type):
        """Should publish payload-free events under their wire names."""
        publisher = ProjectEventPublisher(mock_registry, enabled=True)

        await getattr(publisher, method)("mysite")

        assert _published(mock_registry).type == event_type

    @pytest.mark.asyncio
    async def test_disabled_publisher_is_silent(self, mock_registry):
        """Should skip publishing when disabled."""
        publisher = ProjectEventPublisher(mock_registry, enabled=False)

        await publisher.project_created("mysite")

        mock_registry.broadcast.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_flag_read_from_features(self, mock_registry):
        """Should follow events_publish_enabled when no override is given."""
        config = MagicMock()
        config.features.events_publish_enabled = False

        with patch("ddev_manager.backend.core.config.get_app_config", return_value=config):
            publisher = ProjectEventPublisher(mock_registry)
            await publisher.project_deleted("mysite")

        mock_registry.broadcast.assert_not_awaited()
