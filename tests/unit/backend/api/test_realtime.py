"""
Unit Tests for the Realtime Message Handler.
"""

import pytest

from ddev_manager.backend.api.realtime import WELCOME_MESSAGE, handle_client_message
from ddev_manager.backend.events.registry import ConnectionRegistry


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


class TestHandleClientMessage:
    """Tests for handle_client_message."""

    def test_welcome_message(self):
        assert WELCOME_MESSAGE == {"type": "connection", "message": "Connected to DDEV Manager"}

    @pytest.mark.asyncio
    async def test_subscribe(self, registry, mock_websocket):
        """Should store the subscription and confirm it."""
        connection = registry.register(mock_websocket)

        await handle_client_message(
            registry, connection, '{"type": "subscribe", "projects": ["shop", "blog"]}',
        )

        assert connection.subscriptions == {"shop", "blog"}
        mock_websocket.send_json.assert_awaited_once_with(
            {"type": "subscribed", "projects": ["blog", "shop"]}
        )

    @pytest.mark.asyncio
    async def test_empty_subscription_resets_to_all(self, registry, mock_websocket):
        connection = registry.register(mock_websocket)
        connection.subscriptions = {"shop"}

        await handle_client_message(registry, connection, '{"type": "subscribe", "projects": []}')

        assert connection.subscriptions == set()
        assert connection.wants("anything")

    @pytest.mark.asyncio
    async def test_non_list_projects_treated_as_empty(self, registry, mock_websocket):
        connection = registry.register(mock_websocket)

        await handle_client_message(registry, connection, '{"type": "subscribe", "projects": "shop"}')

        assert connection.subscriptions == set()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["not json", "[1, 2]", '"subscribe"', '{"type": "ping"}'])
    async def test_ignores_other_messages(self, registry, mock_websocket, text):
        """Should log and ignore malformed or unknown messages."""
        connection = registry.register(mock_websocket)

        await handle_client_message(registry, connection, text)

        mock_websocket.send_json.assert_not_awaited()
        assert connection.subscriptions == set()
        assert len(registry) == 1
