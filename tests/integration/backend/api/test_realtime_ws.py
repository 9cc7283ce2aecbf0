"""
Integration Tests for the Realtime Channel.
"""

from fastapi.testclient import TestClient


class TestRealtimeChannel:
    """WebSocket /ws"""

    def test_welcome_and_subscribe(self, app):
        """Should greet the client and confirm subscriptions."""
        registry = app.state.connections
        test_client = TestClient(app)

        with test_client.websocket_connect("/ws") as ws:
            assert ws.receive_json() == {"type": "connection", "message": "Connected to DDEV Manager"}
            assert len(registry) == 1

            ws.send_text('{"type": "subscribe", "projects": ["blog"]}')
            assert ws.receive_json() == {"type": "subscribed", "projects": ["blog"]}

            ws.send_text("garbage")
            ws.send_text('{"type": "subscribe", "projects": []}')
            assert ws.receive_json() == {"type": "subscribed", "projects": []}

        assert len(registry) == 0
