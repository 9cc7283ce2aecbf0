"""
Realtime Connection Registry.

Owns the set of open realtime sessions and fans events out to them.
One registry is created per application by the app factory and stored on
``app.state.connections``; publishers and the WebSocket endpoint receive it
through dependency injection.

Delivery is fire-and-forget: sessions that are not connected are skipped,
sessions whose send fails are dropped, and nothing is replayed to sessions
that connect later.

Subscriptions:
    A session starts interested in every project. After it sends
    ``{"type": "subscribe", "projects": [...]}`` it only receives events
    for the listed projects; an empty list resets it to all projects.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from starlette.websockets import WebSocket, WebSocketState

from ddev_manager.backend.core.logging import get_logger
from ddev_manager.backend.events.schemas import EventEnvelope

logger = get_logger(__name__)


@dataclass
class Connection:
    """A registered realtime session."""

    websocket: WebSocket
    connection_id: str = field(default_factory=lambda: str(uuid4()))
    subscriptions: set[str] = field(default_factory=set)

    @property
    def is_ready(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    def wants(self, project: str) -> bool:
        return not self.subscriptions or project in self.subscriptions


class ConnectionRegistry:
    """Registry of open sessions with broadcast fan-out."""

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}

    def register(self, websocket: WebSocket) -> Connection:
        connection = Connection(websocket=websocket)
        self._connections[connection.connection_id] = connection
        logger.info(
            "Realtime client connected",
            extra={"connection_id": connection.connection_id, "connections": len(self._connections)},
        )
        return connection

    def unregister(self, connection: Connection) -> None:
        if self._connections.pop(connection.connection_id, None) is not None:
            logger.info(
                "Realtime client disconnected",
                extra={"connection_id": connection.connection_id, "connections": len(self._connections)},
            )

    def subscribe(self, connection: Connection, projects: list[str]) -> None:
        connection.subscriptions = {p for p in projects if isinstance(p, str)}
        logger.debug(
            "Realtime subscription updated",
            extra={"connection_id": connection.connection_id, "projects": sorted(connection.subscriptions)},
        )

    @property
    def connections(self) -> list[Connection]:
        return list(self._connections.values())

    def __len__(self) -> int:
        return len(self._connections)

    async def broadcast(self, event: EventEnvelope) -> int:
        """
        Send an event to every ready, interested session.

        Returns:
            Number of sessions the event was delivered to
        """
        message = event.to_message()
        targets = [
            c for c in self._connections.values()
            if c.is_ready and c.wants(event.project)
        ]
        if not targets:
            return 0

        results = await asyncio.gather(
            *(self._send(c, message) for c in targets),
        )
        delivered = sum(1 for ok in results if ok)

        logger.debug(
            "Event broadcast",
            extra={"event_type": event.type, "project": event.project, "delivered": delivered},
        )
        return delivered

    async def _send(self, connection: Connection, message: dict[str, Any]) -> bool:
        try:
            await connection.websocket.send_json(message)
        except Exception as e:
            logger.warning(
                "Dropping realtime client after failed send",
                extra={"connection_id": connection.connection_id, "error": str(e)},
            )
            self.unregister(connection)
            return False
        return True
