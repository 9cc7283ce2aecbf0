"""
Realtime Endpoint.

WebSocket channel that pushes project events to dashboard sessions.

Protocol:
    server → client on connect:  {"type": "connection", "message": "Connected to DDEV Manager"}
    client → server:             {"type": "subscribe", "projects": ["mysite", ...]}
    server → client:             {"type": "subscribed", "projects": [...]}
    server → client:             project events (see events/schemas.py)

Malformed messages and unknown message types are logged and ignored.
"""

import json
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ddev_manager.backend.core.dependencies import Registry
from ddev_manager.backend.core.logging import get_logger, log_with_source
from ddev_manager.backend.events.registry import Connection, ConnectionRegistry

router = APIRouter()
logger = get_logger(__name__)

WELCOME_MESSAGE = {"type": "connection", "message": "Connected to DDEV Manager"}


@router.websocket("/ws")
async def realtime_channel(websocket: WebSocket, registry: Registry) -> None:
    """Accept a session, register it, and process client messages until it closes."""
    await websocket.accept()
    connection = registry.register(websocket)

    try:
        await websocket.send_json(WELCOME_MESSAGE)
        while True:
            text = await websocket.receive_text()
            await handle_client_message(registry, connection, text)
    except WebSocketDisconnect:
        pass
    finally:
        registry.unregister(connection)


async def handle_client_message(
    registry: ConnectionRegistry,
    connection: Connection,
    text: str,
) -> None:
    """Apply one client message to the session."""
    try:
        message: Any = json.loads(text)
    except json.JSONDecodeError:
        log_with_source(
            logger, "realtime", "warning", "Ignoring malformed realtime message",
            connection_id=connection.connection_id,
        )
        return

    if not isinstance(message, dict):
        log_with_source(
            logger, "realtime", "warning", "Ignoring non-object realtime message",
            connection_id=connection.connection_id,
        )
        return

    message_type = message.get("type")
    if message_type == "subscribe":
        projects = message.get("projects") or []
        if not isinstance(projects, list):
            projects = []
        registry.subscribe(connection, projects)
        await connection.websocket.send_json(
            {"type": "subscribed", "projects": sorted(connection.subscriptions)}
        )
        return

    log_with_source(
        logger, "realtime", "debug", "Ignoring unknown realtime message type",
        connection_id=connection.connection_id,
        message_type=message_type,
    )
