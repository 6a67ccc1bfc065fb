"""WebSocket endpoint for the live table-editing relay."""

from __future__ import annotations

from fastapi import APIRouter, Depends, WebSocket

from ace.api.deps import get_collaboration_hub
from ace.collab.hub import CollaborationHub
from ace.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Collaboration"])


@router.websocket("/ws")
async def collaboration_socket(
    websocket: WebSocket,
    hub: CollaborationHub = Depends(get_collaboration_hub),
) -> None:
    await websocket.accept()
    participant = hub.connect(websocket)
    logger.debug("Relay connection opened", connections=len(hub.participants))
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None and message.get("bytes") is not None:
                raw = message["bytes"].decode("utf-8", errors="replace")
            if raw is not None:
                await hub.handle_message(participant, raw)
    finally:
        await hub.disconnect(participant)
        logger.debug("Relay connection closed", connections=len(hub.participants))
