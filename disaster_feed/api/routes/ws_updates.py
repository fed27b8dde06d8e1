"""WebSocket endpoint for real-time disaster updates.

Clients connect to ``/ws/updates`` and manage room membership with JSON
messages. Server events (``social_media_updated``, ``urgent_alert``,
``system_alert`` and so on) arrive as ``{event, room, data, timestamp}``.

Auth is via ``api_key`` query parameter since browsers cannot set
custom headers on WebSocket upgrade requests.
"""

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from disaster_feed.api.auth import validate_ws_api_key
from disaster_feed.api.dependencies import get_broadcaster
from disaster_feed.broadcast.broadcaster import UpdateBroadcaster, disaster_room, location_room
from disaster_feed.config.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

URGENT_ALERT = "urgent_alert"
USER_TYPING = "user_typing"


class MessageError(ValueError):
    """A client message that cannot be handled."""


def _require(msg: dict[str, Any], key: str) -> Any:
    value = msg.get(key)
    if value is None or value == "":
        raise MessageError(f"'{key}' is required")
    return value


async def handle_message(
    ws: WebSocket,
    broadcaster: UpdateBroadcaster,
    msg: dict[str, Any],
) -> dict[str, Any] | None:
    """Apply one client message. Returns the direct reply, if any."""
    msg_type = msg.get("type")

    if msg_type == "ping":
        return {"type": "pong"}

    if msg_type == "join_disaster":
        room = disaster_room(str(_require(msg, "disaster_id")))
        broadcaster.join(ws, room)
        return {"type": "joined", "room": room}

    if msg_type == "leave_disaster":
        room = disaster_room(str(_require(msg, "disaster_id")))
        broadcaster.leave(ws, room)
        return {"type": "left", "room": room}

    if msg_type == "join_location":
        try:
            lat = float(_require(msg, "lat"))
            lng = float(_require(msg, "lng"))
            radius = float(msg.get("radius", 10))
        except (TypeError, ValueError) as e:
            raise MessageError("'lat', 'lng' and 'radius' must be numbers") from e
        # NaN fails every comparison, so it is rejected here too
        if not (-90 <= lat <= 90 and -180 <= lng <= 180 and 0 < radius < math.inf):
            raise MessageError("'lat', 'lng' or 'radius' out of range")
        room = location_room(lat, lng, radius)
        broadcaster.join(ws, room)
        return {"type": "joined", "room": room}

    if msg_type == "emergency_alert":
        if msg.get("priority") == "urgent":
            await broadcaster.emit(URGENT_ALERT, {
                "message": msg.get("message"),
                "location": msg.get("location"),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            })
            logger.warning("Urgent alert broadcasted: %s", msg.get("message"))
        return None

    if msg_type == "typing":
        room = disaster_room(str(_require(msg, "disaster_id")))
        await broadcaster.emit(USER_TYPING, {
            "user_id": msg.get("user_id"),
            "is_typing": bool(msg.get("is_typing", False)),
        }, room=room, exclude=ws)
        return None

    raise MessageError(f"Unknown message type: {msg_type}")


@router.websocket("/ws/updates")
async def ws_updates(
    ws: WebSocket,
    api_key: str | None = Query(default=None),
    disaster_id: str | None = Query(default=None),
    broadcaster: UpdateBroadcaster = Depends(get_broadcaster),
) -> None:
    """Real-time update stream.

    Query parameters:
        api_key: API key for authentication.
        disaster_id: Optional room to join on connect.
    """
    settings = get_settings()

    if not settings.ws_enabled:
        await ws.close(code=1008, reason="WebSocket updates not enabled")
        return

    if not validate_ws_api_key(api_key):
        await ws.close(code=1008, reason="Invalid or missing API key")
        return

    await ws.accept()

    rooms = [disaster_room(disaster_id)] if disaster_id else []
    if not broadcaster.connect(ws, rooms=rooms):
        await ws.close(code=1008, reason="Max connections reached")
        return

    try:
        while True:
            try:
                raw = await ws.receive_text()
            except WebSocketDisconnect:
                break

            try:
                msg = json.loads(raw)
                if not isinstance(msg, dict):
                    raise MessageError("Message must be a JSON object")
                reply = await handle_message(ws, broadcaster, msg)
            except json.JSONDecodeError:
                reply = {"type": "error", "message": "Invalid JSON"}
            except MessageError as e:
                reply = {"type": "error", "message": str(e)}

            if reply is not None:
                await ws.send_text(json.dumps(reply))
    finally:
        broadcaster.disconnect(ws)
