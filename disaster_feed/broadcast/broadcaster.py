"""Room-based WebSocket broadcaster with optional Redis pub/sub fan-out.

With Redis, ``emit`` publishes to the ``disaster_feed:broadcast`` channel and
every API process runs its own subscriber that forwards messages to its
local clients, so fan-out works across uvicorn workers. Without Redis,
``emit`` dispatches to local clients directly.

Clients receive a message when it is global (``room`` is None) or when
they have joined the message's room.
"""

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from starlette.websockets import WebSocket

from disaster_feed.observability.metrics import get_metrics

logger = logging.getLogger(__name__)

CHANNEL_NAME = "disaster_feed:broadcast"
SYSTEM_ALERT = "system_alert"


class BroadcastPort(Protocol):
    """Fire-and-forget event fan-out."""

    async def emit(
        self,
        event: str,
        payload: Any,
        room: str | None = None,
        exclude: WebSocket | None = None,
    ) -> None:
        ...


def disaster_room(disaster_id: str) -> str:
    return f"disaster_{disaster_id}"


def location_room(lat: float, lng: float, radius: float = 10) -> str:
    return f"location_{round(lat * 100)}_{round(lng * 100)}_{radius:g}"


@dataclass
class ClientConnection:
    """A connected WebSocket client and the rooms it has joined."""

    ws: WebSocket
    rooms: set[str] = field(default_factory=set)
    client_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    connected_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class UpdateBroadcaster:
    """Manages WebSocket clients, room membership and event fan-out.

    Lifecycle:
        1. ``start(redis_client)``: subscribe to Redis (optional), spawn heartbeat
        2. ``connect`` / ``join`` / ``leave`` / ``disconnect``: manage clients
        3. ``stop()``: cancel background tasks, close pub/sub
    """

    def __init__(
        self,
        max_connections: int = 500,
        heartbeat_interval: int = 30,
    ) -> None:
        self._max_connections = max_connections
        self._heartbeat_interval = heartbeat_interval
        self._clients: dict[WebSocket, ClientConnection] = {}
        self._redis: Any | None = None
        self._pubsub: Any | None = None
        self._subscriber_task: asyncio.Task | None = None
        self._heartbeat_task: asyncio.Task | None = None
        self._running = False

    @property
    def active_connections(self) -> int:
        return len(self._clients)

    @property
    def running(self) -> bool:
        return self._running

    def connect(self, ws: WebSocket, rooms: list[str] | None = None) -> bool:
        """Register a client. Returns False when the connection limit is reached."""
        if len(self._clients) >= self._max_connections:
            return False

        self._clients[ws] = ClientConnection(ws=ws, rooms=set(rooms or []))
        logger.info("WebSocket client connected (total=%d)", len(self._clients))
        return True

    def disconnect(self, ws: WebSocket) -> None:
        removed = self._clients.pop(ws, None)
        if removed:
            logger.info("WebSocket client disconnected (total=%d)", len(self._clients))

    def join(self, ws: WebSocket, room: str) -> bool:
        client = self._clients.get(ws)
        if client is None:
            return False
        client.rooms.add(room)
        logger.debug("Client joined room %s", room)
        return True

    def leave(self, ws: WebSocket, room: str) -> bool:
        client = self._clients.get(ws)
        if client is None:
            return False
        client.rooms.discard(room)
        logger.debug("Client left room %s", room)
        return True

    def rooms_for(self, ws: WebSocket) -> set[str]:
        client = self._clients.get(ws)
        return set(client.rooms) if client else set()

    def room_info(self, room: str) -> dict[str, Any]:
        members = sum(1 for c in self._clients.values() if room in c.rooms)
        return {"room": room, "client_count": members}

    async def start(self, redis_client: Any | None = None) -> None:
        """Start background tasks. Pass a Redis client for cross-process fan-out."""
        if self._running:
            return

        self._running = True

        if redis_client is not None:
            try:
                self._pubsub = redis_client.pubsub()
                await self._pubsub.subscribe(CHANNEL_NAME)
                self._redis = redis_client
                self._subscriber_task = asyncio.create_task(
                    self._listen(), name="update-broadcaster-listener",
                )
            except Exception as e:
                self._pubsub = None
                self._redis = None
                logger.error("Redis subscription failed, broadcasting in-process only: %s", e)

        self._heartbeat_task = asyncio.create_task(
            self._send_heartbeats(), name="update-broadcaster-heartbeat",
        )
        logger.info(
            "UpdateBroadcaster started (redis=%s, heartbeat=%ds)",
            self._redis is not None, self._heartbeat_interval,
        )

    async def stop(self) -> None:
        self._running = False

        for task in (self._subscriber_task, self._heartbeat_task):
            if task is None:
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._subscriber_task = None
        self._heartbeat_task = None

        if self._pubsub is not None:
            try:
                await self._pubsub.unsubscribe(CHANNEL_NAME)
                await self._pubsub.close()
            except Exception as e:
                logger.warning("Error closing pub/sub: %s", e)
            self._pubsub = None
        self._redis = None

        self._clients.clear()
        logger.info("UpdateBroadcaster stopped")

    async def emit(
        self,
        event: str,
        payload: Any,
        room: str | None = None,
        exclude: WebSocket | None = None,
    ) -> None:
        """Send ``payload`` as ``event`` to everyone, or to one room. Never raises.

        ``exclude`` names a sending client that must not receive its own event.
        """
        message = {
            "event": event,
            "room": room,
            "data": payload,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        sender = self._clients.get(exclude) if exclude is not None else None
        if sender is not None:
            message["exclude"] = sender.client_id
        get_metrics().record_broadcast(event)

        if self._redis is not None:
            try:
                await self._redis.publish(CHANNEL_NAME, json.dumps(message, default=str))
                return
            except Exception as e:
                logger.warning("Failed to publish %s to broadcast channel, sending locally: %s", event, e)

        await self._deliver(message)

    async def emit_disaster_update(self, disaster_id: str, event: str, data: Any) -> None:
        payload = {"disaster_id": disaster_id, "data": data}
        await self.emit(event, payload, room=disaster_room(disaster_id))

    async def emit_location_update(
        self,
        lat: float,
        lng: float,
        radius: float,
        event: str,
        data: Any,
    ) -> None:
        payload = {"location": {"lat": lat, "lng": lng, "radius": radius}, "data": data}
        await self.emit(event, payload, room=location_room(lat, lng, radius))

    async def broadcast_alert(self, data: Any) -> None:
        await self.emit(SYSTEM_ALERT, data)

    async def _deliver(self, message: dict[str, Any]) -> None:
        """Send a message to matching local clients, dropping dead ones."""
        excluded = message.pop("exclude", None)
        room = message.get("room")
        text = json.dumps(message, default=str)

        disconnected: list[WebSocket] = []
        for ws, client in list(self._clients.items()):
            if room is not None and room not in client.rooms:
                continue
            if excluded is not None and client.client_id == excluded:
                continue
            try:
                await ws.send_text(text)
            except Exception:
                disconnected.append(ws)

        for ws in disconnected:
            self.disconnect(ws)

    async def _listen(self) -> None:
        """Background task: forward pub/sub messages to local clients."""
        try:
            while self._running:
                try:
                    message = await self._pubsub.get_message(
                        ignore_subscribe_messages=True, timeout=1.0,
                    )
                    if message is not None and message["type"] == "message":
                        await self._dispatch_message(message["data"])
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.warning("Error reading pub/sub message: %s", e)
                    await asyncio.sleep(1.0)
        except asyncio.CancelledError:
            pass

    async def _dispatch_message(self, raw_data: str | bytes) -> None:
        try:
            if isinstance(raw_data, bytes):
                raw_data = raw_data.decode("utf-8")
            message = json.loads(raw_data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Invalid broadcast message: %s", e)
            return

        await self._deliver(message)

    async def _send_heartbeats(self) -> None:
        try:
            while self._running:
                await asyncio.sleep(self._heartbeat_interval)
                if not self._clients:
                    continue

                heartbeat = json.dumps({
                    "type": "heartbeat",
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                })

                disconnected: list[WebSocket] = []
                for ws in list(self._clients):
                    try:
                        await ws.send_text(heartbeat)
                    except Exception:
                        disconnected.append(ws)

                for ws in disconnected:
                    self.disconnect(ws)
        except asyncio.CancelledError:
            pass
