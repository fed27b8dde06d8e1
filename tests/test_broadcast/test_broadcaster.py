"""Tests for UpdateBroadcaster: connections, rooms, emit and Redis fan-out."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from disaster_feed.broadcast.broadcaster import (
    CHANNEL_NAME,
    UpdateBroadcaster,
    disaster_room,
    location_room,
)


def _mock_ws():
    """Create a mock WebSocket."""
    ws = AsyncMock()
    ws.send_text = AsyncMock()
    return ws


def _sent(ws) -> list[dict]:
    return [json.loads(call.args[0]) for call in ws.send_text.await_args_list]


class TestRoomNames:
    def test_disaster_room(self):
        assert disaster_room("42") == "disaster_42"

    def test_location_room(self):
        assert location_room(40.7128, -74.006, 10) == "location_4071_-7401_10"

    def test_location_room_float_radius(self):
        assert location_room(40.7128, -74.006, 10.0) == "location_4071_-7401_10"
        assert location_room(40.7128, -74.006, 2.5) == "location_4071_-7401_2.5"


class TestConnectionManagement:
    def test_connect_registers_client(self):
        broadcaster = UpdateBroadcaster(max_connections=10)

        assert broadcaster.connect(_mock_ws()) is True
        assert broadcaster.active_connections == 1

    def test_connect_with_initial_room(self):
        broadcaster = UpdateBroadcaster()
        ws = _mock_ws()

        broadcaster.connect(ws, rooms=["disaster_42"])

        assert broadcaster.rooms_for(ws) == {"disaster_42"}

    def test_max_connections(self):
        broadcaster = UpdateBroadcaster(max_connections=1)
        broadcaster.connect(_mock_ws())

        assert broadcaster.connect(_mock_ws()) is False
        assert broadcaster.active_connections == 1

    def test_disconnect(self):
        broadcaster = UpdateBroadcaster()
        ws = _mock_ws()
        broadcaster.connect(ws)

        broadcaster.disconnect(ws)
        broadcaster.disconnect(ws)  # idempotent

        assert broadcaster.active_connections == 0

    def test_join_leave_and_room_info(self):
        broadcaster = UpdateBroadcaster()
        a, b = _mock_ws(), _mock_ws()
        broadcaster.connect(a)
        broadcaster.connect(b)

        broadcaster.join(a, "disaster_42")
        broadcaster.join(b, "disaster_42")
        broadcaster.leave(b, "disaster_42")

        assert broadcaster.room_info("disaster_42") == {"room": "disaster_42", "client_count": 1}

    def test_join_unknown_client(self):
        assert UpdateBroadcaster().join(_mock_ws(), "disaster_42") is False


class TestEmit:
    @pytest.mark.asyncio
    async def test_global_emit_reaches_everyone(self):
        broadcaster = UpdateBroadcaster()
        a, b = _mock_ws(), _mock_ws()
        broadcaster.connect(a)
        broadcaster.connect(b, rooms=["disaster_1"])

        await broadcaster.emit("social_media_updated", {"disaster_id": "1", "data": []})

        for ws in (a, b):
            (message,) = _sent(ws)
            assert message["event"] == "social_media_updated"
            assert message["room"] is None
            assert message["data"] == {"disaster_id": "1", "data": []}
            assert "timestamp" in message

    @pytest.mark.asyncio
    async def test_room_emit_reaches_members_only(self):
        broadcaster = UpdateBroadcaster()
        member, outsider = _mock_ws(), _mock_ws()
        broadcaster.connect(member, rooms=["disaster_42"])
        broadcaster.connect(outsider)

        await broadcaster.emit_disaster_update("42", "official_update", {"id": "1"})

        (message,) = _sent(member)
        assert message["room"] == "disaster_42"
        assert message["data"] == {"disaster_id": "42", "data": {"id": "1"}}
        outsider.send_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sender_excluded_from_own_event(self):
        broadcaster = UpdateBroadcaster()
        sender, peer = _mock_ws(), _mock_ws()
        broadcaster.connect(sender, rooms=["disaster_42"])
        broadcaster.connect(peer, rooms=["disaster_42"])

        await broadcaster.emit("user_typing", {"user_id": "u1"}, room="disaster_42", exclude=sender)

        sender.send_text.assert_not_awaited()
        (message,) = _sent(peer)
        assert message["event"] == "user_typing"
        assert "exclude" not in message

    @pytest.mark.asyncio
    async def test_location_update(self):
        broadcaster = UpdateBroadcaster()
        ws = _mock_ws()
        broadcaster.connect(ws, rooms=[location_room(40.7128, -74.006, 10)])

        await broadcaster.emit_location_update(40.7128, -74.006, 10, "resource_update", {"beds": 12})

        (message,) = _sent(ws)
        assert message["data"]["location"] == {"lat": 40.7128, "lng": -74.006, "radius": 10}
        assert message["data"]["data"] == {"beds": 12}

    @pytest.mark.asyncio
    async def test_broadcast_alert(self):
        broadcaster = UpdateBroadcaster()
        ws = _mock_ws()
        broadcaster.connect(ws)

        await broadcaster.broadcast_alert({"type": "maintenance"})

        assert _sent(ws)[0]["event"] == "system_alert"

    @pytest.mark.asyncio
    async def test_dead_client_dropped(self):
        broadcaster = UpdateBroadcaster()
        dead, alive = _mock_ws(), _mock_ws()
        dead.send_text.side_effect = RuntimeError("closed")
        broadcaster.connect(dead)
        broadcaster.connect(alive)

        await broadcaster.emit("system_alert", {})

        assert broadcaster.active_connections == 1
        alive.send_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_emit_without_clients(self):
        await UpdateBroadcaster().emit("system_alert", {})


class TestRedisFanOut:
    @staticmethod
    def _redis():
        async def _no_message(**kwargs):
            await asyncio.sleep(0.01)
            return None

        pubsub = MagicMock()
        pubsub.subscribe = AsyncMock()
        pubsub.unsubscribe = AsyncMock()
        pubsub.close = AsyncMock()
        pubsub.get_message = AsyncMock(side_effect=_no_message)

        redis_client = MagicMock()
        redis_client.pubsub.return_value = pubsub
        redis_client.publish = AsyncMock()
        return redis_client, pubsub

    @pytest.mark.asyncio
    async def test_start_subscribes_and_emit_publishes(self):
        redis_client, pubsub = self._redis()
        broadcaster = UpdateBroadcaster(heartbeat_interval=300)
        ws = _mock_ws()
        broadcaster.connect(ws)

        await broadcaster.start(redis_client)
        try:
            pubsub.subscribe.assert_awaited_once_with(CHANNEL_NAME)

            await broadcaster.emit("system_alert", {"msg": "hi"}, room=None)

            channel, payload = redis_client.publish.await_args.args
            assert channel == CHANNEL_NAME
            assert json.loads(payload)["data"] == {"msg": "hi"}
            # delivery happens via the subscriber, not directly
            ws.send_text.assert_not_awaited()
        finally:
            await broadcaster.stop()

        assert broadcaster.running is False
        pubsub.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_publish_failure_delivers_locally(self):
        redis_client, _ = self._redis()
        redis_client.publish.side_effect = ConnectionError("redis down")
        broadcaster = UpdateBroadcaster(heartbeat_interval=300)
        ws = _mock_ws()
        broadcaster.connect(ws)

        await broadcaster.start(redis_client)
        try:
            await broadcaster.emit("system_alert", {})
        finally:
            await broadcaster.stop()

        ws.send_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dispatch_message_routes_by_room(self):
        broadcaster = UpdateBroadcaster()
        member, outsider = _mock_ws(), _mock_ws()
        broadcaster.connect(member, rooms=["disaster_7"])
        broadcaster.connect(outsider)

        raw = json.dumps({"event": "x", "room": "disaster_7", "data": {}, "timestamp": "t"}).encode()
        await broadcaster._dispatch_message(raw)

        member.send_text.assert_awaited_once()
        outsider.send_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exclusion_survives_pubsub(self):
        redis_client, _ = self._redis()
        broadcaster = UpdateBroadcaster(heartbeat_interval=300)
        sender, peer = _mock_ws(), _mock_ws()
        broadcaster.connect(sender, rooms=["disaster_42"])
        broadcaster.connect(peer, rooms=["disaster_42"])

        await broadcaster.start(redis_client)
        try:
            await broadcaster.emit("user_typing", {}, room="disaster_42", exclude=sender)
            _, payload = redis_client.publish.await_args.args
            await broadcaster._dispatch_message(payload)
        finally:
            await broadcaster.stop()

        sender.send_text.assert_not_awaited()
        peer.send_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_message_ignored(self):
        broadcaster = UpdateBroadcaster()
        ws = _mock_ws()
        broadcaster.connect(ws)

        await broadcaster._dispatch_message("not json")

        ws.send_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_start_without_redis(self):
        broadcaster = UpdateBroadcaster(heartbeat_interval=300)

        await broadcaster.start()
        assert broadcaster.running is True
        await broadcaster.stop()

        assert broadcaster.running is False

    @pytest.mark.asyncio
    async def test_heartbeat_sent(self):
        broadcaster = UpdateBroadcaster(heartbeat_interval=0)
        ws = _mock_ws()
        broadcaster.connect(ws)

        await broadcaster.start()
        await asyncio.sleep(0.05)
        await broadcaster.stop()

        assert any(msg.get("type") == "heartbeat" for msg in _sent(ws))
