"""Event fan-out to WebSocket clients."""

from disaster_feed.broadcast.broadcaster import (
    CHANNEL_NAME,
    BroadcastPort,
    ClientConnection,
    UpdateBroadcaster,
    disaster_room,
    location_room,
)

__all__ = [
    "CHANNEL_NAME",
    "BroadcastPort",
    "ClientConnection",
    "UpdateBroadcaster",
    "disaster_room",
    "location_room",
]
