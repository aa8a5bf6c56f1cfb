from guildhall.realtime.broadcaster import (
    EventBroadcaster,
    InMemoryPublisher,
    Publisher,
    SocketIOPublisher,
    guild_room,
    world_room,
)

__all__ = [
    "EventBroadcaster",
    "InMemoryPublisher",
    "Publisher",
    "SocketIOPublisher",
    "guild_room",
    "world_room",
]
