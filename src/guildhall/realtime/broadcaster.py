"""
Outward notifications for committed state changes.

Hero and master events go only to the owning guild's room
(``guild:<guild_id>``); nothing is ever broadcast globally. Publication is
fire-and-forget relative to the caller's response.
"""

import logging
from typing import Any, Protocol

from flask_socketio import SocketIO

from guildhall.models import ActionResult, Hero, World

logger = logging.getLogger(__name__)

HERO_UPDATE = "hero:update"
WORLD_STATE = "world:state"
MASTER_RESULT = "master:result"
ERROR = "error"


def guild_room(guild_id: str) -> str:
    return f"guild:{guild_id}"


def world_room(world_id: str) -> str:
    return f"world:{world_id}"


class Publisher(Protocol):
    def publish(self, room: str, event: str, payload: Any) -> None:
        ...


class SocketIOPublisher:
    """Emits on a Flask-SocketIO server from a background task so callers never wait on delivery."""

    def __init__(self, socketio: SocketIO):
        self.socketio = socketio

    def publish(self, room: str, event: str, payload: Any) -> None:
        self.socketio.start_background_task(self._emit, room, event, payload)

    def _emit(self, room: str, event: str, payload: Any) -> None:
        try:
            self.socketio.emit(event, payload, to=room)
        except Exception as e:
            logger.error("Failed to emit %s to %s: %s", event, room, e)


class InMemoryPublisher:
    """Keeps published messages in a list; used when no realtime server is attached."""

    def __init__(self):
        self.messages: list[tuple[str, str, Any]] = []

    def publish(self, room: str, event: str, payload: Any) -> None:
        self.messages.append((room, event, payload))

    def for_room(self, room: str) -> list[tuple[str, Any]]:
        return [(event, payload) for target, event, payload in self.messages if target == room]


class EventBroadcaster:
    def __init__(self, publisher: Publisher):
        self.publisher = publisher

    def hero_updated(self, guild_id: str | None, outcome: ActionResult, hero: Hero) -> None:
        if not guild_id:
            logger.warning("Dropping hero:update for hero %s with no guild room", outcome.hero_id)
            return
        self.publisher.publish(
            guild_room(guild_id),
            HERO_UPDATE,
            {"result": outcome.to_wire(), "hero": hero.to_wire()},
        )

    def master_result(self, guild_id: str, payload: dict[str, Any]) -> None:
        self.publisher.publish(guild_room(guild_id), MASTER_RESULT, payload)

    def world_state(self, world: World, room: str | None = None) -> None:
        self.publisher.publish(room or world_room(world.id), WORLD_STATE, world.to_wire())

    def error(self, room: str, message: str) -> None:
        self.publisher.publish(room, ERROR, {"message": message})
