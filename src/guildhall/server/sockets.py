"""
Socket.IO event handlers.

Clients join their guild room with ``join:guild`` (a guild id, or an
object carrying ``guildId``) and then receive
``hero:update`` and ``master:result`` for that guild only. Every handler
acknowledges with ``{"ok": ...}``; failures are also emitted to the sender
as an ``error`` event.
"""

import functools
import logging
from typing import Any, Callable

from flask_socketio import SocketIO, emit, join_room

from guildhall.core import Services
from guildhall.errors import GuildhallError, InvalidInputError
from guildhall.realtime.broadcaster import ERROR, WORLD_STATE, guild_room, world_room

logger = logging.getLogger(__name__)

JOIN_GUILD = "join:guild"
HERO_ACTION = "hero:action"
WORLD_QUERY = "world:query"
MASTER_COMMAND = "master:command"


def _payload(data: Any, shorthand: str | None = None) -> dict[str, Any]:
    """A JSON object, or a bare string standing for its `shorthand` key."""
    if shorthand and isinstance(data, str):
        return {shorthand: data}
    if not isinstance(data, dict):
        raise InvalidInputError("Invalid payload; expected a JSON object")
    return data


def _reports_errors(handler: Callable[[Any], dict[str, Any]]):
    """Turn service errors into an `error` event for the sender and a failed ack."""

    @functools.wraps(handler)
    def wrapper(data=None):
        try:
            return handler(data)
        except GuildhallError as e:
            logger.info("%s failed: %s", handler.__name__, e.message)
            reason = getattr(e, "reason", None)
            emit(ERROR, {"message": e.message, "reason": reason.value if reason else None})
            return {"ok": False, "error": e.message}

    return wrapper


def register_socket_handlers(socketio: SocketIO, services: Services) -> None:

    @socketio.on(JOIN_GUILD)
    @_reports_errors
    def join_guild(data: Any) -> dict[str, Any]:
        guild = services.guilds.get_guild(_payload(data, shorthand="guildId").get("guildId"))
        room = guild_room(guild.id)
        join_room(room)
        logger.debug("Client joined %s", room)
        return {"ok": True, "room": room}

    @socketio.on(HERO_ACTION)
    @_reports_errors
    def hero_action(data: Any) -> dict[str, Any]:
        data = _payload(data)
        outcome = services.heroes.perform_action(data.get("heroId"), data.get("action"), data.get("guildId"))
        return {"ok": True, "result": outcome.to_wire()}

    @socketio.on(WORLD_QUERY)
    @_reports_errors
    def world_query(data: Any) -> dict[str, Any]:
        data = _payload(data)
        world = services.worlds.get_world_state(data.get("worldId"))
        join_room(world_room(world.id))
        emit(WORLD_STATE, world.to_wire())
        return {"ok": True}

    @socketio.on(MASTER_COMMAND)
    @_reports_errors
    def master_command(data: Any) -> dict[str, Any]:
        data = _payload(data)
        result = services.guilds.process_master_command(data.get("guildId"), data.get("command"), data.get("target"))
        return {"ok": True, **result}
