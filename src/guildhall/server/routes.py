"""REST surface over the hero, guild and world services, mounted under ``/api``."""

import logging
from typing import Any

from flask import Blueprint, current_app, jsonify, request

from guildhall.core import Services
from guildhall.errors import GuildhallError, InvalidInputError, PersistenceError

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")


def services() -> Services:
    return current_app.extensions["guildhall"]


def json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return body


@api.errorhandler(GuildhallError)
def handle_guildhall_error(error: GuildhallError):
    if isinstance(error, PersistenceError):
        logger.error("Persistence failure on %s %s: %s", request.method, request.path, error.message)
    reason = getattr(error, "reason", None)
    return jsonify({"error": error.message, "reason": reason.value if reason else None}), error.status_code


@api.get("/health")
def health():
    return jsonify({"status": "ok"})


# ============================================================
# HEROES
# ============================================================

@api.post("/heroes/<hero_id>/action")
def perform_action(hero_id: str):
    body = json_body()
    outcome = services().heroes.perform_action(hero_id, body.get("action"), body.get("guildId"))
    return jsonify(outcome.to_wire())


@api.post("/heroes/<hero_id>/decide")
def decide_action(hero_id: str):
    body = json_body()
    context = body.get("context")
    if context is not None and not isinstance(context, dict):
        raise InvalidInputError("context must be an object")
    decision, outcome = services().heroes.decide_and_act(hero_id, context)
    return jsonify({"decision": decision.to_wire(), "result": outcome.to_wire()})


@api.get("/heroes/<hero_id>")
def get_hero(hero_id: str):
    return jsonify({"hero": services().heroes.get_hero(hero_id).to_wire()})


@api.get("/heroes/guild/<guild_id>")
def list_heroes(guild_id: str):
    return jsonify({"heroes": [hero.to_wire() for hero in services().heroes.list_heroes(guild_id)]})


@api.post("/heroes")
def recruit_hero():
    hero = services().heroes.recruit_hero(json_body().get("guildId"))
    return jsonify({"hero": hero.to_wire(), "message": f"{hero.name} joined the guild"}), 201


# ============================================================
# GUILDS
# ============================================================

@api.post("/guilds")
def create_guild():
    body = json_body()
    guild = services().guilds.create_guild(body.get("name"), body.get("masterId"), body.get("worldId"))
    return jsonify({"guild": guild.to_wire()}), 201


@api.get("/guilds/<guild_id>")
def get_guild(guild_id: str):
    return jsonify({"guild": services().guilds.get_guild(guild_id).to_wire()})


@api.post("/guilds/<guild_id>/facilities")
def purchase_facility(guild_id: str):
    guild = services().guilds.purchase_facility(guild_id, json_body().get("facility"))
    return jsonify({"guild": guild.to_wire()})


@api.post("/guilds/<guild_id>/command")
def master_command(guild_id: str):
    body = json_body()
    return jsonify(services().guilds.process_master_command(guild_id, body.get("command"), body.get("target")))


@api.post("/guilds/<guild_id>/quest")
def generate_quest(guild_id: str):
    quest = services().guilds.generate_quest(guild_id, json_body().get("difficulty"))
    return jsonify({"quest": quest.to_wire(), "message": "Quest generated"})


# ============================================================
# WORLD
# ============================================================

@api.post("/world/create")
def create_world():
    body = json_body()
    world = services().worlds.create_world(body.get("playerId"), seed=body.get("seed"))
    return jsonify({"world": world.to_wire(), "message": "World created successfully"}), 201


@api.get("/world/<world_id>")
def get_world(world_id: str):
    return jsonify({"world": services().worlds.get_world_state(world_id).to_wire()})


@api.get("/world/<world_id>/map")
def world_map(world_id: str):
    return jsonify(services().worlds.world_map(world_id))


@api.post("/world/<world_id>/time")
def advance_time(world_id: str):
    world = services().worlds.advance_time(world_id)
    return jsonify({"timeOfDay": world.time_of_day.value, "world": world.to_wire()})


@api.post("/world/<world_id>/event")
def spawn_event(world_id: str):
    event = services().worlds.spawn_random_event(world_id)
    return jsonify({"event": event.to_wire() if event else None})


@api.post("/world/<world_id>/explore")
def explore(world_id: str):
    location = services().worlds.discover_next_location(world_id)
    return jsonify({"location": location.to_wire() if location else None})
