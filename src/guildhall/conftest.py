"""
Shared fixtures: a temp SQLite store seeded with one world, guild and hero,
plus factories for unsaved heroes and guilds and a canned LLM client.
"""

import random
from datetime import datetime, timezone

import pytest

from guildhall.constants import STARTING_RESOURCES
from guildhall.core import GuildService, HeroService, KeyedLock, WorldService
from guildhall.core.world_generator import generate_world
from guildhall.llm.oracle import FallbackDecisionOracle
from guildhall.models import Guild, Hero, HeroClass, HeroStats
from guildhall.realtime import EventBroadcaster, InMemoryPublisher
from guildhall.storage import Database, GameStore


class StubLLMClient:
    """Stands in for OllamaClient: returns canned replies in order, or raises."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts: list[str] = []

    def generate(self, prompt: str, system: str | None = None, json_mode: bool = False) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


def _new_hero(hero_id: str = "hero_1", guild_id: str = "guild_1", **stats) -> Hero:
    return Hero(
        id=hero_id,
        name="Brynn",
        hero_class=HeroClass.RANGER,
        guild_id=guild_id,
        stats=HeroStats(**stats),
    )


def _new_guild(guild_id: str = "guild_1", world_id: str = "world_1", **fields) -> Guild:
    values = {
        "id": guild_id,
        "name": "Silver Lantern",
        "master_id": "player_1",
        "world_id": world_id,
        "resources": dict(STARTING_RESOURCES),
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    values.update(fields)
    return Guild(**values)


@pytest.fixture
def make_hero():
    return _new_hero


@pytest.fixture
def make_guild():
    return _new_guild


@pytest.fixture
def stub_llm_client():
    return StubLLMClient


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "test.db")
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def store(db):
    return GameStore(db)


@pytest.fixture
def world(store):
    return store.worlds.insert(generate_world("player_1", seed="fixture-seed"))


@pytest.fixture
def guild(store, world):
    return store.guilds.insert(_new_guild(world_id=world.id))


@pytest.fixture
def hero(store, guild):
    stored_hero, _ = store.add_hero_to_guild(_new_hero(guild_id=guild.id), guild)
    return stored_hero


@pytest.fixture
def publisher():
    return InMemoryPublisher()


@pytest.fixture
def broadcaster(publisher):
    return EventBroadcaster(publisher)


@pytest.fixture
def oracle():
    return FallbackDecisionOracle(random.Random(7))


@pytest.fixture
def locks():
    return KeyedLock()


@pytest.fixture
def hero_service(store, oracle, broadcaster, locks):
    return HeroService(store, oracle, broadcaster, locks, rng=random.Random(11))


@pytest.fixture
def guild_service(store, oracle, broadcaster, locks):
    return GuildService(store, oracle, broadcaster, locks)


@pytest.fixture
def world_service(store, oracle, broadcaster, locks):
    return WorldService(store, oracle, broadcaster, locks, rng=random.Random(3))
