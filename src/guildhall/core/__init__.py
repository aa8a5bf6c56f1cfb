import logging
from dataclasses import dataclass

from guildhall.core.catalog import CATALOG, ActionSpec, available_actions, get_spec
from guildhall.core.guild_service import GuildService
from guildhall.core.hero_service import HeroService
from guildhall.core.resolution_engine import Rejected, Resolution, Resolved, resolve_action
from guildhall.core.transactions import KeyedLock, run_with_retries
from guildhall.core.world_service import WorldService
from guildhall.llm import build_oracle
from guildhall.llm.oracle import DecisionOracle
from guildhall.realtime import EventBroadcaster, InMemoryPublisher, Publisher
from guildhall.storage import Database, GameStore
from guildhall.storage.database import TABLES

logger = logging.getLogger(__name__)


@dataclass
class Services:
    store: GameStore
    broadcaster: EventBroadcaster
    oracle: DecisionOracle
    heroes: HeroService
    guilds: GuildService
    worlds: WorldService


def initialize_services(
    settings,
    publisher: Publisher | None = None,
    oracle: DecisionOracle | None = None,
) -> Services:
    """Instantiate storage, oracle and broadcaster and wire them into the services."""

    db = Database(settings.database_path)
    db.init_schema()
    logger.info("Opened %s with %s", db.db_path, ", ".join(f"{db.get_table_count(table)} {table}" for table in TABLES))
    store = GameStore(db)

    oracle = oracle or build_oracle(settings)
    broadcaster = EventBroadcaster(publisher or InMemoryPublisher())

    # One lock table so hero, guild and world keys never diverge between services
    locks = KeyedLock()

    return Services(
        store=store,
        broadcaster=broadcaster,
        oracle=oracle,
        heroes=HeroService(store, oracle, broadcaster, locks, settings.max_commit_retries),
        guilds=GuildService(store, oracle, broadcaster, locks, settings.max_commit_retries),
        worlds=WorldService(
            store,
            oracle,
            broadcaster,
            locks,
            settings.max_commit_retries,
            settings.event_spawn_chance,
        ),
    )


__all__ = [
    'CATALOG',
    'ActionSpec',
    'available_actions',
    'get_spec',
    'Resolved',
    'Rejected',
    'Resolution',
    'resolve_action',
    'KeyedLock',
    'run_with_retries',
    'HeroService',
    'GuildService',
    'WorldService',
    'Services',
    'initialize_services',
]
