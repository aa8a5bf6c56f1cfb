import logging
import random
from datetime import datetime, timezone

from guildhall.constants import EVENT_SPAWN_CHANCE
from guildhall.core import world_engine
from guildhall.core.transactions import KeyedLock, run_with_retries
from guildhall.core.world_generator import generate_world
from guildhall.errors import InvalidInputError
from guildhall.llm.oracle import DecisionOracle
from guildhall.models import DescribeKind, World, WorldEvent, WorldLocation
from guildhall.realtime import EventBroadcaster
from guildhall.storage import GameStore, WorldGraph

logger = logging.getLogger(__name__)


class WorldService:
    """
    Transaction boundary for worlds. Every mutation of one world (time
    ticks, event spawns, discoveries) is serialized per world id.
    """

    def __init__(
        self,
        store: GameStore,
        oracle: DecisionOracle,
        broadcaster: EventBroadcaster,
        locks: KeyedLock | None = None,
        max_commit_retries: int = 3,
        event_spawn_chance: float = EVENT_SPAWN_CHANCE,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.oracle = oracle
        self.broadcaster = broadcaster
        self.locks = locks or KeyedLock()
        self.max_commit_retries = max_commit_retries
        self.event_spawn_chance = event_spawn_chance
        self.rng = rng or random.Random()

    def create_world(self, player_id: str, seed: str | None = None) -> World:
        if not isinstance(player_id, str) or not player_id.strip():
            raise InvalidInputError("playerId is required")
        if seed is not None and not isinstance(seed, str):
            raise InvalidInputError("seed must be a string")

        world = generate_world(player_id, seed=seed)
        lore = self.oracle.describe(world.name, DescribeKind.WORLD)
        stored = self.store.worlds.insert(world.model_copy(update={"lore": lore}))
        logger.info("Created world %s (%s) for player %s", stored.id, stored.name, player_id)
        return stored

    def get_world_state(self, world_id: str) -> World:
        return self.store.worlds.require(world_id)

    def world_map(self, world_id: str) -> dict:
        """Location graph for the map renderer, with the current discovery frontier."""
        graph = WorldGraph.from_world(self.store.worlds.require(world_id))
        return {"graph": graph.export_to_json(), "frontier": graph.frontier()}

    def _mutate(self, world_id: str, label: str, change):
        """Serialize `change(world) -> (new_world, result)` on one world and commit it."""
        def attempt():
            world = self.store.worlds.require(world_id)
            new_world, result = change(world)
            if new_world is world:
                return world, result
            return self.store.worlds.update(new_world), result

        with self.locks.hold(f"world:{world_id}"):
            world, result = run_with_retries(attempt, self.max_commit_retries, f"{label} on world {world_id}")

        self.broadcaster.world_state(world)
        return world, result

    def advance_time(self, world_id: str) -> World:
        """Advance one step through the time-of-day cycle and retire finished events."""
        now = datetime.now(timezone.utc)

        def tick(world: World) -> tuple[World, None]:
            return world_engine.advance_time(world_engine.expire_events(world, now)), None

        world, _ = self._mutate(world_id, "time tick", tick)
        logger.debug("World %s is now at %s", world_id, world.time_of_day.value)
        return world

    def spawn_random_event(self, world_id: str) -> WorldEvent | None:
        """Roll for a random event; nothing spawns once MAX_ACTIVE_EVENTS are active."""
        def spawn(world: World) -> tuple[World, WorldEvent | None]:
            return world_engine.spawn_event(world, self.rng, chance=self.event_spawn_chance)

        _, event = self._mutate(world_id, "event spawn", spawn)
        if event is not None:
            logger.info("World %s spawned %s", world_id, event.name)
        return event

    def discover_next_location(self, world_id: str) -> WorldLocation | None:
        """Reveal the closest undiscovered location adjacent to the known map."""
        def discover(world: World) -> tuple[World, WorldLocation | None]:
            location_id = WorldGraph.from_world(world).next_discovery()
            if location_id is None:
                return world, None
            new_world = world_engine.discover_location(world, location_id)
            found = next(location for location in new_world.locations if location.id == location_id)
            return new_world, found

        _, location = self._mutate(world_id, "discovery", discover)
        if location is not None:
            logger.info("World %s discovered %s", world_id, location.name)
        return location
