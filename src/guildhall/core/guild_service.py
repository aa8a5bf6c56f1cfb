import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from guildhall.constants import FACILITY_COSTS, STARTING_RESOURCES
from guildhall.core.transactions import KeyedLock, run_with_retries
from guildhall.errors import InvalidInputError, PreconditionError, PreconditionFailure
from guildhall.llm.oracle import DecisionOracle
from guildhall.models import FacilityType, Guild, Quest
from guildhall.realtime import EventBroadcaster
from guildhall.storage import GameStore

logger = logging.getLogger(__name__)


class GuildService:
    """
    Guild transactions. Resource bags change only here (facility purchases)
    and in hero action commits. Quest offers come from the oracle and are
    not stored.
    """

    def __init__(
        self,
        store: GameStore,
        oracle: DecisionOracle,
        broadcaster: EventBroadcaster,
        locks: KeyedLock | None = None,
        max_commit_retries: int = 3,
    ):
        self.store = store
        self.oracle = oracle
        self.broadcaster = broadcaster
        self.locks = locks or KeyedLock()
        self.max_commit_retries = max_commit_retries

    def create_guild(self, name: str, master_id: str, world_id: str) -> Guild:
        for field, value in (("name", name), ("masterId", master_id), ("worldId", world_id)):
            if not isinstance(value, str) or not value.strip():
                raise InvalidInputError(f"{field} is required")
        self.store.worlds.require(world_id)

        guild = Guild(
            id=f"guild_{uuid4().hex[:12]}",
            name=name.strip(),
            master_id=master_id,
            world_id=world_id,
            resources=dict(STARTING_RESOURCES),
            created_at=datetime.now(timezone.utc),
        )
        stored = self.store.guilds.insert(guild)
        logger.info("Created guild %s for master %s in world %s", stored.id, master_id, world_id)
        return stored

    def get_guild(self, guild_id: str) -> Guild:
        return self.store.guilds.require(guild_id)

    def purchase_facility(self, guild_id: str, facility: Any) -> Guild:
        """Debit the facility cost from the guild's resources and add the facility."""
        try:
            facility_type = FacilityType(facility)
        except ValueError:
            raise InvalidInputError(f"Unknown facility '{facility}'")
        costs = FACILITY_COSTS[facility_type.value]

        def purchase() -> Guild:
            guild = self.store.guilds.require(guild_id)
            if facility_type in guild.facilities:
                raise PreconditionError(PreconditionFailure.ALREADY_BUILT, f"{guild.name} already has a {facility_type.value}")
            if not guild.has_resources(costs):
                raise PreconditionError(PreconditionFailure.INSUFFICIENT_RESOURCE, f"Not enough resources to build a {facility_type.value}")

            resources = dict(guild.resources)
            for name, amount in costs.items():
                resources[name] -= amount
            return self.store.guilds.update(guild.model_copy(update={
                "resources": resources,
                "facilities": [*guild.facilities, facility_type],
            }))

        with self.locks.hold(f"guild:{guild_id}"):
            guild = run_with_retries(purchase, self.max_commit_retries, f"build {facility_type.value} in {guild_id}")

        logger.info("Guild %s built a %s", guild_id, facility_type.value)
        return guild

    def toggle_policy(self, guild_id: str, policy: Any) -> Guild:
        if not isinstance(policy, str) or not policy.strip():
            raise InvalidInputError("policy is required")
        policy = policy.strip().lower()

        def toggle() -> Guild:
            guild = self.store.guilds.require(guild_id)
            if policy in guild.policies:
                policies = [existing for existing in guild.policies if existing != policy]
            else:
                policies = [*guild.policies, policy]
            return self.store.guilds.update(guild.model_copy(update={"policies": policies}))

        with self.locks.hold(f"guild:{guild_id}"):
            return run_with_retries(toggle, self.max_commit_retries, f"policy {policy} in {guild_id}")

    def process_master_command(self, guild_id: str, command: Any, target: Any = None) -> dict[str, Any]:
        """
        Handle a master command and acknowledge it to the guild room.

        Commands:
            build <facility>: purchase a facility
            policy <flag>: toggle a guild policy flag
        """
        if not isinstance(guild_id, str) or not guild_id:
            raise InvalidInputError("guildId is required")
        if not isinstance(command, str) or not command.strip():
            raise InvalidInputError("command is required")

        match command.strip().lower():
            case "build":
                guild = self.purchase_facility(guild_id, target)
                message = f"Construction of {target} has begun"
            case "policy":
                guild = self.toggle_policy(guild_id, target)
                state = "enabled" if str(target).strip().lower() in guild.policies else "disabled"
                message = f"Policy {target} {state}"
            case other:
                raise InvalidInputError(f"Unknown master command '{other}'")

        result = {"success": True, "command": command, "message": message, "guild": guild.to_wire()}
        self.broadcaster.master_result(guild_id, result)
        return result

    def generate_quest(self, guild_id: str, difficulty: Any) -> Quest:
        """Ask the oracle for a quest offer set in the guild's world."""
        if isinstance(difficulty, bool) or not isinstance(difficulty, int) or not 1 <= difficulty <= 10:
            raise InvalidInputError("difficulty must be an integer from 1 to 10")

        guild = self.store.guilds.require(guild_id)
        world = self.store.worlds.require(guild.world_id)
        context = f"{world.name}, at {world.time_of_day.value}. {world.lore}".strip()

        quest = self.oracle.generate_quest(guild.name, difficulty, context)
        logger.info("Guild %s was offered '%s' (%s, difficulty %d)", guild_id, quest.title, quest.type.value, difficulty)
        return quest
