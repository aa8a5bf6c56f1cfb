import logging
import random
from typing import Any

from guildhall.constants import MAX_HEROES_PER_GUILD
from guildhall.core.catalog import available_actions
from guildhall.core.resolution_engine import Rejected, Resolved, resolve_action
from guildhall.core.transactions import KeyedLock, run_with_retries
from guildhall.core.world_generator import generate_hero
from guildhall.errors import InvalidInputError, PreconditionError, PreconditionFailure
from guildhall.llm.oracle import DecisionOracle
from guildhall.models import ActionResult, Decision, DescribeKind, Guild, Hero
from guildhall.realtime import EventBroadcaster
from guildhall.storage import GameStore

logger = logging.getLogger(__name__)


class HeroService:
    """
    Transaction boundary for heroes: read snapshot, resolve, commit, broadcast.

    Work on one hero id is serialized in-process; the storage version check
    catches writers in other processes, and conflicts are retried from a
    fresh snapshot a bounded number of times.
    """

    def __init__(
        self,
        store: GameStore,
        oracle: DecisionOracle,
        broadcaster: EventBroadcaster,
        locks: KeyedLock | None = None,
        max_commit_retries: int = 3,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.oracle = oracle
        self.broadcaster = broadcaster
        self.locks = locks or KeyedLock()
        self.max_commit_retries = max_commit_retries
        self.rng = rng or random.Random()

    def get_hero(self, hero_id: str) -> Hero:
        return self.store.heroes.require(hero_id)

    def list_heroes(self, guild_id: str) -> list[Hero]:
        self.store.guilds.require(guild_id)
        return self.store.heroes.list_by_owner(guild_id)

    # ============================================================
    # ACTIONS
    # ============================================================

    def perform_action(self, hero_id: str, action: Any, guild_id: str | None = None) -> ActionResult:
        """
        Resolve `action` for a hero and commit the result.

        `guild_id` supplies guild context (resource effects, relationship
        changes). Without it the action still resolves, with no guild effects.

        Raises:
            InvalidInputError: Malformed ids or action, or a guild the hero is not in.
            NotFoundError: Unknown hero or guild.
            PreconditionError: The engine rejected the action.
            StaleSnapshotError: Conflicts persisted past the retry bound.
        """
        if not isinstance(hero_id, str) or not hero_id:
            raise InvalidInputError("heroId is required")
        if not isinstance(action, str) or not action:
            raise InvalidInputError("action must be a non-empty string")
        if guild_id is not None and not isinstance(guild_id, str):
            raise InvalidInputError("guildId must be a string")

        with self.locks.hold(f"hero:{hero_id}"):
            hero, outcome = run_with_retries(
                lambda: self._resolve_and_commit(hero_id, action, guild_id),
                self.max_commit_retries,
                f"hero {hero_id} {action}",
            )

        logger.info("Hero %s performed %s: %s", hero_id, outcome.action.value, outcome.stat_changes)
        self.broadcaster.hero_updated(hero.guild_id, outcome, hero)
        return outcome

    def _resolve_and_commit(self, hero_id: str, action: str, guild_id: str | None) -> tuple[Hero, ActionResult]:
        hero = self.store.heroes.require(hero_id)
        guild = self._guild_context(hero, guild_id)

        match resolve_action(hero, guild, action):
            case Rejected(reason=reason, message=message):
                logger.info("Hero %s %s rejected: %s", hero_id, action, reason.value)
                raise PreconditionError(reason, message)
            case Resolved(hero=new_hero, guild=new_guild, outcome=outcome):
                # Untouched guild rows are not rewritten, so heroes of one guild only contend on guild effects
                changed_guild = new_guild if new_guild is not guild else None
                stored_hero, _ = self.store.commit_resolution(new_hero, changed_guild)
                return stored_hero, outcome

    def _guild_context(self, hero: Hero, guild_id: str | None) -> Guild | None:
        if guild_id is None:
            return None
        if guild_id != hero.guild_id:
            raise InvalidInputError(f"Hero {hero.id} does not belong to guild {guild_id}")
        return self.store.guilds.require(guild_id)

    def decide_and_act(self, hero_id: str, context: dict[str, Any] | None = None) -> tuple[Decision, ActionResult]:
        """Ask the oracle what the hero wants to do, then resolve that through perform_action."""
        hero = self.get_hero(hero_id)
        guild = self.store.guilds.get(hero.guild_id)
        options = available_actions(hero, guild)

        decision = self.oracle.choose_action(hero, options, context)
        logger.debug("Hero %s decided on %s: %s", hero_id, decision.action.value, decision.reasoning)

        outcome = self.perform_action(hero_id, decision.action.value, hero.guild_id)
        return decision, outcome

    # ============================================================
    # RECRUITMENT
    # ============================================================

    def recruit_hero(self, guild_id: str) -> Hero:
        """Generate a new hero with oracle-written backstory and add it to the guild."""
        if not isinstance(guild_id, str) or not guild_id:
            raise InvalidInputError("guildId is required")

        hero = generate_hero(guild_id, self.rng)
        backstory = self.oracle.describe(f"{hero.name} the {hero.hero_class.value}", DescribeKind.HERO)
        hero = hero.model_copy(update={"backstory": backstory})

        def add() -> Hero:
            guild = self.store.guilds.require(guild_id)
            if len(guild.hero_ids) >= MAX_HEROES_PER_GUILD:
                raise PreconditionError(PreconditionFailure.GUILD_FULL, f"{guild.name} cannot hold more heroes")
            stored_hero, _ = self.store.add_hero_to_guild(hero, guild)
            return stored_hero

        with self.locks.hold(f"guild:{guild_id}"):
            stored = run_with_retries(add, self.max_commit_retries, f"recruit into guild {guild_id}")

        logger.info("Guild %s recruited %s (%s)", guild_id, stored.name, stored.hero_class.value)
        return stored
