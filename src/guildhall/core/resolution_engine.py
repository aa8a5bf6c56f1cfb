import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict

from guildhall.constants import (
    BASE_EXPERIENCE_GAIN,
    LEVEL_UP_MULTIPLIER,
    MOOD_MAX,
    MOOD_MIN,
    TRAIT_MAX,
    TRAIT_MIN,
)
from guildhall.core.catalog import ActionSpec, get_spec
from guildhall.errors import PreconditionFailure
from guildhall.models import ActionKind, ActionResult, Guild, Hero, HeroStats


# ============================================================
# RESOLUTION RESULTS
# ============================================================

@dataclass(frozen=True)
class Resolved:
    hero: Hero
    guild: Guild | None
    outcome: ActionResult


@dataclass(frozen=True)
class Rejected:
    reason: PreconditionFailure
    message: str                    # Displayable to the player


Resolution = Resolved | Rejected


def level_threshold(level: int) -> int:
    """Experience needed to leave `level`."""
    return math.floor(BASE_EXPERIENCE_GAIN * LEVEL_UP_MULTIPLIER ** level)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# ============================================================
# RESOLUTION ENGINE
# ============================================================

def resolve_action(
    hero: Hero,
    guild: Guild | None,
    action_kind: ActionKind | str,
    now: datetime | None = None,
) -> Resolution:
    """
    Apply one action to a hero/guild snapshot.

    Pure: performs no I/O and never raises for business-rule failures.
    Precondition failures come back as Rejected; the caller decides how to
    surface them. The inputs are left untouched.

    Args:
        hero: Snapshot of the acting hero.
        guild: Snapshot of the hero's guild, or None when the caller has no
            guild context (relationship effects are then skipped).
        action_kind: Requested action, as an ActionKind or its string value.
        now: Timestamp stamped on the hero and the outcome.

    Returns:
        Resolved with the new hero, new guild and outcome, or Rejected.
    """
    spec = get_spec(action_kind)
    if spec is None:
        return Rejected(PreconditionFailure.UNKNOWN_ACTION, f"Unknown action '{action_kind}'")

    if not hero.is_active:
        return Rejected(PreconditionFailure.HERO_INACTIVE, f"{hero.name} is not active")

    if not spec.precondition(hero, spec):
        return Rejected(PreconditionFailure.INSUFFICIENT_RESOURCE, _shortfall_message(hero, spec))

    if spec.guild_costs and (guild is None or not guild.has_resources(dict(spec.guild_costs))):
        return Rejected(PreconditionFailure.INSUFFICIENT_RESOURCE, "The guild lacks the resources for this")

    now = now or datetime.now(timezone.utc)

    new_stats, stat_changes, leveled_up = _apply_stats(hero.stats, spec)

    mood = clamp(hero.mood + spec.mood_delta, MOOD_MIN, MOOD_MAX)
    if mood != hero.mood:
        stat_changes["mood"] = mood - hero.mood

    # Relationship effects need guild context; without it they are skipped
    master_relation = hero.master_relation
    if guild is not None and spec.relation_deltas:
        relation = master_relation.model_dump()
        for key, delta in spec.relation_deltas.items():
            updated = clamp(relation[key] + delta, TRAIT_MIN, TRAIT_MAX)
            if updated != relation[key]:
                stat_changes[key] = updated - relation[key]
            relation[key] = updated
        master_relation = master_relation.model_copy(update=relation)

    new_guild, resource_changes = _apply_guild(guild, spec)

    new_hero = hero.model_copy(update={
        "stats": new_stats,
        "mood": mood,
        "master_relation": master_relation,
        "current_action": spec.kind.value,
        "last_action_time": now,
    })

    summary = spec.summary
    if leveled_up:
        summary = f"{summary} and reached level {new_stats.level}"

    outcome = ActionResult(
        action=spec.kind,
        hero_id=hero.id,
        stat_changes=stat_changes,
        resource_changes=resource_changes,
        leveled_up=leveled_up,
        summary=summary,
        timestamp=now,
    )
    return Resolved(hero=new_hero, guild=new_guild, outcome=outcome)


def _shortfall_message(hero: Hero, spec: ActionSpec) -> str:
    if hero.stats.energy < spec.energy_cost:
        return f"Not enough energy ({hero.stats.energy}/{spec.energy_cost})"
    return f"Not enough health ({hero.stats.health}/{spec.min_health})"


def _apply_stats(stats: HeroStats, spec: ActionSpec) -> tuple[HeroStats, Dict[str, int], bool]:
    """Apply catalog deltas, clamp to bounds, then fire at most one level-up."""
    values = stats.model_dump()
    values["energy"] -= spec.energy_cost

    for key, delta in spec.stat_deltas.items():
        values[key] += delta

    values["health"] = clamp(values["health"], 0, values["max_health"])
    values["energy"] = clamp(values["energy"], 0, values["max_energy"])
    for key in ("experience", "combat", "magic", "crafting", "exploration"):
        values[key] = max(0, values[key])

    changes = {
        key: values[key] - old
        for key, old in stats.model_dump().items()
        if values[key] != old
    }

    # Single level-up per resolution; leftover experience carries over
    leveled_up = False
    threshold = level_threshold(values["level"])
    if spec.experience_gain > 0 and values["experience"] >= threshold:
        values["level"] += 1
        values["experience"] -= threshold
        changes["level"] = 1
        leveled_up = True

    return stats.model_copy(update=values), changes, leveled_up


def _apply_guild(guild: Guild | None, spec: ActionSpec) -> tuple[Guild | None, Dict[str, int]]:
    if guild is None:
        return None, {}

    resources = dict(guild.resources)
    changes: Dict[str, int] = {}
    for name, amount in spec.guild_costs.items():
        resources[name] = max(0, resources.get(name, 0) - amount)
        changes[name] = changes.get(name, 0) - amount
    for name, amount in spec.guild_rewards.items():
        resources[name] = resources.get(name, 0) + amount
        changes[name] = changes.get(name, 0) + amount

    if not changes and not spec.guild_experience and not spec.guild_reputation:
        return guild, {}

    updated = guild.model_copy(update={
        "resources": resources,
        "experience": guild.experience + spec.guild_experience,
        "reputation": guild.reputation + spec.guild_reputation,
    })
    return updated, changes
