"""
Invariant checks for Hero, Guild and World snapshots.

Each validator returns the first Violation found, or None when the snapshot
is consistent. They are pure: the same snapshot always yields the same answer.
"""

from enum import Enum

from guildhall.constants import (
    MAX_ACTIVE_EVENTS,
    MAX_HEROES_PER_GUILD,
    MOOD_MAX,
    MOOD_MIN,
    TRAIT_MAX,
    TRAIT_MIN,
)
from guildhall.models.guild import Guild
from guildhall.models.hero import Hero
from guildhall.models.world import World


class Violation(str, Enum):
    # Hero
    INVALID_LEVEL = "invalid_level"
    NEGATIVE_STAT = "negative_stat"
    HEALTH_EXCEEDS_MAX = "health_exceeds_max"
    ENERGY_EXCEEDS_MAX = "energy_exceeds_max"
    TRAIT_OUT_OF_RANGE = "trait_out_of_range"
    RELATION_OUT_OF_RANGE = "relation_out_of_range"
    MOOD_OUT_OF_RANGE = "mood_out_of_range"
    # Guild
    NEGATIVE_RESOURCE = "negative_resource"
    DUPLICATE_HERO = "duplicate_hero"
    TOO_MANY_HEROES = "too_many_heroes"
    NEGATIVE_GUILD_PROGRESS = "negative_guild_progress"
    # World
    TOO_MANY_EVENTS = "too_many_events"
    DUPLICATE_LOCATION = "duplicate_location"
    UNKNOWN_EVENT_LOCATION = "unknown_event_location"


def _in_range(value: int, low: int, high: int) -> bool:
    return low <= value <= high


def validate_hero(hero: Hero) -> Violation | None:
    stats = hero.stats
    if stats.level < 1:
        return Violation.INVALID_LEVEL
    if any(value < 0 for value in stats.model_dump().values()):
        return Violation.NEGATIVE_STAT
    if stats.health > stats.max_health:
        return Violation.HEALTH_EXCEEDS_MAX
    if stats.energy > stats.max_energy:
        return Violation.ENERGY_EXCEEDS_MAX
    if not all(_in_range(v, TRAIT_MIN, TRAIT_MAX) for v in hero.personality.model_dump().values()):
        return Violation.TRAIT_OUT_OF_RANGE
    if not all(_in_range(v, TRAIT_MIN, TRAIT_MAX) for v in hero.master_relation.model_dump().values()):
        return Violation.RELATION_OUT_OF_RANGE
    if not _in_range(hero.mood, MOOD_MIN, MOOD_MAX):
        return Violation.MOOD_OUT_OF_RANGE
    return None


def validate_guild(guild: Guild) -> Violation | None:
    if any(amount < 0 for amount in guild.resources.values()):
        return Violation.NEGATIVE_RESOURCE
    if len(set(guild.hero_ids)) != len(guild.hero_ids):
        return Violation.DUPLICATE_HERO
    if len(guild.hero_ids) > MAX_HEROES_PER_GUILD:
        return Violation.TOO_MANY_HEROES
    if guild.level < 1 or guild.experience < 0:
        return Violation.NEGATIVE_GUILD_PROGRESS
    return None


def validate_world(world: World) -> Violation | None:
    if len(world.active_events) > MAX_ACTIVE_EVENTS:
        return Violation.TOO_MANY_EVENTS
    location_ids = [location.id for location in world.locations]
    if len(set(location_ids)) != len(location_ids):
        return Violation.DUPLICATE_LOCATION
    for event in world.events:
        if event.location_id is not None and event.location_id not in location_ids:
            return Violation.UNKNOWN_EVENT_LOCATION
    if any(amount < 0 for amount in world.total_resources.values()):
        return Violation.NEGATIVE_RESOURCE
    return None
