from datetime import datetime, timezone

from guildhall.models import (
    EventType,
    Hero,
    HeroClass,
    MasterRelation,
    PersonalityTraits,
    Violation,
    World,
    WorldEvent,
    validate_guild,
    validate_hero,
    validate_world,
)
from guildhall.core.world_generator import generate_world


def test_default_hero_is_valid(make_hero):
    assert validate_hero(make_hero()) is None


def test_hero_violations(make_hero):
    assert validate_hero(make_hero(level=0)) == Violation.INVALID_LEVEL
    assert validate_hero(make_hero(combat=-1)) == Violation.NEGATIVE_STAT
    assert validate_hero(make_hero(health=120)) == Violation.HEALTH_EXCEEDS_MAX
    assert validate_hero(make_hero(energy=101)) == Violation.ENERGY_EXCEEDS_MAX

    hero = make_hero()
    assert validate_hero(hero.model_copy(update={"personality": PersonalityTraits(courage=101)})) == Violation.TRAIT_OUT_OF_RANGE
    assert validate_hero(hero.model_copy(update={"master_relation": MasterRelation(fear=-5)})) == Violation.RELATION_OUT_OF_RANGE
    assert validate_hero(hero.model_copy(update={"mood": -101})) == Violation.MOOD_OUT_OF_RANGE


def test_validate_hero_is_idempotent(make_hero):
    hero = make_hero(energy=150)
    assert validate_hero(hero) == validate_hero(hero) == Violation.ENERGY_EXCEEDS_MAX


def test_hero_wire_form_uses_camel_case_and_class_alias(make_hero):
    wire = make_hero().to_wire()

    assert wire["class"] == "Ranger"
    assert wire["guildId"] == "guild_1"
    assert wire["stats"]["maxHealth"] == 100
    restored = Hero.model_validate(wire)
    assert restored.hero_class == HeroClass.RANGER
    assert restored.stats == make_hero().stats


def test_guild_violations(make_guild):
    assert validate_guild(make_guild()) is None
    assert validate_guild(make_guild(resources={"gold": -1})) == Violation.NEGATIVE_RESOURCE
    assert validate_guild(make_guild(hero_ids=["a", "a"])) == Violation.DUPLICATE_HERO
    assert validate_guild(make_guild(hero_ids=[f"h{i}" for i in range(21)])) == Violation.TOO_MANY_HEROES
    assert validate_guild(make_guild(experience=-5)) == Violation.NEGATIVE_GUILD_PROGRESS


def _event(event_id: str, location_id: str | None = None, active: bool = True) -> WorldEvent:
    return WorldEvent(
        id=event_id,
        type=EventType.FESTIVAL,
        name="Festival",
        description="A festival",
        location_id=location_id,
        start_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
        is_active=active,
    )


def test_world_violations():
    world = generate_world("player_1", seed="validation")
    assert validate_world(world) is None

    crowded = world.model_copy(update={"events": [_event(f"e{i}") for i in range(4)]})
    assert validate_world(crowded) == Violation.TOO_MANY_EVENTS

    # Inactive events do not count towards the cap
    history = world.model_copy(update={"events": [_event(f"e{i}", active=i == 0) for i in range(6)]})
    assert validate_world(history) is None

    duplicated = world.model_copy(update={"locations": [world.locations[0], world.locations[0]]})
    assert validate_world(duplicated) == Violation.DUPLICATE_LOCATION

    lost = world.model_copy(update={"events": [_event("e1", location_id="loc_999")]})
    assert validate_world(lost) == Violation.UNKNOWN_EVENT_LOCATION


def test_world_starts_with_discovered_village():
    world: World = generate_world("player_1", seed="village")

    assert world.locations[0].name == "Starting Village"
    assert world.discovered_locations == ["loc_000"]
    assert 8 <= len(world.locations) <= 12
