import random
from datetime import datetime, timezone

import pytest

from guildhall.core.catalog import CATALOG, available_actions, get_spec
from guildhall.core.resolution_engine import Rejected, Resolved, level_threshold, resolve_action
from guildhall.errors import PreconditionFailure
from guildhall.models import ActionKind, validate_hero

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


# ============================================================
# CATALOG
# ============================================================

def test_every_action_kind_has_a_catalog_entry():
    assert set(CATALOG) == set(ActionKind)
    for kind, spec in CATALOG.items():
        assert spec.kind == kind


def test_get_spec_accepts_strings_and_rejects_unknown():
    assert get_spec("train") is CATALOG[ActionKind.TRAIN]
    assert get_spec("dance") is None


def test_available_actions_respects_energy_and_health(make_hero):
    assert available_actions(make_hero()) == list(ActionKind)
    assert available_actions(make_hero(energy=15)) == [ActionKind.REST, ActionKind.SOCIALIZE]
    assert ActionKind.QUEST not in available_actions(make_hero(health=20))


# ============================================================
# RESOLUTION
# ============================================================

def test_train_deducts_energy_and_grants_progress(make_hero, make_guild):
    hero = make_hero()
    result = resolve_action(hero, make_guild(), "train", now=NOW)

    assert isinstance(result, Resolved)
    assert result.hero.stats.energy == 80
    assert result.hero.stats.combat == 1
    assert result.hero.stats.experience == 10
    assert result.hero.current_action == "train"
    assert result.hero.last_action_time == NOW
    assert result.outcome.stat_changes == {"energy": -20, "combat": 1, "experience": 10}
    # Input snapshot untouched
    assert hero.stats.energy == 100


def test_train_without_energy_is_rejected(make_hero, make_guild):
    hero = make_hero(energy=15)
    result = resolve_action(hero, make_guild(), ActionKind.TRAIN, now=NOW)

    assert result == Rejected(PreconditionFailure.INSUFFICIENT_RESOURCE, "Not enough energy (15/20)")
    assert hero.stats.energy == 15


def test_rest_clamps_to_maximum(make_hero):
    result = resolve_action(make_hero(energy=100, health=95), None, "rest", now=NOW)

    assert result.hero.stats.energy == 100
    assert result.hero.stats.health == 100
    assert result.outcome.stat_changes == {"health": 5}


def test_unknown_action_is_rejected(make_hero):
    result = resolve_action(make_hero(), None, "dance", now=NOW)
    assert isinstance(result, Rejected)
    assert result.reason == PreconditionFailure.UNKNOWN_ACTION


def test_inactive_hero_is_rejected(make_hero):
    hero = make_hero().model_copy(update={"is_active": False})
    result = resolve_action(hero, None, "rest", now=NOW)
    assert result.reason == PreconditionFailure.HERO_INACTIVE


def test_quest_needs_health(make_hero, make_guild):
    result = resolve_action(make_hero(health=25), make_guild(), "quest", now=NOW)
    assert result == Rejected(PreconditionFailure.INSUFFICIENT_RESOURCE, "Not enough health (25/30)")


def test_quest_rewards_guild_and_relation(make_hero, make_guild):
    guild = make_guild()
    result = resolve_action(make_hero(), guild, "quest", now=NOW)

    assert result.guild.resources["gold"] == guild.resources["gold"] + 50
    assert result.guild.experience == 10
    assert result.guild.reputation == 1
    assert result.outcome.resource_changes == {"gold": 50}
    assert result.hero.master_relation.respect == 52
    assert result.hero.stats.health == 90


def test_relationship_effects_skipped_without_guild(make_hero):
    result = resolve_action(make_hero(), None, "socialize", now=NOW)

    assert result.guild is None
    assert result.hero.master_relation.trust == 50
    assert result.hero.mood == 10


def test_resolution_is_deterministic(make_hero, make_guild):
    hero, guild = make_hero(energy=70), make_guild()
    assert resolve_action(hero, guild, "quest", now=NOW) == resolve_action(hero, guild, "quest", now=NOW)


def test_single_level_up_per_action(make_hero):
    # Far past several thresholds; only one level is gained
    hero = make_hero(experience=500)
    result = resolve_action(hero, None, "train", now=NOW)

    assert result.hero.stats.level == 2
    assert result.hero.stats.experience == 510 - level_threshold(1)
    assert result.outcome.leveled_up
    assert result.outcome.stat_changes["level"] == 1
    assert result.outcome.summary.endswith("and reached level 2")


def test_rest_never_levels_up(make_hero):
    result = resolve_action(make_hero(experience=500), None, "rest", now=NOW)
    assert result.hero.stats.level == 1
    assert not result.outcome.leveled_up


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_bounds_hold_after_random_action_sequences(seed, make_hero, make_guild):
    rng = random.Random(seed)
    hero, guild = make_hero(), make_guild()

    for _ in range(200):
        match resolve_action(hero, guild, rng.choice(list(ActionKind)), now=NOW):
            case Resolved(hero=new_hero, guild=new_guild):
                hero, guild = new_hero, new_guild
            case Rejected():
                pass
        assert validate_hero(hero) is None
        assert 0 <= hero.stats.health <= hero.stats.max_health
        assert 0 <= hero.stats.energy <= hero.stats.max_energy
