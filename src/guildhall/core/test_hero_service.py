import threading

import pytest

from guildhall.core import HeroService
from guildhall.errors import (
    InvalidInputError,
    NotFoundError,
    PreconditionError,
    PreconditionFailure,
    StaleSnapshotError,
)
from guildhall.llm.oracle import FALLBACK_DESCRIPTIONS, FALLBACK_REASONING
from guildhall.models import ActionKind, DescribeKind
from guildhall.realtime import guild_room


# ============================================================
# ACTIONS
# ============================================================

def test_perform_action_commits_and_broadcasts(hero_service, store, hero, guild, publisher):
    outcome = hero_service.perform_action(hero.id, "train", guild.id)

    assert outcome.action == ActionKind.TRAIN
    stored = store.heroes.require(hero.id)
    assert stored.stats.energy == 80
    assert stored.version == hero.version + 1

    messages = publisher.for_room(guild_room(guild.id))
    assert len(messages) == 1
    event, payload = messages[0]
    assert event == "hero:update"
    assert payload["result"]["heroId"] == hero.id
    assert payload["hero"]["stats"]["energy"] == 80
    assert all(room == guild_room(guild.id) for room, _, _ in publisher.messages)


def test_quest_credits_guild(hero_service, store, hero, guild):
    gold_before = store.guilds.require(guild.id).resources["gold"]

    hero_service.perform_action(hero.id, "quest", guild.id)

    assert store.guilds.require(guild.id).resources["gold"] == gold_before + 50


def test_action_without_guild_context_skips_guild_effects(hero_service, store, hero, guild, publisher):
    guild_before = store.guilds.require(guild.id)

    hero_service.perform_action(hero.id, "quest")

    assert store.guilds.require(guild.id) == guild_before
    assert store.heroes.require(hero.id).master_relation.respect == 50
    # Still announced to the hero's own guild
    assert len(publisher.for_room(guild_room(guild.id))) == 1


def test_rejected_action_raises_and_leaves_hero_unchanged(hero_service, store, guild, publisher, make_hero):
    current = store.guilds.require(guild.id)
    tired, _ = store.add_hero_to_guild(make_hero("hero_tired", guild.id, energy=15), current)

    with pytest.raises(PreconditionError) as excinfo:
        hero_service.perform_action(tired.id, "train", guild.id)

    assert excinfo.value.reason == PreconditionFailure.INSUFFICIENT_RESOURCE
    assert "energy" in excinfo.value.message
    assert store.heroes.require(tired.id) == tired
    assert publisher.messages == []


def test_invalid_requests(hero_service, hero, guild):
    with pytest.raises(InvalidInputError):
        hero_service.perform_action(hero.id, 5)
    with pytest.raises(InvalidInputError):
        hero_service.perform_action("", "rest")
    with pytest.raises(InvalidInputError):
        hero_service.perform_action(hero.id, "rest", "some_other_guild")
    with pytest.raises(NotFoundError):
        hero_service.perform_action("hero_missing", "rest")


def test_unknown_action_is_a_precondition_failure(hero_service, hero):
    with pytest.raises(PreconditionError) as excinfo:
        hero_service.perform_action(hero.id, "dance")
    assert excinfo.value.reason == PreconditionFailure.UNKNOWN_ACTION


def test_concurrent_actions_on_one_hero_lose_no_update(hero_service, store, hero, guild):
    errors = []

    def train():
        try:
            hero_service.perform_action(hero.id, "train", guild.id)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=train) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    stored = store.heroes.require(hero.id)
    assert stored.stats.energy == 0
    assert stored.stats.combat == 5
    assert stored.version == hero.version + 5


def test_stale_snapshot_is_retried_from_fresh_read(hero_service, store, hero, monkeypatch):
    original_require = store.heroes.require
    calls = []

    def require_then_race(hero_id):
        snapshot = original_require(hero_id)
        calls.append(hero_id)
        if len(calls) == 1:
            # Another process commits between our read and our write
            store.heroes.update(snapshot.model_copy(update={"mood": 42}))
        return snapshot

    monkeypatch.setattr(store.heroes, "require", require_then_race)

    hero_service.perform_action(hero.id, "rest")

    stored = original_require(hero.id)
    assert len(calls) == 2
    assert stored.mood == 42
    assert stored.current_action == "rest"
    assert stored.version == hero.version + 2


def test_stale_snapshot_surfaces_after_retry_bound(store, oracle, broadcaster, hero, monkeypatch):
    service = HeroService(store, oracle, broadcaster, max_commit_retries=2)

    def always_stale(new_hero, guild):
        raise StaleSnapshotError("changed underneath")

    monkeypatch.setattr(store, "commit_resolution", always_stale)

    with pytest.raises(StaleSnapshotError) as raised:
        service.perform_action(hero.id, "rest")

    assert raised.value.message == "Please try again"
    assert "changed underneath" not in str(raised.value)


# ============================================================
# DECISIONS & RECRUITMENT
# ============================================================

def test_decide_and_act_runs_oracle_choice_through_engine(hero_service, store, hero):
    decision, outcome = hero_service.decide_and_act(hero.id, {"timeOfDay": "morning"})

    assert decision.reasoning == FALLBACK_REASONING
    assert outcome.action == decision.action
    assert store.heroes.require(hero.id).current_action == decision.action.value


def test_recruit_hero_joins_guild(hero_service, store, guild, hero):
    recruit = hero_service.recruit_hero(guild.id)

    assert recruit.guild_id == guild.id
    assert recruit.backstory == FALLBACK_DESCRIPTIONS[DescribeKind.HERO]
    assert recruit.id in store.guilds.require(guild.id).hero_ids
    assert {h.id for h in hero_service.list_heroes(guild.id)} == {hero.id, recruit.id}


def test_recruit_into_full_guild_is_rejected(hero_service, store, guild):
    full = store.guilds.require(guild.id)
    store.guilds.update(full.model_copy(update={"hero_ids": [f"hero_{i}" for i in range(20)]}))

    with pytest.raises(PreconditionError) as excinfo:
        hero_service.recruit_hero(guild.id)
    assert excinfo.value.reason == PreconditionFailure.GUILD_FULL


def test_list_heroes_requires_guild(hero_service):
    with pytest.raises(NotFoundError):
        hero_service.list_heroes("guild_missing")
