"""
Tests for the storage layer: schema, JSON rows and optimistic versions.
"""

import sqlite3

import pytest

from guildhall.errors import NotFoundError, PersistenceError, StaleSnapshotError
from guildhall.storage import SCHEMA_VERSION, Database, GameStore, from_json, to_json


def test_sqlite_database(tmp_path):
    """Test SQLite schema initialization and basic operations."""
    print("\n=== Testing SQLite Database ===")

    db = Database(tmp_path / "nested" / "test.db")
    db.init_schema()
    assert db.get_schema_version() == SCHEMA_VERSION
    print(f"✓ Schema initialized (version {db.get_schema_version()})")

    for table in ("worlds", "guilds", "heroes"):
        assert db.table_exists(table), f"Missing table: {table}"
        assert db.get_table_count(table) == 0
    print("✓ All tables created")

    # Test JSON helpers
    test_dict = {"gold": 10, "wood": 4}
    assert from_json(to_json(test_dict)) == test_dict
    assert to_json(None) is None
    print("✓ JSON serialization helpers work")

    db.close()


def test_init_schema_is_skipped_when_current(db, world, caplog):
    with caplog.at_level("DEBUG", logger="guildhall.storage.database"):
        db.init_schema()

    assert "already applied" in caplog.text
    assert db.get_table_count("worlds") == 1
    assert db.fetch_all("SELECT version FROM schema_version")[0]["version"] == SCHEMA_VERSION


def test_nested_transactions_commit_once(db):
    with pytest.raises(RuntimeError):
        with db.transaction():
            db.execute("INSERT INTO worlds (id, player_id, data) VALUES ('w1', 'p1', '{}')")
            with db.transaction():
                db.execute("INSERT INTO worlds (id, player_id, data) VALUES ('w2', 'p1', '{}')")
            raise RuntimeError("abort outer")

    # The inner block did not commit on its own
    assert db.get_table_count("worlds") == 0


def test_insert_and_read_back(store, world, guild, make_hero):
    hero = store.heroes.insert(make_hero("hero_9", guild.id, combat=7))

    loaded = store.heroes.require("hero_9")
    assert loaded.stats.combat == 7
    assert loaded.version == 0
    assert store.heroes.list_by_owner(guild.id) == [loaded]
    assert store.guilds.require(guild.id).world_id == world.id
    assert hero.version == 0


def test_missing_rows(store):
    assert store.heroes.get("nobody") is None
    with pytest.raises(NotFoundError):
        store.guilds.require("nowhere")


def test_update_bumps_version(store, hero):
    updated = store.heroes.update(hero.model_copy(update={"mood": 15}))

    assert updated.version == hero.version + 1
    assert store.heroes.require(hero.id).mood == 15


def test_stale_update_is_refused(store, hero):
    store.heroes.update(hero.model_copy(update={"mood": 15}))

    with pytest.raises(StaleSnapshotError):
        store.heroes.update(hero.model_copy(update={"mood": -15}))
    assert store.heroes.require(hero.id).mood == 15


def test_commit_resolution_is_atomic(store, hero, guild):
    current_guild = store.guilds.require(guild.id)
    # Someone else moves the guild on; our guild snapshot is now stale
    store.guilds.update(current_guild.model_copy(update={"reputation": 5}))

    with pytest.raises(StaleSnapshotError):
        store.commit_resolution(
            hero.model_copy(update={"mood": 30}),
            current_guild.model_copy(update={"reputation": 1}),
        )

    # Neither row changed
    assert store.heroes.require(hero.id) == hero
    assert store.guilds.require(guild.id).reputation == 5


def test_add_hero_to_guild_registers_membership(store, guild, make_hero):
    hero, updated_guild = store.add_hero_to_guild(make_hero("hero_new", guild.id), guild)

    assert updated_guild.hero_ids == ["hero_new"]
    assert store.guilds.require(guild.id).version == guild.version + 1
    assert store.heroes.require(hero.id).guild_id == guild.id


def test_hero_needs_existing_guild(store, make_hero):
    with pytest.raises(PersistenceError):
        store.heroes.insert(make_hero("orphan", "guild_missing"))


def test_corrupt_row_is_reported(store, db, hero):
    db.execute("UPDATE heroes SET data = ? WHERE id = ?", ('{"id": "broken"}', hero.id))
    db.commit()

    with pytest.raises(PersistenceError):
        store.heroes.require(hero.id)


def test_guild_insert_conflict(store, world, make_guild):
    store.guilds.insert(make_guild("guild_dup", world.id))
    with pytest.raises(PersistenceError):
        store.guilds.insert(make_guild("guild_dup", world.id))


def test_game_store_shares_connection(db):
    store = GameStore(db)
    assert store.heroes.db is store.guilds.db is store.worlds.db is db
    assert isinstance(db.connection, sqlite3.Connection)
