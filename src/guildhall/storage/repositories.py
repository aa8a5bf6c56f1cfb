"""
Row-level repositories for heroes, guilds and worlds.

Rows hold the full camelCase JSON record plus a ``version`` column. Every
update is conditional on the version the caller read; a mismatch means
someone else committed first and raises StaleSnapshotError.
"""

import logging
import sqlite3
from typing import Generic, Type, TypeVar

from pydantic import ValidationError

from guildhall.errors import NotFoundError, PersistenceError, StaleSnapshotError
from guildhall.models import Guild, Hero, Record, World
from guildhall.storage.database import Database, from_json, to_json

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Record)


class JsonRowRepository(Generic[T]):
    """Shared get/insert/update logic for one JSON-row table."""

    table: str
    model: Type[T]
    owner_column: str

    def __init__(self, db: Database):
        self.db = db

    def _owner_id(self, record: T) -> str:
        return getattr(record, self.owner_column)

    def _load(self, row: sqlite3.Row) -> T:
        data = from_json(row["data"])
        data["version"] = row["version"]
        try:
            return self.model.model_validate(data)
        except ValidationError as e:
            raise PersistenceError(f"Corrupt {self.table} row {row['id']}: {e}") from e

    def get(self, record_id: str) -> T | None:
        try:
            row = self.db.fetch_one(
                f"SELECT id, data, version FROM {self.table} WHERE id = ?",
                (record_id,)
            )
        except sqlite3.Error as e:
            logger.error("Failed to read %s %s: %s", self.table, record_id, e)
            raise PersistenceError(f"Failed to read {self.table} {record_id}") from e
        return self._load(row) if row else None

    def require(self, record_id: str) -> T:
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(f"{self.model.__name__} {record_id} not found")
        return record

    def list_by_owner(self, owner_id: str) -> list[T]:
        try:
            rows = self.db.fetch_all(
                f"SELECT id, data, version FROM {self.table} WHERE {self.owner_column} = ? ORDER BY created_at, id",
                (owner_id,)
            )
        except sqlite3.Error as e:
            logger.error("Failed to list %s for %s: %s", self.table, owner_id, e)
            raise PersistenceError(f"Failed to list {self.table}") from e
        return [self._load(row) for row in rows]

    def insert(self, record: T) -> T:
        stored = record.model_copy(update={"version": 0})
        try:
            with self.db.transaction():
                self.db.execute(
                    f"INSERT INTO {self.table} (id, {self.owner_column}, data, version) VALUES (?, ?, ?, 0)",
                    (stored.id, self._owner_id(stored), to_json(stored.to_wire()))
                )
        except sqlite3.Error as e:
            logger.error("Failed to insert %s %s: %s", self.table, record.id, e)
            raise PersistenceError(f"Failed to insert {self.table} {record.id}") from e
        return stored

    def update(self, record: T) -> T:
        """
        Write `record` if its version still matches the stored row.

        Returns the record with its version bumped.

        Raises:
            StaleSnapshotError: The row changed since `record` was read.
            PersistenceError: The write itself failed.
        """
        updated = record.model_copy(update={"version": record.version + 1})
        try:
            with self.db.transaction():
                cursor = self.db.execute(
                    f"UPDATE {self.table} SET data = ?, version = ? WHERE id = ? AND version = ?",
                    (to_json(updated.to_wire()), updated.version, record.id, record.version)
                )
                if cursor.rowcount == 0:
                    raise StaleSnapshotError(
                        f"{self.model.__name__} {record.id} changed since version {record.version}"
                    )
        except sqlite3.Error as e:
            logger.error("Failed to update %s %s: %s", self.table, record.id, e)
            raise PersistenceError(f"Failed to update {self.table} {record.id}") from e
        logger.debug("Committed %s %s at version %d", self.table, record.id, updated.version)
        return updated


class HeroRepository(JsonRowRepository[Hero]):
    table = "heroes"
    model = Hero
    owner_column = "guild_id"


class GuildRepository(JsonRowRepository[Guild]):
    table = "guilds"
    model = Guild
    owner_column = "master_id"

    def insert(self, record: Guild) -> Guild:
        stored = record.model_copy(update={"version": 0})
        try:
            with self.db.transaction():
                self.db.execute(
                    "INSERT INTO guilds (id, master_id, world_id, data, version) VALUES (?, ?, ?, ?, 0)",
                    (stored.id, stored.master_id, stored.world_id, to_json(stored.to_wire()))
                )
        except sqlite3.Error as e:
            logger.error("Failed to insert guilds %s: %s", record.id, e)
            raise PersistenceError(f"Failed to insert guilds {record.id}") from e
        return stored


class WorldRepository(JsonRowRepository[World]):
    table = "worlds"
    model = World
    owner_column = "player_id"


class GameStore:
    """Repositories over one database, plus the multi-row commits services need."""

    def __init__(self, db: Database):
        self.db = db
        self.heroes = HeroRepository(db)
        self.guilds = GuildRepository(db)
        self.worlds = WorldRepository(db)

    def commit_resolution(self, hero: Hero, guild: Guild | None) -> tuple[Hero, Guild | None]:
        """Write a resolved hero and its guild atomically; both or neither."""
        with self.db.transaction():
            stored_hero = self.heroes.update(hero)
            stored_guild = self.guilds.update(guild) if guild is not None else None
        return stored_hero, stored_guild

    def add_hero_to_guild(self, hero: Hero, guild: Guild) -> tuple[Hero, Guild]:
        """Insert a new hero and register it on its guild in one transaction."""
        with self.db.transaction():
            stored_hero = self.heroes.insert(hero)
            stored_guild = self.guilds.update(
                guild.model_copy(update={"hero_ids": [*guild.hero_ids, hero.id]})
            )
        return stored_hero, stored_guild
