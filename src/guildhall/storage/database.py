"""
SQLite Database Connection Manager and Schema
Persists heroes, guilds and worlds as JSON rows with an optimistic version counter.
"""

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Self

logger = logging.getLogger(__name__)

# Schema version for migrations
SCHEMA_VERSION = 1

TABLES = ("worlds", "guilds", "heroes")

SCHEMA_SQL = """
-- =============================================================================
-- SCHEMA VERSION TRACKING
-- =============================================================================
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- =============================================================================
-- WORLDS TABLE
-- One per player. Locations, events and time of day live in the JSON blob.
-- =============================================================================
CREATE TABLE IF NOT EXISTS worlds (
    id TEXT PRIMARY KEY,
    player_id TEXT NOT NULL,
    data JSON NOT NULL,  -- Full serialized World
    version INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_worlds_player ON worlds(player_id);

-- =============================================================================
-- GUILDS TABLE
-- Resource bags, facilities and policies for a player's guild.
-- =============================================================================
CREATE TABLE IF NOT EXISTS guilds (
    id TEXT PRIMARY KEY,
    master_id TEXT NOT NULL,
    world_id TEXT NOT NULL REFERENCES worlds(id),
    data JSON NOT NULL,  -- Full serialized Guild
    version INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_guilds_world ON guilds(world_id);

-- =============================================================================
-- HEROES TABLE
-- Stats, personality and master relation, owned by exactly one guild.
-- =============================================================================
CREATE TABLE IF NOT EXISTS heroes (
    id TEXT PRIMARY KEY,
    guild_id TEXT NOT NULL REFERENCES guilds(id),
    data JSON NOT NULL,  -- Full serialized Hero
    version INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_heroes_guild ON heroes(guild_id);

-- =============================================================================
-- TRIGGERS FOR AUTO-UPDATING TIMESTAMPS
-- =============================================================================
CREATE TRIGGER IF NOT EXISTS update_worlds_timestamp
    AFTER UPDATE OF data ON worlds
    BEGIN
        UPDATE worlds SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
    END;

CREATE TRIGGER IF NOT EXISTS update_guilds_timestamp
    AFTER UPDATE OF data ON guilds
    BEGIN
        UPDATE guilds SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
    END;

CREATE TRIGGER IF NOT EXISTS update_heroes_timestamp
    AFTER UPDATE OF data ON heroes
    BEGIN
        UPDATE heroes SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
    END;
"""


class Database:
    """SQLite database connection manager with schema initialization.

    One connection is shared by every request thread; access to it is
    serialized by a re-entrant lock, and ``transaction()`` holds that lock
    for the whole read-modify-write.
    """

    def __init__(self, db_path: Path | str | None = None):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file.
                     Use ":memory:" for in-memory database.
                     None defaults to data/guildhall.db
        """
        if db_path is None:
            db_path = Path("data") / "guildhall.db"

        self.db_path = Path(db_path) if db_path != ":memory:" else db_path
        self._connection: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._depth = 0

        # Ensure data directory exists
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(self.db_path, check_same_thread=False)
            # Enable foreign keys
            self._connection.execute("PRAGMA foreign_keys = ON")
            # Return dicts instead of tuples
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    def execute(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute a single query."""
        with self._lock:
            return self.connection.execute(query, params)

    def executescript(self, script: str) -> sqlite3.Cursor:
        """Execute multiple SQL statements."""
        with self._lock:
            return self.connection.executescript(script)

    def commit(self) -> None:
        """Commit the current transaction."""
        with self._lock:
            self.connection.commit()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        with self._lock:
            self.connection.rollback()

    def fetch_one(self, query: str, params: tuple = ()) -> sqlite3.Row | None:
        """Execute query and fetch one result."""
        with self._lock:
            return self.execute(query, params).fetchone()

    def fetch_all(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute query and fetch all results."""
        with self._lock:
            return self.execute(query, params).fetchall()

    @contextmanager
    def transaction(self) -> Iterator[Self]:
        """Context manager for transactions with auto-commit/rollback.

        Nested calls join the outermost transaction; only the outermost
        block commits or rolls back.
        """
        with self._lock:
            outermost = self._depth == 0
            self._depth += 1
            try:
                yield self
                if outermost:
                    self.commit()
            except Exception:
                if outermost:
                    self.rollback()
                raise
            finally:
                self._depth -= 1

    def init_schema(self) -> None:
        """Initialize database schema. A database already at SCHEMA_VERSION is left as is."""
        with self._lock:
            if self.get_schema_version() == SCHEMA_VERSION and all(self.table_exists(table) for table in TABLES):
                logger.debug("Schema version %d already applied to %s", SCHEMA_VERSION, self.db_path)
                return

            logger.info("Applying schema version %d to %s", SCHEMA_VERSION, self.db_path)
            self.executescript(SCHEMA_SQL)

            # Record schema version
            self.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,)
            )
            self.commit()

    def get_schema_version(self) -> int | None:
        """Get current schema version."""
        try:
            row = self.fetch_one("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1")
            return row["version"] if row else None
        except sqlite3.OperationalError:
            return None

    def table_exists(self, table_name: str) -> bool:
        """Check if a table exists."""
        row = self.fetch_one(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,)
        )
        return row is not None

    def get_table_count(self, table_name: str) -> int:
        """Get row count for a table."""
        row = self.fetch_one(f"SELECT COUNT(*) as count FROM {table_name}")
        return row["count"] if row else 0


# Helper functions for JSON serialization
def to_json(obj: Any) -> str | None:
    """Serialize object to JSON string for storage."""
    if obj is None:
        return None
    return json.dumps(obj, default=str)


def from_json(json_str: str | None) -> Any:
    """Deserialize JSON string from storage."""
    if json_str is None:
        return None
    return json.loads(json_str)
