"""
Storage layer for the guild game.

Provides:
- SQLite database with JSON rows and optimistic version counters
- Repositories for heroes, guilds and worlds
- NetworkX graph of world locations for discovery and travel
"""

from guildhall.storage.database import Database, to_json, from_json, SCHEMA_VERSION
from guildhall.storage.repositories import (
    GameStore,
    GuildRepository,
    HeroRepository,
    WorldRepository,
)
from guildhall.storage.graph.world_graph import WorldGraph

__all__ = [
    # Database
    "Database",
    "to_json",
    "from_json",
    "SCHEMA_VERSION",
    # Repositories
    "GameStore",
    "HeroRepository",
    "GuildRepository",
    "WorldRepository",
    # Graph
    "WorldGraph",
]
