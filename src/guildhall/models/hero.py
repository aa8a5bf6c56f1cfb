from datetime import datetime
from typing import List

from pydantic import Field

from guildhall.models.base import Record
from guildhall.models.schemas import HeroClass


class PersonalityTraits(Record):    # Each trait 0-100
    courage: int = 50               # Willingness to fight strong enemies
    greed: int = 50                 # Loot vs helping others
    loyalty: int = 50               # Trust/obedience towards the Master
    curiosity: int = 50             # Exploring vs staying safe
    ambition: int = 50              # Personal goals vs team objectives
    patience: int = 50              # Training thoroughly vs rushing in
    empathy: int = 50               # Helping allies vs self-preservation


class HeroStats(Record):
    level: int = 1
    experience: int = 0
    health: int = 100
    max_health: int = 100
    energy: int = 100
    max_energy: int = 100
    combat: int = 0
    magic: int = 0
    crafting: int = 0
    exploration: int = 0


class MasterRelation(Record):       # Each value 0-100
    trust: int = 50                 # Built through keeping promises
    respect: int = 50               # Earned through successful leadership
    fear: int = 0                   # Effective, but reduces creativity


class Hero(Record):
    """A guild-owned agent. Snapshots are immutable; mutations produce a new Hero."""
    id: str
    name: str
    hero_class: HeroClass = Field(alias="class")
    guild_id: str
    personality: PersonalityTraits = PersonalityTraits()
    stats: HeroStats = HeroStats()
    master_relation: MasterRelation = MasterRelation()
    mood: int = 0                   # -100 to 100
    current_action: str = "idle"
    last_action_time: datetime | None = None
    is_active: bool = True
    backstory: str = ""
    goals: List[str] = []
    equipment: List[str] = []
    version: int = 0                # Optimistic concurrency token, owned by storage
