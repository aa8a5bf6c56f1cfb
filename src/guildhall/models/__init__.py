from .schemas import (
    HeroClass,
    ActionKind,
    TimeOfDay,
    Weather,
    Biome,
    LocationType,
    EventType,
    FacilityType,
    DescribeKind,
    QuestType,
)

from .base import Record

from .hero import (
    PersonalityTraits,
    HeroStats,
    MasterRelation,
    Hero,
)

from .guild import Guild

from .world import (
    WorldLocation,
    WorldEvent,
    World,
)

from .actions import (
    ActionResult,
    Decision,
    Quest,
)

from .validation import (
    Violation,
    validate_hero,
    validate_guild,
    validate_world,
)

__all__ = [
    # Schemas
    "HeroClass",
    "ActionKind",
    "TimeOfDay",
    "Weather",
    "Biome",
    "LocationType",
    "EventType",
    "FacilityType",
    "DescribeKind",
    "QuestType",
    "Record",

    # Entities
    "PersonalityTraits",
    "HeroStats",
    "MasterRelation",
    "Hero",
    "Guild",
    "WorldLocation",
    "WorldEvent",
    "World",

    # Actions
    "ActionResult",
    "Decision",
    "Quest",

    # Validation
    "Violation",
    "validate_hero",
    "validate_guild",
    "validate_world",
]
