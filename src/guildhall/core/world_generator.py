"""Seeded world and hero generation. The oracle only supplies flavor text."""

import random
from datetime import datetime, timezone
from uuid import uuid4

from guildhall.constants import BIOMES, HERO_CLASSES, STARTING_RESOURCES
from guildhall.models import (
    Biome,
    Hero,
    HeroClass,
    HeroStats,
    LocationType,
    PersonalityTraits,
    World,
    WorldLocation,
)

NAME_PREFIXES = ["Ash", "Bright", "Cold", "Dusk", "Elder", "Frost", "Gold", "Iron", "Moon", "Raven", "Storm", "Thorn"]
NAME_SUFFIXES = ["vale", "hold", "reach", "moor", "fall", "crest", "haven", "wood", "spire", "gate"]
HERO_FIRST_NAMES = ["Aldric", "Brynn", "Cassia", "Doran", "Elowen", "Fenris", "Greta", "Halvard", "Isolde", "Joren", "Kael", "Lyra"]

LOCATION_TYPES_BY_DIFFICULTY = [
    (3, LocationType.WILDERNESS),
    (6, LocationType.RESOURCE_NODE),
    (10, LocationType.DUNGEON),
]

MAP_SIZE = 1000


def _place_name(rng: random.Random) -> str:
    return f"{rng.choice(NAME_PREFIXES)}{rng.choice(NAME_SUFFIXES)}"


def generate_locations(rng: random.Random, count: int) -> list[WorldLocation]:
    """One discovered starting town in the map centre, then `count - 1` undiscovered sites."""
    locations = [
        WorldLocation(
            id="loc_000",
            name="Starting Village",
            type=LocationType.TOWN,
            biome=Biome.FOREST,
            x=MAP_SIZE // 2,
            y=MAP_SIZE // 2,
            difficulty=1,
            resources=["food", "wood"],
            is_discovered=True,
        )
    ]
    for index in range(1, count):
        biome = rng.choice(list(Biome))
        table = BIOMES[biome.value]
        difficulty = min(10, round(rng.randint(1, 10) * table["difficulty_modifier"]))
        location_type = next(kind for limit, kind in LOCATION_TYPES_BY_DIFFICULTY if difficulty <= limit)
        if rng.random() < 0.15:
            location_type = LocationType.TOWN
        locations.append(
            WorldLocation(
                id=f"loc_{index:03d}",
                name=_place_name(rng),
                type=location_type,
                biome=biome,
                x=rng.randint(0, MAP_SIZE),
                y=rng.randint(0, MAP_SIZE),
                difficulty=difficulty,
                resources=rng.sample(table["resources"], k=2),
                monsters=rng.sample(table["monsters"], k=min(2, difficulty // 3)),
            )
        )
    return locations


def generate_world(player_id: str, seed: str | None = None, lore: str = "") -> World:
    seed = seed or f"seed_{uuid4().hex[:12]}"
    rng = random.Random(seed)
    return World(
        id=f"world_{uuid4().hex[:12]}",
        name=f"The Realm of {_place_name(rng)}",
        seed=seed,
        player_id=player_id,
        locations=generate_locations(rng, rng.randint(8, 12)),
        total_resources=dict(STARTING_RESOURCES),
        lore=lore,
        created_at=datetime.now(timezone.utc),
    )


def generate_hero(guild_id: str, rng: random.Random, backstory: str = "") -> Hero:
    """Roll a hero of a random class, biased towards that class's personality tendencies."""
    hero_class = rng.choice(list(HeroClass))
    table = HERO_CLASSES[hero_class.value]

    traits = {name: rng.randint(20, 80) for name in PersonalityTraits.model_fields}
    for name, tendency in table["personality_tendencies"].items():
        traits[name] = max(0, min(100, tendency + rng.randint(-10, 10)))

    return Hero(
        id=f"hero_{uuid4().hex[:12]}",
        name=rng.choice(HERO_FIRST_NAMES),
        hero_class=hero_class,
        guild_id=guild_id,
        personality=PersonalityTraits(**traits),
        stats=HeroStats(**table["base_stats"]),
        mood=rng.randint(-20, 40),
        backstory=backstory,
    )
