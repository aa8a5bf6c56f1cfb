"""Game balance constants shared by the engine and the services."""

# Hero system
MAX_HEROES_PER_GUILD = 20

# World system
MAX_ACTIVE_EVENTS = 3
EVENT_SPAWN_CHANCE = 0.1        # 10% per update
EVENT_DURATION_HOURS = 24

# Bounds shared by personality, relation and mood values
TRAIT_MIN = 0
TRAIT_MAX = 100
MOOD_MIN = -100
MOOD_MAX = 100

# Guild system
STARTING_RESOURCES = {
    "gold": 1000,
    "wood": 50,
    "stone": 30,
    "food": 100,
}
FACILITY_COSTS = {
    "training_room": {"gold": 200, "wood": 20, "stone": 10},
    "workshop": {"gold": 150, "wood": 30, "stone": 5},
    "tavern": {"gold": 120, "wood": 25, "food": 20},
    "library": {"gold": 250, "wood": 15, "stone": 15},
    "infirmary": {"gold": 180, "wood": 10, "stone": 20},
}

# Game balance
BASE_EXPERIENCE_GAIN = 10
LEVEL_UP_MULTIPLIER = 1.5

HERO_CLASSES = {
    "Berserker": {
        "base_stats": {"combat": 80, "magic": 20, "crafting": 30, "exploration": 50},
        "personality_tendencies": {"courage": 80, "patience": 20},
    },
    "Ranger": {
        "base_stats": {"combat": 60, "magic": 40, "crafting": 50, "exploration": 80},
        "personality_tendencies": {"curiosity": 80, "patience": 70},
    },
    "Paladin": {
        "base_stats": {"combat": 70, "magic": 60, "crafting": 40, "exploration": 40},
        "personality_tendencies": {"loyalty": 90, "empathy": 80},
    },
    "Sorcerer": {
        "base_stats": {"combat": 30, "magic": 90, "crafting": 60, "exploration": 30},
        "personality_tendencies": {"curiosity": 70, "patience": 90},
    },
    "Rogue": {
        "base_stats": {"combat": 50, "magic": 30, "crafting": 70, "exploration": 70},
        "personality_tendencies": {"greed": 70, "curiosity": 60},
    },
    "Cleric": {
        "base_stats": {"combat": 40, "magic": 80, "crafting": 50, "exploration": 40},
        "personality_tendencies": {"empathy": 90, "loyalty": 70},
    },
}

BIOMES = {
    "forest": {
        "resources": ["wood", "herbs", "berries"],
        "monsters": ["wolf", "bear", "treant"],
        "difficulty_modifier": 1.0,
    },
    "mountain": {
        "resources": ["stone", "iron", "gems"],
        "monsters": ["dragon", "giant", "harpy"],
        "difficulty_modifier": 1.5,
    },
    "desert": {
        "resources": ["sand", "crystal", "cactus"],
        "monsters": ["scorpion", "mummy", "sphinx"],
        "difficulty_modifier": 1.3,
    },
    "swamp": {
        "resources": ["moss", "poison", "bones"],
        "monsters": ["troll", "witch", "basilisk"],
        "difficulty_modifier": 1.4,
    },
}
