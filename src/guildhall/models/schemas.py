from enum import Enum


# Enum Classes
class HeroClass(str, Enum):         # Fixed set of hero classes
    BERSERKER = "Berserker"
    RANGER = "Ranger"
    PALADIN = "Paladin"
    SORCERER = "Sorcerer"
    ROGUE = "Rogue"
    CLERIC = "Cleric"


class ActionKind(str, Enum):        # Actions a hero can take
    TRAIN = "train"
    EXPLORE = "explore"
    REST = "rest"
    SOCIALIZE = "socialize"
    CRAFT = "craft"
    QUEST = "quest"


class TimeOfDay(str, Enum):         # Declared in cycle order
    DAWN = "dawn"
    MORNING = "morning"
    NOON = "noon"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class Weather(str, Enum):
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    STORMY = "stormy"


class Biome(str, Enum):
    FOREST = "forest"
    MOUNTAIN = "mountain"
    DESERT = "desert"
    SWAMP = "swamp"


class LocationType(str, Enum):
    DUNGEON = "dungeon"
    TOWN = "town"
    WILDERNESS = "wilderness"
    RESOURCE_NODE = "resource_node"
    GUILD_HALL = "guild_hall"


class EventType(str, Enum):
    MONSTER_INVASION = "monster_invasion"
    FESTIVAL = "festival"
    NATURAL_DISASTER = "natural_disaster"
    MERCHANT_CARAVAN = "merchant_caravan"


class FacilityType(str, Enum):
    TRAINING_ROOM = "training_room"
    WORKSHOP = "workshop"
    TAVERN = "tavern"
    LIBRARY = "library"
    INFIRMARY = "infirmary"


class DescribeKind(str, Enum):      # Flavor text the oracle can write
    WORLD = "world"
    HERO = "hero"


class QuestType(str, Enum):
    COMBAT = "combat"
    EXPLORATION = "exploration"
    CRAFTING = "crafting"
    SOCIAL = "social"
