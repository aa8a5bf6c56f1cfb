from datetime import datetime
from typing import Dict, List

from guildhall.models.base import Record
from guildhall.models.schemas import Biome, EventType, LocationType, TimeOfDay, Weather


class WorldLocation(Record):
    """Generated once; only is_discovered changes afterwards."""
    id: str
    name: str
    type: LocationType
    biome: Biome
    x: int
    y: int
    difficulty: int = 1             # 1-10
    resources: List[str] = []
    monsters: List[str] = []
    description: str = ""
    is_discovered: bool = False


class WorldEvent(Record):
    id: str
    type: EventType
    name: str
    description: str
    location_id: str | None = None
    start_time: datetime
    duration: int = 24              # hours
    effects: Dict[str, float] = {}
    is_active: bool = True


class World(Record):
    id: str
    name: str
    seed: str
    player_id: str
    locations: List[WorldLocation] = []
    events: List[WorldEvent] = []
    time_of_day: TimeOfDay = TimeOfDay.MORNING
    weather: Weather = Weather.SUNNY
    total_resources: Dict[str, int] = {}
    lore: str = ""
    created_at: datetime | None = None
    version: int = 0

    @property
    def active_events(self) -> List[WorldEvent]:
        return [event for event in self.events if event.is_active]

    @property
    def discovered_locations(self) -> List[str]:
        return [location.id for location in self.locations if location.is_discovered]
