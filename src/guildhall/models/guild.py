from datetime import datetime
from typing import Dict, List

from guildhall.models.base import Record
from guildhall.models.schemas import FacilityType


class Guild(Record):
    """Resource-holding container for a player's heroes within one world."""
    id: str
    name: str
    master_id: str                  # Owning player
    world_id: str
    hero_ids: List[str] = []
    resources: Dict[str, int] = {}
    level: int = 1
    experience: int = 0
    reputation: int = 0
    facilities: List[FacilityType] = []
    policies: List[str] = []
    created_at: datetime | None = None
    version: int = 0

    def has_resources(self, costs: Dict[str, int]) -> bool:
        return all(self.resources.get(name, 0) >= amount for name, amount in costs.items())
