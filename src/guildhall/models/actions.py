from datetime import datetime
from typing import Dict, List

from pydantic import Field

from guildhall.models.base import Record
from guildhall.models.schemas import ActionKind, QuestType


# ========================================================================================
# ACTION RESULTS: ephemeral records of a resolution, used for the response and broadcast.
# The durable truth is the updated Hero/Guild row.
# ========================================================================================
class ActionResult(Record):
    action: ActionKind
    hero_id: str
    stat_changes: Dict[str, int] = {}       # Deltas actually applied, after clamping
    resource_changes: Dict[str, int] = {}   # Guild resource deltas
    leveled_up: bool = False
    summary: str
    timestamp: datetime


class Decision(Record):
    """What the oracle picked for a hero, and why (in character)."""
    action: ActionKind
    reasoning: str


class Quest(Record):
    """A quest offer written for a guild. Offers are not persisted."""
    title: str
    description: str
    type: QuestType
    difficulty: int = Field(ge=1, le=10)
    requirements: List[str] = []
    rewards: Dict[str, int] = {}        # experience, gold, reputation
