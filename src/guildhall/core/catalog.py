"""
Action catalog: the single source of truth for game balance.

Every action kind maps to one ActionSpec. The resolution engine reads deltas
from here and never hard-codes them; adding an action kind means adding one
entry to CATALOG.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping

from guildhall.models import ActionKind, Guild, Hero


def has_energy(hero: Hero, spec: "ActionSpec") -> bool:
    return hero.stats.energy >= spec.energy_cost


def fit_for_quest(hero: Hero, spec: "ActionSpec") -> bool:
    return has_energy(hero, spec) and hero.stats.health >= spec.min_health


@dataclass(frozen=True)
class ActionSpec:
    kind: ActionKind
    energy_cost: int                                                # Debited before deltas apply
    duration: int                                                   # Minutes
    summary: str
    stat_deltas: Mapping[str, int] = field(default_factory=dict)    # HeroStats field -> signed delta
    mood_delta: int = 0
    relation_deltas: Mapping[str, int] = field(default_factory=dict)  # Needs guild context
    guild_costs: Mapping[str, int] = field(default_factory=dict)
    guild_rewards: Mapping[str, int] = field(default_factory=dict)
    guild_experience: int = 0
    guild_reputation: int = 0
    social: bool = False
    min_health: int = 0
    precondition: Callable[[Hero, "ActionSpec"], bool] = has_energy

    @property
    def experience_gain(self) -> int:
        return self.stat_deltas.get("experience", 0)

    def is_allowed(self, hero: Hero, guild: Guild | None) -> bool:
        """Energy/health precondition plus guild resource costs."""
        if not self.precondition(hero, self):
            return False
        if self.guild_costs:
            return guild is not None and guild.has_resources(dict(self.guild_costs))
        return True


CATALOG: Dict[ActionKind, ActionSpec] = {
    ActionKind.TRAIN: ActionSpec(
        kind=ActionKind.TRAIN,
        energy_cost=20,
        duration=60,
        summary="Hero completed training session",
        stat_deltas={"combat": 1, "experience": 10},
    ),
    ActionKind.EXPLORE: ActionSpec(
        kind=ActionKind.EXPLORE,
        energy_cost=30,
        duration=90,
        summary="Hero explored new areas",
        stat_deltas={"exploration": 1, "experience": 15},
    ),
    ActionKind.REST: ActionSpec(
        kind=ActionKind.REST,
        energy_cost=0,
        duration=60,
        summary="Hero restored energy and health",
        stat_deltas={"energy": 40, "health": 20},
    ),
    ActionKind.SOCIALIZE: ActionSpec(
        kind=ActionKind.SOCIALIZE,
        energy_cost=10,
        duration=30,
        summary="Hero socialized with guild members",
        mood_delta=10,
        relation_deltas={"trust": 1},
        social=True,
    ),
    ActionKind.CRAFT: ActionSpec(
        kind=ActionKind.CRAFT,
        energy_cost=20,
        duration=60,
        summary="Hero crafted supplies in the workshop",
        stat_deltas={"crafting": 1, "experience": 10},
    ),
    ActionKind.QUEST: ActionSpec(
        kind=ActionKind.QUEST,
        energy_cost=40,
        duration=120,
        summary="Hero returned from a quest",
        stat_deltas={"health": -10, "combat": 1, "exploration": 1, "experience": 25},
        mood_delta=5,
        relation_deltas={"respect": 2},
        guild_rewards={"gold": 50},
        guild_experience=10,
        guild_reputation=1,
        min_health=30,
        precondition=fit_for_quest,
    ),
}


def get_spec(kind: ActionKind | str) -> ActionSpec | None:
    """Look up a catalog entry; unknown kinds return None."""
    try:
        return CATALOG.get(ActionKind(kind))
    except ValueError:
        return None


def available_actions(hero: Hero, guild: Guild | None = None) -> List[ActionKind]:
    """Action kinds whose preconditions the hero currently meets, in catalog order."""
    return [kind for kind, spec in CATALOG.items() if spec.is_allowed(hero, guild)]
