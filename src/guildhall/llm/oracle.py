import json
import logging
import random
from typing import Any, Protocol, Sequence

from guildhall.llm.client import OllamaClient
from guildhall.llm.exceptions import OracleError, OracleUnavailableError
from guildhall.llm.parsing import parse_decision, parse_quest
from guildhall.llm.prompts import DescribePrompts, HeroPrompts, QuestPrompts
from guildhall.models import ActionKind, Decision, DescribeKind, Hero, Quest, QuestType

logger = logging.getLogger(__name__)

FALLBACK_REASONING = "I'll go with my instincts on this one."

FALLBACK_DESCRIPTIONS = {
    DescribeKind.WORLD: "An old land of forests and mountains, where guilds rise and fall with the seasons.",
    DescribeKind.HERO: "A wanderer who came to the guild looking for purpose and a warm meal.",
}

# title, description, requirements
FALLBACK_QUESTS = {
    QuestType.COMBAT: ("Clear the Old Road", "Bandits have taken the road to the next town. Drive them off before the next caravan.", ["weapons", "a healer"]),
    QuestType.EXPLORATION: ("Chart the Far Ridge", "No map of the guild shows what lies past the ridge. Go and find out.", ["rations", "rope"]),
    QuestType.CRAFTING: ("Mend the Watchtower", "The village watchtower is falling apart and the smith is short of hands.", ["wood", "iron"]),
    QuestType.SOCIAL: ("Settle the Market Quarrel", "Two merchant families are at odds, and the market suffers for it.", ["a steady temper"]),
}


def quest_rewards(difficulty: int) -> dict[str, int]:
    return {"experience": 50 * difficulty, "gold": 25 * difficulty, "reputation": 5 * difficulty}


class DecisionOracle(Protocol):
    """Suggests actions and writes flavor text. Never mutates game state."""

    def choose_action(
        self,
        hero: Hero,
        available_actions: Sequence[ActionKind],
        context: dict[str, Any] | None = None,
    ) -> Decision:
        ...

    def describe(self, subject: str, kind: DescribeKind) -> str:
        ...

    def generate_quest(self, guild: str, difficulty: int, context: str = "") -> Quest:
        ...


class FallbackDecisionOracle:
    """Deterministic stand-in: uniform choice over available actions, fixed text."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def choose_action(
        self,
        hero: Hero,
        available_actions: Sequence[ActionKind],
        context: dict[str, Any] | None = None,
    ) -> Decision:
        action = self.rng.choice(list(available_actions)) if available_actions else ActionKind.REST
        return Decision(action=action, reasoning=FALLBACK_REASONING)

    def describe(self, subject: str, kind: DescribeKind) -> str:
        return FALLBACK_DESCRIPTIONS[kind]

    def generate_quest(self, guild: str, difficulty: int, context: str = "") -> Quest:
        quest_type = self.rng.choice(list(QuestType))
        title, description, requirements = FALLBACK_QUESTS[quest_type]
        return Quest(
            title=title,
            description=description,
            type=quest_type,
            difficulty=difficulty,
            requirements=requirements,
            rewards=quest_rewards(difficulty),
        )


class RemoteDecisionOracle:
    """
    LLM-backed oracle. Any transport error, timeout or unusable reply is
    absorbed here and answered by the fallback oracle instead.
    """

    def __init__(self, llm_client: OllamaClient, fallback: FallbackDecisionOracle | None = None):
        self.llm = llm_client
        self.fallback = fallback or FallbackDecisionOracle()

    def choose_action(
        self,
        hero: Hero,
        available_actions: Sequence[ActionKind],
        context: dict[str, Any] | None = None,
    ) -> Decision:
        if not available_actions:
            return self.fallback.choose_action(hero, available_actions, context)

        prompt = HeroPrompts.CHOOSE_ACTION.value.format(
            hero=hero,
            goals=", ".join(hero.goals) or "none",
            actions=", ".join(action.value for action in available_actions),
            context=json.dumps(context or {}, default=str),
        )
        try:
            response = self._ask(prompt, json_mode=True)
            decision = parse_decision(response, available_actions)
        except OracleError as e:
            logger.warning("Oracle decision for hero %s fell back: %s", hero.id, e)
            return self.fallback.choose_action(hero, available_actions, context)

        logger.debug("Oracle chose %s for hero %s", decision.action.value, hero.id)
        return decision

    def describe(self, subject: str, kind: DescribeKind) -> str:
        prompt = DescribePrompts[kind.name].value.format(subject=subject)
        try:
            text = self._ask(prompt).strip()
        except OracleError as e:
            logger.warning("Oracle description of %s '%s' fell back: %s", kind.value, subject, e)
            return self.fallback.describe(subject, kind)

        return text or self.fallback.describe(subject, kind)

    def generate_quest(self, guild: str, difficulty: int, context: str = "") -> Quest:
        prompt = QuestPrompts.GENERATE.value.format(guild=guild, difficulty=difficulty, context=context or "unknown lands")
        try:
            quest = parse_quest(self._ask(prompt, json_mode=True), difficulty)
        except OracleError as e:
            logger.warning("Oracle quest for %s fell back: %s", guild, e)
            return self.fallback.generate_quest(guild, difficulty, context)

        logger.debug("Oracle wrote quest '%s' for %s", quest.title, guild)
        return quest

    def _ask(self, prompt: str, json_mode: bool = False) -> str:
        try:
            response = self.llm.generate(prompt, system=HeroPrompts.SYSTEM.value, json_mode=json_mode)
        except Exception as e:
            raise OracleUnavailableError(f"Remote oracle call failed: {e}") from e

        if not isinstance(response, str):
            raise OracleUnavailableError(f"Remote oracle returned {type(response).__name__}, not text")
        return response
