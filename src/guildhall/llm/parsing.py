"""
Response parsing for the decision oracle.

All quirks of LLM output (code fences, preamble text, loose enum spellings)
are handled here. Functions either return a typed result or raise an
OracleError subclass.
"""

import json
import re
from typing import Any, Sequence

from pydantic import ValidationError

from guildhall.llm.exceptions import JSONExtractionError, ValidationFailedError
from guildhall.models import ActionKind, Decision, Quest


CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)

ACTION_ALIASES = {
    "training": ActionKind.TRAIN,
    "exploration": ActionKind.EXPLORE,
    "exploring": ActionKind.EXPLORE,
    "resting": ActionKind.REST,
    "sleep": ActionKind.REST,
    "socializing": ActionKind.SOCIALIZE,
    "socialising": ActionKind.SOCIALIZE,
    "socialise": ActionKind.SOCIALIZE,
    "crafting": ActionKind.CRAFT,
    "questing": ActionKind.QUEST,
}


def extract_json(response: str) -> dict:
    """
    Extract a JSON object from an LLM response that may contain surrounding text.

    Handles common LLM output patterns:
    - Pure JSON
    - JSON wrapped in markdown code blocks
    - JSON with preamble/postamble text
    """
    response = response.strip()

    # Try 1: Direct JSON parse (cleanest case)
    try:
        data = json.loads(response)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    # Try 2: Extract from markdown code blocks
    for match in CODE_BLOCK_PATTERN.findall(response):
        try:
            data = json.loads(match.strip())
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    # Try 3: Find the outermost { ... } by matching braces
    brace_depth = 0
    start_idx = None
    for i, char in enumerate(response):
        if char == "{":
            if brace_depth == 0:
                start_idx = i
            brace_depth += 1
        elif char == "}" and brace_depth > 0:
            brace_depth -= 1
            if brace_depth == 0 and start_idx is not None:
                try:
                    return json.loads(response[start_idx:i + 1])
                except json.JSONDecodeError:
                    start_idx = None

    raise JSONExtractionError(
        f"Could not extract valid JSON from response. Response preview: {response[:200]}"
    )


def normalize_action(value: Any) -> ActionKind | None:
    """Map loose spellings ("Training", "EXPLORE", "socializing") onto ActionKind."""
    if not isinstance(value, str):
        return None
    value_lower = value.lower().strip()

    for member in ActionKind:
        if value_lower in (member.value, member.name.lower()):
            return member
    return ACTION_ALIASES.get(value_lower)


def parse_decision(response: str, available_actions: Sequence[ActionKind]) -> Decision:
    """
    Parse an LLM response into a Decision.

    Raises:
        JSONExtractionError: No JSON object could be extracted.
        ValidationFailedError: The JSON names no action, or one the hero cannot take.
    """
    data = extract_json(response)

    raw_action = data.get("chosenAction", data.get("action"))
    action = normalize_action(raw_action)
    if action is None:
        raise ValidationFailedError(f"Unrecognised action in oracle response: {raw_action!r}")
    if action not in available_actions:
        raise ValidationFailedError(f"Oracle chose unavailable action '{action.value}'")

    try:
        return Decision(action=action, reasoning=str(data.get("reasoning", "")).strip())
    except ValidationError as e:
        raise ValidationFailedError(f"Decision validation failed: {e}") from e


def parse_quest(response: str, difficulty: int) -> Quest:
    """
    Parse an LLM response into a Quest at the requested difficulty.

    Raises:
        JSONExtractionError: No JSON object could be extracted.
        ValidationFailedError: Missing title, unknown quest type or negative rewards.
    """
    data = extract_json(response)

    quest_type = data.get("type")
    if isinstance(quest_type, str):
        quest_type = quest_type.lower().strip()

    try:
        quest = Quest(
            title=str(data.get("title", "")).strip(),
            description=str(data.get("description", "")).strip(),
            type=quest_type,
            difficulty=difficulty,
            requirements=data.get("requirements") or [],
            rewards=data.get("rewards") or {},
        )
    except ValidationError as e:
        raise ValidationFailedError(f"Quest validation failed: {e}") from e

    if not quest.title:
        raise ValidationFailedError("Oracle quest has no title")
    if any(amount < 0 for amount in quest.rewards.values()):
        raise ValidationFailedError(f"Oracle quest has negative rewards: {quest.rewards}")
    return quest
