from enum import Enum


class HeroPrompts(str, Enum):
    SYSTEM = """You are the narrator of a fantasy hero-management game.
Stay in character and keep answers short."""
    CHOOSE_ACTION = """You are {hero.name}, a {hero.hero_class.value} with this personality:
- Courage: {hero.personality.courage}/100
- Greed: {hero.personality.greed}/100
- Loyalty: {hero.personality.loyalty}/100
- Curiosity: {hero.personality.curiosity}/100
- Ambition: {hero.personality.ambition}/100
- Patience: {hero.personality.patience}/100
- Empathy: {hero.personality.empathy}/100

Current status:
- Health: {hero.stats.health}/{hero.stats.max_health}
- Energy: {hero.stats.energy}/{hero.stats.max_energy}
- Mood: {hero.mood}/100
- Goals: {goals}
- Master relationship: Trust {hero.master_relation.trust}, Respect {hero.master_relation.respect}, Fear {hero.master_relation.fear}

Available actions: {actions}

Context: {context}

Choose ONE action and explain your reasoning in character. Format as JSON:
{{
    "chosenAction": "action_name",
    "reasoning": "Your thought process as this character"
}}"""


class DescribePrompts(str, Enum):
    WORLD = """Write the lore of a fantasy world called {subject} for a hero management game.
Describe its atmosphere and history in 2-3 sentences. Respond with the text only."""
    HERO = """Write a compelling 2-3 sentence backstory for {subject}, a hero in a fantasy guild.
Respond with the text only."""


class QuestPrompts(str, Enum):
    GENERATE = """Generate a quest for the guild {guild} at difficulty level {difficulty} (1-10).
World context: {context}

Format as JSON:
{{
    "title": "Quest Title",
    "description": "Quest description in 2-3 sentences",
    "type": "combat|exploration|crafting|social",
    "requirements": ["requirement1", "requirement2"],
    "rewards": {{"experience": 100, "gold": 50, "reputation": 10}}
}}"""
