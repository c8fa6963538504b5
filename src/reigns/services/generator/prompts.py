"""Authoring prompts and response schema for deck generation."""
from __future__ import annotations

from reigns.core.types import STAT_KEYS
from reigns.domain.defs import ThemeDef
from reigns.domain.state import Stats

DECK_SIZE = 20
MAX_SUGGESTED_DELTA = 35

_EFFECTS_SCHEMA = {
    "type": "object",
    "properties": {key: {"type": "integer"} for key in STAT_KEYS},
    "required": list(STAT_KEYS),
}

_CHOICE_SCHEMA = {
    "type": "object",
    "properties": {
        "text": {"type": "string"},
        "effects": _EFFECTS_SCHEMA,
        "nextCardIndex": {"type": "integer"},
        "soundUrl": {"type": "string"},
    },
    "required": ["text", "effects"],
}

DECK_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "description": {"type": "string"},
        "cards": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "prompt": {"type": "string"},
                    "imageUrl": {"type": "string"},
                    "leftChoice": _CHOICE_SCHEMA,
                    "rightChoice": _CHOICE_SCHEMA,
                },
                "required": ["prompt", "leftChoice", "rightChoice"],
            },
        },
    },
    "required": ["name", "description", "cards"],
}


def _stat_name_lines(theme: ThemeDef) -> str:
    return "\n".join(f"The {key} stat is named {theme.stat_name(key)}." for key in STAT_KEYS)


def build_initial_prompt(theme: ThemeDef, stats: Stats, *, deck_size: int = DECK_SIZE) -> str:
    """Prompt for a fresh deck given the player's starting stats."""
    stats_summary = ", ".join(f"{theme.stat_name(key)}: {stats.get(key)}" for key in STAT_KEYS)
    return f"""
The player is starting a new game with this situation: {stats_summary}.
Generate a full, unique, and challenging deck of {deck_size} scenario cards for the game.
The choices should have plausible but non-obvious consequences.
Stat changes should generally be between -{MAX_SUGGESTED_DELTA} and +{MAX_SUGGESTED_DELTA}.
Ensure the prompts are engaging, varied, and fit the {theme.name} theme. Do not repeat scenarios within the deck.
Give the deck a cool, thematic name and a one-sentence synopsis.
Optionally create branching narratives by setting the 'nextCardIndex' property on choices to jump to other cards. If you create branches, ensure they create an interesting, potentially looping story. The final card in the deck is the win condition.
{_stat_name_lines(theme)}
Optionally, you can provide an image URL for each card that fits the scenario.
Optionally, you can provide a sound effect URL for each choice.
""".strip()


def build_branching_prompt(theme: ThemeDef, story_prompt: str, *, deck_size: int = DECK_SIZE) -> str:
    """Prompt for a branching deck that follows an author's story prompt."""
    return f"""
A story creator wants a deck of {deck_size} cards for the game based on this high-level prompt: "{story_prompt}".
Generate a full, unique, and challenging deck of {deck_size} scenario cards that follows the creator's prompt.
Give the generated deck a cool, thematic name based on the prompt, and use the prompt itself as the deck's description.
Create a branching narrative using the 'nextCardIndex' property on choices to make the story interactive and replayable. Make sure jumps are valid (within the 0 to {deck_size - 1} range). The final card in the array (index {deck_size - 1}) should be the 'win' or final ending card.
The choices should have plausible but non-obvious consequences.
Stat changes should generally be between -{MAX_SUGGESTED_DELTA} and +{MAX_SUGGESTED_DELTA}.
Ensure the prompts are engaging, varied, and fit the {theme.name} theme.
{_stat_name_lines(theme)}
Optionally, you can provide an image URL for each card that fits the scenario.
Optionally, you can provide a sound effect URL for each choice.
""".strip()
