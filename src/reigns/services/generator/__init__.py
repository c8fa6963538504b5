"""Deck generator exports."""

from .base import DeckGenerator
from .openai_generator import OpenAIDeckGenerator
from .prompts import DECK_RESPONSE_SCHEMA, DECK_SIZE, build_branching_prompt, build_initial_prompt

__all__ = [
    "DECK_RESPONSE_SCHEMA",
    "DECK_SIZE",
    "DeckGenerator",
    "OpenAIDeckGenerator",
    "build_branching_prompt",
    "build_initial_prompt",
]
