"""Deck generator contract."""
from __future__ import annotations

from typing import Protocol

from reigns.domain.defs import DeckDef, ThemeDef
from reigns.domain.state import Stats


class DeckGenerator(Protocol):
    """Produces whole decks for a theme.

    Implementations raise DeckGenerationError for transport failures and for
    empty or malformed results alike.
    """

    def generate_initial(self, theme: ThemeDef, stats: Stats) -> DeckDef:
        ...

    def generate_from_prompt(self, theme: ThemeDef, story_prompt: str) -> DeckDef:
        ...
