"""List/form editing operations on decks, plus deck and theme import/export.

Every operation returns a new DeckDef. Index-based jump targets are not
rewritten when cards are added or removed; keeping them meaningful after a
reorder is left to the author.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from reigns.core.types import Side, StatKey
from reigns.data.deck_codec import load_deck_text, load_themes_text
from reigns.data.errors import DataError, DataLoadError
from reigns.domain.defs import CardDef, ChoiceDef, DeckDef, EffectMap, ThemeDef, card_at
from reigns.services.errors import EnginePreconditionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Outcome of an all-or-nothing deck import."""

    deck: DeckDef
    ok: bool
    message: str


@dataclass(frozen=True, slots=True)
class ThemeImportResult:
    """Outcome of an all-or-nothing bulk theme import."""

    themes: tuple[ThemeDef, ...]
    ok: bool
    message: str


def new_card() -> CardDef:
    """Return the placeholder card the editor appends."""
    return CardDef(
        prompt="New Scenario",
        left=ChoiceDef(text="Option A", effects=EffectMap.zero()),
        right=ChoiceDef(text="Option B", effects=EffectMap.zero()),
    )


def empty_deck() -> DeckDef:
    return DeckDef(cards=(), name="", description="")


def add_card(deck: DeckDef, card: CardDef | None = None) -> DeckDef:
    return deck.with_cards(deck.cards + (card or new_card(),))


def delete_card(deck: DeckDef, index: int) -> DeckDef:
    _require_card(deck, index)
    return deck.with_cards(card for position, card in enumerate(deck.cards) if position != index)


def replace_card(deck: DeckDef, index: int, card: CardDef) -> DeckDef:
    _require_card(deck, index)
    return deck.with_card(index, card)


def set_next_target(deck: DeckDef, index: int, side: Side, target: int | None) -> DeckDef:
    """Set or clear (``None``) a choice's explicit next-target from the form view."""
    card = _require_card(deck, index)
    choice = card.choice(side).with_next_card_index(target)
    return deck.with_card(index, card.with_choice(side, choice))


def set_effect(deck: DeckDef, index: int, side: Side, stat: StatKey, value: int | None) -> DeckDef:
    card = _require_card(deck, index)
    choice = card.choice(side)
    updated = ChoiceDef(
        text=choice.text,
        effects=choice.effects.with_delta(stat, value),
        next_card_index=choice.next_card_index,
        sound_url=choice.sound_url,
    )
    return deck.with_card(index, card.with_choice(side, updated))


def set_metadata(deck: DeckDef, *, name: str | None = None, description: str | None = None) -> DeckDef:
    return DeckDef(
        cards=deck.cards,
        name=deck.name if name is None else name,
        description=deck.description if description is None else description,
    )


def import_deck(current: DeckDef, text: str) -> ImportResult:
    """Parse ``text`` as a deck; on any failure keep ``current`` unchanged."""
    try:
        deck = load_deck_text(text)
    except DataError as exc:
        logger.warning("Deck import rejected: %s", exc)
        return ImportResult(deck=current, ok=False, message="Invalid deck file.")
    return ImportResult(deck=deck, ok=True, message="Deck imported successfully!")


def _require_card(deck: DeckDef, index: int) -> CardDef:
    card = card_at(deck, index)
    if card is None:
        raise EnginePreconditionError(
            f"Card index {index} is outside a deck of {len(deck.cards)} cards."
        )
    return card


def import_themes(current: Sequence[ThemeDef], text: str) -> ThemeImportResult:
    """Replace every theme with those in ``text``; on any failure keep ``current``."""
    try:
        themes = load_themes_text(text)
    except DataLoadError as exc:
        logger.warning("Theme import rejected: %s", exc)
        return ThemeImportResult(
            themes=tuple(current),
            ok=False,
            message="Could not import realities. The file is not valid JSON.",
        )
    except DataError as exc:
        logger.warning("Theme import rejected: %s", exc)
        return ThemeImportResult(
            themes=tuple(current), ok=False, message="Import failed: Invalid file format."
        )
    return ThemeImportResult(
        themes=tuple(themes), ok=True, message=f"{len(themes)} realities imported successfully!"
    )


def export_played_deck(theme: ThemeDef, deck: DeckDef | None) -> DeckDef:
    """Return ``deck`` as played in ``theme``, with export name and description filled in."""
    if deck is None or not deck.cards:
        raise EnginePreconditionError("No story deck to export.")
    return DeckDef(
        cards=deck.cards,
        name=deck.name or "Exported Story",
        description=deck.description or f"A story played in the {theme.name} reality.",
    )


def played_deck_filename(theme: ThemeDef, timestamp_ms: int) -> str:
    return f"story-{theme.id}-{timestamp_ms}.json"
