"""Deck definition structures consumed by the traversal engine and editor."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterator, Sequence

from reigns.core.types import STAT_KEYS, Side, StatKey


@dataclass(frozen=True, slots=True)
class EffectMap:
    """Stat deltas applied by a choice. ``None`` means no change."""

    power: int | None = None
    wealth: int | None = None
    people: int | None = None
    knowledge: int | None = None

    def delta(self, key: StatKey) -> int:
        """Return the delta for a canonical stat key, 0 when absent."""
        if key == "Power":
            value = self.power
        elif key == "Wealth":
            value = self.wealth
        elif key == "People":
            value = self.people
        elif key == "Knowledge":
            value = self.knowledge
        else:
            raise KeyError(key)
        return value if value is not None else 0

    def items(self) -> Iterator[tuple[StatKey, int]]:
        """Yield ``(key, delta)`` pairs in canonical order."""
        for key in STAT_KEYS:
            yield key, self.delta(key)

    def explicit_keys(self) -> list[StatKey]:
        return [key for key, value in zip(STAT_KEYS, self._raw()) if value is not None]

    def is_zero(self) -> bool:
        return all(delta == 0 for _, delta in self.items())

    def with_delta(self, key: StatKey, value: int | None) -> "EffectMap":
        if key == "Power":
            return replace(self, power=value)
        if key == "Wealth":
            return replace(self, wealth=value)
        if key == "People":
            return replace(self, people=value)
        if key == "Knowledge":
            return replace(self, knowledge=value)
        raise KeyError(key)

    @classmethod
    def zero(cls) -> "EffectMap":
        """All four keys explicitly set to 0, as the editor creates them."""
        return cls(power=0, wealth=0, people=0, knowledge=0)

    def _raw(self) -> tuple[int | None, ...]:
        return (self.power, self.wealth, self.people, self.knowledge)


@dataclass(frozen=True, slots=True)
class ChoiceDef:
    """One side of a card's decision."""

    text: str
    effects: EffectMap = field(default_factory=EffectMap)
    next_card_index: int | None = None
    sound_url: str | None = None

    def with_next_card_index(self, target: int | None) -> "ChoiceDef":
        return replace(self, next_card_index=target)


@dataclass(frozen=True, slots=True)
class CardDef:
    """A scenario card offering exactly two choices."""

    prompt: str
    left: ChoiceDef
    right: ChoiceDef
    image_url: str | None = None

    def choice(self, side: Side) -> ChoiceDef:
        if side == "left":
            return self.left
        if side == "right":
            return self.right
        raise ValueError(f"Unknown choice side: {side!r}")

    def with_choice(self, side: Side, choice: ChoiceDef) -> "CardDef":
        if side == "left":
            return replace(self, left=choice)
        if side == "right":
            return replace(self, right=choice)
        raise ValueError(f"Unknown choice side: {side!r}")


@dataclass(frozen=True, slots=True)
class DeckDef:
    """Ordered cards plus optional display metadata.

    Cards are addressed only by position. Any structural edit produces a new
    DeckDef; instances are never mutated in place.
    """

    cards: tuple[CardDef, ...]
    name: str = ""
    description: str = ""

    def __len__(self) -> int:
        return len(self.cards)

    def with_cards(self, cards: Sequence[CardDef]) -> "DeckDef":
        return replace(self, cards=tuple(cards))

    def with_card(self, index: int, card: CardDef) -> "DeckDef":
        cards = list(self.cards)
        cards[index] = card
        return replace(self, cards=tuple(cards))


def card_at(deck: DeckDef, index: int) -> CardDef | None:
    """Return the card at ``index`` or None when the index is outside the deck."""
    if isinstance(index, bool) or not isinstance(index, int):
        return None
    if 0 <= index < len(deck.cards):
        return deck.cards[index]
    return None
