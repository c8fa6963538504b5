"""Traversal engine: the single state-transition function of a playthrough."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from reigns.core.types import STAT_KEYS, Side, StatKey, VoidReason
from reigns.domain.defs import CardDef, DeckDef, ThemeDef, card_at
from reigns.domain.state import (
    INITIAL_STAT_VALUE,
    MAX_STAT_VALUE,
    MIN_STAT_VALUE,
    Stats,
    TraversalState,
    clamp_stat,
)
from reigns.services.errors import EnginePreconditionError, PlaythroughOverError

logger = logging.getLogger(__name__)

VOID_REASON: VoidReason = "void"


class Verdict(Enum):
    """Outcome of one traversal step."""

    ACTIVE = "ACTIVE"
    WIN = "WIN"
    LOSS = "LOSS"


@dataclass(frozen=True, slots=True)
class ChoiceOutcome:
    """Result returned after applying a choice.

    ``index`` is the new current card when the verdict is ACTIVE and the card
    the choice was made on otherwise. ``target_index`` is the resolved jump
    target, or None when a stat boundary ended the game first.
    """

    verdict: Verdict
    stats: Stats
    index: int
    reason: StatKey | VoidReason | None = None
    target_index: int | None = None

    @property
    def is_terminal(self) -> bool:
        return self.verdict is not Verdict.ACTIVE

    @property
    def state(self) -> TraversalState:
        return TraversalState(index=self.index, stats=self.stats)


def start_playthrough(baseline: int = INITIAL_STAT_VALUE) -> TraversalState:
    """Return the state at the start of a playthrough: first card, baseline stats."""
    return TraversalState(index=0, stats=Stats.baseline(baseline))


def apply_choice(deck: DeckDef, state: TraversalState, side: Side) -> ChoiceOutcome:
    """Apply the choice on ``side`` of the current card and compute the verdict.

    Pure and deterministic: neither ``deck`` nor ``state`` is modified. Stats are
    updated together, then checked against the boundaries in canonical order,
    and only then is the next card resolved.
    """
    card = card_at(deck, state.index)
    if card is None:
        raise EnginePreconditionError(
            f"Card index {state.index} is outside a deck of {len(deck.cards)} cards."
        )
    if side not in ("left", "right"):
        raise EnginePreconditionError(f"Unknown choice side: {side!r}")
    choice = card.choice(side)

    new_stats = Stats.from_mapping(
        {key: clamp_stat(state.stats.get(key) + choice.effects.delta(key)) for key in STAT_KEYS}
    )

    boundary_key = _first_boundary_stat(new_stats)
    if boundary_key is not None:
        return ChoiceOutcome(
            verdict=Verdict.LOSS, stats=new_stats, index=state.index, reason=boundary_key
        )

    if choice.next_card_index is not None:
        next_index = choice.next_card_index
    else:
        next_index = state.index + 1

    if next_index >= len(deck.cards):
        return ChoiceOutcome(
            verdict=Verdict.WIN, stats=new_stats, index=state.index, target_index=next_index
        )
    if next_index < 0:
        return ChoiceOutcome(
            verdict=Verdict.LOSS,
            stats=new_stats,
            index=state.index,
            reason=VOID_REASON,
            target_index=next_index,
        )
    return ChoiceOutcome(
        verdict=Verdict.ACTIVE, stats=new_stats, index=next_index, target_index=next_index
    )


def _first_boundary_stat(stats: Stats) -> StatKey | None:
    for key in STAT_KEYS:
        if stats.get(key) in (MIN_STAT_VALUE, MAX_STAT_VALUE):
            return key
    return None


def describe_outcome(outcome: ChoiceOutcome, theme: ThemeDef | None = None) -> str:
    """Return the game-over message shown for a terminal outcome."""
    setting = theme.name if theme is not None else "this reality"
    if outcome.verdict is Verdict.WIN:
        return (
            f"You have successfully navigated the challenges of {setting} "
            "and reached the final node. Your story ends here."
        )
    if outcome.verdict is Verdict.ACTIVE:
        return ""
    if outcome.reason == VOID_REASON or outcome.reason is None:
        return "You chose a path that leads to nowhere and were lost to the void."
    stat_name = theme.stat_name(outcome.reason) if theme is not None else outcome.reason
    if outcome.stats.get(outcome.reason) <= MIN_STAT_VALUE:
        return f"Your {stat_name.lower()} has vanished."
    return f"You've been overwhelmed by your {stat_name.lower()}."


@dataclass
class Playthrough:
    """Single-writer session wrapper around the traversal engine.

    Holds the deck and the current state, records every outcome and refuses
    further choices once a WIN or LOSS has been reached. Cycles in the deck are
    not detected; a deck can be played indefinitely.
    """

    deck: DeckDef
    state: TraversalState = field(default_factory=start_playthrough)
    history: List[ChoiceOutcome] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.deck.cards:
            raise EnginePreconditionError("Cannot start a playthrough with an empty deck.")

    @property
    def last_outcome(self) -> ChoiceOutcome | None:
        return self.history[-1] if self.history else None

    @property
    def verdict(self) -> Verdict:
        last = self.last_outcome
        return last.verdict if last is not None else Verdict.ACTIVE

    @property
    def is_over(self) -> bool:
        return self.verdict is not Verdict.ACTIVE

    @property
    def steps(self) -> int:
        return len(self.history)

    def current_card(self) -> CardDef | None:
        return card_at(self.deck, self.state.index)

    def choose(self, side: Side) -> ChoiceOutcome:
        """Apply a choice to the current card and advance the session."""
        if self.is_over:
            raise PlaythroughOverError(f"Playthrough already ended with {self.verdict.value}.")
        outcome = apply_choice(self.deck, self.state, side)
        logger.debug(
            "card %d %s -> %s index=%d stats=%s",
            self.state.index,
            side,
            outcome.verdict.value,
            outcome.index,
            outcome.stats.as_dict(),
        )
        self.history.append(outcome)
        self.state = outcome.state
        if outcome.is_terminal:
            logger.info(
                "Playthrough ended with %s (reason=%s) after %d steps.",
                outcome.verdict.value,
                outcome.reason,
                self.steps,
            )
        return outcome
