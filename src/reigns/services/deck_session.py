"""Deck acquisition for one play session.

A session resolves where its deck comes from (embedded in the theme, a remote
URL, or the generator), loads it, and starts a playthrough. Every load is
tagged with a monotonically increasing ticket; a result delivered for a ticket
that is no longer current (the player reset or started another load) is
discarded instead of replacing the newer state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from reigns.core.rng import RNG
from reigns.core.types import DeckSource
from reigns.data.deck_codec import parse_deck
from reigns.data.deck_fetcher import fetch_deck_payload
from reigns.data.errors import DataError
from reigns.domain.defs import DeckDef, ThemeDef
from reigns.domain.state import INITIAL_STAT_VALUE, Stats
from reigns.services.errors import DeckGenerationError, DeckLoadError
from reigns.services.generator import DeckGenerator
from reigns.services.traversal_service import Playthrough, start_playthrough

logger = logging.getLogger(__name__)

DeckFetcher = Callable[[str], object]


@dataclass(frozen=True, slots=True)
class LoadTicket:
    token: int
    source: DeckSource


class DeckSession:
    """Owns the deck and playthrough for one theme."""

    def __init__(
        self,
        theme: ThemeDef,
        *,
        generator: DeckGenerator | None = None,
        fetcher: DeckFetcher | None = None,
        seed: int = 0,
        baseline: int = INITIAL_STAT_VALUE,
    ) -> None:
        self._theme = theme
        self._generator = generator
        self._fetcher = fetcher or fetch_deck_payload
        self._rng = RNG(seed)
        self._baseline = baseline
        self._token = 0
        self._retry_used = False
        self.deck: DeckDef | None = None
        self.playthrough: Playthrough | None = None
        self.last_error: DeckLoadError | None = None

    @property
    def theme(self) -> ThemeDef:
        return self._theme

    def resolve_source(self) -> DeckSource:
        if self._theme.deck is not None and self._theme.deck.cards:
            return "local"
        if self._theme.deck_url:
            return "url"
        return "generator"

    def begin_load(self, source: DeckSource | None = None) -> LoadTicket:
        self._token += 1
        return LoadTicket(token=self._token, source=source or self.resolve_source())

    def is_current(self, ticket: LoadTicket) -> bool:
        return ticket.token == self._token

    def reset(self) -> None:
        """Abandon the session; any outstanding load result will be discarded."""
        self._token += 1
        self.deck = None
        self.playthrough = None
        self.last_error = None
        self._retry_used = False

    def acquire(self, ticket: LoadTicket) -> DeckDef:
        """Obtain a deck for ``ticket`` without applying it."""
        can_retry = ticket.source == "url"
        if ticket.source == "local":
            if self._theme.deck is None:
                raise DeckLoadError("This theme has no embedded deck.", can_retry_with_generator=can_retry)
            deck = self._theme.deck
        elif ticket.source == "url":
            if not self._theme.deck_url:
                raise DeckLoadError("This theme has no deck URL.", can_retry_with_generator=can_retry)
            try:
                deck = parse_deck(self._fetcher(self._theme.deck_url))
            except DataError as exc:
                raise DeckLoadError(str(exc), can_retry_with_generator=can_retry) from exc
        else:
            deck = self._generate()
        if not deck.cards:
            raise DeckLoadError(
                "The received deck data was empty or invalid.", can_retry_with_generator=can_retry
            )
        return deck

    def complete_load(self, ticket: LoadTicket, deck: DeckDef) -> bool:
        """Apply a loaded deck if ``ticket`` is still current; return whether it was applied."""
        if not self.is_current(ticket):
            logger.info(
                "Discarding stale %s deck (ticket %d, current %d).",
                ticket.source,
                ticket.token,
                self._token,
            )
            return False
        if not deck.cards:
            raise DeckLoadError("The received deck data was empty or invalid.")
        self.deck = self._prepare(deck)
        self.playthrough = Playthrough(deck=self.deck, state=start_playthrough(self._baseline))
        self.last_error = None
        logger.info("Loaded %s deck %r with %d cards.", ticket.source, self.deck.name, len(self.deck.cards))
        return True

    def load(self, source: DeckSource | None = None) -> Playthrough:
        """Run the whole load flow and return the started playthrough."""
        ticket = self.begin_load(source)
        try:
            deck = self.acquire(ticket)
        except DeckLoadError as exc:
            if self.is_current(ticket):
                self.last_error = exc
            logger.warning("Deck load from %s failed: %s", ticket.source, exc.message)
            raise
        if not self.complete_load(ticket, deck):
            raise DeckLoadError("The session was reset while the deck was loading.")
        assert self.playthrough is not None
        return self.playthrough

    def retry_with_generator(self) -> Playthrough:
        """Retry once with the generator after a failed remote load."""
        if self.last_error is None or not self.last_error.can_retry_with_generator:
            raise DeckLoadError("Retrying with the generator is not available.")
        if self._retry_used:
            raise DeckLoadError("The generator retry was already used.")
        self._retry_used = True
        return self.load("generator")

    def _generate(self) -> DeckDef:
        if self._generator is None:
            raise DeckLoadError("No deck generator is configured for this session.")
        try:
            return self._generator.generate_initial(self._theme, Stats.baseline(self._baseline))
        except DeckGenerationError as exc:
            raise DeckLoadError(
                "The connection to the AI failed. We cannot generate a new reality at this time.",
                can_retry_with_generator=False,
            ) from exc

    def _prepare(self, deck: DeckDef) -> DeckDef:
        """Give image-less cards a picture from the theme's image set."""
        image_set = self._theme.image_set
        if not image_set:
            return deck
        cards = []
        for card in deck.cards:
            if card.image_url:
                cards.append(card)
                continue
            cards.append(replace(card, image_url=self._rng.choice(image_set)))
        return deck.with_cards(cards)
