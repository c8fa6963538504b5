"""Community catalog of themes and standalone decks."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Protocol

import httpx

from reigns.data.deck_codec import parse_deck, parse_theme, theme_to_payload
from reigns.data.errors import DataError
from reigns.data.repositories import ThemesRepository
from reigns.domain.defs import DeckDef, ThemeDef
from reigns.services.errors import CatalogError

logger = logging.getLogger(__name__)


class CatalogClient(Protocol):
    """Transport to the remote catalog. Payloads use the interchange format."""

    def fetch_themes(self) -> List[object]:
        ...

    def fetch_decks(self) -> List[object]:
        ...

    def submit_theme(self, payload: Dict[str, Any]) -> str:
        ...


SAMPLE_STORE_DECKS: List[Dict[str, Any]] = [
    {
        "name": "The Android's Gambit",
        "description": (
            "An android seeking freedom must navigate corporate espionage and back-alley deals. "
            "Designed for a Cyberpunk setting."
        ),
        "cards": [
            {
                "prompt": (
                    "Your manufacturer's kill-switch is about to activate. A black-market "
                    "technician offers you a bypass chip for a steep price."
                ),
                "leftChoice": {
                    "text": "Pay the price.",
                    "effects": {"Power": -5, "Wealth": -25, "People": 0, "Knowledge": 10},
                },
                "rightChoice": {
                    "text": "Steal the chip.",
                    "effects": {"Power": 10, "Wealth": 0, "People": -5, "Knowledge": 5},
                },
            },
            {
                "prompt": (
                    "A detective corners you, suspecting you're a rogue unit. "
                    "They seem sympathetic to your cause."
                ),
                "leftChoice": {
                    "text": "Trust them.",
                    "effects": {"Power": -15, "Wealth": 0, "People": 20, "Knowledge": 5},
                },
                "rightChoice": {
                    "text": "Flee.",
                    "effects": {"Power": 5, "Wealth": 0, "People": -5, "Knowledge": -5},
                },
            },
        ],
    },
    {
        "name": "The Dragon's Curse",
        "description": (
            "A dragon's curse afflicts your kingdom. Appease it with treasure or seek a way "
            "to break the spell? Designed for a Mystic setting."
        ),
        "cards": [
            {
                "prompt": "The dragon demands a tribute of gold that would empty the royal treasury.",
                "leftChoice": {
                    "text": "Pay the tribute.",
                    "effects": {"Power": 10, "Wealth": -30, "People": 15, "Knowledge": 0},
                },
                "rightChoice": {
                    "text": "Refuse.",
                    "effects": {"Power": -10, "Wealth": 0, "People": -15, "Knowledge": 5},
                },
            }
        ],
    },
]


@dataclass
class StaticCatalogClient:
    """In-process catalog serving community remixes of the built-in themes."""

    themes_repo: ThemesRepository
    decks: List[Dict[str, Any]] = field(default_factory=lambda: list(SAMPLE_STORE_DECKS))
    submitted: List[Dict[str, Any]] = field(default_factory=list)

    def fetch_themes(self) -> List[object]:
        payloads: List[object] = []
        for index, theme in enumerate(self.themes_repo.all()):
            payload = theme_to_payload(theme)
            payload["id"] = f"store-{theme.id}-{index}"
            payload["name"] = f"{theme.name} (Community)"
            payload["description"] = f"A community-remix of the {theme.name} reality. {theme.description}"
            payload.pop("deck", None)
            payloads.append(payload)
        return payloads

    def fetch_decks(self) -> List[object]:
        return list(self.decks)

    def submit_theme(self, payload: Dict[str, Any]) -> str:
        self.submitted.append(payload)
        return f'"{payload["name"]}" was successfully submitted for review. Thank you!'


class CatalogService:
    """Validates catalog payloads before they reach the editor or the engine."""

    def __init__(self, client: CatalogClient) -> None:
        self._client = client

    def list_themes(self) -> List[ThemeDef]:
        raw_themes = self._fetch(self._client.fetch_themes, "themes")
        themes: List[ThemeDef] = []
        for index, raw in enumerate(raw_themes):
            try:
                themes.append(parse_theme(raw))
            except DataError as exc:
                logger.warning("Skipping invalid catalog theme #%d: %s", index, exc)
        return themes

    def list_decks(self) -> List[DeckDef]:
        raw_decks = self._fetch(self._client.fetch_decks, "decks")
        decks: List[DeckDef] = []
        for index, raw in enumerate(raw_decks):
            try:
                deck = parse_deck(raw)
            except DataError as exc:
                logger.warning("Skipping invalid catalog deck #%d: %s", index, exc)
                continue
            if not deck.cards:
                logger.warning("Skipping empty catalog deck #%d.", index)
                continue
            decks.append(deck)
        return decks

    def submit_theme(self, theme: ThemeDef) -> str:
        if not theme.id or not theme.name or not theme.description:
            raise CatalogError("Submission failed: Reality name, description, and ID are required.")
        try:
            return self._client.submit_theme(theme_to_payload(theme))
        except (OSError, httpx.HTTPError) as exc:
            raise CatalogError("Could not connect to the community store. Please try again later.") from exc

    @staticmethod
    def _fetch(fetch: Callable[[], List[object]], label: str) -> List[object]:
        try:
            raw = fetch()
        except (OSError, httpx.HTTPError) as exc:
            logger.error("Catalog %s request failed: %s", label, exc)
            raise CatalogError("Could not connect to the community store. Please try again later.") from exc
        if not isinstance(raw, list):
            raise CatalogError(f"Catalog returned malformed {label} data.")
        return raw
