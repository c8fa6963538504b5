"""Deck generator backed by the OpenAI chat completions API."""
from __future__ import annotations

import json
import logging
import os
from typing import Any

from openai import OpenAI, OpenAIError

from reigns.data.deck_codec import load_deck_text
from reigns.data.errors import DataError
from reigns.domain.defs import DeckDef, ThemeDef
from reigns.domain.state import Stats
from reigns.services.errors import DeckGenerationError
from reigns.services.generator.prompts import (
    DECK_RESPONSE_SCHEMA,
    build_branching_prompt,
    build_initial_prompt,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
INITIAL_TEMPERATURE = 1.0
BRANCHING_TEMPERATURE = 0.9


class OpenAIDeckGenerator:
    """Requests a JSON deck from a chat model and parses it with the deck codec.

    Calls are made once; a failure is reported to the caller and never retried
    here.
    """

    def __init__(self, client: Any | None = None, *, model: str | None = None) -> None:
        self._client = client
        self._model = model or os.environ.get("REIGNS_OPENAI_MODEL", DEFAULT_MODEL)

    @property
    def model(self) -> str:
        return self._model

    def generate_initial(self, theme: ThemeDef, stats: Stats) -> DeckDef:
        prompt = build_initial_prompt(theme, stats)
        return self._generate(theme, prompt, temperature=INITIAL_TEMPERATURE)

    def generate_from_prompt(self, theme: ThemeDef, story_prompt: str) -> DeckDef:
        if not story_prompt.strip():
            raise DeckGenerationError("A story prompt is required to generate a deck.")
        prompt = build_branching_prompt(theme, story_prompt)
        return self._generate(theme, prompt, temperature=BRANCHING_TEMPERATURE)

    def _generate(self, theme: ThemeDef, prompt: str, *, temperature: float) -> DeckDef:
        messages = [
            {"role": "system", "content": theme.system_instruction},
            {
                "role": "user",
                "content": (
                    f"{prompt}\n\nRespond only with a JSON object matching this schema:\n"
                    f"{json.dumps(DECK_RESPONSE_SCHEMA)}"
                ),
            },
        ]
        try:
            response = self._get_client().chat.completions.create(
                model=self._model,
                messages=messages,
                response_format={"type": "json_object"},
                temperature=temperature,
            )
        except OpenAIError as exc:
            logger.error("Deck generation request failed for theme %s: %s", theme.id, exc)
            raise DeckGenerationError(
                "The AI Story Director failed to generate a deck. "
                "Please check the connection or try a different prompt."
            ) from exc

        content = _first_message_content(response)
        if not content:
            raise DeckGenerationError("The generator returned an empty response.")
        try:
            deck = load_deck_text(content)
        except DataError as exc:
            logger.error("Generator returned a malformed deck for theme %s: %s", theme.id, exc)
            raise DeckGenerationError(f"The generator returned a malformed deck: {exc}") from exc
        if not deck.cards:
            raise DeckGenerationError("The generator returned a deck without cards.")
        logger.info("Generated deck %r with %d cards for theme %s.", deck.name, len(deck.cards), theme.id)
        return deck

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = OpenAI()
        return self._client


def _first_message_content(response: Any) -> str | None:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None)
