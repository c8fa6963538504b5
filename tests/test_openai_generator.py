import json
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from reigns.domain.defs import ThemeDef
from reigns.domain.state import Stats
from reigns.services.errors import DeckGenerationError
from reigns.services.generator import (
    DECK_SIZE,
    OpenAIDeckGenerator,
    build_branching_prompt,
    build_initial_prompt,
)


class _TransportDown(OpenAIError):
    pass


class _FakeCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _make_client(completions: _FakeCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _make_theme() -> ThemeDef:
    return ThemeDef(
        id="harbor",
        name="Harbor",
        description="Salt and trade.",
        system_instruction="You narrate a port city.",
        stat_names={"Power": "Fleet", "Wealth": "Cargo", "People": "Dockers", "Knowledge": "Charts"},
    )


def _deck_json(count: int = 2) -> str:
    card = {
        "prompt": "A ship arrives.",
        "leftChoice": {"text": "Tax it", "effects": {"Wealth": 10, "People": -5}},
        "rightChoice": {"text": "Wave it in", "effects": {"People": 5}, "nextCardIndex": 0},
    }
    return json.dumps({"name": "Tides", "description": "", "cards": [card] * count})


def test_generate_initial_parses_deck_and_sends_json_mode_request() -> None:
    completions = _FakeCompletions(content=_deck_json(3))
    generator = OpenAIDeckGenerator(_make_client(completions), model="test-model")

    deck = generator.generate_initial(_make_theme(), Stats.baseline())

    assert deck.name == "Tides"
    assert len(deck) == 3
    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert call["response_format"] == {"type": "json_object"}
    assert call["messages"][0] == {"role": "system", "content": "You narrate a port city."}
    assert "Fleet" in call["messages"][1]["content"]


def test_generate_from_prompt_includes_story_prompt() -> None:
    completions = _FakeCompletions(content=_deck_json())
    generator = OpenAIDeckGenerator(_make_client(completions), model="test-model")

    generator.generate_from_prompt(_make_theme(), "A storm closes the harbor.")

    assert "A storm closes the harbor." in completions.calls[0]["messages"][1]["content"]


def test_generate_from_prompt_requires_text() -> None:
    generator = OpenAIDeckGenerator(_make_client(_FakeCompletions(content=_deck_json())))
    with pytest.raises(DeckGenerationError):
        generator.generate_from_prompt(_make_theme(), "   ")


def test_transport_error_becomes_generation_error() -> None:
    completions = _FakeCompletions(error=_TransportDown("connection reset"))
    generator = OpenAIDeckGenerator(_make_client(completions))

    with pytest.raises(DeckGenerationError) as excinfo:
        generator.generate_initial(_make_theme(), Stats.baseline())

    assert isinstance(excinfo.value.__cause__, _TransportDown)


@pytest.mark.parametrize("content", [None, "", "{not json", '{"cards": []}', '{"cards": [{"prompt": 1}]}'])
def test_unusable_content_becomes_generation_error(content: str | None) -> None:
    generator = OpenAIDeckGenerator(_make_client(_FakeCompletions(content=content)))
    with pytest.raises(DeckGenerationError):
        generator.generate_initial(_make_theme(), Stats.baseline())


def test_model_defaults_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("REIGNS_OPENAI_MODEL", "env-model")
    assert OpenAIDeckGenerator(client=object()).model == "env-model"


def test_prompts_mention_deck_size_and_stats() -> None:
    theme = _make_theme()
    initial = build_initial_prompt(theme, Stats(10, 20, 30, 40))
    branching = build_branching_prompt(theme, "The lighthouse goes dark.")

    assert str(DECK_SIZE) in initial
    assert "Charts" in initial
    assert "The lighthouse goes dark." in branching
