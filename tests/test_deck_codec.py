import json
from pathlib import Path

import pytest

from reigns.data.deck_codec import (
    coerce_delta,
    deck_to_payload,
    dump_deck,
    dump_themes,
    load_deck_file,
    load_deck_text,
    load_themes_file,
    load_themes_text,
    parse_deck,
    parse_theme,
    theme_to_payload,
    write_deck_file,
    write_themes_file,
)
from reigns.data.errors import DataLoadError, DataValidationError
from reigns.domain.defs import EffectMap


def _card_payload(prompt: str = "The vault is open.", **left_extra: object) -> dict:
    left = {"text": "Take it", "effects": {"Wealth": 20, "People": -10}}
    left.update(left_extra)
    return {
        "prompt": prompt,
        "imageUrl": "https://img.example/vault.png",
        "leftChoice": left,
        "rightChoice": {"text": "Leave it", "effects": {}},
    }


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_parse_wrapped_deck() -> None:
    deck = parse_deck(
        {"name": "Vaults", "description": "Greed.", "cards": [_card_payload(nextCardIndex=0)]}
    )

    assert deck.name == "Vaults"
    assert deck.description == "Greed."
    card = deck.cards[0]
    assert card.image_url == "https://img.example/vault.png"
    assert card.left.effects == EffectMap(wealth=20, people=-10)
    assert card.left.next_card_index == 0
    assert card.right.effects == EffectMap()
    assert card.right.next_card_index is None


def test_parse_legacy_array_normalizes_metadata() -> None:
    deck = parse_deck([_card_payload(), _card_payload("Second")])

    assert deck.name == ""
    assert deck.description == ""
    assert [card.prompt for card in deck.cards] == ["The vault is open.", "Second"]


def test_non_integer_effects_are_coerced_to_zero() -> None:
    deck = parse_deck([_card_payload(effects={"Power": "lots", "Wealth": 2.0, "People": None, "Knowledge": True})])
    effects = deck.cards[0].left.effects

    assert effects == EffectMap(power=0, wealth=2, people=0, knowledge=0)


def test_coerce_delta_values() -> None:
    assert coerce_delta(-35) == -35
    assert coerce_delta(12.0) == 12
    assert coerce_delta(1.5) == 0
    assert coerce_delta("5") == 0
    assert coerce_delta(False) == 0


def test_unknown_effect_keys_are_ignored() -> None:
    deck = parse_deck([_card_payload(effects={"Mana": 10, "Power": 5})])
    assert deck.cards[0].left.effects == EffectMap(power=5)


def test_non_integer_next_index_is_dropped() -> None:
    deck = parse_deck([_card_payload(nextCardIndex="2")])
    assert deck.cards[0].left.next_card_index is None


@pytest.mark.parametrize(
    "payload",
    [
        "not a deck",
        {"name": "no cards"},
        {"cards": {"prompt": "x"}},
        [{"prompt": "missing choices"}],
        [{"prompt": 3, "leftChoice": {"text": "a"}, "rightChoice": {"text": "b"}}],
        [{"prompt": "p", "leftChoice": {"text": "a"}, "rightChoice": {"effects": {}}}],
    ],
)
def test_invalid_payloads_raise(payload: object) -> None:
    with pytest.raises(DataValidationError):
        parse_deck(payload)


def test_load_deck_text_rejects_invalid_json() -> None:
    with pytest.raises(DataLoadError):
        load_deck_text("{not json")


def test_export_omits_absent_optionals() -> None:
    deck = parse_deck({"name": "Vaults", "cards": [_card_payload(nextCardIndex=-1)]})
    payload = deck_to_payload(deck)
    card = payload["cards"][0]

    assert payload["description"] == ""
    assert card["leftChoice"] == {
        "text": "Take it",
        "effects": {"Wealth": 20, "People": -10},
        "nextCardIndex": -1,
    }
    assert card["rightChoice"] == {"text": "Leave it", "effects": {}}


def test_export_then_import_is_stable() -> None:
    deck = parse_deck({"name": "Vaults", "cards": [_card_payload(nextCardIndex=3, soundUrl="s.mp3")]})
    assert load_deck_text(dump_deck(deck)) == deck


def test_write_and_load_deck_file(tmp_path: Path) -> None:
    deck = parse_deck([_card_payload()])
    target = tmp_path / "nested" / "deck.json"

    write_deck_file(deck, target)

    assert load_deck_file(target) == deck
    assert json.loads(target.read_text(encoding="utf-8"))["name"] == ""


def test_load_deck_file_missing(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        load_deck_file(tmp_path / "missing.json")


def test_parse_theme_with_embedded_deck() -> None:
    raw = {
        "id": "harbor",
        "name": "Harbor",
        "description": "Salt and trade.",
        "systemInstruction": "Write about ships.",
        "statNames": {"Power": "Fleet", "Wealth": "Cargo"},
        "imageSet": ["a.png", "", 7],
        "deckUrl": "",
        "deck": {"cards": [_card_payload()]},
        "soundConfig": {"gameWinUrl": "win.mp3"},
    }
    theme = parse_theme(raw)

    assert theme.stat_name("Power") == "Fleet"
    assert theme.stat_name("People") == "People"
    assert theme.image_set == ("a.png",)
    assert theme.deck_url is None
    assert theme.deck is not None and len(theme.deck) == 1
    assert theme.sound_config is not None
    assert theme.sound_config.game_win_url == "win.mp3"
    assert parse_theme(theme_to_payload(theme)) == theme


def test_parse_theme_requires_name() -> None:
    with pytest.raises(DataValidationError):
        parse_theme({"id": "x", "description": ""})


def test_load_legacy_deck_file(tmp_path: Path) -> None:
    path = tmp_path / "legacy.json"
    _write_json(path, [_card_payload()])

    deck = load_deck_file(path)

    assert deck.name == ""
    assert len(deck) == 1


def _theme_payload(theme_id: str, **extra: object) -> dict:
    payload = {"id": theme_id, "name": theme_id.title(), "description": "A place."}
    payload.update(extra)
    return payload


def test_themes_file_round_trip(tmp_path: Path) -> None:
    themes = load_themes_text(
        json.dumps([_theme_payload("harbor", deck={"cards": [_card_payload()]}), _theme_payload("mines")])
    )
    path = tmp_path / "out" / "realities.json"

    write_themes_file(themes, path)

    assert [theme.id for theme in themes] == ["harbor", "mines"]
    assert load_themes_file(path) == themes
    assert json.loads(dump_themes(themes))[1] == theme_to_payload(themes[1])


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"id": "harbor"},
        [_theme_payload("harbor"), {"id": "mines"}],
        [_theme_payload("harbor"), _theme_payload("harbor")],
    ],
)
def test_invalid_themes_payloads_raise(payload: object) -> None:
    with pytest.raises(DataValidationError):
        load_themes_text(json.dumps(payload))


def test_load_themes_text_rejects_invalid_json() -> None:
    with pytest.raises(DataLoadError):
        load_themes_text("[{")
