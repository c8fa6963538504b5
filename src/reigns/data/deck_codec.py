"""Conversion between the deck interchange JSON format and typed definitions.

The interchange format is the one shared by file import/export, the remote
catalog and the deck generator::

    {"name": str?, "description": str?, "cards": [
        {"prompt": str, "imageUrl": str?,
         "leftChoice": Choice, "rightChoice": Choice}]}

    Choice = {"text": str, "effects": {"Power": int?, ...},
              "nextCardIndex": int?, "soundUrl": str?}

A bare array of cards (the legacy export format) is accepted as well and
normalized to the wrapped form with an empty name and description.

Parsing is all-or-nothing: any structural problem raises DataValidationError
and no partial deck is produced. Effect values that are not integers are
coerced to 0 here so the engine never sees them.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from reigns.core.types import SIDES, STAT_KEYS, Side, StatKey
from reigns.data.errors import DataValidationError
from reigns.data.json_loader import dump_json, load_json, parse_json_text
from reigns.domain.defs import CardDef, ChoiceDef, DeckDef, EffectMap, SoundConfigDef, ThemeDef

DeckPayload = Dict[str, Any]

_CHOICE_FIELDS: dict[Side, str] = {"left": "leftChoice", "right": "rightChoice"}
_SOUND_FIELDS = (
    ("backgroundMusicUrl", "background_music_url"),
    ("swipeLeftUrl", "swipe_left_url"),
    ("swipeRightUrl", "swipe_right_url"),
    ("gameStartUrl", "game_start_url"),
    ("gameWinUrl", "game_win_url"),
    ("gameLoseUrl", "game_lose_url"),
)


def parse_deck(raw: object) -> DeckDef:
    """Build a DeckDef from a decoded interchange payload."""
    if isinstance(raw, list):
        return DeckDef(cards=_parse_cards(raw, "deck"), name="", description="")
    if not isinstance(raw, dict):
        raise DataValidationError("Deck must be an object with 'cards' or a list of cards.")
    if "cards" not in raw:
        raise DataValidationError("Deck object is missing 'cards'.")
    cards_raw = raw["cards"]
    if not isinstance(cards_raw, list):
        raise DataValidationError("deck.cards must be a list.")
    return DeckDef(
        cards=_parse_cards(cards_raw, "deck.cards"),
        name=_coerce_text(raw.get("name")),
        description=_coerce_text(raw.get("description")),
    )


def load_deck_text(text: str) -> DeckDef:
    """Parse interchange JSON text into a DeckDef."""
    return parse_deck(parse_json_text(text, source="deck data"))


def load_deck_file(path: Path | str) -> DeckDef:
    return parse_deck(load_json(Path(path)))


def deck_to_payload(deck: DeckDef) -> DeckPayload:
    """Return the wrapped interchange form of ``deck``."""
    return {
        "name": deck.name,
        "description": deck.description,
        "cards": [_card_to_payload(card) for card in deck.cards],
    }


def dump_deck(deck: DeckDef) -> str:
    return dump_json(deck_to_payload(deck))


def write_deck_file(deck: DeckDef, path: Path | str) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dump_deck(deck), encoding="utf-8")


def parse_theme(raw: object) -> ThemeDef:
    """Build a ThemeDef from a decoded theme payload."""
    data = _require_mapping(raw, "theme")
    theme_id = _require_str(data.get("id"), "theme.id")
    context = f"theme '{theme_id}'"
    stat_names_raw = data.get("statNames", {})
    stat_names_map = _require_mapping(stat_names_raw, f"{context} statNames")
    stat_names: dict[StatKey, str] = {}
    for key in STAT_KEYS:
        if key in stat_names_map:
            stat_names[key] = _require_str(stat_names_map[key], f"{context} statNames.{key}")
    image_set_raw = data.get("imageSet") or []
    if not isinstance(image_set_raw, list):
        raise DataValidationError(f"{context} imageSet must be a list if provided.")
    image_set = tuple(url for url in image_set_raw if isinstance(url, str) and url)
    deck_raw = data.get("deck")
    deck = parse_deck(deck_raw) if deck_raw is not None else None
    return ThemeDef(
        id=theme_id,
        name=_require_str(data.get("name"), f"{context} name"),
        description=_require_str(data.get("description"), f"{context} description"),
        system_instruction=_coerce_text(data.get("systemInstruction")),
        stat_names=stat_names,
        image_set=image_set,
        deck_url=_optional_url(data.get("deckUrl")),
        deck=deck,
        sound_config=_parse_sound_config(data.get("soundConfig"), context),
    )


def parse_themes(raw: object) -> list[ThemeDef]:
    """Build themes from a bulk export: a non-empty list of theme objects with unique ids."""
    if not isinstance(raw, list) or not raw:
        raise DataValidationError("Themes file must be a non-empty list of themes.")
    themes = [parse_theme(entry) for entry in raw]
    seen: set[str] = set()
    for theme in themes:
        if theme.id in seen:
            raise DataValidationError(f"Duplicate theme id '{theme.id}'.")
        seen.add(theme.id)
    return themes


def load_themes_text(text: str) -> list[ThemeDef]:
    return parse_themes(parse_json_text(text, source="themes data"))


def load_themes_file(path: Path | str) -> list[ThemeDef]:
    return parse_themes(load_json(Path(path)))


def dump_themes(themes: Sequence[ThemeDef]) -> str:
    return dump_json([theme_to_payload(theme) for theme in themes])


def write_themes_file(themes: Sequence[ThemeDef], path: Path | str) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dump_themes(themes), encoding="utf-8")


def theme_to_payload(theme: ThemeDef) -> DeckPayload:
    payload: DeckPayload = {
        "id": theme.id,
        "name": theme.name,
        "description": theme.description,
        "systemInstruction": theme.system_instruction,
        "statNames": {key: theme.stat_names[key] for key in STAT_KEYS if key in theme.stat_names},
        "imageSet": list(theme.image_set),
    }
    if theme.deck_url:
        payload["deckUrl"] = theme.deck_url
    if theme.deck is not None:
        payload["deck"] = deck_to_payload(theme.deck)
    if theme.sound_config is not None:
        sound_payload = {}
        for json_key, attr in _SOUND_FIELDS:
            value = getattr(theme.sound_config, attr)
            if value:
                sound_payload[json_key] = value
        payload["soundConfig"] = sound_payload
    return payload


def coerce_delta(value: object) -> int:
    """Coerce a raw effect value to an integer delta; anything else becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _parse_cards(raw_cards: List[object], context: str) -> tuple[CardDef, ...]:
    return tuple(
        _parse_card(entry, f"{context}[{index}]") for index, entry in enumerate(raw_cards)
    )


def _parse_card(raw: object, context: str) -> CardDef:
    data = _require_mapping(raw, context)
    prompt = _require_str(data.get("prompt"), f"{context} prompt")
    left = _parse_choice(data.get(_CHOICE_FIELDS["left"]), f"{context} leftChoice")
    right = _parse_choice(data.get(_CHOICE_FIELDS["right"]), f"{context} rightChoice")
    return CardDef(prompt=prompt, left=left, right=right, image_url=_optional_url(data.get("imageUrl")))


def _parse_choice(raw: object, context: str) -> ChoiceDef:
    data = _require_mapping(raw, context)
    text = _require_str(data.get("text"), f"{context} text")
    effects = _parse_effects(data.get("effects"), f"{context} effects")
    return ChoiceDef(
        text=text,
        effects=effects,
        next_card_index=_coerce_next_index(data.get("nextCardIndex")),
        sound_url=_optional_url(data.get("soundUrl")),
    )


def _parse_effects(raw: object, context: str) -> EffectMap:
    if raw is None:
        return EffectMap()
    data = _require_mapping(raw, context)
    effects = EffectMap()
    for key in STAT_KEYS:
        if key in data:
            effects = effects.with_delta(key, coerce_delta(data[key]))
    return effects


def _coerce_next_index(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _parse_sound_config(raw: object, context: str) -> SoundConfigDef | None:
    if raw is None:
        return None
    data = _require_mapping(raw, f"{context} soundConfig")
    values = {attr: _optional_url(data.get(json_key)) for json_key, attr in _SOUND_FIELDS}
    return SoundConfigDef(**values)


def _card_to_payload(card: CardDef) -> DeckPayload:
    payload: DeckPayload = {"prompt": card.prompt}
    if card.image_url:
        payload["imageUrl"] = card.image_url
    for side in SIDES:
        payload[_CHOICE_FIELDS[side]] = _choice_to_payload(card.choice(side))
    return payload


def _choice_to_payload(choice: ChoiceDef) -> DeckPayload:
    payload: DeckPayload = {
        "text": choice.text,
        "effects": {key: choice.effects.delta(key) for key in choice.effects.explicit_keys()},
    }
    if choice.next_card_index is not None:
        payload["nextCardIndex"] = choice.next_card_index
    if choice.sound_url:
        payload["soundUrl"] = choice.sound_url
    return payload


def _require_mapping(value: object, context: str) -> Mapping[str, object]:
    if not isinstance(value, dict):
        raise DataValidationError(f"{context} must be an object/dict.")
    return value


def _require_str(value: object, context: str) -> str:
    if not isinstance(value, str):
        raise DataValidationError(f"{context} must be a string.")
    return value


def _coerce_text(value: object) -> str:
    return value if isinstance(value, str) else ""


def _optional_url(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None
