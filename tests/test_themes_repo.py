import json
from pathlib import Path

import pytest

from reigns.data.errors import DataLoadError, DataValidationError
from reigns.data.repositories import ThemesRepository
from reigns.services.deck_graph_validator import validate_deck_graph


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def _theme_payload(**extra: object) -> dict:
    payload = {"name": "Harbor", "description": "Salt.", "statNames": {"Power": "Fleet"}}
    payload.update(extra)
    return payload


def test_bundled_themes_load() -> None:
    repo = ThemesRepository()
    ids = [theme.id for theme in repo.all()]

    assert ids == sorted(ids)
    assert {"cyberpunk", "mystical", "space", "steampunk"} <= set(ids)
    assert repo.get("cyberpunk").stat_name("Wealth") == "Street Cred"


def test_bundled_embedded_decks_are_playable() -> None:
    for theme in ThemesRepository().all():
        if theme.deck is None:
            continue
        issues = validate_deck_graph(theme.deck)
        assert not [issue for issue in issues if issue.severity == "ERROR"], theme.id


def test_theme_id_is_taken_from_key(tmp_path: Path) -> None:
    _write_json(tmp_path / "themes.json", {"harbor": _theme_payload()})
    theme = ThemesRepository(base_path=tmp_path).get("harbor")

    assert theme.id == "harbor"
    assert theme.stat_name("Power") == "Fleet"
    assert theme.deck is None


def test_mismatched_id_field_is_rejected(tmp_path: Path) -> None:
    _write_json(tmp_path / "themes.json", {"harbor": _theme_payload(id="port")})
    with pytest.raises(DataValidationError):
        ThemesRepository(base_path=tmp_path).all()


def test_unknown_theme_raises_key_error(tmp_path: Path) -> None:
    _write_json(tmp_path / "themes.json", {"harbor": _theme_payload()})
    with pytest.raises(KeyError):
        ThemesRepository(base_path=tmp_path).get("desert")


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        ThemesRepository(base_path=tmp_path).all()


def test_top_level_must_be_object(tmp_path: Path) -> None:
    _write_json(tmp_path / "themes.json", [_theme_payload()])
    with pytest.raises(DataValidationError):
        ThemesRepository(base_path=tmp_path).all()


def test_ids_contains_and_reload(tmp_path: Path) -> None:
    path = tmp_path / "themes.json"
    _write_json(path, {"harbor": _theme_payload()})
    repo = ThemesRepository(base_path=tmp_path)

    assert repo.ids() == ["harbor"]
    assert "harbor" in repo

    _write_json(path, {"harbor": _theme_payload(), "desert": _theme_payload(name="Desert")})
    assert repo.ids() == ["harbor"]
    repo.reload()
    assert repo.ids() == ["desert", "harbor"]


def test_entry_must_be_object(tmp_path: Path) -> None:
    _write_json(tmp_path / "themes.json", {"harbor": "not an object"})
    with pytest.raises(DataValidationError):
        ThemesRepository(base_path=tmp_path).get("harbor")
