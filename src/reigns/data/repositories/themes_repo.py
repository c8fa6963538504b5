"""Repository for theme definitions."""
from __future__ import annotations

from typing import Mapping

from reigns.data.deck_codec import parse_theme
from reigns.data.errors import DataValidationError
from reigns.data.repositories.base import RepositoryBase
from reigns.domain.defs import ThemeDef

THEMES_FILENAME = "themes.json"


class ThemesRepository(RepositoryBase[ThemeDef]):
    """Loads built-in themes; the object key is the theme id."""

    def __init__(self, base_path=None) -> None:
        super().__init__(THEMES_FILENAME, base_path)

    def _parse_entry(self, def_id: str, payload: Mapping[str, object]) -> ThemeDef:
        if "id" in payload and payload["id"] != def_id:
            raise DataValidationError(
                f"theme '{def_id}' id field does not match its key ({payload['id']!r})."
            )
        return parse_theme({**payload, "id": def_id})
