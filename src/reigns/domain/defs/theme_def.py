"""Theme definitions describing one playable setting."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Mapping

from reigns.core.types import StatKey
from reigns.domain.defs.deck_def import DeckDef


@dataclass(frozen=True, slots=True)
class SoundConfigDef:
    """Opaque audio references used by the presentation layer."""

    background_music_url: str | None = None
    swipe_left_url: str | None = None
    swipe_right_url: str | None = None
    game_start_url: str | None = None
    game_win_url: str | None = None
    game_lose_url: str | None = None


@dataclass(frozen=True, slots=True)
class ThemeDef:
    """Display names, authoring instruction and deck sources for a setting."""

    id: str
    name: str
    description: str
    system_instruction: str
    stat_names: Mapping[StatKey, str] = field(default_factory=dict)
    image_set: tuple[str, ...] = ()
    deck_url: str | None = None
    deck: DeckDef | None = None
    sound_config: SoundConfigDef | None = None

    def stat_name(self, key: StatKey) -> str:
        return self.stat_names.get(key, key)

    def with_deck(self, deck: DeckDef | None) -> "ThemeDef":
        return replace(self, deck=deck)
