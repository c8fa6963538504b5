"""Domain layer: deck model and traversal state."""

from .defs import CardDef, ChoiceDef, DeckDef, EffectMap, SoundConfigDef, ThemeDef, card_at
from .state import (
    INITIAL_STAT_VALUE,
    MAX_STAT_VALUE,
    MIN_STAT_VALUE,
    Stats,
    TraversalState,
    clamp_stat,
)

__all__ = [
    "CardDef",
    "ChoiceDef",
    "DeckDef",
    "EffectMap",
    "INITIAL_STAT_VALUE",
    "MAX_STAT_VALUE",
    "MIN_STAT_VALUE",
    "SoundConfigDef",
    "Stats",
    "ThemeDef",
    "TraversalState",
    "card_at",
    "clamp_stat",
]
