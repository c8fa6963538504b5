"""Domain definition exports."""

from .deck_def import CardDef, ChoiceDef, DeckDef, EffectMap, card_at
from .theme_def import SoundConfigDef, ThemeDef

__all__ = [
    "CardDef",
    "ChoiceDef",
    "DeckDef",
    "EffectMap",
    "SoundConfigDef",
    "ThemeDef",
    "card_at",
]
