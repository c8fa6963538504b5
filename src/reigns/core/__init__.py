"""Core helpers shared by every layer."""

from .rng import RNG
from .types import SIDES, STAT_KEYS, DeckSource, Side, StatKey, VoidReason

__all__ = ["RNG", "SIDES", "STAT_KEYS", "DeckSource", "Side", "StatKey", "VoidReason"]
