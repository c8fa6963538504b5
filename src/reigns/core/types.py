"""Shared type aliases for the core and domain layers."""
from typing import Literal

StatKey = Literal["Power", "Wealth", "People", "Knowledge"]
Side = Literal["left", "right"]
VoidReason = Literal["void"]
DeckSource = Literal["local", "url", "generator"]

STAT_KEYS: tuple[StatKey, ...] = ("Power", "Wealth", "People", "Knowledge")
SIDES: tuple[Side, ...] = ("left", "right")

__all__ = ["DeckSource", "SIDES", "STAT_KEYS", "Side", "StatKey", "VoidReason"]
