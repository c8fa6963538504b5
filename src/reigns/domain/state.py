"""Domain-level state tracking."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from reigns.core.types import STAT_KEYS, StatKey

MIN_STAT_VALUE = 0
MAX_STAT_VALUE = 100
INITIAL_STAT_VALUE = 50


def clamp_stat(value: int) -> int:
    return max(MIN_STAT_VALUE, min(MAX_STAT_VALUE, value))


@dataclass(frozen=True, slots=True)
class Stats:
    """Current values of the four canonical stats."""

    power: int = INITIAL_STAT_VALUE
    wealth: int = INITIAL_STAT_VALUE
    people: int = INITIAL_STAT_VALUE
    knowledge: int = INITIAL_STAT_VALUE

    def get(self, key: StatKey) -> int:
        if key == "Power":
            return self.power
        if key == "Wealth":
            return self.wealth
        if key == "People":
            return self.people
        if key == "Knowledge":
            return self.knowledge
        raise KeyError(key)

    def as_dict(self) -> dict[StatKey, int]:
        return {key: self.get(key) for key in STAT_KEYS}

    @classmethod
    def baseline(cls, value: int = INITIAL_STAT_VALUE) -> "Stats":
        value = clamp_stat(value)
        return cls(power=value, wealth=value, people=value, knowledge=value)

    @classmethod
    def from_mapping(cls, values: Mapping[StatKey, int]) -> "Stats":
        """Build stats from a full mapping; every canonical key is required."""
        missing = [key for key in STAT_KEYS if key not in values]
        if missing:
            raise KeyError(f"Missing stat values: {missing}")
        return cls(
            power=values["Power"],
            wealth=values["Wealth"],
            people=values["People"],
            knowledge=values["Knowledge"],
        )


@dataclass(frozen=True, slots=True)
class TraversalState:
    """Position in the deck plus current stats for one playthrough."""

    index: int
    stats: Stats
