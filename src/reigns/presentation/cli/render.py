"""Shared CLI rendering helpers."""
from __future__ import annotations

import textwrap
from typing import Iterable

from reigns.core.types import STAT_KEYS
from reigns.domain.defs import CardDef, ThemeDef
from reigns.domain.state import MAX_STAT_VALUE, Stats
from reigns.presentation.cli.config import debug_enabled
from reigns.services.graph_sync import DeckGraph

_BAR_WIDTH = 20


def wrap_text(text: str, width: int = 72) -> list[str]:
    """Wrap text on word boundaries; always returns at least one line."""
    if not text or width <= 0:
        return [text] if text else [""]
    return textwrap.wrap(text, width=width, break_long_words=False, break_on_hyphens=False) or [""]


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def format_stat_bar(value: int, width: int = _BAR_WIDTH) -> str:
    filled = round(width * value / MAX_STAT_VALUE)
    return "#" * filled + "." * (width - filled)


def stat_lines(stats: Stats, theme: ThemeDef | None = None) -> list[str]:
    lines = []
    for key in STAT_KEYS:
        label = theme.stat_name(key) if theme is not None else key
        value = stats.get(key)
        lines.append(f"{label:<22} [{format_stat_bar(value)}] {value:>3}")
    return lines


def render_stats(stats: Stats, theme: ThemeDef | None = None) -> None:
    for line in stat_lines(stats, theme):
        print(line)


def render_card(card: CardDef, index: int, card_count: int) -> None:
    """Print a card prompt and its two choices."""
    render_heading(f"Node {index + 1} / {card_count}")
    if debug_enabled():
        print(f"[card {index}]")
    for line in wrap_text(card.prompt):
        print(line)
    print()
    print(f"  L. {card.left.text}")
    print(f"  R. {card.right.text}")


def graph_lines(graph: DeckGraph) -> list[str]:
    """Text rendering of a graph projection: one line per node, edges indented."""
    lines: list[str] = []
    for node in graph.nodes:
        marker = "*" if node.is_start else " "
        lines.append(f"{marker} #{node.index} {node.prompt[:60]}")
        for side in ("left", "right"):
            edge = graph.edge_for(node.index, side)
            if edge is not None:
                lines.append(f"    {side:<5} -> #{edge.target}")
    return lines


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")
