"""Bidirectional conversion between a deck's jump fields and a node/edge graph.

The graph is a derived, editor-facing view. It is never the source of truth:
every function here takes a DeckDef and returns either a projection or a new
DeckDef, and none of them keeps state between calls.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from reigns.core.types import SIDES, Side
from reigns.domain.defs import CardDef, DeckDef, card_at
from reigns.services.errors import EnginePreconditionError

GRID_COLUMNS = 4
GRID_X_SPACING = 350
GRID_Y_SPACING = 200


@dataclass(frozen=True, slots=True)
class GraphNode:
    """Read-only summary of one card for graph display."""

    id: str
    index: int
    prompt: str
    left_text: str
    right_text: str
    x: int
    y: int

    @property
    def is_start(self) -> bool:
        return self.index == 0


@dataclass(frozen=True, slots=True)
class GraphEdge:
    """Explicit jump from one card's choice to another card."""

    id: str
    source: int
    target: int
    side: Side


@dataclass(frozen=True, slots=True)
class DeckGraph:
    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]

    def edge_for(self, source: int, side: Side) -> GraphEdge | None:
        for edge in self.edges:
            if edge.source == source and edge.side == side:
                return edge
        return None

    def without_edge(self, edge_id: str) -> "DeckGraph":
        return DeckGraph(nodes=self.nodes, edges=tuple(e for e in self.edges if e.id != edge_id))

    def with_edge(self, source: int, side: Side, target: int) -> "DeckGraph":
        """Return a graph where ``source``/``side`` points at ``target``."""
        kept = tuple(e for e in self.edges if not (e.source == source and e.side == side))
        return DeckGraph(nodes=self.nodes, edges=kept + (_make_edge(source, side, target),))


@dataclass(frozen=True, slots=True)
class HiddenTarget:
    """Explicit next-target that the graph cannot show."""

    index: int
    side: Side
    target: int


def project_to_graph(deck: DeckDef) -> DeckGraph:
    """Project a deck to nodes and edges.

    Only explicit targets within ``0 <= target < len(deck)`` become edges.
    Anything else is left out of the projection without error.
    """
    card_count = len(deck.cards)
    nodes: List[GraphNode] = []
    edges: List[GraphEdge] = []
    for index, card in enumerate(deck.cards):
        nodes.append(_make_node(index, card))
        for side in SIDES:
            target = card.choice(side).next_card_index
            if target is not None and 0 <= target < card_count:
                edges.append(_make_edge(index, side, target))
    return DeckGraph(nodes=tuple(nodes), edges=tuple(edges))


def connect(deck: DeckDef, source_index: int, side: Side, target_index: int) -> DeckDef:
    """Return a new deck whose ``source_index``/``side`` choice jumps to ``target_index``.

    The target is not bounds-checked; out-of-range values are valid deck data.
    """
    card = _require_card(deck, source_index, side)
    choice = card.choice(side).with_next_card_index(target_index)
    return deck.with_card(source_index, card.with_choice(side, choice))


def disconnect(deck: DeckDef, source_index: int, side: Side) -> DeckDef:
    """Return a new deck with the named choice's explicit target cleared."""
    card = _require_card(deck, source_index, side)
    choice = card.choice(side).with_next_card_index(None)
    return deck.with_card(source_index, card.with_choice(side, choice))


def apply_graph(deck: DeckDef, graph: DeckGraph) -> DeckDef:
    """Re-derive a deck from an edited graph.

    For every card and side: an edge sets the target; no edge clears a target
    that the projection would have shown; targets outside the deck were never
    projected and are left untouched.
    """
    card_count = len(deck.cards)
    edges_by_slot: Dict[tuple[int, Side], GraphEdge] = {}
    for edge in graph.edges:
        if card_at(deck, edge.source) is None:
            raise EnginePreconditionError(
                f"Edge {edge.id} starts at card {edge.source}, outside a deck of {card_count} cards."
            )
        edges_by_slot[(edge.source, edge.side)] = edge

    updated = deck
    for index, card in enumerate(deck.cards):
        for side in SIDES:
            current = card.choice(side).next_card_index
            edge = edges_by_slot.get((index, side))
            if edge is not None:
                if current != edge.target:
                    updated = connect(updated, index, side, edge.target)
            elif current is not None and 0 <= current < card_count:
                updated = disconnect(updated, index, side)
    return updated


def hidden_targets(deck: DeckDef) -> list[HiddenTarget]:
    """List explicit targets that exist in the deck but not in its projection."""
    card_count = len(deck.cards)
    hidden: list[HiddenTarget] = []
    for index, card in enumerate(deck.cards):
        for side in SIDES:
            target = card.choice(side).next_card_index
            if target is not None and not 0 <= target < card_count:
                hidden.append(HiddenTarget(index=index, side=side, target=target))
    return hidden


def _require_card(deck: DeckDef, index: int, side: Side) -> CardDef:
    card = card_at(deck, index)
    if card is None:
        raise EnginePreconditionError(
            f"Card index {index} is outside a deck of {len(deck.cards)} cards."
        )
    if side not in SIDES:
        raise EnginePreconditionError(f"Unknown choice side: {side!r}")
    return card


def _make_node(index: int, card: CardDef) -> GraphNode:
    return GraphNode(
        id=str(index),
        index=index,
        prompt=card.prompt,
        left_text=card.left.text,
        right_text=card.right.text,
        x=(index % GRID_COLUMNS) * GRID_X_SPACING,
        y=(index // GRID_COLUMNS) * GRID_Y_SPACING,
    )


def _make_edge(source: int, side: Side, target: int) -> GraphEdge:
    return GraphEdge(id=f"e-{source}-{target}-{side}", source=source, target=target, side=side)
