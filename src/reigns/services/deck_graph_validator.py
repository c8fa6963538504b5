"""Static deck graph validation utilities.

The traversal engine never consults these checks. They exist so the editor
can surface structure the graph view hides (out-of-range targets) or that will
never terminate on its own (zero-effect loops).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

from reigns.core.types import SIDES, Side
from reigns.domain.defs import DeckDef
from reigns.services.graph_sync import hidden_targets


Severity = str


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


@dataclass(frozen=True, slots=True)
class Jump:
    source: int
    side: Side
    target: int
    zero_effect: bool


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def validate_deck_graph(deck: DeckDef) -> list[Issue]:
    issues: list[Issue] = []
    if not deck.cards:
        issues.append(
            Issue(
                severity="ERROR",
                code="EMPTY_DECK",
                message="Deck has no cards and cannot be played.",
                context={},
            )
        )
        return issues

    _validate_targets(deck, issues)
    jumps = _resolve_jumps(deck)
    _validate_reachability(len(deck.cards), jumps, issues)
    _validate_zero_effect_loops(jumps, issues)
    return issues


def _validate_targets(deck: DeckDef, issues: list[Issue]) -> None:
    for hidden in hidden_targets(deck):
        context = {
            "card": str(hidden.index),
            "field_path": f"{hidden.side}Choice.nextCardIndex",
            "target": str(hidden.target),
        }
        if hidden.target < 0:
            issues.append(
                Issue(
                    severity="WARN",
                    code="VOID_TARGET",
                    message="Negative target ends the game in the void and is not shown in the graph.",
                    context=context,
                )
            )
        else:
            issues.append(
                Issue(
                    severity="WARN",
                    code="HIDDEN_TARGET",
                    message="Target past the last card wins the game and is not shown in the graph.",
                    context=context,
                )
            )


def _resolve_jumps(deck: DeckDef) -> dict[int, list[Jump]]:
    """Return in-range jumps per card, explicit or implicit sequential."""
    card_count = len(deck.cards)
    jumps: dict[int, list[Jump]] = {}
    for index, card in enumerate(deck.cards):
        outgoing: list[Jump] = []
        for side in SIDES:
            choice = card.choice(side)
            target = choice.next_card_index if choice.next_card_index is not None else index + 1
            if 0 <= target < card_count:
                outgoing.append(
                    Jump(source=index, side=side, target=target, zero_effect=choice.effects.is_zero())
                )
        jumps[index] = outgoing
    return jumps


def _validate_reachability(
    card_count: int, jumps: Mapping[int, Sequence[Jump]], issues: list[Issue]
) -> None:
    reachable: set[int] = set()
    stack: list[int] = [0]
    while stack:
        index = stack.pop()
        if index in reachable:
            continue
        reachable.add(index)
        for jump in jumps.get(index, ()):
            stack.append(jump.target)
    for index in range(card_count):
        if index in reachable:
            continue
        issues.append(
            Issue(
                severity="WARN",
                code="UNREACHABLE_CARD",
                message="Card is unreachable from the first card.",
                context={"card": str(index)},
            )
        )


def _validate_zero_effect_loops(
    jumps: Mapping[int, Sequence[Jump]], issues: list[Issue]
) -> None:
    adjacency: dict[int, list[int]] = {
        index: sorted({jump.target for jump in outgoing if jump.zero_effect})
        for index, outgoing in jumps.items()
    }

    visited: set[int] = set()
    cycles: list[tuple[int, ...]] = []

    # Explicit frame stack; a zero-effect chain may span the whole deck.
    for root in sorted(adjacency):
        if root in visited:
            continue
        path: list[int] = [root]
        path_positions: dict[int, int] = {root: 0}
        frames: list[tuple[int, Iterator[int]]] = [(root, iter(adjacency.get(root, [])))]
        visited.add(root)
        while frames:
            current, targets = frames[-1]
            next_index = next(targets, None)
            if next_index is None:
                frames.pop()
                path.pop()
                del path_positions[current]
                continue
            if next_index in path_positions:
                cycles.append(_normalize_cycle(path[path_positions[next_index] :]))
            elif next_index not in visited:
                visited.add(next_index)
                path_positions[next_index] = len(path)
                path.append(next_index)
                frames.append((next_index, iter(adjacency.get(next_index, []))))

    for cycle in sorted(set(cycles)):
        cycle_path = " -> ".join(str(index) for index in cycle + (cycle[0],))
        issues.append(
            Issue(
                severity="WARN",
                code="ZERO_EFFECT_LOOP",
                message="Choices loop without changing any stat; the player can repeat them forever.",
                context={"cycle": cycle_path},
            )
        )


def _normalize_cycle(cycle: Sequence[int]) -> tuple[int, ...]:
    start = cycle.index(min(cycle))
    return tuple(cycle[start:]) + tuple(cycle[:start])
