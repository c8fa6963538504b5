import logging

import pytest

from reigns.domain.defs import CardDef, ChoiceDef, DeckDef, EffectMap, ThemeDef
from reigns.domain.state import Stats, TraversalState
from reigns.services.errors import EnginePreconditionError, PlaythroughOverError
from reigns.services.graph_sync import disconnect
from reigns.services.traversal_service import (
    Playthrough,
    Verdict,
    apply_choice,
    describe_outcome,
    start_playthrough,
)


def _make_choice(text: str = "ok", next_card_index: int | None = None, **deltas: int) -> ChoiceDef:
    return ChoiceDef(text=text, effects=EffectMap(**deltas), next_card_index=next_card_index)


def _make_card(left: ChoiceDef | None = None, right: ChoiceDef | None = None) -> CardDef:
    return CardDef(prompt="A decision", left=left or _make_choice("no"), right=right or _make_choice("yes"))


def _make_deck(*cards: CardDef) -> DeckDef:
    return DeckDef(cards=tuple(cards))


def _make_theme() -> ThemeDef:
    return ThemeDef(
        id="test",
        name="Testland",
        description="",
        system_instruction="",
        stat_names={"Power": "Authority", "Wealth": "Gold", "People": "Citizens", "Knowledge": "Lore"},
    )


def test_start_playthrough_uses_baseline() -> None:
    state = start_playthrough()
    assert state.index == 0
    assert state.stats == Stats(50, 50, 50, 50)


def test_zero_effect_deck_wins_after_last_card() -> None:
    deck = _make_deck(_make_card(), _make_card(), _make_card())
    state = start_playthrough()
    sides = ["left", "right", "left"]
    outcomes = []
    for side in sides:
        outcome = apply_choice(deck, state, side)
        outcomes.append(outcome)
        state = outcome.state

    assert [o.verdict for o in outcomes] == [Verdict.ACTIVE, Verdict.ACTIVE, Verdict.WIN]
    assert outcomes[-1].target_index == 3
    assert outcomes[-1].stats == Stats(50, 50, 50, 50)


def test_stat_drop_to_zero_loses_with_stat_reason() -> None:
    deck = _make_deck(_make_card(left=_make_choice(power=-60)))
    outcome = apply_choice(deck, start_playthrough(), "left")

    assert outcome.verdict is Verdict.LOSS
    assert outcome.reason == "Power"
    assert outcome.stats.power == 0
    assert outcome.index == 0


def test_negative_target_loses_to_void_regardless_of_deltas() -> None:
    deck = _make_deck(
        _make_card(right=_make_choice(next_card_index=-1, wealth=10, people=-5)),
        _make_card(),
    )
    outcome = apply_choice(deck, start_playthrough(), "right")

    assert outcome.verdict is Verdict.LOSS
    assert outcome.reason == "void"
    assert outcome.stats.wealth == 60
    assert outcome.stats.people == 45


def test_disconnect_restores_sequential_advance() -> None:
    deck = _make_deck(
        _make_card(left=_make_choice(next_card_index=2)),
        _make_card(),
        _make_card(),
    )
    assert apply_choice(deck, start_playthrough(), "left").index == 2

    deck = disconnect(deck, 0, "left")
    outcome = apply_choice(deck, start_playthrough(), "left")

    assert outcome.verdict is Verdict.ACTIVE
    assert outcome.index == 1


def test_stats_are_clamped_to_bounds() -> None:
    deck = _make_deck(_make_card(left=_make_choice(knowledge=30)), _make_card())
    state = TraversalState(index=0, stats=Stats(50, 50, 50, 90))
    outcome = apply_choice(deck, state, "left")

    assert outcome.stats.knowledge == 100
    assert outcome.verdict is Verdict.LOSS
    assert outcome.reason == "Knowledge"


def test_boundary_tie_break_follows_canonical_order() -> None:
    deck = _make_deck(_make_card(left=_make_choice(people=-50, wealth=50)), _make_card())
    outcome = apply_choice(deck, start_playthrough(), "left")

    assert outcome.stats.wealth == 100
    assert outcome.stats.people == 0
    assert outcome.reason == "Wealth"


def test_boundary_loss_takes_precedence_over_win() -> None:
    deck = _make_deck(_make_card(right=_make_choice(power=50)))
    outcome = apply_choice(deck, start_playthrough(), "right")

    assert outcome.verdict is Verdict.LOSS
    assert outcome.reason == "Power"
    assert outcome.target_index is None


def test_target_past_end_wins() -> None:
    deck = _make_deck(_make_card(left=_make_choice(next_card_index=99)), _make_card())
    outcome = apply_choice(deck, start_playthrough(), "left")

    assert outcome.verdict is Verdict.WIN
    assert outcome.target_index == 99


def test_explicit_backward_jump_stays_active() -> None:
    deck = _make_deck(_make_card(), _make_card(right=_make_choice(next_card_index=0)))
    outcome = apply_choice(deck, TraversalState(index=1, stats=Stats()), "right")

    assert outcome.verdict is Verdict.ACTIVE
    assert outcome.index == 0


def test_apply_choice_is_deterministic_and_pure() -> None:
    deck = _make_deck(_make_card(left=_make_choice(power=-7, wealth=3)), _make_card())
    state = start_playthrough()

    first = apply_choice(deck, state, "left")
    second = apply_choice(deck, state, "left")

    assert first == second
    assert state == start_playthrough()


def test_apply_choice_rejects_index_outside_deck() -> None:
    deck = _make_deck(_make_card())
    with pytest.raises(EnginePreconditionError):
        apply_choice(deck, TraversalState(index=1, stats=Stats()), "left")


def test_apply_choice_rejects_unknown_side() -> None:
    deck = _make_deck(_make_card())
    with pytest.raises(EnginePreconditionError):
        apply_choice(deck, start_playthrough(), "up")  # type: ignore[arg-type]


def test_apply_choice_rejects_empty_deck() -> None:
    with pytest.raises(EnginePreconditionError):
        apply_choice(DeckDef(cards=()), start_playthrough(), "left")


def test_playthrough_records_history_and_stops_at_verdict() -> None:
    deck = _make_deck(_make_card(), _make_card(right=_make_choice(wealth=5)))
    playthrough = Playthrough(deck=deck)

    assert playthrough.current_card() is deck.cards[0]
    playthrough.choose("left")
    playthrough.choose("right")

    assert playthrough.is_over
    assert playthrough.verdict is Verdict.WIN
    assert playthrough.steps == 2
    assert playthrough.state.stats.wealth == 55
    with pytest.raises(PlaythroughOverError):
        playthrough.choose("left")


def test_playthrough_rejects_empty_deck() -> None:
    with pytest.raises(EnginePreconditionError):
        Playthrough(deck=DeckDef(cards=()))


def test_playthrough_logs_terminal_verdict(caplog) -> None:
    deck = _make_deck(_make_card(left=_make_choice(next_card_index=-3)))
    playthrough = Playthrough(deck=deck)

    with caplog.at_level(logging.INFO, logger="reigns.services.traversal_service"):
        playthrough.choose("left")

    assert "LOSS" in caplog.text


def test_playthrough_allows_unbounded_cycles() -> None:
    deck = _make_deck(_make_card(left=_make_choice(next_card_index=0)))
    playthrough = Playthrough(deck=deck)
    for _ in range(50):
        playthrough.choose("left")

    assert not playthrough.is_over
    assert playthrough.steps == 50
    assert playthrough.state.index == 0


def test_describe_outcome_messages_use_theme_names() -> None:
    theme = _make_theme()
    deck = _make_deck(
        _make_card(left=_make_choice(power=-60), right=_make_choice(wealth=60)),
    )
    low = apply_choice(deck, start_playthrough(), "left")
    high = apply_choice(deck, start_playthrough(), "right")

    assert describe_outcome(low, theme) == "Your authority has vanished."
    assert describe_outcome(high, theme) == "You've been overwhelmed by your gold."


def test_describe_outcome_void_and_win() -> None:
    deck = _make_deck(_make_card(left=_make_choice(next_card_index=-1)))
    void = apply_choice(deck, start_playthrough(), "left")
    win = apply_choice(deck, start_playthrough(), "right")

    assert "void" in describe_outcome(void)
    assert "Testland" in describe_outcome(win, _make_theme())
    assert describe_outcome(apply_choice(_make_deck(_make_card(), _make_card()), start_playthrough(), "left")) == ""
