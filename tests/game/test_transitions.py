"""
Tests for the pure state transitions.
"""

import random
from dataclasses import replace

import pytest

from digu.common.card import Card
from digu.common.deck import build_deck
from digu.events import EventBus, EngineEventType
from digu.game.state import DiguRules, GameStage, GameState, PlayerState, RoundEndReason
from digu.game.transitions import StateTransitionEngine as T


def _cards(*texts):
    return tuple(Card.from_string(text) for text in texts)


def _assert_deck_integrity(state: GameState):
    cards = state.all_cards()
    assert len(cards) == 52
    assert set(cards) == set(build_deck())


def _record(event_type):
    events = []
    EventBus.get_instance().on(event_type, events.append)
    return events


def _play_cycle(state, rng):
    """Human discards its first card without drawing; automated seats reply."""
    state = T.discard_card(state, 0, state.players[0].hand[0])
    while state.stage == GameStage.AUTOMATED_TURN:
        state = T.play_automated_turn(state, rng=rng)
        _assert_deck_integrity(state)
    return state


@pytest.fixture
def dealt(rng):
    return T.start_round(T.new_game(), rng)


def test_new_game():
    state = T.new_game(DiguRules(player_names=("Ann", "Bo", "Cy", "Di")))
    assert state.stage == GameStage.WAITING_TO_DEAL
    assert [p.name for p in state.players] == ["Ann", "Bo", "Cy", "Di"]
    assert state.scores == (0, 0, 0, 0)


def test_start_round(dealt):
    assert dealt.stage == GameStage.HUMAN_TURN
    assert dealt.active_player_index == 0
    assert dealt.round_number == 1
    assert [len(hand) for hand in dealt.hands] == [10, 11, 10, 10]
    assert dealt.deck_size == 11
    assert dealt.discard_pile == ()
    assert dealt.outcome is None
    _assert_deck_integrity(dealt)


def test_start_round_is_repeatable_with_seed():
    first = T.start_round(T.new_game(), random.Random(42))
    second = T.start_round(T.new_game(), random.Random(42))
    assert first.hands == second.hands
    assert first.draw_pile == second.draw_pile


def test_start_round_emits_events(rng):
    started = _record(EngineEventType.ROUND_STARTED)
    dealt_events = _record(EngineEventType.CARDS_DEALT)
    state = T.start_round(T.new_game(), rng)
    assert started[0]["round_number"] == 1
    assert started[0]["game_id"] == state.id
    assert dealt_events[0]["hand_sizes"] == [10, 11, 10, 10]
    assert dealt_events[0]["deck_remaining"] == 11


def test_start_round_keeps_scores(rng):
    state = T.new_game()
    state = replace(
        state,
        players=tuple(replace(p, score=10 * i) for i, p in enumerate(state.players)),
    )
    state = T.start_round(state, rng)
    assert state.scores == (0, 10, 20, 30)


def test_draw_card(dealt):
    top = dealt.draw_pile[-1]
    state = T.draw_card(dealt, 0)
    assert state.players[0].hand[-1] == top
    assert len(state.players[0].hand) == 11
    assert state.deck_size == 10
    assert state.active_player_index == 0
    assert state.draws_this_turn == 1
    _assert_deck_integrity(state)
    # the original snapshot is untouched
    assert len(dealt.players[0].hand) == 10


def test_draw_card_event_hides_automated_cards(dealt):
    drawn = _record(EngineEventType.CARD_DRAWN)
    state = T.draw_card(dealt, 0)
    assert drawn[-1]["card"] == str(state.players[0].hand[-1])

    state = T.discard_card(state, 0, state.players[0].hand[0])
    T.draw_card(state, 1)
    assert drawn[-1]["player_index"] == 1
    assert drawn[-1]["card"] is None


def test_draw_card_out_of_turn_is_noop(dealt):
    assert T.draw_card(dealt, 2) is dealt


def test_draw_card_before_deal_is_noop():
    state = T.new_game()
    assert T.draw_card(state, 0) is state


def test_draw_limit(dealt):
    limited = replace(dealt, rules=replace(dealt.rules, max_draws_per_turn=1))
    once = T.draw_card(limited, 0)
    assert T.draw_card(once, 0) is once


def test_discard_card(dealt):
    card = dealt.players[0].hand[3]
    state = T.discard_card(dealt, 0, card)
    assert card not in state.players[0].hand
    assert state.discard_pile[0] == card
    assert state.active_player_index == 1
    assert state.stage == GameStage.AUTOMATED_TURN
    _assert_deck_integrity(state)


def test_discard_card_not_in_hand_is_noop(dealt):
    foreign = dealt.players[1].hand[0]
    assert T.discard_card(dealt, 0, foreign) is dealt


def test_discard_out_of_turn_is_noop(dealt):
    assert T.discard_card(dealt, 1, dealt.players[1].hand[0]) is dealt


def test_discard_pile_is_most_recent_first(dealt):
    first = dealt.players[0].hand[0]
    state = T.discard_card(dealt, 0, first)
    state = T.play_automated_turn(state)
    assert state.discard_pile[1] == first
    assert len(state.discard_pile) == 2


def test_turn_cycling(dealt):
    changes = _record(EngineEventType.TURN_CHANGED)
    state = T.discard_card(dealt, 0, dealt.players[0].hand[0])
    seen = [state.active_player_index]
    while state.stage == GameStage.AUTOMATED_TURN:
        state = T.play_automated_turn(state)
        seen.append(state.active_player_index)
    assert seen == [1, 2, 3, 0]
    assert state.stage == GameStage.HUMAN_TURN
    assert [(c["previous_player_index"], c["player_index"]) for c in changes] == [
        (0, 1),
        (1, 2),
        (2, 3),
        (3, 0),
    ]


def test_automated_turn_draws_then_discards_first_card(dealt):
    state = T.discard_card(dealt, 0, dealt.players[0].hand[0])
    before = state.players[1].hand
    top = state.draw_pile[-1]
    after = T.play_automated_turn(state)
    assert after.discard_pile[0] == before[0]
    assert after.players[1].hand == before[1:] + (top,)


def test_automated_turn_uses_strategy(dealt):
    state = T.discard_card(dealt, 0, dealt.players[0].hand[0])
    after = T.play_automated_turn(state, strategy=lambda hand, s: hand[-1])
    # the freshly drawn card goes straight back out
    assert after.players[1].hand == state.players[1].hand
    assert after.discard_pile[0] == state.draw_pile[-1]


def test_automated_turn_ignores_card_not_held(dealt):
    state = T.discard_card(dealt, 0, dealt.players[0].hand[0])
    outsider = state.players[0].hand[0]
    after = T.play_automated_turn(state, strategy=lambda hand, s: outsider)
    assert outsider in after.players[0].hand
    assert after.discard_pile[0] == state.players[1].hand[0]


def test_automated_turn_on_human_turn_is_noop(dealt):
    assert T.play_automated_turn(dealt) is dealt


def test_human_wins_by_emptying_hand(dealt):
    ended = _record(EngineEventType.ROUND_ENDED)
    state = dealt
    for _ in range(10):
        state = _play_cycle(state, random.Random(0))
    assert state.stage == GameStage.ROUND_OVER
    assert state.outcome.winner_index == 0
    assert state.outcome.winner_label == "You"
    assert state.players[0].hand == ()
    assert state.scores[0] == 100
    for seat in (1, 2, 3):
        assert state.scores[seat] == -state.players[seat].hand_value
    assert ended[-1]["winner_name"] == "You"
    _assert_deck_integrity(state)


def test_automated_seat_can_win():
    players = (
        PlayerState(index=0, name="You", hand=_cards("K♠", "Q♠")),
        PlayerState(index=1, name="Player 2", hand=_cards("2♣")),
        PlayerState(index=2, name="Player 3", hand=_cards("A♦")),
        PlayerState(index=3, name="Player 4", hand=_cards("5♥", "6♥")),
    )
    state = GameState(
        players=players,
        stage=GameStage.AUTOMATED_TURN,
        active_player_index=1,
        draw_pile=_cards("3♣"),
    )
    state = T.draw_card(state, 1)
    state = T.discard_card(state, 1, Card.from_string("2♣"))
    assert state.active_player_index == 2
    state = T.discard_card(state, 2, Card.from_string("A♦"))
    assert state.stage == GameStage.ROUND_OVER
    assert state.outcome.winner_index == 2
    assert state.outcome.penalties == (20, 3, 0, 11)
    assert state.scores == (-20, -3, 100, -11)


def test_actions_after_round_over_are_noops(dealt):
    state = dealt
    for _ in range(10):
        state = _play_cycle(state, random.Random(0))
    assert T.draw_card(state, 0) is state
    assert T.advance_turn(state) is state
    assert T.play_automated_turn(state) is state


def test_reshuffle_when_draw_pile_runs_out(dealt):
    replenished = _record(EngineEventType.DRAW_PILE_REPLENISHED)
    state = dealt
    for _ in range(10):
        state = _play_cycle(state, random.Random(0))
    # 27 automated draws against an 11-card pile
    assert replenished
    assert state.outcome.winner_index == 0


def test_replenish_keeps_top_discard():
    state = GameState(
        stage=GameStage.HUMAN_TURN, discard_pile=_cards("9♠", "8♠", "7♠", "6♠")
    )
    state = T.replenish_draw_pile(state, random.Random(3))
    assert state.discard_pile == _cards("9♠")
    assert sorted(state.draw_pile, key=str) == sorted(_cards("8♠", "7♠", "6♠"), key=str)


def test_replenish_is_noop_with_cards_left():
    state = GameState(draw_pile=_cards("2♠"), discard_pile=_cards("3♠", "4♠"))
    assert T.replenish_draw_pile(state) is state


def test_draw_on_empty_pile_ends_round_drawn_when_nothing_to_recycle():
    state = GameState(
        stage=GameStage.HUMAN_TURN,
        players=(PlayerState(index=0, name="You", hand=_cards("2♠")),)
        + GameState().players[1:],
        discard_pile=_cards("3♠"),
    )
    after = T.draw_card(state, 0)
    assert after.stage == GameStage.ROUND_OVER
    assert after.outcome.is_draw
    assert after.outcome.reason == RoundEndReason.DRAW_PILE_EXHAUSTED
    assert after.players[0].hand == _cards("2♠")


def test_end_round_policy(rng):
    ended = _record(EngineEventType.ROUND_ENDED)
    rules = DiguRules(empty_pile_policy="end_round")
    state = T.start_round(T.new_game(rules), rng)
    for _ in range(10):
        state = _play_cycle(state, random.Random(0))
        if not state.round_in_progress:
            break
    assert state.stage == GameStage.ROUND_OVER
    assert state.outcome.is_draw
    assert state.scores == (0, 0, 0, 0)
    assert ended[-1]["winner_name"] is None
    assert state.deck_size == 0
    _assert_deck_integrity(state)


def test_scores_accumulate_over_rounds(rng):
    state = T.start_round(T.new_game(), rng)
    for _ in range(10):
        state = _play_cycle(state, rng)
    first = state.scores
    state = T.start_round(state, rng)
    assert state.scores == first
    assert state.round_number == 2
    for _ in range(10):
        state = _play_cycle(state, rng)
    assert state.scores[0] == 200


def test_reset_scores(rng):
    reset = _record(EngineEventType.SCORES_RESET)
    state = T.start_round(T.new_game(), rng)
    for _ in range(10):
        state = _play_cycle(state, rng)
    state = T.reset_scores(state)
    assert state.scores == (0, 0, 0, 0)
    assert len(reset) == 1


def test_transitions_stamp_their_own_time(dealt, monkeypatch):
    discarded = _record(EngineEventType.CARD_DISCARDED)
    turns = _record(EngineEventType.TURN_CHANGED)
    later = dealt.timestamp + 60.0
    monkeypatch.setattr("digu.game.transitions.time.time", lambda: later)

    state = T.discard_card(dealt, 0, dealt.players[0].hand[0])

    assert state.timestamp == later
    assert discarded[0]["timestamp"] == later
    assert turns[0]["timestamp"] == later
    assert T.reset_scores(state).timestamp == later
    # refusals hand back the same state, timestamp included
    assert T.draw_card(state, 0).timestamp == later


def test_timestamps_never_go_backwards(dealt, rng):
    state = T.draw_card(dealt, 0, rng)
    assert state.timestamp >= dealt.timestamp
    after = _play_cycle(state, rng)
    assert after.timestamp >= state.timestamp
