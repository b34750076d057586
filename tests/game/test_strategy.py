"""
Tests for automated-seat discard strategies.
"""

import pytest

from digu.common.card import Card
from digu.game.state import GameState
from digu.game.strategy import (
    STRATEGIES,
    discard_first_card,
    discard_highest_deadwood,
    get_strategy,
)


def _cards(*texts):
    return tuple(Card.from_string(text) for text in texts)


@pytest.fixture
def state():
    return GameState()


def test_discard_first_card(state):
    hand = _cards("9♠", "2♥", "K♦")
    assert discard_first_card(hand, state) == hand[0]


def test_highest_deadwood_picks_most_expensive_loose_card(state):
    hand = _cards("5♠", "6♠", "K♦", "3♥", "7♣")
    assert discard_highest_deadwood(hand, state) == Card.from_string("K♦")


def test_highest_deadwood_keeps_pairs(state):
    hand = _cards("K♦", "K♣", "4♥", "9♠")
    assert discard_highest_deadwood(hand, state) == Card.from_string("9♠")


def test_highest_deadwood_keeps_sequence_neighbours(state):
    hand = _cards("Q♥", "K♥", "2♣")
    assert discard_highest_deadwood(hand, state) == Card.from_string("2♣")


def test_highest_deadwood_breaks_ties_by_rank(state):
    # 10, J, Q, K are all worth 10; the king goes first
    hand = _cards("10♠", "K♦", "J♥")
    assert discard_highest_deadwood(hand, state) == Card.from_string("K♦")


def test_highest_deadwood_when_everything_is_in_progress(state):
    hand = _cards("4♠", "5♠", "9♥", "9♦")
    assert discard_highest_deadwood(hand, state) == Card.from_string("9♥")


def test_strategies_choose_from_hand(state):
    hand = _cards("A♠", "7♥", "7♣", "8♣", "J♦")
    for strategy in STRATEGIES.values():
        assert strategy(hand, state) in hand


def test_get_strategy_by_name():
    assert get_strategy("first_card") is discard_first_card
    assert get_strategy("highest_deadwood") is discard_highest_deadwood


def test_get_strategy_default():
    assert get_strategy(None) is discard_first_card


def test_get_strategy_callable():
    def custom(hand, state):
        return hand[-1]

    assert get_strategy(custom) is custom


def test_get_strategy_unknown_name():
    with pytest.raises(ValueError, match="Unknown strategy"):
        get_strategy("psychic")
