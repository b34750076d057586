"""
Tests for meld validation.
"""

import pytest

from digu.common.card import Card
from digu.game.melds import MeldType, classify_meld, is_meld, is_sequence, is_set


def _cards(*texts):
    return [Card.from_string(text) for text in texts]


@pytest.mark.parametrize(
    "texts, expected",
    [
        (("3♠", "3♥", "3♦"), True),
        (("4♠", "5♠", "6♠"), True),
        (("3♠", "3♠", "3♥"), False),
        (("4♠", "5♥", "6♦"), False),
        (("K♠", "A♠", "2♠"), False),
        ((), False),
        (("3♠", "3♥"), False),
    ],
)
def test_is_meld_cases(texts, expected):
    assert is_meld(_cards(*texts)) is expected


def test_four_card_set():
    assert classify_meld(_cards("7♠", "7♥", "7♦", "7♣")) == MeldType.SET


def test_set_ignores_card_order():
    assert is_set(_cards("Q♦", "Q♠", "Q♣"))


def test_mixed_ranks_are_not_a_set():
    assert not is_set(_cards("3♠", "4♥", "3♦"))


def test_sequence_in_any_order():
    assert classify_meld(_cards("6♥", "4♥", "5♥")) == MeldType.SEQUENCE


def test_long_sequence_to_king():
    assert is_sequence(_cards("9♣", "10♣", "J♣", "Q♣", "K♣"))


def test_ace_is_low_only():
    assert is_sequence(_cards("A♦", "2♦", "3♦"))
    assert not is_sequence(_cards("Q♦", "K♦", "A♦"))


def test_sequence_with_gap():
    assert not is_sequence(_cards("4♠", "5♠", "7♠"))


def test_sequence_with_repeated_rank():
    assert not is_sequence(_cards("4♠", "4♠", "5♠"))


def test_classify_rejects_non_meld():
    assert classify_meld(_cards("2♠", "9♥", "K♦")) is None


def test_is_meld_accepts_any_iterable():
    assert is_meld(card for card in _cards("8♥", "8♣", "8♠"))


def test_validation_leaves_input_untouched():
    candidate = _cards("6♥", "4♥", "5♥")
    snapshot = list(candidate)
    is_meld(candidate)
    assert candidate == snapshot
