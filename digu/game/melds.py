"""
Meld validation for Digu.

A meld is three or more cards forming either a set (one rank, every suit
different) or a sequence (one suit, consecutive ranks with the Ace low and no
wraparound). All functions here are pure.
"""

from enum import Enum, auto
from typing import Iterable, Optional, Sequence

from digu.common.card import Card
from digu.game.constants import MIN_MELD_SIZE


class MeldType(Enum):
    """The two shapes a legal meld can take."""

    SET = auto()
    SEQUENCE = auto()


def is_set(cards: Sequence[Card]) -> bool:
    """
    Check for a set: every rank identical and no suit repeated.

    >>> is_set([Card.from_string(c) for c in ("3♠", "3♥", "3♦")])
    True
    """
    if len(cards) < MIN_MELD_SIZE:
        return False
    ranks = {card.rank for card in cards}
    suits = {card.suit for card in cards}
    return len(ranks) == 1 and len(suits) == len(cards)


def is_sequence(cards: Sequence[Card]) -> bool:
    """
    Check for a sequence: one suit and strictly consecutive rank positions.

    >>> is_sequence([Card.from_string(c) for c in ("K♠", "A♠", "2♠")])
    False
    """
    if len(cards) < MIN_MELD_SIZE:
        return False
    if len({card.suit for card in cards}) != 1:
        return False
    positions = sorted(card.rank.order for card in cards)
    return all(b == a + 1 for a, b in zip(positions, positions[1:]))


def classify_meld(cards: Iterable[Card]) -> Optional[MeldType]:
    """
    Return the kind of meld the cards form, or None when they form neither.
    """
    cards = list(cards)
    if is_set(cards):
        return MeldType.SET
    if is_sequence(cards):
        return MeldType.SEQUENCE
    return None


def is_meld(cards: Iterable[Card]) -> bool:
    """
    Decide whether a candidate group of cards is a legal meld.

    Fewer than three cards is never a meld.

    >>> is_meld([Card.from_string(c) for c in ("4♠", "5♠", "6♠")])
    True
    >>> is_meld([])
    False
    """
    return classify_meld(cards) is not None
