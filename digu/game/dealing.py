"""
The Digu deal.

Cards are dealt breadth-first: one card per seat per pass, popped from the end
of the shuffled deck, for ``hand_size`` passes. The dealer's partner then gets
one more card and whatever is left becomes the draw pile.
"""

from dataclasses import dataclass
from typing import List, Tuple

from digu.common.card import Card
from digu.game.constants import EXTRA_CARD_SEAT, HAND_SIZE, NUM_PLAYERS


@dataclass(frozen=True)
class DealResult:
    """Hands, draw pile and (empty) discard pile produced by a deal."""

    hands: Tuple[Tuple[Card, ...], ...]
    draw_pile: Tuple[Card, ...]
    discard_pile: Tuple[Card, ...] = ()


def deal(
    cards: List[Card],
    hand_size: int = HAND_SIZE,
    num_players: int = NUM_PLAYERS,
    extra_card_seat: int = EXTRA_CARD_SEAT,
) -> DealResult:
    """
    Deal a shuffled deck into hands and a draw pile.

    The caller must pass a full 52-card deck; this is not checked. The list is
    consumed: dealt cards are popped from it.

    Args:
        cards: Shuffled deck, top of deck at the end
        hand_size: Passes of the round-robin deal
        num_players: Number of seats
        extra_card_seat: Seat that receives one extra card after the deal

    Returns:
        DealResult with ``num_players`` hands and the remaining draw pile
    """
    hands: List[List[Card]] = [[] for _ in range(num_players)]
    for _ in range(hand_size):
        for hand in hands:
            hand.append(cards.pop())
    hands[extra_card_seat].append(cards.pop())

    return DealResult(
        hands=tuple(tuple(hand) for hand in hands),
        draw_pile=tuple(cards),
    )
