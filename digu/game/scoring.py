"""
Round resolution and scoring for Digu.

The winner of a round gains a fixed bonus; every other seat loses the points
still in its hand. Each seat's update depends only on its own hand, so the
order in which scores are applied never changes the totals.
"""

from typing import Iterable, Optional, Sequence, Tuple

from digu.common.card import Card
from digu.game.constants import WIN_BONUS, get_digu_value, seat_label
from digu.game.state import RoundEndReason, RoundOutcome


def card_value(card: Card) -> int:
    """Penalty points for one card: A=1, 10/J/Q/K=10, else face value."""
    return get_digu_value(card.rank)


def hand_penalty(hand: Iterable[Card]) -> int:
    """Sum of card values left in a hand."""
    return sum(card_value(card) for card in hand)


def score_round(
    hands: Sequence[Sequence[Card]],
    winner_index: int,
    win_bonus: int = WIN_BONUS,
    labels: Optional[Sequence[str]] = None,
) -> RoundOutcome:
    """
    Compute the outcome of a round won by ``winner_index``.

    Args:
        hands: Every seat's remaining cards
        winner_index: Seat that emptied its hand
        win_bonus: Points awarded to the winner
        labels: Optional display names; seat labels are used when omitted

    Returns:
        RoundOutcome with penalties and score deltas per seat
    """
    penalties = tuple(
        0 if i == winner_index else hand_penalty(hand) for i, hand in enumerate(hands)
    )
    deltas = tuple(
        win_bonus if i == winner_index else -penalty
        for i, penalty in enumerate(penalties)
    )
    label = labels[winner_index] if labels else seat_label(winner_index)
    return RoundOutcome(
        winner_index=winner_index,
        winner_label=label,
        penalties=penalties,
        score_deltas=deltas,
        reason=RoundEndReason.HAND_EMPTIED,
    )


def drawn_round(num_players: int) -> RoundOutcome:
    """Outcome for a round abandoned because the draw pile ran dry."""
    zeros = (0,) * num_players
    return RoundOutcome(
        winner_index=None,
        winner_label=None,
        penalties=zeros,
        score_deltas=zeros,
        reason=RoundEndReason.DRAW_PILE_EXHAUSTED,
    )


def apply_outcome(scores: Sequence[int], outcome: RoundOutcome) -> Tuple[int, ...]:
    """Return the score table after adding the outcome's deltas."""
    return tuple(score + delta for score, delta in zip(scores, outcome.score_deltas))
