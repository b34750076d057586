"""Digu-specific constants and value mappings."""

from digu.common.card import Rank

NUM_PLAYERS = 4
HUMAN_SEAT = 0
HAND_SIZE = 10
EXTRA_CARD_SEAT = 1  # dealer's partner receives the eleventh card
WIN_BONUS = 100
MIN_MELD_SIZE = 3
DISCARD_PREVIEW = 5
AUTOMATED_TURN_DELAY = 1.0

# Penalty points left in a losing hand
DIGU_VALUES = {rank: rank.points for rank in Rank}

EMPTY_PILE_RESHUFFLE = "reshuffle"
EMPTY_PILE_END_ROUND = "end_round"
EMPTY_PILE_POLICIES = (EMPTY_PILE_RESHUFFLE, EMPTY_PILE_END_ROUND)

DEFAULT_PLAYER_NAMES = ("You", "Player 2", "Player 3", "Player 4")


def get_digu_value(rank: Rank) -> int:
    """Get the penalty value for a given rank."""
    return DIGU_VALUES[rank]


def seat_label(index: int) -> str:
    """Display label for a seat: "You" for the human, "Player N" otherwise."""
    return "You" if index == HUMAN_SEAT else f"Player {index + 1}"
