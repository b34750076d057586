"""
Discard strategies for automated seats.

A strategy is any callable ``(hand, state) -> Card`` that picks one card from
``hand`` to throw away. The engine draws for the automated seat before calling
it, so the hand is never empty.
"""

from collections import Counter
from typing import Callable, Dict, Sequence, Union

from digu.common.card import Card
from digu.game.state import GameState

DiscardStrategy = Callable[[Sequence[Card], GameState], Card]


def discard_first_card(hand: Sequence[Card], state: GameState) -> Card:
    """Throw away the first card held, whatever it is."""
    return hand[0]


def discard_highest_deadwood(hand: Sequence[Card], state: GameState) -> Card:
    """
    Throw away the most expensive card that is not working towards a meld.

    A card is kept when another card of its rank is held (a set in progress)
    or when a same-suit card one rank away is held (a sequence in progress).
    If every card is kept this way, the most expensive card overall goes.
    """
    rank_counts = Counter(card.rank for card in hand)
    held = {(card.suit, card.rank.order) for card in hand}

    def in_progress(card: Card) -> bool:
        if rank_counts[card.rank] >= 2:
            return True
        order = card.rank.order
        return (card.suit, order - 1) in held or (card.suit, order + 1) in held

    candidates = [card for card in hand if not in_progress(card)] or list(hand)
    # max() keeps the first of equal cards, so ties fall to hand order
    return max(candidates, key=lambda card: (card.points, card.rank.order))


STRATEGIES: Dict[str, DiscardStrategy] = {
    "first_card": discard_first_card,
    "highest_deadwood": discard_highest_deadwood,
}


def get_strategy(strategy: Union[str, DiscardStrategy, None]) -> DiscardStrategy:
    """
    Resolve a strategy given by name or as a callable.

    Raises:
        ValueError: If the name is not registered
    """
    if strategy is None:
        return discard_first_card
    if callable(strategy):
        return strategy
    try:
        return STRATEGIES[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown strategy {strategy!r}; expected one of {sorted(STRATEGIES)}"
        ) from None
