"""
This module contains the Deck class, which represents a deck of cards, along
with the module-level helpers used to build and shuffle one.

>>> deck = Deck()
>>> deck.size
52
>>> deck.deal()
Card(Suit.CLUBS, Rank.KING)
>>> deck.size
51
"""

import random
from typing import List, MutableSequence, Optional, Union

from digu.common.card import RANK_ORDER, SUIT_ORDER, Card


def build_deck() -> List[Card]:
    """
    Construct the 52 distinct cards in deterministic order.

    Suits run in the order ♠, ♥, ♦, ♣ and, within each suit, ranks run A to K.

    :return: A new list of Card instances.
    """
    return [Card(suit, rank) for suit in SUIT_ORDER for rank in RANK_ORDER]


def shuffle(
    cards: MutableSequence[Card], rng: Optional[random.Random] = None
) -> MutableSequence[Card]:
    """
    Shuffle cards in place with a Fisher-Yates pass.

    Walks from the last index down to 1, swapping each position with an index
    drawn uniformly from ``[0, i]``.

    :param cards: The sequence to permute in place.
    :param rng: Random source with a ``randint`` method; the ``random`` module
                is used when omitted.
    :return: The same sequence, for chaining.
    """
    source = rng if rng is not None else random
    for i in range(len(cards) - 1, 0, -1):
        j = source.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards


class Deck:
    """
    A class representing a deck of cards, used as a stack.
    """

    # Precompute the default deck
    _default_deck = build_deck()

    def __init__(self, cards: Union[List[Card], None] = None):
        """
        Initialize a Deck instance.

        :param cards: A list of Card instances to populate the deck (optional).
                      If not provided, a default deck will be constructed.
        """
        if cards is None:
            self.cards: List[Card] = self.initialize_default_deck()
        else:
            self.cards = list(cards)

    def initialize_default_deck(self) -> List[Card]:
        """
        Construct a default deck with all possible combinations of suits and ranks.

        :return: A list of Card instances representing the default deck.
        """
        return self._default_deck.copy()

    def shuffle(self, rng: Optional[random.Random] = None):
        """
        Shuffle the cards in the deck.

        :param rng: Optional random source, see :func:`shuffle`.
        """
        shuffle(self.cards, rng)
        return self

    def deal(self, num_cards=1) -> Union[Card, List[Card]]:
        """
        Pop n cards from the end of the deck.

        :return: A card instance or a list of card instances.
        :raises IndexError: If the deck runs out of cards.
        """
        if num_cards == 1:
            return self.cards.pop()
        return [self.cards.pop() for _ in range(num_cards)]

    @property
    def size(self) -> int:
        """
        Return the number of remaining cards in the deck.
        """
        return len(self.cards)

    def is_empty(self) -> bool:
        """
        Check if the deck is empty.
        """
        return len(self.cards) == 0

    def reset(self):
        """
        Reset the deck to the full ordered 52 cards.
        """
        self.cards = self.initialize_default_deck()
        return self

    def __len__(self) -> int:
        return len(self.cards)

    def __repr__(self) -> str:
        return f"Deck({[repr(card) for card in self.cards]})"

    def __str__(self) -> str:
        return f"Deck of {len(self.cards)} cards"
