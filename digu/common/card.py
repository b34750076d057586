"""
This module defines the `Suit`, `Rank`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of a standard deck of playing
cards: Spades, Hearts, Diamonds, and Clubs.

- `Rank`: An enum representing the thirteen ranks of a standard deck of playing
cards, Ace through King, in their canonical order.

- `Card`: An immutable value type representing a playing card. A card has a
suit and a rank, and prints in the compact `<rank><suit>` form used across the
engine, e.g. ``10♥``.

This module is part of the `digu` package, a game-state engine for the Digu card game.
"""

from dataclasses import dataclass
from enum import Enum, unique


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    SPADES = "♠"
    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"

    def __str__(self) -> str:
        return self.value


@unique
class Rank(Enum):
    """
    Enum for ranks in a card deck, declared in canonical order (A low, K high).
    """

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    @property
    def order(self) -> int:
        """Position in the canonical rank order, A=0 through K=12."""
        return RANK_ORDER.index(self)

    @property
    def points(self) -> int:
        """The penalty value of the rank: A=1, 10/J/Q/K=10, else face value."""
        if self == Rank.ACE:
            return 1
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @property
    def rank_str(self) -> str:
        """A string representation of the rank."""
        return self.value

    def __str__(self) -> str:
        return self.rank_str


RANK_ORDER = tuple(Rank)
SUIT_ORDER = tuple(Suit)


@dataclass(frozen=True)
class Card:
    """
    Immutable representation of a playing card.

    >>> card = Card(Suit.HEARTS, Rank.TEN)
    >>> print(card)
    10♥
    >>> Card.from_string("10♥") == card
    True
    """

    suit: Suit
    rank: Rank

    def __post_init__(self):
        match (self.suit, self.rank):
            case (Suit(), Rank()):
                pass
            case (Suit(), _):
                raise TypeError(f"Invalid rank: {self.rank!r}")
            case _:
                raise TypeError(f"Invalid suit: {self.suit!r}")

    @classmethod
    def from_string(cls, text: str) -> "Card":
        """
        Parse a card from its compact text form.

        :param text: Rank followed by a suit symbol, e.g. ``"3♠"`` or ``"10♥"``
        :return: The parsed card
        :raises ValueError: If the text does not name a card
        """
        if not isinstance(text, str) or len(text) < 2:
            raise ValueError(f"Invalid card text: {text!r}")
        try:
            return cls(Suit(text[-1]), Rank(text[:-1]))
        except ValueError as exc:
            raise ValueError(f"Invalid card text: {text!r}") from exc

    @property
    def points(self) -> int:
        """Scoring value of the card."""
        return self.rank.points

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"Card(Suit.{self.suit.name}, Rank.{self.rank.name})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"{self.rank}{self.suit}"
