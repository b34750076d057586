"""
Immutable state models for the Digu card game.

This module provides dataclasses for representing the state of a Digu game in
an immutable manner. These classes are designed to be used with pure
transition functions that create new state instances rather than modifying
existing ones, so a snapshot handed to a presentation layer can never be
changed behind the engine's back.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum, auto
import uuid
import time

from digu.common.card import Card
from digu.game.constants import (
    AUTOMATED_TURN_DELAY,
    DEFAULT_PLAYER_NAMES,
    DISCARD_PREVIEW,
    EMPTY_PILE_POLICIES,
    EMPTY_PILE_RESHUFFLE,
    EXTRA_CARD_SEAT,
    HAND_SIZE,
    HUMAN_SEAT,
    NUM_PLAYERS,
    WIN_BONUS,
)


class GameStage(Enum):
    """Possible stages of a Digu round."""

    WAITING_TO_DEAL = auto()
    HUMAN_TURN = auto()
    AUTOMATED_TURN = auto()
    ROUND_OVER = auto()


class RoundEndReason(Enum):
    """Why a round finished."""

    HAND_EMPTIED = auto()
    DRAW_PILE_EXHAUSTED = auto()


class RejectionReason(Enum):
    """Why an action was refused. Refused actions never change state."""

    ROUND_NOT_IN_PROGRESS = auto()
    NOT_YOUR_TURN = auto()
    CARD_NOT_IN_HAND = auto()
    DRAW_LIMIT_REACHED = auto()


@dataclass(frozen=True)
class DiguRules:
    """
    Immutable representation of the rules for a Digu game.

    Attributes:
        hand_size: Cards dealt to every seat in the round-robin deal
        extra_card_seat: Seat that receives one additional card after the deal
        win_bonus: Points added to the winner's score
        empty_pile_policy: "reshuffle" to recycle the discard pile when the
            draw pile runs out, "end_round" to end the round drawn
        max_draws_per_turn: Human draws allowed per turn, 0 for unlimited
        automated_turn_delay: Seconds an automated seat waits before acting
        discard_preview: Discard pile cards exposed to adapters
        player_names: Display names, seat 0 first
    """

    hand_size: int = HAND_SIZE
    extra_card_seat: int = EXTRA_CARD_SEAT
    win_bonus: int = WIN_BONUS
    empty_pile_policy: str = EMPTY_PILE_RESHUFFLE
    max_draws_per_turn: int = 0
    automated_turn_delay: float = AUTOMATED_TURN_DELAY
    discard_preview: int = DISCARD_PREVIEW
    player_names: Tuple[str, ...] = DEFAULT_PLAYER_NAMES

    def __post_init__(self):
        if self.empty_pile_policy not in EMPTY_PILE_POLICIES:
            raise ValueError(
                f"Unknown empty_pile_policy {self.empty_pile_policy!r}; "
                f"expected one of {EMPTY_PILE_POLICIES}"
            )
        if not 0 <= self.extra_card_seat < NUM_PLAYERS:
            raise ValueError(f"extra_card_seat out of range: {self.extra_card_seat}")
        if len(self.player_names) != NUM_PLAYERS:
            raise ValueError(f"Exactly {NUM_PLAYERS} player names are required")
        if self.hand_size < 1 or self.hand_size * NUM_PLAYERS + 1 > 52:
            raise ValueError(f"hand_size out of range: {self.hand_size}")
        if self.max_draws_per_turn < 0 or self.automated_turn_delay < 0:
            raise ValueError("max_draws_per_turn and automated_turn_delay must be >= 0")


@dataclass(frozen=True)
class PlayerState:
    """
    Immutable representation of a seat at the table.

    Attributes:
        index: Seat number, 0 for the human
        name: Display name of the player
        hand: Cards in the player's hand
        score: Cumulative score across rounds
    """

    index: int = 0
    name: str = "Player"
    hand: Tuple[Card, ...] = ()
    score: int = 0

    @property
    def is_human(self) -> bool:
        return self.index == HUMAN_SEAT

    @property
    def card_count(self) -> int:
        """Get the number of cards in the player's hand."""
        return len(self.hand)

    @property
    def hand_value(self) -> int:
        """Penalty points currently held."""
        return sum(card.points for card in self.hand)

    def has_card(self, card: Card) -> bool:
        return card in self.hand


@dataclass(frozen=True)
class RoundOutcome:
    """
    The result of a finished round.

    Attributes:
        winner_index: Seat that emptied its hand, or None for a drawn round
        winner_label: Display label of the winner ("You", "Player 3", ...)
        penalties: Points left in each seat's hand, zero for the winner
        score_deltas: Change applied to each seat's score
        reason: What ended the round
    """

    winner_index: Optional[int]
    winner_label: Optional[str]
    penalties: Tuple[int, ...]
    score_deltas: Tuple[int, ...]
    reason: RoundEndReason = RoundEndReason.HAND_EMPTIED

    @property
    def is_draw(self) -> bool:
        return self.winner_index is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "winner_index": self.winner_index,
            "winner_label": self.winner_label,
            "penalties": list(self.penalties),
            "score_deltas": list(self.score_deltas),
            "reason": self.reason.name,
        }


@dataclass(frozen=True)
class GameState:
    """
    Immutable representation of the Digu game state.

    Attributes:
        id: Unique identifier for this game session
        players: The four seats, human first
        stage: Current stage of the round
        active_player_index: Seat whose turn it is
        draw_pile: Face-down cards; the last element is the top
        discard_pile: Face-up cards, most recent first
        rules: Rules for this game
        round_number: Rounds started in this session
        draws_this_turn: Draws taken by the active seat this turn
        outcome: Result of the current round once it has ended
        timestamp: Time of the transition that produced this state
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    players: Tuple[PlayerState, ...] = field(
        default_factory=lambda: tuple(
            PlayerState(index=i, name=name)
            for i, name in enumerate(DEFAULT_PLAYER_NAMES)
        )
    )
    stage: GameStage = GameStage.WAITING_TO_DEAL
    active_player_index: int = HUMAN_SEAT
    draw_pile: Tuple[Card, ...] = ()
    discard_pile: Tuple[Card, ...] = ()
    rules: DiguRules = field(default_factory=DiguRules)
    round_number: int = 0
    draws_this_turn: int = 0
    outcome: Optional[RoundOutcome] = None
    timestamp: float = field(default_factory=lambda: time.time())

    @property
    def hands(self) -> Tuple[Tuple[Card, ...], ...]:
        return tuple(player.hand for player in self.players)

    @property
    def scores(self) -> Tuple[int, ...]:
        return tuple(player.score for player in self.players)

    @property
    def deck_size(self) -> int:
        """Get the number of cards left in the draw pile."""
        return len(self.draw_pile)

    @property
    def active_player(self) -> PlayerState:
        return self.players[self.active_player_index]

    @property
    def top_discard(self) -> Optional[Card]:
        return self.discard_pile[0] if self.discard_pile else None

    @property
    def round_in_progress(self) -> bool:
        return self.stage in (GameStage.HUMAN_TURN, GameStage.AUTOMATED_TURN)

    @property
    def is_human_turn(self) -> bool:
        return self.stage == GameStage.HUMAN_TURN

    def all_cards(self) -> List[Card]:
        """Every card the round is tracking: draw pile, hands and discards."""
        cards = list(self.draw_pile)
        for player in self.players:
            cards.extend(player.hand)
        cards.extend(self.discard_pile)
        return cards

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the game state to a dictionary suitable for serialization.

        Returns:
            Dictionary representation of the game state
        """
        return {
            "id": self.id,
            "stage": self.stage.name,
            "round_number": self.round_number,
            "active_player_index": self.active_player_index,
            "draws_this_turn": self.draws_this_turn,
            "draw_pile": [str(card) for card in self.draw_pile],
            "discard_pile": [str(card) for card in self.discard_pile],
            "outcome": self.outcome.to_dict() if self.outcome else None,
            "timestamp": self.timestamp,
            "players": [
                {
                    "index": player.index,
                    "name": player.name,
                    "hand": [str(card) for card in player.hand],
                    "score": player.score,
                }
                for player in self.players
            ],
            "rules": {
                "hand_size": self.rules.hand_size,
                "extra_card_seat": self.rules.extra_card_seat,
                "win_bonus": self.rules.win_bonus,
                "empty_pile_policy": self.rules.empty_pile_policy,
                "max_draws_per_turn": self.rules.max_draws_per_turn,
                "automated_turn_delay": self.rules.automated_turn_delay,
                "discard_preview": self.rules.discard_preview,
            },
        }

    def to_adapter_format(self) -> Dict[str, Any]:
        """
        Convert the game state to a format suitable for platform adapters.

        Only the human's cards are revealed; automated seats show a count.

        Returns:
            Dictionary in adapter-friendly format
        """
        return {
            "game_id": self.id,
            "stage": self.stage.name,
            "round_number": self.round_number,
            "active_player": self.active_player.name,
            "deck_remaining": len(self.draw_pile),
            "discard_pile": [
                str(card) for card in self.discard_pile[: self.rules.discard_preview]
            ],
            "winner": self.outcome.winner_label if self.outcome else None,
            "players": [
                {
                    "name": player.name,
                    "index": player.index,
                    "hand_size": len(player.hand),
                    "score": player.score,
                    "cards": (
                        [str(card) for card in player.hand] if player.is_human else []
                    ),
                }
                for player in self.players
            ],
        }


@dataclass(frozen=True)
class ActionResult:
    """
    What a public operation did.

    Attributes:
        accepted: Whether the action changed the game
        reason: Why it was refused, when it was
        card: The card drawn or discarded
        hand: The acting seat's hand afterwards
        discard_pile: The discard pile afterwards
        round_ended: Whether the action finished the round
        outcome: The round outcome when ``round_ended`` is set
    """

    accepted: bool
    reason: Optional[RejectionReason] = None
    card: Optional[Card] = None
    hand: Tuple[Card, ...] = ()
    discard_pile: Tuple[Card, ...] = ()
    round_ended: bool = False
    outcome: Optional[RoundOutcome] = None

    def __bool__(self) -> bool:
        return self.accepted
