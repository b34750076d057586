"""
Digu game rules.

This package provides the rules of Digu: immutable state models, the deal,
meld validation, scoring, automated-seat strategies and the pure state
transitions that tie them together.
"""

from digu.game.state import (
    ActionResult as ActionResult,
    DiguRules as DiguRules,
    GameStage as GameStage,
    GameState as GameState,
    PlayerState as PlayerState,
    RejectionReason as RejectionReason,
    RoundEndReason as RoundEndReason,
    RoundOutcome as RoundOutcome,
)
from digu.game.dealing import DealResult as DealResult, deal as deal
from digu.game.melds import MeldType as MeldType, classify_meld as classify_meld, is_meld as is_meld
from digu.game.scoring import (
    apply_outcome as apply_outcome,
    card_value as card_value,
    hand_penalty as hand_penalty,
    score_round as score_round,
)
from digu.game.strategy import (
    STRATEGIES as STRATEGIES,
    discard_first_card as discard_first_card,
    discard_highest_deadwood as discard_highest_deadwood,
    get_strategy as get_strategy,
)
from digu.game.transitions import StateTransitionEngine as StateTransitionEngine

__all__ = [
    "ActionResult",
    "DiguRules",
    "GameStage",
    "GameState",
    "PlayerState",
    "RejectionReason",
    "RoundEndReason",
    "RoundOutcome",
    "DealResult",
    "deal",
    "MeldType",
    "classify_meld",
    "is_meld",
    "apply_outcome",
    "card_value",
    "hand_penalty",
    "score_round",
    "STRATEGIES",
    "discard_first_card",
    "discard_highest_deadwood",
    "get_strategy",
    "StateTransitionEngine",
]
