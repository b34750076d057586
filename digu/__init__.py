"""
Digu: a game-state engine for the Digu card game.

Four seats (one human, three automated) are dealt from a shuffled 52-card
deck, draw and discard in turn, and score when a hand empties.
"""

__version__ = "0.1.0"
