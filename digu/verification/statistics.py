"""
Statistical validation of the Digu shuffle.

This module checks that the Fisher-Yates shuffle places every card in every
position equally often. It shuffles many fresh decks, tallies a card-by-position
contingency table and runs chi-square tests against the uniform expectation.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import random

import numpy as np
import scipy.stats as stats

from digu.common.deck import build_deck, shuffle

DECK_SIZE = 52


@dataclass
class ShuffleUniformityReport:
    """
    Result of a shuffle uniformity run.

    Attributes:
        trials: Number of decks shuffled
        chi_square: Statistic over the whole card-by-position table
        degrees_of_freedom: (52 - 1) ** 2, both margins being fixed
        p_value: Probability of a statistic at least this large under uniformity
        min_card_p_value: Smallest per-card p-value (51 degrees of freedom each)
        max_relative_deviation: Largest |observed - expected| / expected cell
    """

    trials: int
    chi_square: float
    degrees_of_freedom: int
    p_value: float
    min_card_p_value: float
    max_relative_deviation: float

    def passed(self, alpha: float = 0.01) -> bool:
        """Whether uniformity survives the table-wide test at level ``alpha``."""
        return self.p_value >= alpha

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trials": self.trials,
            "chi_square": self.chi_square,
            "degrees_of_freedom": self.degrees_of_freedom,
            "p_value": self.p_value,
            "min_card_p_value": self.min_card_p_value,
            "max_relative_deviation": self.max_relative_deviation,
        }


def position_counts(trials: int, rng: Optional[random.Random] = None) -> np.ndarray:
    """
    Count how often each card lands in each position.

    Args:
        trials: Number of fresh decks to shuffle
        rng: Random source passed to the shuffle

    Returns:
        A 52x52 integer array; row = card in build order, column = position
    """
    reference = build_deck()
    index = {card: i for i, card in enumerate(reference)}
    counts = np.zeros((DECK_SIZE, DECK_SIZE), dtype=np.int64)

    for _ in range(trials):
        cards = shuffle(list(reference), rng)
        rows = [index[card] for card in cards]
        counts[rows, np.arange(DECK_SIZE)] += 1

    return counts


def shuffle_uniformity(
    trials: int = 2000, rng: Optional[random.Random] = None
) -> ShuffleUniformityReport:
    """
    Run the uniformity check.

    Args:
        trials: Number of decks to shuffle; the expected count per cell is
            ``trials / 52``, so a few thousand trials keep it comfortably above 5
        rng: Random source passed to the shuffle

    Returns:
        ShuffleUniformityReport with the test statistics

    Raises:
        ValueError: If trials is not positive
    """
    if trials <= 0:
        raise ValueError("trials must be positive")

    counts = position_counts(trials, rng)
    expected = trials / DECK_SIZE

    chi_square = float(((counts - expected) ** 2 / expected).sum())
    dof = (DECK_SIZE - 1) ** 2
    p_value = float(stats.chi2.sf(chi_square, dof))

    per_card = stats.chisquare(counts, axis=1)
    min_card_p = float(np.min(per_card.pvalue))
    max_dev = float(np.max(np.abs(counts - expected)) / expected)

    return ShuffleUniformityReport(
        trials=trials,
        chi_square=chi_square,
        degrees_of_freedom=dof,
        p_value=p_value,
        min_card_p_value=min_card_p,
        max_relative_deviation=max_dev,
    )
