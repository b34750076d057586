"""
Tests for shuffle uniformity.

These tests check that the Fisher-Yates shuffle spreads every card evenly over
every position, and that a deliberately broken shuffle is caught.
"""

import random

import numpy as np
import pytest
import scipy.stats as stats

from digu.common.card import Card, Rank, Suit
from digu.common.deck import build_deck, shuffle
from digu.verification import position_counts, shuffle_uniformity


def test_position_counts_margins():
    counts = position_counts(200, random.Random(5))
    assert counts.shape == (52, 52)
    # every shuffle puts each card somewhere and fills each position once
    assert np.all(counts.sum(axis=0) == 200)
    assert np.all(counts.sum(axis=1) == 200)


def test_top_card_is_uniform():
    rng = random.Random(2024)
    ace = Card(Suit.SPADES, Rank.ACE)
    observed = np.zeros(52, dtype=int)
    for _ in range(5200):
        observed[shuffle(build_deck(), rng).index(ace)] += 1
    assert stats.chisquare(observed).pvalue > 0.001


def test_shuffle_uniformity_passes():
    report = shuffle_uniformity(3000, random.Random(77))
    assert report.trials == 3000
    assert report.degrees_of_freedom == 51 * 51
    assert report.passed(alpha=0.001)
    assert 0.0 <= report.min_card_p_value <= 1.0


def test_biased_shuffle_is_detected():
    class OffByOne(random.Random):
        # the classic mistake: never leave a card where it is
        def randint(self, a, b):
            return super().randint(a, b - 1)

    report = shuffle_uniformity(3000, OffByOne(8))
    assert not report.passed(alpha=0.001)


def test_shuffle_uniformity_needs_trials():
    with pytest.raises(ValueError):
        shuffle_uniformity(0)


def test_report_to_dict():
    data = shuffle_uniformity(100, random.Random(1)).to_dict()
    assert data["trials"] == 100
    assert set(data) == {
        "trials",
        "chi_square",
        "degrees_of_freedom",
        "p_value",
        "min_card_p_value",
        "max_relative_deviation",
    }
