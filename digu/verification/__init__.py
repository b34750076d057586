"""
Verification tools for Digu.

This package provides statistical checks of the engine's randomness.
"""

from digu.verification.statistics import (
    ShuffleUniformityReport,
    position_counts,
    shuffle_uniformity,
)

__all__ = ["ShuffleUniformityReport", "position_counts", "shuffle_uniformity"]
