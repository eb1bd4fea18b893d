"""
Perceptual weighting stage.

Low frequencies carry most of what a listener perceives as "the beat",
so each bin is attenuated by a curve that falls off with frequency.
"""

import numpy as np

from spectramirror.config import WEIGHTING_EXPONENTS, Profile


def perceptual_weights(n_bins: int, exponent: float) -> np.ndarray:
    """
    Weight curve ``1 - (i/B)^p`` for bins 0..B-1.

    Args:
        n_bins: Number of bins B.
        exponent: Curve exponent p; smaller values suppress highs harder.

    Returns:
        Non-increasing weights, 1.0 at bin 0.
    """
    if n_bins <= 0:
        return np.zeros(0, dtype=np.float64)
    position = np.arange(n_bins, dtype=np.float64) / n_bins
    return 1.0 - np.power(position, exponent)


class PerceptualWeighting:
    """Applies a cached weighting curve to a magnitude array in place."""

    def __init__(self, n_bins: int, profile: Profile = Profile.FULL):
        self.n_bins = n_bins
        self.profile = Profile(profile)
        self.exponent = WEIGHTING_EXPONENTS[self.profile]
        self.weights = perceptual_weights(n_bins, self.exponent)

    def apply(self, magnitudes: np.ndarray) -> np.ndarray:
        """Multiply magnitudes by the curve, overwriting them."""
        magnitudes *= self.weights
        return magnitudes
