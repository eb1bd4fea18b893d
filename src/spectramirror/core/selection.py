"""
Salience selection stage.

Keeps only the strongest fraction of weighted bins, which both cleans
up the picture and bounds the work done by the remap stage.
"""

import math
from dataclasses import dataclass

import numpy as np


@dataclass
class SelectedBins:
    """Retained bins, ordered by ascending weighted magnitude."""

    indices: np.ndarray     # original frequency index of each bin
    magnitudes: np.ndarray  # weighted magnitude of each bin

    def __len__(self) -> int:
        return len(self.magnitudes)

    @property
    def strongest_index(self) -> int | None:
        """Frequency index of the largest retained bin, if any."""
        if len(self.indices) == 0:
            return None
        return int(self.indices[-1])


def retained_count(n_bins: int, retention: float) -> int:
    """Number of bins kept: ``ceil(n_bins * retention)``."""
    return min(n_bins, int(math.ceil(n_bins * retention)))


class SalienceSelector:
    """
    Ranks bins by weighted magnitude and keeps the top fraction.
    """

    def __init__(self, n_bins: int, retention: float = 0.25):
        """
        Initialize the selector.

        Args:
            n_bins: Number of bins B per frame.
            retention: Fraction r of bins to keep.
        """
        self.n_bins = n_bins
        self.retention = retention
        self.k = retained_count(n_bins, retention)

    def select(self, magnitudes: np.ndarray) -> SelectedBins:
        """
        Select the K most salient bins.

        Sorting is stable, so equal magnitudes keep their frequency
        order and the result is identical for identical input.

        Args:
            magnitudes: Weighted magnitude per bin.

        Returns:
            SelectedBins ascending by magnitude (largest last).
        """
        # Descending by magnitude, lower index first on ties
        ranked = np.argsort(-magnitudes, kind="stable")[: self.k]

        # Re-sort the survivors ascending for the remap stage
        ascending = ranked[np.argsort(magnitudes[ranked], kind="stable")]

        return SelectedBins(
            indices=ascending,
            magnitudes=magnitudes[ascending],
        )
