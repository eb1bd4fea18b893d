"""
Symmetric remap stage.

Lays the selected bins out across the output width as a mirrored
pattern: the weakest retained bin sits at both outer edges and the
strongest sits next to the center, so loud content appears in the
middle and tapers off towards the sides.

Layout for M outputs and K placed bins (ascending magnitude)::

    step  = max(1, (M // 2) // K)
    left  = p * step
    right = (M - 1) - p * step

Positions skipped by ``step`` are filled from the two neighbouring
placed values; everything between the innermost left and right
positions takes the largest magnitude.
"""

import numpy as np

from spectramirror.config import GapFill
from spectramirror.core.selection import SelectedBins


class SymmetricRemapper:
    """Maps ascending selected bins onto a mirrored output array."""

    def __init__(self, output_width: int, gap_fill: GapFill = GapFill.MIDPOINT):
        """
        Initialize the remapper.

        Args:
            output_width: Fixed output length M.
            gap_fill: MIDPOINT averages the bounding values, LINEAR
                interpolates between them.
        """
        self.output_width = output_width
        self.half_width = output_width // 2
        self.gap_fill = GapFill(gap_fill)

    def step_for(self, n_placed: int) -> int:
        """Index stride between consecutive placed bins."""
        if n_placed <= 0:
            return 1
        return max(1, self.half_width // n_placed)

    def remap(self, selected: SelectedBins, out: np.ndarray | None = None) -> np.ndarray:
        """
        Build the mirrored output for one frame.

        Args:
            selected: Bins ascending by magnitude (strongest last).
            out: Optional float buffer of length M to overwrite.

        Returns:
            Output magnitudes in [0, 1] with out[i] == out[M-1-i].
        """
        width = self.output_width
        half = self.half_width

        if out is None:
            out = np.zeros(width, dtype=np.float64)
        else:
            out[:] = 0.0

        magnitudes = selected.magnitudes
        n_selected = len(magnitudes)
        if n_selected == 0:
            return out

        largest = magnitudes[-1]

        # Only half the width is available per side; drop the weakest
        n_placed = min(n_selected, half)
        inner_start = 0

        if n_placed > 0:
            placed = magnitudes[n_selected - n_placed:]
            step = self.step_for(n_placed)
            left = np.arange(n_placed) * step
            out[left] = placed

            if step > 1 and n_placed > 1:
                lower = placed[:-1]
                upper = placed[1:]
                for offset in range(1, step):
                    if self.gap_fill is GapFill.LINEAR:
                        values = lower + (upper - lower) * (offset / step)
                    else:
                        values = (lower + upper) / 2.0
                    out[left[:-1] + offset] = values

            inner_start = int(left[-1]) + 1

        # Center one or two indices plus any leftover between the sides
        out[inner_start:width - inner_start] = largest

        # Right half mirrors the left half
        if half:
            out[width - half:] = out[:half][::-1]

        np.clip(out, 0.0, 1.0, out=out)
        return out
