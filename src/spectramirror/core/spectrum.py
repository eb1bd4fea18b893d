"""
Spectral transform and magnitude extraction stages.
"""

import numpy as np
from scipy import fft as scipy_fft

from spectramirror.config import MagnitudeMode
from spectramirror.errors import TransformSizeError


class SpectralTransform:
    """Forward DFT with a size fixed at construction."""

    def __init__(self, frame_size: int):
        self.frame_size = frame_size
        # Complex staging buffer, zero imaginary part
        self._staging = np.zeros(frame_size, dtype=np.complex128)

    def forward(self, windowed: np.ndarray) -> np.ndarray:
        """
        Compute the DFT of one windowed block.

        Args:
            windowed: Real samples, length must equal frame_size.

        Returns:
            N complex coefficients; only the first N/2 are used downstream.

        Raises:
            TransformSizeError: If the block length differs from frame_size.
        """
        if len(windowed) != self.frame_size:
            raise TransformSizeError(self.frame_size, len(windowed))

        self._staging.real = windowed
        self._staging.imag = 0.0
        return scipy_fft.fft(self._staging)


class MagnitudeExtractor:
    """
    Converts spectral coefficients into non-negative magnitudes.

    The result is indexed by frequency bin, covering the first N/2 bins
    (the upper half of a real signal's spectrum mirrors the lower half).
    """

    def __init__(
        self,
        frame_size: int,
        mode: MagnitudeMode = MagnitudeMode.SCALED,
        divisor: float = 32.0,
    ):
        """
        Initialize the extractor.

        Args:
            frame_size: Transform size N.
            mode: Scaling rule (see MagnitudeMode).
            divisor: Fixed divisor for the SCALED mode.
        """
        self.frame_size = frame_size
        self.n_bins = frame_size // 2
        self.mode = MagnitudeMode(mode)
        self.divisor = divisor

    def extract(self, coefficients: np.ndarray, out: np.ndarray | None = None) -> np.ndarray:
        """
        Compute magnitudes for bins [0, N/2).

        Args:
            coefficients: Output of SpectralTransform.forward.
            out: Optional float64 buffer of length N/2.

        Returns:
            Magnitude per bin.
        """
        if out is None:
            out = np.empty(self.n_bins, dtype=np.float64)

        np.abs(coefficients[: self.n_bins], out=out)

        if self.mode is MagnitudeMode.SCALED:
            np.sqrt(out, out=out)
            out /= self.divisor
        else:
            out /= self.frame_size
            np.sqrt(out, out=out)
            if self.mode is MagnitudeMode.LOUDNESS:
                compress_loudness(out, out=out)

        return out


def compress_loudness(magnitudes: np.ndarray, out: np.ndarray | None = None) -> np.ndarray:
    """
    Logarithmic compression ``1 + 2*log10(m)`` clamped to [0, 1].

    Zero or negative magnitudes map to 0.0 instead of -inf/NaN.
    """
    if out is None:
        out = np.empty_like(magnitudes, dtype=np.float64)

    positive = magnitudes > 0.0
    np.log10(magnitudes, out=out, where=positive)
    out[positive] = 1.0 + 2.0 * out[positive]
    out[~positive] = 0.0
    np.clip(out, 0.0, 1.0, out=out)
    return out
