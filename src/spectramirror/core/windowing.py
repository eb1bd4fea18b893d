"""
Windowing stage.

Turns a block of byte-encoded audio samples (128 == silence) into a
fixed-length block of real samples, tapered by a Hann window to reduce
spectral leakage before the transform.
"""

from typing import Sequence, Union

import numpy as np
from scipy import signal as scipy_signal

from spectramirror.config import WindowMode

ByteSamples = Union[bytes, bytearray, memoryview, np.ndarray, Sequence[int]]


def decode_samples(samples: ByteSamples) -> np.ndarray:
    """
    View a byte container as a uint8 array.

    Args:
        samples: bytes, bytearray, memoryview, integer array or any
            sequence of integers.

    Returns:
        1-D uint8 array (no copy for contiguous byte buffers).
    """
    if isinstance(samples, (bytes, bytearray)):
        return np.frombuffer(samples, dtype=np.uint8)
    if (
        isinstance(samples, memoryview)
        and samples.c_contiguous
        and samples.format in ("B", "c")
    ):
        return np.frombuffer(samples, dtype=np.uint8)

    array = np.asarray(samples)
    if array.dtype.kind == "S" and array.dtype.itemsize == 1:
        array = array.view(np.uint8)
    if array.dtype == np.uint8:
        return array.ravel()
    return np.clip(array, 0, 255).astype(np.uint8).ravel()


class SampleWindow:
    """
    Normalizes and windows one raw sample block per frame.

    The window table is computed once; ``apply`` writes into a
    caller-owned buffer so no memory is allocated per frame.
    """

    def __init__(
        self,
        frame_size: int,
        mode: WindowMode = WindowMode.HANN,
        amplification: float = 1.2,
    ):
        """
        Initialize the window.

        Args:
            frame_size: Fixed block length N.
            mode: HANN for tapered samples, RAW for flat amplification.
            amplification: Gain applied in RAW mode.
        """
        self.frame_size = frame_size
        self.mode = WindowMode(mode)
        self.amplification = amplification

        if self.mode is WindowMode.HANN:
            # Periodic Hann: 0.5 * (1 - cos(2*pi*i/N))
            self.coefficients = scipy_signal.get_window("hann", frame_size, fftbins=True)
        else:
            self.coefficients = np.full(frame_size, amplification, dtype=np.float64)

    def apply(self, samples: ByteSamples, out: np.ndarray | None = None) -> np.ndarray:
        """
        Normalize, pad/truncate and window a sample block.

        Args:
            samples: Raw byte samples of any length.
            out: Optional float64 buffer of length N to write into.

        Returns:
            Windowed samples, always of length N.
        """
        if out is None:
            out = np.empty(self.frame_size, dtype=np.float64)

        raw = decode_samples(samples)
        n = min(len(raw), self.frame_size)

        # (s / 128) - 1 maps bytes to [-1, 1); missing samples are silence
        np.divide(raw[:n], 128.0, out=out[:n])
        out[:n] -= 1.0
        out[n:] = 0.0

        out *= self.coefficients
        return out
