"""
Audio block source.

Feeds recorded audio to the frame pipeline the way a browser analyser
node does in a live setup: one block of byte-encoded time-domain
samples per video frame.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union

import librosa
import numpy as np


def encode_byte_samples(y: np.ndarray) -> np.ndarray:
    """
    Encode float audio in [-1, 1] as unsigned bytes centred on 128.

    Args:
        y: Float audio samples.

    Returns:
        uint8 array, clipped to [0, 255].
    """
    encoded = np.round(128.0 * (1.0 + np.asarray(y, dtype=np.float64)))
    return np.clip(encoded, 0, 255).astype(np.uint8)


@dataclass
class AudioBlockSource:
    """
    Splits a mono signal into per-frame byte blocks.

    Block ``i`` starts at ``round(i * sample_rate / fps)`` and spans
    ``frame_size`` samples; blocks near the end may be short.
    """

    samples: np.ndarray
    sample_rate: int
    frame_size: int = 1024
    fps: int = 60

    @classmethod
    def from_file(
        cls,
        audio_path: Union[str, Path],
        frame_size: int = 1024,
        fps: int = 60,
        sample_rate: int | None = 22050,
    ) -> "AudioBlockSource":
        """
        Load an audio file (mono, resampled).

        Args:
            audio_path: Path to audio file (wav, mp3, flac).
            frame_size: Samples per block.
            fps: Blocks per second of audio.
            sample_rate: Target sample rate. None preserves original.
        """
        y, sr = librosa.load(audio_path, sr=sample_rate, mono=True)
        return cls(samples=y, sample_rate=int(sr), frame_size=frame_size, fps=fps)

    @classmethod
    def from_array(
        cls,
        y: np.ndarray,
        sample_rate: int,
        frame_size: int = 1024,
        fps: int = 60,
    ) -> "AudioBlockSource":
        """Wrap an in-memory signal."""
        return cls(samples=np.asarray(y), sample_rate=sample_rate, frame_size=frame_size, fps=fps)

    @property
    def duration(self) -> float:
        """Signal length in seconds."""
        return len(self.samples) / self.sample_rate

    @property
    def hop(self) -> float:
        """Samples between consecutive block starts."""
        return self.sample_rate / self.fps

    @property
    def n_frames(self) -> int:
        """Number of blocks the signal yields."""
        if len(self.samples) == 0:
            return 0
        return int(np.ceil(len(self.samples) / self.hop))

    def frame_times(self) -> np.ndarray:
        """Start time in seconds of every block."""
        return np.arange(self.n_frames) / self.fps

    def iter_blocks(self) -> Iterator[np.ndarray]:
        """Yield one uint8 block per frame."""
        encoded = encode_byte_samples(self.samples)
        for i in range(self.n_frames):
            start = int(round(i * self.hop))
            yield encoded[start:start + self.frame_size]
