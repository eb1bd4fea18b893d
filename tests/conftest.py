"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from spectramirror.io.source import encode_byte_samples

# Default sample rate for test audio
TEST_SR = 22050
FRAME_SIZE = 1024


@pytest.fixture
def sample_rate() -> int:
    """Default sample rate for tests."""
    return TEST_SR


@pytest.fixture
def silence_block() -> bytes:
    """One frame of byte-encoded silence."""
    return bytes([128] * FRAME_SIZE)


@pytest.fixture
def low_sine_block() -> np.ndarray:
    """
    One frame holding exactly 8 cycles of a sine (bin 8 of 1024).

    Returns:
        uint8 block, 128-centred.
    """
    t = np.arange(FRAME_SIZE)
    y = 0.8 * np.sin(2 * np.pi * 8 * t / FRAME_SIZE)
    return encode_byte_samples(y)


@pytest.fixture
def noise_block() -> np.ndarray:
    """One frame of reproducible white noise."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, FRAME_SIZE, dtype=np.uint8)


@pytest.fixture
def adversarial_blocks() -> list[np.ndarray]:
    """Extreme byte patterns: all 0x00, all 0xFF, alternating."""
    alternating = np.zeros(FRAME_SIZE, dtype=np.uint8)
    alternating[::2] = 255
    return [
        np.zeros(FRAME_SIZE, dtype=np.uint8),
        np.full(FRAME_SIZE, 255, dtype=np.uint8),
        alternating,
    ]


@pytest.fixture
def mixed_signal(sample_rate: int) -> tuple[np.ndarray, int]:
    """
    Generate a 2 second chord with clicks at 120 BPM.

    Returns:
        Tuple of (audio_signal, sample_rate).
    """
    duration = 2.0
    t = np.linspace(0, duration, int(sample_rate * duration), endpoint=False)

    harmonic = (
        0.2 * np.sin(2 * np.pi * 261.63 * t) +  # C4
        0.2 * np.sin(2 * np.pi * 329.63 * t) +  # E4
        0.2 * np.sin(2 * np.pi * 392.00 * t)    # G4
    )

    bpm = 120
    samples_per_beat = int(sample_rate * 60 / bpm)
    percussive = np.zeros(len(t))
    click_duration = int(sample_rate * 0.01)
    for beat_start in range(0, len(t), samples_per_beat):
        click_end = min(beat_start + click_duration, len(t))
        decay = np.exp(-np.linspace(0, 5, click_end - beat_start))
        percussive[beat_start:click_end] = 0.3 * decay

    y = (harmonic + percussive).astype(np.float32)
    return y, sample_rate


@pytest.fixture
def temp_audio_file(tmp_path, mixed_signal):
    """Create a temporary audio file for testing file I/O."""
    import soundfile as sf

    y, sr = mixed_signal
    audio_path = tmp_path / "test_audio.wav"
    sf.write(audio_path, y, sr)
    return audio_path
