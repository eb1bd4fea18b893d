"""Tests for the spectral transform and magnitude extraction."""

import numpy as np
import pytest

from spectramirror.config import MagnitudeMode
from spectramirror.core.spectrum import (
    MagnitudeExtractor,
    SpectralTransform,
    compress_loudness,
)
from spectramirror.errors import ConfigurationError, TransformSizeError


class TestSpectralTransform:
    """Tests for the fixed-size forward DFT."""

    def test_matches_numpy_fft(self):
        """Output should equal the reference DFT of the real block."""
        rng = np.random.default_rng(0)
        block = rng.uniform(-1, 1, 256)
        transform = SpectralTransform(256)

        result = transform.forward(block)

        assert result.shape == (256,)
        assert np.allclose(result, np.fft.fft(block))

    def test_deterministic(self):
        """Identical input gives identical output."""
        block = np.linspace(-1, 1, 128)
        transform = SpectralTransform(128)

        first = transform.forward(block).copy()
        second = transform.forward(block)

        assert np.array_equal(first, second)

    def test_size_mismatch_raises(self):
        """A block of the wrong length is a contract violation."""
        transform = SpectralTransform(128)

        with pytest.raises(TransformSizeError) as excinfo:
            transform.forward(np.zeros(64))

        assert excinfo.value.expected == 128
        assert excinfo.value.actual == 64
        assert isinstance(excinfo.value, ConfigurationError)

    def test_ignores_previous_frame(self):
        """No state from a previous block should leak into the next."""
        transform = SpectralTransform(64)
        transform.forward(np.ones(64))

        result = transform.forward(np.zeros(64))

        assert np.all(result == 0)


class TestMagnitudeExtractor:
    """Tests for magnitude scaling modes."""

    def test_returns_half_spectrum(self):
        extractor = MagnitudeExtractor(1024)
        result = extractor.extract(np.ones(1024, dtype=complex))

        assert result.shape == (512,)

    def test_scaled_mode(self):
        """Scaled magnitude is sqrt(|c|) / divisor."""
        extractor = MagnitudeExtractor(8, MagnitudeMode.SCALED, divisor=32.0)
        coefficients = np.array([0, 3 + 4j, -16, 64j, 0, 0, 0, 0], dtype=complex)

        result = extractor.extract(coefficients)

        assert np.allclose(result, [0.0, np.sqrt(5) / 32, 4 / 32, 8 / 32])

    def test_rms_mode(self):
        """RMS magnitude is sqrt(|c| / N)."""
        extractor = MagnitudeExtractor(8, MagnitudeMode.RMS)
        coefficients = np.array([8, 2, 0, 32, 0, 0, 0, 0], dtype=complex)

        result = extractor.extract(coefficients)

        assert np.allclose(result, [1.0, 0.5, 0.0, 2.0])

    def test_loudness_mode_clamped(self):
        """Loudness compression stays in [0, 1] and maps zero to 0."""
        extractor = MagnitudeExtractor(8, MagnitudeMode.LOUDNESS)
        coefficients = np.array([0, 8, 800, 0.08, 0, 0, 0, 0], dtype=complex)

        result = extractor.extract(coefficients)

        assert np.all(np.isfinite(result))
        assert result[0] == 0.0
        assert np.isclose(result[1], 1.0)   # rms 1 -> 1 + 0
        assert result[2] == 1.0             # rms 10 -> clamped
        assert np.isclose(result[3], 0.0)   # rms 0.1 -> 1 - 2 -> clamped

    def test_writes_into_given_buffer(self):
        extractor = MagnitudeExtractor(16)
        buffer = np.empty(8)

        result = extractor.extract(np.zeros(16, dtype=complex), out=buffer)

        assert result is buffer
        assert np.all(buffer == 0.0)


class TestCompressLoudness:
    """Tests for logarithmic compression of degenerate values."""

    def test_non_positive_maps_to_zero(self):
        result = compress_loudness(np.array([0.0, -1.0, np.nan]))

        assert np.array_equal(result, [0.0, 0.0, 0.0])

    def test_midrange_value(self):
        # 1 + 2*log10(0.5) ~= 0.398
        result = compress_loudness(np.array([0.5]))

        assert np.isclose(result[0], 1 + 2 * np.log10(0.5))
