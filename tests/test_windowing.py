"""Tests for the SampleWindow module."""

import numpy as np
import pytest

from spectramirror.config import WindowMode
from spectramirror.core.windowing import SampleWindow, decode_samples


class TestSampleWindow:
    """Tests for normalization, padding and windowing."""

    @pytest.mark.parametrize("length", [0, 512, 1024, 2048])
    def test_output_length_is_frame_size(self, length):
        """Any input length should produce exactly N samples."""
        window = SampleWindow(1024)
        result = window.apply(bytes([200] * length))

        assert len(result) == 1024

    def test_hann_coefficients_match_formula(self):
        """Window table should be 0.5 * (1 - cos(2*pi*i/N))."""
        n = 1024
        window = SampleWindow(n)
        i = np.arange(n)
        expected = 0.5 * (1 - np.cos(2 * np.pi * i / n))

        assert np.allclose(window.coefficients, expected)

    def test_normalization(self):
        """Byte 128 maps to 0, byte 0 maps to -1 before windowing."""
        window = SampleWindow(16, mode=WindowMode.RAW, amplification=1.0)
        samples = bytes([128, 0, 192] + [128] * 13)

        result = window.apply(samples)

        assert result[0] == 0.0
        assert result[1] == -1.0
        assert result[2] == 0.5

    def test_short_input_zero_padded(self):
        """Missing samples should be silence (0.0)."""
        window = SampleWindow(1024)
        result = window.apply(np.full(256, 255, dtype=np.uint8))

        assert np.all(result[256:] == 0.0)
        assert np.any(result[:256] != 0.0)

    def test_long_input_truncated(self):
        """Samples beyond N are ignored."""
        window = SampleWindow(64, mode=WindowMode.RAW)
        head = np.full(64, 160, dtype=np.uint8)
        tail = np.full(64, 0, dtype=np.uint8)

        truncated = window.apply(np.concatenate([head, tail]))
        exact = window.apply(head)

        assert np.array_equal(truncated, exact)

    def test_raw_mode_amplifies(self):
        """Raw mode skips the window and applies flat gain."""
        window = SampleWindow(32, mode=WindowMode.RAW, amplification=1.2)
        result = window.apply(np.zeros(32, dtype=np.uint8))

        assert np.allclose(result, -1.2)

    def test_values_within_range(self, adversarial_blocks):
        """Windowed values stay within [-1.2, 1.2] in both modes."""
        for mode in WindowMode:
            window = SampleWindow(1024, mode=mode)
            for block in adversarial_blocks:
                result = window.apply(block)
                assert np.all(np.abs(result) <= 1.2 + 1e-12)

    def test_writes_into_given_buffer(self):
        """apply() should reuse the caller's buffer."""
        window = SampleWindow(128)
        buffer = np.full(128, 7.0)

        result = window.apply(b"", out=buffer)

        assert result is buffer
        assert np.all(buffer == 0.0)

    def test_buffer_reuse_has_no_stale_data(self):
        """A short block after a long one must not keep old samples."""
        window = SampleWindow(128, mode=WindowMode.RAW)
        buffer = np.empty(128)

        window.apply(np.full(128, 255, dtype=np.uint8), out=buffer)
        window.apply(np.full(10, 255, dtype=np.uint8), out=buffer)

        assert np.all(buffer[10:] == 0.0)


class TestDecodeSamples:
    """Tests for byte container decoding."""

    def test_accepts_bytes_and_bytearray(self):
        assert decode_samples(b"\x00\xff").tolist() == [0, 255]
        assert decode_samples(bytearray([1, 2, 3])).tolist() == [1, 2, 3]

    def test_accepts_memoryview(self):
        assert decode_samples(memoryview(b"\x80\x81")).tolist() == [128, 129]

    def test_accepts_strided_memoryview(self):
        view = memoryview(bytes(range(8)))[::2]

        assert decode_samples(view).tolist() == [0, 2, 4, 6]

    def test_accepts_int_list(self):
        result = decode_samples([128, 0, 255, 300, -1])

        assert result.dtype == np.uint8
        assert result.tolist() == [128, 0, 255, 255, 0]

    def test_accepts_array_module(self):
        import array

        assert decode_samples(array.array("B", [1, 200])).tolist() == [1, 200]

    def test_clips_wider_integer_arrays(self):
        result = decode_samples(np.array([-5, 100, 300]))

        assert result.dtype == np.uint8
        assert result.tolist() == [0, 100, 255]
