"""
Per-frame audio-to-visual pipeline.

Orchestrates the flow from one raw sample block to the mirrored
magnitude array handed to the renderer::

    bytes ─► SampleWindow ─► SpectralTransform ─► MagnitudeExtractor
          ─► PerceptualWeighting ─► SalienceSelector ─► SymmetricRemapper
          ─► output buffer (length M, values in [0, 1])

The pipeline is synchronous and single-threaded: callers invoke
``process_frame`` once per animation frame and must not call it
concurrently.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from spectramirror.config import PipelineConfig, Profile
from spectramirror.core.remap import SymmetricRemapper
from spectramirror.core.selection import SalienceSelector
from spectramirror.core.spectrum import MagnitudeExtractor, SpectralTransform
from spectramirror.core.weighting import PerceptualWeighting
from spectramirror.core.windowing import ByteSamples, SampleWindow

logger = logging.getLogger(__name__)


@dataclass
class PipelineState:
    """Everything that survives from one frame to the next."""

    paused: bool = False
    output: np.ndarray = field(default_factory=lambda: np.zeros(0))
    frame_index: int = 0


@dataclass
class FrameStats:
    """Diagnostics for one processed frame, passed to the ``on_frame`` hook."""

    frame_index: int
    elapsed_ms: float
    peak: float
    n_retained: int
    strongest_bin: int | None


FrameHook = Callable[[FrameStats], None]


class FramePipeline:
    """
    Complete sample-block-to-visual-buffer pipeline.

    Combines windowing, transform, magnitude extraction, weighting,
    selection and symmetric remap behind ``process_frame``. All scratch
    buffers are allocated once here and overwritten every frame.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        on_frame: FrameHook | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Pipeline parameters (validated here).
            on_frame: Optional callback receiving FrameStats after each
                processed frame.

        Raises:
            ConfigurationError: If the config is invalid.
        """
        self._config = (config or PipelineConfig()).validate()
        self.on_frame = on_frame

        cfg = self._config
        self.window = SampleWindow(cfg.frame_size, cfg.window_mode, cfg.amplification)
        self.transform = SpectralTransform(cfg.frame_size)
        self.extractor = MagnitudeExtractor(
            cfg.frame_size,
            cfg.magnitude_mode,
            cfg.magnitude_divisor,
        )
        self.weighting = PerceptualWeighting(cfg.n_bins, cfg.profile)
        self.selector = SalienceSelector(cfg.n_bins, cfg.retention)
        self.remapper = SymmetricRemapper(cfg.output_width, cfg.gap_fill)

        # Frame-scoped scratch buffers
        self._windowed = np.zeros(cfg.frame_size, dtype=np.float64)
        self._magnitudes = np.zeros(cfg.n_bins, dtype=np.float64)

        self._state = PipelineState(output=np.zeros(cfg.output_width, dtype=np.float32))
        self._view = self._state.output.view()
        self._view.flags.writeable = False

        logger.info(
            "Pipeline ready: N=%d, M=%d, profile=%s, window=%s, magnitude=%s, keep %d/%d bins",
            cfg.frame_size,
            cfg.output_width,
            cfg.profile.value,
            cfg.window_mode.value,
            cfg.magnitude_mode.value,
            self.selector.k,
            cfg.n_bins,
        )

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def paused(self) -> bool:
        return self._state.paused

    @property
    def frame_index(self) -> int:
        """Number of frames processed (paused frames are not counted)."""
        return self._state.frame_index

    @property
    def output(self) -> np.ndarray:
        """Read-only view of the current output buffer."""
        return self._view

    def toggle_pause(self) -> bool:
        """
        Flip the paused flag.

        Returns:
            The new paused state.
        """
        self._state.paused = not self._state.paused
        logger.info("Pipeline %s", "paused" if self._state.paused else "resumed")
        return self._state.paused

    def compute_weighted(self, samples: ByteSamples) -> np.ndarray:
        """
        Run the windowing through weighting stages on one block.

        Args:
            samples: Raw byte samples.

        Returns:
            Weighted magnitude per bin (the internal scratch buffer).
        """
        windowed = self.window.apply(samples, out=self._windowed)
        coefficients = self.transform.forward(windowed)
        magnitudes = self.extractor.extract(coefficients, out=self._magnitudes)
        return self.weighting.apply(magnitudes)

    def process_frame(self, samples: ByteSamples) -> np.ndarray:
        """
        Turn one raw sample block into the visual output buffer.

        While paused this does no work and returns the previous output
        unchanged. Blocks shorter or longer than N are padded or
        truncated, never rejected.

        Args:
            samples: Byte-encoded samples (128 == silence).

        Returns:
            Read-only view of the output magnitudes, length M.
        """
        if self._state.paused:
            return self._view

        started = time.perf_counter()

        weighted = self.compute_weighted(samples)
        selected = self.selector.select(weighted)
        self.remapper.remap(selected, out=self._state.output)

        frame_index = self._state.frame_index
        self._state.frame_index += 1

        if self.on_frame is not None or logger.isEnabledFor(logging.DEBUG):
            stats = FrameStats(
                frame_index=frame_index,
                elapsed_ms=(time.perf_counter() - started) * 1000.0,
                peak=float(self._state.output.max(initial=0.0)),
                n_retained=len(selected),
                strongest_bin=selected.strongest_index,
            )
            logger.debug(
                "Frame %d: %.3f ms, peak=%.4f, strongest bin=%s",
                stats.frame_index,
                stats.elapsed_ms,
                stats.peak,
                stats.strongest_bin,
            )
            self._emit(stats)

        return self._view

    def _emit(self, stats: FrameStats):
        """Call the hook; a failing hook is detached so frames keep flowing."""
        if self.on_frame is None:
            return
        try:
            self.on_frame(stats)
        except Exception:
            logger.exception("on_frame hook failed; detaching it")
            self.on_frame = None


def initialize(
    sample_frame_size: int = 1024,
    output_width: int = 512,
    profile: Profile | str = Profile.FULL,
    on_frame: FrameHook | None = None,
    **options,
) -> FramePipeline:
    """
    Build a pipeline from size parameters and a profile.

    Args:
        sample_frame_size: Transform size N.
        output_width: Output length M.
        profile: "full" or "reduced".
        on_frame: Optional per-frame diagnostics callback.
        **options: Any other PipelineConfig field.

    Returns:
        A ready FramePipeline.

    Raises:
        ConfigurationError: On invalid sizes or options.
    """
    config = PipelineConfig.from_dict({
        "frame_size": sample_frame_size,
        "output_width": output_width,
        "profile": profile,
        **options,
    })
    return FramePipeline(config, on_frame=on_frame)
