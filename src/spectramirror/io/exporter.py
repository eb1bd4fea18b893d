"""
Manifest serialization module.

Exports a sequence of rendered output buffers to JSON or NumPy
for playback in renderers that cannot run the pipeline themselves.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

import numpy as np


@dataclass
class ManifestMetadata:
    """Metadata header for the magnitude manifest."""

    duration: float
    fps: int
    n_frames: int
    output_width: int
    schema_version: str = "1.0"


@dataclass
class RenderedFrames:
    """Output buffers of a whole recording, one row per frame."""

    magnitudes: np.ndarray   # Shape: (n_frames, output_width)
    frame_times: np.ndarray  # Shape: (n_frames,)
    fps: int
    duration: float
    config: dict[str, Any]

    @property
    def n_frames(self) -> int:
        return len(self.magnitudes)


class ManifestExporter:
    """
    Exports rendered frames to a manifest.

    Each frame carries its index, time, peak value and the full
    mirrored magnitude array.
    """

    def __init__(self, precision: int = 4):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values.
        """
        self.precision = precision

    def _round(self, value: float) -> float:
        """Round to configured precision."""
        return round(float(value), self.precision)

    def _build_frame(self, index: int, rendered: RenderedFrames) -> dict[str, Any]:
        row = rendered.magnitudes[index]
        return {
            "frame_index": index,
            "time": self._round(rendered.frame_times[index]),
            "peak": self._round(row.max(initial=0.0)),
            "magnitudes": [self._round(value) for value in row],
        }

    def build_manifest(self, rendered: RenderedFrames) -> dict[str, Any]:
        """
        Build the complete manifest dictionary.

        Args:
            rendered: Frames produced by FileRenderer.

        Returns:
            Manifest dictionary ready for serialization.
        """
        width = rendered.magnitudes.shape[1] if rendered.magnitudes.ndim == 2 else 0
        metadata = ManifestMetadata(
            duration=self._round(rendered.duration),
            fps=rendered.fps,
            n_frames=rendered.n_frames,
            output_width=width,
        )

        return {
            "metadata": {
                "duration": metadata.duration,
                "fps": metadata.fps,
                "n_frames": metadata.n_frames,
                "output_width": metadata.output_width,
                "schema_version": metadata.schema_version,
                "config": rendered.config,
            },
            "frames": [
                self._build_frame(i, rendered)
                for i in range(rendered.n_frames)
            ],
        }

    def export_json(
        self,
        rendered: RenderedFrames,
        output_path: Union[str, Path],
        indent: int = 2,
    ) -> Path:
        """
        Export manifest to JSON file.

        Returns:
            Path to written file.
        """
        manifest = self.build_manifest(rendered)
        output_path = Path(output_path)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=indent)

        return output_path

    def export_numpy(
        self,
        rendered: RenderedFrames,
        output_path: Union[str, Path],
    ) -> Path:
        """
        Export frames as NumPy .npz archive for faster loading.

        Returns:
            Path to written file.
        """
        output_path = Path(output_path)

        np.savez_compressed(
            output_path,
            magnitudes=rendered.magnitudes.astype(np.float32),
            frame_times=rendered.frame_times,
            fps=rendered.fps,
            duration=rendered.duration,
            n_frames=rendered.n_frames,
        )

        return output_path

    def to_dict(self, rendered: RenderedFrames) -> dict[str, Any]:
        """Return manifest as dictionary (for in-memory use)."""
        return self.build_manifest(rendered)
