"""
Offline rendering of audio files.

Drives a fresh FramePipeline through a recording block by block and
collects every output buffer into a manifest.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Union

import numpy as np

from spectramirror.config import PipelineConfig
from spectramirror.errors import ConfigurationError
from spectramirror.io.exporter import ManifestExporter, RenderedFrames
from spectramirror.io.source import AudioBlockSource
from spectramirror.pipeline import FramePipeline

logger = logging.getLogger(__name__)


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
    return value


class FileRenderer:
    """
    Complete audio-file-to-manifest renderer.

    Combines block extraction, the frame pipeline and export into a
    single interface. Rendered manifests are cached per recording and
    render settings under ``cache_dir``.
    """

    # Increment whenever the pipeline output changes so cached
    # manifests are invalidated.
    RENDER_VERSION = "1.0"

    CACHE_ROOT = Path.home() / ".cache" / "spectramirror" / "manifests"

    def __init__(
        self,
        config: PipelineConfig | None = None,
        fps: int = 60,
        sample_rate: int = 22050,
        cache_dir: Union[str, Path, None] = None,
    ):
        """
        Initialize the renderer.

        Args:
            config: Pipeline parameters.
            fps: Output frames per second.
            sample_rate: Audio sample rate used for loading.
            cache_dir: Manifest cache location (default: CACHE_ROOT).

        Raises:
            ConfigurationError: If the config, fps or sample rate is invalid.
        """
        self.config = (config or PipelineConfig()).validate()
        self.fps = _positive_int("fps", fps)
        self.sample_rate = _positive_int("sample_rate", sample_rate)
        self.cache_dir = Path(cache_dir) if cache_dir is not None else self.CACHE_ROOT
        self.exporter = ManifestExporter()

    def _cache_path(self, audio_path: Path) -> Path:
        """Cache file for one recording under the current render settings."""
        settings = {
            "version": self.RENDER_VERSION,
            "fps": self.fps,
            "sample_rate": self.sample_rate,
            "pipeline": self.config.to_dict(),
        }
        digest = hashlib.sha256(json.dumps(settings, sort_keys=True).encode("utf-8"))
        with open(audio_path, "rb") as f:
            for chunk in iter(lambda: f.read(1 << 16), b""):
                digest.update(chunk)
        return self.cache_dir / f"manifest_{digest.hexdigest()}.json"

    def _read_cached(self, audio_path: Path) -> dict[str, Any] | None:
        try:
            cache_path = self._cache_path(audio_path)
            if not cache_path.exists():
                return None
            with open(cache_path, "r", encoding="utf-8") as f:
                manifest = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load cache: %s. Re-rendering.", e)
            return None
        if not isinstance(manifest, dict):
            logger.warning("Ignoring malformed cached manifest: %s", cache_path)
            return None

        logger.info("Loaded manifest from cache: %s", cache_path)
        return manifest

    def _write_cached(self, audio_path: Path, manifest: dict[str, Any]):
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(self._cache_path(audio_path), "w", encoding="utf-8") as f:
                json.dump(manifest, f)
        except OSError as e:
            logger.warning("Failed to save cache: %s", e)

    def clear_cache(self) -> int:
        """
        Delete every cached manifest.

        Returns:
            Number of manifests removed.
        """
        removed = 0
        for cached in self.cache_dir.glob("manifest_*.json"):
            cached.unlink()
            removed += 1
        logger.info("Removed %d cached manifests from %s", removed, self.cache_dir)
        return removed

    def load(self, audio_path: Union[str, Path]) -> AudioBlockSource:
        """Load an audio file as a block source."""
        return AudioBlockSource.from_file(
            audio_path,
            frame_size=self.config.frame_size,
            fps=self.fps,
            sample_rate=self.sample_rate,
        )

    def render_source(self, source: AudioBlockSource) -> RenderedFrames:
        """
        Run every block of a source through a fresh pipeline.

        Args:
            source: Per-frame byte blocks.

        Returns:
            RenderedFrames with one output row per block.
        """
        pipeline = FramePipeline(self.config)
        frames = np.zeros((source.n_frames, self.config.output_width), dtype=np.float32)

        for i, block in enumerate(source.iter_blocks()):
            frames[i] = pipeline.process_frame(block)

        logger.info("Rendered %d frames (%.2fs of audio)", source.n_frames, source.duration)

        return RenderedFrames(
            magnitudes=frames,
            frame_times=source.frame_times(),
            fps=self.fps,
            duration=source.duration,
            config=self.config.to_dict(),
        )

    def export(
        self,
        rendered: RenderedFrames,
        output_path: Union[str, Path],
        format: str = "json",
    ) -> Path:
        """
        Export rendered frames to a manifest file.

        Args:
            rendered: Rendered frames.
            output_path: Output file path.
            format: "json" or "numpy".

        Returns:
            Path to written file.
        """
        if format == "numpy":
            return self.exporter.export_numpy(rendered, output_path)
        return self.exporter.export_json(rendered, output_path)

    def process(
        self,
        audio_path: Union[str, Path],
        output_path: Union[str, Path] | None = None,
        format: str = "json",
        use_cache: bool = True,
    ) -> dict[str, Any]:
        """
        Render an audio file to a manifest.

        Args:
            audio_path: Path to input audio file.
            output_path: Path for output manifest. If None, only returns dict.
            format: Output format ("json" or "numpy").
            use_cache: Whether to use a cached manifest if available.

        Returns:
            Dictionary containing manifest data and render info.
        """
        audio_path = Path(audio_path)

        manifest = self._read_cached(audio_path) if use_cache and format == "json" else None
        if manifest is not None:
            metadata = manifest.get("metadata", {})
            result = {
                "manifest": manifest,
                "duration": metadata.get("duration", 0.0),
                "n_frames": metadata.get("n_frames", 0),
                "fps": self.fps,
            }
            if output_path:
                with open(output_path, "w", encoding="utf-8") as f:
                    json.dump(manifest, f, indent=2)
                result["output_path"] = str(output_path)
            return result

        source = self.load(audio_path)
        rendered = self.render_source(source)
        manifest = self.exporter.to_dict(rendered)

        if use_cache:
            self._write_cached(audio_path, manifest)

        result = {
            "manifest": manifest,
            "duration": rendered.duration,
            "n_frames": rendered.n_frames,
            "fps": self.fps,
        }

        if output_path:
            written_path = self.export(rendered, output_path, format)
            result["output_path"] = str(written_path)

        return result

    def process_to_manifest(self, audio_path: Union[str, Path]) -> dict[str, Any]:
        """Render audio and return the manifest dictionary directly."""
        return self.process(audio_path)["manifest"]
