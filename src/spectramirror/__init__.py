"""Mirrored spectrum visualization core for real-time audio."""

from spectramirror.config import PipelineConfig, Profile
from spectramirror.errors import ConfigurationError
from spectramirror.io.exporter import ManifestExporter
from spectramirror.pipeline import FramePipeline, FrameStats, PipelineState, initialize
from spectramirror.render import FileRenderer

__version__ = "0.1.0"
__all__ = [
    "PipelineConfig",
    "Profile",
    "ConfigurationError",
    "FramePipeline",
    "FrameStats",
    "PipelineState",
    "initialize",
    "ManifestExporter",
    "FileRenderer",
]
