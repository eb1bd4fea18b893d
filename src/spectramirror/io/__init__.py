"""Audio input and manifest output."""

from spectramirror.io.exporter import ManifestExporter, RenderedFrames
from spectramirror.io.source import AudioBlockSource, encode_byte_samples

__all__ = ["AudioBlockSource", "ManifestExporter", "RenderedFrames", "encode_byte_samples"]
