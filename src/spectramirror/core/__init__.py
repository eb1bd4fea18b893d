"""Per-frame processing stages."""

from spectramirror.core.remap import SymmetricRemapper
from spectramirror.core.selection import SalienceSelector, SelectedBins
from spectramirror.core.spectrum import MagnitudeExtractor, SpectralTransform
from spectramirror.core.weighting import PerceptualWeighting
from spectramirror.core.windowing import SampleWindow

__all__ = [
    "SampleWindow",
    "SpectralTransform",
    "MagnitudeExtractor",
    "PerceptualWeighting",
    "SalienceSelector",
    "SelectedBins",
    "SymmetricRemapper",
]
