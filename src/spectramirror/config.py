"""
Pipeline configuration.

All tunable constants of the audio-to-visual pipeline live in a single
dataclass so that a deployment profile can be stored as JSON and
rebuilt exactly.
"""

import json
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Union

from spectramirror.errors import ConfigurationError

# Canonical frame and output sizes
DEFAULT_FRAME_SIZE = 1024
DEFAULT_OUTPUT_WIDTH = 512

MIN_FRAME_SIZE = 16
MAX_FRAME_SIZE = 32768


class Profile(str, Enum):
    """Processing profile; ``reduced`` suppresses high bins harder."""

    FULL = "full"
    REDUCED = "reduced"


class WindowMode(str, Enum):
    """Hann windowing, or flat amplification for low-fidelity displays."""

    HANN = "hann"
    RAW = "raw"


class MagnitudeMode(str, Enum):
    """How complex coefficients are turned into magnitudes."""

    SCALED = "scaled"      # sqrt(|c|) / divisor
    RMS = "rms"            # sqrt(|c| / N)
    LOUDNESS = "loudness"  # 1 + 2*log10(rms), clamped


class GapFill(str, Enum):
    """How skipped output positions between placed bins are filled."""

    MIDPOINT = "midpoint"
    LINEAR = "linear"


# Exponent of the perceptual weighting curve per profile
WEIGHTING_EXPONENTS = {
    Profile.FULL: 0.5,
    Profile.REDUCED: 0.4,
}

# Studio config files use camelCase keys
_CAMEL_KEYS = {
    "frameSize": "frame_size",
    "outputWidth": "output_width",
    "windowMode": "window_mode",
    "magnitudeMode": "magnitude_mode",
    "magnitudeDivisor": "magnitude_divisor",
    "gapFill": "gap_fill",
}

_ENUM_FIELDS = {
    "profile": Profile,
    "window_mode": WindowMode,
    "magnitude_mode": MagnitudeMode,
    "gap_fill": GapFill,
}


def _coerce_enum(name: str, enum_type: type, value: Any) -> Enum:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(
            f"Invalid {name} {value!r} (expected one of: {choices})"
        ) from None


@dataclass
class PipelineConfig:
    """Complete set of pipeline parameters."""

    frame_size: int = DEFAULT_FRAME_SIZE
    output_width: int = DEFAULT_OUTPUT_WIDTH
    profile: Profile = Profile.FULL

    # Windowing
    window_mode: WindowMode = WindowMode.HANN
    amplification: float = 1.2  # raw mode only

    # Magnitude scaling
    magnitude_mode: MagnitudeMode = MagnitudeMode.SCALED
    magnitude_divisor: float = 32.0

    # Salience selection
    retention: float = 0.25

    # Symmetric remap
    gap_fill: GapFill = GapFill.MIDPOINT

    def __post_init__(self):
        for name, enum_type in _ENUM_FIELDS.items():
            setattr(self, name, _coerce_enum(name, enum_type, getattr(self, name)))

    @property
    def n_bins(self) -> int:
        """Number of usable (non-mirrored) frequency bins."""
        return self.frame_size // 2

    @property
    def weighting_exponent(self) -> float:
        """Exponent ``p`` of the weighting curve ``1 - (i/B)^p``."""
        return WEIGHTING_EXPONENTS[self.profile]

    def validate(self) -> "PipelineConfig":
        """
        Check all parameters.

        Returns:
            self, so construction can be chained.

        Raises:
            ConfigurationError: If any parameter is out of range.
        """
        n = self.frame_size
        if (
            not isinstance(n, int)
            or isinstance(n, bool)
            or n < MIN_FRAME_SIZE
            or n > MAX_FRAME_SIZE
            or n & (n - 1) != 0
        ):
            raise ConfigurationError(
                f"frame_size must be a power of two in "
                f"[{MIN_FRAME_SIZE}, {MAX_FRAME_SIZE}], got {n!r}"
            )

        m = self.output_width
        if not isinstance(m, int) or isinstance(m, bool) or m <= 0:
            raise ConfigurationError(f"output_width must be a positive integer, got {m!r}")

        for name in ("retention", "magnitude_divisor", "amplification"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")

        if not 0.0 <= self.retention <= 1.0:
            raise ConfigurationError(f"retention must be in [0, 1], got {self.retention!r}")

        if self.magnitude_divisor <= 0:
            raise ConfigurationError(
                f"magnitude_divisor must be positive, got {self.magnitude_divisor!r}"
            )

        if self.amplification <= 0:
            raise ConfigurationError(
                f"amplification must be positive, got {self.amplification!r}"
            )

        return self

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible dictionary (enum values as strings)."""
        data = asdict(self)
        for name in _ENUM_FIELDS:
            data[name] = data[name].value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PipelineConfig":
        """
        Build a config from a dictionary.

        Both snake_case and camelCase keys are accepted. Unknown keys
        are rejected so that typos in config files do not go unnoticed.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown config key: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "PipelineConfig":
        """Load a config from a JSON file."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        return cls.from_dict(data)
