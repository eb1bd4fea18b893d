"""Exception types raised by the visualization core."""


class SpectraMirrorError(Exception):
    """Base class for all spectramirror errors."""


class ConfigurationError(SpectraMirrorError, ValueError):
    """Invalid pipeline parameters, detected when the pipeline is built."""


class TransformSizeError(ConfigurationError):
    """A block was handed to the transform with a length other than N."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Transform size is fixed at {expected} samples, got {actual}"
        )
        self.expected = expected
        self.actual = actual
