from __future__ import annotations


class ConfigurationError(ValueError):
    """Malformed fingerprint or region table. Raised before any frame is read."""


class SourceExhausted(Exception):
    """The frame source has no more frames. Normal end of a run."""


class RecognitionFailure(RuntimeError):
    """The text recognizer produced nothing usable for a buffer."""


class DimensionMismatch(ValueError):
    """A frame is not at the canonical size and cannot be brought to it."""

    def __init__(self, expected, actual):
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(f"frame size {self.actual} does not match canvas {self.expected}")
