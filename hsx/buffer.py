from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import ConfigurationError

Rect = Tuple[int, int, int, int]  # x, y, w, h

class PixelBuffer:
    """Bounds-checked view over uint8 pixel memory (rows x cols x channels, BGR).

    Cropping returns another view over the same memory; nothing is copied.
    """

    __slots__ = ("_px",)

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.dtype != np.uint8:
            raise ValueError(f"expected HxWxC uint8 pixels, got shape={pixels.shape} dtype={pixels.dtype}")
        self._px = pixels

    @property
    def pixels(self) -> np.ndarray:
        return self._px

    @property
    def width(self) -> int:
        return int(self._px.shape[1])

    @property
    def height(self) -> int:
        return int(self._px.shape[0])

    @property
    def channels(self) -> int:
        return int(self._px.shape[2])

    @property
    def stride(self) -> int:
        """Bytes between the starts of two consecutive rows."""
        return int(self._px.strides[0])

    def crop(self, x: int, y: int, w: int, h: int) -> "PixelBuffer":
        if w <= 0 or h <= 0 or x < 0 or y < 0 or x + w > self.width or y + h > self.height:
            raise ConfigurationError(f"rect {(x, y, w, h)} outside {self.width}x{self.height} buffer")
        return PixelBuffer(self._px[y:y+h, x:x+w])

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height}x{self.channels}, stride={self.stride})"

def format_clock(timestamp_ms: float) -> str:
    t = int(timestamp_ms)
    ms = t % 1000; t //= 1000
    s = t % 60; t //= 60
    m = t % 60
    h = t // 60
    return f"{h}:{m:02d}:{s:02d}:{ms:03d}"

@dataclass
class Frame:
    index: int
    timestamp_ms: float
    pixels: np.ndarray

    @property
    def buffer(self) -> PixelBuffer:
        return PixelBuffer(self.pixels)

    @property
    def size(self) -> Tuple[int, int]:
        return int(self.pixels.shape[1]), int(self.pixels.shape[0])

    @property
    def clock(self) -> str:
        return format_clock(self.timestamp_ms)
