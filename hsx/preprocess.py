from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from .buffer import PixelBuffer
from .errors import ConfigurationError

# Luma weights (ITU-R BT.601), applied to R, G, B.
LUMA_R, LUMA_G, LUMA_B = 0.299, 0.587, 0.114

def _round_clip(values: np.ndarray) -> np.ndarray:
    # half-up rounding, then clamp to the byte range
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)

def contrast_lut(factor: float, bias: float = 0.5) -> np.ndarray:
    x = np.arange(256, dtype=np.float64) / 255.0
    return _round_clip((factor * (x - 1.0) + 1.0 + bias) * 255.0)

def contrast(buf: PixelBuffer, factor: float, bias: float = 0.5) -> None:
    """Stretch every channel around full intensity.

    out = clamp(round((factor * (in/255 - 1) + 1 + bias) * 255)). With the default
    bias of 0.5 this brightens as well as stretches; ``bias=0`` and ``factor=1``
    leave the buffer untouched.
    """
    px = buf.pixels
    px[...] = contrast_lut(factor, bias)[px]

def invert(buf: PixelBuffer) -> None:
    px = buf.pixels
    np.subtract(255, px, out=px)

def grayscale(buf: PixelBuffer) -> None:
    px = buf.pixels
    if px.shape[2] < 3:
        return
    luma = LUMA_R * px[..., 2] + LUMA_G * px[..., 1] + LUMA_B * px[..., 0]
    px[..., :3] = _round_clip(luma)[..., None]

@dataclass(frozen=True)
class TransformStep:
    name: str
    factor: Optional[float] = None

    def apply(self, buf: PixelBuffer) -> None:
        if self.name == "contrast":
            contrast(buf, self.factor if self.factor is not None else 1.0)
        elif self.name == "invert":
            invert(buf)
        elif self.name == "grayscale":
            grayscale(buf)
        else:
            raise ConfigurationError(f"unknown transform: {self.name}")

    def __str__(self) -> str:
        return self.name if self.factor is None else f"{self.name}:{self.factor:g}"

def parse_step(spec: str) -> TransformStep:
    """Parse ``"contrast:4"``, ``"invert"`` or ``"grayscale"``."""
    name, _, arg = spec.strip().lower().partition(":")
    if name == "contrast":
        if not arg:
            raise ConfigurationError("contrast needs a factor, e.g. 'contrast:4'")
        try:
            return TransformStep("contrast", float(arg))
        except ValueError:
            raise ConfigurationError(f"bad contrast factor: {arg!r}") from None
    if name in ("invert", "grayscale"):
        if arg:
            raise ConfigurationError(f"{name} takes no argument")
        return TransformStep(name)
    raise ConfigurationError(f"unknown transform: {spec!r}")

def parse_steps(specs: Iterable[str]) -> Tuple[TransformStep, ...]:
    return tuple(parse_step(s) for s in specs)

def apply_steps(buf: PixelBuffer, steps: Iterable[TransformStep]) -> PixelBuffer:
    for step in steps:
        step.apply(buf)
    return buf
