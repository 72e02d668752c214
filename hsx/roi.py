from __future__ import annotations
from typing import Iterator, Sequence, Tuple

import numpy as np
import cv2

from .buffer import PixelBuffer
from .fingerprint import Region, ScreenFingerprint
from .preprocess import apply_steps

def extract(frame: PixelBuffer, region: Region) -> PixelBuffer:
    """Crop ``region`` out of ``frame`` and run its transforms in place.

    The returned buffer is a view: the frame's pixels under the rectangle are
    rewritten. Regions are validated at startup, so a rectangle outside the
    frame raises ConfigurationError rather than being clipped.
    """
    x, y, w, h = region.rect
    sub = frame.crop(x, y, w, h)
    return apply_steps(sub, region.steps)

def extract_all(frame: PixelBuffer, regions: Sequence[Region]) -> Iterator[Tuple[Region, PixelBuffer]]:
    for region in regions:
        yield region, extract(frame, region)

def draw_anchors(frame_bgr: np.ndarray, fp: ScreenFingerprint, size: int = 32) -> np.ndarray:
    """Copy of the frame with a green cross (3px thick) centred on every anchor."""
    out = frame_bgr.copy()
    h, w = out.shape[:2]
    half = size // 2
    for a in fp.anchors:
        x0, x1 = max(0, a.x - half), min(w - 1, a.x + half)
        y0, y1 = max(0, a.y - half), min(h - 1, a.y + half)
        cv2.line(out, (x0, a.y), (x1, a.y), (0, 255, 0), 3)
        cv2.line(out, (a.x, y0), (a.x, y1), (0, 255, 0), 3)
    return out
