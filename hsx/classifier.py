from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .buffer import PixelBuffer
from .errors import DimensionMismatch
from .fingerprint import ScreenFingerprint

@dataclass(frozen=True)
class ClassificationResult:
    tag: str
    confidence: float
    matched: bool

def _anchor_arrays(fp: ScreenFingerprint) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    xs = np.fromiter((a.x for a in fp.anchors), dtype=np.intp, count=len(fp.anchors))
    ys = np.fromiter((a.y for a in fp.anchors), dtype=np.intp, count=len(fp.anchors))
    rgb = np.array([a.rgb for a in fp.anchors], dtype=np.float64).reshape(-1, 3)
    return xs, ys, rgb

def dissimilarity(frame: PixelBuffer, fp: ScreenFingerprint) -> float:
    """Mean anchor color distance, each channel delta folded into [-1, 1]."""
    xs, ys, expected = _anchor_arrays(fp)
    observed = frame.pixels[ys, xs, :3][:, ::-1].astype(np.float64)  # BGR -> RGB
    deltas = 2.0 * (255.0 + observed - expected) / 510.0 - 1.0
    norms = np.sqrt(np.sum(deltas * deltas, axis=1))
    return float(np.sum(norms / (3.0 * len(fp.anchors))))

def classify(frame: PixelBuffer, fp: ScreenFingerprint, canvas: Optional[Tuple[int, int]] = None) -> ClassificationResult:
    if canvas is not None and (frame.width, frame.height) != tuple(canvas):
        raise DimensionMismatch(canvas, (frame.width, frame.height))
    confidence = 1.0 - dissimilarity(frame, fp)
    return ClassificationResult(fp.tag, confidence, confidence >= fp.threshold)

def classify_all(frame: PixelBuffer, screens: Iterable[ScreenFingerprint],
                 canvas: Optional[Tuple[int, int]] = None) -> List[ClassificationResult]:
    return [classify(frame, fp, canvas) for fp in screens]

def select(results: Iterable[ClassificationResult]) -> Optional[ClassificationResult]:
    """First match in priority order; later matches on the same frame are ignored."""
    for r in results:
        if r.matched:
            return r
    return None
