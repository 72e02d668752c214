from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, Type

import numpy as np
import pytest

from hsx.errors import RecognitionFailure
from hsx.fingerprint import ScreenFingerprint


class ScriptedRecognizer:
    """Returns queued texts in order, then empty strings. Records every call."""

    def __init__(self, texts: Iterable[str] = (), fail_on: Iterable[int] = (),
                 error: Type[Exception] = RecognitionFailure) -> None:
        self.texts: List[str] = list(texts)
        self.fail_on = set(fail_on)
        self.error = error
        self.calls: List[Tuple[int, int, int, int, np.ndarray]] = []

    def recognize(self, pixels, width, height, channels, stride) -> str:
        n = len(self.calls)
        self.calls.append((width, height, channels, stride, np.array(pixels, copy=True)))
        if n in self.fail_on:
            raise self.error(f"scripted failure on call {n}")
        return self.texts[n] if n < len(self.texts) else ""


def paint(fp: ScreenFingerprint, canvas: Tuple[int, int], base: Optional[np.ndarray] = None,
          block: int = 0) -> np.ndarray:
    """BGR frame at canvas size with every anchor of ``fp`` set to its expected color."""
    w, h = canvas
    px = np.zeros((h, w, 3), dtype=np.uint8) if base is None else base
    for a in fp.anchors:
        r, g, b = a.rgb
        y0, y1 = max(0, a.y - block), min(h, a.y + block + 1)
        x0, x1 = max(0, a.x - block), min(w, a.x + block + 1)
        px[y0:y1, x0:x1] = (b, g, r)
    return px


@pytest.fixture
def recognizer() -> ScriptedRecognizer:
    return ScriptedRecognizer()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def make_recognizer():
    return ScriptedRecognizer


@pytest.fixture
def painter():
    return paint
