from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol, Union
import logging
import os

import cv2
import numpy as np
import pytesseract

from .buffer import PixelBuffer
from .config import OcrConfig
from .errors import RecognitionFailure

log = logging.getLogger(__name__)

_TESS_DEFAULT = r"C:\\Program Files\\Tesseract-OCR\\tesseract.exe"
_tess_cmd = os.environ.get("TESSERACT_CMD")
if _tess_cmd:
    pytesseract.pytesseract.tesseract_cmd = _tess_cmd
elif os.path.exists(_TESS_DEFAULT):
    pytesseract.pytesseract.tesseract_cmd = _TESS_DEFAULT

Pixels = Union[np.ndarray, bytes, bytearray, memoryview]

class Recognizer(Protocol):
    def recognize(self, pixels: Pixels, width: int, height: int, channels: int, stride: int) -> str: ...

@dataclass(frozen=True)
class RecognizedField:
    label: str
    text: str

def as_array(pixels: Pixels, width: int, height: int, channels: int, stride: int) -> np.ndarray:
    """View raw row-major pixel memory as a height x width x channels array."""
    if isinstance(pixels, np.ndarray):
        arr = pixels if pixels.ndim == 3 else pixels.reshape(height, width, channels)
        return arr[:height, :width, :channels]
    if stride < width * channels:
        raise ValueError(f"stride {stride} < {width} * {channels}")
    flat = np.frombuffer(pixels, dtype=np.uint8)
    if flat.size < stride * (height - 1) + width * channels:
        raise ValueError("pixel memory shorter than declared geometry")
    return np.lib.stride_tricks.as_strided(flat, shape=(height, width, channels),
                                           strides=(stride, channels, 1), writeable=False)

def normalize_text(text: Optional[str]) -> str:
    if not text:
        return ""
    return text.replace("\r", "").replace("\n", " ").strip()

class TesseractRecognizer:
    """Recognizer backed by the tesseract binary through pytesseract."""

    def __init__(self, cfg: Optional[OcrConfig] = None):
        self.cfg = cfg or OcrConfig()
        if self.cfg.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.cfg.tesseract_cmd

    @property
    def tess_config(self) -> str:
        return f"--psm {self.cfg.psm} -c user_defined_dpi={self.cfg.dpi} -c save_best_choices=T"

    def version(self) -> str:
        return str(pytesseract.get_tesseract_version())

    def recognize(self, pixels: Pixels, width: int, height: int, channels: int, stride: int) -> str:
        img = np.ascontiguousarray(as_array(pixels, width, height, channels, stride))
        if channels == 3:
            img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        elif channels == 1:
            img = img[:, :, 0]
        try:
            return pytesseract.image_to_string(img, lang=self.cfg.lang, config=self.tess_config)
        except (pytesseract.TesseractError, RuntimeError, OSError) as e:
            raise RecognitionFailure(f"tesseract failed on {width}x{height} buffer: {e}") from e

class RecognitionDispatcher:
    """Sends prepared buffers to a recognizer, one attempt each."""

    def __init__(self, recognizer: Recognizer):
        self.recognizer = recognizer
        self.calls = 0
        self.failures = 0

    def recognize(self, buf: PixelBuffer) -> str:
        self.calls += 1
        try:
            raw = self.recognizer.recognize(buf.pixels, buf.width, buf.height, buf.channels, buf.stride)
        except Exception as e:  # any collaborator error costs only this field
            self.failures += 1
            log.warning("Recognition failed, recording empty text: %s: %s", type(e).__name__, e)
            return ""
        return normalize_text(raw)

    def dispatch(self, buf: PixelBuffer, label: str) -> RecognizedField:
        return RecognizedField(label, self.recognize(buf))
