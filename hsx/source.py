from __future__ import annotations
from typing import Iterable, Iterator, Tuple

import cv2
import numpy as np

from .buffer import Frame
from .errors import DimensionMismatch, SourceExhausted

def resample(frame: Frame, size: Tuple[int, int]) -> Frame:
    """Exact-size resize to ``size`` (w, h). Frames already at that size pass through."""
    px = frame.pixels
    if px is None or px.size == 0:
        raise DimensionMismatch(size, (0, 0))
    if px.ndim != 3 or px.shape[2] != 3:
        raise DimensionMismatch(size, frame.size)
    if frame.size == tuple(size):
        return frame
    resized = cv2.resize(px, tuple(size), interpolation=cv2.INTER_LINEAR)
    return Frame(frame.index, frame.timestamp_ms, resized)

class VideoFrameSource:
    """Frames of a video file, decoded by OpenCV, in presentation order."""

    def __init__(self, path: str):
        self.path = str(path)
        self._cap = cv2.VideoCapture(self.path)
        if not self._cap.isOpened():
            raise RuntimeError(f"Cannot open video: {self.path}")
        self.fps = float(self._cap.get(cv2.CAP_PROP_FPS) or 30.0)
        self.frame_count = int(self._cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        self._index = 0

    def next_frame(self) -> Frame:
        if self._cap is None:
            raise SourceExhausted(self.path)
        ok, px = self._cap.read()
        if not ok or px is None:
            raise SourceExhausted(self.path)
        t_ms = float(self._cap.get(cv2.CAP_PROP_POS_MSEC) or 0.0)
        if t_ms <= 0.0 and self._index > 0:
            t_ms = 1000.0 * self._index / self.fps
        frame = Frame(self._index, t_ms, px)
        self._index += 1
        return frame

    def __iter__(self) -> Iterator[Frame]:
        while True:
            try:
                yield self.next_frame()
            except SourceExhausted:
                return

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    def __enter__(self) -> "VideoFrameSource":
        return self

    def __exit__(self, *exc) -> None:
        self.release()

class FrameSequence:
    """In-memory frames, e.g. decoded elsewhere or synthesised in tests."""

    def __init__(self, frames: Iterable[np.ndarray], fps: float = 30.0):
        self._it = iter(frames)
        self.fps = float(fps)
        self._index = 0

    def next_frame(self) -> Frame:
        try:
            px = next(self._it)
        except StopIteration:
            raise SourceExhausted("sequence") from None
        frame = Frame(self._index, 1000.0 * self._index / self.fps, px)
        self._index += 1
        return frame

    def __iter__(self) -> Iterator[Frame]:
        while True:
            try:
                yield self.next_frame()
            except SourceExhausted:
                return
