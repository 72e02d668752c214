from __future__ import annotations
from pathlib import Path
from typing import Dict, Union

import cv2
import numpy as np

class FrameArchive:
    """Writes entry frames as ``<tag>_frame_<n>.png``, numbering per tag from 0.

    Counters live on the instance, so each run starts again at 0. A failed
    write keeps its number for the next attempt.
    """

    def __init__(self, out_dir: Union[str, Path]):
        self.out_dir = Path(out_dir)
        self.out_dir.mkdir(parents=True, exist_ok=True)
        self.counters: Dict[str, int] = {}

    def next_path(self, tag: str) -> Path:
        return self.out_dir / f"{tag.lower()}_frame_{self.counters.get(tag, 0)}.png"

    def save(self, tag: str, image_bgr: np.ndarray) -> Path:
        path = self.next_path(tag)
        try:
            ok = cv2.imwrite(str(path), image_bgr)
        except cv2.error as e:
            raise RuntimeError(f"Failed to write {path}: {e}") from e
        if not ok:
            raise RuntimeError(f"Failed to write {path}")
        self.counters[tag] = self.counters.get(tag, 0) + 1
        return path

    @property
    def saved(self) -> int:
        return sum(self.counters.values())
