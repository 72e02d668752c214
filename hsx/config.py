from dataclasses import dataclass
from typing import Optional

@dataclass
class OcrConfig:
    lang: str = "eng"
    psm: int = 6  # single uniform block of text
    dpi: int = 300
    tesseract_cmd: Optional[str] = None

@dataclass
class RunConfig:
    canvas_width: int = 1920
    canvas_height: int = 1080
    resample: bool = True
    max_seconds: Optional[float] = None
    save_frames: bool = True
    debug_anchors: bool = False
    progress: bool = True
