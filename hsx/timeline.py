from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple
import logging

import numpy as np
from tqdm import tqdm

from .archive import FrameArchive
from .buffer import Frame, PixelBuffer
from .classifier import classify_all, select
from .config import RunConfig
from .errors import DimensionMismatch
from .events import EventTimeline, FieldRecognized, ScreenEntered
from .fingerprint import ScreenFingerprint, validate_screens
from .latch import ScreenLatch
from .ocr import RecognitionDispatcher, Recognizer
from .roi import draw_anchors, extract_all
from .screens import CANVAS, DEFAULT_SCREENS
from .source import VideoFrameSource, resample

log = logging.getLogger(__name__)

@dataclass
class RunStats:
    frames: int = 0
    skipped: int = 0
    entries: Dict[str, int] = field(default_factory=dict)

class ScreenPipeline:
    """Classify -> latch -> extract -> recognize, one frame at a time.

    ``process`` must be fed frames in presentation order from a single thread;
    the latch only remembers the previous frame. Frames are borrowed: regions
    of an entry frame are preprocessed in place and nothing is kept afterwards.
    """

    def __init__(self, screens: Sequence[ScreenFingerprint], dispatcher: RecognitionDispatcher,
                 canvas: Tuple[int, int] = CANVAS, resample: bool = True,
                 archive: Optional[FrameArchive] = None, debug_anchors: bool = False):
        self.canvas = (int(canvas[0]), int(canvas[1]))
        self.screens = validate_screens(screens, self.canvas)
        self._by_tag = {s.tag: s for s in self.screens}
        self.dispatcher = dispatcher
        self.resample = resample
        self.archive = archive
        self.debug_anchors = debug_anchors
        self.latch = ScreenLatch(self._by_tag)
        self.timeline = EventTimeline()
        self.stats = RunStats()

    def _prepare(self, frame: Frame) -> Frame:
        px = frame.pixels
        if px is None or px.ndim != 3 or px.shape[2] != 3 or px.size == 0 or px.dtype != np.uint8:
            actual = frame.size if px is not None and px.ndim >= 2 else (0, 0)
            raise DimensionMismatch(self.canvas, actual)
        if frame.size != self.canvas:
            if not self.resample:
                raise DimensionMismatch(self.canvas, frame.size)
            frame = resample(frame, self.canvas)
        return frame

    def process(self, frame: Frame) -> Optional[str]:
        """Handle one frame; returns the tag of the screen entered on it, if any."""
        try:
            frame = self._prepare(frame)
            buf = frame.buffer
            results = classify_all(buf, self.screens, self.canvas)
        except DimensionMismatch as e:
            self.stats.skipped += 1
            log.warning("Frame number %d skipped: %s", frame.index + 1, e)
            return None
        self.stats.frames += 1

        chosen = select(results)
        entered = None
        for r in results:
            hit = chosen is not None and r.tag == chosen.tag
            if self.latch.update(r.tag, hit):
                entered = r.tag
        if entered is None:
            return None
        log.debug("Frame number %d: %s confidence %.4f", frame.index + 1, entered, chosen.confidence)
        self._scan(self._by_tag[entered], frame, buf)
        return entered

    def _scan(self, fp: ScreenFingerprint, frame: Frame, buf: PixelBuffer) -> None:
        self.stats.entries[fp.tag] = self.stats.entries.get(fp.tag, 0) + 1
        log.info("Frame number %d (%s): %s screen", frame.index + 1, frame.clock, fp.tag)
        self.timeline.append(ScreenEntered(fp.tag, frame.index, frame.timestamp_ms))

        for region, sub in extract_all(buf, fp.regions):
            fld = self.dispatcher.dispatch(sub, region.label)
            log.info("%s: %s", fld.label, fld.text)
            self.timeline.append(FieldRecognized(fld.label, fld.text, frame.index, frame.timestamp_ms))

        if self.archive is not None:
            image = draw_anchors(frame.pixels, fp) if self.debug_anchors else frame.pixels
            try:
                path = self.archive.save(fp.tag, image)
            except (RuntimeError, OSError) as e:
                log.warning("Frame number %d not saved: %s", frame.index + 1, e)
            else:
                log.debug("Saved %s", path)

    def run(self, frames: Iterable[Frame], total: Optional[int] = None,
            max_seconds: Optional[float] = None, progress: bool = True) -> EventTimeline:
        pbar = tqdm(total=total or None, desc="Scanning", unit="frame", disable=not progress)
        try:
            for frame in frames:
                if max_seconds is not None and frame.timestamp_ms / 1000.0 > max_seconds:
                    break
                self.process(frame)
                pbar.update(1)
        finally:
            pbar.close()
        return self.timeline

@dataclass
class TimelineResult:
    timeline: EventTimeline
    stats: RunStats
    fps: float
    frame_count: int

def process_video(video_path: str, out_dir: str, recognizer: Recognizer,
                  screens: Sequence[ScreenFingerprint] = DEFAULT_SCREENS,
                  run_cfg: Optional[RunConfig] = None) -> TimelineResult:
    run_cfg = run_cfg or RunConfig()
    outp = Path(out_dir)
    outp.mkdir(parents=True, exist_ok=True)
    canvas = (run_cfg.canvas_width, run_cfg.canvas_height)

    archive = FrameArchive(outp / "frames") if run_cfg.save_frames else None
    pipeline = ScreenPipeline(screens, RecognitionDispatcher(recognizer), canvas=canvas,
                              resample=run_cfg.resample, archive=archive,
                              debug_anchors=run_cfg.debug_anchors)

    with VideoFrameSource(video_path) as source:
        log.info("Streaming video file from %s", video_path)
        log.info("Framerate: %d", int(source.fps))
        log.info("Frame count: %d", source.frame_count)
        for s in pipeline.screens:
            log.info("%s screen threshold confidence value: %.6f", s.tag, s.threshold)
        pipeline.run(source, total=source.frame_count, max_seconds=run_cfg.max_seconds,
                     progress=run_cfg.progress)
        fps, frame_count = source.fps, source.frame_count

    pipeline.timeline.write_jsonl(outp / "timeline.jsonl")
    return TimelineResult(pipeline.timeline, pipeline.stats, fps, frame_count)
