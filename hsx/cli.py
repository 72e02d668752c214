from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

from .config import OcrConfig, RunConfig
from .errors import ConfigurationError
from .ocr import TesseractRecognizer
from .screens import CANVAS, DEFAULT_SCREENS, load_screens
from .timeline import process_video

log = logging.getLogger("hsx")

def _setup_logging(log_file, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    kw = {"filename": log_file, "filemode": "w", "encoding": "utf-8"} if log_file else {}
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s", **kw)

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Log screen entries and recognized fields from a gameplay recording.")
    ap.add_argument("--video", required=True)
    ap.add_argument("--out", default="Output")
    ap.add_argument("--screens", default=None, help="TOML screen profile (default: built-in 1920x1080 tables)")
    ap.add_argument("--max-seconds", type=float, default=None)
    ap.add_argument("--no-resample", action="store_true", help="skip frames not already at canvas size")
    ap.add_argument("--no-save-frames", action="store_true")
    ap.add_argument("--debug-anchors", action="store_true", help="mark anchors on saved frames")
    ap.add_argument("--lang", default="eng")
    ap.add_argument("--psm", type=int, default=6)
    ap.add_argument("--tesseract-cmd", default=None)
    ap.add_argument("--log-file", default=None)
    ap.add_argument("--no-progress", action="store_true")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    _setup_logging(args.log_file, args.verbose)

    try:
        if args.screens:
            canvas, screens = load_screens(args.screens)
        else:
            canvas, screens = CANVAS, DEFAULT_SCREENS
    except ConfigurationError as e:
        print(f"Bad screen profile: {e}", file=sys.stderr)
        return 2

    recognizer = TesseractRecognizer(OcrConfig(lang=args.lang, psm=args.psm, tesseract_cmd=args.tesseract_cmd))
    try:
        log.info("Initialized tesseract %s %s", recognizer.version(), args.lang)
    except OSError as e:
        print(f"Could not initialize tesseract: {e}", file=sys.stderr)
        return 1

    run_cfg = RunConfig(canvas_width=canvas[0], canvas_height=canvas[1],
                        resample=not args.no_resample, max_seconds=args.max_seconds,
                        save_frames=not args.no_save_frames, debug_anchors=args.debug_anchors,
                        progress=not args.no_progress)
    out_dir = Path(args.out)
    try:
        res = process_video(args.video, str(out_dir), recognizer, screens, run_cfg)
    except (RuntimeError, ConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    res.timeline.to_frame().to_csv(out_dir / "events.csv", index=False)
    for line in res.timeline.render_lines():
        print(line)

    print("\n=== DONE ===", file=sys.stderr)
    print(f"Frames scanned: {res.stats.frames}  skipped: {res.stats.skipped}", file=sys.stderr)
    print(f"Screen entries: {dict(res.stats.entries)}", file=sys.stderr)
    print(f"Events: {len(res.timeline)}", file=sys.stderr)
    print(f"Outputs written to: {out_dir.resolve()}", file=sys.stderr)
    return 0

if __name__ == "__main__":
    sys.exit(main())
