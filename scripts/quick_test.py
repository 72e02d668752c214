import argparse
import logging
from pathlib import Path

from hsx.config import RunConfig
from hsx.ocr import TesseractRecognizer
from hsx.timeline import process_video

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--video", required=True)
    ap.add_argument("--out", default="out_quick")
    ap.add_argument("--seconds", type=float, default=30.0)
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO)
    out = Path(args.out); out.mkdir(parents=True, exist_ok=True)

    run_cfg = RunConfig(max_seconds=args.seconds, debug_anchors=True)
    res = process_video(args.video, str(out), TesseractRecognizer(), run_cfg=run_cfg)
    res.timeline.to_frame().to_csv(out / "events.csv", index=False)

    print("=== QUICK TEST DONE ===")
    print(f"fps={res.fps:.2f}  frames={res.frame_count}")
    print(f"Scanned: {res.stats.frames}  skipped: {res.stats.skipped}")
    print(f"Entries: {res.stats.entries}")
    for line in res.timeline.render_lines():
        print(line)
    print(f"Outputs: {out.resolve()}")

if __name__ == "__main__":
    main()
