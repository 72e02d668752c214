from __future__ import annotations

from pathlib import Path

import pytest

from hsx import cli
from hsx.events import EventTimeline, FieldRecognized, ScreenEntered
from hsx.ocr import TesseractRecognizer
from hsx.timeline import RunStats, TimelineResult


@pytest.fixture(autouse=True)
def _no_tesseract(monkeypatch):
    monkeypatch.setattr(TesseractRecognizer, "version", lambda self: "5.0.0")


def test_bad_profile_exits_2(tmp_path: Path):
    bad = tmp_path / "bad.toml"
    bad.write_text("[screens\n", encoding="utf-8")
    assert cli.main(["--video", "x.mp4", "--screens", str(bad)]) == 2


def test_bad_canvas_in_profile_exits_2(tmp_path: Path):
    bad = tmp_path / "bad.toml"
    bad.write_text('[canvas]\nwidth = "wide"\n[[screens]]\ntag = "A"\nthreshold = 0.9\nanchors = [[1, 1, "#000000"]]\n',
                   encoding="utf-8")
    assert cli.main(["--video", "x.mp4", "--screens", str(bad)]) == 2


def test_unreadable_video_exits_1(tmp_path: Path):
    rc = cli.main(["--video", str(tmp_path / "missing.mp4"), "--out", str(tmp_path / "out"), "--no-progress"])
    assert rc == 1


def test_writes_csv_and_prints_report(tmp_path: Path, monkeypatch, capsys):
    seen = {}

    def fake_process_video(video, out_dir, recognizer, screens, run_cfg):
        seen["run_cfg"] = run_cfg
        Path(out_dir).mkdir(parents=True, exist_ok=True)
        tl = EventTimeline()
        tl.append(ScreenEntered("Stigmata", 5, 166.0))
        tl.append(FieldRecognized("Valkyrie", "Kiana", 5, 166.0))
        return TimelineResult(tl, RunStats(frames=9, entries={"Stigmata": 1}), 30.0, 9)

    monkeypatch.setattr(cli, "process_video", fake_process_video)
    out = tmp_path / "out"
    rc = cli.main(["--video", "clip.mp4", "--out", str(out), "--max-seconds", "12", "--no-save-frames"])
    assert rc == 0
    assert seen["run_cfg"].max_seconds == 12.0
    assert seen["run_cfg"].save_frames is False
    assert capsys.readouterr().out.splitlines() == ["[STIGMATA_SCREEN]", "Valkyrie=Kiana"]
    assert (out / "events.csv").read_text("utf-8").splitlines()[0] == "kind,frame,t_ms,clock,tag,label,text"
