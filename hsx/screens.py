"""Screen tables for 1920x1080 recordings, and the TOML loader that replaces them.

Anchors are (x, y, color) samples taken on the canonical canvas. Regions are
the text boxes read once a screen is entered, each with the transform chain
that gives tesseract dark text on a light background.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union
import tomllib

from .errors import ConfigurationError
from .fingerprint import Region, ScreenFingerprint, anchors_from, validate_screens
from .preprocess import parse_steps

CANVAS: Tuple[int, int] = (1920, 1080)

NAME_STEPS = parse_steps(["contrast:4", "invert", "grayscale"])
SLOT_STEPS = parse_steps(["invert", "contrast:4"])

STIGMATA = ScreenFingerprint(
    tag="Stigmata",
    threshold=0.97,
    anchors=anchors_from([
        (120, 200, "#ee9aff"),
        (990, 864, "#ffdd47"),
        (1350, 864, "#ffdd47"),
        (1710, 864, "#ffdd47"),
        (1280, 974, "#00c9ff"),
    ]),
    regions=(
        Region("Valkyrie", (188, 912, 484, 72), NAME_STEPS),
        Region("Stigmata (T)", (872, 550, 284, 188), SLOT_STEPS),
        Region("Stigmata (M)", (1232, 550, 284, 188), SLOT_STEPS),
        Region("Stigmata (B)", (1592, 550, 284, 188), SLOT_STEPS),
    ),
)

LINEUP = ScreenFingerprint(
    tag="Lineup",
    threshold=0.97,
    anchors=anchors_from([
        (1762, 168, "#ffdd47"),
        (1762, 390, "#ffdd47"),
        (1762, 608, "#ffdd47"),
        (181, 97, "#ffdb48"),
        (1520, 986, "#005a7e"),
    ]),
)

# priority order: earlier screens win when several match the same frame
DEFAULT_SCREENS: Tuple[ScreenFingerprint, ...] = validate_screens((STIGMATA, LINEUP), CANVAS)

def _require(table: Dict[str, Any], key: str, where: str) -> Any:
    if key not in table:
        raise ConfigurationError(f"{where}: missing '{key}'")
    return table[key]

def _region_from(table: Dict[str, Any], where: str) -> Region:
    if not isinstance(table, dict):
        raise ConfigurationError(f"{where}: regions must be tables")
    label = str(_require(table, "label", where))
    rect = _require(table, "rect", f"{where}/{label}")
    if not isinstance(rect, list) or len(rect) != 4 or not all(isinstance(v, int) for v in rect):
        raise ConfigurationError(f"{where}/{label}: rect must be [x, y, w, h]")
    steps = parse_steps(table.get("steps", []))
    return Region(label, tuple(rect), steps)  # type: ignore[arg-type]

def screens_from_table(doc: Dict[str, Any]) -> Tuple[Tuple[int, int], Tuple[ScreenFingerprint, ...]]:
    canvas_tbl = doc.get("canvas", {})
    try:
        canvas = (int(canvas_tbl.get("width", CANVAS[0])), int(canvas_tbl.get("height", CANVAS[1])))
    except (AttributeError, TypeError, ValueError):
        raise ConfigurationError("[canvas] width and height must be integers") from None
    entries: List[Dict[str, Any]] = doc.get("screens", [])
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError("profile defines no [[screens]]")
    screens = []
    for i, s in enumerate(entries):
        where = f"screens[{i}]"
        if not isinstance(s, dict):
            raise ConfigurationError(f"{where}: expected a table")
        tag = str(_require(s, "tag", where))
        raw = _require(s, "threshold", tag)
        try:
            threshold = float(raw)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{tag}: threshold must be a number") from None
        anchors = _require(s, "anchors", tag)
        if not isinstance(anchors, list):
            raise ConfigurationError(f"{tag}: anchors must be a list of [x, y, color] rows")
        raw_regions = s.get("regions", [])
        if not isinstance(raw_regions, list):
            raise ConfigurationError(f"{tag}: regions must be an array of tables")
        regions = tuple(_region_from(r, tag) for r in raw_regions)
        screens.append(ScreenFingerprint(tag, anchors_from(anchors), threshold, regions))
    return canvas, validate_screens(screens, canvas)

def load_screens(path: Union[str, Path]) -> Tuple[Tuple[int, int], Tuple[ScreenFingerprint, ...]]:
    p = Path(path)
    try:
        doc = tomllib.loads(p.read_text("utf-8"))
    except OSError as e:
        raise ConfigurationError(f"cannot read screen profile {p}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"failed to parse screen profile {p}: {e}") from e
    return screens_from_table(doc)
