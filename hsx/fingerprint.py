from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple

from .buffer import Rect
from .errors import ConfigurationError
from .preprocess import TransformStep

RGB = Tuple[int, int, int]

@dataclass(frozen=True)
class Anchor:
    x: int
    y: int
    rgb: RGB

@dataclass(frozen=True)
class Region:
    label: str
    rect: Rect
    steps: Tuple[TransformStep, ...] = ()

@dataclass(frozen=True)
class ScreenFingerprint:
    """Sparse pixel signature of one screen, in canvas coordinates."""
    tag: str
    anchors: Tuple[Anchor, ...]
    threshold: float
    regions: Tuple[Region, ...] = field(default=())

def parse_color(value) -> RGB:
    """Accept ``"#ee9aff"``, ``"ee9aff"`` or an ``[r, g, b]`` triple."""
    if isinstance(value, str):
        s = value.strip().lstrip("#")
        if len(s) != 6:
            raise ConfigurationError(f"bad color: {value!r}")
        try:
            return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)
        except ValueError:
            raise ConfigurationError(f"bad color: {value!r}") from None
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return tuple(int(c) for c in value)  # type: ignore[return-value]
    raise ConfigurationError(f"bad color: {value!r}")

def _check_rect(where: str, rect: Rect, canvas: Tuple[int, int]) -> None:
    x, y, w, h = rect
    cw, ch = canvas
    if w <= 0 or h <= 0 or x < 0 or y < 0 or x + w > cw or y + h > ch:
        raise ConfigurationError(f"{where}: rect {rect} outside {cw}x{ch} canvas")

def validate_fingerprint(fp: ScreenFingerprint, canvas: Tuple[int, int]) -> ScreenFingerprint:
    cw, ch = canvas
    if not fp.tag:
        raise ConfigurationError("fingerprint without a tag")
    if not fp.anchors:
        raise ConfigurationError(f"{fp.tag}: fingerprint has no anchors")
    if not 0.0 <= fp.threshold <= 1.0:
        raise ConfigurationError(f"{fp.tag}: threshold {fp.threshold} not in [0, 1]")
    for a in fp.anchors:
        if not (0 <= a.x < cw and 0 <= a.y < ch):
            raise ConfigurationError(f"{fp.tag}: anchor ({a.x}, {a.y}) outside {cw}x{ch} canvas")
        if len(a.rgb) != 3 or any(not 0 <= c <= 255 for c in a.rgb):
            raise ConfigurationError(f"{fp.tag}: anchor ({a.x}, {a.y}) has bad color {a.rgb}")
    labels = [r.label for r in fp.regions]
    if len(set(labels)) != len(labels):
        raise ConfigurationError(f"{fp.tag}: duplicate region labels {labels}")
    for r in fp.regions:
        _check_rect(f"{fp.tag}/{r.label}", r.rect, canvas)
    return fp

def validate_screens(screens: Sequence[ScreenFingerprint], canvas: Tuple[int, int]) -> Tuple[ScreenFingerprint, ...]:
    tags = [s.tag for s in screens]
    if len(set(tags)) != len(tags):
        raise ConfigurationError(f"duplicate screen tags: {tags}")
    return tuple(validate_fingerprint(s, canvas) for s in screens)

def anchors_from(rows: Iterable[Sequence]) -> Tuple[Anchor, ...]:
    """Build anchors from ``(x, y, color)`` or ``(x, y, r, g, b)`` rows."""
    out = []
    for row in rows:
        try:
            if len(row) == 3:
                x, y, color = row
                out.append(Anchor(int(x), int(y), parse_color(color)))
            elif len(row) == 5:
                x, y, r, g, b = row
                out.append(Anchor(int(x), int(y), (int(r), int(g), int(b))))
            else:
                raise ConfigurationError(f"bad anchor row: {row!r}")
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"bad anchor row: {row!r}") from e
    return tuple(out)
