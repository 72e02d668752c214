from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Union
import json

import pandas as pd

from .buffer import format_clock

@dataclass(frozen=True)
class ScreenEntered:
    tag: str
    frame_index: int = -1
    timestamp_ms: float = 0.0

@dataclass(frozen=True)
class FieldRecognized:
    label: str
    text: str
    frame_index: int = -1
    timestamp_ms: float = 0.0

Event = Union[ScreenEntered, FieldRecognized]
EVENT_TYPES = (ScreenEntered, FieldRecognized)

COLUMNS = ["kind", "frame", "t_ms", "clock", "tag", "label", "text"]

def _unhandled(event: Any) -> TypeError:
    return TypeError(f"unhandled event type: {type(event).__name__}")

def render_event(event: Event) -> str:
    if isinstance(event, ScreenEntered):
        return f"[{event.tag.upper()}_SCREEN]"
    if isinstance(event, FieldRecognized):
        return f"{event.label}={event.text}"
    raise _unhandled(event)

def event_record(event: Event) -> Dict[str, Any]:
    if isinstance(event, ScreenEntered):
        kind, tag, label, text = "screen_entered", event.tag, None, None
    elif isinstance(event, FieldRecognized):
        kind, tag, label, text = "field_recognized", None, event.label, event.text
    else:
        raise _unhandled(event)
    return {"kind": kind, "frame": event.frame_index, "t_ms": round(float(event.timestamp_ms), 3),
            "clock": format_clock(event.timestamp_ms), "tag": tag, "label": label, "text": text}

class EventTimeline:
    """Append-only record of everything a run saw, in emission order."""

    def __init__(self):
        self._events: List[Event] = []

    def append(self, event: Event) -> None:
        if not isinstance(event, EVENT_TYPES):
            raise _unhandled(event)
        self._events.append(event)

    def iterate(self) -> Iterator[Event]:
        n = len(self._events)
        for i in range(n):
            yield self._events[i]

    def __iter__(self) -> Iterator[Event]:
        return self.iterate()

    def __len__(self) -> int:
        return len(self._events)

    def screens(self) -> List[ScreenEntered]:
        return [e for e in self._events if isinstance(e, ScreenEntered)]

    def fields(self) -> List[FieldRecognized]:
        return [e for e in self._events if isinstance(e, FieldRecognized)]

    def render_lines(self) -> List[str]:
        return [render_event(e) for e in self.iterate()]

    def to_records(self) -> List[Dict[str, Any]]:
        return [event_record(e) for e in self.iterate()]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.to_records(), columns=COLUMNS)

    def write_jsonl(self, path: Union[str, Path]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            for rec in self.to_records():
                f.write(json.dumps(rec, ensure_ascii=False) + "\n")
