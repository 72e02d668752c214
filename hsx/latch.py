from __future__ import annotations
from typing import Dict, Iterable

class ScreenLatch:
    """Rising-edge detector per screen tag.

    Each tag is either idle or active. ``update`` reports True only on an
    idle -> active transition, so a screen held for many frames enters once.
    One miss puts the tag back to idle; there is no debounce window.

    Updates must arrive once per tag per frame, in presentation order.
    """

    def __init__(self, tags: Iterable[str] = ()):
        self._active: Dict[str, bool] = {t: False for t in tags}

    def update(self, tag: str, matched: bool) -> bool:
        was = self._active.get(tag, False)
        self._active[tag] = bool(matched)
        return bool(matched) and not was
