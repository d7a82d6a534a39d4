# core/lyric_locator.py
from __future__ import annotations

from bisect import bisect_right
from typing import Optional, Sequence

from lyricard.core.models import LyricLine

# How far a hint is walked forward before falling back to bisect.
_HINT_SCAN_LIMIT = 4


def _is_active(lines: Sequence[LyricLine], i: int, t: float) -> bool:
    if lines[i].time > t:
        return False
    return i + 1 >= len(lines) or lines[i + 1].time > t


def locate_active_line(lines: Sequence[LyricLine], t: float, hint: Optional[int] = None) -> Optional[int]:
    """
    Index of the greatest line whose time <= t, or None before the first line.

    Stateless: `hint` (usually the previous result) only shortens the search
    during normal playback; seeks in either direction fall back to bisect.
    """
    if not lines or t < lines[0].time:
        return None

    if hint is not None and 0 <= hint < len(lines):
        for i in range(hint, min(hint + _HINT_SCAN_LIMIT, len(lines))):
            if _is_active(lines, i, t):
                return i
            if lines[i].time > t:
                break

    times = [line.time for line in lines]
    return bisect_right(times, t) - 1


class ActiveLineTracker:
    """Remembers the last active index so callers only react to changes."""

    def __init__(self, lines: Sequence[LyricLine] = ()):
        self._lines: Sequence[LyricLine] = lines
        self._current: Optional[int] = None

    @property
    def current(self) -> Optional[int]:
        return self._current

    def reset(self, lines: Sequence[LyricLine]) -> None:
        self._lines = lines
        self._current = None

    def update(self, t: float) -> tuple[bool, Optional[int]]:
        """Returns (changed, index)."""
        idx = locate_active_line(self._lines, t, hint=self._current)
        if idx == self._current:
            return False, idx
        self._current = idx
        return True, idx
