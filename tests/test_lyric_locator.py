"""Tests for the active-line locator."""

import pytest

from lyricard.core.lyric_locator import ActiveLineTracker, locate_active_line
from lyricard.core.models import LyricLine


def _brute_force(lines, t):
    found = None
    for i, line in enumerate(lines):
        if line.time <= t:
            found = i
    return found


class TestLocateActiveLine:
    def test_empty(self):
        assert locate_active_line([], 10.0) is None

    def test_before_first_line(self, sample_lines):
        assert locate_active_line(sample_lines, 0.1) is None

    def test_exact_boundary(self, sample_lines):
        assert locate_active_line(sample_lines, 2.0) == 1

    def test_after_last_line(self, sample_lines):
        assert locate_active_line(sample_lines, 999.0) == 2

    def test_seek_backwards_with_stale_hint(self, sample_lines):
        assert locate_active_line(sample_lines, 1.0, hint=2) == 0

    def test_seek_far_forward_with_hint(self):
        lines = [LyricLine(time=float(i), text=str(i)) for i in range(50)]

        assert locate_active_line(lines, 42.5, hint=0) == 42

    @pytest.mark.parametrize("hint", [None, -1, 0, 1, 2, 7])
    def test_agrees_with_brute_force(self, hint):
        lines = [
            LyricLine(time=0.5, text="a"),
            LyricLine(time=1.0, text="b"),
            LyricLine(time=1.0, text="c"),
            LyricLine(time=3.25, text="d"),
            LyricLine(time=8.0, text="e"),
        ]
        for step in range(0, 100):
            t = step / 10
            assert locate_active_line(lines, t, hint=hint) == _brute_force(lines, t)


class TestActiveLineTracker:
    def test_reports_only_changes(self, sample_lines):
        tracker = ActiveLineTracker(sample_lines)

        assert tracker.update(0.0) == (False, None)
        assert tracker.update(0.6) == (True, 0)
        assert tracker.update(1.5) == (False, 0)
        assert tracker.update(2.1) == (True, 1)
        assert tracker.current == 1

    def test_seek_back_and_reset(self, sample_lines):
        tracker = ActiveLineTracker(sample_lines)
        tracker.update(5.0)

        assert tracker.update(0.0) == (True, None)

        tracker.update(5.0)
        tracker.reset([])
        assert tracker.current is None
        assert tracker.update(5.0) == (False, None)
