"""Tests for the lyric selection set."""

from lyricard.core.selection import LyricSelection


class TestLyricSelection:
    def test_toggle(self):
        sel = LyricSelection()

        assert sel.toggle(3) is True
        assert 3 in sel
        assert sel.toggle(3) is False
        assert 3 not in sel
        assert len(sel) == 0

    def test_ordered_ignores_click_order(self):
        sel = LyricSelection()
        for i in (5, 1, 3):
            sel.toggle(i)

        assert sel.ordered() == [1, 3, 5]

    def test_pick_drops_stale_indices(self):
        sel = LyricSelection([4, 0, 9])

        assert sel.pick(["a", "b", "c", "d", "e"]) == ["a", "e"]

    def test_clear(self):
        sel = LyricSelection([1, 2])
        sel.clear()

        assert sel.ordered() == []
