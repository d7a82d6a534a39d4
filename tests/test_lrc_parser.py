"""Tests for the timed-text parser."""

import pytest

from lyricard.core.lrc_parser import contains_cjk, format_timestamp, parse_lrc
from lyricard.core.models import LyricLine


class TestParseLrc:
    def test_basic_lines(self):
        lines = parse_lrc("[00:01.000]Hello\n[00:03.500]World")

        assert lines == [
            LyricLine(time=1.0, text="Hello"),
            LyricLine(time=3.5, text="World"),
        ]

    def test_timestamp_arithmetic(self):
        lines = parse_lrc("[01:02.345]Later")

        assert lines[0].time == pytest.approx(62.345)

    def test_untagged_and_metadata_lines_are_dropped(self):
        text = "[ar:Someone]\n[ti:Song]\nplain text\n[00:01.000]Kept"

        assert [line.text for line in parse_lrc(text)] == ["Kept"]

    def test_other_timestamp_precisions_are_ignored(self):
        text = "[0:01.000]a\n[00:01.00]b\n[00:01]c\n[00:02.000]d"

        assert [line.text for line in parse_lrc(text)] == ["d"]

    def test_empty_text_after_stripping_is_dropped(self):
        assert parse_lrc("[00:01.000]   \n[00:02.000][x]") == []

    def test_inline_translation_pair(self):
        lines = parse_lrc("[00:02.500]Hello  你好")

        assert lines == [LyricLine(time=2.5, text="Hello", translation="你好")]

    def test_inline_pair_splits_at_first_run_only(self):
        lines = parse_lrc("[00:01.000]a  b   c")

        assert lines[0].text == "a"
        assert lines[0].translation == "b   c"

    def test_split_line_translation_merged_by_time(self):
        lines = parse_lrc("[00:05.000]Hello\n[00:05.000]你好")

        assert lines == [LyricLine(time=5.0, text="Hello", translation="你好")]

    def test_split_line_order_does_not_matter(self):
        lines = parse_lrc("[00:05.000]你好\n[00:05.000]Hello")

        assert lines == [LyricLine(time=5.0, text="Hello", translation="你好")]

    def test_lonely_cjk_line_becomes_text(self):
        lines = parse_lrc("[00:05.000]你好")

        assert lines == [LyricLine(time=5.0, text="你好", translation=None)]

    def test_output_sorted_by_time(self):
        lines = parse_lrc("[00:09.000]c\n[00:01.000]a\n[00:05.000]b")

        assert [line.text for line in lines] == ["a", "b", "c"]
        assert [line.time for line in lines] == sorted(line.time for line in lines)

    def test_multiple_tags_use_first_only(self):
        lines = parse_lrc("[00:01.000][00:30.000]Chorus")

        assert lines == [LyricLine(time=1.0, text="Chorus")]

    def test_crlf_input(self):
        lines = parse_lrc("[00:01.000]Hi\r\n[00:02.000]There\r\n")

        assert [line.text for line in lines] == ["Hi", "There"]

    @pytest.mark.parametrize("text", [None, "", "no tags at all", "[[[]]]\x00", "[99:99.999]"])
    def test_never_raises(self, text):
        assert parse_lrc(text) == []


class TestHelpers:
    def test_format_timestamp(self):
        assert format_timestamp(62.345) == "01:02.345"
        assert format_timestamp(0) == "00:00.000"
        assert format_timestamp(-3) == "00:00.000"

    def test_contains_cjk(self):
        assert contains_cjk("abc 中")
        assert not contains_cjk("abc")
        assert not contains_cjk("")
