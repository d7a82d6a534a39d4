"""Tests for lyric and cover sources."""

from unittest import mock

import pytest
import requests

from lyricard.core.cover_source import CoverLoadError, load_cover, load_image_bytes
from lyricard.core.lrclib_client import LyricsResult
from lyricard.core.lyrics_source import LyricsLoader, fetch_lyrics_text
from lyricard.core.models import LyricLine, TrackInfo


def _response(text="", content=b"", encoding="utf-8", status=200):
    r = mock.Mock()
    r.text = text
    r.content = content
    r.encoding = encoding
    r.status_code = status
    r.raise_for_status = mock.Mock()
    return r


class TestLyricsLoader:
    def test_sidecar_file(self, tmp_path):
        lrc = tmp_path / "song.lrc"
        lrc.write_text("﻿[00:01.000]From file\n", encoding="utf-8")
        loader = LyricsLoader(session=mock.Mock())

        lines = loader.load(TrackInfo(title="Song", lyrics_path=str(lrc)))

        assert lines == [LyricLine(1.0, "From file")]

    def test_url(self):
        session = mock.Mock()
        session.get.return_value = _response(text="[00:02.000]From web")
        loader = LyricsLoader(session=session)

        lines = loader.load(TrackInfo(title="Song", lyrics_url="https://example.com/song.lrc"))

        assert lines == [LyricLine(2.0, "From web")]
        session.get.assert_called_once_with("https://example.com/song.lrc", timeout=15)

    def test_lrclib_fallback(self):
        lrclib = mock.Mock()
        lrclib.fetch_best.return_value = LyricsResult(
            plain="x", synced="[00:03.000]From LRCLIB", instrumental=False, source="get"
        )
        loader = LyricsLoader(session=mock.Mock(), lrclib=lrclib)

        lines = loader.load(TrackInfo(title="Song", artist="Artist", album="Album", duration_s=200.0))

        assert lines == [LyricLine(3.0, "From LRCLIB")]
        lrclib.fetch_best.assert_called_once_with(title="Song", artist="Artist", album="Album", duration_s=200.0)

    def test_network_failure_yields_empty(self):
        session = mock.Mock()
        session.get.side_effect = requests.ConnectionError("offline")
        loader = LyricsLoader(session=session)

        assert loader.load(TrackInfo(title="Song", lyrics_url="https://example.com/x.lrc")) == []

    def test_missing_sidecar_yields_empty(self, tmp_path):
        loader = LyricsLoader(session=mock.Mock())

        assert loader.load(TrackInfo(title="Song", lyrics_path=str(tmp_path / "gone.lrc"))) == []

    def test_no_source(self):
        assert LyricsLoader(session=mock.Mock()).load(TrackInfo(title="Song")) == []

    def test_latin1_default_is_read_as_utf8(self):
        session = mock.Mock()
        resp = _response(text="ok", encoding="ISO-8859-1")
        session.get.return_value = resp

        fetch_lyrics_text("https://example.com/x.lrc", session=session)

        assert resp.encoding == "utf-8"


class TestCoverSource:
    def test_cover_file(self, tmp_path, make_png):
        cover = tmp_path / "cover.png"
        cover.write_bytes(make_png())

        assert load_cover(TrackInfo(title="Song", cover_path=str(cover))) == make_png()

    def test_cover_url(self):
        session = mock.Mock()
        session.get.return_value = _response(content=b"image-bytes")

        data = load_cover(TrackInfo(title="Song", cover_url="https://example.com/c.jpg"), session=session)

        assert data == b"image-bytes"

    def test_no_cover(self):
        assert load_cover(TrackInfo(title="Song")) is None

    def test_missing_cover_file(self, tmp_path):
        with pytest.raises(CoverLoadError):
            load_image_bytes(str(tmp_path / "missing.jpg"))

    def test_http_error(self):
        session = mock.Mock()
        session.get.side_effect = requests.HTTPError("404")

        with pytest.raises(CoverLoadError):
            load_image_bytes("https://example.com/c.jpg", session=session)
