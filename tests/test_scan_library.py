"""Tests for the library scanner helpers."""

import os

from lyricard.core.models import TrackInfo
from lyricard.library.scan_library import (
    group_albums,
    iter_audio_paths,
    read_embedded_cover,
    read_embedded_lyrics,
    sidecar_cover_path,
    sidecar_lrc_path,
)


def _touch(path, data=b""):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return str(path)


class TestFilesystem:
    def test_iter_audio_paths(self, tmp_path):
        a = _touch(tmp_path / "b" / "02.flac")
        b = _touch(tmp_path / "a" / "01.MP3")
        _touch(tmp_path / "a" / "01.lrc")
        _touch(tmp_path / "a" / "cover.jpg")

        assert iter_audio_paths([str(tmp_path), str(tmp_path / "missing"), ""]) == sorted([a, b])

    def test_sidecars(self, tmp_path):
        song = _touch(tmp_path / "song.mp3")
        lrc = _touch(tmp_path / "song.lrc")
        cover = _touch(tmp_path / "folder.png")

        assert sidecar_lrc_path(song) == lrc
        assert sidecar_cover_path(song) == cover

    def test_no_sidecars(self, tmp_path):
        song = _touch(tmp_path / "song.mp3")

        assert sidecar_lrc_path(song) is None
        assert sidecar_cover_path(song) is None

    def test_untagged_file_has_no_embedded_data(self, tmp_path):
        song = _touch(tmp_path / "song.mp3", b"not really audio")
        wav = _touch(tmp_path / "song.wav", b"RIFF")

        assert read_embedded_lyrics(song) is None
        assert read_embedded_cover(song) is None
        assert read_embedded_lyrics(wav) is None


class TestGroupAlbums:
    def test_grouping_and_order(self):
        tracks = [
            TrackInfo(title="Zeta", album="B", album_artist="X", track_number=None),
            TrackInfo(title="Two", album="B", album_artist="X", track_number=2, cover_path=os.path.join("b", "cover.jpg")),
            TrackInfo(title="One", album="B", album_artist="X", track_number=1),
            TrackInfo(title="Solo", album="a", album_artist="Y", track_number=1),
        ]

        albums = group_albums(tracks)

        assert [a.title for a in albums] == ["a", "B"]
        assert [t.title for t in albums[1].tracks] == ["One", "Two", "Zeta"]
        assert albums[1].cover_path == os.path.join("b", "cover.jpg")
        assert albums[0].artist == "Y"
        assert albums[0].cover_path is None

    def test_missing_album_metadata(self):
        albums = group_albums([TrackInfo(title="Loose", artist="Someone")])

        assert albums[0].title == "Unknown Album"
        assert albums[0].artist == "Someone"
