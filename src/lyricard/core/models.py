# core/models.py
from __future__ import annotations
from dataclasses import dataclass

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class LyricLine:
    time: float                      # seconds from track start
    text: str
    translation: str | None = None


@dataclass(frozen=True)
class TrackInfo:
    title: str
    artist: str | None = None
    album: str | None = None
    album_artist: str | None = None
    duration_s: float | None = None
    track_number: int | None = None
    file_path: str | None = None     # FULL path to audio file
    lyrics_path: str | None = None   # sidecar .lrc
    lyrics_url: str | None = None
    cover_path: str | None = None
    cover_url: str | None = None

    def subtitle(self) -> str:
        parts = [p for p in (self.artist, self.album) if p]
        return " • ".join(parts)


@dataclass(frozen=True)
class AlbumInfo:
    title: str
    artist: str | None = None
    cover_path: str | None = None
    cover_url: str | None = None
    tracks: tuple[TrackInfo, ...] = ()


@dataclass(frozen=True)
class ExtractedColors:
    dominant: RGB
    palette: tuple[RGB, ...]


@dataclass(frozen=True)
class ColorVariations:
    darker: RGB
    lighter: RGB
    complementary: RGB


@dataclass(frozen=True)
class BackgroundGradient:
    from_color: RGB
    via: RGB          # always the untouched dominant color
    to: RGB
    style: str        # Qt style sheet background
