# library/scan_library.py
from __future__ import annotations

import base64
import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from mutagen import File as MutagenFile
from mutagen.flac import FLAC, Picture
from mutagen.id3 import ID3, ID3NoHeaderError
from mutagen.mp4 import MP4
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis
from mutagen._util import MutagenError

from lyricard.core.models import AlbumInfo, TrackInfo

logger = logging.getLogger(__name__)

AUDIO_EXTS = {".mp3", ".m4a", ".mp4", ".flac", ".ogg", ".oga", ".opus", ".wav"}
COVER_NAMES = ("cover", "folder", "front", "album")
COVER_EXTS = (".jpg", ".jpeg", ".png", ".webp")

# Tag keys written by common lyric taggers (lrcget, LRCLIB tools).
VORBIS_SYNCED_KEY = "LYRICS"
ID3_SYNCED_DESC = "LYRICS"
MP4_SYNCED_KEY = "----:com.lrclib:LYRICS"


def iter_audio_paths(directories: Iterable[str]) -> list[str]:
    paths: list[str] = []
    for root in directories:
        if not root or not os.path.isdir(root):
            continue
        for dirpath, _, filenames in os.walk(root):
            for fn in sorted(filenames):
                ext = os.path.splitext(fn)[1].lower()
                if ext in AUDIO_EXTS:
                    paths.append(os.path.join(dirpath, fn))
    return sorted(paths)


def _first(easy, key: str) -> str | None:
    v = easy.get(key)
    if not v:
        return None
    if isinstance(v, list):
        return (str(v[0]).strip() if v else None) or None
    s = str(v).strip()
    return s or None


def _parse_track_number(raw: str | None) -> int | None:
    if not raw:
        return None
    try:
        head = str(raw).split("/")[0].strip()
        return int(head)
    except ValueError:
        return None


def sidecar_lrc_path(path: str) -> Optional[str]:
    lrc_path = os.path.splitext(path)[0] + ".lrc"
    return lrc_path if os.path.isfile(lrc_path) else None


def sidecar_cover_path(path: str) -> Optional[str]:
    """cover.jpg / folder.png / ... next to the audio file."""
    folder = Path(path).parent
    for name in COVER_NAMES:
        for ext in COVER_EXTS:
            candidate = folder / f"{name}{ext}"
            if candidate.is_file():
                return str(candidate)
    return None


def _vorbis_first(audio, key: str) -> Optional[str]:
    values = audio.get(key)
    if isinstance(values, (list, tuple)) and values:
        return str(values[0])
    return None


def read_embedded_lyrics(path: str) -> Optional[str]:
    """
    Read embedded synced (LRC) lyrics from an audio file, or None.

      - MP3: TXXX with desc 'LYRICS', then USLT as a last resort
      - FLAC/Vorbis/Opus: 'LYRICS' vorbis comment
      - MP4/M4A: custom atom '----:com.lrclib:LYRICS' (bytes), then '\xa9lyr'
    """
    ext = Path(path).suffix.lower()
    synced: Optional[str] = None

    try:
        if ext == ".mp3":
            try:
                tags = ID3(path)
            except ID3NoHeaderError:
                return None

            for frame in tags.getall("TXXX"):
                if getattr(frame, "desc", "") == ID3_SYNCED_DESC:
                    txt = getattr(frame, "text", None)
                    if isinstance(txt, (list, tuple)) and txt:
                        synced = str(txt[0])
                    elif isinstance(txt, str):
                        synced = txt
                    break

            if not synced:
                uslt = tags.getall("USLT")
                if uslt and getattr(uslt[0], "text", None):
                    synced = str(uslt[0].text)

        elif ext == ".flac":
            synced = _vorbis_first(FLAC(path), VORBIS_SYNCED_KEY)
        elif ext in {".ogg", ".oga"}:
            synced = _vorbis_first(OggVorbis(path), VORBIS_SYNCED_KEY)
        elif ext == ".opus":
            synced = _vorbis_first(OggOpus(path), VORBIS_SYNCED_KEY)

        elif ext in {".m4a", ".mp4"}:
            audio = MP4(path)
            atom = audio.get(MP4_SYNCED_KEY) or audio.get("\xa9lyr")
            if isinstance(atom, (list, tuple)) and atom:
                first = atom[0]
                # custom atoms store bytes
                if isinstance(first, (bytes, bytearray)):
                    synced = bytes(first).decode("utf-8", errors="replace")
                else:
                    synced = str(first)
    except MutagenError as e:
        logger.warning("Failed to read embedded lyrics from %s: %s", path, e)
        return None

    synced = (synced or "").strip()
    return synced or None


def read_embedded_cover(path: str) -> Optional[bytes]:
    """Front cover picture embedded in the audio file, or None."""
    ext = Path(path).suffix.lower()

    try:
        if ext == ".mp3":
            try:
                tags = ID3(path)
            except ID3NoHeaderError:
                return None
            pictures = tags.getall("APIC")
            # type 3 = front cover
            pictures.sort(key=lambda p: 0 if getattr(p, "type", None) == 3 else 1)
            return bytes(pictures[0].data) if pictures else None

        if ext == ".flac":
            pictures = FLAC(path).pictures
            pictures = sorted(pictures, key=lambda p: 0 if p.type == 3 else 1)
            return bytes(pictures[0].data) if pictures else None

        if ext in {".ogg", ".oga", ".opus"}:
            audio = OggOpus(path) if ext == ".opus" else OggVorbis(path)
            blocks = audio.get("metadata_block_picture") or []
            for raw in blocks:
                try:
                    return bytes(Picture(base64.b64decode(raw)).data)
                except (ValueError, MutagenError):
                    continue
            return None

        if ext in {".m4a", ".mp4"}:
            covers = MP4(path).get("covr") or []
            return bytes(covers[0]) if covers else None
    except MutagenError as e:
        logger.warning("Failed to read embedded cover from %s: %s", path, e)

    return None


def track_info_from_path(path: str) -> TrackInfo | None:
    try:
        audio = MutagenFile(path, easy=True)
    except (MutagenError, OSError) as e:
        logger.warning("Cannot parse %s: %s", path, e)
        return None
    if audio is None:
        return None

    title = _first(audio, "title") or os.path.splitext(os.path.basename(path))[0]
    album = _first(audio, "album") or "Unknown Album"
    artist = _first(audio, "artist") or "Unknown Artist"
    album_artist = (
        _first(audio, "albumartist")
        or _first(audio, "album artist")
        or artist
    )

    duration = None
    info = getattr(audio, "info", None)
    if info is not None and getattr(info, "length", None):
        duration = float(info.length)

    return TrackInfo(
        title=title,
        artist=artist,
        album=album,
        album_artist=album_artist,
        duration_s=duration,
        track_number=_parse_track_number(_first(audio, "tracknumber")),
        file_path=path,
        lyrics_path=sidecar_lrc_path(path),
        cover_path=sidecar_cover_path(path),
    )


def group_albums(tracks: Iterable[TrackInfo]) -> list[AlbumInfo]:
    """Group tracks by (album, album artist); albums and tracks come back sorted."""
    grouped: dict[tuple[str, str], list[TrackInfo]] = {}
    for t in tracks:
        key = (t.album or "Unknown Album", t.album_artist or t.artist or "")
        grouped.setdefault(key, []).append(t)

    albums: list[AlbumInfo] = []
    for (title, artist), items in sorted(grouped.items(), key=lambda kv: (kv[0][0].lower(), kv[0][1].lower())):
        items.sort(key=lambda t: (t.track_number is None, t.track_number or 0, t.title.lower()))
        cover = next((t.cover_path for t in items if t.cover_path), None)
        albums.append(AlbumInfo(title=title, artist=artist or None, cover_path=cover, tracks=tuple(items)))
    return albums


def scan_library(directories: Iterable[str]) -> list[AlbumInfo]:
    tracks = []
    for p in iter_audio_paths(directories):
        t = track_info_from_path(p)
        if t is not None:
            tracks.append(t)
    logger.info("Scanned %d tracks", len(tracks))
    return group_albums(tracks)
