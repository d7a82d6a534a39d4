# core/lyrics_source.py
from __future__ import annotations

import logging
from typing import List, Optional

import requests
from mutagen._util import MutagenError

from lyricard.core.lrc_parser import parse_lrc
from lyricard.core.lrclib_client import LrcLibClient
from lyricard.core.models import LyricLine, TrackInfo
from lyricard.library.scan_library import read_embedded_lyrics

logger = logging.getLogger(__name__)


def fetch_lyrics_text(url: str, session: requests.Session | None = None, timeout: float = 15) -> str:
    """Download a timed-text document; the whole body is read before parsing."""
    http = session or requests
    r = http.get(url, timeout=timeout)
    r.raise_for_status()
    if not r.encoding or r.encoding.lower() == "iso-8859-1":
        r.encoding = "utf-8"
    return r.text


def read_lyrics_file(path: str) -> str:
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        return f.read()


class LyricsLoader:
    """
    Finds the timed-text document for a track.

    Sources, in order: sidecar .lrc, embedded tags, explicit URL, LRCLIB.
    """

    def __init__(self, session: requests.Session | None = None, lrclib: LrcLibClient | None = None):
        self.session = session or requests.Session()
        self.lrclib = lrclib

    def load_text(self, track: TrackInfo) -> Optional[str]:
        if track.lyrics_path:
            return read_lyrics_file(track.lyrics_path)

        if track.file_path:
            embedded = read_embedded_lyrics(track.file_path)
            if embedded:
                return embedded

        if track.lyrics_url:
            return fetch_lyrics_text(track.lyrics_url, session=self.session)

        if self.lrclib and track.title and track.artist:
            result = self.lrclib.fetch_best(
                title=track.title,
                artist=track.artist,
                album=track.album,
                duration_s=track.duration_s,
            )
            return result.synced

        return None

    def load(self, track: TrackInfo) -> List[LyricLine]:
        """Parsed lyrics for the track; any failure yields an empty list."""
        try:
            text = self.load_text(track)
        except (requests.RequestException, OSError, MutagenError, ValueError) as e:
            logger.error("Failed to load lyrics for %r: %s", track.title, e)
            return []

        lines = parse_lrc(text)
        logger.info("Parsed %d lyric lines for %r", len(lines), track.title)
        return lines
