from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from lyricard import __version__

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LyricsResult:
    plain: Optional[str]
    synced: Optional[str]
    instrumental: bool
    source: str  # "get" | "search" | "none"


def _result_from(data: dict, source: str) -> LyricsResult:
    plain = (data.get("plainLyrics") or "").strip() or None
    synced = (data.get("syncedLyrics") or "").strip() or None
    instrumental = bool(data.get("instrumental", False)) or (synced == "[au: instrumental]")
    return LyricsResult(plain=plain, synced=synced, instrumental=instrumental, source=source)


class LrcLibClient:
    def __init__(
        self,
        base_url: str = "https://lrclib.net",
        user_agent: str = f"lyricard/{__version__}",
        session: requests.Session | None = None,
        timeout: float = 15,
    ):
        self.base_url = base_url.rstrip("/")
        if self.base_url.endswith("/api"):
            self.base_url = self.base_url[: -len("/api")]
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def get_by_metadata(self, title: str, artist: str, album: str | None, duration_s: float | None) -> Optional[dict]:
        # GET /api/get?track_name=&artist_name=&album_name=&duration=
        params = {
            "track_name": title,
            "artist_name": artist,
        }
        if album:
            params["album_name"] = album
        if duration_s and duration_s > 0:
            params["duration"] = int(round(duration_s))

        r = self.session.get(f"{self.base_url}/api/get", params=params, timeout=self.timeout)
        if r.status_code == 404:
            return None
        r.raise_for_status()
        return r.json()

    def search(self, query: str, artist: str | None = None, duration_s: float | None = None, limit: int = 10) -> list[dict]:
        # GET /api/search?q=...&artist_name=...
        params = {"q": query}
        if artist:
            params["artist_name"] = artist
        r = self.session.get(f"{self.base_url}/api/search", params=params, timeout=self.timeout)
        r.raise_for_status()
        items = r.json()
        if not isinstance(items, list):
            return []

        # prefer synced results with the closest duration
        def _rank(item: dict) -> tuple[int, float]:
            has_synced = 0 if item.get("syncedLyrics") else 1
            if duration_s and item.get("duration"):
                return has_synced, abs(float(item["duration"]) - duration_s)
            return has_synced, 0.0

        return sorted(items, key=_rank)[: int(limit)]

    def fetch_best(self, title: str, artist: str, album: str | None, duration_s: float | None) -> LyricsResult:
        # 1) /api/get (best match by metadata)
        data = self.get_by_metadata(title=title, artist=artist, album=album, duration_s=duration_s)
        if data:
            return _result_from(data, "get")

        # 2) /api/search (query = "artist title")
        items = self.search(query=f"{artist} {title}", artist=artist, duration_s=duration_s, limit=10)
        if items:
            return _result_from(items[0], "search")

        logger.info("No LRCLIB lyrics for %s - %s", artist, title)
        return LyricsResult(plain=None, synced=None, instrumental=False, source="none")
