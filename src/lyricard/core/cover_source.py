# core/cover_source.py
from __future__ import annotations

import logging
from typing import Optional

import requests
from mutagen._util import MutagenError

from lyricard.core.models import TrackInfo
from lyricard.library.scan_library import read_embedded_cover

logger = logging.getLogger(__name__)


class CoverLoadError(Exception):
    """A cover source exists but could not be read."""


def load_image_bytes(source: str, session: requests.Session | None = None, timeout: float = 15) -> bytes:
    """Read an image from an http(s) URL or a local path."""
    try:
        if source.startswith(("http://", "https://")):
            http = session or requests
            r = http.get(source, timeout=timeout)
            r.raise_for_status()
            return r.content

        with open(source, "rb") as f:
            return f.read()
    except (requests.RequestException, OSError) as e:
        raise CoverLoadError(f"Failed to load image {source}: {e}") from e


def load_cover(track: TrackInfo, session: requests.Session | None = None) -> Optional[bytes]:
    """
    Cover bytes for a track, or None when it has no cover at all.

    Sources, in order: cover file, embedded picture, cover URL.
    """
    if track.cover_path:
        return load_image_bytes(track.cover_path)

    if track.file_path:
        try:
            embedded = read_embedded_cover(track.file_path)
        except (MutagenError, OSError) as e:
            raise CoverLoadError(f"Failed to read embedded cover: {e}") from e
        if embedded:
            return embedded

    if track.cover_url:
        return load_image_bytes(track.cover_url, session=session)

    logger.debug("No cover for %r", track.title)
    return None
