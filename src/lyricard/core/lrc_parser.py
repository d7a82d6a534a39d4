# core/lrc_parser.py
from __future__ import annotations

import re
from typing import Dict, List, Optional

from lyricard.core.models import LyricLine

# Only the exact [MM:SS.mmm] form counts as a timestamp.
_TS_RE = re.compile(r"\[(\d{2}):(\d{2})\.(\d{3})\]")
_ANY_TAG_RE = re.compile(r"\[.*?\]")
_PAIR_SPLIT_RE = re.compile(r"\s{2,}")
_CJK_RE = re.compile(r"[\u4e00-\u9fff]")


def _ts_to_seconds(mm: str, ss: str, mmm: str) -> float:
    return int(mm) * 60 + int(ss) + int(mmm) / 1000


def format_timestamp(seconds: float) -> str:
    """Format seconds as mm:ss.mmm."""
    ms = max(0, int(round(seconds * 1000)))
    total_s = ms // 1000
    return f"{total_s // 60:02d}:{total_s % 60:02d}.{ms % 1000:03d}"


def contains_cjk(text: str) -> bool:
    return bool(_CJK_RE.search(text or ""))


def parse_lrc(lrc_text: Optional[str]) -> List[LyricLine]:
    """
    Returns LyricLine entries sorted by time.

    Bilingual lyrics are supported in two encodings:
      - inline: "[00:02.970]Hello  你好" (two or more spaces split text/translation)
      - split lines sharing one timestamp, where the CJK line is the translation

    A line carrying several timestamps is timed by the first one only.
    Malformed lines are skipped; this never raises.
    """
    out: List[LyricLine] = []
    if not lrc_text:
        return out

    # time -> {"text": ..., "translation": ...}
    staged: Dict[float, Dict[str, str]] = {}

    for raw_line in lrc_text.split("\n"):
        m = _TS_RE.search(raw_line)
        if not m:
            continue

        t = _ts_to_seconds(m.group(1), m.group(2), m.group(3))
        text = _ANY_TAG_RE.sub("", raw_line).strip()
        if not text:
            continue

        parts = _PAIR_SPLIT_RE.split(text, maxsplit=1)
        if len(parts) >= 2:
            out.append(LyricLine(time=t, text=parts[0].strip(), translation=parts[1].strip()))
            continue

        entry = staged.setdefault(t, {})
        if contains_cjk(text):
            entry["translation"] = text
        else:
            entry["text"] = text

    for t, entry in staged.items():
        text = entry.get("text")
        translation = entry.get("translation")
        if text and translation:
            out.append(LyricLine(time=t, text=text, translation=translation))
        elif text or translation:
            out.append(LyricLine(time=t, text=text or translation))

    # sorted() is stable, so same-time entries keep document order
    return sorted(out, key=lambda line: line.time)
