# core/config.py
from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass, field, fields
from typing import Optional

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"


@dataclass
class Settings:
    music_dirs: list[str] = field(default_factory=list)
    export_dir: str = ""
    lrclib_base_url: str = "https://lrclib.net"
    use_lrclib: bool = True

    show_translation: bool = False
    card_width: int = 400
    pixel_ratio: Optional[float] = None   # None -> use the screen ratio
    font_family: str = ""
    watermark: str = "Music Player"


def settings_path(app_data_dir: str) -> str:
    return os.path.join(app_data_dir, SETTINGS_FILE)


def load_settings(path: str) -> Settings:
    """Missing or broken files give defaults; unknown keys are ignored."""
    if not os.path.exists(path):
        return Settings()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Error loading settings from %s: %s", path, e)
        return Settings()

    if not isinstance(data, dict):
        return Settings()

    known = {f.name for f in fields(Settings)}
    return Settings(**{k: v for k, v in data.items() if k in known})


def save_settings(settings: Settings, path: str) -> None:
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=".settings-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(asdict(settings), f, indent=4)
        os.replace(tmp_path, path)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    logger.debug("Settings written to %s", path)
