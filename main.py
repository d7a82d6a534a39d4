import logging
import os
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths
from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from lyricard.core.config import load_settings, settings_path
from lyricard.core.state import AppState, Notify
from lyricard.player.player import Player
from lyricard.ui.main_window import MainWindow

logger = logging.getLogger("lyricard")


def setup_logging() -> None:
    level = os.getenv("LYRICARD_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def get_app_data_dir() -> str:
    base = QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)
    os.makedirs(base, exist_ok=True)
    return base


def init_app_state() -> AppState:
    app_data_dir = get_app_data_dir()
    path = settings_path(app_data_dir)

    app_state = AppState(load_settings(path))
    app_state.app_data_dir = app_data_dir
    app_state.settings_path = path
    logger.info("Using settings at %s", path)

    try:
        app_state.player = Player()
    except Exception as e:
        logger.exception("Audio player initialization failed")
        app_state.player = None
        app_state.queued_notifications.append(
            Notify(message=f"Failed to initialize audio player: {e}", notify_type="error")
        )

    return app_state


def main() -> int:
    setup_logging()
    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName("Lyricard")

    app_state = init_app_state()
    main_window = MainWindow(app_state)
    main_window.show()

    return qt_app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
