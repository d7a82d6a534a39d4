from __future__ import annotations
from dataclasses import dataclass
from PySide6.QtCore import QObject, Signal, Slot

from lyricard.core.config import Settings


@dataclass(frozen=True)
class Notify:
    message: str
    notify_type: str = "info"   # info/success/warn/error


class AppState(QObject):
    notification = Signal(object)   # emits Notify
    status_changed = Signal(str)    # generic status text
    track_changed = Signal(object)  # emits TrackInfo | None

    def __init__(self, settings: Settings | None = None):
        super().__init__()
        self.settings = settings or Settings()
        self.settings_path: str | None = None
        self.app_data_dir: str | None = None
        self.player = None
        self.queued_notifications: list[Notify] = []

    @Slot(str, str)
    def notify(self, message: str, notify_type: str = "info"):
        self.notification.emit(Notify(message=message, notify_type=notify_type))
