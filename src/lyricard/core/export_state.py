# core/export_state.py
from __future__ import annotations

from enum import Enum, auto


class ExportState(Enum):
    CLOSED = auto()
    PREVIEWING = auto()
    GENERATING = auto()


class CardExportFlow:
    """
    Lifecycle of the card preview / save affordance.

        CLOSED --open--> PREVIEWING --request_save--> GENERATING
        GENERATING --finish(ok | failed)--> PREVIEWING
        PREVIEWING --close--> CLOSED

    Saving is disabled while GENERATING and the preview cannot be closed
    until the running save settles. Failures are retryable.
    """

    def __init__(self):
        self.state = ExportState.CLOSED
        self.last_error: str | None = None

    @property
    def can_save(self) -> bool:
        return self.state is ExportState.PREVIEWING

    @property
    def can_close(self) -> bool:
        return self.state is not ExportState.GENERATING

    def open(self) -> None:
        if self.state is ExportState.CLOSED:
            self.state = ExportState.PREVIEWING
            self.last_error = None

    def request_save(self) -> bool:
        if not self.can_save:
            return False
        self.state = ExportState.GENERATING
        self.last_error = None
        return True

    def finish(self, ok: bool, error: str | None = None) -> None:
        if self.state is not ExportState.GENERATING:
            return
        self.state = ExportState.PREVIEWING
        self.last_error = None if ok else (error or "export failed")

    def close(self) -> bool:
        if not self.can_close:
            return False
        self.state = ExportState.CLOSED
        return True
