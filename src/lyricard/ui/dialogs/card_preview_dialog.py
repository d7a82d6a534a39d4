# ui/dialogs/card_preview_dialog.py
from __future__ import annotations

import logging
import os

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QGuiApplication, QPixmap
from PySide6.QtWidgets import (
    QDialog, QFileDialog, QHBoxLayout, QLabel, QPushButton, QScrollArea, QVBoxLayout,
)

from lyricard.core.card_compositor import CardConfig, card_filename, render_card, resolve_scale_factor
from lyricard.core.card_observer import CardInputs, CardRenderObserver
from lyricard.core.export_state import CardExportFlow, ExportState
from lyricard.ui.workers.loaders import CardSaveWorker

logger = logging.getLogger(__name__)

# Share of the screen height the card may use.
VIEWPORT_SHARE = 0.9


def card_config_from_settings(settings) -> CardConfig:
    return CardConfig(
        width=int(settings.card_width or 400),
        watermark=settings.watermark,
        font_family=settings.font_family or "",
        show_translation=bool(settings.show_translation),
    )


class CardPreviewDialog(QDialog):
    """
    Preview of the lyric card with a Save button.

    The preview is re-rendered whenever the song page pushes new inputs
    (late cover / gradient) through `set_inputs`; saving runs in a worker and
    both buttons stay disabled until it settles.
    """
    cardSaved = Signal(str)   # path

    def __init__(self, app_state, inputs: CardInputs, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Lyric Card")
        self.setModal(True)
        self.app_state = app_state

        self.config = card_config_from_settings(app_state.settings)
        self.flow = CardExportFlow()
        self._inputs = inputs
        self.worker = None

        self.scale = resolve_scale_factor(app_state.settings.pixel_ratio or self.devicePixelRatioF())
        screen = self.screen() or QGuiApplication.primaryScreen()
        self.viewport_height = screen.availableGeometry().height() * VIEWPORT_SHARE if screen else None

        self.observer = CardRenderObserver(
            lambda content: render_card(content, self.config, scale=self.scale, viewport_height=self.viewport_height)
        )

        root = QVBoxLayout(self)
        root.setContentsMargins(14, 14, 14, 14)
        root.setSpacing(10)

        self.preview = QLabel("Preparing card...")
        self.preview.setAlignment(Qt.AlignCenter)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.preview)
        root.addWidget(scroll, 1)

        self.status = QLabel("")
        self.status.setWordWrap(True)
        root.addWidget(self.status)

        footer = QHBoxLayout()
        footer.addStretch(1)
        self.btn_save = QPushButton("Save")
        self.btn_close = QPushButton("Close")
        self.btn_save.clicked.connect(self._on_save)
        self.btn_close.clicked.connect(self._on_close)
        footer.addWidget(self.btn_save)
        footer.addWidget(self.btn_close)
        root.addLayout(footer)

        self.resize(self.config.width + 60, min(760, int(self.viewport_height or 760)))

        self.flow.open()
        self.set_inputs(inputs)

    # --- inputs / preview ---
    def set_inputs(self, inputs: CardInputs):
        self._inputs = inputs
        if self.observer.update(inputs):
            pm = QPixmap.fromImage(self.observer.frame)
            pm.setDevicePixelRatio(self.scale)
            self.preview.setPixmap(pm)
        self._sync_buttons()

    # --- save flow ---
    def _on_save(self):
        if not self._inputs.is_ready():
            return

        start_dir = self.app_state.settings.export_dir or os.path.expanduser("~")
        directory = QFileDialog.getExistingDirectory(self, "Save lyric card to", start_dir)
        if not directory:
            return
        if not self.flow.request_save():
            return

        self._sync_buttons()
        self.worker = CardSaveWorker(
            self._inputs.to_content(),
            self.config,
            self.scale,
            directory,
            card_filename(self._inputs.title, self.config),
            viewport_height=self.viewport_height,
            parent=self,
        )
        self.worker.progress.connect(self.status.setText)
        self.worker.done.connect(self._save_done)
        self.worker.start()

    def _save_done(self, ok: bool, msg: str):
        self.flow.finish(ok, None if ok else msg)
        self._sync_buttons()

        if ok:
            self.status.setText(f"Saved to {msg}")
            self.app_state.notify(f"Lyric card saved: {os.path.basename(msg)}", "success")
            self.cardSaved.emit(msg)
        else:
            logger.error("%s", msg)
            self.status.setText(msg)
            self.app_state.notify(msg, "error")

    def _sync_buttons(self):
        generating = self.flow.state is ExportState.GENERATING
        self.btn_save.setEnabled(self.flow.can_save and self._inputs.is_ready())
        self.btn_save.setText("Saving..." if generating else "Save")
        self.btn_close.setEnabled(self.flow.can_close)

    # --- closing ---
    def _on_close(self):
        if self.flow.close():
            self.accept()

    def reject(self):
        # Esc / window close go through here as well
        if self.flow.close():
            super().reject()

    def closeEvent(self, event):
        if self.flow.state is ExportState.GENERATING:
            event.ignore()
            return
        self.flow.close()
        super().closeEvent(event)
