# ui/lyrics_view.py
from __future__ import annotations

from typing import List, Optional, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QBrush, QColor, QFont
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QListWidget, QListWidgetItem,
    QPushButton, QStackedWidget, QVBoxLayout, QWidget,
)

from lyricard.core.lrc_parser import format_timestamp
from lyricard.core.lyric_locator import ActiveLineTracker
from lyricard.core.models import LyricLine
from lyricard.core.selection import LyricSelection


class LyricsView(QWidget):
    """
    Lyrics panel of the song page:
      - list of timed lines (Time | Text, translation underneath)
      - highlight the line active at the current playback time
      - checkbox per line to pick lines for a lyric card
      - double click a line -> seek
    """
    seekRequested = Signal(int)          # ms
    selectionChanged = Signal(list)      # ordered line indices
    activeLineChanged = Signal(object)   # LyricLine | None

    def __init__(self, parent=None):
        super().__init__(parent)

        self._lines: List[LyricLine] = []
        self._tracker = ActiveLineTracker()
        self.selection = LyricSelection()

        root = QVBoxLayout(self)
        root.setContentsMargins(10, 10, 10, 10)
        root.setSpacing(8)

        # --- header ---
        header = QHBoxLayout()
        header.setSpacing(8)

        self.title = QLabel("Lyrics")
        self.title.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self.title.setStyleSheet("font-weight: 650; font-size: 14px;")
        header.addWidget(self.title, 1)

        self.lbl_selected = QLabel("")
        header.addWidget(self.lbl_selected)

        self.btn_clear = QPushButton("Clear")
        self.btn_clear.setEnabled(False)
        self.btn_clear.clicked.connect(self.clear_selection)
        header.addWidget(self.btn_clear)

        root.addLayout(header)

        # --- stack: msg / lines ---
        self.stack = QStackedWidget()
        root.addWidget(self.stack, 1)

        self.msg = QLabel("No lyrics")
        self.msg.setAlignment(Qt.AlignCenter)
        self.msg.setWordWrap(True)
        self.stack.addWidget(self.msg)

        self.list = QListWidget()
        self.list.setSelectionMode(QListWidget.SelectionMode.NoSelection)
        self.list.setWordWrap(True)
        self.list.itemChanged.connect(self._on_item_changed)
        self.list.itemDoubleClicked.connect(self._on_item_double_clicked)
        self.stack.addWidget(self.list)

        self.show_none("No track selected")

    # --- public API ---
    @property
    def lines(self) -> List[LyricLine]:
        return list(self._lines)

    @property
    def active_index(self) -> Optional[int]:
        return self._tracker.current

    def show_none(self, message: str):
        self._reset_state()
        self.msg.setText(message)
        self.stack.setCurrentWidget(self.msg)

    def set_lines(self, lines: Sequence[LyricLine], title: str = "", artist: str = ""):
        """Show parsed lines; with no lines, fall back to the track title and artist."""
        self._reset_state()
        self._lines = list(lines)
        self._tracker.reset(self._lines)

        if not self._lines:
            self.msg.setText("\n".join(s for s in (title, artist) if s) or "No lyrics")
            self.stack.setCurrentWidget(self.msg)
            return

        self.list.blockSignals(True)
        for line in self._lines:
            text = f"{format_timestamp(line.time)}   {line.text}"
            if line.translation:
                text += f"\n{' ' * 12}{line.translation}"
            item = QListWidgetItem(text)
            item.setFlags(Qt.ItemIsEnabled | Qt.ItemIsUserCheckable)
            item.setCheckState(Qt.Unchecked)
            item.setData(Qt.ItemDataRole.UserRole, int(round(line.time * 1000)))
            self.list.addItem(item)
        self.list.blockSignals(False)

        self.stack.setCurrentWidget(self.list)

    def on_player_position(self, ms: int):
        if not self._lines:
            return
        changed, idx = self._tracker.update(int(ms) / 1000.0)
        if not changed:
            return

        self._paint_active(idx)
        self.activeLineChanged.emit(self._lines[idx] if idx is not None else None)

    def selected_lines(self) -> List[LyricLine]:
        return self.selection.pick(self._lines)

    def clear_selection(self):
        self.selection.clear()
        self.list.blockSignals(True)
        for row in range(self.list.count()):
            self.list.item(row).setCheckState(Qt.Unchecked)
        self.list.blockSignals(False)
        self._selection_updated()

    # --- internal helpers ---
    def _reset_state(self):
        self._lines = []
        self._tracker.reset([])
        self.selection.clear()
        self.list.blockSignals(True)
        self.list.clear()
        self.list.blockSignals(False)
        self._selection_updated()

    def _paint_active(self, idx: Optional[int]):
        for row in range(self.list.count()):
            item = self.list.item(row)
            active = row == idx
            font = QFont(item.font())
            font.setBold(active)
            item.setFont(font)
            item.setBackground(QBrush(QColor(255, 255, 255, 40)) if active else QBrush())

        if idx is not None:
            self.list.scrollToItem(self.list.item(idx), QListWidget.ScrollHint.PositionAtCenter)

    def _on_item_changed(self, item: QListWidgetItem):
        row = self.list.row(item)
        checked = item.checkState() == Qt.Checked
        if checked != (row in self.selection):
            self.selection.toggle(row)
            self._selection_updated()

    def _on_item_double_clicked(self, item: QListWidgetItem):
        ms = item.data(Qt.ItemDataRole.UserRole)
        if ms is not None:
            self.seekRequested.emit(int(ms))

    def _selection_updated(self):
        n = len(self.selection)
        self.lbl_selected.setText(f"{n} selected" if n else "")
        self.btn_clear.setEnabled(n > 0)
        self.selectionChanged.emit(self.selection.ordered())
