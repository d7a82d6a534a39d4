# ui/widgets/album_list_widget.py
from __future__ import annotations

from typing import Sequence

from PySide6.QtCore import QModelIndex, Qt, Signal
from PySide6.QtGui import QStandardItem, QStandardItemModel
from PySide6.QtWidgets import QHeaderView, QTableView, QVBoxLayout, QWidget

from lyricard.core.models import AlbumInfo

TABLE_STYLE = """
QTableView {
    background-color: #020617;
    alternate-background-color: #030712;
    border: none;
    color: #e5e7eb;
    selection-background-color: rgba(56, 189, 248, 0.2);
    selection-color: #e5e7eb;
}
QHeaderView::section {
    background-color: #020617;
    color: #9ca3af;
    padding: 4px 6px;
    border: none;
    border-bottom: 1px solid #111827;
    font-size: 11px;
}
QTableView::item { padding: 4px 6px; }
"""


def make_item(text: str, row_key: int, align: Qt.AlignmentFlag = Qt.AlignmentFlag.AlignVCenter) -> QStandardItem:
    it = QStandardItem(text)
    it.setEditable(False)
    it.setData(int(row_key), Qt.ItemDataRole.UserRole)
    it.setTextAlignment(align)
    return it


def make_table(model: QStandardItemModel) -> QTableView:
    table = QTableView()
    table.setModel(model)
    table.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
    table.setSelectionMode(QTableView.SelectionMode.SingleSelection)
    table.verticalHeader().setVisible(False)
    table.verticalHeader().setDefaultSectionSize(24)
    table.setShowGrid(False)
    table.setAlternatingRowColors(True)
    table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
    table.setStyleSheet(TABLE_STYLE)
    return table


class AlbumListWidget(QWidget):
    openAlbum = Signal(object)   # AlbumInfo

    def __init__(self, parent=None):
        super().__init__(parent)
        self._albums: list[AlbumInfo] = []

        self.model = QStandardItemModel(0, 3, self)
        self.model.setHorizontalHeaderLabels(["Album", "Artist", "Tracks"])
        self.table = make_table(self.model)
        self.table.doubleClicked.connect(self._on_double_click)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.table)

    def set_albums(self, albums: Sequence[AlbumInfo]):
        self._albums = list(albums)
        self.model.setRowCount(0)
        for i, a in enumerate(self._albums):
            self.model.appendRow([
                make_item(a.title, i),
                make_item(a.artist or "", i),
                make_item(str(len(a.tracks)), i, align=Qt.AlignmentFlag.AlignCenter),
            ])

    def _on_double_click(self, index: QModelIndex):
        if not index.isValid():
            return
        key = self.model.index(index.row(), 0).data(Qt.ItemDataRole.UserRole)
        if key is None:
            return
        self.openAlbum.emit(self._albums[int(key)])
