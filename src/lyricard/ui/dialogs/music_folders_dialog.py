# ui/dialogs/music_folders_dialog.py
from PySide6.QtWidgets import (
    QCheckBox, QDialog, QFileDialog, QFormLayout, QHBoxLayout,
    QLineEdit, QListWidget, QMessageBox, QPushButton, QVBoxLayout,
)

from lyricard.core.config import save_settings


class MusicFoldersDialog(QDialog):
    """Music folders plus the few settings the song page and card use."""

    def __init__(self, app_state, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.resize(520, 440)
        self.app_state = app_state

        layout = QVBoxLayout(self)

        self.list_widget = QListWidget()
        layout.addWidget(self.list_widget)

        btn_layout = QHBoxLayout()
        self.add_btn = QPushButton("Add Folder")
        self.remove_btn = QPushButton("Remove Selected")
        btn_layout.addWidget(self.add_btn)
        btn_layout.addWidget(self.remove_btn)
        layout.addLayout(btn_layout)

        form = QFormLayout()
        self.export_dir = QLineEdit()
        self.export_dir.setPlaceholderText("Default folder for lyric cards")
        self.lrclib_url = QLineEdit()
        self.chk_lrclib = QCheckBox("Look up missing lyrics on LRCLIB")
        self.chk_translation = QCheckBox("Show translations on cards")
        form.addRow("Export folder", self.export_dir)
        form.addRow("LRCLIB instance", self.lrclib_url)
        form.addRow("", self.chk_lrclib)
        form.addRow("", self.chk_translation)
        layout.addLayout(form)

        self.save_btn = QPushButton("Save")
        layout.addWidget(self.save_btn)

        self._load()

        self.add_btn.clicked.connect(self.add_folder)
        self.remove_btn.clicked.connect(self.remove_selected)
        self.save_btn.clicked.connect(self.save)

    def _load(self):
        s = self.app_state.settings
        self.list_widget.clear()
        for d in s.music_dirs:
            self.list_widget.addItem(d)
        self.export_dir.setText(s.export_dir)
        self.lrclib_url.setText(s.lrclib_base_url)
        self.chk_lrclib.setChecked(s.use_lrclib)
        self.chk_translation.setChecked(s.show_translation)

    def add_folder(self):
        path = QFileDialog.getExistingDirectory(self, "Select Music Folder")
        if not path:
            return

        for i in range(self.list_widget.count()):
            if self.list_widget.item(i).text() == path:
                return

        self.list_widget.addItem(path)

    def remove_selected(self):
        for item in self.list_widget.selectedItems():
            self.list_widget.takeItem(self.list_widget.row(item))

    def save(self):
        folders = [self.list_widget.item(i).text() for i in range(self.list_widget.count())]

        if not folders:
            QMessageBox.warning(self, "No folders", "Please add at least one music folder.")
            return

        s = self.app_state.settings
        s.music_dirs = folders
        s.export_dir = self.export_dir.text().strip()
        s.lrclib_base_url = self.lrclib_url.text().strip() or "https://lrclib.net"
        s.use_lrclib = self.chk_lrclib.isChecked()
        s.show_translation = self.chk_translation.isChecked()

        if self.app_state.settings_path:
            try:
                save_settings(s, self.app_state.settings_path)
            except OSError as e:
                self.app_state.notify(f"Failed to save settings: {e}", "error")
                return

        self.accept()
