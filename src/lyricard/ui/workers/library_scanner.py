# ui/workers/library_scanner.py
from PySide6.QtCore import QThread, Signal

from lyricard.library.scan_library import group_albums, iter_audio_paths, track_info_from_path


class LibraryScanner(QThread):
    progress_signal = Signal(int, int)            # scanned, total
    finished_signal = Signal(bool, str, object)   # ok, message, list[AlbumInfo]

    def __init__(self, directories: list[str], parent=None):
        super().__init__(parent)
        self.directories = list(directories)

    def run(self):
        try:
            paths = iter_audio_paths(self.directories)
            total = len(paths)
            scanned = 0
            tracks = []

            for p in paths:
                t = track_info_from_path(p)
                scanned += 1
                if t is not None:
                    tracks.append(t)
                if scanned % 200 == 0:
                    self.progress_signal.emit(scanned, total)

            self.progress_signal.emit(scanned, total)
            albums = group_albums(tracks)
            self.finished_signal.emit(True, f"Found {len(tracks)} tracks in {len(albums)} albums.", albums)
        except Exception as e:
            self.finished_signal.emit(False, f"Scan failed: {e}", [])
