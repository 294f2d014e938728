"""
Background Workers (Threading)
==============================
QThread subclasses for tasks that would otherwise freeze the GUI.

Why is this file needed?
------------------------
1. Responsiveness: Rendering a long WAV export on the main thread blocks the
   event loop. The worker pushes it to a background thread.
2. Signals: The result (or the error) is reported back to the GUI with Qt
   Signals.

Classes:
    ExportWorker: Renders the player's tones and writes them to a WAV file.
"""
import logging
from PySide6.QtCore import QThread, Signal

from harmonicexplorer.controller.player import FrequencyPlayer

logger = logging.getLogger(__name__)


class ExportWorker(QThread):
    finished_export = Signal(str)  # filepath
    error_occurred = Signal(str)

    def __init__(self, player: FrequencyPlayer, filepath: str, duration: float) -> None:
        super().__init__()
        self.player = player
        self.filepath = filepath
        self.duration = duration

    def run(self) -> None:
        try:
            logger.info("Starting WAV export in background thread...")
            self.player.export_to_wav(self.filepath, self.duration)
            self.finished_export.emit(self.filepath)
        except Exception as e:
            logger.error(f"Error in ExportWorker: {e}")
            self.error_occurred.emit(str(e))
