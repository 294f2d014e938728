import os
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox, QPushButton, QSlider, QLabel, QTableWidget,
    QAbstractItemView, QHeaderView, QDoubleSpinBox, QFileDialog, QMessageBox, QStyle
)
from PySide6.QtCore import Qt, Signal, QTimer
import logging

from harmonicexplorer.config import DEFAULT_EXPORT_FILENAME, DEFAULT_EXPORT_SECONDS, RAMP_SECONDS
from harmonicexplorer.controller.player import PlayerTone
from harmonicexplorer.controller.workers import ExportWorker
from harmonicexplorer.model.exceptions import HarmonicExplorerError
from harmonicexplorer.model.state import SessionState
from harmonicexplorer.view.widgets import color_item, meaning_item, note_item, read_only_item

logger = logging.getLogger(__name__)

COLUMNS = ["Harmonic", "Octave", "Frequency", "Meaning", "Note", "Color", "Pan", "Gain", ""]

# Sliders are integer based
PAN_STEPS = 4     # -1.0 .. 1.0 in 0.25 steps
GAIN_STEPS = 100  # 0.0 .. 1.0 in 0.01 steps


class PlayerControlPanel(QWidget):
    """Selected tones with their pan and gain, play/pause and WAV export."""
    tones_changed = Signal()
    export_running = Signal(bool)

    def __init__(self, session: SessionState) -> None:
        super().__init__()
        self.session = session
        self.export_worker: Optional[ExportWorker] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        grp_player = QGroupBox("Player")
        l_player = QVBoxLayout(grp_player)

        # --- Transport ---
        hbox_transport = QHBoxLayout()

        self.btn_play = QPushButton("Play")
        self.btn_play.setIcon(self.style().standardIcon(QStyle.SP_MediaPlay))
        self.btn_play.setMinimumHeight(32)
        self.btn_play.clicked.connect(self.toggle_play)
        hbox_transport.addWidget(self.btn_play)

        hbox_transport.addWidget(QLabel("Volume:"))
        self.slider_volume = QSlider(Qt.Horizontal)
        self.slider_volume.setRange(0, GAIN_STEPS)
        self.slider_volume.setValue(round(self.session.player.overall_gain * GAIN_STEPS))
        self.slider_volume.valueChanged.connect(self.on_volume_changed)
        hbox_transport.addWidget(self.slider_volume)

        hbox_transport.addStretch()

        hbox_transport.addWidget(QLabel("Export length:"))
        self.spin_duration = QDoubleSpinBox()
        self.spin_duration.setDecimals(1)
        self.spin_duration.setRange(1.0, 3600.0)
        self.spin_duration.setValue(DEFAULT_EXPORT_SECONDS)
        self.spin_duration.setSuffix(" s")
        hbox_transport.addWidget(self.spin_duration)

        self.btn_export = QPushButton("Export WAV...")
        self.btn_export.clicked.connect(self.on_export_clicked)
        hbox_transport.addWidget(self.btn_export)

        l_player.addLayout(hbox_transport)

        # --- Tones ---
        self.table = QTableWidget()
        self.table.setColumnCount(len(COLUMNS))
        self.table.setHorizontalHeaderLabels(COLUMNS)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionMode(QAbstractItemView.NoSelection)
        self.table.verticalHeader().setVisible(False)
        l_player.addWidget(self.table)

        self.lbl_empty = QLabel("No tones selected. Double-click one or more octaves in the table below.")
        self.lbl_empty.setAlignment(Qt.AlignCenter)
        l_player.addWidget(self.lbl_empty)

        layout.addWidget(grp_player)
        self.refresh()

    # --- Rendering ---
    def refresh(self) -> None:
        player = self.session.player
        tones = player.tones
        self.table.setRowCount(len(tones))
        self.table.setVisible(bool(tones))
        self.lbl_empty.setVisible(not tones)

        for row, tone in enumerate(tones):
            harmonic = tone.harmonic
            frequency = harmonic.as_frequency()
            self.table.setItem(row, 0, read_only_item(str(harmonic.harmonic_number)))
            self.table.setItem(row, 1, read_only_item(str(tone.playable_octave.octave_number)))
            self.table.setItem(row, 2, read_only_item(f"{tone.frequency:.9g} Hz"))
            self.table.setItem(row, 3, meaning_item(
                harmonic.find_matching_important_frequencies(self.session.references)
            ))
            self.table.setItem(row, 4, note_item(frequency.note(self.session.tuner)))
            self.table.setItem(row, 5, color_item(frequency.hex_color))
            self.table.setCellWidget(row, 6, self._pan_slider(tone))
            self.table.setCellWidget(row, 7, self._gain_slider(tone))
            self.table.setCellWidget(row, 8, self._remove_button(tone))

        self.table.resizeColumnsToContents()
        self.table.resizeRowsToContents()
        self.table.horizontalHeader().setSectionResizeMode(3, QHeaderView.Stretch)
        self.update_transport()

    def _pan_slider(self, tone: PlayerTone) -> QSlider:
        slider = QSlider(Qt.Horizontal)
        slider.setRange(-PAN_STEPS, PAN_STEPS)
        slider.setValue(round(tone.pan * PAN_STEPS))
        slider.setToolTip("L / R")
        slider.valueChanged.connect(lambda value, t=tone: setattr(t, "pan", value / PAN_STEPS))
        return slider

    def _gain_slider(self, tone: PlayerTone) -> QSlider:
        slider = QSlider(Qt.Horizontal)
        slider.setRange(0, GAIN_STEPS)
        slider.setValue(round(tone.gain * GAIN_STEPS))
        slider.valueChanged.connect(lambda value, t=tone: setattr(t, "gain", value / GAIN_STEPS))
        return slider

    def _remove_button(self, tone: PlayerTone) -> QPushButton:
        button = QPushButton("❌")
        button.setFlat(True)
        button.clicked.connect(lambda _=False, t=tone: self.on_remove_clicked(
            t.harmonic.harmonic_number, t.playable_octave.octave_number
        ))
        return button

    def schedule_transport_update(self) -> None:
        """Refresh the transport once a running fade out has released the stream."""
        QTimer.singleShot(int(RAMP_SECONDS * 1000) + 50, self.update_transport)

    def update_transport(self) -> None:
        player = self.session.player
        if player.playing:
            self.btn_play.setText("Pause")
            self.btn_play.setIcon(self.style().standardIcon(QStyle.SP_MediaPause))
        else:
            self.btn_play.setText("Play")
            self.btn_play.setIcon(self.style().standardIcon(QStyle.SP_MediaPlay))
        self.btn_export.setEnabled(not player.playing and not player.exporting)

    # --- Slots ---
    def add_tone(self, harmonic_number: int, octave_number: int) -> None:
        player = self.session.player
        if player.find_harmonic_octave(harmonic_number, octave_number) is not None:
            return
        try:
            player.add_harmonic_octave(harmonic_number, octave_number)
        except HarmonicExplorerError as e:
            QMessageBox.warning(self, "Cannot add tone", str(e))
            return
        self.refresh()
        self.tones_changed.emit()

    def on_remove_clicked(self, harmonic_number: int, octave_number: int) -> None:
        self.session.player.remove_harmonic_octave(harmonic_number, octave_number)
        self.refresh()
        self.tones_changed.emit()

    def toggle_play(self) -> None:
        player = self.session.player
        try:
            if player.playing:
                player.stop()
                self.schedule_transport_update()
            else:
                player.start()
        except Exception as e:
            logger.exception(f"Audio playback failed: {e}")
            QMessageBox.critical(self, "Audio error", f"Audio playback failed:\n{e}")
        self.update_transport()

    def on_volume_changed(self, value: int) -> None:
        self.session.player.overall_gain = value / GAIN_STEPS

    def on_export_clicked(self) -> None:
        player = self.session.player
        if player.playing or player.exporting:
            QMessageBox.warning(
                self, "Export",
                "Can't export while currently playing or exporting. "
                "Press stop first, or wait for the last export to finish."
            )
            return
        if not player.tones:
            QMessageBox.information(self, "Export", "Add at least one tone before exporting.")
            return

        filepath, _ = QFileDialog.getSaveFileName(
            self, "Export WAV", DEFAULT_EXPORT_FILENAME, "WAV Files (*.wav)"
        )
        if not filepath:
            return
        if not filepath.lower().endswith(".wav"):
            filepath += ".wav"

        self.btn_export.setEnabled(False)
        self.btn_play.setEnabled(False)
        self.export_worker = ExportWorker(player, filepath, self.spin_duration.value())
        self.export_worker.finished_export.connect(self.on_export_finished)
        self.export_worker.error_occurred.connect(self.on_export_error)
        self.export_worker.start()
        self.export_running.emit(True)

    def on_export_finished(self, filepath: str) -> None:
        self.btn_play.setEnabled(True)
        self.export_running.emit(False)
        self.update_transport()
        QMessageBox.information(self, "Export", f"Exported to {os.path.basename(filepath)}.")

    def on_export_error(self, message: str) -> None:
        self.btn_play.setEnabled(True)
        self.export_running.emit(False)
        self.update_transport()
        QMessageBox.critical(self, "Export failed", message)
