"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, the control sidebar and
the player above the harmonic table.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects the panels' signals so that a change in one (a new
   root, a new tuning, a selected tone) refreshes every view depending on it.
"""
from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QSplitter
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction
import logging

from harmonicexplorer.model.state import SessionState
from harmonicexplorer.view.panels.root_panel import RootControlPanel
from harmonicexplorer.view.panels.tuner_panel import TunerControlPanel
from harmonicexplorer.view.panels.player_panel import PlayerControlPanel
from harmonicexplorer.view.panels.harmonic_table import HarmonicTable

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Harmonic Explorer"


class MainWindow(QMainWindow):
    def __init__(self, session: SessionState) -> None:
        super().__init__()
        self.session: SessionState = session

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        # --- SPLITTER (CONTENT AREA) ---
        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        # --- LEFT SIDE: Control Panels ---
        sidebar = QWidget()
        sidebar_layout = QVBoxLayout(sidebar)
        self.root_panel = RootControlPanel(self.session)
        self.tuner_panel = TunerControlPanel(self.session)
        sidebar_layout.addWidget(self.root_panel)
        sidebar_layout.addWidget(self.tuner_panel)
        sidebar_layout.addStretch()
        splitter.addWidget(sidebar)

        # --- RIGHT SIDE: Player above the Harmonic Table ---
        content = QSplitter(Qt.Vertical)
        self.player_panel = PlayerControlPanel(self.session)
        self.harmonic_table = HarmonicTable(self.session)
        content.addWidget(self.player_panel)
        content.addWidget(self.harmonic_table)
        content.setSizes([250, 650])
        splitter.addWidget(content)

        # Set initial proportions (1 part sidebar : 4 parts tables)
        splitter.setSizes([350, 1050])

        # --- SIGNAL CONNECTIONS ---
        # 1. Root replaced -> tones were cleared, rebuild both tables
        self.root_panel.root_changed.connect(self.on_root_changed)

        # 2. Sensitivity / tuning -> meanings and notes change
        self.root_panel.sensitivity_changed.connect(self.on_display_changed)
        self.tuner_panel.tuning_changed.connect(self.on_display_changed)

        # 3. Tone selection
        self.harmonic_table.octave_requested.connect(self.player_panel.add_tone)
        self.player_panel.tones_changed.connect(self.harmonic_table.highlight_selected)

        # 4. No root changes while an export renders the current tones
        self.player_panel.export_running.connect(self.on_export_running)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

    def _create_actions(self) -> None:
        self.act_export = QAction("Export WAV...", self)
        self.act_export.setShortcut("Ctrl+E")
        self.act_export.triggered.connect(self.player_panel.on_export_clicked)

        self.act_play = QAction("Play / Pause", self)
        self.act_play.setShortcut("Space")
        self.act_play.triggered.connect(self.player_panel.toggle_play)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_export)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        player_menu = menu_bar.addMenu("&Player")
        player_menu.addAction(self.act_play)

    # --- SLOTS ---
    def on_root_changed(self, replaced: bool) -> None:
        if not replaced:
            return
        self.harmonic_table.refresh()
        self.player_panel.refresh()
        # the previous tones fade out before the stream is released
        self.player_panel.schedule_transport_update()

    def on_display_changed(self, *_) -> None:
        self.harmonic_table.refresh()
        self.player_panel.refresh()

    def on_export_running(self, running: bool) -> None:
        self.root_panel.setEnabled(not running)
        self.act_export.setEnabled(not running)

    def closeEvent(self, event, /) -> None:
        """Stop the audio stream before the window goes away."""
        player = self.session.player
        if player.playing:
            logger.info("Stopping playback on exit")
            player.close()
        event.accept()
