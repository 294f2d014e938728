from typing import Iterable, Tuple

from PySide6.QtWidgets import QTableWidget, QHeaderView, QAbstractItemView
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QBrush, QColor
import logging

from harmonicexplorer.model.harmonics import equivalent_octave_cells
from harmonicexplorer.model.state import SessionState
from harmonicexplorer.view.widgets import HIGHLIGHT_COLOR, color_item, meaning_item, note_item, read_only_item

logger = logging.getLogger(__name__)

FIXED_COLUMNS = ["#", "Frequency", "Meaning", "Note", "Color"]


class HarmonicTable(QTableWidget):
    """
    One row per harmonic of the current root: frequency, matched reference
    frequencies, note, colour and the playable octaves.
    Double-clicking an octave cell requests that tone for the player.
    """
    octave_requested = Signal(int, int)  # (harmonic number, octave number)

    def __init__(self, session: SessionState) -> None:
        super().__init__()
        self.session = session

        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setSelectionMode(QAbstractItemView.NoSelection)
        self.verticalHeader().setVisible(False)
        self.setWordWrap(True)
        self.cellDoubleClicked.connect(self.on_cell_double_clicked)

        self.refresh()

    def refresh(self) -> None:
        """Rebuild the whole table from the current root."""
        root = self.session.root
        references = self.session.references
        tuner = self.session.tuner

        octave_count = root.octave_count
        self.setColumnCount(len(FIXED_COLUMNS) + octave_count)
        self.setHorizontalHeaderLabels(FIXED_COLUMNS + [f"Octave {i}" for i in range(1, octave_count + 1)])
        self.setRowCount(root.harmonic_count)

        self.setUpdatesEnabled(False)
        for row, harmonic in enumerate(root.harmonics):
            frequency = harmonic.as_frequency()
            self.setItem(row, 0, read_only_item(str(harmonic.harmonic_number)))
            self.setItem(row, 1, read_only_item(f"{harmonic.harmonic_hertz_value:.9g} Hz"))
            self.setItem(row, 2, meaning_item(harmonic.find_matching_important_frequencies(references)))
            self.setItem(row, 3, note_item(frequency.note(tuner)))
            self.setItem(row, 4, color_item(frequency.hex_color))
            for octave in harmonic.playable_octaves:
                item = read_only_item(f"{octave.octave_hertz_value:.2f}")
                item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                item.setToolTip("Double-click to add to the player")
                self.setItem(row, len(FIXED_COLUMNS) + octave.octave_number - 1, item)
        self.setUpdatesEnabled(True)

        self.resizeColumnsToContents()
        self.resizeRowsToContents()
        self.horizontalHeader().setSectionResizeMode(2, QHeaderView.Stretch)
        self.highlight_selected()
        logger.debug(f"Harmonic table rendered: {root.harmonic_count} rows")

    def highlight_selected(self) -> None:
        """Highlight every octave cell sounding the same pitch as a selected tone."""
        root = self.session.root
        cells = set()
        for tone in self.session.player.tones:
            cells.update(equivalent_octave_cells(
                tone.harmonic.harmonic_number,
                tone.playable_octave.octave_number,
                root.harmonic_count,
                root.octave_count,
            ))
        self._paint_octave_cells(cells)

    def _paint_octave_cells(self, highlighted: Iterable[Tuple[int, int]]) -> None:
        highlighted = set(highlighted)
        brush = QBrush(QColor(HIGHLIGHT_COLOR))
        for row in range(self.rowCount()):
            for column in range(len(FIXED_COLUMNS), self.columnCount()):
                item = self.item(row, column)
                if item is None:
                    continue
                cell = (row + 1, column - len(FIXED_COLUMNS) + 1)
                item.setBackground(brush if cell in highlighted else QBrush())

    def on_cell_double_clicked(self, row: int, column: int) -> None:
        if column < len(FIXED_COLUMNS):
            return
        self.octave_requested.emit(row + 1, column - len(FIXED_COLUMNS) + 1)
