from PySide6.QtWidgets import QWidget, QVBoxLayout, QGroupBox, QFormLayout, QComboBox, QLabel, QMessageBox
from PySide6.QtCore import Signal
import logging

from harmonicexplorer.model.exceptions import InvalidKeyError
from harmonicexplorer.model.state import SessionState
from harmonicexplorer.model.tuning import basis_options, tuning_options

logger = logging.getLogger(__name__)


class TunerControlPanel(QWidget):
    """Basis note and 12-tone tuning selection."""
    tuning_changed = Signal()

    def __init__(self, session: SessionState) -> None:
        super().__init__()
        self.session = session

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        grp_tuner = QGroupBox("Tuning")
        form = QFormLayout(grp_tuner)

        self.combo_basis = QComboBox()
        for key, name in basis_options():
            self.combo_basis.addItem(name, key)
        self.combo_basis.setCurrentIndex(self.combo_basis.findData(self.session.tuner.basis_key))
        self.combo_basis.currentIndexChanged.connect(self.on_basis_changed)
        form.addRow("Basis note:", self.combo_basis)

        self.lbl_c4 = QLabel()
        form.addRow("", self.lbl_c4)

        self.combo_tuning = QComboBox()
        for key, name in tuning_options():
            self.combo_tuning.addItem(name, key)
        self.combo_tuning.currentIndexChanged.connect(self.on_tuning_changed)
        form.addRow("12-tone tuning (in key of C):", self.combo_tuning)

        layout.addWidget(grp_tuner)
        self._sync()

    def _sync(self) -> None:
        """Reflect the tuner in the widgets without re-triggering changes."""
        tuner = self.session.tuner
        self.lbl_c4.setText(f"(C4 = {tuner.basis_note.base_c4:.6f} Hz)")
        self.combo_tuning.blockSignals(True)
        self.combo_tuning.setCurrentIndex(self.combo_tuning.findData(tuner.tuning_key))
        self.combo_tuning.blockSignals(False)

    def on_basis_changed(self, index: int) -> None:
        try:
            self.session.change_basis(self.combo_basis.itemData(index))
        except InvalidKeyError as e:
            QMessageBox.warning(self, "Invalid basis", str(e))
            return
        self._sync()
        self.tuning_changed.emit()

    def on_tuning_changed(self, index: int) -> None:
        try:
            self.session.change_tuning(self.combo_tuning.itemData(index))
        except InvalidKeyError as e:
            QMessageBox.warning(self, "Invalid tuning", str(e))
            return
        self.tuning_changed.emit()
