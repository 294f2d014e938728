from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGroupBox, QFormLayout, QComboBox, QDoubleSpinBox, QMessageBox
)
from PySide6.QtCore import Signal
import logging

from harmonicexplorer.model.exceptions import HarmonicExplorerError
from harmonicexplorer.model.state import SessionState, CUSTOM_ROOT_KEY

logger = logging.getLogger(__name__)


class RootControlPanel(QWidget):
    """Root frequency selection and meaning sensitivity."""
    # Emitted with True when the Root was replaced (tones cleared)
    root_changed = Signal(bool)
    sensitivity_changed = Signal(float)

    def __init__(self, session: SessionState) -> None:
        super().__init__()
        self.session = session

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        grp_root = QGroupBox("Root frequency")
        form = QFormLayout(grp_root)

        self.combo_root = QComboBox()
        for option in self.session.root_options:
            self.combo_root.addItem(option.label, option.key)
        self.combo_root.addItem("Custom", CUSTOM_ROOT_KEY)
        self.combo_root.currentIndexChanged.connect(self.on_root_selected)
        form.addRow("Root:", self.combo_root)

        self.spin_custom = QDoubleSpinBox()
        self.spin_custom.setDecimals(6)
        self.spin_custom.setRange(0.001, 20000.0)
        self.spin_custom.setValue(self.session.root.root_hertz_value)
        self.spin_custom.setSuffix(" Hz")
        self.spin_custom.editingFinished.connect(self.on_custom_value_changed)
        form.addRow("Custom:", self.spin_custom)

        self.spin_sensitivity = QDoubleSpinBox()
        self.spin_sensitivity.setDecimals(3)
        self.spin_sensitivity.setRange(0.0, 10.0)
        self.spin_sensitivity.setSingleStep(0.1)
        self.spin_sensitivity.setValue(self.session.meaning_sensitivity)
        self.spin_sensitivity.setSuffix(" %")
        self.spin_sensitivity.setToolTip("Tolerance used when matching harmonics to reference frequencies")
        self.spin_sensitivity.valueChanged.connect(self.on_sensitivity_changed)
        form.addRow("Meaning sensitivity:", self.spin_sensitivity)

        layout.addWidget(grp_root)

    def on_root_selected(self, index: int) -> None:
        key = self.combo_root.itemData(index)
        if key == CUSTOM_ROOT_KEY:
            self.on_custom_value_changed()
        else:
            self._apply(key)

    def on_custom_value_changed(self) -> None:
        # typing a custom value switches the selection to "Custom"
        custom_index = self.combo_root.findData(CUSTOM_ROOT_KEY)
        if self.combo_root.currentIndex() != custom_index:
            self.combo_root.blockSignals(True)
            self.combo_root.setCurrentIndex(custom_index)
            self.combo_root.blockSignals(False)
        self._apply(CUSTOM_ROOT_KEY, self.spin_custom.value())

    def _apply(self, key: str, custom_value=None) -> None:
        try:
            replaced = self.session.select_root(key, custom_value)
        except HarmonicExplorerError as e:
            logger.error(f"Invalid root selection: {e}")
            QMessageBox.warning(self, "Invalid root", str(e))
            return
        self.root_changed.emit(replaced)

    def on_sensitivity_changed(self, value: float) -> None:
        self.session.set_meaning_sensitivity(value)
        self.sensitivity_changed.emit(value)
