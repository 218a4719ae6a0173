from __future__ import annotations

from PySide6 import QtWidgets


class LabeledSpin(QtWidgets.QWidget):
    def __init__(self, label: str, suffix: str = "", decimals: int = 4,
                 minimum: float = -1e9, maximum: float = 1e9, parent=None):
        super().__init__(parent)
        layout = QtWidgets.QHBoxLayout(self)
        self.lbl = QtWidgets.QLabel(label)
        self.spin = QtWidgets.QDoubleSpinBox()
        self.spin.setDecimals(decimals)
        self.spin.setRange(minimum, maximum)
        if suffix:
            self.spin.setSuffix(f" {suffix}")
        layout.addWidget(self.lbl)
        layout.addWidget(self.spin)

    def value(self) -> float:
        return float(self.spin.value())

    def setValue(self, v: float):
        self.spin.setValue(v)
