from __future__ import annotations

from PySide6 import QtWidgets, QtGui
from ..theme import COLORS, THRESHOLDS


class MetricCard(QtWidgets.QFrame):
    def __init__(self, title: str, unit: str = "", fmt: str = "{:.4f}", parent=None):
        super().__init__(parent)
        self.setFrameShape(QtWidgets.QFrame.StyledPanel)
        layout = QtWidgets.QVBoxLayout(self)
        self.fmt = fmt
        self.title = QtWidgets.QLabel(title)
        self.value = QtWidgets.QLabel("—")
        self.unit = QtWidgets.QLabel(unit)
        self.badge = QtWidgets.QLabel("")
        layout.addWidget(self.title)
        layout.addWidget(self.value)
        layout.addWidget(self.unit)
        layout.addWidget(self.badge)
        self.setObjectName("MetricCard")

    def set_value(self, v: float, kind: str | None = None):
        """Show v; kind 'cd' adds a plausibility badge from THRESHOLDS."""
        self.value.setText(self.fmt.format(v))
        level = ""
        if kind == "cd":
            if v >= THRESHOLDS["cd_crit"]:
                level = "crit"
            elif v >= THRESHOLDS["cd_warn"]:
                level = "warn"
            else:
                level = "ok"
        self._apply_badge(level)

    def reset(self):
        self.value.setText("—")
        self._apply_badge("")

    def _apply_badge(self, level: str):
        txt = {"ok": "OK", "warn": "CHECK", "crit": "IMPLAUSIBLE"}.get(level, "")
        self.badge.setText(txt)
        color = COLORS.get(level, COLORS["neutral"])
        pal = self.badge.palette()
        pal.setColor(QtGui.QPalette.WindowText, QtGui.QColor(color))
        self.badge.setPalette(pal)
