from __future__ import annotations

import csv
import math
from typing import Any, List, Optional
from PySide6 import QtCore, QtGui
from ..theme import COLORS


class SimpleTableModel(QtCore.QAbstractTableModel):
    """Read-only table; highlights clamped (zero) wake velocities and negative pressures."""

    def __init__(self, headers: List[str], rows: List[List[Any]], *,
                 velocity_cols: Optional[List[int]] = None,
                 pressure_cols: Optional[List[int]] = None,
                 float_fmt: str = "{:.4g}"):
        super().__init__()
        self.headers = headers
        self.rows = rows
        self.velocity_cols = set(velocity_cols or [])
        self.pressure_cols = set(pressure_cols or [])
        self.float_fmt = float_fmt

    def rowCount(self, parent=QtCore.QModelIndex()):
        return len(self.rows)

    def columnCount(self, parent=QtCore.QModelIndex()):
        return len(self.headers)

    def data(self, index, role=QtCore.Qt.DisplayRole):
        if not index.isValid():
            return None
        val = self.rows[index.row()][index.column()]
        if role == QtCore.Qt.DisplayRole:
            if val is None or (isinstance(val, float) and math.isnan(val)):
                return "—"
            return self.float_fmt.format(val) if isinstance(val, float) else str(val)
        if role == QtCore.Qt.BackgroundRole and isinstance(val, float):
            col = index.column()
            if col in self.velocity_cols and val == 0.0:
                return QtGui.QColor(COLORS["crit"]).darker(200)
            if col in self.pressure_cols and val < 0.0:
                return QtGui.QColor(COLORS["warn"]).darker(200)
        return None

    def headerData(self, section, orientation, role=QtCore.Qt.DisplayRole):
        if role == QtCore.Qt.DisplayRole and orientation == QtCore.Qt.Horizontal:
            return self.headers[section]
        return None

    def export_csv(self, path: str):
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(self.headers)
            for r in self.rows:
                writer.writerow(["" if v is None else v for v in r])
