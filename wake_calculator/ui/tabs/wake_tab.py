from __future__ import annotations

import logging
from typing import Any, Dict, List
from PySide6 import QtWidgets, QtCore

from ..widgets.inputs import LabeledSpin
from ..widgets.plots import Plot
from ..widgets.results import MetricCard
from ..widgets.tables import SimpleTableModel
from ..state import UIState
from ... import api
from ... import calibration as CAL
from ... import io
from ...schemas import CalculationFailure, CalculationResult, SignCorrectionPolicy

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 20

# (decimals, minimum) per constant; maxima share one generous bound
_SPIN_LIMITS = {
    "width": (4, 0.0),
    "height": (4, 0.0),
    "area": (6, 0.0),
    "U_stream": (3, 0.0),
    "P_tot_stream": (1, -1e7),
    "rho": (4, 0.0),
}


class WakeTab(QtWidgets.QWidget):
    def __init__(self, state: UIState, parent=None):
        super().__init__(parent)
        self.state = state
        self._build_ui()
        self._load_constants()

    def _build_ui(self) -> None:
        root = QtWidgets.QVBoxLayout(self)

        top_widget = QtWidgets.QWidget()
        top_layout = QtWidgets.QHBoxLayout(top_widget)

        # Left: file + constants
        left_panel = QtWidgets.QWidget()
        left_layout = QtWidgets.QVBoxLayout(left_panel)

        file_row = QtWidgets.QHBoxLayout()
        self.btn_import = QtWidgets.QPushButton("Import CSV/Excel")
        self.btn_import.clicked.connect(self.on_import)
        self.btn_clear = QtWidgets.QPushButton("Clear")
        self.btn_clear.clicked.connect(self.on_clear)
        file_row.addWidget(self.btn_import)
        file_row.addWidget(self.btn_clear)
        left_layout.addLayout(file_row)
        self.file_label = QtWidgets.QLabel("No file loaded")
        left_layout.addWidget(self.file_label)

        hint = QtWidgets.QLabel(
            f"Required: '{CAL.POSITION_COL}', '{CAL.TOTAL_PREFIX}*' "
            f"(prefers '{CAL.PREFERRED_WAKE_COL}'). Optional: '{CAL.STATIC_PREFIX}*', "
            f"'{CAL.ATM_COLS[0]}', '{CAL.STREAM_COL}'."
        )
        hint.setWordWrap(True)
        left_layout.addWidget(hint)

        form = QtWidgets.QFormLayout()
        self.spins: Dict[str, LabeledSpin] = {}
        for name, (decimals, minimum) in _SPIN_LIMITS.items():
            spin = LabeledSpin(name.replace("_", " "), CAL.CONSTANT_UNITS[name], decimals=decimals, minimum=minimum)
            self.spins[name] = spin
            form.addRow(spin)
        left_layout.addLayout(form)

        self.chk_sign = QtWidgets.QCheckBox("Correct negative total pressures (add P_atm)")
        left_layout.addWidget(self.chk_sign)

        self.calc = QtWidgets.QPushButton("Calculate")
        self.calc.clicked.connect(self.on_calculate)
        left_layout.addWidget(self.calc)

        export_row = QtWidgets.QHBoxLayout()
        self.btn_export_csv = QtWidgets.QPushButton("Export profile CSV")
        self.btn_export_csv.clicked.connect(self.on_export_csv)
        self.btn_export_png = QtWidgets.QPushButton("Export plot PNG")
        self.btn_export_png.clicked.connect(self.on_export_png)
        export_row.addWidget(self.btn_export_csv)
        export_row.addWidget(self.btn_export_png)
        left_layout.addLayout(export_row)
        left_layout.addStretch(1)

        # Right: result cards + plot
        right_panel = QtWidgets.QWidget()
        right_layout = QtWidgets.QVBoxLayout(right_panel)
        cards = QtWidgets.QHBoxLayout()
        self.card_drag = MetricCard("Drag", "N")
        self.card_cd = MetricCard("Drag coefficient (C_D)", "-")
        self.card_scd = MetricCard("SCD", "m²", fmt="{:.6f}")
        for card in (self.card_drag, self.card_cd, self.card_scd):
            cards.addWidget(card)
        right_layout.addLayout(cards)
        self.plot = Plot()
        self.plot.set_axis_labels("z", "U_wake", "mm", "m/s")
        right_layout.addWidget(self.plot.widget, 1)

        top_layout.addWidget(left_panel, 0)
        top_layout.addWidget(right_panel, 1)

        # Bottom: preview / profile / reference tables
        bottom_tabs = QtWidgets.QTabWidget()
        self.table_preview = QtWidgets.QTableView()
        self.table_profile = QtWidgets.QTableView()
        self.table_reference = QtWidgets.QTableView()
        bottom_tabs.addTab(self.table_preview, "Preview")
        bottom_tabs.addTab(self.table_profile, "Profile")
        bottom_tabs.addTab(self.table_reference, f"At z = {CAL.REFERENCE_POSITION_MM:g} mm")

        splitter = QtWidgets.QSplitter(QtCore.Qt.Vertical)
        splitter.addWidget(top_widget)
        splitter.addWidget(bottom_tabs)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)
        root.addWidget(splitter)

        self._preview_model: SimpleTableModel | None = None
        self._profile_model: SimpleTableModel | None = None
        self._reference_model: SimpleTableModel | None = None

    def _load_constants(self) -> None:
        for name, spin in self.spins.items():
            spin.setValue(float(self.state.constants[name]))
        self.chk_sign.setChecked(self.state.sign_correction)

    def _read_constants(self) -> Dict[str, float]:
        self.state.constants = {name: spin.value() for name, spin in self.spins.items()}
        self.state.sign_correction = self.chk_sign.isChecked()
        return dict(self.state.constants)

    def on_import(self) -> None:
        path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Open traverse table", "", "Tables (*.csv *.xlsx)")
        if not path:
            return
        try:
            rows = io.read_table(path)
        except Exception as e:
            logger.exception("Import failed: %s", path)
            QtWidgets.QMessageBox.critical(self, "Import error", str(e))
            return
        self.state.clear_table()
        self.state.file_name = path
        self.state.rows = rows
        self.file_label.setText(f"{path} ({len(rows)} rows)")
        self._render_preview(rows)
        self._reset_results()

    def on_clear(self) -> None:
        self.state.clear_table()
        self.file_label.setText("No file loaded")
        self.table_preview.setModel(None)
        self._preview_model = None
        self._reset_results()

    def on_calculate(self) -> None:
        constants = self._read_constants()
        policy = SignCorrectionPolicy(enabled=self.state.sign_correction)
        out = api.calculate(self.state.rows, constants, policy)
        if isinstance(out, CalculationFailure):
            self._reset_results()
            QtWidgets.QMessageBox.critical(self, "Calculation error", out.message)
            return
        self.state.last_result = out
        self._render_result(out, constants)

    def on_export_csv(self) -> None:
        if self._profile_model is None:
            QtWidgets.QMessageBox.information(self, "Export", "No results to export. Calculate first.")
            return
        path, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Export profile", "wake_profile.csv", "CSV Files (*.csv)")
        if not path:
            return
        try:
            self._profile_model.export_csv(path)
        except OSError as e:
            QtWidgets.QMessageBox.critical(self, "Export error", str(e))

    def on_export_png(self) -> None:
        path, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Export plot", "wake_velocity.png", "PNG Files (*.png)")
        if path:
            self.plot.export_png(path)

    def _render_preview(self, rows: List[Dict[str, Any]]) -> None:
        headers = list(rows[0].keys()) if rows else []
        data = [[r.get(h) for h in headers] for r in rows[:PREVIEW_ROWS]]
        self._preview_model = SimpleTableModel(headers, data)
        self.table_preview.setModel(self._preview_model)

    def _reset_results(self) -> None:
        for card in (self.card_drag, self.card_cd, self.card_scd):
            card.reset()
        self.plot.clear()
        self.table_profile.setModel(None)
        self.table_reference.setModel(None)
        self._profile_model = None

    def _render_result(self, res: CalculationResult, constants: Dict[str, float]) -> None:
        self.card_drag.set_value(res.total_drag)
        self.card_cd.set_value(res.C_D, kind="cd")
        self.card_scd.set_value(res.SCD)

        p = res.profile
        self.plot.clear()
        self.plot.add_series("U_wake", list(p.positions_mm), list(p.wake_velocities), "velocity", symbol="o")
        self.plot.add_threshold_line(constants["U_stream"], "stream", "U_stream")
        self.plot.add_vertical_marker(res.reference_position_mm, "reference", f"z = {res.reference_position_mm:g} mm")

        n_seg = len(p.area_elements)
        headers = ["z [mm]", f"{res.wake_column} [Pa]", "U_wake [m/s]", "dz [m]", "dA [m²]", "Momentum loss [N]"]
        rows: List[List[Any]] = []
        for i, z in enumerate(p.positions_mm):
            seg = i < n_seg
            rows.append([
                z, p.wake_pressures[i], p.wake_velocities[i],
                p.segment_widths_m[i] if seg else None,
                p.area_elements[i] if seg else None,
                p.momentum_loss[i] if seg else None,
            ])
        self._profile_model = SimpleTableModel(headers, rows, velocity_cols=[2], pressure_cols=[1])
        self.table_profile.setModel(self._profile_model)

        ref_rows = [[col, v] for col, v in {**res.interp_static, **res.interp_total}.items()]
        self._reference_model = SimpleTableModel(["Column", "Pressure [Pa]"], ref_rows, float_fmt="{:.2f}")
        self.table_reference.setModel(self._reference_model)
        if res.sign_corrected:
            self.file_label.setText(f"{self.state.file_name} (negative total pressures corrected with P_atm)")
