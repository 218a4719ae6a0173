from __future__ import annotations

from typing import List, Optional
from PySide6 import QtCore
import pyqtgraph as pg
from pyqtgraph.exporters import ImageExporter
from ..theme import COLORS


class Plot(QtCore.QObject):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.widget = pg.PlotWidget(background=COLORS["bg"])
        self.widget.showGrid(x=True, y=True, alpha=0.3)
        self.widget.getPlotItem().getAxis('left').setPen(COLORS["neutral"])
        self.widget.getPlotItem().getAxis('bottom').setPen(COLORS["neutral"])
        self.legend = self.widget.addLegend()
        pg.setConfigOptions(antialias=True)

        self._series: dict[str, pg.PlotDataItem] = {}
        self._x_label = ""
        self._y_label = ""
        self._x_unit = ""
        self._y_unit = ""

        # Crosshair + readout
        self._cross_v = pg.InfiniteLine(angle=90, movable=False, pen=pg.mkPen(COLORS["grid"]))
        self._cross_h = pg.InfiniteLine(angle=0, movable=False, pen=pg.mkPen(COLORS["grid"]))
        self._xy_text = pg.TextItem("", color=COLORS["neutral"])  # type: ignore[arg-type]
        self._xy_text.setAnchor((0, 1))
        self._add_overlays()
        self._mouse_proxy = pg.SignalProxy(self.widget.scene().sigMouseMoved, rateLimit=60, slot=self._on_mouse_moved_evt)

    def _add_overlays(self):
        self._cross_v.setZValue(10)
        self._cross_h.setZValue(10)
        self._xy_text.setZValue(1000)
        self.widget.addItem(self._cross_v, ignoreBounds=True)
        self.widget.addItem(self._cross_h, ignoreBounds=True)
        self.widget.addItem(self._xy_text, ignoreBounds=True)

    def add_series(self, name: str, x: List[float], y: List[float], color_token: str, line_width: int = 2, symbol: Optional[str] = None):
        pen = pg.mkPen(COLORS.get(color_token, COLORS["neutral"]), width=line_width)
        item = self.widget.plot(x, y, name=name, pen=pen, symbol=symbol,
                                symbolBrush=COLORS.get(color_token, COLORS["neutral"]))
        self._series[name] = item
        self.widget.enableAutoRange('xy', True)
        return item

    def clear(self):
        self.widget.clear()
        self._series.clear()
        self.legend = self.widget.addLegend()
        self._add_overlays()

    def export_png(self, path: str):
        ImageExporter(self.widget.plotItem).export(path)

    def add_threshold_line(self, y: float, color_token: str, label: str = ""):
        pen = pg.mkPen(COLORS.get(color_token, COLORS["neutral"]), style=QtCore.Qt.DashLine)
        line = pg.InfiniteLine(pos=y, angle=0, movable=False, pen=pen, label=label,
                               labelOpts={"position": 0.95, "color": COLORS.get(color_token, "#fff")})
        self.widget.addItem(line)
        return line

    def add_vertical_marker(self, x: float, color_token: str = "neutral", label: str = ""):
        pen = pg.mkPen(COLORS.get(color_token, COLORS["neutral"]), style=QtCore.Qt.DotLine)
        line = pg.InfiniteLine(pos=x, angle=90, movable=False, pen=pen, label=label,
                               labelOpts={"position": 0.9, "color": COLORS.get(color_token, "#fff")})
        self.widget.addItem(line)
        return line

    def set_axis_labels(self, x_label: str = "", y_label: str = "", x_unit: str = "", y_unit: str = ""):
        self._x_label, self._y_label = x_label, y_label
        self._x_unit, self._y_unit = x_unit, y_unit
        if x_label:
            self.widget.setLabel('bottom', f"{x_label} [{x_unit}]" if x_unit else x_label)
        if y_label:
            self.widget.setLabel('left', f"{y_label} [{y_unit}]" if y_unit else y_label)

    def _on_mouse_moved(self, pos):
        vb = self.widget.plotItem.vb
        if vb is None or pos is None:
            return
        p = vb.mapSceneToView(pos)
        self._cross_v.setPos(p.x())
        self._cross_h.setPos(p.y())
        xu = f" {self._x_unit}" if self._x_unit else ""
        yu = f" {self._y_unit}" if self._y_unit else ""
        self._xy_text.setText(f"z={p.x():.2f}{xu}, U={p.y():.2f}{yu}")
        (x0, _x1), (_y0, y1) = vb.viewRange()
        self._xy_text.setPos(x0, y1)

    def _on_mouse_moved_evt(self, args):
        pos = args[0] if isinstance(args, (list, tuple)) and args else args
        self._on_mouse_moved(pos)
