from __future__ import annotations

from PySide6 import QtWidgets

from .state import UIState
from .tabs.wake_tab import WakeTab


class App(QtWidgets.QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Wake Calculator")
        self.state = UIState()
        tabs = QtWidgets.QTabWidget()
        tabs.addTab(WakeTab(self.state), "Wake")
        self.setCentralWidget(tabs)
