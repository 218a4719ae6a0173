from __future__ import annotations

import logging
import sys
from PySide6 import QtCore, QtWidgets

from .app import App


def _install_qt_warning_filter() -> None:
    """Drop the pyqtgraph overlay warning emitted while the crosshair text is re-added."""

    def _handler(mode, context, message: str):  # type: ignore[no-untyped-def]
        if "QGraphicsItem::itemTransform: null pointer passed" in message:
            return
        sys.stderr.write(message + "\n")

    QtCore.qInstallMessageHandler(_handler)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    _install_qt_warning_filter()
    app = QtWidgets.QApplication(sys.argv)
    win = App()
    win.resize(1280, 800)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
