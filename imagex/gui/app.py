"""Application bootstrap for the Qt-based GUI."""

from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from ..settings_store import SettingsStore
from .assets import load_app_icon
from .main_window import MainWindow


def run_app(settings_store: SettingsStore | None = None) -> None:
    """Launch the GUI application."""
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("ImageX")
    icon = load_app_icon()
    if icon is not None:
        app.setWindowIcon(icon)
    window = MainWindow(settings_store)
    if icon is not None:
        window.setWindowIcon(icon)
    window.show()
    app.exec()
