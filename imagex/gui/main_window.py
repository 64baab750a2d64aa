"""Main Qt window implementing the user interface."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QThreadPool
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from ..config import AppConfig
from ..services.analyzer import SceneAnalyzer
from ..services.presentation import PresentationState
from ..settings_store import SettingsStore
from ..utils.paths import image_dialog_filter
from .widgets.image_preview import ImagePreview
from .widgets.result_panel import ResultPanel
from .workers import AnalysisWorker, StateBridge


class MainWindow(QMainWindow):
    """Primary application window."""

    def __init__(self, settings_store: SettingsStore | None = None) -> None:
        super().__init__()
        self.setWindowTitle("ImageX")
        self.resize(420, 620)

        self.settings_store = settings_store or SettingsStore()
        self.config: AppConfig = self.settings_store.load()
        self.analyzer = SceneAnalyzer(self.config)
        self.thread_pool = QThreadPool()

        self._bridge = StateBridge(self)
        self._bridge.state_changed.connect(self._on_state_changed)
        self._unsubscribe = self.analyzer.state.subscribe(self._bridge.publish)

        self._build_ui()
        self._rebuild_status_bar()
        self._on_state_changed(self.analyzer.state.current_state())

    def _build_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)
        self.setCentralWidget(central)

        preview_row = QHBoxLayout()
        self.preview = ImagePreview()
        self.preview.clicked.connect(self._choose_image)
        self.preview.image_dropped.connect(self._start_analysis)
        preview_row.addStretch()
        preview_row.addWidget(self.preview)
        preview_row.addStretch()
        layout.addLayout(preview_row)

        self.select_btn = QPushButton("Select Photo…")
        self.select_btn.clicked.connect(self._choose_image)
        layout.addWidget(self.select_btn)

        self.result_panel = ResultPanel()
        layout.addWidget(self.result_panel)
        layout.addStretch()

        self.source_label = QLabel("")
        self.source_label.setWordWrap(True)
        layout.addWidget(self.source_label)

        self.setStatusBar(QStatusBar())

    def _rebuild_status_bar(self) -> None:
        width, height = self.config.input_size
        self.statusBar().showMessage(
            f"Model: {self.config.model_name} • Input: {width}x{height} {self.config.pixel_format}"
        )

    # --- Event handlers -------------------------------------------------

    def _choose_image(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self,
            "Select photo",
            "",
            image_dialog_filter(),
        )
        # A dismissed dialog leaves the current state untouched.
        if path:
            self._start_analysis(Path(path))

    def _start_analysis(self, path: Path) -> None:
        # Earlier runs are not cancelled; see AppConfig.discard_stale_results.
        self.preview.show_image(path)
        self.source_label.setText(str(path))
        token = self.analyzer.begin()
        self.thread_pool.start(AnalysisWorker(self.analyzer, path, token))

    def _on_state_changed(self, state: PresentationState) -> None:
        self.result_panel.show_state(state)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._unsubscribe()
        self.thread_pool.waitForDone()
        self.analyzer.close()
        super().closeEvent(event)
