"""Widget rendering the presentation state of the pipeline."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QProgressBar, QVBoxLayout, QWidget

from ...services.presentation import Analyzing, Done, PresentationState

SUCCESS_STYLE = "color: #2e9d4f; border: 2px solid #2e9d4f; border-radius: 12px; padding: 20px;"
FAILURE_STYLE = "color: #d03b3b; border: 2px solid #d03b3b; border-radius: 12px; padding: 20px;"
IDLE_STYLE = "color: #9aa0ad; padding: 20px;"


class ResultPanel(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self._progress = QProgressBar()
        self._progress.setRange(0, 0)
        self._progress.setTextVisible(False)
        self._progress.hide()

        self._status = QLabel()
        self._status.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._status.setWordWrap(True)
        font = self._status.font()
        font.setPointSize(font.pointSize() + 6)
        self._status.setFont(font)

        layout.addWidget(self._progress)
        layout.addWidget(self._status)

    def show_state(self, state: PresentationState) -> None:
        busy = isinstance(state, Analyzing)
        self._progress.setVisible(busy)
        self._status.setText(state.text)
        if isinstance(state, Done):
            self._status.setStyleSheet(FAILURE_STYLE if state.is_failure else SUCCESS_STYLE)
        else:
            self._status.setStyleSheet(IDLE_STYLE)
