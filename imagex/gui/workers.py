"""Qt helpers used to run analysis off the main thread."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QObject, QRunnable, Signal

from ..services.analyzer import SceneAnalyzer, load_raw_image
from ..services.presentation import PresentationState


class StateBridge(QObject):
    """Re-emits presentation states as a Qt signal.

    States are published from worker threads; connecting ``state_changed``
    to a widget slot queues delivery onto the GUI thread.
    """

    state_changed = Signal(object)

    def publish(self, state: PresentationState) -> None:
        self.state_changed.emit(state)


class AnalysisWorker(QRunnable):
    """Runs one select → resize → classify pass on a pool thread."""

    def __init__(self, analyzer: SceneAnalyzer, path: Path, token: int) -> None:
        super().__init__()
        self.analyzer = analyzer
        self.path = path
        self.token = token

    def run(self) -> None:
        # analyze() reports every failure through the presentation state.
        self.analyzer.analyze(load_raw_image(self.path), token=self.token)
