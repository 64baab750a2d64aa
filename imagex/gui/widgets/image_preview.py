"""Clickable photo preview that also accepts a dropped image file."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QDragEnterEvent, QDragLeaveEvent, QDropEvent, QMouseEvent, QPixmap
from PySide6.QtWidgets import QLabel, QWidget

from ...utils.paths import is_image_file
from ..assets import default_preview

PREVIEW_SIZE = 300


class ImagePreview(QLabel):
    clicked = Signal()
    image_dropped = Signal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAcceptDrops(True)
        self.setFixedSize(PREVIEW_SIZE, PREVIEW_SIZE)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setToolTip("Click to choose a photo, or drop one here.")
        self._set_border(active=False)
        self.setPixmap(default_preview(PREVIEW_SIZE))

    def show_image(self, path: Path) -> None:
        pixmap = QPixmap(str(path))
        if pixmap.isNull():
            self.setPixmap(default_preview(PREVIEW_SIZE))
            return
        self.setPixmap(
            pixmap.scaled(
                PREVIEW_SIZE,
                PREVIEW_SIZE,
                Qt.AspectRatioMode.KeepAspectRatioByExpanding,
                Qt.TransformationMode.SmoothTransformation,
            )
        )

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit()
            event.accept()
            return
        super().mousePressEvent(event)

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if _dropped_image(event) is not None:
            event.acceptProposedAction()
            self._set_border(active=True)
        else:
            event.ignore()

    def dropEvent(self, event: QDropEvent) -> None:
        path = _dropped_image(event)
        self._set_border(active=False)
        if path is None:
            event.ignore()
            return
        self.image_dropped.emit(path)
        event.acceptProposedAction()

    def dragLeaveEvent(self, event: QDragLeaveEvent) -> None:
        self._set_border(active=False)
        super().dragLeaveEvent(event)

    def _set_border(self, *, active: bool) -> None:
        color = "#4670bb" if active else "#6f7686"
        self.setStyleSheet(f"border: 2px dashed {color}; border-radius: 16px;")


def _dropped_image(event: QDragEnterEvent | QDropEvent) -> Path | None:
    """Return the first dropped local image file, if any."""
    mime = event.mimeData()
    if not mime.hasUrls():
        return None
    for url in mime.urls():
        if not url.isLocalFile():
            continue
        path = Path(url.toLocalFile())
        if path.is_file() and is_image_file(path):
            return path
    return None
