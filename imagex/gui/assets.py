"""Static asset helpers for the GUI layer."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QIcon, QPainter, QPixmap

RESOURCES_DIR = Path(__file__).resolve().parents[2] / "resources"
APP_ICON_PATH = RESOURCES_DIR / "imagex-icon.png"
DEFAULT_PREVIEW_PATH = RESOURCES_DIR / "default-image.png"


def load_app_icon() -> QIcon | None:
    """Return the application icon if the resource exists."""
    if APP_ICON_PATH.exists():
        return QIcon(str(APP_ICON_PATH))
    return None


def default_preview(size: int) -> QPixmap:
    """Placeholder shown before any photo has been selected."""
    if DEFAULT_PREVIEW_PATH.exists():
        pixmap = QPixmap(str(DEFAULT_PREVIEW_PATH))
        if not pixmap.isNull():
            return pixmap.scaled(
                size,
                size,
                Qt.AspectRatioMode.KeepAspectRatioByExpanding,
                Qt.TransformationMode.SmoothTransformation,
            )

    pixmap = QPixmap(size, size)
    pixmap.fill(QColor(38, 40, 48))
    painter = QPainter(pixmap)
    painter.setPen(QColor(170, 174, 186))
    painter.drawText(pixmap.rect(), Qt.AlignmentFlag.AlignCenter, "No photo")
    painter.end()
    return pixmap
