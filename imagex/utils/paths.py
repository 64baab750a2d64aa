"""Path helpers for locating images to classify."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

IMAGE_EXTENSIONS = (
    ".jpg",
    ".jpeg",
    ".png",
    ".webp",
    ".bmp",
    ".tiff",
    ".tif",
    ".gif",
)


def is_image_file(path: Path, *, extensions: Iterable[str] | None = None) -> bool:
    """Return True if the given path has a supported image extension."""
    exts = {ext.lower() for ext in (extensions or IMAGE_EXTENSIONS)}
    return path.suffix.lower() in exts


def image_dialog_filter() -> str:
    """Name filter for file dialogs listing every supported extension."""
    patterns = " ".join(f"*{ext}" for ext in IMAGE_EXTENSIONS)
    return f"Images ({patterns})"


def resolve_image_paths(
    start: Path,
    *,
    recursive: bool = True,
    include_hidden: bool = False,
) -> list[Path]:
    """Collect image paths starting from ``start``.

    A file is returned as-is when it looks like an image; a directory is
    scanned (optionally recursively) and the matches are returned sorted.
    """

    start = start.expanduser()
    if not start.exists():
        raise FileNotFoundError(start)

    if start.is_file():
        if is_image_file(start) and (include_hidden or not _is_hidden(Path(start.name))):
            return [start]
        return []

    walker: Iterator[Path] = start.rglob("*") if recursive else start.iterdir()
    collected = [
        path
        for path in walker
        if path.is_file()
        and is_image_file(path)
        and (include_hidden or not _is_hidden(path.relative_to(start)))
    ]
    collected.sort()
    return collected


def _is_hidden(path: Path) -> bool:
    return any(part.startswith(".") for part in path.parts)
