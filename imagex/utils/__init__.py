"""Utility helpers for the ImageX application."""

from .devices import detect_torch_device, pipeline_device
from .paths import is_image_file, resolve_image_paths
from .text import humanize_label

__all__ = [
    "detect_torch_device",
    "humanize_label",
    "is_image_file",
    "pipeline_device",
    "resolve_image_paths",
]
