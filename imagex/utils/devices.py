"""Helpers for selecting accelerator devices when optional libraries are present."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def detect_torch_device(preference: str = "auto") -> tuple[str, str]:
    """Pick ``cuda:N``, ``mps`` or ``cpu`` for ``preference``.

    Returns the device string and a message for the log.
    """
    if torch is None:
        return "cpu", "PyTorch is not installed; running on CPU."

    choice = (preference or "auto").lower()
    if choice in ("auto", "cuda") and torch.cuda.is_available():
        index = torch.cuda.current_device()
        return f"cuda:{index}", f"Running on CUDA device {index} ({torch.cuda.get_device_name(index)})."

    mps = getattr(torch.backends, "mps", None)
    if choice in ("auto", "mps") and mps is not None and mps.is_available():
        return "mps", "Running on the Apple MPS backend."

    if choice not in ("auto", "cpu"):
        return "cpu", f"Device '{preference}' is not available; running on CPU."
    return "cpu", "Running on CPU."


def pipeline_device(device_str: str) -> int | str:
    """Translate a device string into the ``device`` argument of a transformers pipeline.

    CUDA devices map to their integer index, MPS stays a string and CPU is ``-1``.
    """
    if device_str.startswith("cuda"):
        _, _, index = device_str.partition(":")
        try:
            return int(index)
        except ValueError:
            logger.debug("Could not parse CUDA index from %r; using device 0.", device_str)
            return 0
    if device_str == "mps":
        return "mps"
    return -1
