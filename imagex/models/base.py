"""Abstract interfaces for scene classification models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from ..types import PixelBuffer


@dataclass(slots=True)
class LabelScore:
    """A single ranked label produced by a model."""

    label: str
    score: float | None = None

    def as_dict(self) -> dict[str, float | str]:
        payload: dict[str, float | str] = {"label": self.label}
        if self.score is not None:
            payload["score"] = float(self.score)
        return payload


@dataclass(slots=True)
class ModelInfo:
    """Metadata describing an available model implementation."""

    identifier: str
    display_name: str
    description: str
    tags: Sequence[str] = ()


class ModelError(RuntimeError):
    """Raised when a model cannot be loaded or cannot classify a buffer."""


class SceneModel(Protocol):
    """Interface that all classification models must satisfy.

    ``predict`` must not mutate model state: a loaded instance may be shared
    by concurrent analyses.
    """

    def info(self) -> ModelInfo:
        """Return metadata describing the model."""

    def load(self) -> None:
        """Perform any expensive model initialisation."""

    def predict(self, buffer: PixelBuffer, *, top_k: int = 1) -> list[LabelScore]:
        """Return up to ``top_k`` labels for ``buffer``, best first."""
