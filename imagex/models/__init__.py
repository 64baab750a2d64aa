"""Model registry and base classes for scene classification."""

from .base import LabelScore, ModelError, ModelInfo, SceneModel
from .registry import ModelRegistry

__all__ = [
    "LabelScore",
    "ModelError",
    "ModelInfo",
    "ModelRegistry",
    "SceneModel",
]
