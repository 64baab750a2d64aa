"""Service layer for the image classification pipeline."""

from .analyzer import AnalyzerResult, SceneAnalyzer, load_raw_image
from .inference import InferenceAdapter
from .preprocessor import resize
from .presentation import Analyzing, Done, Idle, PresentationStateMachine

__all__ = [
    "AnalyzerResult",
    "Analyzing",
    "Done",
    "Idle",
    "InferenceAdapter",
    "PresentationStateMachine",
    "SceneAnalyzer",
    "load_raw_image",
    "resize",
]
