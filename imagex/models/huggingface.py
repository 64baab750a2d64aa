"""Scene classification backed by a HuggingFace ``image-classification`` pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import AppConfig
from ..types import PixelBuffer
from ..utils.devices import detect_torch_device, pipeline_device
from .base import LabelScore, ModelError, ModelInfo, SceneModel
from .registry import ModelRegistry

logger = logging.getLogger(__name__)

try:
    from transformers import AutoImageProcessor, AutoModelForImageClassification, pipeline
except Exception:  # pragma: no cover - optional dependency handling
    AutoImageProcessor = AutoModelForImageClassification = pipeline = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore[assignment]


IDENTIFIER = "transformers.image-classification"


class TransformersSceneModel(SceneModel):
    """Runs any image-classification checkpoint, preferably from a local export.

    When ``model_path`` is configured the checkpoint is read from that
    directory; otherwise ``model_source`` must already be in the local
    HuggingFace cache. Nothing is downloaded, so a cache miss fails the load.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        config = config or AppConfig()
        self.model_path: Path | None = config.model_path
        self.model_source = config.model_source
        self.device_preference = config.device
        self._info = ModelInfo(
            identifier=IDENTIFIER,
            display_name="Transformers Image Classifier",
            description=f"Top-k labels from a HuggingFace classifier ({self.source}).",
            tags=("transformers", "torch", "local"),
        )
        self._pipeline = None
        self._device_choice: str | None = None

    @property
    def source(self) -> str:
        if self.model_path is not None:
            return str(self.model_path)
        return self.model_source

    def info(self) -> ModelInfo:
        return self._info

    def load(self) -> None:
        if pipeline is None or torch is None:
            raise ModelError(
                "transformers and torch must be installed to use this model. "
                "Install with `pip install imagex[transformers]`."
            )
        if self.model_path is not None and not self.model_path.exists():
            raise ModelError(f"Model directory {self.model_path} does not exist.")

        device_str, message = detect_torch_device(self.device_preference)
        logger.info("[transformers] %s", message)

        try:
            processor = AutoImageProcessor.from_pretrained(self.source, local_files_only=True)
            classifier = AutoModelForImageClassification.from_pretrained(
                self.source, local_files_only=True
            )
            self._pipeline = pipeline(
                "image-classification",
                model=classifier,
                image_processor=processor,
                device=pipeline_device(device_str),
            )
        except Exception as exc:
            raise ModelError(f"Could not load classifier from {self.source}: {exc}") from exc
        self._device_choice = device_str

    def predict(self, buffer: PixelBuffer, *, top_k: int = 1) -> list[LabelScore]:
        if self._pipeline is None:
            raise ModelError("Model has not been loaded.")

        image = buffer.to_image()
        if image.mode != "RGB":
            image = image.convert("RGB")
        outputs = self._pipeline(image, top_k=top_k)
        if isinstance(outputs, dict):
            outputs = [outputs]

        ranked: list[LabelScore] = []
        for item in outputs or []:
            if not isinstance(item, dict) or "label" not in item:
                continue
            score = item.get("score")
            ranked.append(LabelScore(str(item["label"]), float(score) if score is not None else None))
        return ranked


def register_models() -> None:
    ModelRegistry.register(IDENTIFIER, TransformersSceneModel)

