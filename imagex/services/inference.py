"""Adapter between pixel buffers and a loaded classification model."""

from __future__ import annotations

import logging
from collections.abc import Callable
from threading import Lock

from ..models.base import LabelScore, ModelError, SceneModel
from ..types import Failure, FailureReason, PixelBuffer, PredictionResult, Success
from ..utils.text import DEFAULT_SEPARATOR, humanize_label

logger = logging.getLogger(__name__)

ModelFactory = Callable[[], SceneModel]


class InferenceAdapter:
    """Classifies buffers with a model obtained from ``model_factory``.

    The factory must return a ready-to-use (loaded) model. With
    ``cache_model`` the first instance is reused by later calls, otherwise a
    fresh model is created for every classification.
    """

    def __init__(
        self,
        model_factory: ModelFactory,
        *,
        cache_model: bool = True,
        separator: str = DEFAULT_SEPARATOR,
        top_k: int = 1,
    ) -> None:
        self._model_factory = model_factory
        self._cache_model = cache_model
        self._separator = separator
        self._top_k = max(1, top_k)
        self._model: SceneModel | None = None
        self._model_lock = Lock()

    def classify(self, buffer: PixelBuffer) -> PredictionResult:
        """Return the humanised top-1 label, or an inference failure."""
        result, _ = self.classify_ranked(buffer)
        return result

    def classify_ranked(self, buffer: PixelBuffer) -> tuple[PredictionResult, list[LabelScore]]:
        """Like :meth:`classify`, also returning the ranked raw labels."""
        try:
            model = self._get_model()
            ranked = model.predict(buffer, top_k=self._top_k)
            if not ranked:
                raise ModelError("model returned no labels")
        except Exception as exc:
            logger.warning("Analysis failed: %s", exc, exc_info=True)
            return Failure(FailureReason.INFERENCE, str(exc)), []

        label = humanize_label(ranked[0].label, separator=self._separator)
        return Success(label), list(ranked)

    def reset(self) -> None:
        """Drop the cached model so the next call loads a new one."""
        with self._model_lock:
            self._model = None

    def _get_model(self) -> SceneModel:
        if not self._cache_model:
            return self._model_factory()
        with self._model_lock:
            if self._model is None:
                self._model = self._model_factory()
        return self._model
