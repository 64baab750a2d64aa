"""Core service wiring preprocessing, inference and presentation state."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock

from ..config import AppConfig
from ..models.base import LabelScore, SceneModel
from ..models.registry import ModelRegistry
from ..types import Failure, FailureReason, PredictionResult, RawImage, Success
from ..utils.paths import resolve_image_paths
from ..utils.text import format_result_text
from .inference import InferenceAdapter, ModelFactory
from .preprocessor import resize
from .presentation import PresentationStateMachine

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, Path], None]


@dataclass(slots=True)
class AnalyzerResult:
    """Summary of a headless classification of a single image."""

    image_path: Path
    result: PredictionResult
    scores: list[LabelScore] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return isinstance(self.result, Failure)

    @property
    def label(self) -> str | None:
        return self.result.label if isinstance(self.result, Success) else None

    @property
    def text(self) -> str:
        if isinstance(self.result, Success):
            return format_result_text(self.result.label)
        return self.result.message

    def as_dict(self) -> dict[str, object]:
        failure = self.result if isinstance(self.result, Failure) else None
        return {
            "path": str(self.image_path),
            "label": self.label,
            "text": self.text,
            "failed": self.failed,
            "reason": failure.reason.value if failure else None,
            "detail": failure.detail if failure else None,
            "scores": [score.as_dict() for score in self.scores],
        }


def load_raw_image(path: Path) -> RawImage:
    """Read ``path`` as an undecoded :class:`RawImage`.

    Unreadable files become empty images so they fail in the preprocessor
    like any other undecodable input.
    """
    try:
        return RawImage.from_path(path)
    except OSError as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return RawImage(payload=b"", name=path.name)


def registry_model_factory(config: AppConfig) -> ModelFactory:
    """Build a factory that loads the configured model from the registry."""

    def _factory() -> SceneModel:
        return ModelRegistry.get(config.model_name, config=config)

    return _factory


class SceneAnalyzer:
    """High-level orchestration for the select → resize → classify workflow."""

    def __init__(
        self,
        config: AppConfig,
        *,
        model_factory: ModelFactory | None = None,
        state: PresentationStateMachine | None = None,
    ) -> None:
        self.config = config
        self.state = state or PresentationStateMachine(
            discard_stale=config.discard_stale_results
        )
        self.adapter = InferenceAdapter(
            model_factory or registry_model_factory(config),
            cache_model=config.cache_model,
            separator=config.label_separator,
            top_k=config.top_k,
        )
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = Lock()

    def analyze(self, image: RawImage, *, token: int | None = None) -> PredictionResult:
        """Run the pipeline for ``image`` and publish its outcome.

        The state enters ``Analyzing`` immediately and ends in ``Done``
        whatever happens inside the pipeline. Callers that dispatch the run
        to another thread pass the token from an earlier :meth:`begin` so the
        display switches to ``Analyzing`` at selection time.
        """
        if token is None:
            token = self.begin()
        logger.debug("Run %d started for %s", token, image.name or "<memory>")
        result, _ = self._run(image)
        applied = self.state.finish(token, result)
        if not applied:
            logger.info("Run %d finished after a newer selection; result not shown.", token)
        return result

    def begin(self) -> int:
        """Enter ``Analyzing`` and return the token for the run about to start."""
        return self.state.begin()

    def submit(self, image: RawImage) -> Future[PredictionResult]:
        """Run :meth:`analyze` on a background thread."""
        token = self.begin()
        return self._get_executor().submit(self.analyze, image, token=token)

    def classify_image(self, image: RawImage) -> tuple[PredictionResult, list[LabelScore]]:
        """Run the pipeline without touching the presentation state."""
        return self._run(image)

    def analyze_target(
        self,
        target: Path,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> list[AnalyzerResult]:
        """Classify a single image or every image in a directory tree."""
        image_paths = resolve_image_paths(
            start=target,
            recursive=self.config.recursive,
            include_hidden=self.config.include_hidden,
        )
        return self.analyze_paths(image_paths, progress_callback=progress_callback)

    def analyze_paths(
        self,
        image_paths: Sequence[Path],
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> list[AnalyzerResult]:
        if not image_paths:
            return []

        sorted_paths = sorted(image_paths)
        total = len(sorted_paths)
        results: list[AnalyzerResult] = []

        def _worker(path: Path) -> AnalyzerResult:
            result, scores = self.classify_image(load_raw_image(path))
            return AnalyzerResult(image_path=path, result=result, scores=scores)

        with ThreadPoolExecutor(max_workers=self.config.max_concurrency) as executor:
            futures = {executor.submit(_worker, path): path for path in sorted_paths}
            for index, future in enumerate(as_completed(futures), start=1):
                results.append(future.result())
                if progress_callback:
                    progress_callback(index, total, futures[future])

        results.sort(key=lambda item: item.image_path)
        return results

    def close(self) -> None:
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def __enter__(self) -> SceneAnalyzer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _run(self, image: RawImage) -> tuple[PredictionResult, list[LabelScore]]:
        try:
            buffer = resize(
                image,
                self.config.input_size,
                mode=self.config.resize_mode,
                pixel_format=self.config.pixel_format,
            )
            if isinstance(buffer, Failure):
                logger.warning("Image resize failed for %s: %s", image.name or "<memory>", buffer.detail)
                return buffer, []
            return self.adapter.classify_ranked(buffer)
        except Exception as exc:  # pragma: no cover - stages report failures as values
            logger.exception("Unexpected error while analysing %s", image.name or "<memory>")
            return Failure(FailureReason.INFERENCE, str(exc)), []

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config.max_concurrency,
                    thread_name_prefix="imagex-analysis",
                )
            return self._executor
