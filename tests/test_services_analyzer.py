"""Tests for the end-to-end analysis workflow."""

from __future__ import annotations

import threading
from pathlib import Path

from PIL import Image

from imagex.config import AppConfig
from imagex.models.base import LabelScore, ModelInfo
from imagex.services.analyzer import SceneAnalyzer, load_raw_image
from imagex.services.presentation import Analyzing, Done, Idle
from imagex.types import Failure, FailureReason, RawImage, Success


class ColourModel:
    """Labels buffers by their dominant channel; waits on a gate when one is set."""

    def __init__(self) -> None:
        self.gates: dict[str, threading.Event] = {}
        self.started: dict[str, threading.Event] = {
            "red_scene": threading.Event(),
            "blue_scene": threading.Event(),
        }

    def info(self) -> ModelInfo:
        return ModelInfo(identifier="colour", display_name="Colour", description="")

    def load(self) -> None:  # pragma: no cover - nothing to load
        return None

    def predict(self, buffer, *, top_k=1):
        r, _, b = buffer.to_image().getpixel((0, 0))
        label = "red_scene" if r > b else "blue_scene"
        self.started[label].set()
        gate = self.gates.get(label)
        if gate is not None:
            assert gate.wait(timeout=5)
        return [LabelScore(label, 1.0)]


def _photo(colour: tuple[int, int, int], size=(500, 500)) -> RawImage:
    return RawImage.from_pil(Image.new("RGB", size, colour))


def _recording(analyzer: SceneAnalyzer) -> list:
    states = [analyzer.state.current_state()]
    analyzer.state.subscribe(states.append)
    return states


def test_valid_photo_state_sequence():
    analyzer = SceneAnalyzer(AppConfig(model_name="builtin.simple"))
    states = _recording(analyzer)

    result = analyzer.analyze(_photo((40, 160, 40)))

    assert result == Success("forest path")
    assert states == [Idle(), Analyzing(), Done(Success("forest path"))]
    assert "_" not in states[-1].text


def test_corrupt_file_state_sequence(tmp_path):
    corrupt = tmp_path / "broken.jpg"
    corrupt.write_bytes(b"")
    analyzer = SceneAnalyzer(AppConfig())
    states = _recording(analyzer)

    result = analyzer.analyze(load_raw_image(corrupt))

    assert isinstance(result, Failure)
    assert result.reason is FailureReason.RESIZE
    assert states[:2] == [Idle(), Analyzing()]
    assert states[-1].text == "Image resize failed"
    assert states[-1].is_failure


def test_unloadable_model_state_sequence(tmp_path):
    config = AppConfig(
        model_name="transformers.image-classification",
        model_path=tmp_path / "missing-model",
    )
    analyzer = SceneAnalyzer(config)
    states = _recording(analyzer)

    result = analyzer.analyze(_photo((10, 10, 10)))

    assert isinstance(result, Failure)
    assert result.reason is FailureReason.INFERENCE
    assert len(states) == 3
    assert states[-1].text == "Analysis failed"


def test_unknown_model_is_an_analysis_failure():
    analyzer = SceneAnalyzer(AppConfig(model_name="does.not.exist"))

    result = analyzer.analyze(_photo((1, 2, 3)))

    assert isinstance(result, Failure)
    assert result.reason is FailureReason.INFERENCE
    assert isinstance(analyzer.state.current_state(), Done)


def test_injected_model_factory_is_used():
    model = ColourModel()
    analyzer = SceneAnalyzer(AppConfig(), model_factory=lambda: model)

    assert analyzer.analyze(_photo((200, 0, 0))) == Success("red scene")


def test_classify_image_leaves_state_untouched():
    analyzer = SceneAnalyzer(AppConfig(top_k=2), model_factory=ColourModel)

    result, scores = analyzer.classify_image(_photo((0, 0, 200)))

    assert result == Success("blue scene")
    assert [score.label for score in scores] == ["blue_scene"]
    assert isinstance(analyzer.state.current_state(), Idle)


def _start_overlapping_runs(analyzer: SceneAnalyzer, model: ColourModel):
    model.gates = {"red_scene": threading.Event(), "blue_scene": threading.Event()}
    future_a = analyzer.submit(_photo((220, 0, 0)))
    assert model.started["red_scene"].wait(timeout=5)
    future_b = analyzer.submit(_photo((0, 0, 220)))
    assert model.started["blue_scene"].wait(timeout=5)
    return future_a, future_b


def test_overlapping_runs_last_finisher_wins():
    model = ColourModel()
    config = AppConfig(max_concurrency=2, discard_stale_results=False)
    with SceneAnalyzer(config, model_factory=lambda: model) as analyzer:
        future_a, future_b = _start_overlapping_runs(analyzer, model)

        # B (the newer selection) finishes first, then A overwrites it.
        model.gates["blue_scene"].set()
        assert future_b.result(timeout=5) == Success("blue scene")
        assert analyzer.state.current_state() == Done(Success("blue scene"))

        model.gates["red_scene"].set()
        assert future_a.result(timeout=5) == Success("red scene")
        assert analyzer.state.current_state() == Done(Success("red scene"))


def test_overlapping_runs_with_stale_results_discarded():
    model = ColourModel()
    config = AppConfig(max_concurrency=2, discard_stale_results=True)
    with SceneAnalyzer(config, model_factory=lambda: model) as analyzer:
        future_a, future_b = _start_overlapping_runs(analyzer, model)

        model.gates["red_scene"].set()
        # The stale run still reports its own result to its caller.
        assert future_a.result(timeout=5) == Success("red scene")
        assert isinstance(analyzer.state.current_state(), Analyzing)

        model.gates["blue_scene"].set()
        future_b.result(timeout=5)
        assert analyzer.state.current_state() == Done(Success("blue scene"))


def test_overlapping_runs_end_in_one_of_the_results():
    model = ColourModel()
    with SceneAnalyzer(AppConfig(max_concurrency=2), model_factory=lambda: model) as analyzer:
        futures = [analyzer.submit(_photo((220, 0, 0))), analyzer.submit(_photo((0, 0, 220)))]
        for future in futures:
            future.result(timeout=5)

    assert analyzer.state.current_state() in (
        Done(Success("red scene")),
        Done(Success("blue scene")),
    )


def _save(path: Path, colour: tuple[int, int, int]) -> Path:
    Image.new("RGB", (32, 32), colour).save(path)
    return path


def test_analyze_paths_returns_sorted_records(tmp_path):
    b_path = _save(tmp_path / "b.png", (0, 0, 200))
    a_path = _save(tmp_path / "a.png", (200, 0, 0))
    broken = tmp_path / "c.png"
    broken.write_bytes(b"not a png")

    analyzer = SceneAnalyzer(AppConfig(max_concurrency=1), model_factory=ColourModel)
    progress: list[tuple[int, int, str]] = []
    results = analyzer.analyze_paths(
        [broken, b_path, a_path],
        progress_callback=lambda current, total, path: progress.append(
            (current, total, path.name)
        ),
    )

    assert [result.image_path.name for result in results] == ["a.png", "b.png", "c.png"]
    assert [result.label for result in results] == ["red scene", "blue scene", None]
    assert results[2].failed
    assert results[2].as_dict()["reason"] == "resize"
    assert progress == [(1, 3, "a.png"), (2, 3, "b.png"), (3, 3, "c.png")]
    assert isinstance(analyzer.state.current_state(), Idle)


def test_analyze_target_scans_directories(tmp_path):
    _save(tmp_path / "one.jpg", (200, 0, 0))
    (tmp_path / "notes.txt").write_text("skip", encoding="utf-8")

    analyzer = SceneAnalyzer(AppConfig(), model_factory=ColourModel)
    results = analyzer.analyze_target(tmp_path)

    assert [result.image_path.name for result in results] == ["one.jpg"]
    assert results[0].as_dict()["text"] == "Result: red scene"


def test_analyze_paths_empty_returns_empty():
    assert SceneAnalyzer(AppConfig()).analyze_paths([]) == []


def test_load_raw_image_unreadable_path_is_empty(tmp_path):
    raw = load_raw_image(tmp_path)
    assert raw.payload == b""
    assert raw.name == tmp_path.name
