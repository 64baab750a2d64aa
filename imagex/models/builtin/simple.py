"""A lightweight, dependency-free heuristic scene model used as a baseline."""

from __future__ import annotations

from PIL import Image, ImageStat

from ...types import PixelBuffer
from ..base import LabelScore, ModelInfo, SceneModel
from ..registry import ModelRegistry


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _channel_means(image: Image.Image) -> tuple[float, float, float]:
    stat = ImageStat.Stat(image)
    r, g, b = (value / 255 for value in stat.mean[:3])
    return r, g, b


def _shares(rgb: tuple[float, float, float]) -> tuple[float, float, float]:
    total = max(sum(rgb), 1e-6)
    r, g, b = rgb
    return r / total, g / total, b / total


def _scene_scores(image: Image.Image) -> dict[str, float]:
    rgb = _channel_means(image)
    brightness = sum(rgb) / 3
    spread = max(rgb) - min(rgb)
    share_r, share_g, share_b = _shares(rgb)

    width, height = image.size
    upper = image.crop((0, 0, width, max(height // 2, 1)))
    _, _, upper_blue = _shares(_channel_means(upper))

    return {
        "night_sky": _clamp(1.0 - brightness / 0.25),
        "snowfield": _clamp((brightness - 0.7) / 0.3) * (1.0 - _clamp(spread / 0.25)),
        "open_sky": _clamp((upper_blue - 0.34) / 0.2) * _clamp(brightness / 0.4),
        "forest_path": _clamp((share_g - 0.34) / 0.15),
        "desert_sand": _clamp((min(share_r, share_g) - share_b - 0.05) / 0.2),
        "sunset_horizon": _clamp((share_r - 0.4) / 0.15),
        "indoor_room": 0.3 * (1.0 - _clamp(spread / 0.3)),
    }


class SimpleSceneModel(SceneModel):
    """A heuristic model that guesses a scene from colour statistics."""

    def __init__(self) -> None:
        self._info = ModelInfo(
            identifier="builtin.simple",
            display_name="Simple Scene Heuristic",
            description="Guesses coarse scene labels from image statistics without ML dependencies.",
            tags=("lightweight", "no-internet", "cpu"),
        )

    def info(self) -> ModelInfo:
        return self._info

    def load(self) -> None:
        # Nothing to initialise for the heuristic model.
        return

    def predict(self, buffer: PixelBuffer, *, top_k: int = 1) -> list[LabelScore]:
        image = buffer.to_image().convert("RGB")
        scores = _scene_scores(image)
        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        return [LabelScore(label, confidence) for label, confidence in ranked[:top_k]]


def register_models() -> None:
    ModelRegistry.register("builtin.simple", SimpleSceneModel)

