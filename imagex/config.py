"""Application-wide configuration models and persistence helpers."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .types import PIXEL_FORMAT_CHANNELS


class ResizeMode(str, Enum):
    """How a source image is fitted into the model's input size."""

    STRETCH = "stretch"
    CENTER_CROP = "center-crop"


class AppConfig(BaseModel):
    """Validates and stores runtime settings for the application."""

    model_config = ConfigDict(protected_namespaces=())

    model_name: str = Field(
        default="builtin.simple",
        description="Identifier of the registered scene classification model.",
    )
    model_source: str = Field(
        default="google/vit-base-patch16-224",
        description="Checkpoint identifier used by transformers-backed models.",
    )
    model_path: Path | None = Field(
        default=None,
        description="Local directory holding an exported model; overrides model_source.",
    )
    device: str = Field(
        default="auto",
        description="Preferred accelerator for torch-backed models (auto, cuda, mps, cpu).",
    )
    input_width: int = Field(
        default=224,
        ge=1,
        le=4096,
        description="Width in pixels of the buffer expected by the model.",
    )
    input_height: int = Field(
        default=224,
        ge=1,
        le=4096,
        description="Height in pixels of the buffer expected by the model.",
    )
    resize_mode: ResizeMode = Field(
        default=ResizeMode.STRETCH,
        description="Scale to fill the input size, or preserve aspect ratio and crop.",
    )
    pixel_format: str = Field(
        default="RGB",
        description="Pixel layout of the model input buffer.",
    )
    label_separator: str = Field(
        default="_",
        min_length=1,
        max_length=1,
        description="Character in raw model labels that is displayed as a space.",
    )
    top_k: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Number of ranked labels requested from the model.",
    )
    cache_model: bool = Field(
        default=True,
        description="Keep the loaded model between analyses instead of reloading it.",
    )
    discard_stale_results: bool = Field(
        default=False,
        description=(
            "Ignore results from analyses that were superseded by a newer selection."
        ),
    )
    recursive: bool = Field(
        default=True,
        description="If true, traverse sub-directories when classifying folders.",
    )
    include_hidden: bool = Field(
        default=False,
        description="If true, include files and directories that start with a dot.",
    )
    max_concurrency: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Number of worker threads used during batch classification.",
    )

    @model_validator(mode="after")
    def _normalise_pixel_format(self) -> AppConfig:
        fmt = self.pixel_format.strip().upper()
        if fmt not in PIXEL_FORMAT_CHANNELS:
            supported = ", ".join(sorted(PIXEL_FORMAT_CHANNELS))
            raise ValueError(f"Unsupported pixel format '{self.pixel_format}'. Use one of: {supported}")
        self.pixel_format = fmt
        return self

    @model_validator(mode="after")
    def _normalise_model_path(self) -> AppConfig:
        if self.model_path is not None:
            self.model_path = self.model_path.expanduser()
        return self

    @property
    def input_size(self) -> tuple[int, int]:
        return self.input_width, self.input_height

    def as_dict(self) -> dict[str, Any]:
        """Serialize the configuration to primitive Python types."""
        payload = self.model_dump(mode="json")
        if self.model_path is not None:
            payload["model_path"] = str(self.model_path)
        return payload

    @classmethod
    def load(cls, path: Path) -> AppConfig:
        """Load configuration from a YAML or JSON file."""
        data = _read_config_file(path)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:  # pragma: no cover - pass through details
            raise ValueError(f"Invalid configuration file at {path}: {exc}") from exc

    def save(self, path: Path) -> None:
        """Persist configuration to a YAML file."""
        _write_config_file(path, self.as_dict())


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        return yaml.safe_load(text) or {}
    return json.loads(text)


def _write_config_file(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in {".yaml", ".yml"}:
        yaml_text = yaml.safe_dump(
            data,
            allow_unicode=False,
            sort_keys=False,
        )
        path.write_text(yaml_text, encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
