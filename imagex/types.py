"""Value types flowing through the classification pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from PIL import Image

PIXEL_FORMAT_CHANNELS = {
    "RGB": 3,
    "RGBA": 4,
    "L": 1,
}


@dataclass(frozen=True, slots=True)
class RawImage:
    """An image as captured from the image source, prior to resizing.

    ``payload`` is either a decoded Pillow image or the encoded bytes read from
    disk. Encoded bytes are only decoded by the preprocessor, so corrupt or
    empty files still enter the pipeline and fail there.
    """

    payload: Image.Image | bytes
    name: str | None = None

    @classmethod
    def from_path(cls, path: Path) -> RawImage:
        return cls(payload=path.read_bytes(), name=path.name)

    @classmethod
    def from_pil(cls, image: Image.Image, *, name: str | None = None) -> RawImage:
        # Copy so later edits by the caller cannot leak into a running analysis.
        return cls(payload=image.copy(), name=name)

    @property
    def is_decoded(self) -> bool:
        return isinstance(self.payload, Image.Image)


@dataclass(frozen=True, slots=True)
class PixelBuffer:
    """Fixed-size interleaved pixel data handed to a classification model."""

    width: int
    height: int
    pixel_format: str
    data: bytes

    @property
    def channels(self) -> int:
        return PIXEL_FORMAT_CHANNELS[self.pixel_format]

    @property
    def stride(self) -> int:
        """Number of bytes per row."""
        return self.width * self.channels

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def to_image(self) -> Image.Image:
        """Rebuild a Pillow image view of the buffer for model backends."""
        return Image.frombytes(self.pixel_format, self.size, self.data)


class FailureReason(str, Enum):
    """Categories of pipeline failures shown to the user."""

    RESIZE = "resize"
    INFERENCE = "inference"

    @property
    def message(self) -> str:
        if self is FailureReason.RESIZE:
            return "Image resize failed"
        return "Analysis failed"


@dataclass(frozen=True, slots=True)
class Success:
    label: str


@dataclass(frozen=True, slots=True)
class Failure:
    """A terminal pipeline failure.

    ``detail`` carries the underlying cause for logs and the CLI; the display
    layer only shows ``reason.message``.
    """

    reason: FailureReason
    detail: str | None = None

    @property
    def message(self) -> str:
        return self.reason.message


PredictionResult = Union[Success, Failure]
