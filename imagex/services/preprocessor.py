"""Turns captured images into fixed-size pixel buffers."""

from __future__ import annotations

import io
import logging

from PIL import Image, ImageOps

from ..config import ResizeMode
from ..types import PIXEL_FORMAT_CHANNELS, Failure, FailureReason, PixelBuffer, RawImage

logger = logging.getLogger(__name__)

DEFAULT_TARGET = (224, 224)
RESAMPLING = Image.Resampling.BILINEAR


def resize(
    image: RawImage,
    target: tuple[int, int] = DEFAULT_TARGET,
    *,
    mode: ResizeMode = ResizeMode.STRETCH,
    pixel_format: str = "RGB",
) -> PixelBuffer | Failure:
    """Resize ``image`` to exactly ``target`` and convert it to ``pixel_format``.

    Returns a :class:`Failure` with :attr:`FailureReason.RESIZE` when the
    target is not positive, the image cannot be decoded, has no pixels, or
    cannot be converted. A buffer is only returned when fully built.
    """
    width, height = target
    if width <= 0 or height <= 0:
        return _failure(f"target size must be positive, got {width}x{height}")
    if pixel_format not in PIXEL_FORMAT_CHANNELS:
        return _failure(f"unsupported pixel format {pixel_format!r}")

    try:
        source = _decode(image)
        if source.width <= 0 or source.height <= 0:
            return _failure(f"image {image.name or '<memory>'} has no pixels")
        fitted = _fit(source, target, mode)
        converted = fitted.convert(pixel_format)
        data = converted.tobytes()
    except Exception as exc:
        # Pillow signals corrupt input with many unrelated error types.
        return _failure(f"could not prepare {image.name or '<memory>'}: {exc}")

    expected = width * height * PIXEL_FORMAT_CHANNELS[pixel_format]
    if converted.size != target or len(data) != expected:
        return _failure(f"conversion produced {converted.size} with {len(data)} bytes")

    return PixelBuffer(width=width, height=height, pixel_format=pixel_format, data=data)


def _decode(image: RawImage) -> Image.Image:
    if isinstance(image.payload, Image.Image):
        return image.payload
    if not image.payload:
        raise ValueError("image data is empty")
    decoded = Image.open(io.BytesIO(image.payload))
    decoded.load()
    return ImageOps.exif_transpose(decoded)


def _fit(source: Image.Image, target: tuple[int, int], mode: ResizeMode) -> Image.Image:
    # Palette and 16-bit modes do not resample cleanly.
    if source.mode not in {"RGB", "RGBA", "L"}:
        source = source.convert("RGBA" if "A" in source.getbands() else "RGB")
    if mode is ResizeMode.CENTER_CROP:
        return ImageOps.fit(source, target, method=RESAMPLING)
    return source.resize(target, resample=RESAMPLING)


def _failure(detail: str) -> Failure:
    logger.debug("Resize failed: %s", detail)
    return Failure(FailureReason.RESIZE, detail)
