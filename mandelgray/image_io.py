"""Encoding color buffers into image files with Pillow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import PIL.Image

from .color import ColorBuffer

logger = logging.getLogger(__name__)


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def default_filename(width: int, height: int, iteration_max: int, image_format: str = "png") -> str:
    """``mandelbrot_1920x1080_500_iter.png`` style name for a render."""

    extension = image_format.lower().lstrip(".") or "png"
    return f"mandelbrot_{width}x{height}_{iteration_max}_iter.{extension}"


def to_image(buffer: ColorBuffer) -> PIL.Image.Image:
    return PIL.Image.fromarray(buffer.to_array().copy())


def write_single_image(
    image: PIL.Image.Image,
    output_path: Union[str, Path],
    image_format: Optional[str] = None,
) -> Path:
    """Write an already converted image; the format defaults to the file suffix."""

    output_path = Path(output_path).expanduser()
    if image_format is None:
        image_format = output_path.suffix.lstrip(".") or "png"
    pil_format = _pil_format_name(image_format)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)
    logger.debug("wrote %dx%d image to %s as %s", image.width, image.height, output_path, pil_format)
    return output_path


def save_image(
    buffer: ColorBuffer,
    output_path: Union[str, Path],
    image_format: Optional[str] = None,
) -> Path:
    """Write ``buffer`` to ``output_path``; the format defaults to the file suffix."""

    return write_single_image(to_image(buffer), output_path, image_format)
