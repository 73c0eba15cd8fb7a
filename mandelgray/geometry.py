"""Mapping between the pixel grid and the complex plane."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import InvalidGeometryError, PixelOutOfRangeError

# Default framing around the origin, scaled by ``Viewport.from_scale``.
DEFAULT_TOP_LEFT = complex(-2.0, 1.2)
DEFAULT_BOTTOM_RIGHT = complex(0.5, -1.2)


@dataclass(frozen=True)
class Viewport:
    """Rectangular region of the complex plane mapped onto an image.

    Both corners are stored; every other parametrization is resolved to the
    corner pair at construction so that equivalent descriptions sample the
    exact same points.
    """

    top_left: complex
    bottom_right: complex

    def __post_init__(self) -> None:
        top_left = complex(self.top_left)
        bottom_right = complex(self.bottom_right)
        parts = (top_left.real, top_left.imag, bottom_right.real, bottom_right.imag)
        if not all(math.isfinite(part) for part in parts):
            raise InvalidGeometryError(f"viewport corners must be finite, got {top_left!r} and {bottom_right!r}")
        width = bottom_right.real - top_left.real
        height = bottom_right.imag - top_left.imag
        if width == 0.0:
            raise InvalidGeometryError("viewport has zero width")
        if height == 0.0:
            raise InvalidGeometryError("viewport has zero height")
        # finite corners can still be too far apart to subtract
        if not (math.isfinite(width) and math.isfinite(height)):
            raise InvalidGeometryError(f"viewport extent overflows: {complex(width, height)!r}")
        object.__setattr__(self, "top_left", top_left)
        object.__setattr__(self, "bottom_right", bottom_right)

    @classmethod
    def from_corners(cls, top_left: complex, bottom_right: complex) -> "Viewport":
        return cls(top_left, bottom_right)

    @classmethod
    def from_center(cls, center: complex, extent: complex) -> "Viewport":
        """Build a viewport from its center and a complex ``(width, height)`` extent.

        The extent carries the same signs as ``bottom_right - top_left``, so an
        image whose top row has the larger imaginary part uses a negative
        imaginary extent.
        """

        center = complex(center)
        extent = complex(extent)
        half_re = extent.real / 2.0
        half_im = extent.imag / 2.0
        top_left = complex(center.real - half_re, center.imag - half_im)
        bottom_right = complex(center.real + half_re, center.imag + half_im)
        return cls(top_left, bottom_right)

    @classmethod
    def from_scale(cls, origin: complex = 0j, scale_factor: float = 1.0) -> "Viewport":
        """Frame the whole set around ``origin``, shrunk or grown by ``scale_factor``."""

        origin = complex(origin)
        scale = float(scale_factor)
        top_left = complex(origin.real + DEFAULT_TOP_LEFT.real * scale, origin.imag + DEFAULT_TOP_LEFT.imag * scale)
        bottom_right = complex(
            origin.real + DEFAULT_BOTTOM_RIGHT.real * scale,
            origin.imag + DEFAULT_BOTTOM_RIGHT.imag * scale,
        )
        return cls(top_left, bottom_right)

    @property
    def extent(self) -> complex:
        return complex(self.bottom_right.real - self.top_left.real, self.bottom_right.imag - self.top_left.imag)

    @property
    def width(self) -> float:
        return self.extent.real

    @property
    def height(self) -> float:
        return self.extent.imag

    @property
    def center(self) -> complex:
        return complex(
            (self.top_left.real + self.bottom_right.real) / 2.0,
            (self.top_left.imag + self.bottom_right.imag) / 2.0,
        )


def check_resolution(image_width: int, image_height: int) -> None:
    for name, value in (("image_width", image_width), ("image_height", image_height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidGeometryError(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidGeometryError(f"{name} must be positive, got {value}")


def pixel_to_complex(column: int, row: int, image_width: int, image_height: int, viewport: Viewport) -> complex:
    """Return the complex sample for pixel ``(column, row)``; row 0 is the top edge."""

    check_resolution(image_width, image_height)
    if not 0 <= column < image_width or not 0 <= row < image_height:
        raise PixelOutOfRangeError(
            f"pixel ({column}, {row}) outside a {image_width}x{image_height} image"
        )

    horizontal_ratio = column / image_width
    vertical_ratio = row / image_height
    top_left = viewport.top_left
    extent = viewport.extent
    return complex(
        top_left.real + extent.real * horizontal_ratio,
        top_left.imag + extent.imag * vertical_ratio,
    )


def sample_grid(image_width: int, image_height: int, viewport: Viewport) -> tuple[np.ndarray, np.ndarray]:
    """Real and imaginary parts of every pixel sample, each shaped ``(height, width)``.

    Element ``[row, column]`` is bit-identical to ``pixel_to_complex(column, row, ...)``.
    """

    check_resolution(image_width, image_height)
    top_left = viewport.top_left
    extent = viewport.extent

    columns = np.arange(image_width, dtype=np.float64) / np.float64(image_width)
    rows = np.arange(image_height, dtype=np.float64) / np.float64(image_height)
    x = np.float64(top_left.real) + np.float64(extent.real) * columns
    y = np.float64(top_left.imag) + np.float64(extent.imag) * rows

    real, imag = np.meshgrid(x, y)
    return real, imag
