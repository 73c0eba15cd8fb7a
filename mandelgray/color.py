"""Grayscale coloring of escape results and the row-major color buffer."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterator, overload

import numpy as np

from .escape import EscapeResult, Escaped, NotEscaped

WRAP = "wrap"
CLAMP = "clamp"
NARROWING_POLICIES = (WRAP, CLAMP)

OPAQUE = 255


@dataclass(frozen=True)
class Color:
    """An 8-bit RGB color. ``opaque`` is always true for rendered pixels."""

    red: int
    green: int
    blue: int
    opaque: bool = True

    @property
    def rgb(self) -> tuple[int, int, int]:
        return self.red, self.green, self.blue

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        return self.red, self.green, self.blue, OPAQUE if self.opaque else 0


BLACK = Color(0, 0, 0)


def _check_narrowing(narrowing: str) -> None:
    if narrowing not in NARROWING_POLICIES:
        raise ValueError(f"unknown narrowing policy {narrowing!r}; expected one of {', '.join(NARROWING_POLICIES)}")


def narrow(iteration: int, narrowing: str = WRAP) -> int:
    """Fit an escape index into one 8-bit channel.

    ``"wrap"`` keeps the low byte, so indices past 255 start a new band;
    ``"clamp"`` saturates at 255.
    """

    _check_narrowing(narrowing)
    if narrowing == CLAMP:
        return min(iteration, 255)
    return iteration % 256


def classify(result: EscapeResult, narrowing: str = WRAP) -> Color:
    """Black for points that stayed bounded, gray level ``n`` for ``Escaped(n)``."""

    if isinstance(result, NotEscaped):
        _check_narrowing(narrowing)
        return BLACK
    if isinstance(result, Escaped):
        level = narrow(result.iteration, narrowing)
        return Color(level, level, level)
    raise TypeError(f"expected an escape result, got {result!r}")


def classify_indices(indices: np.ndarray, narrowing: str = WRAP) -> np.ndarray:
    """Vectorized :func:`classify` over escape indices; negative means not escaped.

    Returns a ``uint8`` array with a trailing RGB axis.
    """

    _check_narrowing(narrowing)
    indices = np.asarray(indices, dtype=np.int64)
    escaped = indices >= 0
    if narrowing == CLAMP:
        levels = np.minimum(indices, 255)
    else:
        levels = np.mod(indices, 256)
    levels = np.where(escaped, levels, 0).astype(np.uint8)
    return np.repeat(levels[..., np.newaxis], 3, axis=-1)


class ColorBuffer(Sequence):
    """Row-major, read-only sequence of ``width * height`` colors."""

    def __init__(self, pixels: np.ndarray, width: int, height: int) -> None:
        pixels = np.array(pixels, dtype=np.uint8).reshape(width * height, 3)
        pixels.setflags(write=False)
        self._pixels = pixels
        self.width = width
        self.height = height

    def __len__(self) -> int:
        return self._pixels.shape[0]

    @overload
    def __getitem__(self, index: int) -> Color: ...

    @overload
    def __getitem__(self, index: slice) -> list[Color]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [Color(*(int(v) for v in rgb)) for rgb in self._pixels[index]]
        red, green, blue = self._pixels[index]
        return Color(int(red), int(green), int(blue))

    def __iter__(self) -> Iterator[Color]:
        for red, green, blue in self._pixels.tolist():
            yield Color(red, green, blue)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColorBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self._pixels, other._pixels)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"ColorBuffer(width={self.width}, height={self.height})"

    def pixel(self, column: int, row: int) -> Color:
        return self[row * self.width + column]

    def to_array(self) -> np.ndarray:
        """Read-only ``(height, width, 3)`` view of the buffer."""

        return self._pixels.reshape(self.height, self.width, 3)

    def to_rgba_array(self) -> np.ndarray:
        rgba = np.empty((self.height, self.width, 4), dtype=np.uint8)
        rgba[..., :3] = self.to_array()
        rgba[..., 3] = OPAQUE
        return rgba
