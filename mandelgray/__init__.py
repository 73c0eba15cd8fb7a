"""Public API for Mandelbrot rendering utilities."""

from .color import BLACK, CLAMP, WRAP, Color, ColorBuffer, classify
from .errors import InvalidGeometryError, MandelbrotError, PixelOutOfRangeError
from .escape import (
    DID_NOT_ESCAPE,
    DIVERGENCE_BOUND,
    MANDELBROT,
    Escaped,
    EscapeResult,
    IterationFamily,
    JuliaFamily,
    MandelbrotFamily,
    NotEscaped,
    QuadraticRule,
    escape_time,
    escape_trajectory,
)
from .geometry import Viewport, pixel_to_complex, sample_grid
from .renderer import BACKENDS, DEFAULT_BACKEND, RenderParameters, render, render_escapes, render_frame

__all__ = [
    "BACKENDS",
    "BLACK",
    "CLAMP",
    "Color",
    "ColorBuffer",
    "DEFAULT_BACKEND",
    "DID_NOT_ESCAPE",
    "DIVERGENCE_BOUND",
    "EscapeResult",
    "Escaped",
    "InvalidGeometryError",
    "IterationFamily",
    "JuliaFamily",
    "MANDELBROT",
    "MandelbrotError",
    "MandelbrotFamily",
    "NotEscaped",
    "PixelOutOfRangeError",
    "QuadraticRule",
    "RenderParameters",
    "Viewport",
    "WRAP",
    "classify",
    "escape_time",
    "escape_trajectory",
    "pixel_to_complex",
    "render",
    "render_escapes",
    "render_frame",
    "sample_grid",
]
