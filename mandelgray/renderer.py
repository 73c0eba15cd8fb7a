"""Rendering pipeline: every pixel through mapper, evaluator and classifier."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

import numpy as np

from .color import WRAP, ColorBuffer, classify, classify_indices
from .errors import InvalidGeometryError
from .escape import DID_NOT_ESCAPE, DIVERGENCE_BOUND, MANDELBROT, Escaped, EscapeResult, IterationFamily, escape_time
from .geometry import Viewport, check_resolution, pixel_to_complex, sample_grid

logger = logging.getLogger(__name__)

BACKENDS = ("processes", "threads", "serial", "tensor")
DEFAULT_BACKEND = "processes"

# Slices handed out per worker; more than one keeps slow rows from idling the pool.
CHUNKS_PER_WORKER = 4


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render."""

    width: int
    height: int
    viewport: Viewport
    iteration_max: int


def _validate(image_width: int, image_height: int, viewport: Viewport, iteration_max: int, backend: str) -> None:
    check_resolution(image_width, image_height)
    if not isinstance(viewport, Viewport):
        raise InvalidGeometryError(f"expected a Viewport, got {viewport!r}")
    if isinstance(iteration_max, bool) or not isinstance(iteration_max, (int, np.integer)) or iteration_max < 0:
        raise ValueError(f"iteration_max must be a non-negative integer, got {iteration_max!r}")
    if backend not in BACKENDS:
        raise ValueError(f"unknown backend {backend!r}; expected one of {', '.join(BACKENDS)}")


def _resolve_workers(workers: Optional[int]) -> int:
    if workers is None:
        return os.cpu_count() or 1
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    return workers


def _partition(total: int, parts: int) -> list[tuple[int, int]]:
    """Split ``[0, total)`` into at most ``parts`` contiguous, disjoint slices."""

    parts = max(1, min(parts, total))
    size, remainder = divmod(total, parts)
    bounds = []
    start = 0
    for part in range(parts):
        stop = start + size + (1 if part < remainder else 0)
        bounds.append((start, stop))
        start = stop
    return bounds


def _pixel_escape(
    index: int,
    image_width: int,
    image_height: int,
    viewport: Viewport,
    iteration_max: int,
    family: IterationFamily,
    divergence_bound: float,
) -> EscapeResult:
    row, column = divmod(index, image_width)
    sample = pixel_to_complex(column, row, image_width, image_height, viewport)
    initial_value, update_rule = family.seed(sample)
    return escape_time(initial_value, update_rule, divergence_bound, iteration_max)


def _escape_slice(bounds: tuple[int, int], **pixel_args) -> np.ndarray:
    """Escape indices for the linear slice ``bounds``, ``-1`` where the orbit stayed bounded."""

    start, stop = bounds
    indices = np.full(stop - start, -1, dtype=np.int64)
    for offset, index in enumerate(range(start, stop)):
        result = _pixel_escape(index, **pixel_args)
        if isinstance(result, Escaped):
            indices[offset] = result.iteration
    return indices


def _color_slice(bounds: tuple[int, int], narrowing: str, **pixel_args) -> np.ndarray:
    """RGB rows for the linear slice ``bounds``."""

    start, stop = bounds
    pixels = np.zeros((stop - start, 3), dtype=np.uint8)
    for offset, index in enumerate(range(start, stop)):
        pixels[offset] = classify(_pixel_escape(index, **pixel_args), narrowing).rgb
    return pixels


def _fan_out(
    out: np.ndarray,
    slice_fn: Callable[[tuple[int, int]], np.ndarray],
    backend: str,
    workers: Optional[int],
) -> None:
    """Fill ``out`` by running ``slice_fn`` over disjoint slices of its first axis.

    ``slice_fn`` must be picklable for the process pool, so it is always a
    ``functools.partial`` over a module-level function.
    """

    total = out.shape[0]
    n_workers = 1 if backend == "serial" else _resolve_workers(workers)
    if n_workers == 1:
        out[:] = slice_fn((0, total))
        return

    slices = _partition(total, n_workers * CHUNKS_PER_WORKER)
    executor = ProcessPoolExecutor if backend == "processes" else ThreadPoolExecutor
    logger.debug("fanning %d pixels out to %d %s in %d slices", total, n_workers, backend, len(slices))
    with executor(max_workers=n_workers) as pool:
        # map() yields in submission order and re-raises the first worker exception
        for (start, stop), chunk in zip(slices, pool.map(slice_fn, slices)):
            out[start:stop] = chunk


def _tensor_indices(
    image_width: int,
    image_height: int,
    viewport: Viewport,
    iteration_max: int,
    family: IterationFamily,
    divergence_bound: float,
) -> np.ndarray:
    if not isinstance(family, IterationFamily):
        raise ValueError("the tensor backend needs an IterationFamily")
    from . import tensor

    real, imag = sample_grid(image_width, image_height, viewport)
    z_re, z_im, c_re, c_im = family.seed_grid(real, imag)
    return tensor.escape_indices(z_re, z_im, c_re, c_im, divergence_bound, iteration_max)


def render(
    image_width: int,
    image_height: int,
    viewport: Viewport,
    iteration_max: int,
    *,
    family: IterationFamily = MANDELBROT,
    divergence_bound: float = DIVERGENCE_BOUND,
    backend: str = DEFAULT_BACKEND,
    workers: Optional[int] = None,
    narrowing: str = WRAP,
) -> ColorBuffer:
    """Render ``viewport`` into a row-major buffer of ``image_width * image_height`` colors.

    The buffer is identical for every backend and worker count. The
    ``processes`` backend pickles ``family``, so custom families must be
    defined at module level.
    """

    _validate(image_width, image_height, viewport, iteration_max, backend)
    logger.debug(
        "rendering %dx%d, %d iterations, backend=%s, %r",
        image_width, image_height, iteration_max, backend, viewport,
    )

    if backend == "tensor":
        indices = _tensor_indices(image_width, image_height, viewport, iteration_max, family, divergence_bound)
        return ColorBuffer(classify_indices(indices, narrowing), image_width, image_height)

    # validates the policy up front rather than inside the workers
    classify(DID_NOT_ESCAPE, narrowing)
    pixels = np.zeros((image_width * image_height, 3), dtype=np.uint8)
    slice_fn = partial(
        _color_slice,
        narrowing=narrowing,
        image_width=image_width,
        image_height=image_height,
        viewport=viewport,
        iteration_max=iteration_max,
        family=family,
        divergence_bound=divergence_bound,
    )
    _fan_out(pixels, slice_fn, backend, workers)
    return ColorBuffer(pixels, image_width, image_height)


def render_escapes(
    image_width: int,
    image_height: int,
    viewport: Viewport,
    iteration_max: int,
    *,
    family: IterationFamily = MANDELBROT,
    divergence_bound: float = DIVERGENCE_BOUND,
    backend: str = DEFAULT_BACKEND,
    workers: Optional[int] = None,
) -> list[EscapeResult]:
    """Row-major escape result of every pixel, before coloring."""

    _validate(image_width, image_height, viewport, iteration_max, backend)

    if backend == "tensor":
        indices = _tensor_indices(image_width, image_height, viewport, iteration_max, family, divergence_bound)
    else:
        indices = np.full(image_width * image_height, -1, dtype=np.int64)
        slice_fn = partial(
            _escape_slice,
            image_width=image_width,
            image_height=image_height,
            viewport=viewport,
            iteration_max=iteration_max,
            family=family,
            divergence_bound=divergence_bound,
        )
        _fan_out(indices, slice_fn, backend, workers)
    return [Escaped(n) if n >= 0 else DID_NOT_ESCAPE for n in indices.ravel().tolist()]


def render_frame(
    params: RenderParameters,
    *,
    family: IterationFamily = MANDELBROT,
    backend: str = DEFAULT_BACKEND,
    workers: Optional[int] = None,
    narrowing: str = WRAP,
) -> ColorBuffer:
    """Render the frame described by ``params``."""

    return render(
        params.width,
        params.height,
        params.viewport,
        params.iteration_max,
        family=family,
        backend=backend,
        workers=workers,
        narrowing=narrowing,
    )
