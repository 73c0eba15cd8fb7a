"""Escape-time iteration of complex quadratic maps."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Union

import numpy as np

DIVERGENCE_BOUND = 4.0

UpdateRule = Callable[[complex], complex]


@dataclass(frozen=True)
class Escaped:
    """The orbit left the bounded region on application ``iteration`` (0-based)."""

    iteration: int


@dataclass(frozen=True)
class NotEscaped:
    """The orbit stayed bounded for the whole iteration budget."""


DID_NOT_ESCAPE = NotEscaped()

EscapeResult = Union[Escaped, NotEscaped]


@dataclass(frozen=True)
class QuadraticRule:
    """``z -> z*z + c``."""

    c: complex

    def __call__(self, z: complex) -> complex:
        return z * z + self.c


def _squared_magnitude(z: complex) -> float:
    return z.real * z.real + z.imag * z.imag


def _check_budget(iteration_max: int) -> None:
    if iteration_max < 0:
        raise ValueError(f"iteration_max must be non-negative, got {iteration_max}")


def escape_time(
    initial_value: complex,
    update_rule: UpdateRule,
    divergence_bound: float = DIVERGENCE_BOUND,
    iteration_max: int = 500,
) -> EscapeResult:
    """Iterate ``update_rule`` from ``initial_value`` until the squared magnitude
    exceeds ``divergence_bound`` or ``iteration_max`` applications are done."""

    _check_budget(iteration_max)
    z = initial_value
    for n in range(iteration_max):
        z = update_rule(z)
        if _squared_magnitude(z) > divergence_bound:
            return Escaped(n)
    return DID_NOT_ESCAPE


def escape_trajectory(
    initial_value: complex,
    update_rule: UpdateRule,
    divergence_bound: float = DIVERGENCE_BOUND,
    iteration_max: int = 500,
) -> tuple[EscapeResult, list[complex]]:
    """Like :func:`escape_time` but also return every visited value.

    The trajectory starts with ``initial_value`` and ends with the escaping
    iterate, or holds ``iteration_max + 1`` values when the orbit stays bounded.
    Memory grows with the budget, so keep it to single points.
    """

    _check_budget(iteration_max)
    z = initial_value
    trajectory = [z]
    for n in range(iteration_max):
        z = update_rule(z)
        trajectory.append(z)
        if _squared_magnitude(z) > divergence_bound:
            return Escaped(n), trajectory
    return DID_NOT_ESCAPE, trajectory


class IterationFamily(ABC):
    """How a pixel sample seeds the quadratic iteration."""

    @abstractmethod
    def seed(self, sample: complex) -> tuple[complex, UpdateRule]:
        """Return the starting value and update rule for one pixel."""

    @abstractmethod
    def seed_grid(self, real: np.ndarray, imag: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Return ``(z_real, z_imag, c_real, c_imag)`` arrays for a whole sample grid."""


class MandelbrotFamily(IterationFamily):
    """Start at 0, use the sample as the parameter."""

    def seed(self, sample: complex) -> tuple[complex, UpdateRule]:
        return 0j, QuadraticRule(sample)

    def seed_grid(self, real: np.ndarray, imag: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        return np.zeros_like(real), np.zeros_like(imag), real, imag

    def __repr__(self) -> str:
        return "MandelbrotFamily()"


@dataclass(frozen=True)
class JuliaFamily(IterationFamily):
    """Start at the sample, iterate with a fixed ``parameter``."""

    parameter: complex

    def seed(self, sample: complex) -> tuple[complex, UpdateRule]:
        return sample, QuadraticRule(complex(self.parameter))

    def seed_grid(self, real: np.ndarray, imag: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        parameter = complex(self.parameter)
        return (
            real,
            imag,
            np.full_like(real, parameter.real),
            np.full_like(imag, parameter.imag),
        )


MANDELBROT = MandelbrotFamily()
