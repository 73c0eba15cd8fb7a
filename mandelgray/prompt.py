"""Reading render parameters from an interactive terminal."""

from __future__ import annotations

import re
import sys
from typing import Callable, Optional, TextIO, TypeVar

from .geometry import Viewport
from .renderer import RenderParameters

T = TypeVar("T")

_PAIR = re.compile(r"^\s*([^,\s]+)\s*,\s*([^,\s]+)\s*$")


def parse_complex(text: str) -> complex:
    """Parse ``a+bi``, ``a+bj`` or ``a,b``."""

    text = text.strip()
    match = _PAIR.match(text)
    if match:
        return complex(float(match.group(1)), float(match.group(2)))
    cleaned = text.replace(" ", "").replace("i", "j")
    if not cleaned:
        raise ValueError("empty complex number")
    return complex(cleaned)


def prompt_number(
    prompt: str,
    parse: Callable[[str], T] = int,
    *,
    input_fn: Callable[[str], str] = input,
    stderr: Optional[TextIO] = None,
) -> T:
    """Ask until the answer parses; EOF from ``input_fn`` propagates."""

    stderr = stderr if stderr is not None else sys.stderr
    while True:
        answer = input_fn(prompt).strip()
        try:
            return parse(answer)
        except ValueError as exc:
            print(f"\nInvalid input: {exc}\n", file=stderr)


def prompt_complex(
    prompt: str,
    *,
    input_fn: Callable[[str], str] = input,
    stderr: Optional[TextIO] = None,
) -> complex:
    return prompt_number(prompt, parse_complex, input_fn=input_fn, stderr=stderr)


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise ValueError(f"expected a positive integer, got {value}")
    return value


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise ValueError(f"expected a non-negative integer, got {value}")
    return value


def _non_zero_float(text: str) -> float:
    value = float(text)
    if value == 0.0:
        raise ValueError("scale factor must not be zero")
    return value


def prompt_parameters(
    *,
    input_fn: Callable[[str], str] = input,
    stderr: Optional[TextIO] = None,
) -> RenderParameters:
    """Ask for width, height, scale factor, origin and iteration budget."""

    width = prompt_number("Enter image width: ", _positive_int, input_fn=input_fn, stderr=stderr)
    height = prompt_number("Enter image height: ", _positive_int, input_fn=input_fn, stderr=stderr)
    scale_factor = prompt_number("Enter scale factor: ", _non_zero_float, input_fn=input_fn, stderr=stderr)
    origin = prompt_complex(
        "Enter a complex number to be the origin of the image.\n",
        input_fn=input_fn,
        stderr=stderr,
    )
    iteration_max = prompt_number(
        "Enter max number of iterations: ", _non_negative_int, input_fn=input_fn, stderr=stderr
    )
    return RenderParameters(
        width=width,
        height=height,
        viewport=Viewport.from_scale(origin, scale_factor),
        iteration_max=iteration_max,
    )
