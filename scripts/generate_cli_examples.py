from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "160", "--height", "120", "--iteration-max", "200"]


@dataclass
class Expected:
    path: Path


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[Expected]
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return [sys.executable, "render.py", *self.args]


def _example(name: str, filename: str, *args: str) -> Example:
    output = EXAMPLES_ROOT / name / filename
    return Example(
        name=name,
        args=[*BASE_ARGS, *args, "--output", str(output)],
        expected=[Expected(output)],
        clean=[EXAMPLES_ROOT / name],
    )


EXAMPLES: list[Example] = [
    _example("default", "default.png"),
    _example("iteration-max", "banded.png", "--iteration-max", "1000"),
    _example("corners", "seahorse-valley.png", "--top-left=-0.8+0.2i", "--bottom-right=-0.7+0.1i"),
    _example("center", "period-three.png", "--center", "-1.7549", "--extent", "0.04-0.03i"),
    _example("scale-factor", "zoomed.png", "--origin=-0.75+0.1i", "--scale-factor", "0.1"),
    _example("julia", "dendrite.png", "--julia", "0+1i", "--center", "0", "--extent", "3-2.25i"),
    _example("clamp", "clamped.png", "--iteration-max", "1000", "--clamp"),
    _example("serial", "serial.png", "--backend", "serial"),
    _example("tensor", "tensor.png", "--backend", "tensor"),
    _example("format", "default.jpg", "--format", "jpg"),
    _example("verbose", "diagnostic.png", "--verbose"),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    _ensure_clean(example.clean or [])
    for expected in example.expected:
        expected.path.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
