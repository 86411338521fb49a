from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")


@dataclass
class Expected:
    path: Path
    is_dir: bool = False


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[Expected]

    def full_args(self) -> list[str]:
        return [sys.executable, "explore.py", *self.args]

    @property
    def root(self) -> Path:
        return EXAMPLES_ROOT / self.name


def _image(name: str, filename: str, *args: str) -> Example:
    target = EXAMPLES_ROOT / name / filename
    return Example(name=name, args=[*args, "--output", str(target)], expected=[Expected(target)])


EXAMPLES: list[Example] = [
    _image("default", "start.png"),
    _image("pan", "panned.png", "--event", "up", "--event", "left", "--event", "a"),
    _image("zoom-in", "seahorse-valley.png", "--event", "in:230,300", "--event", "in:300,240", "--event", "in:300,300"),
    _image("zoom-out", "zoomed-out.png", "--event", "out:300,300"),
    _image("origin", "custom-origin.png", "--zoom", "800", "--origin-real", "-1.12", "--origin-imag", "-0.1"),
    _image("format", "start.webp", "--format", "webp"),
    _image("verbose", "diagnostic.png", "--verbose", "--event", "d"),
    Example(
        name="gif",
        args=[
            "--mode",
            "gif",
            "--gif-frame-duration",
            "0.4",
            "--event",
            "in:150,300",
            "--event",
            "in:300,300",
            "--event",
            "s",
            "--output",
            str(EXAMPLES_ROOT / "gif" / "walk.gif"),
        ],
        expected=[Expected(EXAMPLES_ROOT / "gif" / "walk.gif")],
    ),
    Example(
        name="frames",
        args=[
            "--mode",
            "frames",
            "--frame-dir",
            str(EXAMPLES_ROOT / "frames" / "sequence"),
            "--event",
            "right",
            "--event",
            "right",
        ],
        expected=[Expected(EXAMPLES_ROOT / "frames" / "sequence", is_dir=True)],
    ),
    Example(
        name="gif-and-image",
        args=["--mode", "gif", "--mode", "image", "--event", "in:300,300", "--output", str(EXAMPLES_ROOT / "gif-and-image")],
        expected=[
            Expected(EXAMPLES_ROOT / "gif-and-image" / "fractal.gif"),
            Expected(EXAMPLES_ROOT / "gif-and-image" / "fractal.png"),
        ],
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _verify(example: Example) -> None:
    for expected in example.expected:
        if expected.is_dir:
            if not expected.path.is_dir():
                raise RuntimeError(f"Expected directory {expected.path} was not created")
            if not any(expected.path.iterdir()):
                raise RuntimeError(f"Directory {expected.path} is empty")
        elif not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.root])
        example.root.mkdir(parents=True, exist_ok=True)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
