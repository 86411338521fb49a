"""Mapping between canvas pixels and the complex plane."""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np

WIDTH = 600
HEIGHT = 600

DEFAULT_ZOOM = 100.0
DEFAULT_ORIGIN_REAL = -3.0
DEFAULT_ORIGIN_IMAG = +3.0

# Fraction of the visible extent moved by one pan step.
PAN_DIVISOR = 6


class Direction(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


@dataclass
class ViewportState:
    """Region of the complex plane currently mapped onto the canvas.

    ``origin_real``/``origin_imag`` locate pixel (0, 0). The imaginary axis is
    flipped: moving down the canvas increases ``py / zoom - origin_imag``.
    """

    zoom: float = DEFAULT_ZOOM
    origin_real: float = DEFAULT_ORIGIN_REAL
    origin_imag: float = DEFAULT_ORIGIN_IMAG

    def reset(self) -> None:
        self.zoom = DEFAULT_ZOOM
        self.origin_real = DEFAULT_ORIGIN_REAL
        self.origin_imag = DEFAULT_ORIGIN_IMAG

    def visible_bounds(self) -> tuple[float, float, float, float]:
        """Return ``(real_min, real_max, imag_min, imag_max)`` of the canvas."""

        real_min, imag_min = pixel_to_complex(self, 0, 0)
        real_max, imag_max = pixel_to_complex(self, WIDTH - 1, HEIGHT - 1)
        return real_min, real_max, imag_min, imag_max


def pixel_to_complex(viewport: ViewportState, px: int, py: int) -> tuple[float, float]:
    real = px / viewport.zoom + viewport.origin_real
    imag = py / viewport.zoom - viewport.origin_imag
    return real, imag


def plane_axes(viewport: ViewportState) -> tuple[np.ndarray, np.ndarray]:
    """Per-column real parts and per-row imaginary parts of the whole canvas."""

    zoom = np.float64(viewport.zoom)
    xs = np.arange(WIDTH, dtype=np.float64) / zoom + np.float64(viewport.origin_real)
    ys = np.arange(HEIGHT, dtype=np.float64) / zoom - np.float64(viewport.origin_imag)
    return xs, ys


def pan(viewport: ViewportState, direction: Direction) -> None:
    """Shift the viewport by a sixth of the visible extent."""

    if direction in (Direction.UP, Direction.DOWN):
        step = HEIGHT / viewport.zoom / PAN_DIVISOR
    else:
        step = WIDTH / viewport.zoom / PAN_DIVISOR

    if direction is Direction.UP:
        viewport.origin_imag += step
    elif direction is Direction.DOWN:
        viewport.origin_imag -= step
    elif direction is Direction.LEFT:
        viewport.origin_real -= step
    elif direction is Direction.RIGHT:
        viewport.origin_real += step
    else:
        raise ValueError(f"Unknown pan direction {direction!r}.")


def zoom_at(viewport: ViewportState, px: int, py: int, new_zoom: float) -> None:
    """Center the plane point under ``(px, py)`` and switch to ``new_zoom``.

    The shift towards the clicked point uses the current zoom; the
    re-centering uses the new one.
    """

    if not new_zoom > 0:
        raise ValueError(f"new_zoom must be strictly positive, got {new_zoom!r}.")

    viewport.origin_real += px / viewport.zoom
    viewport.origin_imag -= py / viewport.zoom

    viewport.zoom = float(new_zoom)

    viewport.origin_real -= (WIDTH // 2) / viewport.zoom
    viewport.origin_imag += (HEIGHT // 2) / viewport.zoom
