"""Rendering primitives for Mandelbrot frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .viewport import HEIGHT, WIDTH, ViewportState, plane_axes

MAX_ITER = 200

# Squared escape radius.
HORIZON = 4.0

BASE_COLOR = 0b001011100001100101101001
COLOR_MASK = 0b000000000000010101110111
SHIFT_DIVISOR = 13

INSIDE_COLOR = 0x000000


@dataclass(frozen=True)
class RenderResult:
    """Container for the numerical results of a frame render."""

    iterations: np.ndarray
    bounds: tuple[float, float, float, float]


def compute_iterations(c_real: float, c_imag: float) -> int:
    """Escape-time count of ``z' = z*z + c`` starting from ``z = 0``.

    Returns ``MAX_ITER`` when the orbit has not left the radius 2 disc after
    ``MAX_ITER`` steps.
    """

    z_real = 0.0
    z_imag = 0.0
    iter_count = 0

    while z_real * z_real + z_imag * z_imag <= HORIZON:
        z_real, z_imag = (
            z_real * z_real - z_imag * z_imag + c_real,
            2.0 * z_imag * z_real + c_imag,
        )
        if iter_count >= MAX_ITER:
            return MAX_ITER
        iter_count += 1

    return iter_count


def color_for(iter_count: int) -> int:
    """Packed ``0xRRGGBB`` color for an iteration count."""

    if iter_count == MAX_ITER:
        return INSIDE_COLOR
    return (BASE_COLOR | (COLOR_MASK << (iter_count // SHIFT_DIVISOR))) & 0xFFFFFF


def unpack_rgb(color: int) -> tuple[int, int, int]:
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def new_pixel_buffer() -> np.ndarray:
    """Allocate a zeroed ``(HEIGHT, WIDTH, 3)`` RGB buffer."""

    return np.zeros((HEIGHT, WIDTH, 3), dtype=np.uint8)


def colorize(iterations: np.ndarray) -> np.ndarray:
    """Vectorized ``color_for`` returning packed colors as int64."""

    counts = iterations.astype(np.int64, copy=False)
    shifts = counts // SHIFT_DIVISOR
    colors = (np.int64(BASE_COLOR) | (np.int64(COLOR_MASK) << shifts)) & 0xFFFFFF
    return np.where(counts == MAX_ITER, np.int64(INSIDE_COLOR), colors)


@tf.function
def _escape_step(
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    ns: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every orbit that is still inside the escape radius."""

    active = tf.logical_and(active, zr * zr + zi * zi <= HORIZON)
    zr_new = zr * zr - zi * zi + cr
    zi_new = 2.0 * zi * zr + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    ns = ns + tf.cast(active, tf.int32)
    return zr, zi, ns, active


@tf.function
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    """Iterate all orbits with a TensorFlow while loop; returns the counts."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    ns = tf.zeros_like(cr, tf.int32)
    active = tf.ones_like(ns, tf.bool)

    def cond(i, zr, zi, ns, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zr, zi, ns, active):
        zr, zi, ns, active = _escape_step(zr, zi, cr, ci, ns, active)
        return i + 1, zr, zi, ns, active

    _, _, _, ns, _ = tf.while_loop(cond, body, (i, zr, zi, ns, active))
    return ns


def compute_iteration_grid(viewport: ViewportState, *, device: Optional[str] = None) -> np.ndarray:
    """Iteration counts of every canvas pixel, indexed ``[y, x]``."""

    xs, ys = plane_axes(viewport)
    X, Y = np.meshgrid(xs, ys)

    with tf.device(device if device is not None else "/CPU:0"):
        cr = tf.convert_to_tensor(X, dtype=tf.float64)
        ci = tf.convert_to_tensor(Y, dtype=tf.float64)
        ns = _escape_run(cr, ci, tf.constant(MAX_ITER, dtype=tf.int32))

    return ns.numpy()


def render_frame(
    viewport: ViewportState,
    buffer: np.ndarray,
    *,
    device: Optional[str] = None,
) -> RenderResult:
    """Recompute every pixel of ``buffer`` for the current viewport."""

    if buffer.shape != (HEIGHT, WIDTH, 3):
        raise ValueError(f"Pixel buffer must have shape {(HEIGHT, WIDTH, 3)}, got {buffer.shape}.")

    iterations = compute_iteration_grid(viewport, device=device)
    colors = colorize(iterations)

    buffer[..., 0] = (colors >> 16) & 0xFF
    buffer[..., 1] = (colors >> 8) & 0xFF
    buffer[..., 2] = colors & 0xFF

    return RenderResult(iterations=iterations, bounds=viewport.visible_bounds())
