"""Public API for the fractal visualizer core."""

from .engine import FractalEngine
from .events import (
    PAN_DOWN,
    PAN_LEFT,
    PAN_RIGHT,
    PAN_UP,
    Event,
    Pan,
    ZoomIn,
    ZoomOut,
    event_for_key,
    event_for_mouse,
    parse_event,
)
from .renderer import (
    MAX_ITER,
    RenderResult,
    color_for,
    compute_iterations,
    new_pixel_buffer,
    render_frame,
    unpack_rgb,
)
from .viewport import HEIGHT, WIDTH, Direction, ViewportState, pan, pixel_to_complex, zoom_at

__all__ = [
    "Direction",
    "Event",
    "FractalEngine",
    "HEIGHT",
    "MAX_ITER",
    "PAN_DOWN",
    "PAN_LEFT",
    "PAN_RIGHT",
    "PAN_UP",
    "Pan",
    "RenderResult",
    "ViewportState",
    "WIDTH",
    "ZoomIn",
    "ZoomOut",
    "color_for",
    "compute_iterations",
    "event_for_key",
    "event_for_mouse",
    "new_pixel_buffer",
    "pan",
    "parse_event",
    "pixel_to_complex",
    "render_frame",
    "unpack_rgb",
    "zoom_at",
]
