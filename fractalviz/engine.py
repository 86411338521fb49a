"""Stateful front door used by presentation layers."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .events import Event, Pan, ZoomIn, ZoomOut
from .renderer import RenderResult, new_pixel_buffer, render_frame
from .viewport import ViewportState, pan, zoom_at


class FractalEngine:
    """Own one viewport and one pixel buffer and keep them in sync.

    Every state change is followed by a full-frame recompute, so ``buffer``
    always reflects ``viewport`` once a call returns.
    """

    def __init__(self, viewport: Optional[ViewportState] = None, *, device: Optional[str] = None) -> None:
        self.viewport = viewport if viewport is not None else ViewportState()
        self.buffer: np.ndarray = new_pixel_buffer()
        self.device = device
        self.last_result: Optional[RenderResult] = None
        self.frames_rendered = 0

    def on_start(self, *, reset: bool = True) -> RenderResult:
        if reset:
            self.viewport.reset()
        return self.refresh()

    def on_pan_or_zoom(self, event: Event) -> RenderResult:
        if isinstance(event, Pan):
            pan(self.viewport, event.direction)
        elif isinstance(event, ZoomIn):
            zoom_at(self.viewport, event.px, event.py, self.viewport.zoom * 2)
        elif isinstance(event, ZoomOut):
            zoom_at(self.viewport, event.px, event.py, self.viewport.zoom / 2)
        else:
            raise TypeError(f"Unsupported event {event!r}.")
        return self.refresh()

    def refresh(self) -> RenderResult:
        self.last_result = render_frame(self.viewport, self.buffer, device=self.device)
        self.frames_rendered += 1
        return self.last_result
