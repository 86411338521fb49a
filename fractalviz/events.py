"""Pan and zoom intents delivered by a presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .viewport import Direction


@dataclass(frozen=True)
class Pan:
    direction: Direction


@dataclass(frozen=True)
class ZoomIn:
    px: int
    py: int


@dataclass(frozen=True)
class ZoomOut:
    px: int
    py: int


Event = Union[Pan, ZoomIn, ZoomOut]

PAN_UP = Pan(Direction.UP)
PAN_DOWN = Pan(Direction.DOWN)
PAN_LEFT = Pan(Direction.LEFT)
PAN_RIGHT = Pan(Direction.RIGHT)

KEY_BINDINGS = {
    "w": PAN_UP,
    "a": PAN_LEFT,
    "s": PAN_DOWN,
    "d": PAN_RIGHT,
}

MOUSE_LEFT = 1
MOUSE_RIGHT = 3


def event_for_key(key: str) -> Optional[Event]:
    return KEY_BINDINGS.get(key.lower())


def event_for_mouse(button: int, x: int, y: int) -> Optional[Event]:
    """Left button zooms in at the click, right button zooms out."""

    if button == MOUSE_LEFT:
        return ZoomIn(x, y)
    if button == MOUSE_RIGHT:
        return ZoomOut(x, y)
    return None


def _parse_point(text: str, spec: str) -> tuple[int, int]:
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"Event '{spec}' needs a pixel position in the form X,Y.")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise ValueError(f"Event '{spec}' has a non-integer pixel position.") from exc


def parse_event(spec: str) -> Event:
    """Parse ``up``/``down``/``left``/``right``, ``w``/``a``/``s``/``d``,
    ``in:X,Y`` or ``out:X,Y``."""

    text = spec.strip().lower()
    if not text:
        raise ValueError("Empty event.")

    kind, sep, rest = text.partition(":")
    if sep:
        px, py = _parse_point(rest, spec)
        if kind == "in":
            return ZoomIn(px, py)
        if kind == "out":
            return ZoomOut(px, py)
        raise ValueError(f"Unknown zoom event '{spec}'. Use in:X,Y or out:X,Y.")

    key_event = event_for_key(text)
    if key_event is not None:
        return key_event
    try:
        return Pan(Direction(text))
    except ValueError as exc:
        valid = ", ".join(d.value for d in Direction)
        raise ValueError(f"Unknown event '{spec}'. Valid pans: {valid}, w, a, s, d.") from exc
