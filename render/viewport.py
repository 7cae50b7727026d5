"""
fishtank module: render/viewport.py

Viewport sizing:
- ViewportState holds the logical (CSS-pixel) size and the device scale
- ViewportManager keeps the canvas backing buffer at logical * scale and
  re-applies the scale transform after every buffer resize, so drawing code
  always works in logical pixels
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import math
from typing import Callable, Optional, Protocol, Tuple

from render.canvas import Canvas, CanvasContext

log = logging.getLogger(__name__)


class SurfaceNotFoundError(LookupError):
    """The drawing-surface element could not be located on the host."""


class ViewportHost(Protocol):
    device_pixel_ratio: Optional[float]

    def get_element(self, element_id: str) -> Optional[Canvas]: ...

    def inner_size(self) -> Tuple[float, float]: ...

    def add_resize_listener(self, callback: Callable[[], None]) -> None: ...


@dataclass
class ViewportState:
    logical_width: float = 0.0
    logical_height: float = 0.0
    device_scale: float = 1.0


def effective_scale(ratio: Optional[float]) -> float:
    """Device pixel ratio, or 1 when the host reports nothing usable."""
    if ratio is None:
        return 1.0
    try:
        ratio = float(ratio)
    except (TypeError, ValueError):
        return 1.0
    if not math.isfinite(ratio) or ratio <= 0.0:
        return 1.0
    return ratio


class ViewportManager:
    def __init__(self, host: ViewportHost, element_id: str = "viewport"):
        canvas = host.get_element(element_id)
        if canvas is None:
            raise SurfaceNotFoundError(f"no drawing surface with id {element_id!r}")
        self.host = host
        self.element_id = element_id
        self.canvas: Canvas = canvas
        self.context: CanvasContext = canvas.get_context()
        self.state = ViewportState()
        self._attached = False

    def attach(self) -> None:
        """Size the surface now and follow every later resize notification."""
        self.resize()
        if not self._attached:
            self.host.add_resize_listener(self.resize)
            self._attached = True

    def resize(self) -> None:
        width, height = self.host.inner_size()
        scale = effective_scale(self.host.device_pixel_ratio)

        self.canvas.width = int(round(width * scale))
        self.canvas.height = int(round(height * scale))
        self.canvas.style_width = width
        self.canvas.style_height = height

        # a backing-buffer resize wipes the context state; put the scale back
        self.context.set_transform(scale, 0.0, 0.0, scale, 0.0, 0.0)

        self.state.logical_width = float(width)
        self.state.logical_height = float(height)
        self.state.device_scale = scale
        log.debug(
            "viewport resized to %gx%g (scale %g, buffer %dx%d)",
            width, height, scale, self.canvas.width, self.canvas.height,
        )

    def clear(self) -> None:
        """Clear the whole visible logical region."""
        self.context.clear_rect(0.0, 0.0, self.state.logical_width, self.state.logical_height)
