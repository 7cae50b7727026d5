"""
fishtank module: render/canvas.py

Canvas-style drawing surface backed by cairo:
- Canvas owns the backing buffer (a cairo.ImageSurface) plus its on-page (logical) size
- CanvasContext is an immediate-mode 2D context over cairo.Context: paths,
  fill/stroke, transforms, save/restore
- cairo stores path points in device space, so later transform changes never
  move an already-built path
- Reassigning Canvas.width/height replaces the buffer and resets the context
  state (transform included)
- to_pygame() hands the pixels to pygame for display
"""

from __future__ import annotations
from dataclasses import dataclass, replace
import math
import sys
from typing import List, Optional, Tuple

import cairo
import pygame

from render.colors import parse_color

TAU = 2.0 * math.pi

Point = Tuple[float, float]
Matrix = Tuple[float, float, float, float, float, float]

IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

# cairo ARGB32 is a native-endian 32-bit word
_PYGAME_FORMAT = "BGRA" if sys.byteorder == "little" else "ARGB"


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def _invertible(m: cairo.Matrix) -> bool:
    det = m.xx * m.yy - m.yx * m.xy
    return _finite(m.xx, m.yx, m.xy, m.yy, m.x0, m.y0) and det != 0.0


def _sweep(start: float, end: float, anticlockwise: bool) -> float:
    if not anticlockwise:
        if end - start >= TAU:
            return TAU
        return (end - start) % TAU
    if start - end >= TAU:
        return -TAU
    return -((start - end) % TAU)


@dataclass
class DrawState:
    fill_style: object = "#000000"
    stroke_style: object = "#000000"
    line_width: float = 1.0


class CanvasContext:
    """
    Immediate-mode 2D drawing context over a Canvas' backing surface.

    Non-finite arguments and transforms that would collapse the plane are
    ignored; cairo would otherwise put the whole context into a sticky error
    state.
    """

    def __init__(self, canvas: "Canvas"):
        self.canvas = canvas
        self.reset()

    def reset(self) -> None:
        self._cr = cairo.Context(self.canvas.surface)
        self._state = DrawState()
        self._stack: List[DrawState] = []

    # ---- state ----

    @property
    def fill_style(self):
        return self._state.fill_style

    @fill_style.setter
    def fill_style(self, value) -> None:
        self._state.fill_style = value

    @property
    def stroke_style(self):
        return self._state.stroke_style

    @stroke_style.setter
    def stroke_style(self, value) -> None:
        self._state.stroke_style = value

    @property
    def line_width(self) -> float:
        return self._state.line_width

    @line_width.setter
    def line_width(self, value: float) -> None:
        value = float(value)
        if value > 0.0 and math.isfinite(value):
            self._state.line_width = value

    def save(self) -> None:
        self._stack.append(replace(self._state))
        self._cr.save()

    def restore(self) -> None:
        if not self._stack:
            return
        self._state = self._stack.pop()
        self._cr.restore()

    # ---- transforms ----

    def get_transform(self) -> Matrix:
        m = self._cr.get_matrix()
        return (m.xx, m.yx, m.xy, m.yy, m.x0, m.y0)

    def _set_matrix(self, m: cairo.Matrix) -> None:
        if _invertible(m):
            self._cr.set_matrix(m)

    def set_transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        self._set_matrix(cairo.Matrix(a, b, c, d, e, f))

    def reset_transform(self) -> None:
        self._cr.identity_matrix()

    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        # cairo.Matrix product: left operand is applied first
        self._set_matrix(cairo.Matrix(a, b, c, d, e, f).multiply(self._cr.get_matrix()))

    def translate(self, x: float, y: float) -> None:
        self.transform(1.0, 0.0, 0.0, 1.0, x, y)

    def rotate(self, angle: float) -> None:
        if math.isfinite(angle):
            self.transform(math.cos(angle), math.sin(angle), -math.sin(angle), math.cos(angle), 0.0, 0.0)

    def scale(self, sx: float, sy: float) -> None:
        self.transform(sx, 0.0, 0.0, sy, 0.0, 0.0)

    # ---- path construction ----

    def begin_path(self) -> None:
        self._cr.new_path()

    def move_to(self, x: float, y: float) -> None:
        if _finite(x, y):
            self._cr.move_to(x, y)

    def line_to(self, x: float, y: float) -> None:
        # with no current point cairo treats this as move_to, as a canvas does
        if _finite(x, y):
            self._cr.line_to(x, y)

    def close_path(self) -> None:
        if self._cr.has_current_point():
            self._cr.close_path()

    def ellipse(
        self,
        x: float,
        y: float,
        radius_x: float,
        radius_y: float,
        rotation: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool = False,
    ) -> None:
        if not _finite(x, y, radius_x, radius_y, rotation, start_angle, end_angle):
            return
        if radius_x <= 0.0 or radius_y <= 0.0:
            # degenerate radii collapse the shape onto its center
            self._cr.line_to(x, y)
            return
        sweep = _sweep(start_angle, end_angle, anticlockwise)
        cr = self._cr
        saved = cr.get_matrix()
        cr.translate(x, y)
        cr.rotate(rotation)
        cr.scale(radius_x, radius_y)
        if sweep >= 0.0:
            cr.arc(0.0, 0.0, 1.0, start_angle, start_angle + sweep)
        else:
            cr.arc_negative(0.0, 0.0, 1.0, start_angle, start_angle + sweep)
        cr.set_matrix(saved)

    def arc(
        self,
        x: float,
        y: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool = False,
    ) -> None:
        self.ellipse(x, y, radius, radius, 0.0, start_angle, end_angle, anticlockwise)

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        if not _finite(cpx, cpy, x, y):
            return
        cr = self._cr
        if not cr.has_current_point():
            cr.move_to(cpx, cpy)
        x0, y0 = cr.get_current_point()
        # degree elevation: the same curve as a cubic
        cr.curve_to(
            x0 + 2.0 / 3.0 * (cpx - x0), y0 + 2.0 / 3.0 * (cpy - y0),
            x + 2.0 / 3.0 * (cpx - x), y + 2.0 / 3.0 * (cpy - y),
            x, y,
        )

    def path_points(self) -> List[List[Point]]:
        """Device-space points of every subpath, curves flattened (mostly for tests)."""
        cr = self._cr
        saved = cr.get_matrix()
        cr.identity_matrix()
        try:
            path = cr.copy_path_flat()
        finally:
            cr.set_matrix(saved)

        subpaths: List[List[Point]] = []
        for kind, points in path:
            if kind == cairo.PATH_MOVE_TO:
                subpaths.append([(points[0], points[1])])
            elif kind == cairo.PATH_LINE_TO:
                subpaths[-1].append((points[0], points[1]))
        return subpaths

    # ---- painting ----

    def _set_source(self, style) -> None:
        c = parse_color(style)
        self._cr.set_source_rgba(c.r / 255.0, c.g / 255.0, c.b / 255.0, c.a / 255.0)

    def fill(self) -> None:
        self._set_source(self._state.fill_style)
        self._cr.fill_preserve()

    def stroke(self) -> None:
        self._set_source(self._state.stroke_style)
        self._cr.set_line_width(self._state.line_width)
        self._cr.stroke_preserve()

    def _paint_rect(self, x: float, y: float, w: float, h: float, operator) -> None:
        if not _finite(x, y, w, h):
            return
        cr = self._cr
        # rect painting must not disturb the path under construction
        path = cr.copy_path()
        cr.save()
        try:
            cr.new_path()
            cr.set_operator(operator)
            cr.rectangle(x, y, w, h)
            cr.fill()
        finally:
            cr.restore()
            cr.new_path()
            cr.append_path(path)

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._set_source(self._state.fill_style)
        self._paint_rect(x, y, w, h, cairo.OPERATOR_OVER)

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        """Reset the given rect (in current user units) to transparent."""
        self._paint_rect(x, y, w, h, cairo.OPERATOR_CLEAR)


class Canvas:
    """
    The drawing-surface element: physical backing buffer + logical (style) size.
    """

    DEFAULT_SIZE = (300, 150)

    def __init__(self, width: int = DEFAULT_SIZE[0], height: int = DEFAULT_SIZE[1]):
        self._width = max(0, int(width))
        self._height = max(0, int(height))
        self._surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, self._width, self._height)
        self.style_width: Optional[float] = None
        self.style_height: Optional[float] = None
        self._context: Optional[CanvasContext] = None

    @property
    def width(self) -> int:
        return self._width

    @width.setter
    def width(self, value: int) -> None:
        self._resize_buffer(value, self._height)

    @property
    def height(self) -> int:
        return self._height

    @height.setter
    def height(self, value: int) -> None:
        self._resize_buffer(self._width, value)

    @property
    def surface(self) -> cairo.ImageSurface:
        return self._surface

    def _resize_buffer(self, width: int, height: int) -> None:
        self._width = max(0, int(width))
        self._height = max(0, int(height))
        self._surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, self._width, self._height)
        if self._context is not None:
            self._context.reset()

    def get_context(self) -> CanvasContext:
        if self._context is None:
            self._context = CanvasContext(self)
        return self._context

    def to_pygame(self) -> pygame.Surface:
        """
        Copy the backing buffer into a pygame.Surface.

        Pixels stay alpha-premultiplied (cairo's layout); blit them with
        pygame.BLEND_PREMULTIPLIED.
        """
        if self._width == 0 or self._height == 0:
            return pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        self._surface.flush()
        data = bytes(self._surface.get_data())
        return pygame.image.frombuffer(data, (self._width, self._height), _PYGAME_FORMAT)
