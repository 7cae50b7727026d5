"""
fishtank module: render/renderer.py

Procedural shapes for the two world primitives (food particle, fish).

Everything is drawn through an explicit canvas-style context; each shape is
wrapped in save/restore so its transform never leaks into the next one, even
when drawing fails halfway.
"""

from __future__ import annotations
import math

import config
from render import colors

TAU = 2.0 * math.pi


def draw_food(ctx, x: float, y: float, radius: float, color) -> None:
    ctx.save()
    try:
        ctx.begin_path()
        ctx.arc(x, y, radius, 0.0, TAU)
        ctx.fill_style = color
        ctx.fill()
    finally:
        ctx.restore()


def _fish_path(ctx, size: float) -> None:
    ctx.begin_path()

    # body
    ctx.ellipse(0.0, 0.0, size, size * 0.6, 0.0, 0.0, TAU)

    # tail, hung off the back of the body
    ctx.move_to(-size, 0.0)
    ctx.line_to(-size * 1.7, -size * 0.6)
    ctx.line_to(-size * 1.7, size * 0.6)
    ctx.close_path()

    # dorsal fin
    ctx.move_to(-size * 0.5, -size * 0.6)
    ctx.quadratic_curve_to(0.0, -size * 1.3, size * 0.4, -size * 0.5)

    # ventral fin
    ctx.move_to(-size * 0.5, size * 0.4)
    ctx.quadratic_curve_to(0.0, size * 0.6, size * 0.4, size * 0.2)

    # mouth
    ctx.move_to(size * 0.1, 0.0)
    ctx.arc(0.0, 0.0, size * 0.1, 0.0, math.pi, False)

    # eye
    eye_radius = size * 0.1
    ctx.move_to(size * 0.4 + eye_radius, -size * 0.4)
    ctx.arc(size * 0.4, -size * 0.4, eye_radius, 0.0, TAU, False)


def draw_organism(ctx, x: float, y: float, size: float, rotation: float) -> None:
    """
    Fish shape, authored with its nose along local +x.

    The extra quarter turn lines the drawing up with the world's rotation
    convention, where movement at rotation 0 heads along +y.
    """
    ctx.save()
    try:
        ctx.translate(x, y)
        ctx.rotate(rotation + math.pi / 2)
        _fish_path(ctx, size)

        ctx.fill_style = colors.FISH_BODY
        ctx.fill()
        ctx.stroke_style = colors.FISH_OUTLINE
        ctx.line_width = config.FISH_LINE_WIDTH
        ctx.stroke()
    finally:
        ctx.restore()
