"""
fishtank module: render/coords.py

Normalized world space ([0, 1] on both axes) -> logical pixels.
No clamping: out-of-range input simply lands off-surface.
"""

from __future__ import annotations
from typing import Tuple

from render.viewport import ViewportState


def map_position(state: ViewportState, nx: float, ny: float) -> Tuple[float, float]:
    return (nx * state.logical_width, ny * state.logical_height)


def map_length(state: ViewportState, factor: float, axis: str = "width") -> float:
    if axis == "width":
        return factor * state.logical_width
    if axis == "height":
        return factor * state.logical_height
    raise ValueError(f"unknown axis {axis!r}")
