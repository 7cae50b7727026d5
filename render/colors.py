"""
fishtank module: render/colors.py

Central color palette plus color-token parsing.

Snapshot colors arrive as CSS-style strings ("rgb(12, 200, 7)", "#ff0000",
"teal"), which pygame.Color only partly understands.
"""

from __future__ import annotations
import math
import re

import pygame

BG = (14, 14, 18)

FISH_BODY = "#4DB6AC"
FISH_OUTLINE = "#004D40"

_FUNC_RE = re.compile(r"^(rgba?)\(\s*([^)]*)\)$", re.IGNORECASE)


def _channel(token: str) -> int:
    token = token.strip()
    if token.endswith("%"):
        value = float(token[:-1]) * 255.0 / 100.0
    else:
        value = float(token)
    if value != value:  # NaN
        raise ValueError(f"bad color channel {token!r}")
    return int(round(max(0.0, min(255.0, value))))


def _alpha(token: str) -> int:
    token = token.strip()
    if token.endswith("%"):
        value = float(token[:-1]) / 100.0
    else:
        value = float(token)
    if value != value:
        raise ValueError(f"bad alpha {token!r}")
    return int(round(max(0.0, min(1.0, value)) * 255.0))


def _tuple_channel(value) -> int:
    try:
        value = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"bad color channel {value!r}") from exc
    if not math.isfinite(value):
        raise ValueError(f"bad color channel {value!r}")
    return int(max(0.0, min(255.0, value)))


def _expand_short_hex(token: str) -> str:
    # "#abc" -> "#aabbcc", "#abcd" -> "#aabbccdd"
    return "#" + "".join(ch * 2 for ch in token[1:])


def parse_color(token) -> pygame.Color:
    """
    Turn a color token into a pygame.Color.

    Accepts pygame.Color, RGB/RGBA tuples, "#rgb", "#rgba", "#rrggbb",
    "#rrggbbaa", "rgb(r, g, b)", "rgba(r, g, b, a)" and pygame's named colors.
    Raises ValueError for anything else.
    """
    if isinstance(token, pygame.Color):
        return pygame.Color(token)
    if isinstance(token, (tuple, list)):
        if len(token) not in (3, 4):
            raise ValueError(f"color tuple needs 3 or 4 channels, got {token!r}")
        return pygame.Color(*[_tuple_channel(c) for c in token])
    if not isinstance(token, str):
        raise ValueError(f"unsupported color token {token!r}")

    text = token.strip()
    if not text:
        raise ValueError("empty color token")

    m = _FUNC_RE.match(text)
    if m:
        kind = m.group(1).lower()
        parts = [p for p in re.split(r"[,\s/]+", m.group(2).strip()) if p]
        try:
            if len(parts) == 3:
                r, g, b = (_channel(p) for p in parts)
                return pygame.Color(r, g, b)
            if len(parts) == 4:
                r, g, b = (_channel(p) for p in parts[:3])
                return pygame.Color(r, g, b, _alpha(parts[3]))
        except ValueError as exc:
            raise ValueError(f"bad {kind}() color {token!r}") from exc
        raise ValueError(f"bad {kind}() color {token!r}")

    if text.startswith("#") and len(text) in (4, 5):
        text = _expand_short_hex(text)

    try:
        return pygame.Color(text.lower() if not text.startswith("#") else text)
    except ValueError as exc:
        raise ValueError(f"unknown color {token!r}") from exc
