# python/barkgen/colors.py
# HSB palettes, gradient mapping and HSB -> RGB conversion
# Exists to turn scalar bark values into opaque RGBA pixels
# RELEVANT FILES: python/barkgen/config.py, python/barkgen/render.py, tests/test_colors.py
from __future__ import annotations

import math
from typing import Dict, Tuple

import numpy as np

from .config import ColorPalette, HSBColor

RGBColor = Tuple[int, int, int]
RGBAColor = Tuple[int, int, int, int]

SPECIES_PALETTES: Dict[str, ColorPalette] = {
    "pine": ColorPalette(
        base_color=(20.0, 45.0, 35.0),
        shadow_color=(15.0, 55.0, 20.0),
        highlight_color=(25.0, 30.0, 50.0),
        color_variation=8.0,
    ),
    "oak": ColorPalette(
        base_color=(30.0, 35.0, 30.0),
        shadow_color=(25.0, 45.0, 15.0),
        highlight_color=(35.0, 25.0, 45.0),
        color_variation=5.0,
    ),
    "birch": ColorPalette(
        base_color=(40.0, 8.0, 90.0),
        shadow_color=(30.0, 20.0, 25.0),
        highlight_color=(45.0, 5.0, 95.0),
        color_variation=3.0,
    ),
    "maple": ColorPalette(
        base_color=(25.0, 30.0, 40.0),
        shadow_color=(20.0, 40.0, 20.0),
        highlight_color=(30.0, 20.0, 55.0),
        color_variation=6.0,
    ),
    "cherry": ColorPalette(
        base_color=(10.0, 50.0, 35.0),
        shadow_color=(5.0, 60.0, 20.0),
        highlight_color=(15.0, 35.0, 50.0),
        color_variation=10.0,
    ),
}


def _lerp_hue(h1: float, h2: float, t: float) -> float:
    if abs(h2 - h1) > 180.0:
        if h1 < h2:
            h1 += 360.0
        else:
            h2 += 360.0
    return (h1 + (h2 - h1) * t) % 360.0


def lerp_color(c1: HSBColor, c2: HSBColor, t: float) -> HSBColor:
    """Interpolate two HSB colors; hue follows the shorter arc."""
    return (
        _lerp_hue(c1[0], c2[0], t),
        c1[1] + (c2[1] - c1[1]) * t,
        c1[2] + (c2[2] - c1[2]) * t,
    )


def map_to_color(value: float, palette: ColorPalette, variation: float = 0.0) -> HSBColor:
    if value < 0.5:
        color = lerp_color(palette.shadow_color, palette.base_color, value * 2.0)
    else:
        color = lerp_color(palette.base_color, palette.highlight_color, (value - 0.5) * 2.0)

    if palette.color_variation > 0 and variation > 0:
        h, s, b = color
        h = (h + (variation - 0.5) * 2.0 * palette.color_variation + 360.0) % 360.0
        color = (h, s, b)
    return color


def _channel(v: float) -> int:
    return int(math.floor(v * 255.0 + 0.5))


def hsb_to_rgb(h: float, s: float, b: float) -> RGBColor:
    """Convert H in degrees, S and B in percent to 8-bit RGB."""
    h = h / 360.0
    s = s / 100.0
    v = b / 100.0
    if s == 0:
        return _channel(v), _channel(v), _channel(v)

    i = math.floor(h * 6.0)
    f = h * 6.0 - i
    p = v * (1.0 - s)
    q = v * (1.0 - f * s)
    t = v * (1.0 - (1.0 - f) * s)

    sector = i % 6
    if sector == 0:
        r, g, bl = v, t, p
    elif sector == 1:
        r, g, bl = q, v, p
    elif sector == 2:
        r, g, bl = p, v, t
    elif sector == 3:
        r, g, bl = p, q, v
    elif sector == 4:
        r, g, bl = t, p, v
    else:
        r, g, bl = v, p, q
    return _channel(r), _channel(g), _channel(bl)


def get_pixel_color(value: float, palette: ColorPalette, variation: float = 0.0) -> RGBAColor:
    r, g, b = hsb_to_rgb(*map_to_color(value, palette, variation))
    return r, g, b, 255


def blend_palettes(p1: ColorPalette, p2: ColorPalette, t: float) -> ColorPalette:
    return ColorPalette(
        base_color=lerp_color(p1.base_color, p2.base_color, t),
        shadow_color=lerp_color(p1.shadow_color, p2.shadow_color, t),
        highlight_color=lerp_color(p1.highlight_color, p2.highlight_color, t),
        color_variation=p1.color_variation + (p2.color_variation - p1.color_variation) * t,
    )


# ---------------------------------------------------------------------------
# Array forms used by the rasterizer. Element for element these agree with the
# scalar functions above.
# ---------------------------------------------------------------------------

def _lerp_hue_array(h1: float, h2: float, t: np.ndarray) -> np.ndarray:
    if abs(h2 - h1) > 180.0:
        if h1 < h2:
            h1 += 360.0
        else:
            h2 += 360.0
    return np.mod(h1 + (h2 - h1) * t, 360.0)


def _lerp_color_array(c1: HSBColor, c2: HSBColor, t: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    return (
        _lerp_hue_array(c1[0], c2[0], t),
        c1[1] + (c2[1] - c1[1]) * t,
        c1[2] + (c2[2] - c1[2]) * t,
    )


def map_to_color_array(
    values: np.ndarray, palette: ColorPalette, variation: np.ndarray
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    values = np.asarray(values, dtype=np.float64)
    variation = np.broadcast_to(np.asarray(variation, dtype=np.float64), values.shape)

    low = values < 0.5
    lh, ls, lb = _lerp_color_array(palette.shadow_color, palette.base_color, values * 2.0)
    hh, hs, hb = _lerp_color_array(palette.base_color, palette.highlight_color, (values - 0.5) * 2.0)
    h = np.where(low, lh, hh)
    s = np.where(low, ls, hs)
    b = np.where(low, lb, hb)

    if palette.color_variation > 0:
        shifted = np.mod(h + (variation - 0.5) * 2.0 * palette.color_variation + 360.0, 360.0)
        h = np.where(variation > 0, shifted, h)
    return h, s, b


def hsb_to_rgb_array(h: np.ndarray, s: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Vectorized :func:`hsb_to_rgb`; returns uint8 with a trailing RGB axis."""
    h = np.asarray(h, dtype=np.float64) / 360.0
    s = np.asarray(s, dtype=np.float64) / 100.0
    v = np.asarray(b, dtype=np.float64) / 100.0
    h, s, v = np.broadcast_arrays(h, s, v)

    i = np.floor(h * 6.0)
    f = h * 6.0 - i
    p = v * (1.0 - s)
    q = v * (1.0 - f * s)
    t = v * (1.0 - (1.0 - f) * s)
    sector = np.mod(i, 6).astype(np.int64)

    conditions = [sector == k for k in range(6)]
    r = np.select(conditions, [v, q, p, p, t, v])
    g = np.select(conditions, [t, v, v, q, p, p])
    bl = np.select(conditions, [p, p, t, v, v, q])

    gray = s == 0
    r = np.where(gray, v, r)
    g = np.where(gray, v, g)
    bl = np.where(gray, v, bl)

    rgb = np.stack([r, g, bl], axis=-1)
    return np.floor(rgb * 255.0 + 0.5).astype(np.uint8)


__all__ = [
    "RGBColor",
    "RGBAColor",
    "SPECIES_PALETTES",
    "lerp_color",
    "map_to_color",
    "hsb_to_rgb",
    "get_pixel_color",
    "blend_palettes",
    "map_to_color_array",
    "hsb_to_rgb_array",
]
