# tests/test_colors.py
# HSB interpolation, gradient mapping and HSB -> RGB conversion tests
# RELEVANT FILES: python/barkgen/colors.py

from __future__ import annotations

import numpy as np
import pytest

from barkgen.colors import (
    SPECIES_PALETTES,
    blend_palettes,
    get_pixel_color,
    hsb_to_rgb,
    hsb_to_rgb_array,
    lerp_color,
    map_to_color,
    map_to_color_array,
)
from barkgen.config import ColorPalette


def test_lerp_color_endpoints_exact() -> None:
    c1 = (350.0, 40.0, 20.0)
    c2 = (10.0, 60.0, 80.0)
    assert lerp_color(c1, c2, 0.0)[0] == 350.0
    assert lerp_color(c1, c2, 1.0)[0] == 10.0
    assert lerp_color(c1, c2, 0.0) == (350.0, 40.0, 20.0)
    assert lerp_color(c1, c2, 1.0) == (10.0, 60.0, 80.0)


def test_lerp_color_takes_shorter_arc() -> None:
    h, s, b = lerp_color((350.0, 0.0, 0.0), (10.0, 100.0, 100.0), 0.5)
    assert h == pytest.approx(0.0)
    assert s == pytest.approx(50.0)
    assert b == pytest.approx(50.0)
    assert lerp_color((10.0, 0.0, 0.0), (350.0, 0.0, 0.0), 0.25)[0] == pytest.approx(5.0)
    assert lerp_color((20.0, 0.0, 0.0), (40.0, 0.0, 0.0), 0.5)[0] == pytest.approx(30.0)


@pytest.mark.parametrize(
    "hsb,rgb",
    [
        ((0, 0, 100), (255, 255, 255)),
        ((0, 0, 0), (0, 0, 0)),
        ((0, 100, 100), (255, 0, 0)),
        ((120, 100, 100), (0, 255, 0)),
        ((240, 100, 100), (0, 0, 255)),
        ((120, 100, 50), (0, 128, 0)),
        ((60, 100, 100), (255, 255, 0)),
        ((180, 100, 100), (0, 255, 255)),
        ((300, 100, 100), (255, 0, 255)),
        ((360, 100, 100), (255, 0, 0)),
        ((0, 0, 50), (128, 128, 128)),
    ],
)
def test_hsb_to_rgb_canonical(hsb, rgb) -> None:
    assert hsb_to_rgb(*hsb) == rgb


def test_hsb_to_rgb_array_matches_scalar() -> None:
    rng = np.random.default_rng(0)
    h = rng.uniform(0, 360, 500)
    s = rng.uniform(0, 100, 500)
    b = rng.uniform(0, 100, 500)
    s[:10] = 0.0
    arr = hsb_to_rgb_array(h, s, b)
    assert arr.dtype == np.uint8 and arr.shape == (500, 3)
    for i in range(500):
        assert tuple(int(v) for v in arr[i]) == hsb_to_rgb(h[i], s[i], b[i])


def test_map_to_color_segments() -> None:
    pal = SPECIES_PALETTES["pine"]
    assert map_to_color(0.0, pal) == pytest.approx(pal.shadow_color)
    assert map_to_color(0.5, pal) == pytest.approx(pal.base_color)
    assert map_to_color(1.0, pal) == pytest.approx(pal.highlight_color)


def test_map_to_color_hue_jitter() -> None:
    pal = ColorPalette(base_color=(5.0, 50.0, 50.0), shadow_color=(5.0, 50.0, 50.0),
                       highlight_color=(5.0, 50.0, 50.0), color_variation=10.0)
    # (0.2 - 0.5) * 2 * 10 = -6 degrees, wrapped into [0, 360)
    assert map_to_color(0.5, pal, 0.2)[0] == pytest.approx(359.0)
    assert map_to_color(0.5, pal, 1.0)[0] == pytest.approx(15.0)
    # variation of zero disables the jitter
    assert map_to_color(0.5, pal, 0.0)[0] == pytest.approx(5.0)
    flat = ColorPalette(color_variation=0.0)
    assert map_to_color(0.5, flat, 0.9) == pytest.approx(flat.base_color)


def test_map_to_color_array_matches_scalar() -> None:
    pal = SPECIES_PALETTES["cherry"]
    rng = np.random.default_rng(3)
    values = rng.uniform(0, 1, 300)
    variation = rng.uniform(0, 1, 300)
    variation[:5] = 0.0
    h, s, b = map_to_color_array(values, pal, variation)
    for i in range(300):
        eh, es, eb = map_to_color(values[i], pal, variation[i])
        assert h[i] == pytest.approx(eh, abs=1e-9)
        assert s[i] == pytest.approx(es)
        assert b[i] == pytest.approx(eb)


def test_get_pixel_color_opaque() -> None:
    for name, pal in SPECIES_PALETTES.items():
        r, g, b, a = get_pixel_color(0.42, pal, 0.3)
        assert a == 255
        assert all(0 <= c <= 255 for c in (r, g, b)), name


def test_species_palettes_validate() -> None:
    assert list(SPECIES_PALETTES) == ["pine", "oak", "birch", "maple", "cherry"]
    for pal in SPECIES_PALETTES.values():
        pal.validate()


def test_blend_palettes_endpoints_and_midpoint() -> None:
    pine = SPECIES_PALETTES["pine"]
    birch = SPECIES_PALETTES["birch"]
    assert blend_palettes(pine, birch, 0.0).base_color == pytest.approx(pine.base_color)
    assert blend_palettes(pine, birch, 1.0).highlight_color == pytest.approx(birch.highlight_color)
    mid = blend_palettes(pine, birch, 0.5)
    assert mid.color_variation == pytest.approx(5.5)
    assert mid.base_color == pytest.approx((30.0, 26.5, 62.5))
