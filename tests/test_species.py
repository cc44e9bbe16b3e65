# tests/test_species.py
# Tests for the per-species bark value composers
# RELEVANT FILES: python/barkgen/species.py, python/barkgen/presets.py

from __future__ import annotations

import numpy as np
import pytest

from barkgen import presets
from barkgen.noise import PerlinNoise, apply_contrast
from barkgen.species import BarkSpecies, CherryBark, OakBark, PineBark


SPECIES = ["pine", "oak", "birch", "maple", "cherry"]


def _pixels(w: int = 48, h: int = 40):
    py, px = np.mgrid[0:h, 0:w].astype(np.float64)
    return px, py


@pytest.mark.parametrize("name", SPECIES)
def test_compute_value_in_unit_range(name: str) -> None:
    species = presets.get_species(name)
    params = presets.get(name, seed=42)
    px, py = _pixels()
    value = species.compute_value(px, py, params, PerlinNoise(42))
    assert value.shape == px.shape
    assert np.all(value >= 0.0) and np.all(value <= 1.0)
    assert float(value.std()) > 0.0


@pytest.mark.parametrize("name", SPECIES)
def test_compute_value_extreme_contrast_still_clamped(name: str) -> None:
    species = presets.get_species(name)
    params = presets.get(name, seed=3).merge({"contrast": 2.0, "ridge_intensity": 1.0})
    px, py = _pixels(24, 24)
    value = species.compute_value(px, py, params, PerlinNoise(3))
    assert np.all(value >= 0.0) and np.all(value <= 1.0)


@pytest.mark.parametrize("name", SPECIES)
def test_color_variation_in_unit_range(name: str) -> None:
    species = presets.get_species(name)
    px, py = _pixels()
    variation = species.color_variation(px, py, 48, 40, PerlinNoise(1))
    assert variation.shape == px.shape
    assert np.all(variation >= 0.0) and np.all(variation <= 1.0)


def test_birch_color_variation_is_damped() -> None:
    birch = presets.get_species("birch")
    px, py = _pixels()
    assert float(birch.color_variation(px, py, 48, 40, PerlinNoise(1)).max()) <= 0.3


def test_scalar_matches_array() -> None:
    species = presets.get_species("maple")
    params = presets.get("maple", seed=9)
    noise = PerlinNoise(9)
    px, py = _pixels(6, 5)
    arr = species.compute_value(px, py, params, noise)
    value = species.compute_value(float(px[3, 4]), float(py[3, 4]), params, noise)
    assert isinstance(value, float)
    assert value == pytest.approx(float(arr[3, 4]), abs=1e-12)


def test_pine_uses_shared_layer_recipe() -> None:
    assert PineBark.layer_value is BarkSpecies.layer_value
    assert OakBark.layer_value is not BarkSpecies.layer_value


def test_oak_extends_ridged_blend() -> None:
    oak = OakBark()
    params = presets.get("oak", seed=5)
    noise = PerlinNoise(5)
    px, py = _pixels(16, 16)
    wx, wy = oak.warp_coordinates(px, py, params, noise)
    blend = oak.ridged_blend(wx, wy, params, noise, 0.4)
    layered = oak.layer_value(wx, wy, params, noise)
    # Extra layers change the result but the blend stays a component of it
    assert not np.allclose(blend, layered)
    expected = np.clip(apply_contrast(layered, params.contrast), 0.0, 1.0)
    assert np.array_equal(oak.compute_value(px, py, params, noise), expected)


def test_cherry_base_brightness_band() -> None:
    cherry = CherryBark()
    params = presets.get("cherry", seed=8).merge({"contrast": 1.0})
    px, py = _pixels()
    value = cherry.compute_value(px, py, params, PerlinNoise(8))
    # 0.5 + base*0.3 blended toward [0.4, 1.0] plus at most 0.1 highlight
    assert float(value.min()) >= 0.3
    assert float(value.max()) <= 1.0


def test_default_params_seeded() -> None:
    params = PineBark().default_params(seed=123)
    assert params.noise.seed == 123
    assert params.species == "pine"
