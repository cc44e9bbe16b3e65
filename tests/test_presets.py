# tests/test_presets.py
# Unit tests for the species preset registry and species interpolation
# RELEVANT FILES: python/barkgen/presets.py, python/barkgen/species.py, python/barkgen/config.py
from __future__ import annotations

import pytest

from barkgen import presets
from barkgen.colors import SPECIES_PALETTES, blend_palettes
from barkgen.config import BarkParams, ColorPalette
from barkgen.errors import UnknownSpeciesError


def test_available_in_registration_order() -> None:
    assert presets.available() == ["pine", "oak", "birch", "maple", "cherry"]


@pytest.mark.parametrize("name", ["pine", "oak", "birch", "maple", "cherry"])
def test_presets_valid_and_tagged(name: str) -> None:
    params = presets.get(name, seed=5)
    assert isinstance(params, BarkParams)
    params.validate()
    assert params.species == name
    assert params.noise.seed == 5
    assert params.colors == SPECIES_PALETTES[name]
    assert params.colors is not SPECIES_PALETTES[name]


@pytest.mark.parametrize("alias", ["Pine", "PINE", " pine ", "pi-ne"])
def test_lookup_is_case_insensitive(alias: str) -> None:
    assert presets.get(alias, seed=1) == presets.get("pine", seed=1)
    assert presets.get_species(alias).name == "pine"


def test_unknown_species_names_request_and_options() -> None:
    with pytest.raises(UnknownSpeciesError) as excinfo:
        presets.get("sequoia")
    err = excinfo.value
    assert err.species == "sequoia"
    assert err.available == ("pine", "oak", "birch", "maple", "cherry")
    assert "sequoia" in str(err)
    assert "birch" in str(err)
    assert isinstance(err, ValueError)


def test_returned_params_are_independent() -> None:
    a = presets.get("oak", seed=3)
    a.noise.octaves = 1
    a.colors.color_variation = 0.0
    b = presets.get("oak", seed=3)
    assert b.noise.octaves == 6
    assert b.colors.color_variation == pytest.approx(5.0)


def test_random_seed_when_none_given() -> None:
    seeds = {presets.get("pine").noise.seed for _ in range(20)}
    assert all(0 <= s < 10000 for s in seeds)
    assert len(seeds) > 1


def test_expected_species_defaults() -> None:
    oak = presets.get("oak", seed=0)
    assert oak.ridge_intensity == pytest.approx(0.7)
    assert oak.contrast == pytest.approx(1.5)
    assert oak.voronoi.cell_density == pytest.approx(0.015)
    maple = presets.get("maple", seed=0)
    assert maple.voronoi.distance_function == "manhattan"
    birch = presets.get("birch", seed=0)
    assert birch.direction.horizontal_bias == pytest.approx(0.8)
    assert birch.warp.iterations == 1


def test_interpolate_species_midpoint() -> None:
    blend = presets.interpolate_species("pine", "oak", 0.5, seed=11)
    pine = presets.get("pine", seed=11)
    oak = presets.get("oak", seed=11)
    assert blend.species == "pine-oak-50"
    assert blend.noise.seed == 11
    assert blend.noise.scale == pytest.approx((pine.noise.scale + oak.noise.scale) / 2)
    assert blend.noise.octaves == 6  # round(5.5) half up
    assert blend.contrast == pytest.approx(1.4)
    assert blend.colors.base_color == pytest.approx((25.0, 40.0, 32.5))
    blend.validate()


def test_interpolate_species_distance_switch_and_endpoints() -> None:
    low = presets.interpolate_species("pine", "maple", 0.49, seed=1)
    high = presets.interpolate_species("pine", "maple", 0.5, seed=1)
    assert low.voronoi.distance_function == "euclidean"
    assert high.voronoi.distance_function == "manhattan"

    start = presets.interpolate_species("birch", "cherry", 0.0, seed=2)
    expected = presets.get("birch", seed=2)
    expected.species = "birch-cherry-0"
    assert start == expected


def test_interpolate_unknown_species_raises() -> None:
    with pytest.raises(UnknownSpeciesError):
        presets.interpolate_species("pine", "baobab", 0.5)


def test_interpolate_species_blends_palettes_on_shorter_arc(monkeypatch) -> None:
    blend = presets.interpolate_species("maple", "cherry", 0.3, seed=9)
    expected = blend_palettes(SPECIES_PALETTES["maple"], SPECIES_PALETTES["cherry"], 0.3)
    assert blend.colors == expected

    wrapped = ColorPalette(
        base_color=(350.0, 50.0, 35.0),
        shadow_color=(345.0, 60.0, 20.0),
        highlight_color=(355.0, 35.0, 50.0),
        color_variation=5.0,
    )
    monkeypatch.setitem(SPECIES_PALETTES, "cherry", wrapped)
    mid = presets.interpolate_species("pine", "cherry", 0.5, seed=9)
    # 20 -> 350 goes through 0 rather than across 185
    assert mid.colors.base_color[0] == pytest.approx(5.0)
