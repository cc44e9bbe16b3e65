# tests/test_config.py
# Tests for bark parameter parsing, deep-merge and validation
# Exists to ensure partial updates never reset untouched fields and bad values raise typed errors
# RELEVANT FILES: python/barkgen/config.py, python/barkgen/errors.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from barkgen.config import BarkParams, NoiseParams, VoronoiParams, load_bark_params, read_params_file
from barkgen.errors import BarkgenError, InvalidParameterError


def test_defaults_validate_and_roundtrip() -> None:
    params = BarkParams()
    params.validate()
    again = BarkParams.from_mapping(params.to_dict())
    assert again == params
    assert again is not params


def test_merge_keeps_untouched_noise_fields() -> None:
    params = BarkParams.from_mapping({"noise": {"seed": 77, "octaves": 6}})
    merged = params.merge({"noise": {"scale": 0.05}})
    assert merged.noise.scale == pytest.approx(0.05)
    assert merged.noise.seed == 77
    assert merged.noise.octaves == 6
    assert merged.noise.lacunarity == params.noise.lacunarity
    assert merged.warp == params.warp
    # merge never mutates the receiver
    assert params.noise.scale == pytest.approx(0.015)


def test_merge_accepts_camel_case_and_aliases() -> None:
    merged = BarkParams().merge(
        {
            "voronoi": {"cellDensity": 0.04, "distanceFunction": "Manhattan"},
            "ridgeIntensity": 0.9,
            "palette": {"colorVariation": 12},
        }
    )
    assert merged.voronoi.cell_density == pytest.approx(0.04)
    assert merged.voronoi.distance_function == "manhattan"
    assert merged.voronoi.edge_width == pytest.approx(0.15)
    assert merged.ridge_intensity == pytest.approx(0.9)
    assert merged.colors.color_variation == pytest.approx(12.0)


def test_merge_with_full_struct_replaces_it() -> None:
    merged = BarkParams().merge({"noise": NoiseParams(scale=0.2, seed=5)})
    assert merged.noise == NoiseParams(scale=0.2, seed=5)


@pytest.mark.parametrize(
    "partial",
    [
        {"noise": {"octaves": 0}},
        {"noise": {"octaves": 9}},
        {"noise": {"scale": 0}},
        {"noise": {"lacunarity": 1.2}},
        {"noise": {"persistence": 0.9}},
        {"noise": {"seed": -3}},
        {"warp": {"iterations": 4}},
        {"warp": {"strength": -0.1}},
        {"voronoi": {"edge_width": 0.5}},
        {"voronoi": {"jitter": 1.5}},
        {"direction": {"vertical_bias": 1.2}},
        {"colors": {"base_color": [360, 50, 50]}},
        {"colors": {"shadow_color": [10, 120, 50]}},
        {"colors": {"color_variation": 31}},
        {"ridge_intensity": -0.1},
        {"contrast": 2.5},
    ],
)
def test_out_of_range_values_rejected(partial) -> None:
    with pytest.raises(InvalidParameterError):
        BarkParams().merge(partial).validate()


@pytest.mark.parametrize(
    "partial",
    [
        {"noise": {"octaves": 2.5}},
        {"noise": {"scale": "big"}},
        {"noise": {"scale": float("nan")}},
        {"voronoi": {"distance_function": "hamming"}},
        {"colors": {"base_color": [1, 2]}},
        {"noise": 5},
    ],
)
def test_malformed_values_rejected_while_parsing(partial) -> None:
    with pytest.raises(InvalidParameterError):
        BarkParams().merge(partial)


def test_invalid_parameter_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        NoiseParams(octaves=0).validate()
    assert issubclass(InvalidParameterError, BarkgenError)


def test_distance_function_aliases() -> None:
    assert VoronoiParams.from_mapping({"distance": "L1"}).distance_function == "manhattan"
    assert VoronoiParams.from_mapping({"distance_function": "chessboard"}).distance_function == "chebyshev"


def test_load_bark_params_sources(tmp_path: Path) -> None:
    assert load_bark_params() == BarkParams()

    path = tmp_path / "params.json"
    path.write_text(json.dumps({"species": "oak", "noise": {"seed": 9}}), encoding="utf-8")
    loaded = load_bark_params(path, overrides={"contrast": 1.7})
    assert loaded.species == "oak"
    assert loaded.noise.seed == 9
    assert loaded.contrast == pytest.approx(1.7)

    src = BarkParams()
    copied = load_bark_params(src)
    assert copied == src and copied is not src

    with pytest.raises(TypeError):
        load_bark_params(42)  # type: ignore[arg-type]
    with pytest.raises(InvalidParameterError):
        load_bark_params({"contrast": 9.0})


def test_read_params_file_rejects_bad_input(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidParameterError):
        read_params_file(bad)
    yaml = tmp_path / "params.yaml"
    yaml.write_text("noise: {}", encoding="utf-8")
    with pytest.raises(InvalidParameterError):
        read_params_file(yaml)
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(InvalidParameterError):
        read_params_file(listing)


def test_copy_is_deep() -> None:
    params = BarkParams()
    clone = params.copy()
    clone.noise.seed = 1234
    clone.colors.color_variation = 1.0
    assert params.noise.seed == 0
    assert params.colors.color_variation == pytest.approx(8.0)
