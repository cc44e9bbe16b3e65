# tests/test_voronoi.py
# Cellular field tests: F1/F2 ordering, edges, cell ids and shading
# RELEVANT FILES: python/barkgen/voronoi.py, python/barkgen/noise.py

from __future__ import annotations

import numpy as np
import pytest

from barkgen.config import VoronoiParams
from barkgen.noise import PerlinNoise
from barkgen.voronoi import (
    CELL_ID_STRIDE,
    cell_points,
    crackle_noise,
    edge_strength,
    voronoi_bark,
    voronoi_bark_and_edges,
    voronoi_cell_value,
    voronoi_edges,
    voronoi_noise,
    voronoi_value,
)


def _grid(n: int = 40, span: float = 400.0):
    ys, xs = np.mgrid[0:n, 0:n].astype(np.float64) * (span / n)
    return xs, ys


@pytest.mark.parametrize("distance", ["euclidean", "manhattan", "chebyshev"])
def test_f1_le_f2_and_finite(distance: str) -> None:
    noise = PerlinNoise(5)
    params = VoronoiParams(cell_density=0.03, distance_function=distance, jitter=0.9)
    xs, ys = _grid()
    sample = voronoi_noise(noise, xs, ys, params)
    assert sample.f1.shape == xs.shape
    assert np.all(np.isfinite(sample.f2))
    assert np.all(sample.f1 <= sample.f2)
    assert np.all(sample.f1 >= 0.0)


def test_zero_jitter_puts_seeds_at_cell_centres() -> None:
    noise = PerlinNoise(5)
    px, py = cell_points(noise, np.array([0, 3, -2]), np.array([0, -1, 7]), jitter=0.0)
    assert np.allclose(px, [0.5, 3.5, -1.5])
    assert np.allclose(py, [0.5, -0.5, 7.5])


def test_cell_id_encodes_winning_cell() -> None:
    noise = PerlinNoise(5)
    params = VoronoiParams(cell_density=1.0, jitter=0.0)
    # With zero jitter the nearest seed is the centre of the containing cell
    sample = voronoi_noise(noise, 3.4, 7.6, params)
    assert sample.cell_id == 3 * CELL_ID_STRIDE + 7
    assert sample.f1 == pytest.approx(np.hypot(0.1, 0.1))
    neg = voronoi_noise(noise, -2.5, -4.5, params)
    assert neg.cell_id == -3 * CELL_ID_STRIDE - 5
    assert neg.f1 == pytest.approx(0.0)


def test_equidistant_point_has_full_edge_strength() -> None:
    assert edge_strength(0.37, 0.37, 0.15) == pytest.approx(1.0)
    noise = PerlinNoise(0)
    params = VoronoiParams(cell_density=1.0, jitter=0.0, edge_width=0.2)
    # Midway between the centres of cells (0, 0) and (1, 0)
    assert voronoi_edges(noise, 1.0, 0.5, params) == pytest.approx(1.0)


def test_edge_strength_soft_and_hard_threshold() -> None:
    assert edge_strength(0.1, 0.2, 0.2) == pytest.approx(0.5)
    assert edge_strength(0.1, 0.9, 0.2) == pytest.approx(0.0)
    assert edge_strength(0.1, 0.105, 0.0) == 1.0
    assert edge_strength(0.1, 0.2, 0.0) == 0.0
    out = edge_strength(np.array([0.0, 0.0]), np.array([0.0, 1.0]), 0.0)
    assert np.array_equal(out, [1.0, 0.0])


def test_fields_in_unit_range_and_deterministic() -> None:
    params = VoronoiParams()
    xs, ys = _grid()
    a_bark, a_edges = voronoi_bark_and_edges(PerlinNoise(21), xs, ys, params)
    b_bark, b_edges = voronoi_bark_and_edges(PerlinNoise(21), xs, ys, params)
    assert np.array_equal(a_bark, b_bark) and np.array_equal(a_edges, b_edges)
    for field in (a_bark, a_edges, voronoi_value(PerlinNoise(21), xs, ys, params), crackle_noise(PerlinNoise(21), xs, ys, params)):
        assert np.all(field >= 0.0) and np.all(field <= 1.0)


def test_combined_scan_matches_separate_functions() -> None:
    noise = PerlinNoise(13)
    params = VoronoiParams(cell_density=0.05, edge_width=0.2)
    xs, ys = _grid(25, 200.0)
    bark, edges = voronoi_bark_and_edges(noise, xs, ys, params)
    assert np.array_equal(bark, voronoi_bark(noise, xs, ys, params))
    assert np.array_equal(edges, voronoi_edges(noise, xs, ys, params))


def test_cell_value_constant_within_cell() -> None:
    noise = PerlinNoise(3)
    params = VoronoiParams(cell_density=1.0, jitter=0.0)
    a = voronoi_cell_value(noise, 2.1, 5.2, params)
    b = voronoi_cell_value(noise, 2.3, 5.4, params)
    c = voronoi_cell_value(noise, 8.5, 1.5, params)
    assert a == b
    assert 0.0 <= a < 1.0
    assert a != c


def test_crackle_independent_of_edge_width() -> None:
    noise = PerlinNoise(3)
    xs, ys = _grid(20)
    a = crackle_noise(noise, xs, ys, VoronoiParams(edge_width=0.05))
    b = crackle_noise(noise, xs, ys, VoronoiParams(edge_width=0.4))
    assert np.array_equal(a, b)
