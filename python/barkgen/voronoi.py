# python/barkgen/voronoi.py
# Cellular (Worley) fields: F1/F2 distances, plate edges and per-cell shading
# Exists to give bark its plates and the fissures between them
# RELEVANT FILES: python/barkgen/noise.py, python/barkgen/species.py, tests/test_voronoi.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .config import VoronoiParams
from .errors import InvalidParameterError
from .noise import ArrayLike, PerlinNoise, _coerce

# Multiplier combining cell coordinates into one id; injective while |cell_y| < 2**19
CELL_ID_STRIDE = 2**20

_JITTER_X_CHANNEL = 11
_JITTER_Y_CHANNEL = 12
_CELL_VALUE_CHANNEL = 13

# Neighbour scan order: row-major, offset y outer and offset x inner
_NEIGHBOURS = tuple((ox, oy) for oy in (-1, 0, 1) for ox in (-1, 0, 1))


@dataclass(frozen=True)
class VoronoiSample:
    """Nearest and second-nearest seed distances plus the nearest cell's id."""

    f1: Union[float, np.ndarray]
    f2: Union[float, np.ndarray]
    cell_id: Union[int, np.ndarray]


def _distance(dx: np.ndarray, dy: np.ndarray, kind: str) -> np.ndarray:
    if kind == "euclidean":
        return np.sqrt(dx * dx + dy * dy)
    if kind == "manhattan":
        return np.abs(dx) + np.abs(dy)
    if kind == "chebyshev":
        return np.maximum(np.abs(dx), np.abs(dy))
    raise InvalidParameterError(f"Unknown voronoi distance function: {kind!r}")


def cell_points(noise: PerlinNoise, cell_x: ArrayLike, cell_y: ArrayLike, jitter: float) -> Tuple[np.ndarray, np.ndarray]:
    """Jittered seed point of each integer cell, in scaled coordinates."""
    cx = np.asarray(cell_x, dtype=np.int64)
    cy = np.asarray(cell_y, dtype=np.int64)
    nx = noise.lattice(cx, cy, _JITTER_X_CHANNEL)
    ny = noise.lattice(cx, cy, _JITTER_Y_CHANNEL)
    return cx + 0.5 + (nx - 0.5) * jitter, cy + 0.5 + (ny - 0.5) * jitter


def voronoi_noise(noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: VoronoiParams) -> VoronoiSample:
    x, y, scalar = _coerce(x, y)
    sx = x * params.cell_density
    sy = y * params.cell_density
    base_x = np.floor(sx).astype(np.int64)
    base_y = np.floor(sy).astype(np.int64)

    f1 = np.full(sx.shape, np.inf)
    f2 = np.full(sx.shape, np.inf)
    win_x = np.zeros(sx.shape, dtype=np.int64)
    win_y = np.zeros(sx.shape, dtype=np.int64)

    for ox, oy in _NEIGHBOURS:
        nx = base_x + ox
        ny = base_y + oy
        px, py = cell_points(noise, nx, ny, params.jitter)
        d = _distance(px - sx, py - sy, params.distance_function)

        closer = d < f1
        second = ~closer & (d < f2)
        f2 = np.where(closer, f1, np.where(second, d, f2))
        f1 = np.where(closer, d, f1)
        win_x = np.where(closer, nx, win_x)
        win_y = np.where(closer, ny, win_y)

    cell_id = win_x * CELL_ID_STRIDE + win_y
    if scalar:
        return VoronoiSample(float(f1), float(f2), int(cell_id))
    return VoronoiSample(f1, f2, cell_id)


def voronoi_value(noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: VoronoiParams) -> ArrayLike:
    """F1 distance mapped to [0, 1]."""
    sample = voronoi_noise(noise, x, y, params)
    out = np.minimum(1.0, np.asarray(sample.f1) / 0.7)
    return float(out) if out.ndim == 0 else out


def edge_strength(f1: ArrayLike, f2: ArrayLike, edge_width: float) -> ArrayLike:
    """Edge weight from the F2-F1 gap; 1 on the boundary between two cells."""
    gap = np.asarray(f2, dtype=np.float64) - np.asarray(f1, dtype=np.float64)
    if edge_width == 0:
        out = np.where(gap < 0.01, 1.0, 0.0)
    else:
        out = 1.0 - np.clip(gap / edge_width, 0.0, 1.0)
    return float(out) if out.ndim == 0 else out


def voronoi_edges(noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: VoronoiParams) -> ArrayLike:
    sample = voronoi_noise(noise, x, y, params)
    return edge_strength(sample.f1, sample.f2, params.edge_width)


def cell_value(noise: PerlinNoise, cell_id: ArrayLike) -> ArrayLike:
    value = noise.lattice(cell_id, 0, _CELL_VALUE_CHANNEL)
    return float(value) if value.ndim == 0 else value


def voronoi_cell_value(noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: VoronoiParams) -> ArrayLike:
    return cell_value(noise, voronoi_noise(noise, x, y, params).cell_id)


def voronoi_bark_and_edges(
    noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: VoronoiParams
) -> Tuple[ArrayLike, ArrayLike]:
    """Plate shading and edge strength from a single neighbourhood scan."""
    sample = voronoi_noise(noise, x, y, params)
    edges = edge_strength(sample.f1, sample.f2, params.edge_width)
    bark = cell_value(noise, sample.cell_id) * (1.0 - edges * 0.8)
    return bark, edges


def voronoi_bark(noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: VoronoiParams) -> ArrayLike:
    return voronoi_bark_and_edges(noise, x, y, params)[0]


def crackle_noise(noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: VoronoiParams) -> ArrayLike:
    sample = voronoi_noise(noise, x, y, params)
    gap = np.asarray(sample.f2) - np.asarray(sample.f1)
    out = np.clip(gap * 2.0, 0.0, 1.0)
    return float(out) if out.ndim == 0 else out


__all__ = [
    "CELL_ID_STRIDE",
    "VoronoiSample",
    "cell_points",
    "voronoi_noise",
    "voronoi_value",
    "edge_strength",
    "voronoi_edges",
    "cell_value",
    "voronoi_cell_value",
    "voronoi_bark",
    "voronoi_bark_and_edges",
    "crackle_noise",
]
