# python/barkgen/noise.py
# Seeded coherent noise and the fractal noise layers built on top of it
# Exists to give the species composers deterministic, vectorized scalar fields
# RELEVANT FILES: python/barkgen/voronoi.py, python/barkgen/species.py, tests/test_noise.py
"""
Noise field library.

Every function here is pure given (coordinates, params, generator): the only
state is the explicit :class:`PerlinNoise` instance, whose permutation table
and lattice hash key are derived from its seed. Coordinates may be Python
scalars or numpy arrays of any (broadcastable) shape; array inputs are
evaluated element-wise, scalar inputs return plain floats.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Callable, Tuple, Union

import numpy as np

from .config import NoiseParams, WarpParams
from .errors import InvalidParameterError

ArrayLike = Union[float, np.ndarray]

_MASK64 = 0xFFFFFFFFFFFFFFFF
_HASH_X = np.uint64(0x9E3779B97F4A7C15)
_HASH_Y = np.uint64(0xC2B2AE3D27D4EB4F)
_HASH_CHANNEL = 0x165667B19E3779F9
_MIX_1 = np.uint64(0xBF58476D1CE4E5B9)
_MIX_2 = np.uint64(0x94D049BB133111EB)
_INV_2_53 = 1.0 / 9007199254740992.0

# Gradient set for 2D Perlin noise: four diagonals and four axes
_GRAD_X = np.array([1.0, -1.0, 1.0, -1.0, 1.0, -1.0, 0.0, 0.0])
_GRAD_Y = np.array([1.0, 1.0, -1.0, -1.0, 0.0, 0.0, 1.0, -1.0])

# Second warp sample offset; keeps the x and y displacements decorrelated
WARP_OFFSET = (5.2, 1.3)


def _coerce(x: ArrayLike, y: ArrayLike) -> Tuple[np.ndarray, np.ndarray, bool]:
    scalar = np.ndim(x) == 0 and np.ndim(y) == 0
    xa, ya = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))
    return xa, ya, scalar


def _finish(value: np.ndarray, scalar: bool) -> ArrayLike:
    return float(value) if scalar else value


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _splitmix(h: np.ndarray) -> np.ndarray:
    h = h ^ (h >> np.uint64(30))
    h = h * _MIX_1
    h = h ^ (h >> np.uint64(27))
    h = h * _MIX_2
    return h ^ (h >> np.uint64(31))


class PerlinNoise:
    """Seeded 2D gradient noise with output in [0, 1].

    Two generators built from the same seed produce identical samples, so a
    render that owns its own instance is reproducible and independent of any
    other render running at the same time.
    """

    def __init__(self, seed: int = 0) -> None:
        self.seed = int(seed)
        if self.seed < 0:
            raise InvalidParameterError(f"noise seed must be non-negative, got {seed}")
        rng = np.random.default_rng(self.seed)
        perm = rng.permutation(256).astype(np.int64)
        self._perm = np.concatenate([perm, perm])
        self._key = int(rng.integers(0, 2**63, dtype=np.uint64))

    def __repr__(self) -> str:
        return f"PerlinNoise(seed={self.seed})"

    def sample(self, x: ArrayLike, y: ArrayLike = 0.0) -> np.ndarray:
        """Sample coherent noise; always returns an array of the broadcast shape."""
        x, y, _ = _coerce(x, y)
        x0 = np.floor(x)
        y0 = np.floor(y)
        xf = x - x0
        yf = y - y0
        xi = x0.astype(np.int64) & 255
        yi = y0.astype(np.int64) & 255

        p = self._perm
        aa = p[p[xi] + yi]
        ab = p[p[xi] + yi + 1]
        ba = p[p[xi + 1] + yi]
        bb = p[p[xi + 1] + yi + 1]

        u = _fade(xf)
        v = _fade(yf)

        n_aa = _GRAD_X[aa & 7] * xf + _GRAD_Y[aa & 7] * yf
        n_ba = _GRAD_X[ba & 7] * (xf - 1.0) + _GRAD_Y[ba & 7] * yf
        n_ab = _GRAD_X[ab & 7] * xf + _GRAD_Y[ab & 7] * (yf - 1.0)
        n_bb = _GRAD_X[bb & 7] * (xf - 1.0) + _GRAD_Y[bb & 7] * (yf - 1.0)

        x1 = n_aa + u * (n_ba - n_aa)
        x2 = n_ab + u * (n_bb - n_ab)
        n = x1 + v * (x2 - x1)
        return np.clip(n * 0.5 + 0.5, 0.0, 1.0)

    def lattice(self, ix: ArrayLike, iy: ArrayLike = 0, channel: int = 0) -> np.ndarray:
        """Stable uniform value in [0, 1) for each integer lattice point.

        Different ``channel`` values give decorrelated streams for the same
        point.
        """
        shape = np.broadcast(np.asarray(ix), np.asarray(iy)).shape
        hx = np.array(ix, dtype=np.int64, ndmin=1).astype(np.uint64)
        hy = np.array(iy, dtype=np.int64, ndmin=1).astype(np.uint64)
        salt = np.uint64((self._key ^ (int(channel) * _HASH_CHANNEL)) & _MASK64)
        h = _splitmix((hx * _HASH_X) ^ (hy * _HASH_Y) ^ salt)
        value = (h >> np.uint64(11)).astype(np.float64) * _INV_2_53
        return value.reshape(shape)


def _fractal(
    noise: PerlinNoise,
    x: ArrayLike,
    y: ArrayLike,
    params: NoiseParams,
    layer: Callable[[np.ndarray], np.ndarray],
) -> ArrayLike:
    octaves = int(params.octaves)
    if octaves < 1:
        raise InvalidParameterError(f"noise.octaves must be >= 1, got {params.octaves}")
    x, y, scalar = _coerce(x, y)

    value = np.zeros(x.shape, dtype=np.float64)
    amplitude = 1.0
    frequency = float(params.scale)
    max_value = 0.0
    for _ in range(octaves):
        n = noise.sample(x * frequency, y * frequency)
        value += amplitude * layer(n)
        max_value += amplitude
        amplitude *= params.persistence
        frequency *= params.lacunarity
    return _finish(value / max_value, scalar)


def _identity(n: np.ndarray) -> np.ndarray:
    return n


def _ridge(n: np.ndarray) -> np.ndarray:
    r = 1.0 - np.abs(n * 2.0 - 1.0)
    return r * r


def _fold(n: np.ndarray) -> np.ndarray:
    return np.abs(n * 2.0 - 1.0)


def fbm(noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: NoiseParams) -> ArrayLike:
    """Fractal Brownian motion normalized by the sum of octave weights."""
    return _fractal(noise, x, y, params, _identity)


def ridged_noise(noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: NoiseParams) -> ArrayLike:
    """Ridged multifractal: sharp squared peaks, suited to deep fissures."""
    return _fractal(noise, x, y, params, _ridge)


def turbulence(noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: NoiseParams) -> ArrayLike:
    return _fractal(noise, x, y, params, _fold)


def billowed_noise(noise: PerlinNoise, x: ArrayLike, y: ArrayLike, params: NoiseParams) -> ArrayLike:
    # Same layer transform as turbulence; kept as a separate name for callers.
    return turbulence(noise, x, y, params)


def domain_warp(
    noise: PerlinNoise,
    x: ArrayLike,
    y: ArrayLike,
    warp: WarpParams,
    noise_params: NoiseParams,
) -> Tuple[ArrayLike, ArrayLike]:
    """Displace coordinates by fbm sampled at the warp scale.

    Each pass samples at the current warped point and re-centers on the
    original coordinates plus the new displacement.
    """
    x, y, scalar = _coerce(x, y)
    warp_noise = replace(noise_params, scale=warp.scale)
    ox, oy = WARP_OFFSET
    wx, wy = x, y
    for _ in range(int(warp.iterations)):
        offset_x = fbm(noise, wx, wy, warp_noise)
        offset_y = fbm(noise, wx + ox, wy + oy, warp_noise)
        wx = x + warp.strength * (offset_x * 2.0 - 1.0)
        wy = y + warp.strength * (offset_y * 2.0 - 1.0)
    return _finish(wx, scalar), _finish(wy, scalar)


def apply_directional_bias(
    x: ArrayLike,
    y: ArrayLike,
    vertical_bias: float,
    horizontal_bias: float,
    angle: float = 0.0,
) -> Tuple[ArrayLike, ArrayLike]:
    """Rotate by ``angle`` then stretch anisotropically.

    Higher vertical bias compresses y, which stretches features vertically.
    """
    x, y, scalar = _coerce(x, y)
    c = np.cos(angle)
    s = np.sin(angle)
    rx = x * c - y * s
    ry = x * s + y * c
    bx = rx * (1.0 + horizontal_bias)
    by = ry / (1.0 + vertical_bias)
    return _finish(bx, scalar), _finish(by, scalar)


def mix_noise(a: ArrayLike, b: ArrayLike, t: ArrayLike) -> ArrayLike:
    return a * (1 - t) + b * t


def apply_contrast(value: ArrayLike, contrast: float) -> ArrayLike:
    adjusted = np.clip((np.asarray(value, dtype=np.float64) - 0.5) * contrast + 0.5, 0.0, 1.0)
    return float(adjusted) if np.ndim(value) == 0 else adjusted


__all__ = [
    "PerlinNoise",
    "WARP_OFFSET",
    "fbm",
    "ridged_noise",
    "turbulence",
    "billowed_noise",
    "domain_warp",
    "apply_directional_bias",
    "mix_noise",
    "apply_contrast",
]
