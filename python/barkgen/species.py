# python/barkgen/species.py
# Per-species bark value composers built from the noise and cellular fields
# Exists to keep each species' look as a small override of one shared recipe
# RELEVANT FILES: python/barkgen/noise.py, python/barkgen/voronoi.py, python/barkgen/presets.py, tests/test_species.py
"""
Bark value composers.

The species set is closed: pine, oak, birch, maple and cherry. Every composer
maps pixel coordinates to a bark value in [0, 1] through the same first two
stages (directional bias, then domain warp). Pine uses the shared layer recipe
as is, oak extends it, and birch, maple and cherry replace it.

All methods accept numpy arrays of pixel coordinates and evaluate element-wise;
scalar coordinates return floats.
"""
from __future__ import annotations

import copy
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

from .colors import SPECIES_PALETTES
from .config import BarkParams
from .noise import (
    ArrayLike,
    PerlinNoise,
    apply_contrast,
    apply_directional_bias,
    domain_warp,
    fbm,
    mix_noise,
    ridged_noise,
)
from .voronoi import voronoi_bark_and_edges

DEFAULT_SEED_RANGE = 10000


def random_seed() -> int:
    return int(np.random.default_rng().integers(0, DEFAULT_SEED_RANGE))


def _clamp01(value: ArrayLike) -> ArrayLike:
    out = np.clip(value, 0.0, 1.0)
    return float(out) if np.ndim(out) == 0 else out


class BarkSpecies:
    """Shared bark recipe; subclasses override the layer stage."""

    name: str = ""
    defaults: Mapping[str, Any] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def default_params(self, seed: Optional[int] = None) -> BarkParams:
        """Fresh parameters for this species; a random seed when ``seed`` is None."""
        params = BarkParams.from_mapping(self.defaults)
        params.species = self.name
        params.colors = copy.deepcopy(SPECIES_PALETTES[self.name])
        params.noise.seed = random_seed() if seed is None else int(seed)
        return params

    def warp_coordinates(
        self, x: ArrayLike, y: ArrayLike, params: BarkParams, noise: PerlinNoise
    ) -> Tuple[ArrayLike, ArrayLike]:
        d = params.direction
        bx, by = apply_directional_bias(x, y, d.vertical_bias, d.horizontal_bias, d.angle)
        return domain_warp(noise, bx, by, params.warp, params.noise)

    def ridged_blend(
        self, wx: ArrayLike, wy: ArrayLike, params: BarkParams, noise: PerlinNoise, ridge_scale: float
    ) -> ArrayLike:
        base = fbm(noise, wx, wy, params.noise)
        ridged = ridged_noise(noise, wx, wy, replace(params.noise, scale=params.noise.scale * ridge_scale))
        return mix_noise(base, ridged, params.ridge_intensity)

    def layer_value(self, wx: ArrayLike, wy: ArrayLike, params: BarkParams, noise: PerlinNoise) -> ArrayLike:
        value = self.ridged_blend(wx, wy, params, noise, 0.5)
        plates, edges = voronoi_bark_and_edges(noise, wx, wy, params.voronoi)
        value = mix_noise(value, plates, 0.3)
        return value * (1.0 - edges * 0.5)

    def compute_value(self, x: ArrayLike, y: ArrayLike, params: BarkParams, noise: PerlinNoise) -> ArrayLike:
        wx, wy = self.warp_coordinates(x, y, params, noise)
        value = self.layer_value(wx, wy, params, noise)
        return _clamp01(apply_contrast(value, params.contrast))

    def color_variation(
        self, px: ArrayLike, py: ArrayLike, width: int, height: int, noise: PerlinNoise
    ) -> ArrayLike:
        """Small-scale noise driving the per-pixel hue jitter."""
        px = np.asarray(px, dtype=np.float64)
        py = np.asarray(py, dtype=np.float64)
        out = noise.sample(px / width * 50.0, py / height * 50.0)
        return float(out) if out.ndim == 0 else out


class PineBark(BarkSpecies):
    name = "pine"
    defaults = {
        "noise": {"scale": 0.015, "octaves": 5, "lacunarity": 2.2, "persistence": 0.5},
        "warp": {"strength": 0.8, "iterations": 2, "scale": 0.008},
        "voronoi": {"cell_density": 0.025, "distance_function": "euclidean", "edge_width": 0.15, "jitter": 0.8},
        "direction": {"vertical_bias": 0.6, "horizontal_bias": 0.1, "angle": 0.0},
        "ridge_intensity": 0.4,
        "contrast": 1.3,
    }


class OakBark(BarkSpecies):
    """Deep, irregular ridges with extra fine roughness."""

    name = "oak"
    defaults = {
        "noise": {"scale": 0.012, "octaves": 6, "lacunarity": 2.0, "persistence": 0.55},
        "warp": {"strength": 1.2, "iterations": 2, "scale": 0.006},
        "voronoi": {"cell_density": 0.015, "distance_function": "euclidean", "edge_width": 0.25, "jitter": 0.9},
        "direction": {"vertical_bias": 0.3, "horizontal_bias": 0.2, "angle": 0.0},
        "ridge_intensity": 0.7,
        "contrast": 1.5,
    }

    def layer_value(self, wx, wy, params, noise):
        value = self.ridged_blend(wx, wy, params, noise, 0.4)
        ridged2 = ridged_noise(
            noise, wx * 1.5, wy * 1.5, replace(params.noise, scale=params.noise.scale * 0.8, octaves=3)
        )
        value = mix_noise(value, ridged2, 0.3)
        detail = fbm(noise, wx * 3.0, wy * 3.0, replace(params.noise, scale=params.noise.scale * 2.0, octaves=3))
        return mix_noise(value, detail, 0.15)


class BirchBark(BarkSpecies):
    """Light bark with dark horizontal lenticels; high values are light."""

    name = "birch"
    defaults = {
        "noise": {"scale": 0.02, "octaves": 4, "lacunarity": 2.0, "persistence": 0.4},
        "warp": {"strength": 0.3, "iterations": 1, "scale": 0.01},
        "voronoi": {"cell_density": 0.01, "distance_function": "euclidean", "edge_width": 0.05, "jitter": 0.5},
        "direction": {"vertical_bias": 0.05, "horizontal_bias": 0.8, "angle": 0.0},
        "ridge_intensity": 0.1,
        "contrast": 0.9,
    }

    band_frequency = 0.08
    lenticel_threshold = 0.65

    def layer_value(self, wx, wy, params, noise):
        base = fbm(noise, wx, wy, params.noise)

        band_noise = noise.sample(wx * 0.01, wy * self.band_frequency)
        bands = np.sin(wy * self.band_frequency * np.pi * 2.0 + band_noise * 5.0)
        band_mask = np.maximum(0.0, bands * 0.5 + 0.5)

        lenticel = noise.sample(wx * 0.05, wy * 0.02)
        value = 0.85 + base * 0.15
        intensity = (lenticel - self.lenticel_threshold) / (1.0 - self.lenticel_threshold)
        value = np.where(lenticel > self.lenticel_threshold, value * (1.0 - intensity * 0.7), value)
        return value * (0.95 + band_mask * 0.05)

    def color_variation(self, px, py, width, height, noise):
        px = np.asarray(px, dtype=np.float64)
        py = np.asarray(py, dtype=np.float64)
        out = noise.sample(px * 0.06, py * 0.06) * 0.3
        return float(out) if out.ndim == 0 else out


class MapleBark(BarkSpecies):
    """Plates split by long vertical fissures."""

    name = "maple"
    defaults = {
        "noise": {"scale": 0.018, "octaves": 5, "lacunarity": 2.1, "persistence": 0.45},
        "warp": {"strength": 0.5, "iterations": 2, "scale": 0.01},
        "voronoi": {"cell_density": 0.02, "distance_function": "manhattan", "edge_width": 0.18, "jitter": 0.6},
        "direction": {"vertical_bias": 0.5, "horizontal_bias": 0.15, "angle": 0.0},
        "ridge_intensity": 0.35,
        "contrast": 1.2,
    }

    def layer_value(self, wx, wy, params, noise):
        base = fbm(noise, wx, wy, params.noise)
        plates, edges = voronoi_bark_and_edges(noise, wx, wy, params.voronoi)
        fissure = ridged_noise(
            noise, wx * 0.3, wy, replace(params.noise, scale=params.noise.scale * 0.5, octaves=3)
        )
        value = mix_noise(base, plates, 0.4)
        value = mix_noise(value, fissure, params.ridge_intensity)
        return value * (1.0 - edges * 0.6)


class CherryBark(BarkSpecies):
    """Smooth, glossy bark with horizontal bands and lenticel dashes."""

    name = "cherry"
    defaults = {
        "noise": {"scale": 0.025, "octaves": 3, "lacunarity": 2.0, "persistence": 0.35},
        "warp": {"strength": 0.2, "iterations": 1, "scale": 0.015},
        "voronoi": {"cell_density": 0.008, "distance_function": "euclidean", "edge_width": 0.05, "jitter": 0.4},
        "direction": {"vertical_bias": 0.1, "horizontal_bias": 0.5, "angle": 0.0},
        "ridge_intensity": 0.1,
        "contrast": 1.1,
    }

    band_frequency = 0.04
    lenticel_threshold = 0.6

    def layer_value(self, wx, wy, params, noise):
        base = fbm(noise, wx, wy, params.noise)

        band_phase = noise.sample(wx * 0.005, 0.0) * 10.0
        band = np.sin((wy * self.band_frequency + band_phase) * np.pi * 2.0) * 0.5 + 0.5

        lenticel = noise.sample(wx * 0.03, wy * 0.015)
        mask = np.where(lenticel > self.lenticel_threshold, (lenticel - self.lenticel_threshold) * 2.5, 0.0)

        value = 0.5 + base * 0.3
        value = mix_noise(value, band * 0.6 + 0.4, 0.15)
        value = value * (1.0 - mask * 0.15)
        highlight = fbm(noise, wx * 0.5, wy * 0.5, replace(params.noise, octaves=2))
        return value + highlight * 0.1


SPECIES_CLASSES: Tuple[type, ...] = (PineBark, OakBark, BirchBark, MapleBark, CherryBark)

SPECIES_DEFAULTS: Dict[str, Mapping[str, Any]] = {cls.name: cls.defaults for cls in SPECIES_CLASSES}


__all__ = [
    "DEFAULT_SEED_RANGE",
    "random_seed",
    "BarkSpecies",
    "PineBark",
    "OakBark",
    "BirchBark",
    "MapleBark",
    "CherryBark",
    "SPECIES_CLASSES",
    "SPECIES_DEFAULTS",
]
