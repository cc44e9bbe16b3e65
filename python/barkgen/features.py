# python/barkgen/features.py
# Feature vector and extraction from finished RGBA textures
# Exists to summarize a texture with a handful of scalar measurements the classifier can score
# RELEVANT FILES: python/barkgen/classifier.py, python/barkgen/_validate.py, tests/test_features.py
"""
Texture feature extraction.

:func:`extract_features` is pure over its input buffer: it never modifies the
pixels and two calls on the same buffer return equal vectors. All reductions
are numpy reductions over fixed-shape arrays, so their accumulation order
does not depend on scheduling.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Tuple

import numpy as np
from scipy import ndimage

from . import _validate
from .errors import InvalidParameterError

RANGED_FEATURES: Tuple[str, ...] = (
    "vertical_energy",
    "horizontal_energy",
    "ridge_density",
    "plate_size",
    "color_variance",
)

FEATURE_DESCRIPTIONS: Dict[str, str] = {
    "vertical_energy": "Strength of vertical patterns (fissures, ridges)",
    "horizontal_energy": "Strength of horizontal patterns (bands, lenticels)",
    "ridge_density": "Overall roughness and ridge frequency",
    "plate_size": "Average size of bark plates or scales",
    "color_variance": "Variation in color/luminance across texture",
}

ORIENTATION_BINS = 8

# Empirical normalizers for gradient statistics
MAX_DIRECTIONAL_GRADIENT = 0.3
MAX_RIDGE_GRADIENT = 0.2
RUN_THRESHOLD = 0.1
HUE_MIN_DELTA = 0.01
EDGE_MIN_MAGNITUDE = 0.02

# Correlation kernels (row offset, column offset) over the 3x3 neighbourhood.
# The x kernel responds to horizontal change, i.e. vertical structure.
_KERNEL_X = np.array(
    [
        [-2.0, 0.0, 2.0],
        [-1.0, 0.0, 1.0],
        [-1.0, 0.0, 1.0],
    ]
)
_KERNEL_Y = np.array(
    [
        [-2.0, -1.0, -1.0],
        [0.0, 0.0, 0.0],
        [2.0, 1.0, 1.0],
    ]
)


@dataclass(frozen=True)
class FeatureVector:
    vertical_energy: float
    horizontal_energy: float
    ridge_density: float
    plate_size: float
    color_variance: float
    mean_luminance: float
    dominant_hue: float
    edge_orientations: Tuple[float, ...]

    def ranged(self) -> Dict[str, float]:
        """The five features scored against species ranges."""
        return {name: getattr(self, name) for name in RANGED_FEATURES}

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["edge_orientations"] = list(self.edge_orientations)
        return out

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FeatureVector":
        edges = tuple(float(v) for v in data.get("edge_orientations", (0.0,) * ORIENTATION_BINS))
        if len(edges) != ORIENTATION_BINS:
            raise InvalidParameterError(f"edge_orientations must have {ORIENTATION_BINS} bins, got {len(edges)}")
        missing = [name for name in RANGED_FEATURES if name not in data]
        if missing:
            raise InvalidParameterError(f"feature mapping is missing {', '.join(missing)}")
        return cls(
            vertical_energy=float(data["vertical_energy"]),
            horizontal_energy=float(data["horizontal_energy"]),
            ridge_density=float(data["ridge_density"]),
            plate_size=float(data["plate_size"]),
            color_variance=float(data["color_variance"]),
            mean_luminance=float(data.get("mean_luminance", 0.0)),
            dominant_hue=float(data.get("dominant_hue", 0.0)),
            edge_orientations=edges,
        )


def to_grayscale(rgba: np.ndarray) -> np.ndarray:
    """Luma in [0, 1] as float64, shape (H, W)."""
    rgb = rgba[..., :3].astype(np.float64)
    return (0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]) / 255.0


def directional_energy(gray: np.ndarray) -> Tuple[float, float]:
    """Return ``(vertical_energy, horizontal_energy)``.

    Both are 0.5 when there are no interior pixels or the image is flat.
    """
    h, w = gray.shape
    if h < 3 or w < 3 or float(gray.max()) == float(gray.min()):
        return 0.5, 0.5
    gx = ndimage.correlate(gray, _KERNEL_X, mode="nearest")[1:-1, 1:-1]
    gy = ndimage.correlate(gray, _KERNEL_Y, mode="nearest")[1:-1, 1:-1]
    vertical_sum = float(np.abs(gx).sum())
    horizontal_sum = float(np.abs(gy).sum())
    if vertical_sum + horizontal_sum == 0.0:
        return 0.5, 0.5
    count = gx.size
    return (
        min(1.0, (vertical_sum / count) / MAX_DIRECTIONAL_GRADIENT),
        min(1.0, (horizontal_sum / count) / MAX_DIRECTIONAL_GRADIENT),
    )


def _central_gradients(gray: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    gx = gray[1:-1, 2:] - gray[1:-1, :-2]
    gy = gray[2:, 1:-1] - gray[:-2, 1:-1]
    return gx, gy


def ridge_density(gray: np.ndarray) -> float:
    h, w = gray.shape
    if h < 3 or w < 3:
        return 0.0
    gx, gy = _central_gradients(gray)
    magnitude = np.sqrt(gx * gx + gy * gy)
    return min(1.0, float(magnitude.mean()) / MAX_RIDGE_GRADIENT)


def plate_size(gray: np.ndarray) -> float:
    """Average row run length (pixels within 0.1 of their left neighbour), scaled by width."""
    h, w = gray.shape
    breaks = int(np.count_nonzero(np.abs(np.diff(gray, axis=1)) >= RUN_THRESHOLD))
    run_count = h + breaks
    avg_run = (w * h) / run_count
    return min(1.0, avg_run / w * 3.0)


def color_stats(gray: np.ndarray) -> Tuple[float, float]:
    """Return ``(color_variance, mean_luminance)``."""
    mean = float(gray.mean())
    variance = float(((gray - mean) ** 2).mean())
    return min(1.0, variance * 10.0), mean


def dominant_hue(rgba: np.ndarray) -> float:
    """Linear mean of per-pixel hue in degrees, skipping near-gray pixels."""
    rgb = rgba[..., :3].reshape(-1, 3).astype(np.float64) / 255.0
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]
    mx = rgb.max(axis=1)
    mn = rgb.min(axis=1)
    delta = mx - mn
    keep = delta > HUE_MIN_DELTA
    if not np.any(keep):
        return 0.0
    r, g, b, mx, delta = r[keep], g[keep], b[keep], mx[keep], delta[keep]

    hue = np.where(
        mx == r,
        np.fmod((g - b) / delta, 6.0),
        np.where(mx == g, (b - r) / delta + 2.0, (r - g) / delta + 4.0),
    )
    hue = np.mod(hue * 60.0 + 360.0, 360.0)
    return float(hue.mean())


def edge_orientations(gray: np.ndarray) -> Tuple[float, ...]:
    """Magnitude-weighted 8-bin histogram of gradient direction over [0, 2pi)."""
    h, w = gray.shape
    bins = np.zeros(ORIENTATION_BINS, dtype=np.float64)
    if h >= 3 and w >= 3:
        gx, gy = _central_gradients(gray)
        magnitude = np.sqrt(gx * gx + gy * gy)
        strong = magnitude > EDGE_MIN_MAGNITUDE
        if np.any(strong):
            angle = np.arctan2(gy[strong], gx[strong])
            angle = np.where(angle < 0.0, angle + 2.0 * math.pi, angle)
            index = np.floor(angle / (math.pi / 4.0)).astype(np.int64) % ORIENTATION_BINS
            bins = np.bincount(index, weights=magnitude[strong], minlength=ORIENTATION_BINS)
    total = float(bins.sum())
    if total > 0.0:
        bins = bins / total
    return tuple(float(v) for v in bins)


class FeatureExtractor:
    """Stateless extractor; kept as a class so classifiers can swap it out."""

    def extract(self, buffer: np.ndarray) -> FeatureVector:
        rgba = _validate.rgba_buffer(buffer)
        gray = to_grayscale(rgba)
        vertical, horizontal = directional_energy(gray)
        variance, mean = color_stats(gray)
        return FeatureVector(
            vertical_energy=vertical,
            horizontal_energy=horizontal,
            ridge_density=ridge_density(gray),
            plate_size=plate_size(gray),
            color_variance=variance,
            mean_luminance=mean,
            dominant_hue=dominant_hue(rgba),
            edge_orientations=edge_orientations(gray),
        )


def extract_features(buffer: np.ndarray) -> FeatureVector:
    return FeatureExtractor().extract(buffer)


__all__ = [
    "RANGED_FEATURES",
    "FEATURE_DESCRIPTIONS",
    "ORIENTATION_BINS",
    "FeatureVector",
    "FeatureExtractor",
    "extract_features",
    "to_grayscale",
    "directional_energy",
    "ridge_density",
    "plate_size",
    "color_stats",
    "dominant_hue",
    "edge_orientations",
]
