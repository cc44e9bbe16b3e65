# python/barkgen/config.py
# Bark parameter structures, deep-merge parsing and range validation
# Exists so every parameter source (presets, JSON files, partial UI updates) lands in one validated shape
# RELEVANT FILES: python/barkgen/presets.py, python/barkgen/generator.py, tests/test_config.py
from __future__ import annotations

import copy
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import InvalidParameterError

HSBColor = Tuple[float, float, float]
ParamsSource = Union["BarkParams", Mapping[str, Any], str, Path, None]

_DISTANCE_FUNCTIONS: Dict[str, str] = {
    "euclidean": "euclidean",
    "euclid": "euclidean",
    "l2": "euclidean",
    "manhattan": "manhattan",
    "taxicab": "manhattan",
    "cityblock": "manhattan",
    "l1": "manhattan",
    "chebyshev": "chebyshev",
    "chessboard": "chebyshev",
    "linf": "chebyshev",
}


def _normalize_key(value: Any) -> str:
    return "".join(
        c
        for c in str(value).strip().lower()
        if c not in {"-", "_", " ", "."}
    )


def _normalize_choice(value: Any, mapping: Mapping[str, str], label: str) -> str:
    key = _normalize_key(value)
    if key not in mapping:
        raise InvalidParameterError(f"Unknown {label}: {value!r}")
    return mapping[key]


def _normalized(data: Mapping[str, Any], label: str) -> Dict[str, Any]:
    if not isinstance(data, Mapping):
        raise InvalidParameterError(f"{label} must be a mapping, got {type(data).__name__}")
    return {_normalize_key(k): v for k, v in data.items()}


def _to_float(value: Any, label: str) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"{label} must be a number, got {value!r}") from exc
    if not math.isfinite(out):
        raise InvalidParameterError(f"{label} must be finite, got {value!r}")
    return out


def _to_int(value: Any, label: str) -> int:
    f = _to_float(value, label)
    if not f.is_integer():
        raise InvalidParameterError(f"{label} must be an integer, got {value!r}")
    return int(f)


def _to_hsb(value: Any, label: str) -> HSBColor:
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return (
            _to_float(value[0], f"{label}[0]"),
            _to_float(value[1], f"{label}[1]"),
            _to_float(value[2], f"{label}[2]"),
        )
    raise InvalidParameterError(f"{label} must be a sequence of three numbers (H, S, B)")


def _check_range(label: str, value: float, lo: float, hi: float) -> None:
    if not (lo <= value <= hi):
        raise InvalidParameterError(f"{label} must be within [{lo}, {hi}], got {value}")


def _check_positive(label: str, value: float) -> None:
    if not value > 0.0:
        raise InvalidParameterError(f"{label} must be > 0, got {value}")


@dataclass
class NoiseParams:
    scale: float = 0.015
    octaves: int = 5
    lacunarity: float = 2.2
    persistence: float = 0.5
    seed: int = 0

    def to_dict(self) -> dict:
        return {
            "scale": self.scale,
            "octaves": self.octaves,
            "lacunarity": self.lacunarity,
            "persistence": self.persistence,
            "seed": self.seed,
        }

    def validate(self) -> None:
        _check_positive("noise.scale", self.scale)
        _check_range("noise.octaves", self.octaves, 1, 8)
        _check_range("noise.lacunarity", self.lacunarity, 1.5, 3.0)
        _check_range("noise.persistence", self.persistence, 0.2, 0.8)
        if self.seed < 0:
            raise InvalidParameterError(f"noise.seed must be non-negative, got {self.seed}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["NoiseParams"] = None) -> "NoiseParams":
        base = copy.deepcopy(default) if default is not None else cls()
        d = _normalized(data, "noise")
        if "scale" in d:
            base.scale = _to_float(d["scale"], "noise.scale")
        if "octaves" in d:
            base.octaves = _to_int(d["octaves"], "noise.octaves")
        if "lacunarity" in d:
            base.lacunarity = _to_float(d["lacunarity"], "noise.lacunarity")
        if "persistence" in d:
            base.persistence = _to_float(d["persistence"], "noise.persistence")
        if "seed" in d:
            base.seed = _to_int(d["seed"], "noise.seed")
        return base


@dataclass
class WarpParams:
    strength: float = 0.8
    iterations: int = 2
    scale: float = 0.008

    def to_dict(self) -> dict:
        return {
            "strength": self.strength,
            "iterations": self.iterations,
            "scale": self.scale,
        }

    def validate(self) -> None:
        if self.strength < 0.0:
            raise InvalidParameterError(f"warp.strength must be non-negative, got {self.strength}")
        _check_range("warp.iterations", self.iterations, 1, 3)
        _check_positive("warp.scale", self.scale)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["WarpParams"] = None) -> "WarpParams":
        base = copy.deepcopy(default) if default is not None else cls()
        d = _normalized(data, "warp")
        if "strength" in d:
            base.strength = _to_float(d["strength"], "warp.strength")
        if "iterations" in d:
            base.iterations = _to_int(d["iterations"], "warp.iterations")
        if "scale" in d:
            base.scale = _to_float(d["scale"], "warp.scale")
        return base


@dataclass
class VoronoiParams:
    cell_density: float = 0.025
    distance_function: str = "euclidean"
    edge_width: float = 0.15
    jitter: float = 0.8

    def to_dict(self) -> dict:
        return {
            "cell_density": self.cell_density,
            "distance_function": self.distance_function,
            "edge_width": self.edge_width,
            "jitter": self.jitter,
        }

    def validate(self) -> None:
        _check_positive("voronoi.cell_density", self.cell_density)
        if self.distance_function not in set(_DISTANCE_FUNCTIONS.values()):
            raise InvalidParameterError(f"Unknown voronoi distance function: {self.distance_function!r}")
        _check_range("voronoi.edge_width", self.edge_width, 0.0, 0.4)
        _check_range("voronoi.jitter", self.jitter, 0.0, 1.0)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["VoronoiParams"] = None) -> "VoronoiParams":
        base = copy.deepcopy(default) if default is not None else cls()
        d = _normalized(data, "voronoi")
        if "celldensity" in d:
            base.cell_density = _to_float(d["celldensity"], "voronoi.cell_density")
        if "distancefunction" in d:
            base.distance_function = _normalize_choice(
                d["distancefunction"], _DISTANCE_FUNCTIONS, "voronoi distance function"
            )
        elif "distance" in d:
            base.distance_function = _normalize_choice(
                d["distance"], _DISTANCE_FUNCTIONS, "voronoi distance function"
            )
        if "edgewidth" in d:
            base.edge_width = _to_float(d["edgewidth"], "voronoi.edge_width")
        if "jitter" in d:
            base.jitter = _to_float(d["jitter"], "voronoi.jitter")
        return base


@dataclass
class DirectionalParams:
    vertical_bias: float = 0.6
    horizontal_bias: float = 0.1
    angle: float = 0.0

    def to_dict(self) -> dict:
        return {
            "vertical_bias": self.vertical_bias,
            "horizontal_bias": self.horizontal_bias,
            "angle": self.angle,
        }

    def validate(self) -> None:
        _check_range("direction.vertical_bias", self.vertical_bias, 0.0, 1.0)
        _check_range("direction.horizontal_bias", self.horizontal_bias, 0.0, 1.0)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["DirectionalParams"] = None) -> "DirectionalParams":
        base = copy.deepcopy(default) if default is not None else cls()
        d = _normalized(data, "direction")
        if "verticalbias" in d:
            base.vertical_bias = _to_float(d["verticalbias"], "direction.vertical_bias")
        if "horizontalbias" in d:
            base.horizontal_bias = _to_float(d["horizontalbias"], "direction.horizontal_bias")
        if "angle" in d:
            base.angle = _to_float(d["angle"], "direction.angle")
        return base


@dataclass
class ColorPalette:
    """Three-stop HSB gradient plus per-pixel hue jitter.

    Colors are (hue, saturation, brightness) with hue in [0, 360) and
    saturation/brightness in [0, 100].
    """

    base_color: HSBColor = (20.0, 45.0, 35.0)
    shadow_color: HSBColor = (15.0, 55.0, 20.0)
    highlight_color: HSBColor = (25.0, 30.0, 50.0)
    color_variation: float = 8.0

    def to_dict(self) -> dict:
        return {
            "base_color": list(self.base_color),
            "shadow_color": list(self.shadow_color),
            "highlight_color": list(self.highlight_color),
            "color_variation": self.color_variation,
        }

    def validate(self) -> None:
        for label, color in (
            ("colors.base_color", self.base_color),
            ("colors.shadow_color", self.shadow_color),
            ("colors.highlight_color", self.highlight_color),
        ):
            h, s, b = color
            if not (0.0 <= h < 360.0):
                raise InvalidParameterError(f"{label} hue must be within [0, 360), got {h}")
            _check_range(f"{label} saturation", s, 0.0, 100.0)
            _check_range(f"{label} brightness", b, 0.0, 100.0)
        _check_range("colors.color_variation", self.color_variation, 0.0, 30.0)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["ColorPalette"] = None) -> "ColorPalette":
        base = copy.deepcopy(default) if default is not None else cls()
        d = _normalized(data, "colors")
        if "basecolor" in d:
            base.base_color = _to_hsb(d["basecolor"], "colors.base_color")
        if "shadowcolor" in d:
            base.shadow_color = _to_hsb(d["shadowcolor"], "colors.shadow_color")
        if "highlightcolor" in d:
            base.highlight_color = _to_hsb(d["highlightcolor"], "colors.highlight_color")
        if "colorvariation" in d:
            base.color_variation = _to_float(d["colorvariation"], "colors.color_variation")
        return base


_NESTED = {
    "noise": ("noise", NoiseParams),
    "warp": ("warp", WarpParams),
    "voronoi": ("voronoi", VoronoiParams),
    "direction": ("direction", DirectionalParams),
    "colors": ("colors", ColorPalette),
    "palette": ("colors", ColorPalette),
}


@dataclass
class BarkParams:
    """Complete parameter set for one bark texture.

    Each nested struct merges independently in :meth:`merge`, so a partial
    update such as ``{"noise": {"scale": 0.05}}`` keeps ``noise.seed`` and
    every other field untouched.
    """

    species: str = "pine"
    noise: NoiseParams = field(default_factory=NoiseParams)
    warp: WarpParams = field(default_factory=WarpParams)
    voronoi: VoronoiParams = field(default_factory=VoronoiParams)
    direction: DirectionalParams = field(default_factory=DirectionalParams)
    colors: ColorPalette = field(default_factory=ColorPalette)
    ridge_intensity: float = 0.4
    contrast: float = 1.3

    def to_dict(self) -> dict:
        return {
            "species": self.species,
            "noise": self.noise.to_dict(),
            "warp": self.warp.to_dict(),
            "voronoi": self.voronoi.to_dict(),
            "direction": self.direction.to_dict(),
            "colors": self.colors.to_dict(),
            "ridge_intensity": self.ridge_intensity,
            "contrast": self.contrast,
        }

    def copy(self) -> "BarkParams":
        return copy.deepcopy(self)

    def validate(self) -> None:
        if not str(self.species).strip():
            raise InvalidParameterError("species tag must be a non-empty string")
        self.noise.validate()
        self.warp.validate()
        self.voronoi.validate()
        self.direction.validate()
        self.colors.validate()
        _check_range("ridge_intensity", self.ridge_intensity, 0.0, 1.0)
        _check_range("contrast", self.contrast, 0.5, 2.0)

    def merge(self, partial: Union["BarkParams", Mapping[str, Any]]) -> "BarkParams":
        """Return a new BarkParams with ``partial`` deep-merged over this one."""
        if isinstance(partial, BarkParams):
            return partial.copy()
        return BarkParams.from_mapping(partial, self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["BarkParams"] = None) -> "BarkParams":
        base = copy.deepcopy(default) if default is not None else cls()
        d = _normalized(data, "params")
        if "species" in d:
            base.species = str(d["species"])
        for key, (attr, struct) in _NESTED.items():
            if key not in d or d[key] is None:
                continue
            value = d[key]
            if isinstance(value, struct):
                setattr(base, attr, copy.deepcopy(value))
            else:
                setattr(base, attr, struct.from_mapping(value, getattr(base, attr)))
        if "ridgeintensity" in d:
            base.ridge_intensity = _to_float(d["ridgeintensity"], "ridge_intensity")
        if "contrast" in d:
            base.contrast = _to_float(d["contrast"], "contrast")
        return base


def read_params_file(path: Union[str, Path]) -> Mapping[str, Any]:
    """Read a (possibly partial) params mapping from a JSON file."""
    path = Path(path)
    if path.suffix.lower() not in {".json", ""}:
        raise InvalidParameterError(f"Unsupported bark params file format: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidParameterError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise InvalidParameterError(f"{path} must contain a JSON object")
    return data


def load_bark_params(source: ParamsSource = None, overrides: Optional[Mapping[str, Any]] = None) -> BarkParams:
    if isinstance(source, BarkParams):
        params = source.copy()
    elif isinstance(source, Mapping):
        params = BarkParams.from_mapping(source)
    elif isinstance(source, (str, Path)):
        params = BarkParams.from_mapping(read_params_file(Path(source)))
    elif source is None:
        params = BarkParams()
    else:
        raise TypeError("source must be BarkParams, mapping, path, or None")

    if overrides:
        params = params.merge(overrides)
    params.validate()
    return params


__all__ = [
    "HSBColor",
    "NoiseParams",
    "WarpParams",
    "VoronoiParams",
    "DirectionalParams",
    "ColorPalette",
    "BarkParams",
    "load_bark_params",
    "read_params_file",
]
