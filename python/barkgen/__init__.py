# python/barkgen/__init__.py
# Public Python API for procedural tree-bark synthesis and species classification
# Exists to re-export the generator, presets, rendering and analysis entry points in one place
# RELEVANT FILES: python/barkgen/generator.py, python/barkgen/presets.py, python/barkgen/classifier.py
__version__ = "0.1.0"

from . import presets
from .classifier import (
    ClassificationResult,
    FeatureMatch,
    FeatureMismatch,
    SpeciesClassifier,
    SpeciesFeatureRanges,
    SpeciesScore,
    ValidationResult,
    score_against_ranges,
)
from .colors import SPECIES_PALETTES, get_pixel_color, hsb_to_rgb, lerp_color, map_to_color
from .config import (
    BarkParams,
    ColorPalette,
    DirectionalParams,
    NoiseParams,
    VoronoiParams,
    WarpParams,
    load_bark_params,
)
from .errors import (
    BarkgenError,
    EncodingFailureError,
    InvalidParameterError,
    NoTextureAvailableError,
    UnknownSpeciesError,
)
from .export import build_export_metadata, read_png_metadata, save_png
from .features import FeatureExtractor, FeatureVector, extract_features
from .generator import BarkGenerator, create_generator
from .noise import PerlinNoise
from .render import RenderProgress, iter_render, render_progressive, render_rgba
from .species import BarkSpecies

__all__ = [
    "__version__",
    "presets",
    "BarkParams",
    "NoiseParams",
    "WarpParams",
    "VoronoiParams",
    "DirectionalParams",
    "ColorPalette",
    "load_bark_params",
    "PerlinNoise",
    "BarkSpecies",
    "SPECIES_PALETTES",
    "lerp_color",
    "map_to_color",
    "hsb_to_rgb",
    "get_pixel_color",
    "RenderProgress",
    "render_rgba",
    "iter_render",
    "render_progressive",
    "BarkGenerator",
    "create_generator",
    "FeatureVector",
    "FeatureExtractor",
    "extract_features",
    "SpeciesClassifier",
    "SpeciesFeatureRanges",
    "SpeciesScore",
    "FeatureMatch",
    "FeatureMismatch",
    "ClassificationResult",
    "ValidationResult",
    "score_against_ranges",
    "build_export_metadata",
    "save_png",
    "read_png_metadata",
    "BarkgenError",
    "InvalidParameterError",
    "UnknownSpeciesError",
    "NoTextureAvailableError",
    "EncodingFailureError",
]
