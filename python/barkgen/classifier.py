# python/barkgen/classifier.py
# Species feature ranges, range scoring, classification and validation
# Exists to judge which species a texture resembles and how to tune params toward a target species
# RELEVANT FILES: python/barkgen/features.py, python/barkgen/generator.py, tests/test_classifier.py
"""
Rule-based species classifier.

Each species declares an inclusive ``(min, max)`` range for the five ranged
features. A feature inside its range earns full credit; outside, it earns
half of ``max(0, 1 - distance / range_size)``. The score is the mean over the
five features, and a texture validates as a species when the score reaches
that species' confidence threshold.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

from .errors import UnknownSpeciesError
from .features import RANGED_FEATURES, FeatureExtractor, FeatureVector

logger = logging.getLogger(__name__)

Range = Tuple[float, float]


@dataclass(frozen=True)
class SpeciesFeatureRanges:
    species: str
    features: Mapping[str, Range]
    confidence_threshold: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "species": self.species,
            "features": {k: list(v) for k, v in self.features.items()},
            "confidence_threshold": self.confidence_threshold,
        }


def _ranges(species: str, threshold: float, **features: Range) -> SpeciesFeatureRanges:
    return SpeciesFeatureRanges(species=species, features=dict(features), confidence_threshold=threshold)


# Registration order breaks classification ties.
SPECIES_FEATURE_RANGES: Dict[str, SpeciesFeatureRanges] = {
    "pine": _ranges(
        "pine", 0.6,
        vertical_energy=(0.5, 0.85),
        horizontal_energy=(0.1, 0.4),
        ridge_density=(0.3, 0.6),
        plate_size=(0.15, 0.4),
        color_variance=(0.15, 0.4),
    ),
    "oak": _ranges(
        "oak", 0.55,
        vertical_energy=(0.3, 0.6),
        horizontal_energy=(0.25, 0.55),
        ridge_density=(0.5, 0.85),
        plate_size=(0.2, 0.5),
        color_variance=(0.25, 0.5),
    ),
    "birch": _ranges(
        "birch", 0.65,
        vertical_energy=(0.05, 0.3),
        horizontal_energy=(0.4, 0.8),
        ridge_density=(0.05, 0.25),
        plate_size=(0.0, 0.15),
        color_variance=(0.1, 0.35),
    ),
    "maple": _ranges(
        "maple", 0.55,
        vertical_energy=(0.35, 0.65),
        horizontal_energy=(0.15, 0.45),
        ridge_density=(0.25, 0.5),
        plate_size=(0.2, 0.45),
        color_variance=(0.15, 0.35),
    ),
    "cherry": _ranges(
        "cherry", 0.6,
        vertical_energy=(0.1, 0.35),
        horizontal_energy=(0.3, 0.6),
        ridge_density=(0.05, 0.2),
        plate_size=(0.0, 0.2),
        color_variance=(0.1, 0.3),
    ),
}

# feature -> (hint when too low, hint when too high)
ADJUSTMENT_SUGGESTIONS: Dict[str, Dict[str, str]] = {
    "vertical_energy": {
        "increase": "Increase direction.vertical_bias or add more ridged noise",
        "decrease": "Decrease direction.vertical_bias or reduce ridge intensity",
    },
    "horizontal_energy": {
        "increase": "Increase direction.horizontal_bias",
        "decrease": "Decrease direction.horizontal_bias",
    },
    "ridge_density": {
        "increase": "Increase ridge_intensity or noise.octaves",
        "decrease": "Decrease ridge_intensity or reduce contrast",
    },
    "plate_size": {
        "increase": "Decrease voronoi.cell_density (larger cells)",
        "decrease": "Increase voronoi.cell_density (smaller cells)",
    },
    "color_variance": {
        "increase": "Increase contrast or add more noise detail",
        "decrease": "Decrease contrast or reduce noise.persistence",
    },
}


def defined_species() -> List[str]:
    return list(SPECIES_FEATURE_RANGES.keys())


def get_feature_ranges(species: str) -> Optional[SpeciesFeatureRanges]:
    return SPECIES_FEATURE_RANGES.get(str(species).strip().lower())


@dataclass(frozen=True)
class SpeciesScore:
    species: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {"species": self.species, "confidence": self.confidence}


@dataclass(frozen=True)
class FeatureMismatch:
    feature: str
    actual: float
    expected: Range

    def to_dict(self) -> Dict[str, Any]:
        return {"feature": self.feature, "actual": self.actual, "expected": list(self.expected)}


@dataclass(frozen=True)
class FeatureMatch:
    value: float
    in_range: bool
    expected: Range

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "in_range": self.in_range, "expected": list(self.expected)}


@dataclass(frozen=True)
class RangeScore:
    score: float
    matches: int
    total: int


@dataclass(frozen=True)
class ClassificationResult:
    primary: SpeciesScore
    alternatives: Tuple[SpeciesScore, ...] = ()
    mismatches: Tuple[FeatureMismatch, ...] = ()
    features: Optional[FeatureVector] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "primary": self.primary.to_dict(),
            "alternatives": [s.to_dict() for s in self.alternatives],
            "mismatches": [m.to_dict() for m in self.mismatches],
        }
        if self.features is not None:
            out["features"] = self.features.to_dict()
        return out


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    confidence: float
    feature_matches: Dict[str, FeatureMatch] = field(default_factory=dict)
    suggestions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "confidence": self.confidence,
            "feature_matches": {k: m.to_dict() for k, m in self.feature_matches.items()},
            "suggestions": list(self.suggestions),
        }


def _in_range(value: float, bounds: Range) -> bool:
    return bounds[0] <= value <= bounds[1]


def score_against_ranges(features: FeatureVector, ranges: SpeciesFeatureRanges) -> RangeScore:
    matches = 0
    total = 0
    weighted = 0.0
    for name in RANGED_FEATURES:
        if name not in ranges.features:
            continue
        lo, hi = ranges.features[name]
        value = getattr(features, name)
        total += 1
        if lo <= value <= hi:
            matches += 1
            weighted += 1.0
        else:
            size = hi - lo
            distance = min(abs(value - lo), abs(value - hi))
            partial = max(0.0, 1.0 - distance / size) if size > 0 else 0.0
            weighted += partial * 0.5
    return RangeScore(score=weighted / total if total else 0.0, matches=matches, total=total)


def find_mismatches(features: FeatureVector, ranges: SpeciesFeatureRanges) -> Tuple[FeatureMismatch, ...]:
    out = []
    for name in RANGED_FEATURES:
        if name not in ranges.features:
            continue
        bounds = ranges.features[name]
        value = getattr(features, name)
        if not _in_range(value, bounds):
            out.append(FeatureMismatch(feature=name, actual=value, expected=tuple(bounds)))
    return tuple(out)


class SpeciesClassifier:
    """Score textures against every registered species' feature ranges."""

    def __init__(self, extractor: Optional[FeatureExtractor] = None) -> None:
        self.extractor = extractor if extractor is not None else FeatureExtractor()

    def extract_features(self, buffer: np.ndarray) -> FeatureVector:
        return self.extractor.extract(buffer)

    def classify(self, buffer: np.ndarray) -> ClassificationResult:
        return self.classify_features(self.extract_features(buffer))

    def classify_features(self, features: FeatureVector) -> ClassificationResult:
        scores = [
            SpeciesScore(species=name, confidence=score_against_ranges(features, ranges).score)
            for name, ranges in SPECIES_FEATURE_RANGES.items()
        ]
        # sorted() is stable, so ties keep registration order
        scores = sorted(scores, key=lambda s: s.confidence, reverse=True)
        primary = scores[0]
        mismatches = find_mismatches(features, SPECIES_FEATURE_RANGES[primary.species])
        logger.debug("classified as %s (%.3f)", primary.species, primary.confidence)
        return ClassificationResult(
            primary=primary,
            alternatives=tuple(scores[1:]),
            mismatches=mismatches,
            features=features,
        )

    def validate(self, buffer: np.ndarray, species: str) -> ValidationResult:
        if get_feature_ranges(species) is None:
            return self._unknown(species)
        return self.validate_features(self.extract_features(buffer), species)

    def validate_features(self, features: FeatureVector, species: str) -> ValidationResult:
        ranges = get_feature_ranges(species)
        if ranges is None:
            return self._unknown(species)

        result = score_against_ranges(features, ranges)
        matches: Dict[str, FeatureMatch] = {}
        suggestions: List[str] = []
        for name in RANGED_FEATURES:
            if name not in ranges.features:
                continue
            bounds = tuple(ranges.features[name])
            value = getattr(features, name)
            in_range = _in_range(value, bounds)
            matches[name] = FeatureMatch(value=value, in_range=in_range, expected=bounds)
            if not in_range and name in ADJUSTMENT_SUGGESTIONS:
                direction = "increase" if value < bounds[0] else "decrease"
                suggestions.append(f"{name}: {ADJUSTMENT_SUGGESTIONS[name][direction]}")

        return ValidationResult(
            is_valid=result.score >= ranges.confidence_threshold,
            confidence=result.score,
            feature_matches=matches,
            suggestions=tuple(suggestions),
        )

    def _unknown(self, species: str) -> ValidationResult:
        error = UnknownSpeciesError(species, defined_species())
        logger.debug("validate: %s", error)
        return ValidationResult(is_valid=False, confidence=0.0, suggestions=(str(error),))


__all__ = [
    "SpeciesFeatureRanges",
    "SPECIES_FEATURE_RANGES",
    "ADJUSTMENT_SUGGESTIONS",
    "defined_species",
    "get_feature_ranges",
    "SpeciesScore",
    "FeatureMismatch",
    "FeatureMatch",
    "RangeScore",
    "ClassificationResult",
    "ValidationResult",
    "score_against_ranges",
    "find_mismatches",
    "SpeciesClassifier",
]
