#!/usr/bin/env python3
"""
Bark texture validator tool.

Extracts texture features from an existing image and either classifies it
against every registered species or validates it as one species.

Exit codes:
    0  classified, or validation passed
    1  validation failed (score below the species' confidence threshold)
    2  the image could not be read, or another error occurred

Usage:
    python -m barkgen.tools.validate_texture <image_path> [--species NAME] [--json]

RELEVANT FILES: python/barkgen/classifier.py, python/barkgen/features.py
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PIL import UnidentifiedImageError

from ..classifier import (
    ClassificationResult,
    SpeciesClassifier,
    ValidationResult,
    defined_species,
    get_feature_ranges,
)
from ..errors import BarkgenError, UnknownSpeciesError
from ..export import load_png_rgba, read_png_metadata
from ..features import FeatureVector


def print_classification(image_path: Path, features: FeatureVector, result: ClassificationResult) -> None:
    print(f"Classifying: {image_path}")
    print("=" * 60)
    for name, value in features.ranged().items():
        print(f"  {name:18s} {value:.3f}")
    print()
    print(f"Primary: {result.primary.species} ({result.primary.confidence:.3f})")
    for alt in result.alternatives:
        print(f"  then   {alt.species} ({alt.confidence:.3f})")
    if result.mismatches:
        print("\nOut of range for primary:")
        for m in result.mismatches:
            print(f"  • {m.feature}: {m.actual:.3f} not in [{m.expected[0]}, {m.expected[1]}]")
    print("=" * 60)


def print_validation(image_path: Path, species: str, result: ValidationResult) -> None:
    print(f"Validating {image_path} as {species}")
    print("=" * 60)
    for name, match in result.feature_matches.items():
        mark = "ok " if match.in_range else "out"
        print(f"  [{mark}] {name:18s} {match.value:.3f}  expected [{match.expected[0]}, {match.expected[1]}]")
    print(f"\nConfidence: {result.confidence:.3f}")
    if result.suggestions:
        print("\nSuggestions:")
        for s in result.suggestions:
            print(f"  • {s}")
    print()
    print("VALIDATION PASSED" if result.is_valid else "VALIDATION FAILED")
    print("=" * 60)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = argparse.ArgumentParser(
        description="Classify or validate a bark texture image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Which species does this texture look like?
  python -m barkgen.tools.validate_texture bark.png

  # Does it pass as birch? Print machine-readable output
  python -m barkgen.tools.validate_texture bark.png --species birch --json
        """,
    )
    parser.add_argument("image", type=Path, help="image file to analyze")
    parser.add_argument("--species", default=None, help="validate against this species instead of classifying")
    parser.add_argument("--json", action="store_true", help="print results as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        rgba = load_png_rgba(args.image)
        metadata = read_png_metadata(args.image) if args.image.suffix.lower() == ".png" else None
    except (OSError, UnidentifiedImageError) as exc:
        print(f"error: failed to open image: {exc}", file=sys.stderr)
        return 2

    classifier = SpeciesClassifier()
    try:
        features = classifier.extract_features(rgba)
    except BarkgenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.species is None:
        result = classifier.classify_features(features)
        if args.json:
            print(json.dumps({"image": str(args.image), "metadata": metadata, **result.to_dict()}, indent=2))
        else:
            print_classification(args.image, features, result)
        return 0

    if get_feature_ranges(args.species) is None:
        print(f"error: {UnknownSpeciesError(args.species, defined_species())}", file=sys.stderr)
        return 2

    validation = classifier.validate_features(features, args.species)
    if args.json:
        payload = {"image": str(args.image), "species": args.species, "features": features.to_dict()}
        payload.update(validation.to_dict())
        print(json.dumps(payload, indent=2))
    else:
        print_validation(args.image, args.species, validation)
    return 0 if validation.is_valid else 1


if __name__ == "__main__":
    sys.exit(main())
