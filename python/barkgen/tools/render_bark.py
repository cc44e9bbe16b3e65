#!/usr/bin/env python3
"""
Bark texture renderer tool.

Renders one species texture to a PNG with embedded generation metadata,
optionally classifying the result and writing a JSON sidecar next to it.

Usage:
    python -m barkgen.tools.render_bark --species pine --seed 42 --size 256 --out bark.png

RELEVANT FILES: python/barkgen/generator.py, python/barkgen/export.py
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import read_params_file
from ..errors import BarkgenError
from ..generator import BarkGenerator
from .. import presets


def _progress_printer(percent: float, label: Optional[str]) -> None:
    print(f"\r[{percent:5.1f}%] {label or ''}", end="", file=sys.stderr, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a procedural tree-bark texture to PNG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 256x256 pine texture with a fixed seed
  python -m barkgen.tools.render_bark --species pine --seed 42 --out pine.png

  # Oak with params from a JSON file, classified, with a JSON sidecar
  python -m barkgen.tools.render_bark --species oak --params oak.json --classify --sidecar --out oak.png
        """,
    )
    parser.add_argument("--species", default="pine", help=f"species preset ({', '.join(presets.available())})")
    parser.add_argument("--seed", type=int, default=None, help="noise seed (random when omitted)")
    parser.add_argument("--size", type=int, default=256, help="texture width in pixels")
    parser.add_argument("--height", type=int, default=None, help="texture height (defaults to --size)")
    parser.add_argument("--params", type=Path, default=None, help="JSON file merged over the species defaults")
    parser.add_argument("--out", type=Path, default=Path("bark.png"), help="output PNG path")
    parser.add_argument("--classify", action="store_true", help="classify the texture and embed the result")
    parser.add_argument("--sidecar", action="store_true", help="also write <out>.json metadata")
    parser.add_argument("--progress", action="store_true", help="render in chunks and print progress")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        overrides = None
        if args.params is not None:
            overrides = {k: v for k, v in read_params_file(args.params).items() if k != "species"}
        generator = BarkGenerator(args.species, params=overrides, seed=args.seed)
        width = args.size
        height = args.height if args.height is not None else args.size

        if args.progress:
            generator.generate_progressive(width, height, on_progress=_progress_printer)
            print(file=sys.stderr)
        else:
            generator.generate(width, height)

        classification = None
        if args.classify:
            classification = generator.classify()
            primary = classification.primary
            print(f"Classified as {primary.species} ({primary.confidence:.2f})")

        out = generator.export_png(args.out, classification=classification, sidecar=args.sidecar)
    except (BarkgenError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(f"Wrote {out} (species={generator.species}, seed={generator.get_params().noise.seed})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
