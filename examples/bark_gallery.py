# examples/bark_gallery.py
# Gallery of every species preset plus a two-species blend, each titled with its classification.
# This exists to eyeball preset look and classifier agreement side by side.
# RELEVANT FILES:python/barkgen/generator.py,python/barkgen/presets.py,python/barkgen/helpers/mpl_display.py,examples/_import_shim.py
#!/usr/bin/env python3
"""
Bark Species Gallery

Renders each registered species with a shared seed, classifies every texture
and lays the results out in one matplotlib figure. A blended species
(``--blend pine oak 0.5``) is appended as an extra panel.

Usage:
    python examples/bark_gallery.py
    python examples/bark_gallery.py --seed 7 --size 192 --out reports/gallery.png
    python examples/bark_gallery.py --blend birch cherry 0.3 --save-each out/
"""

import argparse
import sys
import time
from pathlib import Path

# Ensure in-repo imports work without install (dev convenience)
from _import_shim import ensure_repo_import

ensure_repo_import()

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from barkgen import BarkGenerator, SpeciesClassifier, presets, render_rgba, save_png
from barkgen.export import build_export_metadata
from barkgen.helpers import show_texture


def render_species(names, seed: int, size: int, save_dir=None):
    """Render and classify each species; returns a list of (label, rgba, classification)."""
    panels = []
    for name in names:
        t0 = time.perf_counter()
        gen = BarkGenerator(name, seed=seed)
        rgba = gen.generate(size, size)
        result = gen.classify()
        verdict = gen.validate()
        print(
            f"  {name:7s} -> {result.primary.species:7s} ({result.primary.confidence:.2f})"
            f"  self-check {'pass' if verdict.is_valid else 'fail'}  [{time.perf_counter() - t0:.2f}s]"
        )
        if save_dir is not None:
            gen.export_png(Path(save_dir) / f"{name}_{seed}.png", classification=result)
        panels.append((name, rgba, result))
    return panels


def render_blend(a: str, b: str, t: float, seed: int, size: int, save_dir=None):
    params = presets.interpolate_species(a, b, t, seed=seed)
    # a blend tag is not a registered species; shade with the nearer parent
    composer = presets.get_species(a if t < 0.5 else b)
    rgba = render_rgba(size, size, params, species=composer)
    result = SpeciesClassifier().classify(rgba)
    print(f"  {params.species:7s} -> {result.primary.species:7s} ({result.primary.confidence:.2f})")
    if save_dir is not None:
        save_png(Path(save_dir) / f"{params.species}_{seed}.png", rgba, build_export_metadata(params.species, params, result))
    return params.species, rgba, result


def main() -> int:
    parser = argparse.ArgumentParser(description="Render a gallery of bark species")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--size", type=int, default=128)
    parser.add_argument("--blend", nargs=3, metavar=("A", "B", "T"), default=["pine", "oak", "0.5"])
    parser.add_argument("--out", type=Path, default=Path("bark_gallery.png"))
    parser.add_argument("--save-each", type=Path, default=None, help="directory for per-species PNGs")
    args = parser.parse_args()

    if args.save_each is not None:
        args.save_each.mkdir(parents=True, exist_ok=True)

    print(f"Rendering {len(presets.available())} species at {args.size}x{args.size}, seed {args.seed}...")
    panels = render_species(presets.available(), args.seed, args.size, args.save_each)
    a, b, t = args.blend
    panels.append(render_blend(a, b, float(t), args.seed, args.size, args.save_each))

    cols = 3
    rows = -(-len(panels) // cols)
    fig, axes = plt.subplots(rows, cols, figsize=(cols * 3.2, rows * 3.4))
    for ax in axes.flat[len(panels):]:
        ax.set_axis_off()
    for ax, (label, rgba, result) in zip(axes.flat, panels):
        show_texture(rgba, ax=ax, title=f"{label}\n-> {result.primary.species} {result.primary.confidence:.0%}")
    fig.tight_layout()

    args.out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(args.out, dpi=100)
    print(f"Saved gallery to {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
