"""
python/barkgen/presets.py
Species preset registry for bark parameters.

Each registered species supplies a :class:`~barkgen.species.BarkSpecies`
composer and its default :class:`~barkgen.config.BarkParams`. Lookups are
case-insensitive and tolerate separators, so ``"Pine"``, ``" pine "`` and
``"PINE"`` resolve to the same entry. Unknown names raise
:class:`~barkgen.errors.UnknownSpeciesError` listing the valid options.

Example
-------
>>> from barkgen import presets
>>> params = presets.get("oak", seed=7)
>>> params.noise.octaves
6
>>> blend = presets.interpolate_species("pine", "oak", 0.5, seed=7)
>>> blend.species
'pine-oak-50'
"""
from __future__ import annotations

import math
from typing import Dict, List, Optional

from .colors import blend_palettes
from .config import BarkParams, DirectionalParams, NoiseParams, VoronoiParams, WarpParams
from .errors import UnknownSpeciesError
from .species import SPECIES_CLASSES, BarkSpecies, random_seed


def _normalize_name(name: str) -> str:
    return "".join(c for c in str(name).strip().lower() if c not in {"-", "_", " ", "."})


# Registration order is significant: classifier ties resolve in this order.
_REGISTRY: Dict[str, BarkSpecies] = {cls.name: cls() for cls in SPECIES_CLASSES}


def available() -> List[str]:
    """List registered species names in registration order."""
    return list(_REGISTRY.keys())


def _resolve(name: str) -> str:
    key = _normalize_name(name)
    if key not in _REGISTRY:
        raise UnknownSpeciesError(name, available())
    return key


def get_species(name: str) -> BarkSpecies:
    """Return the composer registered for ``name``."""
    return _REGISTRY[_resolve(name)]


def get(name: str, seed: Optional[int] = None) -> BarkParams:
    """Return fresh default parameters for a species.

    Raises
    ------
    UnknownSpeciesError
        If the species name is not registered.
    """
    return get_species(name).default_params(seed)


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def interpolate_species(a: str, b: str, t: float, seed: Optional[int] = None) -> BarkParams:
    """Blend two species' defaults.

    Numeric fields interpolate linearly (integer fields rounded), palette hues
    take the shorter arc as in :func:`~barkgen.colors.blend_palettes`, the distance
    function switches from ``a`` to ``b`` at ``t = 0.5`` and both sides share
    one seed. The species tag records the blend, e.g. ``"pine-oak-50"``; it is
    not a registered name, so render blends with an explicit composer.
    """
    seed = random_seed() if seed is None else int(seed)
    p1 = get(a, seed)
    p2 = get(b, seed)
    t = float(t)

    return BarkParams(
        species=f"{_resolve(a)}-{_resolve(b)}-{_round_half_up(t * 100)}",
        noise=NoiseParams(
            scale=_lerp(p1.noise.scale, p2.noise.scale, t),
            octaves=_round_half_up(_lerp(p1.noise.octaves, p2.noise.octaves, t)),
            lacunarity=_lerp(p1.noise.lacunarity, p2.noise.lacunarity, t),
            persistence=_lerp(p1.noise.persistence, p2.noise.persistence, t),
            seed=seed,
        ),
        warp=WarpParams(
            strength=_lerp(p1.warp.strength, p2.warp.strength, t),
            iterations=_round_half_up(_lerp(p1.warp.iterations, p2.warp.iterations, t)),
            scale=_lerp(p1.warp.scale, p2.warp.scale, t),
        ),
        voronoi=VoronoiParams(
            cell_density=_lerp(p1.voronoi.cell_density, p2.voronoi.cell_density, t),
            distance_function=p1.voronoi.distance_function if t < 0.5 else p2.voronoi.distance_function,
            edge_width=_lerp(p1.voronoi.edge_width, p2.voronoi.edge_width, t),
            jitter=_lerp(p1.voronoi.jitter, p2.voronoi.jitter, t),
        ),
        direction=DirectionalParams(
            vertical_bias=_lerp(p1.direction.vertical_bias, p2.direction.vertical_bias, t),
            horizontal_bias=_lerp(p1.direction.horizontal_bias, p2.direction.horizontal_bias, t),
            angle=_lerp(p1.direction.angle, p2.direction.angle, t),
        ),
        colors=blend_palettes(p1.colors, p2.colors, t),
        ridge_intensity=_lerp(p1.ridge_intensity, p2.ridge_intensity, t),
        contrast=_lerp(p1.contrast, p2.contrast, t),
    )


__all__ = [
    "available",
    "get",
    "get_species",
    "interpolate_species",
]
