# python/barkgen/render.py
# Rasterizer: one-shot, progressive iterator and callback-driven renders
# Exists so every render path shares one row-chunk shading routine and stays pixel-identical
# RELEVANT FILES: python/barkgen/species.py, python/barkgen/colors.py, python/barkgen/generator.py, tests/test_render.py
from __future__ import annotations

import logging
import time as _time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

import numpy as np

from . import _validate
from . import presets
from .colors import hsb_to_rgb_array, map_to_color_array
from .config import BarkParams
from .noise import PerlinNoise
from .species import BarkSpecies

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_ROWS = 16


@dataclass(frozen=True)
class RenderProgress:
    """Snapshot yielded after each completed chunk of rows.

    ``image`` is the live output buffer: rows below ``rows_done`` are still
    unshaded.
    """

    rows_done: int
    total_rows: int
    progress: float
    image: np.ndarray

    @property
    def done(self) -> bool:
        return self.rows_done >= self.total_rows


def iter_row_chunks(height: int, rows: int) -> Iterator[Tuple[int, int]]:
    """Yield ``(y0, y1)`` row ranges covering ``[0, height)`` in order."""
    h = int(height)
    r = max(1, int(rows))
    for y0 in range(0, h, r):
        yield y0, min(y0 + r, h)


def _prepare(
    width: int,
    height: int,
    params: BarkParams,
    species: Optional[BarkSpecies],
    noise: Optional[PerlinNoise],
) -> Tuple[int, int, BarkSpecies, PerlinNoise]:
    w, h = _validate.size_wh(width, height)
    params.validate()
    if species is None:
        species = presets.get_species(params.species)
    if noise is None:
        noise = PerlinNoise(params.noise.seed)
    return w, h, species, noise


def shade_rows(
    out: np.ndarray,
    y0: int,
    y1: int,
    params: BarkParams,
    species: BarkSpecies,
    noise: PerlinNoise,
) -> None:
    """Shade rows ``[y0, y1)`` of ``out`` in place."""
    height, width = out.shape[:2]
    py, px = np.mgrid[y0:y1, 0:width].astype(np.float64)
    value = species.compute_value(px, py, params, noise)
    variation = species.color_variation(px, py, width, height, noise)
    h, s, b = map_to_color_array(value, params.colors, variation)
    out[y0:y1, :, :3] = hsb_to_rgb_array(h, s, b)


def _iter_chunks(
    w: int,
    h: int,
    params: BarkParams,
    species: BarkSpecies,
    noise: PerlinNoise,
    rows: int,
) -> Iterator[RenderProgress]:
    out = np.zeros((h, w, 4), dtype=np.uint8)
    out[..., 3] = 255
    for y0, y1 in iter_row_chunks(h, rows):
        shade_rows(out, y0, y1, params, species, noise)
        yield RenderProgress(rows_done=y1, total_rows=h, progress=y1 / h, image=out)


def iter_render(
    width: int,
    height: int,
    params: BarkParams,
    *,
    species: Optional[BarkSpecies] = None,
    noise: Optional[PerlinNoise] = None,
    chunk_rows: int = DEFAULT_CHUNK_ROWS,
) -> Iterator[RenderProgress]:
    """Render progressively, yielding after each chunk of rows.

    Arguments are validated eagerly, before the first chunk is requested and
    before the output buffer is allocated. Stop iterating to cancel.
    """
    rows = _validate.chunk_rows(chunk_rows)
    w, h, species, noise = _prepare(width, height, params, species, noise)
    logger.debug(
        "render %dx%d species=%s seed=%d chunk_rows=%d",
        w, h, species.name, params.noise.seed, rows,
    )
    return _iter_chunks(w, h, params, species, noise, rows)


def render_rgba(
    width: int,
    height: int,
    params: BarkParams,
    *,
    species: Optional[BarkSpecies] = None,
    noise: Optional[PerlinNoise] = None,
    chunk_rows: int = DEFAULT_CHUNK_ROWS,
) -> np.ndarray:
    """Render a full (height, width, 4) uint8 RGBA texture.

    A fresh :class:`PerlinNoise` seeded from ``params.noise.seed`` is used
    unless ``noise`` is given, so identical params give identical bytes.
    """
    t0 = _time.perf_counter()
    image = None
    for step in iter_render(width, height, params, species=species, noise=noise, chunk_rows=chunk_rows):
        image = step.image
    logger.debug("render finished in %.3fs", _time.perf_counter() - t0)
    return image


def render_progressive(
    width: int,
    height: int,
    params: BarkParams,
    callback: Optional[Callable[[Dict[str, Any]], Optional[bool]]] = None,
    *,
    species: Optional[BarkSpecies] = None,
    noise: Optional[PerlinNoise] = None,
    chunk_rows: int = DEFAULT_CHUNK_ROWS,
    time_source: Callable[[], float] = _time.perf_counter,
) -> Optional[np.ndarray]:
    """Render in row chunks, invoking ``callback`` after each chunk.

    The callback receives a dictionary with keys:
      - 'image': np.ndarray (H,W,4) uint8 current buffer
      - 'rows': (y0, y1) of the last completed chunk
      - 'progress': float in [0,1]
      - 'timestamp': float from time_source()
      - 'chunk_index': int (0-based)
      - 'total_chunks': int

    If the callback returns True, rendering stops early and None is returned.
    Otherwise the finished buffer is returned, identical to :func:`render_rgba`.
    """
    rows = _validate.chunk_rows(chunk_rows)
    chunks = iter_render(width, height, params, species=species, noise=noise, chunk_rows=rows)
    image = None
    total = None
    for i, step in enumerate(chunks):
        image = step.image
        if total is None:
            total = -(-step.total_rows // rows)
        if callback is None:
            continue
        info = {
            "image": step.image,
            "rows": (i * rows, step.rows_done),
            "progress": step.progress,
            "timestamp": time_source(),
            "chunk_index": i,
            "total_chunks": total,
        }
        if bool(callback(info)):
            chunks.close()
            logger.debug("progressive render stopped by callback at %.0f%%", step.progress * 100.0)
            return None
    return image


__all__ = [
    "DEFAULT_CHUNK_ROWS",
    "RenderProgress",
    "iter_row_chunks",
    "shade_rows",
    "iter_render",
    "render_rgba",
    "render_progressive",
]
