# python/barkgen/export.py
# PNG export with embedded generation metadata and optional JSON sidecar
# Exists so a saved texture carries the species, params and last classification that produced it
# RELEVANT FILES: python/barkgen/generator.py, python/barkgen/tools/render_bark.py, tests/test_export.py
from __future__ import annotations

import io
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import numpy as np
from PIL import Image
from PIL.PngImagePlugin import PngInfo

from . import _validate
from .config import BarkParams
from .errors import EncodingFailureError

logger = logging.getLogger(__name__)

GENERATOR_TAG = "barkgen"
METADATA_KEY = "barkgen:metadata"

PathLike = Union[str, "os.PathLike[str]"]


def build_export_metadata(
    species: str,
    params: Union[BarkParams, Mapping[str, Any]],
    classification: Optional[Any] = None,
    *,
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Assemble the metadata record stored alongside an exported texture.

    ``classification`` may be a result object with ``to_dict()`` or a plain
    mapping; it is omitted when None.
    """
    from . import __version__

    when = timestamp if timestamp is not None else datetime.now(timezone.utc)
    params_dict = params.to_dict() if isinstance(params, BarkParams) else dict(params)
    meta: Dict[str, Any] = {
        "generator": GENERATOR_TAG,
        "version": __version__,
        "timestamp": when.isoformat(),
        "species": str(species),
        "params": params_dict,
    }
    if classification is not None:
        meta["validation"] = classification.to_dict() if hasattr(classification, "to_dict") else dict(classification)
    return meta


def _pnginfo(metadata: Optional[Mapping[str, Any]]) -> PngInfo:
    pnginfo = PngInfo()
    if metadata:
        pnginfo.add_itxt(METADATA_KEY, json.dumps(metadata, sort_keys=True))
        pnginfo.add_text("Software", f"{metadata.get('generator', GENERATOR_TAG)} {metadata.get('version', '')}".strip())
    return pnginfo


def _to_image(rgba: np.ndarray) -> Image.Image:
    arr = _validate.rgba_buffer(rgba, "rgba")
    # fromarray may share memory with a contiguous input; work on a copy
    return Image.fromarray(arr.copy())


def rgba_to_png_bytes(rgba: np.ndarray, metadata: Optional[Mapping[str, Any]] = None) -> bytes:
    """Encode an RGBA buffer as PNG bytes with fixed encoder settings."""
    img = _to_image(rgba)
    buf = io.BytesIO()
    try:
        img.save(buf, format="PNG", pnginfo=_pnginfo(metadata), optimize=False, compress_level=6)
    except (OSError, ValueError, TypeError) as exc:
        raise EncodingFailureError(f"PNG encoding failed: {exc}") from exc
    return buf.getvalue()


def save_png(path: PathLike, rgba: np.ndarray, metadata: Optional[Mapping[str, Any]] = None) -> str:
    """Write ``rgba`` to ``path`` as an RGBA PNG, embedding ``metadata`` as JSON.

    The PNG is encoded in memory first, so a failure never leaves a partial
    file behind. Returns the written path.
    """
    out = _validate.png_path(path)
    data = rgba_to_png_bytes(rgba, metadata)
    try:
        Path(out).write_bytes(data)
    except OSError as exc:
        raise EncodingFailureError(f"failed to write {out}: {exc}") from exc
    logger.info("wrote %s (%d bytes)", out, len(data))
    return out


def sidecar_path(png_path: PathLike) -> Path:
    return Path(png_path).with_suffix(".json")


def write_metadata_sidecar(png_path: PathLike, metadata: Mapping[str, Any]) -> Path:
    target = sidecar_path(png_path)
    try:
        target.write_text(json.dumps(metadata, indent=2, sort_keys=True), encoding="utf-8")
    except OSError as exc:
        raise EncodingFailureError(f"failed to write {target}: {exc}") from exc
    logger.info("wrote metadata sidecar %s", target)
    return target


def read_png_metadata(path: PathLike) -> Optional[Dict[str, Any]]:
    """Return the embedded metadata of a PNG written by :func:`save_png`, or None."""
    with Image.open(path) as img:
        img.load()
        text = dict(getattr(img, "text", {}) or {})
    raw = text.get(METADATA_KEY)
    if raw is None:
        return None
    return json.loads(str(raw))


def load_png_rgba(path: PathLike) -> np.ndarray:
    """Read an image file as a (H, W, 4) uint8 buffer."""
    with Image.open(path) as img:
        return np.array(img.convert("RGBA"), dtype=np.uint8, order="C")


__all__ = [
    "GENERATOR_TAG",
    "METADATA_KEY",
    "build_export_metadata",
    "rgba_to_png_bytes",
    "save_png",
    "sidecar_path",
    "write_metadata_sidecar",
    "read_png_metadata",
    "load_png_rgba",
]
