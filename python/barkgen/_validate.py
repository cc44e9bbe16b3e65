from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union

import numpy as np

from .errors import InvalidParameterError

_MAX_DIM = 8192  # guardrail against runaway allocations


def _as_int(name: str, v) -> int:
    if isinstance(v, bool):
        raise InvalidParameterError(f"{name} must be an integer, got bool")
    try:
        i = int(v)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must be an integer, got {type(v).__name__}") from e
    if i != v:
        raise InvalidParameterError(f"{name} must be an integer, got {v!r}")
    return i


def size_wh(width, height) -> Tuple[int, int]:
    w = _as_int("width", width)
    h = _as_int("height", height)
    if w <= 0 or h <= 0:
        raise InvalidParameterError(f"width and height must be > 0, got {w}x{h}")
    if w > _MAX_DIM or h > _MAX_DIM:
        raise InvalidParameterError(f"width/height must be <= {_MAX_DIM}")
    return w, h


def chunk_rows(rows) -> int:
    r = _as_int("chunk_rows", rows)
    if r < 1:
        raise InvalidParameterError("chunk_rows must be >= 1")
    return r


def png_path(p: Union[str, Path]) -> str:
    s = str(p)
    if not s.lower().endswith(".png"):
        raise InvalidParameterError("path must end with .png")
    parent = Path(s).resolve().parent
    if not parent.exists():
        raise InvalidParameterError(f"directory does not exist: {parent}")
    return s


def rgba_buffer(arr, name: str = "buffer") -> np.ndarray:
    """Check an (H, W, 4) uint8 pixel buffer and return it C-contiguous."""
    if not isinstance(arr, np.ndarray):
        raise InvalidParameterError(f"{name} must be a numpy array, got {type(arr).__name__}")
    if arr.dtype != np.uint8:
        raise InvalidParameterError(f"{name} must have dtype uint8, got {arr.dtype}")
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise InvalidParameterError(f"{name} must have shape (H, W, 4), got {arr.shape}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise InvalidParameterError(f"{name} must not be empty, got {arr.shape}")
    return np.ascontiguousarray(arr)
