# python/barkgen/errors.py
# Typed error kinds raised by the synthesis and analysis engines
# Exists so callers can tell bad parameters, unknown species, missing textures and encode failures apart
# RELEVANT FILES: python/barkgen/config.py, python/barkgen/presets.py, python/barkgen/generator.py, python/barkgen/export.py
from __future__ import annotations

from typing import Iterable, Tuple


class BarkgenError(Exception):
    """Base class for all barkgen errors."""


class InvalidParameterError(BarkgenError, ValueError):
    """A parameter is out of range, or a canvas has zero size."""


class UnknownSpeciesError(BarkgenError, ValueError):
    """Requested species is not registered.

    Carries the requested name and the valid options so a caller can show
    them without parsing the message.
    """

    def __init__(self, species: str, available: Iterable[str]) -> None:
        self.species = str(species)
        self.available: Tuple[str, ...] = tuple(available)
        super().__init__(
            f"Unknown species: {self.species}. Available: {', '.join(self.available)}"
        )


class NoTextureAvailableError(BarkgenError, RuntimeError):
    """Export or classification was requested before any texture was generated."""


class EncodingFailureError(BarkgenError, RuntimeError):
    """Encoding a pixel buffer to an image file failed."""
