# python/barkgen/generator.py
# Stateful bark generator owning one species, its params and the last rendered buffer
# Exists to give hosts (CLI, notebooks, UIs) one object that renders, classifies and exports
# RELEVANT FILES: python/barkgen/render.py, python/barkgen/classifier.py, python/barkgen/export.py, tests/test_generator.py
from __future__ import annotations

import logging
import time as _time
from typing import Any, Callable, Mapping, Optional, Union

import numpy as np

from . import export as _export
from . import presets
from .classifier import ClassificationResult, SpeciesClassifier, ValidationResult
from .config import BarkParams
from .errors import InvalidParameterError, NoTextureAvailableError
from .features import FeatureVector
from .render import DEFAULT_CHUNK_ROWS, iter_render, render_rgba
from .species import BarkSpecies

logger = logging.getLogger(__name__)

ProgressSink = Callable[[float, Optional[str]], None]
CancelCheck = Callable[[], bool]


class BarkGenerator:
    """Render and analyze textures for one species.

    The pixel buffer is replaced only after a render completes. A failed or
    cancelled render, or a rejected parameter update, leaves the previous
    params and buffer exactly as they were.
    """

    def __init__(
        self,
        species: Union[str, BarkSpecies] = "pine",
        params: Optional[Union[BarkParams, Mapping[str, Any]]] = None,
        seed: Optional[int] = None,
    ) -> None:
        self._species = species if isinstance(species, BarkSpecies) else presets.get_species(species)
        self._seed = seed
        candidate = self._species.default_params(seed)
        if params is not None:
            candidate = candidate.merge(params)
            if seed is not None:
                candidate.noise.seed = int(seed)
        candidate.validate()
        self._params = candidate
        self._buffer: Optional[np.ndarray] = None
        self._rendered_params: Optional[BarkParams] = None
        self._classifier: Optional[SpeciesClassifier] = None

    def __repr__(self) -> str:
        size = "none" if self._buffer is None else f"{self._buffer.shape[1]}x{self._buffer.shape[0]}"
        return f"BarkGenerator(species={self.species!r}, seed={self._params.noise.seed}, buffer={size})"

    @property
    def species(self) -> str:
        return self._species.name

    @property
    def composer(self) -> BarkSpecies:
        return self._species

    @property
    def buffer(self) -> Optional[np.ndarray]:
        return self._buffer

    @property
    def has_texture(self) -> bool:
        return self._buffer is not None

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------
    def get_params(self) -> BarkParams:
        return self._params.copy()

    def set_params(self, partial: Union[BarkParams, Mapping[str, Any]]) -> BarkParams:
        """Deep-merge ``partial`` over the current params.

        Raises InvalidParameterError (params unchanged) if the result is out
        of range or tries to change the species tag; construct a new generator
        to switch species.
        """
        candidate = self._params.merge(partial)
        if candidate.species != self._params.species:
            raise InvalidParameterError(
                f"cannot change species from {self._params.species!r} to {candidate.species!r} on an existing generator"
            )
        candidate.validate()
        self._params = candidate
        return self.get_params()

    def reset_to_defaults(self) -> BarkParams:
        self._params = self._species.default_params(self._seed)
        return self.get_params()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def generate(self, width: int, height: int) -> np.ndarray:
        t0 = _time.perf_counter()
        params = self._params.copy()
        image = render_rgba(width, height, params, species=self._species)
        self._buffer = image
        self._rendered_params = params
        logger.info(
            "generated %s texture %dx%d seed=%d in %.2fs",
            self.species, image.shape[1], image.shape[0], params.noise.seed, _time.perf_counter() - t0,
        )
        return image

    def generate_progressive(
        self,
        width: int,
        height: int,
        on_progress: Optional[ProgressSink] = None,
        should_cancel: Optional[CancelCheck] = None,
        chunk_rows: int = DEFAULT_CHUNK_ROWS,
    ) -> Optional[np.ndarray]:
        """Render in row chunks, reporting ``(percent, label)`` after each one.

        ``should_cancel`` is polled between chunks; when it returns True the
        partial render is discarded and None is returned.
        """
        params = self._params.copy()
        steps = iter_render(width, height, params, species=self._species, chunk_rows=chunk_rows)
        image = None
        for step in steps:
            image = step.image
            if on_progress is not None:
                on_progress(step.progress * 100.0, f"Rendered {step.rows_done}/{step.total_rows} rows")
            if not step.done and should_cancel is not None and should_cancel():
                steps.close()
                logger.warning(
                    "generation of %s texture cancelled at %d/%d rows",
                    self.species, step.rows_done, step.total_rows,
                )
                return None
        self._buffer = image
        self._rendered_params = params
        logger.info("generated %s texture %dx%d seed=%d", self.species, width, height, params.noise.seed)
        return image

    # ------------------------------------------------------------------
    # Analysis and export
    # ------------------------------------------------------------------
    def _require_texture(self, action: str) -> np.ndarray:
        if self._buffer is None:
            raise NoTextureAvailableError(f"cannot {action}: no texture has been generated yet")
        return self._buffer

    def _get_classifier(self, classifier: Optional[SpeciesClassifier]) -> SpeciesClassifier:
        if classifier is not None:
            return classifier
        if self._classifier is None:
            self._classifier = SpeciesClassifier()
        return self._classifier

    def extract_features(self, classifier: Optional[SpeciesClassifier] = None) -> FeatureVector:
        buffer = self._require_texture("extract features")
        return self._get_classifier(classifier).extract_features(buffer)

    def classify(self, classifier: Optional[SpeciesClassifier] = None) -> ClassificationResult:
        buffer = self._require_texture("classify")
        return self._get_classifier(classifier).classify(buffer)

    def validate(self, classifier: Optional[SpeciesClassifier] = None) -> ValidationResult:
        """Validate the current texture against this generator's own species."""
        buffer = self._require_texture("validate")
        return self._get_classifier(classifier).validate(buffer, self.species)

    def export_metadata(self, classification: Optional[ClassificationResult] = None) -> dict:
        """Metadata for the current texture, built from the params that rendered it."""
        self._require_texture("export")
        return _export.build_export_metadata(self.species, self._rendered_params, classification)

    def export_png(
        self,
        path,
        classification: Optional[ClassificationResult] = None,
        sidecar: bool = False,
    ) -> str:
        """Write the current texture as PNG with embedded metadata.

        Raises EncodingFailureError if encoding or writing fails; the buffer
        stays valid for another attempt.
        """
        buffer = self._require_texture("export")
        metadata = self.export_metadata(classification)
        out = _export.save_png(path, buffer, metadata)
        if sidecar:
            _export.write_metadata_sidecar(out, metadata)
        return out


def create_generator(
    species: Union[str, BarkSpecies] = "pine",
    params: Optional[Union[BarkParams, Mapping[str, Any]]] = None,
    seed: Optional[int] = None,
) -> BarkGenerator:
    return BarkGenerator(species, params=params, seed=seed)


__all__ = ["BarkGenerator", "create_generator"]
