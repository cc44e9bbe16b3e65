# python/barkgen/helpers/mpl_display.py
# Matplotlib display helpers for bark textures and feature vectors.
# This exists to preview a texture next to its edge-orientation histogram and classification.
# RELEVANT FILES:python/barkgen/helpers/__init__.py,python/barkgen/features.py,tests/test_mpl_display.py
"""
Matplotlib display helpers for barkgen RGBA buffers.

Textures are shown with a top-left origin and nearest-neighbour
interpolation so individual pixels stay visible. C-contiguous uint8 input is
passed to matplotlib without a copy.
"""

from typing import Optional, Tuple

import math

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.image import AxesImage

from .. import _validate
from ..classifier import ClassificationResult
from ..features import ORIENTATION_BINS, FeatureVector


def imshow_rgba(ax: Axes, rgba: np.ndarray, interpolation: str = "nearest", **kwargs) -> AxesImage:
    """Display an (H, W, 4) uint8 buffer on ``ax``."""
    if not hasattr(ax, "imshow"):
        raise TypeError("ax must be a matplotlib Axes object")
    data = _validate.rgba_buffer(rgba, "rgba")
    height, width = data.shape[:2]
    display_kwargs = {
        "interpolation": interpolation,
        "aspect": "equal",
        "origin": "upper",
        "extent": (0, width, height, 0),
        **kwargs,
    }
    return ax.imshow(data, **display_kwargs)


def show_texture(
    rgba: np.ndarray,
    ax: Optional[Axes] = None,
    title: Optional[str] = None,
) -> Tuple[Figure, Axes]:
    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure
    imshow_rgba(ax, rgba)
    ax.set_axis_off()
    if title:
        ax.set_title(title)
    return fig, ax


def plot_edge_orientations(features: FeatureVector, ax: Optional[Axes] = None) -> Tuple[Figure, Axes]:
    """Polar bar chart of the 8-bin edge-orientation histogram."""
    if ax is None:
        fig, ax = plt.subplots(subplot_kw={"projection": "polar"})
    else:
        fig = ax.figure
    width = 2.0 * math.pi / ORIENTATION_BINS
    theta = np.arange(ORIENTATION_BINS) * width + width / 2.0
    ax.bar(theta, np.asarray(features.edge_orientations), width=width, bottom=0.0, edgecolor="black", alpha=0.8)
    ax.set_title("Edge orientations")
    return fig, ax


def show_report(
    rgba: np.ndarray,
    features: FeatureVector,
    classification: Optional[ClassificationResult] = None,
) -> Figure:
    """Texture and edge histogram side by side, titled with the classification."""
    fig = plt.figure(figsize=(9, 4.5))
    tex_ax = fig.add_subplot(1, 2, 1)
    polar_ax = fig.add_subplot(1, 2, 2, projection="polar")

    title = None
    if classification is not None:
        primary = classification.primary
        title = f"{primary.species} ({primary.confidence:.0%})"
    show_texture(rgba, ax=tex_ax, title=title)
    plot_edge_orientations(features, ax=polar_ax)

    lines = [f"{name}: {value:.2f}" for name, value in features.ranged().items()]
    fig.text(0.02, 0.02, "   ".join(lines), fontsize=8)
    return fig
