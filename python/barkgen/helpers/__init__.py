# python/barkgen/helpers/__init__.py
# Display helpers for bark textures and their analysis results.
# RELEVANT FILES:python/barkgen/helpers/mpl_display.py,tests/test_mpl_display.py
"""
Display and visualization helpers for barkgen.

Importing this package pulls in matplotlib; the core library does not.
"""

from .mpl_display import (
    imshow_rgba,
    plot_edge_orientations,
    show_report,
    show_texture,
)

__all__ = [
    "imshow_rgba",
    "plot_edge_orientations",
    "show_report",
    "show_texture",
]
