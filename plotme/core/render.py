#!/usr/bin/env python3
"""
Series coloring and projection helpers shared by the plot canvas and the
SVG export.
"""

from typing import Iterable, List, Tuple

import numpy as np
from matplotlib.colors import hsv_to_rgb

from .file_entry import FileEntry
from ..utils.constants import (
    Color,
    GOLDEN_RATIO_CONJUGATE,
    AUTO_COLOR_SATURATION,
    AUTO_COLOR_VALUE,
)


def auto_color(color_idx: int) -> Color:
    """
    Generate a distinct color for the given running index.

    Successive indices step the hue by the golden ratio, which keeps
    neighbouring colors far apart without storing a palette.

    Args:
        color_idx: Running color index

    Returns:
        Opaque RGBA color with 0-255 components
    """
    hue = (color_idx * GOLDEN_RATIO_CONJUGATE) % 1.0
    rgb = hsv_to_rgb([hue, AUTO_COLOR_SATURATION, AUTO_COLOR_VALUE])
    r, g, b = (int(round(c * 255)) for c in rgb)
    return (r, g, b, 255)


def to_mpl_color(color: Color) -> Tuple[float, float, float, float]:
    """Convert a 0-255 RGBA color to matplotlib's 0-1 RGBA tuple."""
    return tuple(c / 255.0 for c in color)


def to_hex(color: Color) -> str:
    r, g, b, _ = color
    return f"#{r:02x}{g:02x}{b:02x}"


class ColorCounter:
    """
    Monotonic color index owned by the rendering phase.

    Each entry drawn without a color takes the next index exactly once.
    """

    def __init__(self) -> None:
        self.color_idx = 0

    def next_color(self) -> Color:
        self.color_idx += 1
        return auto_color(self.color_idx)

    def assign_colors(self, entries: Iterable[FileEntry]) -> List[FileEntry]:
        """
        Give every uncolored entry its color.

        Returns:
            The entries that received a new color
        """
        colored = []
        for file_entry in entries:
            if not file_entry.has_color():
                file_entry.color = self.next_color()
                colored.append(file_entry)
        return colored


def series_points(file_entry: FileEntry) -> Tuple[np.ndarray, np.ndarray]:
    """Return the transformed x and y arrays of an entry."""
    transformed = file_entry.transformed_data()
    return transformed[:, 0], transformed[:, 1]
