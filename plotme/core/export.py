#!/usr/bin/env python3
"""
Static SVG export of the current plot.

The export replays the same transform the interactive canvas uses, on an
off-screen matplotlib figure of fixed pixel size, so it works without a
running GUI.
"""

from pathlib import Path
from typing import Union

from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

from .render import series_points, to_mpl_color
from .state import SessionState
from ..utils.constants import (
    EXPORT_CANVAS_SIZE,
    EXPORT_DPI,
    EXPORT_MARGIN,
    EXPORT_TICK_COUNT,
    EXPORT_LINE_WIDTH,
    ERROR_EXPORT,
    PLOT_XLABEL,
    PLOT_YLABEL,
    SUCCESS_EXPORT_TEMPLATE,
)
from ..utils.errors import error_string


def build_export_figure(state: SessionState) -> Figure:
    """
    Draw every exportable entry onto a new off-screen figure.

    Entries that are not drawn or have no assigned color are skipped. The
    axes cover the session's current viewport bounds.
    """
    width, height = EXPORT_CANVAS_SIZE
    fig = Figure(figsize=(width / EXPORT_DPI, height / EXPORT_DPI), dpi=EXPORT_DPI)
    fig.patch.set_facecolor('white')
    fig.subplots_adjust(left=EXPORT_MARGIN, right=1.0 - EXPORT_MARGIN,
                        bottom=EXPORT_MARGIN, top=1.0 - EXPORT_MARGIN)
    ax = fig.add_subplot(111)

    for file_entry in state.drawn_entries():
        if not file_entry.has_color():
            continue
        x, y = series_points(file_entry)
        ax.plot(x, y, color=to_mpl_color(file_entry.color),
                linewidth=EXPORT_LINE_WIDTH, label=file_entry.filename)

    dims = state.plot_dims
    if not dims.is_empty():
        ax.set_xlim(dims.x0, dims.x1)
        ax.set_ylim(dims.y0, dims.y1)

    ax.xaxis.set_major_locator(MaxNLocator(EXPORT_TICK_COUNT))
    ax.yaxis.set_major_locator(MaxNLocator(EXPORT_TICK_COUNT))
    ax.set_xlabel(PLOT_XLABEL)
    ax.set_ylabel(PLOT_YLABEL)

    if ax.get_lines():
        legend = ax.legend(loc='upper right', facecolor='white', edgecolor='black',
                           framealpha=0.8)
        legend.get_frame().set_linewidth(1.0)
    return fig


def export_svg(state: SessionState, path: Union[str, Path]) -> bool:
    """
    Write the current plot to an SVG file.

    Args:
        state: Session providing the entries and viewport bounds
        path: Output file

    Returns:
        True on success; failures are appended to the session's error log
    """
    path = Path(path)
    try:
        fig = build_export_figure(state)
        fig.savefig(path, format='svg', dpi=EXPORT_DPI)
    except (OSError, ValueError) as e:
        state.errors.append(error_string(ERROR_EXPORT.format(path=str(path)), e))
        return False
    print(SUCCESS_EXPORT_TEMPLATE.format(filename=path.name))
    return True
