#!/usr/bin/env python3
"""
PlotMe - A PyQt6 desktop viewer for plotting numeric data from CSV files.

This package provides:
- Folder browsing with a search filter over file names
- Lazy, row-tolerant CSV ingestion with per-file column options
- Overlaid matplotlib line plots with interactive scale and offset gestures
- SVG export of the current view
- Session save and restore as JSON

Dependencies: PyQt6, matplotlib, numpy
"""

from .utils.constants import APP_NAME, APP_VERSION

__version__ = APP_VERSION
__title__ = APP_NAME
