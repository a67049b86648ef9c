#!/usr/bin/env python3
"""
Core domain model for PlotMe.

Everything in this package is independent of the GUI toolkit: CSV ingestion,
the file entry state machine, session persistence, the drag gesture
controller and the color/export helpers.
"""

from .float_input import FloatInput
from .csv_file import CSVFile, CSVOptions, read_preview
from .file_entry import FileEntry, FileEntryState, get_file_entries
from .folder import Folder
from .state import PlotDimensions, SessionState, default_config_path
from .interaction import InputSample, GestureResult, InteractionController
from .render import ColorCounter, auto_color, series_points, to_hex, to_mpl_color
from .export import build_export_figure, export_svg

__all__ = [
    'FloatInput',
    'CSVFile',
    'CSVOptions',
    'read_preview',
    'FileEntry',
    'FileEntryState',
    'get_file_entries',
    'Folder',
    'PlotDimensions',
    'SessionState',
    'default_config_path',
    'InputSample',
    'GestureResult',
    'InteractionController',
    'ColorCounter',
    'auto_color',
    'series_points',
    'to_hex',
    'to_mpl_color',
    'build_export_figure',
    'export_svg',
]
