#!/usr/bin/env python3
"""
Shared constants and configurations for PlotMe.

This module contains application-wide constants, default settings, and shared
type definitions to prevent duplication across modules.
"""

from typing import Tuple

# Application metadata
APP_NAME = 'PlotMe CSV File Plotter'
APP_VERSION = '0.2.0'
APP_ORGANIZATION = 'PlotMe'
APP_DOMAIN = 'plotme.local'

# Matplotlib backend configuration
MATPLOTLIB_BACKEND = 'QtAgg'

# Default UI settings
DEFAULT_WINDOW_SIZE = (1200, 800)
DEFAULT_WINDOW_POSITION = (100, 100)
DEFAULT_PLOT_FIGURE_SIZE = (8, 6)
DEFAULT_PLOT_DPI = 100
ERROR_LOG_PANEL_HEIGHT = 100
LEFT_PANEL_MIN_WIDTH = 250
LEFT_PANEL_MAX_WIDTH = 450
DEFAULT_SPLITTER_SIZES = [300, 900]

# Frame loop
FRAME_INTERVAL_MS = 16

# Plot styling constants
PLOT_LINE_WIDTH = 1.0
PLOT_ACTIVE_LINE_WIDTH = 2.5
PLOT_GRID_ALPHA = 0.3

# Automatic series colors (golden ratio hue stepping)
GOLDEN_RATIO_CONJUGATE = (5.0 ** 0.5 - 1.0) / 2.0  # 0.61803398875
AUTO_COLOR_SATURATION = 0.85
AUTO_COLOR_VALUE = 0.5

# RGBA color with 0-255 components; alpha 0 means "no color assigned yet"
Color = Tuple[int, int, int, int]
TRANSPARENT: Color = (0, 0, 0, 0)

# Interactive transform gestures
ACCELERATION_GROWTH = 1.03
SCALE_STEP = 0.01
OFFSET_STEP = 0.001
KEY_Y_OFFSET = 'd'
KEY_SCALE = 'f'
KEY_X_OFFSET = 'g'
GESTURE_KEYS = frozenset({KEY_Y_OFFSET, KEY_SCALE, KEY_X_OFFSET})

# Numeric text field defaults
DEFAULT_SCALE_TEXT = '1.0'
DEFAULT_OFFSET_TEXT = '0.0'

# CSV ingestion defaults (column indices are zero-based)
DEFAULT_DELIMITER = ','
DEFAULT_COMMENT_CHAR = '#'
DEFAULT_XCOL = 0
DEFAULT_YCOL = 1
DEFAULT_SKIP_HEADER = 0
DEFAULT_SKIP_FOOTER = 0
PREVIEW_LINE_COUNT = 10

# Session state
ERROR_LOG_CAPACITY = 10
DEFAULT_SEARCH_PHRASE = '.csv'
SESSION_FILE_NAME = '.plotme.json'
SESSION_SAVE_AS_NAME = 'plotme_session.json'
SESSION_FILE_FILTER = 'Session Files (*.json);;All Files (*)'

# Export settings
EXPORT_CANVAS_SIZE = (1024, 768)  # pixels
EXPORT_DPI = 100
EXPORT_MARGIN = 0.08
EXPORT_TICK_COUNT = 3
EXPORT_LINE_WIDTH = 2.0
EXPORT_FILE_FILTER = 'SVG Files (*.svg);;All Files (*)'
DEFAULT_EXPORT_NAME = 'plotme_plot.svg'

# Status bar message durations (milliseconds)
STATUS_MESSAGE_SHORT = 2000
STATUS_MESSAGE_MEDIUM = 3000
STATUS_MESSAGE_LONG = 5000

# Error and warning messages
ERROR_DEFAULT_PATH = "ERROR: could not find default config file path"
ERROR_READ_SESSION = "ERROR: could not read contents of config file {path}"
ERROR_PARSE_SESSION = "ERROR: could not read config file {path}"
ERROR_WRITE_SESSION = "ERROR: could not write config {path}"
ERROR_READ_CSV = "ERROR: could not read CSV file {path}"
ERROR_READ_FOLDER = "ERROR: could not list folder {path}"
ERROR_EXPORT = "ERROR: unable to write SVG output {path}"
WARNING_NO_SESSION_PATH = "WARNING: No path given to save the session."
WARNING_NO_EXPORT_PATH = "WARNING: No path given to save the plot."
ROW_WARNINGS_SUMMARY = "WARNING: skipped {count} row(s) of {path}"
WARNING_EMPTY_CSV = (
    "WARNING: no data could be read from {path}, check the CSV settings"
)

# Success messages
SUCCESS_SESSION_SAVED = "Session saved to {path}"
SUCCESS_SESSION_LOADED = "Session loaded from {path}"
SUCCESS_EXPORT_TEMPLATE = "Plot saved to {filename}"

# UI texts
STATUS_READY = "Ready"
EMPTY_FOLDERS_TEXT = "Opened folders will appear here ..."
EMPTY_SETTINGS_TEXT = "Settings for plotted files will appear here."
GESTURE_HELP_TEXT = (
    "Right-click a plotted file to make it active. Hold the left mouse button "
    "and F to scale, D to shift along y, G to shift along x."
)
PLOT_XLABEL = 'x'
PLOT_YLABEL = 'y'
