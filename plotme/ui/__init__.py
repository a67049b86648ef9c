#!/usr/bin/env python3
"""
User interface modules for PlotMe.

This package contains all UI components including the main window,
plot canvas, folder tree and file settings dialog.
"""

from .plot_canvas import PlotCanvas
from .folder_tree import FolderTreeWidget
from .file_settings import FileSettingsDialog
from .main_window import PlotMeMainWindow

__all__ = ['PlotMeMainWindow', 'PlotCanvas', 'FolderTreeWidget', 'FileSettingsDialog']
