#!/usr/bin/env python3
"""
Utility modules for PlotMe.

This package contains shared utilities, constants, and error handling
for the PlotMe application.
"""

from .constants import *
from .errors import (
    PlotMeError,
    ConfigPathError,
    SessionFormatError,
    ErrorLog,
    error_string,
)
