#!/usr/bin/env python3
"""
Entry point for PlotMe.

This is a convenience wrapper that allows users to run the application
with `python main.py` instead of requiring `python -m plotme`.
"""

if __name__ == '__main__':
    from plotme.__main__ import main
    main()
