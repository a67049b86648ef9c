#!/usr/bin/env python3
"""
Entry point for PlotMe.

This module serves as the main entry point when running the package with
`python -m plotme`. It handles application initialization and main window
creation.
"""

import sys
import traceback
from PyQt6.QtWidgets import QApplication, QMessageBox

from .utils.constants import APP_NAME, APP_VERSION, APP_ORGANIZATION, APP_DOMAIN


def main() -> None:
    """
    Main application entry point.

    Initializes the Qt application, creates the main window, and starts the
    event loop.
    """
    app = QApplication(sys.argv)

    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setOrganizationName(APP_ORGANIZATION)
    app.setOrganizationDomain(APP_DOMAIN)
    app.setStyle('Fusion')

    try:
        # Import main window here so the core stays importable without Qt
        from .ui.main_window import PlotMeMainWindow

        window = PlotMeMainWindow()
        window.show()

        sys.exit(app.exec())

    except Exception as e:
        error_msg = (
            f'An unexpected error occurred:\n\n{str(e)}\n\n'
            f'{traceback.format_exc()}'
        )

        QMessageBox.critical(
            None,
            'Application Error',
            error_msg
        )
        sys.exit(1)


if __name__ == '__main__':
    main()
