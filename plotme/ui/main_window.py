#!/usr/bin/env python3
"""
Main window for PlotMe.

This module contains the main application window that coordinates all UI
components: the folder tree, the plot canvas, the file settings dialogs and
the error log panel. A fixed-rate frame timer feeds pointer input to the
interaction controller and keeps the session's viewport bounds current.
"""

from pathlib import Path
from typing import Dict, Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QSplitter, QFileDialog,
    QMessageBox, QStatusBar, QGroupBox, QLabel, QLineEdit, QTextEdit
)
from PyQt6.QtCore import Qt, QSettings, QTimer
from PyQt6.QtGui import QAction, QFont
from matplotlib.backends.backend_qtagg import NavigationToolbar2QT as NavigationToolbar

from .plot_canvas import PlotCanvas
from .folder_tree import FolderTreeWidget
from .file_settings import FileSettingsDialog
from ..core.export import export_svg
from ..core.file_entry import FileEntry
from ..core.folder import Folder
from ..core.interaction import InteractionController
from ..core.render import ColorCounter
from ..core.state import SessionState
from ..utils.constants import (
    APP_NAME, APP_VERSION, APP_ORGANIZATION,
    DEFAULT_WINDOW_SIZE, DEFAULT_WINDOW_POSITION,
    LEFT_PANEL_MIN_WIDTH, LEFT_PANEL_MAX_WIDTH, DEFAULT_SPLITTER_SIZES,
    ERROR_LOG_PANEL_HEIGHT, FRAME_INTERVAL_MS,
    SESSION_SAVE_AS_NAME, SESSION_FILE_FILTER,
    EXPORT_FILE_FILTER, DEFAULT_EXPORT_NAME,
    STATUS_MESSAGE_SHORT, STATUS_MESSAGE_MEDIUM, STATUS_MESSAGE_LONG,
    WARNING_NO_SESSION_PATH, WARNING_NO_EXPORT_PATH,
    SUCCESS_SESSION_SAVED, SUCCESS_SESSION_LOADED, SUCCESS_EXPORT_TEMPLATE,
    STATUS_READY, EMPTY_SETTINGS_TEXT, GESTURE_HELP_TEXT,
)


class PlotMeMainWindow(QMainWindow):
    """
    Main application window for PlotMe.

    Attributes:
        state: The session being displayed and edited
        color_counter: Color index owned by the rendering phase
        controller: Drag gesture controller
        settings: QSettings object for persistent window settings
        plot_canvas: Main plotting widget
        folder_tree: Folder and file listing
        settings_dialogs: Open file settings dialogs by entry identity
    """

    def __init__(self) -> None:
        """Initialize the main application window."""
        super().__init__()

        # Application state
        self.state = SessionState.with_search_phrase()
        self.color_counter = ColorCounter()
        self.controller = InteractionController()
        self.settings = QSettings(APP_ORGANIZATION, 'Settings')
        self.settings_dialogs: Dict[int, FileSettingsDialog] = {}
        self._shown_errors = ''

        # UI setup
        self._setup_window()
        self._create_ui_components()
        self._load_settings()

        # Frame loop
        self.frame_timer = QTimer(self)
        self.frame_timer.timeout.connect(self._on_frame)
        self.frame_timer.start(FRAME_INTERVAL_MS)

        self.status_bar.showMessage(f'{APP_NAME} - {STATUS_READY}', STATUS_MESSAGE_LONG)

    def _setup_window(self) -> None:
        """Configure the main window properties."""
        self.setWindowTitle(f'{APP_NAME} v{APP_VERSION}')
        self.setGeometry(*DEFAULT_WINDOW_POSITION, *DEFAULT_WINDOW_SIZE)

    def _create_ui_components(self) -> None:
        """Create all UI components in the correct order."""
        self._create_status_bar()
        self._create_main_layout()
        self._create_menu_bar()

    # ==================== Menu Creation ====================

    def _create_menu_bar(self) -> None:
        """Create the application menu bar."""
        menubar = self.menuBar()

        self._create_folder_menu(menubar)
        self._create_session_menu(menubar)
        self._create_file_settings_menu(menubar)
        self._create_plot_menu(menubar)
        self._create_help_menu(menubar)

    def _create_folder_menu(self, menubar: 'QMenuBar') -> None:
        """Create the Folder menu."""
        folder_menu = menubar.addMenu('&Folder')

        open_folder_action = QAction('&Open Folder...', self)
        open_folder_action.setShortcut('Ctrl+O')
        open_folder_action.setStatusTip('Add a folder of CSV files')
        open_folder_action.triggered.connect(self.open_folder)
        folder_menu.addAction(open_folder_action)

        folder_menu.addSeparator()

        exit_action = QAction('E&xit', self)
        exit_action.setShortcut('Ctrl+Q')
        exit_action.setStatusTip('Exit the application')
        exit_action.triggered.connect(self.close)
        folder_menu.addAction(exit_action)

    def _create_session_menu(self, menubar: 'QMenuBar') -> None:
        """Create the Session menu."""
        session_menu = menubar.addMenu('&Session')

        save_action = QAction('&Save Session', self)
        save_action.setShortcut('Ctrl+S')
        save_action.setStatusTip('Save the session to the default file in your home directory')
        save_action.triggered.connect(lambda: self.save_session())
        session_menu.addAction(save_action)

        load_action = QAction('&Load Session', self)
        load_action.setShortcut('Ctrl+L')
        load_action.setStatusTip('Load the session from the default file in your home directory')
        load_action.triggered.connect(lambda: self.load_session())
        session_menu.addAction(load_action)

        session_menu.addSeparator()

        save_as_action = QAction('Save Session &As...', self)
        save_as_action.setShortcut('Ctrl+Shift+S')
        save_as_action.triggered.connect(self.save_session_as)
        session_menu.addAction(save_as_action)

        load_from_action = QAction('Load Session &From...', self)
        load_from_action.setShortcut('Ctrl+Shift+L')
        load_from_action.triggered.connect(self.load_session_from)
        session_menu.addAction(load_from_action)

    def _create_file_settings_menu(self, menubar: 'QMenuBar') -> None:
        """Create the File Settings menu, rebuilt each time it opens."""
        self.file_settings_menu = menubar.addMenu('File &Settings')
        self.file_settings_menu.aboutToShow.connect(self._populate_file_settings_menu)

    def _populate_file_settings_menu(self) -> None:
        self.file_settings_menu.clear()
        entries = self.state.settings_entries()
        if not entries:
            placeholder = self.file_settings_menu.addAction(EMPTY_SETTINGS_TEXT)
            placeholder.setEnabled(False)
            return
        for folder, file_entry in entries:
            action = self.file_settings_menu.addAction(str(folder.file_path(file_entry)))
            action.triggered.connect(
                lambda checked=False, f=folder, e=file_entry: self.open_file_settings(f, e)
            )

    def _create_plot_menu(self, menubar: 'QMenuBar') -> None:
        """Create the Plot menu."""
        plot_menu = menubar.addMenu('&Plot')

        zoom_fit_action = QAction('Zoom to &Fit', self)
        zoom_fit_action.setShortcut('Ctrl+F')
        zoom_fit_action.setStatusTip('Fit the view to all plotted files')
        zoom_fit_action.triggered.connect(self.zoom_to_fit)
        plot_menu.addAction(zoom_fit_action)

        save_plot_action = QAction('Save &Plot...', self)
        save_plot_action.setShortcut('Ctrl+P')
        save_plot_action.setStatusTip('Export the current view as SVG')
        save_plot_action.triggered.connect(self.save_plot)
        plot_menu.addAction(save_plot_action)

    def _create_help_menu(self, menubar: 'QMenuBar') -> None:
        """Create the Help menu."""
        help_menu = menubar.addMenu('&Help')

        gestures_action = QAction('&Gestures', self)
        gestures_action.triggered.connect(
            lambda: QMessageBox.information(self, 'Gestures', GESTURE_HELP_TEXT)
        )
        help_menu.addAction(gestures_action)

        about_action = QAction('&About...', self)
        about_action.setStatusTip('About this application')
        about_action.triggered.connect(self.show_about_dialog)
        help_menu.addAction(about_action)

    def _create_status_bar(self) -> None:
        """Create the status bar for displaying application status."""
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        self.file_count_label = QLabel('No files plotted')
        self.status_bar.addPermanentWidget(self.file_count_label)

    # ==================== Layout Creation ====================

    def _create_main_layout(self) -> None:
        """Create the main application layout with splitter panels."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QHBoxLayout(central_widget)
        main_layout.setSpacing(5)
        main_layout.setContentsMargins(5, 5, 5, 5)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        left_panel = self._create_folder_panel()
        left_panel.setMinimumWidth(LEFT_PANEL_MIN_WIDTH)
        left_panel.setMaximumWidth(LEFT_PANEL_MAX_WIDTH)

        right_panel = self._create_plot_panel()

        splitter.addWidget(left_panel)
        splitter.addWidget(right_panel)
        splitter.setSizes(DEFAULT_SPLITTER_SIZES)

        main_layout.addWidget(splitter)

    def _create_folder_panel(self) -> QWidget:
        """Create the left panel with the search filter and folder tree."""
        panel = QWidget()
        layout = QVBoxLayout(panel)

        folder_group = QGroupBox('Folders')
        folder_layout = QVBoxLayout(folder_group)

        self.search_edit = QLineEdit(self.state.search_phrase)
        self.search_edit.setPlaceholderText('Filter file names')
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.textChanged.connect(self._on_search_phrase_changed)
        folder_layout.addWidget(self.search_edit)

        self.folder_tree = FolderTreeWidget(self.state)
        self.folder_tree.state_changed.connect(self._on_state_changed)
        folder_layout.addWidget(self.folder_tree)

        layout.addWidget(folder_group)
        return panel

    def _create_plot_panel(self) -> QWidget:
        """Create the right panel with the plot, its toolbar and the error log."""
        panel = QWidget()
        layout = QVBoxLayout(panel)
        layout.setSpacing(2)
        layout.setContentsMargins(0, 0, 0, 0)

        self.plot_canvas = PlotCanvas()
        self.toolbar = NavigationToolbar(self.plot_canvas, panel)

        layout.addWidget(self.toolbar)
        layout.addWidget(self.plot_canvas, 1)

        self.error_panel = QTextEdit()
        self.error_panel.setReadOnly(True)
        self.error_panel.setMaximumHeight(ERROR_LOG_PANEL_HEIGHT)
        self.error_panel.setFont(QFont('Courier', 9))
        self.error_panel.setPlaceholderText('Errors and warnings will appear here.')
        layout.addWidget(self.error_panel)

        return panel

    # ==================== Settings Management ====================

    def _load_settings(self) -> None:
        """Load application settings from persistent storage."""
        if self.settings.contains('geometry'):
            self.restoreGeometry(self.settings.value('geometry'))

    def _save_settings(self) -> None:
        """Save application settings to persistent storage."""
        self.settings.setValue('geometry', self.saveGeometry())

    # ==================== Frame Loop ====================

    def _on_frame(self) -> None:
        """
        Run one frame: apply gestures, write back the viewport and purge
        folders removed during the previous frame.
        """
        sample = self.plot_canvas.take_input_sample()
        result = self.controller.process(self.state, sample)
        self.plot_canvas.set_gesture_mode(result.suppress_drag)
        if result.changed:
            self.plot_canvas.redraw(self.state, self.color_counter)
            self._sync_settings_dialogs()

        self.state.plot_dims.update(*self.plot_canvas.bounds())

        if self.state.delete_folders():
            self._on_state_changed()

        self._refresh_error_panel()

    def _on_state_changed(self) -> None:
        """Redraw after a click or an edit changed the session."""
        self.plot_canvas.redraw(self.state, self.color_counter)
        # Rows are rebuilt after the redraw so newly assigned colors show up
        self.folder_tree.refresh()
        self._close_stale_dialogs()
        self._sync_settings_dialogs()
        self._update_file_count()
        self._refresh_error_panel()

    def _on_search_phrase_changed(self, text: str) -> None:
        if self.state.set_search_phrase(text):
            self.folder_tree.refresh()

    def _refresh_error_panel(self) -> None:
        text = self.state.errors.text()
        if text != self._shown_errors:
            self._shown_errors = text
            self.error_panel.setPlainText(text)
            scrollbar = self.error_panel.verticalScrollBar()
            scrollbar.setValue(scrollbar.maximum())

    def _update_file_count(self) -> None:
        count = len(self.state.drawn_entries())
        self.file_count_label.setText(f'{count} file(s) plotted' if count else 'No files plotted')

    # ==================== File Settings ====================

    def open_file_settings(self, folder: Folder, file_entry: FileEntry) -> None:
        """Show the settings dialog for an entry, reusing an open one."""
        dialog = self.settings_dialogs.get(id(file_entry))
        if dialog is None:
            dialog = FileSettingsDialog(self.state, folder, file_entry, self)
            dialog.entry_changed.connect(self._on_state_changed)
            dialog.finished.connect(
                lambda _result, key=id(file_entry): self.settings_dialogs.pop(key, None)
            )
            self.settings_dialogs[id(file_entry)] = dialog
        dialog.show()
        dialog.raise_()
        dialog.activateWindow()

    def _sync_settings_dialogs(self) -> None:
        for dialog in self.settings_dialogs.values():
            dialog.sync_from_entry()

    def _close_stale_dialogs(self) -> None:
        """Close dialogs whose entry is no longer part of the session."""
        live = {id(file_entry) for _, file_entry in self.state.iter_entries()}
        for key, dialog in list(self.settings_dialogs.items()):
            if key not in live:
                dialog.close()
                self.settings_dialogs.pop(key, None)

    # ==================== Folder Operations ====================

    def open_folder(self) -> None:
        """Pick a directory and add it to the session."""
        directory = QFileDialog.getExistingDirectory(self, 'Open Folder')
        if not directory:
            return
        folders = self.state.open_folders([directory])
        self.folder_tree.refresh()
        self._refresh_error_panel()
        count = sum(len(folder.files) for folder in folders)
        self.status_bar.showMessage(
            f'Opened {Path(directory).name} ({count} files)', STATUS_MESSAGE_SHORT
        )

    # ==================== Session Operations ====================

    def save_session(self, path: Optional[str] = None) -> None:
        """Save the session to ``path`` or the default session file."""
        if self.state.save(path):
            self.status_bar.showMessage(
                SUCCESS_SESSION_SAVED.format(path=path or 'default session file'),
                STATUS_MESSAGE_MEDIUM
            )
        self._refresh_error_panel()

    def load_session(self, path: Optional[str] = None) -> None:
        """Replace the session with the one stored in ``path`` or the default file."""
        if not self.state.load(path):
            self._refresh_error_panel()
            return

        for dialog in list(self.settings_dialogs.values()):
            dialog.close()
        self.settings_dialogs.clear()

        self.search_edit.blockSignals(True)
        self.search_edit.setText(self.state.search_phrase)
        self.search_edit.blockSignals(False)

        self.plot_canvas.reset_view(self.state, self.color_counter)
        self.folder_tree.refresh()
        self._update_file_count()
        self._refresh_error_panel()
        self.status_bar.showMessage(
            SUCCESS_SESSION_LOADED.format(path=path or 'default session file'),
            STATUS_MESSAGE_MEDIUM
        )

    def save_session_as(self) -> None:
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            'Save Session As',
            SESSION_SAVE_AS_NAME,
            SESSION_FILE_FILTER
        )
        if not file_path:
            self.state.errors.append(WARNING_NO_SESSION_PATH)
            self._refresh_error_panel()
            return
        self.save_session(file_path)

    def load_session_from(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            'Load Session From',
            '',
            SESSION_FILE_FILTER
        )
        if file_path:
            self.load_session(file_path)

    # ==================== Plot Operations ====================

    def zoom_to_fit(self) -> None:
        """Fit the view to all plotted files."""
        self.plot_canvas.zoom_to_fit()

    def save_plot(self) -> None:
        """Export the current view as an SVG file."""
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            'Save Plot',
            DEFAULT_EXPORT_NAME,
            EXPORT_FILE_FILTER
        )
        if not file_path:
            self.state.errors.append(WARNING_NO_EXPORT_PATH)
            self._refresh_error_panel()
            return

        self.state.plot_dims.update(*self.plot_canvas.bounds())
        if export_svg(self.state, file_path):
            self.status_bar.showMessage(
                SUCCESS_EXPORT_TEMPLATE.format(filename=Path(file_path).name),
                STATUS_MESSAGE_MEDIUM
            )
        self._refresh_error_panel()

    def show_about_dialog(self) -> None:
        """Display the About dialog."""
        about_text = f"""
        <h2>{APP_NAME}</h2>
        <p><b>Version:</b> {APP_VERSION}</p>

        <p>A PyQt6 application for plotting numeric data from CSV files.</p>

        <p><b>Features:</b></p>
        <ul>
        <li>Browse folders and filter files by name</li>
        <li>Per-file delimiter, comment and column settings</li>
        <li>Interactive scale and offset gestures on active files</li>
        <li>Export the current view as SVG</li>
        <li>Save and restore sessions</li>
        </ul>

        <p><b>Dependencies:</b> PyQt6, matplotlib, numpy</p>
        """

        QMessageBox.about(self, f'About {APP_NAME}', about_text)

    # ==================== Event Handling ====================

    def closeEvent(self, event: 'QCloseEvent') -> None:
        """Handle application closing."""
        self.frame_timer.stop()
        self._save_settings()
        event.accept()
