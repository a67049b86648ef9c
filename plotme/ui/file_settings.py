#!/usr/bin/env python3
"""
File settings dialog for PlotMe.

This module provides the non-modal dialog used to edit one plotted file entry:
its display transform, its CSV ingestion options and its color.
"""

from typing import Optional

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QPushButton,
    QGroupBox, QSpinBox, QLineEdit, QTextEdit, QColorDialog, QWidget
)
from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QColor, QFont

from ..core.csv_file import CSVOptions
from ..core.file_entry import FileEntry
from ..core.float_input import FloatInput
from ..core.folder import Folder
from ..core.render import to_hex
from ..core.state import SessionState

# Upper bound for column and skip spin boxes
MAX_COLUMN_INDEX = 9999


class FileSettingsDialog(QDialog):
    """
    Dialog bound to a single file entry.

    Edits are written straight into the entry; ``entry_changed`` tells the
    main window to redraw.
    """

    entry_changed = pyqtSignal()

    def __init__(self, state: SessionState, folder: Folder, file_entry: FileEntry,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.state = state
        self.folder = folder
        self.file_entry = file_entry

        self.setup_ui()
        self.sync_from_entry()
        self.setup_connections()

    def setup_ui(self):
        """Initialize the UI components."""
        self.setWindowTitle(f"File Settings - {self.file_entry.filename}")
        self.setModal(False)
        self.resize(420, 520)

        layout = QVBoxLayout(self)

        header = QLabel(str(self.folder.file_path(self.file_entry)))
        font = QFont()
        font.setBold(True)
        header.setFont(font)
        header.setWordWrap(True)
        layout.addWidget(header)

        # Transform group
        transform_group = QGroupBox("Transform")
        transform_layout = QGridLayout(transform_group)

        transform_layout.addWidget(QLabel("Scale:"), 0, 0)
        self.scale_edit = QLineEdit()
        transform_layout.addWidget(self.scale_edit, 0, 1)

        transform_layout.addWidget(QLabel("y-Offset:"), 1, 0)
        self.offset_edit = QLineEdit()
        transform_layout.addWidget(self.offset_edit, 1, 1)

        transform_layout.addWidget(QLabel("x-Offset:"), 2, 0)
        self.xoffset_edit = QLineEdit()
        transform_layout.addWidget(self.xoffset_edit, 2, 1)

        layout.addWidget(transform_group)

        # CSV options group
        csv_group = QGroupBox("CSV Options")
        csv_layout = QGridLayout(csv_group)

        csv_layout.addWidget(QLabel("Delimiter:"), 0, 0)
        self.delimiter_edit = QLineEdit()
        self.delimiter_edit.setMaxLength(1)
        csv_layout.addWidget(self.delimiter_edit, 0, 1)

        csv_layout.addWidget(QLabel("Comment:"), 1, 0)
        self.comment_edit = QLineEdit()
        self.comment_edit.setMaxLength(1)
        csv_layout.addWidget(self.comment_edit, 1, 1)

        csv_layout.addWidget(QLabel("x column (0-based):"), 2, 0)
        self.xcol_spin = self._create_spin_box()
        csv_layout.addWidget(self.xcol_spin, 2, 1)

        csv_layout.addWidget(QLabel("y column (0-based):"), 3, 0)
        self.ycol_spin = self._create_spin_box()
        csv_layout.addWidget(self.ycol_spin, 3, 1)

        csv_layout.addWidget(QLabel("Skip header rows:"), 4, 0)
        self.skip_header_spin = self._create_spin_box()
        csv_layout.addWidget(self.skip_header_spin, 4, 1)

        csv_layout.addWidget(QLabel("Skip footer rows:"), 5, 0)
        self.skip_footer_spin = self._create_spin_box()
        csv_layout.addWidget(self.skip_footer_spin, 5, 1)

        options_buttons = QHBoxLayout()
        self.copy_button = QPushButton("Copy Options")
        options_buttons.addWidget(self.copy_button)
        self.paste_button = QPushButton("Paste Options")
        options_buttons.addWidget(self.paste_button)
        self.reload_button = QPushButton("Reload CSV")
        options_buttons.addWidget(self.reload_button)
        csv_layout.addLayout(options_buttons, 6, 0, 1, 2)

        layout.addWidget(csv_group)

        # Preview of the raw file
        preview_group = QGroupBox("Preview")
        preview_layout = QVBoxLayout(preview_group)
        self.preview_text = QTextEdit()
        self.preview_text.setReadOnly(True)
        self.preview_text.setFont(QFont('Courier', 9))
        self.preview_text.setPlainText(self.file_entry.get_preview(self.folder.path))
        preview_layout.addWidget(self.preview_text)
        layout.addWidget(preview_group)

        # Button bar
        button_layout = QHBoxLayout()

        self.color_button = QPushButton("Color...")
        button_layout.addWidget(self.color_button)

        button_layout.addStretch()

        self.close_button = QPushButton("Close")
        button_layout.addWidget(self.close_button)

        layout.addLayout(button_layout)

    @staticmethod
    def _create_spin_box() -> QSpinBox:
        widget = QSpinBox()
        widget.setMinimum(0)
        widget.setMaximum(MAX_COLUMN_INDEX)
        return widget

    def setup_connections(self):
        """Connect signals to slots."""
        self.scale_edit.textEdited.connect(
            lambda text: self._set_text(self.file_entry.scale, text))
        self.offset_edit.textEdited.connect(
            lambda text: self._set_text(self.file_entry.offset, text))
        self.xoffset_edit.textEdited.connect(
            lambda text: self._set_text(self.file_entry.xoffset, text))

        self.delimiter_edit.textEdited.connect(self.apply_options)
        self.comment_edit.textEdited.connect(self.apply_options)
        for spin in (self.xcol_spin, self.ycol_spin,
                     self.skip_header_spin, self.skip_footer_spin):
            spin.valueChanged.connect(self.apply_options)

        self.copy_button.clicked.connect(self.copy_options)
        self.paste_button.clicked.connect(self.paste_options)
        self.reload_button.clicked.connect(self.reload_csv)
        self.color_button.clicked.connect(self.choose_color)
        self.close_button.clicked.connect(self.close)

    # ==================== Entry Synchronization ====================

    def sync_from_entry(self):
        """Show the entry's current values; fields being typed into are left alone."""
        for edit, float_input in ((self.scale_edit, self.file_entry.scale),
                                  (self.offset_edit, self.file_entry.offset),
                                  (self.xoffset_edit, self.file_entry.xoffset)):
            if edit.text() != float_input.input and not edit.hasFocus():
                edit.setText(float_input.input)

        options = self.file_entry.options
        widgets = (self.delimiter_edit, self.comment_edit, self.xcol_spin,
                   self.ycol_spin, self.skip_header_spin, self.skip_footer_spin)
        for widget in widgets:
            widget.blockSignals(True)
        self.delimiter_edit.setText(options.delimiter)
        self.comment_edit.setText(options.comment_char)
        self.xcol_spin.setValue(options.xcol)
        self.ycol_spin.setValue(options.ycol)
        self.skip_header_spin.setValue(options.skip_header)
        self.skip_footer_spin.setValue(options.skip_footer)
        for widget in widgets:
            widget.blockSignals(False)

        self.paste_button.setEnabled(self.state.copied_csv_options is not None)
        self._update_color_button()

    def _update_color_button(self):
        if self.file_entry.has_color():
            self.color_button.setStyleSheet(
                f"background-color: {to_hex(self.file_entry.color)}; color: white;")
        else:
            self.color_button.setStyleSheet("")

    def _set_text(self, float_input: FloatInput, text: str):
        float_input.input = text
        self.entry_changed.emit()

    # ==================== Actions ====================

    def apply_options(self, *_):
        """Store the options shown in the dialog on the entry."""
        self.file_entry.set_options(CSVOptions(
            delimiter=self.delimiter_edit.text(),
            comment_char=self.comment_edit.text(),
            xcol=self.xcol_spin.value(),
            ycol=self.ycol_spin.value(),
            skip_header=self.skip_header_spin.value(),
            skip_footer=self.skip_footer_spin.value(),
        ))

    def copy_options(self):
        self.state.copy_options(self.file_entry)
        self.paste_button.setEnabled(True)

    def paste_options(self):
        if self.state.paste_options(self.file_entry):
            self.sync_from_entry()

    def reload_csv(self):
        """Re-read the file with the options shown in the dialog."""
        self.apply_options()
        # On failure the old series stays; the change signal still refreshes the error log
        self.file_entry.reload_csv(self.folder.path, self.state.errors)
        self.entry_changed.emit()

    def choose_color(self):
        initial = QColor(*self.file_entry.color[:3]) if self.file_entry.has_color() else QColor('white')
        color = QColorDialog.getColor(initial, self, "Choose Series Color")
        if color.isValid():
            self.file_entry.color = (color.red(), color.green(), color.blue(), 255)
            self._update_color_button()
            self.entry_changed.emit()
