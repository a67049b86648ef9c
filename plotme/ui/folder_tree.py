#!/usr/bin/env python3
"""
Folder tree widget for PlotMe.

This module contains the FolderTreeWidget class listing the opened folders and
the file entries that pass the search filter. Clicks on the labels drive the
file entry state machine.
"""

from typing import Optional, Tuple

from PyQt6.QtWidgets import QTreeWidget, QTreeWidgetItem, QWidget, QMenu, QToolTip
from PyQt6.QtCore import Qt, QEvent, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QFont

from ..core.file_entry import FileEntry
from ..core.folder import Folder
from ..core.state import SessionState
from ..utils.constants import EMPTY_FOLDERS_TEXT

# Item data: (folder index, file index); file index is None for folder rows
ItemKey = Tuple[int, Optional[int]]


class FolderTreeWidget(QTreeWidget):
    """
    Tree of opened folders and their listed file entries.

    Left click on a folder toggles its expansion, left click on a file is a
    primary click, right click on a file is a secondary click and right click
    on a folder opens its context menu.

    Attributes:
        state_changed: Emitted after any click changed the session
    """

    state_changed = pyqtSignal()

    def __init__(self, state: SessionState, parent: Optional[QWidget] = None) -> None:
        """
        Initialize the folder tree.

        Args:
            state: Session whose folders are shown
            parent: Parent widget, if any
        """
        super().__init__(parent)
        self.state = state
        self.setHeaderHidden(True)
        self.setRootIsDecorated(False)
        self.setItemsExpandable(False)
        self.setMouseTracking(True)
        self.refresh()

    # ==================== Building ====================

    def refresh(self) -> None:
        """Rebuild all rows from the session."""
        self.clear()
        if not self.state.folders:
            placeholder = QTreeWidgetItem([EMPTY_FOLDERS_TEXT])
            placeholder.setFlags(Qt.ItemFlag.NoItemFlags)
            self.addTopLevelItem(placeholder)
            return

        for folder_idx, folder in enumerate(self.state.folders):
            marker = '▼' if folder.expanded else '▶'
            folder_item = QTreeWidgetItem([f"{marker} {folder.path}"])
            folder_item.setData(0, Qt.ItemDataRole.UserRole, (folder_idx, None))
            font = QFont()
            font.setBold(True)
            folder_item.setFont(0, font)
            self.addTopLevelItem(folder_item)

            for file_idx, file_entry in enumerate(folder.files):
                if not file_entry.should_be_listed(self.state.search_phrase, folder.expanded):
                    continue
                file_item = QTreeWidgetItem([file_entry.filename])
                file_item.setData(0, Qt.ItemDataRole.UserRole, (folder_idx, file_idx))
                self._style_file_item(file_item, file_entry)
                folder_item.addChild(file_item)

            folder_item.setExpanded(True)

    @staticmethod
    def _style_file_item(item: QTreeWidgetItem, file_entry: FileEntry) -> None:
        """Color the label according to the entry's state."""
        if file_entry.needs_config():
            item.setForeground(0, QBrush(QColor('red')))
            return
        if file_entry.is_drawn() and file_entry.has_color():
            r, g, b, _ = file_entry.color
            item.setBackground(0, QBrush(QColor(r, g, b)))
            item.setForeground(0, QBrush(QColor('black')))
        if file_entry.is_active():
            font = QFont()
            font.setBold(True)
            item.setFont(0, font)
            item.setForeground(0, QBrush(QColor(0, 0, 0, 128)))

    # ==================== Lookup ====================

    def _resolve(self, item: Optional[QTreeWidgetItem]) -> Tuple[Optional[Folder], Optional[FileEntry]]:
        if item is None:
            return None, None
        key: Optional[ItemKey] = item.data(0, Qt.ItemDataRole.UserRole)
        if key is None:
            return None, None
        folder_idx, file_idx = key
        folder = self.state.folders[folder_idx]
        if file_idx is None:
            return folder, None
        return folder, folder.files[file_idx]

    # ==================== Event Handling ====================

    def mousePressEvent(self, event: 'QMouseEvent') -> None:
        """Dispatch clicks on folder and file rows."""
        position = event.position().toPoint()
        folder, file_entry = self._resolve(self.itemAt(position))
        if folder is None:
            super().mousePressEvent(event)
            return

        button = event.button()
        if file_entry is None:
            if button == Qt.MouseButton.LeftButton:
                folder.toggle_expanded()
                self._emit_changed()
            elif button == Qt.MouseButton.RightButton:
                self._show_folder_menu(folder, position)
            return

        if button == Qt.MouseButton.LeftButton:
            file_entry.clicked(folder.path, self.state.errors)
            self._emit_changed()
        elif button == Qt.MouseButton.RightButton:
            file_entry.secondary_clicked()
            self._emit_changed()

    def _show_folder_menu(self, folder: Folder, position: 'QPoint') -> None:
        """
        Show right-click context menu for folder operations.

        Args:
            folder: Folder under the pointer
            position: Position where the context menu was requested
        """
        menu = QMenu(self)
        remove_action = menu.addAction("Remove Folder")
        remove_action.triggered.connect(lambda: folder.mark_for_deletion())
        menu.exec(self.viewport().mapToGlobal(position))

    def viewportEvent(self, event: QEvent) -> bool:
        """Show the first lines of a file as its tooltip."""
        if event.type() == QEvent.Type.ToolTip:
            folder, file_entry = self._resolve(self.itemAt(event.pos()))
            if file_entry is not None:
                QToolTip.showText(event.globalPos(), file_entry.get_preview(folder.path), self)
            else:
                QToolTip.hideText()
            return True
        return super().viewportEvent(event)

    def _emit_changed(self) -> None:
        # Listeners redraw and then call refresh()
        self.state_changed.emit()
