#!/usr/bin/env python3
"""
Tests for the main window frame loop, run on Qt's offscreen platform.

Pointer and key input is fed to the canvas as matplotlib events and frames are
stepped by hand instead of by the timer.
"""

import os
import unittest
from pathlib import Path
from unittest import mock

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

import numpy as np
from matplotlib.backend_bases import KeyEvent, MouseButton, MouseEvent
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import QApplication

from plotme.core.csv_file import CSVFile
from plotme.core.file_entry import FileEntry, FileEntryState
from plotme.core.folder import Folder
from plotme.core.state import PlotDimensions
from plotme.ui.main_window import PlotMeMainWindow


class MainWindowTestCase(unittest.TestCase):
    """Window showing one active entry, with the frame timer stopped."""

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        self.window = PlotMeMainWindow()
        self.window.frame_timer.stop()
        self.canvas = self.window.plot_canvas

        self.active = FileEntry.new('active.csv')
        self.active.data_file = CSVFile(filepath=Path('/data/active.csv'),
                                        data=np.array([[0.0, 0.0], [10.0, 10.0]]))
        self.active.state = FileEntryState.ACTIVE
        self.folder = Folder(path=Path('/data'), files=[self.active])
        self.window.state.folders.append(self.folder)
        self.window._on_state_changed()
        self.window._on_frame()

    def tearDown(self):
        for dialog in list(self.window.settings_dialogs.values()):
            dialog.close()
        self.window.deleteLater()

    def send_key(self, name: str, key: str) -> None:
        self.canvas.callbacks.process(name, KeyEvent(name, self.canvas, key))

    def send_mouse(self, name: str, x: float, y: float) -> None:
        event = MouseEvent(name, self.canvas, x, y, button=MouseButton.LEFT)
        self.canvas.callbacks.process(name, event)

    def drag(self, steps: int = 5) -> None:
        """Press in the middle of the data, move in steps, release."""
        x, y = self.canvas.ax.transData.transform((5.0, 5.0))
        self.send_mouse('button_press_event', x, y)
        self.window._on_frame()
        for step in range(1, steps + 1):
            self.send_mouse('motion_notify_event', x + 10 * step, y - 10 * step)
            self.window._on_frame()
        self.send_mouse('button_release_event', x + 10 * steps, y - 10 * steps)
        self.window._on_frame()


class TestGestureSuppressesPan(MainWindowTestCase):

    def test_toolbar_pan_is_blocked_while_gesture_key_held(self):
        self.window.toolbar.pan()
        xlim, ylim = self.canvas.bounds()

        self.send_key('key_press_event', 'f')
        self.window._on_frame()
        self.drag()

        self.assertNotEqual(self.active.scale.input, '1.0')
        np.testing.assert_allclose(self.canvas.bounds()[0], xlim)
        np.testing.assert_allclose(self.canvas.bounds()[1], ylim)

    def test_toolbar_pan_works_without_gesture_key(self):
        self.window.toolbar.pan()
        xlim, _ = self.canvas.bounds()

        self.drag()

        self.assertEqual(self.active.scale.input, '1.0')
        self.assertFalse(np.allclose(self.canvas.bounds()[0], xlim))

    def test_navigation_follows_gesture_keys(self):
        self.assertTrue(self.canvas.ax.get_navigate())

        self.send_key('key_press_event', 'g')
        self.assertFalse(self.canvas.ax.get_navigate())
        self.window._on_frame()
        self.assertFalse(self.canvas.ax.get_navigate())

        self.send_key('key_release_event', 'g')
        self.assertTrue(self.canvas.ax.get_navigate())
        self.window._on_frame()
        self.assertTrue(self.canvas.ax.get_navigate())

    def test_other_keys_leave_navigation_on(self):
        self.send_key('key_press_event', 'x')
        self.window._on_frame()
        self.assertTrue(self.canvas.ax.get_navigate())


class TestViewportWriteBack(MainWindowTestCase):

    def test_bounds_follow_view_after_one_frame(self):
        self.canvas.ax.set_xlim(-3.0, 7.0)
        self.canvas.ax.set_ylim(1.0, 2.0)

        self.window._on_frame()

        self.assertEqual(self.window.state.plot_dims,
                         PlotDimensions(x0=-3.0, x1=7.0, y0=1.0, y1=2.0))


class TestColorChange(MainWindowTestCase):

    def test_tree_row_shows_new_color(self):
        self.window.open_file_settings(self.folder, self.active)
        dialog = self.window.settings_dialogs[id(self.active)]

        with mock.patch('plotme.ui.file_settings.QColorDialog.getColor',
                        return_value=QColor(255, 0, 0)):
            dialog.choose_color()

        self.assertEqual(self.active.color, (255, 0, 0, 255))
        file_item = self.window.folder_tree.topLevelItem(0).child(0)
        self.assertEqual(file_item.text(0), 'active.csv')
        self.assertEqual(file_item.background(0).color(), QColor(255, 0, 0))


if __name__ == '__main__':
    unittest.main()
