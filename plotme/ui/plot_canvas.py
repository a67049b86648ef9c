#!/usr/bin/env python3
"""
Plot canvas widget for PlotMe.

This module contains the PlotCanvas class that provides matplotlib integration
with PyQt6 for drawing the plotted file entries, and collects the pointer and
key input consumed by the interaction controller on every frame.
"""

import matplotlib
from typing import Optional, Set, Tuple

# Set matplotlib backend before other matplotlib imports
from ..utils.constants import MATPLOTLIB_BACKEND
matplotlib.use(MATPLOTLIB_BACKEND)

from matplotlib.backend_bases import MouseButton
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
from PyQt6.QtCore import Qt

from ..core.interaction import InputSample
from ..core.render import ColorCounter, series_points, to_mpl_color
from ..core.state import PlotDimensions, SessionState
from ..utils.constants import (
    DEFAULT_PLOT_FIGURE_SIZE,
    DEFAULT_PLOT_DPI,
    PLOT_XLABEL,
    PLOT_YLABEL,
    PLOT_LINE_WIDTH,
    PLOT_ACTIVE_LINE_WIDTH,
    PLOT_GRID_ALPHA,
    GESTURE_KEYS,
)


class PlotCanvas(FigureCanvas):
    """
    Matplotlib canvas widget integrated with PyQt6.

    The canvas keeps no plot state of its own: every redraw rebuilds the lines
    from the session. Pointer and key events are accumulated between frames
    and handed over as one InputSample by ``take_input_sample``.

    Attributes:
        fig: Matplotlib figure object
        ax: Axes holding all series
    """

    def __init__(self, parent: Optional['QWidget'] = None) -> None:
        """
        Initialize the plot canvas.

        Args:
            parent: Parent widget, if any
        """
        self.fig = Figure(figsize=DEFAULT_PLOT_FIGURE_SIZE, dpi=DEFAULT_PLOT_DPI)
        self.fig.patch.set_facecolor('white')
        self.fig.subplots_adjust(left=0.08, bottom=0.08, right=0.96, top=0.96)

        super().__init__(self.fig)
        self.setParent(parent)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self.ax = self.fig.add_subplot(111)
        self._setup_empty_plot()

        # Entries drawn on the last redraw, by identity
        self._drawn_ids: Set[int] = set()

        # Input collected since the last frame
        self._primary_pressed = False
        self._primary_down = False
        self._keys_down: Set[str] = set()
        self._last_pos: Optional[Tuple[float, float]] = None
        self._delta_x = 0.0
        self._delta_y = 0.0

        self.mpl_connect('button_press_event', self._on_button_press)
        self.mpl_connect('button_release_event', self._on_button_release)
        self.mpl_connect('motion_notify_event', self._on_motion)
        self.mpl_connect('key_press_event', self._on_key_press)
        self.mpl_connect('key_release_event', self._on_key_release)

        self.draw()

    def _setup_empty_plot(self) -> None:
        """Configure the initial empty plot appearance."""
        self.ax.set_xlabel(PLOT_XLABEL)
        self.ax.set_ylabel(PLOT_YLABEL)
        self.ax.grid(True, alpha=PLOT_GRID_ALPHA)

    # ==================== Input Tracking ====================

    def _on_button_press(self, event) -> None:
        # Connected before the toolbar, so navigation is settled before it sees the press
        self._update_navigation()
        if event.button == MouseButton.LEFT:
            self._primary_pressed = True
            self._primary_down = True
            self._last_pos = (event.x, event.y)
        self.setFocus()

    def _on_button_release(self, event) -> None:
        if event.button == MouseButton.LEFT:
            self._primary_down = False

    def _on_motion(self, event) -> None:
        if self._last_pos is not None:
            last_x, last_y = self._last_pos
            self._delta_x += event.x - last_x
            # matplotlib pixel coordinates grow upward, screen coordinates downward
            self._delta_y -= event.y - last_y
        self._last_pos = (event.x, event.y)

    @staticmethod
    def _key_name(event) -> Optional[str]:
        if not event.key:
            return None
        # 'shift+F' and 'ctrl+f' both count as 'f'
        return event.key.split('+')[-1].lower()

    def _on_key_press(self, event) -> None:
        key = self._key_name(event)
        if key:
            self._keys_down.add(key)
            self._update_navigation()

    def _on_key_release(self, event) -> None:
        key = self._key_name(event)
        if key:
            self._keys_down.discard(key)
            self._update_navigation()

    def focusOutEvent(self, event: 'QFocusEvent') -> None:
        """Forget held keys; their release will not reach the canvas."""
        self._keys_down.clear()
        self._update_navigation()
        super().focusOutEvent(event)

    def gesture_keys_held(self) -> bool:
        return bool(self._keys_down & GESTURE_KEYS)

    def _update_navigation(self, gesture_active: bool = False) -> None:
        """Toolbar pan/zoom is off while a gesture key is held or a gesture runs."""
        navigate = not (gesture_active or self.gesture_keys_held())
        if self.ax.get_navigate() != navigate:
            self.ax.set_navigate(navigate)

    def take_input_sample(self) -> InputSample:
        """
        Return the input collected since the previous call and reset it.

        Returns:
            InputSample with the press edge, held state, held keys and the
            accumulated pointer delta in screen coordinates
        """
        sample = InputSample(
            primary_pressed=self._primary_pressed,
            primary_down=self._primary_down,
            keys_down=frozenset(self._keys_down),
            delta=(self._delta_x, self._delta_y),
        )
        self._primary_pressed = False
        self._delta_x = 0.0
        self._delta_y = 0.0
        return sample

    def set_gesture_mode(self, enabled: bool) -> None:
        """Disable toolbar pan/zoom on the axes while a gesture is in progress."""
        self._update_navigation(enabled)

    # ==================== Drawing ====================

    def redraw(self, state: SessionState, color_counter: ColorCounter) -> None:
        """
        Rebuild all lines from the session.

        Uncolored entries take their color here. The view is fitted to the
        data whenever a new entry appears, otherwise the current view is kept.

        Args:
            state: Session to draw
            color_counter: Counter assigning colors to new entries
        """
        drawn = state.drawn_entries()
        color_counter.assign_colors(drawn)

        xlim, ylim = self.ax.get_xlim(), self.ax.get_ylim()
        for line in list(self.ax.get_lines()):
            line.remove()

        for file_entry in drawn:
            x, y = series_points(file_entry)
            width = PLOT_ACTIVE_LINE_WIDTH if file_entry.is_active() else PLOT_LINE_WIDTH
            self.ax.plot(x, y, color=to_mpl_color(file_entry.color),
                         linewidth=width, label=file_entry.filename)

        drawn_ids = {id(file_entry) for file_entry in drawn}
        new_ids = drawn_ids - self._drawn_ids
        self._drawn_ids = drawn_ids

        if new_ids:
            self.ax.relim()
            self.ax.autoscale(enable=True)
        else:
            self.ax.set_xlim(xlim)
            self.ax.set_ylim(ylim)

        legend = self.ax.get_legend()
        if drawn:
            self.ax.legend(loc='upper right')
        elif legend is not None:
            legend.remove()

        self.draw_idle()

    def zoom_to_fit(self) -> None:
        """Fit the view to all drawn series."""
        if self.ax.get_lines():
            self.ax.relim()
            self.ax.autoscale(enable=True)
            self.draw_idle()

    def bounds(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """Return the current (xlim, ylim) of the view."""
        return self.ax.get_xlim(), self.ax.get_ylim()

    def apply_bounds(self, plot_dims: PlotDimensions) -> None:
        """Show the given viewport; empty bounds are ignored."""
        if plot_dims.is_empty():
            return
        self.ax.set_xlim(plot_dims.x0, plot_dims.x1)
        self.ax.set_ylim(plot_dims.y0, plot_dims.y1)
        self.draw_idle()

    def reset_view(self, state: SessionState, color_counter: ColorCounter) -> None:
        """Redraw a freshly loaded session and apply its stored viewport."""
        self._drawn_ids = set()
        self.redraw(state, color_counter)
        self.apply_bounds(state.plot_dims)
