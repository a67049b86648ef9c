#!/usr/bin/env python3
"""
Pointer-driven transform editing for PlotMe.

Each frame the GUI hands the controller one InputSample. While the primary
pointer button is held together with a gesture key, vertical or horizontal
pointer movement edits the scale, y-offset or x-offset text of every active
file entry. The edit rate grows exponentially the longer the button is held.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

import numpy as np

from .float_input import FloatInput
from .state import SessionState
from ..utils.constants import (
    ACCELERATION_GROWTH,
    SCALE_STEP,
    OFFSET_STEP,
    KEY_SCALE,
    KEY_Y_OFFSET,
    KEY_X_OFFSET,
    GESTURE_KEYS,
)


@dataclass(frozen=True)
class InputSample:
    """
    Pointer and keyboard input collected during one frame.

    Attributes:
        primary_pressed: The primary button went down during this frame
        primary_down: The primary button is currently held
        keys_down: Lower-case names of the keys currently held
        delta: Pointer movement (dx, dy) in screen pixels; dy grows downward
    """
    primary_pressed: bool = False
    primary_down: bool = False
    keys_down: FrozenSet[str] = field(default_factory=frozenset)
    delta: Tuple[float, float] = (0.0, 0.0)

    def gesture_held(self, key: str) -> bool:
        return self.primary_down and key in self.keys_down


@dataclass(frozen=True)
class GestureResult:
    """Outcome of processing one InputSample."""
    changed: bool = False
    suppress_drag: bool = False


class InteractionController:
    """Applies drag gestures to the transform fields of active entries."""

    def update_acceleration(self, state: SessionState, sample: InputSample) -> None:
        """
        Reset acceleration on a press edge and compound it while held.

        Once released, the value stays frozen until the next press.
        """
        if sample.primary_pressed:
            state.acceleration = 1.0
        if sample.primary_down and state.acceleration is not None:
            state.acceleration *= ACCELERATION_GROWTH

    def process(self, state: SessionState, sample: InputSample) -> GestureResult:
        """
        Apply one frame of input to the session.

        Args:
            state: Session whose active entries are edited
            sample: Input collected during the frame

        Returns:
            Whether any field changed and whether native plot dragging
            should be suppressed
        """
        self.update_acceleration(state, sample)

        d_down = sample.gesture_held(KEY_Y_OFFSET)
        f_down = sample.gesture_held(KEY_SCALE)
        g_down = sample.gesture_held(KEY_X_OFFSET)
        dx, dy = sample.delta
        acceleration = state.acceleration if state.acceleration is not None else 1.0

        changed = False
        # scale active plots along y
        if f_down and not d_down and dy != 0.0:
            step = float(np.sign(dy)) * SCALE_STEP * acceleration
            changed |= self._edit(state, 'scale', lambda value: value - step * value)
        # offset active plots along y
        if d_down and not f_down and dy != 0.0:
            step = float(np.sign(dy)) * state.plot_dims.yspan() * OFFSET_STEP * acceleration
            changed |= self._edit(state, 'offset', lambda value: value - step)
        # offset active plots along x
        if g_down and dx != 0.0:
            step = float(np.sign(dx)) * state.plot_dims.xspan() * OFFSET_STEP * acceleration
            changed |= self._edit(state, 'xoffset', lambda value: value + step)

        suppress_drag = any(sample.gesture_held(key) for key in GESTURE_KEYS)
        return GestureResult(changed=changed, suppress_drag=suppress_drag)

    @staticmethod
    def _edit(state: SessionState, field_name: str, update) -> bool:
        """
        Rewrite one transform field of every active entry.

        Fields whose text does not parse are left untouched.
        """
        changed = False
        for file_entry in state.active_entries():
            float_input: FloatInput = getattr(file_entry, field_name)
            value = float_input.parse()
            if value is None:
                continue
            float_input.set_value(update(value))
            changed = True
        return changed
