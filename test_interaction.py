#!/usr/bin/env python3
"""
Tests for the drag gesture controller.
"""

import unittest
from pathlib import Path

import numpy as np

from plotme.core.file_entry import FileEntry, FileEntryState
from plotme.core.folder import Folder
from plotme.core.interaction import InputSample, InteractionController
from plotme.core.state import PlotDimensions, SessionState


def press(keys=(), delta=(0.0, 0.0)) -> InputSample:
    return InputSample(primary_pressed=True, primary_down=True,
                       keys_down=frozenset(keys), delta=delta)


def hold(keys=(), delta=(0.0, 0.0)) -> InputSample:
    return InputSample(primary_pressed=False, primary_down=True,
                       keys_down=frozenset(keys), delta=delta)


def release() -> InputSample:
    return InputSample()


class InteractionTestCase(unittest.TestCase):
    """Session with one active, one plotted and one idle entry."""

    def setUp(self):
        self.active = FileEntry.new('active.csv')
        self.active.state = FileEntryState.ACTIVE
        self.plotted = FileEntry.new('plotted.csv')
        self.plotted.state = FileEntryState.PLOTTED
        self.idle = FileEntry.new('idle.csv')

        self.state = SessionState(
            folders=[Folder(path=Path('/data'), files=[self.active, self.plotted, self.idle])],
            plot_dims=PlotDimensions(x0=0.0, x1=200.0, y0=-5.0, y1=5.0),
        )
        self.controller = InteractionController()


class TestAcceleration(InteractionTestCase):

    def test_starts_unset(self):
        self.assertIsNone(self.state.acceleration)
        self.controller.process(self.state, hold(delta=(1.0, 1.0)))
        self.assertIsNone(self.state.acceleration)

    def test_grows_geometrically_while_held(self):
        self.controller.process(self.state, press(delta=(1.0, 1.0)))
        for _ in range(9):
            self.controller.process(self.state, hold(delta=(1.0, 1.0)))

        self.assertAlmostEqual(self.state.acceleration, 1.03 ** 10)

    def test_frozen_after_release_and_reset_on_press(self):
        self.controller.process(self.state, press())
        for _ in range(4):
            self.controller.process(self.state, hold())
        frozen = self.state.acceleration

        for _ in range(3):
            self.controller.process(self.state, release())
        self.assertEqual(self.state.acceleration, frozen)

        self.controller.process(self.state, press())
        self.assertAlmostEqual(self.state.acceleration, 1.03)


class TestGestures(InteractionTestCase):

    def test_scale_step_uses_sign_of_dy_only(self):
        self.controller.process(self.state, press(keys={'f'}, delta=(0.0, 3.0)))
        self.assertAlmostEqual(float(self.active.scale.input), 1.0 - 0.01 * 1.03)

    def test_scale_with_negative_dy(self):
        self.controller.process(self.state, press(keys={'f'}, delta=(0.0, -10.0)))
        self.assertAlmostEqual(float(self.active.scale.input), 1.0 + 0.01 * 1.03)

    def test_y_offset_uses_plot_height(self):
        self.controller.process(self.state, press(keys={'d'}, delta=(0.0, 2.0)))
        self.assertAlmostEqual(float(self.active.offset.input), -10.0 * 0.001 * 1.03)

    def test_x_offset_uses_plot_width(self):
        self.controller.process(self.state, press(keys={'g'}, delta=(-4.0, 0.0)))
        self.assertAlmostEqual(float(self.active.xoffset.input), -200.0 * 0.001 * 1.03)

    def test_only_active_entries_change(self):
        result = self.controller.process(self.state, press(keys={'f', 'g'}, delta=(1.0, 1.0)))

        self.assertTrue(result.changed)
        for file_entry in (self.plotted, self.idle):
            self.assertEqual(file_entry.scale.input, '1.0')
            self.assertEqual(file_entry.xoffset.input, '0.0')

    def test_d_and_f_together_cancel_vertical_gestures(self):
        result = self.controller.process(self.state, press(keys={'d', 'f'}, delta=(0.0, 5.0)))

        self.assertFalse(result.changed)
        self.assertTrue(result.suppress_drag)
        self.assertEqual(self.active.scale.input, '1.0')
        self.assertEqual(self.active.offset.input, '0.0')

    def test_no_change_without_movement_or_button(self):
        result = self.controller.process(self.state, press(keys={'f'}))
        self.assertFalse(result.changed)

        sample = InputSample(primary_down=False, keys_down=frozenset({'f'}), delta=(0.0, 5.0))
        result = self.controller.process(self.state, sample)
        self.assertFalse(result.changed)
        self.assertFalse(result.suppress_drag)
        self.assertEqual(self.active.scale.input, '1.0')

    def test_unparsable_field_is_preserved(self):
        self.active.scale.input = '1.2.'
        self.active.offset.input = '3'

        self.controller.process(self.state, press(keys={'f'}, delta=(0.0, 1.0)))
        self.controller.process(self.state, hold(keys={'d'}, delta=(0.0, 1.0)))

        self.assertEqual(self.active.scale.input, '1.2.')
        self.assertNotEqual(self.active.offset.input, '3')

    def test_result_is_written_as_repr(self):
        self.controller.process(self.state, press(keys={'g'}, delta=(1.0, 0.0)))
        value = float(self.active.xoffset.input)
        self.assertEqual(self.active.xoffset.input, repr(value))

    def test_sustained_drag_accelerates(self):
        steps = []
        previous = 1.0
        self.controller.process(self.state, press(keys={'f'}, delta=(0.0, -1.0)))
        for _ in range(20):
            current = float(self.active.scale.input)
            steps.append(current / previous)
            previous = current
            self.controller.process(self.state, hold(keys={'f'}, delta=(0.0, -1.0)))

        self.assertTrue(all(b > a for a, b in zip(steps, steps[1:])))
        self.assertTrue(np.all(np.array(steps) > 1.0))

    def test_suppress_drag_while_modifier_held(self):
        for key in ('d', 'f', 'g'):
            with self.subTest(key=key):
                result = self.controller.process(self.state, hold(keys={key}))
                self.assertTrue(result.suppress_drag)
        result = self.controller.process(self.state, hold(keys={'x'}))
        self.assertFalse(result.suppress_drag)


if __name__ == '__main__':
    unittest.main()
