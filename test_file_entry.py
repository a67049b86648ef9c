#!/usr/bin/env python3
"""
Tests for the file entry state machine, listing rules and folder scanning.
"""

import shutil
import tempfile
import unittest
from pathlib import Path

import numpy as np

from plotme.core.csv_file import CSVOptions
from plotme.core.file_entry import (
    FileEntry,
    FileEntryState,
    get_file_entries,
)
from plotme.core.folder import Folder
from plotme.utils.constants import TRANSPARENT
from plotme.utils.errors import ErrorLog, SessionFormatError

S = FileEntryState


class EntryTestCase(unittest.TestCase):
    """Base class with a scratch folder holding a good and a bad CSV file."""

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())
        (self.tmpdir / 'good.csv').write_text("1,2\n3,4\n", encoding='utf-8')
        (self.tmpdir / 'bad.csv').write_text("a,b\nc,d\n", encoding='utf-8')
        self.errors = ErrorLog()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def entry_with_data(self, state: FileEntryState) -> FileEntry:
        file_entry = FileEntry.new('good.csv')
        file_entry.clicked(self.tmpdir, self.errors)
        file_entry.state = state
        return file_entry


class TestFirstClick(EntryTestCase):

    def test_first_click_ingests_and_plots(self):
        file_entry = FileEntry.new('good.csv')

        file_entry.clicked(self.tmpdir, self.errors)

        self.assertEqual(file_entry.state, S.PLOTTED)
        np.testing.assert_array_equal(file_entry.data_file.data, [[1, 2], [3, 4]])
        self.assertEqual(file_entry.data_file.filepath, self.tmpdir / 'good.csv')

    def test_zero_yield_needs_config(self):
        file_entry = FileEntry.new('bad.csv')

        file_entry.clicked(self.tmpdir, self.errors)

        self.assertEqual(file_entry.state, S.NEEDS_CONFIG)
        self.assertFalse(file_entry.data_file.has_data())
        self.assertGreater(len(self.errors), 0)

    def test_unreadable_file_needs_config(self):
        file_entry = FileEntry.new('missing.csv')

        file_entry.clicked(self.tmpdir, self.errors)

        self.assertEqual(file_entry.state, S.NEEDS_CONFIG)
        self.assertTrue(self.errors.messages()[-1].startswith('ERROR:'))

    def test_needs_config_click_returns_to_idle_then_retries(self):
        file_entry = FileEntry.new('bad.csv')
        file_entry.clicked(self.tmpdir, self.errors)

        file_entry.clicked(self.tmpdir, self.errors)
        self.assertEqual(file_entry.state, S.IDLE)

        # fix the options and try again
        (self.tmpdir / 'bad.csv').write_text("1,2\n", encoding='utf-8')
        file_entry.clicked(self.tmpdir, self.errors)
        self.assertEqual(file_entry.state, S.PLOTTED)


class TestTransitions(EntryTestCase):
    """Every state against every event once the entry holds data."""

    PRIMARY = {
        S.IDLE: S.PLOTTED,
        S.PLOTTED: S.PREVIOUSLY_PLOTTED,
        S.ACTIVE: S.PREVIOUSLY_PLOTTED,
        S.PREVIOUSLY_PLOTTED: S.PLOTTED,
        S.NEEDS_CONFIG: S.IDLE,
    }
    SECONDARY = {
        S.IDLE: S.IDLE,
        S.PLOTTED: S.ACTIVE,
        S.ACTIVE: S.PLOTTED,
        S.PREVIOUSLY_PLOTTED: S.PREVIOUSLY_PLOTTED,
        S.NEEDS_CONFIG: S.NEEDS_CONFIG,
    }
    SEARCH_CHANGED = {
        S.IDLE: S.IDLE,
        S.PLOTTED: S.PLOTTED,
        S.ACTIVE: S.ACTIVE,
        S.PREVIOUSLY_PLOTTED: S.IDLE,
        S.NEEDS_CONFIG: S.NEEDS_CONFIG,
    }

    def test_primary_click(self):
        for start, expected in self.PRIMARY.items():
            with self.subTest(start=start):
                file_entry = self.entry_with_data(start)
                file_entry.clicked(self.tmpdir, self.errors)
                self.assertEqual(file_entry.state, expected)

    def test_secondary_click(self):
        for start, expected in self.SECONDARY.items():
            with self.subTest(start=start):
                file_entry = self.entry_with_data(start)
                file_entry.secondary_clicked()
                self.assertEqual(file_entry.state, expected)

    def test_search_phrase_changed(self):
        for start, expected in self.SEARCH_CHANGED.items():
            with self.subTest(start=start):
                file_entry = self.entry_with_data(start)
                file_entry.search_phrase_changed()
                self.assertEqual(file_entry.state, expected)

    def test_transitions_do_not_depend_on_history(self):
        direct = self.entry_with_data(S.ACTIVE)
        via_plotted = self.entry_with_data(S.IDLE)
        via_plotted.clicked(self.tmpdir, self.errors)
        via_plotted.secondary_clicked()
        self.assertEqual(via_plotted.state, S.ACTIVE)

        direct.clicked(self.tmpdir, self.errors)
        via_plotted.clicked(self.tmpdir, self.errors)
        self.assertEqual(direct.state, via_plotted.state)

    def test_predicates(self):
        self.assertTrue(self.entry_with_data(S.PLOTTED).is_drawn())
        self.assertTrue(self.entry_with_data(S.ACTIVE).is_drawn())
        self.assertFalse(self.entry_with_data(S.NEEDS_CONFIG).is_drawn())
        self.assertTrue(self.entry_with_data(S.NEEDS_CONFIG).is_plotted())
        self.assertFalse(self.entry_with_data(S.PREVIOUSLY_PLOTTED).is_plotted())
        self.assertTrue(self.entry_with_data(S.PREVIOUSLY_PLOTTED).was_just_plotted())


class TestListing(unittest.TestCase):
    """Which entries appear in a folder listing."""

    def make(self, filename: str, state: FileEntryState) -> FileEntry:
        file_entry = FileEntry.new(filename)
        file_entry.state = state
        return file_entry

    def test_matching_idle_entry_listed_only_when_expanded(self):
        file_entry = self.make('run_01.csv', S.IDLE)
        self.assertTrue(file_entry.should_be_listed('.csv', True))
        self.assertFalse(file_entry.should_be_listed('.csv', False))

    def test_all_tokens_must_match(self):
        file_entry = self.make('run_01.csv', S.IDLE)
        self.assertTrue(file_entry.should_be_listed('run .csv', True))
        self.assertFalse(file_entry.should_be_listed('run .txt', True))
        self.assertTrue(file_entry.should_be_listed('', True))

    def test_plotted_states_always_listed(self):
        for state in (S.PLOTTED, S.ACTIVE, S.NEEDS_CONFIG):
            with self.subTest(state=state):
                file_entry = self.make('notes.txt', state)
                self.assertTrue(file_entry.should_be_listed('.csv', False))

    def test_previously_plotted_listed_while_expanded(self):
        file_entry = self.make('notes.txt', S.PREVIOUSLY_PLOTTED)
        self.assertTrue(file_entry.should_be_listed('.csv', True))
        self.assertFalse(file_entry.should_be_listed('.csv', False))


class TestReloadAndOptions(EntryTestCase):

    def test_reload_replaces_series(self):
        file_entry = self.entry_with_data(S.PLOTTED)
        (self.tmpdir / 'good.csv').write_text("5,6\n", encoding='utf-8')

        self.assertTrue(file_entry.reload_csv(self.tmpdir, self.errors))

        np.testing.assert_array_equal(file_entry.data_file.data, [[5.0, 6.0]])
        self.assertEqual(file_entry.state, S.PLOTTED)

    def test_failed_reload_keeps_series_and_state(self):
        file_entry = self.entry_with_data(S.ACTIVE)
        (self.tmpdir / 'good.csv').write_text("x,y\n", encoding='utf-8')

        self.assertFalse(file_entry.reload_csv(self.tmpdir, self.errors))

        np.testing.assert_array_equal(file_entry.data_file.data, [[1, 2], [3, 4]])
        self.assertEqual(file_entry.state, S.ACTIVE)

    def test_set_options_keeps_data_until_reload(self):
        file_entry = self.entry_with_data(S.PLOTTED)

        file_entry.set_options(CSVOptions(xcol=1, ycol=0))

        np.testing.assert_array_equal(file_entry.data_file.data, [[1, 2], [3, 4]])
        file_entry.reload_csv(self.tmpdir, self.errors)
        np.testing.assert_array_equal(file_entry.data_file.data, [[2, 1], [4, 3]])

    def test_transformed_data(self):
        file_entry = self.entry_with_data(S.PLOTTED)
        file_entry.scale.input = '2.0'
        file_entry.offset.input = '1.0'
        file_entry.xoffset.input = '-1.0'

        np.testing.assert_allclose(file_entry.transformed_data(), [[0, 5], [2, 9]])

    def test_transformed_data_falls_back_on_bad_text(self):
        file_entry = self.entry_with_data(S.PLOTTED)
        file_entry.scale.input = 'two'
        file_entry.offset.input = ''
        file_entry.xoffset.input = '-'

        np.testing.assert_allclose(file_entry.transformed_data(), [[1, 2], [3, 4]])
        self.assertEqual(file_entry.scale.input, 'two')

    def test_preview_is_cached(self):
        file_entry = FileEntry.new('good.csv')
        self.assertEqual(file_entry.get_preview(self.tmpdir), "1,2\n3,4")

        (self.tmpdir / 'good.csv').write_text("changed\n", encoding='utf-8')
        self.assertEqual(file_entry.get_preview(self.tmpdir), "1,2\n3,4")


class TestSerialization(EntryTestCase):

    def test_round_trip(self):
        file_entry = self.entry_with_data(S.ACTIVE)
        file_entry.scale.input = '1.5'
        file_entry.color = (10, 20, 30, 255)

        restored = FileEntry.from_dict(file_entry.to_dict())

        self.assertEqual(restored, file_entry)
        self.assertEqual(restored.state, S.ACTIVE)
        self.assertEqual(restored.color, (10, 20, 30, 255))

    def test_state_tags_are_names(self):
        file_entry = self.entry_with_data(S.PREVIOUSLY_PLOTTED)
        self.assertEqual(file_entry.to_dict()['state'], 'PreviouslyPlotted')

    def test_unknown_state_raises(self):
        record = FileEntry.new('a.csv').to_dict()
        record['state'] = 'Hidden'
        with self.assertRaises(SessionFormatError):
            FileEntry.from_dict(record)


class TestFolderScan(unittest.TestCase):

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_scan_lists_sorted_regular_files(self):
        for name in ('b.csv', 'a.csv', 'notes.txt'):
            (self.tmpdir / name).write_text("1,2\n", encoding='utf-8')
        (self.tmpdir / 'subdir').mkdir()

        entries = get_file_entries(self.tmpdir)

        self.assertEqual([e.filename for e in entries], ['a.csv', 'b.csv', 'notes.txt'])
        for file_entry in entries:
            self.assertEqual(file_entry.state, S.IDLE)
            self.assertEqual(file_entry.color, TRANSPARENT)
            self.assertFalse(file_entry.data_file.has_data())

    def test_missing_directory_logs_error(self):
        errors = ErrorLog()
        folder = Folder.open(self.tmpdir / 'absent', errors)

        self.assertEqual(folder.files, [])
        self.assertTrue(folder.expanded)
        self.assertEqual(len(errors), 1)

    def test_listed_files_follow_expansion(self):
        (self.tmpdir / 'a.csv').write_text("1,2\n", encoding='utf-8')
        (self.tmpdir / 'b.txt').write_text("1,2\n", encoding='utf-8')
        folder = Folder.open(self.tmpdir)

        self.assertEqual([e.filename for e in folder.listed_files('.csv')], ['a.csv'])
        folder.toggle_expanded()
        self.assertEqual(list(folder.listed_files('.csv')), [])


if __name__ == '__main__':
    unittest.main()
