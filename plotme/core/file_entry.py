#!/usr/bin/env python3
"""
File entries and their display state machine.

A FileEntry is one CSV file on disk together with its ingestion options,
display transform, assigned color and display state. The state is a single
enumerated tag; every transition goes through one of the event methods
(``clicked``, ``secondary_clicked``, ``search_phrase_changed``) which look the
next state up in an explicit transition table.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .csv_file import CSVFile, CSVOptions, read_preview
from .float_input import FloatInput
from ..utils.constants import (
    Color,
    TRANSPARENT,
    DEFAULT_SCALE_TEXT,
    DEFAULT_OFFSET_TEXT,
    ERROR_READ_FOLDER,
)
from ..utils.errors import ErrorLog, SessionFormatError, error_string


class FileEntryState(Enum):
    """Display state of a file entry."""
    IDLE = "Idle"
    PLOTTED = "Plotted"
    ACTIVE = "Active"
    PREVIOUSLY_PLOTTED = "PreviouslyPlotted"
    NEEDS_CONFIG = "NeedsConfig"


# Primary click on an entry that already has data (or needs configuration)
PRIMARY_CLICK_TRANSITIONS = {
    FileEntryState.ACTIVE: FileEntryState.PREVIOUSLY_PLOTTED,
    FileEntryState.PLOTTED: FileEntryState.PREVIOUSLY_PLOTTED,
    FileEntryState.IDLE: FileEntryState.PLOTTED,
    FileEntryState.PREVIOUSLY_PLOTTED: FileEntryState.PLOTTED,
    FileEntryState.NEEDS_CONFIG: FileEntryState.IDLE,
}

# Secondary click only toggles between plotted and active
SECONDARY_CLICK_TRANSITIONS = {
    FileEntryState.PLOTTED: FileEntryState.ACTIVE,
    FileEntryState.ACTIVE: FileEntryState.PLOTTED,
}

# A changed search phrase releases entries that were only kept for being
# recently plotted
SEARCH_CHANGED_TRANSITIONS = {
    FileEntryState.PREVIOUSLY_PLOTTED: FileEntryState.IDLE,
}

DRAWN_STATES = frozenset({FileEntryState.PLOTTED, FileEntryState.ACTIVE})
SETTINGS_STATES = DRAWN_STATES | {FileEntryState.NEEDS_CONFIG}


@dataclass
class FileEntry:
    """
    One CSV file tracked by the session.

    Attributes:
        filename: Name of the file inside its folder
        data_file: Parsed series and its ingestion options
        scale: Multiplicative y transform, as typed text
        offset: Additive y transform, as typed text
        xoffset: Additive x transform, as typed text
        color: RGBA color; TRANSPARENT until first drawn
        state: Display state
        preview: Cached first lines of the raw file (not persisted)
    """
    filename: str
    data_file: CSVFile
    scale: FloatInput = field(default_factory=lambda: FloatInput(DEFAULT_SCALE_TEXT))
    offset: FloatInput = field(default_factory=lambda: FloatInput(DEFAULT_OFFSET_TEXT))
    xoffset: FloatInput = field(default_factory=lambda: FloatInput(DEFAULT_OFFSET_TEXT))
    color: Color = TRANSPARENT
    state: FileEntryState = FileEntryState.IDLE
    preview: Optional[str] = field(default=None, compare=False)

    @classmethod
    def new(cls, filename: str) -> 'FileEntry':
        """Create an idle, unparsed entry with default options."""
        return cls(filename=filename, data_file=CSVFile(filepath=Path(filename)))

    # ==================== State Predicates ====================

    def is_active(self) -> bool:
        return self.state == FileEntryState.ACTIVE

    def is_drawn(self) -> bool:
        """True if the series is rendered in the plot."""
        return self.state in DRAWN_STATES

    def is_plotted(self) -> bool:
        """True if the entry shows up in the file settings menu."""
        return self.state in SETTINGS_STATES

    def was_just_plotted(self) -> bool:
        return self.state == FileEntryState.PREVIOUSLY_PLOTTED

    def needs_config(self) -> bool:
        return self.state == FileEntryState.NEEDS_CONFIG

    def has_color(self) -> bool:
        return self.color != TRANSPARENT

    def should_be_listed(self, search_phrase: str, expanded: bool) -> bool:
        """
        Decide whether the entry appears in the folder listing.

        Entries matching every token of the search phrase are listed while
        their folder is expanded. Entries that are plotted, active or need
        configuration are always listed; previously plotted entries are
        listed while their folder is expanded.

        Args:
            search_phrase: Whitespace separated filter tokens
            expanded: Whether the owning folder is expanded
        """
        matches = all(token in self.filename for token in search_phrase.split())
        if matches and expanded:
            return True
        if self.is_plotted():
            return True
        return self.was_just_plotted() and expanded

    # ==================== Events ====================

    def clicked(self, folder_path: Union[str, Path], error_log: ErrorLog) -> None:
        """
        Handle a primary click on the entry label.

        An entry without data is ingested lazily on first click; success
        plots it, a failed or empty ingestion marks it as needing
        configuration. Otherwise the click toggles visibility.
        """
        if not self.data_file.has_data() and not self.needs_config():
            csv_file = CSVFile.from_path(
                Path(folder_path) / self.filename, self.data_file.options, error_log
            )
            if csv_file is not None:
                self.data_file = csv_file
                self.state = FileEntryState.PLOTTED
            else:
                self.state = FileEntryState.NEEDS_CONFIG
            return

        self.state = PRIMARY_CLICK_TRANSITIONS[self.state]

    def secondary_clicked(self) -> None:
        """Toggle between plotted and active; no effect in other states."""
        self.state = SECONDARY_CLICK_TRANSITIONS.get(self.state, self.state)

    def search_phrase_changed(self) -> None:
        self.state = SEARCH_CHANGED_TRANSITIONS.get(self.state, self.state)

    # ==================== Data and Options ====================

    def reload_csv(self, folder_path: Union[str, Path], error_log: ErrorLog) -> bool:
        """
        Re-read the file with the current options.

        On failure the previous series and state are kept.

        Returns:
            True if the series was replaced
        """
        csv_file = CSVFile.from_path(
            Path(folder_path) / self.filename, self.data_file.options, error_log
        )
        if csv_file is None:
            return False
        self.data_file = csv_file
        return True

    @property
    def options(self) -> CSVOptions:
        return self.data_file.options

    def set_options(self, options: CSVOptions) -> None:
        self.data_file = self.data_file.with_options(options)

    def get_preview(self, folder_path: Union[str, Path]) -> str:
        """Return the first lines of the raw file, reading them once."""
        if self.preview is None:
            self.preview = read_preview(Path(folder_path) / self.filename)
        return self.preview

    def transformed_data(self) -> np.ndarray:
        """
        Apply the display transform to the raw series.

        Unparsable transform text falls back to scale 1.0 and offsets 0.0.

        Returns:
            (N, 2) array of (x + xoffset, y * scale + offset)
        """
        scale = self.scale.parse_or(1.0)
        offset = self.offset.parse_or(0.0)
        xoffset = self.xoffset.parse_or(0.0)
        data = self.data_file.data
        transformed = np.empty_like(data)
        transformed[:, 0] = data[:, 0] + xoffset
        transformed[:, 1] = data[:, 1] * scale + offset
        return transformed

    # ==================== Serialization ====================

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filename': self.filename,
            'data_file': self.data_file.to_dict(),
            'scale': self.scale.to_dict(),
            'offset': self.offset.to_dict(),
            'xoffset': self.xoffset.to_dict(),
            'color': list(self.color),
            'state': self.state.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FileEntry':
        try:
            color = tuple(int(c) for c in data['color'])
            if len(color) != 4:
                raise ValueError(f"color must have 4 components, got {len(color)}")
            return cls(
                filename=str(data['filename']),
                data_file=CSVFile.from_dict(data['data_file']),
                scale=FloatInput.from_dict(data['scale']),
                offset=FloatInput.from_dict(data['offset']),
                xoffset=FloatInput.from_dict(data['xoffset']),
                color=color,
                state=FileEntryState(data['state']),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SessionFormatError(f"invalid file entry record: {e}") from e


def get_file_entries(folder: Union[str, Path],
                     error_log: Optional[ErrorLog] = None) -> List[FileEntry]:
    """
    Scan a directory and create an idle entry for every regular file.

    Args:
        folder: Directory to scan
        error_log: Optional log receiving an error if the directory
            cannot be listed

    Returns:
        Entries sorted by file name
    """
    folder = Path(folder)
    try:
        filenames = sorted(p.name for p in folder.iterdir() if p.is_file())
    except OSError as e:
        if error_log is not None:
            error_log.append(error_string(ERROR_READ_FOLDER.format(path=str(folder)), e))
        return []
    return [FileEntry.new(filename) for filename in filenames]
