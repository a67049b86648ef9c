#!/usr/bin/env python3
"""
Session state for PlotMe.

SessionState is the top-level aggregate: opened folders, the global search
phrase and the plot viewport bounds are persisted; the error log, pointer drag
acceleration and copied CSV options are transient and reset whenever a
snapshot is loaded.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .csv_file import CSVOptions
from .file_entry import FileEntry
from .folder import Folder
from ..utils.constants import (
    DEFAULT_SEARCH_PHRASE,
    SESSION_FILE_NAME,
    ERROR_DEFAULT_PATH,
    ERROR_READ_SESSION,
    ERROR_PARSE_SESSION,
    ERROR_WRITE_SESSION,
    SUCCESS_SESSION_SAVED,
    SUCCESS_SESSION_LOADED,
)
from ..utils.errors import ConfigPathError, ErrorLog, SessionFormatError, error_string


@dataclass
class PlotDimensions:
    """Current plot viewport bounds."""
    x0: float = 0.0
    x1: float = 0.0
    y0: float = 0.0
    y1: float = 0.0

    def xspan(self) -> float:
        return abs(self.x1 - self.x0)

    def yspan(self) -> float:
        return abs(self.y1 - self.y0)

    def update(self, xlim: Tuple[float, float], ylim: Tuple[float, float]) -> None:
        self.x0, self.x1 = float(xlim[0]), float(xlim[1])
        self.y0, self.y1 = float(ylim[0]), float(ylim[1])

    def is_empty(self) -> bool:
        return self.xspan() == 0.0 or self.yspan() == 0.0

    def to_dict(self) -> Dict[str, float]:
        return {'x0': self.x0, 'x1': self.x1, 'y0': self.y0, 'y1': self.y1}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlotDimensions':
        try:
            return cls(
                x0=float(data['x0']), x1=float(data['x1']),
                y0=float(data['y0']), y1=float(data['y1']),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SessionFormatError(f"invalid plot dimensions: {e}") from e


def default_config_path() -> Path:
    """
    Resolve the default session file in the user's home directory.

    Raises:
        ConfigPathError: If the HOME environment variable is not set
    """
    home = os.environ.get('HOME')
    if not home:
        raise ConfigPathError("environment variable HOME is not set")
    return Path(home) / SESSION_FILE_NAME


@dataclass
class SessionState:
    """
    Top-level application state.

    Attributes:
        folders: Opened folders in display order
        search_phrase: Global file name filter
        plot_dims: Plot viewport bounds, updated every frame
        errors: Transient, bounded error log
        acceleration: Transient drag acceleration; None before the first press
        copied_csv_options: Transient CSV options template for copy/paste
    """
    folders: List[Folder] = field(default_factory=list)
    search_phrase: str = ''
    plot_dims: PlotDimensions = field(default_factory=PlotDimensions)
    errors: ErrorLog = field(default_factory=ErrorLog, compare=False)
    acceleration: Optional[float] = field(default=None, compare=False)
    copied_csv_options: Optional[CSVOptions] = field(default=None, compare=False)

    @classmethod
    def with_search_phrase(cls, phrase: str = DEFAULT_SEARCH_PHRASE) -> 'SessionState':
        return cls(search_phrase=phrase)

    # ==================== Folder and Entry Access ====================

    def open_folders(self, paths: Iterable[Union[str, Path]]) -> List[Folder]:
        """Scan each directory and append it as an expanded folder."""
        opened = []
        for path in paths:
            folder = Folder.open(path, self.errors)
            print(f"Opened folder {folder.path} with {len(folder.files)} file(s)")
            self.folders.append(folder)
            opened.append(folder)
        return opened

    def iter_entries(self) -> Iterator[Tuple[Folder, FileEntry]]:
        for folder in self.folders:
            for file_entry in folder.files:
                yield folder, file_entry

    def drawn_entries(self) -> List[FileEntry]:
        """Entries whose series are rendered in the plot."""
        return [entry for _, entry in self.iter_entries() if entry.is_drawn()]

    def settings_entries(self) -> List[Tuple[Folder, FileEntry]]:
        """Entries listed in the file settings menu."""
        return [(folder, entry) for folder, entry in self.iter_entries()
                if entry.is_plotted()]

    def active_entries(self) -> List[FileEntry]:
        return [entry for _, entry in self.iter_entries() if entry.is_active()]

    def set_search_phrase(self, phrase: str) -> bool:
        """
        Change the search phrase.

        When the phrase actually changes, previously plotted entries are
        released back to idle.

        Returns:
            True if the phrase changed
        """
        if phrase == self.search_phrase:
            return False
        self.search_phrase = phrase
        for _, file_entry in self.iter_entries():
            file_entry.search_phrase_changed()
        return True

    def delete_folders(self) -> int:
        """Remove folders marked for deletion; returns how many were removed."""
        kept = [folder for folder in self.folders if not folder.to_be_deleted]
        removed = len(self.folders) - len(kept)
        self.folders = kept
        return removed

    # ==================== CSV Options Clipboard ====================

    def copy_options(self, file_entry: FileEntry) -> None:
        self.copied_csv_options = file_entry.options

    def paste_options(self, file_entry: FileEntry) -> bool:
        """Apply the copied options to ``file_entry``; no-op if none copied."""
        if self.copied_csv_options is None:
            return False
        file_entry.set_options(self.copied_csv_options)
        return True

    # ==================== Persistence ====================

    def to_dict(self) -> Dict[str, Any]:
        return {
            'folders': [folder.to_dict() for folder in self.folders],
            'search_phrase': self.search_phrase,
            'plot_dims': self.plot_dims.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionState':
        """
        Build a session from a snapshot document.

        Raises:
            SessionFormatError: If the document is missing fields or has
                fields of the wrong type
        """
        if not isinstance(data, dict):
            raise SessionFormatError("session document must be a JSON object")
        try:
            return cls(
                folders=[Folder.from_dict(folder) for folder in data['folders']],
                search_phrase=str(data['search_phrase']),
                plot_dims=PlotDimensions.from_dict(data.get('plot_dims', {
                    'x0': 0.0, 'x1': 0.0, 'y0': 0.0, 'y1': 0.0
                })),
            )
        except (KeyError, TypeError) as e:
            raise SessionFormatError(f"invalid session document: {e}") from e

    def _resolve_path(self, path: Optional[Union[str, Path]]) -> Optional[Path]:
        if path is not None:
            return Path(path)
        try:
            return default_config_path()
        except ConfigPathError as e:
            self.errors.append(error_string(ERROR_DEFAULT_PATH, e))
            return None

    def save(self, path: Optional[Union[str, Path]] = None) -> bool:
        """
        Write the persistent fields as JSON.

        Args:
            path: Target file; the default session path if None

        Returns:
            True on success; failures are logged
        """
        target = self._resolve_path(path)
        if target is None:
            return False
        try:
            target.write_text(json.dumps(self.to_dict()), encoding='utf-8')
        except OSError as e:
            self.errors.append(error_string(ERROR_WRITE_SESSION.format(path=str(target)), e))
            return False
        print(SUCCESS_SESSION_SAVED.format(path=target))
        return True

    def load(self, path: Optional[Union[str, Path]] = None) -> bool:
        """
        Replace this session with a snapshot read from disk.

        All persistent fields are replaced and transient fields are reset to
        their defaults. On failure the session is left untouched.

        Args:
            path: Snapshot file; the default session path if None

        Returns:
            True on success; failures are logged
        """
        source = self._resolve_path(path)
        if source is None:
            return False
        try:
            config_raw = source.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            self.errors.append(error_string(ERROR_READ_SESSION.format(path=str(source)), e))
            return False
        try:
            loaded = SessionState.from_dict(json.loads(config_raw))
        except (ValueError, SessionFormatError) as e:
            self.errors.append(error_string(ERROR_PARSE_SESSION.format(path=str(source)), e))
            return False

        self.folders = loaded.folders
        self.search_phrase = loaded.search_phrase
        self.plot_dims = loaded.plot_dims
        self.errors = ErrorLog()
        self.acceleration = None
        self.copied_csv_options = None
        print(SUCCESS_SESSION_LOADED.format(path=source))
        return True
