#!/usr/bin/env python3
"""
Folders of CSV files for PlotMe.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from .file_entry import FileEntry, get_file_entries
from ..utils.errors import ErrorLog, SessionFormatError


@dataclass
class Folder:
    """
    A directory and the file entries found in it.

    Attributes:
        path: Directory path
        files: File entries in listing order
        expanded: Whether matching files are listed
        to_be_deleted: Set by the user; the session purges the folder at the
            end of the current cycle
    """
    path: Path
    files: List[FileEntry] = field(default_factory=list)
    expanded: bool = True
    to_be_deleted: bool = False

    @classmethod
    def open(cls, path: Union[str, Path], error_log: Optional[ErrorLog] = None) -> 'Folder':
        """Scan ``path`` and create an expanded folder with idle entries."""
        path = Path(path)
        return cls(path=path, files=get_file_entries(path, error_log))

    def toggle_expanded(self) -> None:
        self.expanded = not self.expanded

    def mark_for_deletion(self) -> None:
        self.to_be_deleted = True

    def listed_files(self, search_phrase: str) -> Iterator[FileEntry]:
        """Yield the entries that should appear in the folder listing."""
        for file_entry in self.files:
            if file_entry.should_be_listed(search_phrase, self.expanded):
                yield file_entry

    def file_path(self, file_entry: FileEntry) -> Path:
        return self.path / file_entry.filename

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': str(self.path),
            'files': [file_entry.to_dict() for file_entry in self.files],
            'expanded': self.expanded,
            'to_be_deleted': self.to_be_deleted,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Folder':
        try:
            return cls(
                path=Path(data['path']),
                files=[FileEntry.from_dict(entry) for entry in data['files']],
                expanded=bool(data['expanded']),
                to_be_deleted=bool(data.get('to_be_deleted', False)),
            )
        except (KeyError, TypeError) as e:
            raise SessionFormatError(f"invalid folder record: {e}") from e
