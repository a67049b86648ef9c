#!/usr/bin/env python3
"""
CSV ingestion for PlotMe.

This module reads delimited text files into ordered (x, y) point series. Rows
that cannot be parsed are skipped with a warning so that partially corrupt
files still yield a usable series; file-level failures and files without a
single valid row are reported to the caller as "no series".

Column indices are zero-based.
"""

import csv
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import numpy as np

from ..utils.constants import (
    DEFAULT_DELIMITER,
    DEFAULT_COMMENT_CHAR,
    DEFAULT_XCOL,
    DEFAULT_YCOL,
    DEFAULT_SKIP_HEADER,
    DEFAULT_SKIP_FOOTER,
    PREVIEW_LINE_COUNT,
    ERROR_READ_CSV,
    WARNING_EMPTY_CSV,
    ROW_WARNINGS_SUMMARY,
)
from ..utils.errors import ErrorLog, SessionFormatError, error_string


def empty_series() -> np.ndarray:
    """Return an empty (0, 2) float64 point array."""
    return np.empty((0, 2), dtype=np.float64)


@dataclass(frozen=True)
class CSVOptions:
    """Ingestion parameters for a CSV file."""
    delimiter: str = DEFAULT_DELIMITER
    comment_char: str = DEFAULT_COMMENT_CHAR
    xcol: int = DEFAULT_XCOL
    ycol: int = DEFAULT_YCOL
    skip_header: int = DEFAULT_SKIP_HEADER
    skip_footer: int = DEFAULT_SKIP_FOOTER

    def validate(self) -> None:
        """
        Check that the reader can be configured with these options.

        Raises:
            ValueError: If delimiter or comment marker are not single,
                distinct characters, or a count/index is negative
        """
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        if len(self.comment_char) != 1:
            raise ValueError(
                f"comment character must be a single character, got {self.comment_char!r}"
            )
        if self.delimiter == self.comment_char:
            raise ValueError("delimiter and comment character must differ")
        if self.delimiter in ('\n', '\r', '"'):
            raise ValueError(f"unsupported delimiter {self.delimiter!r}")
        for name in ('xcol', 'ycol', 'skip_header', 'skip_footer'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")


@dataclass(eq=False)
class CSVFile:
    """
    A parsed CSV file together with the options used to read it.

    Attributes:
        filepath: Path of the source file
        data: (N, 2) float64 array of (x, y) points
        options: Ingestion parameters
    """
    filepath: Path
    data: np.ndarray = field(default_factory=empty_series)
    options: CSVOptions = field(default_factory=CSVOptions)

    @classmethod
    def from_path(cls, filepath: Union[str, Path], options: CSVOptions,
                  error_log: ErrorLog) -> Optional['CSVFile']:
        """
        Read a CSV file into a point series.

        Row-level problems are logged as warnings and the row is skipped.
        File-level problems are logged as errors and no result is returned.

        Args:
            filepath: File to read
            options: Ingestion parameters
            error_log: Log receiving warnings and errors

        Returns:
            The parsed CSVFile, or None if the file could not be read or
            produced no valid rows
        """
        filepath = Path(filepath)
        quiet_before = error_log.quiet_count
        try:
            options.validate()
            rows = _read_rows(filepath, options, error_log)
        except (OSError, ValueError, csv.Error) as e:
            error_log.append(error_string(ERROR_READ_CSV.format(path=str(filepath)), e))
            return None

        data = _parse_rows(rows, options, filepath, error_log)
        # Row warnings go to the log only; stdout gets one line per file
        skipped = error_log.quiet_count - quiet_before
        if skipped:
            print(ROW_WARNINGS_SUMMARY.format(count=skipped, path=str(filepath)))
        if len(data) == 0:
            error_log.append(WARNING_EMPTY_CSV.format(path=str(filepath)))
            return None
        return cls(filepath=filepath, data=data, options=options)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CSVFile):
            return NotImplemented
        return (self.filepath == other.filepath
                and self.options == other.options
                and np.array_equal(self.data, other.data))

    def has_data(self) -> bool:
        return len(self.data) > 0

    def with_options(self, options: CSVOptions) -> 'CSVFile':
        """Return a copy that keeps the data but uses different options."""
        return replace(self, options=options)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filepath': str(self.filepath),
            'data': self.data.tolist(),
            'delimiter': self.options.delimiter,
            'comment_char': self.options.comment_char,
            'xcol': self.options.xcol,
            'ycol': self.options.ycol,
            'skip_header': self.options.skip_header,
            'skip_footer': self.options.skip_footer,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CSVFile':
        try:
            points = np.asarray(data.get('data', []), dtype=np.float64)
            if points.size == 0:
                points = empty_series()
            if points.ndim != 2 or points.shape[1] != 2:
                raise SessionFormatError(
                    f"data of {data.get('filepath')!r} must be a list of [x, y] pairs"
                )
            options = CSVOptions(
                delimiter=str(data['delimiter']),
                comment_char=str(data['comment_char']),
                xcol=int(data['xcol']),
                ycol=int(data['ycol']),
                skip_header=int(data['skip_header']),
                skip_footer=int(data['skip_footer']),
            )
            return cls(filepath=Path(data['filepath']), data=points, options=options)
        except (KeyError, TypeError, ValueError) as e:
            raise SessionFormatError(f"invalid CSV file record: {e}") from e


def _data_lines(handle: Any, comment_char: str) -> Iterator[str]:
    """Yield the lines of a file that are neither comments nor blank."""
    for line in handle:
        if line.startswith(comment_char) or not line.strip():
            continue
        yield line


def _read_rows(filepath: Path, options: CSVOptions,
               error_log: ErrorLog) -> List[Tuple[int, List[str]]]:
    """
    Split a file into numbered rows, applying header/footer skipping.

    Rows are numbered from 1 over all non-comment, non-blank rows, so the
    numbers stay stable regardless of skip_header/skip_footer.

    Returns:
        List of (row_number, fields) tuples
    """
    rows: List[Tuple[int, List[str]]] = []
    with open(filepath, 'r', newline='', encoding='utf-8', errors='replace') as handle:
        reader = csv.reader(_data_lines(handle, options.comment_char),
                            delimiter=options.delimiter)
        row_number = 0
        while True:
            row_number += 1
            try:
                fields = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                error_log.append(
                    f"WARNING: could not parse row {row_number} of file {str(filepath)!r}: {e}",
                    echo=False,
                )
                continue
            rows.append((row_number, fields))

    end = len(rows) - options.skip_footer
    return rows[options.skip_header:max(end, 0)]


def _parse_field(fields: List[str], column: int) -> float:
    """
    Parse one column of a row.

    Raises:
        IndexError: If the row has no such column
        ValueError: If the value is not a number
    """
    if column >= len(fields):
        raise IndexError(f"row has only {len(fields)} column(s)")
    return float(fields[column])


def _parse_rows(rows: List[Tuple[int, List[str]]], options: CSVOptions,
                filepath: Path, error_log: ErrorLog) -> np.ndarray:
    """Convert numbered rows into an (N, 2) array, skipping bad rows."""
    points: List[Tuple[float, float]] = []
    for row_number, fields in rows:
        try:
            x = _parse_field(fields, options.xcol)
        except (IndexError, ValueError) as e:
            error_log.append(
                f"WARNING: x-column {options.xcol} could not be parsed in row "
                f"{row_number} of file {str(filepath)!r}: {e}",
                echo=False,
            )
            continue
        try:
            y = _parse_field(fields, options.ycol)
        except (IndexError, ValueError) as e:
            error_log.append(
                f"WARNING: y-column {options.ycol} could not be parsed in row "
                f"{row_number} of file {str(filepath)!r}: {e}",
                echo=False,
            )
            continue
        points.append((x, y))

    if not points:
        return empty_series()
    return np.asarray(points, dtype=np.float64)


def read_preview(filepath: Union[str, Path], line_count: int = PREVIEW_LINE_COUNT) -> str:
    """
    Read the first lines of a file for display as a preview.

    Returns:
        The raw text of up to ``line_count`` lines, or a short notice if the
        file cannot be read
    """
    lines: List[str] = []
    try:
        with open(filepath, 'r', encoding='utf-8', errors='replace') as handle:
            for line in handle:
                lines.append(line.rstrip('\r\n'))
                if len(lines) >= line_count:
                    break
    except OSError as e:
        return f"(preview unavailable: {e})"
    return "\n".join(lines)
