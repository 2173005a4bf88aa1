"""Shared utilities for reading, searching, and writing CSV tables.

A table is a DataFrame read with ``header=None`` so the header is row 0
and every cell is a string. Rows and columns are addressed by position.
"""

from pathlib import Path

import pandas as pd


class MergeError(Exception):
    """Base class for failures that abort a merge run."""

    reason = 'merge'


class TableReadError(MergeError):
    reason = 'read'


class TableWriteError(MergeError):
    reason = 'write'


class ColumnNotFoundError(MergeError, LookupError):
    reason = 'column'


class RowNotFoundError(MergeError, LookupError):
    reason = 'row'


class ConfigError(MergeError):
    reason = 'config'


def read_table(filepath):
    """
    Read an entire CSV file into a table of string cells.

    Args:
        filepath: Path to CSV file

    Returns:
        DataFrame whose row 0 is the header row

    Raises:
        TableReadError: the file is missing, unreadable, empty, or malformed,
            including rows wider or narrower than the header
    """
    try:
        table = pd.read_csv(
            filepath,
            header=None,
            dtype=str,
            keep_default_na=False,
            na_values=[],
            encoding='utf-8-sig',
        )
    except (OSError, ValueError) as e:
        raise TableReadError(f"Could not read {filepath}: {e}") from e

    # Empty fields read as "", so NaN only marks fields missing from a short row
    short_rows = table.index[table.isna().any(axis=1)]
    if len(short_rows) > 0:
        raise TableReadError(
            f"Could not read {filepath}: row {short_rows[0] + 1} has fewer "
            f"than {table.shape[1]} fields"
        )
    return table


def write_table(table, filepath):
    """Write a table to a new or truncated CSV file, header row included."""
    try:
        table.to_csv(filepath, header=False, index=False, encoding='utf-8-sig')
    except OSError as e:
        raise TableWriteError(f"Could not write {filepath}: {e}") from e
    return Path(filepath)


def header_of(table):
    """Return the header row of a table as a list of strings."""
    if len(table) == 0:
        return []
    return list(table.iloc[0])


def find_column_index(header, fragment):
    """
    Find the first header cell that contains the given fragment.

    Matching is a case-sensitive substring test so that exported names
    with an appended id, e.g. "Project01-Automated (999)", still match.
    """
    for idx, name in enumerate(header):
        if isinstance(name, str) and fragment in name:
            return idx
    raise ColumnNotFoundError(f"Can't find column named: {fragment}")


def find_row_index(table, col_idx, value, start=0):
    """
    Find the first row at or after ``start`` whose cell in col_idx equals value.

    Row 0 is the header, so pass start=1 to search data rows only.
    """
    for row_idx in range(start, len(table)):
        if table.iat[row_idx, col_idx] == value:
            return row_idx
    raise RowNotFoundError(f"Can't find matching row for {value}")


def get_value(table, row_idx, col_idx):
    return table.iat[row_idx, col_idx]


def set_value(table, row_idx, col_idx, value):
    table.iat[row_idx, col_idx] = value
