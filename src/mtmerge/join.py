"""
Score Merger - writes scores keyed by GitHub ID into a gradebook export
keyed by SIS Login ID, translating the key through a mapping table.

Usage from Python:
    result = merge_files('canvas.csv', 'project02.csv', 'map.csv', 'out.csv')
    if not result.ok:
        print(result.error)
"""

from collections import namedtuple
from dataclasses import dataclass, field
from pathlib import Path

from .common import (
    ColumnNotFoundError,
    MergeError,
    find_column_index,
    find_row_index,
    get_value,
    header_of,
    read_table,
    set_value,
    write_table,
)
from .config import DEFAULT_COLUMNS


ColumnIndexes = namedtuple(
    'ColumnIndexes',
    ['source_key', 'source_value', 'map_source', 'map_dest', 'dest_key', 'dest_value'],
)


@dataclass
class MergeResult:
    """Outcome of a merge: a count of updated cells, or the error that stopped it."""

    updated: int = 0
    skipped: list = field(default_factory=list)
    error: MergeError = None
    output: Path = None

    @property
    def ok(self):
        return self.error is None

    @property
    def reason(self):
        return self.error.reason if self.error else None


def resolve_columns(source, mapping, dest, fragments=None, dest_column=None):
    """
    Resolve the six lookup columns from header fragments.

    An explicit dest_column position is used as the destination value
    column instead of looking up the dest_value fragment.
    """
    fragments = fragments or DEFAULT_COLUMNS
    src_hdr = header_of(source)
    map_hdr = header_of(mapping)
    dest_hdr = header_of(dest)

    return ColumnIndexes(
        source_key=find_column_index(src_hdr, fragments['source_key']),
        source_value=find_column_index(src_hdr, fragments['source_value']),
        map_source=find_column_index(map_hdr, fragments['map_source']),
        map_dest=find_column_index(map_hdr, fragments['map_dest']),
        dest_key=find_column_index(dest_hdr, fragments['dest_key']),
        dest_value=_dest_value_index(dest_hdr, fragments, dest_column),
    )


def _dest_value_index(dest_hdr, fragments, dest_column):
    if dest_column is None:
        return find_column_index(dest_hdr, fragments['dest_value'])
    if not 0 <= dest_column < len(dest_hdr):
        raise ColumnNotFoundError(
            f"Column {dest_column + 1} is out of range: the destination has "
            f"{len(dest_hdr)} columns"
        )
    return dest_column


def merge_tables(source, mapping, dest, columns):
    """
    Copy each source value into the destination row its key maps to.

    For every data row of the source table the key is looked up in the
    mapping table, translated, and looked up again in the destination
    table. The destination table is modified in place. Duplicate keys
    resolve to the first matching row. A mapping row with an empty
    destination key means the student has no linked account and the
    source row is skipped.

    Args:
        source: Table of values keyed by the source identifier
        mapping: Table translating source identifiers to destination ones
        dest: Table to update
        columns: ColumnIndexes from resolve_columns

    Returns:
        MergeResult; the first unresolved key stops the merge and is
        returned as the error
    """
    result = MergeResult()

    try:
        for src_rix in range(1, len(source)):
            src_key_val = get_value(source, src_rix, columns.source_key)

            # Lookups start past the header so a key never resolves to row 0
            map_rix = find_row_index(mapping, columns.map_source, src_key_val, start=1)
            dest_key_val = get_value(mapping, map_rix, columns.map_dest)

            if dest_key_val == '':
                result.skipped.append(src_key_val)
                continue

            dest_rix = find_row_index(dest, columns.dest_key, dest_key_val, start=1)
            src_val = get_value(source, src_rix, columns.source_value)
            set_value(dest, dest_rix, columns.dest_value, src_val)
            result.updated += 1
    except MergeError as e:
        result.error = e

    return result


def merge_files(dest_file, source_file, mapping_file, output_file,
                fragments=None, dest_column=None, verbose=False):
    """
    Load three CSV files, merge them, and write the updated destination.

    Args:
        dest_file: Gradebook export to update
        source_file: Scores table
        mapping_file: GitHub ID to SIS Login ID table
        output_file: Path of the CSV to create or truncate
        fragments: Column fragment mapping (defaults to DEFAULT_COLUMNS)
        dest_column: Position of the destination value column; overrides
            the dest_value fragment when given
        verbose: Print detailed progress information

    Returns:
        MergeResult; the output file is only written when the merge succeeds
    """
    try:
        tables = {}
        for label, filepath in (('destination', dest_file),
                                ('source', source_file),
                                ('mapping', mapping_file)):
            tables[label] = read_table(filepath)
            if verbose:
                print(f"   Loaded {label} table: {Path(filepath).name} "
                      f"({len(tables[label]) - 1} rows)")

        source, mapping, dest = tables['source'], tables['mapping'], tables['destination']
        columns = resolve_columns(source, mapping, dest, fragments, dest_column)

        if verbose:
            print(f"   Destination column: '{header_of(dest)[columns.dest_value]}'")
    except MergeError as e:
        return MergeResult(error=e)

    result = merge_tables(source, mapping, dest, columns)
    if not result.ok:
        return result

    if verbose and result.skipped:
        print(f"   Skipped {len(result.skipped)} students with no linked SIS Login ID")

    try:
        result.output = write_table(dest, output_file)
    except MergeError as e:
        result.error = e

    return result
