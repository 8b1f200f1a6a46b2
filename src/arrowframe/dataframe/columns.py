"""Build new tables by picking, dropping, renaming or assigning columns.

A table is an ordered list of ``(field, array)`` pairs. All the
operations here build a new list of pairs out of the one of an
existing table and create a new :class:`pyarrow.Table` from it.

The source table is never modified, and the arrays of the columns
that are carried over unchanged are shared between the source
and the new table, as Arrow arrays are immutable.

The functions expect arguments that were already validated and
normalized by :mod:`.arguments`, they only check the invariants
of the resulting table: unique column names and columns
of the same length.
"""

import logging
from typing import Any

import pyarrow as pa

from ..compute import arrays
from ..errors import DataFrameArgumentError, DataFrameTypeError, VectorTypeError

__all__ = ("pick_columns", "drop_columns", "rename_columns", "assign_columns")

logger = logging.getLogger(__name__)


def pick_columns(table: pa.Table, names: list[str]) -> pa.Table:
    """Create a table with only the columns in ``names``, in that order.

    >>> import pyarrow as pa
    >>> pick_columns(pa.table({"a": [1], "b": [2], "c": [3]}), ["c", "a"]).column_names
    ['c', 'a']
    """
    if not names:
        return pa.table({})
    return table.select(names)


def drop_columns(table: pa.Table, names: list[str]) -> pa.Table:
    """Create a table with all the columns apart those in ``names``."""
    dropped = set(names)
    return pick_columns(table, [name for name in table.column_names if name not in dropped])


def rename_columns(table: pa.Table, pairs: list[tuple[str, str]]) -> pa.Table:
    """Create a table where columns are renamed according to ``pairs``.

    Only the schema changes, the new table points
    to the very same column arrays of the source.
    """
    renames = dict(pairs)
    missing = [name for name in renames if name not in table.column_names]
    if missing:
        raise DataFrameArgumentError(f"Not existing: {missing}")

    fields = [
        field.with_name(str(renames[field.name])) if field.name in renames else field
        for field in table.schema
    ]
    _check_unique([field.name for field in fields])
    return pa.Table.from_arrays(table.columns, schema=pa.schema(fields))


def assign_columns(
    table: pa.Table, pairs: list[tuple[str, Any]], left: bool = False
) -> pa.Table:
    """Create a table where columns are replaced or added.

    Columns that already exist are replaced in place, their type
    is computed again from the new data. New columns are appended
    at the end of the table, or at the beginning when ``left`` is true.
    Either way new columns keep the order they were provided in.
    """
    fields = list(table.schema)
    columns = list(table.columns)
    positions = {name: idx for idx, name in enumerate(table.column_names)}
    # A table without columns has no row count to respect yet.
    num_rows = table.num_rows if table.num_columns else None

    new_fields: list[pa.Field] = []
    new_columns: list[pa.ChunkedArray] = []
    new_positions: dict[str, int] = {}
    for name, source in pairs:
        data = _column_data(name, source)
        if num_rows is None:
            num_rows = len(data)
        if len(data) != num_rows:
            raise DataFrameArgumentError(
                f"Data size mismatch ({len(data)} != {num_rows}) for column {name!r}"
            )

        field = pa.field(name, data.type)
        if name in positions:
            fields[positions[name]] = field
            columns[positions[name]] = data
        elif name in new_positions:
            new_fields[new_positions[name]] = field
            new_columns[new_positions[name]] = data
        else:
            new_positions[name] = len(new_fields)
            new_fields.append(field)
            new_columns.append(data)

    if left:
        fields, columns = new_fields + fields, new_columns + columns
    else:
        fields, columns = fields + new_fields, columns + new_columns

    logger.debug(
        "Assigned %d columns (%d new) to table of %d columns",
        len(pairs),
        len(new_fields),
        table.num_columns,
    )
    return pa.Table.from_arrays(columns, schema=pa.schema(fields))


def _column_data(name: str, source: Any) -> pa.ChunkedArray:
    """Get the Arrow data for a column out of a Vector, array or values."""
    if isinstance(source, (str, bytes)) or not hasattr(source, "__len__"):
        raise DataFrameArgumentError(
            f"Invalid data for column {name!r}, expected a sequence of values"
        )
    try:
        data = arrays.as_arrow(source)
    except VectorTypeError as e:
        raise DataFrameTypeError(f"Invalid values for column {name!r}: {e}") from e
    if isinstance(data, pa.Array):
        data = pa.chunked_array([data])
    return data


def _check_unique(names: list[str]) -> None:
    duplicated = sorted({name for name in names if names.count(name) > 1})
    if duplicated:
        raise DataFrameArgumentError(f"Duplicated column names: {duplicated}")
