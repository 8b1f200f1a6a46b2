"""Partition rows of a table into groups sharing the same keys.

Grouping is the first step of any aggregation: given one or
more key columns, rows that have the same value in all the
key columns belong to the same group.

For example given the key column::

    [0, 0, 1, 2, 2, None]

there will be four groups, each one represented by
a boolean mask that selects the rows that are part of it::

    0    -> [True, True, False, False, False, False]
    1    -> [False, False, True, False, False, False]
    2    -> [False, False, False, True, True, False]
    None -> [False, False, False, False, False, True]

Null is a key value like any other, so rows with a null key
are grouped together instead of being discarded. The same
happens for ``NaN`` which, differently from Python equality,
is considered equal to itself.

Groups are always ordered by the first row where their key appears.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Sequence

import pyarrow as pa
import pyarrow.compute as pc

__all__ = ("Partition", "partition")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Partition:
    """The groups found in a set of key columns.

    :param masks: One boolean mask for each group, in group order.
    :param first_indices: For each group the index of its first row,
                          useful to pick the key values of the group.
    """

    masks: list[pa.BooleanArray]
    first_indices: list[int]

    def __len__(self) -> int:
        return len(self.masks)


def partition(columns: Sequence[pa.Array | pa.ChunkedArray]) -> Partition:
    """Find the groups of rows that share the same values in ``columns``.

    >>> import pyarrow as pa
    >>> groups = partition([pa.array([0, 0, 1, None])])
    >>> [mask.to_pylist() for mask in groups.masks]
    [[True, True, False, False], [False, False, True, False], [False, False, False, True]]
    >>> groups.first_indices
    [0, 2, 3]
    """
    if not columns:
        raise ValueError("At least one key column is required to partition rows")

    if len(columns) == 1:
        result = _single_key_partition(columns[0])
    else:
        result = _multi_key_partition(columns)
    logger.debug(
        "Partitioned %d rows by %d keys into %d groups",
        len(columns[0]),
        len(columns),
        len(result),
    )
    return result


def _single_key_partition(column: pa.Array | pa.ChunkedArray) -> Partition:
    """Partition rows by a single key column.

    This is an optimized path where we rely on dictionary encoding
    to find the unique values of the key column and at which rows
    each value appears. Encoding nulls makes them part of the
    dictionary, and the dictionary is built in order of appearance.
    """
    if isinstance(column, pa.ChunkedArray):
        column = column.combine_chunks()
    if pa.types.is_dictionary(column.type):
        column = column.dictionary_decode()

    encoded = pc.dictionary_encode(column, null_encoding="encode")
    indices = encoded.indices

    masks = [pc.equal(indices, idx) for idx in range(len(encoded.dictionary))]
    first_indices = [pc.index(mask, True).as_py() for mask in masks]
    return Partition(masks, first_indices)


def _multi_key_partition(columns: Sequence[pa.Array | pa.ChunkedArray]) -> Partition:
    """Partition rows by the combination of multiple key columns.

    Dictionary encoding is not supported for StructArray,
    so we can't combine the keys and reuse the single key path.
    Instead rows are hashed in Python by the tuple of their keys,
    it's much slower but keeps the order of appearance of the groups.
    """
    num_rows = len(columns[0])
    rows = zip(*(column.to_pylist() for column in columns))

    # {key_tuple: [row_index, ...]}, dicts preserve insertion order.
    members: dict[tuple, list[int]] = {}
    for row_index, row in enumerate(rows):
        key = tuple(_hashable(value) for value in row)
        members.setdefault(key, []).append(row_index)

    masks = []
    first_indices = []
    for row_indices in members.values():
        selected = [False] * num_rows
        for row_index in row_indices:
            selected[row_index] = True
        masks.append(pa.array(selected, type=pa.bool_()))
        first_indices.append(row_indices[0])
    return Partition(masks, first_indices)


class _NaNKey:
    """Stands for any NaN in a group key, as NaN != NaN."""

    def __repr__(self) -> str:
        return "NaN"


_NAN_KEY = _NaNKey()


def _hashable(value: Any) -> Any:
    if isinstance(value, float) and math.isnan(value):
        return _NAN_KEY
    if isinstance(value, list):
        return tuple(_hashable(v) for v in value)
    if isinstance(value, dict):
        return tuple((k, _hashable(v)) for k, v in value.items())
    return value
