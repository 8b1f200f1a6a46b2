"""Normalize the arguments of DataFrame operations.

DataFrame operations accept their arguments in multiple shapes,
for example all the following calls assign the same column::

    df.assign("c", [1, 2, 3])
    df.assign({"c": [1, 2, 3]})
    df.assign([("c", [1, 2, 3])])
    df.assign(["c", [1, 2, 3]])
    df.assign(lambda df: {"c": [1, 2, 3]})

Before doing any work, the operations convert the arguments
to a single internal representation: a list of names for
column selections and a list of ``(name, value)`` pairs for
operations that map columns to something else.
"""

from collections.abc import Mapping
from typing import Any, Callable, Sequence

import pyarrow as pa

from ..errors import DataFrameArgumentError
from .vector import Vector

__all__ = ("split_block", "parse_selector", "parse_pairs")


def split_block(
    args: tuple, block: Callable[..., Any] | None
) -> tuple[tuple, Callable[..., Any] | None]:
    """Separate positional arguments from the block.

    A single callable positional argument is considered the block.
    Providing both arguments and a block is not allowed.
    """
    if block is None and len(args) == 1 and callable(args[0]):
        return (), args[0]
    if block is not None and args:
        raise DataFrameArgumentError("Must not specify both arguments and a block")
    if block is None and any(callable(arg) for arg in args):
        raise DataFrameArgumentError("Must not specify both arguments and a block")
    return args, block


def parse_selector(
    args: Sequence[Any], keys: list[str], strict: bool = True
) -> list[str]:
    """Convert a column selector to the list of selected column names.

    The selector can be made of column names or of booleans,
    one for each column, telling if the column is selected.
    When ``strict`` is false names are returned as they are,
    even if they are not columns or are repeated.

    >>> parse_selector(["a", "c"], ["a", "b", "c"])
    ['a', 'c']
    >>> parse_selector([[False, True, True]], ["a", "b", "c"])
    ['b', 'c']
    """
    selector = _flatten(args)
    if not selector or selector == [None]:
        return []

    if all(isinstance(item, bool) for item in selector):
        if len(selector) != len(keys):
            raise DataFrameArgumentError(
                f"Boolean selector size mismatch ({len(selector)} != {len(keys)})"
            )
        return [key for key, selected in zip(keys, selector) if selected]

    if all(isinstance(item, str) for item in selector):
        if not strict:
            return selector
        missing = [name for name in selector if name not in keys]
        if missing:
            raise DataFrameArgumentError(f"Not existing: {missing}")
        if len(set(selector)) != len(selector):
            raise DataFrameArgumentError(f"Duplicated columns in {selector}")
        return selector

    raise DataFrameArgumentError(f"Invalid selector: {selector!r}")


def parse_pairs(args: Sequence[Any]) -> list[tuple[str, Any]]:
    """Convert arguments mapping names to values to a list of pairs.

    >>> parse_pairs([{"a": 1, "b": 2}])
    [('a', 1), ('b', 2)]
    >>> parse_pairs(["a", "x"])
    [('a', 'x')]
    >>> parse_pairs([["a", "x", "b", "y"]])
    [('a', 'x'), ('b', 'y')]
    """
    match list(args):
        case [] | [None] | [[]] | [()]:
            return []
        case [Mapping() as mapping]:
            pairs = list(mapping.items())
        case [str() as name, value]:
            pairs = [(name, value)]
        case [list() | tuple() as entries]:
            pairs = _entries_to_pairs(list(entries))
        case [list() | tuple(), *_] as entries:
            pairs = _entries_to_pairs(entries)
        case _:
            raise DataFrameArgumentError(f"Invalid argument {args!r}")

    for name, _ in pairs:
        if not isinstance(name, str):
            raise DataFrameArgumentError(f"Invalid column name {name!r}")
    return pairs


def _entries_to_pairs(entries: list[Any]) -> list[tuple[str, Any]]:
    """Convert a list of entries to pairs.

    Entries can be a list of ``(name, value)`` pairs or
    a flat list alternating names and values.
    """
    if all(_is_pair(entry) for entry in entries):
        return [(entry[0], entry[1]) for entry in entries]
    if len(entries) % 2 == 0 and all(isinstance(name, str) for name in entries[::2]):
        return list(zip(entries[::2], entries[1::2]))
    raise DataFrameArgumentError(f"Invalid argument in list {entries!r}")


def _is_pair(entry: Any) -> bool:
    return (
        isinstance(entry, (list, tuple))
        and len(entry) == 2
        and isinstance(entry[0], str)
    )


def _flatten(args: Sequence[Any]) -> list[Any]:
    flat: list[Any] = []
    for arg in args:
        if isinstance(arg, Vector):
            flat.extend(arg.to_list())
        elif isinstance(arg, (pa.Array, pa.ChunkedArray)):
            flat.extend(arg.to_pylist())
        elif isinstance(arg, (list, tuple)):
            flat.extend(arg)
        else:
            flat.append(arg)
    return flat
