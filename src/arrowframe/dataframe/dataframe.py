"""The DataFrame object itself."""

from collections.abc import Mapping
from typing import Any, Callable, Iterator, Self

import pyarrow as pa

from ..errors import DataFrameArgumentError
from . import columns
from .arguments import parse_pairs, parse_selector, split_block
from .group import Group
from .vector import Vector

__all__ = ("DataFrame",)

Block = Callable[["DataFrame"], Any]


class DataFrame:
    """Data structure that handles data in rows and columns.

    The DataFrame object represents in-memory data as
    an Arrow table, where each column has a name (its key)
    and a type.

    DataFrames are immutable: operations like :meth:`pick`,
    :meth:`assign` or :meth:`rename` never change the DataFrame
    they are called on, they return a new DataFrame instead.

    >>> df = DataFrame({"a": [1, 2, 3], "b": ["x", "y", "z"]})
    >>> df.shape
    (3, 2)
    >>> df.assign("c", df["a"] * 2).to_dict()
    {'a': [1, 2, 3], 'b': ['x', 'y', 'z'], 'c': [2, 4, 6]}

    Operations that take columns can also receive a block,
    a function that gets the DataFrame and returns the arguments::

        df.pick(lambda df: [v.is_numeric for v in df.vectors])
    """

    def __init__(
        self, data: "DataFrame | pa.Table | pa.RecordBatch | Mapping | None" = None
    ) -> None:
        """
        :param data: A `pyarrow.Table`, a `pyarrow.RecordBatch`, another DataFrame
                     or a dictionary of ``{name: values}``. ``None`` creates
                     an empty DataFrame.
        """
        match data:
            case None:
                table = pa.table({})
            case DataFrame():
                table = data.table
            case pa.Table():
                table = data
            case pa.RecordBatch():
                table = pa.Table.from_batches([data])
            case Mapping():
                pairs = parse_pairs([data])
                table = pa.table({})
                if pairs:
                    table = columns.assign_columns(table, pairs)
            case _:
                raise DataFrameArgumentError(
                    "Invalid input, expected a pyarrow Table, RecordBatch or a dict"
                )
        self._table = table

    @property
    def table(self) -> pa.Table:
        return self._table

    def to_arrow(self) -> pa.Table:
        return self._table

    def to_dict(self) -> dict[str, list[Any]]:
        return self._table.to_pydict()

    @property
    def keys(self) -> list[str]:
        """The names of the columns."""
        return self._table.column_names

    @property
    def size(self) -> int:
        """Number of rows."""
        return self._table.num_rows

    n_rows = size

    @property
    def n_keys(self) -> int:
        return self._table.num_columns

    @property
    def shape(self) -> tuple[int, int]:
        return self.size, self.n_keys

    @property
    def empty(self) -> bool:
        """If the DataFrame has no rows or no columns."""
        return self.size == 0 or self.n_keys == 0

    @property
    def types(self) -> list[str]:
        return [str(field.type) for field in self._table.schema]

    @property
    def vectors(self) -> list[Vector]:
        return [self.v(key) for key in self.keys]

    def v(self, key: str) -> Vector:
        """Get the Vector of the column named ``key``."""
        if key not in self.keys:
            raise DataFrameArgumentError(f"Not existing: {key!r}")
        return Vector.create(self._table.column(key), key=key)

    __getitem__ = v

    def __contains__(self, key: str) -> bool:
        return key in self.keys

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataFrame):
            return NotImplemented
        return self._table.equals(other.table)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        fields = ", ".join(f"{field.name}: {field.type}" for field in self._table.schema)
        return f"DataFrame({self.size} x {self.n_keys} Vectors, {fields})"

    __repr__ = __str__

    def filter(self, mask: Vector | pa.Array | list | Block) -> Self:
        """Create a new DataFrame with only the rows where ``mask`` is true.

        :param mask: A boolean Vector or array with one value per row,
                     or a block returning it.
        """
        if callable(mask):
            mask = mask(self)
        if isinstance(mask, Vector):
            mask = mask.data
        elif not isinstance(mask, (pa.Array, pa.ChunkedArray)):
            mask = pa.array(mask, type=pa.bool_())
        if len(mask) != self.size:
            raise DataFrameArgumentError(f"Mask size mismatch ({len(mask)} != {self.size})")
        return self.__class__(self._table.filter(mask))

    # Column operations

    def pick(self, *selector: Any, block: Block | None = None) -> Self:
        """Create a DataFrame with only the selected columns.

        The columns can be selected by name, in which case they
        are picked in the order the names are provided, or by a list
        of booleans, one for each column.

        >>> df = DataFrame({"a": [1], "b": [2], "c": [3]})
        >>> df.pick("c", "a").keys
        ['c', 'a']
        >>> df.pick([True, False, True]).keys
        ['a', 'c']
        """
        names = parse_selector(self._evaluate(selector, block), self.keys)
        return self.__class__(columns.pick_columns(self._table, names))

    def drop(self, *selector: Any, block: Block | None = None) -> Self:
        """Create a DataFrame without the selected columns.

        Accepts the same selectors as :meth:`pick`, names that
        are not columns of the DataFrame are ignored.

        >>> DataFrame({"a": [1], "b": [2]}).drop("a", "x").keys
        ['b']
        """
        args = self._evaluate(selector, block)
        names = parse_selector(args, self.keys, strict=False)
        return self.__class__(columns.drop_columns(self._table, names))

    def rename(self, *renamer: Any, block: Block | None = None) -> Self:
        """Create a DataFrame with some columns renamed.

        >>> DataFrame({"a": [1], "b": [2]}).rename({"a": "x"}).keys
        ['x', 'b']
        """
        pairs = parse_pairs(self._evaluate(renamer, block))
        if not pairs:
            return self
        return self.__class__(columns.rename_columns(self._table, pairs))

    def assign(self, *assigner: Any, block: Block | None = None) -> Self:
        """Create a DataFrame with columns replaced or added.

        Columns that already exist are replaced, keeping their position.
        New columns are added at the end.
        """
        return self._assign(assigner, block, left=False)

    def assign_left(self, *assigner: Any, block: Block | None = None) -> Self:
        """Like :meth:`assign`, but new columns are added at the beginning."""
        return self._assign(assigner, block, left=True)

    def _assign(self, assigner: tuple, block: Block | None, left: bool) -> Self:
        pairs = parse_pairs(self._evaluate(assigner, block))
        if not pairs:
            return self
        return self.__class__(columns.assign_columns(self._table, pairs, left=left))

    def _evaluate(self, args: tuple, block: Block | None) -> tuple:
        """Get the arguments of a column operation, calling the block if provided."""
        args, block = split_block(args, block)
        if block is None:
            return args
        return (block(self),)

    # Grouping

    def group(
        self, *keys: str | list[str], block: Callable[..., Any] | None = None
    ) -> "Group | DataFrame":
        """Group rows by the values of the ``keys`` columns.

        Without a block returns a :class:`Group` that can be used
        to compute aggregations, with a block it directly returns
        the result of :meth:`Group.summarize` for the block.
        """
        group = Group(self, *keys)
        if block is None:
            return group
        return group.summarize(block=block)
