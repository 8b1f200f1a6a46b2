"""Group the rows of a DataFrame and compute aggregations.

Frequently when analysing data it's necessary to compute
statistics like the sum, min, max, average, etc... of the
rows that share the same value in one or more columns.

For example, given the following data::

    city, shop, n_employees
    New York, Shop A, 10
    New York, Shop B, 15
    Los Angeles, Shop C, 8
    Los Angeles, Shop D, 12
    New York, Shop E, 20

We could group by city and compute the sum of the employees
to get::

    city, sum
    New York, 45
    Los Angeles, 20

A :class:`Group` is created by :meth:`DataFrame.group` and holds
one boolean mask for each distinct value of the keys, the mask
selects the rows that are part of the group. Aggregations reduce
each target column, filtered by each mask, to one value per group.

The result of an aggregation is a new DataFrame that has the
key columns first and the aggregated columns after them.
When a single column is aggregated, the aggregated column
is named after the function (``sum``), when multiple columns
are aggregated, or multiple functions are used, each column
is named after the function and the source column (``sum(n_employees)``).
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator

import pyarrow as pa
import pyarrow.compute as pc

from ..compute import arrays, partition
from ..errors import GroupArgumentError
from .vector import Vector

if TYPE_CHECKING:
    from .dataframe import DataFrame

__all__ = ("Group", "AggregationRequest", "AggregationContext")

logger = logging.getLogger(__name__)

AGGREGATIONS = ("count", "sum", "mean", "min", "max", "product", "stddev", "variance")

# Aggregations that only make sense on numbers,
# boolean columns are aggregated as 0 and 1.
NUMERIC_AGGREGATIONS = frozenset({"sum", "mean", "product", "stddev", "variance"})


@dataclass(frozen=True)
class AggregationRequest:
    """An aggregation that has to be computed for each group.

    :param function: The name of the aggregation function, like ``"sum"``.
    :param targets: The columns to aggregate, when empty
                    the default columns for the function are used.
    """

    function: str
    targets: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.function not in AGGREGATIONS:
            raise GroupArgumentError(f"Unsupported aggregation: {self.function!r}")


class AggregationContext:
    """Provides aggregation functions to :meth:`Group.summarize` blocks.

    The block receives the context and uses it to declare
    which aggregations it wants to compute::

        group.summarize(lambda g: [g.count("i", "f"), g.sum()])

    Each function returns an :class:`AggregationRequest`,
    the aggregations are computed once the block returns.
    The columns of the grouped DataFrame are available as
    Vectors through :meth:`v` or ``g["column"]``.
    """

    def __init__(self, group: "Group") -> None:
        self.group = group

    @property
    def keys(self) -> list[str]:
        return self.group.keys

    def v(self, key: str) -> Vector:
        """The Vector of the column named ``key`` in the grouped DataFrame."""
        return self.group.dataframe.v(key)

    __getitem__ = v

    def count(self, *targets: str | list[str]) -> AggregationRequest:
        return AggregationRequest("count", _flatten(targets))

    def sum(self, *targets: str | list[str]) -> AggregationRequest:
        return AggregationRequest("sum", _flatten(targets))

    def mean(self, *targets: str | list[str]) -> AggregationRequest:
        return AggregationRequest("mean", _flatten(targets))

    def min(self, *targets: str | list[str]) -> AggregationRequest:
        return AggregationRequest("min", _flatten(targets))

    def max(self, *targets: str | list[str]) -> AggregationRequest:
        return AggregationRequest("max", _flatten(targets))

    def product(self, *targets: str | list[str]) -> AggregationRequest:
        return AggregationRequest("product", _flatten(targets))

    def stddev(self, *targets: str | list[str]) -> AggregationRequest:
        return AggregationRequest("stddev", _flatten(targets))

    def variance(self, *targets: str | list[str]) -> AggregationRequest:
        return AggregationRequest("variance", _flatten(targets))


@dataclass(frozen=True)
class _AggregatedColumn:
    function: str
    target: str | None  # None when multiple targets collapsed in one column.
    values: pa.Array

    def default_name(self, plain: bool) -> str:
        if plain or self.target is None:
            return self.function
        return f"{self.function}({self.target})"


class Group:
    """Rows of a DataFrame grouped by the values of key columns.

    >>> from arrowframe import DataFrame
    >>> df = DataFrame({"i": [0, 0, 1, 2, 2, None], "n": [1, 2, 3, 4, 5, 6]})
    >>> group = df.group("i")
    >>> group.sum("n").to_dict()
    {'i': [0, 1, 2, None], 'sum': [3, 3, 9, 6]}
    >>> group.group_count().to_dict()
    {'i': [0, 1, 2, None], 'group_count': [2, 1, 2, 1]}
    """

    def __init__(self, dataframe: "DataFrame", *keys: str | list[str]) -> None:
        """
        :param dataframe: The DataFrame whose rows have to be grouped.
        :param keys: The names of the columns to group by.
        """
        keys = _flatten(keys)
        if dataframe.empty:
            raise GroupArgumentError("Cannot group an empty DataFrame")
        if not keys:
            raise GroupArgumentError("At least one key is required to group")
        missing = [key for key in keys if key not in dataframe.keys]
        if missing:
            raise GroupArgumentError(f"{missing} is not a key of the DataFrame")

        self.dataframe = dataframe
        self.keys = list(keys)
        table = dataframe.table
        self._partition = partition([table.column(key) for key in self.keys])

    def __str__(self) -> str:
        return f"Group(keys={self.keys}, groups={self.size})"

    __repr__ = __str__

    @property
    def size(self) -> int:
        """Number of groups."""
        return len(self._partition)

    def __len__(self) -> int:
        return self.size

    def filters(self) -> list[Vector]:
        """The boolean mask of each group, in group order."""
        return [Vector.create(mask) for mask in self._partition.masks]

    def each(self) -> Iterator["DataFrame"]:
        """Iterate over the sub DataFrame of each group.

        The DataFrames are built only when the iteration
        reaches them, each call starts a new iteration.
        """
        from .dataframe import DataFrame

        table = self.dataframe.table
        for mask in self._partition.masks:
            yield DataFrame(table.filter(mask))

    __iter__ = each

    def group_count(self) -> "DataFrame":
        """Count the rows in each group.

        The counts are stored in a ``group_count`` column
        of the smallest unsigned integer type that fits them.
        """
        counts = [pc.sum(mask).as_py() for mask in self._partition.masks]
        return self._build_result(
            [("group_count", arrays.infer_array(counts))]
        )

    # Aggregations

    def count(self, *targets: str | list[str]) -> "DataFrame":
        """Count the non null values of each group.

        When the counts are the same for all the targets
        they are reported as a single ``count`` column.
        """
        return self._summarize([(None, AggregationRequest("count", _flatten(targets)))])

    def sum(self, *targets: str | list[str]) -> "DataFrame":
        return self._summarize([(None, AggregationRequest("sum", _flatten(targets)))])

    def mean(self, *targets: str | list[str]) -> "DataFrame":
        return self._summarize([(None, AggregationRequest("mean", _flatten(targets)))])

    def min(self, *targets: str | list[str]) -> "DataFrame":
        return self._summarize([(None, AggregationRequest("min", _flatten(targets)))])

    def max(self, *targets: str | list[str]) -> "DataFrame":
        return self._summarize([(None, AggregationRequest("max", _flatten(targets)))])

    def product(self, *targets: str | list[str]) -> "DataFrame":
        return self._summarize([(None, AggregationRequest("product", _flatten(targets)))])

    def stddev(self, *targets: str | list[str]) -> "DataFrame":
        return self._summarize([(None, AggregationRequest("stddev", _flatten(targets)))])

    def variance(self, *targets: str | list[str]) -> "DataFrame":
        return self._summarize([(None, AggregationRequest("variance", _flatten(targets)))])

    def summarize(
        self,
        *requests: AggregationRequest,
        block: Callable[[AggregationContext], Any] | None = None,
    ) -> "DataFrame":
        """Compute multiple aggregations in a single result.

        The aggregations can be provided as :class:`AggregationRequest`
        arguments or returned by a block, which receives an
        :class:`AggregationContext` to create them::

            group.summarize(lambda g: [g.count("i", "f"), g.sum()])

        The block can also return a dictionary, whose keys
        will be used as the names of the aggregated columns::

            group.summarize(lambda g: {"total": g.sum("f")})
        """
        if block is None and len(requests) == 1 and callable(requests[0]):
            requests, block = (), requests[0]

        if block is not None:
            if requests:
                raise GroupArgumentError("Must not specify both arguments and a block")
            declared = block(AggregationContext(self))
        else:
            declared = list(requests)
        return self._summarize(_parse_requests(declared))

    # Lower level aggregations

    def agg_count(self, *targets: str | list[str]) -> tuple[list[str], list[pa.Array]]:
        return self._agg("count", targets)

    def agg_sum(self, *targets: str | list[str]) -> tuple[list[str], list[pa.Array]]:
        return self._agg("sum", targets)

    def agg_mean(self, *targets: str | list[str]) -> tuple[list[str], list[pa.Array]]:
        return self._agg("mean", targets)

    def agg_min(self, *targets: str | list[str]) -> tuple[list[str], list[pa.Array]]:
        return self._agg("min", targets)

    def agg_max(self, *targets: str | list[str]) -> tuple[list[str], list[pa.Array]]:
        return self._agg("max", targets)

    def agg_product(self, *targets: str | list[str]) -> tuple[list[str], list[pa.Array]]:
        return self._agg("product", targets)

    def agg_stddev(self, *targets: str | list[str]) -> tuple[list[str], list[pa.Array]]:
        return self._agg("stddev", targets)

    def agg_variance(self, *targets: str | list[str]) -> tuple[list[str], list[pa.Array]]:
        return self._agg("variance", targets)

    def _agg(self, function: str, targets: tuple) -> tuple[list[str], list[pa.Array]]:
        """Aggregate each target for each group.

        Returns the names of the aggregated columns, in the form
        ``function(target)``, and for each target the array of
        aggregated values, one for each group.
        """
        targets = self._resolve_targets(function, _flatten(targets))
        names = [f"{function}({target})" for target in targets]
        return names, [self._aggregate(function, target) for target in targets]

    def _resolve_targets(self, function: str, targets: tuple[str, ...]) -> list[str]:
        columns = self.dataframe.keys
        if targets:
            missing = [target for target in targets if target not in columns]
            if missing:
                raise GroupArgumentError(f"{missing} is not a key of the DataFrame")
            return list(targets)

        defaults = [name for name in columns if name not in self.keys]
        if function in NUMERIC_AGGREGATIONS:
            defaults = [
                name
                for name in defaults
                if arrays.is_numeric(self.dataframe.table.schema.field(name).type)
            ]
        if not defaults:
            raise GroupArgumentError(f"No columns to aggregate with {function}")
        return defaults

    def _aggregate(self, function: str, target: str) -> pa.Array:
        """Reduce the ``target`` column to one value for each group."""
        column = self.dataframe[target]
        if function in NUMERIC_AGGREGATIONS and column.is_boolean:
            column = column.cast(pa.uint8())

        results = [
            column.filter(mask).reduce(function) for mask in self._partition.masks
        ]
        return pa.array([result.as_py() for result in results], type=results[0].type)

    def _evaluate(self, request: AggregationRequest) -> list[_AggregatedColumn]:
        targets = self._resolve_targets(request.function, request.targets)
        aggregated = [
            _AggregatedColumn(request.function, target, self._aggregate(request.function, target))
            for target in targets
        ]
        if request.function == "count" and len(aggregated) > 1:
            first = aggregated[0].values
            if all(column.values.equals(first) for column in aggregated[1:]):
                return [_AggregatedColumn("count", None, first)]
        return aggregated

    def _summarize(
        self, requests: list[tuple[str | None, AggregationRequest]]
    ) -> "DataFrame":
        evaluated: list[tuple[str | None, _AggregatedColumn]] = []
        for name, request in requests:
            columns = self._evaluate(request)
            if name is not None and len(columns) != 1:
                raise GroupArgumentError(
                    f"{name!r} must name a single aggregated column, got {len(columns)}"
                )
            evaluated.extend((name, column) for column in columns)

        plain = len(evaluated) == 1
        logger.debug(
            "Aggregated %d columns over %d groups of keys %s",
            len(evaluated),
            self.size,
            self.keys,
        )
        return self._build_result(
            [
                (name if name is not None else column.default_name(plain), column.values)
                for name, column in evaluated
            ]
        )

    def _build_result(self, aggregated: list[tuple[str, pa.Array]]) -> "DataFrame":
        from .dataframe import DataFrame

        table = self.dataframe.table
        first_indices = pa.array(self._partition.first_indices, type=pa.int64())
        names = self.keys + [name for name, _ in aggregated]
        duplicated = sorted({name for name in names if names.count(name) > 1})
        if duplicated:
            raise GroupArgumentError(f"Duplicated column names in result: {duplicated}")

        columns = [table.column(key).take(first_indices) for key in self.keys]
        columns += [pa.chunked_array([values]) for _, values in aggregated]
        return DataFrame(pa.Table.from_arrays(columns, names=names))


def _parse_requests(declared: Any) -> list[tuple[str | None, AggregationRequest]]:
    """Normalize what a summarize block returned to a list of named requests.

    Requests that were not given an explicit name have ``None`` as the name.
    """
    if declared is None or (isinstance(declared, (list, tuple, Mapping)) and not declared):
        raise GroupArgumentError("No aggregation requested")

    match declared:
        case AggregationRequest():
            return [(None, declared)]
        case Mapping():
            parsed = []
            for name, request in declared.items():
                if not isinstance(request, AggregationRequest):
                    raise GroupArgumentError(f"Invalid aggregation for {name!r}: {request!r}")
                parsed.append((str(name), request))
            return parsed
        case list() | tuple():
            parsed = []
            for item in declared:
                parsed.extend(_parse_requests(item))
            return parsed
    raise GroupArgumentError(f"Invalid aggregation: {declared!r}")


def _flatten(targets: tuple | list) -> tuple[str, ...]:
    flat: list[str] = []
    for target in targets:
        if isinstance(target, (list, tuple)):
            flat.extend(_flatten(target))
        else:
            flat.append(target)
    return tuple(flat)
