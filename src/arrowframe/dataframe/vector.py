"""The Vector object, a single column of data."""

import math
from collections import Counter
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Callable, Iterator, Self

import pyarrow as pa
import pyarrow.compute as pc

from ..compute import arrays, functions
from ..compute.functions import FunctionKind
from ..errors import VectorArgumentError, VectorTypeError

__all__ = ("Vector",)

SCALAR_TYPES = (
    bool,
    int,
    float,
    str,
    bytes,
    Decimal,
    date,
    datetime,
    time,
    timedelta,
)


class Vector:
    """The values of one column.

    A Vector wraps an Arrow array and exposes the compute
    functions that can be applied to it. Functions are either
    aggregations, which reduce the Vector to a scalar, or element-wise
    functions, which produce a new Vector with one value for each
    element of the original one.

    Vectors are immutable, all functions return new Vectors
    and the wrapped array is never modified.

    >>> v = Vector([1, 2, 3, 4])
    >>> v.type
    'uint8'
    >>> v.mean()
    2.5
    >>> (v * 2).to_list()
    [2, 4, 6, 8]
    >>> v.propagate("mean").to_list()
    [2.5, 2.5, 2.5, 2.5]

    When a Vector is taken out of a DataFrame it
    knows the name of its column through :attr:`key`,
    otherwise the Vector is headless and its key is ``None``.
    """

    def __init__(self, *values: Any, type: pa.DataType | None = None) -> None:
        """
        :param values: A Vector, a range, an Arrow array or chunked array,
                       or the values themselves (either as multiple
                       arguments or as a single list).
        :param type: The Arrow type of the values, by default it's
                     inferred choosing the smallest type that fits the values.
        """
        match values:
            case (Vector() as vector,):
                data = vector.data
            case ((pa.Array() | pa.ChunkedArray()) as array,):
                data = array
            case (range() as numbers,):
                data = arrays.infer_array(numbers, type=type)
            case (array_like,) if hasattr(array_like, "__arrow_array__"):
                data = pa.array(array_like)
            case _:
                data = arrays.infer_array(_flatten(values), type=type)

        if type is not None and data.type != type:
            try:
                data = data.cast(type)
            except (pa.ArrowInvalid, pa.ArrowNotImplementedError) as e:
                raise VectorTypeError(f"Unable to convert values to {type}: {e}") from e

        self.data: pa.Array | pa.ChunkedArray = data
        self.key: str | None = None

    @classmethod
    def create(cls, data: pa.Array | pa.ChunkedArray, key: str | None = None) -> Self:
        """Wrap Arrow data in a Vector without checking it."""
        instance = cls.__new__(cls)
        instance.data = data
        instance.key = key
        return instance

    @staticmethod
    def aggregate(function: str) -> bool:
        """If ``function`` reduces a Vector to a single scalar.

        >>> Vector.aggregate("mean"), Vector.aggregate("round")
        (True, False)
        """
        return functions.is_aggregate(function)

    def to_arrow_array(self) -> pa.Array | pa.ChunkedArray:
        return self.data

    def __arrow_array__(self, type: pa.DataType | None = None) -> pa.Array:
        data = self.data
        if isinstance(data, pa.ChunkedArray):
            data = data.combine_chunks()
        if type is not None:
            data = data.cast(type)
        return data

    # Introspection

    @property
    def size(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    @property
    def empty(self) -> bool:
        return self.size == 0

    @property
    def data_type(self) -> pa.DataType:
        return self.data.type

    @property
    def type(self) -> str:
        """Name of the Arrow type of the values, like ``"uint8"`` or ``"string"``."""
        return str(self.data.type)

    @property
    def is_boolean(self) -> bool:
        return arrays.is_boolean(self.data.type)

    @property
    def is_numeric(self) -> bool:
        return arrays.is_numeric(self.data.type)

    @property
    def is_float(self) -> bool:
        return arrays.is_floating(self.data.type)

    @property
    def is_integer(self) -> bool:
        return arrays.is_integer(self.data.type)

    @property
    def is_string(self) -> bool:
        return arrays.is_string(self.data.type)

    @property
    def is_dictionary(self) -> bool:
        return arrays.is_dictionary(self.data.type)

    @property
    def is_temporal(self) -> bool:
        return arrays.is_temporal(self.data.type)

    @property
    def is_list(self) -> bool:
        return arrays.is_list(self.data.type)

    @property
    def chunked(self) -> bool:
        return isinstance(self.data, pa.ChunkedArray)

    @property
    def n_chunks(self) -> int:
        return self.data.num_chunks if self.chunked else 0

    @property
    def n_nulls(self) -> int:
        return self.data.null_count

    n_nils = n_nulls

    @property
    def n_nans(self) -> int:
        """Number of NaN values, always 0 for non floating point Vectors."""
        if not self.is_float:
            return 0
        return pc.sum(pc.is_nan(self.data)).as_py() or 0

    @property
    def has_nil(self) -> bool:
        return self.n_nulls > 0

    def indices(self) -> list[int]:
        return list(range(self.size))

    def to_list(self) -> list[Any]:
        return self.data.to_pylist()

    def __iter__(self) -> Iterator[Any]:
        return iter(self.data.to_pylist())

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return Vector.create(self.data[index])
        return self.data[index].as_py()

    def map(self, func: Callable[[Any], Any]) -> "Vector":
        """Build a new Vector out of ``func`` applied to each value."""
        return Vector([func(value) for value in self])

    def cast(self, type: pa.DataType) -> "Vector":
        return Vector.create(self.data.cast(type))

    def filter(self, mask: Any) -> "Vector":
        """Keep only the values where ``mask`` is true."""
        return Vector.create(pc.filter(self.data, _operand(mask)))

    def tally(self) -> dict[Any, int]:
        """Count how many times each value appears.

        ``NaN`` is never equal to itself, so all the ``NaN``
        values are counted together under a single ``NaN`` key.

        >>> Vector([1.0, float("nan"), 1.0, float("nan")]).tally()
        {1.0: 2, nan: 2}
        """
        counts: Counter = Counter()
        nans = 0
        for value in self:
            if isinstance(value, float) and math.isnan(value):
                nans += 1
            else:
                counts[value] += 1
        result = dict(counts)
        if nans:
            result[math.nan] = nans
        return result

    def value_counts(self) -> dict[Any, int]:
        """Count how many times each value appears using the Arrow kernel."""
        data = self.data
        if isinstance(data, pa.ChunkedArray):
            data = data.combine_chunks()
        counted = pc.value_counts(data)
        return dict(
            zip(counted.field("values").to_pylist(), counted.field("counts").to_pylist())
        )

    # Compute functions dispatch

    def apply(self, function: str, *others: Any, **options: Any) -> Any:
        """Execute a compute function on the Vector.

        Aggregations return a Python scalar, element-wise
        functions return a new Vector. Binary functions
        expect exactly one other operand, which can be
        a Vector, an Arrow array, a list or a scalar.

        :param function: Name of the function in the compute registry.
        :param others: Other operands of the function.
        :param options: Options forwarded to the compute kernel.
        """
        compute_function = functions.lookup(function)
        match compute_function.kind:
            case FunctionKind.AGGREGATE:
                _expect_operands(compute_function, others, 0)
                return _scalar_value(compute_function(self.data, **options))
            case FunctionKind.UNARY:
                _expect_operands(compute_function, others, 0)
                return Vector.create(compute_function(self.data, **options))
            case FunctionKind.BINARY:
                _expect_operands(compute_function, others, 1)
                result = compute_function(self.data, _operand(others[0]), **options)
                return Vector.create(result)

    def reduce(self, function: str, **options: Any) -> pa.Scalar:
        """Execute an aggregation and return the Arrow scalar.

        Differently from :meth:`apply` the result keeps its
        Arrow type, which is needed to build new arrays out
        of multiple aggregation results.
        """
        compute_function = functions.lookup(function)
        if not compute_function.is_aggregate:
            raise VectorArgumentError(f"{function!r} is not an aggregation function")
        return compute_function(self.data, **options)

    # Aggregations

    def all(self, **options: Any) -> Any:
        return self.apply("all", **options)

    def any(self, **options: Any) -> Any:
        return self.apply("any", **options)

    def approximate_median(self, **options: Any) -> Any:
        return self.apply("approximate_median", **options)

    median = approximate_median

    def count(self, **options: Any) -> Any:
        return self.apply("count", **options)

    def count_distinct(self, **options: Any) -> Any:
        return self.apply("count_distinct", **options)

    count_uniq = count_distinct

    def max(self, **options: Any) -> Any:
        return self.apply("max", **options)

    def mean(self, **options: Any) -> Any:
        return self.apply("mean", **options)

    def min(self, **options: Any) -> Any:
        return self.apply("min", **options)

    def min_max(self, **options: Any) -> Any:
        return self.apply("min_max", **options)

    def product(self, **options: Any) -> Any:
        return self.apply("product", **options)

    def quantile(self, q: float = 0.5, **options: Any) -> Any:
        return self.apply("quantile", q=q, **options)

    def stddev(self, **options: Any) -> Any:
        return self.apply("stddev", **options)

    sd = std = stddev

    def sum(self, **options: Any) -> Any:
        return self.apply("sum", **options)

    def variance(self, **options: Any) -> Any:
        return self.apply("variance", **options)

    var = variance

    def unbiased_variance(self, **options: Any) -> Any:
        return self.apply("unbiased_variance", **options)

    # Element-wise functions

    def abs(self) -> "Vector":
        return self.apply("abs")

    def ceil(self) -> "Vector":
        return self.apply("ceil")

    def floor(self) -> "Vector":
        return self.apply("floor")

    def round(self, ndigits: int = 0, **options: Any) -> "Vector":
        return self.apply("round", ndigits=ndigits, **options)

    def sign(self) -> "Vector":
        return self.apply("sign")

    def sqrt(self) -> "Vector":
        return self.apply("sqrt")

    def exp(self) -> "Vector":
        return self.apply("exp")

    def negate(self) -> "Vector":
        return self.apply("negate")

    def invert(self) -> "Vector":
        return self.apply("invert")

    def is_null(self) -> "Vector":
        return self.apply("is_null")

    is_nil = is_null

    def is_valid(self) -> "Vector":
        return self.apply("is_valid")

    def is_nan(self) -> "Vector":
        return self.apply("is_nan")

    def equal(self, other: Any) -> "Vector":
        return self.apply("equal", other)

    def not_equal(self, other: Any) -> "Vector":
        return self.apply("not_equal", other)

    # Operators

    def coerce(self, other: Any) -> tuple["Vector", "Vector"]:
        """Broadcast ``other`` to a Vector of the same size as self.

        Allows scalars to appear as the left operand of
        arithmetic with Vectors, like ``10 - vector``.
        """
        return Vector(pa.array([other] * self.size)), self

    def __add__(self, other: Any) -> "Vector":
        return self.apply("add", other)

    def __radd__(self, other: Any) -> "Vector":
        left, right = self.coerce(other)
        return left.apply("add", right)

    def __sub__(self, other: Any) -> "Vector":
        return self.apply("subtract", other)

    def __rsub__(self, other: Any) -> "Vector":
        left, right = self.coerce(other)
        return left.apply("subtract", right)

    def __mul__(self, other: Any) -> "Vector":
        return self.apply("multiply", other)

    def __rmul__(self, other: Any) -> "Vector":
        left, right = self.coerce(other)
        return left.apply("multiply", right)

    def __truediv__(self, other: Any) -> "Vector":
        return self.apply("fdiv", other)

    def __rtruediv__(self, other: Any) -> "Vector":
        left, right = self.coerce(other)
        return left.apply("fdiv", right)

    def __pow__(self, other: Any) -> "Vector":
        return self.apply("power", other)

    def __rpow__(self, other: Any) -> "Vector":
        left, right = self.coerce(other)
        return left.apply("power", right)

    def __neg__(self) -> "Vector":
        return self.apply("negate")

    def __pos__(self) -> "Vector":
        return self

    def __abs__(self) -> "Vector":
        return self.apply("abs")

    def __invert__(self) -> "Vector":
        return self.apply("invert")

    def __and__(self, other: Any) -> "Vector":
        return self.apply("and_kleene", other)

    def __or__(self, other: Any) -> "Vector":
        return self.apply("or_kleene", other)

    def __xor__(self, other: Any) -> "Vector":
        return self.apply("xor", other)

    def __lt__(self, other: Any) -> "Vector":
        return self.apply("less", other)

    def __le__(self, other: Any) -> "Vector":
        return self.apply("less_equal", other)

    def __gt__(self, other: Any) -> "Vector":
        return self.apply("greater", other)

    def __ge__(self, other: Any) -> "Vector":
        return self.apply("greater_equal", other)

    # Conversions

    def resolve(self, other: Any) -> "Vector":
        """Convert ``other`` to a Vector of the same type as self.

        The conversion is an explicit cast, so integers can become
        strings, numeric strings can become numbers and
        integers can be upcast to a wider type.

        >>> Vector("A").resolve([1, 2]).to_list()
        ['1', '2']
        >>> Vector(256).resolve([1, 2]).type
        'uint16'
        """
        match other:
            case Vector():
                source = other.data
            case pa.Array() | pa.ChunkedArray():
                source = other
            case list() | tuple():
                try:
                    source = pa.array(list(other))
                except (pa.ArrowInvalid, pa.ArrowTypeError, TypeError) as e:
                    raise VectorArgumentError(f"Invalid values: {other!r}") from e
            case _:
                raise VectorArgumentError(f"Invalid argument: {other!r}")

        try:
            return Vector.create(source.cast(self.data.type))
        except (pa.ArrowInvalid, pa.ArrowNotImplementedError, pa.ArrowTypeError) as e:
            raise VectorArgumentError(
                f"Unable to resolve {source.type} values as {self.data.type}: {e}"
            ) from e

    def propagate(
        self,
        function: str | Callable[["Vector"], Any] | None = None,
        block: Callable[["Vector"], Any] | None = None,
    ) -> "Vector":
        """Spread the result of an aggregation to all the elements.

        Returns a Vector of the same size as self, where
        all elements are the result of the ``function`` aggregation
        or the scalar returned by ``block`` when called with self.

        >>> Vector([1, 2, 3, 4]).propagate(block=lambda v: v.sum()).to_list()
        [10, 10, 10, 10]
        """
        if block is None and callable(function):
            function, block = None, function

        if block is not None:
            if function is not None:
                raise VectorArgumentError("Can't specify both function and block")
            value = block(self)
        else:
            if function is None or not functions.is_aggregate(function):
                raise VectorArgumentError(f"Illegal function: {function!r}")
            value = functions.lookup(function)(self.data)
            if not isinstance(value, pa.Scalar):
                value = _scalar_value(value)

        if isinstance(value, pa.Scalar):
            # The result has the type of the aggregation, also when null.
            return Vector.create(pa.repeat(value, self.size))
        return Vector([value] * self.size)

    expand = propagate

    def __str__(self) -> str:
        return str(self.to_list())

    def __repr__(self) -> str:
        values = self.data.slice(0, 10).to_pylist()
        preview = ", ".join(repr(v) for v in values)
        if self.size > 10:
            preview += ", ..."
        return f"<Vector({self.type}, size={self.size}) [{preview}]>"


def _flatten(values: tuple) -> list[Any]:
    flat: list[Any] = []
    for value in values:
        if isinstance(value, (list, tuple, range)):
            flat.extend(value)
        elif isinstance(value, Vector):
            flat.extend(value.to_list())
        else:
            flat.append(value)
    return flat


def _operand(other: Any) -> Any:
    """Convert the operand of a compute function to something Arrow understands."""
    match other:
        case Vector():
            return other.data
        case pa.Array() | pa.ChunkedArray() | pa.Scalar():
            return other
        case list() | tuple() | range():
            return arrays.infer_array(other)
        case None:
            return other
        case _ if isinstance(other, SCALAR_TYPES):
            return other
    raise VectorArgumentError(f"Unsupported operand type: {type(other).__name__}")


def _expect_operands(
    function: functions.ComputeFunction, others: tuple, expected: int
) -> None:
    if len(others) != expected:
        raise VectorArgumentError(
            f"{function.name} expects {expected} other operands, got {len(others)}"
        )


def _scalar_value(result: pa.Scalar | pa.Array) -> Any:
    # quantile returns an array with one value for each quantile.
    if isinstance(result, (pa.Array, pa.ChunkedArray)):
        values = result.to_pylist()
        return values[0] if len(values) == 1 else values
    return result.as_py()
