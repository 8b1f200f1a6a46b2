"""Registry of the compute functions available to Vectors.

Every function that a Vector can execute is declared here
as a :class:`ComputeFunction`, which couples the name of the function,
the kernel that implements it and its kind.

The kind tells how the result of the function has to be treated:

* ``AGGREGATE`` functions reduce a whole column to one scalar (``sum``, ``mean``).
* ``UNARY`` functions produce one value per element of a column (``abs``).
* ``BINARY`` functions combine a column with another operand
  element by element (``add``, ``greater``).

Kernels are :mod:`pyarrow.compute` functions, or thin wrappers
when the Arrow behaviour has to be adjusted.

>>> lookup("sum").kind
<FunctionKind.AGGREGATE: 'aggregate'>
>>> is_aggregate("mean"), is_aggregate("round")
(True, False)
"""

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

import pyarrow as pa
import pyarrow.compute as pc

from ..errors import VectorArgumentError
from . import arrays

__all__ = (
    "FunctionKind",
    "ComputeFunction",
    "FUNCTIONS",
    "lookup",
    "is_aggregate",
)


class FunctionKind(enum.Enum):
    """How the result of a compute function relates to its input."""

    AGGREGATE = "aggregate"
    UNARY = "unary"
    BINARY = "binary"


@dataclass(frozen=True)
class ComputeFunction:
    """A named compute kernel and its kind.

    :param name: The name the function is registered with.
    :param kind: If the function is an aggregation or element-wise.
    :param kernel: The callable executing the function on Arrow data.
    :param options: Default keyword options passed to the kernel,
                    explicit options provided at call time take precedence.
    """

    name: str
    kind: FunctionKind
    kernel: Callable[..., Any]
    options: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_aggregate(self) -> bool:
        return self.kind is FunctionKind.AGGREGATE

    def __call__(self, *args: Any, **options: Any) -> Any:
        return self.kernel(*args, **{**self.options, **options})

    def __str__(self) -> str:
        return f"ComputeFunction({self.name}, {self.kind.value})"


def _negate(values: Any, **options: Any) -> Any:
    """Negate values, wrapping around for unsigned integers.

    Unsigned types have no negative values, so ``-x``
    is computed as ``0 - x`` in the same type, which gives
    the two's complement of ``x``.
    """
    if arrays.is_unsigned(values.type):
        return pc.subtract(pa.scalar(0, type=values.type), values)
    return pc.negate(values, **options)


def _is_nan(values: Any) -> Any:
    if pa.types.is_floating(values.type):
        return pc.is_nan(values)
    # Only floats can hold NaN, nulls stay null.
    return pc.not_equal(values, values)


def _as_float(value: Any) -> Any:
    if isinstance(value, (pa.Array, pa.ChunkedArray, pa.Scalar)):
        return value.cast(pa.float64())
    if value is None:
        return pa.scalar(None, type=pa.float64())
    return float(value)


def _fdiv(left: Any, right: Any) -> Any:
    """True division, integers are divided as floats."""
    return pc.divide(_as_float(left), _as_float(right))


def _declare(
    kind: FunctionKind, kernel: Callable[..., Any], *names: str, **options: Any
) -> dict[str, ComputeFunction]:
    """Register the same kernel under one or more names.

    The first name is the canonical one, the others are aliases.
    """
    function = ComputeFunction(names[0], kind, kernel, MappingProxyType(options))
    return {name: function for name in names}


AGGREGATE = FunctionKind.AGGREGATE
UNARY = FunctionKind.UNARY
BINARY = FunctionKind.BINARY

FUNCTIONS: Mapping[str, ComputeFunction] = MappingProxyType(
    {
        # Aggregations
        **_declare(AGGREGATE, pc.all, "all"),
        **_declare(AGGREGATE, pc.any, "any"),
        **_declare(AGGREGATE, pc.approximate_median, "approximate_median", "median"),
        **_declare(AGGREGATE, pc.count, "count"),
        **_declare(AGGREGATE, pc.count_distinct, "count_distinct", "count_uniq"),
        **_declare(AGGREGATE, pc.max, "max"),
        **_declare(AGGREGATE, pc.mean, "mean"),
        **_declare(AGGREGATE, pc.min, "min"),
        **_declare(AGGREGATE, pc.min_max, "min_max"),
        **_declare(AGGREGATE, pc.product, "product"),
        **_declare(AGGREGATE, pc.quantile, "quantile"),
        **_declare(AGGREGATE, pc.stddev, "stddev", "sd", "std"),
        **_declare(AGGREGATE, pc.sum, "sum"),
        **_declare(AGGREGATE, pc.variance, "variance", "var"),
        **_declare(AGGREGATE, pc.variance, "unbiased_variance", ddof=1),
        # Element-wise, one operand
        **_declare(UNARY, pc.abs, "abs"),
        **_declare(UNARY, pc.ceil, "ceil"),
        **_declare(UNARY, pc.floor, "floor"),
        **_declare(UNARY, pc.round, "round"),
        **_declare(UNARY, pc.trunc, "trunc"),
        **_declare(UNARY, pc.sign, "sign"),
        **_declare(UNARY, pc.sqrt, "sqrt"),
        **_declare(UNARY, pc.exp, "exp"),
        **_declare(UNARY, pc.ln, "ln"),
        **_declare(UNARY, pc.log10, "log10"),
        **_declare(UNARY, pc.log2, "log2"),
        **_declare(UNARY, pc.sin, "sin"),
        **_declare(UNARY, pc.cos, "cos"),
        **_declare(UNARY, pc.tan, "tan"),
        **_declare(UNARY, _negate, "negate"),
        **_declare(UNARY, pc.invert, "invert"),
        **_declare(UNARY, pc.is_null, "is_null", "is_nil"),
        **_declare(UNARY, pc.is_valid, "is_valid"),
        **_declare(UNARY, _is_nan, "is_nan"),
        **_declare(UNARY, pc.is_finite, "is_finite"),
        **_declare(UNARY, pc.is_inf, "is_inf"),
        **_declare(UNARY, pc.utf8_length, "utf8_length"),
        **_declare(UNARY, pc.utf8_upper, "utf8_upper"),
        **_declare(UNARY, pc.utf8_lower, "utf8_lower"),
        # Element-wise, two operands
        **_declare(BINARY, pc.add, "add"),
        **_declare(BINARY, pc.subtract, "subtract"),
        **_declare(BINARY, pc.multiply, "multiply"),
        **_declare(BINARY, pc.divide, "divide"),
        **_declare(BINARY, _fdiv, "fdiv"),
        **_declare(BINARY, pc.power, "power"),
        **_declare(BINARY, pc.equal, "equal"),
        **_declare(BINARY, pc.not_equal, "not_equal"),
        **_declare(BINARY, pc.greater, "greater"),
        **_declare(BINARY, pc.greater_equal, "greater_equal"),
        **_declare(BINARY, pc.less, "less"),
        **_declare(BINARY, pc.less_equal, "less_equal"),
        **_declare(BINARY, pc.and_, "and"),
        **_declare(BINARY, pc.and_kleene, "and_kleene"),
        **_declare(BINARY, pc.or_, "or"),
        **_declare(BINARY, pc.or_kleene, "or_kleene"),
        **_declare(BINARY, pc.xor, "xor"),
        **_declare(BINARY, pc.bit_wise_and, "bit_wise_and"),
        **_declare(BINARY, pc.bit_wise_or, "bit_wise_or"),
        **_declare(BINARY, pc.bit_wise_xor, "bit_wise_xor"),
    }
)


def lookup(name: str) -> ComputeFunction:
    """Get the compute function registered with the given name."""
    try:
        return FUNCTIONS[str(name)]
    except KeyError:
        raise VectorArgumentError(f"Unknown compute function: {name!r}") from None


def is_aggregate(name: str) -> bool:
    """If the function with the given name reduces a column to a scalar.

    Unknown functions are never aggregations.
    """
    function = FUNCTIONS.get(str(name))
    return function is not None and function.is_aggregate
