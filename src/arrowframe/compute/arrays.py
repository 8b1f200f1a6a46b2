"""Building Arrow arrays from Python data.

Arrow infers ``int64`` for any sequence of Python integers,
arrowframe instead stores integers in the narrowest type
that can hold all the values, so ``[1, 2, 3]`` becomes an ``uint8``
array and ``[-1, 300]`` becomes an ``int16`` array.

Keeping arrays narrow is what allows aggregations to show
their widening rules, ``sum`` of an ``uint8`` column is
an ``uint64`` so that accumulating values can never overflow.

>>> infer_array([1, 2, 3]).type
DataType(uint8)
>>> infer_array([-1, 300]).type
DataType(int16)
>>> infer_array([1.5, None]).to_pylist()
[1.5, None]
"""

from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

from ..errors import VectorTypeError

__all__ = (
    "infer_array",
    "narrow_integers",
    "as_arrow",
    "is_numeric",
    "is_integer",
    "is_unsigned",
    "is_floating",
    "is_string",
    "is_boolean",
    "is_temporal",
    "is_dictionary",
    "is_list",
)

UNSIGNED_TYPES = (pa.uint8(), pa.uint16(), pa.uint32(), pa.uint64())
SIGNED_TYPES = (pa.int8(), pa.int16(), pa.int32(), pa.int64())


def infer_array(values: Any, type: pa.DataType | None = None) -> pa.Array:
    """Create an Arrow array out of a sequence of Python values.

    :param values: Any iterable of Python values.
    :param type: Force the resulting array type, skips inference.
    """
    try:
        array = pa.array(list(values), type=type)
    except (pa.ArrowInvalid, pa.ArrowTypeError, OverflowError, TypeError) as e:
        raise VectorTypeError(f"Unable to build an array from values: {e}") from e

    if type is None:
        array = narrow_integers(array)
    return array


def narrow_integers(array: pa.Array) -> pa.Array:
    """Cast an integer array to the narrowest type that fits its values.

    Non integer arrays and arrays with only nulls are returned as they are.
    """
    if not pa.types.is_integer(array.type) or array.null_count == len(array):
        return array

    bounds = pc.min_max(array).as_py()
    low, high = bounds["min"], bounds["max"]
    candidates = UNSIGNED_TYPES if low >= 0 else SIGNED_TYPES
    for candidate in candidates:
        info_low, info_high = _integer_bounds(candidate)
        if info_low <= low and high <= info_high:
            if candidate == array.type:
                return array
            return array.cast(candidate)
    return array


def _integer_bounds(type: pa.DataType) -> tuple[int, int]:
    bits = type.bit_width
    if pa.types.is_unsigned_integer(type):
        return 0, 2**bits - 1
    return -(2 ** (bits - 1)), 2 ** (bits - 1) - 1


def as_arrow(obj: Any) -> pa.Array | pa.ChunkedArray:
    """Get the Arrow data for an array-like object.

    Accepts Vectors (anything with a ``data`` Arrow attribute),
    Arrow arrays and chunked arrays, objects implementing
    ``__arrow_array__`` and plain Python sequences.
    """
    if isinstance(obj, (pa.Array, pa.ChunkedArray)):
        return obj
    data = getattr(obj, "data", None)
    if isinstance(data, (pa.Array, pa.ChunkedArray)):
        return data
    if hasattr(obj, "__arrow_array__"):
        return pa.array(obj)
    if isinstance(obj, (str, bytes)):
        raise VectorTypeError(f"Expected a sequence of values, got {obj!r}")
    return infer_array(obj)


def is_numeric(type: pa.DataType) -> bool:
    return (
        pa.types.is_integer(type)
        or pa.types.is_floating(type)
        or pa.types.is_decimal(type)
    )


def is_integer(type: pa.DataType) -> bool:
    return pa.types.is_integer(type)


def is_unsigned(type: pa.DataType) -> bool:
    return pa.types.is_unsigned_integer(type)


def is_floating(type: pa.DataType) -> bool:
    return pa.types.is_floating(type)


def is_string(type: pa.DataType) -> bool:
    return pa.types.is_string(type) or pa.types.is_large_string(type)


def is_boolean(type: pa.DataType) -> bool:
    return pa.types.is_boolean(type)


def is_temporal(type: pa.DataType) -> bool:
    return pa.types.is_temporal(type)


def is_dictionary(type: pa.DataType) -> bool:
    return pa.types.is_dictionary(type)


def is_list(type: pa.DataType) -> bool:
    return pa.types.is_list(type) or pa.types.is_large_list(type)
