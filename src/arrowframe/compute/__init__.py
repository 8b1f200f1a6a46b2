"""The arrowframe Compute layer

The compute layer is the bridge between arrowframe and
Apache Arrow, which provides the actual storage of the data
and the kernels that perform computations on it.

arrowframe never implements numeric or logical computations
itself, it orchestrates calls into :mod:`pyarrow.compute`:

* :mod:`.functions` is the registry of the compute functions,
  it knows which kernel implements a function and if
  the function aggregates a column or works element-wise.
* :mod:`.arrays` builds Arrow arrays out of Python data and
  classifies Arrow types.
* :mod:`.grouping` partitions the rows of a table in groups
  of rows sharing the same keys.

>>> import pyarrow as pa
>>> from arrowframe.compute import lookup
>>> lookup("add")(pa.array([1, 2, 3]), 1).to_pylist()
[2, 3, 4]
>>> lookup("mean")(pa.array([1, 2, 3, 4])).as_py()
2.5
"""

from .arrays import as_arrow, infer_array, narrow_integers
from .functions import FUNCTIONS, ComputeFunction, FunctionKind, is_aggregate, lookup
from .grouping import Partition, partition

__all__ = (
    "FUNCTIONS",
    "ComputeFunction",
    "FunctionKind",
    "is_aggregate",
    "lookup",
    "as_arrow",
    "infer_array",
    "narrow_integers",
    "Partition",
    "partition",
)
