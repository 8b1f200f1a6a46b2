"""arrowframe

A columnar DataFrame library built on top of Apache Arrow.

arrowframe keeps data in Arrow tables and uses the Arrow compute
kernels to process it, what it adds on top of Arrow is a convenient
API to manipulate columns, group rows and compute aggregations.

The library is constituted by multiple components, each isolated within its own
package and each self documented:

* The Compute layer (:mod:`arrowframe.compute`), the registry of the
  compute functions and the helpers to build and group Arrow arrays.
* The Dataframe API (:mod:`arrowframe.dataframe`), which provides
  the :class:`Vector`, :class:`DataFrame` and :class:`Group` objects.

>>> from arrowframe import DataFrame
>>> df = DataFrame({"city": ["NY", "NY", "LA"], "n_employees": [10, 15, 8]})
>>> df.group("city").sum("n_employees").to_dict()
{'city': ['NY', 'LA'], 'sum': [25, 8]}
"""

from . import compute
from .dataframe import AggregationContext, AggregationRequest, DataFrame, Group, Vector
from .errors import (
    ArrowFrameError,
    DataFrameArgumentError,
    DataFrameTypeError,
    GroupArgumentError,
    VectorArgumentError,
    VectorTypeError,
)

__all__ = (
    "compute",
    "DataFrame",
    "Vector",
    "Group",
    "AggregationRequest",
    "AggregationContext",
    "ArrowFrameError",
    "DataFrameArgumentError",
    "DataFrameTypeError",
    "GroupArgumentError",
    "VectorArgumentError",
    "VectorTypeError",
)
