"""Dataframe library built on top of Apache Arrow.

A dataframe library is a tool designed to handle and manipulate structured data,
typically in the form of tables (i.e., rows and columns).
It allows users to explore data, apply transformations, and analyze it.

The arrowframe Dataframe API is constituted by three objects:

* :class:`Vector`, the values of a single column and the
  compute functions that can be applied to them.
* :class:`DataFrame`, a set of named columns of the same length,
  that supports picking, dropping, renaming and assigning columns.
* :class:`Group`, the rows of a DataFrame grouped by the values
  of one or more columns, which supports computing aggregations
  for each group.

All three are immutable, any transformation returns
a new object and leaves the original one untouched.
"""

from .dataframe import DataFrame
from .group import AggregationContext, AggregationRequest, Group
from .vector import Vector

__all__ = (
    "DataFrame",
    "Vector",
    "Group",
    "AggregationRequest",
    "AggregationContext",
)
