"""Errors raised by arrowframe.

All errors are raised at the call that detects the problem,
they signal invalid input from the caller and there is nothing
to retry. When one is raised no new DataFrame or Vector
is returned and the existing ones are left unchanged.

Errors that originate from the Arrow compute kernels themselves
(like adding a string to a number) are not wrapped and surface
as the original :mod:`pyarrow` exception.
"""


class ArrowFrameError(Exception):
    """Base class for all arrowframe errors."""


class DataFrameArgumentError(ArrowFrameError, ValueError):
    """Invalid arguments provided to a DataFrame operation.

    For example selecting a column that doesn't exist or
    assigning data whose size doesn't match the DataFrame.
    """


class DataFrameTypeError(ArrowFrameError, TypeError):
    """Data can't be represented in a DataFrame column."""


class VectorArgumentError(ArrowFrameError, ValueError):
    """Invalid arguments provided to a Vector operation."""


class VectorTypeError(ArrowFrameError, TypeError):
    """Values can't be represented in the requested element type."""


class GroupArgumentError(DataFrameArgumentError):
    """Invalid grouping keys or aggregation targets."""
