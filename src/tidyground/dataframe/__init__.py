"""Dataframe library built on top of tidyground.

A dataframe library is a tool designed to handle and manipulate structured data,
typically in the form of tables (i.e., rows and columns).
It allows users to load data from various sources (like CSV files),
explore it, apply transformations, and analyze it.

The tidyground dataframe is organized around five verbs:

* ``select`` picks columns.
* ``filter`` picks rows.
* ``arrange`` sorts rows.
* ``mutate`` adds columns computed from the existing ones.
* ``summarise`` reduces groups of rows to a single row.

Each verb returns a new dataframe, so they are chained
one after the other or, using :mod:`tidyground.dataframe.verbs`,
nested one inside the other.

This module shows how to implement a custom dataframe library,
using the tidyground compute capabilities as its foundation.
"""

from ..compute import col, lit
from ..compute.selectors import (
    between,
    contains,
    ends_with,
    everything,
    exclude,
    matches,
    starts_with,
)
from . import verbs
from .aggregations import count, max_, mean, median, min_, n, sum_
from .dataframe import Dataframe, GroupedDataframe, SortKey, desc

__all__ = (
    "Dataframe",
    "GroupedDataframe",
    "SortKey",
    "between",
    "col",
    "contains",
    "count",
    "desc",
    "ends_with",
    "everything",
    "exclude",
    "lit",
    "matches",
    "max_",
    "mean",
    "median",
    "min_",
    "n",
    "starts_with",
    "sum_",
    "verbs",
)
