"""Shortcuts to build the aggregations for ``summarise``.

>>> from tidyground.dataframe import Dataframe, mean, n
>>> df = Dataframe.from_pydict({"order": ["Rodentia", "Rodentia"], "litter_size": [6.2, None]})
>>> df.group_by("order").summarise(
...     n=n(),
...     mean_litter=mean("litter_size"),
...     mean_known_litter=mean("litter_size", skip_nulls=True),
... ).to_pylist()
[{'order': 'Rodentia', 'n': 2, 'mean_litter': None, 'mean_known_litter': 6.2}]

By default missing values propagate: if any value of the group
is missing the result is missing too. Pass ``skip_nulls=True``
to ignore missing values. ``sum_``, ``min_`` and ``max_`` have a
trailing underscore to not shadow the Python builtins.
"""

from ..compute import (
    CountAggregation,
    CountRowsAggregation,
    MaxAggregation,
    MeanAggregation,
    MedianAggregation,
    MinAggregation,
    SumAggregation,
)


def mean(column: str, skip_nulls: bool = False) -> MeanAggregation:
    return MeanAggregation(column, skip_nulls=skip_nulls)


def median(column: str, skip_nulls: bool = False) -> MedianAggregation:
    return MedianAggregation(column, skip_nulls=skip_nulls)


def sum_(column: str, skip_nulls: bool = False) -> SumAggregation:
    return SumAggregation(column, skip_nulls=skip_nulls)


def min_(column: str, skip_nulls: bool = False) -> MinAggregation:
    return MinAggregation(column, skip_nulls=skip_nulls)


def max_(column: str, skip_nulls: bool = False) -> MaxAggregation:
    return MaxAggregation(column, skip_nulls=skip_nulls)


def count(column: str) -> CountAggregation:
    """Number of values of ``column`` that are not missing."""
    return CountAggregation(column)


def n() -> CountRowsAggregation:
    """Number of rows."""
    return CountRowsAggregation()
