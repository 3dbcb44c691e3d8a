"""The dataframe verbs as plain functions.

Each function takes the dataframe as its first argument
and returns a new dataframe, so the same analysis can be
written chaining methods::

    df.mutate(ratio=col("mass") / col("length")).arrange(desc("ratio")).select("binomial", "ratio")

or nesting function calls::

    select(arrange(mutate(df, ratio=col("mass") / col("length")), desc("ratio")), "binomial", "ratio")

Both produce the same data. The functions also combine
with :meth:`Dataframe.pipe`::

    df.pipe(mutate, ratio=col("mass") / col("length")).pipe(select, "binomial", "ratio")

This module shadows the ``filter`` builtin, import
the functions explicitly or refer to them as ``verbs.filter``.
"""

from typing import Any

from ..compute.aggregate import Aggregation
from ..compute.base import Expression
from ..compute.selectors import ColumnSelector
from .dataframe import Dataframe, GroupedDataframe, SortKey

__all__ = (
    "arrange",
    "count",
    "filter",
    "group_by",
    "head",
    "mutate",
    "rename",
    "select",
    "summarise",
    "summarize",
)


def select(df: Dataframe, *columns: str | ColumnSelector) -> Dataframe:
    """See :meth:`Dataframe.select`."""
    return df.select(*columns)


def rename(df: Dataframe, **mapping: str) -> Dataframe:
    """See :meth:`Dataframe.rename`."""
    return df.rename(**mapping)


def filter(df: Dataframe, *predicates: Expression) -> Dataframe:
    """See :meth:`Dataframe.filter`."""
    return df.filter(*predicates)


def arrange(df: Dataframe, *keys: str | SortKey) -> Dataframe:
    """See :meth:`Dataframe.arrange`."""
    return df.arrange(*keys)


def mutate(df: Dataframe, **expressions: Expression | Any) -> Dataframe:
    """See :meth:`Dataframe.mutate`."""
    return df.mutate(**expressions)


def group_by(df: Dataframe, *keys: str) -> GroupedDataframe:
    """See :meth:`Dataframe.group_by`."""
    return df.group_by(*keys)


def summarise(df: Dataframe | GroupedDataframe, **aggregations: Aggregation) -> Dataframe:
    """Summarise a dataframe, or each group of a grouped dataframe."""
    return df.summarise(**aggregations)


summarize = summarise


def count(df: Dataframe | GroupedDataframe, *keys: str, name: str = "n") -> Dataframe:
    """Count rows, by ``keys`` or by the groups of a grouped dataframe."""
    if isinstance(df, GroupedDataframe):
        if keys:
            raise ValueError("Grouped dataframes are counted by their own keys")
        return df.count(name=name)
    return df.count(*keys, name=name)


def head(df: Dataframe, n: int = 6) -> Dataframe:
    """See :meth:`Dataframe.head`."""
    return df.head(n)
