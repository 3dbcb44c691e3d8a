"""The Dataframe object itself."""

import logging
from typing import Any, Callable, Self

import pyarrow as pa

from ..compute import (
    AggregateNode,
    CountRowsAggregation,
    CSVDataSource,
    FilterNode,
    PaginateNode,
    ProjectNode,
    PyArrowTableDataSource,
    RenameNode,
    SortNode,
)
from ..compute.aggregate import Aggregation
from ..compute.base import Expression, Literal, QueryPlanNode
from ..compute.selectors import ColumnSelector
from ..config import get_settings
from ..utils.tabulate import tabulate

log = logging.getLogger(__name__)


class SortKey:
    """A column to sort by and the direction of the sort."""

    def __init__(self, column: str, descending: bool = False) -> None:
        self.column = column
        self.descending = descending

    def __repr__(self) -> str:
        if self.descending:
            return f"desc({self.column!r})"
        return repr(self.column)


def desc(column: str) -> SortKey:
    """Sort by ``column`` in descending order."""
    return SortKey(column, descending=True)


class Dataframe:
    """Data structure that handles data in rows and columns.

    The Dataframe object allows to represent in-memory data
    and perform transformations over it.

    The tidyground dataframe object is lazy, which means that
    any transformation or analysis will be applied only when the
    ``.collect()`` method will be invoked and no data is kept
    in memory until that moment (unless it already was).

    Transformations never modify the dataframe they are
    invoked on, they always return a new dataframe. So they
    can be chained one after the other:

    >>> from tidyground.dataframe import Dataframe, col, desc
    >>> df = Dataframe.from_pydict({
    ...     "binomial": ["Canis lupus", "Mus musculus", "Panthera leo"],
    ...     "mass": [31756.51, 19.3, 158623.05],
    ...     "length": [1056.55, 84.4, 1723.16],
    ... })
    >>> print(df.mutate(ratio=col("mass") / col("length"))
    ...         .arrange(desc("ratio"))
    ...         .select("binomial", "ratio"))
    binomial     | ratio
    ------------ | -----
    Panthera leo | 92.05
    Canis lupus  | 30.06
    Mus musculus | 0.23
    """

    def __init__(self, node_or_table: QueryPlanNode | pa.Table | pa.RecordBatch) -> None:
        """
        :param node_or_table: A compute engine node expected to emit
                              the data for the dataframe or a `pyarrow.Table`.
        """
        if isinstance(node_or_table, (pa.Table, pa.RecordBatch)):
            node_or_table = PyArrowTableDataSource(node_or_table)

        if not isinstance(node_or_table, QueryPlanNode):
            raise ValueError("Invalid input, expected a QueryPlanNode or a PyArrow Table")

        self.node = node_or_table

    @classmethod
    def from_pydict(cls, data: dict[str, list[Any]]) -> Self:
        """Create a Dataframe from a dictionary of columns.

        :param data: The dict {column_name: values}.
        """
        return cls(pa.table(data))

    @classmethod
    def open_csv(
        cls,
        filename: str,
        delimiter: str = ",",
        null_values: list[str] | None = None,
    ) -> Self:
        """Open a CSV file and create a Dataframe out of its data.

        :param filename: The path to a local CSV file.
        :param delimiter: The character separating the fields, ``"\\t"`` for TSV files.
        :param null_values: Values that mean the data is missing.
        """
        return cls(
            CSVDataSource(
                filename,
                block_size=get_settings().block_size,
                delimiter=delimiter,
                null_values=null_values,
            )
        )

    def _derive(self, node: QueryPlanNode) -> Self:
        return self.__class__(node)

    def select(self, *columns: str | ColumnSelector) -> Self:
        """Keep only the requested columns.

        Columns can be provided by name or through
        selectors, see :mod:`tidyground.compute.selectors`.
        Rows are left untouched.

        :param columns: The columns to keep, in the order they should appear.
        """
        return self._derive(ProjectNode(list(columns), None, self.node))

    def rename(self, **mapping: str) -> Self:
        """Rename columns, in the form ``new_name="old_name"``."""
        return self._derive(
            RenameNode({old: new for new, old in mapping.items()}, self.node)
        )

    def filter(self, *predicates: Expression) -> Self:
        """Apply a filter to the data and return a new Dataframe.

        The returned dataframe will only contain the data that
        matches all the filter predicates.

        :param predicates: The expressions representing the predicates,
                           for example ``col("A") > col("B")``.
        """
        if not predicates:
            raise ValueError("At least one predicate is required")
        node = self.node
        for predicate in predicates:
            node = FilterNode(predicate, node)
        return self._derive(node)

    def arrange(self, *keys: str | SortKey) -> Self:
        """Sort the rows by one or more columns.

        Wrap a column in :func:`desc` to sort it in descending order.
        Rows with equal keys keep their relative order.
        """
        sort_keys = [k if isinstance(k, SortKey) else SortKey(k) for k in keys]
        return self._derive(
            SortNode(
                [k.column for k in sort_keys],
                [k.descending for k in sort_keys],
                self.node,
            )
        )

    def mutate(self, **expressions: Expression | Any) -> Self:
        """Add new columns computed from the existing ones.

        Expressions are evaluated in the order they are provided,
        so each one can refer to the columns created before it.
        Values that are not expressions are used as constants.
        """
        project = {
            name: expr if isinstance(expr, Expression) else Literal(expr)
            for name, expr in expressions.items()
        }
        return self._derive(ProjectNode(None, project, self.node))

    def group_by(self, *keys: str) -> "GroupedDataframe":
        """Group the rows by the values of ``keys`` for a subsequent :meth:`GroupedDataframe.summarise`."""
        if not keys:
            raise ValueError("At least one grouping key is required")
        return GroupedDataframe(self, list(keys))

    def summarise(self, **aggregations: Aggregation) -> Self:
        """Reduce the whole data to a single row of aggregations."""
        return self._derive(AggregateNode([], aggregations, self.node))

    summarize = summarise

    def count(self, *keys: str, name: str = "n") -> Self:
        """Count the rows for each distinct value of ``keys``."""
        return self._derive(
            AggregateNode(list(keys), {name: CountRowsAggregation()}, self.node)
        )

    def head(self, n: int = 6) -> Self:
        """Keep only the first ``n`` rows."""
        return self.slice(0, n)

    def slice(self, offset: int, length: int) -> Self:
        """Keep ``length`` rows starting from the row at ``offset``."""
        return self._derive(PaginateNode(offset, length, self.node))

    def pipe(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Invoke ``func(self, *args, **kwargs)``.

        Allows to continue a chain of transformations with
        functions that are not methods of the dataframe.
        """
        return func(self, *args, **kwargs)

    def explain(self) -> str:
        """Describe the query plan that computes the data."""
        return str(self.node)

    def collect(self) -> Self:
        """Collect all data of the dataframe in memory.

        Returns a new Dataframe that has all data from the
        previous dataframe eagerly loaded in memory.
        """
        return self.__class__(self.to_arrow())

    def to_arrow(self) -> pa.Table:
        """Collect all the data and return a pyarrow.Table"""
        log.debug("Executing %s", self.node)
        return pa.Table.from_batches(list(self.node.batches()))

    def to_pydict(self) -> dict[str, list[Any]]:
        return self.to_arrow().to_pydict()

    def to_pylist(self) -> list[dict[str, Any]]:
        return self.to_arrow().to_pylist()

    @property
    def column_names(self) -> list[str]:
        return self.to_arrow().column_names

    @property
    def num_rows(self) -> int:
        return self.to_arrow().num_rows

    def __str__(self) -> str:
        return tabulate(self.to_arrow(), max_rows=get_settings().display_rows)


class GroupedDataframe:
    """A Dataframe whose rows are grouped by the value of some columns.

    Grouping on its own does nothing, it's the
    :meth:`summarise` that computes one row per group.
    """

    def __init__(self, dataframe: Dataframe, keys: list[str]) -> None:
        self.dataframe = dataframe
        self.keys = keys

    def __repr__(self) -> str:
        return f"GroupedDataframe(keys={self.keys}, {self.dataframe.node})"

    def summarise(self, **aggregations: Aggregation) -> Dataframe:
        """Compute the aggregations for each group.

        The result has the grouping columns followed by
        one column for each aggregation, and one row for each group.
        """
        return self.dataframe._derive(
            AggregateNode(self.keys, aggregations, self.dataframe.node)
        )

    summarize = summarise

    def count(self, name: str = "n") -> Dataframe:
        """Count the rows of each group."""
        return self.dataframe.count(*self.keys, name=name)

    def ungroup(self) -> Dataframe:
        """Go back to the ungrouped dataframe."""
        return self.dataframe
