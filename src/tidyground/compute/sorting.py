"""Query plan nodes that perform sorting of data.

When computing ranks or looking for most significant
values, like the heaviest mammals, it's often necessary
to sort the data based on one or more columns.

This module implements the sorting capabilities.
"""

import logging

import pyarrow as pa

from .base import QueryPlanNode, UnknownColumnError

log = logging.getLogger(__name__)


class SortNode(QueryPlanNode):
    """Sort data in-memory based on one or more columns.

    The node expects a list of columns and a list of
    sort directions. The data will be sorted based on
    the columns in the order they are provided, the
    second column is only used to break ties of the first
    and so on.

    The sort is stable: rows that compare equal on all
    the keys keep the order they had. Missing values
    always go last, whatever the direction.

    >>> import pyarrow as pa
    >>> from tidyground.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"values": [1, 2, None, 4, 5]})
    >>> # Sort the data in descending order
    >>> sort = SortNode(["values"], [True], PyArrowTableDataSource(data))
    >>> next(sort.batches())
    pyarrow.RecordBatch
    values: int64
    ----
    values: [5,4,2,1,null]
    """

    def __init__(
        self, keys: list[str], descending: list[bool], child: QueryPlanNode
    ) -> None:
        """
        :param keys: The columns to sort by in the order they should be sorted.
        :param descending: If each columns should be sorted in a descending order.
        :param child: The node emitting the data to be sorted.
        """
        if len(keys) != len(descending):
            raise ValueError("Keys and descending must have the same length")
        if not keys:
            raise ValueError("At least one sorting key is required")

        self.keys = keys
        self.sorting = list(
            zip(keys, ("descending" if desc else "ascending" for desc in descending))
        )
        self.child = child

    def __str__(self) -> str:
        return f"SortNode(sorting={self.sorting}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """The sorting to the child node.

        Batches provided by child node are accumulated
        until they are all loaded in memory, then they
        are merged and sorted as an unique table.
        """
        batches = list(self.child.batches())
        if not batches:
            return

        names = batches[0].schema.names
        for key in self.keys:
            if key not in names:
                raise UnknownColumnError(key, names)

        log.debug("Sorting %d batches by %s", len(batches), self.sorting)
        if len(batches) == 1:
            yield batches[0].sort_by(self.sorting)
            return

        # The process converts the batches to tables
        # as converting to and from tables is a zero-copy
        # operation and tables can be concatenated at no cost
        # when promote_options is set to none as they are based on ChunkedArrays.
        table = pa.concat_tables(
            [pa.table(batch) for batch in batches], promote_options="none"
        )
        table = table.sort_by(self.sorting)
        # to_batches is a zero-copy operation when maximum chunk size is None
        yield from table.to_batches()
