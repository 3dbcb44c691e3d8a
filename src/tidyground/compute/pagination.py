"""Query plan node that keeps a window of rows.

This is what ``head()`` and ``slice()`` of the dataframe are built on.
"""

from .base import QueryPlanNode


class PaginateNode(QueryPlanNode):
    """Emit ``length`` rows starting from the row at ``offset``.

    Rows are numbered from 0 across all the batches of the child,
    so a window can start in one batch and end in a later one.
    With ``offset=5`` and ``length=3`` over batches of 4 rows::

        batch 0: rows 0-3  dropped
        batch 1: rows 4-7  rows 5, 6 and 7 are emitted
        batch 2: never read
    """

    def __init__(self, offset: int, length: int, child: QueryPlanNode) -> None:
        """
        :param offset: Position of the first row to emit.
        :param length: Maximum number of rows to emit.
        :param child: The node providing the rows.
        """
        self.offset = offset
        self.length = length
        self.end = offset + length
        self.child = child

    def __str__(self) -> str:
        return f"PaginateNode({self.offset}:{self.end}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Emit the part of each child batch that falls in the window.

        The child is closed as soon as the window is complete,
        batches past the end are not loaded.
        When the window is empty, or past the end of the data,
        a single empty batch is emitted so that the schema is known.
        """
        batch_start = 0  # position of the first row of the current batch
        empty = None
        emitted = False

        child_batches = self.child.batches()
        for batch in child_batches:
            batch_end = batch_start + batch.num_rows
            if empty is None:
                empty = batch.slice(0, 0)

            # Intersect [batch_start, batch_end) with [offset, end)
            first = max(self.offset, batch_start)
            last = min(self.end, batch_end)
            if first < last:
                emitted = True
                yield batch.slice(first - batch_start, last - first)

            batch_start = batch_end
            if batch_start >= self.end:
                child_batches.close()
                break

        if not emitted and empty is not None:
            yield empty
