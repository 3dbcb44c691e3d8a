"""Query plan nodes that implement projection of columns.

A common request in queries is to select specific columns
and project new columns based on expressions.
An example is the ``SELECT`` clause in SQL queries,
or the ``select`` and ``mutate`` verbs of dataframes.

This module implements the basic projection capabilities
and the renaming of columns.
"""

import logging

import pyarrow as pa

from .base import QueryPlanNode, UnknownColumnError
from .expressions import Expression
from .selectors import ColumnSelector, resolve_columns

log = logging.getLogger(__name__)


class ProjectNode(QueryPlanNode):
    """Project data by selecting specific columns and computing expressions.

    The projection expects a list of columns to select and a dictionary
    of column names and expressions to project new columns.

    Columns to select can be provided by name or through
    a :class:`tidyground.compute.selectors.ColumnSelector`.

    >>> import pyarrow as pa
    >>> from tidyground.compute import col, PyArrowTableDataSource
    >>> data = pa.record_batch({"mass": [10.0, 20.0, 30.0], "length": [2.0, 4.0, 5.0]})
    >>> next(ProjectNode(["mass"], {"ratio": col("mass") / col("length")},
    ...                  PyArrowTableDataSource(data)).batches())
    pyarrow.RecordBatch
    mass: double
    ratio: double
    ----
    mass: [10,20,30]
    ratio: [5,5,6]
    """

    def __init__(
        self,
        select: list[str | ColumnSelector] | None,
        project: dict[str, Expression] | None,
        child: QueryPlanNode,
    ) -> None:
        """
        :param select: The list of columns to select.
                       ``None`` means select all columns.
                       ``[]`` means select only the projected columns.
        :param project: The dict {name: Expression} to project new columns.
                        Expressions are evaluated in order, so they can refer
                        to the columns projected before them.
        :param child: The node emitting the data to be projected.
        """
        self.select = select
        self.project = project or {}
        self.child = child

    def __str__(self) -> str:
        return f"ProjectNode(select={self.select}, project={self.project}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Apply the projection to the child node.

        For each recordbatch yielded by the child node,
        sequentially apply the expressions to project new columns
        and then select the requested columns.

        Projecting a column with the name of an existing one
        replaces it in place.
        """
        for batch in self.child.batches():
            for name, expr in self.project.items():
                batch = self._set_column(batch, name, expr.apply(batch))

            if self.select is not None:
                # When the selection is done by name, the projected
                # columns are always preserved too.
                names = resolve_columns(batch.schema.names, self.select)
                names += [name for name in self.project if name not in names]
                batch = batch.select(names)

            yield batch

    @staticmethod
    def _set_column(
        batch: pa.RecordBatch, name: str, data: pa.Array | pa.Scalar
    ) -> pa.RecordBatch:
        if isinstance(data, pa.Scalar):
            # Constant expressions have to be broadcast to the whole batch.
            data = pa.repeat(data, batch.num_rows)
        elif isinstance(data, pa.ChunkedArray):
            data = data.combine_chunks()

        names = batch.schema.names
        if name in names:
            return batch.set_column(names.index(name), name, data)
        return batch.append_column(name, data)


class RenameNode(QueryPlanNode):
    """Rename columns keeping their position and data.

    >>> import pyarrow as pa
    >>> from tidyground.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"MSW05_Order": ["Carnivora"], "n": [1]})
    >>> next(RenameNode({"MSW05_Order": "order"}, PyArrowTableDataSource(data)).batches())
    pyarrow.RecordBatch
    order: string
    n: int64
    ----
    order: ["Carnivora"]
    n: [1]
    """

    def __init__(self, mapping: dict[str, str], child: QueryPlanNode) -> None:
        """
        :param mapping: The dict {old_name: new_name} of the columns to rename.
        :param child: The node emitting the data with the columns to rename.
        """
        self.mapping = mapping
        self.child = child

    def __str__(self) -> str:
        return f"RenameNode(mapping={self.mapping}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Emit the batches of the child node with the new column names."""
        for batch in self.child.batches():
            names = batch.schema.names
            for old_name in self.mapping:
                if old_name not in names:
                    raise UnknownColumnError(old_name, names)

            new_names = [self.mapping.get(name, name) for name in names]
            log.debug("Renaming columns %s to %s", names, new_names)
            yield pa.RecordBatch.from_arrays(batch.columns, names=new_names)
