"""The Tidyground Compute Engine

The compute engine defines the in-memory
format for query plans and the plan nodes
supported.

The compute engine is tightly bound to Apache Arrow,
thus the engine will expect to always deal with
:class:`pyarrow.RecordBatch` and emit a new RecordBatch
as the result of the node execution.

This allows to easily build compute pipelines like::

    (RecordBatch)-->Node1--(RecordBatch)-->Node2--(RecordBatch)-->...

The query plan nodes themselves are in charge of their execution,
this keeps the behavior near to the node and thus makes easy to
know how a Node is actually executed without having to look around too much.

Building a query plan requires to combine the nodes that we want
to be executed starting with one or more ``DataSource`` nodes as the
leaf nodes of a query:

>>> import pyarrow as pa
>>> data = pa.table({
...    "binomial": pa.array(["Mus musculus", "Canis lupus", "Panthera leo"]),
...    "litter_size": pa.array([6.2, 5.6, 2.76])
... })
>>>
>>> from tidyground.compute import col, PyArrowTableDataSource, FilterNode
>>> # keep the species with big litters
>>> query = FilterNode(
...     col("litter_size") >= 5,
...     child=PyArrowTableDataSource(data)
... )
>>> for data in query.batches():
...     print(data)
pyarrow.RecordBatch
binomial: string
litter_size: double
----
binomial: ["Mus musculus","Canis lupus"]
litter_size: [6.2,5.6]
"""

from .aggregate import (
    AggregateNode,
    CountAggregation,
    CountRowsAggregation,
    MaxAggregation,
    MeanAggregation,
    MedianAggregation,
    MinAggregation,
    SumAggregation,
)
from .base import ColumnRef, Expression, Literal, UnknownColumnError, col, lit
from .datasources import CSVDataSource, PyArrowTableDataSource
from .expressions import FunctionCallExpression
from .filtering import FilterNode
from .pagination import PaginateNode
from .selection import ProjectNode, RenameNode
from .sorting import SortNode

__all__ = (
    "CSVDataSource",
    "PyArrowTableDataSource",
    "FilterNode",
    "Expression",
    "FunctionCallExpression",
    "col",
    "lit",
    "ColumnRef",
    "Literal",
    "UnknownColumnError",
    "PaginateNode",
    "SortNode",
    "ProjectNode",
    "RenameNode",
    "AggregateNode",
    "CountAggregation",
    "CountRowsAggregation",
    "MaxAggregation",
    "MeanAggregation",
    "MedianAggregation",
    "MinAggregation",
    "SumAggregation",
)
