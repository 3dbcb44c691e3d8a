"""Query plan nodes that compute aggregations.

Frequently when analysing data is necessary
to compute statistics like the min, max, average, etc...
of the data stored in datasets.

The aggregate node is in charge of computing
those aggregations and projecting them as new
columns in a query pipeline.

Typically the aggregate node will group the data
by a set of columns and then compute the aggregations

For example, given the following data::

    order, binomial, litter_size
    Carnivora, Panthera leo, 2.76
    Carnivora, Canis lupus, 5.6
    Rodentia, Mus musculus, 6.2
    Rodentia, Sciurus vulgaris, null

We could group by order and compute the mean litter size
to get::

    order, mean_litter_size
    Carnivora, 4.18
    Rodentia, null

The Rodentia group has a missing value, so its mean is missing
as well. Aggregations can be told to ignore missing values,
in that case the mean for Rodentia would be ``6.2``.
"""

import abc
import logging
from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, UnknownColumnError

__all__ = (
    "AggregateNode",
    "CountAggregation",
    "CountRowsAggregation",
    "MaxAggregation",
    "MeanAggregation",
    "MedianAggregation",
    "MinAggregation",
    "SumAggregation",
)

log = logging.getLogger(__name__)


class AggregateNode(QueryPlanNode):
    """Group data and compute aggregations.

    The result contains one row for each distinct value
    of the grouping keys, sorted by the keys.
    Missing key values form a group of their own.
    When no key is provided the whole data is a single group.

    >>> import pyarrow as pa
    >>> from tidyground.compute import SumAggregation, PyArrowTableDataSource
    >>> data = pa.record_batch({
    ...    'order': pa.array(['Rodentia', 'Rodentia', 'Carnivora', 'Carnivora', 'Rodentia']),
    ...    'litter_size': pa.array([6, 3, 2, 5, 4]),
    ... })
    >>> aggregate = AggregateNode(["order"], {"offspring": SumAggregation("litter_size")}, PyArrowTableDataSource(data))
    >>> next(aggregate.batches())
    pyarrow.RecordBatch
    order: string
    offspring: int64
    ----
    order: ["Carnivora","Rodentia"]
    offspring: [7,13]
    """

    def __init__(
        self,
        keys: list[str],
        aggregations: dict[str, "Aggregation"],
        child: QueryPlanNode,
    ) -> None:
        """
        :param keys: The columns to group by, can be empty.
        :param aggregations: The aggregations to compute in the form of {"new_col_name": Aggregation}.
        :param child: The child node that will provide the data to aggregate.
        """
        self.keys = keys
        self.aggregations = aggregations
        self.child = child

    def __str__(self) -> str:
        return f"AggregateNode(keys={self.keys}, aggregations={self.aggregations}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Compute the aggregations over the data of the child node.

        Depending on the number of keys a different
        grouping strategy is used, all of them compute partial
        results for each batch and then reduce them.
        """
        if not self.keys:
            result = self.global_aggregation()
        elif len(self.keys) == 1:
            result = self.single_key_aggregation()
        else:
            result = self.multi_key_aggregation()

        if self.keys and result.num_rows:
            result = result.sort_by([(k, "ascending") for k in self.keys])
        log.debug("Aggregated %d groups by %s", result.num_rows, self.keys)
        yield result

    def _check_keys(self, batch: pa.RecordBatch) -> None:
        for key in self.keys:
            if key not in batch.schema.names:
                raise UnknownColumnError(key, batch.schema.names)

    def _compute_chunk(
        self, chunks_data: dict[Any, dict[str, list[Any]]], key: Any, batch: pa.RecordBatch
    ) -> None:
        group_chunks = chunks_data.setdefault(key, {})
        for name, aggregation in self.aggregations.items():
            group_chunks.setdefault(name, []).append(aggregation.compute_chunk(batch))

    def global_aggregation(self) -> pa.RecordBatch:
        """Compute the aggregations on the whole data.

        There is a single group, so each batch is a chunk of that group.
        The group exists even when there is no data, so that
        counting rows on empty data gives zero.
        """
        chunks_data: dict[tuple, dict[str, list[Any]]] = {
            (): {name: [] for name in self.aggregations}
        }
        schema = None
        for batch in self.child.batches():
            schema = batch.schema
            self._compute_chunk(chunks_data, (), batch)
        return self.reduce_aggregations(chunks_data, schema)

    def single_key_aggregation(self) -> pa.RecordBatch:
        """Compute the aggregation for a single key.

        This is an optimized path where we can rely on dictionary encoding
        to find the unique values of the key column and then filter the rows.
        """
        # Compute separate aggregation results for each batch.
        # This makes so that we need to keep in memory only one batch
        # at the time, and the aggregation results, which are far smaller
        #   chunks_data = {key_value: {aggr_name: [aggr_value1, aggr_value2, ...]}}
        chunks_data: dict[pa.Scalar, dict[str, list[Any]]] = {}
        schema = None
        for batch in self.child.batches():
            schema = batch.schema
            self._check_keys(batch)
            # Dictionary Encode the key variable,
            # so we can get the unique values
            # and we can know at which rows each value is.
            # Nulls are encoded as a value of their own so that
            # rows with a missing key end up in their own group.
            key_column = batch.column(self.keys[0])
            key_column = pc.dictionary_encode(key_column, null_encoding="encode")
            key_values = key_column.dictionary
            key_indices = key_column.indices

            # For each unique value, we lookup the rows that have that value
            # Then for the resulting batch of rows filtered by the unique key value
            # we compute the aggregation and add it to the aggregation results for
            # that key value in the current batch.
            for idx, keyval in enumerate(key_values):
                mask = pc.equal(key_indices, idx)
                self._compute_chunk(chunks_data, keyval, batch.filter(mask))

        # The chunks_data will contain the partial aggregation results for each key value
        # For example it could look like {"Rodentia": {"offspring": [10, 20, 30]}}
        # Now we need to reduce the partial aggregation results to get the final aggregation results
        # Which would lead to {"Rodentia": {"offspring": 60}}
        return self.reduce_aggregations(chunks_data, schema)

    def multi_key_aggregation(self) -> pa.RecordBatch:
        """Compute the aggregation for multiple keys.

        In this case we will have to manually implement the grouping
        as we can't rely on dictionary encoding to find the unique values
        """
        # Dictionary encoding is not supported for StructArray or ListArray
        # so we can't combine the keys in a single array and encode it.
        #
        # Instead we manually implement the aggregation in python,
        # it's much slower, but it shows how aggregation can be implemented.
        sorting_key = [(k, "ascending") for k in self.keys]
        chunks_data: dict[tuple[pa.Scalar, ...], dict[str, list[Any]]] = {}
        schema = None
        for batch in self.child.batches():
            schema = batch.schema
            self._check_keys(batch)
            # First sort the data by the aggregation keys,
            # this makes sure that we can compute the aggregation in a single pass.
            # All the values for the same grouping key will be sequential
            # For example:
            #    Carnivora, Canidae, 5.6
            #    Carnivora, Felidae, 2.76
            #    Carnivora, Felidae, 2.5
            # so until the key changes we can compute the aggregation.
            sorted_batch = batch.sort_by(sorting_key)
            current_key = None
            chunk_start = 0
            for row_index in range(sorted_batch.num_rows):
                row_key = tuple(sorted_batch.column(k)[row_index] for k in self.keys)
                if current_key is None:
                    current_key = row_key
                if row_key != current_key:
                    # the key has changed, this means we finished a chunk of
                    # rows with the same key, we can compute the aggregation for this chunk.
                    chunk = sorted_batch.slice(chunk_start, row_index - chunk_start)
                    self._compute_chunk(chunks_data, current_key, chunk)
                    current_key = row_key
                    chunk_start = row_index

            # Compute the aggregation for the last chunk
            if current_key is not None:
                chunk = sorted_batch.slice(chunk_start, sorted_batch.num_rows - chunk_start)
                self._compute_chunk(chunks_data, current_key, chunk)

        return self.reduce_aggregations(chunks_data, schema)

    def reduce_aggregations(
        self,
        chunks_data: dict[Any, dict[str, list[Any]]],
        schema: pa.Schema | None = None,
    ) -> pa.RecordBatch:
        """Reduce the partial aggregation results to the final aggregation results.

        All the grouping strategies end up computing the aggregations
        for each chunk separately, this method will reduce the partial aggregation
        results to the final aggregation results.

        For example if we had 3 chunks and the chunks_data is::

            {"Rodentia": {"offspring": [10, 20, 30]}}

        The result will be::

            {"Rodentia": {"offspring": 60}}

        The columns get their type from ``schema``, the schema of the
        aggregated data, so that the result is typed even when there are
        no groups at all.
        """
        # Prepare one column for each key and aggregation
        result_batch_data: dict[str, list[Any]] = {
            **{k: [] for k in self.keys},
            **{k: [] for k in self.aggregations.keys()},
        }
        # For each key value, invoke the reduce method of the aggregation.
        # In case of a single key
        #   keyvalue is "Rodentia"
        # In case of multiple keys (or none)
        #   keyvalue is ("Rodentia", "Muridae") (or ())
        for keyvalue, aggregated_values in chunks_data.items():
            if isinstance(keyvalue, tuple):
                for i, key in enumerate(self.keys):
                    result_batch_data[key].append(keyvalue[i])
            else:
                result_batch_data[self.keys[0]].append(keyvalue)
            for aggrname, aggregation in self.aggregations.items():
                result_batch_data[aggrname].append(
                    aggregation.reduce(aggregated_values[aggrname])
                )

        # The result_batch_data is now formed like
        #   {"order": ["Carnivora", "Rodentia"], "offspring": [60, 30]}
        # which only lacks the types of the columns.
        types: dict[str, pa.DataType | None] = {name: None for name in result_batch_data}
        if schema is not None:
            for key in self.keys:
                types[key] = schema.field(key).type
            for aggrname, aggregation in self.aggregations.items():
                types[aggrname] = aggregation.result_type(schema)
        return pa.record_batch(
            {
                name: pa.array([_as_py(v) for v in values], type=types[name])
                for name, values in result_batch_data.items()
            }
        )


def _as_py(value: Any) -> Any:
    if isinstance(value, pa.Scalar):
        return value.as_py()
    return value


class Aggregation(abc.ABC):
    """Base class for aggregations.

    Every aggregation is expected to implement
    a method to compute any needed intermediate results
    on a single chunk of data and then provide a reduce method
    to combine the intermediate results into a final result.

    The ``skip_nulls`` flag is the missing values policy:
    when ``False`` any missing value makes the result missing,
    when ``True`` missing values are ignored.
    """

    def __init__(self, column: str, skip_nulls: bool = False) -> None:
        self.column = column
        self.skip_nulls = skip_nulls

    def __str__(self) -> str:
        if self.skip_nulls:
            return f"{self.__class__.__name__}({self.column}, skip_nulls=True)"
        return f"{self.__class__.__name__}({self.column})"

    __repr__ = __str__

    def column_data(self, batch: pa.RecordBatch) -> pa.Array:
        if self.column not in batch.schema.names:
            raise UnknownColumnError(self.column, batch.schema.names)
        return batch.column(self.column)

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        """The type of the aggregated values for data with the given schema."""
        if self.column not in schema.names:
            raise UnknownColumnError(self.column, schema.names)
        return schema.field(self.column).type

    @abc.abstractmethod
    def compute_chunk(self, batch: pa.RecordBatch) -> Any: ...

    @abc.abstractmethod
    def reduce(self, chunks: list[Any]) -> pa.Scalar: ...


class SimpleAggregation(Aggregation):
    """Provide a base implementation for simple aggregations like min,max,sum.

    Simple aggregations are those where the function applied to compute
    intermediate results for a single chunk of data is the same as the function
    applied to combine the intermediate results into the final.

    For example ``sum([1, 2, 3])`` is the same as ``sum([sum([1, 2]), 3])``.
    That holds for missing values too, as a chunk with a missing value
    will have a missing intermediate result when they are not skipped.
    """

    @abc.abstractmethod
    def _aggregate(self, data: Any) -> Any: ...

    def compute_chunk(self, batch: pa.RecordBatch) -> Any:
        return self._aggregate(self.column_data(batch))

    def reduce(self, chunks: list[Any]) -> pa.Scalar:
        if not chunks:
            return None
        return self._aggregate(pa.array(chunks))


class SumAggregation(SimpleAggregation):
    """Compute the sum of an aggregated column."""

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        column_type = super().result_type(schema)
        if pa.types.is_unsigned_integer(column_type):
            return pa.uint64()
        if pa.types.is_integer(column_type):
            return pa.int64()
        if pa.types.is_floating(column_type):
            return pa.float64()
        return column_type

    def _aggregate(self, data: Any) -> Any:
        return pc.sum(data, skip_nulls=self.skip_nulls)


class MinAggregation(SimpleAggregation):
    """Compute the min of an aggregated column."""

    def _aggregate(self, data: Any) -> Any:
        return pc.min(data, skip_nulls=self.skip_nulls)


class MaxAggregation(SimpleAggregation):
    """Compute the max of an aggregated column."""

    def _aggregate(self, data: Any) -> Any:
        return pc.max(data, skip_nulls=self.skip_nulls)


class CountAggregation(Aggregation):
    """Compute the number of values in an aggregated column.

    Missing values are never counted, to count all the rows
    of a group use :class:`CountRowsAggregation`.

    This is based on computing the counts for each intermediate batch
    and then sum them to compute the final result.
    """

    def __init__(self, column: str) -> None:
        super().__init__(column, skip_nulls=True)

    def __str__(self) -> str:
        return f"CountAggregation({self.column})"

    __repr__ = __str__

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        super().result_type(schema)
        return pa.int64()

    def compute_chunk(self, batch: pa.RecordBatch) -> Any:
        """Compute the count of the column in a single batch."""
        return pc.count(self.column_data(batch), mode="only_valid")

    def reduce(self, chunks: list[Any]) -> pa.Scalar:
        """Sum the counts of all intermediate results to the final count."""
        return pa.scalar(sum(chunk.as_py() for chunk in chunks), pa.int64())


class CountRowsAggregation(Aggregation):
    """Compute the number of rows in each group."""

    def __init__(self) -> None:
        super().__init__(column=None)

    def __str__(self) -> str:
        return "CountRowsAggregation()"

    __repr__ = __str__

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        return pa.int64()

    def compute_chunk(self, batch: pa.RecordBatch) -> int:
        return batch.num_rows

    def reduce(self, chunks: list[int]) -> pa.Scalar:
        return pa.scalar(sum(chunks), pa.int64())


class MeanAggregation(Aggregation):
    """Compute the mean of an aggregated column.

    This is based by computing count and sum of the column
    for each intermediate batch and then dividing
    the sum of all intermediate results by the count
    of all intermediate results.

    The mean is always a floating point number,
    and it's missing when there are no values to average.
    """

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        super().result_type(schema)
        return pa.float64()

    def compute_chunk(self, batch: pa.RecordBatch) -> Any:
        """Compute the count, sum and missing values of the column in a single batch."""
        col = self.column_data(batch)
        return (pc.count(col), pc.sum(col), col.null_count)

    def reduce(self, chunks: list[Any]) -> pa.Scalar:
        """Compute the mean of the column from the intermediate sums and counts."""
        nulls = sum(chunk[2] for chunk in chunks)
        count = sum(chunk[0].as_py() for chunk in chunks)
        if (nulls and not self.skip_nulls) or count == 0:
            return pa.scalar(None, pa.float64())
        total = pc.sum(pa.array([chunk[1] for chunk in chunks]))
        return pc.divide(pc.cast(total, pa.float64()), count)


class MedianAggregation(Aggregation):
    """Compute the median of an aggregated column.

    The median can't be computed from partial medians,
    so each chunk contributes all its values and the
    median is computed once they are all together.

    When the number of values is even the median is
    the mean of the two middle values.
    """

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        super().result_type(schema)
        return pa.float64()

    def compute_chunk(self, batch: pa.RecordBatch) -> pa.Array:
        return self.column_data(batch)

    def reduce(self, chunks: list[pa.Array]) -> pa.Scalar:
        if not chunks:
            return pa.scalar(None, pa.float64())
        data = pa.concat_arrays(chunks)
        if data.null_count == len(data) or (data.null_count and not self.skip_nulls):
            return pa.scalar(None, pa.float64())
        median = pc.quantile(data, q=0.5, interpolation="linear", skip_nulls=True)
        return median[0]
