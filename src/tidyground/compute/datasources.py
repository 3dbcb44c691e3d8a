"""Query Plan nodes that load data

The datasource nodes are expected to fetch the data from some source,
convert it into the format accepted by the compute engine and forward it
to the next node in the plan.

They are used to do things like loading
data from CSV or TSV files or equivalent operations
"""

from abc import abstractmethod

import pyarrow as pa
import pyarrow.csv

from .base import QueryPlanNode


class DataSourceNode(QueryPlanNode):
    """Base class for nodes that load data from a source."""

    @abstractmethod
    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the data source without loading its content."""
        ...


class CSVDataSource(DataSourceNode):
    """Load data from a CSV file.

    Given a local CSV file path, load the content,
    convert it into Arrow format, and emit it
    for the next nodes of the query plan to consume.

    Tab separated files are loaded providing ``delimiter="\\t"``.
    Datasets that mark missing values with a special value,
    like ``-999``, can provide it in ``null_values`` so that
    those values are loaded as nulls.
    """

    def __init__(
        self,
        filename: str,
        block_size: int | None = None,
        delimiter: str = ",",
        null_values: list[str] | None = None,
    ) -> None:
        """
        :param filename: The path of the local CSV file.
        :param block_size: How big to make batches of data,
                           Influences how many batches will be produced
        :param delimiter: The character separating the fields.
        :param null_values: The textual values that mean a value is missing,
                            ``None`` uses the pyarrow defaults (``""``, ``"NA"``, ``"null"``...).
        """
        self.filename = filename
        self.block_size = block_size
        self.delimiter = delimiter
        self.null_values = null_values

    def __str__(self) -> str:
        return f"CSVDataSource({self.filename}, block_size={self.block_size})"

    def _options(self) -> dict:
        convert_options = pa.csv.ConvertOptions()
        if self.null_values is not None:
            # The empty value is always missing, the sentinel values add to it.
            convert_options = pa.csv.ConvertOptions(
                null_values=["", *self.null_values], strings_can_be_null=True
            )
        return {
            "read_options": pa.csv.ReadOptions(block_size=self.block_size),
            "parse_options": pa.csv.ParseOptions(delimiter=self.delimiter),
            "convert_options": convert_options,
        }

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Open CSV file and emit the batches.

        A file with only the header row has no batches,
        in that case an empty batch carries the schema.
        """
        with pa.csv.open_csv(self.filename, **self._options()) as reader:
            emitted = False
            for batch in reader:
                emitted = True
                yield batch
            if not emitted:
                yield pa.RecordBatch.from_pylist([], schema=reader.schema)

    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the CSV file."""
        with pa.csv.open_csv(self.filename, **self._options()) as reader:
            return reader.schema


class PyArrowTableDataSource(DataSourceNode):
    """Load data from an in-memory pyarrow.Table or pyarrow.RecordBatch.

    Given a :class:`pyarrow.Table` or `pyarrow.RecordBatch` object,
    allow to use its data in a query plan.
    """

    def __init__(self, table: pa.Table | pa.RecordBatch) -> None:
        """
        :param table: The table or recordbatch with the data to read.
        """
        self.table = table
        self.is_recordbatch = isinstance(table, pa.RecordBatch)

    def __str__(self) -> str:
        return f"PyArrowTableDataSource(columns={self.table.column_names}, rows={self.table.num_rows})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Emit the data contained in the Table for consumption by other node."""
        if self.is_recordbatch:
            yield self.table
        elif self.table.num_rows == 0:
            # Empty tables have no batches, but the next nodes still need the schema.
            yield pa.RecordBatch.from_pylist([], schema=self.table.schema)
        else:
            yield from self.table.to_batches()

    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the Table."""
        return self.table.schema
