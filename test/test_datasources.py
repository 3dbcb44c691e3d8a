import os
import tempfile

import pyarrow as pa
import pyarrow.csv as csv
import pytest

from tidyground.compute.datasources import CSVDataSource, PyArrowTableDataSource

# Mock data for testing
MOCK_PYARROW_TABLE = pa.table({"col1": [1, 4, 7], "col2": [2, 5, 8], "col3": [3, 6, 9]})

MOCK_CSV_FILE = tempfile.NamedTemporaryFile(delete=False, mode="w+")
MOCK_TSV_FILE = tempfile.NamedTemporaryFile(delete=False, mode="w+", suffix=".tsv")

TSV_CONTENT = (
    "binomial\tadult_body_mass_g\tlitter_size\n"
    "Panthera leo\t158623.05\t2.76\n"
    "Sciurus vulgaris\t312.50\t-999\n"
    "Gorilla gorilla\t-999.00\t1.00\n"
)


def setup_module():
    csv.write_csv(MOCK_PYARROW_TABLE, MOCK_CSV_FILE.name)
    MOCK_CSV_FILE.close()
    MOCK_TSV_FILE.write(TSV_CONTENT)
    MOCK_TSV_FILE.close()


def teardown_module():
    os.unlink(MOCK_CSV_FILE.name)
    os.unlink(MOCK_TSV_FILE.name)


@pytest.mark.parametrize(
    "data_source_class, init_args, expected_str",
    [
        (
            CSVDataSource,
            (MOCK_CSV_FILE.name, None),
            f"CSVDataSource({MOCK_CSV_FILE.name}, block_size=None)",
        ),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE,),
            "PyArrowTableDataSource(columns=['col1', 'col2', 'col3'], rows=3)",
        ),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE.to_batches()[0],),
            "PyArrowTableDataSource(columns=['col1', 'col2', 'col3'], rows=3)",
        ),
    ],
)
def test_init_and_str(data_source_class, init_args, expected_str):
    data_source = data_source_class(*init_args)
    assert str(data_source) == expected_str


@pytest.mark.parametrize(
    "data_source_class, init_args, expected_batches",
    [
        (CSVDataSource, (MOCK_CSV_FILE.name, None), MOCK_PYARROW_TABLE.to_batches()),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE,),
            MOCK_PYARROW_TABLE.to_batches(),
        ),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE.to_batches()[0],),
            MOCK_PYARROW_TABLE.to_batches(),
        ),
    ],
)
def test_batches(data_source_class, init_args, expected_batches):
    data_source = data_source_class(*init_args)
    batches = list(data_source.batches())
    assert len(batches) == len(expected_batches)
    for batch, expected_batch in zip(batches, expected_batches):
        assert batch.equals(expected_batch)


@pytest.mark.parametrize(
    "data_source_class, init_args",
    [
        (CSVDataSource, (MOCK_CSV_FILE.name, None)),
        (PyArrowTableDataSource, (MOCK_PYARROW_TABLE,)),
    ],
)
def test_poll_schema(data_source_class, init_args):
    assert data_source_class(*init_args).poll_schema() == MOCK_PYARROW_TABLE.schema


def test_tsv_with_sentinel_values():
    data_source = CSVDataSource(
        MOCK_TSV_FILE.name, delimiter="\t", null_values=["-999", "-999.00"]
    )
    table = pa.Table.from_batches(data_source.batches())
    assert table.column_names == ["binomial", "adult_body_mass_g", "litter_size"]
    assert table.schema.field("adult_body_mass_g").type == pa.float64()
    assert table.column("adult_body_mass_g").to_pylist() == [158623.05, 312.5, None]
    assert table.column("litter_size").to_pylist() == [2.76, None, 1.0]
    assert table.column("binomial").to_pylist() == [
        "Panthera leo",
        "Sciurus vulgaris",
        "Gorilla gorilla",
    ]


def test_tsv_without_sentinel_values():
    data_source = CSVDataSource(MOCK_TSV_FILE.name, delimiter="\t")
    table = pa.Table.from_batches(data_source.batches())
    assert table.column("litter_size").to_pylist() == [2.76, -999.0, 1.0]


def test_empty_table_emits_schema():
    empty = MOCK_PYARROW_TABLE.slice(0, 0)
    batches = list(PyArrowTableDataSource(empty).batches())
    assert len(batches) == 1
    assert batches[0].num_rows == 0
    assert batches[0].schema == MOCK_PYARROW_TABLE.schema


def test_header_only_file_emits_schema(tmp_path):
    path = tmp_path / "header.tsv"
    path.write_text("binomial\tlitter_size\n")
    batches = list(CSVDataSource(str(path), delimiter="\t").batches())
    assert len(batches) == 1
    assert batches[0].num_rows == 0
    assert batches[0].schema.names == ["binomial", "litter_size"]
