import pyarrow as pa
import pytest

from tidyground.compute import PyArrowTableDataSource, UnknownColumnError
from tidyground.dataframe import (
    Dataframe,
    GroupedDataframe,
    col,
    count,
    desc,
    ends_with,
    mean,
    median,
    n,
    starts_with,
)


@pytest.fixture
def mammals():
    return Dataframe.from_pydict(
        {
            "order": ["Carnivora", "Rodentia", "Carnivora", "Rodentia", "Primates", "Rodentia"],
            "binomial": [
                "Panthera leo",
                "Mus musculus",
                "Canis lupus",
                "Sciurus vulgaris",
                "Pan troglodytes",
                "Castor canadensis",
            ],
            "adult_body_mass_g": [158623.05, 19.3, 31756.51, 312.5, 45000.0, 18417.77],
            "adult_head_body_len_mm": [1723.16, 84.4, 1056.55, 220.0, None, 783.38],
            "litter_size": [2.76, 6.2, 5.6, None, 1.0, 3.4],
        }
    )


def test_dataframe_from_table_and_node():
    table = pa.table({"a": [1, 2]})
    assert Dataframe(table).to_arrow().equals(table)
    assert Dataframe(table.to_batches()[0]).to_arrow().equals(table)
    assert Dataframe(PyArrowTableDataSource(table)).to_arrow().equals(table)


def test_dataframe_invalid_input():
    with pytest.raises(ValueError):
        Dataframe({"a": [1, 2]})


def test_select(mammals):
    result = mammals.select("binomial", starts_with("adult")).to_arrow()
    assert result.column_names == [
        "binomial",
        "adult_body_mass_g",
        "adult_head_body_len_mm",
    ]
    assert result.num_rows == 6
    assert result.column("binomial").to_pylist() == mammals.to_pydict()["binomial"]


def test_select_unknown_column(mammals):
    with pytest.raises(UnknownColumnError):
        mammals.select("tail_length").to_arrow()


def test_rename(mammals):
    result = mammals.rename(mass="adult_body_mass_g", name="binomial")
    assert result.column_names == [
        "order",
        "name",
        "mass",
        "adult_head_body_len_mm",
        "litter_size",
    ]


def test_filter(mammals):
    result = mammals.filter(col("order").eq("Rodentia"), col("litter_size") > 4)
    assert result.to_pydict()["binomial"] == ["Mus musculus"]
    assert result.column_names == mammals.column_names


def test_filter_requires_predicates(mammals):
    with pytest.raises(ValueError):
        mammals.filter()


def test_arrange(mammals):
    result = mammals.arrange("order", desc("adult_body_mass_g"))
    assert result.to_pydict()["binomial"] == [
        "Panthera leo",
        "Canis lupus",
        "Pan troglodytes",
        "Castor canadensis",
        "Sciurus vulgaris",
        "Mus musculus",
    ]


def test_arrange_missing_values_last(mammals):
    result = mammals.arrange(desc("litter_size")).to_pydict()
    assert result["litter_size"] == [6.2, 5.6, 3.4, 2.76, 1.0, None]


def test_arrange_is_idempotent(mammals):
    once = mammals.arrange("order")
    twice = once.arrange("order")
    assert twice.to_arrow().equals(once.to_arrow())


def test_mutate(mammals):
    result = mammals.mutate(
        mass_kg=col("adult_body_mass_g") / 1000,
        heavy=col("mass_kg") > 1000,
        source="pantheria",
    ).to_pydict()
    assert result["mass_kg"][:2] == pytest.approx([158.62305, 0.0193])
    assert result["heavy"] == [False] * 6
    assert result["source"] == ["pantheria"] * 6


def test_mutate_sees_earlier_columns(mammals):
    result = mammals.mutate(
        double=col("litter_size") * 2,
        quadruple=col("double") * 2,
    ).to_pydict()
    assert result["quadruple"] == [
        None if v is None else v * 4 for v in result["litter_size"]
    ]


def test_mutate_does_not_modify_original(mammals):
    before = mammals.to_arrow()
    mammals.mutate(litter_size=col("litter_size") + 1).to_arrow()
    assert mammals.to_arrow().equals(before)


def test_group_by_summarise(mammals):
    result = mammals.group_by("order").summarise(
        n=n(),
        mean_litter=mean("litter_size"),
        mean_known_litter=mean("litter_size", skip_nulls=True),
        median_mass=median("adult_body_mass_g"),
    )
    assert result.to_pylist() == [
        {
            "order": "Carnivora",
            "n": 2,
            "mean_litter": pytest.approx(4.18),
            "mean_known_litter": pytest.approx(4.18),
            "median_mass": pytest.approx(95189.78),
        },
        {
            "order": "Primates",
            "n": 1,
            "mean_litter": 1.0,
            "mean_known_litter": 1.0,
            "median_mass": 45000.0,
        },
        {
            "order": "Rodentia",
            "n": 3,
            "mean_litter": None,
            "mean_known_litter": pytest.approx(4.8),
            "median_mass": 312.5,
        },
    ]


def test_summarise_whole_data(mammals):
    result = mammals.summarise(known_litters=count("litter_size"), rows=n())
    assert result.to_pylist() == [{"known_litters": 5, "rows": 6}]
    assert mammals.summarize is not None


def test_count(mammals):
    assert mammals.count("order").to_pylist() == [
        {"order": "Carnivora", "n": 2},
        {"order": "Primates", "n": 1},
        {"order": "Rodentia", "n": 3},
    ]
    assert mammals.group_by("order").count(name="species").to_pydict()["species"] == [
        2,
        1,
        3,
    ]


def test_grouped_dataframe(mammals):
    grouped = mammals.group_by("order")
    assert isinstance(grouped, GroupedDataframe)
    assert grouped.keys == ["order"]
    assert grouped.ungroup() is mammals
    with pytest.raises(ValueError):
        mammals.group_by()


def test_head_and_slice(mammals):
    assert mammals.head(2).to_pydict()["binomial"] == ["Panthera leo", "Mus musculus"]
    assert mammals.head().num_rows == 6
    assert mammals.slice(4, 10).to_pydict()["binomial"] == [
        "Pan troglodytes",
        "Castor canadensis",
    ]
    assert mammals.head(0).num_rows == 0


def test_pipe(mammals):
    def heavy(df, threshold):
        return df.filter(col("adult_body_mass_g") > threshold)

    assert mammals.pipe(heavy, 40000).to_pydict()["binomial"] == [
        "Panthera leo",
        "Pan troglodytes",
    ]


def test_collect(mammals):
    collected = mammals.filter(col("litter_size") > 5).collect()
    assert isinstance(collected.node, PyArrowTableDataSource)
    assert collected.num_rows == 2


def test_explain(mammals):
    plan = mammals.filter(col("litter_size") > 5).explain()
    assert plan.startswith("FilterNode(filter=pyarrow.compute.greater(ColumnRef(litter_size),5)")


def test_str(mammals, monkeypatch):
    monkeypatch.setenv("TIDYGROUND_DISPLAY_ROWS", "2")
    text = str(mammals.select("binomial", ends_with("_size")))
    assert text.splitlines() == [
        "binomial     | litter_size",
        "------------ | -----------",
        "Panthera leo | 2.76       ",
        "Mus musculus | 6.20       ",
        "... and 4 more rows",
    ]


def test_summarise_without_rows_keeps_types(mammals):
    result = (
        mammals.filter(col("litter_size") > 10)
        .group_by("order")
        .summarise(rows=n(), mean_litter=mean("litter_size"), median_mass=median("adult_body_mass_g"))
        .to_arrow()
    )
    assert result.num_rows == 0
    assert result.schema == pa.schema(
        [
            ("order", pa.string()),
            ("rows", pa.int64()),
            ("mean_litter", pa.float64()),
            ("median_mass", pa.float64()),
        ]
    )


def test_open_csv(tmp_path):
    path = tmp_path / "mammals.tsv"
    path.write_text(
        "binomial\tadult_body_mass_g\n"
        "Panthera leo\t158623.05\n"
        "Gorilla gorilla\t-999\n"
    )
    df = Dataframe.open_csv(str(path), delimiter="\t", null_values=["-999"])
    assert df.to_pydict() == {
        "binomial": ["Panthera leo", "Gorilla gorilla"],
        "adult_body_mass_g": [158623.05, None],
    }
    assert df.explain() == f"CSVDataSource({path}, block_size=None)"
