import pytest

from tidyground.dataframe import Dataframe, col, desc, mean, verbs


@pytest.fixture
def mammals():
    return Dataframe.from_pydict(
        {
            "binomial": [
                "Panthera leo",
                "Mus musculus",
                "Canis lupus",
                "Ursus arctos",
                "Mustela nivalis",
            ],
            "order": ["Carnivora", "Rodentia", "Carnivora", "Carnivora", "Carnivora"],
            "adult_body_mass_g": [158623.05, 19.3, 31756.51, 196287.45, 78.45],
            "adult_head_body_len_mm": [1723.16, 84.4, 1056.55, 2215.0, 184.85],
        }
    )


def _ratio():
    return col("adult_body_mass_g") / col("adult_head_body_len_mm")


def test_chained_and_nested_are_equivalent(mammals):
    chained = (
        mammals.mutate(ratio=_ratio())
        .arrange(desc("ratio"))
        .select("binomial", "ratio")
    )
    nested = verbs.select(
        verbs.arrange(verbs.mutate(mammals, ratio=_ratio()), desc("ratio")),
        "binomial",
        "ratio",
    )
    assert chained.to_arrow().equals(nested.to_arrow())
    assert chained.to_pydict()["binomial"] == [
        "Panthera leo",
        "Ursus arctos",
        "Canis lupus",
        "Mustela nivalis",
        "Mus musculus",
    ]


def test_pipe_with_verbs_is_equivalent(mammals):
    piped = (
        mammals.pipe(verbs.mutate, ratio=_ratio())
        .pipe(verbs.arrange, desc("ratio"))
        .pipe(verbs.select, "binomial", "ratio")
    )
    chained = (
        mammals.mutate(ratio=_ratio())
        .arrange(desc("ratio"))
        .select("binomial", "ratio")
    )
    assert piped.to_arrow().equals(chained.to_arrow())


def test_grouped_verbs(mammals):
    nested = verbs.summarise(
        verbs.group_by(
            verbs.filter(mammals, col("adult_body_mass_g") > 50), "order"
        ),
        mean_mass=mean("adult_body_mass_g"),
    )
    chained = (
        mammals.filter(col("adult_body_mass_g") > 50)
        .group_by("order")
        .summarise(mean_mass=mean("adult_body_mass_g"))
    )
    assert nested.to_arrow().equals(chained.to_arrow())
    assert nested.to_pydict()["order"] == ["Carnivora"]


def test_rename_and_head(mammals):
    result = verbs.head(verbs.rename(mammals, name="binomial"), 1)
    assert result.to_pylist()[0]["name"] == "Panthera leo"


def test_count(mammals):
    assert verbs.count(mammals, "order").to_pydict() == {
        "order": ["Carnivora", "Rodentia"],
        "n": [4, 1],
    }
    grouped = verbs.group_by(mammals, "order")
    assert verbs.count(grouped).to_pydict()["n"] == [4, 1]
    with pytest.raises(ValueError):
        verbs.count(grouped, "binomial")


def test_summarize_alias():
    assert verbs.summarize is verbs.summarise
