import pytest

from tidyground.compute import UnknownColumnError
from tidyground.compute.selectors import (
    ColumnName,
    between,
    contains,
    ends_with,
    everything,
    exclude,
    matches,
    resolve_columns,
    starts_with,
)

COLUMNS = [
    "order",
    "family",
    "genus",
    "species",
    "binomial",
    "adult_body_mass_g",
    "adult_head_body_len_mm",
    "home_range_km2",
    "litter_size",
]


@pytest.mark.parametrize(
    "specs, expected",
    [
        (["binomial", "order"], ["binomial", "order"]),
        ([between("order", "species")], ["order", "family", "genus", "species"]),
        ([between("genus", "family")], ["genus", "family"]),
        ([starts_with("adult")], ["adult_body_mass_g", "adult_head_body_len_mm"]),
        ([ends_with("_mm")], ["adult_head_body_len_mm"]),
        ([contains("body")], ["adult_body_mass_g", "adult_head_body_len_mm"]),
        ([matches(r"_(g|mm)$")], ["adult_body_mass_g", "adult_head_body_len_mm"]),
        ([matches(r"^missing")], []),
        ([everything()], COLUMNS),
    ],
)
def test_resolve_selectors(specs, expected):
    assert resolve_columns(COLUMNS, specs) == expected


def test_columns_are_not_duplicated():
    assert resolve_columns(COLUMNS, ["genus", between("order", "genus")]) == [
        "genus",
        "order",
        "family",
    ]


def test_only_exclusions_start_from_all_columns():
    assert resolve_columns(COLUMNS, [exclude(between("order", "binomial"))]) == [
        "adult_body_mass_g",
        "adult_head_body_len_mm",
        "home_range_km2",
        "litter_size",
    ]
    assert resolve_columns(COLUMNS, [exclude("order"), exclude(starts_with("adult"))]) == [
        "family",
        "genus",
        "species",
        "binomial",
        "home_range_km2",
        "litter_size",
    ]


def test_exclusion_removes_selected_columns():
    assert resolve_columns(
        COLUMNS, [between("order", "genus"), exclude("family"), "litter_size"]
    ) == ["order", "genus", "litter_size"]


def test_unknown_column_name():
    with pytest.raises(UnknownColumnError) as excinfo:
        resolve_columns(COLUMNS, ["tail_length"])
    assert excinfo.value.name == "tail_length"


def test_unknown_range_end():
    with pytest.raises(UnknownColumnError):
        resolve_columns(COLUMNS, [between("order", "tail_length")])


def test_invalid_specification():
    with pytest.raises(TypeError):
        resolve_columns(COLUMNS, [3])


def test_selectors_str():
    assert str(ColumnName("order")) == "'order'"
    assert str(between("order", "genus")) == "between('order', 'genus')"
    assert str(exclude(starts_with("adult"))) == "exclude(starts_with('adult'))"
    assert str(everything()) == "everything()"
