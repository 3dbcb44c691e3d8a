import pytest

from tidyground.utils.naming import clean_column_name, snake_case


@pytest.mark.parametrize(
    "name, expected",
    [
        ("AdultBodyMass_g", "adult_body_mass_g"),
        ("HomeRange km2", "home_range_km2"),
        ("GRLength", "gr_length"),
        ("litter_size", "litter_size"),
        ("  Order ", "order"),
    ],
)
def test_snake_case(name, expected):
    assert snake_case(name) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("MSW05_Order", "order"),
        ("5-1_AdultBodyMass_g", "adult_body_mass_g"),
        ("22-1_HomeRange_km2", "home_range_km2"),
        ("26-7_GR_MaxLong_dd", "gr_max_long_dd"),
        ("References", "references"),
    ],
)
def test_clean_column_name(name, expected):
    assert clean_column_name(name, prefixes=("MSW05_",)) == expected


def test_prefix_not_removed_unless_requested():
    assert clean_column_name("MSW05_Order") == "msw05_order"
