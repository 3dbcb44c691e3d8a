"""Normalize column names.

Raw datasets often come with column names that are
inconvenient to type, like ``5-1_AdultBodyMass_g``.
The helpers here turn them into lower_snake_case names
that can be used comfortably in expressions:

>>> clean_column_name("5-1_AdultBodyMass_g")
'adult_body_mass_g'
>>> clean_column_name("MSW05_Binomial", prefixes=("MSW05_",))
'binomial'
"""

import re

_FIELD_CODE = re.compile(r"^[0-9][0-9.\-]*_")
_LOWER_TO_UPPER = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_ACRONYM_TO_WORD = re.compile(r"(?<=[A-Z])(?=[A-Z][a-z])")
_NOT_ALPHANUMERIC = re.compile(r"[^0-9a-zA-Z]+")


def snake_case(name: str) -> str:
    """Convert a MixedCase or camelCase name to lower_snake_case.

    Anything that is not a letter or a digit becomes a separator.

    >>> snake_case("AdultHeadBodyLen_mm")
    'adult_head_body_len_mm'
    >>> snake_case("HomeRange km2")
    'home_range_km2'
    """
    name = _ACRONYM_TO_WORD.sub("_", name)
    name = _LOWER_TO_UPPER.sub("_", name)
    name = _NOT_ALPHANUMERIC.sub("_", name)
    return name.strip("_").lower()


def clean_column_name(name: str, prefixes: tuple[str, ...] = ()) -> str:
    """Strip the database prefixes and field codes and snake_case the rest.

    :param name: The raw column name.
    :param prefixes: Prefixes to remove from the name, like ``MSW05_``.
    """
    for prefix in prefixes:
        if name.startswith(prefix):
            name = name[len(prefix) :]
            break
    name = _FIELD_CODE.sub("", name)
    return snake_case(name)
