"""Column selectors used to pick columns by position or by name.

Selecting columns one by one by name gets tedious on wide
datasets like the mammal traits one, which has dozens of
columns in its full form. Selectors allow to describe
a set of columns instead of listing them:

* :func:`between` picks a contiguous range of columns,
  ``between("order", "binomial")`` selects all the
  taxonomy columns.
* :func:`starts_with`, :func:`ends_with`, :func:`contains`
  and :func:`matches` pick columns by their name.
* :func:`everything` picks all columns.
* :func:`exclude` removes the columns picked by another selector.

Selectors are resolved against the list of column names
of the data, see :func:`resolve_columns`:

>>> names = ["order", "binomial", "adult_body_mass_g", "litter_size"]
>>> resolve_columns(names, ["binomial", ends_with("_g")])
['binomial', 'adult_body_mass_g']
>>> resolve_columns(names, [exclude(between("order", "binomial"))])
['adult_body_mass_g', 'litter_size']
"""

import abc
import re

from .base import UnknownColumnError


class ColumnSelector(abc.ABC):
    """Pick a set of columns from a list of column names."""

    @abc.abstractmethod
    def resolve(self, column_names: list[str]) -> list[str]:
        """Return the matching columns, in the order they appear in ``column_names``."""
        ...

    @abc.abstractmethod
    def __str__(self) -> str: ...

    def __repr__(self) -> str:
        return str(self)


class ColumnName(ColumnSelector):
    """A single column picked by its exact name."""

    def __init__(self, name: str) -> None:
        self.name = name

    def resolve(self, column_names: list[str]) -> list[str]:
        if self.name not in column_names:
            raise UnknownColumnError(self.name, column_names)
        return [self.name]

    def __str__(self) -> str:
        return repr(self.name)


class ColumnRange(ColumnSelector):
    """All columns between two columns, both included."""

    def __init__(self, start: str, end: str) -> None:
        self.start = start
        self.end = end

    def resolve(self, column_names: list[str]) -> list[str]:
        for name in (self.start, self.end):
            if name not in column_names:
                raise UnknownColumnError(name, column_names)
        first = column_names.index(self.start)
        last = column_names.index(self.end)
        if first > last:
            # A reversed range picks the columns in reverse order.
            return column_names[last : first + 1][::-1]
        return column_names[first : last + 1]

    def __str__(self) -> str:
        return f"between({self.start!r}, {self.end!r})"


class NamePattern(ColumnSelector):
    """Columns whose name satisfies a predicate on the name."""

    def __init__(self, kind: str, pattern: str) -> None:
        """
        :param kind: One of ``starts_with``, ``ends_with``, ``contains``, ``matches``.
        :param pattern: The text or the regular expression to look for.
        """
        if kind not in self._MATCHERS:
            raise ValueError(f"Unsupported name pattern {kind!r}")
        self.kind = kind
        self.pattern = pattern

    _MATCHERS = {
        "starts_with": lambda name, pattern: name.startswith(pattern),
        "ends_with": lambda name, pattern: name.endswith(pattern),
        "contains": lambda name, pattern: pattern in name,
        "matches": lambda name, pattern: re.search(pattern, name) is not None,
    }

    def resolve(self, column_names: list[str]) -> list[str]:
        matcher = self._MATCHERS[self.kind]
        return [name for name in column_names if matcher(name, self.pattern)]

    def __str__(self) -> str:
        return f"{self.kind}({self.pattern!r})"


class Everything(ColumnSelector):
    """All the columns."""

    def resolve(self, column_names: list[str]) -> list[str]:
        return list(column_names)

    def __str__(self) -> str:
        return "everything()"


class Exclude(ColumnSelector):
    """Removes the columns picked by another selector.

    On its own it resolves to the columns that are *not*
    picked by the wrapped selector.
    """

    def __init__(self, selector: "ColumnSelector | str") -> None:
        self.selector = as_selector(selector)

    def resolve(self, column_names: list[str]) -> list[str]:
        excluded = set(self.selector.resolve(column_names))
        return [name for name in column_names if name not in excluded]

    def __str__(self) -> str:
        return f"exclude({self.selector})"


def as_selector(spec: ColumnSelector | str) -> ColumnSelector:
    """Convert a column name to a selector, leave selectors untouched."""
    if isinstance(spec, ColumnSelector):
        return spec
    if isinstance(spec, str):
        return ColumnName(spec)
    raise TypeError(f"Expected a column name or a ColumnSelector, got {type(spec).__name__}")


def resolve_columns(
    column_names: list[str], specs: list[ColumnSelector | str]
) -> list[str]:
    """Resolve a list of column specifications to a list of column names.

    Columns are returned in order of first mention, each
    one only once. Exclusions remove columns from the ones
    picked so far, when the specifications only contain
    exclusions they are applied to the full list of columns.
    """
    selectors = [as_selector(spec) for spec in specs]
    if selectors and all(isinstance(s, Exclude) for s in selectors):
        selected = list(column_names)
    else:
        selected = []

    for selector in selectors:
        if isinstance(selector, Exclude):
            excluded = set(selector.selector.resolve(column_names))
            selected = [name for name in selected if name not in excluded]
            continue
        for name in selector.resolve(column_names):
            if name not in selected:
                selected.append(name)
    return selected


def between(start: str, end: str) -> ColumnRange:
    """Select the columns from ``start`` to ``end``, both included."""
    return ColumnRange(start, end)


def starts_with(prefix: str) -> NamePattern:
    """Select the columns whose name starts with ``prefix``."""
    return NamePattern("starts_with", prefix)


def ends_with(suffix: str) -> NamePattern:
    """Select the columns whose name ends with ``suffix``."""
    return NamePattern("ends_with", suffix)


def contains(text: str) -> NamePattern:
    """Select the columns whose name contains ``text``."""
    return NamePattern("contains", text)


def matches(regex: str) -> NamePattern:
    """Select the columns whose name matches the ``regex`` regular expression."""
    return NamePattern("matches", regex)


def everything() -> Everything:
    """Select all the columns."""
    return Everything()


def exclude(spec: ColumnSelector | str) -> Exclude:
    """Drop the columns picked by ``spec``."""
    return Exclude(spec)
