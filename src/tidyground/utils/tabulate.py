"""Render tabular data as plain text.

Dataframes and the ``tidyground-mammals`` command print their data
through :func:`tabulate`. Columns are left aligned and separated by ``|``.
Only the first rows are shown:

    >>> import pyarrow as pa
    >>> species = pa.table({
    ...     "binomial": ["Panthera leo", "Canis lupus", "Mus musculus"],
    ...     "litter_size": [2.76, 5.6, None],
    ...     "n": [3, 8, 7],
    ... })
    >>> print(tabulate(species, max_rows=2))
    binomial     | litter_size | n
    ------------ | ----------- | -
    Panthera leo | 2.76        | 3
    Canis lupus  | 5.60        | 8
    ... and 1 more rows
"""

from typing import Any

from pyarrow import RecordBatch, Table

MAX_CELL_WIDTH = 30
SEPARATOR = " | "


def tabulate(data: RecordBatch | Table, max_rows: int = 20) -> str:
    """Render the first ``max_rows`` rows of ``data`` as a text table."""
    shown = data.slice(0, max_rows)
    columns = [
        [name] + [format_value(v) for v in shown.column(name).to_pylist()]
        for name in data.column_names
    ]
    widths = [max(len(cell) for cell in column) for column in columns]

    lines = [_line(cells, widths) for cells in zip(*columns)]
    lines.insert(1, SEPARATOR.join("-" * width for width in widths))

    hidden = data.num_rows - shown.num_rows
    if hidden > 0:
        lines.append(f"... and {hidden} more rows")
    return "\n".join(lines)


def _line(cells: tuple[str, ...], widths: list[int]) -> str:
    return SEPARATOR.join(cell.ljust(width) for cell, width in zip(cells, widths))


def format_value(v: Any) -> str:
    """Text of a single cell.

    Floats get two decimals and missing values are ``NA``.
    Text longer than ``MAX_CELL_WIDTH`` is truncated.
    """
    if v is None:
        return "NA"
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, float):
        return f"{v:.2f}"

    text = str(v)
    if len(text) > MAX_CELL_WIDTH:
        text = text[: MAX_CELL_WIDTH - 3] + "..."
    return text
