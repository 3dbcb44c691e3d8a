"""Species-level traits of mammals.

The dataset comes from the PanTHERIA database, where each
row is a species and each column a trait of the species.
The raw file is a tab separated file, its columns are named
after the database conventions, like ``MSW05_Order`` or
``5-1_AdultBodyMass_g``, and missing values are marked
with ``-999``.

:func:`load_mammals` loads the file and makes it convenient
to work with:

* The ``MSW05_`` prefix and the numeric field codes
  like ``5-1_`` are removed from the column names.
* Column names are converted to lower_snake_case,
  so ``5-1_AdultBodyMass_g`` becomes ``adult_body_mass_g``.
* ``-999`` values are loaded as missing values.

A small sample of the dataset is bundled with the package
and used when no path is provided.
"""

import logging
import os

from ..compute import CSVDataSource, RenameNode
from ..config import Settings, get_settings
from ..dataframe import Dataframe
from ..utils.naming import clean_column_name

log = logging.getLogger(__name__)

SAMPLE_PATH = os.path.join(os.path.dirname(__file__), "data", "mammals_sample.tsv")
"""Path of the bundled sample of the mammals dataset."""

DATABASE_PREFIXES = ("MSW05_",)


def mammals_column_names(raw_names: list[str]) -> dict[str, str]:
    """Map the raw column names of the dataset to their clean names.

    >>> mammals_column_names(["MSW05_Order", "22-1_HomeRange_km2"])
    {'MSW05_Order': 'order', '22-1_HomeRange_km2': 'home_range_km2'}
    """
    mapping = {name: clean_column_name(name, DATABASE_PREFIXES) for name in raw_names}
    clean_names = list(mapping.values())
    duplicates = sorted({name for name in clean_names if clean_names.count(name) > 1})
    if duplicates:
        raise ValueError(f"Columns would have the same name once cleaned: {duplicates}")
    return mapping


def load_mammals(path: str | None = None, settings: Settings | None = None) -> Dataframe:
    """Load the mammals dataset from a tab separated file.

    :param path: The path of the TSV file, the bundled sample when not provided.
    :param settings: Where to read the missing value sentinels and
                     the block size from, the environment when not provided.
    """
    settings = settings or get_settings()
    path = path or SAMPLE_PATH

    source = CSVDataSource(
        path,
        block_size=settings.block_size,
        delimiter="\t",
        null_values=settings.missing_sentinels,
    )
    mapping = mammals_column_names(source.poll_schema().names)
    log.info("Loading mammals from %s with columns %s", path, list(mapping.values()))
    return Dataframe(RenameNode(mapping, source))
