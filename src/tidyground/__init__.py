"""Tidyground

A toolkit to learn the core data manipulation verbs
(select, filter, arrange, mutate and summarise) and how
to chain them, on top of Apache Arrow.

The examples throughout the documentation use a dataset of
species-level traits of mammals, available through
:func:`tidyground.datasets.load_mammals`.

The toolkit is constituted by multiple components, each isolated within its own
package and each self documented in literate programming style.

The primary components are:

* The Compute Engine, in charge of executing analyses on the data.
* The Dataframe API, which provides the verbs on top of the compute engine.
* The Datasets, which load the data the verbs are demonstrated on.

For the user guide and code documentation of each component, refer to the
component itself.
"""

from . import compute, dataframe, datasets

__all__ = ("compute", "dataframe", "datasets")
