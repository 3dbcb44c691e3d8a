"""Datasets to experiment with the dataframe verbs."""

from .mammals import SAMPLE_PATH, load_mammals, mammals_column_names

__all__ = ("SAMPLE_PATH", "load_mammals", "mammals_column_names")
