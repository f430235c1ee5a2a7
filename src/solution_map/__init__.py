"""Hierarchical faceted filtering and boolean search for the climate solution map."""

from solution_map.core.filter.pipeline import get_filtered_data
from solution_map.core.importer.loader import Dataset, build_dataset, load_dataset
from solution_map.core.search.evaluator import ResultSet, evaluate
from solution_map.core.search.index import FtsTextIndex
from solution_map.protocols import TextIndex

__all__ = [
    "Dataset",
    "FtsTextIndex",
    "ResultSet",
    "TextIndex",
    "build_dataset",
    "evaluate",
    "get_filtered_data",
    "load_dataset",
]
