"""Shared test fixtures."""

import json
from collections.abc import Iterator
from pathlib import Path

import pytest

from solution_map.core.importer.json_reader import parse_tree
from solution_map.core.importer.loader import Dataset, build_dataset
from solution_map.models.node import Node

# Root -> Energy -> {Solar, Wind}
SCENARIO_DATA = {
    "name": "Root",
    "children": [
        {
            "name": "Energy",
            "type": "sector",
            "children": [
                {"name": "Solar", "type": "technology", "tags": ["solar"]},
                {"name": "Wind", "type": "technology", "tags": ["wind"]},
            ],
        },
    ],
}

SOURCE_DATA = {
    "name": "Climate Solutions",
    "children": [
        {
            "name": "Energy",
            "type": "sector",
            "description": "Clean power generation",
            "children": [
                {
                    "name": "Solar",
                    "type": "technology",
                    "tags": ["solar", "renewable"],
                    "urls": [
                        {
                            "title": "Rooftop photovoltaics",
                            "url": "https://example.org/rooftop",
                            "author": "IEA",
                            "country": "Germany",
                            "date": "2022",
                            "type_": "report",
                            "tags": ["pv"],
                            "description": "Distributed generation on homes",
                        }
                    ],
                },
                {
                    "name": "Wind",
                    "type": "technology",
                    "tags": ["wind", "renewable"],
                    "urls": [
                        {
                            "title": "Offshore turbines",
                            "creator": "IRENA",
                            "location": "Denmark",
                            "date": "2021-06",
                            "type": "report",
                        }
                    ],
                },
            ],
        },
        {
            "name": "Storage",
            "type": "sector",
            "children": [
                {
                    "name": "Battery",
                    "type": "technology",
                    "tags": ["storage"],
                    "items": [
                        {
                            "name": "Grid-scale lithium",
                            "source": "IEA",
                            "region": "California",
                            "date": "2023-03-15",
                            "abstract": "Utility battery deployments",
                            "keywords": "grid, lithium",
                        },
                        {"title": "Undated note", "author": "Unknown", "date": "someday"},
                    ],
                },
            ],
        },
    ],
}


@pytest.fixture
def scenario_tree() -> Node:
    return parse_tree(SCENARIO_DATA)


@pytest.fixture
def source_tree() -> Node:
    return parse_tree(SOURCE_DATA)


@pytest.fixture
def scenario_dataset() -> Iterator[Dataset]:
    dataset = build_dataset(SCENARIO_DATA)
    yield dataset
    dataset.close()


@pytest.fixture
def dataset() -> Iterator[Dataset]:
    """The source dataset with its FTS index built."""
    ds = build_dataset(SOURCE_DATA)
    yield ds
    ds.close()


@pytest.fixture
def dataset_file(tmp_path: Path) -> Path:
    path = tmp_path / "solutions.json"
    path.write_text(json.dumps(SOURCE_DATA))
    return path
