"""Tests for MCP tool core functions."""

import asyncio
from pathlib import Path

import pytest

from solution_map.core.importer.loader import Dataset
from solution_map.mcp.server import (
    ServerContext,
    mcp_server,
    server_lifespan,
    solution_map_facets,
    solution_map_search,
)


def test_search_returns_pruned_tree(dataset: Dataset) -> None:
    result = solution_map_search(dataset, query="wind")

    assert result["count"] == 3
    assert result["matched"] == ["Wind"]
    assert result["results"]["name"] == "Climate Solutions"
    assert "message" not in result


def test_search_matched_names_skip_nodes_pruned_by_facets(dataset: Dataset) -> None:
    result = solution_map_search(dataset, query="renewable", location="Denmark")

    assert result["matched"] == ["Wind"]
    assert result["count"] == 3


def test_search_without_results(dataset: Dataset) -> None:
    result = solution_map_search(dataset, query="solar AND battery")
    assert result["results"] is None
    assert result["count"] == 0
    assert result["message"] == "No results."


def test_search_respects_max_depth(dataset: Dataset) -> None:
    result = solution_map_search(dataset, tag="storage", max_depth=1)
    storage = result["results"]["children"][0]
    assert storage["childCount"] == 1


def test_search_rejects_negative_max_depth(dataset: Dataset) -> None:
    result = solution_map_search(dataset, query="wind", max_depth=-1)
    assert "error" in result
    assert "results" not in result


def test_facets_lists_values(dataset: Dataset) -> None:
    result = solution_map_facets(dataset)

    assert result["total_nodes"] == 6
    assert result["authors"] == ("IEA", "IRENA", "Unknown")
    assert result["latest_date"] == "2023-03-15"


def test_lifespan_loads_dataset(dataset_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLUTION_MAP_DATA", str(dataset_file))

    async def run() -> str:
        async with server_lifespan(mcp_server) as ctx:
            assert isinstance(ctx, ServerContext)
            return ctx.dataset.root.name

    assert asyncio.run(run()) == "Climate Solutions"


def test_lifespan_without_dataset_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SOLUTION_MAP_DATA", raising=False)
    monkeypatch.setattr("solution_map.config.DATASET_FILES", [tmp_path / "missing.json"])

    async def run() -> None:
        async with server_lifespan(mcp_server):
            pass

    with pytest.raises(RuntimeError, match="SOLUTION_MAP_DATA"):
        asyncio.run(run())
