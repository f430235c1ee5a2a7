"""MCP server exposing solution-map search and facet tools."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass, field
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from solution_map.config import ALL, DATASET_ENV_VAR, resolve_dataset_source
from solution_map.core.filter.pipeline import get_filtered_data
from solution_map.core.importer.loader import Dataset, load_dataset
from solution_map.core.tree.serialize import tree_to_dict
from solution_map.core.tree.summary import collect_facet_values, count_nodes, matched_names

# --- Core functions (testable without MCP context) ---


def solution_map_search(
    dataset: Dataset,
    *,
    query: str = "",
    type_value: str = ALL,
    tag: str = ALL,
    author: str = ALL,
    location: str = ALL,
    date_from: str | None = None,
    date_to: str | None = None,
    max_depth: int | None = None,
) -> dict[str, Any]:
    """Filter the solution tree by a boolean query and facets.

    Query syntax: words are ANDed, "quoted phrases" match exactly, and
    AND / OR / NOT combine terms (OR binds loosest, NOT tightest).

    Args:
        query: Search text.
        type_value: Node type, or "all".
        tag: Node tag, or "all".
        author: Content item author, or "all".
        location: Content item location, or "all".
        date_from: Earliest content date (YYYY, YYYY-MM or YYYY-MM-DD).
        date_to: Latest content date.
        max_depth: Max tree levels to return (None = unlimited).
    """
    if max_depth is not None and max_depth < 0:
        return {"error": f"max_depth must be >= 0, got {max_depth}"}

    tree = get_filtered_data(
        dataset.root,
        dataset.index,
        query=query,
        type_value=type_value,
        tag=tag,
        author=author,
        location=location,
        date_from=date_from,
        date_to=date_to,
    )

    matched = matched_names(tree)
    if tree is None:
        return {"results": None, "count": 0, "matched": matched, "message": "No results."}

    return {
        "results": tree_to_dict(tree, max_depth=max_depth),
        "count": count_nodes(tree),
        "matched": matched,
    }


def solution_map_facets(dataset: Dataset) -> dict[str, Any]:
    """List the values each facet can be filtered on."""
    values = collect_facet_values(dataset.root)
    return {**asdict(values), "total_nodes": count_nodes(dataset.root)}


# --- MCP server ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    dataset: Dataset
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Load the dataset and build the index on startup, close on shutdown."""
    source = resolve_dataset_source()
    if source is None:
        msg = f"No dataset found; set {DATASET_ENV_VAR} to a JSON file or URL"
        raise RuntimeError(msg)

    dataset = load_dataset(source)
    try:
        yield ServerContext(dataset=dataset)
    finally:
        dataset.close()


mcp_server = FastMCP(
    "solution-map",
    instructions="""\
The solution map is a tree of climate-solution categories. Each category may
hold content items (articles, reports, projects) with an author, a location
and a date.

Use solution_map_facets_tool first to see which types, tags, authors and
locations exist. Then call solution_map_search_tool with a query and/or facet
values. Results are the pruned tree: ancestors of every match are kept for
context. isSearchMatch / hasMatchedDescendants (and the per-facet pairs) tell
a node that matched from one that is only on the path to a match.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


@mcp_server.tool()
async def solution_map_search_tool(
    ctx: Context,
    query: str = "",
    type_value: str = ALL,
    tag: str = ALL,
    author: str = ALL,
    location: str = ALL,
    date_from: str | None = None,
    date_to: str | None = None,
    max_depth: int | None = None,
) -> dict[str, Any]:
    """Search and filter the climate solution map.

    Query syntax: words are ANDed, "quoted phrases" match exactly, and
    AND / OR / NOT combine terms, e.g. `solar OR wind`, `storage NOT lithium`,
    `NOT nuclear`. Facet values must match exactly; "all" disables a facet.

    Args:
        query: Search text.
        type_value: Node type, or "all".
        tag: Node tag, or "all".
        author: Content item author, or "all".
        location: Content item location, or "all".
        date_from: Earliest content date (YYYY, YYYY-MM or YYYY-MM-DD).
        date_to: Latest content date.
        max_depth: Max tree levels to return (None = unlimited).
    """
    server_ctx = _ctx(ctx)
    # Annotation mutates the freshly filtered tree; keep runs serial.
    async with server_ctx.lock:
        return solution_map_search(
            server_ctx.dataset,
            query=query,
            type_value=type_value,
            tag=tag,
            author=author,
            location=location,
            date_from=date_from,
            date_to=date_to,
            max_depth=max_depth,
        )


@mcp_server.tool()
async def solution_map_facets_tool(ctx: Context) -> dict[str, Any]:
    """List available types, tags, authors, locations and the date span."""
    return solution_map_facets(_ctx(ctx).dataset)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from solution_map.logging_config import configure_logging

    configure_logging(verbose=False)
    logger.debug("Starting MCP server")
    mcp_server.run(transport="stdio")
