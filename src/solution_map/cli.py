"""CLI for the solution map (search, facets, MCP server)."""

import json
from dataclasses import asdict
from typing import Annotated

import requests
import typer
from loguru import logger

from solution_map.config import ALL, DATASET_ENV_VAR, resolve_dataset_source
from solution_map.core.filter.pipeline import get_filtered_data
from solution_map.core.importer.loader import Dataset, load_dataset
from solution_map.core.tree.markdown import render_tree_as_markdown
from solution_map.core.tree.serialize import tree_to_dict
from solution_map.core.tree.summary import collect_facet_values, count_nodes, matched_names
from solution_map.logging_config import configure_logging

app = typer.Typer(help="Solution map: search and filter the climate solutions tree.")

DataOption = Annotated[
    str | None,
    typer.Option("--data", "-d", help=f"Dataset JSON file or URL (default: ${DATASET_ENV_VAR})"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _open_dataset(data: str | None) -> Dataset:
    """Load the dataset, exiting with an error if it is missing or broken."""
    source = data or resolve_dataset_source()
    if source is None:
        logger.error("No dataset found. Pass --data or set {}.", DATASET_ENV_VAR)
        raise typer.Exit(1)
    try:
        return load_dataset(source)
    except (FileNotFoundError, ValueError, requests.RequestException) as e:
        logger.error("Cannot load dataset {}: {}", source, e)
        raise typer.Exit(1) from e


@app.command()
def search(
    query: str = typer.Argument("", help="Search query (AND / OR / NOT, \"phrases\")"),
    type_value: str = typer.Option(ALL, "--type", "-t", help="Node type"),
    tag: str = typer.Option(ALL, "--tag", "-g", help="Node tag"),
    author: str = typer.Option(ALL, "--author", "-a", help="Content item author"),
    location: str = typer.Option(ALL, "--location", "-l", help="Content item location"),
    date_from: Annotated[
        str | None,
        typer.Option("--from", help="Earliest content date (YYYY[-MM[-DD]])"),
    ] = None,
    date_to: Annotated[
        str | None,
        typer.Option("--to", help="Latest content date (YYYY[-MM[-DD]])"),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to render"),
    ] = None,
    data: DataOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Filter the solution tree by a query and facets."""
    dataset = _open_dataset(data)
    try:
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

        if output_json:
            payload = {
                "count": count_nodes(tree),
                "matched": matched,
                "tree": tree_to_dict(tree, max_depth=max_depth) if tree is not None else None,
            }
            typer.echo(json.dumps(payload, indent=2))
            return

        if tree is None:
            typer.echo("No results.")
            return

        count = count_nodes(tree)
        typer.echo(f"{count} result{'s' if count != 1 else ''}\n")
        typer.echo(render_tree_as_markdown(tree, max_depth=max_depth))
    finally:
        dataset.close()


@app.command()
def facets(
    data: DataOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List the values available for each facet."""
    dataset = _open_dataset(data)
    try:
        values = collect_facet_values(dataset.root)
        if output_json:
            typer.echo(json.dumps(asdict(values), indent=2))
            return

        for label, entries in (
            ("Types", values.types),
            ("Tags", values.tags),
            ("Authors", values.authors),
            ("Locations", values.locations),
        ):
            typer.echo(f"{label} ({len(entries)}):")
            for entry in entries:
                typer.echo(f"  {entry}")
        if values.earliest_date:
            typer.echo(f"Dates: {values.earliest_date} to {values.latest_date}")
    finally:
        dataset.close()


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from solution_map.mcp.server import run_mcp_server

    run_mcp_server()
