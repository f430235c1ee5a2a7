"""Apply search and facet filters to a solution tree in one pass."""

from datetime import date
from functools import partial

from loguru import logger

from solution_map.config import ALL
from solution_map.core.filter.annotate import (
    AUTHOR,
    DATE,
    LOCATION,
    SEARCH,
    TAG,
    TYPE,
    annotate_matches,
)
from solution_map.core.filter.facets import (
    ItemPredicate,
    NodePredicate,
    author_filter,
    date_range_predicate,
    item_author_matches,
    item_in_date_range,
    item_location_matches,
    location_filter,
    parse_date_bound,
    tag_filter,
    type_filter,
)
from solution_map.core.filter.tree_filter import filter_by_search, filter_tree
from solution_map.core.search.evaluator import evaluate
from solution_map.models.node import Node
from solution_map.protocols import TextIndex


def _active_facets(
    *,
    type_value: str,
    tag: str,
    author: str,
    location: str,
    date_from: str | date | None,
    date_to: str | date | None,
) -> list[tuple[str, NodePredicate, ItemPredicate | None]]:
    facets: list[tuple[str, NodePredicate, ItemPredicate | None]] = []
    if type_value != ALL:
        facets.append((TYPE, partial(type_filter, value=type_value), None))
    if tag != ALL:
        facets.append((TAG, partial(tag_filter, value=tag), None))
    if author != ALL:
        facets.append(
            (
                AUTHOR,
                partial(author_filter, value=author),
                partial(item_author_matches, value=author),
            )
        )
    if location != ALL:
        facets.append(
            (
                LOCATION,
                partial(location_filter, value=location),
                partial(item_location_matches, value=location),
            )
        )
    start = parse_date_bound(date_from, "from")
    end = parse_date_bound(date_to, "to")
    if start is not None or end is not None:
        facets.append(
            (
                DATE,
                date_range_predicate(start, end),
                partial(item_in_date_range, start=start, end=end),
            )
        )
    return facets


def get_filtered_data(
    tree: Node,
    text_index: TextIndex | None = None,
    *,
    query: str = "",
    type_value: str = ALL,
    tag: str = ALL,
    author: str = ALL,
    location: str = ALL,
    date_from: str | date | None = None,
    date_to: str | date | None = None,
) -> Node | None:
    """Search, then filter by each active facet, then annotate the survivors.

    Facets compose as an intersection. A facet set to ALL (or a date range
    with no parsable bound) is inactive. The author, location and date
    facets also narrow each kept node's content items to the matching ones;
    search never does. With nothing active the input tree is returned
    untouched.

    Args:
        tree: Source tree; it is never mutated.
        text_index: Index built from the tree's documents; required with a query.
        query: Boolean search query.
        type_value: Node type to keep.
        tag: Node tag to keep.
        author: Content item author to keep.
        location: Content item location to keep.
        date_from: Inclusive lower bound for content item dates.
        date_to: Inclusive upper bound for content item dates.

    Returns:
        The pruned, annotated tree, or None when no node survives.
    """
    stages: list[tuple[str, NodePredicate]] = []
    data: Node | None = tree

    if query and query.strip():
        if text_index is None:
            msg = "A text index is required to apply a search query"
            raise ValueError(msg)
        matched_ids = evaluate(query, text_index).node_ids()
        logger.debug("Search {!r} matched {} nodes", query, len(matched_ids))
        data = filter_by_search(tree, matched_ids)
        if data is None:
            logger.debug("Search {!r} left nothing", query)
            return None
        stages.append((SEARCH, lambda node: node.node_id in matched_ids))

    for facet, predicate, item_predicate in _active_facets(
        type_value=type_value,
        tag=tag,
        author=author,
        location=location,
        date_from=date_from,
        date_to=date_to,
    ):
        data = filter_tree(data, predicate, item_predicate=item_predicate)
        if data is None:
            logger.debug("Facet {} left nothing", facet)
            return None
        stages.append((facet, predicate))

    for facet, predicate in stages:
        annotate_matches(data, predicate, facet)

    return data
