"""Tree summaries: node counts, matched names and available facet values."""

from collections.abc import Iterator
from datetime import date

from solution_map.core.filter.annotate import SEARCH, is_direct_match
from solution_map.core.filter.facets import parse_loose_date
from solution_map.models.node import FacetValues, Node


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield every node in the tree, depth-first, parents before children."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def count_nodes(tree: Node | None) -> int:
    """Count every node in a tree; an empty result counts as zero."""
    if tree is None:
        return 0
    return sum(1 for _ in iter_nodes(tree))


def collect_facet_values(tree: Node) -> FacetValues:
    """Gather the distinct values each facet can be filtered on.

    Values come from the same fields the facet predicates test: node types
    and tags, and content item authors and locations.
    """
    types: set[str] = set()
    tags: set[str] = set()
    authors: set[str] = set()
    locations: set[str] = set()
    dates: list[date] = []

    for node in iter_nodes(tree):
        if node.type and node.type.strip():
            types.add(node.type)
        tags.update(tag for tag in node.tags if tag.strip())
        for item in node.content_items:
            if item.author.strip():
                authors.add(item.author)
            if item.location.strip():
                locations.add(item.location)
            item_date = parse_loose_date(item.date)
            if item_date is not None:
                dates.append(item_date)

    return FacetValues(
        types=tuple(sorted(types)),
        tags=tuple(sorted(tags)),
        authors=tuple(sorted(authors)),
        locations=tuple(sorted(locations)),
        earliest_date=min(dates).isoformat() if dates else None,
        latest_date=max(dates).isoformat() if dates else None,
    )


def matched_names(tree: Node | None, facet: str = SEARCH) -> list[str]:
    """Sorted distinct names of the nodes that matched a facet directly.

    Only nodes still in the tree count, so facets applied after the search
    are reflected.
    """
    if tree is None:
        return []
    return sorted(
        {
            node.name
            for node in iter_nodes(tree)
            if node.name.strip() and is_direct_match(node, facet)
        }
    )
