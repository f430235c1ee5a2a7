"""Stamp match provenance onto a filtered tree."""

from solution_map.core.filter.facets import NodePredicate
from solution_map.models.node import MatchAnnotation, Node

SEARCH = "search"
TYPE = "type"
TAG = "tag"
AUTHOR = "author"
LOCATION = "location"
DATE = "date"

FACETS = (SEARCH, TYPE, TAG, AUTHOR, LOCATION, DATE)


def annotate_matches(node: Node, predicate: NodePredicate, facet: str) -> bool:
    """Annotate node and its descendants for one facet, in place.

    An ancestor of a match is itself marked as a match; the direct flag
    tells a node that satisfied the predicate from a propagated match.

    Returns:
        True if this node or any descendant matched.
    """
    direct = predicate(node)

    any_descendant = False
    for child in node.children:
        # Every child must be visited, so no short-circuit.
        if annotate_matches(child, predicate, facet):
            any_descendant = True

    node.annotations[facet] = MatchAnnotation(
        is_match=direct or any_descendant,
        has_matched_descendants=any_descendant,
        direct=direct,
    )
    return direct or any_descendant


def is_direct_match(node: Node, facet: str) -> bool:
    """True if the node itself satisfied the facet, whatever its descendants did."""
    annotation = node.annotations.get(facet)
    return annotation is not None and annotation.direct
