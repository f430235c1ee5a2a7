"""Serialize annotated trees for callers."""

from dataclasses import asdict
from typing import Any

from solution_map.core.filter.annotate import AUTHOR, DATE, LOCATION, SEARCH, TAG, TYPE
from solution_map.models.node import Node

# facet -> (direct-match key, descendant-match key)
ANNOTATION_KEYS: dict[str, tuple[str, str]] = {
    SEARCH: ("isSearchMatch", "hasMatchedDescendants"),
    TYPE: ("isTypeMatch", "hasTypeMatchedDescendants"),
    TAG: ("isTagMatch", "hasTagMatchedDescendants"),
    AUTHOR: ("isAuthorMatch", "hasAuthorMatchedDescendants"),
    LOCATION: ("isLocationMatch", "hasLocationMatchedDescendants"),
    DATE: ("isDateMatch", "hasDateMatchedDescendants"),
}


def tree_to_dict(node: Node, *, max_depth: int | None = None) -> dict[str, Any]:
    """Convert a tree to plain dicts with camelCase annotation flags.

    Args:
        node: Root of the tree.
        max_depth: Levels below the root to include (None = unlimited). Nodes
            at the boundary report childCount instead of children.
    """
    entry: dict[str, Any] = {
        "id": node.node_id,
        "name": node.name,
        "type": node.type,
        "description": node.description,
        "tags": list(node.tags),
        "contentItems": [
            {**asdict(item), "tags": list(item.tags)} for item in node.content_items
        ],
    }

    for facet, annotation in node.annotations.items():
        match_key, descendants_key = ANNOTATION_KEYS[facet]
        entry[match_key] = annotation.is_match
        entry[descendants_key] = annotation.has_matched_descendants

    if max_depth is not None and max_depth <= 0:
        entry["childCount"] = len(node.children)
    else:
        next_depth = None if max_depth is None else max_depth - 1
        entry["children"] = [tree_to_dict(c, max_depth=next_depth) for c in node.children]
    return entry
