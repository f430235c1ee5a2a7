"""Rebuild pruned copies of a solution tree."""

from solution_map.core.filter.facets import ItemPredicate, NodePredicate
from solution_map.models.node import Node


def reattach_original_children(node: Node) -> Node:
    """Copy a directly matched node together with its full original subtree.

    The subtree is copied so later annotation never touches the source tree.
    """
    return node.deep_copy()


def filter_tree(
    node: Node,
    predicate: NodePredicate,
    *,
    keep_children_of_matches: bool = False,
    item_predicate: ItemPredicate | None = None,
) -> Node | None:
    """Return a pruned copy of the tree, or None if nothing survives.

    A node survives if it matches the predicate or any descendant survives;
    its children are replaced by the surviving children. Input nodes are
    never mutated.

    Args:
        node: Root of the (sub)tree to filter.
        predicate: Test applied to each node's own fields.
        keep_children_of_matches: When a node matches but none of its
            children survive, keep its original children instead of an
            empty list. Used by search only.
        item_predicate: When given, every surviving copy keeps only the
            content items that pass it. Used by the content item facets.
    """
    self_match = predicate(node)

    surviving: list[Node] = []
    for child in node.children:
        filtered = filter_tree(
            child,
            predicate,
            keep_children_of_matches=keep_children_of_matches,
            item_predicate=item_predicate,
        )
        if filtered is not None:
            surviving.append(filtered)

    items = None
    if item_predicate is not None:
        items = tuple(item for item in node.content_items if item_predicate(item))

    if surviving:
        return node.copy_with(children=surviving, content_items=items)
    if self_match and keep_children_of_matches:
        return reattach_original_children(node)
    if self_match:
        return node.copy_with(children=[], content_items=items)
    return None


def filter_by_search(node: Node, matched_ids: set[str]) -> Node | None:
    """Keep nodes whose id was matched by a search, plus their ancestors."""
    return filter_tree(
        node,
        lambda n: n.node_id in matched_ids,
        keep_children_of_matches=True,
    )
