"""Tree helpers shared by the tests."""

from solution_map.models.node import Node


def find(tree: Node, name: str) -> Node:
    """Return the first node with this name, depth-first."""
    if tree.name == name:
        return tree
    for child in tree.children:
        try:
            return find(child, name)
        except LookupError:
            continue
    msg = f"No node named {name!r}"
    raise LookupError(msg)


def names(tree: Node | None) -> list[str]:
    """All node names, depth-first."""
    if tree is None:
        return []
    out = [tree.name]
    for child in tree.children:
        out.extend(names(child))
    return out
