"""Render solution trees as markdown outlines."""

import io

from solution_map.core.filter.annotate import is_direct_match
from solution_map.models.node import Node


def _is_highlighted(node: Node) -> bool:
    return any(is_direct_match(node, facet) for facet in node.annotations)


def render_tree_as_markdown(node: Node, *, max_depth: int | None = None) -> str:
    """Render a node and its descendants as an indented bullet list.

    Direct matches are bold. Nodes cut off by max_depth get a truncation line.

    Args:
        node: The root node to start rendering from.
        max_depth: Max levels below the root to include (None = unlimited).

    Returns:
        Markdown string with bullet-list hierarchy.
    """
    out = io.StringIO()
    stack: list[tuple[Node, int]] = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        indent = "    " * depth

        name = current.name or "(unnamed)"
        label = f"**{name}**" if _is_highlighted(current) else name
        details = []
        if current.type:
            details.append(current.type)
        if current.content_items:
            noun = "item" if len(current.content_items) == 1 else "items"
            details.append(f"{len(current.content_items)} {noun}")
        suffix = f" ({', '.join(details)})" if details else ""
        out.write(f"{indent}- {label}{suffix}\n")

        if max_depth is not None and depth == max_depth:
            if current.children:
                noun = "child" if len(current.children) == 1 else "children"
                out.write(f"{indent}    - ... ({len(current.children)} more {noun})\n")
            continue

        for child in reversed(current.children):
            stack.append((child, depth + 1))

    return out.getvalue()
