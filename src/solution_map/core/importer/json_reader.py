"""Parse raw solution-map JSON into domain models."""

from collections import deque
from typing import Any

from solution_map.models.node import ContentItem, Node

SYNTHETIC_ROOT_NAME = "All solutions"

# Keys the content item array may live under, first match wins.
_ITEM_KEYS = ("url_data", "urls", "content", "items")


def _first(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_tags(value: Any) -> tuple[str, ...]:
    """Accept a list of tags or a comma-separated string."""
    if not value:
        return ()
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, list | tuple):
        parts = [str(v) for v in value if v is not None]
    else:
        parts = [str(value)]
    return tuple(p.strip() for p in parts if p.strip())


def parse_content_item(raw: dict[str, Any]) -> ContentItem:
    """Normalize one raw content item, resolving the field-name aliases."""
    return ContentItem(
        title=_as_text(_first(raw, "title", "name")),
        url=_as_text(raw.get("url")),
        author=_as_text(_first(raw, "author", "creator", "source")),
        location=_as_text(_first(raw, "location", "country", "region")),
        date=_as_text(raw.get("date")),
        type=_as_text(_first(raw, "type_", "type", "category")),
        tags=_as_tags(_first(raw, "tags", "keywords", "categories")),
        description=_as_text(_first(raw, "description", "abstract")),
    )


def _content_items(raw: dict[str, Any]) -> tuple[ContentItem, ...]:
    items = _first(raw, *_ITEM_KEYS)
    if not isinstance(items, list):
        return ()
    return tuple(parse_content_item(item) for item in items if isinstance(item, dict))


def _make_node(raw: dict[str, Any], node_id: str) -> Node:
    node_type = _as_text(raw.get("type"))
    return Node(
        node_id=node_id,
        name=_as_text(_first(raw, "name", "entity_name")),
        type=node_type or None,
        description=_as_text(raw.get("description")),
        tags=_as_tags(raw.get("tags")),
        content_items=_content_items(raw),
    )


def parse_tree(data: dict[str, Any] | list[Any]) -> Node:
    """Parse a raw dataset into a Node tree with stable path-derived ids.

    Args:
        data: The raw dataset, either a root dict or a list of top-level nodes.

    Returns:
        The root Node. Ids are slash-joined sibling indices ("0", "0/1", ...).
    """
    if isinstance(data, list):
        data = {"name": SYNTHETIC_ROOT_NAME, "children": data}
    if not isinstance(data, dict):
        msg = f"Dataset root must be an object or a list, got {type(data).__name__}"
        raise ValueError(msg)

    root = _make_node(data, "0")

    # BFS; siblings are appended in source order.
    todo: deque[tuple[dict[str, Any], Node]] = deque([(data, root)])
    while todo:
        raw, node = todo.popleft()
        raw_children = raw.get("children") or []
        if not isinstance(raw_children, list):
            msg = f"'children' of {node.name!r} must be a list"
            raise ValueError(msg)

        for i, raw_child in enumerate(raw_children):
            if not isinstance(raw_child, dict):
                msg = f"Child {i} of {node.name!r} is not an object"
                raise ValueError(msg)
            child = _make_node(raw_child, f"{node.node_id}/{i}")
            node.children.append(child)
            todo.append((raw_child, child))

    return root
