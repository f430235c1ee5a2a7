"""Flatten a solution tree into one searchable document per node."""

from loguru import logger

from solution_map.config import PATH_SEPARATOR
from solution_map.models.node import Document, Node


def _aggregate_text(node: Node, path: list[str]) -> str:
    parts: list[str] = [node.name, node.description, " ".join(node.tags)]
    for item in node.content_items:
        parts.extend(
            [item.title, item.description, item.author, item.type, " ".join(item.tags)]
        )
    # Path terms are searchable too.
    parts.append(" ".join(path))
    return " ".join(p.strip() for p in parts if p and p.strip())


def extract_documents(root: Node) -> list[Document]:
    """Walk the tree depth-first and emit one Document per named node.

    A node's aggregated text holds its own name, description and tags, the
    title, description, author, type and tags of every attached content item,
    and its root-to-node breadcrumb. Unnamed nodes emit nothing but their
    children are still visited.
    """
    documents: list[Document] = []

    def visit(node: Node, parent_path: list[str]) -> None:
        path = [*parent_path, node.name]
        if node.name:
            documents.append(
                Document(
                    id=len(documents),
                    node_id=node.node_id,
                    name=node.name,
                    path_string=PATH_SEPARATOR.join(path),
                    aggregated_text=_aggregate_text(node, path),
                    type=node.type or "",
                    tags=" ".join(node.tags),
                )
            )
        for child in node.children:
            visit(child, path)

    visit(root, [])
    logger.debug("Extracted {} documents", len(documents))
    return documents
