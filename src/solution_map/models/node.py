"""Domain models for the solution map."""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class ContentItem:
    """An article, resource or solution entry attached to a node."""

    title: str = ""
    url: str = ""
    author: str = ""
    location: str = ""
    date: str = ""
    type: str = ""
    tags: tuple[str, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class MatchAnnotation:
    """Match provenance for one facet on one surviving node.

    is_match also holds for ancestors of a match; direct is set only when the
    node itself satisfied the facet.
    """

    is_match: bool
    has_matched_descendants: bool
    direct: bool = False


@dataclass
class Node:
    """A category or topic in the solution hierarchy."""

    node_id: str
    name: str
    type: str | None = None
    description: str = ""
    tags: tuple[str, ...] = ()
    content_items: tuple[ContentItem, ...] = ()
    children: list[Node] = field(default_factory=list)
    annotations: dict[str, MatchAnnotation] = field(default_factory=dict)

    def copy_with(
        self,
        *,
        children: list[Node],
        content_items: tuple[ContentItem, ...] | None = None,
    ) -> Node:
        """Return a shallow copy with new children and no annotations.

        Content items are kept unless a narrowed tuple is given.
        """
        if content_items is None:
            content_items = self.content_items
        return replace(
            self, children=children, content_items=content_items, annotations={}
        )

    def deep_copy(self) -> Node:
        """Return a copy of the whole subtree, without annotations."""
        return self.copy_with(children=[child.deep_copy() for child in self.children])


@dataclass(frozen=True)
class Document:
    """A flattened, searchable projection of one node."""

    id: int
    node_id: str
    name: str
    path_string: str
    aggregated_text: str
    type: str = ""
    tags: str = ""


@dataclass(frozen=True)
class SearchMatch:
    """A text index hit."""

    document_id: int
    node_id: str
    name: str
    score: float = 0.0


@dataclass(frozen=True)
class FacetValues:
    """Distinct values available for each facet in a tree."""

    types: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    authors: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()
    earliest_date: str | None = None
    latest_date: str | None = None
