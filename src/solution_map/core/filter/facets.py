"""Per-node facet predicates.

Each predicate looks only at the node's own fields, never at descendants.
Values are compared exactly and case-sensitively. The author, location and
date facets also have per-item predicates, used to narrow the content items
of the nodes they keep.
"""

import re
from collections.abc import Callable
from datetime import date, datetime

from loguru import logger

from solution_map.models.node import ContentItem, Node

NodePredicate = Callable[[Node], bool]
ItemPredicate = Callable[[ContentItem], bool]

_PARTIAL_ISO_DATE = re.compile(r"^(\d{4})(?:-(\d{1,2}))?(?:-(\d{1,2}))?$")

_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %Y",
    "%b %Y",
)


def parse_loose_date(value: str | date | None) -> date | None:
    """Parse YYYY, YYYY-MM, YYYY-MM-DD and a few common formats.

    Missing month and day default to 1, so "2022" is 2022-01-01.
    Returns None for anything unparsable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    m = _PARTIAL_ISO_DATE.match(text)
    if m:
        year, month, day = m.groups()
        try:
            return date(int(year), int(month or 1), int(day or 1))
        except ValueError:
            return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def type_filter(node: Node, value: str) -> bool:
    return node.type == value


def tag_filter(node: Node, value: str) -> bool:
    return value in node.tags


def item_author_matches(item: ContentItem, value: str) -> bool:
    return item.author == value


def item_location_matches(item: ContentItem, value: str) -> bool:
    return item.location == value


def item_in_date_range(
    item: ContentItem, start: date | None = None, end: date | None = None
) -> bool:
    """True if the item has a parsable date within [start, end]."""
    item_date = parse_loose_date(item.date)
    if item_date is None:
        return False
    if start is not None and item_date < start:
        return False
    if end is not None and item_date > end:
        return False
    return True


def author_filter(node: Node, value: str) -> bool:
    """True if any attached content item has this author."""
    return any(item_author_matches(item, value) for item in node.content_items)


def location_filter(node: Node, value: str) -> bool:
    """True if any attached content item has this location."""
    return any(item_location_matches(item, value) for item in node.content_items)


def parse_date_bound(value: str | date | None, label: str) -> date | None:
    """Parse a range bound; an unparsable bound is unset, with a warning."""
    if value is None or value == "":
        return None
    parsed = parse_loose_date(value)
    if parsed is None:
        logger.warning("Ignoring unparsable date bound {}={!r}", label, value)
    return parsed


def date_range_filter(
    node: Node,
    date_from: str | date | None = None,
    date_to: str | date | None = None,
) -> bool:
    """True if any content item has a parsable date within [date_from, date_to].

    Either bound may be omitted. Items without a parsable date never match.
    """
    start = parse_date_bound(date_from, "from")
    end = parse_date_bound(date_to, "to")
    return any(item_in_date_range(item, start, end) for item in node.content_items)


def date_range_predicate(start: date | None, end: date | None) -> NodePredicate:
    """Bind already parsed bounds into a node predicate."""
    return lambda node: any(item_in_date_range(item, start, end) for item in node.content_items)
