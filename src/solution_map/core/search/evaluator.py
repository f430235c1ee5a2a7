"""Evaluate boolean search queries against a text index."""

from collections.abc import Iterable, Iterator
from itertools import chain

from loguru import logger

from solution_map.config import FUZZY_LOOSE, FUZZY_PHRASE
from solution_map.core.search.query import And, Expression, Not, Or, Term, parse_query
from solution_map.models.node import SearchMatch
from solution_map.protocols import TextIndex


class ResultSet:
    """Search matches deduplicated by document id; the higher score wins."""

    def __init__(self, matches: Iterable[SearchMatch] = ()) -> None:
        self._matches: dict[int, SearchMatch] = {}
        for match in matches:
            self.add(match)

    def add(self, match: SearchMatch) -> None:
        current = self._matches.get(match.document_id)
        if current is None or current.score < match.score:
            self._matches[match.document_id] = match

    def __len__(self) -> int:
        return len(self._matches)

    def __iter__(self) -> Iterator[SearchMatch]:
        return iter(self._matches.values())

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._matches

    def __repr__(self) -> str:
        return f"ResultSet({len(self)} matches)"

    def union(self, other: "ResultSet") -> "ResultSet":
        return ResultSet(chain(self, other))

    def intersect(self, other: "ResultSet") -> "ResultSet":
        """Keep this set's matches whose ids are also in other."""
        return ResultSet(m for m in self if m.document_id in other)

    def subtract(self, other: "ResultSet") -> "ResultSet":
        return ResultSet(m for m in self if m.document_id not in other)

    def ids(self) -> set[int]:
        return set(self._matches)

    def node_ids(self) -> set[str]:
        """Stable ids of the matched nodes, used to filter the tree."""
        return {m.node_id for m in self}

    def names(self) -> set[str]:
        """Distinct non-empty names of the matched nodes."""
        return {m.name for m in self if m.name and m.name.strip()}

    def ranked(self) -> list[SearchMatch]:
        """Matches by descending score; ties keep insertion order."""
        return sorted(self, key=lambda m: m.score, reverse=True)


def search_term(term: Term, text_index: TextIndex) -> ResultSet:
    """Search a single term; index failures degrade to an empty set."""
    if not term.text:
        return ResultSet()

    try:
        if term.phrase:
            matches = text_index.search(
                term.text, prefix=False, fuzzy=FUZZY_PHRASE, combine_with="AND", phrase_mode=True
            )
        else:
            matches = text_index.search(
                term.text, prefix=True, fuzzy=FUZZY_LOOSE, combine_with="AND"
            )
    except Exception:
        logger.opt(exception=True).warning(
            "Search for {!r} failed, treating as no match", term.text
        )
        return ResultSet()

    logger.debug("Term {!r} (phrase={}) matched {} documents", term.text, term.phrase, len(matches))
    return ResultSet(matches)


def _evaluate(expression: Expression, text_index: TextIndex) -> ResultSet:
    if isinstance(expression, Term):
        return search_term(expression, text_index)

    if isinstance(expression, Or):
        results = ResultSet()
        for operand in expression.operands:
            results = results.union(_evaluate(operand, text_index))
        return results

    if isinstance(expression, And):
        results = _evaluate(expression.operands[0], text_index)
        for operand in expression.operands[1:]:
            if not results:
                break
            results = results.intersect(_evaluate(operand, text_index))
        return results

    if isinstance(expression, Not):
        if not expression.exclude.text:
            logger.debug("NOT without an exclude term, no results")
            return ResultSet()
        if expression.include is None:
            include = ResultSet(text_index.all_documents())
        else:
            include = _evaluate(expression.include, text_index)
        return include.subtract(search_term(expression.exclude, text_index))

    msg = f"Unknown query expression: {expression!r}"
    raise TypeError(msg)


def evaluate(query: str, text_index: TextIndex) -> ResultSet:
    """Evaluate a boolean query string into a result set.

    Never raises: any failure yields an empty result set.
    """
    if not query or not query.strip():
        return ResultSet()

    try:
        expression = parse_query(query)
        logger.debug("Parsed {!r} as {!r}", query, expression)
        results = _evaluate(expression, text_index)
    except Exception:
        logger.opt(exception=True).warning("Query {!r} failed, treating as no results", query)
        return ResultSet()

    logger.debug("Query {!r} matched {} documents", query, len(results))
    return results
