"""Tests for boolean query evaluation."""

from solution_map.config import FUZZY_LOOSE, FUZZY_PHRASE
from solution_map.core.importer.loader import Dataset
from solution_map.core.search.evaluator import ResultSet, evaluate, search_term
from solution_map.core.search.query import Term
from tests.unit.fakes import FakeTextIndex, match


def test_duplicate_matches_keep_highest_score() -> None:
    results = ResultSet(
        [match(1, "Solar", 0.5), match(1, "Solar", 2.0), match(1, "Solar", 1.0)]
    )
    assert len(results) == 1
    assert next(iter(results)).score == 2.0


def test_result_set_operations() -> None:
    left = ResultSet([match(1, "Solar"), match(2, "Wind")])
    right = ResultSet([match(2, "Wind"), match(3, "Battery")])

    assert left.union(right).ids() == {1, 2, 3}
    assert left.intersect(right).ids() == {2}
    assert left.subtract(right).ids() == {1}


def test_intersect_keeps_own_scores() -> None:
    left = ResultSet([match(1, "Solar", 3.0)])
    right = ResultSet([match(1, "Solar", 9.0)])
    assert next(iter(left.intersect(right))).score == 3.0


def test_names_skip_blank_and_node_ids() -> None:
    results = ResultSet([match(1, "Solar"), match(2, "  ")])
    assert results.names() == {"Solar"}
    assert results.node_ids() == {"n1", "n2"}


def test_ranked_by_descending_score() -> None:
    results = ResultSet([match(1, "A", 1.0), match(2, "B", 3.0), match(3, "C", 1.0)])
    assert [m.document_id for m in results.ranked()] == [2, 1, 3]


def test_contains_document_id() -> None:
    results = ResultSet([match(7, "Seven")])
    assert 7 in results
    assert 8 not in results


def test_loose_term_searches_by_prefix_and_fuzzy() -> None:
    index = FakeTextIndex()
    search_term(Term("solar"), index)
    assert index.calls == [
        (
            "solar",
            {
                "prefix": True,
                "fuzzy": FUZZY_LOOSE,
                "combine_with": "AND",
                "phrase_mode": False,
            },
        )
    ]


def test_phrase_term_searches_in_phrase_mode() -> None:
    index = FakeTextIndex()
    search_term(Term("rooftop solar", phrase=True), index)
    assert index.calls == [
        (
            "rooftop solar",
            {
                "prefix": False,
                "fuzzy": FUZZY_PHRASE,
                "combine_with": "AND",
                "phrase_mode": True,
            },
        )
    ]


def test_empty_term_does_not_search() -> None:
    index = FakeTextIndex()
    assert len(search_term(Term(""), index)) == 0
    assert index.calls == []


def test_index_failure_degrades_to_empty() -> None:
    index = FakeTextIndex()
    index.fail_on("broken")
    assert len(search_term(Term("broken"), index)) == 0


def test_or_unions_and_keeps_max_score() -> None:
    index = FakeTextIndex()
    index.add_response("solar", [match(1, "Solar", 1.0), match(3, "Energy", 0.2)])
    index.add_response("wind", [match(2, "Wind", 1.0), match(3, "Energy", 0.9)])

    results = evaluate("solar OR wind", index)

    assert results.ids() == {1, 2, 3}
    energy = next(m for m in results if m.document_id == 3)
    assert energy.score == 0.9


def test_and_intersects() -> None:
    index = FakeTextIndex()
    index.add_response("solar", [match(1, "Solar"), match(3, "Energy")])
    index.add_response("energy", [match(3, "Energy"), match(4, "Root")])

    assert evaluate("solar AND energy", index).ids() == {3}


def test_and_stops_once_empty() -> None:
    index = FakeTextIndex()
    index.add_response("wind", [match(2, "Wind")])

    assert len(evaluate("missing AND wind AND storage", index)) == 0
    assert index.searched_terms == ["missing"]


def test_not_subtracts_exclude() -> None:
    index = FakeTextIndex()
    index.add_response("renewable", [match(1, "Solar"), match(2, "Wind")])
    index.add_response("wind", [match(2, "Wind")])

    assert evaluate("renewable NOT wind", index).ids() == {1}


def test_leading_not_uses_every_document() -> None:
    index = FakeTextIndex(universe=[match(1, "Solar", 0.0), match(2, "Wind", 0.0)])
    index.add_response("wind", [match(2, "Wind")])

    assert evaluate("NOT wind", index).ids() == {1}
    assert index.universe_calls == 1


def test_not_without_exclude_is_empty() -> None:
    index = FakeTextIndex(universe=[match(1, "Solar")])
    index.add_response("solar", [match(1, "Solar")])

    assert len(evaluate("solar NOT", index)) == 0
    assert len(evaluate("NOT", index)) == 0


def test_lowercase_operators() -> None:
    index = FakeTextIndex()
    index.add_response("solar", [match(1, "Solar")])
    index.add_response("wind", [match(2, "Wind")])

    assert evaluate("solar or wind", index).ids() == {1, 2}


def test_quoted_operator_is_searched_as_phrase() -> None:
    index = FakeTextIndex()
    index.add_response("solar OR wind", [match(5, "Hybrid")])

    assert evaluate('"solar OR wind"', index).ids() == {5}
    assert index.calls[0][1]["phrase_mode"] is True


def test_failing_operand_counts_as_no_match() -> None:
    index = FakeTextIndex()
    index.add_response("solar", [match(1, "Solar")])
    index.fail_on("broken")

    assert evaluate("solar OR broken", index).ids() == {1}
    assert len(evaluate("solar AND broken", index)) == 0


def test_blank_query_is_empty() -> None:
    index = FakeTextIndex()
    assert len(evaluate("   ", index)) == 0
    assert len(evaluate("", index)) == 0
    assert index.calls == []


def test_or_is_superset_of_and(dataset: Dataset) -> None:
    union = evaluate("solar OR renewable", dataset.index).ids()
    both = evaluate("solar AND renewable", dataset.index).ids()
    assert both <= union
    assert both


def test_not_result_is_disjoint_from_exclude(dataset: Dataset) -> None:
    remaining = evaluate("renewable NOT wind", dataset.index)
    excluded = evaluate("wind", dataset.index)

    assert remaining.names() == {"Solar"}
    assert remaining.ids().isdisjoint(excluded.ids())


def test_and_of_disjoint_branches_is_empty(dataset: Dataset) -> None:
    assert len(evaluate("solar AND battery", dataset.index)) == 0
