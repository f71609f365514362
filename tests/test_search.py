"""Tests for keyword search."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from docindex.errors import EmptyQueryError, InvalidArgumentError, ValidationError
from docindex.index.indexer import Indexer
from docindex.index.search import SearchResult, Searcher
from docindex.index.storage import DocumentStore
from docindex.models import Document
from docindex.utils.text import tokenize

RECORDS = [
    {"location": "a", "title": "Point Vortex", "category": "Type", "text": "circulation"},
    {"location": "b", "title": "Blob", "category": "Type", "text": "circulation radius"},
    {
        "location": "c",
        "title": "Sheet",
        "category": "section",
        "text": "A vortex sheet; the sheet strength varies. Vortex.",
    },
    {"location": "d", "title": "Home", "category": "page", "text": ""},
]


@pytest.fixture
def searcher() -> Searcher:
    return Searcher.from_records(RECORDS)


def _locations(results: list[SearchResult]) -> list[str]:
    return [result.location for result in results]


class TestSearchResult:
    """Test SearchResult dataclass."""

    def test_create_search_result(self) -> None:
        """Should expose the document fields used for display."""
        document = Document(id=0, location="index.html#", title="Home", category="page")
        result = SearchResult(document=document, score=0.85)

        assert result.location == "index.html#"
        assert result.title == "Home"
        assert result.score == 0.85

    def test_to_dict(self) -> None:
        """Should serialize to the location/title/score shape."""
        result = SearchResult(document=Document(id=1, location="b", title="Blob"), score=1.5)

        assert result.to_dict() == {"location": "b", "title": "Blob", "score": 1.5}


class TestScoring:
    """Test ranking and scores."""

    def test_single_term_scores(self, searcher: Searcher) -> None:
        """Score is term frequency times idf."""
        results = searcher.search("vortex")
        idf = math.log(4 / 3)

        assert _locations(results) == ["c", "a"]
        assert results[0].score == pytest.approx(2 * idf)
        assert results[1].score == pytest.approx(idf)

    def test_or_semantics(self, searcher: Searcher) -> None:
        """A document matching any query term is a candidate."""
        results = searcher.search("vortex blob")

        assert _locations(results) == ["b", "c", "a"]
        assert results[0].score == pytest.approx(math.log(2))

    def test_scores_sum_over_terms(self, searcher: Searcher) -> None:
        """Scores add up across matched query terms."""
        results = searcher.search("sheet vortex")

        assert results[0].location == "c"
        assert results[0].score == pytest.approx(3 * math.log(2) + 2 * math.log(4 / 3))

    def test_ties_ordered_by_document_id(self, searcher: Searcher) -> None:
        """Equal scores keep ascending document id order."""
        results = searcher.search("circulation")

        assert _locations(results) == ["a", "b"]
        assert results[0].score == results[1].score

    def test_repeated_query_terms_count_once(self, searcher: Searcher) -> None:
        """Duplicated query terms do not inflate scores."""
        assert searcher.search("vortex Vortex vortex") == searcher.search("vortex")

    def test_case_insensitive_query(self, searcher: Searcher) -> None:
        """Queries go through the same normalization as documents."""
        assert searcher.search("BLOB") == searcher.search("blob")

    def test_term_in_every_document_floored(self) -> None:
        """With the default floor a ubiquitous term scores zero, not negative."""
        searcher = Searcher.from_records(RECORDS[:2])
        results = searcher.search("circulation")

        assert _locations(results) == ["a", "b"]
        assert [result.score for result in results] == [0.0, 0.0]

    def test_raw_idf_without_floor(self) -> None:
        """idf_floor=None applies ln(N / (1 + df)) verbatim."""
        searcher = Searcher.from_records(RECORDS[:2], idf_floor=None)
        results = searcher.search("circulation")

        assert _locations(results) == ["a", "b"]
        assert results[0].score == pytest.approx(math.log(2 / 3))
        assert results[1].score == pytest.approx(math.log(2 / 3))

    def test_idf_absent_term(self, searcher: Searcher) -> None:
        """Terms absent from the corpus weigh nothing."""
        assert searcher.idf("nonexistent") == 0.0

    def test_monotonic_in_term_frequency(self) -> None:
        """Adding an occurrence of a query term never lowers the score."""
        for query in ("vortex", "circulation", "vortex circulation"):
            before = {r.location: r.score for r in Searcher.from_records(RECORDS).search(query)}

            records = [dict(record) for record in RECORDS]
            records[0]["text"] += " vortex circulation"
            after = {r.location: r.score for r in Searcher.from_records(records).search(query)}

            assert after["a"] >= before["a"]


class TestQueryContract:
    """Test argument handling and edge cases."""

    def test_nonexistent_term(self, searcher: Searcher) -> None:
        """Unknown terms give no results rather than an error."""
        assert searcher.search("nonexistent") == []

    @pytest.mark.parametrize("query", ["", "   ", "a", "!! ? --"])
    def test_empty_query(self, searcher: Searcher, query: str) -> None:
        """Queries without searchable terms are rejected."""
        with pytest.raises(EmptyQueryError):
            searcher.search(query)

    def test_limit(self, searcher: Searcher) -> None:
        """limit keeps the highest-scored results."""
        results = searcher.search("vortex", limit=1)

        assert _locations(results) == ["c"]

    def test_limit_larger_than_results(self, searcher: Searcher) -> None:
        """A generous limit returns every candidate."""
        assert len(searcher.search("vortex", limit=50)) == 2

    @pytest.mark.parametrize("limit", [0, -1])
    def test_invalid_limit(self, searcher: Searcher, limit: int) -> None:
        """Non-positive limits are rejected."""
        with pytest.raises(InvalidArgumentError):
            searcher.search("vortex", limit=limit)

    def test_invalid_limit_is_value_error(self, searcher: Searcher) -> None:
        """Callers can catch the standard ValueError."""
        with pytest.raises(ValueError):
            searcher.search("vortex", limit=0)

    def test_category_filter(self, searcher: Searcher) -> None:
        """Only documents in the requested category are returned."""
        results = searcher.search("vortex", category="Type")

        assert _locations(results) == ["a"]

    def test_category_filter_with_limit(self, searcher: Searcher) -> None:
        """The limit applies after filtering."""
        results = searcher.search("circulation vortex", limit=1, category="Type")

        assert _locations(results) == ["a"]

    def test_empty_corpus(self) -> None:
        """Searching an empty corpus returns nothing."""
        assert Searcher.from_records([]).search("vortex") == []


class TestProperties:
    """Corpus-wide properties of the index."""

    def test_every_token_is_retrievable(self, searcher: Searcher) -> None:
        """Each indexed token finds the documents that contain it."""
        for document in searcher.store.all():
            for token in tokenize(f"{document.title} {document.text}"):
                assert document.location in _locations(searcher.search(token))

    def test_deterministic(self) -> None:
        """Independent builds answer identically."""
        first = Searcher.from_records(RECORDS)
        second = Searcher.from_records(RECORDS)

        for query in ("vortex", "circulation radius", "sheet blob home"):
            assert first.search(query) == second.search(query)
            assert first.search(query) == first.search(query)

    def test_queries_do_not_mutate_index(self, searcher: Searcher) -> None:
        """Searching leaves the index unchanged."""
        terms = searcher.index.terms()
        postings = [searcher.index.postings(term) for term in terms]

        searcher.search("vortex sheet", limit=1)

        assert searcher.index.terms() == terms
        assert [searcher.index.postings(term) for term in terms] == postings

    def test_concurrent_readers(self, searcher: Searcher) -> None:
        """Concurrent queries see the same results as sequential ones."""
        queries = ["vortex", "circulation", "sheet blob", "radius"] * 25
        expected = [searcher.search(query) for query in queries]

        with ThreadPoolExecutor(max_workers=8) as pool:
            actual = list(pool.map(searcher.search, queries))

        assert actual == expected


class TestSearcherConstruction:
    """Test building searchers."""

    def test_from_store_and_index(self) -> None:
        """A searcher can wrap an existing store and index."""
        store = DocumentStore.load(RECORDS)
        searcher = Searcher(Indexer().build(store), store)

        assert _locations(searcher.search("blob")) == ["b"]

    def test_from_records_propagates_validation(self) -> None:
        """Invalid corpora never produce a searcher."""
        with pytest.raises(ValidationError):
            Searcher.from_records(RECORDS + [{"location": "a"}])

    def test_rebuild_swaps_reference(self, searcher: Searcher) -> None:
        """Rebuilding creates a new searcher; the old one is untouched."""
        rebuilt = Searcher.from_records(
            RECORDS + [{"location": "e", "title": "Blob", "text": "blob sheet"}]
        )

        assert _locations(searcher.search("blob")) == ["b"]
        assert _locations(rebuilt.search("blob")) == ["e", "b"]
