"""Keyword search over an inverted index."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from docindex.errors import EmptyQueryError, InvalidArgumentError
from docindex.index.indexer import Indexer, InvertedIndex
from docindex.index.storage import DocumentStore
from docindex.models import Document
from docindex.utils.text import DEFAULT_MIN_TOKEN_LENGTH, tokenize, unique_terms

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchResult:
    document: Document
    score: float

    @property
    def location(self) -> str:
        return self.document.location

    @property
    def title(self) -> str:
        return self.document.title

    def to_dict(self) -> Dict[str, Any]:
        return {"location": self.location, "title": self.title, "score": self.score}


class Searcher:
    """Ranks documents against keyword queries.

    A document matching any query term is a candidate. Its score is the sum,
    over the distinct query terms it contains, of ``tf * idf`` with
    ``idf = ln(N / (1 + df))``. ``idf_floor`` clamps idf from below; pass
    ``None`` to use the raw weight, which turns negative for terms present in
    every document.
    """

    def __init__(
        self,
        index: InvertedIndex,
        store: DocumentStore,
        *,
        idf_floor: Optional[float] = 0.0,
    ) -> None:
        self.index = index
        self.store = store
        self.idf_floor = idf_floor

    @classmethod
    def from_records(
        cls,
        records: Iterable[Any],
        *,
        min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH,
        idf_floor: Optional[float] = 0.0,
    ) -> "Searcher":
        """Load a corpus and index it in one step."""
        store = DocumentStore.load(records)
        index = Indexer(min_token_length=min_token_length).build(store)
        return cls(index, store, idf_floor=idf_floor)

    def idf(self, term: str) -> float:
        document_frequency = self.index.document_frequency(term)
        if document_frequency == 0:
            return 0.0
        weight = math.log(self.index.document_count / (1 + document_frequency))
        if self.idf_floor is not None:
            weight = max(weight, self.idf_floor)
        return weight

    def search(
        self,
        query: str,
        limit: Optional[int] = None,
        *,
        category: Optional[str] = None,
    ) -> List[SearchResult]:
        """Return documents matching ``query``, best first.

        Equal scores are ordered by ascending document id.

        Raises:
            InvalidArgumentError: ``limit`` is zero or negative.
            EmptyQueryError: the query contains no searchable terms.
        """
        if limit is not None and limit <= 0:
            raise InvalidArgumentError(f"limit must be positive, got {limit}")

        terms = unique_terms(tokenize(query, min_length=self.index.min_token_length))
        if not terms:
            raise EmptyQueryError(f"Query {query!r} has no searchable terms")

        scores: Dict[int, float] = {}
        for term in terms:
            weight = self.idf(term)
            for posting in self.index.postings(term):
                scores[posting.document_id] = (
                    scores.get(posting.document_id, 0.0) + posting.term_frequency * weight
                )

        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        results: List[SearchResult] = []
        for doc_id, score in ranked:
            document = self.store.get(doc_id)
            if category is not None and document.category != category:
                continue
            results.append(SearchResult(document=document, score=score))
            if limit is not None and len(results) >= limit:
                break

        LOGGER.debug("Query %r: %d candidates, %d returned", query, len(scores), len(results))
        return results
