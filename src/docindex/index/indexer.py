"""Inverted index construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from docindex.index.storage import DocumentStore
from docindex.models import Posting
from docindex.utils.text import DEFAULT_MIN_TOKEN_LENGTH, count_terms, document_tokens

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IndexStats:
    documents: int = 0
    terms: int = 0
    postings: int = 0


class InvertedIndex:
    """Read-only mapping from normalized term to its postings list.

    Postings lists are tuples ordered by ascending document id.
    """

    __slots__ = ("_postings", "_document_count", "_min_token_length")

    def __init__(
        self,
        postings: Mapping[str, Tuple[Posting, ...]],
        *,
        document_count: int,
        min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH,
    ) -> None:
        self._postings = MappingProxyType(dict(postings))
        self._document_count = document_count
        self._min_token_length = min_token_length

    @property
    def document_count(self) -> int:
        return self._document_count

    @property
    def min_token_length(self) -> int:
        return self._min_token_length

    def postings(self, term: str) -> Tuple[Posting, ...]:
        """Postings for ``term``; an unknown term yields an empty tuple."""
        return self._postings.get(term, ())

    def document_frequency(self, term: str) -> int:
        return len(self._postings.get(term, ()))

    def terms(self) -> List[str]:
        return sorted(self._postings)

    @property
    def stats(self) -> IndexStats:
        return IndexStats(
            documents=self._document_count,
            terms=len(self._postings),
            postings=sum(len(plist) for plist in self._postings.values()),
        )

    def __contains__(self, term: object) -> bool:
        return term in self._postings

    def __len__(self) -> int:
        return len(self._postings)


class Indexer:
    """Builds an :class:`InvertedIndex` from a document store."""

    def __init__(self, *, min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH) -> None:
        self.min_token_length = min_token_length

    def build(self, store: DocumentStore) -> InvertedIndex:
        """Tokenize every document and collect its term frequencies."""
        postings: Dict[str, List[Posting]] = {}
        # Store order is ascending id, so appending keeps each list sorted.
        for document in store.all():
            tokens = document_tokens(
                document.title, document.text, min_length=self.min_token_length
            )
            for term, frequency in count_terms(tokens).items():
                postings.setdefault(term, []).append(
                    Posting(term=term, document_id=document.id, term_frequency=frequency)
                )
            LOGGER.debug("Indexed %s (%d tokens)", document.location, len(tokens))

        index = InvertedIndex(
            {term: tuple(plist) for term, plist in postings.items()},
            document_count=len(store),
            min_token_length=self.min_token_length,
        )
        stats = index.stats
        LOGGER.info(
            "Built index: %d documents, %d terms, %d postings",
            stats.documents,
            stats.terms,
            stats.postings,
        )
        return index
