"""In-memory document store."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, List, Mapping, Sequence

from docindex.errors import NotFoundError, ValidationError
from docindex.models import Document

LOGGER = logging.getLogger(__name__)

_OPTIONAL_FIELDS = ("title", "category", "text", "page")


def _build_document(position: int, record: Any) -> Document:
    if not isinstance(record, Mapping):
        raise ValidationError(f"Record {position} is not a mapping: {type(record).__name__}")

    location = record.get("location")
    if not isinstance(location, str) or not location:
        raise ValidationError(f"Record {position} has no location")

    fields = {}
    for name in _OPTIONAL_FIELDS:
        value = record.get(name)
        if value is None:
            value = ""
        elif not isinstance(value, str):
            raise ValidationError(
                f"Record {position} ({location}) field {name!r} must be a string"
            )
        fields[name] = value

    return Document(id=position, location=location, **fields)


class DocumentStore:
    """Immutable corpus of documents, addressed by position or location.

    Built once through :meth:`load`. Nothing mutates a store afterwards, so it
    can be shared between threads without locking.
    """

    __slots__ = ("_documents", "_by_location")

    def __init__(self, documents: Sequence[Document]) -> None:
        self._documents: tuple[Document, ...] = tuple(documents)
        self._by_location = {doc.location: doc.id for doc in self._documents}

    @classmethod
    def load(cls, records: Iterable[Any]) -> "DocumentStore":
        """Validate raw corpus records and build a store from them.

        Raises:
            ValidationError: a record is not a mapping, lacks a non-empty
                ``location``, carries a non-string field, or repeats a location.
        """
        documents: List[Document] = []
        seen: dict[str, int] = {}
        for position, record in enumerate(records):
            document = _build_document(position, record)
            if document.location in seen:
                raise ValidationError(
                    f"Duplicate location {document.location!r} "
                    f"(records {seen[document.location]} and {position})"
                )
            seen[document.location] = position
            documents.append(document)

        LOGGER.info("Loaded %d documents", len(documents))
        return cls(documents)

    def get(self, doc_id: int) -> Document:
        # bool is an int subclass but never a valid id
        if not isinstance(doc_id, int) or isinstance(doc_id, bool):
            raise NotFoundError(f"Invalid document id: {doc_id!r}")
        if doc_id < 0 or doc_id >= len(self._documents):
            raise NotFoundError(f"Document id {doc_id} out of range")
        return self._documents[doc_id]

    def find(self, location: str) -> Document:
        try:
            return self._documents[self._by_location[location]]
        except KeyError:
            raise NotFoundError(f"Unknown location: {location!r}") from None

    def all(self) -> Sequence[Document]:
        """Documents in load order; iterating it again restarts from the first."""
        return self._documents

    def categories(self) -> List[str]:
        return list(dict.fromkeys(doc.category for doc in self._documents))

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)
