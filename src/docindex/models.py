"""Core docindex data models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Document:
    """A single corpus entry.

    ``category`` is opaque metadata ("page", "section", "Type", "Function", ...)
    and, like ``page``, is never indexed.
    """

    id: int
    location: str
    title: str = ""
    category: str = ""
    text: str = ""
    page: str = ""


@dataclass(frozen=True, slots=True)
class Posting:
    """Occurrence of a term in one document."""

    term: str
    document_id: int
    term_frequency: int
