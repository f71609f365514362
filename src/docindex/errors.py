"""Exceptions raised by docindex."""

from __future__ import annotations


class DocIndexError(Exception):
    """Base class for all docindex errors."""


class ValidationError(DocIndexError):
    """A corpus record or corpus file is malformed."""


class NotFoundError(DocIndexError, LookupError):
    """A document id or location is not present in the store."""


class EmptyQueryError(DocIndexError):
    """The query produced no searchable terms."""


class InvalidArgumentError(DocIndexError, ValueError):
    """An argument is outside its accepted range."""
