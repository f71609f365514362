"""Text helpers: the tokenizer shared by indexing and querying."""

from __future__ import annotations

import re
from collections import Counter
from typing import Dict, Iterable, List

# Runs of Unicode letters and digits; underscore counts as a separator.
_TOKEN_RE = re.compile(r"[^\W_]+")

DEFAULT_MIN_TOKEN_LENGTH = 2


def tokenize(text: str, *, min_length: int = DEFAULT_MIN_TOKEN_LENGTH) -> List[str]:
    """Lowercase ``text`` and split it into alphanumeric tokens.

    Tokens shorter than ``min_length`` are dropped. No stemming is applied.
    """
    if not text:
        return []
    return [token for token in _TOKEN_RE.findall(text.lower()) if len(token) >= min_length]


def document_tokens(
    title: str, text: str, *, min_length: int = DEFAULT_MIN_TOKEN_LENGTH
) -> List[str]:
    """Tokens of a document's indexed fields, title first."""
    return tokenize(f"{title}\n{text}", min_length=min_length)


def count_terms(tokens: Iterable[str]) -> Dict[str, int]:
    """Term frequencies keyed by token, in first-seen order."""
    return dict(Counter(tokens))


def unique_terms(tokens: Iterable[str]) -> List[str]:
    """Drop repeated tokens, keeping first occurrences in order."""
    return list(dict.fromkeys(tokens))


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs into single spaces."""
    return " ".join(text.split())
