"""Corpus file loading.

Reads corpus records from plain JSON or from the ``search_index.js`` blob that
Documenter writes next to the rendered pages::

    var documenterSearchIndex = {"docs": [
    {"location": "index.html#", "page": "Home", ...},
    ]}
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List

from docindex.errors import ValidationError

LOGGER = logging.getLogger(__name__)

_ASSIGNMENT_RE = re.compile(r"^\s*(?:var|let|const)\s+[A-Za-z_$][\w$]*\s*=\s*")
# The generator leaves a comma after the last record.
_TRAILING_COMMA_RE = re.compile(r",\s*(\]\s*\}\s*)$")


def _strip_script(payload: str) -> str:
    body = _ASSIGNMENT_RE.sub("", payload, count=1).strip()
    if body.endswith(";"):
        body = body[:-1].rstrip()
    return _TRAILING_COMMA_RE.sub(r"\1", body)


def parse_records(payload: str) -> List[Dict[str, Any]]:
    """Parse corpus records from JSON or Documenter script text."""
    try:
        data = json.loads(_strip_script(payload))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Malformed corpus: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("docs")
    if not isinstance(data, list):
        raise ValidationError("Corpus must be a list of records or an object with a 'docs' list")
    return data


def load_records(path: Path) -> List[Dict[str, Any]]:
    """Read corpus records from ``path``."""
    path = Path(path)
    try:
        payload = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValidationError(f"Cannot read corpus {path}: {exc}") from exc

    try:
        records = parse_records(payload)
    except ValidationError as exc:
        raise ValidationError(f"{path}: {exc}") from exc

    LOGGER.info("Read %d records from %s", len(records), path)
    return records
