"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from docindex.utils.text import DEFAULT_MIN_TOKEN_LENGTH

DEFAULT_CORPUS = Path("search_index.js")


@dataclass(slots=True)
class AppConfig:
    corpus_path: Path | None = None
    min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH
    # Lower bound applied to idf; None keeps the raw ln(N / (1 + df)) weight.
    idf_floor: float | None = 0.0
    top_k: int = 10

    def __post_init__(self) -> None:
        if self.corpus_path is None:
            self.corpus_path = DEFAULT_CORPUS

    def resolve_corpus_path(self, base_dir: Path | None = None) -> Path:
        if self.corpus_path is None:
            self.corpus_path = DEFAULT_CORPUS
        if Path(self.corpus_path).is_absolute() or base_dir is None:
            return Path(self.corpus_path)
        return base_dir / self.corpus_path
