"""Search data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from corpus_search.search.analyzers import Tokenizer, TokenizationError, fold_terms
from corpus_search.search.terms import TermKey


class DocumentLoadError(RuntimeError):
    """Raised when a file cannot be read or tokenized into a document."""


def _as_key(term: str | TermKey) -> TermKey:
    if isinstance(term, TermKey):
        return term
    return TermKey(term)


class Document:
    """Term-frequency table of a single indexed file.

    ``count`` is the total number of tokens in the file and always equals the
    sum of the table's values.
    """

    __slots__ = ("_term_frequency", "count")

    def __init__(self, term_frequency: Mapping[TermKey, int], count: int) -> None:
        self._term_frequency = dict(term_frequency)
        self.count = count

    @classmethod
    def build(cls, path: Path, tokenizer: Tokenizer) -> Document:
        """Tokenize the file at ``path`` into a new document."""
        term_frequency: dict[TermKey, int] = {}
        try:
            with path.open("rb") as stream:
                count = tokenizer.tokenize(stream, term_frequency)
        except (OSError, TokenizationError) as exc:
            raise DocumentLoadError(f"{path}: {exc}") from exc
        return cls(term_frequency, count)

    @classmethod
    def from_text(cls, text: str) -> Document:
        term_frequency: dict[TermKey, int] = {}
        count = fold_terms(text, term_frequency)
        return cls(term_frequency, count)

    @property
    def terms(self) -> Mapping[TermKey, int]:
        return MappingProxyType(self._term_frequency)

    def occurrences(self, term: str | TermKey) -> int:
        return self._term_frequency.get(_as_key(term), 0)

    def term_frequency(self, term: str | TermKey) -> float:
        """Share of the document's tokens that are ``term`` (0.0 when absent)."""
        occurrences = self.occurrences(term)
        if not occurrences or not self.count:
            return 0.0
        return occurrences / self.count

    def contains(self, term: str | TermKey) -> bool:
        return _as_key(term) in self._term_frequency

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.count == other.count and self._term_frequency == other._term_frequency

    def __repr__(self) -> str:
        return f"Document(terms={len(self._term_frequency)}, count={self.count})"


@dataclass(frozen=True)
class SearchResult:
    """A document path paired with its TF-IDF score."""

    path: Path
    score: float
