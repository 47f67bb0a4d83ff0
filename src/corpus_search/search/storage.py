"""JSON persistence for the index.

On-disk layout::

    {
      "documents": {
        "<path>": {"term_frequency": {"<term>": <occurrences>}, "count": <tokens>}
      },
      "term_frequency": {"<term>": <documents containing term>}
    }

Terms are written with the spelling first seen while indexing. Loading is all
or nothing: any decode or schema problem raises ``StorageError``.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
from pathlib import Path
from typing import Annotated, Any, BinaryIO

import orjson
from pydantic import BaseModel, Field, StrictInt, ValidationError, model_validator

from corpus_search.search.index import Index
from corpus_search.search.models import Document
from corpus_search.search.terms import TermKey, ascii_fold


logger = logging.getLogger(__name__)

Occurrences = Annotated[StrictInt, Field(ge=1)]


class StorageError(ValueError):
    """Raised when an index cannot be serialized or deserialized."""


def _check_unique_terms(terms: Iterable[str], table: str) -> None:
    seen: dict[str, str] = {}
    for term in terms:
        folded = ascii_fold(term)
        if folded in seen:
            raise ValueError(f"{table}: terms {seen[folded]!r} and {term!r} differ only by case")
        seen[folded] = term


def _check_unique_paths(paths: Iterable[str]) -> None:
    seen: dict[Path, str] = {}
    for path in paths:
        normalized = Path(path)
        if normalized in seen:
            raise ValueError(f"documents: paths {seen[normalized]!r} and {path!r} name the same file")
        seen[normalized] = path


class PersistedDocument(BaseModel):
    """Serialized form of a ``Document``."""

    term_frequency: dict[str, Occurrences]
    count: Annotated[StrictInt, Field(ge=0)]

    @model_validator(mode="after")
    def _check_consistency(self) -> PersistedDocument:
        _check_unique_terms(self.term_frequency, "document term_frequency")
        total = sum(self.term_frequency.values())
        if total != self.count:
            raise ValueError(f"count {self.count} does not match the {total} recorded occurrences")
        return self


class PersistedIndex(BaseModel):
    """Serialized form of an ``Index``."""

    documents: dict[str, PersistedDocument]
    term_frequency: dict[str, Occurrences]

    @model_validator(mode="after")
    def _check_document_frequency(self) -> PersistedIndex:
        _check_unique_paths(self.documents)
        _check_unique_terms(self.term_frequency, "index term_frequency")
        total = len(self.documents)
        for term, frequency in self.term_frequency.items():
            if frequency > total:
                raise ValueError(f"term {term!r} is in {frequency} documents but only {total} are indexed")
        return self

    @classmethod
    def from_index(cls, index: Index) -> PersistedIndex:
        return cls.model_construct(
            documents={
                str(path): PersistedDocument.model_construct(
                    term_frequency={term.text: occurrences for term, occurrences in document.terms.items()},
                    count=document.count,
                )
                for path, document in index.documents.items()
            },
            term_frequency={term.text: frequency for term, frequency in index.document_frequency.items()},
        )

    def to_index(self) -> Index:
        documents = {
            Path(path): Document(
                {TermKey(term): occurrences for term, occurrences in document.term_frequency.items()},
                document.count,
            )
            for path, document in self.documents.items()
        }
        document_frequency = {TermKey(term): frequency for term, frequency in self.term_frequency.items()}
        return Index(documents, document_frequency)


def _dump(index: Index) -> bytes:
    payload: dict[str, Any] = PersistedIndex.from_index(index).model_dump()
    try:
        return orjson.dumps(payload)
    except orjson.JSONEncodeError as exc:
        raise StorageError(f"cannot encode index: {exc}") from exc


def save_index(index: Index, stream: BinaryIO) -> None:
    """Write ``index`` as JSON to a binary stream."""
    stream.write(_dump(index))


def load_index(stream: BinaryIO) -> Index:
    """Read an index written by ``save_index``."""
    data = stream.read()
    try:
        raw = orjson.loads(data)
    except orjson.JSONDecodeError as exc:
        raise StorageError(f"index is not valid JSON: {exc}") from exc
    try:
        persisted = PersistedIndex.model_validate(raw)
    except ValidationError as exc:
        raise StorageError(f"index does not match the expected schema: {exc}") from exc
    return persisted.to_index()


def write_index_file(index: Index, path: str | Path) -> Path:
    """Atomically replace ``path`` with the serialized index."""
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_bytes(_dump(index))
    tmp_path.replace(path)
    logger.info("Saved index at %s", path)
    return path


def read_index_file(path: str | Path) -> Index:
    with Path(path).open("rb") as stream:
        return load_index(stream)
