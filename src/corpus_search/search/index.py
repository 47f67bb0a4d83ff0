"""Corpus-level TF-IDF index.

The index keeps two tables:

* ``documents``: indexed path -> ``Document`` (per-file term frequencies);
* ``document_frequency``: term -> number of documents containing it.

Both only grow while the index is built. A rebuild always starts from an empty
index and re-scans the whole tree.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
import math
from pathlib import Path

from corpus_search.observability.tracing import create_span
from corpus_search.search.analyzers import ExtensionMap
from corpus_search.search.lexer import Lexer
from corpus_search.search.models import Document, DocumentLoadError, SearchResult
from corpus_search.search.terms import TermKey
from corpus_search.search.walker import walk_files


logger = logging.getLogger(__name__)


@dataclass
class BuildStats:
    """Counters collected while building an index."""

    indexed: int = 0
    unsupported: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


class Index:
    """Mapping of documents plus the global document-frequency table."""

    def __init__(
        self,
        documents: Mapping[Path, Document] | None = None,
        document_frequency: Mapping[TermKey, int] | None = None,
    ) -> None:
        self.documents: dict[Path, Document] = dict(documents or {})
        self.document_frequency: dict[TermKey, int] = dict(document_frequency or {})
        self.stats = BuildStats()

    @classmethod
    def build(
        cls,
        root: str | Path,
        *,
        extensions: ExtensionMap | None = None,
        log: logging.Logger | None = None,
    ) -> Index:
        """Index every supported file below ``root``.

        Unsupported extensions and files that fail to load are logged and
        skipped. Failing to open ``root`` itself raises ``OSError``.
        """
        log = log or logger
        extensions = extensions or ExtensionMap.default()
        index = cls()
        stats = index.stats

        with create_span("index.build", attributes={"index.root": str(root)}) as span:
            log.info("Computing index for %s...", root)
            for path in walk_files(root, log=log):
                kind = extensions.kind_for(path)
                if kind is None:
                    if path.suffix:
                        log.info("No handler for %r documents: %s", path.suffix.lstrip("."), path)
                    else:
                        log.info("Unknown document type %s", path)
                    stats.unsupported += 1
                    continue

                try:
                    document = Document.build(path, kind.create())
                except DocumentLoadError as exc:
                    log.error("Processing %s failed: %s", path, exc)
                    stats.failed += 1
                    stats.errors.append(str(exc))
                    continue

                index.add_document(path, document)
                stats.indexed += 1
                log.debug("Processed %s (%d tokens)", path, document.count)

            span.set_attribute("index.documents", stats.indexed)
            span.set_attribute("index.failed", stats.failed)
            log.info(
                "Indexed %d documents (%d unsupported, %d failed), %d distinct terms",
                stats.indexed,
                stats.unsupported,
                stats.failed,
                len(index.document_frequency),
            )
        return index

    def add_document(self, path: Path, document: Document) -> None:
        """Store ``document`` and count each of its distinct terms once."""
        if path in self.documents:
            raise ValueError(f"{path} is already indexed")
        for term in document.terms:
            if term in self.document_frequency:
                self.document_frequency[term] += 1
            else:
                self.document_frequency[term] = 1
        self.documents[path] = document

    @property
    def document_count(self) -> int:
        return len(self.documents)

    def __len__(self) -> int:
        return len(self.documents)

    def __contains__(self, path: object) -> bool:
        return path in self.documents

    def document_frequency_of(self, term: str | TermKey) -> int:
        key = term if isinstance(term, TermKey) else TermKey(term)
        return self.document_frequency.get(key, 0)

    def idf(self, term: str | TermKey) -> float:
        """Smoothed inverse document frequency, ``log2(N / (df + 1))``.

        Zero when ``df + 1 == N`` and negative once every document contains
        the term. An empty index yields 0.0.
        """
        n = self.document_count
        df = self.document_frequency_of(term)
        if not n:
            return 0.0
        return math.log2(n / (df + 1))

    def search(
        self,
        query: str,
        *,
        limit: int | None = None,
        log: logging.Logger | None = None,
    ) -> list[SearchResult]:
        """Rank documents against ``query`` by summed TF-IDF.

        Each raw query token contributes, so repeating a word repeats its
        weight. Documents with a score of exactly zero are left out.
        """
        log = log or logger
        with create_span("index.search", attributes={"search.query": query}) as span:
            terms = [TermKey.view(query, start, end) for start, end in Lexer(query).spans()]
            idf_cache: dict[TermKey, float] = {}
            weighted = []
            for term in terms:
                if term not in idf_cache:
                    idf_cache[term] = self.idf(term)
                weighted.append((term, idf_cache[term]))

            results = []
            for path, document in self.documents.items():
                score = sum(document.term_frequency(term) * idf for term, idf in weighted)
                if score != 0.0:
                    results.append(SearchResult(path=path, score=score))

            results.sort(key=lambda result: (-result.score, str(result.path)))
            if limit is not None:
                results = results[:limit]

            span.set_attribute("search.terms", len(terms))
            span.set_attribute("search.results", len(results))
            log.debug("Query %r matched %d documents", query, len(results))
        return results

    def last_modified_file(self) -> tuple[Path, float] | None:
        """Return the indexed path with the newest mtime, or ``None`` if empty."""
        newest: tuple[Path, float] | None = None
        for path in self.documents:
            mtime = path.stat().st_mtime
            if newest is None or mtime > newest[1]:
                newest = (path, mtime)
        return newest
