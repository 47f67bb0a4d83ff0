"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path

import pytest

from corpus_search.observability.context import trace_context


# Environment overrides applied to every test so local .env files or shell
# variables never leak into Settings().
TEST_ENV = {
    "CORPUS_SEARCH_INDEX_FILE": "index.json",
    "CORPUS_SEARCH_RESULT_LIMIT": "10",
    "CORPUS_SEARCH_MARKUP_EXTENSIONS": "xml,xhtml",
    "CORPUS_SEARCH_PLAIN_TEXT_EXTENSIONS": "txt,text,md,rst,rs,py",
    "CORPUS_SEARCH_LOG_LEVEL": "info",
    "CORPUS_SEARCH_LOG_JSON": "false",
}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Set test defaults and reset trace context before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    token = trace_context.set(None)
    yield
    trace_context.reset(token)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str | bytes], Path]:
    """Create a file below tmp_path, making parent directories as needed."""

    def _write(relative: str, content: str | bytes) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fruit_corpus(tmp_path: Path, write_file) -> Path:
    """Three plain-text documents of three tokens each."""
    root = tmp_path / "corpus"
    write_file("corpus/doc1.txt", "apple banana apple")
    write_file("corpus/doc2.txt", "banana orange banana")
    write_file("corpus/doc3.txt", "orange grape orange")
    return root


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
