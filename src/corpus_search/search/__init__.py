"""Term keys, lexing, tokenizers and the TF-IDF index."""

from corpus_search.search.analyzers import (
    ExtensionMap,
    MarkupTokenizer,
    PlainTextTokenizer,
    TokenizationError,
    TokenizerKind,
    fold_terms,
)
from corpus_search.search.index import BuildStats, Index
from corpus_search.search.lexer import Lexer, lex
from corpus_search.search.models import Document, DocumentLoadError, SearchResult
from corpus_search.search.storage import StorageError, load_index, read_index_file, save_index, write_index_file
from corpus_search.search.terms import TermKey, ascii_fold
from corpus_search.search.walker import walk_files


__all__ = [
    "BuildStats",
    "Document",
    "DocumentLoadError",
    "ExtensionMap",
    "Index",
    "Lexer",
    "MarkupTokenizer",
    "PlainTextTokenizer",
    "SearchResult",
    "StorageError",
    "TermKey",
    "TokenizationError",
    "TokenizerKind",
    "ascii_fold",
    "fold_terms",
    "lex",
    "load_index",
    "read_index_file",
    "save_index",
    "walk_files",
    "write_index_file",
]
