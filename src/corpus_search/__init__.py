"""Local-file TF-IDF indexing and search."""

from corpus_search.search import Document, Index, Lexer, SearchResult, TermKey


__all__ = ["Document", "Index", "Lexer", "SearchResult", "TermKey"]
