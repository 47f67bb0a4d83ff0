"""Maximal-munch lexer shared by document tokenizers and query parsing."""

from __future__ import annotations

from collections.abc import Iterator

import regex


# Order matters: numbers, then identifiers, then any single non-whitespace char.
# Only ASCII whitespace separates tokens; anything else is a one-char token.
_TOKEN_PATTERN = regex.compile(r"[0-9][0-9.]*|[A-Za-z][\p{Alphabetic}\p{N}_]*|[^ \t\n\r\f]")


class Lexer:
    """Lazy iterator over the tokens of a single text buffer.

    Each instance scans its buffer once. Create a new ``Lexer`` to start over.

    Rules, applied after skipping ASCII whitespace:

    1. an ASCII digit starts a run of ASCII digits and ``.`` (``1.2.3`` is
       accepted as one token);
    2. an ASCII letter starts a run of Unicode alphabetic or numeric
       characters and ``_``;
    3. any other character is a token by itself.
    """

    def __init__(self, content: str) -> None:
        self.content = content
        self._matches = _TOKEN_PATTERN.finditer(content)

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        return next(self._matches).group(0)

    def spans(self) -> Iterator[tuple[int, int]]:
        """Yield ``(start, end)`` offsets of the remaining tokens."""
        for match in self._matches:
            yield match.span()


def lex(content: str) -> list[str]:
    """Return every token of ``content`` as a list."""
    return list(Lexer(content))
