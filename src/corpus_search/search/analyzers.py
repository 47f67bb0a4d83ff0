"""Tokenizers that turn file contents into term-frequency tables.

Two content types are supported:

* plain text, lexed as one buffer;
* markup (XML/XHTML), where only character data is lexed.

Both fold tokens into a caller-owned ``dict[TermKey, int]`` and return the
number of tokens they saw. The extension table at the bottom of the module
decides which tokenizer handles a given file.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Protocol

from lxml import etree  # type: ignore[import-untyped]

from corpus_search.search.lexer import Lexer
from corpus_search.search.terms import TermKey


TermFrequency = MutableMapping[TermKey, int]

_READ_CHUNK_SIZE = 64 * 1024


class TokenizationError(ValueError):
    """Raised when a document cannot be decoded or parsed."""


def fold_terms(text: str, term_frequency: TermFrequency) -> int:
    """Count every token of ``text`` into ``term_frequency``.

    Lookups go through transient views; only terms seen for the first time are
    copied into owned keys. Returns the number of tokens seen.
    """
    count = 0
    for start, end in Lexer(text).spans():
        key = TermKey.view(text, start, end)
        if key in term_frequency:
            term_frequency[key] += 1
        else:
            term_frequency[key.to_owned()] = 1
        count += 1
    return count


class Tokenizer(Protocol):
    """Protocol implemented by content tokenizers."""

    def tokenize(self, stream: BinaryIO, term_frequency: TermFrequency) -> int:  # pragma: no cover - interface
        ...


class PlainTextTokenizer:
    """Lex the whole stream as UTF-8 text."""

    def tokenize(self, stream: BinaryIO, term_frequency: TermFrequency) -> int:
        data = stream.read()
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TokenizationError(f"invalid UTF-8: {exc}") from exc
        return fold_terms(text, term_frequency)


class _CharacterDataTarget:
    """lxml parser target that lexes character data and ignores everything else.

    lxml may hand over one text node in several ``data`` calls, so pieces are
    buffered until the next structural event.
    """

    def __init__(self, term_frequency: TermFrequency) -> None:
        self.term_frequency = term_frequency
        self.count = 0
        self._pending: list[str] = []

    def _flush(self) -> None:
        if not self._pending:
            return
        text = "".join(self._pending)
        self._pending.clear()
        self.count += fold_terms(text, self.term_frequency)

    def start(self, tag, attrib, nsmap=None) -> None:
        self._flush()

    def end(self, tag) -> None:
        self._flush()

    def data(self, data: str) -> None:
        self._pending.append(data)

    def comment(self, text) -> None:
        self._flush()

    def pi(self, target, data=None) -> None:
        self._flush()

    def close(self) -> int:
        self._flush()
        return self.count


class MarkupTokenizer:
    """Lex the character data of an XML document.

    Element and attribute names, comments and processing instructions never
    reach the lexer. Malformed documents raise ``TokenizationError``.
    """

    def __init__(self, chunk_size: int = _READ_CHUNK_SIZE) -> None:
        self.chunk_size = chunk_size

    def tokenize(self, stream: BinaryIO, term_frequency: TermFrequency) -> int:
        target = _CharacterDataTarget(term_frequency)
        parser = etree.XMLParser(
            target=target,
            resolve_entities=False,
            no_network=True,
            load_dtd=False,
        )
        try:
            while chunk := stream.read(self.chunk_size):
                parser.feed(chunk)
            return parser.close()
        except etree.XMLSyntaxError as exc:
            raise TokenizationError(f"malformed markup: {exc}") from exc


class TokenizerKind(str, Enum):
    """Closed set of tokenizer variants."""

    PLAIN_TEXT = "plain-text"
    MARKUP = "markup"

    def create(self) -> Tokenizer:
        if self is TokenizerKind.MARKUP:
            return MarkupTokenizer()
        return PlainTextTokenizer()


DEFAULT_MARKUP_EXTENSIONS: tuple[str, ...] = ("xml", "xhtml")
DEFAULT_PLAIN_TEXT_EXTENSIONS: tuple[str, ...] = ("txt", "text", "md", "rst", "rs", "py")


def _normalize_extension(extension: str) -> str:
    return extension.strip().lstrip(".").lower()


class ExtensionMap:
    """Pure lookup table from file extension to tokenizer kind."""

    def __init__(self, mapping: Mapping[str, TokenizerKind]) -> None:
        self._mapping = {_normalize_extension(ext): kind for ext, kind in mapping.items() if ext.strip(" .")}

    @classmethod
    def from_extensions(
        cls,
        *,
        markup: Iterable[str] = DEFAULT_MARKUP_EXTENSIONS,
        plain_text: Iterable[str] = DEFAULT_PLAIN_TEXT_EXTENSIONS,
    ) -> ExtensionMap:
        mapping: dict[str, TokenizerKind] = {}
        for extension in plain_text:
            mapping[extension] = TokenizerKind.PLAIN_TEXT
        for extension in markup:
            mapping[extension] = TokenizerKind.MARKUP
        return cls(mapping)

    @classmethod
    def default(cls) -> ExtensionMap:
        return cls.from_extensions()

    def kind_for(self, path: Path) -> TokenizerKind | None:
        """Return the tokenizer kind for ``path``, or ``None`` if unsupported."""
        suffix = path.suffix
        if not suffix:
            return None
        return self._mapping.get(_normalize_extension(suffix))

    def extensions(self) -> dict[str, TokenizerKind]:
        return dict(self._mapping)
