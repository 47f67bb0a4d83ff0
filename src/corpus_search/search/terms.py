"""Case-insensitive term keys used by every frequency table in the index.

Only ASCII letters are folded. Everything else is compared verbatim, so
``"Straße"`` and ``"STRASSE"`` stay distinct while ``"Rust"`` and ``"rUST"``
collapse into the same key.

Keys come in two flavours:

* owned keys (``TermKey("text")``) hold their own string and are safe to store;
* views (``TermKey.view(buffer, start, end)``) point into a larger buffer and
  are meant for short-lived lookups while scanning.

``to_owned()`` turns a view into an owned key by slicing once.
"""

from __future__ import annotations

from functools import total_ordering


_ASCII_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")
_ASCII_UPPER = str.maketrans("abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ")


def ascii_fold(text: str) -> str:
    """Lowercase ``A-Z`` only, leaving every other character untouched."""
    return text.translate(_ASCII_LOWER)


def ascii_upper(text: str) -> str:
    return text.translate(_ASCII_UPPER)


@total_ordering
class TermKey:
    """Immutable text value compared and hashed without regard to ASCII case."""

    __slots__ = ("_source", "_start", "_end", "_folded")

    def __init__(self, text: str) -> None:
        self._source = text
        self._start = 0
        self._end = len(text)
        self._folded: str | None = None

    @classmethod
    def view(cls, source: str, start: int, end: int) -> TermKey:
        """Return a transient key over ``source[start:end]`` without slicing it."""
        if not 0 <= start <= end <= len(source):
            raise ValueError(f"invalid span {start}:{end} for buffer of length {len(source)}")
        key = cls.__new__(cls)
        key._source = source
        key._start = start
        key._end = end
        key._folded = None
        return key

    @property
    def is_owned(self) -> bool:
        return self._start == 0 and self._end == len(self._source)

    @property
    def text(self) -> str:
        if self.is_owned:
            return self._source
        return self._source[self._start : self._end]

    def to_owned(self) -> TermKey:
        """Detach the key from its source buffer."""
        if self.is_owned:
            return self
        owned = TermKey(self.text)
        owned._folded = self._folded
        return owned

    @property
    def folded(self) -> str:
        if self._folded is None:
            self._folded = ascii_fold(self.text)
        return self._folded

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TermKey):
            return NotImplemented
        return self._end - self._start == other._end - other._start and self.folded == other.folded

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TermKey):
            return NotImplemented
        # Python compares strings code point by code point and falls back to
        # length when one is a prefix of the other.
        return ascii_upper(self.text) < ascii_upper(other.text)

    def __hash__(self) -> int:
        return hash(self.folded)

    def __len__(self) -> int:
        return self._end - self._start

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        kind = "TermKey" if self.is_owned else "TermKey.view"
        return f"{kind}({self.text!r})"
