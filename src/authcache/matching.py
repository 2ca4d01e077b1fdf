"""Wildcard patterns over structured keys.

A pattern is either ``WILDCARD`` on its own, which matches every key, or
a sequence of segments in which any position may be ``WILDCARD``::

    KeyPattern.compile(["user", WILDCARD]).matches(["user", "1"])       # True
    KeyPattern.compile(["user", WILDCARD]).matches(["user", "1", "x"])  # False
"""

from collections.abc import Iterable, Sequence
from typing import Any

from authcache.keys import render_segment


class _Wildcard:
    """Matches any value at a key position."""

    _instance: "_Wildcard | None" = None

    def __new__(cls) -> "_Wildcard":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "WILDCARD"

    def __reduce__(self) -> str:
        return "WILDCARD"


WILDCARD = _Wildcard()
ANY = WILDCARD

Pattern = _Wildcard | Sequence[Any]


class KeyPattern:
    """A compiled match pattern."""

    def __init__(self, segments: tuple[str | _Wildcard, ...] | None) -> None:
        # None means the whole key is a wildcard
        self.segments = segments

    @classmethod
    def compile(cls, pattern: "Pattern | KeyPattern") -> "KeyPattern":
        if isinstance(pattern, KeyPattern):
            return pattern
        if pattern is WILDCARD:
            return cls(None)
        if isinstance(pattern, (str, bytes)):
            pattern = [pattern]
        return cls(tuple(
            WILDCARD if segment is WILDCARD else render_segment(segment)
            for segment in pattern
        ))

    def matches(self, key: Sequence[str]) -> bool:
        """Test one namespace-stripped key."""
        if self.segments is None:
            return True
        if len(key) != len(self.segments):
            return False
        return all(
            expected is WILDCARD or expected == actual
            for expected, actual in zip(self.segments, key)
        )

    def filter(self, keys: Iterable[Sequence[str]]) -> list[Sequence[str]]:
        """Keep the keys that match, preserving order."""
        if self.segments is None:
            return list(keys)
        return [key for key in keys if self.matches(key)]

    def __repr__(self) -> str:
        if self.segments is None:
            return "KeyPattern(WILDCARD)"
        return f"KeyPattern({list(self.segments)!r})"
