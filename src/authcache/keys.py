"""Structured key codec.

A structured key is an ordered list of string segments. On the wire it
is the segments joined with ``:``, with the store namespace first::

    encode("myapp:credentials", ["user", "1"]) == "myapp:credentials:user:1"

There is no escaping, so a segment must never contain the delimiter.
"""

import re
from collections.abc import Sequence
from typing import Any

from authcache.exceptions import InvalidKeyError, MalformedKeyError

DELIMITER = ":"

# Characters with a meaning in Redis MATCH globs
GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")

Key = str | Sequence[Any]


def render_segment(segment: Any) -> str:
    """Render one key segment as a string."""
    if isinstance(segment, str):
        return segment
    if isinstance(segment, bytes):
        return segment.decode("utf-8")
    if isinstance(segment, type):
        return f"{segment.__module__}.{segment.__qualname__}"
    return str(segment)


def wrap(key: Key) -> list[Any]:
    """Treat a bare string key as a one-segment key."""
    if isinstance(key, (str, bytes)):
        return [key]
    return list(key)


def build_namespace(app_namespace: str, namespace: str) -> str:
    """Combine the application namespace with a cache namespace."""
    return f"{app_namespace}{DELIMITER}{namespace}"


def encode(namespace: str, key: Key) -> str:
    """Encode a structured key under a namespace."""
    segments = []
    for segment in wrap(key):
        rendered = render_segment(segment)
        if DELIMITER in rendered:
            raise InvalidKeyError(
                f"Key segment {rendered!r} must not contain {DELIMITER!r}"
            )
        segments.append(rendered)
    return DELIMITER.join([namespace, *segments])


def decode(raw: str | bytes) -> list[str]:
    """Split a raw key back into its segments (namespace included).

    Raises:
        MalformedKeyError: If a binary key is not valid UTF-8.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedKeyError(f"Key {raw!r} is not valid UTF-8") from e
    return raw.split(DELIMITER)


def strip_namespace(namespace: str, segments: Sequence[str]) -> list[str]:
    """Remove the namespace components from decoded key segments.

    Raises:
        MalformedKeyError: If the key is not under ``namespace`` or has
            no segments after it.
    """
    prefix = namespace.split(DELIMITER)
    if list(segments[: len(prefix)]) != prefix or len(segments) <= len(prefix):
        raise MalformedKeyError(
            f"Key {DELIMITER.join(segments)!r} is not a structured key under {namespace!r}"
        )
    return list(segments[len(prefix):])


def glob_escape(text: str) -> str:
    """Escape glob special characters so they match literally."""
    return GLOB_SPECIAL.sub(r"\\\1", text)


def scan_pattern(namespace: str) -> str:
    """Glob matching every key under a namespace."""
    return f"{glob_escape(namespace)}{DELIMITER}*"
