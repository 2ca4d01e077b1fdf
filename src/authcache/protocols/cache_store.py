"""CacheStore protocol for credential cache backends."""

from collections.abc import AsyncIterator, Mapping, Sequence
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from authcache.config import CacheConfig
from authcache.keys import Key
from authcache.matching import Pattern


class NotFound(Enum):
    """Sentinel type for a missing cache entry."""

    NOT_FOUND = "not_found"

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound.NOT_FOUND

Options = CacheConfig | Mapping[str, Any]
Record = tuple[Key, Any]


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache store backends used by the auth framework."""

    async def put(self, config: Options, record_or_records: Record | Sequence[Record]) -> None:
        """Store one ``(key, value)`` pair or a list of them. Requires ``ttl``."""
        ...

    async def get(self, config: Options, key: Key) -> Any:
        """Get a value, or ``NOT_FOUND``."""
        ...

    async def delete(self, config: Options, key: Key) -> None:
        """Delete a key. No-op if the key doesn't exist."""
        ...

    async def all(self, config: Options, pattern: Pattern) -> list[tuple[list[str], Any]]:
        """List every ``(key, value)`` whose key matches ``pattern``."""
        ...

    def stream(self, config: Options, pattern: Pattern) -> AsyncIterator[tuple[list[str], Any]]:
        """Lazily produce the records ``all`` would return."""
        ...


def wrap_records(record_or_records: Record | Sequence[Record]) -> list[Record]:
    """Accept a single ``(key, value)`` tuple or a list of them."""
    if isinstance(record_or_records, tuple):
        return [record_or_records]
    return list(record_or_records)
