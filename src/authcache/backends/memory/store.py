"""In-memory cache store."""

import asyncio
import time
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from typing import Any

from authcache import keys
from authcache.config import CacheConfig, Settings
from authcache.keys import Key
from authcache.matching import KeyPattern, Pattern
from authcache.protocols.cache_store import NOT_FOUND, Options, Record, wrap_records
from authcache.serialization import PickleSerializer, Serializer


def now_ms() -> float:
    return time.monotonic() * 1000


@dataclass
class CacheEntry:
    """A stored value with its expiry."""

    value: bytes
    expires_at: float  # monotonic milliseconds

    def is_expired(self) -> bool:
        """Check if this entry has expired."""
        return now_ms() >= self.expires_at


class MemoryCacheStore:
    """In-process cache store with the same key and value semantics as Redis.

    Suitable for development and testing. Data is lost on restart and
    writes are applied before ``put`` returns.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        serializer: Serializer | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize memory cache store.

        Args:
            settings: Process-wide settings; ``settings.namespace`` is read on every call
            serializer: Value codec (defaults to PickleSerializer)
            **kwargs: Ignored (for compatibility with other backends)
        """
        self.settings = settings or Settings()
        self.serializer = serializer or PickleSerializer()
        self._data: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    def namespace(self, config: CacheConfig) -> str:
        return keys.build_namespace(self.settings.namespace, config.namespace)

    async def put(self, config: Options, record_or_records: Record | Sequence[Record]) -> None:
        config = CacheConfig.coerce(config)
        ttl = config.require_ttl(type(self).__name__)
        namespace = self.namespace(config)

        entries = {
            keys.encode(namespace, key): CacheEntry(
                value=self.serializer.serialize(value),
                expires_at=now_ms() + ttl,
            )
            for key, value in wrap_records(record_or_records)
        }
        async with self._lock:
            self._data.update(entries)

    async def get(self, config: Options, key: Key) -> Any:
        config = CacheConfig.coerce(config)
        raw_key = keys.encode(self.namespace(config), key)

        async with self._lock:
            entry = self._data.get(raw_key)
            if entry is not None and entry.is_expired():
                del self._data[raw_key]
                entry = None

        if entry is None:
            return NOT_FOUND
        return self.serializer.deserialize(entry.value)

    async def delete(self, config: Options, key: Key) -> None:
        config = CacheConfig.coerce(config)
        raw_key = keys.encode(self.namespace(config), key)

        async with self._lock:
            self._data.pop(raw_key, None)

    async def stream(self, config: Options, pattern: Pattern) -> AsyncIterator[tuple[list[str], Any]]:
        config = CacheConfig.coerce(config)
        namespace = self.namespace(config)
        compiled = KeyPattern.compile(pattern)
        prefix = namespace + keys.DELIMITER

        async with self._lock:
            # Clean up expired entries first
            expired = [k for k, v in self._data.items() if v.is_expired()]
            for k in expired:
                del self._data[k]
            snapshot = {
                tuple(keys.strip_namespace(namespace, keys.decode(k))): v.value
                for k, v in self._data.items()
                if k.startswith(prefix)
            }

        for key in sorted(compiled.filter(snapshot)):
            yield list(key), self.serializer.deserialize(snapshot[key])

    async def all(self, config: Options, pattern: Pattern) -> list[tuple[list[str], Any]]:
        return [record async for record in self.stream(config, pattern)]

    async def clear(self) -> None:
        """Clear all data. Useful for testing."""
        async with self._lock:
            self._data.clear()
