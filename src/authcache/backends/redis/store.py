"""Redis cache store backend."""

from collections.abc import AsyncIterator, Sequence
from typing import Any

from authcache import connections, keys
from authcache.backends.redis.scan import scan_matching
from authcache.config import CacheConfig, Settings
from authcache.keys import Key
from authcache.matching import Pattern
from authcache.observability import Timer, emit_counter, emit_timer, get_logger
from authcache.protocols.cache_store import NOT_FOUND, Options, Record, wrap_records
from authcache.protocols.command_executor import CommandExecutor
from authcache.serialization import PickleSerializer, Serializer

logger = get_logger(__name__)


class RedisCacheStore:
    """Cache store keeping each record as one Redis string with a PX expiry.

    Keys are ``<app namespace>:<cache namespace>:<segments...>``. Writes
    and deletes are fire-and-forget; reads and scans wait for replies.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        connection: str | None = None,
        serializer: Serializer | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize Redis cache store.

        Args:
            settings: Process-wide settings; ``settings.namespace`` is read on every call
            connection: Name of a registered connection (defaults to
                ``settings.redis.connection_name``)
            serializer: Value codec (defaults to PickleSerializer)
            **kwargs: Ignored (for compatibility with other backends)
        """
        self.settings = settings or Settings()
        self.connection = connection or self.settings.redis.connection_name
        self.serializer = serializer or PickleSerializer()

    @property
    def client(self) -> CommandExecutor:
        return connections.get(self.connection)

    def namespace(self, config: CacheConfig) -> str:
        return keys.build_namespace(self.settings.namespace, config.namespace)

    async def put(self, config: Options, record_or_records: Record | Sequence[Record]) -> None:
        """Queue a ``SET key value PX ttl`` for every record in one pipeline."""
        config = CacheConfig.coerce(config)
        ttl = config.require_ttl(type(self).__name__)
        namespace = self.namespace(config)

        commands = [
            ["SET", keys.encode(namespace, key), self.serializer.serialize(value), "PX", ttl]
            for key, value in wrap_records(record_or_records)
        ]
        self.client.execute_noreply(commands)
        logger.debug("Queued cache writes", context={"namespace": namespace, "count": len(commands)})
        emit_counter("authcache.put", {"namespace": namespace})

    async def get(self, config: Options, key: Key) -> Any:
        """Get a value, or ``NOT_FOUND`` if missing or expired."""
        config = CacheConfig.coerce(config)
        namespace = self.namespace(config)

        value = await self.client.execute("GET", keys.encode(namespace, key))
        if value is None:
            emit_counter("authcache.get", {"namespace": namespace, "result": "miss"})
            return NOT_FOUND

        emit_counter("authcache.get", {"namespace": namespace, "result": "hit"})
        return self.serializer.deserialize(value)

    async def delete(self, config: Options, key: Key) -> None:
        """Queue a ``DEL`` for the key."""
        config = CacheConfig.coerce(config)
        namespace = self.namespace(config)

        self.client.execute_noreply([["DEL", keys.encode(namespace, key)]])
        emit_counter("authcache.delete", {"namespace": namespace})

    def stream(self, config: Options, pattern: Pattern) -> AsyncIterator[tuple[list[str], Any]]:
        """Lazily produce matching records; single pass, not restartable."""
        config = CacheConfig.coerce(config)
        return scan_matching(
            self.client,
            self.namespace(config),
            pattern,
            self.serializer,
            count=self.settings.redis.scan_count,
        )

    async def all(self, config: Options, pattern: Pattern) -> list[tuple[list[str], Any]]:
        """Collect every record whose key matches ``pattern``.

        Example:
            await store.all({"namespace": "credentials"}, ["user", WILDCARD])
            # [(["user", "1"], User(id=1, guid="...")), ...]
        """
        config = CacheConfig.coerce(config)
        namespace = self.namespace(config)

        with Timer() as timer:
            records = [record async for record in self.stream(config, pattern)]

        logger.debug(
            "Scan complete",
            context={"namespace": namespace, "count": len(records)},
            duration_ms=timer.duration_ms,
        )
        emit_timer("authcache.scan", timer.duration_ms, {"namespace": namespace})
        return records
