"""Pytest configuration and fixtures."""

from collections.abc import Callable
from typing import Any

import fakeredis
import fakeredis.aioredis
import pytest

from authcache import connections
from authcache.backends.redis.client import RedisCommandClient
from authcache.config import Settings
from authcache.observability import clear_metric_callbacks


class ScriptedRedis:
    """CommandExecutor double that serves SCAN replies from fixed batches.

    ``batches`` are returned verbatim, one per SCAN call; the cursor
    handed back is the index of the next batch, or 0 after the last one.
    ``data`` backs GET/MGET/SET/DEL. ``before_mget`` runs just before an
    MGET is answered, to simulate keys vanishing mid-scan.
    """

    def __init__(
        self,
        data: dict[bytes, bytes] | None = None,
        batches: list[list[bytes]] | None = None,
    ) -> None:
        self.data = dict(data or {})
        self.batches = batches if batches is not None else [sorted(self.data)]
        self.calls: list[tuple[Any, ...]] = []
        self.noreply: list[list[tuple[Any, ...]]] = []
        self.before_mget: Callable[["ScriptedRedis"], None] | None = None

    @classmethod
    def split(cls, data: dict[bytes, bytes], count: int) -> "ScriptedRedis":
        """Spread the keys of ``data`` over ``count`` SCAN batches."""
        ordered = sorted(data)
        batches = [ordered[i::count] for i in range(count)]
        return cls(data, batches)

    async def execute(self, *command: Any) -> Any:
        self.calls.append(command)
        name = command[0]
        if name == "SCAN":
            index = int(command[1])
            next_index = index + 1 if index + 1 < len(self.batches) else 0
            return str(next_index).encode(), list(self.batches[index])
        if name == "MGET":
            if self.before_mget is not None:
                self.before_mget(self)
            return [self.data.get(self._raw(key)) for key in command[1:]]
        if name == "GET":
            return self.data.get(self._raw(command[1]))
        raise AssertionError(f"Unexpected command {command!r}")

    def execute_noreply(self, commands: Any) -> None:
        commands = [tuple(command) for command in commands]
        self.noreply.append(commands)
        for command in commands:
            if command[0] == "SET":
                self.data[self._raw(command[1])] = command[2]
            elif command[0] == "DEL":
                self.data.pop(self._raw(command[1]), None)

    async def drain(self) -> None:
        pass

    @property
    def scan_calls(self) -> int:
        return sum(1 for call in self.calls if call[0] == "SCAN")

    @staticmethod
    def _raw(key: Any) -> bytes:
        return key.encode() if isinstance(key, str) else key


@pytest.fixture(autouse=True)
def reset_registries():
    """Isolate connection and metric registries between tests."""
    yield
    connections.clear()
    clear_metric_callbacks()


@pytest.fixture
def settings() -> Settings:
    """Settings with a fixed application namespace."""
    return Settings.from_dict({
        "namespace": "myapp",
        "caches": {
            "credentials": {"ttl": 1_800_000, "namespace": "credentials"},
            "persistent_session": {"ttl": 2_592_000_000, "namespace": "persistent_session"},
        },
    })


@pytest.fixture
def cache_config() -> dict[str, Any]:
    """Per-call options as the auth framework passes them."""
    return {"ttl": 60_000, "namespace": "credentials"}


@pytest.fixture
def fake_redis():
    """fakeredis client with its own in-memory server."""
    return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=False)


@pytest.fixture
def redis_client(fake_redis) -> RedisCommandClient:
    """Command client over fakeredis, registered as the default connection."""
    client = RedisCommandClient(fake_redis)
    connections.register("default", client)
    return client


@pytest.fixture
def scripted_redis() -> type[ScriptedRedis]:
    """The ScriptedRedis class, for tests that build their own batches."""
    return ScriptedRedis


@pytest.fixture
def sample_settings_dict() -> dict[str, Any]:
    """Sample settings dictionary for testing."""
    return {
        "namespace": "test-app",
        "redis": {
            "url": "redis://cache.internal:6380/2",
            "connection_name": "auth",
            "socket_timeout": 1.5,
            "scan_count": 500,
        },
        "logging": {"level": "DEBUG", "format": "text"},
        "caches": {"credentials": {"ttl": 1_800_000, "namespace": "credentials"}},
    }
