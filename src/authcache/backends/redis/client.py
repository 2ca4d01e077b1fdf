"""Redis command client.

Wraps a ``redis.asyncio`` client with two entry points:

- ``execute`` sends one command and returns the reply.
- ``execute_noreply`` queues a pipeline and returns immediately.

Queued pipelines run one after another in the order they were issued,
and ``execute`` waits for them before sending its own command, so a
caller reading back its own writes through the same client sees them.
"""

import asyncio
from collections.abc import Sequence
from typing import Any

from redis.asyncio import Redis

from authcache.config import RedisConfig
from authcache.observability import get_logger
from authcache.protocols.command_executor import Command

logger = get_logger(__name__)


class RedisCommandClient:
    """Command executor over a shared Redis connection pool."""

    def __init__(self, redis: Redis, name: str = "default") -> None:
        """Initialize the client.

        Args:
            redis: Connected ``redis.asyncio`` client (or a compatible fake)
            name: Logical connection name, used in logs
        """
        self.redis = redis
        self.name = name
        self._tail: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[None]] = set()

    @classmethod
    def from_config(cls, config: RedisConfig) -> "RedisCommandClient":
        """Create a client from connection settings."""
        redis = Redis.from_url(
            config.url,
            socket_timeout=config.socket_timeout,
            socket_connect_timeout=config.socket_connect_timeout,
            max_connections=config.max_connections,
        )
        return cls(redis, name=config.connection_name)

    async def execute(self, *command: Any) -> Any:
        """Run one command and return its reply."""
        await self.drain()
        return await self.redis.execute_command(*command)

    def execute_noreply(self, commands: Sequence[Command]) -> None:
        """Queue commands as a single pipeline; replies are never observed.

        Must be called from a running event loop.
        """
        commands = [tuple(command) for command in commands]
        if not commands:
            return

        previous = self._tail
        task = asyncio.get_running_loop().create_task(
            self._run_pipeline(previous, commands)
        )
        self._tail = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_pipeline(
        self,
        previous: asyncio.Task[None] | None,
        commands: list[tuple[Any, ...]],
    ) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait([previous])

        try:
            pipe = self.redis.pipeline(transaction=False)
            for command in commands:
                pipe.execute_command(*command)
            await pipe.execute()
        except Exception as e:
            logger.warning(
                "No-reply pipeline failed",
                context={
                    "connection": self.name,
                    "commands": [str(command[0]) for command in commands],
                },
                error=e,
            )

    async def drain(self) -> None:
        """Wait for every queued pipeline to finish."""
        tail = self._tail
        if tail is not None and not tail.done():
            await asyncio.wait([tail])

    @property
    def pending(self) -> int:
        """Number of queued pipelines that have not finished."""
        return len(self._pending)

    async def aclose(self) -> None:
        """Drain queued pipelines and close the underlying client."""
        await self.drain()
        await self.redis.aclose()
