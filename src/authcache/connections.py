"""Named registry of shared store connections.

Connections are owned by the application: it creates them at startup
(usually with ``setup(settings)``), registers them under a name and
closes them at shutdown. Cache stores only hold the name and look the
connection up on every call.
"""

from authcache.backends.redis.client import RedisCommandClient
from authcache.config import Settings
from authcache.exceptions import ConnectionNotFoundError
from authcache.observability import configure_logging
from authcache.protocols.command_executor import CommandExecutor

_connections: dict[str, CommandExecutor] = {}


def register(name: str, client: CommandExecutor) -> None:
    """Register a connection, replacing any previous one with that name."""
    _connections[name] = client


def get(name: str) -> CommandExecutor:
    """Look up a registered connection."""
    try:
        return _connections[name]
    except KeyError:
        available = ", ".join(sorted(_connections)) or "(none)"
        raise ConnectionNotFoundError(
            f"No connection registered as '{name}'. Available: {available}"
        ) from None


def unregister(name: str) -> CommandExecutor | None:
    """Remove a connection and return it, if it was registered."""
    return _connections.pop(name, None)


def clear() -> None:
    """Forget every registered connection. Useful for testing."""
    _connections.clear()


def connect(settings: Settings) -> RedisCommandClient:
    """Create the Redis connection described by settings and register it."""
    client = RedisCommandClient.from_config(settings.redis)
    register(settings.redis.connection_name, client)
    return client


def setup(settings: Settings) -> RedisCommandClient:
    """Application startup: apply logging settings, then connect."""
    configure_logging(level=settings.logging.level, format=settings.logging.format)
    return connect(settings)
