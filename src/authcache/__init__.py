"""authcache - Redis-backed cache store for authentication credentials."""

from authcache.backends.memory.store import MemoryCacheStore
from authcache.backends.redis.client import RedisCommandClient
from authcache.backends.redis.store import RedisCacheStore
from authcache.config import CacheConfig, RedisConfig, Settings
from authcache.exceptions import (
    AuthCacheError,
    ConfigError,
    ConnectionNotFoundError,
    DecodeError,
    InvalidKeyError,
    MalformedKeyError,
)
from authcache.matching import ANY, WILDCARD, KeyPattern
from authcache.observability import (
    LogLevel,
    StructuredLogger,
    Timer,
    configure_logging,
    emit_counter,
    emit_metric,
    emit_timer,
    get_logger,
    register_metric_callback,
)
from authcache.plugins import create_cache_store
from authcache.protocols import NOT_FOUND, CacheStore, CommandExecutor
from authcache.records import User
from authcache.serialization import PickleSerializer, Serializer

__version__ = "0.1.0"
__all__ = [
    # Stores
    "CacheStore",
    "MemoryCacheStore",
    "NOT_FOUND",
    "RedisCacheStore",
    "create_cache_store",
    # Connections
    "CommandExecutor",
    "RedisCommandClient",
    # Keys and values
    "ANY",
    "KeyPattern",
    "PickleSerializer",
    "Serializer",
    "User",
    "WILDCARD",
    # Configuration
    "CacheConfig",
    "RedisConfig",
    "Settings",
    # Errors
    "AuthCacheError",
    "ConfigError",
    "ConnectionNotFoundError",
    "DecodeError",
    "InvalidKeyError",
    "MalformedKeyError",
    # Observability
    "LogLevel",
    "StructuredLogger",
    "Timer",
    "configure_logging",
    "emit_counter",
    "emit_metric",
    "emit_timer",
    "get_logger",
    "register_metric_callback",
]
