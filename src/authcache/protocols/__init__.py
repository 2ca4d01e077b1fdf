"""Protocol interfaces for pluggable cache stores."""

from authcache.protocols.cache_store import NOT_FOUND, CacheStore, NotFound
from authcache.protocols.command_executor import Command, CommandExecutor

__all__ = [
    "CacheStore",
    "Command",
    "CommandExecutor",
    "NOT_FOUND",
    "NotFound",
]
