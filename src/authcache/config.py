"""Configuration loading with environment variable substitution."""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, PositiveInt, ValidationError

from authcache.exceptions import ConfigError
from authcache.observability import LogLevel

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")

DEFAULT_CACHE_NAMESPACE = "cache"


def substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} patterns with environment variables."""
    if isinstance(value, str):
        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable {var_name} is not set")
            return env_value

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]
    return value


class CacheConfig(BaseModel):
    """Per-call options handed to a cache store by the auth framework."""

    ttl: PositiveInt | None = None  # milliseconds
    namespace: str = DEFAULT_CACHE_NAMESPACE

    @classmethod
    def coerce(cls, config: "CacheConfig | Mapping[str, Any] | None") -> "CacheConfig":
        """Accept either a CacheConfig or a plain options mapping."""
        if isinstance(config, CacheConfig):
            return config
        try:
            return cls.model_validate(dict(config or {}))
        except ValidationError as e:
            raise ConfigError(f"Invalid cache configuration: {e}") from e

    def require_ttl(self, store: str) -> int:
        """Return the TTL or raise if the option was not supplied."""
        if self.ttl is None:
            raise ConfigError(f"`ttl` configuration option is required for {store}")
        return self.ttl


class RedisConfig(BaseModel):
    """Redis connection settings."""

    url: str = "redis://localhost:6379/0"
    connection_name: str = "default"
    socket_timeout: float | None = 5.0
    socket_connect_timeout: float | None = 5.0
    max_connections: int | None = None
    scan_count: PositiveInt | None = None  # COUNT hint for SCAN


class LoggingConfig(BaseModel):
    """Logging output settings."""

    level: LogLevel = LogLevel.INFO
    format: str = "json"  # json | text


class Settings(BaseModel):
    """Process-wide configuration for authcache."""

    namespace: str = "authcache"  # application namespace, prefixed onto every key
    redis: RedisConfig = Field(default_factory=RedisConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    caches: dict[str, CacheConfig] = Field(default_factory=dict)

    def cache(self, name: str) -> CacheConfig:
        """Get the options of a named cache."""
        try:
            return self.caches[name]
        except KeyError:
            available = ", ".join(sorted(self.caches)) or "(none)"
            raise ConfigError(
                f"Cache '{name}' is not configured. Available: {available}"
            ) from None

    @classmethod
    def from_file(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML or JSON file."""
        path = Path(path)
        with path.open() as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                import json
                data = json.load(f)

        # Substitute environment variables
        data = substitute_env_vars(data or {})
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """Load settings from a dictionary."""
        data = substitute_env_vars(data)
        return cls.model_validate(data)
