"""Cache store discovery via Python entry points."""

from importlib.metadata import entry_points
from typing import Any

from authcache.protocols import CacheStore

BACKEND_GROUP = "authcache.backends"


def discover_backends() -> dict[str, Any]:
    """Discover all registered cache store backends.

    Returns:
        Dictionary mapping backend names to their classes
    """
    eps = entry_points(group=BACKEND_GROUP)
    return {ep.name: ep.load() for ep in eps}


def get_backend(name: str) -> Any:
    """Get a specific cache store class by name.

    Args:
        name: The backend name (e.g., "redis", "memory")

    Returns:
        The backend class

    Raises:
        ValueError: If the backend is not found
    """
    backends = discover_backends()
    if name not in backends:
        available = ", ".join(sorted(backends.keys())) or "(none)"
        raise ValueError(
            f"Backend '{name}' not found in group '{BACKEND_GROUP}'. Available: {available}"
        )
    return backends[name]


def create_cache_store(backend: str, **kwargs: Any) -> CacheStore:
    """Create a CacheStore instance.

    Args:
        backend: The backend name (e.g., "redis", "memory")
        **kwargs: Backend-specific configuration

    Returns:
        A CacheStore implementation
    """
    cls = get_backend(backend)
    return cls(**kwargs)
