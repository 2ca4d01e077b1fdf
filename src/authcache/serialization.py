"""Value codec for cached records.

Values are stored as opaque pickle bytes. Users are reduced to their
identity before encoding so a cached credential never carries profile
data or password hashes.

Usage:
    serializer = PickleSerializer()
    data = serializer.serialize(value)
    value = serializer.deserialize(data)
"""

import pickle
from typing import Any, Protocol

from authcache.exceptions import DecodeError
from authcache.records import User


class Serializer(Protocol):
    """Protocol for converting cached values to and from bytes."""

    def serialize(self, value: Any) -> bytes:
        """Convert a value to bytes for storage."""
        ...

    def deserialize(self, data: bytes) -> Any:
        """Convert stored bytes back to the original value."""
        ...


def clean_value(value: Any) -> Any:
    """Strip a User down to its identity; pass anything else through."""
    if isinstance(value, User):
        return value.identity()
    return value


class PickleSerializer:
    """Serializer backed by pickle at the highest protocol."""

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self.protocol = protocol

    def serialize(self, value: Any) -> bytes:
        return pickle.dumps(clean_value(value), protocol=self.protocol)

    def deserialize(self, data: bytes) -> Any:
        try:
            return pickle.loads(data)
        except Exception as e:
            # pickle raises a wide range of types for foreign or truncated input
            raise DecodeError(f"Cannot decode cached value: {e}") from e
