"""Identity record stored by the authentication framework."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class User:
    """A user as seen by the authentication framework.

    Only ``id`` and ``guid`` identify the user; the remaining fields are
    loaded profile data that is never written to the cache.
    """

    id: int
    guid: str
    email: str | None = None
    password_hash: str | None = None
    roles: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def identity(self) -> "User":
        """Return a copy holding only the identifying fields."""
        return User(id=self.id, guid=self.guid)
