"""CommandExecutor protocol for remote store connections."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

Command = Sequence[Any]


@runtime_checkable
class CommandExecutor(Protocol):
    """Protocol for connections that run raw store commands."""

    async def execute(self, *command: Any) -> Any:
        """Run one command and return its reply. Errors propagate."""
        ...

    def execute_noreply(self, commands: Sequence[Command]) -> None:
        """Queue commands as one pipeline without waiting for replies."""
        ...

    async def drain(self) -> None:
        """Wait until every queued no-reply pipeline has run."""
        ...
