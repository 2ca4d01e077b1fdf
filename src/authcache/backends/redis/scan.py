"""Scan-and-match over a Redis keyspace.

``scan_matching`` walks every key under a namespace with ``SCAN``, keeps
the keys whose namespace-stripped segments match a pattern, and loads
their values with one ``MGET`` per batch.

SCAN gives weak guarantees: a batch may be empty before the end, keys
may come back more than once, and a key listed by SCAN may expire or be
deleted before the MGET that follows. Empty batches are skipped,
repeats are dropped, and keys whose value is gone by the time of the
MGET are left out of the results.
"""

from collections.abc import AsyncIterator
from typing import Any

from authcache import keys
from authcache.matching import KeyPattern, Pattern
from authcache.protocols.command_executor import CommandExecutor
from authcache.serialization import Serializer

START_CURSOR = 0


async def scan_batch(
    client: CommandExecutor,
    cursor: int,
    match: str,
    count: int | None = None,
) -> tuple[int, list[Any]]:
    """Issue one SCAN call and return ``(next_cursor, raw_keys)``."""
    command: list[Any] = ["SCAN", cursor, "MATCH", match]
    if count is not None:
        command += ["COUNT", count]
    next_cursor, raw_keys = await client.execute(*command)
    return int(next_cursor), list(raw_keys)


async def scan_matching(
    client: CommandExecutor,
    namespace: str,
    pattern: "Pattern | KeyPattern",
    serializer: Serializer,
    count: int | None = None,
) -> AsyncIterator[tuple[list[str], Any]]:
    """Yield every live ``(key, value)`` under ``namespace`` matching ``pattern``.

    Keys are yielded without the namespace. Within each SCAN batch they
    come out sorted by their segments.

    Raises:
        MalformedKeyError: A key under the namespace glob cannot be
            decoded into namespace plus segments.
        DecodeError: A stored value cannot be deserialized.
    """
    compiled = KeyPattern.compile(pattern)
    match = keys.scan_pattern(namespace)
    seen: set[tuple[str, ...]] = set()
    cursor = START_CURSOR

    while True:
        cursor, raw_keys = await scan_batch(client, cursor, match, count)

        candidates: dict[tuple[str, ...], Any] = {}
        for raw in raw_keys:
            segments = tuple(keys.strip_namespace(namespace, keys.decode(raw)))
            if segments not in seen:
                candidates[segments] = raw

        matched = sorted(compiled.filter(candidates))
        if matched:
            seen.update(matched)
            values = await client.execute("MGET", *(candidates[key] for key in matched))
            for key, value in zip(matched, values):
                if value is None:
                    continue
                yield list(key), serializer.deserialize(value)

        if cursor == START_CURSOR:
            return
