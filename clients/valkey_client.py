"""
Valkey (Redis-compatible) client for bot state, sessions and audit events.

Thin async wrapper around redis-py's asyncio client. Connection URL from Vault.
Fail-fast: raises on connection failure, never returns fallback values.
"""

import json
import logging
from typing import Any, Callable

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Async Redis-compatible client for Valkey.

    Usage:
        client = await ValkeyClient.connect("redis://localhost:6379/0")
        await client.set("key", "value", expire_seconds=300)
        value = await client.get("key")  # Returns None if missing
    """

    def __init__(self, client: redis.Redis):
        self._client = client

    @classmethod
    async def connect(cls, url: str) -> "ValkeyClient":
        """
        Open a connection and verify it.

        Args:
            url: Redis-compatible connection URL (e.g., redis://localhost:6379/0)

        Raises:
            redis.ConnectionError: If connection fails
        """
        instance = cls(redis.from_url(url, decode_responses=True))
        # Verify connectivity immediately (fail-fast)
        await instance.ping()
        logger.info("ValkeyClient connected")
        return instance

    async def ping(self) -> bool:
        """
        Health check.

        Returns True if Valkey responds.
        Raises redis.ConnectionError if unreachable.
        """
        await self._client.ping()
        return True

    async def get(self, key: str) -> str | None:
        """
        Get value by key.

        Returns None if key doesn't exist (not an error).
        Raises on connection failure.
        """
        return await self._client.get(key)

    async def set(self, key: str, value: str, expire_seconds: int | None = None) -> None:
        """
        Set key to value, optionally with expiration.

        Args:
            key: Key to set
            value: Value to store
            expire_seconds: TTL in seconds (None for no expiration)
        """
        if expire_seconds is not None:
            await self._client.setex(key, expire_seconds, value)
        else:
            await self._client.set(key, value)

    async def delete(self, key: str) -> bool:
        """
        Delete key.

        Returns True if key existed and was deleted, False if key didn't exist.
        """
        return await self._client.delete(key) > 0

    async def ttl(self, key: str) -> int:
        """
        Get remaining TTL in seconds.

        Returns:
            -2 if key doesn't exist
            -1 if key has no expiration
            Positive int: remaining seconds
        """
        return await self._client.ttl(key)

    async def set_json(self, key: str, value: Any, expire_seconds: int | None = None) -> None:
        """Set key to JSON-serialized value."""
        await self.set(key, json.dumps(value), expire_seconds)

    async def get_json(self, key: str) -> Any | None:
        """
        Get and deserialize JSON value.

        Returns None if key doesn't exist.
        Raises ValueError if value is not valid JSON.
        """
        value = await self.get(key)
        if value is None:
            return None
        return _loads(key, value)

    async def update_json(
        self,
        key: str,
        update: Callable[[Any | None], tuple[Any, Any]],
    ) -> Any:
        """
        Atomically read-modify-write a JSON value.

        `update` receives the current decoded value (None if missing) and
        returns (new_value, result). Runs inside WATCH/MULTI/EXEC; if another
        writer touches the key first the transaction is replayed, so `update`
        must be a pure function of its input.

        Returns:
            The `result` produced by the winning invocation of `update`.
        """

        async def _apply(pipe) -> Any:
            raw = await pipe.get(key)
            current = _loads(key, raw) if raw is not None else None
            new_value, result = update(current)
            pipe.multi()
            pipe.set(key, json.dumps(new_value))
            return result

        return await self._client.transaction(_apply, key, value_from_callable=True)

    async def push_json(self, key: str, value: Any, max_length: int) -> None:
        """Prepend a JSON record to a list, keeping only the newest `max_length`."""
        async with self._client.pipeline(transaction=True) as pipe:
            pipe.lpush(key, json.dumps(value))
            pipe.ltrim(key, 0, max_length - 1)
            await pipe.execute()

    async def range_json(self, key: str, limit: int) -> list[Any]:
        """Return up to `limit` newest records pushed with push_json."""
        values = await self._client.lrange(key, 0, limit - 1)
        return [_loads(key, v) for v in values]

    async def close(self) -> None:
        """Close the connection."""
        await self._client.aclose()
        logger.info("ValkeyClient closed")


def _loads(key: str, value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in key '{key}': {e}")

