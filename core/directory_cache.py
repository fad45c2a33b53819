"""
Time-bounded memoisation of directory lookups.

Entries expire after a fixed TTL and are recomputed on the next call; nothing
invalidates them early. Each cache is bounded: expired entries are dropped on
write and the least recently used entry goes once `max_entries` is reached.
Concurrent misses for the same key may both reach the directory, last write
wins.
"""

import time
from typing import Callable

from cachetools import TTLCache

from auth.types import Distribution, User
from clients.directory_client import DirectoryClient


class UserDirectoryCache:
    """Cached view over DirectoryClient with the same two lookups."""

    DEFAULT_TTL_SECONDS = 60
    DEFAULT_MAX_ENTRIES = 1000

    def __init__(
        self,
        directory: DirectoryClient,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._directory = directory
        self._users: TTLCache[tuple[str, ...], list[User]] = TTLCache(
            maxsize=max_entries, ttl=ttl_seconds, timer=timer
        )
        self._tags: TTLCache[str, Distribution] = TTLCache(
            maxsize=max_entries, ttl=ttl_seconds, timer=timer
        )

    async def get_users(self, ids: list[str]) -> list[User]:
        key = tuple(ids)
        users = self._users.get(key)
        if users is None:
            users = await self._directory.get_users(list(key))
            self._users[key] = users
        return list(users)

    async def resolve_tags(self, expression: str) -> Distribution:
        distribution = self._tags.get(expression)
        if distribution is None:
            distribution = await self._directory.resolve_tags(expression)
            self._tags[expression] = distribution
        return distribution
