"""
Namespaced key/value persistence for bot state.

Every value lives under `state:<namespace>:<key>` as JSON. Read-modify-write
goes through `modify`, which runs as a single optimistic Valkey transaction.
"""

from typing import Any, Callable

from clients.valkey_client import ValkeyClient


class StateStore:
    """Process-wide key/value store backed by Valkey."""

    KEY_PREFIX = "state:"

    def __init__(self, valkey: ValkeyClient):
        self._valkey = valkey

    def _key(self, namespace: str, key: str) -> str:
        return f"{self.KEY_PREFIX}{namespace}:{key}"

    async def get(self, namespace: str, key: str, default: Any = None) -> Any:
        """Get a stored value, or `default` if nothing is stored."""
        value = await self._valkey.get_json(self._key(namespace, key))
        return default if value is None else value

    async def set(self, namespace: str, key: str, value: Any) -> None:
        await self._valkey.set_json(self._key(namespace, key), value)

    async def modify(
        self,
        namespace: str,
        key: str,
        update: Callable[[Any], tuple[Any, Any]],
        default: Any = None,
    ) -> Any:
        """
        Atomically transform a stored value.

        Args:
            update: fn(current) -> (new_value, result). `current` is `default`
                when nothing is stored. May run more than once under contention,
                so it must not have side effects.

        Returns:
            The `result` half of what `update` returned.
        """

        def _apply(current: Any) -> tuple[Any, Any]:
            return update(default if current is None else current)

        return await self._valkey.update_json(self._key(namespace, key), _apply)

    async def get_or_create(self, namespace: str, key: str, factory: Callable[[], Any]) -> Any:
        """
        Return the stored value, creating it with `factory()` on first use.

        Concurrent first calls agree on a single value.
        """
        existing = await self.get(namespace, key)
        if existing:
            return existing

        def _ensure(current: Any) -> tuple[Any, Any]:
            if current:
                return current, current
            created = factory()
            return created, created

        return await self.modify(namespace, key, _ensure)
