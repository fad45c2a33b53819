"""Tests for StateStore - namespaced bot state."""

from clients.state_store import StateStore


class TestGetSet:
    async def test_missing_returns_default(self, state):
        assert await state.get("language", "u1") is None
        assert await state.get("authentication", "adminIds", []) == []

    async def test_keys_are_namespaced(self, state, valkey):
        await state.set("language", "u1", "fr")

        assert valkey.data == {"state:language:u1": '"fr"'}
        assert await state.get("language", "u1") == "fr"

    async def test_falsy_stored_value_is_returned(self, state):
        await state.set("authentication", "adminIds", [])

        assert await state.get("authentication", "adminIds", ["x"]) == []


class TestModify:
    async def test_update_sees_default_when_missing(self, state):
        result = await state.modify("ns", "k", lambda ids: (ids + ["u1"], len(ids)), default=[])

        assert result == 0
        assert await state.get("ns", "k") == ["u1"]

    async def test_update_sees_stored_value(self, state):
        await state.set("ns", "k", 5)

        result = await state.modify("ns", "k", lambda n: (n + 1, n))

        assert result == 5
        assert await state.get("ns", "k") == 6


class TestGetOrCreate:
    async def test_creates_once(self, state):
        created = []

        def factory():
            created.append(1)
            return f"thread-{len(created)}"

        first = await state.get_or_create("authentication", "soloThreadId", factory)
        second = await state.get_or_create("authentication", "soloThreadId", factory)

        assert first == second == "thread-1"
        assert created == [1]

    async def test_keeps_existing_value(self, valkey):
        store = StateStore(valkey)
        await store.set("authentication", "groupThreadId", "existing")

        assert await store.get_or_create("authentication", "groupThreadId", lambda: "new") == "existing"
