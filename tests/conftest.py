"""Shared test fixtures for the bot test suite.

Valkey and the directory are replaced by in-memory stand-ins so the real
StateStore, caches and services run in every test without external services.
"""

import json
from typing import Any, Callable
from unittest.mock import AsyncMock, Mock

import pytest

from auth.admin_registry import AdminRegistry
from auth.broadcaster import NotificationBroadcaster
from auth.challenge_store import AuthChallengeStore
from auth.config import AuthConfig, AUTH_NAMESPACE, ADMIN_IDS_KEY
from auth.security_logger import SecurityLogger
from auth.types import Distribution, User
from clients.state_store import StateStore
from core.config import BotConfig
from core.directory_cache import UserDirectoryCache


# =============================================================================
# TEST USER CONSTANTS
# =============================================================================

BOT_ID = "bot-0000"
ROOT_ID = "u1"
ALICE_ID = "u2"
BOB_ID = "u3"
CAROL_ID = "u4"


def make_user(user_id: str, slug: str, first: str, last: str | None = None, org: str = "acme") -> User:
    return User.model_validate(
        {
            "id": user_id,
            "tag": {"slug": slug},
            "org": {"slug": org},
            "first_name": first,
            "middle_name": None,
            "last_name": last,
        }
    )


USERS = [
    make_user(BOT_ID, "translator", "Translator", "Bot"),
    make_user(ROOT_ID, "root", "Root", "Admin"),
    make_user(ALICE_ID, "alice", "Alice", "Smith"),
    make_user(BOB_ID, "bob", "Bob", "Jones"),
    make_user(CAROL_ID, "carol", "Carol"),
]


# =============================================================================
# IN-MEMORY STAND-INS
# =============================================================================


class FakeValkey:
    """Dict-backed stand-in for ValkeyClient. Values are stored serialized."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.lists: dict[str, list[str]] = {}
        self.expiry: dict[str, int] = {}

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str, expire_seconds: int | None = None) -> None:
        self.data[key] = value
        if expire_seconds is not None:
            self.expiry[key] = expire_seconds

    async def delete(self, key: str) -> bool:
        self.expiry.pop(key, None)
        return self.data.pop(key, None) is not None

    async def ttl(self, key: str) -> int:
        if key not in self.data:
            return -2
        return self.expiry.get(key, -1)

    async def set_json(self, key: str, value: Any, expire_seconds: int | None = None) -> None:
        await self.set(key, json.dumps(value), expire_seconds)

    async def get_json(self, key: str) -> Any | None:
        value = self.data.get(key)
        return None if value is None else json.loads(value)

    async def update_json(self, key: str, update: Callable) -> Any:
        current = await self.get_json(key)
        new_value, result = update(current)
        self.data[key] = json.dumps(new_value)
        return result

    async def push_json(self, key: str, value: Any, max_length: int) -> None:
        items = self.lists.setdefault(key, [])
        items.insert(0, json.dumps(value))
        del items[max_length:]

    async def range_json(self, key: str, limit: int) -> list[Any]:
        return [json.loads(v) for v in self.lists.get(key, [])[:limit]]

    async def close(self) -> None:
        pass


class FakeDirectory:
    """Directory stand-in resolving `@slug:org` terms joined with `+`."""

    def __init__(self, users: list[User]):
        self.users = {u.id: u for u in users}
        self.extra_tags: dict[str, Distribution] = {}
        self.get_users_calls: list[list[str]] = []
        self.resolve_calls: list[str] = []

    async def get_users(self, ids: list[str]) -> list[User]:
        self.get_users_calls.append(list(ids))
        return [self.users[i] for i in ids if i in self.users]

    async def resolve_tags(self, expression: str) -> Distribution:
        self.resolve_calls.append(expression)
        if expression in self.extra_tags:
            return self.extra_tags[expression]

        by_tag = {f"@{u.tag.slug}:{u.org.slug}": u.id for u in self.users.values()}
        userids, warnings = [], []
        for term in (t.strip() for t in expression.split("+")):
            if not term:
                continue
            if term in by_tag:
                if by_tag[term] not in userids:
                    userids.append(by_tag[term])
            else:
                warnings.append({"kind": "unknown", "cue": term})
        return Distribution(userids=userids, warnings=warnings)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def auth_config():
    """Auth config without the throttle delay."""
    return AuthConfig(failed_attempt_delay_seconds=0)


@pytest.fixture
def bot_config():
    return BotConfig()


@pytest.fixture
def valkey():
    return FakeValkey()


@pytest.fixture
def state(valkey):
    return StateStore(valkey)


@pytest.fixture
def fake_directory():
    return FakeDirectory(USERS)


@pytest.fixture
def directory(fake_directory):
    return UserDirectoryCache(fake_directory, ttl_seconds=60)


@pytest.fixture
def sender():
    """Transport sender - records every message sent."""
    mock = Mock()
    mock.send = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def translator():
    """Translator that prefixes the language code, e.g. `[fr] hello`."""
    mock = Mock()
    mock.translate = AsyncMock(side_effect=lambda text, language: [f"[{language}] {text}"])
    return mock


@pytest.fixture
def security_logger(valkey):
    return SecurityLogger(valkey)


@pytest.fixture
def broadcaster(auth_config, state, directory, sender):
    return NotificationBroadcaster(auth_config, state, directory, sender)


@pytest.fixture
def challenge_store(auth_config, state, directory, sender, broadcaster, security_logger):
    return AuthChallengeStore(
        config=auth_config,
        state=state,
        directory=directory,
        sender=sender,
        broadcaster=broadcaster,
        security_logger=security_logger,
    )


@pytest.fixture
def admin_registry(state, directory, broadcaster, security_logger):
    return AdminRegistry(state, directory, broadcaster, security_logger)


@pytest.fixture
async def seeded_admins(state):
    """Root is the only administrator."""
    await state.set(AUTH_NAMESPACE, ADMIN_IDS_KEY, [ROOT_ID])
    return [ROOT_ID]

