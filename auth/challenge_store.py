"""Login challenges for bot administrators.

A login code can only be issued to someone already in the admin set. The code
is delivered over the messaging network, so proving knowledge of it proves
control of that account.

Flow:
1. send_auth_code: resolve tag, check admin set, store a one-minute code,
   deliver it on the login thread
2. validate_auth_code: purge expired codes, compare, consume on match
3. Every mismatch bumps the failure counter; at the threshold each further
   failure broadcasts a security alert
"""

import asyncio
import logging
import secrets
from datetime import datetime, timedelta
from enum import Enum
from typing import Any
from uuid import uuid4

from auth import words
from auth.broadcaster import NotificationBroadcaster
from auth.config import (
    AuthConfig,
    AUTH_NAMESPACE,
    ADMIN_IDS_KEY,
    PENDING_KEY,
    FAILS_KEY,
    GROUP_THREAD_KEY,
)
from auth.exceptions import (
    IncorrectCodeError,
    InvalidTargetError,
    NoChallengePendingError,
    NotAuthorizedError,
)
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.types import AuthFailureCounter, PendingChallenge
from clients.state_store import StateStore
from core.directory_cache import UserDirectoryCache
from core.identity import normalize_tag
from core.transport import MessageSender
from utils.timezone import now_utc, humanize_since

logger = logging.getLogger(__name__)


class _Outcome(Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    NOT_PENDING = "not_pending"


def _load_pending(raw: dict[str, Any]) -> dict[str, PendingChallenge]:
    return {uid: PendingChallenge.model_validate(c) for uid, c in raw.items()}


def _dump_pending(pending: dict[str, PendingChallenge]) -> dict[str, Any]:
    return {uid: c.model_dump(mode="json") for uid, c in pending.items()}


def remove_expired_auth_codes(
    pending: dict[str, PendingChallenge], now: datetime
) -> dict[str, PendingChallenge]:
    """Return a copy of `pending` without entries that expired before `now`."""
    return {uid: c for uid, c in pending.items() if c.expires >= now}


class AuthChallengeStore:
    """Pending login codes, admin-set gatekeeping and failure counting."""

    def __init__(
        self,
        config: AuthConfig,
        state: StateStore,
        directory: UserDirectoryCache,
        sender: MessageSender,
        broadcaster: NotificationBroadcaster,
        security_logger: SecurityLogger,
    ):
        self._config = config
        self._state = state
        self._directory = directory
        self._sender = sender
        self._broadcaster = broadcaster
        self._security_logger = security_logger

    async def get_group_auth_thread_id(self) -> str:
        """Login thread id, created on first use."""
        return await self._state.get_or_create(
            AUTH_NAMESPACE, GROUP_THREAD_KEY, lambda: str(uuid4())
        )

    def gen_auth_code(self, now: datetime | None = None) -> PendingChallenge:
        """Two random words, valid for the configured number of minutes."""
        now = now or now_utc()
        return PendingChallenge(
            code=f"{words.adjective()} {words.noun()}",
            expires=now + timedelta(minutes=self._config.auth_code_expiry_minutes),
        )

    def _validity_phrase(self) -> str:
        minutes = self._config.auth_code_expiry_minutes
        return "one minute" if minutes == 1 else f"{minutes} minutes"

    async def send_auth_code(self, tag_or_id: str) -> str:
        """Issue a login code to an existing administrator.

        Returns:
            The resolved user id.

        Raises:
            InvalidTargetError: Tag does not resolve to exactly one user.
            NotAuthorizedError: User is not an administrator.
        """
        tag = normalize_tag(tag_or_id)
        resolved = await self._directory.resolve_tags(tag)
        if not resolved.is_single_user:
            await self._security_logger.log(
                SecurityEvent.AUTH_CODE_REFUSED,
                details={"tag": tag, "reason": "invalid_target"},
            )
            raise InvalidTargetError()

        user_id = resolved.userids[0]
        admin_ids = await self._state.get(AUTH_NAMESPACE, ADMIN_IDS_KEY, [])
        if user_id not in admin_ids:
            await self._security_logger.log(
                SecurityEvent.AUTH_CODE_REFUSED,
                user_id=user_id,
                details={"tag": tag, "reason": "not_authorized"},
            )
            raise NotAuthorizedError()

        now = now_utc()
        challenge = self.gen_auth_code(now)

        def _store(raw: dict[str, Any]) -> tuple[dict[str, Any], None]:
            pending = remove_expired_auth_codes(_load_pending(raw), now)
            pending[user_id] = challenge
            return _dump_pending(pending), None

        await self._state.modify(AUTH_NAMESPACE, PENDING_KEY, _store, default={})

        await self._sender.send(
            distribution=resolved,
            thread_title=self._config.login_thread_title,
            thread_id=await self.get_group_auth_thread_id(),
            text=f"codewords: {challenge.code}\n(valid for {self._validity_phrase()})",
        )

        await self._security_logger.log(SecurityEvent.AUTH_CODE_SENT, user_id=user_id)
        return user_id

    async def validate_auth_code(self, user_id: str, code: str) -> bool:
        """Check a submitted login code and consume it on success.

        Raises:
            NoChallengePendingError: No unexpired code for this user.
            IncorrectCodeError: Code mismatch (after the throttle delay).
        """
        now = now_utc()

        def _consume(raw: dict[str, Any]) -> tuple[dict[str, Any], _Outcome]:
            pending = remove_expired_auth_codes(_load_pending(raw), now)
            challenge = pending.get(user_id)
            if challenge is None:
                return _dump_pending(pending), _Outcome.NOT_PENDING
            if not secrets.compare_digest(challenge.code.encode(), (code or "").encode()):
                return _dump_pending(pending), _Outcome.MISMATCH
            del pending[user_id]
            return _dump_pending(pending), _Outcome.MATCH

        outcome = await self._state.modify(AUTH_NAMESPACE, PENDING_KEY, _consume, default={})

        if outcome is _Outcome.NOT_PENDING:
            await self._security_logger.log(SecurityEvent.LOGIN_NOT_PENDING, user_id=user_id)
            raise NoChallengePendingError()

        if outcome is _Outcome.MISMATCH:
            try:
                await self._security_logger.log(SecurityEvent.LOGIN_FAILED, user_id=user_id)
                await self.increment_auth_fail_count()
            finally:
                # Throttle guessers
                await asyncio.sleep(self._config.failed_attempt_delay_seconds)
            raise IncorrectCodeError()

        await self._broadcaster.broadcast_notice("LOGIN", actor_user_id=user_id, list_all=False)
        await self.reset_auth_fail_count()
        await self._security_logger.log(SecurityEvent.LOGIN_SUCCEEDED, user_id=user_id)
        return True

    async def get_auth_fail_count(self) -> AuthFailureCounter:
        raw = await self._state.get(AUTH_NAMESPACE, FAILS_KEY)
        if raw is None:
            return AuthFailureCounter(count=0, since=now_utc())
        return AuthFailureCounter.model_validate(raw)

    async def increment_auth_fail_count(self) -> AuthFailureCounter:
        """Count one failed attempt, alerting admins at or past the threshold."""
        now = now_utc()

        def _increment(raw: dict[str, Any] | None) -> tuple[dict[str, Any], AuthFailureCounter]:
            if raw is None:
                current = AuthFailureCounter(count=0, since=now)
            else:
                current = AuthFailureCounter.model_validate(raw)
            updated = current.model_copy(update={"count": current.count + 1})
            return updated.model_dump(mode="json"), updated

        fails = await self._state.modify(AUTH_NAMESPACE, FAILS_KEY, _increment)

        # Level-triggered: every failure at or beyond the threshold alerts again
        if fails.count >= self._config.auth_fail_threshold:
            logger.warning(f"{fails.count} failed login attempts since {fails.since.isoformat()}")
            await self._security_logger.log(
                SecurityEvent.FAIL_THRESHOLD_EXCEEDED,
                details={"count": fails.count},
            )
            await self._broadcaster.broadcast_notice(
                f"SECURITY ALERT!\n\n{fails.count} failed login attempts "
                f"(last successful login was {humanize_since(fails.since, now)})"
            )

        return fails

    async def reset_auth_fail_count(self) -> None:
        counter = AuthFailureCounter(count=0, since=now_utc())
        await self._state.set(AUTH_NAMESPACE, FAILS_KEY, counter.model_dump(mode="json"))
