"""Admin session tokens.

A session is created after a successful code validation and lives in Valkey
under `session:<token>` with a TTL equal to its remaining lifetime. Each
validation slides the expiry forward.
"""

import secrets
from datetime import timedelta

from auth.config import AuthConfig
from auth.exceptions import SessionExpiredError
from auth.types import Session
from clients.valkey_client import ValkeyClient
from utils.timezone import now_utc


class SessionManager:
    KEY_PREFIX = "session:"

    def __init__(self, valkey: ValkeyClient, config: AuthConfig):
        self._valkey = valkey
        self._config = config

    @property
    def _lifetime(self) -> timedelta:
        return timedelta(hours=self._config.session_expiry_hours)

    def _key(self, token: str) -> str:
        return f"{self.KEY_PREFIX}{token}"

    async def _store(self, session: Session) -> None:
        await self._valkey.set_json(
            self._key(session.token),
            session.model_dump(mode="json", exclude={"token"}),
            expire_seconds=int(self._lifetime.total_seconds()),
        )

    async def create_session(self, user_id: str) -> Session:
        now = now_utc()
        session = Session(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + self._lifetime,
            last_activity_at=now,
        )
        await self._store(session)
        return session

    async def validate_session(self, token: str) -> Session:
        """Return the session with its expiry extended.

        Raises:
            SessionExpiredError: Unknown, revoked or expired token.
        """
        data = await self._valkey.get_json(self._key(token))
        if data is None:
            raise SessionExpiredError()

        session = Session.model_validate({**data, "token": token})
        now = now_utc()

        # Valkey TTL normally removes these first
        if now > session.expires_at:
            await self._valkey.delete(self._key(token))
            raise SessionExpiredError("session expired")

        extended = session.model_copy(
            update={"expires_at": now + self._lifetime, "last_activity_at": now}
        )
        await self._store(extended)
        return extended

    async def revoke_session(self, token: str) -> None:
        """Safe to call with an unknown token."""
        await self._valkey.delete(self._key(token))
