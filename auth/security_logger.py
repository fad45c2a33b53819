"""Security event logging for the auth audit trail.

Events are mirrored to the `auth.security_logger` logger and appended to a
capped Valkey list, newest first.
"""

import logging
from enum import Enum
from typing import Any

from clients.valkey_client import ValkeyClient
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class SecurityEvent(Enum):
    """Auth security event types."""

    AUTH_CODE_SENT = "auth_code_sent"
    AUTH_CODE_REFUSED = "auth_code_refused"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGIN_NOT_PENDING = "login_not_pending"
    FAIL_THRESHOLD_EXCEEDED = "fail_threshold_exceeded"
    ADMIN_ADDED = "admin_added"
    ADMIN_REMOVED = "admin_removed"
    SESSION_CREATED = "session_created"
    SESSION_REVOKED = "session_revoked"


class SecurityLogger:
    """Append-only security event logger."""

    EVENTS_KEY = "security_events"

    def __init__(self, valkey: ValkeyClient, retention: int = 1000):
        self._valkey = valkey
        self._retention = retention

    async def log(
        self,
        event: SecurityEvent,
        user_id: str | None = None,
        actor_user_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Record a security event."""
        record = {
            "event_type": event.value,
            "user_id": user_id,
            "actor_user_id": actor_user_id,
            "details": details,
            "created_at": now_utc().isoformat(),
        }
        logger.info(
            "security event %s user=%s actor=%s details=%s",
            event.value,
            user_id,
            actor_user_id,
            details,
        )
        await self._valkey.push_json(self.EVENTS_KEY, record, self._retention)

    async def get_recent_events(
        self,
        user_id: str | None = None,
        event_type: SecurityEvent | None = None,
        limit: int = 100,
    ) -> list[dict]:
        """Query recent security events with optional filters, newest first."""
        events = await self._valkey.range_json(self.EVENTS_KEY, self._retention)

        if user_id:
            events = [e for e in events if user_id in (e["user_id"], e["actor_user_id"])]

        if event_type:
            events = [e for e in events if e["event_type"] == event_type.value]

        return events[:limit]
