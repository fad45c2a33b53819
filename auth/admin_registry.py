"""Administrator set management.

The admin set is an ordered list of user ids in persistence. Every change is
announced to the administrators through the compliance thread.
"""

import logging

from auth.broadcaster import NotificationBroadcaster
from auth.config import AUTH_NAMESPACE, ADMIN_IDS_KEY
from auth.exceptions import AdministratorNotFoundError, InvalidTargetError
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.types import AdminEntry
from clients.state_store import StateStore
from core.directory_cache import UserDirectoryCache
from core.identity import fq_label, normalize_tag

logger = logging.getLogger(__name__)


class AdminRegistry:
    """Reads and mutates the authorized-user set."""

    def __init__(
        self,
        state: StateStore,
        directory: UserDirectoryCache,
        broadcaster: NotificationBroadcaster,
        security_logger: SecurityLogger,
    ):
        self._state = state
        self._directory = directory
        self._broadcaster = broadcaster
        self._security_logger = security_logger

    async def get_admin_ids(self) -> list[str]:
        return await self._state.get(AUTH_NAMESPACE, ADMIN_IDS_KEY, [])

    async def is_administrator(self, user_id: str) -> bool:
        return user_id in await self.get_admin_ids()

    async def get_administrators(self) -> list[AdminEntry]:
        """Current administrators, ordered as stored."""
        users = await self._directory.get_users(await self.get_admin_ids())
        return [AdminEntry(id=u.id, label=fq_label(u)) for u in users]

    async def add_administrator(self, add_tag: str, actor_user_id: str) -> list[AdminEntry]:
        """Authorize the user behind `add_tag`.

        Adding an existing admin is a no-op on the set but is still announced.

        Raises:
            InvalidTargetError: Tag does not resolve to exactly one user.
        """
        resolved = await self._directory.resolve_tags(normalize_tag(add_tag))
        if not resolved.is_single_user:
            raise InvalidTargetError()

        user_id = resolved.userids[0]

        def _add(admin_ids: list[str]) -> tuple[list[str], bool]:
            if user_id in admin_ids:
                return admin_ids, False
            return admin_ids + [user_id], True

        added = await self._state.modify(AUTH_NAMESPACE, ADMIN_IDS_KEY, _add, default=[])
        if added:
            logger.info(f"Administrator {user_id} added by {actor_user_id}")

        await self._broadcaster.broadcast_notice(
            f"ADDED <<{user_id}>> to authorized users", actor_user_id=actor_user_id
        )
        await self._security_logger.log(
            SecurityEvent.ADMIN_ADDED,
            user_id=user_id,
            actor_user_id=actor_user_id,
            details={"already_member": not added},
        )
        return await self.get_administrators()

    async def remove_administrator(self, remove_id: str, actor_user_id: str) -> list[AdminEntry]:
        """Revoke `remove_id`.

        The notice goes out before the removal is persisted, so the removed
        user still appears in its authorized-users listing.

        Raises:
            AdministratorNotFoundError: `remove_id` is not an admin.
        """
        if not await self.is_administrator(remove_id):
            raise AdministratorNotFoundError()

        await self._broadcaster.broadcast_notice(
            f"REMOVING <<{remove_id}>> from authorized users", actor_user_id=actor_user_id
        )

        def _remove(admin_ids: list[str]) -> tuple[list[str], bool]:
            if remove_id not in admin_ids:
                return admin_ids, False
            return [uid for uid in admin_ids if uid != remove_id], True

        removed = await self._state.modify(AUTH_NAMESPACE, ADMIN_IDS_KEY, _remove, default=[])
        if not removed:
            # Lost a race with a concurrent removal
            raise AdministratorNotFoundError()

        logger.info(f"Administrator {remove_id} removed by {actor_user_id}")
        await self._security_logger.log(
            SecurityEvent.ADMIN_REMOVED, user_id=remove_id, actor_user_id=actor_user_id
        )
        return await self.get_administrators()
