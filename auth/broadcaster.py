"""
Compliance notices to the current administrators.

Every admin-set change and every login is announced on a single compliance
thread. Delivery is best-effort: a failed recipient lookup or send is logged,
never raised, so it cannot undo or fail the operation being announced.
"""

import logging
import re
from uuid import uuid4

from auth.config import AuthConfig, AUTH_NAMESPACE, ADMIN_IDS_KEY, SOLO_THREAD_KEY
from auth.types import Distribution
from clients.state_store import StateStore
from core.directory_cache import UserDirectoryCache
from core.identity import fq_label, fq_tag
from core.transport import MessageSender

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"<<([^>]*)>>")


class NotificationBroadcaster:
    """Composes and sends administrative notices."""

    def __init__(
        self,
        config: AuthConfig,
        state: StateStore,
        directory: UserDirectoryCache,
        sender: MessageSender,
    ):
        self._config = config
        self._state = state
        self._directory = directory
        self._sender = sender

    async def get_solo_auth_thread_id(self) -> str:
        """Compliance thread id, created on first use."""
        return await self._state.get_or_create(
            AUTH_NAMESPACE, SOLO_THREAD_KEY, lambda: str(uuid4())
        )

    async def _compose(
        self, note: str, actor_user_id: str | None, list_all: bool
    ) -> tuple[str, Distribution]:
        admin_ids = await self._state.get(AUTH_NAMESPACE, ADMIN_IDS_KEY, [])
        recipient_ids = list(admin_ids)
        transient_actor = bool(actor_user_id) and actor_user_id not in admin_ids
        if transient_actor:
            recipient_ids.append(actor_user_id)

        users = await self._directory.get_users(recipient_ids)
        users_by_id = {u.id: u for u in users}
        expression = " + ".join(fq_tag(u) for u in users)
        distribution = await self._directory.resolve_tags(expression)

        message = note
        if actor_user_id:
            message += f"\n\nPerformed by {fq_label(users_by_id.get(actor_user_id))}"
        if list_all:
            admin_list = "\n".join(
                fq_label(u) for u in users if not (transient_actor and u.id == actor_user_id)
            )
            message += f"\n\nCurrent authorized users:\n{admin_list}"

        message = PLACEHOLDER_PATTERN.sub(
            lambda m: fq_label(users_by_id.get(m.group(1))),
            message,
        )
        return message, distribution

    async def broadcast_notice(
        self,
        note: str,
        actor_user_id: str | None = None,
        list_all: bool = True,
    ) -> str | None:
        """
        Send `note` to every administrator.

        Args:
            note: Notice text. `<<userId>>` tokens are replaced with that
                user's label.
            actor_user_id: User the notice is attributed to. If not an admin,
                they receive this notice too, without being added to the set.
            list_all: Append the list of currently authorized users.

        Returns:
            The composed message text, or None if recipients could not be
            resolved.
        """
        message = None
        try:
            message, distribution = await self._compose(note, actor_user_id, list_all)
            thread_id = await self.get_solo_auth_thread_id()
            await self._sender.send(
                distribution=distribution,
                thread_title=self._config.compliance_thread_title,
                thread_id=thread_id,
                text=message,
            )
        except Exception:
            logger.exception("Failed to deliver compliance notice")

        return message
