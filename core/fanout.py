"""
Per-language translation fan-out.

One translated reply per distinct language preference among the recipients,
each sent to the whole distribution. Languages are handled concurrently and
independently: a failure in one is logged and does not stop the others.
"""

import asyncio
import logging

from auth.types import Distribution
from clients.state_store import StateStore
from clients.translation_client import TranslationClient
from core.config import LANGUAGE_NAMESPACE
from core.directory_cache import UserDirectoryCache
from core.transport import MessageSender

logger = logging.getLogger(__name__)


class TranslationFanout:
    """Translates a message for every language spoken in its distribution."""

    def __init__(
        self,
        state: StateStore,
        directory: UserDirectoryCache,
        translator: TranslationClient,
        sender: MessageSender,
    ):
        self._state = state
        self._directory = directory
        self._translator = translator
        self._sender = sender

    async def recipient_languages(self, dist: Distribution) -> set[str]:
        """Distinct stored preferences of the recipients. No preference, no language."""
        recipients = await self._directory.get_users(dist.userids)
        languages = set()
        for user in recipients:
            language = await self._state.get(LANGUAGE_NAMESPACE, user.id)
            if language:
                languages.add(language)
        return languages

    async def translate_by_user(
        self,
        dist: Distribution,
        thread_id: str | None,
        message_id: str | None,
        message_text: str,
        sender_id: str,
    ) -> dict[str, bool]:
        """
        Send one translated reply per recipient language.

        Returns:
            language -> whether a reply was sent. Suppressed and failed
            languages map to False.
        """
        languages = sorted(await self.recipient_languages(dist))
        results = await asyncio.gather(
            *(
                self._translate_one(dist, thread_id, message_id, message_text, language)
                for language in languages
            ),
            return_exceptions=True,
        )

        sent = {}
        for language, result in zip(languages, results):
            if isinstance(result, Exception):
                logger.error(
                    f"Translation to {language} failed for message {message_id} from {sender_id}",
                    exc_info=result,
                )
                sent[language] = False
            else:
                sent[language] = result
        return sent

    async def _translate_one(
        self,
        dist: Distribution,
        thread_id: str | None,
        message_id: str | None,
        message_text: str,
        language: str,
    ) -> bool:
        translation = (await self._translator.translate(message_text, language))[0]
        if translation.strip() == message_text.strip():
            # Don't send meaningless translations
            return False

        await self._sender.send(
            distribution=dist,
            thread_id=thread_id,
            message_ref=message_id,
            html=translation,
            text=translation,
        )
        return True
