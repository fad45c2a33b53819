"""
Commands addressed to the bot by mention.

Grammar: `@bot <command> [argument]`. Unknown commands get no reply.
"""

import logging
import re
from typing import Awaitable, Callable

from auth.types import Distribution
from clients.state_store import StateStore
from clients.translation_client import TranslationClient
from core.config import BotConfig, LANGUAGE_NAMESPACE
from core.languages import normalize_language
from core.transport import MessageSender

logger = logging.getLogger(__name__)

# Capturing split keeps separator runs, including the non-space whitespace
# that mention insertion produces, so they can be told apart from empty tokens.
_WHITESPACE_SPLIT = re.compile(r"(\s+)")
_WHITESPACE_RUN = re.compile(r"\s+")

HELP_TEXT = (
    "Command list:\n"
    "help - lists my commands\n"
    "language [language] - sets your preferred language to the specified language"
)


def tokenize(text: str) -> list[str]:
    """Split on whitespace runs, dropping the runs and keeping empty tokens."""
    return [t for t in _WHITESPACE_SPLIT.split(text) if not _WHITESPACE_RUN.fullmatch(t)]


def first_token(text: str) -> str:
    return _WHITESPACE_SPLIT.split(text)[0]


class CommandInterpreter:
    """Parses and executes mention-prefixed commands."""

    def __init__(
        self,
        config: BotConfig,
        state: StateStore,
        translator: TranslationClient,
        sender: MessageSender,
    ):
        self._config = config
        self._state = state
        self._translator = translator
        self._sender = sender
        self._commands: dict[str, Callable[..., Awaitable[None]]] = {
            "language": self._language,
            "help": self._help,
        }

    async def respond_to_command(
        self,
        dist: Distribution,
        thread_id: str | None,
        message_id: str | None,
        message_text: str,
        sender_id: str,
    ) -> str | None:
        """
        Run the command in `message_text`.

        Returns:
            The command name that ran, or None if nothing was recognized.
        """
        tokens = tokenize(message_text)
        command = tokens[1] if len(tokens) > 1 else None
        argument = tokens[2] if len(tokens) > 2 else None

        handler = self._commands.get(command)
        if handler is None:
            logger.debug(f"Ignoring unknown command {command!r} from {sender_id}")
            return None

        await handler(dist, thread_id, message_id, argument, sender_id)
        return command

    async def _reply(
        self, dist: Distribution, thread_id: str | None, message_id: str | None, text: str
    ) -> None:
        await self._sender.send(
            distribution=dist,
            thread_id=thread_id,
            message_ref=message_id,
            html=text,
            text=text,
        )

    async def set_sender_language(self, sender_id: str, language_raw: str) -> str:
        """Store the sender's preferred language and return the stored code."""
        language = normalize_language(language_raw, self._config.language_code_max_length)
        await self._state.set(LANGUAGE_NAMESPACE, sender_id, language)
        return language

    async def _language(self, dist, thread_id, message_id, argument, sender_id) -> None:
        if not argument:
            logger.info(f"language command from {sender_id} without a language")
            return

        language = await self.set_sender_language(sender_id, argument)
        reply = f"Okay. I have set your preferred language to {language}"
        translated = (await self._translator.translate(reply, language))[0]
        await self._reply(dist, thread_id, message_id, translated)

    async def _help(self, dist, thread_id, message_id, argument, sender_id) -> None:
        await self._reply(dist, thread_id, message_id, HELP_TEXT)
