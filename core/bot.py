"""
Bot lifecycle and transport event handling.

The transport owns the receive loop; the bot registers listeners on it. No
exception raised while handling a message is allowed to reach the transport,
since that would end the loop.
"""

import logging
from typing import Any, Mapping

from auth.types import User
from clients.directory_client import DirectoryClient
from clients.state_store import StateStore
from clients.translation_client import TranslationClient
from clients.valkey_client import ValkeyClient
from clients.vault_client import get_directory_config, get_valkey_url
from core.commands import CommandInterpreter
from core.config import BotConfig, BOT_NAMESPACE, BOT_ADDR_KEY
from core.directory_cache import UserDirectoryCache
from core.fanout import TranslationFanout
from core.router import MessageRouter, RouteKind
from core.transport import KeyChangeEvent, MessageReceiver, MessageSender

logger = logging.getLogger(__name__)


class TranslatorBot:
    """Receives chat messages and answers with commands or translations."""

    def __init__(
        self,
        config: BotConfig,
        state: StateStore,
        directory: UserDirectoryCache,
        translator: TranslationClient,
    ):
        self.config = config
        self.state = state
        self.directory = directory
        self.translator = translator
        self.our_id: str | None = None
        self.our_user: User | None = None
        self.router: MessageRouter | None = None
        self._receiver: MessageReceiver | None = None
        self._sender: MessageSender | None = None

    @classmethod
    async def from_vault(cls, config: BotConfig | None = None) -> "TranslatorBot":
        """Build a bot whose clients are configured from Vault secrets."""
        config = config or BotConfig()
        valkey = await ValkeyClient.connect(get_valkey_url())
        directory_config = get_directory_config()
        directory = DirectoryClient(directory_config["url"], directory_config["api_token"])
        return cls(
            config=config,
            state=StateStore(valkey),
            directory=UserDirectoryCache(
                directory,
                ttl_seconds=config.directory_cache_ttl_seconds,
                max_entries=config.directory_cache_max_entries,
            ),
            translator=TranslationClient(),
        )

    async def start(self, receiver: MessageReceiver, sender: MessageSender) -> bool:
        """
        Register with the transport and start receiving.

        Returns:
            False if the bot has no registered identity yet.
        """
        self.our_id = await self.state.get(BOT_NAMESPACE, BOT_ADDR_KEY)
        if not self.our_id:
            logger.warning("bot is not yet registered")
            return False

        logger.info(f"Starting message receiver for: {self.our_id}")
        users = await self.directory.get_users([self.our_id])
        if not users:
            raise RuntimeError(f"Bot user {self.our_id} not found in directory")
        self.our_user = users[0]

        self._sender = sender
        self.router = MessageRouter(
            bot=self.our_user,
            directory=self.directory,
            interpreter=CommandInterpreter(self.config, self.state, self.translator, sender),
            fanout=TranslationFanout(self.state, self.directory, self.translator, sender),
        )

        receiver.add_event_listener("keychange", self.on_key_change)
        receiver.add_event_listener("message", self.on_message)
        receiver.add_event_listener("error", self.on_error)
        self._receiver = receiver
        await receiver.connect()
        return True

    def stop(self) -> None:
        if self._receiver is not None:
            logger.warning("Stopping message receiver")
            self._receiver.close()
            self._receiver = None

    async def restart(self, receiver: MessageReceiver, sender: MessageSender) -> bool:
        self.stop()
        return await self.start(receiver, sender)

    async def on_key_change(self, event: KeyChangeEvent) -> None:
        logger.warning(f"Auto-accepting new identity key for: {event.addr}")
        await event.accept()

    def on_error(self, error: Any) -> None:
        exc_info = error if isinstance(error, BaseException) else None
        logger.error(f"Message error: {error}", exc_info=exc_info)

    async def on_message(self, event: Mapping[str, Any]) -> RouteKind:
        """Handle one message event. Never raises."""
        if self.router is None:
            logger.error("Message received before the bot was started")
            return RouteKind.IGNORED
        try:
            return await self.router.route(event)
        except Exception:
            logger.exception("Failed to handle message event")
            return RouteKind.IGNORED
