"""
Inbound message routing.

Each event is classified once and dispatched: commands go to the
CommandInterpreter, everything else with recipients goes to the
TranslationFanout. Malformed or unsupported envelopes are logged and dropped.
"""

import logging
from enum import Enum
from typing import Any, Mapping

from pydantic import ValidationError

from auth.types import Distribution, User
from core.commands import CommandInterpreter, first_token
from core.directory_cache import UserDirectoryCache
from core.envelope import (
    CONTROL_MESSAGE_TYPE,
    EnvelopeError,
    InboundMessage,
    is_control,
    select_payload,
)
from core.fanout import TranslationFanout

logger = logging.getLogger(__name__)


class RouteKind(Enum):
    IGNORED = "ignored"
    COMMAND = "command"
    TRANSLATABLE = "translatable"


def is_mentioned(message: InboundMessage, bot: User) -> bool:
    """Bot id in the structured mentions, or the text opens with `@<bot slug>`."""
    if bot.id in message.mentions:
        return True
    return first_token(message.text) == f"@{bot.tag.slug}"


def classify(message: InboundMessage, bot: User, dist: Distribution | None) -> RouteKind:
    if message.message_type == CONTROL_MESSAGE_TYPE or message.sender.user_id == bot.id:
        return RouteKind.IGNORED
    if is_mentioned(message, bot):
        return RouteKind.COMMAND
    if dist is None or not dist.userids:
        return RouteKind.IGNORED
    return RouteKind.TRANSLATABLE


class MessageRouter:
    """Classifies inbound events and hands them to the right handler."""

    def __init__(
        self,
        bot: User,
        directory: UserDirectoryCache,
        interpreter: CommandInterpreter,
        fanout: TranslationFanout,
    ):
        self._bot = bot
        self._directory = directory
        self._interpreter = interpreter
        self._fanout = fanout

    def parse(self, event: Mapping[str, Any]) -> InboundMessage | None:
        """Decode the event. None means drop it."""
        try:
            payload = select_payload(event)
        except EnvelopeError as e:
            logger.error(f"Dropping message event: {e}")
            return None

        if payload is None:
            logger.error("Received unsupported message: no version 1 payload")
            return None
        if is_control(payload):
            return None

        try:
            return InboundMessage.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Dropping malformed message payload: {e.error_count()} errors")
            return None

    async def route(self, event: Mapping[str, Any]) -> RouteKind:
        message = self.parse(event)
        if message is None or message.sender.user_id == self._bot.id:
            return RouteKind.IGNORED

        dist = await self._directory.resolve_tags(message.distribution.expression)
        kind = classify(message, self._bot, dist)

        if kind is RouteKind.COMMAND:
            await self._interpreter.respond_to_command(
                dist, message.thread_id, message.message_id, message.text, message.sender.user_id
            )
        elif kind is RouteKind.TRANSLATABLE:
            await self._fanout.translate_by_user(
                dist, message.thread_id, message.message_id, message.text, message.sender.user_id
            )

        return kind
