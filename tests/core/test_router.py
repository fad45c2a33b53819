"""Tests for MessageRouter - classification and dispatch."""

import json
from unittest.mock import AsyncMock, Mock

import pytest

from auth.types import Distribution
from core.commands import CommandInterpreter, HELP_TEXT
from core.config import LANGUAGE_NAMESPACE
from core.envelope import InboundMessage
from core.fanout import TranslationFanout
from core.router import MessageRouter, RouteKind, classify, is_mentioned


def make_payload(
    text: str,
    sender_id: str = "u2",
    expression: str = "@alice:acme + @bob:acme + @translator:acme",
    mentions: list[str] | None = None,
    message_type: str = "content",
) -> dict:
    return {
        "version": 1,
        "messageType": message_type,
        "messageId": "m1",
        "threadId": "t1",
        "sender": {"userId": sender_id},
        "distribution": {"expression": expression},
        "data": {"body": [{"type": "text", "value": text}], "mentions": mentions or []},
    }


def make_event(*payloads: dict) -> dict:
    return {"data": {"message": {"body": json.dumps(list(payloads))}}}


@pytest.fixture
async def bot_user(directory):
    [user] = await directory.get_users(["bot-0000"])
    return user


@pytest.fixture
def router(bot_user, bot_config, state, directory, translator, sender):
    return MessageRouter(
        bot=bot_user,
        directory=directory,
        interpreter=CommandInterpreter(bot_config, state, translator, sender),
        fanout=TranslationFanout(state, directory, translator, sender),
    )


class TestClassify:
    def test_mention_by_text(self, bot_user):
        message = InboundMessage.model_validate(make_payload("@translator help"))

        assert is_mentioned(message, bot_user)

    def test_mention_by_structured_mentions(self, bot_user):
        message = InboundMessage.model_validate(
            make_payload("hey there", mentions=["bot-0000"])
        )

        assert is_mentioned(message, bot_user)

    def test_mention_must_be_first_token(self, bot_user):
        message = InboundMessage.model_validate(make_payload("hi @translator"))

        assert not is_mentioned(message, bot_user)

    def test_own_message_ignored(self, bot_user):
        message = InboundMessage.model_validate(make_payload("hi", sender_id="bot-0000"))

        assert classify(message, bot_user, Distribution(userids=["u2"])) is RouteKind.IGNORED

    def test_no_recipients_ignored(self, bot_user):
        message = InboundMessage.model_validate(make_payload("hi"))

        assert classify(message, bot_user, Distribution()) is RouteKind.IGNORED

    def test_command_wins_over_translation(self, bot_user):
        message = InboundMessage.model_validate(make_payload("@translator help"))

        assert classify(message, bot_user, Distribution(userids=["u2"])) is RouteKind.COMMAND


class TestRoute:
    async def test_help_command(self, router, sender):
        kind = await router.route(make_event(make_payload("@translator help")))

        assert kind is RouteKind.COMMAND
        assert sender.send.await_args.kwargs["text"] == HELP_TEXT
        assert sender.send.await_args.kwargs["distribution"].userids == ["u2", "u3", "bot-0000"]

    async def test_language_command(self, router, state):
        await router.route(make_event(make_payload("@translator language Spanish")))

        assert await state.get(LANGUAGE_NAMESPACE, "u2") == "es"

    async def test_ordinary_message_is_translated(self, router, state, sender):
        await state.set(LANGUAGE_NAMESPACE, "u3", "fr")

        kind = await router.route(make_event(make_payload("hello")))

        assert kind is RouteKind.TRANSLATABLE
        assert sender.send.await_args.kwargs["text"] == "[fr] hello"

    async def test_own_message_never_translated(self, router, state, sender, fake_directory):
        await state.set(LANGUAGE_NAMESPACE, "u3", "fr")

        kind = await router.route(make_event(make_payload("hello", sender_id="bot-0000")))

        assert kind is RouteKind.IGNORED
        sender.send.assert_not_awaited()
        assert fake_directory.resolve_calls == []

    async def test_control_message_dropped(self, router, sender):
        kind = await router.route(make_event(make_payload("x", message_type="control")))

        assert kind is RouteKind.IGNORED
        sender.send.assert_not_awaited()

    async def test_unsupported_version_dropped(self, router):
        assert await router.route(make_event({"version": 2})) is RouteKind.IGNORED

    async def test_malformed_event_dropped(self, router):
        assert await router.route({"data": {"message": {"body": "{"}}}) is RouteKind.IGNORED

    async def test_payload_missing_sender_dropped(self, router):
        payload = make_payload("hello")
        del payload["sender"]

        assert await router.route(make_event(payload)) is RouteKind.IGNORED

    async def test_dispatches_to_single_handler(self, bot_user, directory):
        interpreter = Mock(spec=CommandInterpreter)
        fanout = Mock(spec=TranslationFanout)
        fanout.translate_by_user = AsyncMock(return_value={})
        router = MessageRouter(bot_user, directory, interpreter, fanout)

        await router.route(make_event(make_payload("hello")))

        interpreter.respond_to_command.assert_not_awaited()
        fanout.translate_by_user.assert_awaited_once()
        args = fanout.translate_by_user.await_args.args
        assert args[1:] == ("t1", "m1", "hello", "u2")
