"""Tests for inbound envelope decoding."""

import json

import pytest

from core.envelope import EnvelopeError, InboundMessage, is_control, select_payload


def event_with_body(body) -> dict:
    return {"data": {"message": {"body": body}}}


PAYLOAD = {
    "version": 1,
    "messageType": "content",
    "messageId": "m1",
    "threadId": "t1",
    "sender": {"userId": "u2"},
    "distribution": {"expression": "@alice:acme + @translator:acme"},
    "data": {"body": [{"type": "text", "value": "hello"}], "mentions": ["bot-0000"]},
}


class TestSelectPayload:
    def test_picks_first_version_one(self):
        body = json.dumps([{"version": 2}, PAYLOAD, {"version": 1, "messageId": "m2"}])

        assert select_payload(event_with_body(body)) == PAYLOAD

    def test_no_supported_version(self):
        assert select_payload(event_with_body(json.dumps([{"version": 2}]))) is None

    def test_invalid_json(self):
        with pytest.raises(EnvelopeError):
            select_payload(event_with_body("not json"))

    def test_missing_body(self):
        with pytest.raises(EnvelopeError):
            select_payload({"data": {}})

    def test_body_not_a_list(self):
        with pytest.raises(EnvelopeError):
            select_payload(event_with_body(json.dumps({"version": 1})))


class TestInboundMessage:
    def test_fields(self):
        message = InboundMessage.model_validate(PAYLOAD)

        assert message.message_id == "m1"
        assert message.thread_id == "t1"
        assert message.sender.user_id == "u2"
        assert message.text == "hello"
        assert message.mentions == ["bot-0000"]

    def test_empty_body_has_empty_text(self):
        payload = dict(PAYLOAD, data={"body": []})

        assert InboundMessage.model_validate(payload).text == ""

    def test_is_control(self):
        assert is_control({"messageType": "control"})
        assert not is_control(PAYLOAD)
