"""
Inbound message envelopes.

The transport delivers `{"data": {"message": {"body": "<json>"}}}` where the
body is a JSON array of versioned payloads. Only version 1 is understood.
"""

import json
from typing import Any, Mapping

from pydantic import BaseModel, Field

SUPPORTED_VERSION = 1
CONTROL_MESSAGE_TYPE = "control"


class EnvelopeError(ValueError):
    """The event could not be decoded into a supported payload."""


class BodyPart(BaseModel):
    type: str | None = None
    value: str = ""


class MessageData(BaseModel):
    body: list[BodyPart] = Field(default_factory=list)
    mentions: list[str] = Field(default_factory=list)


class SenderRef(BaseModel):
    user_id: str = Field(..., alias="userId")


class DistributionRef(BaseModel):
    expression: str


class InboundMessage(BaseModel):
    """A version 1 chat payload."""

    version: int
    message_type: str | None = Field(default=None, alias="messageType")
    message_id: str | None = Field(default=None, alias="messageId")
    thread_id: str | None = Field(default=None, alias="threadId")
    sender: SenderRef
    distribution: DistributionRef
    data: MessageData = Field(default_factory=MessageData)

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @property
    def text(self) -> str:
        return self.data.body[0].value if self.data.body else ""

    @property
    def mentions(self) -> list[str]:
        return self.data.mentions


def select_payload(event: Mapping[str, Any]) -> dict[str, Any] | None:
    """
    Pick the first version 1 payload out of a transport event.

    Returns:
        The raw payload, or None when no payload has a supported version.

    Raises:
        EnvelopeError: The event is not shaped like a message event or its
            body is not a JSON array.
    """
    try:
        body = event["data"]["message"]["body"]
        payloads = json.loads(body)
    except (KeyError, TypeError, json.JSONDecodeError) as e:
        raise EnvelopeError(f"Malformed message event: {e}") from e

    if not isinstance(payloads, list):
        raise EnvelopeError("Message body is not a list of payloads")

    for payload in payloads:
        if isinstance(payload, dict) and payload.get("version") == SUPPORTED_VERSION:
            return payload
    return None


def is_control(payload: Mapping[str, Any]) -> bool:
    return payload.get("messageType") == CONTROL_MESSAGE_TYPE
