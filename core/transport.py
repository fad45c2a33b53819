"""
Contracts for the messaging transport.

The transport owns sessions, encryption and delivery. The bot only sees
discrete events and a sender, described here structurally so any adapter
with the right shape can be plugged in.
"""

from typing import Any, Awaitable, Callable, Mapping, Protocol

from auth.types import Distribution

MessageEvent = Mapping[str, Any]
EventHandler = Callable[[Any], Awaitable[None] | None]


class KeyChangeEvent(Protocol):
    """A peer's identity key changed."""

    addr: str

    async def accept(self) -> None: ...


class MessageSender(Protocol):
    async def send(
        self,
        *,
        distribution: Distribution,
        thread_id: str,
        text: str,
        thread_title: str | None = None,
        message_ref: str | None = None,
        html: str | None = None,
    ) -> Any: ...


class MessageReceiver(Protocol):
    def add_event_listener(self, event: str, handler: EventHandler) -> None: ...

    async def connect(self) -> None: ...

    def close(self) -> None: ...
