"""Session transport interface and the in-process loopback transport.

WHY: A live session joins a channel, learns when remote participants come
and go, and exchanges chat text. The real-time vendor SDK behind this is
out of scope; the session logic only needs these few capabilities, so the
transport is an interface with swappable implementations.

HOW: SessionTransport is an ABC: join/leave/send_chat plus events(), an
async iterator of ParticipantJoined, ParticipantLeft, and ChatPayload
notifications. LoopbackTransport implements it with an asyncio.Queue; test
code and the CLI demo push remote events into it with the inject_* methods.

RULES:
- Chat travels as raw bytes; decoding is the session's job
- events() ends when the transport is closed (leave() or close())
- Role is "broadcaster" or "audience"
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional, Union

BROADCASTER = "broadcaster"
AUDIENCE = "audience"


@dataclass(frozen=True)
class ParticipantJoined:
    uid: int


@dataclass(frozen=True)
class ParticipantLeft:
    uid: int


@dataclass(frozen=True)
class ChatPayload:
    data: bytes
    sender_uid: Optional[int] = None


TransportEvent = Union[ParticipantJoined, ParticipantLeft, ChatPayload]


class TransportError(Exception):
    """Raised when a transport operation is used in the wrong state."""


class SessionTransport(ABC):
    """Abstract real-time transport for one live session."""

    @abstractmethod
    async def join(self, channel: str, role: str) -> None:
        """Join channel with the given role."""

    @abstractmethod
    async def leave(self) -> None:
        """Leave the current channel and end the event stream."""

    @abstractmethod
    async def send_chat(self, payload: bytes) -> None:
        """Send a chat payload to everyone in the channel."""

    @abstractmethod
    def events(self) -> AsyncIterator[TransportEvent]:
        """Async iterator of remote notifications until the session ends."""


_CLOSED = object()


class LoopbackTransport(SessionTransport):
    """In-process transport: remote events are injected, sent chat is recorded."""

    def __init__(self) -> None:
        self._events: asyncio.Queue = asyncio.Queue()
        self.channel: Optional[str] = None
        self.role: Optional[str] = None
        self.sent: List[bytes] = []

    @property
    def is_joined(self) -> bool:
        return self.channel is not None

    async def join(self, channel: str, role: str) -> None:
        if role not in (BROADCASTER, AUDIENCE):
            raise TransportError("Unknown role '{}'".format(role))
        self.channel = channel
        self.role = role

    async def leave(self) -> None:
        self.channel = None
        self.role = None
        self.close()

    async def send_chat(self, payload: bytes) -> None:
        if not self.is_joined:
            raise TransportError("Cannot send chat before joining a channel")
        self.sent.append(payload)

    async def events(self) -> AsyncIterator[TransportEvent]:
        while True:
            item = await self._events.get()
            if item is _CLOSED:
                return
            yield item

    # ------------------------------------------------------------------
    # Test / demo hooks
    # ------------------------------------------------------------------

    def inject(self, event: TransportEvent) -> None:
        self._events.put_nowait(event)

    def inject_chat(self, text: str | bytes, sender_uid: Optional[int] = None) -> None:
        data = text.encode("utf-8") if isinstance(text, str) else text
        self.inject(ChatPayload(data=data, sender_uid=sender_uid))

    def close(self) -> None:
        """End the events() stream after already-queued events are consumed."""
        self._events.put_nowait(_CLOSED)
