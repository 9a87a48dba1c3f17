"""Live session — participants, chat, and live captions for one channel.

WHY: During a live stream the app tracks who is watching, shows a chat fed
by both sides, and overlays a caption of what is being said with an
animation for the latest word. The transport delivers raw notifications;
this module turns them into state the presentation layer can render.

HOW: LiveSession wraps a SessionTransport. join()/leave() manage the
channel; handle_event() applies one notification (participant set or chat
log); pump() consumes the transport's event stream until it ends.
LiveCaptions tracks the running partial transcript from the speech
recognizer and resolves the animation for its last word.

RULES:
- Chat payloads are decoded as UTF-8; undecodable or blank payloads are
  dropped with a warning (never raised)
- Remote messages are appended in arrival order
- send_message() trims text and ignores blank input (returns None); the
  message is logged only after the transport accepted it
- Participants are tracked by uid; leave notifications for unknown uids are ignored
- LiveCaptions.update() reports a change only when text or animation changed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Set

from caption_buddy.config import DEFAULT_CHANNEL
from caption_buddy.core.animation import AnimationLookup
from caption_buddy.core.chat import ChatLog, ChatMessage
from caption_buddy.live.transport import (
    AUDIENCE,
    BROADCASTER,
    ChatPayload,
    ParticipantJoined,
    ParticipantLeft,
    SessionTransport,
    TransportEvent,
)

logger = logging.getLogger(__name__)


class LiveSession:
    """State of one live channel as seen from this device."""

    def __init__(
        self,
        transport: SessionTransport,
        channel: str = DEFAULT_CHANNEL,
        chat: Optional[ChatLog] = None,
    ) -> None:
        self._transport = transport
        self.channel = channel
        self.chat = chat if chat is not None else ChatLog()
        self._participants: Set[int] = set()
        self._in_channel = False

    @property
    def in_channel(self) -> bool:
        return self._in_channel

    @property
    def participants(self) -> Set[int]:
        return set(self._participants)

    async def join(self, broadcaster: bool = True) -> None:
        role = BROADCASTER if broadcaster else AUDIENCE
        await self._transport.join(self.channel, role)
        self._in_channel = True
        logger.info("Joined channel %s as %s", self.channel, role)

    async def leave(self) -> None:
        await self._transport.leave()
        self._in_channel = False
        self._participants.clear()
        logger.info("Left channel %s", self.channel)

    async def send_message(self, text: str) -> Optional[ChatMessage]:
        """Send a local message, then append it; blank text is ignored."""
        if not text.strip():
            return None
        message = ChatMessage(origin_is_local=True, text=text)
        await self._transport.send_chat(message.text.encode("utf-8"))
        self.chat.append(message)
        return message

    def handle_event(self, event: TransportEvent) -> None:
        if isinstance(event, ParticipantJoined):
            self._participants.add(event.uid)
            logger.info("Remote user joined with uid %s", event.uid)
        elif isinstance(event, ParticipantLeft):
            self._participants.discard(event.uid)
            logger.info("Remote user left with uid %s", event.uid)
        elif isinstance(event, ChatPayload):
            self._receive_chat(event)

    async def pump(self) -> None:
        """Apply transport events until the stream ends."""
        async for event in self._transport.events():
            self.handle_event(event)

    def _receive_chat(self, payload: ChatPayload) -> None:
        try:
            text = payload.data.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Dropping chat payload that is not valid UTF-8")
            return
        if not text.strip():
            logger.warning("Dropping blank chat payload")
            return
        self.chat.append(ChatMessage(origin_is_local=False, text=text))


@dataclass(frozen=True)
class LiveCaptionUpdate:
    text: str
    animation_id: Optional[str]


class LiveCaptions:
    """Running live caption text and the animation for its last word."""

    def __init__(self, animations: Optional[AnimationLookup] = None) -> None:
        self._animations = animations if animations is not None else AnimationLookup()
        self.text = ""
        self.animation_id: Optional[str] = None

    def update(self, transcript: str) -> Optional[LiveCaptionUpdate]:
        """Apply a new partial transcript; return an update if anything changed."""
        words = transcript.split()
        animation_id = self._animations.lookup(words[-1]) if words else None
        if transcript == self.text and animation_id == self.animation_id:
            return None
        self.text = transcript
        self.animation_id = animation_id
        return LiveCaptionUpdate(text=transcript, animation_id=animation_id)

    def clear(self) -> None:
        self.text = ""
        self.animation_id = None
