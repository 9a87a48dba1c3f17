"""Live streaming session package.

WHY: The live view needs participant tracking, chat, and live captions
without knowing which real-time SDK carries them.

HOW: transport.py defines the SessionTransport interface and an
in-process loopback; session.py turns transport notifications into
session state.
"""

from caption_buddy.live.session import LiveCaptions, LiveCaptionUpdate, LiveSession
from caption_buddy.live.transport import (
    ChatPayload,
    LoopbackTransport,
    ParticipantJoined,
    ParticipantLeft,
    SessionTransport,
    TransportError,
)

__all__ = [
    "ChatPayload",
    "LiveCaptionUpdate",
    "LiveCaptions",
    "LiveSession",
    "LoopbackTransport",
    "ParticipantJoined",
    "ParticipantLeft",
    "SessionTransport",
    "TransportError",
]
