"""Caption synchronization core.

WHY: The playback clock and the caption list meet here. Everything in
this package is pure computation and state updates with no I/O and no
blocking, so it can be driven from any playback loop.

HOW: segments.py defines the TimedSegment model and its JSON layout,
animation.py maps words to animation ids, cursor.py is the
per-item state machine, sequence.py drives the cursor across a queue
of media items, chat.py holds the live-session message log, and
relay.py hands transition events across threads.

RULES:
- Segment lists are immutable once handed to a cursor
- Transition events fire once per boundary crossing, never per tick
- Nothing in the core is fatal
"""

from caption_buddy.core.animation import AnimationLookup, normalize_word
from caption_buddy.core.chat import ChatLog, ChatMessage
from caption_buddy.core.cursor import CaptionCursor, TransitionEvent
from caption_buddy.core.relay import TransitionRelay
from caption_buddy.core.segments import TimedSegment
from caption_buddy.core.sequence import QueueItem, SequencePlayer

__all__ = [
    "AnimationLookup",
    "CaptionCursor",
    "ChatLog",
    "ChatMessage",
    "QueueItem",
    "SequencePlayer",
    "TimedSegment",
    "TransitionEvent",
    "TransitionRelay",
    "normalize_word",
]
