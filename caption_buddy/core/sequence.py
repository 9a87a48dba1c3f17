"""Sequence player — one caption cursor across a queue of media items.

WHY: A playlist plays several recordings back to back, each with its own
caption list whose times restart at zero. The presentation layer wants a
single stream of transition events, with the animation for the new word
already resolved, regardless of which item is playing.

HOW: The player owns the queue and a CaptionCursor. start() seeds the
cursor with the first item's segments; the external playback transport
calls on_item_finished() at each item boundary, which re-seeds the cursor
with the next item's segments. advance() delegates to the cursor and
decorates any Active event with the segment text and its animation id.

RULES:
- current_item_index advances monotonically and never wraps
- enqueue() is legal before and during playback
- on_item_finished() past the last item marks the sequence complete and
  leaves the cursor in its last state; further calls are no-ops
- advance() before start() (or with an empty queue) returns None
- The animation lookup runs only on transitions, never per tick
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from caption_buddy.core.animation import AnimationLookup
from caption_buddy.core.cursor import CaptionCursor, TransitionEvent
from caption_buddy.core.segments import TimedSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueueItem:
    """One queued media item and its caption list.

    RULES:
    - media_ref: path or URL of the media; opaque to the player
    - segments: sorted by start_s, stored as a tuple so it cannot change
    """

    media_ref: str
    segments: Tuple[TimedSegment, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence but freeze it.
        object.__setattr__(self, "segments", tuple(self.segments))


class SequencePlayer:
    """Drives a CaptionCursor across an ordered queue of media items."""

    def __init__(
        self,
        items: Sequence[QueueItem] = (),
        animations: Optional[AnimationLookup] = None,
        cursor: Optional[CaptionCursor] = None,
    ) -> None:
        self._queue: List[QueueItem] = list(items)
        self._animations = animations if animations is not None else AnimationLookup()
        self._cursor = cursor if cursor is not None else CaptionCursor()
        self._current_index: Optional[int] = None
        self._complete = False

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    def enqueue(self, item: QueueItem) -> None:
        self._queue.append(item)

    @property
    def queue(self) -> Tuple[QueueItem, ...]:
        return tuple(self._queue)

    @property
    def cursor(self) -> CaptionCursor:
        return self._cursor

    @property
    def current_item_index(self) -> Optional[int]:
        return self._current_index

    @property
    def current_item(self) -> Optional[QueueItem]:
        if self._current_index is None:
            return None
        return self._queue[self._current_index]

    @property
    def is_started(self) -> bool:
        return self._current_index is not None

    @property
    def is_complete(self) -> bool:
        return self._complete

    # ------------------------------------------------------------------
    # Playback signals
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin playback at the first queued item.

        With an empty queue there is nothing to play; the player stays
        unstarted and advance() keeps returning None.
        """
        if not self._queue:
            logger.warning("start() called with an empty queue")
            return
        self._current_index = 0
        self._complete = False
        self._cursor.reset(self._queue[0].segments)
        logger.debug("Sequence started with %s", self._queue[0].media_ref)

    def on_item_finished(self) -> None:
        """Hand off to the next queued item, or mark the sequence complete."""
        if self._current_index is None or self._complete:
            return

        next_index = self._current_index + 1
        if next_index < len(self._queue):
            self._current_index = next_index
            self._cursor.reset(self._queue[next_index].segments)
            logger.debug(
                "Advanced to item %d (%s)", next_index, self._queue[next_index].media_ref
            )
        else:
            self._complete = True
            logger.debug("Sequence complete after %d item(s)", len(self._queue))

    def advance(self, time_s: float) -> Optional[TransitionEvent]:
        """Feed a playback-time sample for the current item.

        Returns:
            A TransitionEvent carrying the segment text and animation id
            when the current caption changed, otherwise None.
        """
        if self._current_index is None:
            return None

        event = self._cursor.advance(time_s)
        if event is None or event.new_index is None:
            return event

        segment = self._cursor.segments[event.new_index]
        return TransitionEvent(
            new_index=event.new_index,
            animation_id=self._animations.lookup(segment.text),
            text=segment.text,
        )
