"""Caption cursor — the playback-time → current-caption state machine.

WHY: Playback reports the clock many times per second (every 0.1s by
default), but the caption on screen and its animation must change only
when the playhead crosses a segment boundary. Recomputing and re-firing
on every tick would restart animations and flood the presentation layer.

HOW: The cursor holds the active segment list and the index of the
current segment (or None for Idle). advance(t) computes the target state
for t with a first-match linear scan and emits a TransitionEvent only
when it differs from the current state. Lists are tens to low hundreds
of words, so no search index is kept.

RULES:
- States: Idle (active_index is None) and Active(index); initial Idle
- Match rule: half-open [start_s, end_s); overlaps resolve to the lowest index
- Same target state as before → no event (idempotent per tick)
- Times may repeat or jump in either direction (seeks); no fixed interval assumed
- reset() swaps the segment list wholesale, goes Idle, and emits nothing
- An empty segment list is legal: the cursor stays Idle forever
- Input is not validated; callers sort segments before reset()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from caption_buddy.core.segments import TimedSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionEvent:
    """Emitted exactly when the current caption (or its absence) changes.

    RULES:
    - new_index: index into the active segment list, or None for Idle
    - animation_id: attached by SequencePlayer; None when no animation applies
    - text: the new segment's text, attached by SequencePlayer for convenience
    """

    new_index: Optional[int]
    animation_id: Optional[str] = None
    text: Optional[str] = None

    @property
    def is_idle(self) -> bool:
        return self.new_index is None


class CaptionCursor:
    """Tracks which segment of one media item is current."""

    def __init__(self, segments: Sequence[TimedSegment] = ()) -> None:
        self._segments: Tuple[TimedSegment, ...] = tuple(segments)
        self._active_index: Optional[int] = None

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def segments(self) -> Tuple[TimedSegment, ...]:
        return self._segments

    @property
    def active_index(self) -> Optional[int]:
        return self._active_index

    @property
    def is_idle(self) -> bool:
        return self._active_index is None

    @property
    def current_segment(self) -> Optional[TimedSegment]:
        if self._active_index is None:
            return None
        return self._segments[self._active_index]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def advance(self, time_s: float) -> Optional[TransitionEvent]:
        """Feed one playback-time sample; return an event on a boundary crossing.

        Args:
            time_s: Playback time in seconds relative to the current item's start.

        Returns:
            TransitionEvent if the current segment changed, otherwise None.
        """
        target = self._find_index(time_s)
        if target == self._active_index:
            return None

        logger.debug("Caption transition %s -> %s at %.3fs", self._active_index, target, time_s)
        self._active_index = target
        return TransitionEvent(new_index=target)

    def reset(self, segments: Sequence[TimedSegment]) -> None:
        """Swap in a new segment list and return to Idle without emitting."""
        self._segments = tuple(segments)
        self._active_index = None

    def _find_index(self, time_s: float) -> Optional[int]:
        for i, segment in enumerate(self._segments):
            if segment.contains(time_s):
                return i
        return None
