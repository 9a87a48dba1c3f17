"""Thread hand-off for transition events.

WHY: Some hosts sample the playback clock on a background thread while
the UI consumes caption changes on its own thread. The cursor must only
ever be touched by the sampling thread; the events are what cross over.

HOW: A single-producer/single-consumer queue.Queue. The sampling thread
publishes each TransitionEvent; the UI thread drains whatever is pending
on its own schedule (e.g. a periodic after() callback), never blocking.

RULES:
- publish() is called only from the thread that owns the cursor
- drain() is non-blocking and returns events in publish order
- None (no transition) is never published
"""

from __future__ import annotations

import queue
from typing import List, Optional

from caption_buddy.core.cursor import TransitionEvent


class TransitionRelay:
    """Single-producer/single-consumer queue of TransitionEvents."""

    def __init__(self) -> None:
        self._queue: queue.Queue = queue.Queue()

    def publish(self, event: Optional[TransitionEvent]) -> None:
        """Enqueue event; a None (no transition) is silently ignored."""
        if event is not None:
            self._queue.put(event)

    def drain(self) -> List[TransitionEvent]:
        """Return all pending events without blocking."""
        events: List[TransitionEvent] = []
        try:
            while True:
                events.append(self._queue.get_nowait())
        except queue.Empty:
            pass
        return events

    def latest(self) -> Optional[TransitionEvent]:
        """Drain and return only the most recent event, if any.

        A UI that only renders the current caption can skip intermediate
        transitions it was too slow to display.
        """
        events = self.drain()
        return events[-1] if events else None
