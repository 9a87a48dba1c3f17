"""Live-session chat messages and the append-only chat log.

WHY: The live session shows a scrolling chat fed both by the local user
and by remote participants. Messages are shown in the order they arrive
at this device; there is no cross-participant resequencing.

HOW: ChatMessage is a frozen dataclass. ChatLog is a list guarded by a
threading.Lock so transport callbacks and the UI can share it.

RULES:
- Append-only: messages are never edited or removed
- all() returns a fresh list each call (restartable, non-destructive)
- Message text is stored trimmed; blank text is rejected at construction
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Iterator, List


@dataclass(frozen=True)
class ChatMessage:
    """A single chat line.

    RULES:
    - origin_is_local: True for messages typed on this device
    - text: trimmed; ValueError if empty after trimming
    - id: uuid4 hex, unique per message
    """

    origin_is_local: bool
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        trimmed = self.text.strip()
        if not trimmed:
            raise ValueError("Chat message text must not be empty")
        object.__setattr__(self, "text", trimmed)


class ChatLog:
    """Ordered, append-only buffer of chat messages."""

    def __init__(self) -> None:
        self._messages: List[ChatMessage] = []
        self._lock = threading.Lock()

    def append(self, message: ChatMessage) -> None:
        with self._lock:
            self._messages.append(message)

    def all(self) -> List[ChatMessage]:
        with self._lock:
            return list(self._messages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.all())
