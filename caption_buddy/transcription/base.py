"""Abstract transcriber and the transcription error taxonomy.

WHY: The recording workflow, the CLI, and demo seeding all need "media in,
timed segments out" without caring whether the segments come from a
remote speech service or from bundled sample captions. Swapping the
implementation must not require branching inside the callers.

HOW: Transcriber is an ABC with a single async transcribe() method.
Failures are raised as TranscriptionError subclasses, one per failure kind
the caller may want to present differently.

RULES:
- transcribe() returns segments sorted by start_s
- An audio track with no speech returns [] (not an error)
- AuthorizationDenied: the service refused our credentials
- RecognizerUnavailable: the service or locale is unavailable right now
- TranscriptionFailed: anything else; .reason carries the detail
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from caption_buddy.core.segments import TimedSegment


class TranscriptionError(Exception):
    """Base class for all transcription failures."""


class AuthorizationDenied(TranscriptionError):
    """Raised when the speech service rejects the request's credentials."""


class RecognizerUnavailable(TranscriptionError):
    """Raised when the speech service cannot be reached or has no recognizer for the locale."""


class TranscriptionFailed(TranscriptionError):
    """Raised when a transcription job fails for any other reason.

    RULES:
    - reason is the human-readable failure detail
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__("Transcription failed: {}".format(reason))


class Transcriber(ABC):
    """Abstract base for all transcribers.

    To add a new transcriber:
    1. Create a new module in transcription/
    2. Subclass Transcriber
    3. Implement name and transcribe()
    4. Register it in TRANSCRIBERS in transcription/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable transcriber name, e.g. 'Sample captions'."""

    @abstractmethod
    async def transcribe(self, media_ref: str | Path) -> List[TimedSegment]:
        """Transcribe the audio track of a media file into timed segments.

        Args:
            media_ref: Path to a finished media file.

        Returns:
            Segments sorted by start offset.

        Raises:
            TranscriptionError: On any failure.
        """
