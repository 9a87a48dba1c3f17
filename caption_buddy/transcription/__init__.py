"""Transcribers — media file → ordered timed caption segments.

WHY: The recorder workflow, the CLI, and the demo seeder need one lookup
to pick a transcriber by name. Which one runs (remote speech service or
bundled sample captions) is decided at construction, not inside callers.

HOW: TRANSCRIBERS maps string keys to Transcriber *classes*. Callers
instantiate as needed: ``transcriber = TRANSCRIBERS["sample"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Every transcriber listed here must be importable without side effects
"""

from __future__ import annotations

from caption_buddy.transcription.base import (
    AuthorizationDenied,
    RecognizerUnavailable,
    Transcriber,
    TranscriptionError,
    TranscriptionFailed,
)
from caption_buddy.transcription.client import HttpTranscriber
from caption_buddy.transcription.sample import SampleTranscriber

TRANSCRIBERS: dict[str, type[Transcriber]] = {
    "http": HttpTranscriber,
    "sample": SampleTranscriber,
}

__all__ = [
    "TRANSCRIBERS",
    "AuthorizationDenied",
    "HttpTranscriber",
    "RecognizerUnavailable",
    "SampleTranscriber",
    "Transcriber",
    "TranscriptionError",
    "TranscriptionFailed",
]
