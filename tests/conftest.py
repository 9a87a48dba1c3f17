"""Shared test fixtures for the caption_buddy test suite.

WHY: Most test modules need the same small caption list and the same
service token array. Centralizing them here keeps timings consistent
across cursor, sequence, transcription, and API tests.

HOW: Plain module-level data plus pytest fixtures that hand out fresh
copies, and a helper that writes a media file with companion captions.

RULES:
- SAMPLE_CAPTIONS has a gap between "I" and "improve" (1.4s to 1.6s)
- SERVICE_TOKENS assembles to the words in SERVICE_WORDS
- Media files are fake bytes; nothing decodes them
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from caption_buddy.core.segments import TimedSegment


# ---------------------------------------------------------------------------
# Caption data in the persisted layout
# ---------------------------------------------------------------------------

SAMPLE_CAPTIONS: List[Dict[str, Any]] = [
    {"text": "Hi!",      "startTime": 0.0, "duration": 1.0},
    {"text": "I",        "startTime": 1.0, "duration": 0.4},
    {"text": "improve",  "startTime": 1.6, "duration": 0.6},
    {"text": "my",       "startTime": 2.2, "duration": 0.3},
    {"text": "focus.",   "startTime": 2.5, "duration": 0.5},
]

SECOND_CAPTIONS: List[Dict[str, Any]] = [
    {"text": "Love",     "startTime": 0.0, "duration": 0.5},
    {"text": "your",     "startTime": 0.5, "duration": 0.3},
    {"text": "work",     "startTime": 0.8, "duration": 0.4},
]


# ---------------------------------------------------------------------------
# Speech service tokens
# ---------------------------------------------------------------------------

SERVICE_TOKENS: List[Dict[str, Any]] = [
    {"text": "Hi",       "start_ms": 120,  "end_ms": 300},
    {"text": "!",        "start_ms": 300,  "end_ms": 320},
    {"text": " I",       "start_ms": 600,  "end_ms": 680},
    {"text": " im",      "start_ms": 700,  "end_ms": 820},
    {"text": "prove",    "start_ms": 820,  "end_ms": 1010},
    {"text": " my",      "start_ms": 1020, "end_ms": 1130},
    {"text": " fo",      "start_ms": 1140, "end_ms": 1260},
    {"text": "cus",      "start_ms": 1260, "end_ms": 1400},
    {"text": ".",        "start_ms": 1400, "end_ms": 1420},
]

SERVICE_WORDS = ["Hi!", "I", "improve", "my", "focus."]


@pytest.fixture
def sample_captions() -> List[Dict[str, Any]]:
    """The sample caption list in the persisted layout."""
    return [dict(c) for c in SAMPLE_CAPTIONS]


@pytest.fixture
def sample_segments() -> List[TimedSegment]:
    """SAMPLE_CAPTIONS as TimedSegments, sorted by start."""
    return [
        TimedSegment(text=c["text"], start_s=c["startTime"], duration_s=c["duration"])
        for c in SAMPLE_CAPTIONS
    ]


@pytest.fixture
def second_segments() -> List[TimedSegment]:
    return [
        TimedSegment(text=c["text"], start_s=c["startTime"], duration_s=c["duration"])
        for c in SECOND_CAPTIONS
    ]


@pytest.fixture
def service_tokens() -> List[Dict[str, Any]]:
    return [dict(t) for t in SERVICE_TOKENS]


def write_media_with_captions(
    directory: Path,
    name: str,
    captions: List[Dict[str, Any]] | None = None,
    suffix: str = "-captions.json",
) -> Path:
    """Write a fake media file and (optionally) its companion captions file."""
    media = directory / name
    media.write_bytes(b"fake media data")
    if captions is not None:
        stem = name.split(".", 1)[0]
        (directory / (stem + suffix)).write_text(json.dumps(captions), encoding="utf-8")
    return media
