"""Sample-caption transcriber for demos and simulator runs.

WHY: Demo builds and tests have no speech service. They ship each sample
video together with a hand-made captions JSON file, and the rest of the
app must not be able to tell the difference.

HOW: Given a media path, look for a companion captions file next to it by
naming convention, parse it with the persisted caption layout, and return
the sorted segments. A fixed captions path can be given instead.

RULES:
- Companion files: {stem}-captions.json, then {stem}.json, next to the media
- The stem strips every extension ("clip.mp4.mov" → "clip")
- Missing or malformed captions raise TranscriptionFailed
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from caption_buddy.core.segments import (
    CaptionFormatError,
    TimedSegment,
    load_captions_file,
    sort_segments,
)
from caption_buddy.transcription.base import Transcriber, TranscriptionFailed


def resolve_companion_captions(media_path: str | Path) -> Optional[Path]:
    """Find the captions JSON that belongs to a media file, or None."""
    media = Path(media_path)
    stem = media.name
    while "." in stem:
        stem = stem.rsplit(".", 1)[0]

    for candidate in (f"{stem}-captions.json", f"{stem}.json"):
        path = media.parent / candidate
        if path.is_file():
            return path
    return None


class SampleTranscriber(Transcriber):
    """Returns pre-made captions instead of calling a speech service."""

    def __init__(self, captions_path: Optional[str | Path] = None) -> None:
        self._captions_path = Path(captions_path) if captions_path else None

    @property
    def name(self) -> str:
        return "Sample captions"

    async def transcribe(self, media_ref: str | Path) -> List[TimedSegment]:
        path = self._captions_path or resolve_companion_captions(media_ref)
        if path is None:
            raise TranscriptionFailed(
                "No sample captions found next to {}".format(Path(media_ref).name)
            )
        try:
            return sort_segments(load_captions_file(path))
        except (OSError, CaptionFormatError) as exc:
            raise TranscriptionFailed("Could not read {}: {}".format(path.name, exc)) from exc
