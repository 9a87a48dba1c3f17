"""Seed the recording library with bundled demo videos.

WHY: Portfolio demos and simulator runs start with an empty library and no
camera. A folder of sample videos with hand-made captions gives the player
something to show.

HOW: Scan a directory for supported media files, resolve each one's
companion captions JSON, and save a record per pair. Broken or missing
companions are logged and skipped so one bad asset does not stop the rest.

RULES:
- Only files with extensions in SUPPORTED_MEDIA_FORMATS are considered
- Files are processed in name order for a reproducible library
- Returns the recordings that were saved
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from caption_buddy.config import SUPPORTED_MEDIA_FORMATS
from caption_buddy.library.store import Recording, RecordingStore
from caption_buddy.transcription.base import TranscriptionError
from caption_buddy.transcription.sample import SampleTranscriber

logger = logging.getLogger(__name__)


async def seed_demo_recordings(store: RecordingStore, directory: str | Path) -> List[Recording]:
    """Save one recording per media file that has companion captions."""
    root = Path(directory)
    saved: List[Recording] = []
    transcriber = SampleTranscriber()

    media_files = sorted(
        p for p in root.iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_MEDIA_FORMATS
    )

    for media in media_files:
        try:
            segments = await transcriber.transcribe(media)
        except TranscriptionError as exc:
            logger.warning("Skipping demo asset %s: %s", media.name, exc)
            continue
        saved.append(await store.save(media, segments))

    logger.info("Seeded %d demo recording(s) from %s", len(saved), root)
    return saved
