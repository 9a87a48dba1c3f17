"""Recording library — saved recordings with their timed captions.

WHY: Every finished recording is kept together with its captions so it can
be replayed later. The library view lists them newest first, the player
loads one, and the user can delete any of them.

HOW: Two components work together:
  Recording      — dataclass holding the record id, media reference,
                   creation time, and the captions in the persisted JSON layout
  RecordingStore — lock-guarded dict of recordings, optionally mirrored to a
                   JSON file after every mutation

RULES:
- All store mutations are protected by threading.Lock
- Record ids are uuid4 hex strings generated at save time
- fetch_all() is sorted by created_at descending (ties: newest save first)
- Captions are stored exactly as the persisted layout; undecodable captions
  read back as [] with a logged error, never an exception
- File persistence is written outside the lock, atomically (temp file + replace)
- Persistence failures raise RecordingStoreError and roll back the
  in-memory change, so memory never lists what the file does not
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import threading
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from caption_buddy.core.segments import (
    CaptionFormatError,
    TimedSegment,
    segments_from_json,
    segments_to_json,
)

logger = logging.getLogger(__name__)


class RecordingStoreError(Exception):
    """Raised when the library file cannot be read or written."""


@dataclass
class Recording:
    """One saved recording.

    RULES:
    - id: uuid4 hex, unique and immutable after creation
    - media_ref: path or URL of the media file
    - created_at: epoch seconds at save time
    - captions_json: the persisted caption layout as a JSON string
    """

    id: str
    media_ref: str
    created_at: float
    captions_json: str = "[]"

    @property
    def segments(self) -> List[TimedSegment]:
        """Decode the stored captions; [] if they cannot be decoded."""
        try:
            return segments_from_json(self.captions_json)
        except CaptionFormatError:
            logger.error("Could not decode captions for recording %s", self.id)
            return []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "media_ref": self.media_ref,
            "created_at": self.created_at,
            "captions": json.loads(self.captions_json),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Recording:
        return cls(
            id=data["id"],
            media_ref=data["media_ref"],
            created_at=float(data["created_at"]),
            captions_json=json.dumps(data.get("captions", []), ensure_ascii=False),
        )


class RecordingStore:
    """Thread-safe recording library with optional JSON-file persistence.

    RULES:
    - path=None keeps everything in memory (tests, simulator runs)
    - With a path, an existing file is loaded on construction; a missing
      file starts an empty library
    """

    def __init__(self, path: Optional[str | Path] = None) -> None:
        self._recordings: Dict[str, Recording] = {}
        self._lock = threading.Lock()
        self._path = Path(path) if path is not None else None
        if self._path is not None and self._path.exists():
            self._load(self._path)

    @property
    def path(self) -> Optional[Path]:
        return self._path

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def save(self, media_ref: str | Path, segments: Iterable[TimedSegment]) -> Recording:
        """Save a new recording with its captions and return the record."""
        recording = Recording(
            id=uuid.uuid4().hex,
            media_ref=str(media_ref),
            created_at=time.time(),
            captions_json=segments_to_json(segments),
        )
        with self._lock:
            previous = dict(self._recordings)
            self._recordings[recording.id] = recording
            snapshot = self._snapshot()

        await self._persist(snapshot, previous)
        logger.info("Saved recording %s for %s", recording.id, recording.media_ref)
        return recording

    def fetch_all(self) -> List[Recording]:
        """All recordings, newest first."""
        with self._lock:
            ordered = list(enumerate(self._recordings.values()))
        ordered.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
        return [recording for _, recording in ordered]

    def get(self, recording_id: str) -> Optional[Recording]:
        with self._lock:
            return self._recordings.get(recording_id)

    async def delete(self, recording: Recording | str) -> bool:
        """Delete a recording (by record or id). Returns False if it was not found."""
        recording_id = recording if isinstance(recording, str) else recording.id
        with self._lock:
            previous = dict(self._recordings)
            removed = self._recordings.pop(recording_id, None)
            snapshot = self._snapshot()

        if removed is None:
            return False

        await self._persist(snapshot, previous)
        logger.info("Deleted recording %s", recording_id)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._recordings)

    # ------------------------------------------------------------------
    # Persistence (private)
    # ------------------------------------------------------------------

    def _snapshot(self) -> List[Dict[str, Any]]:
        """Serializable copy of the library; caller holds the lock."""
        return [r.to_dict() for r in self._recordings.values()]

    async def _persist(
        self,
        snapshot: List[Dict[str, Any]],
        previous: Dict[str, Recording],
    ) -> None:
        """Write snapshot to the library file; on failure restore previous."""
        if self._path is None:
            return
        try:
            await asyncio.to_thread(self._write, self._path, snapshot)
        except RecordingStoreError:
            with self._lock:
                self._recordings = previous
            raise

    @staticmethod
    def _write(path: Path, snapshot: List[Dict[str, Any]]) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            tmp_path.write_text(
                json.dumps({"recordings": snapshot}, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            os.replace(tmp_path, path)
        except OSError as exc:
            raise RecordingStoreError(
                "Could not write library file {}: {}".format(path, exc)
            ) from exc

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            records = [Recording.from_dict(item) for item in data.get("recordings", [])]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise RecordingStoreError(
                "Could not read library file {}: {}".format(path, exc)
            ) from exc

        for record in records:
            self._recordings[record.id] = record
        logger.info("Loaded %d recording(s) from %s", len(records), path)
