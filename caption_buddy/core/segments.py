"""Timed caption segments and their persisted JSON layout.

WHY: Transcription, the recording library, and playback all exchange the
same unit: one word (or short phrase) with a start offset and duration
inside its media item. The on-disk layout of these
segments is shared with existing sample/demo data, so it must round-trip
exactly.

HOW: TimedSegment is a frozen dataclass. The JSON layout is a flat array of
{"text", "startTime", "duration"} objects in seconds. Parsing validates the
decoded payload against the bundled JSON Schema before building segments.

RULES:
- All times are float seconds from the start of the owning media item
- end_s = start_s + duration_s; matching uses the half-open [start_s, end_s)
- Equality ignores the per-instance id (text, start, duration only)
- Unknown keys (e.g. a legacy "id") are ignored on read and never written
- Schema violations raise CaptionFormatError, never a bare jsonschema error
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional

import jsonschema

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "captions.schema.json"

_CACHED_SCHEMA: Optional[dict] = None


def _get_schema() -> dict:
    """Load and cache the captions JSON schema."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


class CaptionFormatError(ValueError):
    """Raised when caption JSON does not match the persisted layout.

    WHY: Callers loading captions from disk or from a request body need
    one exception type for "this is not a caption list", whether the
    cause is invalid JSON or a schema mismatch.

    RULES:
    - Message names the offending location when the schema pinpoints it
    """


@dataclass(frozen=True)
class TimedSegment:
    """One timed unit of transcribed text inside a media item.

    WHY: The cursor, the animation lookup, and the library all work in
    terms of these segments. Freezing them means a list handed to a
    cursor can never change underneath it.

    RULES:
    - text: the word or phrase as spoken, punctuation included
    - start_s: offset from the start of the media item (>= 0)
    - duration_s: length of the segment (> 0)
    - id: per-instance identifier, excluded from equality and hashing
    """

    text: str
    start_s: float
    duration_s: float
    id: str = field(default_factory=lambda: uuid.uuid4().hex, compare=False)

    @property
    def end_s(self) -> float:
        return self.start_s + self.duration_s

    def contains(self, time_s: float) -> bool:
        """True if time_s falls in [start_s, end_s)."""
        return self.start_s <= time_s < self.end_s

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "startTime": self.start_s,
            "duration": self.duration_s,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimedSegment:
        return cls(
            text=data["text"],
            start_s=float(data["startTime"]),
            duration_s=float(data["duration"]),
        )


def sort_segments(segments: Iterable[TimedSegment]) -> List[TimedSegment]:
    """Return segments sorted by start offset.

    The sort is stable, so segments sharing a start keep their
    transcription order (which decides overlap tie-breaks).
    """
    return sorted(segments, key=lambda s: s.start_s)


def segments_to_dicts(segments: Iterable[TimedSegment]) -> List[dict[str, Any]]:
    return [s.to_dict() for s in segments]


def segments_from_dicts(data: Any) -> List[TimedSegment]:
    """Build segments from an already-decoded JSON payload.

    WHY: The HTTP API and the JSON file reader both end up with decoded
    Python lists; validation must happen in one place.

    HOW: Validates against the captions schema, then builds one
    TimedSegment per item in order.

    Raises:
        CaptionFormatError: If the payload does not match the schema.
    """
    try:
        jsonschema.validate(instance=data, schema=_get_schema())
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise CaptionFormatError(
            "Invalid caption data at {}: {}".format(location, exc.message)
        ) from exc
    return [TimedSegment.from_dict(item) for item in data]


def segments_to_json(segments: Iterable[TimedSegment], indent: Optional[int] = None) -> str:
    """Serialize segments to the persisted caption layout."""
    return json.dumps(segments_to_dicts(segments), indent=indent, ensure_ascii=False)


def segments_from_json(text: str | bytes) -> List[TimedSegment]:
    """Parse the persisted caption layout.

    Raises:
        CaptionFormatError: If text is not JSON or does not match the schema.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CaptionFormatError("Caption data is not valid JSON: {}".format(exc)) from exc
    return segments_from_dicts(data)


def load_captions_file(path: str | Path) -> List[TimedSegment]:
    """Read a captions JSON file (UTF-8) into segments."""
    return segments_from_json(Path(path).read_text(encoding="utf-8"))


def save_captions_file(path: str | Path, segments: Iterable[TimedSegment]) -> Path:
    """Write segments to a captions JSON file, returning the path."""
    out = Path(path)
    out.write_text(segments_to_json(segments, indent=2), encoding="utf-8")
    return out
