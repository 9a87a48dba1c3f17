"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate JSON Schema that
appears in the /docs UI.

HOW: Each endpoint has its own response model; caption items reuse the
persisted caption layout field names (text, startTime, duration) so a
captions file can be posted as-is.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- CaptionItem field names match the persisted layout exactly
- Response models never expose internal implementation details
- Python 3.10+ compatible, Optional[...] used for pydantic fields
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class CaptionItem(BaseModel):
    """One timed caption in the persisted layout."""

    text: str = Field(min_length=1, description="Spoken word or phrase.")
    startTime: float = Field(ge=0, description="Start offset in seconds from the media start.")
    duration: float = Field(gt=0, description="Duration in seconds.")


class CreateRecordingRequest(BaseModel):
    """Body for registering an existing media file with its captions.

    RULES:
    - captions may be empty (a recording without speech)
    - captions are sorted by startTime before saving
    """

    media_ref: str = Field(min_length=1, description="Path or URL of the media file.")
    captions: List[CaptionItem] = Field(
        default_factory=list,
        description="Timed captions for the media, in the persisted layout.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "media_ref": "/videos/DemoLibraryVideo.mp4",
                "captions": [
                    {"text": "Hi!", "startTime": 0.4, "duration": 0.3},
                    {"text": "focus", "startTime": 0.8, "duration": 0.5},
                ],
            }
        ]
    }}


class RecordingSummary(BaseModel):
    """Library entry without its captions."""

    id: str = Field(description="Recording identifier.")
    media_ref: str = Field(description="Path or URL of the media file.")
    created_at: float = Field(description="Creation timestamp (Unix epoch seconds).")
    caption_count: int = Field(description="Number of timed captions.")


class RecordingDetail(RecordingSummary):
    """Library entry including its captions."""

    captions: List[CaptionItem] = Field(description="Timed captions sorted by startTime.")


class CaptionAtResponse(BaseModel):
    """Which caption is current at a given playback time."""

    recording_id: str = Field(description="Recording identifier.")
    time_s: float = Field(description="Queried playback time in seconds.")
    index: Optional[int] = Field(
        default=None,
        description="Index of the current caption, or null between captions.",
    )
    text: Optional[str] = Field(default=None, description="Current caption text.")
    animation_id: Optional[str] = Field(
        default=None,
        description="Animation for the current caption, if one exists.",
    )


class AnimationResponse(BaseModel):
    """Result of an animation lookup."""

    word: str = Field(description="Word as given.")
    normalized: str = Field(description="Word after punctuation stripping and lower-casing.")
    animation_id: Optional[str] = Field(
        default=None,
        description="Animation asset name, or null when the word has none.",
    )


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
