"""FastAPI application exposing the recording library and caption lookups.

WHY: Companion tools (a web player, a test harness, scripts) need the
recording library over HTTP: list recordings, fetch captions in the
persisted layout, register new media with captions, delete entries, and
ask which caption is current at a playback time.

HOW: Routes live on an APIRouter; create_app() builds a FastAPI app bound
to one RecordingStore (kept on app.state) and one AnimationLookup. The
caption-at endpoint runs a fresh CaptionCursor over the recording's
captions, so it gives exactly the answer the player would at that time.

RULES:
- All endpoints have OpenAPI descriptions on every parameter and response
- Error responses use a consistent ErrorResponse schema
- Unknown recording ids → 404
- The store is injected through create_app(); nothing is a module singleton
- run_api() serves create_app() with the library file from config
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import Response

from caption_buddy import __version__
from caption_buddy.config import LIBRARY_PATH
from caption_buddy.core.animation import AnimationLookup, normalize_word
from caption_buddy.core.cursor import CaptionCursor
from caption_buddy.core.segments import TimedSegment, segments_to_json, sort_segments
from caption_buddy.library.store import Recording, RecordingStore
from caption_buddy.server.models import (
    AnimationResponse,
    CaptionAtResponse,
    CaptionItem,
    CreateRecordingRequest,
    ErrorResponse,
    HealthResponse,
    RecordingDetail,
    RecordingSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Dependencies and helpers
# ---------------------------------------------------------------------------


def get_store(request: Request) -> RecordingStore:
    return request.app.state.store


def get_animations(request: Request) -> AnimationLookup:
    return request.app.state.animations


def _get_recording_or_404(store: RecordingStore, recording_id: str) -> Recording:
    recording = store.get(recording_id)
    if recording is None:
        raise HTTPException(
            status_code=404,
            detail="Recording not found: {}".format(recording_id),
        )
    return recording


def _captions(segments: List[TimedSegment]) -> List[CaptionItem]:
    return [
        CaptionItem(text=s.text, startTime=s.start_s, duration=s.duration_s)
        for s in segments
    ]


def _summary(recording: Recording) -> RecordingSummary:
    return RecordingSummary(
        id=recording.id,
        media_ref=recording.media_ref,
        created_at=recording.created_at,
        caption_count=len(recording.segments),
    )


def _detail(recording: Recording) -> RecordingDetail:
    segments = recording.segments
    return RecordingDetail(
        id=recording.id,
        media_ref=recording.media_ref,
        created_at=recording.created_at,
        caption_count=len(segments),
        captions=_captions(segments),
    )


# ---------------------------------------------------------------------------
# Endpoints: Recordings
# ---------------------------------------------------------------------------


@router.get(
    "/recordings",
    response_model=List[RecordingSummary],
    tags=["recordings"],
    summary="List recordings",
    description="Returns all saved recordings, newest first.",
)
async def list_recordings(
    store: RecordingStore = Depends(get_store),
) -> List[RecordingSummary]:
    return [_summary(r) for r in store.fetch_all()]


@router.post(
    "/recordings",
    response_model=RecordingDetail,
    status_code=201,
    tags=["recordings"],
    summary="Register a recording",
    description=(
        "Save a media reference together with its timed captions. "
        "Captions are sorted by startTime before saving."
    ),
    responses={
        422: {"model": ErrorResponse, "description": "Invalid caption data"},
    },
)
async def create_recording(
    body: CreateRecordingRequest,
    store: RecordingStore = Depends(get_store),
) -> RecordingDetail:
    segments = sort_segments(
        TimedSegment(text=c.text, start_s=c.startTime, duration_s=c.duration)
        for c in body.captions
    )
    recording = await store.save(body.media_ref, segments)
    return _detail(recording)


@router.get(
    "/recordings/{recording_id}",
    response_model=RecordingDetail,
    tags=["recordings"],
    summary="Get a recording",
    description="Returns one recording with its captions.",
    responses={
        404: {"model": ErrorResponse, "description": "Recording not found"},
    },
)
async def get_recording(
    recording_id: str,
    store: RecordingStore = Depends(get_store),
) -> RecordingDetail:
    return _detail(_get_recording_or_404(store, recording_id))


@router.get(
    "/recordings/{recording_id}/captions",
    tags=["recordings"],
    summary="Download captions",
    description=(
        "Returns the recording's captions in the persisted JSON layout: "
        "an array of {text, startTime, duration}."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "Recording not found"},
    },
)
async def get_recording_captions(
    recording_id: str,
    store: RecordingStore = Depends(get_store),
) -> Response:
    recording = _get_recording_or_404(store, recording_id)
    return Response(
        content=segments_to_json(recording.segments, indent=2),
        media_type="application/json",
    )


@router.get(
    "/recordings/{recording_id}/caption-at",
    response_model=CaptionAtResponse,
    tags=["recordings"],
    summary="Caption at a playback time",
    description=(
        "Returns the caption that is current at time t (seconds), using the "
        "same half-open matching the player uses. index is null between captions."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "Recording not found"},
    },
)
async def get_caption_at(
    recording_id: str,
    t: float = Query(ge=0, description="Playback time in seconds."),
    store: RecordingStore = Depends(get_store),
    animations: AnimationLookup = Depends(get_animations),
) -> CaptionAtResponse:
    recording = _get_recording_or_404(store, recording_id)
    cursor = CaptionCursor(recording.segments)
    cursor.advance(t)
    segment = cursor.current_segment

    text: Optional[str] = segment.text if segment else None
    return CaptionAtResponse(
        recording_id=recording.id,
        time_s=t,
        index=cursor.active_index,
        text=text,
        animation_id=animations.lookup(text) if text else None,
    )


@router.delete(
    "/recordings/{recording_id}",
    status_code=204,
    tags=["recordings"],
    summary="Delete a recording",
    description="Removes the recording and its captions from the library.",
    responses={
        404: {"model": ErrorResponse, "description": "Recording not found"},
    },
)
async def delete_recording(
    recording_id: str,
    store: RecordingStore = Depends(get_store),
) -> Response:
    deleted = await store.delete(recording_id)
    if not deleted:
        raise HTTPException(
            status_code=404,
            detail="Recording not found: {}".format(recording_id),
        )
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Endpoints: Animations and health
# ---------------------------------------------------------------------------


@router.get(
    "/animations/{word}",
    response_model=AnimationResponse,
    tags=["animations"],
    summary="Look up the animation for a word",
    description=(
        "Strips leading/trailing punctuation, lower-cases, and looks the word "
        "up in the animation table. animation_id is null when there is none."
    ),
)
async def lookup_animation(
    word: str,
    animations: AnimationLookup = Depends(get_animations),
) -> AnimationResponse:
    return AnimationResponse(
        word=word,
        normalized=normalize_word(word),
        animation_id=animations.lookup(word),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


# ---------------------------------------------------------------------------
# App construction
# ---------------------------------------------------------------------------


def create_app(
    store: Optional[RecordingStore] = None,
    animations: Optional[AnimationLookup] = None,
) -> FastAPI:
    """Build the API app bound to one recording store."""
    app = FastAPI(
        title="Caption Buddy API",
        description=(
            "Recording library and caption synchronization API. List recordings, "
            "download captions, register media with captions, and query the "
            "caption and animation that are current at a playback time."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.store = store if store is not None else RecordingStore(LIBRARY_PATH)
    app.state.animations = animations if animations is not None else AnimationLookup()
    app.include_router(router)
    logger.info("API bound to library %s", app.state.store.path or "<memory>")
    return app


def run_api(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Entry point for the caption-buddy-api console script."""
    import uvicorn
    uvicorn.run(create_app(), host=host, port=port)
