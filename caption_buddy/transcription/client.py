"""Async HTTP transcriber backed by a non-realtime speech-to-text service.

WHY: Recordings are transcribed off-device. The service works in steps
(upload the file, create a job, poll until it finishes, fetch a flat token
array) and each step can fail in ways the caller must tell apart
(bad credentials vs. service down vs. job failed).

HOW: Uses httpx.AsyncClient for non-blocking HTTP. transcribe() opens one
client per call and walks upload → create → poll → fetch, then always
deletes the remote job and file. Tokens are assembled into word segments
by tokens.assemble_segments(). HTTP and transport failures are mapped onto
the TranscriptionError taxonomy.

RULES:
- Authentication is a Bearer token from config (TRANSCRIBER_API_KEY)
- 401/403 → AuthorizationDenied; 503 or connection failure → RecognizerUnavailable
- Any other non-2xx, a job in "error" state, or a poll timeout → TranscriptionFailed
- Polling uses exponential backoff: 2s initial, 1.5x factor, 15s max, 60min timeout
- Remote cleanup is best-effort and never masks the original error
- Status callback (on_status) is optional; when provided, called with status strings
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from caption_buddy.config import (
    TRANSCRIBER_BASE_URL,
    TRANSCRIBER_LOCALE,
    TRANSCRIBER_MODEL,
    load_api_key,
)
from caption_buddy.core.segments import TimedSegment, sort_segments
from caption_buddy.transcription.base import (
    AuthorizationDenied,
    RecognizerUnavailable,
    Transcriber,
    TranscriptionFailed,
)
from caption_buddy.transcription.tokens import assemble_segments

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_POLL_INITIAL_INTERVAL_S = 2.0
_POLL_BACKOFF_FACTOR = 1.5
_POLL_MAX_INTERVAL_S = 15.0
_POLL_TIMEOUT_S = 60 * 60  # 60 minutes


def _raise_for_response(resp: httpx.Response, step: str) -> None:
    """Map a non-2xx response onto the TranscriptionError taxonomy."""
    if resp.status_code in (200, 201, 204):
        return
    if resp.status_code in (401, 403):
        raise AuthorizationDenied(
            "Speech service refused credentials during {} (HTTP {})".format(step, resp.status_code)
        )
    if resp.status_code == 503:
        raise RecognizerUnavailable(
            "Speech service unavailable during {} (HTTP 503)".format(step)
        )
    raise TranscriptionFailed("{} returned HTTP {}: {}".format(step, resp.status_code, resp.text))


class HttpTranscriber(Transcriber):
    """Transcriber for an async upload/poll speech-to-text HTTP API.

    RULES:
    - api_key defaults to load_api_key() from .env
    - base_url / model / locale default to the config values
    - transport is for tests (httpx.MockTransport); None means real network
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        locale: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        poll_interval_s: float = _POLL_INITIAL_INTERVAL_S,
        poll_timeout_s: float = _POLL_TIMEOUT_S,
        on_status: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or TRANSCRIBER_BASE_URL).rstrip("/")
        self._model = model or TRANSCRIBER_MODEL
        self._locale = locale or TRANSCRIBER_LOCALE
        self._transport = transport
        self._poll_interval_s = poll_interval_s
        self._poll_timeout_s = poll_timeout_s
        self._on_status = on_status

    @property
    def name(self) -> str:
        return "HTTP speech service"

    @property
    def language_hints(self) -> List[str]:
        """ISO 639-1 hint derived from the locale ("en-US" → ["en"])."""
        return [self._locale.split("-")[0].lower()]

    def _status(self, msg: str) -> None:
        logger.info(msg)
        if self._on_status:
            self._on_status(msg)

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=httpx.Timeout(300.0, connect=30.0),
            transport=self._transport,
        )

    # ------------------------------------------------------------------
    # Full workflow
    # ------------------------------------------------------------------

    async def transcribe(self, media_ref: str | Path) -> List[TimedSegment]:
        media_path = Path(media_ref)
        if not media_path.is_file():
            raise TranscriptionFailed("Media file not found: {}".format(media_path))

        file_id: Optional[str] = None
        transcription_id: Optional[str] = None

        try:
            async with self._make_client() as client:
                try:
                    file_id = await self._upload_file(client, media_path)
                    transcription_id = await self._create_transcription(client, file_id)
                    await self._poll_until_complete(client, transcription_id)
                    tokens = await self._fetch_tokens(client, transcription_id)
                finally:
                    await self._cleanup(client, transcription_id, file_id)
        except httpx.TransportError as exc:
            raise RecognizerUnavailable(
                "Could not reach speech service at {}: {}".format(self._base_url, exc)
            ) from exc

        segments = sort_segments(assemble_segments(tokens))
        self._status("Transcription complete: {} words found.".format(len(segments)))
        return segments

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _upload_file(self, client: httpx.AsyncClient, media_path: Path) -> str:
        self._status("Uploading {}...".format(media_path.name))
        with open(media_path, "rb") as f:
            resp = await client.post("/files", files={"file": (media_path.name, f)})
        _raise_for_response(resp, "upload")
        return resp.json()["id"]

    async def _create_transcription(self, client: httpx.AsyncClient, file_id: str) -> str:
        self._status("Creating transcription...")
        body: Dict[str, Any] = {
            "model": self._model,
            "file_id": file_id,
            "language_hints": self.language_hints,
        }
        resp = await client.post("/transcriptions", json=body)
        _raise_for_response(resp, "create transcription")
        return resp.json()["id"]

    async def _poll_until_complete(self, client: httpx.AsyncClient, transcription_id: str) -> None:
        interval = self._poll_interval_s
        start_time = time.monotonic()

        while True:
            elapsed = time.monotonic() - start_time
            if elapsed > self._poll_timeout_s:
                raise TranscriptionFailed(
                    "Transcription {} timed out after {:.0f}s".format(transcription_id, elapsed)
                )

            resp = await client.get(f"/transcriptions/{transcription_id}")
            _raise_for_response(resp, "poll")
            data = resp.json()
            status = data.get("status")

            if status == "completed":
                return
            if status == "error":
                raise TranscriptionFailed(data.get("error_message") or "unknown error")

            self._status("Transcribing... ({})".format(status))
            await asyncio.sleep(interval)
            interval = min(interval * _POLL_BACKOFF_FACTOR, _POLL_MAX_INTERVAL_S)

    async def _fetch_tokens(
        self, client: httpx.AsyncClient, transcription_id: str
    ) -> List[Dict[str, Any]]:
        self._status("Fetching transcript...")
        resp = await client.get(f"/transcriptions/{transcription_id}/transcript")
        _raise_for_response(resp, "fetch transcript")
        return resp.json().get("tokens", [])

    async def _cleanup(
        self,
        client: httpx.AsyncClient,
        transcription_id: Optional[str],
        file_id: Optional[str],
    ) -> None:
        """Delete the remote job and file; failures are logged, not raised."""
        if transcription_id:
            try:
                await client.delete(f"/transcriptions/{transcription_id}")
            except httpx.HTTPError:
                logger.warning("Failed to delete transcription %s", transcription_id)
        if file_id:
            try:
                await client.delete(f"/files/{file_id}")
            except httpx.HTTPError:
                logger.warning("Failed to delete uploaded file %s", file_id)
