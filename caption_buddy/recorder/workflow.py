"""Record → transcribe → save workflow.

WHY: Stopping a recording kicks off the rest of the pipeline: the finished
file is transcribed and saved to the library together with its captions.
A transcription failure must not lose the recording. The video is still
saved, just without captions, and the player simply shows none.

HOW: RecordingWorkflow holds one Recorder, one Transcriber, and one
RecordingStore, all injected. toggle() mirrors the record button: start
when idle, stop-and-process when recording.

RULES:
- Segments are sorted by start before saving
- TranscriptionError → warning logged, recording saved with [] captions,
  error returned in WorkflowResult.error
- RecorderError and RecordingStoreError propagate to the caller
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from caption_buddy.core.segments import sort_segments
from caption_buddy.library.store import Recording, RecordingStore
from caption_buddy.recorder.base import Recorder
from caption_buddy.transcription.base import Transcriber, TranscriptionError

logger = logging.getLogger(__name__)


@dataclass
class WorkflowResult:
    """Outcome of one stop(): the saved record and any transcription error."""

    recording: Recording
    error: Optional[TranscriptionError] = None

    @property
    def captioned(self) -> bool:
        return self.error is None


class RecordingWorkflow:
    """Coordinates a recorder, a transcriber, and the recording library."""

    def __init__(
        self,
        recorder: Recorder,
        transcriber: Transcriber,
        store: RecordingStore,
    ) -> None:
        self._recorder = recorder
        self._transcriber = transcriber
        self._store = store

    @property
    def is_recording(self) -> bool:
        return self._recorder.is_recording

    async def start(self) -> None:
        await self._recorder.start()
        logger.info("Recording started")

    async def stop(self) -> WorkflowResult:
        media_path = await self._recorder.stop()
        logger.info("Finished recording to %s", media_path)

        error: Optional[TranscriptionError] = None
        try:
            segments = sort_segments(await self._transcriber.transcribe(media_path))
        except TranscriptionError as exc:
            logger.warning("Transcription failed for %s: %s", media_path.name, exc)
            segments = []
            error = exc

        recording = await self._store.save(media_path, segments)
        return WorkflowResult(recording=recording, error=error)

    async def toggle(self) -> Optional[WorkflowResult]:
        """Start if idle; stop and process if recording."""
        if self._recorder.is_recording:
            return await self.stop()
        await self.start()
        return None
