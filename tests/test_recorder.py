"""Tests for recorders and the record → transcribe → save workflow.

WHY: Stopping a recording must always end with a library entry, even when
transcription fails. Recorder state errors must surface instead of
silently producing a broken entry.

HOW: Fake media files on tmp_path, the SampleTranscriber for the happy
path, and a small failing transcriber for the error path.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

import pytest

from caption_buddy.core.segments import TimedSegment
from caption_buddy.library.store import RecordingStore
from caption_buddy.recorder import (
    ImportRecorder,
    RecorderError,
    RecordingWorkflow,
    SimulatorRecorder,
)
from caption_buddy.recorder.base import validate_media_path
from caption_buddy.transcription.base import (
    AuthorizationDenied,
    Transcriber,
    TranscriptionError,
)
from caption_buddy.transcription.sample import SampleTranscriber

from conftest import SAMPLE_CAPTIONS, write_media_with_captions


class DeniedTranscriber(Transcriber):
    """Always fails the way a refused speech service does."""

    @property
    def name(self) -> str:
        return "denied"

    async def transcribe(self, media_ref: str | Path) -> List[TimedSegment]:
        raise AuthorizationDenied("Speech service refused credentials")


class ReversedTranscriber(Transcriber):
    """Returns the sample captions out of order."""

    @property
    def name(self) -> str:
        return "reversed"

    async def transcribe(self, media_ref: str | Path) -> List[TimedSegment]:
        return [
            TimedSegment(text=c["text"], start_s=c["startTime"], duration_s=c["duration"])
            for c in reversed(SAMPLE_CAPTIONS)
        ]


# ---------------------------------------------------------------------------
# Recorders
# ---------------------------------------------------------------------------


class TestValidateMediaPath:
    """validate_media_path() checks extension and existence."""

    def test_accepts_supported_file(self, tmp_path):
        media = write_media_with_captions(tmp_path, "clip.MOV")
        assert validate_media_path(media) == media

    def test_rejects_unsupported_extension(self, tmp_path):
        media = write_media_with_captions(tmp_path, "notes.txt")
        with pytest.raises(RecorderError, match="Unsupported media type"):
            validate_media_path(media)

    def test_rejects_missing_file(self, tmp_path):
        with pytest.raises(RecorderError, match="not found"):
            validate_media_path(tmp_path / "gone.mp4")


class TestRecorderState:
    """start()/stop() state transitions."""

    def test_simulator_returns_demo_media(self, tmp_path):
        media = write_media_with_captions(tmp_path, "demo.mp4")
        recorder = SimulatorRecorder(media)

        async def _run():
            await recorder.start()
            assert recorder.is_recording
            return await recorder.stop()

        assert asyncio.run(_run()) == media
        assert not recorder.is_recording

    def test_stop_without_start(self, tmp_path):
        recorder = SimulatorRecorder(write_media_with_captions(tmp_path, "demo.mp4"))
        with pytest.raises(RecorderError, match="Not recording"):
            asyncio.run(recorder.stop())

    def test_double_start(self, tmp_path):
        recorder = SimulatorRecorder(write_media_with_captions(tmp_path, "demo.mp4"))

        async def _run():
            await recorder.start()
            await recorder.start()

        with pytest.raises(RecorderError, match="Already recording"):
            asyncio.run(_run())

    def test_import_validates_up_front(self, tmp_path):
        with pytest.raises(RecorderError):
            ImportRecorder(tmp_path / "missing.mp4")


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------


class TestRecordingWorkflow:
    """toggle()/stop() transcribe and save."""

    def test_captioned_recording(self, tmp_path):
        media = write_media_with_captions(tmp_path, "demo.mp4", SAMPLE_CAPTIONS)
        store = RecordingStore()
        workflow = RecordingWorkflow(SimulatorRecorder(media), SampleTranscriber(), store)

        async def _run():
            assert await workflow.toggle() is None
            assert workflow.is_recording
            return await workflow.toggle()

        result = asyncio.run(_run())
        assert result.captioned
        assert result.error is None
        assert [s.text for s in result.recording.segments] == [c["text"] for c in SAMPLE_CAPTIONS]
        assert store.fetch_all() == [result.recording]

    def test_segments_are_sorted_before_saving(self, tmp_path):
        media = write_media_with_captions(tmp_path, "demo.mp4")
        workflow = RecordingWorkflow(ImportRecorder(media), ReversedTranscriber(), RecordingStore())

        async def _run():
            await workflow.start()
            return await workflow.stop()

        result = asyncio.run(_run())
        starts = [s.start_s for s in result.recording.segments]
        assert starts == sorted(starts)

    def test_failed_transcription_still_saves(self, tmp_path, caplog):
        media = write_media_with_captions(tmp_path, "demo.mp4")
        store = RecordingStore()
        workflow = RecordingWorkflow(ImportRecorder(media), DeniedTranscriber(), store)

        async def _run():
            await workflow.start()
            return await workflow.stop()

        result = asyncio.run(_run())
        assert not result.captioned
        assert isinstance(result.error, TranscriptionError)
        assert result.recording.segments == []
        assert len(store) == 1
        assert "Transcription failed" in caplog.text

    def test_stop_before_start_propagates(self, tmp_path):
        media = write_media_with_captions(tmp_path, "demo.mp4")
        workflow = RecordingWorkflow(ImportRecorder(media), SampleTranscriber(), RecordingStore())
        with pytest.raises(RecorderError):
            asyncio.run(workflow.stop())
