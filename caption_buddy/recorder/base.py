"""Recorder interface and its non-hardware implementations.

WHY: The capture workflow only needs "start", "stop", and the finished
media file. On a device that file comes from the camera; in the simulator
and on the desktop it comes from a bundled demo clip or an existing file.
Picking the implementation at construction keeps the workflow free of
environment checks.

HOW: Recorder is an ABC with async start()/stop() and an is_recording flag.
SimulatorRecorder hands back a fixed demo media file; ImportRecorder adopts
a file the user already has. Both validate the media extension.

RULES:
- stop() returns the finished media path
- stop() without a prior start() raises RecorderError
- start() while recording raises RecorderError
- Media extensions must be in SUPPORTED_MEDIA_FORMATS
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from caption_buddy.config import SUPPORTED_MEDIA_FORMATS


class RecorderError(Exception):
    """Raised on invalid recorder state changes or unusable media files."""


def validate_media_path(path: str | Path) -> Path:
    """Return path as a Path if it is an existing, supported media file."""
    media = Path(path)
    ext = media.suffix.lower()
    if ext not in SUPPORTED_MEDIA_FORMATS:
        raise RecorderError(
            "Unsupported media type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_MEDIA_FORMATS))
            )
        )
    if not media.is_file():
        raise RecorderError("Media file not found: {}".format(media))
    return media


class Recorder(ABC):
    """Abstract base for all recorders."""

    def __init__(self) -> None:
        self._recording = False

    @property
    def is_recording(self) -> bool:
        return self._recording

    async def start(self) -> None:
        if self._recording:
            raise RecorderError("Already recording")
        await self._begin()
        self._recording = True

    async def stop(self) -> Path:
        if not self._recording:
            raise RecorderError("Not recording")
        self._recording = False
        return await self._finish()

    async def _begin(self) -> None:
        """Hook for implementations that need to prepare before recording."""

    @abstractmethod
    async def _finish(self) -> Path:
        """Produce the finished media file."""


class SimulatorRecorder(Recorder):
    """Pretends to record and returns a bundled demo clip."""

    def __init__(self, demo_media: str | Path) -> None:
        super().__init__()
        self._demo_media = Path(demo_media)

    async def _finish(self) -> Path:
        return validate_media_path(self._demo_media)


class ImportRecorder(Recorder):
    """Adopts an existing media file as the 'recording'."""

    def __init__(self, media_path: str | Path) -> None:
        super().__init__()
        self._media_path = validate_media_path(media_path)

    async def _finish(self) -> Path:
        return self._media_path
