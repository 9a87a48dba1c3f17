"""Recording capture package.

WHY: Producing a finished media file and turning it into a captioned
library entry are separate concerns; this package holds both.

HOW: base.py defines the Recorder interface and its simulator/import
variants; workflow.py chains recorder → transcriber → store.
"""

from caption_buddy.recorder.base import (
    ImportRecorder,
    Recorder,
    RecorderError,
    SimulatorRecorder,
)
from caption_buddy.recorder.workflow import RecordingWorkflow, WorkflowResult

__all__ = [
    "ImportRecorder",
    "Recorder",
    "RecorderError",
    "RecordingWorkflow",
    "SimulatorRecorder",
    "WorkflowResult",
]
