"""Caption Buddy — word-timed captions synchronized with video playback.

WHY: Short recorded videos are transcribed into word-level timed captions.
During playback the caption under the playhead must change exactly on word
boundaries, and selected words trigger a sign-language-style animation.
This package holds that synchronization engine plus the collaborators that
feed it (recorder, transcriber, recording library, live session).

HOW: Four layers, each independently testable:
  core/          — segment model, caption cursor state machine, sequence
                   player, animation lookup, chat log
  transcription/ — media → timed segments (HTTP speech service or sample data)
  library/       — persisted recordings (captions stored as JSON)
  recorder/, live/, server/ — capture workflow, live chat session, HTTP API

RULES:
- The core never performs I/O and never raises from advance/reset/lookup
- Collaborators are chosen at construction time, never via global singletons
- The persisted caption layout ({text, startTime, duration}) is a stable contract
"""

__version__ = "0.1.0"
