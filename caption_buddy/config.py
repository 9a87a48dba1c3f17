"""Configuration constants, animation table, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. The word → animation table and the supported
media formats are plain data structures, not buried in logic, so
adding a new animation is a one-line change.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level dicts, sets, and strings. The load_api_key() function
provides a clear error when the speech service key is missing.

RULES:
- ANIMATION_MAP keys are normalized words (lower-case, no edge punctuation)
- ANIMATION_MAP values are animation asset names
- SUPPORTED_MEDIA_FORMATS lists accepted media file extensions
- API key is loaded from .env via python-dotenv, never hardcoded
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the app is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Word → animation table
# ---------------------------------------------------------------------------

ANIMATION_MAP: dict[str, str] = {
    "hi": "hi",
    "focus": "focus",
    "health": "health",
    "work": "work",
    "improve": "growth_chart",
    "productivity": "growth_chart",
    "find": "find",
    "love": "love",
    "success": "success",
    "you've": "you've",
}

# ---------------------------------------------------------------------------
# Supported media file extensions
# ---------------------------------------------------------------------------

SUPPORTED_MEDIA_FORMATS: set[str] = {
    ".mp4", ".mov", ".m4v", ".m4a", ".wav", ".mp3", ".aac",
}
"""Media file extensions accepted by the recorder and transcriber (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Speech service defaults
# ---------------------------------------------------------------------------

TRANSCRIBER_BASE_URL = os.getenv("TRANSCRIBER_BASE_URL", "https://api.soniox.com/v1")
TRANSCRIBER_MODEL = os.getenv("TRANSCRIBER_MODEL", "stt-async-v4")
TRANSCRIBER_LOCALE = os.getenv("TRANSCRIBER_LOCALE", "en-US")

# ---------------------------------------------------------------------------
# Playback, library, and live session defaults
# ---------------------------------------------------------------------------

PLAYBACK_SAMPLE_INTERVAL_S = float(os.getenv("PLAYBACK_SAMPLE_INTERVAL_S", "0.1"))
LIBRARY_PATH = os.getenv("CAPTION_BUDDY_LIBRARY", "caption-library.json")
DEFAULT_CHANNEL = os.getenv("CAPTION_BUDDY_CHANNEL", "caption-buddy-live")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def load_api_key() -> str:
    """Load the speech service API key from the environment.

    WHY: The key is required for every call to the HTTP speech service.
    Loading it from the environment (via .env) keeps it out of source code.

    HOW: Reads TRANSCRIBER_API_KEY from os.environ (populated by python-dotenv).

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("TRANSCRIBER_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "Speech service API key not configured. "
            "Add TRANSCRIBER_API_KEY to the .env file in the app folder."
        )
    return key
