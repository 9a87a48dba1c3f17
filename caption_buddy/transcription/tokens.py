"""Sub-word token assembly into timed word segments.

WHY: The HTTP speech service uses BPE tokenization, splitting words like
"fantastic" into [" fan", "tastic"], and reports punctuation as separate
tokens. Captions need one segment per spoken word with the punctuation
attached ("today?"), the way an on-device recognizer reports them.

HOW: A leading space in token text signals a new word boundary.
Continuation tokens (no leading space) extend the current word.
Punctuation-only tokens are appended to the preceding word's text and
stretch its end time. Translation tokens carry no audio alignment and are
dropped before assembly.

RULES:
- Leading space → new word (the space is stripped)
- First token → new word (even without leading space)
- Punctuation-only token → merged onto the previous word; dropped if none
- Times: ms → seconds (start_ms / 1000.0)
- Every segment gets a span of at least MIN_SPAN_S so duration > 0 holds
- Tokens with translation_status == "translation" are ignored
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from caption_buddy.core.segments import TimedSegment

# Tokens that consist entirely of punctuation characters.
_PUNCTUATION_RE = re.compile(r"^[.,!?;:…—–\-\"'“”]+$")

MIN_SPAN_S = 0.001


def filter_translation_tokens(tokens: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop translation tokens; keep "original", "none", or absent status."""
    return [
        t for t in tokens
        if t.get("translation_status", "none") != "translation"
    ]


def assemble_segments(tokens: List[Dict[str, Any]]) -> List[TimedSegment]:
    """Assemble service tokens into one TimedSegment per word.

    Args:
        tokens: Token dicts with "text", "start_ms", "end_ms".

    Returns:
        Word segments in token order.
    """
    segments: List[TimedSegment] = []

    current_text: Optional[str] = None
    current_start_ms = 0
    current_end_ms = 0

    def _flush() -> None:
        nonlocal current_text
        if current_text is not None:
            start_s = current_start_ms / 1000.0
            span_s = max((current_end_ms - current_start_ms) / 1000.0, MIN_SPAN_S)
            segments.append(TimedSegment(text=current_text, start_s=start_s, duration_s=span_s))
            current_text = None

    for token in filter_translation_tokens(tokens):
        text: str = token["text"]
        start_ms: int = token["start_ms"]
        end_ms: int = token["end_ms"]

        if not text.strip():
            continue

        if _PUNCTUATION_RE.match(text.strip()):
            # Attach to the word being built; orphan leading punctuation is dropped.
            if current_text is not None:
                current_text += text.strip()
                current_end_ms = max(current_end_ms, end_ms)
            continue

        if text.startswith(" ") or current_text is None:
            _flush()
            current_text = text.lstrip(" ")
            current_start_ms = start_ms
            current_end_ms = end_ms
        else:
            current_text += text
            current_end_ms = end_ms

    _flush()
    return segments
