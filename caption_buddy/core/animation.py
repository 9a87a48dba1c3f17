"""Word → animation lookup.

WHY: Selected spoken words have a matching sign-language-style animation.
When the caption under the playhead changes, the presentation layer asks
which animation (if any) belongs to the new word. Most words have none,
and that is a normal outcome, not an error.

HOW: Words are normalized (leading/trailing punctuation stripped, then
lower-cased) and looked up exactly in a static table. The table defaults
to ANIMATION_MAP from config; a custom table can be injected.

RULES:
- Punctuation is any Unicode character in a "P*" category
- Only the edges are stripped: "you've" keeps its apostrophe
- No fuzzy or partial matching
- lookup() never raises; unknown words return None
"""

from __future__ import annotations

import unicodedata
from typing import Mapping, Optional

from caption_buddy.config import ANIMATION_MAP


def _is_punctuation(ch: str) -> bool:
    return unicodedata.category(ch).startswith("P")


def normalize_word(word: str) -> str:
    """Strip edge punctuation and lower-case a word.

    >>> normalize_word("Hi!")
    'hi'
    >>> normalize_word("“You've,”")
    "you've"
    """
    start = 0
    end = len(word)
    while start < end and _is_punctuation(word[start]):
        start += 1
    while end > start and _is_punctuation(word[end - 1]):
        end -= 1
    return word[start:end].lower()


class AnimationLookup:
    """Maps spoken words to animation asset names.

    Constructed explicitly and passed to whatever needs it; there is no
    shared instance. Keys of a custom table are normalized on construction
    so "Hi" and "hi" in a table behave the same.
    """

    def __init__(self, table: Optional[Mapping[str, str]] = None) -> None:
        source = ANIMATION_MAP if table is None else table
        self._table: dict[str, str] = {
            normalize_word(word): animation for word, animation in source.items()
        }

    def lookup(self, word: str) -> Optional[str]:
        """Return the animation id for word, or None when there is none."""
        return self._table.get(normalize_word(word))

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.lookup(word) is not None

    def __len__(self) -> int:
        return len(self._table)
