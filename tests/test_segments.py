"""Tests for TimedSegment and the persisted caption layout.

WHY: The {text, startTime, duration} layout is shared with existing sample
and demo data, so reading and writing it must stay exact. The half-open
containment rule decides every caption boundary during playback.

HOW: Unit tests on TimedSegment, the dict/JSON helpers, and the file
helpers (via tmp_path).

RULES:
- Invalid layouts always raise CaptionFormatError
- Ids never take part in equality and are never written
"""

from __future__ import annotations

import json

import pytest

from caption_buddy.core.segments import (
    CaptionFormatError,
    TimedSegment,
    load_captions_file,
    save_captions_file,
    segments_from_dicts,
    segments_from_json,
    segments_to_dicts,
    segments_to_json,
    sort_segments,
)


# ---------------------------------------------------------------------------
# TimedSegment
# ---------------------------------------------------------------------------


class TestTimedSegment:
    """TimedSegment timing and identity."""

    def test_end_is_start_plus_duration(self):
        seg = TimedSegment(text="focus", start_s=2.5, duration_s=0.5)
        assert seg.end_s == pytest.approx(3.0)

    def test_contains_start(self):
        seg = TimedSegment(text="Hi", start_s=0.0, duration_s=1.0)
        assert seg.contains(0.0)

    def test_does_not_contain_end(self):
        seg = TimedSegment(text="Hi", start_s=0.0, duration_s=1.0)
        assert seg.contains(0.999)
        assert not seg.contains(1.0)

    def test_does_not_contain_before_start(self):
        seg = TimedSegment(text="Hi", start_s=1.0, duration_s=1.0)
        assert not seg.contains(0.5)

    def test_equality_ignores_id(self):
        a = TimedSegment(text="Hi", start_s=0.0, duration_s=1.0)
        b = TimedSegment(text="Hi", start_s=0.0, duration_s=1.0)
        assert a.id != b.id
        assert a == b

    def test_is_frozen(self):
        seg = TimedSegment(text="Hi", start_s=0.0, duration_s=1.0)
        with pytest.raises(AttributeError):
            seg.text = "Bye"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Persisted layout
# ---------------------------------------------------------------------------


class TestPersistedLayout:
    """Reading and writing the {text, startTime, duration} array."""

    def test_to_dict_uses_layout_keys(self):
        seg = TimedSegment(text="work", start_s=0.8, duration_s=0.4)
        assert seg.to_dict() == {"text": "work", "startTime": 0.8, "duration": 0.4}

    def test_from_dicts_preserves_order(self, sample_captions):
        segments = segments_from_dicts(sample_captions)
        assert [s.text for s in segments] == [c["text"] for c in sample_captions]

    def test_round_trip_through_json(self, sample_segments):
        assert segments_from_json(segments_to_json(sample_segments)) == sample_segments

    def test_legacy_id_key_is_ignored(self):
        data = [{"id": "abc", "text": "Hi", "startTime": 0, "duration": 1}]
        segments = segments_from_dicts(data)
        assert segments[0].text == "Hi"
        assert "id" not in segments_to_dicts(segments)[0]

    def test_integer_times_become_floats(self):
        segments = segments_from_dicts([{"text": "Hi", "startTime": 1, "duration": 2}])
        assert isinstance(segments[0].start_s, float)
        assert segments[0].end_s == 3.0

    def test_empty_array_is_valid(self):
        assert segments_from_json("[]") == []

    def test_non_ascii_text_is_written_verbatim(self):
        text = segments_to_json([TimedSegment(text="café", start_s=0, duration_s=1)])
        assert "café" in text


class TestInvalidLayout:
    """Schema violations surface as CaptionFormatError."""

    def test_invalid_json(self):
        with pytest.raises(CaptionFormatError, match="not valid JSON"):
            segments_from_json("{not json")

    def test_object_instead_of_array(self):
        with pytest.raises(CaptionFormatError):
            segments_from_dicts({"text": "Hi", "startTime": 0, "duration": 1})

    def test_missing_duration(self):
        with pytest.raises(CaptionFormatError, match="duration"):
            segments_from_dicts([{"text": "Hi", "startTime": 0}])

    def test_zero_duration(self):
        with pytest.raises(CaptionFormatError, match="0/duration"):
            segments_from_dicts([{"text": "Hi", "startTime": 0, "duration": 0}])

    def test_negative_start(self):
        with pytest.raises(CaptionFormatError):
            segments_from_dicts([{"text": "Hi", "startTime": -1, "duration": 1}])

    def test_empty_text(self):
        with pytest.raises(CaptionFormatError):
            segments_from_dicts([{"text": "", "startTime": 0, "duration": 1}])

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            segments_from_json("[1, 2]")


# ---------------------------------------------------------------------------
# Sorting and files
# ---------------------------------------------------------------------------


class TestSortSegments:
    """sort_segments() orders by start and is stable."""

    def test_sorts_by_start(self):
        b = TimedSegment(text="b", start_s=2.0, duration_s=1.0)
        a = TimedSegment(text="a", start_s=1.0, duration_s=1.0)
        assert sort_segments([b, a]) == [a, b]

    def test_equal_starts_keep_order(self):
        first = TimedSegment(text="first", start_s=1.0, duration_s=1.0)
        second = TimedSegment(text="second", start_s=1.0, duration_s=0.5)
        assert [s.text for s in sort_segments([first, second])] == ["first", "second"]


class TestCaptionFiles:
    """save_captions_file() / load_captions_file() on disk."""

    def test_save_then_load(self, tmp_path, sample_segments):
        path = save_captions_file(tmp_path / "clip-captions.json", sample_segments)
        assert load_captions_file(path) == sample_segments

    def test_saved_file_is_plain_array(self, tmp_path, sample_segments):
        path = save_captions_file(tmp_path / "clip-captions.json", sample_segments)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert isinstance(data, list)
        assert data[0] == {"text": "Hi!", "startTime": 0.0, "duration": 1.0}

    def test_load_missing_file_raises_oserror(self, tmp_path):
        with pytest.raises(OSError):
            load_captions_file(tmp_path / "missing.json")
