"""Tests for the command-line interface.

WHY: The CLI is how caption timing gets checked by hand. The play output
must show one line per transition, and library commands must exit 1 on
user errors instead of tracebacks.

HOW: Call main() with argv lists and read stdout/stderr via capsys.
Caption files and libraries live on tmp_path.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from caption_buddy.cli import build_parser, main
from caption_buddy.library.store import RecordingStore

from conftest import SAMPLE_CAPTIONS, SECOND_CAPTIONS, write_media_with_captions


@pytest.fixture
def captions_file(tmp_path):
    path = tmp_path / "demo-captions.json"
    path.write_text(json.dumps(SAMPLE_CAPTIONS), encoding="utf-8")
    return path


class TestParser:
    """build_parser() wiring."""

    def test_play_defaults(self, captions_file):
        args = build_parser().parse_args(["play", str(captions_file)])
        assert args.interval == pytest.approx(0.1)
        assert args.speed == 0.0

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_library_subcommand_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["library"])


class TestPlay:
    """caption_buddy play"""

    def test_prints_transitions(self, captions_file, capsys):
        main(["play", str(captions_file)])
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 7
        assert lines[0].endswith("#0 Hi!  (animation: hi)")
        assert "#2 improve  (animation: growth_chart)" in lines[3]
        assert lines[-1].endswith("--")

    def test_plays_queue_in_order(self, tmp_path, captions_file, capsys):
        second = tmp_path / "second.json"
        second.write_text(json.dumps(SECOND_CAPTIONS), encoding="utf-8")
        main(["play", str(captions_file), str(second)])
        out = capsys.readouterr().out
        assert out.index("focus.") < out.index("Love")
        assert "[1]" in out

    def test_overlap_plays_until_latest_end(self, tmp_path, capsys):
        """A long caption that outlasts later ones still gets its Idle line."""
        path = tmp_path / "overlap.json"
        path.write_text(json.dumps([
            {"text": "long", "startTime": 0, "duration": 5},
            {"text": "short", "startTime": 1, "duration": 1},
        ]), encoding="utf-8")
        main(["play", str(path), "--interval", "0.5"])
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        assert lines[0].endswith("#0 long")
        assert "5.000s" in lines[1]
        assert lines[1].endswith("--")

    def test_invalid_captions_exit_1(self, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text('[{"text": "Hi"}]', encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main(["play", str(bad)])
        assert exc_info.value.code == 1
        assert "Could not load" in capsys.readouterr().err

    def test_non_positive_interval(self, captions_file):
        with pytest.raises(SystemExit):
            main(["play", str(captions_file), "--interval", "0"])


class TestLookup:
    """caption_buddy lookup"""

    def test_lookup(self, capsys):
        main(["lookup", "Hi!", "banana", "Productivity"])
        assert capsys.readouterr().out.splitlines() == [
            "Hi!\thi",
            "banana\t-",
            "Productivity\tgrowth_chart",
        ]


class TestLibrary:
    """caption_buddy library ..."""

    def test_import_list_delete(self, tmp_path, captions_file, capsys):
        library = str(tmp_path / "library.json")
        media = write_media_with_captions(tmp_path, "demo.mp4")

        main(["library", "--library", library, "import", str(media), str(captions_file)])
        recording_id = capsys.readouterr().out.strip()
        assert RecordingStore(library).get(recording_id) is not None

        main(["library", "--library", library, "list"])
        listing = capsys.readouterr().out
        assert recording_id in listing
        assert "5 captions" in listing

        main(["library", "--library", library, "delete", recording_id])
        assert len(RecordingStore(library)) == 0

    def test_delete_unknown_exit_1(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["library", "--library", str(tmp_path / "l.json"), "delete", "nope"])
        assert exc_info.value.code == 1

    def test_seed(self, tmp_path, capsys):
        demo_dir = tmp_path / "demo"
        demo_dir.mkdir()
        write_media_with_captions(demo_dir, "a.mp4", SAMPLE_CAPTIONS)
        library = str(tmp_path / "library.json")
        main(["library", "--library", library, "seed", str(demo_dir)])
        assert "Seeded 1 recording(s)." in capsys.readouterr().err
        assert len(RecordingStore(library)) == 1

    def test_corrupt_library_exit_1(self, tmp_path):
        library = tmp_path / "library.json"
        library.write_text("garbage", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main(["library", "--library", str(library), "list"])
        assert exc_info.value.code == 1


class TestTranscribe:
    """caption_buddy transcribe"""

    def test_sample_writes_default_output(self, tmp_path, capsys):
        media = write_media_with_captions(tmp_path, "demo.mp4", SAMPLE_CAPTIONS, suffix=".json")
        main(["transcribe", str(media), "--sample"])
        output = tmp_path / "demo-captions.json"
        assert json.loads(output.read_text(encoding="utf-8")) == SAMPLE_CAPTIONS

    def test_sample_explicit_output(self, tmp_path):
        media = write_media_with_captions(tmp_path, "demo.mp4", SAMPLE_CAPTIONS)
        out = tmp_path / "out.json"
        main(["transcribe", str(media), "--sample", "--output", str(out)])
        assert len(json.loads(out.read_text(encoding="utf-8"))) == 5

    def test_sample_without_companion_exit_1(self, tmp_path, capsys):
        media = write_media_with_captions(tmp_path, "demo.mp4")
        with pytest.raises(SystemExit) as exc_info:
            main(["transcribe", str(media), "--sample"])
        assert exc_info.value.code == 1
        assert "No sample captions" in capsys.readouterr().err

    def test_missing_api_key_exit_1(self, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("TRANSCRIBER_API_KEY", raising=False)
        media = write_media_with_captions(tmp_path, "demo.mp4")
        with pytest.raises(SystemExit):
            main(["transcribe", str(media)])
        assert "TRANSCRIBER_API_KEY" in capsys.readouterr().err


class TestServe:
    """caption_buddy serve"""

    def test_serve_calls_run_api(self):
        with patch("caption_buddy.server.app.run_api") as run_api:
            main(["serve", "--port", "9001"])
        run_api.assert_called_once_with(host="127.0.0.1", port=9001)
