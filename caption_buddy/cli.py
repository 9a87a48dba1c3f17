"""Command-line interface for Caption Buddy.

WHY: Caption timing is easiest to check from the terminal: play a caption
file (or a queue of them) against a simulated playback clock and watch the
transitions and animations fire, look up animations, manage the recording
library, transcribe a media file, or start the HTTP API.

HOW: argparse subcommands, one handler function each. Async collaborators
(transcribers, the store) run through asyncio.run(). Status messages go to
stderr; command results (transitions, listings, lookups) go to stdout.

RULES:
- play: samples every --interval seconds (default PLAYBACK_SAMPLE_INTERVAL_S),
  prints one line per transition, hands off between files like a playlist;
  --speed paces the simulated clock against the wall clock (0 = no waiting)
- library: --library overrides the library file from config
- transcribe: --sample uses companion captions instead of the HTTP service
- Exit code 1 on user errors (missing files, bad captions, unknown ids)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from caption_buddy.config import LIBRARY_PATH, LOG_LEVEL, PLAYBACK_SAMPLE_INTERVAL_S
from caption_buddy.core.animation import AnimationLookup
from caption_buddy.core.cursor import TransitionEvent
from caption_buddy.core.segments import (
    CaptionFormatError,
    load_captions_file,
    save_captions_file,
    sort_segments,
)
from caption_buddy.core.sequence import QueueItem, SequencePlayer
from caption_buddy.library.demo import seed_demo_recordings
from caption_buddy.library.store import RecordingStore, RecordingStoreError
from caption_buddy.transcription import TRANSCRIBERS
from caption_buddy.transcription.base import TranscriptionError


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _format_event(item_index: int, time_s: float, event: TransitionEvent) -> str:
    if event.is_idle:
        return "[{}] {:8.3f}s  --".format(item_index, time_s)
    line = "[{}] {:8.3f}s  #{} {}".format(item_index, time_s, event.new_index, event.text)
    if event.animation_id:
        line += "  (animation: {})".format(event.animation_id)
    return line


# ---------------------------------------------------------------------------
# play
# ---------------------------------------------------------------------------


def _cmd_play(args: argparse.Namespace) -> None:
    player = SequencePlayer()
    for path in args.captions:
        try:
            segments = sort_segments(load_captions_file(path))
        except (OSError, CaptionFormatError) as exc:
            _fail("Could not load {}: {}".format(path, exc))
        player.enqueue(QueueItem(media_ref=str(path), segments=segments))

    interval = args.interval
    if interval <= 0:
        _fail("--interval must be positive")

    player.start()
    while player.is_started and not player.is_complete:
        item = player.queue[player.current_item_index]
        # Sorted by start, so with overlaps the last segment need not end last.
        end_s = max((s.end_s for s in item.segments), default=0.0)
        _status("Playing {} ({} captions, {:.2f}s)".format(
            item.media_ref, len(item.segments), end_s
        ))

        step = 0
        while True:
            time_s = step * interval
            event = player.advance(time_s)
            if event is not None:
                print(_format_event(player.current_item_index, time_s, event), flush=True)
            if time_s >= end_s:
                break
            if args.speed > 0:
                time.sleep(interval / args.speed)
            step += 1

        player.on_item_finished()

    _status("Done.")


# ---------------------------------------------------------------------------
# lookup
# ---------------------------------------------------------------------------


def _cmd_lookup(args: argparse.Namespace) -> None:
    animations = AnimationLookup()
    for word in args.words:
        print("{}\t{}".format(word, animations.lookup(word) or "-"))


# ---------------------------------------------------------------------------
# library
# ---------------------------------------------------------------------------


def _open_store(args: argparse.Namespace) -> RecordingStore:
    try:
        return RecordingStore(args.library)
    except RecordingStoreError as exc:
        _fail(str(exc))
        raise  # unreachable; _fail exits


def _cmd_library(args: argparse.Namespace) -> None:
    store = _open_store(args)

    if args.library_command == "list":
        recordings = store.fetch_all()
        if not recordings:
            _status("Library is empty.")
        for r in recordings:
            print("{}\t{}\t{} captions\t{}".format(
                r.id,
                time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(r.created_at)),
                len(r.segments),
                r.media_ref,
            ))

    elif args.library_command == "import":
        try:
            segments = sort_segments(load_captions_file(args.captions))
        except (OSError, CaptionFormatError) as exc:
            _fail("Could not load {}: {}".format(args.captions, exc))
        recording = asyncio.run(store.save(Path(args.media).resolve(), segments))
        print(recording.id)

    elif args.library_command == "delete":
        if not asyncio.run(store.delete(args.recording_id)):
            _fail("Recording not found: {}".format(args.recording_id))
        _status("Deleted {}".format(args.recording_id))

    elif args.library_command == "seed":
        directory = Path(args.directory)
        if not directory.is_dir():
            _fail("Not a directory: {}".format(directory))
        saved = asyncio.run(seed_demo_recordings(store, directory))
        _status("Seeded {} recording(s).".format(len(saved)))


# ---------------------------------------------------------------------------
# transcribe
# ---------------------------------------------------------------------------


def _cmd_transcribe(args: argparse.Namespace) -> None:
    media = Path(args.media)
    if not media.is_file():
        _fail("File not found: {}".format(media))

    try:
        if args.sample:
            transcriber = TRANSCRIBERS["sample"]()
        else:
            transcriber = TRANSCRIBERS["http"](on_status=_status)
    except ValueError as exc:
        # Missing API key
        _fail(str(exc))

    _status("Transcribing with {}...".format(transcriber.name))
    try:
        segments = asyncio.run(transcriber.transcribe(media))
    except TranscriptionError as exc:
        _fail(str(exc))

    output = Path(args.output) if args.output else media.with_name(media.stem + "-captions.json")
    save_captions_file(output, segments)
    _status("Saved {} captions to {}".format(len(segments), output))


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


def _cmd_serve(args: argparse.Namespace) -> None:
    from caption_buddy.server.app import run_api
    run_api(host=args.host, port=args.port)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser; separate from main() so tests can inspect it."""
    parser = argparse.ArgumentParser(
        prog="caption_buddy",
        description="Word-timed captions synchronized with playback.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    play = subparsers.add_parser("play", help="Simulate playback of caption files.")
    play.add_argument("captions", nargs="+", help="Captions JSON files, played in order.")
    play.add_argument(
        "--interval",
        type=float,
        default=PLAYBACK_SAMPLE_INTERVAL_S,
        help="Clock sampling interval in seconds (default: %(default)s).",
    )
    play.add_argument(
        "--speed",
        type=float,
        default=0.0,
        help="Playback speed multiplier; 0 runs without waiting (default: %(default)s).",
    )
    play.set_defaults(handler=_cmd_play)

    lookup = subparsers.add_parser("lookup", help="Look up animations for words.")
    lookup.add_argument("words", nargs="+", help="Words to look up.")
    lookup.set_defaults(handler=_cmd_lookup)

    library = subparsers.add_parser("library", help="Manage the recording library.")
    library.add_argument(
        "--library",
        default=LIBRARY_PATH,
        help="Library file (default: %(default)s).",
    )
    library_sub = library.add_subparsers(dest="library_command", required=True)
    library_sub.add_parser("list", help="List recordings, newest first.")
    lib_import = library_sub.add_parser("import", help="Add a media file with its captions.")
    lib_import.add_argument("media", help="Media file path.")
    lib_import.add_argument("captions", help="Captions JSON file.")
    lib_delete = library_sub.add_parser("delete", help="Delete a recording.")
    lib_delete.add_argument("recording_id", help="Recording id.")
    lib_seed = library_sub.add_parser("seed", help="Import demo media with companion captions.")
    lib_seed.add_argument("directory", help="Directory of demo media.")
    library.set_defaults(handler=_cmd_library)

    transcribe = subparsers.add_parser("transcribe", help="Transcribe a media file.")
    transcribe.add_argument("media", help="Media file path.")
    transcribe.add_argument(
        "--sample",
        action="store_true",
        help="Use companion sample captions instead of the speech service.",
    )
    transcribe.add_argument(
        "--output",
        default=None,
        help="Output captions JSON (default: {stem}-captions.json next to the media).",
    )
    transcribe.set_defaults(handler=_cmd_transcribe)

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: %(default)s).")
    serve.add_argument("--port", type=int, default=8000, help="Port (default: %(default)s).")
    serve.set_defaults(handler=_cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m caption_buddy`` and the caption-buddy script."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    args.handler(args)


if __name__ == "__main__":
    main()
