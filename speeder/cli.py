"""Command-line RSVP reader for the terminal.

WHY: The engine is meant to sit behind a desktop window, but a terminal
front end is the quickest way to read a file with it and to see the
engine's pacing, warm-up, and position memory in action.

HOW: Uses argparse for options, reads the text from a file or stdin,
fingerprints it, and loads it into a ReadingEngine backed by a
JsonPositionStore. run_loop() then drives tick() from a monotonic clock
every ``--frame-ms`` and redraws the current word on one line, aligned
on its focus letter. Ctrl+C stops the session and saves the position.

RULES:
- Input: positional file path, or stdin when omitted or "-"
- Word output goes to stdout; status messages go to stderr
- Ctrl+C → position saved, exit code 130
- Configuration errors (bad speeds, malformed SPEEDER_* values, unknown
  log level, unreadable file) → exit code 1
- run_loop takes the clock and sleep functions so tests can fake time
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from speeder.config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MEMORY_FILE,
    LOG_LEVELS,
    load_speed_config,
    log_level,
)
from speeder.core.engine import Frame, PlaybackState, ReadingEngine
from speeder.core.tokenizer import tokenize
from speeder.memory.fingerprint import text_fingerprint
from speeder.memory.store import JsonPositionStore

logger = logging.getLogger(__name__)

DEFAULT_FRAME_MS = 16.0
DEFAULT_WIDTH = 20


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def render_frame(frame: Frame, width: int = DEFAULT_WIDTH) -> str:
    """Format one frame as a single terminal line.

    The focus letter always lands in column ``width`` so the eye can
    stay in one place. The current speed is shown after the word.
    """
    speed = "{:.0f} WPM".format(frame.speed_wpm) if frame.speed_wpm is not None else "-"
    return "\r{:>{w}}{}{:<{w}} [{}]".format(
        frame.before, frame.focus, frame.after, speed, w=width
    )


def run_loop(
    engine: ReadingEngine,
    out: TextIO,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    frame_ms: float = DEFAULT_FRAME_MS,
    width: int = DEFAULT_WIDTH,
) -> Frame:
    """Drive the engine until the text is finished.

    WHY: The engine never reads the clock itself; something has to feed
    it elapsed time. This is the terminal's frame loop.

    HOW: Measures the time since the previous iteration with ``clock``
    (seconds), passes it to tick() in milliseconds, and redraws only
    when the displayed word changes.

    Returns:
        The last frame, normally in the finished state.
    """
    frame = engine.snapshot()
    last_drawn: Optional[int] = None
    previous = clock()

    while frame.state is PlaybackState.READING:
        if frame.has_word and frame.index != last_drawn:
            out.write(render_frame(frame, width))
            out.flush()
            last_drawn = frame.index

        sleep(frame_ms / 1000.0)
        now = clock()
        frame = engine.tick((now - previous) * 1000.0)
        previous = now

    return frame


def _read_text(input_file: Optional[str]) -> str:
    if input_file is None or input_file == "-":
        return sys.stdin.read()
    return Path(input_file).read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Positional: input_file (optional, "-" for stdin)
    - Speed: --wpm, --start-ratio, --warmup, --word-pacing/--no-word-pacing
    - Memory: --memory-file, --no-resume, --no-memory
    - Display: --frame-ms, --width; logging: --log-level
    """
    parser = argparse.ArgumentParser(
        prog="speeder",
        description="Read text one word at a time (RSVP), aligned on each "
                    "word's optimal recognition point.",
    )

    parser.add_argument(
        "input_file",
        nargs="?",
        default=None,
        help="Text file to read. Reads stdin when omitted or '-'.",
    )
    parser.add_argument(
        "--wpm",
        type=float,
        default=None,
        help="Target reading speed in words per minute.",
    )
    parser.add_argument(
        "--start-ratio",
        type=float,
        default=None,
        help="Fraction of the target speed used for the first word (0-1].",
    )
    parser.add_argument(
        "--warmup",
        type=int,
        default=None,
        help="Number of words over which speed ramps up to the target.",
    )
    parser.add_argument(
        "--word-pacing",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show long words and words with punctuation a little longer.",
    )
    parser.add_argument(
        "--memory-file",
        default=str(DEFAULT_MEMORY_FILE),
        help="JSON file holding remembered positions (default: %(default)s).",
    )
    parser.add_argument(
        "--no-resume",
        action="store_true",
        help="Start from the first word even if a position is remembered.",
    )
    parser.add_argument(
        "--no-memory",
        action="store_true",
        help="Neither read nor write remembered positions.",
    )
    parser.add_argument(
        "--frame-ms",
        type=float,
        default=DEFAULT_FRAME_MS,
        help="Milliseconds between screen updates (default: %(default)s).",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help="Columns on each side of the focus letter (default: %(default)s).",
    )
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        help="Logging level for diagnostics on stderr, one of {} "
             "(default: %(default)s).".format(", ".join(LOG_LEVELS)),
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Returns the process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.frame_ms <= 0:
        print("Error: --frame-ms must be positive", file=sys.stderr)
        return 1

    try:
        level = log_level(args.log_level)
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        text = _read_text(args.input_file)
        config = load_speed_config(
            target_wpm=args.wpm,
            start_ratio=args.start_ratio,
            warmup_word_count=args.warmup,
            word_pacing=args.word_pacing,
        )
    except (OSError, ValueError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    memory = None if args.no_memory else JsonPositionStore(args.memory_file)
    engine = ReadingEngine(memory=memory)
    fingerprint = text_fingerprint(text)
    logger.debug("Text fingerprint %s", fingerprint)

    if args.no_resume:
        frame = engine.start(tokenize(text, fingerprint=fingerprint), config)
    else:
        frame = engine.load_text(text, config, fingerprint=fingerprint)

    if frame.finished:
        _status("Nothing to read.")
        engine.stop()
        return 0

    if frame.index > 0:
        _status("Resuming at word {} of {}".format(frame.index + 1, frame.total))
    _status("Reading {} words at {:.0f} WPM target. Ctrl+C to stop.".format(
        frame.total, config.target_wpm
    ))

    try:
        run_loop(engine, sys.stdout, frame_ms=args.frame_ms, width=args.width)
    except KeyboardInterrupt:
        index = engine.current_index()
        engine.stop()
        _status("\nStopped at word {}. Position saved.".format(index + 1))
        return 130

    engine.stop()
    _status("\n\nFinished reading!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
