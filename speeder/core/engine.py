"""Playback state machine for one RSVP reading session.

WHY: A reader UI fires start, pause, seek, and speed events from key
presses in whatever order the user produces them, while a frame loop
keeps reporting elapsed time. All of that has to land on one consistent
notion of "which word is showing and for how much longer".

HOW: ReadingEngine is the caller-held handle. It owns at most one
PlaybackSession (the mutable part: index, state, override, remaining
time) plus an optional PositionMemory. tick(elapsed_ms) subtracts time
from the current word and advances through as many words as the
elapsed time covers, carrying the leftover into the next word. Display
durations always come from the pure speed model in timing.py.

RULES:
- States: idle → reading ⇄ paused → finished; stop() returns to idle
- Out-of-state calls are no-ops, never errors
- Empty sequences start directly in finished
- tick is only effective while reading; negative or non-finite elapsed is ignored
- navigate/seek_to clamp to [0, len - 1] and restart the word's timing
- set_speed rescales the remaining time: remaining * old / new
- stop() is the only operation that writes position memory
- Not thread-safe: callers serialize access to one engine
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from speeder.core.models import SpeedConfig, Word, WordSequence
from speeder.core.timing import duration_for, speed_at, validate_wpm
from speeder.core.tokenizer import tokenize

if TYPE_CHECKING:
    from speeder.memory.store import PositionMemory

logger = logging.getLogger(__name__)


class PlaybackState(str, enum.Enum):
    """Lifecycle states of a reading session.

    RULES:
    - idle: no session, or the session was stopped
    - reading: time advances on tick
    - paused: time frozen, position kept
    - finished: the last word's duration has elapsed
    """

    IDLE = "idle"
    READING = "reading"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass
class PlaybackSession:
    """Mutable state of the active reading session.

    RULES:
    - current_index is in [0, len(sequence)]; len means finished
    - override_wpm, once set, replaces the warm-up ramp
    - time_remaining_ms is the display time left for the current word
    """

    sequence: WordSequence
    config: SpeedConfig
    current_index: int = 0
    state: PlaybackState = PlaybackState.IDLE
    override_wpm: Optional[float] = None
    time_remaining_ms: float = 0.0


@dataclass(frozen=True)
class Frame:
    """What a renderer needs to draw the reader for one frame."""

    state: PlaybackState
    before: str
    focus: str
    after: str
    index: int
    total: int
    speed_wpm: Optional[float]
    progress: float

    @property
    def finished(self) -> bool:
        return self.state is PlaybackState.FINISHED

    @property
    def has_word(self) -> bool:
        return bool(self.focus)


class ReadingEngine:
    """Caller-held handle for one reading session at a time.

    WHY: Keeping the session inside an explicit object instead of a
    process-wide "current session" lets the UI, tests, and multiple
    readers each hold their own engine.

    HOW: Every operation reads or mutates self._session. Starting a new
    text replaces the session; stop() persists the position and drops it.

    Args:
        memory: Optional position store consulted by load_text() and
            written by stop().
    """

    def __init__(self, memory: Optional[PositionMemory] = None) -> None:
        self.memory = memory
        self._session: Optional[PlaybackSession] = None

    # ------------------------------------------------------------------
    # Session boundaries
    # ------------------------------------------------------------------

    def start(
        self,
        sequence: WordSequence,
        config: SpeedConfig,
        resume_index: Optional[int] = None,
    ) -> Frame:
        """Start reading ``sequence`` from the beginning or ``resume_index``.

        Any existing session is replaced without writing position memory;
        call stop() first to keep its position.
        """
        session = PlaybackSession(
            sequence=sequence,
            config=config,
            override_wpm=config.speed_override,
        )
        self._session = session

        if sequence.is_empty:
            session.state = PlaybackState.FINISHED
            logger.info("Started session on empty text; finished immediately")
            return self.snapshot()

        index = 0
        if resume_index is not None:
            if 0 <= resume_index < len(sequence):
                index = resume_index
            else:
                logger.debug(
                    "Discarding resume index %d for %d-word text", resume_index, len(sequence)
                )

        session.current_index = index
        session.time_remaining_ms = self._duration_at(index)
        session.state = PlaybackState.READING
        logger.info("Started session: %d words at index %d", len(sequence), index)
        return self.snapshot()

    def load_text(
        self,
        text: str,
        config: SpeedConfig,
        fingerprint: Optional[str] = None,
    ) -> Frame:
        """Tokenize ``text`` and start it, resuming from position memory.

        The fingerprint is the caller's stable key for the text; without
        it (or without a memory store) reading starts at the first word.
        """
        sequence = tokenize(text, fingerprint=fingerprint)
        resume_index = None
        if fingerprint is not None and self.memory is not None:
            resume_index = self.memory.get(fingerprint)
        return self.start(sequence, config, resume_index=resume_index)

    def stop(self) -> None:
        """End the session, remembering its position first.

        Safe in every state. Memory is written only when the session has
        a fingerprint and the engine has a store.
        """
        session = self._session
        if session is None:
            return

        fingerprint = session.sequence.fingerprint
        if fingerprint is not None and self.memory is not None:
            self.memory.set(fingerprint, session.current_index)

        logger.info(
            "Stopped session at index %d of %d (%s)",
            session.current_index,
            len(session.sequence),
            session.state.value,
        )
        self._session = None

    def restart(self) -> None:
        """Go back to the first word and read on with fresh timing."""
        session = self._session
        if session is None:
            return
        session.current_index = 0
        if session.sequence.is_empty:
            session.state = PlaybackState.FINISHED
            return
        session.time_remaining_ms = self._duration_at(0)
        session.state = PlaybackState.READING

    # ------------------------------------------------------------------
    # Time and state transitions
    # ------------------------------------------------------------------

    def pause(self) -> None:
        session = self._session
        if session is not None and session.state is PlaybackState.READING:
            session.state = PlaybackState.PAUSED

    def resume(self) -> None:
        session = self._session
        if session is not None and session.state is PlaybackState.PAUSED:
            session.state = PlaybackState.READING

    def toggle_pause(self) -> None:
        """Pause while reading, resume while paused, otherwise do nothing."""
        state = self.current_state()
        if state is PlaybackState.READING:
            self.pause()
        elif state is PlaybackState.PAUSED:
            self.resume()

    def tick(self, elapsed_ms: float) -> Frame:
        """Advance playback by ``elapsed_ms`` milliseconds.

        A large elapsed value may move past several words in one call;
        the leftover time of each word is carried into the next, so the
        result matches ticking in small steps.
        """
        session = self._session
        if session is None or session.state is not PlaybackState.READING:
            return self.snapshot()
        if not math.isfinite(elapsed_ms) or elapsed_ms < 0:
            logger.debug("Ignoring invalid tick of %r ms", elapsed_ms)
            return self.snapshot()

        session.time_remaining_ms -= elapsed_ms
        total = len(session.sequence)
        while session.time_remaining_ms <= 0:
            session.current_index += 1
            if session.current_index >= total:
                session.current_index = total
                session.time_remaining_ms = 0.0
                session.state = PlaybackState.FINISHED
                logger.info("Finished reading %d words", total)
                break
            session.time_remaining_ms += self._duration_at(session.current_index)

        return self.snapshot()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate(self, delta: int) -> None:
        """Move ``delta`` words forward (or back) within the text."""
        session = self._session
        if session is None:
            return
        self.seek_to(session.current_index + delta)

    def seek_to(self, index: int) -> None:
        """Jump to an absolute word index, clamped to the text."""
        session = self._session
        if session is None or session.state not in (PlaybackState.READING, PlaybackState.PAUSED):
            return
        last = len(session.sequence) - 1
        session.current_index = min(max(index, 0), last)
        session.time_remaining_ms = self._duration_at(session.current_index)

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------

    def set_speed(self, new_wpm: float) -> None:
        """Override the session speed, keeping the current word's progress.

        Raises:
            InvalidSpeed: If ``new_wpm`` is not positive. The previous
                speed is kept.
        """
        new_wpm = validate_wpm(new_wpm)
        session = self._session
        if session is None or session.state not in (PlaybackState.READING, PlaybackState.PAUSED):
            return

        old_wpm = self._speed_at(session.current_index)
        session.time_remaining_ms = session.time_remaining_ms * old_wpm / new_wpm
        session.override_wpm = new_wpm

    def adjust_speed(self, delta_wpm: float) -> None:
        """Change speed by ``delta_wpm``, clamped to the config's bounds."""
        session = self._session
        if session is None or session.state not in (PlaybackState.READING, PlaybackState.PAUSED):
            return
        config = session.config
        current = self._speed_at(session.current_index)
        self.set_speed(min(max(current + delta_wpm, config.min_wpm), config.max_wpm))

    def speed_up(self) -> None:
        if self._session is not None:
            self.adjust_speed(self._session.config.speed_step)

    def speed_down(self) -> None:
        if self._session is not None:
            self.adjust_speed(-self._session.config.speed_step)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def session(self) -> Optional[PlaybackSession]:
        return self._session

    def current_state(self) -> PlaybackState:
        if self._session is None:
            return PlaybackState.IDLE
        return self._session.state

    def current_word(self) -> Optional[Word]:
        """The word on display, or None when idle or finished."""
        session = self._session
        if session is None or session.state is PlaybackState.FINISHED:
            return None
        if session.current_index >= len(session.sequence):
            return None
        return session.sequence[session.current_index]

    def current_index(self) -> int:
        return self._session.current_index if self._session is not None else 0

    def current_speed(self) -> Optional[float]:
        """Words per minute of the current word, or None when idle."""
        session = self._session
        if session is None:
            return None
        return self._speed_at(session.current_index)

    def time_remaining(self) -> float:
        """Milliseconds left for the current word (0 when idle)."""
        return self._session.time_remaining_ms if self._session is not None else 0.0

    def is_finished(self) -> bool:
        return self.current_state() is PlaybackState.FINISHED

    def progress(self) -> float:
        """Fraction of the text already passed, from 0.0 to 1.0."""
        session = self._session
        if session is None or session.sequence.is_empty:
            return 0.0
        return session.current_index / len(session.sequence)

    def snapshot(self) -> Frame:
        """Build the renderable view of the current state."""
        session = self._session
        word = self.current_word()
        before, focus, after = word.parts() if word is not None else ("", "", "")
        return Frame(
            state=self.current_state(),
            before=before,
            focus=focus,
            after=after,
            index=self.current_index(),
            total=len(session.sequence) if session is not None else 0,
            speed_wpm=self.current_speed(),
            progress=self.progress(),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _speed_at(self, index: int) -> float:
        session = self._session
        assert session is not None
        return speed_at(index, session.config, session.override_wpm)

    def _duration_at(self, index: int) -> float:
        session = self._session
        assert session is not None
        return duration_for(
            index,
            session.config,
            session.override_wpm,
            word=session.sequence[index],
        )
