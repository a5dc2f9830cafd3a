"""Value types shared by the tokenizer, timing model, and playback engine.

WHY: The renderer, the state machine, and the position store all talk
about the same things — a word with its focus letter, the ordered words
of one text, and the speed settings of a session. Defining them once,
as immutable values, lets them be shared without copying or locking.

HOW: Three frozen dataclasses:
  Word         — one display word with its precomputed ORP index
  WordSequence — the ordered words of one source text plus its fingerprint
  SpeedConfig  — target speed, warm-up ramp, and step/bounds settings

RULES:
- Word.text is never empty; before + focus + after == text
- WordSequence is built once per text and never mutated
- SpeedConfig validates itself on construction (InvalidSpeed / ValueError)
- Speeds are words per minute, as floats
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from speeder.core.errors import InvalidSpeed, InvalidWord
from speeder.core.orp import orp_index

logger = logging.getLogger(__name__)

DEFAULT_TARGET_WPM = 400.0
DEFAULT_START_RATIO = 0.75
DEFAULT_WARMUP_WORDS = 10
DEFAULT_MIN_WPM = 100.0
DEFAULT_MAX_WPM = 1200.0
DEFAULT_SPEED_STEP = 25.0
DEFAULT_WORD_PACING = False


@dataclass(frozen=True)
class Word:
    """A single display word and the index of its focus character.

    WHY: The ORP of a word never changes, so it is computed once when
    the word is built instead of on every rendered frame.

    RULES:
    - text: non-empty, no surrounding whitespace
    - orp_index: 0 <= orp_index < len(text)
    """

    text: str
    orp_index: int

    def __post_init__(self) -> None:
        if not self.text:
            raise InvalidWord("Word text must not be empty")
        if not 0 <= self.orp_index < len(self.text):
            raise InvalidWord(
                "ORP index {} out of range for {!r}".format(self.orp_index, self.text)
            )

    @classmethod
    def from_text(cls, text: str) -> Word:
        """Build a Word, computing its ORP index from the text length."""
        return cls(text=text, orp_index=orp_index(len(text)))

    @property
    def before(self) -> str:
        return self.text[:self.orp_index]

    @property
    def focus(self) -> str:
        return self.text[self.orp_index]

    @property
    def after(self) -> str:
        return self.text[self.orp_index + 1:]

    def parts(self) -> Tuple[str, str, str]:
        """Return (before, focus, after) for rendering."""
        return self.before, self.focus, self.after


@dataclass(frozen=True)
class WordSequence:
    """The ordered display words of one source text.

    WHY: A session needs random access to words (for navigation) and a
    stable key for position memory. Both belong to the text, not to the
    session, so they live here.

    HOW: Words are stored as a tuple. The fingerprint is supplied by the
    caller; the engine never hashes text itself.

    RULES:
    - May be empty (blank input); the engine treats that as finished
    - fingerprint is None when the caller does not want position memory
    """

    words: Tuple[Word, ...] = ()
    fingerprint: Optional[str] = None

    @classmethod
    def from_texts(
        cls,
        texts: Iterable[str],
        fingerprint: Optional[str] = None,
    ) -> WordSequence:
        """Build a sequence from already-split tokens.

        Empty tokens cannot be displayed. They are logged and skipped
        instead of aborting the whole text.
        """
        words: List[Word] = []
        for position, text in enumerate(texts):
            try:
                words.append(Word.from_text(text))
            except InvalidWord:
                logger.warning("Skipping invalid word at token %d: %r", position, text)
        return cls(words=tuple(words), fingerprint=fingerprint)

    def __len__(self) -> int:
        return len(self.words)

    def __getitem__(self, index: int) -> Word:
        return self.words[index]

    def __iter__(self) -> Iterator[Word]:
        return iter(self.words)

    @property
    def is_empty(self) -> bool:
        return not self.words


def _check_wpm(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise InvalidSpeed("{} must be a positive number, got {!r}".format(name, value))


@dataclass(frozen=True)
class SpeedConfig:
    """Speed settings for one reading session.

    WHY: Starting at full speed makes the first words of a text hard to
    catch. The warm-up ramp starts slower and reaches the target after a
    configured number of words.

    HOW: Effective start speed is target_wpm * start_ratio. With
    warmup_word_count == 0 the ramp is skipped entirely.

    RULES:
    - target_wpm > 0 (InvalidSpeed otherwise)
    - 0 < start_ratio <= 1 (ValueError otherwise)
    - warmup_word_count >= 0 (ValueError otherwise)
    - speed_override, when set, replaces the ramp from the first word
    - min_wpm/max_wpm bound step adjustments; speed_step is one key press
    - word_pacing enables length/punctuation pacing (off by default)
    """

    target_wpm: float = DEFAULT_TARGET_WPM
    start_ratio: float = DEFAULT_START_RATIO
    warmup_word_count: int = DEFAULT_WARMUP_WORDS
    speed_override: Optional[float] = None
    min_wpm: float = DEFAULT_MIN_WPM
    max_wpm: float = DEFAULT_MAX_WPM
    speed_step: float = DEFAULT_SPEED_STEP
    word_pacing: bool = DEFAULT_WORD_PACING

    def __post_init__(self) -> None:
        _check_wpm("target_wpm", self.target_wpm)
        if self.speed_override is not None:
            _check_wpm("speed_override", self.speed_override)
        _check_wpm("min_wpm", self.min_wpm)
        _check_wpm("max_wpm", self.max_wpm)

        if not (0 < self.start_ratio <= 1):
            raise ValueError(
                "start_ratio must be in (0, 1], got {!r}".format(self.start_ratio)
            )
        if self.warmup_word_count < 0:
            raise ValueError(
                "warmup_word_count must be >= 0, got {!r}".format(self.warmup_word_count)
            )
        if self.min_wpm > self.max_wpm:
            raise ValueError(
                "min_wpm ({}) must not exceed max_wpm ({})".format(self.min_wpm, self.max_wpm)
            )
        if self.speed_step <= 0:
            raise ValueError("speed_step must be positive, got {!r}".format(self.speed_step))

    @property
    def start_wpm(self) -> float:
        """Speed of the first word when the ramp is active."""
        return self.target_wpm * self.start_ratio
