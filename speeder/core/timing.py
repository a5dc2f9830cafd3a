"""Speed model: words-per-minute and display duration per position.

WHY: Playback, navigation, and speed changes all need the display
duration of the word at some position. Keeping that a pure function of
(position, config, override) means jumping to any word reproduces the
exact duration sequential playback would have used there.

HOW: Speed ramps linearly from target_wpm * start_ratio at position 0 to
target_wpm at position warmup_word_count, then stays at target_wpm. A
user override replaces the ramp. Duration is 60000 / wpm milliseconds,
optionally stretched for long words and punctuation.

RULES:
- override_wpm set → ramp bypassed, override used for every position
- warmup_word_count == 0 → target_wpm from position 0
- speed(p) = start + (target - start) * p / warmup for p < warmup
- duration_ms = 60000 / speed_wpm; speed must be > 0 (InvalidSpeed)
- Pacing factor applied only when config.word_pacing and a word is given
- No hidden state: identical arguments give identical results
"""

from __future__ import annotations

import math
from typing import Optional

from speeder.core.errors import InvalidSpeed
from speeder.core.models import SpeedConfig, Word

MS_PER_MINUTE = 60000.0

# Pacing factors for word_pacing mode.
_LENGTH_STEP = 0.03
_LENGTH_PIVOT = 5
_MIN_LENGTH_FACTOR = 0.8
_MAJOR_PAUSE_CHARS = frozenset(".!?;")
_MAJOR_PAUSE_FACTOR = 1.4
_MINOR_PAUSE_FACTOR = 1.15


def validate_wpm(value: float) -> float:
    """Return ``value`` as a float if it is a usable speed.

    Raises:
        InvalidSpeed: If the value is zero, negative, NaN, or infinite.
    """
    try:
        wpm = float(value)
    except (TypeError, ValueError):
        raise InvalidSpeed("Speed must be a number, got {!r}".format(value)) from None
    if not math.isfinite(wpm) or wpm <= 0:
        raise InvalidSpeed("Speed must be a positive number of WPM, got {!r}".format(value))
    return wpm


def speed_at(
    position: int,
    config: SpeedConfig,
    override_wpm: Optional[float] = None,
) -> float:
    """Return the words-per-minute speed for the word at ``position``."""
    if override_wpm is not None:
        return validate_wpm(override_wpm)

    warmup = config.warmup_word_count
    position = max(position, 0)
    if warmup == 0 or position >= warmup:
        return config.target_wpm

    start = config.start_wpm
    return start + (config.target_wpm - start) * position / warmup


def pacing_factor(text: str) -> float:
    """Display-time multiplier for a word's length and punctuation.

    Longer words get 3% more time per character beyond five (never less
    than 80% for short words). Sentence-level punctuation adds 40%, a
    comma adds 15%.
    """
    length_factor = max(_MIN_LENGTH_FACTOR, 1.0 + (len(text) - _LENGTH_PIVOT) * _LENGTH_STEP)

    if any(ch in _MAJOR_PAUSE_CHARS for ch in text):
        punctuation_factor = _MAJOR_PAUSE_FACTOR
    elif "," in text:
        punctuation_factor = _MINOR_PAUSE_FACTOR
    else:
        punctuation_factor = 1.0

    return length_factor * punctuation_factor


def duration_for(
    position: int,
    config: SpeedConfig,
    override_wpm: Optional[float] = None,
    word: Optional[Word] = None,
) -> float:
    """Return the display duration in milliseconds for the word at ``position``.

    Args:
        position: 0-based index of the word in its sequence.
        config: Session speed settings.
        override_wpm: User-selected speed that replaces the ramp.
        word: The word itself; only consulted when config.word_pacing.

    Raises:
        InvalidSpeed: If the effective speed is not positive.
    """
    wpm = validate_wpm(speed_at(position, config, override_wpm))
    duration_ms = MS_PER_MINUTE / wpm
    if config.word_pacing and word is not None:
        duration_ms *= pacing_factor(word.text)
    return duration_ms
