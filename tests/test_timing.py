"""Unit tests for the speed model.

WHY: Display duration drives everything the reader perceives as pace.
The warm-up ramp, the override, and the WPM → milliseconds conversion
must be exact, and identical calls must give identical answers so that
seeking reproduces sequential playback.

HOW: Tests check the documented reference values (0.75 × 400 → 300 WPM
→ 200 ms), ramp endpoints and monotonicity, override precedence,
rejection of non-positive speeds, and the optional pacing factor.
"""

import pytest

from speeder.core.errors import InvalidSpeed
from speeder.core.models import SpeedConfig, Word
from speeder.core.timing import duration_for, pacing_factor, speed_at, validate_wpm


CONFIG = SpeedConfig(target_wpm=400, start_ratio=0.75, warmup_word_count=10)


class TestWarmupRamp:
    """Speed ramps linearly from start to target over the warm-up words."""

    def test_first_word_uses_start_speed(self):
        assert speed_at(0, CONFIG) == pytest.approx(300)
        assert duration_for(0, CONFIG) == pytest.approx(200)

    def test_end_of_warmup_reaches_target(self):
        assert speed_at(10, CONFIG) == pytest.approx(400)
        assert duration_for(10, CONFIG) == pytest.approx(150)

    def test_midpoint(self):
        assert speed_at(5, CONFIG) == pytest.approx(350)

    def test_after_warmup_stays_at_target(self):
        assert speed_at(500, CONFIG) == 400

    def test_monotonic_non_decreasing(self):
        speeds = [speed_at(p, CONFIG) for p in range(0, 11)]
        assert speeds == sorted(speeds)

    def test_zero_warmup_skips_ramp(self):
        config = SpeedConfig(target_wpm=400, start_ratio=0.5, warmup_word_count=0)
        assert speed_at(0, config) == 400
        assert duration_for(0, config) == pytest.approx(150)

    def test_negative_position_treated_as_first_word(self):
        assert speed_at(-3, CONFIG) == speed_at(0, CONFIG)


class TestOverride:
    """A user override bypasses the ramp at every position."""

    def test_override_wins_during_warmup(self):
        assert speed_at(0, CONFIG, override_wpm=600) == 600
        assert duration_for(0, CONFIG, override_wpm=600) == pytest.approx(100)

    def test_override_wins_after_warmup(self):
        assert speed_at(50, CONFIG, override_wpm=250) == 250

    def test_non_positive_override_rejected(self):
        with pytest.raises(InvalidSpeed):
            duration_for(0, CONFIG, override_wpm=0)
        with pytest.raises(InvalidSpeed):
            duration_for(0, CONFIG, override_wpm=-10)


class TestIdempotence:
    """duration_for has no hidden state."""

    def test_repeated_calls_identical(self):
        first = [duration_for(p, CONFIG) for p in range(20)]
        second = [duration_for(p, CONFIG) for p in range(20)]
        assert first == second

    def test_random_access_matches_sequential(self):
        sequential = [duration_for(p, CONFIG) for p in range(15)]
        for position in (14, 3, 9, 0):
            assert duration_for(position, CONFIG) == sequential[position]


class TestValidateWpm:
    """validate_wpm accepts positive finite numbers only."""

    def test_accepts_positive(self):
        assert validate_wpm(250) == 250.0

    @pytest.mark.parametrize("value", [0, -1, float("inf"), float("nan"), "fast", None])
    def test_rejects_unusable(self, value):
        with pytest.raises(InvalidSpeed):
            validate_wpm(value)


class TestWordPacing:
    """Length and punctuation pacing applies only when enabled."""

    def test_plain_five_letter_word_is_neutral(self):
        assert pacing_factor("hello") == pytest.approx(1.0)

    def test_short_word_shortened(self):
        assert pacing_factor("a") == pytest.approx(0.88)

    def test_long_word_stretched(self):
        assert pacing_factor("a" * 15) == pytest.approx(1.3)

    def test_sentence_end_stretched(self):
        assert pacing_factor("hello.") == pytest.approx(1.03 * 1.4)

    def test_comma_stretched(self):
        assert pacing_factor("hello,") == pytest.approx(1.03 * 1.15)

    def test_disabled_by_default(self):
        word = Word.from_text("sentence.")
        assert duration_for(20, CONFIG, word=word) == pytest.approx(150)

    def test_enabled_applies_factor(self):
        config = SpeedConfig(target_wpm=400, warmup_word_count=0, word_pacing=True)
        word = Word.from_text("hello.")
        assert duration_for(0, config, word=word) == pytest.approx(150 * 1.03 * 1.4)

    def test_enabled_without_word_is_plain(self):
        config = SpeedConfig(target_wpm=400, warmup_word_count=0, word_pacing=True)
        assert duration_for(0, config) == pytest.approx(150)
