"""Unit tests for configuration loading.

WHY: Speed settings come from three places — built-in defaults, the
environment (.env), and command-line flags. A wrong precedence order or
a silently ignored typo in an env var changes reading speed without the
user noticing.

HOW: Tests exercise the env parsing helpers with monkeypatch.setenv and
load_speed_config() with SPEEDER_* variables set through monkeypatch and
explicit overrides.

RULES:
- Environment changes go through monkeypatch so they never leak
"""

import pytest

from speeder import config
from speeder.core.errors import InvalidSpeed

_SPEED_VARIABLES = (
    "SPEEDER_TARGET_WPM",
    "SPEEDER_START_RATIO",
    "SPEEDER_WARMUP_WORDS",
    "SPEEDER_SPEED_STEP",
    "SPEEDER_MIN_WPM",
    "SPEEDER_MAX_WPM",
    "SPEEDER_WORD_PACING",
)


class TestEnvParsing:
    """SPEEDER_* variables are parsed strictly."""

    def test_float_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("SPEEDER_TEST_VALUE", raising=False)
        assert config._env_float("SPEEDER_TEST_VALUE", 1.5) == 1.5

    def test_float_parsed(self, monkeypatch):
        monkeypatch.setenv("SPEEDER_TEST_VALUE", " 512.5 ")
        assert config._env_float("SPEEDER_TEST_VALUE", 1.0) == 512.5

    def test_malformed_float_names_variable(self, monkeypatch):
        monkeypatch.setenv("SPEEDER_TEST_VALUE", "fast")
        with pytest.raises(ValueError, match="SPEEDER_TEST_VALUE"):
            config._env_float("SPEEDER_TEST_VALUE", 1.0)

    def test_int_parsed(self, monkeypatch):
        monkeypatch.setenv("SPEEDER_TEST_VALUE", "12")
        assert config._env_int("SPEEDER_TEST_VALUE", 0) == 12

    def test_malformed_int(self, monkeypatch):
        monkeypatch.setenv("SPEEDER_TEST_VALUE", "1.5")
        with pytest.raises(ValueError, match="SPEEDER_TEST_VALUE"):
            config._env_int("SPEEDER_TEST_VALUE", 0)

    @pytest.mark.parametrize("raw, expected", [
        ("true", True), ("YES", True), ("1", True), ("on", True),
        ("false", False), ("No", False), ("0", False), ("off", False),
    ])
    def test_bool_values(self, monkeypatch, raw, expected):
        monkeypatch.setenv("SPEEDER_TEST_VALUE", raw)
        assert config._env_bool("SPEEDER_TEST_VALUE", not expected) is expected

    def test_malformed_bool(self, monkeypatch):
        monkeypatch.setenv("SPEEDER_TEST_VALUE", "maybe")
        with pytest.raises(ValueError, match="SPEEDER_TEST_VALUE"):
            config._env_bool("SPEEDER_TEST_VALUE", False)


class TestLoadSpeedConfig:
    """load_speed_config merges defaults with explicit overrides."""

    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for name in _SPEED_VARIABLES:
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        cfg = config.load_speed_config()
        assert cfg.target_wpm == 400
        assert cfg.start_wpm == pytest.approx(300)
        assert cfg.warmup_word_count == 10
        assert cfg.word_pacing is False

    def test_overrides_win(self):
        cfg = config.load_speed_config(target_wpm=550, warmup_word_count=0, word_pacing=True)
        assert cfg.target_wpm == 550
        assert cfg.warmup_word_count == 0
        assert cfg.word_pacing is True

    def test_none_overrides_ignored(self):
        cfg = config.load_speed_config(target_wpm=None, start_ratio=None)
        assert cfg.target_wpm == 400
        assert cfg.start_ratio == 0.75

    def test_env_default_used(self, monkeypatch):
        monkeypatch.setenv("SPEEDER_TARGET_WPM", "250")
        monkeypatch.setenv("SPEEDER_WORD_PACING", "yes")
        cfg = config.load_speed_config()
        assert cfg.target_wpm == 250
        assert cfg.word_pacing is True

    def test_override_beats_env(self, monkeypatch):
        monkeypatch.setenv("SPEEDER_TARGET_WPM", "250")
        assert config.load_speed_config(target_wpm=500).target_wpm == 500

    def test_malformed_env_raises_on_load_not_import(self, monkeypatch):
        monkeypatch.setenv("SPEEDER_TARGET_WPM", "fast")
        with pytest.raises(ValueError, match="SPEEDER_TARGET_WPM"):
            config.load_speed_config()

    def test_invalid_speed_rejected(self):
        with pytest.raises(InvalidSpeed):
            config.load_speed_config(target_wpm=0)

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            config.load_speed_config(colour="red")


class TestLogLevel:
    """log_level() normalizes known names and rejects the rest."""

    def test_case_insensitive(self):
        assert config.log_level(" debug ") == "DEBUG"

    @pytest.mark.parametrize("name", config.LOG_LEVELS)
    def test_known_levels(self, name):
        assert config.log_level(name) == name

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match="VERBOSE"):
            config.log_level("VERBOSE")
