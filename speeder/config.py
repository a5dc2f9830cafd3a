"""Configuration defaults and .env loading.

WHY: Reading speed, warm-up length, and where positions are stored are
personal settings. Keeping them in one place, overridable from the
environment, means neither the engine nor the CLI hardcodes them.

HOW: python-dotenv loads the .env file on import. load_speed_config()
reads the SPEEDER_* speed variables when called, falls back to the
SpeedConfig defaults, and lets explicit keyword overrides win. Reading
them at call time keeps a malformed value from breaking the import.

RULES:
- All defaults can be overridden via SPEEDER_* environment variables
- Malformed numbers raise ValueError naming the variable
- Booleans accept true/false, yes/no, 1/0 (case-insensitive)
- Invalid speeds surface as InvalidSpeed from SpeedConfig itself
- Log levels are validated by log_level(), not at import
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from speeder.core.models import (
    DEFAULT_MAX_WPM,
    DEFAULT_MIN_WPM,
    DEFAULT_SPEED_STEP,
    DEFAULT_START_RATIO,
    DEFAULT_TARGET_WPM,
    DEFAULT_WARMUP_WORDS,
    DEFAULT_WORD_PACING,
    SpeedConfig,
)

# Load .env from the project root (where the script is run from)
load_dotenv()

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError("{} must be a number, got {!r}".format(name, raw)) from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError("{} must be an integer, got {!r}".format(name, raw)) from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError("{} must be true or false, got {!r}".format(name, raw))


# ---------------------------------------------------------------------------
# Storage and logging
# ---------------------------------------------------------------------------

DEFAULT_MEMORY_FILE = Path(
    os.getenv("SPEEDER_MEMORY_FILE", "~/.config/speeder/positions.json")
).expanduser()
DEFAULT_LOG_LEVEL = os.getenv("SPEEDER_LOG_LEVEL", "WARNING").strip().upper()


def log_level(value: str) -> str:
    """Normalize a log level name, rejecting unknown ones.

    Raises:
        ValueError: If ``value`` is not one of LOG_LEVELS.
    """
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(
            "log level must be one of {}, got {!r}".format(", ".join(LOG_LEVELS), value)
        )
    return level


def load_speed_config(**overrides: Any) -> SpeedConfig:
    """Build the SpeedConfig for a new session.

    WHY: The CLI (and any other front end) needs one call that merges the
    environment defaults with per-run options such as ``--wpm``.

    HOW: Reads the SPEEDER_* speed variables (falling back to the
    SpeedConfig defaults), replaces any keyword whose value is not None,
    and lets SpeedConfig validate the result.

    RULES:
    - Keys are SpeedConfig field names
    - None values are ignored, so argparse defaults can be passed through
    - Unknown keys raise TypeError (from the dataclass constructor)

    Raises:
        InvalidSpeed: If a speed is not positive.
        ValueError: If an env variable is malformed or a field is out of range.
    """
    values = {
        "target_wpm": _env_float("SPEEDER_TARGET_WPM", DEFAULT_TARGET_WPM),
        "start_ratio": _env_float("SPEEDER_START_RATIO", DEFAULT_START_RATIO),
        "warmup_word_count": _env_int("SPEEDER_WARMUP_WORDS", DEFAULT_WARMUP_WORDS),
        "speed_step": _env_float("SPEEDER_SPEED_STEP", DEFAULT_SPEED_STEP),
        "min_wpm": _env_float("SPEEDER_MIN_WPM", DEFAULT_MIN_WPM),
        "max_wpm": _env_float("SPEEDER_MAX_WPM", DEFAULT_MAX_WPM),
        "word_pacing": _env_bool("SPEEDER_WORD_PACING", DEFAULT_WORD_PACING),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return SpeedConfig(**values)
