"""Exception types raised by the presentation engine.

RULES:
- Every engine error derives from SpeederError
- InvalidWord and InvalidSpeed are also ValueErrors, so callers that
  already catch ValueError for bad input keep working
"""

from __future__ import annotations


class SpeederError(Exception):
    """Base class for all engine errors."""


class InvalidWord(SpeederError, ValueError):
    """An empty token reached ORP calculation."""


class InvalidSpeed(SpeederError, ValueError):
    """A non-positive (or non-finite) words-per-minute value was requested."""
