"""Shared test fixtures for the speeder test suite.

WHY: Tokenizer, engine, and memory tests all read the same sample text.
Centralizing it keeps word counts and indices consistent across modules.

HOW: Pytest fixtures provide the sample text, its words, its tokenized
sequence (with a fixed fingerprint), and an engine backed by an
in-memory position store.

RULES:
- The sample text has 23 words and no standalone punctuation
- The sample fingerprint is the literal "sample-fingerprint"
"""

from typing import List

import pytest

from speeder.core.engine import ReadingEngine
from speeder.core.models import WordSequence
from speeder.core.tokenizer import tokenize
from speeder.memory.store import InMemoryPositionStore

SAMPLE_TEXT = (
    "This is a test of the Rapid Serial Visual Presentation system. "
    "It displays words one at a time with an optimal recognition point."
)

SAMPLE_FINGERPRINT = "sample-fingerprint"


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def sample_fingerprint() -> str:
    return SAMPLE_FINGERPRINT


@pytest.fixture
def sample_words() -> List[str]:
    return SAMPLE_TEXT.split()


@pytest.fixture
def sample_sequence() -> WordSequence:
    return tokenize(SAMPLE_TEXT, fingerprint=SAMPLE_FINGERPRINT)


@pytest.fixture
def memory() -> InMemoryPositionStore:
    return InMemoryPositionStore()


@pytest.fixture
def engine(memory) -> ReadingEngine:
    return ReadingEngine(memory=memory)
