"""Position memory: remember where each text was left off.

WHY: Readers often stop mid-text and come back to the same text later.
Resuming at the stopped word instead of the first one is the difference
between a usable reader and an annoying one.

HOW: fingerprint.py derives a stable key from the text; store.py keeps
key → last index mappings, in memory or in a JSON file.

RULES:
- The engine only sees the PositionMemory get/set contract
- Fingerprinting and storage format are caller choices, not engine ones
"""

from speeder.memory.fingerprint import normalize_text, text_fingerprint
from speeder.memory.store import InMemoryPositionStore, JsonPositionStore, PositionMemory

__all__ = [
    "InMemoryPositionStore",
    "JsonPositionStore",
    "PositionMemory",
    "normalize_text",
    "text_fingerprint",
]
