"""Stable fingerprints for source texts.

WHY: The same text copied twice rarely matches byte for byte — trailing
newlines and re-wrapped lines differ. Keying position memory on the raw
string would forget positions for texts the reader sees as identical.

HOW: Collapse every whitespace run to a single space and strip the ends,
then hash the UTF-8 bytes with SHA-256.

RULES:
- Texts differing only in whitespace share a fingerprint
- Output is a 64-character lowercase hex string
"""

from __future__ import annotations

import hashlib


def normalize_text(text: str) -> str:
    """Collapse whitespace runs to single spaces and strip the ends."""
    return " ".join(text.split())


def text_fingerprint(text: str) -> str:
    """Return the SHA-256 hex digest of the normalized text."""
    return hashlib.sha256(normalize_text(text).encode("utf-8")).hexdigest()
