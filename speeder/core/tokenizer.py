"""Text segmentation into display words.

WHY: RSVP shows one whitespace-separated word at a time. Stray
punctuation separated by spaces ("wait — what") would otherwise flash
up as a word of its own and break the reading rhythm.

HOW: Split on whitespace runs. With merge_punctuation enabled, a token
made only of opening brackets or quotes is prefixed to the next word, and
any other punctuation-only token is appended to the preceding word. The result
is handed to WordSequence.from_texts, which computes each word's ORP.

RULES:
- Deterministic and side-effect free
- Blank or whitespace-only input → empty WordSequence
- Non-blank input → at least one word
- A leading closing-punctuation token (nothing to merge into) stays a word
- Opening punctuation with no following word joins the preceding one
- No token is ever empty
"""

from __future__ import annotations

import re
from typing import List, Optional

from speeder.core.models import WordSequence

# Opening brackets and quotes, attached to the word that follows.
_OPENING_RE = re.compile(r"^[(\[{“‘«]+$")

# Any other punctuation-only token, attached to the word before it.
_PUNCTUATION_RE = re.compile(r"^[.,!?;:…—–\-\"'”’»)\]}]+$")


def split_tokens(text: str, merge_punctuation: bool = True) -> List[str]:
    """Split raw text into display tokens.

    Args:
        text: Raw source text.
        merge_punctuation: Attach opening punctuation to the next token
            and other punctuation-only tokens to the preceding one.

    Returns:
        Non-empty token strings in reading order.
    """
    if not merge_punctuation:
        return text.split()

    tokens: List[str] = []
    pending = ""
    for raw in text.split():
        if _OPENING_RE.match(raw):
            pending += raw
        elif not pending and tokens and _PUNCTUATION_RE.match(raw):
            tokens[-1] += raw
        else:
            tokens.append(pending + raw)
            pending = ""

    if pending:
        if tokens:
            tokens[-1] += pending
        else:
            tokens.append(pending)
    return tokens


def tokenize(
    text: str,
    fingerprint: Optional[str] = None,
    merge_punctuation: bool = True,
) -> WordSequence:
    """Build the WordSequence for one source text.

    Args:
        text: Raw source text.
        fingerprint: Stable identifier of the text for position memory,
            computed by the caller. None disables position memory.
        merge_punctuation: Merge punctuation-only tokens into
            neighbouring words (see split_tokens).

    Returns:
        WordSequence with ORP-annotated words (possibly empty).
    """
    return WordSequence.from_texts(
        split_tokens(text, merge_punctuation=merge_punctuation),
        fingerprint=fingerprint,
    )
