"""Position memory stores: text fingerprint → last read word index.

WHY: The engine persists the reading position when a session stops and
looks it up when the same text is opened again. It must not care where
positions live, so it depends only on a two-method protocol.

HOW: Three pieces:
  PositionMemory        — the get/set protocol the engine consumes
  InMemoryPositionStore — lock-guarded dict, optionally size-capped
  JsonPositionStore     — same semantics, persisted to a JSON file whose
                          layout is validated by pydantic models

RULES:
- Last write for a fingerprint wins
- get() returns None for unknown fingerprints (no exceptions)
- Negative indices are rejected with ValueError
- When max_entries is set, the least recently written entry is evicted
- A missing or corrupt JSON file is an empty store, never an error
- JSON writes are best-effort: failures are logged, not raised
"""

from __future__ import annotations

import logging
import os
import threading
import time
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

# Default cap for the on-disk store.
DEFAULT_MAX_ENTRIES = 200

POSITION_FILE_VERSION = 1


class PositionMemory(Protocol):
    """The narrow contract the engine uses to remember positions."""

    def get(self, fingerprint: str) -> Optional[int]:
        ...

    def set(self, fingerprint: str, index: int) -> None:
        ...


def _check_index(index: int) -> int:
    if index < 0:
        raise ValueError("Position index must be >= 0, got {}".format(index))
    return int(index)


class InMemoryPositionStore:
    """Dict-backed position store for a single process.

    WHY: Tests and callers without persistence (a single app run that
    only needs "same text as last time") need the get/set contract
    without touching disk.

    HOW: Entries live in a dict whose insertion order doubles as write
    order, so eviction pops the first key. A threading.Lock guards every
    access because the UI and the playback loop may share the store.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1, got {}".format(max_entries))
        self._entries: Dict[str, int] = {}
        self._lock = threading.Lock()
        self.max_entries = max_entries

    def get(self, fingerprint: str) -> Optional[int]:
        with self._lock:
            return self._entries.get(fingerprint)

    def set(self, fingerprint: str, index: int) -> None:
        index = _check_index(index)
        with self._lock:
            # Re-insert so the entry moves to the most recent position.
            self._entries.pop(fingerprint, None)
            self._entries[fingerprint] = index
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    oldest = next(iter(self._entries))
                    del self._entries[oldest]

    def delete(self, fingerprint: str) -> bool:
        """Forget a fingerprint. Returns True if it was stored."""
        with self._lock:
            return self._entries.pop(fingerprint, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# ---------------------------------------------------------------------------
# On-disk format
# ---------------------------------------------------------------------------


class PositionEntry(BaseModel):
    """One remembered position in the JSON file."""

    index: int = Field(ge=0, description="Index of the word the reader stopped at.")
    updated_at: float = Field(description="Epoch seconds of the last write.")


class PositionFile(BaseModel):
    """Top-level layout of the positions JSON file.

    RULES:
    - version is bumped on incompatible layout changes
    - entries maps text fingerprint → PositionEntry
    """

    version: int = Field(default=POSITION_FILE_VERSION, description="File layout version.")
    entries: Dict[str, PositionEntry] = Field(
        default_factory=dict,
        description="Remembered positions keyed by text fingerprint.",
    )


class JsonPositionStore:
    """Position store persisted to a JSON file.

    WHY: Positions should survive restarts of the reader. A small JSON
    file next to the user's other settings is enough; there is one
    writer and at most a few hundred entries.

    HOW: The file is read once on construction into a PositionFile model.
    Every set() updates the model and rewrites the file through a
    temporary file and os.replace, so a crash never leaves half a file.

    RULES:
    - Missing file → empty store; parent directories created on first write
    - Unreadable or invalid file → warning logged, empty store
    - Oldest entries (by updated_at) are evicted beyond max_entries
    """

    def __init__(
        self, path: Union[str, Path], max_entries: int = DEFAULT_MAX_ENTRIES
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1, got {}".format(max_entries))
        self.path = Path(path)
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self._data = self._load()

    def _load(self) -> PositionFile:
        if not self.path.is_file():
            return PositionFile()
        try:
            data = PositionFile.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable position file %s: %s", self.path, exc)
            return PositionFile()
        data.entries = dict(sorted(data.entries.items(), key=lambda item: item[1].updated_at))
        return data

    def _save(self) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(self._data.model_dump_json(indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError:
            logger.warning("Failed to write position file: %s", self.path, exc_info=True)

    def get(self, fingerprint: str) -> Optional[int]:
        with self._lock:
            entry = self._data.entries.get(fingerprint)
            return entry.index if entry is not None else None

    def set(self, fingerprint: str, index: int) -> None:
        index = _check_index(index)
        with self._lock:
            entries = self._data.entries
            # Re-insert so dict order stays oldest-write first.
            entries.pop(fingerprint, None)
            entries[fingerprint] = PositionEntry(index=index, updated_at=time.time())
            while len(entries) > self.max_entries:
                del entries[next(iter(entries))]
            self._save()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data.entries)
