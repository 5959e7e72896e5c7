from __future__ import annotations

import threading
from typing import Dict, Iterable, List

from core.log import Log
from core.settings import DEFAULT_HISTORY_LIMIT

__all__ = ["COMMAND", "CLIPBOARD", "HISTORY_KINDS", "push_recent", "CommandHistory"]

COMMAND = "command"
CLIPBOARD = "clipboard"
HISTORY_KINDS = (COMMAND, CLIPBOARD)

# kind -> key in the host state file
_STATE_KEYS = {COMMAND: "commandHistory", CLIPBOARD: "clipboardHistory"}


def push_recent(entries: List[str], value: str, limit: int) -> List[str]:
    """
    Most-recent-first list with value at the front: an existing copy is
    moved rather than duplicated, and the list is cut to `limit`.
    """
    out = [value] + [e for e in entries if e != value]
    return out[:max(1, int(limit))]


class CommandHistory:
    """Bounded command and clipboard histories."""

    def __init__(self, command: Iterable[str] = (), clipboard: Iterable[str] = ()):
        self._lock = threading.Lock()
        self._entries: Dict[str, List[str]] = {
            COMMAND: [str(e) for e in command],
            CLIPBOARD: [str(e) for e in clipboard],
        }

    def record(self, kind: str, value: str, limit: int = DEFAULT_HISTORY_LIMIT) -> bool:
        """Returns True if the history changed. Empty values are ignored."""
        if kind not in HISTORY_KINDS:
            raise ValueError(f"Unknown history kind: {kind!r}")
        if not value:
            return False
        with self._lock:
            before = self._entries[kind]
            after = push_recent(before, value, limit)
            if after == before:
                return False
            self._entries[kind] = after
        Log.debug(f"History {kind}: recorded {len(value)} chars, size={len(after)}", 2)
        return True

    def entries(self, kind: str) -> List[str]:
        with self._lock:
            return list(self._entries[kind])

    def trim(self, kind: str, limit: int) -> None:
        """Apply a lowered limit right away."""
        with self._lock:
            self._entries[kind] = self._entries[kind][:max(1, int(limit))]

    def clear(self, kind: str) -> None:
        with self._lock:
            self._entries[kind] = []

    def to_dict(self) -> Dict[str, List[str]]:
        with self._lock:
            return {_STATE_KEYS[k]: list(v) for k, v in self._entries.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, List[str]] | None) -> "CommandHistory":
        data = data or {}
        return cls(
            command=data.get(_STATE_KEYS[COMMAND]) or [],
            clipboard=data.get(_STATE_KEYS[CLIPBOARD]) or [],
        )
