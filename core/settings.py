from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict

__all__ = [
    "TERMINAL",
    "EDITOR",
    "LOCKED",
    "EXECUTION_MODES",
    "DEFAULT_HISTORY_LIMIT",
    "Settings",
    "next_execution_mode",
]

TERMINAL = "terminal"
EDITOR = "editor"
LOCKED = "locked"
EXECUTION_MODES = (TERMINAL, EDITOR, LOCKED)

DEFAULT_HISTORY_LIMIT = 20

# attribute name -> key in the settings JSON
_WIRE_KEYS = {
    "execution_mode": "executionMode",
    "confirm_delete": "confirmDelete",
    "enable_rich_tooltips": "enableRichTooltips",
    "command_history_limit": "commandHistoryLimit",
    "clipboard_history_limit": "clipboardHistoryLimit",
}


def next_execution_mode(mode: str) -> str:
    """terminal -> editor -> locked -> terminal"""
    idx = EXECUTION_MODES.index(mode) if mode in EXECUTION_MODES else 0
    return EXECUTION_MODES[(idx + 1) % len(EXECUTION_MODES)]


def _limit(value: Any) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return DEFAULT_HISTORY_LIMIT
    return n if n > 0 else DEFAULT_HISTORY_LIMIT


@dataclass
class Settings:
    execution_mode: str = TERMINAL
    confirm_delete: bool = False
    enable_rich_tooltips: bool = True
    command_history_limit: int = DEFAULT_HISTORY_LIMIT
    clipboard_history_limit: int = DEFAULT_HISTORY_LIMIT
    # Keys written by other front ends (reload button, GitHub user, ...) kept verbatim.
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.execution_mode not in EXECUTION_MODES:
            self.execution_mode = TERMINAL
        self.confirm_delete = bool(self.confirm_delete)
        self.enable_rich_tooltips = bool(self.enable_rich_tooltips)
        self.command_history_limit = _limit(self.command_history_limit)
        self.clipboard_history_limit = _limit(self.clipboard_history_limit)

    @property
    def locked(self) -> bool:
        return self.execution_mode == LOCKED

    def updated(self, **changes) -> "Settings":
        """A validated copy with the given attributes replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        for attr, key in _WIRE_KEYS.items():
            data[key] = getattr(self, attr)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "Settings":
        data = dict(data or {})
        # Stored outside the config file; never round-trip it through here.
        data.pop("configFilePath", None)
        kwargs = {}
        for attr, key in _WIRE_KEYS.items():
            if key in data:
                kwargs[attr] = data.pop(key)
        return cls(extra=data, **kwargs)
