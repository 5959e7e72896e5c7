from __future__ import annotations

import re
from typing import Callable, Dict, List

__all__ = [
    "TOKEN_RE",
    "make_icon_token",
    "extract_icon_names",
    "map_icon_tokens",
    "render_icon_tokens",
    "strip_icon_tokens",
]

# Inline token, any number per name:
#   $(icon-name)
TOKEN_RE = re.compile(r"\$\(([^)\r\n]+)\)")

# Glyphs for the icon names people actually use in snippet names.
GLYPHS: Dict[str, str] = {
    "terminal": "⌨",
    "rocket": "\U0001F680",
    "git-branch": "⎇",
    "git-commit": "◉",
    "gear": "⚙",
    "settings-gear": "⚙",
    "folder": "\U0001F4C1",
    "file": "\U0001F4C4",
    "play": "▶",
    "debug-start": "▶",
    "trash": "\U0001F5D1",
    "star": "★",
    "star-full": "★",
    "heart": "♥",
    "check": "✓",
    "close": "✕",
    "warning": "⚠",
    "info": "ℹ",
    "cloud": "☁",
    "package": "\U0001F4E6",
    "database": "\U0001F5C4",
    "search": "\U0001F50D",
    "home": "\U0001F3E0",
    "zap": "⚡",
    "bug": "\U0001F41E",
    "key": "\U0001F511",
    "lock": "\U0001F512",
}


def make_icon_token(name: str) -> str:
    """Build a token for an icon name. Rejects ')' and newlines."""
    if ")" in name or "\n" in name or "\r" in name or not name:
        raise ValueError("icon name may not be empty or contain ')' or newlines")
    return f"$({name})"


def extract_icon_names(text: str) -> List[str]:
    """Return every icon name referenced in `text`, in order."""
    if not text:
        return []
    return [m.group(1) for m in TOKEN_RE.finditer(text)]


def map_icon_tokens(text: str, mapper: Callable[[str], str]) -> str:
    """Replace each whole token by mapper(name)."""
    if not text:
        return ""
    return TOKEN_RE.sub(lambda m: mapper(m.group(1)), text)


def render_icon_tokens(text: str) -> str:
    """Known icons become glyphs, unknown ones disappear."""
    return " ".join(map_icon_tokens(text, lambda name: GLYPHS.get(name, "")).split())


def strip_icon_tokens(text: str) -> str:
    """Plain label with all tokens removed."""
    return " ".join(map_icon_tokens(text, lambda name: "").split())
