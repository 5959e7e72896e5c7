from __future__ import annotations

import os
from pathlib import Path
from typing import Union

Pathish = Union[str, Path]

__all__ = [
    "DEFAULT_STATE_DIR",
    "state_dir",
    "state_json_path",
    "normalize_config_path",
]

DEFAULT_STATE_DIR = "~/.snippad"


def state_dir(override: Pathish | None = None) -> Path:
    """
    Return the directory holding the host key-value state:
      --state-dir argument, else $SNIPPAD_HOME, else ~/.snippad
    Does not create it.
    """
    raw = override or os.environ.get("SNIPPAD_HOME") or DEFAULT_STATE_DIR
    return Path(raw).expanduser().resolve()


def state_json_path(directory: Pathish) -> Path:
    """<state_dir>/state.json"""
    return Path(directory) / "state.json"


def normalize_config_path(pathlike: Pathish | None) -> str:
    """
    Expand ~ and make the config file path absolute.
    Empty input means "no external config file" and returns "".
    """
    if pathlike is None:
        return ""
    text = str(pathlike).strip()
    if not text:
        return ""
    p = Path(text).expanduser()
    if p.suffix == "":
        p = p.with_suffix(".json")
    return str(p.resolve())
