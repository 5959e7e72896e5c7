from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import wx

Pathish = Union[str, Path]

__all__ = ["CONFIG_WILDCARD", "choose_config_file", "choose_save_file", "choose_log_file"]

CONFIG_WILDCARD = "Snippet library (*.json)|*.json|All files (*.*)|*.*"


def _dialog_path(
    parent: wx.Window | None,
    message: str,
    style: int,
    wildcard: str,
    default_path: Pathish | None,
    default_file: str,
) -> Optional[str]:
    default_dir = ""
    if default_path:
        p = Path(default_path).expanduser()
        default_dir = str(p.parent)
        default_file = p.name or default_file
    with wx.FileDialog(
        parent,
        message=message,
        wildcard=wildcard,
        style=style,
        defaultDir=default_dir,
        defaultFile=default_file,
    ) as dlg:
        if dlg.ShowModal() != wx.ID_OK:
            return None
        return str(Path(dlg.GetPath()).resolve())


def choose_config_file(
    parent: wx.Window | None,
    *,
    must_exist: bool = False,
    default_path: Pathish | None = None,
    message: str = "",
) -> Optional[str]:
    """
    Pick a library JSON file. With must_exist the file has to be there
    (import); otherwise a new file may be named (config file selection).
    Returns an absolute path, or None on cancel.
    """
    if must_exist:
        style = wx.FD_OPEN | wx.FD_FILE_MUST_EXIST
        message = message or "Import snippets…"
    else:
        style = wx.FD_SAVE
        message = message or "Choose config file…"
    return _dialog_path(parent, message, style, CONFIG_WILDCARD, default_path, "snippets.json")


def choose_save_file(
    parent: wx.Window | None,
    *,
    default_path: Pathish | None = None,
) -> Optional[str]:
    """Export target; asks before overwriting."""
    style = wx.FD_SAVE | wx.FD_OVERWRITE_PROMPT
    return _dialog_path(parent, "Export snippets…", style, CONFIG_WILDCARD,
                        default_path, "snippets.json")


def choose_log_file(parent: wx.Window | None) -> Optional[str]:
    style = wx.FD_SAVE | wx.FD_OVERWRITE_PROMPT
    return _dialog_path(parent, "Write log…", style, "Log files (*.log)|*.log|All files (*.*)|*.*",
                        None, "snippad.log")
