'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from typing import Callable, Optional
import wx

from core.log import Log

__all__ = ["Clipboard", "ClipboardWatcher", "CLIPBOARD_POLL_MS"]

CLIPBOARD_POLL_MS = 1000

class Clipboard:
    """
    Text clipboard operations with cross-platform compatibility.
    """

    @staticmethod
    def copy_text(text: str) -> bool:
        """Copy text to clipboard with Mac compatibility improvements."""
        if not text:
            raise ValueError("Cannot copy empty text")

        if not wx.TheClipboard.Open():
            raise RuntimeError("Could not open clipboard")

        try:
            data = wx.TextDataObject(text)
            success = wx.TheClipboard.SetData(data)
            if success:
                wx.TheClipboard.Flush()  # Critical for Mac compatibility
            return success
        finally:
            wx.TheClipboard.Close()

    @staticmethod
    def get_text() -> Optional[str]:
        """Get text from clipboard if available."""
        if not wx.TheClipboard.Open():
            raise RuntimeError("Could not open clipboard")

        try:
            if wx.TheClipboard.IsSupported(wx.DataFormat(wx.DF_UNICODETEXT)):
                data = wx.TextDataObject()
                success = wx.TheClipboard.GetData(data)
                if success:
                    return data.GetText()
            return None
        finally:
            wx.TheClipboard.Close()

class ClipboardWatcher:
    """
    Polls the clipboard once a second and reports new text to on_change.
    The first poll only primes the last-seen value.
    """

    def __init__(self, owner: wx.EvtHandler, on_change: Callable[[str], None],
                 interval_ms: int = CLIPBOARD_POLL_MS):
        self._on_change = on_change
        self._interval_ms = interval_ms
        self._last: Optional[str] = None
        self._primed = False
        self._timer = wx.Timer(owner)
        owner.Bind(wx.EVT_TIMER, self._on_timer, self._timer)

    def start(self):
        self._timer.Start(self._interval_ms)

    def stop(self):
        if self._timer.IsRunning():
            self._timer.Stop()

    def _on_timer(self, _evt):
        try:
            text = Clipboard.get_text()
        except RuntimeError:
            # Another application holds the clipboard; try again next tick.
            return
        if not self._primed:
            self._last, self._primed = text, True
            return
        if text and text != self._last:
            self._last = text
            Log.debug(f"Clipboard changed ({len(text)} chars)", 2)
            self._on_change(text)
