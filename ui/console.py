'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import os
import subprocess

import wx

from core.dispatch import SinkError
from core.io_worker import IOWorker
from core.log import Log

__all__ = ["COMMAND_TIMEOUT_S", "run_shell", "ConsolePanel"]

COMMAND_TIMEOUT_S = 600


def run_shell(command: str, cwd: str | None = None) -> tuple[int, str]:
    """Run `command` through the shell; returns (exit code, stdout + stderr)."""
    result = subprocess.run(
        command, shell=True, cwd=cwd, capture_output=True, text=True, timeout=COMMAND_TIMEOUT_S
    )
    return result.returncode, (result.stdout or "") + (result.stderr or "")


class ConsolePanel(wx.Panel):
    """
    Bottom pane holding the two command sinks:
      - Terminal: commands run in a shell on a background thread; output is appended
      - Editor:   commands are inserted at the caret of a scratch buffer
    """

    def __init__(self, parent: wx.Window, cwd: str | None = None):
        super().__init__(parent)
        self.cwd = cwd or os.getcwd()
        # Commands may block for a long time; keep them off the storage worker.
        self.runner = IOWorker(call_after=wx.CallAfter)

        self.notebook = wx.Notebook(self)
        mono = wx.Font(10, wx.FONTFAMILY_TELETYPE, wx.FONTSTYLE_NORMAL, wx.FONTWEIGHT_NORMAL)

        self.terminal_out = wx.TextCtrl(self.notebook, style=wx.TE_MULTILINE | wx.TE_READONLY | wx.TE_RICH2)
        self.terminal_out.SetFont(mono)
        self.editor = wx.TextCtrl(self.notebook, style=wx.TE_MULTILINE | wx.TE_RICH2)
        self.editor.SetFont(mono)

        self.notebook.AddPage(self.terminal_out, "Terminal")
        self.notebook.AddPage(self.editor, "Editor")

        sizer = wx.BoxSizer(wx.VERTICAL)
        sizer.Add(self.notebook, 1, wx.EXPAND)
        self.SetSizer(sizer)

    # ---------- Sinks ----------

    def send_to_terminal(self, command: str) -> None:
        if not command.strip():
            raise SinkError("Nothing to run: the command is empty")
        self.notebook.SetSelection(0)
        self._append(f"$ {command}\n")
        Log.debug(f"Terminal: {command!r}", 1)
        self.runner.submit(run_shell, command, self.cwd, callback=self._on_command_done)

    def send_to_editor(self, command: str) -> None:
        if not self.editor:
            raise SinkError("No editor is open")
        self.notebook.SetSelection(1)
        self.editor.WriteText(command)
        self.editor.SetFocus()
        Log.debug(f"Editor: inserted {len(command)} char(s)", 1)

    # ---------- Output ----------

    def _on_command_done(self, result, error):
        if error:
            err, tb = error
            Log.debug(tb, 1)
            self._append(f"[failed: {err}]\n")
            return
        code, output = result
        if output:
            self._append(output if output.endswith("\n") else output + "\n")
        if code != 0:
            self._append(f"[exit {code}]\n")

    def _append(self, text: str):
        self.terminal_out.AppendText(text)

    def clear(self):
        self.terminal_out.Clear()
