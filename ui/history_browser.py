# ui/history_browser.py

from __future__ import annotations

import wx
import wx.dataview
from typing import Callable, Optional

from core.history import COMMAND, CLIPBOARD
from core.log import Log

__all__ = ["HistoryPanel"]

class HistoryPanel(wx.Panel):
    """
    History view shown in place of the snippet tree.

    Two most-recent-first lists:
    - Commands: resolved commands that were sent to the terminal or editor
    - Clipboard: text seen on the clipboard while the app was running

    Double-click (or "Run Again") re-runs a command through the normal
    dispatch path, so locked mode still applies. "Copy" puts the selected
    entry on the clipboard.
    """

    def __init__(self, parent: wx.Window, session,
                 on_run: Optional[Callable[[str], None]] = None,
                 on_copy: Optional[Callable[[str], None]] = None):
        super().__init__(parent)
        self.session = session
        self.on_run = on_run
        self.on_copy = on_copy

        self._init_ui()
        self._bind_events()
        self.refresh()

    def _init_ui(self):
        """Initialize the user interface components."""
        main_sizer = wx.BoxSizer(wx.VERTICAL)

        title_label = wx.StaticText(self, label="History")
        title_font = title_label.GetFont()
        title_font.SetPointSize(title_font.GetPointSize() + 2)
        title_font.SetWeight(wx.FONTWEIGHT_BOLD)
        title_label.SetFont(title_font)
        main_sizer.Add(title_label, 0, wx.ALL, 6)

        self.lists = {}
        for kind, label in ((COMMAND, "Commands"), (CLIPBOARD, "Clipboard")):
            main_sizer.Add(wx.StaticText(self, label=label), 0, wx.LEFT | wx.TOP, 6)
            ctrl = wx.dataview.DataViewListCtrl(
                self,
                style=wx.dataview.DV_ROW_LINES | wx.dataview.DV_SINGLE | wx.dataview.DV_NO_HEADER
            )
            ctrl.AppendTextColumn("Entry", width=400)
            main_sizer.Add(ctrl, 1, wx.EXPAND | wx.ALL, 2)
            self.lists[kind] = ctrl

        button_sizer = wx.BoxSizer(wx.HORIZONTAL)
        self.run_btn = wx.Button(self, label="Run Again")
        self.run_btn.SetToolTip("Run the selected command again")
        self.copy_btn = wx.Button(self, label="Copy")
        self.copy_btn.SetToolTip("Copy the selected entry to the clipboard")
        self.clear_btn = wx.Button(self, label="Clear")
        self.clear_btn.SetToolTip("Forget both histories")

        button_sizer.Add(self.run_btn, 0, wx.ALL, 2)
        button_sizer.Add(self.copy_btn, 0, wx.ALL, 2)
        button_sizer.AddStretchSpacer()
        button_sizer.Add(self.clear_btn, 0, wx.ALL, 2)
        main_sizer.Add(button_sizer, 0, wx.EXPAND)

        self.SetSizer(main_sizer)

    def _bind_events(self):
        """Bind event handlers."""
        for kind, ctrl in self.lists.items():
            ctrl.Bind(wx.dataview.EVT_DATAVIEW_SELECTION_CHANGED,
                      lambda evt, k=kind: self._on_selected(k))
        self.lists[COMMAND].Bind(wx.dataview.EVT_DATAVIEW_ITEM_ACTIVATED, self._on_run)
        self.lists[CLIPBOARD].Bind(wx.dataview.EVT_DATAVIEW_ITEM_ACTIVATED, self._on_copy)
        self.run_btn.Bind(wx.EVT_BUTTON, self._on_run)
        self.copy_btn.Bind(wx.EVT_BUTTON, self._on_copy)
        self.clear_btn.Bind(wx.EVT_BUTTON, self._on_clear)

    def refresh(self):
        """Reload both lists from the session."""
        for kind, ctrl in self.lists.items():
            ctrl.DeleteAllItems()
            for entry in self.session.history.entries(kind):
                # One line per row; the full text is kept in the history.
                ctrl.AppendItem([entry.replace("\n", " ⏎ ")])
        self._update_buttons()

    def _on_selected(self, kind: str):
        # Only one list holds a selection at a time.
        for other, ctrl in self.lists.items():
            if other != kind:
                ctrl.UnselectAll()
        self._update_buttons()

    def _selection(self):
        """(kind, full text) of the selected row, or (None, None)."""
        for kind, ctrl in self.lists.items():
            row = ctrl.GetSelectedRow()
            if row != wx.NOT_FOUND:
                entries = self.session.history.entries(kind)
                if 0 <= row < len(entries):
                    return kind, entries[row]
        return None, None

    def _update_buttons(self):
        kind, _text = self._selection()
        self.run_btn.Enable(kind == COMMAND)
        self.copy_btn.Enable(kind is not None)

    def _on_run(self, event):
        kind, text = self._selection()
        if kind == COMMAND and self.on_run:
            Log.debug("History: run again", 1)
            self.on_run(text)

    def _on_copy(self, event):
        kind, text = self._selection()
        if text and self.on_copy:
            self.on_copy(text)

    def _on_clear(self, event):
        answer = wx.MessageBox("Clear command and clipboard history?", "Clear History",
                               wx.YES_NO | wx.ICON_QUESTION, parent=self)
        if answer != wx.YES:
            return
        self.session.clear_history(COMMAND)
        self.session.clear_history(CLIPBOARD)
