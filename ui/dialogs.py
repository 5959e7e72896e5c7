'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from typing import Dict, Optional, Tuple

import wx

from core.args import PromptFn
from core.log import Log
from ui.constants import COLOR_PALETTE, colour_from_hex

__all__ = [
    "ItemEditorDialog",
    "edit_item_dialog",
    "ask_text",
    "prompt_argument",
    "make_prompt",
    "ColorDialog",
    "choose_color",
    "confirm",
]

SNIPPET_HINT = "npm start"
SMART_SNIPPET_HINT = 'git tag -a {{arg$1:Version}} -m "{{arg$2:Comment}}"'


class ItemEditorDialog(wx.Dialog):
    """Name / command / description form used to add and edit items."""

    def __init__(self, parent, title: str, name: str = "", command: Optional[str] = None,
                 description: Optional[str] = None, show_command: bool = True,
                 command_hint: str = SNIPPET_HINT):
        super().__init__(parent, title=title, style=wx.DEFAULT_DIALOG_STYLE | wx.RESIZE_BORDER)
        self.show_command = show_command

        main_sizer = wx.BoxSizer(wx.VERTICAL)
        grid = wx.FlexGridSizer(cols=2, vgap=6, hgap=6)
        grid.AddGrowableCol(1, 1)

        self.name_ctrl = wx.TextCtrl(self, value=name or "")
        self.name_ctrl.SetHint("My Snippet" if show_command else "Name")
        grid.Add(wx.StaticText(self, label="Name:"), 0, wx.ALIGN_CENTER_VERTICAL)
        grid.Add(self.name_ctrl, 1, wx.EXPAND)

        self.command_ctrl = None
        self.description_ctrl = None
        if show_command:
            self.command_ctrl = wx.TextCtrl(self, value=command or "")
            self.command_ctrl.SetHint(command_hint)
            self.command_ctrl.SetToolTip("Use {{arg$1:Label}} to ask for a value when the snippet runs")
            grid.Add(wx.StaticText(self, label="Command:"), 0, wx.ALIGN_CENTER_VERTICAL)
            grid.Add(self.command_ctrl, 1, wx.EXPAND)

            self.description_ctrl = wx.TextCtrl(self, value=description or "",
                                                style=wx.TE_MULTILINE, size=(-1, 70))
            self.description_ctrl.SetHint("Short description...")
            grid.Add(wx.StaticText(self, label="Description:"), 0, wx.ALIGN_TOP | wx.TOP, 3)
            grid.Add(self.description_ctrl, 1, wx.EXPAND)

        main_sizer.Add(grid, 1, wx.EXPAND | wx.ALL, 10)
        main_sizer.Add(self.CreateStdDialogButtonSizer(wx.OK | wx.CANCEL), 0,
                       wx.EXPAND | wx.LEFT | wx.RIGHT | wx.BOTTOM, 10)
        self.SetSizer(main_sizer)
        self.SetSize((480, 260 if show_command else 130))
        self.CenterOnParent()
        self.name_ctrl.SetFocus()

    def GetValues(self) -> Dict[str, Optional[str]]:
        values = {"name": self.name_ctrl.GetValue().strip()}
        if self.show_command:
            values["command"] = self.command_ctrl.GetValue()
            values["description"] = self.description_ctrl.GetValue()
        return values


def edit_item_dialog(parent, title: str, name: str = "", command: Optional[str] = None,
                     description: Optional[str] = None, show_command: bool = True,
                     command_hint: str = SNIPPET_HINT) -> Optional[Dict[str, Optional[str]]]:
    """Show the editor; returns the entered values, or None on cancel or empty name."""
    with ItemEditorDialog(parent, title, name, command, description,
                          show_command, command_hint) as dlg:
        if dlg.ShowModal() != wx.ID_OK:
            return None
        values = dlg.GetValues()
    if not values["name"]:
        return None
    return values


def ask_text(parent, message: str, title: str, default: str = "") -> Optional[str]:
    """Single-line text entry; None on cancel or blank input."""
    with wx.TextEntryDialog(parent, message, title, default) as dlg:
        if dlg.ShowModal() != wx.ID_OK:
            return None
        value = dlg.GetValue().strip()
    return value or None


def prompt_argument(parent, label: str, default: Optional[str] = None) -> Optional[str]:
    """
    Ask for one snippet argument. Cancel returns None; OK returns the text
    as typed, which may be empty.
    """
    with wx.TextEntryDialog(parent, f"Enter {label}:", "Snippet Argument", default or "") as dlg:
        if dlg.ShowModal() != wx.ID_OK:
            Log.debug(f"Argument prompt cancelled, {label=}", 1)
            return None
        return dlg.GetValue()


def make_prompt(parent) -> PromptFn:
    return lambda label, default: prompt_argument(parent, label, default)


class ColorDialog(wx.Dialog):
    """Pick a palette color, a custom color or the default."""

    def __init__(self, parent, current: Optional[str] = None, is_container: bool = False):
        super().__init__(parent, title="Set Color")
        self.color: Optional[str] = current or None

        main_sizer = wx.BoxSizer(wx.VERTICAL)
        grid = wx.GridSizer(cols=5, vgap=4, hgap=4)
        for name, value in COLOR_PALETTE:
            btn = wx.Button(self, label="", size=(32, 24))
            btn.SetBackgroundColour(colour_from_hex(value))
            btn.SetToolTip(name)
            btn.Bind(wx.EVT_BUTTON, lambda evt, v=value: self._pick(v))
            grid.Add(btn, 0)
        main_sizer.Add(grid, 0, wx.ALL, 10)

        row = wx.BoxSizer(wx.HORIZONTAL)
        custom_btn = wx.Button(self, label="Custom...")
        custom_btn.Bind(wx.EVT_BUTTON, self._on_custom)
        default_btn = wx.Button(self, label="Default")
        default_btn.Bind(wx.EVT_BUTTON, lambda evt: self._pick(None))
        row.Add(custom_btn, 0, wx.RIGHT, 4)
        row.Add(default_btn, 0)
        main_sizer.Add(row, 0, wx.LEFT | wx.RIGHT, 10)

        self.recursive_cb = wx.CheckBox(self, label="Apply to contents")
        self.recursive_cb.Show(is_container)
        main_sizer.Add(self.recursive_cb, 0, wx.ALL, 10)

        main_sizer.Add(self.CreateStdDialogButtonSizer(wx.CANCEL), 0,
                       wx.EXPAND | wx.LEFT | wx.RIGHT | wx.BOTTOM, 10)
        self.SetSizerAndFit(main_sizer)
        self.CenterOnParent()

    def _pick(self, value: Optional[str]):
        self.color = value
        self.EndModal(wx.ID_OK)

    def _on_custom(self, evt):
        data = wx.ColourData()
        current = colour_from_hex(self.color)
        if current is not None:
            data.SetColour(current)
        with wx.ColourDialog(self, data) as dlg:
            if dlg.ShowModal() != wx.ID_OK:
                return
            colour = dlg.GetColourData().GetColour()
        self._pick(colour.GetAsString(wx.C2S_HTML_SYNTAX).lower())


def choose_color(parent, current: Optional[str] = None,
                 is_container: bool = False) -> Optional[Tuple[Optional[str], bool]]:
    """(color or None for default, apply to contents), or None on cancel."""
    with ColorDialog(parent, current, is_container) as dlg:
        if dlg.ShowModal() != wx.ID_OK:
            return None
        return dlg.color, dlg.recursive_cb.GetValue()


def confirm(parent, question: str, title: str = "Confirm") -> bool:
    answer = wx.MessageBox(question, title, wx.YES_NO | wx.ICON_QUESTION, parent=parent)
    return answer == wx.YES
