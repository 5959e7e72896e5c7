from __future__ import annotations

import wx

from core.settings import EXECUTION_MODES
from ui.constants import PADDING
from ui.icons import wpIcons

MODE_LABELS = {
    "terminal": "Terminal",
    "editor": "Editor",
    "locked": "Locked",
}

# (tooltip, icon name, main frame handler), None for a divider
TOOLS = (
    ("Add Snippet", "snippet_add", "on_action_add_snippet"),
    ("Add Smart Snippet", "smart_add", "on_action_add_smart_snippet"),
    ("Add Folder", "folder_add", "on_action_add_folder"),
    ("Add Separator", "separator_add", "on_action_add_separator"),
    ("Add Tab", "tab_add", "on_action_add_tab"),
    None,
    ("Expand/Collapse All Folders", "expand_all", "on_action_toggle_all"),
    ("History", "history", "on_action_history"),
    None,
)

GRADIENT_TOP = wx.Colour(238, 238, 238)
GRADIENT_BOTTOM = wx.Colour(208, 208, 208)
BORDER = wx.Colour(180, 180, 180)


class Toolbar(wx.Panel):
    """
    Button strip above the snippet tree, built from TOOLS. Each button calls
    the named on_action_* method of the main frame. The right-hand side holds
    the execution mode chooser and the search box.
    """

    def __init__(self, parent: wx.Window):
        super().__init__(parent, style=wx.BORDER_NONE)
        self.main_frame = self.Parent.Parent
        self.buttons = {}

        self.SetDoubleBuffered(True)
        self.SetBackgroundStyle(wx.BG_STYLE_PAINT)
        self.Bind(wx.EVT_ERASE_BACKGROUND, lambda e: None)
        self.Bind(wx.EVT_PAINT, self._on_paint)

        sizer = wx.BoxSizer(wx.HORIZONTAL)
        sizer.AddSpacer(PADDING // 2)
        for tool in TOOLS:
            if tool is None:
                sizer.Add(wx.StaticLine(self, style=wx.LI_VERTICAL), 0, wx.LEFT | wx.RIGHT | wx.EXPAND, 2)
            else:
                sizer.Add(self._button(*tool), 0, wx.ALIGN_CENTER_VERTICAL | wx.ALL, 1)

        mode_label = wx.StaticText(self, label="Run in:")
        mode_label.SetBackgroundStyle(wx.BG_STYLE_TRANSPARENT)
        self.mode_choice = wx.Choice(self, choices=[MODE_LABELS[m] for m in EXECUTION_MODES])
        self.mode_choice.SetToolTip(wx.ToolTip("Where snippets are sent when run"))
        self.mode_choice.Bind(wx.EVT_CHOICE, self._on_mode_chosen)
        sizer.Add(mode_label, 0, wx.ALIGN_CENTER_VERTICAL | wx.LEFT | wx.RIGHT, PADDING)
        sizer.Add(self.mode_choice, 0, wx.ALIGN_CENTER_VERTICAL | wx.ALL, 1)

        self.search_ctrl = wx.SearchCtrl(self, style=wx.TE_PROCESS_ENTER)
        self.search_ctrl.SetMinSize(wx.Size(175, 25))
        self.search_ctrl.ShowCancelButton(True)
        self.search_ctrl.SetToolTip(wx.ToolTip("Search Snippets"))
        self.search_ctrl.Bind(wx.EVT_SEARCHCTRL_SEARCH_BTN, self._on_search)
        self.search_ctrl.Bind(wx.EVT_TEXT_ENTER, self._on_search)
        sizer.AddStretchSpacer(1)
        sizer.Add(self.search_ctrl, 0, wx.ALIGN_CENTER_VERTICAL | wx.ALL, 1)
        sizer.AddSpacer(PADDING // 2)

        self.SetSizer(sizer)
        self.SetMinSize((-1, 32))

    def _button(self, tooltip: str, icon_name: str, method_name: str) -> wx.BitmapButton:
        bmp = wpIcons.Get(icon_name) or wx.Bitmap(16, 16)
        btn = wx.BitmapButton(self, bitmap=bmp, style=wx.BU_EXACTFIT | wx.NO_BORDER)
        btn.SetToolTip(wx.ToolTip(tooltip))
        # Keep keyboard focus in the tree.
        btn.SetCanFocus(False)
        btn.Bind(wx.EVT_BUTTON, getattr(self.main_frame, method_name))
        self.buttons[method_name] = btn
        return btn

    def _on_search(self, event):
        self.main_frame.on_action_search(self.search_ctrl.GetValue().strip())

    def _on_mode_chosen(self, event):
        self.main_frame.on_action_set_mode(EXECUTION_MODES[self.mode_choice.GetSelection()])

    def set_mode(self, mode: str):
        """Show the current execution mode"""
        self.mode_choice.SetSelection(EXECUTION_MODES.index(mode))

    def _on_paint(self, _evt):
        dc = wx.AutoBufferedPaintDC(self)
        w, h = self.GetClientSize()
        dc.GradientFillLinear(wx.Rect(0, 0, w, h), GRADIENT_TOP, GRADIENT_BOTTOM, wx.SOUTH)
        dc.SetPen(wx.Pen(BORDER))
        dc.DrawLine(0, h - 1, w, h - 1)
