from __future__ import annotations

from typing import Callable, List, Optional

import wx
import wx.dataview

from core.log import Log
from core.search import SearchMatch, highlight_markup
from core.tree import SNIPPET
from utils.icon_tokens import render_icon_tokens

# Result rows: name (markup), path, hidden item id.
ID_COLUMN = 2


def _display_markup(match: SearchMatch) -> str:
    """Highlight on the raw name; icon tokens are only rendered when no span is shown."""
    name = match.item.name
    if match.span is None:
        return highlight_markup(render_icon_tokens(name) or name, None)
    return highlight_markup(name, match.span)


class SearchDialog(wx.Dialog):
    """Non-modal live filter over the snippet library."""

    def __init__(self, parent, session, initial_query: str = ""):
        super().__init__(parent, title="Search Snippets",
                         style=wx.DEFAULT_DIALOG_STYLE | wx.RESIZE_BORDER)

        self.session = session
        self.on_navigate: Optional[Callable[[str, bool], None]] = None  # Will be set by caller
        self.matches: List[SearchMatch] = []

        self._create_controls()
        self._setup_layout()
        self._bind_events()

        if initial_query:
            self.search_ctrl.SetValue(initial_query)

        self.SetSize((600, 400))
        self.Center()
        self._refresh_results()

    def _create_controls(self):
        """Create dialog controls."""
        self.search_ctrl = wx.SearchCtrl(self, style=wx.TE_PROCESS_ENTER)
        self.search_ctrl.ShowCancelButton(True)
        self.search_ctrl.SetToolTip("Type to filter; Enter runs the selected snippet")

        self.status_label = wx.StaticText(self, label="Enter search terms above")

        self.results_list = wx.dataview.DataViewListCtrl(self)

        # Name column with markup-enabled renderer
        match_renderer = wx.dataview.DataViewTextRenderer()
        match_renderer.EnableMarkup(True)
        match_col = wx.dataview.DataViewColumn("Name", match_renderer, 0, width=250)
        self.results_list.AppendColumn(match_col)
        self.results_list.AppendTextColumn("Location", width=300)
        self.results_list.AppendTextColumn("", width=0)  # Hidden item id
        self.results_list.GetColumn(ID_COLUMN).SetHidden(True)

        self.run_button = wx.Button(self, label="Go && Run")
        self.close_button = wx.Button(self, wx.ID_CLOSE, label="Close")

    def _setup_layout(self):
        """Layout dialog controls."""
        main_sizer = wx.BoxSizer(wx.VERTICAL)

        search_sizer = wx.BoxSizer(wx.HORIZONTAL)
        search_sizer.Add(wx.StaticText(self, label="Search:"), 0,
                         wx.ALIGN_CENTER_VERTICAL | wx.RIGHT, 5)
        search_sizer.Add(self.search_ctrl, 1, wx.EXPAND)

        main_sizer.Add(search_sizer, 0, wx.EXPAND | wx.ALL, 10)
        main_sizer.Add(self.status_label, 0, wx.LEFT | wx.RIGHT | wx.BOTTOM, 10)
        main_sizer.Add(self.results_list, 1, wx.EXPAND | wx.LEFT | wx.RIGHT, 10)

        button_sizer = wx.BoxSizer(wx.HORIZONTAL)
        button_sizer.Add(self.run_button, 0, wx.RIGHT, 5)
        button_sizer.AddStretchSpacer()
        button_sizer.Add(self.close_button, 0)

        main_sizer.Add(button_sizer, 0, wx.EXPAND | wx.ALL, 10)
        self.SetSizer(main_sizer)

    def _bind_events(self):
        """Bind event handlers."""
        self.search_ctrl.Bind(wx.EVT_TEXT, self._on_query_changed)
        self.search_ctrl.Bind(wx.EVT_SEARCHCTRL_CANCEL_BTN, self._on_clear)
        self.search_ctrl.Bind(wx.EVT_TEXT_ENTER, self._on_run)
        self.run_button.Bind(wx.EVT_BUTTON, self._on_run)
        self.close_button.Bind(wx.EVT_BUTTON, self._on_close)
        self.results_list.Bind(wx.dataview.EVT_DATAVIEW_SELECTION_CHANGED, self._on_result_selected)
        self.results_list.Bind(wx.dataview.EVT_DATAVIEW_ITEM_ACTIVATED, self._on_run)

    def _on_query_changed(self, event):
        self._refresh_results()

    def _on_clear(self, event):
        self.search_ctrl.SetValue("")

    def _refresh_results(self):
        """Re-run the filter and rebuild the list, keeping store order."""
        query = self.search_ctrl.GetValue()
        self.matches = self.session.search(query)
        self.results_list.DeleteAllItems()
        for match in self.matches:
            values = [_display_markup(match), match.path_text, match.item.id]
            self.results_list.AppendItem(values)

        if not query.strip():
            self.status_label.SetLabel("Enter search terms above")
        elif not self.matches:
            self.status_label.SetLabel("No matches found")
        else:
            self.status_label.SetLabel(f"Found {len(self.matches)} matches")
        self.run_button.Enable(bool(self.matches))
        self.Layout()

    def _selected_id(self) -> Optional[str]:
        selection = self.results_list.GetSelectedRow()
        if selection == wx.NOT_FOUND:
            selection = 0 if self.matches else wx.NOT_FOUND
        if selection == wx.NOT_FOUND:
            return None
        return self.results_list.GetTextValue(selection, ID_COLUMN) or None

    def _on_result_selected(self, event):
        """Handle result selection - reveal the item in the main tree."""
        item_id = self._selected_id()
        if item_id and self.on_navigate:
            self.on_navigate(item_id, False)

    def _on_run(self, event):
        """Navigate to the selected result and run it if it is a snippet."""
        item_id = self._selected_id()
        if not item_id or not self.on_navigate:
            return
        item = self.session.store.by_id(item_id)
        execute = item is not None and item.kind == SNIPPET
        Log.debug(f"Search result chosen, {item_id=}, {execute=}", 1)
        self.on_navigate(item_id, execute)
        if execute:
            self.Close()

    def _on_close(self, event):
        """Handle close button."""
        self.Close()


def show_search_dialog(parent, session, on_navigate, initial_query: str = ""):
    """Show the search dialog."""
    dialog = SearchDialog(parent, session, initial_query)
    dialog.on_navigate = on_navigate
    dialog.Show()
    return dialog
