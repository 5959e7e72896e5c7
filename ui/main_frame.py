'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
import wx

from core.log import Log
from core.io_worker import IOWorker
from core.session import HISTORY_VIEW, SnippetSession
from core.settings import EDITOR, TERMINAL
from core.storage import LibraryStorage
from core.tree import TAB
from ui.clipboard import Clipboard, ClipboardWatcher
from ui.console import ConsolePanel
from ui.decorators import check_locked
from ui.dialogs import (
    SMART_SNIPPET_HINT,
    ask_text,
    confirm,
    edit_item_dialog,
    make_prompt,
)
from ui.file_dialogs import choose_config_file, choose_log_file, choose_save_file
from ui.history_browser import HistoryPanel
from ui.icons import wpIcons
from ui.search import show_search_dialog
from ui.snippet_tree import SnippetTree
from ui.tabs_panel import TabsPanel
from ui.toolbar import MODE_LABELS, Toolbar


class MainFrame(wx.Frame):
    """Main application frame for the SnipPad application. """
    def __init__(self, state_dir, config_path: str = "", verbosity: int = 0):
        super().__init__(None, title="SnipPad", size=(900, 700))
        self.SetMinSize((600, 450))
        Log.set_verbosity(verbosity)

        self.io = IOWorker(call_after=wx.CallAfter)
        self.session = SnippetSession(
            LibraryStorage(state_dir),
            worker=self.io,
            notify=self.show_status,
            confirm=lambda question: confirm(self, question),
            schedule=self._schedule,
        )
        self._search_dialog = None

        run_bitmap = wpIcons.Get("run")
        if run_bitmap:
            icon = wx.Icon()
            icon.CopyFromBitmap(run_bitmap)
            self.SetIcon(icon)

        self._build_menu()
        self.CreateStatusBar(2)
        self.SetStatusWidths([-1, 110])
        self.SetStatusText("Ready.")
        self._build_body()

        self.session.dispatcher.set_sink(TERMINAL, self.console.send_to_terminal)
        self.session.dispatcher.set_sink(EDITOR, self.console.send_to_editor)
        self.session.listeners.append(self._on_session_changed)
        self.session.load()
        if config_path:
            self._apply_config_arg(config_path)

        self.clipboard_watcher = ClipboardWatcher(self, self.session.record_clipboard)
        self.clipboard_watcher.start()

        self.Bind(wx.EVT_CLOSE, self.Close)

    # ---------------- Session plumbing ----------------

    def _schedule(self, delay_ms, fn):
        """Hover timers run on the GUI thread; returns a cancel function."""
        timer = wx.CallLater(delay_ms, fn)

        def cancel():
            if timer.IsRunning():
                timer.Stop()
        return cancel

    def _apply_config_arg(self, path: str):
        """--config: open the file if it exists, else start it from the current library."""
        if not self.session.open_config_file(path):
            self.session.select_config_file(path)

    def _on_session_changed(self):
        """Bring every view in line with the session."""
        in_history = self.session.active_view == HISTORY_VIEW
        self.tabs_panel.refresh_tabs()
        if in_history:
            self.history_panel.refresh()
        else:
            self.tree.rebuild()
        if self.tree.IsShown() == in_history:
            self.tree.Show(not in_history)
            self.history_panel.Show(in_history)
            self._content_panel.Layout()

        mode = self.session.settings.execution_mode
        self._toolbar.set_mode(mode)
        self.SetStatusText(f"Mode: {MODE_LABELS[mode]}", 1)

        config = self.session.config_file_path
        self.SetTitle(f"SnipPad - {config}" if config else "SnipPad")

    def show_status(self, message: str):
        self.SetStatusText(message, 0)

    def is_locked(self) -> bool:
        return self.session.settings.locked

    # ---------------- UI scaffolding ----------------

    def _append_item(self, menu: wx.Menu, label: str, icon_name, handler) -> wx.MenuItem:
        item = wx.MenuItem(menu, wx.ID_ANY, label)
        icon = wpIcons.Get(icon_name) if icon_name else None
        if icon:
            item.SetBitmap(icon)
        menu.Append(item)
        self.Bind(wx.EVT_MENU, handler, item)
        return item

    def _build_menu(self):
        mb = wx.MenuBar()

        # File menu
        m_file = wx.Menu()
        self._append_item(m_file, "&Open Config File...\tCtrl-O", "open", self.on_action_open_config)
        self._append_item(m_file, "&Save Library to Config File...", "save_as", self.on_action_choose_config)
        self.clear_config_menu_item = self._append_item(
            m_file, "Use &Built-in Storage", None, self.on_action_clear_config)
        m_file.AppendSeparator()
        self._append_item(m_file, "&Import...", "open", self.on_action_import)
        self._append_item(m_file, "&Export...", "save_as", self.on_action_export)
        m_file.AppendSeparator()
        self._append_item(m_file, "Write &Log...", None, self.on_action_write_log)
        m_file.AppendSeparator()
        m_quit = m_file.Append(wx.ID_EXIT, "E&xit")
        self.Bind(wx.EVT_MENU, self.on_quit, m_quit)
        mb.Append(m_file, "&File")

        # Snippets menu
        m_snip = wx.Menu()
        self._append_item(m_snip, "Add &Snippet...\tCtrl-N", "snippet_add", self.on_action_add_snippet)
        self._append_item(m_snip, "Add S&mart Snippet...", "smart_add", self.on_action_add_smart_snippet)
        self._append_item(m_snip, "Add &Folder...", "folder_add", self.on_action_add_folder)
        self._append_item(m_snip, "Add Se&parator", "separator_add", self.on_action_add_separator)
        self._append_item(m_snip, "Add &Tab...\tCtrl-T", "tab_add", self.on_action_add_tab)
        m_snip.AppendSeparator()
        self._append_item(m_snip, "&Expand/Collapse All\tCtrl-E", "expand_all", self.on_action_toggle_all)
        mb.Append(m_snip, "&Snippets")

        # View menu
        m_view = wx.Menu()
        self._append_item(m_view, "&Search...\tCtrl-F", "search", self.on_action_search)
        self._append_item(m_view, "&History\tCtrl-H", "history", self.on_action_history)
        self._append_item(m_view, "Next Execution &Mode\tCtrl-M", "mode", self.on_action_cycle_mode)
        m_view.AppendSeparator()
        self.confirm_menu_item = m_view.AppendCheckItem(wx.ID_ANY, "Confirm &Deletes")
        self.Bind(wx.EVT_MENU, self.on_action_toggle_confirm, self.confirm_menu_item)
        self.tooltips_menu_item = m_view.AppendCheckItem(wx.ID_ANY, "Rich &Tooltips")
        self.Bind(wx.EVT_MENU, self.on_action_toggle_tooltips, self.tooltips_menu_item)
        self._append_item(m_view, "History &Limits...", None, self.on_action_history_limits)
        mb.Append(m_view, "&View")

        # Help menu
        m_help = wx.Menu()
        self._append_item(m_help, "About SnipPad", "info", self.show_about_dialog)
        mb.Append(m_help, "&Help")

        self.SetMenuBar(mb)
        self.Bind(wx.EVT_MENU_OPEN, self._on_menu_open)

    def _build_body(self):
        root = wx.Panel(self)

        # Main vertical sizer for toolbar + content row
        main_sizer = wx.BoxSizer(wx.VERTICAL)

        # Top toolbar - spans full width
        self._toolbar = Toolbar(root)
        main_sizer.Add(self._toolbar, 0, wx.EXPAND)

        splitter = wx.SplitterWindow(root, style=wx.SP_LIVE_UPDATE | wx.SP_3DSASH)
        splitter.SetMinimumPaneSize(80)

        # Upper pane: content on the left, tabs on the right
        upper = wx.Panel(splitter)
        content_row_sizer = wx.BoxSizer(wx.HORIZONTAL)

        content = wx.Panel(upper)
        cs = wx.BoxSizer(wx.VERTICAL)
        self.tree = SnippetTree(content, self.session, on_run=self.run_item)
        self.history_panel = HistoryPanel(content, self.session,
                                          on_run=self.run_command, on_copy=self.copy_text)
        self.history_panel.Hide()
        cs.Add(self.tree, 1, wx.EXPAND)
        cs.Add(self.history_panel, 1, wx.EXPAND)
        content.SetSizer(cs)
        content_row_sizer.Add(content, 1, wx.EXPAND)

        self.tabs_panel = TabsPanel(upper, self.session)
        content_row_sizer.Add(self.tabs_panel, 0, wx.EXPAND)
        upper.SetSizer(content_row_sizer)

        # Lower pane: terminal output and editor scratch pad
        self.console = ConsolePanel(splitter)

        splitter.SplitHorizontally(upper, self.console, -180)
        splitter.SetSashGravity(1.0)
        main_sizer.Add(splitter, 1, wx.EXPAND)

        root.SetSizer(main_sizer)

        # Keep handles for swapping the tree and history views
        self._content_panel = content

    def _on_menu_open(self, evt):
        settings = self.session.settings
        self.confirm_menu_item.Check(settings.confirm_delete)
        self.tooltips_menu_item.Check(settings.enable_rich_tooltips)
        self.clear_config_menu_item.Enable(bool(self.session.config_file_path))
        evt.Skip()

    # ---------------- Running snippets ----------------

    @check_locked
    def run_item(self, item_id: str):
        outcome = self.session.execute_item(item_id, make_prompt(self))
        Log.debug(f"run_item(), {item_id=}, {outcome=}", 1)

    @check_locked
    def run_command(self, command: str):
        outcome = self.session.execute(command, make_prompt(self))
        Log.debug(f"run_command(), {outcome=}", 1)

    def copy_text(self, text: str):
        try:
            Clipboard.copy_text(text)
        except (RuntimeError, ValueError) as e:
            self.show_status(f"Copy failed: {e}")
            return
        self.show_status("Copied to clipboard")

    def _navigate(self, item_id: str, execute: bool):
        """Search result chosen: show it, and run it when asked."""
        self.session.navigate_to(item_id, execute=execute, prompt=make_prompt(self))
        self.tree.show_item(item_id)

    # ---------------- Add actions ----------------

    def on_action_add_snippet(self, evt=None):
        values = edit_item_dialog(self, "Add Snippet")
        if values is not None:
            self.session.add_snippet(values["name"], values["command"], values["description"])

    def on_action_add_smart_snippet(self, evt=None):
        values = edit_item_dialog(self, "Add Smart Snippet", command_hint=SMART_SNIPPET_HINT)
        if values is not None:
            self.session.add_snippet(values["name"], values["command"], values["description"])

    def on_action_add_folder(self, evt=None):
        name = ask_text(self, "Folder name:", "Add Folder", "New Folder")
        if name:
            self.session.add_folder(name)

    def on_action_add_separator(self, evt=None):
        self.session.add_separator()

    def on_action_add_tab(self, evt=None):
        name = ask_text(self, "Tab name:", "Add Tab", "New Tab")
        if name:
            item = self.session.add_tab(name)
            if item is not None and item.kind == TAB:
                self.show_status(f"Created tab: {name}")

    def on_action_toggle_all(self, evt=None):
        if not self.session.toggle_all_folders():
            self.show_status("No folders here")

    # ---------------- View actions ----------------

    def on_action_search(self, query=""):
        """Open (or refill) the search dialog."""
        if isinstance(query, wx.Event):
            query = ""
        if self._search_dialog:
            if query:
                self._search_dialog.search_ctrl.SetValue(query)
            self._search_dialog.Raise()
            return
        self._search_dialog = show_search_dialog(self, self.session, self._navigate, query)

        def on_dialog_close(evt):
            self._search_dialog = None
            evt.Skip()

        self._search_dialog.Bind(wx.EVT_CLOSE, on_dialog_close)

    def on_action_history(self, evt=None):
        self.session.open_history()

    def on_action_cycle_mode(self, evt=None):
        mode = self.session.cycle_execution_mode()
        self.show_status(f"Execution mode: {MODE_LABELS[mode]}")

    def on_action_set_mode(self, mode: str):
        self.session.set_execution_mode(mode)

    def on_action_toggle_confirm(self, evt):
        self.session.update_settings(confirm_delete=evt.IsChecked())

    def on_action_toggle_tooltips(self, evt):
        self.session.update_settings(enable_rich_tooltips=evt.IsChecked())

    def on_action_history_limits(self, evt=None):
        settings = self.session.settings
        command_limit = wx.GetNumberFromUser("Commands to remember:", "", "History Limits",
                                             settings.command_history_limit, 1, 1000, self)
        if command_limit < 0:
            return
        clipboard_limit = wx.GetNumberFromUser("Clipboard entries to remember:", "", "History Limits",
                                               settings.clipboard_history_limit, 1, 1000, self)
        if clipboard_limit < 0:
            return
        self.session.update_settings(command_history_limit=command_limit,
                                     clipboard_history_limit=clipboard_limit)

    # ---------------- File actions ----------------

    def on_action_open_config(self, evt=None):
        path = choose_config_file(self, must_exist=True, default_path=self.session.config_file_path or None,
                                  message="Open config file…")
        if path:
            self.session.open_config_file(path)

    def on_action_choose_config(self, evt=None):
        path = choose_config_file(self, default_path=self.session.config_file_path or None)
        if path:
            self.session.select_config_file(path)

    def on_action_clear_config(self, evt=None):
        if self.session.clear_config_file():
            self.show_status("Library kept in built-in storage")

    def on_action_import(self, evt=None):
        path = choose_config_file(self, must_exist=True)
        if path:
            self.session.import_config(path)

    def on_action_export(self, evt=None):
        path = choose_save_file(self)
        if path:
            self.session.export_config(path)

    def on_action_write_log(self, evt=None):
        path = choose_log_file(self)
        if not path:
            return
        if Log.write_to_file(path):
            self.show_status(f"Log saved to: {path}")
        else:
            self.show_status(f"Could not write log to: {path}")

    # --------------- Help actions ---------------

    def show_about_dialog(self, event=None):
        """Show the About dialog."""
        wx.MessageBox(
            "SnipPad\n\nA tree of reusable shell commands with tabs, folders,\n"
            "argument prompts and command history.\n\n"
            "Licensed under the LGPL v2.1.",
            "About SnipPad",
            wx.OK | wx.ICON_INFORMATION,
            self,
        )

    # --------------- Close ---------------

    def on_quit(self, event):
        evt = wx.CloseEvent(wx.wxEVT_CLOSE_WINDOW)
        wx.PostEvent(self, evt)

    def Close(self, event):
        """Stop background work and let pending saves land before closing."""
        self.clipboard_watcher.stop()
        self.session.hover_leave()
        if self._search_dialog:
            self._search_dialog.Destroy()
            self._search_dialog = None
        self.io.flush()
        event.Skip()
