'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from typing import Callable, List, Optional

from core.args import PromptFn
from core.dispatch import Dispatcher, DispatchOutcome, Sink
from core.history import CLIPBOARD, COMMAND, CommandHistory
from core.hover import (
    FOLDER_EXPAND_DELAY_MS,
    TAB_SWITCH_DELAY_MS,
    HoverIntent,
    Scheduler,
)
from core.log import Log
from core.search import SearchMatch, resolve_navigation_target, reveal, search
from core.settings import EXECUTION_MODES, Settings, next_execution_mode
from core.storage import LibraryStorage, StorageError
from core.tree import ROOT_ID, SNIPPET, FOLDER, TAB, SEPARATOR, Item, ItemStore
import core.tree_utils as tu

__all__ = [
    "HISTORY_VIEW",
    "ROOT_TAB_NAME",
    "DELETE_PROMPT",
    "SnippetSession",
]

HISTORY_VIEW = "history"
ROOT_TAB_NAME = "$(home)"
DELETE_PROMPT = "Are you sure you want to delete this item?"


def _run_now(delay_ms: int, fn: Callable[[], None]) -> Callable[[], None]:
    fn()
    return lambda: None


class SnippetSession:
    """
    The snippet library as the front end sees it: items, settings, history
    and the active view. Every change goes through here so it can be
    persisted and announced to listeners.

    worker:   object with submit(fn, *args, callback=None); None saves inline.
    notify:   notify(message) for one-line user messages.
    confirm:  confirm(question) -> bool, asked before deletes when enabled.
    schedule: schedule(delay_ms, fn) -> cancel, used by drag hover timers.
    """

    def __init__(
        self,
        storage: LibraryStorage,
        worker=None,
        notify: Optional[Callable[[str], None]] = None,
        confirm: Optional[Callable[[str], bool]] = None,
        schedule: Optional[Scheduler] = None,
        terminal: Optional[Sink] = None,
        editor: Optional[Sink] = None,
    ):
        self.storage = storage
        self.worker = worker
        self.notify = notify or (lambda msg: None)
        self.confirm = confirm or (lambda question: True)
        self.store = ItemStore()
        self.settings = Settings()
        self.history = CommandHistory()
        self.active_view: Optional[str] = None
        self._previous_view: Optional[str] = None
        self.listeners: List[Callable[[], None]] = []

        self.dispatcher = Dispatcher(
            settings=lambda: self.settings,
            history=self.history,
            terminal=terminal,
            editor=editor,
            notify=self._notify,
        )

        schedule = schedule or _run_now
        self.folder_hover = HoverIntent(FOLDER_EXPAND_DELAY_MS, schedule, self._expand_hovered_folder)
        self.tab_hover = HoverIntent(TAB_SWITCH_DELAY_MS, schedule, self._open_hovered_tab)

    # ---------- Plumbing ----------

    def _notify(self, message: str) -> None:
        Log.debug(f"notify: {message}", 1)
        self.notify(message)

    def _changed(self) -> None:
        for listener in list(self.listeners):
            listener()

    def _submit(self, fn, *args) -> None:
        if self.worker is None:
            try:
                fn(*args)
            except StorageError as e:
                self._save_failed(e)
            return
        self.worker.submit(fn, *args, callback=self._on_saved)

    def _on_saved(self, result, error) -> None:
        if error is not None:
            e, tb = error
            Log.debug(tb, 1)
            self._save_failed(e)

    def _save_failed(self, e: Exception) -> None:
        Log.debug(f"Save failed: {e}", 0)
        self._notify(f"Failed to save snippets: {e}")

    def save(self) -> None:
        """Snapshot the library now and write it on the worker."""
        self._submit(self.storage.save, self.store.to_dicts(), self.settings.to_dict())

    def save_history(self) -> None:
        self._submit(self.storage.save_history, self.history.to_dict())

    def _commit(self, changed: bool) -> bool:
        if changed:
            self.save()
            self._changed()
        return bool(changed)

    # ---------- Loading ----------

    def load(self) -> None:
        """Replace the in-memory library with what storage holds."""
        data = self.storage.load()
        self.store = ItemStore.from_dicts(data.get("items"))
        self.settings = Settings.from_dict(data.get("settings"))
        hist = self.storage.load_history()
        self.history = CommandHistory.from_dict(hist)
        self.history.trim(COMMAND, self.settings.command_history_limit)
        self.history.trim(CLIPBOARD, self.settings.clipboard_history_limit)
        self.dispatcher.history = self.history
        self._fix_active_view()
        Log.debug(f"Session loaded: {len(self.store)} item(s), view={self.active_view}", 1)
        self._changed()

    # ---------- Views ----------

    def default_view(self) -> Optional[str]:
        """Root when it has content, else the first tab, else nothing."""
        if tu.has_root_items(self.store):
            return ROOT_ID
        tabs = tu.tabs_of(self.store)
        return tabs[0].id if tabs else None

    def _view_exists(self, view_id: Optional[str]) -> bool:
        if view_id in (ROOT_ID, HISTORY_VIEW):
            return True
        item = self.store.by_id(view_id)
        return item is not None and item.kind == TAB

    def _fix_active_view(self) -> None:
        if self.active_view is None or not self._view_exists(self.active_view):
            self.active_view = self.default_view()
        if self._previous_view is not None and not self._view_exists(self._previous_view):
            self._previous_view = None

    @property
    def context_id(self) -> str:
        """Container new items go into: the active tab or the root."""
        view = self.active_view
        if view == HISTORY_VIEW:
            view = self._previous_view
        if view is None or view == HISTORY_VIEW:
            return ROOT_ID
        return view

    def visible_tabs(self) -> List[Item]:
        """The root tab (when it has content) followed by the real tabs."""
        tabs = tu.tabs_of(self.store)
        if tu.has_root_items(self.store):
            tabs.insert(0, Item(id=ROOT_ID, name=ROOT_TAB_NAME, kind=TAB))
        return tabs

    def activate(self, view_id: Optional[str]) -> bool:
        if view_id == self.active_view or not self._view_exists(view_id):
            return False
        self.active_view = view_id
        self._changed()
        return True

    def open_history(self) -> None:
        """Toggle between the history view and the previously active view."""
        if self.active_view == HISTORY_VIEW:
            self.active_view = self._previous_view
            self._previous_view = None
            self._fix_active_view()
        else:
            self._previous_view = self.active_view
            self.active_view = HISTORY_VIEW
        self._changed()

    # ---------- Add / edit ----------

    def add_snippet(self, name: str, command: str, description: Optional[str] = None) -> Optional[Item]:
        item = tu.add_item(self.store, SNIPPET, name, self.context_id,
                           command=command, description=description)
        self._commit(item is not None)
        return item

    def add_folder(self, name: str) -> Optional[Item]:
        item = tu.add_item(self.store, FOLDER, name, self.context_id)
        self._commit(item is not None)
        return item

    def add_separator(self) -> Optional[Item]:
        item = tu.add_item(self.store, SEPARATOR, "", self.context_id)
        self._commit(item is not None)
        return item

    def add_tab(self, name: str) -> Optional[Item]:
        item = tu.add_item(self.store, TAB, name)
        if item is not None:
            self.active_view = item.id
        self._commit(item is not None)
        return item

    def edit_item(self, item_id: str, name: Optional[str] = None, command: Optional[str] = None,
                  description: Optional[str] = None) -> bool:
        item = self.store.by_id(item_id)
        old_command = item.command if item is not None else None
        changed = tu.edit_item(self.store, item_id, name, command, description)
        if changed and command is not None and command != old_command:
            self.dispatcher.forget(old_command)
        return self._commit(changed)

    def rename_item(self, item_id: str, name: str) -> bool:
        return self._commit(tu.rename_item(self.store, item_id, name))

    def delete_item(self, item_id: str) -> bool:
        if self.store.by_id(item_id) is None:
            return False
        if self.settings.confirm_delete and not self.confirm(DELETE_PROMPT):
            Log.debug(f"delete_item(): declined, {item_id=}", 1)
            return False
        removed = tu.delete_item(self.store, item_id)
        if removed is not None and self.active_view == item_id:
            self.active_view = None
        self._fix_active_view()
        return self._commit(removed is not None)

    # ---------- Drag and drop ----------

    def drop(self, node_id: str, reference_id: str, position: str) -> bool:
        """Drop node_id before/after/inside reference_id."""
        self.hover_leave()
        return self._commit(tu.reparent(self.store, node_id, None, position, reference_id))

    def drop_on_tab(self, node_id: str, tab_id: str) -> bool:
        """Move an item into a tab (or the root tab), keeping its sequence position."""
        self.hover_leave()
        return self._commit(tu.move_to_container(self.store, node_id, tab_id))

    def drop_on_content(self, node_id: str) -> bool:
        """Drop on empty content area: into the active tab root, at the end."""
        self.hover_leave()
        return self._commit(tu.move_to_container(self.store, node_id, self.context_id, to_end=True))

    def hover_folder(self, folder_id: str) -> None:
        folder = self.store.by_id(folder_id)
        if folder is None or folder.kind != FOLDER or folder.expanded:
            self.folder_hover.cancel()
            return
        self.folder_hover.hover(folder_id)

    def hover_tab(self, tab_id: str) -> None:
        if tab_id == self.active_view or not self._view_exists(tab_id) or tab_id == HISTORY_VIEW:
            self.tab_hover.cancel()
            return
        self.tab_hover.hover(tab_id)

    def hover_leave(self) -> None:
        self.folder_hover.cancel()
        self.tab_hover.cancel()

    def _expand_hovered_folder(self, folder_id: str) -> None:
        self._commit(tu.set_expanded(self.store, folder_id, True))

    def _open_hovered_tab(self, tab_id: str) -> None:
        self.activate(tab_id)

    # ---------- Appearance ----------

    def set_color(self, item_id: str, color: Optional[str], recursive: bool = False) -> bool:
        return self._commit(tu.color_cascade(self.store, item_id, color, recursive))

    def toggle_folder(self, folder_id: str) -> bool:
        return self._commit(tu.toggle_expanded(self.store, folder_id))

    def toggle_all_folders(self) -> bool:
        return self._commit(tu.toggle_all_folders(self.store, self.context_id))

    # ---------- Search / navigation ----------

    def search(self, query: str) -> List[SearchMatch]:
        return search(query, self.store.list(), self.store)

    def navigate_to(self, item_id: str, execute: bool = False,
                    prompt: Optional[PromptFn] = None) -> Optional[str]:
        """
        Show item_id: open its tab and expand its folders. With execute, a
        snippet is then run; returns the dispatch outcome, or None when
        nothing was run.
        """
        item = self.store.by_id(item_id)
        if item is None:
            return None
        target = resolve_navigation_target(self.store, item)
        reveal(self.store, target)
        self.active_view = target.tab_id
        self._fix_active_view()
        self.save()
        self._changed()
        if execute and item.kind == SNIPPET and item.command and prompt is not None:
            return self.execute(item.command, prompt)
        return None

    # ---------- Execution / history ----------

    def execute(self, command: str, prompt: PromptFn) -> str:
        outcome = self.dispatcher.execute(command, prompt)
        if outcome in (DispatchOutcome.DISPATCHED, DispatchOutcome.FAILED):
            self.save_history()
            self._changed()
        return outcome

    def execute_item(self, item_id: str, prompt: PromptFn) -> Optional[str]:
        item = self.store.by_id(item_id)
        if item is None or item.kind != SNIPPET or not item.command:
            return None
        return self.execute(item.command, prompt)

    def record_clipboard(self, text: str) -> bool:
        changed = self.history.record(CLIPBOARD, text, self.settings.clipboard_history_limit)
        if changed:
            self.save_history()
            self._changed()
        return changed

    def clear_history(self, kind: str) -> None:
        self.history.clear(kind)
        self.save_history()
        self._changed()

    # ---------- Settings ----------

    def update_settings(self, **changes) -> bool:
        updated = self.settings.updated(**changes)
        if updated == self.settings:
            return False
        self.settings = updated
        self.history.trim(COMMAND, updated.command_history_limit)
        self.history.trim(CLIPBOARD, updated.clipboard_history_limit)
        Log.debug(f"Settings updated: {sorted(changes)}", 1)
        self.save()
        self.save_history()
        self._changed()
        return True

    def set_execution_mode(self, mode: str) -> bool:
        if mode not in EXECUTION_MODES:
            raise ValueError(f"Unknown execution mode: {mode!r}")
        return self.update_settings(execution_mode=mode)

    def cycle_execution_mode(self) -> str:
        self.set_execution_mode(next_execution_mode(self.settings.execution_mode))
        return self.settings.execution_mode

    # ---------- Config file ----------

    @property
    def config_file_path(self) -> str:
        return self.storage.config_file_path

    def select_config_file(self, path: str) -> bool:
        """Keep the library in `path` from now on, starting with the current data."""
        try:
            target = self.storage.set_config_file(path, self.store.to_dicts(), self.settings.to_dict())
        except StorageError as e:
            self._notify(str(e))
            return False
        self._notify(f"Config file: {target}")
        self._changed()
        return True

    def open_config_file(self, path: str) -> bool:
        """Switch to an existing config file and load the library from it."""
        try:
            target = self.storage.use_config_file(path)
        except StorageError as e:
            self._notify(str(e))
            return False
        self.load()
        self._notify(f"Config file: {target}")
        return True

    def clear_config_file(self) -> bool:
        try:
            self.storage.clear_config_file()
        except StorageError as e:
            self._notify(str(e))
            return False
        self.save()
        self._changed()
        return True

    def export_config(self, path: str) -> bool:
        try:
            target = self.storage.export_config(path, self.store.to_dicts(), self.settings.to_dict())
        except StorageError as e:
            self._notify(str(e))
            return False
        self._notify(f"Exported to {target}")
        return True

    def import_config(self, path: str) -> bool:
        try:
            data = self.storage.import_config(path)
        except StorageError as e:
            self._notify(str(e))
            return False
        self.store = ItemStore.from_dicts(data["items"])
        self.settings = Settings.from_dict(data["settings"])
        self._fix_active_view()
        self._notify(f"Imported {len(self.store)} item(s)")
        self._changed()
        return True
