from types import SimpleNamespace

import pytest

from core.dispatch import LOCKED_MESSAGE, DispatchOutcome
from core.history import CLIPBOARD, COMMAND
from core.io_worker import IOWorker
from core.session import HISTORY_VIEW, ROOT_TAB_NAME, SnippetSession
from core.settings import EDITOR, LOCKED, TERMINAL
from core.storage import LibraryStorage, StorageError
from core.tree import ROOT_ID, FOLDER, TAB, Item, ItemStore
from core.tree_utils import INSIDE, children_of


class FailingStorage(LibraryStorage):
    def save(self, items, settings):
        raise StorageError("disk full")


def saved_item(storage, item_id):
    for raw in storage.load()["items"]:
        if raw["id"] == item_id:
            return raw
    return None


@pytest.fixture
def env(tmp_path, store, scheduler):
    storage = LibraryStorage(tmp_path / "state")
    storage.save(store.to_dicts(), {})
    notes, terminal = [], []
    session = SnippetSession(storage, notify=notes.append, schedule=scheduler,
                             terminal=terminal.append)
    session.load()
    return SimpleNamespace(session=session, storage=storage, notes=notes,
                           terminal=terminal, scheduler=scheduler)


def make_session(tmp_path, items):
    storage = LibraryStorage(tmp_path / "state")
    storage.save(ItemStore(items).to_dicts(), {})
    session = SnippetSession(storage)
    session.load()
    return session


# ---------- Views ----------

def test_load_picks_root_view(env):
    assert env.session.active_view == ROOT_ID
    tabs = env.session.visible_tabs()
    assert [t.id for t in tabs] == [ROOT_ID, "t1", "t2"]
    assert tabs[0].name == ROOT_TAB_NAME


def test_default_view_without_root_items(tmp_path):
    session = make_session(tmp_path, [Item("t", "T", TAB)])
    assert session.active_view == "t"
    assert [t.id for t in session.visible_tabs()] == ["t"]


def test_default_view_of_empty_library(tmp_path):
    session = make_session(tmp_path, [])
    assert session.active_view is None
    assert session.context_id == ROOT_ID


def test_activate_and_history_toggle(env):
    s = env.session
    assert s.activate("t1")
    assert not s.activate("s1")
    s.open_history()
    assert s.active_view == HISTORY_VIEW
    assert s.context_id == "t1"
    s.open_history()
    assert s.active_view == "t1"


# ---------- Adding / editing ----------

def test_add_snippet_into_active_tab_is_persisted(env):
    s = env.session
    s.activate("t1")
    item = s.add_snippet("Deploy", "make deploy")
    assert item.parent_id == "t1"
    assert saved_item(env.storage, item.id)["command"] == "make deploy"


def test_add_tab_becomes_active(env):
    tab = env.session.add_tab("New")
    assert env.session.active_view == tab.id


def test_add_while_viewing_history_uses_previous_view(env):
    s = env.session
    s.activate("t2")
    s.open_history()
    folder = s.add_folder("Later")
    sep = s.add_separator()
    assert folder.parent_id == "t2"
    assert folder.expanded
    assert sep.name == "---"


def test_rename_ignores_blank(env):
    assert env.session.rename_item("s1", " Short status ")
    assert saved_item(env.storage, "s1")["name"] == "Short status"
    assert not env.session.rename_item("s1", "  ")


def test_edit_item(env):
    assert env.session.edit_item("s3", "List all", "ls -lah", "everything")
    raw = saved_item(env.storage, "s3")
    assert (raw["name"], raw["command"], raw["description"]) == ("List all", "ls -lah", "everything")


# ---------- Delete ----------

def test_delete_active_tab_falls_back_to_root(env):
    s = env.session
    s.activate("t1")
    assert s.delete_item("t1")
    assert s.active_view == ROOT_ID
    assert saved_item(env.storage, "f1").get("parentId") is None


def test_delete_asks_when_configured(env):
    s = env.session
    s.update_settings(confirm_delete=True)
    questions = []
    s.confirm = lambda q: questions.append(q) or False
    assert not s.delete_item("s3")
    assert s.store.by_id("s3") is not None
    assert len(questions) == 1

    s.confirm = lambda q: True
    assert s.delete_item("s3")
    assert saved_item(env.storage, "s3") is None


def test_delete_unknown(env):
    assert not env.session.delete_item("zz")


# ---------- Drag and drop ----------

def test_drop_inside_folder(env):
    assert env.session.drop("s3", "f2", INSIDE)
    assert saved_item(env.storage, "s3")["parentId"] == "f2"
    assert not env.session.drop("f1", "f2", INSIDE)


def test_drop_on_tab(env):
    assert env.session.drop_on_tab("s3", "t2")
    assert env.session.store.by_id("s3").parent_id == "t2"
    assert env.session.drop_on_tab("s3", ROOT_ID)
    assert env.session.store.by_id("s3").parent_id == ROOT_ID


def test_drop_on_content_appends_to_active_tab(env):
    s = env.session
    s.activate("t2")
    assert s.drop_on_content("s1")
    assert s.store.by_id("s1").parent_id == "t2"
    assert s.store.list()[-1].id == "s1"


def test_hover_folder_expands_after_delay(env):
    s = env.session
    s.hover_folder("f2")
    assert not s.store.by_id("f2").expanded
    env.scheduler.fire_all()
    assert s.store.by_id("f2").expanded
    assert saved_item(env.storage, "f2")["expanded"] is True


def test_hover_leave_cancels(env):
    s = env.session
    s.hover_folder("f2")
    s.hover_leave()
    env.scheduler.fire_all()
    assert not s.store.by_id("f2").expanded


def test_hover_on_open_folder_schedules_nothing(env):
    env.session.hover_folder("f1")
    env.session.hover_folder("s1")
    assert env.scheduler.pending == []


def test_hover_tab_switches_to_last_target(env):
    s = env.session
    s.hover_tab("t2")
    s.hover_tab("t1")
    env.scheduler.fire_all()
    assert s.active_view == "t1"


# ---------- Appearance ----------

def test_set_color_recursive(env):
    assert env.session.set_color("f1", "#336699", recursive=True)
    assert saved_item(env.storage, "s2")["color"] == "#336699"


def test_toggle_all_folders_in_active_tab(env):
    s = env.session
    s.activate("t1")
    assert s.toggle_all_folders()
    assert not s.store.by_id("f1").expanded
    assert s.toggle_folder("f1")
    assert s.store.by_id("f1").expanded


# ---------- Search / navigation / execution ----------

def test_search(env):
    assert [m.item.id for m in env.session.search("git")] == ["f1", "s1", "s2"]
    assert env.session.search("nothing here") == []


def test_navigate_reveals_item(env):
    s = env.session
    assert s.navigate_to("s2") is None
    assert s.active_view == "t1"
    assert s.store.by_id("f2").expanded
    assert saved_item(env.storage, "f2")["expanded"] is True
    assert s.navigate_to("zz") is None


def test_editing_a_command_forgets_its_argument_defaults(env, prompt):
    s = env.session
    old = s.store.by_id("s2").command
    s.execute_item("s2", prompt(["v1"]))
    assert s.dispatcher.last_values(old) == {1: "v1"}

    assert s.edit_item("s2", command="git tag -a {{arg$1:Version}}")
    assert s.dispatcher.last_values(old) == {}

    ask = prompt(["v2"])
    s.execute_item("s2", ask)
    assert ask.calls == [("Version", None)]
    assert env.terminal[-1] == "git tag -a v2"


def test_navigate_and_execute(env, prompt):
    outcome = env.session.navigate_to("s2", execute=True, prompt=prompt(["v2"]))
    assert outcome == DispatchOutcome.DISPATCHED
    assert env.terminal == ["git tag v2"]
    assert env.storage.load_history()["commandHistory"] == ["git tag v2"]


def test_execute_cancelled_records_nothing(env, prompt):
    outcome = env.session.execute_item("s2", prompt([None]))
    assert outcome == DispatchOutcome.CANCELLED
    assert env.terminal == []
    assert env.session.history.entries(COMMAND) == []
    assert env.session.execute_item("f1", prompt([])) is None


def test_locked_mode(env, prompt):
    s = env.session
    assert s.set_execution_mode(LOCKED)
    assert s.execute("ls", prompt([])) == DispatchOutcome.LOCKED
    assert LOCKED_MESSAGE in env.notes
    assert env.terminal == []


def test_cycle_execution_mode(env):
    s = env.session
    assert s.cycle_execution_mode() == EDITOR
    assert s.cycle_execution_mode() == LOCKED
    assert s.cycle_execution_mode() == TERMINAL
    assert env.storage.load()["settings"]["executionMode"] == TERMINAL
    with pytest.raises(ValueError):
        s.set_execution_mode("bogus")


def test_record_clipboard(env):
    s = env.session
    assert s.record_clipboard("copied text")
    assert not s.record_clipboard("copied text")
    assert not s.record_clipboard("")
    assert env.storage.load_history()["clipboardHistory"] == ["copied text"]


def test_lowering_limit_trims_history(env, prompt):
    s = env.session
    for cmd in ("a", "b", "c"):
        s.execute(cmd, prompt([]))
    assert s.update_settings(command_history_limit=2)
    assert s.history.entries(COMMAND) == ["c", "b"]
    assert env.storage.load_history()["commandHistory"] == ["c", "b"]
    assert not s.update_settings(command_history_limit=2)


def test_clear_history(env):
    env.session.record_clipboard("x")
    env.session.clear_history(CLIPBOARD)
    assert env.storage.load_history()["clipboardHistory"] == []


# ---------- Persistence ----------

def test_save_failure_is_reported_not_rolled_back(tmp_path, store):
    notes = []
    storage = FailingStorage(tmp_path / "state")
    session = SnippetSession(storage, notify=notes.append)
    session.load()
    session.store = store
    assert session.rename_item("s1", "Renamed")
    assert session.store.by_id("s1").name == "Renamed"
    assert notes == ["Failed to save snippets: disk full"]


def test_saves_through_worker(tmp_path, store):
    notes = []
    storage = LibraryStorage(tmp_path / "state")
    storage.save(store.to_dicts(), {})
    worker = IOWorker()
    session = SnippetSession(storage, worker=worker, notify=notes.append)
    session.load()
    folder = session.add_folder("Queued")
    worker.flush()
    assert saved_item(storage, folder.id)["name"] == "Queued"
    assert notes == []


def test_worker_save_failure_is_reported(tmp_path):
    notes = []
    worker = IOWorker()
    session = SnippetSession(FailingStorage(tmp_path / "state"), worker=worker, notify=notes.append)
    session.add_folder("Lost")
    worker.flush()
    assert notes == ["Failed to save snippets: disk full"]


def test_listeners_hear_changes(env):
    calls = []
    env.session.listeners.append(lambda: calls.append(1))
    env.session.add_separator()
    env.session.rename_item("zz", "nope")
    assert calls == [1]


def test_export_then_import(env, tmp_path):
    out = tmp_path / "export.json"
    assert env.session.export_config(str(out))

    storage = LibraryStorage(tmp_path / "other")
    fresh = SnippetSession(storage)
    assert fresh.import_config(str(out))
    assert fresh.store.to_dicts() == env.session.store.to_dicts()
    assert fresh.active_view == ROOT_ID
    assert storage.load()["items"] == env.session.store.to_dicts()


def test_import_bad_file_notifies(env, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("[]", encoding="utf-8")
    assert not env.session.import_config(str(bad))
    assert env.notes[-1] == "Invalid file format"
    assert len(env.session.store) == 8


def test_select_config_file(env, tmp_path):
    s = env.session
    assert s.select_config_file(str(tmp_path / "mine"))
    assert s.config_file_path.endswith("mine.json")
    s.add_folder("In config")
    assert len(LibraryStorage(tmp_path / "state").load()["items"]) == 9
    assert s.clear_config_file()
    assert s.config_file_path == ""


def test_open_config_file_loads_it(env, tmp_path):
    other = LibraryStorage(tmp_path / "other")
    shared = other.export_config(tmp_path / "shared.json",
                                 [{"id": "x1", "name": "Only", "type": "snippet", "command": "true"}], {})
    assert env.session.open_config_file(shared)
    assert [i.id for i in env.session.store] == ["x1"]
    assert env.session.active_view == ROOT_ID
    assert env.notes[-1] == f"Config file: {shared}"


def test_open_missing_config_file_keeps_library(env, tmp_path):
    assert not env.session.open_config_file(str(tmp_path / "nope.json"))
    assert len(env.session.store) == 8
    assert env.session.config_file_path == ""

def test_children_survive_reload(env):
    env.session.drop("s3", "f2", INSIDE)
    reloaded = SnippetSession(env.storage)
    reloaded.load()
    for parent_id in (ROOT_ID, "t1", "f1", "f2"):
        assert [i.id for i in children_of(reloaded.store, parent_id)] == \
            [i.id for i in children_of(env.session.store, parent_id)]
