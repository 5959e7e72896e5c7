from core.tree import ROOT_ID, SNIPPET, SEPARATOR, FOLDER, TAB, Item, ItemStore
from core.tree_utils import (
    BEFORE,
    AFTER,
    INSIDE,
    children_of,
    tabs_of,
    has_root_items,
    get_ancestors,
    is_descendant,
    descendants_of,
    add_item,
    edit_item,
    rename_item,
    drop_position,
    reparent,
    move_to_container,
    delete_item,
    color_cascade,
    set_expanded,
    toggle_expanded,
    toggle_all_folders,
)


def ids(items):
    return [item.id for item in items]


def cyclic_store():
    return ItemStore([
        Item("a", "A", FOLDER, parent_id="b"),
        Item("b", "B", FOLDER, parent_id="a"),
    ])


# ---------- Queries ----------

def test_children_of_root_excludes_tabs(store):
    assert ids(children_of(store)) == ["s3", "sep"]
    assert ids(children_of(store, None)) == ["s3", "sep"]
    assert ids(children_of(store, ROOT_ID, include_tabs=True)) == ["t1", "s3", "sep", "t2"]


def test_children_of_with_kind_filter(store):
    assert ids(children_of(store, "f1")) == ["s1", "f2"]
    assert ids(children_of(store, "f1", kinds=[FOLDER])) == ["f2"]
    assert children_of(store, "missing") == []


def test_tabs_and_root_items(store):
    assert ids(tabs_of(store)) == ["t1", "t2"]
    assert has_root_items(store)
    assert not has_root_items(ItemStore([Item("t", "T", TAB)]))


def test_is_descendant(store):
    assert is_descendant(store, "t1", "s2")
    assert is_descendant(store, "f1", "s2")
    assert not is_descendant(store, "f2", "s1")
    assert not is_descendant(store, "s2", "s2")
    assert not is_descendant(store, "f1", "unknown")


def test_cycle_walks_terminate():
    store = cyclic_store()
    assert not is_descendant(store, "zz", "a")
    assert is_descendant(store, "b", "a")
    assert ids(get_ancestors(store, "a")) == ["b"]
    assert ids(descendants_of(store, "a")) == ["b"]


def test_get_ancestors(store):
    assert ids(get_ancestors(store, "s2")) == ["f2", "f1", "t1"]
    assert get_ancestors(store, "s3") == []


def test_descendants_of(store):
    assert ids(descendants_of(store, "t1")) == ["f1", "s1", "f2", "s2"]


# ---------- Create / edit ----------

def test_add_item_is_last_sibling(store):
    item = add_item(store, SNIPPET, "Log", "f1", command="git log")
    assert item.parent_id == "f1"
    assert item.command == "git log"
    assert ids(children_of(store, "f1")) == ["s1", "f2", item.id]


def test_add_folder_and_separator(store):
    folder = add_item(store, FOLDER, "New", ROOT_ID)
    sep = add_item(store, SEPARATOR, "", ROOT_ID)
    assert folder.expanded
    assert sep.name == "---"
    assert ids(children_of(store)) == ["s3", "sep", folder.id, sep.id]


def test_add_tab_goes_to_root_end(store):
    tab = add_item(store, TAB, "New", "f1")
    assert tab.parent_id == ROOT_ID
    assert store.list()[-1] is tab


def test_add_item_rejects_bad_context(store):
    assert add_item(store, SNIPPET, "x", "s1") is None
    assert add_item(store, SNIPPET, "x", "nope") is None
    assert len(store) == 8


def test_rename_item_trims_and_ignores_empty(store):
    assert rename_item(store, "s1", "  Status 2 ")
    assert store.by_id("s1").name == "Status 2"
    assert not rename_item(store, "s1", "   ")
    assert store.by_id("s1").name == "Status 2"
    assert not rename_item(store, "zz", "x")


def test_edit_item(store):
    assert edit_item(store, "f1", "Renamed", command="rm -rf /", description="")
    folder = store.by_id("f1")
    assert folder.name == "Renamed"
    assert folder.command is None
    assert folder.description is None
    assert edit_item(store, "s1", command="git status -s")
    assert store.by_id("s1").command == "git status -s"
    assert not edit_item(store, "zz", "x")


# ---------- Reparent ----------

def test_drop_position_halves_and_inside():
    # Row at y 100..120, label starting at x 40.
    assert drop_position(False, 45, 105, 40, 100, 20) == BEFORE
    assert drop_position(False, 45, 115, 40, 100, 20) == AFTER
    assert drop_position(False, 200, 105, 40, 100, 20) == BEFORE
    assert drop_position(True, 55, 115, 40, 100, 20) == AFTER
    assert drop_position(True, 61, 105, 40, 100, 20) == INSIDE


def test_reparent_inside_folder_expands_it(store):
    assert reparent(store, "s3", "f2", INSIDE, "f2")
    assert store.by_id("s3").parent_id == "f2"
    assert store.by_id("f2").expanded
    assert ids(children_of(store, "f2")) == ["s2", "s3"]


def test_reparent_before_and_after(store):
    assert reparent(store, "s3", None, BEFORE, "s1")
    assert store.by_id("s3").parent_id == "f1"
    assert ids(children_of(store, "f1")) == ["s3", "s1", "f2"]

    assert reparent(store, "s3", "f1", AFTER, "f2")
    assert ids(children_of(store, "f1")) == ["s1", "f2", "s3"]


def test_reparent_recomputes_reference_index():
    store = ItemStore([Item("a", "A", SNIPPET), Item("b", "B", SNIPPET), Item("c", "C", SNIPPET)])
    assert reparent(store, "a", None, AFTER, "b")
    assert ids(store.list()) == ["b", "a", "c"]
    assert reparent(store, "c", None, BEFORE, "b")
    assert ids(store.list()) == ["c", "b", "a"]


def test_reparent_rejections_leave_store_unchanged(store):
    before = store.to_dicts()
    assert not reparent(store, "s1", None, BEFORE, "s1")
    assert not reparent(store, "nope", None, BEFORE, "s1")
    assert not reparent(store, "s1", None, BEFORE, "nope")
    assert not reparent(store, "s1", None, INSIDE, "s3")
    assert not reparent(store, "s1", None, "sideways", "s3")
    assert not reparent(store, "s1", "f2", BEFORE, "s3")
    assert store.to_dicts() == before


def test_reparent_rejects_folder_into_own_subtree(store):
    before = store.to_dicts()
    assert not reparent(store, "f1", "f2", INSIDE, "f2")
    assert not reparent(store, "f1", None, BEFORE, "s2")
    assert store.to_dicts() == before


def test_reparent_then_reverse_is_rejected():
    store = ItemStore([Item("x", "X", FOLDER), Item("folder", "F", FOLDER)])
    assert reparent(store, "x", "folder", INSIDE, "folder")
    snapshot = store.to_dicts()
    assert not reparent(store, "folder", "x", INSIDE, "x")
    assert store.to_dicts() == snapshot


def test_tabs_only_reorder_among_tabs(store):
    assert reparent(store, "t2", None, BEFORE, "t1")
    assert ids(tabs_of(store)) == ["t2", "t1"]
    assert not reparent(store, "t2", None, INSIDE, "f1")
    assert not reparent(store, "s3", None, BEFORE, "t1")
    assert not reparent(store, "t1", None, AFTER, "s3")


def test_move_to_container(store):
    assert move_to_container(store, "s3", "t2")
    assert store.by_id("s3").parent_id == "t2"
    assert not move_to_container(store, "t1", "t2")
    assert not move_to_container(store, "f1", "f2")
    assert not move_to_container(store, "s1", "s3")
    assert not move_to_container(store, "s1", "f1")


def test_move_to_container_to_end(store):
    assert move_to_container(store, "s1", None, to_end=True)
    assert store.by_id("s1").parent_id == ROOT_ID
    assert store.list()[-1].id == "s1"


# ---------- Delete ----------

def test_delete_folder_promotes_children_in_order(store):
    removed = delete_item(store, "f1")
    assert removed.id == "f1"
    assert "f1" not in store
    assert ids(children_of(store, "t1")) == ["s1", "f2"]
    assert store.by_id("s2").parent_id == "f2"


def test_delete_tab_promotes_to_root(store):
    delete_item(store, "t1")
    assert ids(children_of(store)) == ["f1", "s3", "sep"]


def test_delete_leaf_and_unknown(store):
    assert delete_item(store, "zz") is None
    assert len(store) == 8
    assert delete_item(store, "s3").id == "s3"
    assert len(store) == 7


# ---------- Color / expansion ----------

def test_color_cascade(store):
    assert color_cascade(store, "f1", "#f00", recursive=True)
    assert [store.by_id(i).color for i in ("f1", "s1", "f2", "s2")] == ["#f00"] * 4
    assert store.by_id("s3").color is None

    assert color_cascade(store, "f1", "#0f0")
    assert store.by_id("f1").color == "#0f0"
    assert store.by_id("s1").color == "#f00"

    assert color_cascade(store, "s1", "")
    assert store.by_id("s1").color is None
    assert not color_cascade(store, "zz", "#fff")


def test_color_cascade_on_tab_is_not_recursive(store):
    assert color_cascade(store, "t1", "#abc", recursive=True)
    assert store.by_id("t1").color == "#abc"
    assert store.by_id("f1").color is None


def test_toggle_all_folders(store):
    assert toggle_all_folders(store, "t1")
    assert not store.by_id("f1").expanded
    assert toggle_all_folders(store, "t1")
    assert store.by_id("f1").expanded
    assert not toggle_all_folders(store, ROOT_ID)


def test_set_and_toggle_expanded(store):
    assert not set_expanded(store, "s1", True)
    assert not set_expanded(store, "f1", True)
    assert toggle_expanded(store, "f2")
    assert store.by_id("f2").expanded
    assert not toggle_expanded(store, "zz")
