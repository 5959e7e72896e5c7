import json

import pytest

from core.tree import ROOT_ID, SNIPPET, FOLDER, TAB, SEPARATOR, Item, ItemStore, new_item_id
from core.tree_utils import children_of


def ids(items):
    return [item.id for item in items]


def test_new_item_id_strictly_increasing():
    values = [int(new_item_id()) for _ in range(50)]
    assert values == sorted(values)
    assert len(set(values)) == 50


def test_snippet_to_dict_omits_root_parent():
    item = Item("1", "ls", SNIPPET, command="ls -la")
    assert item.to_dict() == {"id": "1", "name": "ls", "type": "snippet", "command": "ls -la"}


def test_folder_to_dict():
    item = Item("2", "Git", FOLDER, color="#ff0000", parent_id="t", expanded=True)
    assert item.to_dict() == {
        "id": "2",
        "name": "Git",
        "type": "folder",
        "color": "#ff0000",
        "parentId": "t",
        "expanded": True,
    }


def test_from_dict_defaults():
    item = Item.from_dict({"id": 5, "name": "x"})
    assert item.id == "5"
    assert item.kind == SNIPPET
    assert item.command == ""
    assert item.parent_id == ROOT_ID
    assert not item.is_container


def test_from_dict_null_parent_is_root():
    item = Item.from_dict({"id": "a", "name": "A", "type": "folder", "parentId": None})
    assert item.is_root_level
    assert item.expanded is False


def test_from_dict_tab_is_always_root_level():
    item = Item.from_dict({"id": "t", "name": "T", "type": "tab", "parentId": "f"})
    assert item.parent_id == ROOT_ID
    assert item.is_container


def test_from_dict_drops_fields_of_other_kinds():
    item = Item.from_dict({"id": "s", "name": "-", "type": "separator", "command": "rm", "expanded": True})
    assert item.command is None
    assert item.expanded is False


@pytest.mark.parametrize("raw", [
    {"name": "no id"},
    {"id": "root", "name": "reserved"},
    {"id": "1", "type": "widget"},
    "not an object",
])
def test_from_dict_rejects(raw):
    with pytest.raises(ValueError):
        Item.from_dict(raw)


def test_insert_rejects_duplicate_and_reserved_ids():
    store = ItemStore([Item("a", "A", SNIPPET)])
    assert not store.insert(Item("a", "again", SNIPPET))
    assert not store.insert(Item(ROOT_ID, "root", FOLDER))
    assert len(store) == 1


def test_insert_position_is_clamped():
    store = ItemStore([Item("a", "A", SNIPPET), Item("b", "B", SNIPPET)])
    store.insert(Item("c", "C", SNIPPET), 0)
    store.insert(Item("d", "D", SNIPPET), 99)
    store.insert(Item("e", "E", SNIPPET), -4)
    assert ids(store.list()) == ["e", "c", "a", "b", "d"]


def test_lookup_of_unknown_ids():
    store = ItemStore([Item("a", "A", SNIPPET)])
    assert store.by_id("zz") is None
    assert store.by_id(None) is None
    assert store.index_of("zz") == -1
    assert store.remove("zz") is None
    assert "a" in store
    assert "zz" not in store


def test_move_uses_index_after_removal():
    store = ItemStore([Item("a", "A", SNIPPET), Item("b", "B", SNIPPET), Item("c", "C", SNIPPET)])
    assert store.move("a", 2)
    assert ids(store.list()) == ["b", "c", "a"]
    assert not store.move("zz", 0)


def test_list_is_a_copy():
    store = ItemStore([Item("a", "A", SNIPPET)])
    store.list().clear()
    assert len(store) == 1


def test_new_id_is_unused():
    store = ItemStore()
    first = store.new_id()
    store.insert(Item(first, "A", SNIPPET))
    assert store.new_id() != first


def test_from_dicts_skips_bad_and_duplicate_entries():
    store = ItemStore.from_dicts([
        {"id": "1", "name": "a"},
        {"id": "1", "name": "dup"},
        {"name": "no id"},
        {"id": "2", "type": "bogus"},
    ])
    assert len(store) == 1
    assert store.by_id("1").name == "a"
    assert len(ItemStore.from_dicts(None)) == 0


def test_round_trip_preserves_children_of_every_parent(store):
    restored = ItemStore.from_dicts(json.loads(json.dumps(store.to_dicts())))
    for parent_id in [ROOT_ID] + [item.id for item in store]:
        assert ids(children_of(restored, parent_id, include_tabs=True)) == \
            ids(children_of(store, parent_id, include_tabs=True))
    assert restored.to_dicts() == store.to_dicts()
    assert restored.by_id("f1").expanded is True
    assert restored.by_id("sep").kind == SEPARATOR
    assert restored.by_id("t2").kind == TAB
