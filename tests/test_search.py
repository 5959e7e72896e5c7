from core.tree import ROOT_ID, FOLDER, SNIPPET, Item, ItemStore
from core.search import (
    highlight_markup,
    path_of,
    resolve_navigation_target,
    reveal,
    search,
)


def hit_ids(matches):
    return [m.item.id for m in matches]


def test_search_matches_name_command_and_description(store):
    matches = search("GIT", store.list(), store)
    assert hit_ids(matches) == ["f1", "s1", "s2"]
    assert matches[0].span == (0, 3)
    assert matches[1].span is None
    assert matches[2].path == ("Work", "Git", "Deep")
    assert matches[2].path_text == "Work › Git › Deep"


def test_search_description_only(store):
    matches = search("directory", store.list())
    assert hit_ids(matches) == ["s3"]
    assert matches[0].span is None
    assert matches[0].path == ()


def test_search_query_is_trimmed(store):
    matches = search("  list ", store.list())
    assert hit_ids(matches) == ["s3"]
    assert matches[0].span == (0, 4)


def test_search_skips_separators(store):
    assert search("---", store.list()) == []


def test_search_without_matches_is_empty(store):
    assert search("zzz", store.list(), store) == []
    assert search("   ", store.list()) == []
    assert search("", []) == []


def test_path_of(store):
    assert path_of(store, store.by_id("s2")) == ["Work", "Git", "Deep"]
    assert path_of(store, store.by_id("s3")) == []
    assert search("status", [store.by_id("s1")], store)[0].path_text == "Work › Git"


def test_path_of_terminates_on_cycle():
    store = ItemStore([
        Item("a", "A", FOLDER, parent_id="b"),
        Item("b", "B", FOLDER, parent_id="a"),
    ])
    assert path_of(store, store.by_id("a")) == ["B"]


def test_resolve_navigation_target(store):
    target = resolve_navigation_target(store, store.by_id("s2"))
    assert target.tab_id == "t1"
    assert target.folders_to_expand == ["f2", "f1"]

    assert resolve_navigation_target(store, store.by_id("s3")).tab_id == ROOT_ID
    assert resolve_navigation_target(store, store.by_id("t2")).tab_id == "t2"


def test_reveal_expands_folders_once(store):
    target = resolve_navigation_target(store, store.by_id("s2"))
    assert reveal(store, target)
    assert store.by_id("f2").expanded
    assert not reveal(store, target)


def test_highlight_markup():
    assert highlight_markup("a<b>", (1, 1)) == 'a<span bgcolor="#ADD8E6">&lt;</span>b&gt;'
    assert highlight_markup("abc", None) == "abc"
    assert highlight_markup("", (0, 1)) == ""


def test_search_span_follows_original_name_when_lowering_grows_it():
    # "İ".lower() is two code points, which would shift a span found in the lowered name.
    item = Item("x", "İstanbul", SNIPPET, command="echo")
    [match] = search("stan", [item])
    start, length = match.span
    assert (start, length) == (1, 4)
    assert item.name[start:start + length] == "stan"


def test_search_span_is_case_insensitive_on_the_name():
    item = Item("x", "Deploy STAGING", SNIPPET, command="make deploy")
    [match] = search("staging", [item])
    assert match.span == (7, 7)
    assert highlight_markup(item.name, match.span).endswith('<span bgcolor="#ADD8E6">STAGING</span>')
