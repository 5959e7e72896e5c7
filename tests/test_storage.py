import json

import pytest

from core.storage import LibraryStorage, StorageError

ITEMS_A = [{"id": "1", "name": "ls", "type": "snippet", "command": "ls"}]
ITEMS_B = [{"id": "2", "name": "Tools", "type": "tab"}]


@pytest.fixture
def storage(tmp_path):
    return LibraryStorage(tmp_path / "state")


def read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_load_empty(storage):
    assert storage.load() == {"items": [], "settings": {}}
    assert storage.config_file_path == ""


def test_save_to_state_file(storage):
    storage.save(ITEMS_A, {"confirmDelete": True})
    assert read(storage.state_path)["snippets"] == ITEMS_A
    assert storage.load() == {"items": ITEMS_A, "settings": {"confirmDelete": True}}


def test_config_file_is_written_and_preferred(storage, tmp_path):
    storage.save(ITEMS_A, {})
    path = storage.set_config_file(tmp_path / "library", ITEMS_B, {"executionMode": "editor"})
    assert path.endswith("library.json")
    assert storage.config_file_path == path
    assert read(tmp_path / "library.json") == {"items": ITEMS_B, "settings": {"executionMode": "editor"}}
    assert storage.load()["items"] == ITEMS_B

    storage.save(ITEMS_A, {})
    assert read(tmp_path / "library.json")["items"] == ITEMS_A


def test_missing_config_falls_back_to_state(storage, tmp_path):
    storage.save(ITEMS_A, {})
    storage.set_config_file(tmp_path / "lib.json", ITEMS_B, {})
    (tmp_path / "lib.json").unlink()
    assert storage.load()["items"] == ITEMS_A


def test_malformed_config_falls_back_to_state(storage, tmp_path):
    storage.save(ITEMS_A, {})
    storage.set_config_file(tmp_path / "lib.json", ITEMS_B, {})
    (tmp_path / "lib.json").write_text("{not json", encoding="utf-8")
    assert storage.load()["items"] == ITEMS_A


def test_failed_config_write_backs_up_to_state(storage, tmp_path):
    storage.set_config_file(tmp_path / "lib.json", ITEMS_A, {})
    (tmp_path / "lib.json").unlink()
    (tmp_path / "lib.json").mkdir()
    with pytest.raises(StorageError):
        storage.save(ITEMS_B, {})
    assert read(storage.state_path)["snippets"] == ITEMS_B


def test_clear_config_file(storage, tmp_path):
    storage.save(ITEMS_A, {})
    storage.set_config_file(tmp_path / "lib.json", ITEMS_B, {})
    storage.clear_config_file()
    assert storage.config_file_path == ""
    assert storage.load()["items"] == ITEMS_A


def test_set_config_file_needs_a_path(storage):
    with pytest.raises(StorageError):
        storage.set_config_file("  ", ITEMS_A, {})


def test_export_and_import(storage, tmp_path):
    out = storage.export_config(tmp_path / "export", ITEMS_B, {"confirmDelete": True})
    assert read(tmp_path / "export.json")["items"] == ITEMS_B

    other = LibraryStorage(tmp_path / "other")
    data = other.import_config(out)
    assert data["items"] == ITEMS_B
    assert data["settings"]["confirmDelete"] is True
    assert data["settings"]["executionMode"] == "terminal"
    assert other.load()["items"] == ITEMS_B


@pytest.mark.parametrize("content", ["[1, 2]", "{not json", '{"items": "nope"}'])
def test_import_rejects_bad_files(storage, tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StorageError, match="Invalid file format"):
        storage.import_config(path)


def test_import_missing_file(storage, tmp_path):
    with pytest.raises(StorageError):
        storage.import_config(tmp_path / "nowhere.json")


def test_history_lives_beside_library(storage):
    storage.save_history({"commandHistory": ["make"]})
    storage.save(ITEMS_A, {})
    assert storage.load_history() == {"commandHistory": ["make"], "clipboardHistory": []}
    assert read(storage.state_path)["snippets"] == ITEMS_A


def test_use_config_file_does_not_overwrite(storage, tmp_path):
    path = tmp_path / "shared.json"
    path.write_text(json.dumps({"items": ITEMS_B, "settings": {}}), encoding="utf-8")
    storage.save(ITEMS_A, {})
    assert storage.use_config_file(path) == str(path.resolve())
    assert read(path)["items"] == ITEMS_B
    assert storage.load()["items"] == ITEMS_B


def test_use_config_file_must_exist(storage, tmp_path):
    with pytest.raises(StorageError, match="not found"):
        storage.use_config_file(tmp_path / "missing.json")
    assert storage.config_file_path == ""
