from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, List

from core.log import Log
from core.settings import Settings
from utils.fs_atomic import atomic_write_json, read_json
from utils.paths import Pathish, normalize_config_path, state_json_path

__all__ = ["StorageError", "LibraryStorage"]

# Keys in the host state file.
SNIPPETS_KEY = "snippets"
SETTINGS_KEY = "settings"
CONFIG_PATH_KEY = "configFilePath"
HISTORY_KEYS = ("commandHistory", "clipboardHistory")


class StorageError(Exception):
    """Reading or writing the snippet library failed"""
    pass


def _config_payload(items: List[Dict[str, Any]], settings: Dict[str, Any]) -> Dict[str, Any]:
    return {"items": list(items), "settings": dict(settings)}


class LibraryStorage:
    """
    Persistence for the snippet library.

    Layout:
    <state_dir>/
      state.json        snippets, settings, configFilePath, histories

    When a config file is selected the items and settings live there instead,
    as {"items": [...], "settings": {...}}. The state file keeps the path and
    serves as the fallback copy.

    All methods may be called from the IO worker thread.
    """

    def __init__(self, state_dir: Pathish):
        self.state_dir = Path(state_dir).expanduser()
        self.state_path = state_json_path(self.state_dir)
        self._lock = threading.RLock()

    # ---------- Host state file ----------

    def _read_state(self) -> Dict[str, Any]:
        try:
            data = read_json(self.state_path, {})
        except ValueError as e:
            Log.debug(f"State file unreadable, starting empty: {e}", 0)
            return {}
        return data if isinstance(data, dict) else {}

    def _update_state(self, **values: Any) -> None:
        with self._lock:
            data = self._read_state()
            data.update(values)
            try:
                atomic_write_json(self.state_path, data)
            except OSError as e:
                raise StorageError(f"Failed to write {self.state_path}: {e}") from e

    # ---------- Config file path ----------

    @property
    def config_file_path(self) -> str:
        """Absolute path of the external config file, or "" when none."""
        with self._lock:
            return str(self._read_state().get(CONFIG_PATH_KEY) or "")

    def set_config_file(self, path: Pathish, items: List[Dict[str, Any]],
                        settings: Dict[str, Any]) -> str:
        """
        Select an external config file and write the current library to it.
        Returns the normalized path.
        """
        target = normalize_config_path(path)
        if not target:
            raise StorageError("No config file path given")
        with self._lock:
            self._write_config(target, items, settings)
            self._update_state(**{CONFIG_PATH_KEY: target})
        Log.debug(f"Config file set to {target}", 1)
        return target

    def use_config_file(self, path: Pathish) -> str:
        """Point at an existing config file without writing to it."""
        target = normalize_config_path(path)
        if not target:
            raise StorageError("No config file path given")
        if not Path(target).is_file():
            raise StorageError(f"Config file not found: {target}")
        with self._lock:
            self._update_state(**{CONFIG_PATH_KEY: target})
        Log.debug(f"Using config file {target}", 1)
        return target

    def clear_config_file(self) -> None:
        """Go back to keeping the library in the state file."""
        with self._lock:
            self._update_state(**{CONFIG_PATH_KEY: ""})
        Log.debug("Config file cleared", 1)

    def _write_config(self, path: str, items: List[Dict[str, Any]], settings: Dict[str, Any]) -> None:
        try:
            atomic_write_json(path, _config_payload(items, settings))
        except OSError as e:
            raise StorageError(f"Failed to write config file {path}: {e}") from e

    # ---------- Library ----------

    def load(self) -> Dict[str, Any]:
        """
        Returns {"items": [...], "settings": {...}} from the config file when
        one is selected and readable, else from the state file.
        """
        with self._lock:
            state = self._read_state()
            config_path = str(state.get(CONFIG_PATH_KEY) or "")
            if config_path:
                try:
                    data = read_json(config_path, None)
                except (ValueError, OSError) as e:
                    Log.debug(f"Config file {config_path} unreadable, using state file: {e}", 0)
                    data = None
                if isinstance(data, dict):
                    Log.debug(f"Loaded library from {config_path}", 1)
                    return {
                        "items": list(data.get("items") or []),
                        "settings": dict(data.get("settings") or {}),
                    }
                Log.debug(f"Config file {config_path} missing, using state file", 0)

            return {
                "items": list(state.get(SNIPPETS_KEY) or []),
                "settings": dict(state.get(SETTINGS_KEY) or {}),
            }

    def save(self, items: List[Dict[str, Any]], settings: Dict[str, Any]) -> None:
        """
        Write the library to the config file if one is selected, else to the
        state file. A failed config write still lands in the state file, and
        StorageError is raised afterwards.
        """
        with self._lock:
            config_path = self.config_file_path
            if config_path:
                try:
                    self._write_config(config_path, items, settings)
                    return
                except StorageError as e:
                    Log.debug(f"{e}; backing up to state file", 0)
                    self._update_state(**{SNIPPETS_KEY: list(items), SETTINGS_KEY: dict(settings)})
                    raise
            self._update_state(**{SNIPPETS_KEY: list(items), SETTINGS_KEY: dict(settings)})
        Log.debug(f"Saved {len(items)} item(s)", 2)

    # ---------- Import / export ----------

    def export_config(self, path: Pathish, items: List[Dict[str, Any]],
                      settings: Dict[str, Any]) -> str:
        target = normalize_config_path(path)
        if not target:
            raise StorageError("No export path given")
        self._write_config(target, items, settings)
        Log.debug(f"Exported {len(items)} item(s) to {target}", 1)
        return target

    def import_config(self, path: Pathish) -> Dict[str, Any]:
        """
        Read a config file, merge its settings over the defaults and save the
        result as the active library. Returns {"items", "settings"}.
        """
        source = Path(str(path)).expanduser()
        try:
            data = read_json(source, None)
        except (ValueError, OSError) as e:
            raise StorageError("Invalid file format") from e
        if not isinstance(data, dict) or not isinstance(data.get("items", []), list):
            raise StorageError("Invalid file format")

        items = list(data.get("items") or [])
        settings = Settings.from_dict(data.get("settings")).to_dict()
        self.save(items, settings)
        Log.debug(f"Imported {len(items)} item(s) from {source}", 1)
        return {"items": items, "settings": settings}

    # ---------- History ----------

    def load_history(self) -> Dict[str, List[str]]:
        with self._lock:
            state = self._read_state()
        return {key: list(state.get(key) or []) for key in HISTORY_KEYS}

    def save_history(self, history: Dict[str, List[str]]) -> None:
        self._update_state(**{key: list(history.get(key) or []) for key in HISTORY_KEYS})
