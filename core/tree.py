'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional

from core.log import Log

__all__ = [
    "ROOT_ID",
    "SNIPPET",
    "SEPARATOR",
    "FOLDER",
    "TAB",
    "ITEM_KINDS",
    "CONTAINER_KINDS",
    "Item",
    "ItemStore",
    "new_item_id",
]

# Parent of every top-level item. Never a real item id.
ROOT_ID = "root"

SNIPPET = "snippet"
SEPARATOR = "separator"
FOLDER = "folder"
TAB = "tab"
ITEM_KINDS = (SNIPPET, SEPARATOR, FOLDER, TAB)
CONTAINER_KINDS = (FOLDER, TAB)

_id_lock = threading.Lock()
_last_id = 0

def new_item_id() -> str:
    """
    Millisecond timestamp id, bumped when two ids are requested within
    the same millisecond so the sequence is strictly increasing.
    """
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)


@dataclass(slots=True)
class Item:
    """
    A single node of the snippet hierarchy.

    • id          – opaque, unique within a store
    • name        – display label, may contain $(icon) tokens
    • kind        – snippet | separator | folder | tab
    • command     – snippets only; may contain {{arg$N:label}} placeholders
    • description – free text for search and tooltips
    • color       – display color ("" / None means default)
    • parent_id   – ROOT_ID for top-level items; always ROOT_ID for tabs
    • expanded    – folders only; UI state that survives every mutation
    """
    id: str
    name: str
    kind: str
    command: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    parent_id: str = ROOT_ID
    expanded: bool = False

    @property
    def is_container(self) -> bool:
        return self.kind in CONTAINER_KINDS

    @property
    def is_root_level(self) -> bool:
        return self.parent_id == ROOT_ID

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape shared with the original config files."""
        data: Dict[str, Any] = {"id": self.id, "name": self.name, "type": self.kind}
        if self.kind == SNIPPET:
            data["command"] = self.command or ""
        if self.description:
            data["description"] = self.description
        if self.color:
            data["color"] = self.color
        if not self.is_root_level:
            data["parentId"] = self.parent_id
        if self.kind == FOLDER:
            data["expanded"] = bool(self.expanded)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        """
        Deserialize one item. Raises ValueError on a missing id or unknown type;
        missing / null / empty parentId means the root.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Item must be an object, got {type(data).__name__}")
        item_id = data.get("id")
        if item_id is None or str(item_id) == "" or str(item_id) == ROOT_ID:
            raise ValueError(f"Item has no usable id: {data!r}")
        kind = data.get("type", SNIPPET)
        if kind not in ITEM_KINDS:
            raise ValueError(f"Unknown item type {kind!r} for id={item_id}")

        parent_id = data.get("parentId")
        if parent_id is None or str(parent_id) == "" or kind == TAB:
            parent_id = ROOT_ID

        return cls(
            id=str(item_id),
            name=str(data.get("name") or ""),
            kind=kind,
            command=str(data.get("command") or "") if kind == SNIPPET else None,
            description=data.get("description") or None,
            color=data.get("color") or None,
            parent_id=str(parent_id),
            expanded=bool(data.get("expanded", False)) if kind == FOLDER else False,
        )


class ItemStore:
    """
    Flat ordered collection of items. Parent links form the forest; the
    sequence order is the sibling order. Lookups by unknown id return None.
    """

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._items: List[Item] = []
        self._by_id: Dict[str, Item] = {}
        for item in items:
            self.insert(item)

    # ------------------------------------------------------------------ #
    # read model
    # ------------------------------------------------------------------ #

    def list(self) -> List[Item]:
        """The full ordered collection (a new list; items are shared)."""
        return list(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._by_id

    def by_id(self, item_id: Optional[str]) -> Optional[Item]:
        if item_id is None:
            return None
        return self._by_id.get(item_id)

    def index_of(self, item_id: str) -> int:
        """Sequence position of item_id, -1 if absent."""
        item = self._by_id.get(item_id)
        if item is None:
            return -1
        for i, candidate in enumerate(self._items):
            if candidate is item:
                return i
        return -1

    def new_id(self) -> str:
        """An id that no item in this store uses."""
        item_id = new_item_id()
        while item_id in self._by_id:
            item_id = new_item_id()
        return item_id

    # ------------------------------------------------------------------ #
    # mutation
    # ------------------------------------------------------------------ #

    def insert(self, item: Item, position: Optional[int] = None) -> bool:
        """
        Insert at sequence position (clamped), or append when position is None.
        Returns False for a duplicate or reserved id.
        """
        if item.id == ROOT_ID or item.id in self._by_id:
            Log.debug(f"insert rejected, id in use: {item.id=}", 2)
            return False
        if position is None or position >= len(self._items):
            self._items.append(item)
        else:
            self._items.insert(max(0, position), item)
        self._by_id[item.id] = item
        return True

    def remove(self, item_id: str) -> Optional[Item]:
        """Remove and return the item, or None if unknown."""
        idx = self.index_of(item_id)
        if idx < 0:
            return None
        item = self._items.pop(idx)
        del self._by_id[item_id]
        return item

    def move(self, item_id: str, position: int) -> bool:
        """
        Relocate an item. `position` is interpreted against the sequence
        *after* the item has been taken out.
        """
        item = self.remove(item_id)
        if item is None:
            return False
        self.insert(item, position)
        return True

    def clear(self) -> None:
        self._items.clear()
        self._by_id.clear()

    # ------------------------------------------------------------------ #
    # serialization
    # ------------------------------------------------------------------ #

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self._items]

    @classmethod
    def from_dicts(cls, data: Optional[Iterable[Dict[str, Any]]]) -> "ItemStore":
        """Build a store from JSON items, skipping (and logging) unusable ones."""
        store = cls()
        for raw in data or []:
            try:
                item = Item.from_dict(raw)
            except ValueError as e:
                Log.debug(f"Skipping unreadable item: {e}", 0)
                continue
            if not store.insert(item):
                Log.debug(f"Skipping duplicate item id={item.id}", 0)
        return store
