from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Set

from core.log import Log
from core.tree import (
    ROOT_ID,
    SNIPPET,
    SEPARATOR,
    FOLDER,
    TAB,
    Item,
    ItemStore,
)

__all__ = [
    "BEFORE",
    "AFTER",
    "INSIDE",
    "DROP_POSITIONS",
    "children_of",
    "tabs_of",
    "has_root_items",
    "get_ancestors",
    "is_descendant",
    "descendants_of",
    "add_item",
    "edit_item",
    "rename_item",
    "drop_position",
    "reparent",
    "move_to_container",
    "delete_item",
    "color_cascade",
    "set_expanded",
    "toggle_expanded",
    "toggle_all_folders",
]

BEFORE = "before"
AFTER = "after"
INSIDE = "inside"
DROP_POSITIONS = (BEFORE, AFTER, INSIDE)

# ---------- Queries ----------

def children_of(store: ItemStore, parent_id: Optional[str] = ROOT_ID,
                kinds: Optional[Iterable[str]] = None, include_tabs: bool = False) -> List[Item]:
    """
    Direct children of parent_id (ROOT_ID / None for the root) in store order.
    Tabs are never content children unless include_tabs is set.
    """
    parent_id = parent_id or ROOT_ID
    wanted = set(kinds) if kinds is not None else None
    out = []
    for item in store.list():
        if item.parent_id != parent_id:
            continue
        if item.kind == TAB and not include_tabs:
            continue
        if wanted is not None and item.kind not in wanted:
            continue
        out.append(item)
    return out

def tabs_of(store: ItemStore) -> List[Item]:
    """Real tabs in store order."""
    return [item for item in store.list() if item.kind == TAB]

def has_root_items(store: ItemStore) -> bool:
    """True when the implicit root tab has content."""
    return any(item.is_root_level and item.kind != TAB for item in store.list())

def get_ancestors(store: ItemStore, item_id: str) -> List[Item]:
    """
    Ancestors from parent up to the last reachable one (excluding the item
    itself). Stops at the root, at a dangling parent link, or on a cycle.
    """
    ancestors: List[Item] = []
    current = store.by_id(item_id)
    visited: Set[str] = set()
    while current is not None and not current.is_root_level:
        if current.id in visited:
            break  # corrupted store
        visited.add(current.id)
        parent = store.by_id(current.parent_id)
        if parent is None or parent.id in visited:
            break
        ancestors.append(parent)
        current = parent
    return ancestors

def is_descendant(store: ItemStore, ancestor_id: str, node_id: str) -> bool:
    """
    Walk parent links up from node_id; True if ancestor_id is met.
    Terminates on a cyclic store.
    """
    current = store.by_id(node_id)
    visited: Set[str] = set()
    while current is not None and not current.is_root_level:
        if current.id in visited:
            break
        visited.add(current.id)
        if current.parent_id == ancestor_id:
            return True
        current = store.by_id(current.parent_id)
    return False

def descendants_of(store: ItemStore, container_id: str) -> List[Item]:
    """All items below container_id, depth-first, each visited once."""
    out: List[Item] = []
    visited: Set[str] = {container_id}

    def _collect(parent_id: str) -> None:
        for child in children_of(store, parent_id, include_tabs=True):
            if child.id in visited:
                continue
            visited.add(child.id)
            out.append(child)
            _collect(child.id)

    _collect(container_id)
    return out

def _last_sibling_index(store: ItemStore, parent_id: str, exclude_id: Optional[str] = None) -> int:
    """Sequence index of the last direct child of parent_id, -1 if none."""
    last = -1
    for i, item in enumerate(store.list()):
        if item.parent_id == parent_id and item.kind != TAB and item.id != exclude_id:
            last = i
    return last

# ---------- Create / edit ----------

def add_item(store: ItemStore, kind: str, name: str, context_id: Optional[str] = ROOT_ID,
             command: Optional[str] = None, description: Optional[str] = None) -> Optional[Item]:
    """
    Create an item as the last sibling under context_id (ROOT_ID, a tab or a
    folder). Tabs always go to the root, after the last item. Returns the
    new item, or None if the context does not exist or cannot hold children.
    """
    context_id = context_id or ROOT_ID
    if kind == TAB:
        context_id = ROOT_ID
    elif context_id != ROOT_ID:
        context = store.by_id(context_id)
        if context is None or not context.is_container:
            Log.debug(f"add_item: bad context {context_id=}", 2)
            return None

    item = Item(
        id=store.new_id(),
        name=name,
        kind=kind,
        command=(command or "") if kind == SNIPPET else None,
        description=description or None,
        parent_id=context_id,
        expanded=(kind == FOLDER),
    )
    if kind == SEPARATOR and not name:
        item.name = "---"

    if kind == TAB:
        store.insert(item)
    else:
        # Last sibling: right after the current last child, else at the end.
        last = _last_sibling_index(store, context_id)
        store.insert(item, last + 1 if last >= 0 else None)

    Log.debug(f"add_item(), {kind=}, id={item.id}, parent={context_id}", 1)
    return item

def edit_item(store: ItemStore, item_id: str, name: Optional[str] = None,
              command: Optional[str] = None, description: Optional[str] = None) -> bool:
    """Overwrite the editable fields given. Command only applies to snippets."""
    item = store.by_id(item_id)
    if item is None:
        return False
    if name is not None:
        item.name = name
    if command is not None and item.kind == SNIPPET:
        item.command = command
    if description is not None:
        item.description = description or None
    return True

def rename_item(store: ItemStore, item_id: str, name: str) -> bool:
    """Inline rename: trimmed, empty names are ignored."""
    item = store.by_id(item_id)
    new_name = (name or "").strip()
    if item is None or not new_name or new_name == item.name:
        return False
    item.name = new_name
    return True

# ---------- Drag and drop ----------

DROP_INSIDE_INDENT = 20

def drop_position(is_folder: bool, x: float, y: float, left: float, top: float,
                  height: float, inside_indent: float = DROP_INSIDE_INDENT) -> str:
    """
    Where a drop lands relative to a row spanning [top, top + height) that
    starts at `left`: the upper half is BEFORE, the lower half AFTER, and a
    folder row takes the drop INSIDE once the pointer is past `left + inside_indent`.
    """
    if is_folder and x > left + inside_indent:
        return INSIDE
    return BEFORE if y < top + height / 2 else AFTER

def _would_cycle(store: ItemStore, node_id: str, new_parent_id: str) -> bool:
    if new_parent_id == ROOT_ID:
        return False
    return new_parent_id == node_id or is_descendant(store, node_id, new_parent_id)

def reparent(store: ItemStore, node_id: str, new_parent_id: Optional[str],
             position: str, reference_id: str) -> bool:
    """
    Drop node_id relative to reference_id.

      inside        – reference must be a folder; node becomes its last child
                      and the folder is expanded.
      before/after  – node becomes the reference's sibling and is placed
                      immediately before/after it in the sequence.

    new_parent_id is the parent the caller expects (the folder for 'inside',
    the reference's parent otherwise); None means "whatever the reference
    implies". A mismatch, an unknown id, a self-drop or a drop that would
    make the node its own ancestor leaves the store unchanged.
    Tabs only reorder among tabs. Returns True if the store changed.
    """
    if node_id == reference_id or position not in DROP_POSITIONS:
        return False
    node = store.by_id(node_id)
    ref = store.by_id(reference_id)
    if node is None or ref is None:
        return False

    if node.kind == TAB or ref.kind == TAB:
        if node.kind != TAB or ref.kind != TAB or position == INSIDE:
            return False
        target_parent = ROOT_ID
    elif position == INSIDE:
        if ref.kind != FOLDER:
            return False
        target_parent = ref.id
    else:
        target_parent = ref.parent_id

    if new_parent_id is not None and (new_parent_id or ROOT_ID) != target_parent:
        return False
    if ref.kind == FOLDER and is_descendant(store, node.id, ref.id):
        return False
    if _would_cycle(store, node.id, target_parent):
        return False

    if position == INSIDE:
        last = _last_sibling_index(store, ref.id, exclude_id=node.id)
        anchor = store.list()[last] if last >= 0 else ref
        store.remove(node.id)
        node.parent_id = ref.id
        store.insert(node, store.index_of(anchor.id) + 1)
        ref.expanded = True
    else:
        store.remove(node.id)
        node.parent_id = target_parent
        # Index shifts once the node is out, so look the reference up again.
        ref_idx = store.index_of(ref.id)
        store.insert(node, ref_idx + 1 if position == AFTER else ref_idx)

    Log.debug(f"reparent(), {node_id=}, {position=}, {reference_id=}, parent={node.parent_id}", 1)
    return True

def move_to_container(store: ItemStore, node_id: str, container_id: Optional[str],
                      to_end: bool = False) -> bool:
    """
    Drop node_id onto a tab / the root tab / a folder header without a
    sibling reference. With to_end the node is also moved to the end of the
    sequence (drop on empty content area).
    """
    container_id = container_id or ROOT_ID
    node = store.by_id(node_id)
    if node is None or node.kind == TAB:
        return False
    if container_id != ROOT_ID:
        container = store.by_id(container_id)
        if container is None or not container.is_container:
            return False
        if _would_cycle(store, node.id, container_id):
            return False
    if node.parent_id == container_id and not to_end:
        return False

    node.parent_id = container_id
    if to_end:
        store.move(node.id, len(store))
    Log.debug(f"move_to_container(), {node_id=}, {container_id=}, {to_end=}", 1)
    return True

# ---------- Delete ----------

def delete_item(store: ItemStore, item_id: str) -> Optional[Item]:
    """
    Remove one item. The direct children of a deleted folder or tab are
    promoted to its parent in their existing order; nothing else is removed.
    Returns the removed item, or None for an unknown id.
    """
    item = store.by_id(item_id)
    if item is None:
        return None
    promoted = 0
    if item.is_container:
        for child in store.list():
            if child.parent_id == item.id:
                child.parent_id = item.parent_id
                promoted += 1
    store.remove(item.id)
    Log.debug(f"delete_item(), {item_id=}, kind={item.kind}, {promoted=}", 1)
    return item

# ---------- Color / expansion ----------

def color_cascade(store: ItemStore, item_id: str, color: Optional[str], recursive: bool = False) -> bool:
    """
    Set the color of an item; with recursive on a folder, every descendant
    gets the same color.
    """
    item = store.by_id(item_id)
    if item is None:
        return False
    item.color = color or None
    if recursive and item.kind == FOLDER:
        for descendant in descendants_of(store, item.id):
            descendant.color = item.color
    return True

def set_expanded(store: ItemStore, folder_id: str, expanded: bool) -> bool:
    """Returns True if the flag changed."""
    folder = store.by_id(folder_id)
    if folder is None or folder.kind != FOLDER or folder.expanded == bool(expanded):
        return False
    folder.expanded = bool(expanded)
    return True

def toggle_expanded(store: ItemStore, folder_id: str) -> bool:
    folder = store.by_id(folder_id)
    if folder is None or folder.kind != FOLDER:
        return False
    return set_expanded(store, folder_id, not folder.expanded)

def toggle_all_folders(store: ItemStore, parent_id: Optional[str] = ROOT_ID) -> bool:
    """
    Folders directly under parent_id: collapse all of them if any is
    expanded, otherwise expand all. Returns True if anything changed.
    """
    folders = children_of(store, parent_id, kinds=(FOLDER,))
    if not folders:
        return False
    target = not any(f.expanded for f in folders)
    changed = False
    for folder in folders:
        changed = set_expanded(store, folder.id, target) or changed
    return changed
