from __future__ import annotations

import re
from dataclasses import dataclass, field
from html import escape
from typing import Iterable, List, Optional, Tuple

from core.tree import ROOT_ID, SEPARATOR, FOLDER, TAB, Item, ItemStore
import core.tree_utils as tu

__all__ = [
    "PATH_SEPARATOR",
    "SearchMatch",
    "NavigationTarget",
    "path_of",
    "search",
    "resolve_navigation_target",
    "reveal",
    "highlight_markup",
]

PATH_SEPARATOR = " › "


@dataclass(slots=True, frozen=True)
class SearchMatch:
    """
    One search hit.

    • item  – the matching item (shared with the store, do not mutate)
    • span  – (start, length) of the first match inside item.name, or None
              when only the command / description matched
    • path  – ancestor names, outermost first
    """
    item: Item
    span: Optional[Tuple[int, int]]
    path: Tuple[str, ...] = ()

    @property
    def path_text(self) -> str:
        return PATH_SEPARATOR.join(self.path)


@dataclass(slots=True)
class NavigationTarget:
    """Where a jump lands: the tab to activate and the folders to open."""
    tab_id: str
    folders_to_expand: List[str] = field(default_factory=list)


def path_of(store: ItemStore, item: Item) -> List[str]:
    """Ancestor names from the outermost (a tab or root-level folder) inwards."""
    return [parent.name for parent in reversed(tu.get_ancestors(store, item.id))]


def _contains(text: Optional[str], query: str) -> bool:
    return bool(text) and query in text.lower()


def search(query: str, items: Iterable[Item], store: Optional[ItemStore] = None) -> List[SearchMatch]:
    """
    Case-insensitive substring filter over name, command and description.
    Separators never match; results keep store order. With a store the
    matches also carry their ancestor path.
    """
    q = (query or "").lower().strip()
    if not q:
        return []

    matches: List[SearchMatch] = []
    for item in items:
        if item.kind == SEPARATOR:
            continue
        if not (_contains(item.name, q) or _contains(item.command, q) or _contains(item.description, q)):
            continue
        # Found on the name itself: lower() can change the length of a few code points.
        m = re.search(re.escape(q), item.name, re.IGNORECASE) if item.name else None
        span = (m.start(), m.end() - m.start()) if m else None
        path = tuple(path_of(store, item)) if store is not None else ()
        matches.append(SearchMatch(item=item, span=span, path=path))
    return matches


def resolve_navigation_target(store: ItemStore, item: Item) -> NavigationTarget:
    """
    The tab an item lives under (ROOT_ID for the implicit root tab) and the
    ancestor folders that must be expanded for it to be visible.
    """
    if item.kind == TAB:
        return NavigationTarget(tab_id=item.id)

    target = NavigationTarget(tab_id=ROOT_ID)
    for parent in tu.get_ancestors(store, item.id):
        if parent.kind == TAB:
            target.tab_id = parent.id
            break
        if parent.kind == FOLDER:
            target.folders_to_expand.append(parent.id)
    return target


def reveal(store: ItemStore, target: NavigationTarget) -> bool:
    """Expand every folder of a navigation target. Returns True if any changed."""
    changed = False
    for folder_id in target.folders_to_expand:
        folder = store.by_id(folder_id)
        if folder is not None and folder.kind == FOLDER and not folder.expanded:
            folder.expanded = True
            changed = True
    return changed


def highlight_markup(text: str, span: Optional[Tuple[int, int]],
                     bgcolor: str = "#ADD8E6") -> str:
    """Pango-style markup for a result row, with the matched span shaded."""
    if not text:
        return ""
    if span is None:
        return escape(text)
    start, length = span
    end = start + length
    return (
        escape(text[:start]) +
        f'<span bgcolor="{bgcolor}">{escape(text[start:end])}</span>' +
        escape(text[end:])
    )
