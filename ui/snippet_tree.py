'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from typing import Callable, Dict, Optional

import wx

from core.args import has_placeholders
from core.log import Log
from core.tree import FOLDER, SEPARATOR, SNIPPET, TAB, Item
from core.tree_utils import INSIDE, children_of, drop_position, is_descendant
from ui.clipboard import Clipboard
from ui.constants import colour_from_hex
from ui.dialogs import ask_text, choose_color, edit_item_dialog
from ui.drag_drop import ItemDropTarget, start_item_drag
from ui.icons import wpIcons
from utils.icon_tokens import render_icon_tokens

__all__ = ["SnippetTree"]

SEPARATOR_TEXT = "─" * 16
SMART_BADGE = " ⚡"
SEPARATOR_COLOUR = wx.Colour(150, 150, 150)


def display_name(item: Item) -> str:
    if item.kind == SEPARATOR:
        return SEPARATOR_TEXT
    text = render_icon_tokens(item.name) or item.name
    if item.kind == SNIPPET and has_placeholders(item.command):
        text += SMART_BADGE
    return text


class SnippetTree(wx.TreeCtrl):
    """
    Tree of the active tab's contents, rebuilt from the session on every change.

    Clicking a snippet runs it through on_run(item_id); clicking a folder
    opens or closes it. Items can be dragged within the tree and onto tabs.
    """

    def __init__(self, parent: wx.Window, session, on_run: Callable[[str], None]):
        style = (wx.TR_HAS_BUTTONS | wx.TR_HIDE_ROOT | wx.TR_LINES_AT_ROOT |
                 wx.TR_SINGLE | wx.TR_NO_LINES | wx.TR_FULL_ROW_HIGHLIGHT)
        super().__init__(parent, style=style)
        self.session = session
        self.on_run = on_run
        self._nodes: Dict[str, wx.TreeItemId] = {}
        self._building = False
        self._dragging = False
        self._drop_node: Optional[wx.TreeItemId] = None
        self._tip_id: Optional[str] = None

        self.Bind(wx.EVT_TREE_ITEM_EXPANDED, self._on_expanded)
        self.Bind(wx.EVT_TREE_ITEM_COLLAPSED, self._on_collapsed)
        self.Bind(wx.EVT_TREE_BEGIN_DRAG, self._on_begin_drag)
        self.Bind(wx.EVT_TREE_ITEM_MENU, self._on_item_menu)
        self.Bind(wx.EVT_TREE_KEY_DOWN, self._on_key_down)
        self.Bind(wx.EVT_LEFT_UP, self._on_left_up)
        self.Bind(wx.EVT_MOTION, self._on_motion)

        self.SetDropTarget(ItemDropTarget(self, self._on_drag_over, self._on_drag_leave, self._on_drop))

    # ---------- Model -> view ----------

    def rebuild(self):
        """Mirror the items under the session's current container."""
        self._building = True
        self.Freeze()
        try:
            self.DeleteAllItems()
            self._nodes.clear()
            self._drop_node = None
            root = self.AddRoot("")
            self._add_children(root, self.session.context_id)
        finally:
            self.Thaw()
            self._building = False

    def _add_children(self, parent_node: wx.TreeItemId, parent_id: str):
        for item in children_of(self.session.store, parent_id):
            node = self.AppendItem(parent_node, display_name(item))
            self.SetItemData(node, item.id)
            self._nodes[item.id] = node
            if item.kind == SEPARATOR:
                self.SetItemTextColour(node, SEPARATOR_COLOUR)
            else:
                colour = colour_from_hex(item.color)
                if colour is not None:
                    self.SetItemTextColour(node, colour)
            if item.kind == FOLDER:
                self.SetItemBold(node, True)
                self._add_children(node, item.id)
                if item.expanded:
                    self.Expand(node)
                else:
                    # Keep the expander visible on empty folders.
                    self.SetItemHasChildren(node, True)

    def _item_at(self, pos) -> tuple:
        """(item, node, flags) under a client position; item is None for empty space."""
        node, flags = self.HitTest(pos)
        if not node.IsOk():
            return None, None, flags
        item = self.session.store.by_id(self.GetItemData(node))
        return item, node, flags

    def show_item(self, item_id: str):
        node = self._nodes.get(item_id)
        if node is not None:
            self.EnsureVisible(node)
            self.SelectItem(node)

    # ---------- Expand / collapse ----------

    def _sync_expanded(self, evt, expanded: bool):
        if self._building:
            return
        item = self.session.store.by_id(self.GetItemData(evt.GetItem()))
        if item is not None and item.kind == FOLDER and item.expanded != expanded:
            # Let the native control finish before the rebuild.
            wx.CallAfter(self.session.toggle_folder, item.id)

    def _on_expanded(self, evt):
        self._sync_expanded(evt, True)

    def _on_collapsed(self, evt):
        self._sync_expanded(evt, False)

    # ---------- Click / keyboard ----------

    def _activate(self, item: Item):
        if item.kind == SNIPPET:
            self.on_run(item.id)
        elif item.kind == FOLDER:
            self.session.toggle_folder(item.id)

    def _on_left_up(self, evt: wx.MouseEvent):
        evt.Skip()
        if self._dragging:
            self._dragging = False
            return
        item, node, flags = self._item_at(evt.GetPosition())
        if item is None or not flags & (wx.TREE_HITTEST_ONITEMLABEL | wx.TREE_HITTEST_ONITEMICON):
            return
        Log.debug(f"Tree click, {item.id=}, {item.kind=}", 2)
        wx.CallAfter(self._activate, item)

    def _on_key_down(self, evt):
        key = evt.GetKeyCode()
        node = self.GetSelection()
        item = self.session.store.by_id(self.GetItemData(node)) if node.IsOk() else None
        if item is None:
            evt.Skip()
        elif key in (wx.WXK_RETURN, wx.WXK_NUMPAD_ENTER):
            self._activate(item)
        elif key == wx.WXK_DELETE:
            self.session.delete_item(item.id)
        elif key == wx.WXK_F2:
            self.edit(item)
        else:
            evt.Skip()

    def _on_motion(self, evt: wx.MouseEvent):
        evt.Skip()
        item, _node, _flags = self._item_at(evt.GetPosition())
        item_id = item.id if item is not None else None
        if item_id == self._tip_id:
            return
        self._tip_id = item_id
        tip = self._tooltip(item) if item is not None else None
        if tip:
            self.SetToolTip(tip)
        else:
            self.UnsetToolTip()

    def _tooltip(self, item: Item) -> Optional[str]:
        if item.kind != SNIPPET:
            return None
        if not self.session.settings.enable_rich_tooltips:
            return item.description or None
        parts = [item.command or ""]
        if item.description:
            parts.append(item.description)
        return "\n\n".join(parts)

    # ---------- Context menu ----------

    def _on_item_menu(self, evt):
        node = evt.GetItem()
        item = self.session.store.by_id(self.GetItemData(node)) if node.IsOk() else None
        if item is None:
            return
        menu = wx.Menu()

        def add(label: str, icon: str, handler):
            menu_item = wx.MenuItem(menu, wx.ID_ANY, label)
            bmp = wpIcons.Get(icon)
            if bmp:
                menu_item.SetBitmap(bmp)
            menu.Append(menu_item)
            menu.Bind(wx.EVT_MENU, lambda e: handler(item), menu_item)

        if item.kind == SNIPPET:
            add("Run", "run", lambda it: self.on_run(it.id))
            add("Copy Command", "copy", self._copy_command)
            menu.AppendSeparator()
        if item.kind != SEPARATOR:
            add("Edit...", "edit", self.edit)
            add("Set Color...", "color", self._set_color)
        add("Delete", "delete", lambda it: self.session.delete_item(it.id))

        self.PopupMenu(menu)
        menu.Destroy()

    def edit(self, item: Item):
        if item.kind == SNIPPET:
            values = edit_item_dialog(self, "Edit Snippet", item.name, item.command, item.description)
            if values is not None:
                self.session.edit_item(item.id, **values)
        elif item.kind == FOLDER:
            name = ask_text(self, "Folder name:", "Edit Folder", item.name)
            if name:
                self.session.rename_item(item.id, name)

    def _copy_command(self, item: Item):
        if not item.command:
            return
        try:
            Clipboard.copy_text(item.command)
        except RuntimeError as e:
            Log.debug(f"Copy failed: {e}", 0)
            self.session.notify(str(e))

    def _set_color(self, item: Item):
        choice = choose_color(self, item.color, is_container=item.kind == FOLDER)
        if choice is not None:
            color, recursive = choice
            self.session.set_color(item.id, color, recursive)

    # ---------- Drag and drop ----------

    def _on_begin_drag(self, evt):
        node = evt.GetItem()
        if not node.IsOk():
            return
        item_id = self.GetItemData(node)
        self._dragging = True
        start_item_drag(self, item_id)

    def _target(self, item_id: str, x: int, y: int) -> tuple:
        """(reference item, position) for a drop at x, y; (None, None) for empty space."""
        item, node, _flags = self._item_at((x, y))
        if item is None:
            return None, None
        rect = self.GetBoundingRect(node, textOnly=True)
        position = drop_position(item.kind == FOLDER, x, y, rect.x, rect.y, rect.height)
        return item, position

    def _accepts(self, dragged: Optional[Item], target: Optional[Item]) -> bool:
        if dragged is None or dragged.kind == TAB:
            return False
        if target is None:
            return True
        if target.id == dragged.id:
            return False
        return not (dragged.kind == FOLDER and is_descendant(self.session.store, dragged.id, target.id))

    def _highlight(self, node: Optional[wx.TreeItemId]):
        if self._drop_node is not None and self._drop_node.IsOk():
            self.SetItemDropHighlight(self._drop_node, False)
        self._drop_node = node
        if node is not None:
            self.SetItemDropHighlight(node, True)

    def _on_drag_over(self, item_id: str, x: int, y: int) -> bool:
        dragged = self.session.store.by_id(item_id)
        target, position = self._target(item_id, x, y)
        if not self._accepts(dragged, target):
            self._highlight(None)
            self.session.hover_leave()
            return False
        if target is None:
            self._highlight(None)
            self.session.hover_leave()
            return True
        self._highlight(self._nodes.get(target.id))
        if position == INSIDE:
            self.session.hover_folder(target.id)
        else:
            self.session.folder_hover.cancel()
        return True

    def _on_drag_leave(self):
        self._highlight(None)
        self.session.hover_leave()

    def _on_drop(self, item_id: str, x: int, y: int) -> bool:
        dragged = self.session.store.by_id(item_id)
        target, position = self._target(item_id, x, y)
        if not self._accepts(dragged, target):
            return False
        Log.debug(f"Dropped in tree, {item_id=}, target={target.id if target else None}, {position=}", 1)
        # Rebuilding inside the drop callback would pull the tree out from under wx.
        if target is None:
            wx.CallAfter(self.session.drop_on_content, item_id)
        else:
            wx.CallAfter(self.session.drop, item_id, target.id, position)
        return True
