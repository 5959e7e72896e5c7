from __future__ import annotations

from typing import Callable, Optional

import wx

from core.log import Log

__all__ = ["DRAG_PREFIX", "start_item_drag", "dragged_item_id", "ItemDropTarget"]

# Text payload of an internal drag: prefix + item id.
DRAG_PREFIX = "snippad-item:"

# Drop targets only see the payload on drop, so the id being dragged is
# also kept here for OnDragOver feedback.
_current_drag: Optional[str] = None


def dragged_item_id() -> Optional[str]:
    return _current_drag


def start_item_drag(source: wx.Window, item_id: str) -> int:
    """Run a modal drag of `item_id`; returns the wx drag result."""
    global _current_drag
    data = wx.TextDataObject(DRAG_PREFIX + item_id)
    drop_source = wx.DropSource(source)
    drop_source.SetData(data)
    _current_drag = item_id
    Log.debug(f"Drag started, {item_id=}", 2)
    try:
        return drop_source.DoDragDrop(wx.Drag_DefaultMove)
    finally:
        _current_drag = None


class ItemDropTarget(wx.TextDropTarget):
    """
    Drop target for items dragged out of the tree or the tab strip.
    Text from other applications is refused.

    on_over(item_id, x, y) -> bool   pointer moved; True if a drop here is allowed
    on_leave()                       pointer left the window
    on_drop(item_id, x, y) -> bool   item released
    """
    def __init__(self, window: wx.Window,
                 on_over: Callable[[str, int, int], bool],
                 on_leave: Callable[[], None],
                 on_drop: Callable[[str, int, int], bool]):
        super().__init__()
        self.window = window
        self.on_over = on_over
        self.on_leave = on_leave
        self.on_drop = on_drop

    def OnDragOver(self, x, y, defResult):
        item_id = _current_drag
        if item_id is None:
            return wx.DragNone
        return wx.DragMove if self.on_over(item_id, x, y) else wx.DragNone

    def OnEnter(self, x, y, defResult):
        return self.OnDragOver(x, y, defResult)

    def OnLeave(self):
        self.on_leave()

    def OnDropText(self, x, y, text):
        if not text.startswith(DRAG_PREFIX):
            return False
        item_id = text[len(DRAG_PREFIX):]
        self.on_leave()
        return bool(self.on_drop(item_id, x, y))
