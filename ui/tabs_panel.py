'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import wx
import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from core.log import Log
from core.tree import ROOT_ID, TAB
from core.tree_utils import BEFORE, AFTER
from ui.constants import COLOR_PALETTE, DEFAULT_TAB_COLOR, TAB_LABEL_MAX, colour_from_hex
from ui.dialogs import ask_text, choose_color
from ui.drag_drop import ItemDropTarget, start_item_drag
from ui.icons import wpIcons
from utils.icon_tokens import render_icon_tokens

__all__ = ["TabInfo", "TabsPanel"]

TAB_WIDTH = 24
TAB_MIN_HEIGHT = 60
TAB_MAX_HEIGHT = 120
TAB_SPACING = 2
TAB_ANGLE = 5
ARROW_HEIGHT = 16
WHEEL_STEP = 32
DRAG_THRESHOLD = 4

PANEL_BG = wx.Colour(240, 240, 240)
ARROW_BG = wx.Colour(220, 220, 220)
ARROW_FG = wx.Colour(100, 100, 100)
OUTLINE = wx.Colour(120, 120, 120)
DROP_MARK = wx.Colour(0, 90, 200)


@dataclass
class TabInfo:
    entry_id: str
    display_text: str
    color: wx.Colour
    height: int = TAB_MIN_HEIGHT

    @classmethod
    def from_item(cls, item) -> 'TabInfo':
        """Paint data for a tab item (or the virtual root tab)."""
        text = render_icon_tokens(item.name) or item.name
        if len(text) > TAB_LABEL_MAX:
            text = text[:TAB_LABEL_MAX - 3] + "..."
        return cls(item.id, text, colour_from_hex(item.color, DEFAULT_TAB_COLOR))

    @property
    def is_root(self) -> bool:
        return self.entry_id == ROOT_ID


def _shade(colour: wx.Colour, shift: int) -> wx.Colour:
    return wx.Colour(*(max(0, min(255, c + shift)) for c in (colour.Red(), colour.Green(), colour.Blue())))


class TabsPanel(wx.Panel):
    """
    Vertical strip of file-folder tabs down the side of the snippet tree.

    Tab order and colors come from session.visible_tabs(); clicking a tab
    activates it. A real tab can be dragged along the strip to reorder it,
    and any other item dragged onto a tab moves there (hovering a tab for
    a moment during the drag switches to it).
    """

    def __init__(self, parent: wx.Window, session):
        super().__init__(parent)
        self.session = session
        self.tabs: List[TabInfo] = []
        self.selected = -1
        self.hovered = -1
        self.scroll_offset = 0
        self._press: Optional[Tuple[int, wx.Point]] = None
        self._drop_mark: Optional[Tuple[int, str]] = None
        self._menu_tab_id: Optional[str] = None

        base_font = self.GetFont()
        self.normal_font = base_font
        self.bold_font = wx.Font(base_font.GetPointSize(), base_font.GetFamily(),
                                 wx.FONTSTYLE_NORMAL, wx.FONTWEIGHT_BOLD)

        self.SetBackgroundStyle(wx.BG_STYLE_PAINT)
        self.SetDoubleBuffered(True)
        self.SetMinSize((TAB_WIDTH + 4, -1))

        self.Bind(wx.EVT_PAINT, self._on_paint)
        self.Bind(wx.EVT_LEFT_DOWN, self._on_left_down)
        self.Bind(wx.EVT_LEFT_UP, self._on_left_up)
        self.Bind(wx.EVT_RIGHT_DOWN, self._on_right_down)
        self.Bind(wx.EVT_MOTION, self._on_motion)
        self.Bind(wx.EVT_LEAVE_WINDOW, self._on_leave)
        self.Bind(wx.EVT_MOUSEWHEEL, self._on_wheel)
        self.Bind(wx.EVT_SIZE, self._on_size)

        self.SetDropTarget(ItemDropTarget(self, self._on_drag_over, self._on_drag_leave, self._on_drop))

    # ---------- Model ----------

    def refresh_tabs(self):
        """Rebuild the tab list from the session and repaint."""
        dc = wx.ClientDC(self)
        dc.SetFont(self.bold_font)
        self.tabs = []
        for item in self.session.visible_tabs():
            tab = TabInfo.from_item(item)
            # Text is drawn rotated, so its width sets the tab's height.
            text_width, _ = dc.GetTextExtent(tab.display_text)
            tab.height = max(TAB_MIN_HEIGHT, min(text_width + 20, TAB_MAX_HEIGHT))
            self.tabs.append(tab)

        active = self.session.active_view
        self.selected = next((i for i, t in enumerate(self.tabs) if t.entry_id == active), -1)
        if self.hovered >= len(self.tabs):
            self.hovered = -1
        self._clamp_scroll()
        self.Refresh()

    # ---------- Geometry ----------

    def _content_height(self) -> int:
        return sum(t.height + TAB_SPACING for t in self.tabs)

    def _scrollable(self) -> bool:
        return self._content_height() > self.GetClientSize().height

    def _visible_band(self) -> Tuple[int, int]:
        """(top, bottom) of the area tabs are drawn in, between the arrows if shown."""
        height = self.GetClientSize().height
        if self._scrollable():
            return ARROW_HEIGHT, height - ARROW_HEIGHT
        return 0, height

    def _layout(self) -> Iterator[Tuple[int, TabInfo, int]]:
        """Yield (index, tab, top) in client coordinates."""
        y = self._visible_band()[0] - self.scroll_offset
        for i, tab in enumerate(self.tabs):
            yield i, tab, y
            y += tab.height + TAB_SPACING

    def _tab_at(self, pos) -> int:
        """Index of the tab under pos, or -1."""
        top, bottom = self._visible_band()
        y = pos[1]
        if not top <= y <= bottom:
            return -1
        for i, tab, tab_top in self._layout():
            if tab_top <= y <= tab_top + tab.height:
                return i
        return -1

    def _tab_top(self, index: int) -> int:
        for i, _tab, top in self._layout():
            if i == index:
                return top
        return 0

    def _reorder_position(self, index: int, y: int) -> str:
        return BEFORE if y < self._tab_top(index) + self.tabs[index].height / 2 else AFTER

    # ---------- Painting ----------

    def _on_paint(self, evt: wx.PaintEvent):
        dc = wx.AutoBufferedPaintDC(self)
        gc = wx.GraphicsContext.Create(dc)
        if not gc:
            return

        size = self.GetClientSize()
        gc.SetBrush(wx.Brush(PANEL_BG))
        gc.DrawRectangle(0, 0, size.width, size.height)
        if self._scrollable():
            self._paint_arrows(gc, size)

        top, bottom = self._visible_band()
        gc.PushState()
        gc.Clip(0, top, size.width, bottom - top)
        for i, tab, tab_top in self._layout():
            if tab_top + tab.height < top:
                continue
            if tab_top > bottom:
                break
            self._paint_tab(gc, tab, tab_top, size.width, i == self.selected, i == self.hovered)
        gc.PopState()

        if self._drop_mark is not None:
            index, position = self._drop_mark
            y = self._tab_top(index)
            if position == AFTER:
                y += self.tabs[index].height + TAB_SPACING // 2
            gc.SetPen(wx.Pen(DROP_MARK, 2))
            gc.StrokeLine(0, y, size.width, y)

    def _paint_arrows(self, gc: wx.GraphicsContext, size: wx.Size):
        w, h = size.width, size.height
        gc.SetBrush(wx.Brush(ARROW_BG))
        gc.DrawRectangle(0, 0, w, ARROW_HEIGHT)
        gc.DrawRectangle(0, h - ARROW_HEIGHT, w, ARROW_HEIGHT)

        cx = w // 2
        gc.SetBrush(wx.Brush(ARROW_FG))
        gc.DrawLines([(cx, 3), (cx - 4, ARROW_HEIGHT - 3), (cx + 4, ARROW_HEIGHT - 3)])
        gc.DrawLines([(cx, h - 3), (cx - 4, h - ARROW_HEIGHT + 3), (cx + 4, h - ARROW_HEIGHT + 3)])

    def _tab_outline(self, gc: wx.GraphicsContext, x0: float, x1: float, y: float, height: float):
        path = gc.CreatePath()
        path.MoveToPoint(x0, y)
        path.AddLineToPoint(x1, y + TAB_ANGLE)
        path.AddLineToPoint(x1, y + height - TAB_ANGLE)
        path.AddLineToPoint(x0, y + height)
        path.CloseSubpath()
        return path

    def _paint_tab(self, gc: wx.GraphicsContext, tab: TabInfo, y: int, width: int,
                   selected: bool, hovered: bool):
        """Trapezoid tab, lighter when selected, darker when idle."""
        if selected:
            shift = 24
        elif hovered:
            shift = 0
        else:
            shift = -24
        gc.SetBrush(wx.Brush(_shade(tab.color, shift)))

        if selected:
            # Slightly larger fill behind the tab lifts it forward.
            gc.FillPath(self._tab_outline(gc, -1, width, y - 1, tab.height + 2))
        path = self._tab_outline(gc, 0, width - 1, y, tab.height)
        gc.FillPath(path)
        gc.SetPen(wx.Pen(OUTLINE, 1))
        gc.StrokePath(path)

        gc.SetFont(self.bold_font if selected else self.normal_font, wx.BLACK)
        gc.PushState()
        gc.Translate(width // 2, y + tab.height // 2)
        gc.Rotate(math.radians(90))
        text_width, text_height = gc.GetTextExtent(tab.display_text)
        gc.DrawText(tab.display_text, -text_width // 2, -text_height // 2)
        gc.PopState()

    # ---------- Mouse ----------

    def _on_left_down(self, evt: wx.MouseEvent):
        pos = evt.GetPosition()
        if self._scrollable():
            height = self.GetClientSize().height
            if pos.y <= ARROW_HEIGHT:
                self._scroll_tabs(-1)
                return
            if pos.y >= height - ARROW_HEIGHT:
                self._scroll_tabs(1)
                return

        index = self._tab_at(pos)
        if index >= 0:
            self._press = (index, pos)
            tab_id = self.tabs[index].entry_id
            Log.debug(f"Tab clicked, {tab_id=}", 2)
            self.session.activate(tab_id)
        evt.Skip()

    def _on_left_up(self, evt: wx.MouseEvent):
        self._press = None
        evt.Skip()

    def _on_motion(self, evt: wx.MouseEvent):
        pos = evt.GetPosition()
        if self._press is not None and evt.Dragging() and evt.LeftIsDown():
            index, start = self._press
            if abs(pos.x - start.x) + abs(pos.y - start.y) >= DRAG_THRESHOLD:
                self._press = None
                if index < len(self.tabs) and not self.tabs[index].is_root:
                    start_item_drag(self, self.tabs[index].entry_id)
                return
        self._set_hovered(self._tab_at(pos))

    def _on_leave(self, evt: wx.MouseEvent):
        self._set_hovered(-1)

    def _set_hovered(self, index: int):
        if index != self.hovered:
            self.hovered = index
            self.Refresh()

    # ---------- Scrolling ----------

    def _on_size(self, evt: wx.SizeEvent):
        self._clamp_scroll()
        evt.Skip()

    def _on_wheel(self, evt: wx.MouseEvent):
        if self._scrollable():
            self._scroll_by(-evt.GetWheelRotation() // evt.GetWheelDelta() * WHEEL_STEP)

    def _scroll_tabs(self, direction: int):
        """Arrow click: move by one average tab."""
        if self.tabs:
            self._scroll_by(direction * (self._content_height() // len(self.tabs)))

    def _scroll_by(self, delta: int):
        self.scroll_offset += delta
        self._clamp_scroll()
        self.Refresh()

    def _clamp_scroll(self):
        if not self._scrollable():
            self.scroll_offset = 0
            return
        room = self.GetClientSize().height - 2 * ARROW_HEIGHT
        self.scroll_offset = max(0, min(self._content_height() - room, self.scroll_offset))

    # ---------- Context menu ----------

    def _on_right_down(self, evt: wx.MouseEvent):
        pos = evt.GetPosition()
        index = self._tab_at(pos)
        if index < 0 or self.tabs[index].is_root:
            return
        self._menu_tab_id = self.tabs[index].entry_id

        menu = wx.Menu()
        self._menu_item(menu, "Rename Tab", "tab_edit", self._on_rename)
        self._menu_item(menu, "Delete Tab", "tab_delete", self._on_delete)
        menu.AppendSeparator()

        colors = wx.Menu()
        for name, value in COLOR_PALETTE:
            swatch = wx.MenuItem(colors, wx.ID_ANY, name)
            swatch.SetBitmap(self._swatch(colour_from_hex(value)))
            colors.Append(swatch)
            colors.Bind(wx.EVT_MENU, lambda e, v=value: self.session.set_color(self._menu_tab_id, v), swatch)
        colors.AppendSeparator()
        more = colors.Append(wx.ID_ANY, "More...")
        colors.Bind(wx.EVT_MENU, self._on_more_colors, more)
        menu.AppendSubMenu(colors, "Tab Color")

        self.PopupMenu(menu, pos)
        menu.Destroy()

    def _menu_item(self, menu: wx.Menu, label: str, icon: str, handler):
        item = wx.MenuItem(menu, wx.ID_ANY, label)
        bmp = wpIcons.Get(icon)
        if bmp:
            item.SetBitmap(bmp)
        menu.Append(item)
        menu.Bind(wx.EVT_MENU, handler, item)

    def _swatch(self, colour: wx.Colour, size: int = 16) -> wx.Bitmap:
        bitmap = wx.Bitmap(size, size)
        dc = wx.MemoryDC(bitmap)
        dc.SetBrush(wx.Brush(colour))
        dc.SetPen(wx.Pen(OUTLINE, 1))
        dc.DrawRectangle(0, 0, size, size)
        dc.SelectObject(wx.NullBitmap)
        return bitmap

    def _menu_tab(self):
        return self.session.store.by_id(self._menu_tab_id) if self._menu_tab_id else None

    def _on_rename(self, evt):
        tab = self._menu_tab()
        if tab is None:
            return
        new_name = ask_text(self, "Enter new tab name:", "Rename Tab", tab.name)
        Log.debug(f"Rename tab, {tab.id=}, {new_name=}", 1)
        if new_name:
            self.session.rename_item(tab.id, new_name)

    def _on_delete(self, evt):
        Log.debug(f"Delete tab, {self._menu_tab_id=}", 1)
        self.session.delete_item(self._menu_tab_id)

    def _on_more_colors(self, evt):
        tab = self._menu_tab()
        if tab is None:
            return
        choice = choose_color(self, tab.color)
        if choice is not None:
            self.session.set_color(tab.id, choice[0])

    # ---------- Drag and drop ----------

    def _set_drop_mark(self, mark: Optional[Tuple[int, str]]):
        if self._drop_mark != mark:
            self._drop_mark = mark
            self.Refresh()

    def _on_drag_over(self, item_id: str, x: int, y: int) -> bool:
        index = self._tab_at((x, y))
        dragged = self.session.store.by_id(item_id)
        if index < 0 or dragged is None:
            self._set_drop_mark(None)
            self.session.hover_leave()
            return False

        target = self.tabs[index]
        if dragged.kind == TAB:
            # Tabs only reorder among themselves; the root tab stays first.
            if target.is_root or target.entry_id == item_id:
                self._set_drop_mark(None)
                return False
            self._set_drop_mark((index, self._reorder_position(index, y)))
            return True

        self._set_drop_mark(None)
        self._set_hovered(index)
        self.session.hover_tab(target.entry_id)
        return True

    def _on_drag_leave(self):
        self._set_drop_mark(None)
        self.session.hover_leave()

    def _on_drop(self, item_id: str, x: int, y: int) -> bool:
        self._set_drop_mark(None)
        index = self._tab_at((x, y))
        dragged = self.session.store.by_id(item_id)
        if index < 0 or dragged is None:
            return False
        target = self.tabs[index]
        Log.debug(f"Dropped on tab, {item_id=}, target={target.entry_id}", 1)
        if dragged.kind == TAB:
            if target.is_root or target.entry_id == item_id:
                return False
            wx.CallAfter(self.session.drop, item_id, target.entry_id, self._reorder_position(index, y))
        else:
            wx.CallAfter(self.session.drop_on_tab, item_id, target.entry_id)
        return True
