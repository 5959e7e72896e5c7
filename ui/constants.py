'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
import wx

# Shared UI constants
PADDING = 4
DEFAULT_TAB_COLOR = wx.Colour(200, 200, 200)

# Tab names longer than this are shortened for painting.
TAB_LABEL_MAX = 15

# Named colors offered by the color menus; stored on items as hex.
COLOR_PALETTE = [
    ("Gray", "#c8c8c8"),
    ("Red", "#ff6464"),
    ("Orange", "#ffa500"),
    ("Yellow", "#ffff64"),
    ("Green", "#64ff64"),
    ("Blue", "#6496ff"),
    ("Purple", "#c864ff"),
    ("Pink", "#ff96c8"),
    ("Cyan", "#64ffff"),
    ("Teal", "#64c8c8"),
]

def colour_from_hex(value, default=None):
    """wx.Colour for a '#rrggbb' string, or `default` when unset or unparsable."""
    if not value:
        return default
    colour = wx.Colour()
    if not colour.Set(value):
        return default
    return colour
