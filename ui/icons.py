################################################################################################
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.

This file holds the code for looking up toolbar and menu icons.
'''
################################################################################################

import wx

################################################################################################

# Icon name -> stock art id.
ART_IDS = {
    "snippet_add":    wx.ART_NEW,
    "smart_add":      wx.ART_EXECUTABLE_FILE,
    "folder_add":     wx.ART_NEW_DIR,
    "tab_add":        wx.ART_ADD_BOOKMARK,
    "separator_add":  wx.ART_MINUS,
    "edit":           wx.ART_EDIT,
    "delete":         wx.ART_DELETE,
    "tab_edit":       wx.ART_EDIT,
    "tab_delete":     wx.ART_DEL_BOOKMARK,
    "search":         wx.ART_FIND,
    "history":        wx.ART_LIST_VIEW,
    "mode":           wx.ART_GO_FORWARD,
    "expand_all":     wx.ART_PLUS,
    "open":           wx.ART_FILE_OPEN,
    "save_as":        wx.ART_FILE_SAVE_AS,
    "run":            wx.ART_GO_FORWARD,
    "copy":           wx.ART_COPY,
    "color":          wx.ART_TIP,
    "quit":           wx.ART_QUIT,
    "info":           wx.ART_INFORMATION,
}

ICON_SIZE = (16, 16)

class wpIconManager:
    """
    Lazy icon manager:
      - Does NOT create bitmaps at import time (safe before wx.App exists).
      - Looks names up in ART_IDS and caches the resulting bitmaps.
    """
    __icons = {}

    def Get(self, name):
        bmp = wpIconManager.__icons.get(name)
        if bmp is not None:
            return bmp
        art_id = ART_IDS.get(name)
        if art_id is None:
            return None
        bmp = wx.ArtProvider.GetBitmap(art_id, wx.ART_TOOLBAR, ICON_SIZE)
        if not bmp.IsOk():
            return None
        wpIconManager.__icons[name] = bmp
        return bmp

################################################################################################

# Create a shared instance, but lookups are deferred until first Get()
wpIcons = wpIconManager()

################################################################################################
