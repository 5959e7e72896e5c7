# app.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
import sys
import traceback
import wx

from core.log import Log

def on_exception(exc_type, exc_value, exc_traceback):
    """Route unhandled exceptions to the status bar and the log instead of a silent failure."""
    if issubclass(exc_type, KeyboardInterrupt):
        # Allow Ctrl+C to work normally
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    tb_lines = traceback.format_exception(exc_type, exc_value, exc_traceback)
    tb_text = ''.join(tb_lines)
    error_message = f"!ERROR! Unhandled Exception:\n{tb_text}"

    Log.debug(error_message, 0)
    app = wx.GetApp()
    main_frame = app.GetTopWindow() if app else None
    if main_frame is not None and hasattr(main_frame, 'SetStatusText'):
        # The status bar shows one line; the full traceback is in the log.
        main_frame.SetStatusText(f"Error: {exc_type.__name__}: {exc_value}")
    else:
        print(error_message, file=sys.stderr)

if tuple(getattr(wx, 'VERSION', (0,0,0))[:3]) < (4, 2, 3):
    raise RuntimeError(f"SnipPad requires wxPython ≥ 4.2.3; found {wx.__version__}")

from ui.main_frame import MainFrame

def main(state_dir, config_path: str = "", verbosity: int = 0, stdexp: bool = False):
    # Install the exception handler
    if not stdexp:
        sys.excepthook = on_exception

    app = wx.App(False)

    frame = MainFrame(state_dir, config_path=config_path, verbosity=verbosity)
    frame.Show()

    return app.MainLoop()
