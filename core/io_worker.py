# core/io_worker.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
import threading
import queue
import traceback

from core.log import Log

def _call_now(fn, *args):
    fn(*args)

class IOWorker:
    """Single background thread for file/IO tasks. GUI stays in the main thread."""

    def __init__(self, call_after=None):
        # call_after(fn, *args) hands callbacks back to the GUI thread (wx.CallAfter).
        self._call_after = call_after or _call_now
        self._q = queue.Queue()
        self._t = threading.Thread(target=self._run, name="IOWorker", daemon=True)
        self._t.start()

    def submit(self, fn, *args, callback=None, **kwargs):
        """Queue a task; callback(result, error) runs through call_after."""
        self._q.put((fn, args, kwargs, callback))

    def flush(self):
        """Block until every queued task has run."""
        self._q.join()

    def _run(self):
        """Background thread main loop."""
        while True:
            fn, args, kwargs, cb = self._q.get()
            result = None
            err = None

            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                err = (e, traceback.format_exc())

            try:
                if cb:
                    self._call_after(cb, result, err)
                elif err is not None:
                    # No callback provided; keep the traceback in the log.
                    Log.debug(err[1], 0)
            except Exception:
                # A callback run in place must not take the worker down.
                Log.debug(traceback.format_exc(), 0)
            finally:
                self._q.task_done()
