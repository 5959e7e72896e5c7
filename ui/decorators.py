'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from functools import wraps

from core.dispatch import LOCKED_MESSAGE

def check_locked(method):
    """Decorator to skip a run action while execution is locked, telling the user why."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        if self.is_locked():
            self.show_status(LOCKED_MESSAGE)
            return None
        return method(self, *args, **kwargs)
    return wrapper
