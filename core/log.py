################################################################################################

'''

Copyright 2025 Aaron Vose (avose@aaronvose.net)

Licensed under the LGPL v2.1; see the file 'LICENSE' for details.

This file holds the code for the info / debug logger.

'''

################################################################################################

import inspect
import threading
from datetime import datetime

################################################################################################

def _now() -> str:
    return datetime.now().strftime("%m/%d/%Y %H:%M:%S")

class LogManager():
    __log = None
    __lock = threading.Lock()

    def __init__(self, verbosity: int = 0):
        if LogManager.__log is None:
            LogManager.__log = [(_now(), "Begin SnipPad Log")]
        self.verbosity = verbosity
        self.listeners = []

    def add(self, text: str):
        entry = (_now(), text)
        # The IO worker thread logs too.
        with LogManager.__lock:
            LogManager.__log.append(entry)
        for listener in list(self.listeners):
            listener(entry)

    def debug(self, text: str, level: int = 0):
        if self.verbosity >= level:
            stack = inspect.stack()
            if len(stack) > 1:
                filename = stack[1].filename.replace('\\', '/').split('/')[-1]
            else:
                filename = "unknown"
            self.add(f"[{filename}] {text}")

    def get(self, index: int = None):
        with LogManager.__lock:
            if index is not None:
                return LogManager.__log[index]
            return LogManager.__log.copy()

    def count(self):
        return len(LogManager.__log)

    def set_verbosity(self, verbosity: int = 0):
        self.verbosity = verbosity

    def clear(self):
        """Clear all log entries."""
        with LogManager.__lock:
            LogManager.__log.clear()
            LogManager.__log.append((_now(), "Log cleared"))

    def write_to_file(self, filepath: str) -> bool:
        """Write all log entries to a file. Returns True on success."""
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                for timestamp, message in self.get():
                    f.write(f"[{timestamp}] {message}\n")
        except OSError as e:
            self.add(f"Failed to write log to file '{filepath}': {e}")
            return False
        self.add(f"Log written to file: {filepath}")
        return True

################################################################################################

Log = LogManager()

################################################################################################
