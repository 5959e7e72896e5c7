'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from typing import Callable, Dict, Optional

from core.args import PromptFn, ArgumentSession, drive, extract_placeholders
from core.history import COMMAND, CommandHistory
from core.log import Log
from core.settings import TERMINAL, EDITOR, LOCKED, Settings

__all__ = [
    "LOCKED_MESSAGE",
    "LAST_VALUES_LIMIT",
    "SinkError",
    "DispatchOutcome",
    "Dispatcher",
]

LOCKED_MESSAGE = "Execution is locked"

# Commands whose last argument values are kept for prompt defaults.
LAST_VALUES_LIMIT = 50

# A sink receives the final command text.
Sink = Callable[[str], None]


class SinkError(Exception):
    """The terminal or editor could not take the command"""
    pass


class DispatchOutcome:
    LOCKED = "locked"
    CANCELLED = "cancelled"
    DISPATCHED = "dispatched"
    FAILED = "failed"


class Dispatcher:
    """
    Runs a snippet command: argument prompts, history, then exactly one of
    the terminal sink, the editor sink, or nothing (locked mode).
    """

    def __init__(
        self,
        settings: Callable[[], Settings],
        history: CommandHistory,
        terminal: Optional[Sink] = None,
        editor: Optional[Sink] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self._settings = settings
        self.history = history
        self.sinks: Dict[str, Optional[Sink]] = {TERMINAL: terminal, EDITOR: editor}
        self.notify = notify or (lambda msg: None)
        # raw command -> {placeholder id: last value}
        self._last_values: Dict[str, Dict[int, str]] = {}

    def set_sink(self, mode: str, sink: Optional[Sink]) -> None:
        if mode not in self.sinks:
            raise ValueError(f"No sink slot for mode {mode!r}")
        self.sinks[mode] = sink

    def last_values(self, command: str) -> Dict[int, str]:
        return dict(self._last_values.get(command, {}))

    def forget(self, command: Optional[str]) -> None:
        """Drop the remembered argument values of a command."""
        self._last_values.pop(command, None)

    def _remember(self, command: str, values: Dict[int, str]) -> None:
        # Most recently used last; the oldest commands fall off the front.
        self._last_values.pop(command, None)
        self._last_values[command] = dict(values)
        while len(self._last_values) > LAST_VALUES_LIMIT:
            del self._last_values[next(iter(self._last_values))]

    def execute(self, command: str, prompt: PromptFn) -> str:
        """
        Resolve and dispatch. Returns a DispatchOutcome value. Nothing is
        recorded or sent when locked or when any prompt is cancelled.
        """
        settings = self._settings()
        mode = settings.execution_mode
        if mode == LOCKED:
            Log.debug("execute(): locked", 1)
            self.notify(LOCKED_MESSAGE)
            return DispatchOutcome.LOCKED

        session = drive(ArgumentSession(command, self._last_values.get(command)), prompt)
        if session.cancelled:
            Log.debug(f"execute(): cancelled after {len(session.values)} argument(s)", 1)
            return DispatchOutcome.CANCELLED

        final_cmd = session.result
        if extract_placeholders(command):
            self._remember(command, session.values)

        self.history.record(COMMAND, final_cmd, settings.command_history_limit)

        sink = self.sinks.get(mode)
        if sink is None:
            self.notify(f"No {mode} available to receive the command")
            Log.debug(f"execute(): no sink for {mode=}", 0)
            return DispatchOutcome.FAILED
        try:
            sink(final_cmd)
        except SinkError as e:
            self.notify(str(e))
            Log.debug(f"execute(): {mode} sink failed: {e}", 0)
            return DispatchOutcome.FAILED

        Log.debug(f"execute(): sent to {mode}: {final_cmd!r}", 1)
        return DispatchOutcome.DISPATCHED
