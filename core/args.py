'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional

__all__ = [
    "PLACEHOLDER_RE",
    "Placeholder",
    "PromptFn",
    "ArgumentSession",
    "make_placeholder",
    "has_placeholders",
    "extract_placeholders",
    "substitute",
    "drive",
    "resolve",
]

# Inline argument token:
#   {{arg$<digits>:<label up to the first '}'>}}
PLACEHOLDER_RE = re.compile(r"\{\{arg\$(\d+):([^}]+)\}\}")

# prompt(label, default) -> value, or None when the user cancels.
PromptFn = Callable[[str, Optional[str]], Optional[str]]


@dataclass(slots=True, frozen=True)
class Placeholder:
    id: int
    label: str


def make_placeholder(arg_id: int, label: str) -> str:
    """Build a token. Labels may not contain '}'."""
    if "}" in label or not label:
        raise ValueError("placeholder label must be non-empty and may not contain '}'")
    if arg_id < 0:
        raise ValueError("placeholder id must be a non-negative integer")
    return f"{{{{arg${arg_id}:{label}}}}}"


def has_placeholders(command: Optional[str]) -> bool:
    """True for a smart snippet."""
    return bool(command) and PLACEHOLDER_RE.search(command) is not None


def extract_placeholders(command: Optional[str]) -> List[Placeholder]:
    """
    Every distinct placeholder id in `command`, sorted by numeric id.
    When an id repeats, the label of its first occurrence wins.
    """
    seen: Dict[int, Placeholder] = {}
    for m in PLACEHOLDER_RE.finditer(command or ""):
        arg_id = int(m.group(1))
        if arg_id not in seen:
            seen[arg_id] = Placeholder(arg_id, m.group(2))
    return sorted(seen.values(), key=lambda p: p.id)


def substitute(command: str, values: Mapping[int, str]) -> str:
    """
    Replace every token whose id has a value. Tokens without a value are
    left exactly as written. An empty string is a value.
    """
    def _repl(m: re.Match) -> str:
        value = values.get(int(m.group(1)))
        return m.group(0) if value is None else value

    return PLACEHOLDER_RE.sub(_repl, command)


class ArgumentSession:
    """
    One pass of argument collection, as an explicit state machine:

        AWAITING(placeholder 1) -> ... -> AWAITING(placeholder n) -> DONE
                       \\______________ cancel() ______________/-> CANCELLED

    The caller reads `pending`, asks the user, then calls submit(value) or
    cancel(). Only one placeholder is ever outstanding, so later prompts
    cannot run before earlier ones are answered. `result` is the resolved
    command once DONE and None otherwise; a cancelled session never exposes
    a partially substituted command.
    """

    AWAITING = "awaiting"
    DONE = "done"
    CANCELLED = "cancelled"

    def __init__(self, command: str, previous: Optional[Mapping[int, str]] = None):
        self.command = command or ""
        self.placeholders = extract_placeholders(self.command)
        self.previous: Dict[int, str] = dict(previous or {})
        self.values: Dict[int, str] = {}
        self._index = 0
        self._result: Optional[str] = None
        self.state = self.AWAITING
        self._advance()

    @property
    def pending(self) -> Optional[Placeholder]:
        """The placeholder awaiting a value, or None when finished."""
        if self.state != self.AWAITING:
            return None
        return self.placeholders[self._index]

    @property
    def pending_default(self) -> Optional[str]:
        """Value entered for the pending placeholder last time, if any."""
        pending = self.pending
        return None if pending is None else self.previous.get(pending.id)

    @property
    def finished(self) -> bool:
        return self.state != self.AWAITING

    @property
    def cancelled(self) -> bool:
        return self.state == self.CANCELLED

    @property
    def result(self) -> Optional[str]:
        return self._result

    def submit(self, value: str) -> None:
        if self.state != self.AWAITING:
            raise RuntimeError(f"No placeholder is awaiting a value (state={self.state})")
        if value is None:
            raise ValueError("use cancel() to abort; None is not a value")
        self.values[self.placeholders[self._index].id] = value
        self._index += 1
        self._advance()

    def cancel(self) -> None:
        if self.state == self.AWAITING:
            self.state = self.CANCELLED
            self.values.clear()

    def _advance(self) -> None:
        if self._index >= len(self.placeholders):
            self._result = substitute(self.command, self.values)
            self.state = self.DONE


def drive(session: ArgumentSession, prompt: PromptFn) -> ArgumentSession:
    """Answer a session from a blocking prompt function until it finishes."""
    while not session.finished:
        value = prompt(session.pending.label, session.pending_default)
        if value is None:
            session.cancel()
        else:
            session.submit(value)
    return session


def resolve(command: str, prompt: PromptFn,
            previous: Optional[Mapping[int, str]] = None) -> Optional[str]:
    """
    Prompt for each placeholder in id order, one at a time, and return the
    substituted command. Returns None as soon as any prompt is cancelled;
    no further prompts are made. A command without placeholders comes back
    unchanged without prompting.
    """
    return drive(ArgumentSession(command, previous), prompt).result
