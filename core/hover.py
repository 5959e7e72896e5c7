from __future__ import annotations

from typing import Callable, Optional

__all__ = [
    "FOLDER_EXPAND_DELAY_MS",
    "TAB_SWITCH_DELAY_MS",
    "Scheduler",
    "HoverIntent",
]

FOLDER_EXPAND_DELAY_MS = 600
TAB_SWITCH_DELAY_MS = 500

# schedule(delay_ms, fn) -> cancel function
Scheduler = Callable[[int, Callable[[], None]], Callable[[], None]]


class HoverIntent:
    """
    Delayed action for a drag hovering over one target (folder to expand,
    tab to open). Hovering a new target restarts the timer; leaving cancels
    it. When the timer fires the action runs once for the hovered target.
    """

    def __init__(self, delay_ms: int, schedule: Scheduler, action: Callable[[str], None]):
        self.delay_ms = delay_ms
        self._schedule = schedule
        self._action = action
        self._target: Optional[str] = None
        self._cancel: Optional[Callable[[], None]] = None

    @property
    def target(self) -> Optional[str]:
        """The target with a pending timer, if any."""
        return self._target

    def hover(self, target_id: str) -> None:
        if target_id == self._target:
            return
        self.cancel()
        self._target = target_id
        self._cancel = self._schedule(self.delay_ms, lambda: self._fire(target_id))

    def leave(self, target_id: Optional[str] = None) -> None:
        """Pointer left target_id (or everything, when None)."""
        if target_id is None or target_id == self._target:
            self.cancel()

    def cancel(self) -> None:
        cancel, self._cancel, self._target = self._cancel, None, None
        if cancel is not None:
            cancel()

    def _fire(self, target_id: str) -> None:
        # A timer that lost a cancel race must not act on a stale target.
        if target_id != self._target:
            return
        self._target = None
        self._cancel = None
        self._action(target_id)
