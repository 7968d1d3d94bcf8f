# panelkit/watcher.py

"""
Periodic driver that turns a polled host state into transition callbacks.

The host exposes its current state (a game phase, a connection status...)
only through a getter. ``StateWatcher`` polls it once per scheduler tick and
runs the callbacks registered for a state the first time the host enters it
after being somewhere else.
"""

import logging
from typing import Any, Callable, Dict, Hashable, List, Optional

from .utils import deep_get_or_set

logger = logging.getLogger(__name__)


class Scheduler:
    """Re-arm primitive: run ``callback`` after ``delay`` seconds on the UI thread."""

    def schedule(self, delay: float, callback: Callable[[], Any]) -> None:
        raise NotImplementedError(f"{self.__class__.__name__} must implement schedule()")


class ManualScheduler(Scheduler):
    """A scheduler that only runs callbacks when told to. Used in tests and scripts."""

    def __init__(self):
        self.queue: List[Callable[[], Any]] = []

    def schedule(self, delay: float, callback: Callable[[], Any]) -> None:
        self.queue.append(callback)

    def tick(self) -> int:
        """Run the callbacks scheduled so far. Returns how many ran."""
        due, self.queue = self.queue, []
        for callback in due:
            callback()
        return len(due)


class StateWatcher:
    """
    :param get_state: Returns the host's current state.
    :param scheduler: Used to re-arm ``think`` after every tick.
    :param interval: Delay between ticks in seconds (0 means "next frame").
    """

    def __init__(self, get_state: Callable[[], Hashable], scheduler: Scheduler, interval: float = 0):
        self.get_state = get_state
        self.scheduler = scheduler
        self.interval = interval
        self._state: Optional[Hashable] = None
        self._callbacks: Dict[Hashable, List[Callable[[], Any]]] = {}
        self._running = False

    @property
    def state(self) -> Optional[Hashable]:
        return self._state

    def on_state(self, state: Hashable, callback: Callable[[], Any]) -> None:
        deep_get_or_set(self._callbacks, state, default=[]).append(callback)

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self.think()

    def stop(self) -> None:
        self._running = False

    def think(self) -> None:
        if not self._running:
            return

        state = self.get_state()
        if state != self._state:
            logger.debug("State changed: %r -> %r", self._state, state)
            self._state = state
            for callback in list(self._callbacks.get(state, ())):
                try:
                    callback()
                except Exception:
                    logger.exception("State callback for %r failed", state)

        self.scheduler.schedule(self.interval, self.think)
