# panelkit/window/scheduler.py
from typing import Any, Callable

from PySide6.QtCore import QTimer

from ..watcher import Scheduler


class QtScheduler(Scheduler):
    """Runs callbacks from the Qt event loop via single-shot timers."""

    def schedule(self, delay: float, callback: Callable[[], Any]) -> None:
        QTimer.singleShot(int(delay * 1000), callback)
