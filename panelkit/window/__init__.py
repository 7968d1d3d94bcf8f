# panelkit/window/__init__.py
# PySide6 backed host, scheduler and remote bridge. Importing this package requires PySide6.
from .qt_host import QtHost, QtPanel
from .bridge import RemoteBridge, evaluate_module_source
from .scheduler import QtScheduler

__all__ = ["QtHost", "QtPanel", "RemoteBridge", "evaluate_module_source", "QtScheduler"]
