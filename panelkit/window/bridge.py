# panelkit/window/bridge.py

"""
Qt side of the remote-authority protocol.

Outgoing: ``moduleRequested(token, name)`` is emitted whenever the registry
needs a module it does not have. Whatever transport the application uses
(a QWebChannel, a socket, a game event bus) forwards it to the authority.

Incoming: the authority answers through one of the slots below with the
same token. The module is exported into the registry and marked ready,
which may release ``ready`` callbacks. Messages carrying another session's
token are dropped.
"""

import json
import logging
from typing import Any, Dict

from PySide6.QtCore import QObject, Signal, Slot

from ..exceptions import ModulePayloadError
from ..registry import ModuleRegistry

logger = logging.getLogger(__name__)


def evaluate_module_source(name: str, source: str) -> Dict[str, Any]:
    """
    Run module source in a fresh namespace and collect its capability table:
    the names listed in ``__all__`` or, without it, every public name.

    The authority is trusted; this executes arbitrary Python.
    """
    namespace: Dict[str, Any] = {"__name__": name}
    try:
        code = compile(source, f"<remote module {name}>", "exec")
        exec(code, namespace)
    except Exception as exc:
        raise ModulePayloadError(name, f"{type(exc).__name__}: {exc}") from exc

    exported = namespace.get("__all__")
    if exported is not None:
        return {key: namespace[key] for key in exported if key in namespace}
    return {key: value for key, value in namespace.items() if not key.startswith("_")}


class RemoteBridge(QObject):
    """
    Implements the registry's ``request_module`` hook on top of Qt signals.

    :param registry: Registry the received modules are exported into.
    :param session_token: Correlates requests and answers of this UI client.
    """

    moduleRequested = Signal(str, str)

    def __init__(self, registry: ModuleRegistry, session_token: str = ""):
        super().__init__()
        self.registry = registry
        self.session_token = session_token
        if registry.requester is None:
            registry.requester = self

    def request_module(self, name: str) -> None:
        logger.debug("📡 Requesting module %r", name)
        self.moduleRequested.emit(self.session_token, name)

    @Slot(str, str, str)
    def onModuleSource(self, token: str, name: str, source: str) -> None:
        """Payload is Python source defining the module's capabilities."""
        if not self._accepts(token, name):
            return
        try:
            table = evaluate_module_source(name, source)
        except ModulePayloadError:
            logger.exception("Could not load remote module %r", name)
            return
        self._register(name, table)

    @Slot(str, str, str)
    def onModuleData(self, token: str, name: str, payload: str) -> None:
        """Payload is a JSON object used as the capability table."""
        if not self._accepts(token, name):
            return
        try:
            table = json.loads(payload)
        except ValueError:
            logger.exception("Remote module %r is not valid JSON", name)
            return
        if not isinstance(table, dict):
            logger.error("Remote module %r is not a JSON object", name)
            return
        self._register(name, table)

    def _accepts(self, token: str, name: str) -> bool:
        if token != self.session_token:
            logger.debug("Ignoring module %r for session %r", name, token)
            return False
        return True

    def _register(self, name: str, table: Dict[str, Any]) -> None:
        self.registry.export(name, table)
        self.registry.module_ready(name)
        logger.info("✅ Remote module %r ready (%d names)", name, len(table))
