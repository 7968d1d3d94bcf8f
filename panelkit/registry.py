# panelkit/registry.py

"""
Module registry shared by independently loaded UI fragments.

A module is a named capability table (a plain dict). Fragments ``export``
what they provide and ``import_`` what they need. Importing a name nobody has
exported yet asks a remote authority for it and hands back the still-empty
table right away; the table fills in place once the payload arrives, so the
reference the importer holds stays good.

``ready(callback)`` is the barrier: the callback runs as soon as no import is
outstanding, immediately if that is already the case.

Example::

    registry = ModuleRegistry(requester=bridge)
    basic = registry.import_("basis/basic")      # may still be empty
    registry.ready(lambda: basic["create_panels"](...))
"""

import enum
import logging
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Set

logger = logging.getLogger(__name__)

CapabilityTable = Dict[str, Any]


class ModuleState(enum.Enum):
    UNREGISTERED = "unregistered"
    PENDING_REMOTE = "pending_remote"
    READY = "ready"


class ModuleRequester:
    """Something that can ask the remote authority for a module by name."""

    def request_module(self, name: str) -> None:
        raise NotImplementedError(f"{self.__class__.__name__} must implement request_module()")


class ModuleRegistry:
    """
    Process-scoped namespace of capability tables.

    :param requester: Remote authority used for imports of unknown modules.
        Without one, such imports stay pending until something exports the
        module and calls ``module_ready``.
    """

    def __init__(self, requester: Optional[ModuleRequester] = None):
        self.requester = requester
        self._modules: Dict[str, CapabilityTable] = {}
        self._pending: Set[str] = set()
        self._ready_callbacks: List[Callable[[], Any]] = []

    # --- exports / imports ---

    def export(self, name: str, table: Optional[Mapping[str, Any]] = None) -> CapabilityTable:
        """
        Add the keys of ``table`` to module ``name``, creating it on first use.

        Keys already in the module and absent from ``table`` are kept; matching
        keys are overwritten. The module's dict is never replaced.
        """
        module = self._modules.setdefault(name, {})
        if table is not None and table is not module:
            module.update(table)
        logger.debug("Exported module %r (%d names)", name, len(module))
        return module

    def import_(self, name: str) -> CapabilityTable:
        """
        Return the table of module ``name`` without ever blocking.

        Unknown modules are created empty, marked pending and requested from
        the remote authority.
        """
        module = self._modules.get(name)
        if module is not None:
            return module

        module = self._modules[name] = {}
        self._pending.add(name)
        logger.debug("Module %r not registered locally, requesting it", name)
        if self.requester is not None:
            self.requester.request_module(name)
        return module

    def module_ready(self, name: str) -> None:
        """Mark the remote payload of ``name`` as registered."""
        self._pending.discard(name)
        if not self._pending:
            self._drain()

    def ready(self, callback: Callable[[], Any]) -> None:
        """Run ``callback`` once no import is outstanding."""
        if not self._pending:
            callback()
        else:
            self._ready_callbacks.append(callback)

    # --- introspection ---

    def state(self, name: str) -> ModuleState:
        if name in self._pending:
            return ModuleState.PENDING_REMOTE
        if name in self._modules:
            return ModuleState.READY
        return ModuleState.UNREGISTERED

    @property
    def pending(self) -> FrozenSet[str]:
        return frozenset(self._pending)

    @property
    def is_ready(self) -> bool:
        return not self._pending

    def names(self) -> List[str]:
        return list(self._modules)

    def get(self, name: str) -> Optional[CapabilityTable]:
        """The table of ``name`` if it exists, without requesting anything."""
        return self._modules.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def _drain(self) -> None:
        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Ready callback %r failed", callback)
