# panelkit/utils.py

"""Small helpers for digging through nested dicts and panel hierarchies."""

from typing import Any, Callable, Hashable, Iterable, MutableMapping, Optional, TypeVar

from .host import Panel

T = TypeVar("T")


def first_defined(*values: Any) -> Any:
    """The first argument that is not ``None`` (``None`` if there is none)."""
    return next((value for value in values if value is not None), None)


def deep_get(source: Any, *keys: Hashable) -> Any:
    """
    Follow ``keys`` into nested mappings; ``None`` as soon as a step is missing.

    >>> deep_get({"a": {"b": 1}}, "a", "b")
    1
    """
    current = source
    for key in keys:
        if current is None:
            return None
        try:
            current = current[key]
        except (KeyError, IndexError, TypeError):
            return None
    return current


def deep_get_or_set(target: MutableMapping, *keys: Hashable, default: Any = None) -> Any:
    """
    Walk ``keys`` into ``target`` creating intermediate dicts, and return the
    value at the end of the path, storing ``default`` there if it is missing.

    >>> callbacks = {}
    >>> deep_get_or_set(callbacks, "setup", default=[]).append(print)
    """
    if not keys:
        raise ValueError("deep_get_or_set needs at least one key")
    current = target
    for key in keys[:-1]:
        value = current.get(key)
        if value is None:
            value = current[key] = {}
        current = value
    value = current.get(keys[-1])
    if value is None:
        value = current[keys[-1]] = default
    return value


def deep_let(source: Any, *keys: Hashable, then: Callable[[Any], T]) -> Optional[T]:
    """Call ``then`` with the value at ``keys`` if there is one."""
    value = deep_get(source, *keys)
    if value is not None:
        return then(value)
    return None


def backward(items: Iterable[T], callback: Callable[[T], Any]) -> None:
    """Call ``callback`` on ``items`` from last to first."""
    for item in reversed(list(items)):
        callback(item)


def root_of(panel: Panel) -> Panel:
    """The topmost ancestor of ``panel``."""
    while True:
        parent = panel.get_parent()
        if parent is None:
            return panel
        panel = parent
