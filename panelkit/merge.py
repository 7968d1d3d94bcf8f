# panelkit/merge.py

"""
Structural merge of nested mappings.

``merge`` folds one or more "right" values onto a "left" value. Mappings are
merged key by key, anything else replaces what was there. The left mapping is
updated in place, so callers that need to keep their input intact pass an
empty dict as the first argument::

    settings = merge({}, DEFAULTS, user_overrides)

Self-referential and shared substructures are handled with an identity map
that lives for one top-level call: every mapping already visited resolves to
the object it was merged into, so recursion always terminates and a shared
substructure ends up as one shared result.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any, Dict


class _Missing:
    """Marker for a value that is not there at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()


def is_absent(value: Any) -> bool:
    """True for ``None`` and ``MISSING``, the two spellings of "no value"."""
    return value is None or value is MISSING


def is_composite(value: Any) -> bool:
    return isinstance(value, Mapping)


def merge(left: Any, right: Any = MISSING, *more: Any) -> Any:
    """
    Merge ``right`` (and every following argument) onto ``left``.

    :param left: The accumulator. Mutated in place when it is a mapping and
        ``right`` is a mapping too.
    :param right: Value folded onto ``left``. Never modified.
    :param more: Further values, folded left to right.
    :return: The merged value.
    """
    result = _merge(left, right, {})
    for value in more:
        result = _merge(result, value, {})
    return result


def _merge(left: Any, right: Any, ignore: Dict[int, Any]) -> Any:
    if is_absent(right):
        return left

    if not is_composite(right):
        return right

    if id(right) in ignore:
        return ignore[id(right)]

    if id(left) in ignore:
        left = ignore[id(left)]
    elif not is_composite(left):
        left = {}
    elif not isinstance(left, MutableMapping):
        # read-only mappings are copied; later sightings resolve to the copy
        copied = dict(left)
        ignore[id(left)] = copied
        left = copied

    ignore[id(left)] = left
    ignore[id(right)] = left

    for key, value in right.items():
        merged = _merge(left.get(key), value, ignore)
        if key in left or not is_absent(merged):
            left[key] = merged

    return left
