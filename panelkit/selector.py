# panelkit/selector.py

"""
CSS-subset selector matching against live panels.

Supported grammar::

    selector-list := selector ("," selector)*
    selector      := compound (whitespace compound)*     # descendant combinator only
    compound      := [type] ("#" id | "." class)*

A compound without a type matches panels of any type. Pseudo classes such as
``:hover`` describe host-driven state; a compound carrying one never matches.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Tuple

from .host import Panel

_SIMPLE_TERM = re.compile(r"[#.:]?[^#.:\s]+")


@dataclass(frozen=True)
class CompoundTerm:
    """A selector fragment matched against exactly one panel."""

    type_name: Optional[str] = None
    ids: Tuple[str, ...] = ()
    classes: Tuple[str, ...] = ()
    pseudo: Tuple[str, ...] = field(default=())

    @classmethod
    def parse(cls, text: str) -> "CompoundTerm":
        type_name = None
        ids, classes, pseudo = [], [], []
        for part in _SIMPLE_TERM.findall(text):
            marker, name = part[0], part[1:]
            if marker == "#":
                ids.append(name)
            elif marker == ".":
                classes.append(name)
            elif marker == ":":
                pseudo.append(name)
            else:
                type_name = part
        return cls(type_name, tuple(ids), tuple(classes), tuple(pseudo))

    def matches(self, panel: Optional[Panel]) -> bool:
        if not is_live(panel):
            return False
        if self.pseudo:
            return False
        if self.type_name is not None and panel.panel_type != self.type_name:
            return False
        if any(panel.id != panel_id for panel_id in self.ids):
            return False
        return all(panel.has_class(name) for name in self.classes)

    def __str__(self):
        text = self.type_name or ""
        text += "".join(f"#{i}" for i in self.ids)
        text += "".join(f".{c}" for c in self.classes)
        text += "".join(f":{p}" for p in self.pseudo)
        return text or "*"


Alternative = Tuple[CompoundTerm, ...]


def is_live(panel: Optional[Panel]) -> bool:
    """A panel reference that can still be inspected."""
    if panel is None:
        return False
    try:
        return bool(panel.is_valid())
    except RuntimeError:
        # Qt raises once the C++ object behind a wrapper is gone
        return False


@lru_cache(maxsize=512)
def parse_selector(selector: str) -> Tuple[Alternative, ...]:
    """
    Split a selector list into alternatives of compound terms.

    Terms are stored rightmost first, the order they are matched in. Empty
    alternatives (``"a, , b"``) are dropped.
    """
    alternatives = []
    for alternative in selector.split(","):
        terms = tuple(CompoundTerm.parse(chunk) for chunk in reversed(alternative.split()))
        if terms:
            alternatives.append(terms)
    return tuple(alternatives)


def match_selector(panel: Optional[Panel], selector: str) -> bool:
    """True when ``panel`` matches any alternative of ``selector``."""
    if not is_live(panel):
        return False
    return any(_match_alternative(panel, terms) for terms in parse_selector(selector))


def _match_alternative(panel: Panel, terms: Alternative) -> bool:
    cursor: Optional[Panel] = panel
    allow_skip = False

    for term in terms:
        while True:
            if not is_live(cursor):
                return False
            if term.matches(cursor):
                allow_skip = True
                cursor = cursor.get_parent()
                break
            if not allow_skip:
                return False
            cursor = cursor.get_parent()

    return True
