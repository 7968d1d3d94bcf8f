# panelkit/multiline.py

import re
from typing import List, Optional

from .host import Panel, PanelFactory

_TAG = re.compile(r"<.+?>")
_TAG_NAME = re.compile(r"\w+")


def carry_open_tags(lines: List[str]) -> List[str]:
    """
    Make every line of rich text self-contained.

    Tags still open at the end of a line are closed there and re-opened at
    the start of the next one, so ``["<b>a", "b</b>"]`` becomes
    ``["<b>a</b>", "<b>b</b>"]``.
    """
    open_tags: List[tuple] = []
    result = []
    for line in lines:
        prefix = "".join(tag for tag, _ in open_tags)
        for tag in _TAG.findall(line):
            if tag[1] == "/":
                if open_tags:
                    open_tags.pop()
            elif not tag.endswith("/>"):
                name = _TAG_NAME.search(tag)
                open_tags.append((tag, name.group(0) if name else ""))
        suffix = "".join(f"</{name}>" for _, name in reversed(open_tags))
        result.append(prefix + line + suffix)
    return result


class MultilineLabel:
    """
    A vertical stack of labels, one per line of ``text``.

    The container carries class ``BasisMultiline`` and every line label
    ``BasisMultiline_Line`` so stylesheets can target them.
    """

    CONTAINER_CLASS = "BasisMultiline"
    LINE_CLASS = "BasisMultiline_Line"

    def __init__(self, factory: PanelFactory, parent: Optional[Panel], panel_id: str = ""):
        self.factory = factory
        self.panel = factory.create_panel("Panel", parent, panel_id)
        self.panel.add_class(self.CONTAINER_CLASS)
        self.panel.style["flow-children"] = "down"
        self._text = ""
        self._html = False

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value) -> None:
        self._text = str(value)
        self.update()

    @property
    def html(self) -> bool:
        return self._html

    @html.setter
    def html(self, value) -> None:
        self._html = bool(value)
        self.update()

    def lines(self) -> List[Panel]:
        return self.panel.children()

    def update(self) -> None:
        for child in self.panel.children():
            child.delete()

        lines = self._text.split("\n")
        if self._html:
            lines = carry_open_tags(lines)

        for line in lines:
            label = self.factory.create_panel("Label", self.panel, "")
            label.add_class(self.LINE_CLASS)
            label.set_property("html", self._html)
            label.set_property("text", line)
