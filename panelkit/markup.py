# panelkit/markup.py

"""
Markup parser.

Turns XML-like text into a forest of ``MarkupElement`` / ``MarkupText`` nodes::

    <Panel id="Header" class="Bar">
        <Label text="Hello &amp; welcome"/>
    </Panel>

Only the parts of XML that panel layouts need are understood: elements,
self-closing elements, double-quoted attributes, text and the five standard
entities plus numeric character references. Comments, processing
instructions, CDATA and doctypes are rejected as malformed markup.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

from .exceptions import MarkupError

_ENTITY = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[a-zA-Z]+);")
_NAMED_ENTITIES = {"lt": "<", "gt": ">", "quot": '"', "apos": "'", "amp": "&"}

_NAME = r"[A-Za-z_][\w.:-]*"
_TAG_START = re.compile(r"<(" + _NAME + r")")
_TAG_ATTRIBUTE = re.compile(r"""\s+([^\s=/>"']+)(?:\s*=\s*("[^"]*"|'[^']*'|[^\s/>"']+))?""")
_TAG_END = re.compile(r"\s*(/?)>")
_CLOSE_TAG = re.compile(r"</\s*(" + _NAME + r")?\s*>")


def decode_entities(text: str) -> str:
    """Replace character entities. Unknown entities are kept verbatim."""

    def replace(match: "re.Match[str]") -> str:
        ref = match.group(1)
        if ref[0] == "#":
            try:
                code = int(ref[2:], 16) if ref[1] in "xX" else int(ref[1:])
                return chr(code)
            except (ValueError, OverflowError):
                return match.group(0)
        return _NAMED_ENTITIES.get(ref, match.group(0))

    if "&" not in text:
        return text
    return _ENTITY.sub(replace, text)


@dataclass(frozen=True)
class MarkupText:
    """A run of decoded character data."""

    text: str


@dataclass(frozen=True)
class MarkupElement:
    """An element: type name, attributes and child nodes in document order."""

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["MarkupNode"] = field(default_factory=list)

    def get(self, attribute: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(attribute, default)

    def elements(self) -> List["MarkupElement"]:
        return [child for child in self.children if isinstance(child, MarkupElement)]

    def iter(self) -> Iterator["MarkupElement"]:
        """This element and every descendant element, depth first."""
        yield self
        for child in self.elements():
            yield from child.iter()

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "attributes": dict(self.attributes),
            "children": [node_to_dict(child) for child in self.children],
        }


MarkupNode = Union[MarkupElement, MarkupText]


def node_to_dict(node: MarkupNode) -> Union[Dict, str]:
    if isinstance(node, MarkupText):
        return node.text
    return node.to_dict()


class MarkupParser:
    """
    Single-pass scanner over a markup string.

    At each cursor position the parser tries, in order: a text run, an
    opening or self-closing tag, a closing tag. Open elements live on a stack
    whose top receives new child nodes.

    :param text: The markup source.
    :param raw_text: Keep every text run verbatim. By default text is stripped
        and whitespace-only runs are dropped.
    """

    def __init__(self, text: str, raw_text: bool = False):
        self.text = text
        self.raw_text = raw_text
        self.pos = 0
        self.roots: List[MarkupNode] = []
        self.stack: List[MarkupElement] = []

    def parse(self) -> List[MarkupNode]:
        while self.pos < len(self.text):
            if self.text[self.pos] != "<":
                self._text_run()
            elif self.text.startswith("</", self.pos):
                self._close_tag()
            else:
                self._open_tag()

        if self.stack:
            names = ", ".join(f"<{element.name}>" for element in self.stack)
            raise MarkupError(f"Unclosed element(s) at end of input: {names}", self.pos)
        return self.roots

    # --- node shapes ---

    def _text_run(self) -> None:
        end = self.text.find("<", self.pos)
        if end < 0:
            end = len(self.text)
        chunk = self.text[self.pos:end]
        self.pos = end

        if not self.raw_text:
            chunk = chunk.strip()
            if not chunk:
                return
        self._append(MarkupText(decode_entities(chunk)))

    def _open_tag(self) -> None:
        start = self.pos
        match = _TAG_START.match(self.text, self.pos)
        if match is None:
            raise MarkupError("Malformed or unsupported tag", start)
        name = match.group(1)
        pos = match.end()

        # one name[=value] token at a time; only double-quoted values are kept
        attributes: Dict[str, str] = {}
        while True:
            token = _TAG_ATTRIBUTE.match(self.text, pos)
            if token is None:
                break
            pos = token.end()
            key, value = token.groups()
            if value is not None and value[0] == '"':
                attributes[key] = decode_entities(value[1:-1])

        end = _TAG_END.match(self.text, pos)
        if end is None:
            raise MarkupError(f"Malformed or unterminated <{name}> tag", start)
        self.pos = end.end()

        self_closing = end.group(1)
        element = MarkupElement(name, attributes, [])
        self._append(element)
        if not self_closing:
            self.stack.append(element)

    def _close_tag(self) -> None:
        start = self.pos
        match = _CLOSE_TAG.match(self.text, self.pos)
        if match is None:
            raise MarkupError("Malformed closing tag", start)
        self.pos = match.end()

        if not self.stack:
            raise MarkupError("Closing tag without a matching opening tag", start)
        name = match.group(1)
        top = self.stack.pop()
        if name is not None and name != top.name:
            raise MarkupError(f"Closing tag </{name}> does not match <{top.name}>", start)

    def _append(self, node: MarkupNode) -> None:
        if self.stack:
            self.stack[-1].children.append(node)
        else:
            self.roots.append(node)


def parse_markup(text: str, raw_text: bool = False) -> List[MarkupNode]:
    """Parse ``text`` into a list of top-level nodes. Raises ``MarkupError``."""
    return MarkupParser(text, raw_text).parse()
