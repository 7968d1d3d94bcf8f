# panelkit/style.py

"""
CSS-subset rule blocks applied straight onto panel styles.

The parser is a delimiter scanner, not a tokenizer: it finds
``selector { prop: value; ... }`` blocks and splits declarations on ``;`` and
the first ``:``. Braces nested inside a value are not supported.

Rules are applied by matching every selector against a panel (see
``panelkit.selector``) and writing the properties of the matching rules onto
``panel.style``. When two matching rules set the same property, the one that
comes later in the rule set wins.
"""

import logging
import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Dict, Optional, Union

from .host import Panel
from .merge import merge
from .selector import is_live, match_selector

logger = logging.getLogger(__name__)

RuleSet = Dict[str, Dict[str, str]]

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.S)
_LINE_COMMENT = re.compile(r"(^|[\s;{}])//[^\n]*")
_RULE_BLOCK = re.compile(r"([^{}]+)\{([^{}]*)\}")


def strip_comments(css: str) -> str:
    css = _BLOCK_COMMENT.sub("", css)
    return _LINE_COMMENT.sub(r"\1", css)


def parse_declarations(body: str) -> Dict[str, str]:
    """Parse ``prop: value; ...`` into a dict. The last duplicate wins."""
    style: Dict[str, str] = {}
    for declaration in body.split(";"):
        name, sep, value = declaration.partition(":")
        name, value = name.strip(), value.strip()
        if not sep or not name or not value:
            continue
        style[name] = value
    return style


def parse_css(css: str) -> RuleSet:
    """
    Parse CSS text into a ``selector -> {property: value}`` mapping.

    A selector that appears in several blocks collects the declarations of all
    of them, later blocks overriding earlier ones.
    """
    rules: RuleSet = {}
    for match in _RULE_BLOCK.finditer(strip_comments(css)):
        selector = " ".join(match.group(1).split())
        if not selector:
            continue
        declarations = parse_declarations(match.group(2))
        rules.setdefault(selector, {}).update(declarations)
    return rules


@lru_cache(maxsize=64)
def _compiled(css: str) -> RuleSet:
    rules = parse_css(css)
    logger.debug("Parsed stylesheet with %d selectors", len(rules))
    return rules


def compute_style(panel: Panel, rules: RuleSet) -> Dict[str, str]:
    """The properties that ``rules`` assign to ``panel`` itself."""
    matching = [style for selector, style in rules.items() if match_selector(panel, selector)]
    return merge({}, *matching) if matching else {}


def apply_style(panel: Panel, style: Mapping) -> None:
    for name, value in style.items():
        panel.style[name] = value


def apply_css(panel: Optional[Panel], css: Union[str, Mapping], recursive: bool = True) -> None:
    """
    Apply a stylesheet to ``panel`` and, when ``recursive``, to all of its
    descendants (depth first, parents before children).

    :param panel: Target panel. Invalid or deleted panels are skipped.
    :param css: CSS text, parsed once per distinct text, or a prebuilt rule set.
    :param recursive: Also style the descendants.
    """
    if not is_live(panel):
        return

    rules = _compiled(css) if isinstance(css, str) else css

    apply_style(panel, compute_style(panel, rules))

    if recursive:
        for child in panel.children():
            apply_css(child, rules, True)
