# panelkit/runtime.py

"""
Runtime: one object that wires configuration, the module registry, the host
factory and the engines together.

A UI fragment usually needs nothing else::

    runtime = Runtime(QtHost())
    panels = runtime.create_panels(parent, MARKUP, on_event=handle)
    runtime.apply_css(panels[0], CSS)

The runtime exports its helpers as module ``basis/basic`` so fragments that
only hold the registry can reach them.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Union

from .config import Config
from .host import Panel, PanelFactory
from .markup import MarkupNode, parse_markup
from .materializer import AttributeSchema, EventHandler, FailurePolicy, Materializer
from .merge import merge
from .registry import ModuleRegistry, ModuleRequester
from .selector import match_selector
from .style import apply_css, apply_style, parse_css
from .utils import deep_get, deep_get_or_set, first_defined, root_of

logger = logging.getLogger(__name__)

BASIC_MODULE = "basis/basic"


class Runtime:
    """
    :param factory: Host panel factory.
    :param registry: Module registry; a fresh one is created when omitted.
    :param config: Configuration; defaults to the shared ``Config()``.
    :param requester: Remote authority used by a freshly created registry.
    :param schema: Attribute schema for the materializer.
    """

    def __init__(
        self,
        factory: PanelFactory,
        registry: Optional[ModuleRegistry] = None,
        config: Optional[Config] = None,
        requester: Optional[ModuleRequester] = None,
        schema: Optional[AttributeSchema] = None,
    ):
        self.factory = factory
        self.config = config if config is not None else Config()
        self.registry = registry if registry is not None else ModuleRegistry(requester)
        if requester is not None and self.registry.requester is None:
            self.registry.requester = requester

        self.raw_text = bool(self.config.get_nested("markup.raw_text", False))
        self.materializer = Materializer(
            factory,
            schema=schema,
            on_failure=FailurePolicy(self.config.get_nested("materializer.on_failure", "abort")),
            staging_id=self.config.get_nested("materializer.staging_id", "PanelkitStaging"),
        )

        self.registry.export(BASIC_MODULE, self.exports())
        logger.info("🪄  panelkit runtime initialized (failure policy: %s)", self.materializer.on_failure.value)

    def exports(self) -> Mapping[str, Callable[..., Any]]:
        """The capability table published as ``basis/basic``."""
        return {
            "create_panels": self.create_panels,
            "parse_markup": self.parse_markup,
            "apply_css": apply_css,
            "apply_style": apply_style,
            "parse_css": parse_css,
            "match_selector": match_selector,
            "merge": merge,
            "first_defined": first_defined,
            "deep_get": deep_get,
            "deep_get_or_set": deep_get_or_set,
            "root_of": root_of,
        }

    def parse_markup(self, markup: str) -> List[MarkupNode]:
        return parse_markup(markup, raw_text=self.raw_text)

    def create_panels(
        self,
        parent: Panel,
        markup: Union[str, List[MarkupNode]],
        on_event: Optional[EventHandler] = None,
    ) -> List[Panel]:
        """
        Parse ``markup`` (unless already parsed) and materialize it under ``parent``.

        :return: The created top-level panels.
        """
        nodes = self.parse_markup(markup) if isinstance(markup, str) else markup
        panels = self.materializer.materialize(parent, nodes, on_event)
        logger.debug("Created %d top-level panel(s) under %r", len(panels), parent)
        return panels

    def apply_css(self, panel: Optional[Panel], css: Union[str, Mapping], recursive: bool = True) -> None:
        apply_css(panel, css, recursive)

    # registry shortcuts

    def export(self, name: str, table: Mapping[str, Any]) -> dict:
        return self.registry.export(name, table)

    def import_(self, name: str) -> dict:
        return self.registry.import_(name)

    def ready(self, callback: Callable[[], Any]) -> None:
        self.registry.ready(callback)
